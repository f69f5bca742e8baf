from datetime import datetime, timezone

from sakuracloud_exporter.exporter import ExporterCollector


def _collector():
    return ExporterCollector(
        version="1.0.0",
        revision="abc",
        python_version="3.12",
        start_time=datetime.fromtimestamp(1000, timezone.utc),
    )


def test_describe_only_start_time():
    c = _collector()
    descs = list(c.describe())
    assert len(descs) == 1
    assert descs[0].name == "sakuracloud_exporter_start_time"


def test_collect_start_time():
    c = _collector()
    by_name = {m.desc.name: m for m in c.collect()}
    assert by_name["sakuracloud_exporter_start_time"].value == 1000.0
    assert by_name["sakuracloud_exporter_start_time"].labels == {}


def test_collect_build_info():
    c = _collector()
    by_name = {m.desc.name: m for m in c.collect()}
    info = by_name["sakuracloud_exporter_build_info"]
    assert info.value == 1.0
    assert info.labels == {"version": "1.0.0", "revision": "abc", "goversion": "3.12"}


def test_default_python_version_filled():
    c = ExporterCollector("1", "r", start_time=datetime.fromtimestamp(5, timezone.utc))
    info = [m for m in c.collect() if m.desc is c.build_info][0]
    assert info.labels["goversion"] == c.python_version
    assert c.python_version.count(".") >= 1