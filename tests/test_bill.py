import logging
from datetime import datetime, timezone

from sakuracloud_exporter.bill import Bill, BillCollector
from sakuracloud_exporter.core import ErrorCounter


class DummyBillClient:
    def __init__(self, bill=None, err=None):
        self.bill = bill
        self.err = err

    def read(self):
        if self.err is not None:
            raise self.err
        return self.bill


def _snapshot(metrics):
    return sorted(
        (m.desc.name, tuple(sorted(m.labels.items())), m.value) for m in metrics
    )


def _run(client, caplog):
    errors = ErrorCounter()
    logger = logging.getLogger("tests.bill")
    c = BillCollector(client, logger=logger, errors=errors)
    caplog.clear()
    with caplog.at_level(logging.WARNING, logger="tests.bill"):
        metrics = list(c.collect())
    return c, metrics, sorted(caplog.messages), errors.value("bill")


def test_describe():
    c = BillCollector(DummyBillClient())
    assert list(c.describe()) == [c.amount]


def test_error_counter_initialised():
    errors = ErrorCounter()
    BillCollector(DummyBillClient(), errors=errors)
    assert errors.value("bill") == 0


def test_collect_error(caplog):
    _, metrics, logs, count = _run(DummyBillClient(err=RuntimeError("dummy")), caplog)
    assert metrics == []
    assert logs == ["can't get bill err=dummy"]
    assert count == 1


def test_collect_empty(caplog):
    _, metrics, logs, count = _run(DummyBillClient(), caplog)
    assert metrics == []
    assert logs == []
    assert count == 0


def test_collect_bill(caplog):
    now = datetime.now(timezone.utc)
    bill = Bill(id=101, amount=1234, date=now, member_id="memberID", paid=False, pay_limit=now)
    c, metrics, logs, count = _run(DummyBillClient(bill=bill), caplog)
    assert _snapshot(metrics) == [
        ("sakuracloud_bill_amount", (("member_id", "memberID"),), 1234.0)
    ]
    assert metrics[0].desc is c.amount
    assert logs == []
    assert count == 0