import logging
from datetime import datetime, timedelta, timezone

from sakuracloud_exporter.core import ErrorCounter
from sakuracloud_exporter.coupon import Coupon, CouponCollector


class DummyCouponClient:
    def __init__(self, coupons=None, err=None):
        self.coupons = coupons
        self.err = err

    def find(self):
        if self.err is not None:
            raise self.err
        return self.coupons


def _snapshot(metrics):
    return sorted(
        (m.desc.name, tuple(sorted(m.labels.items())), m.value) for m in metrics
    )


def _run(client, caplog, **kwargs):
    errors = ErrorCounter()
    c = CouponCollector(client, logger=logging.getLogger("tests.coupon"), errors=errors, **kwargs)
    caplog.clear()
    with caplog.at_level(logging.WARNING, logger="tests.coupon"):
        metrics = list(c.collect())
    return metrics, sorted(caplog.messages), errors.value("coupon")


LABELS = (("contract_id", "201"), ("id", "101"), ("member_id", "memberID"))


def test_describe():
    c = CouponCollector(DummyCouponClient())
    assert list(c.describe()) == [c.discount, c.remaining_days, c.exp_date, c.usable]


def test_collect_error(caplog):
    metrics, logs, count = _run(DummyCouponClient(err=RuntimeError("dummy")), caplog)
    assert metrics == []
    assert logs == ["can't get coupon err=dummy"]
    assert count == 1


def test_collect_empty(caplog):
    metrics, logs, count = _run(DummyCouponClient(), caplog)
    assert metrics == []
    assert logs == []
    assert count == 0


def test_collect_coupon(caplog):
    now = datetime.now(timezone.utc)
    until_at = now + timedelta(hours=24 * 3) + timedelta(hours=1)
    coupon = Coupon(
        id=101,
        member_id="memberID",
        contract_id=201,
        discount=1000,
        applied_at=now - timedelta(hours=24 * 3),
        until_at=until_at,
    )
    metrics, logs, count = _run(DummyCouponClient(coupons=[coupon]), caplog)
    assert _snapshot(metrics) == sorted(
        [
            ("sakuracloud_coupon_discount", LABELS, 1000.0),
            ("sakuracloud_coupon_remaining_days", LABELS, 3.0),
            ("sakuracloud_coupon_exp_date", LABELS, float(int(until_at.timestamp()) * 1000)),
            ("sakuracloud_coupon_usable", LABELS, 1.0),
        ]
    )
    assert logs == []
    assert count == 0


def test_expired_coupon_is_not_usable(caplog):
    now = datetime(2020, 6, 1, tzinfo=timezone.utc)
    coupon = Coupon(
        id=101,
        member_id="memberID",
        contract_id=201,
        discount=1000,
        applied_at=now - timedelta(days=10),
        until_at=now - timedelta(days=2),
    )
    metrics, _, _ = _run(DummyCouponClient(coupons=[coupon]), caplog, clock=lambda: now)
    by_name = {m.desc.name: m.value for m in metrics}
    assert by_name["sakuracloud_coupon_remaining_days"] == 0
    assert by_name["sakuracloud_coupon_usable"] == 0


def test_zero_discount_is_not_usable(caplog):
    now = datetime(2020, 6, 1, tzinfo=timezone.utc)
    coupon = Coupon(
        id=101,
        member_id="memberID",
        contract_id=201,
        discount=0,
        applied_at=now - timedelta(days=1),
        until_at=now + timedelta(days=1),
    )
    metrics, _, _ = _run(DummyCouponClient(coupons=[coupon]), caplog, clock=lambda: now)
    by_name = {m.desc.name: m.value for m in metrics}
    assert by_name["sakuracloud_coupon_usable"] == 0