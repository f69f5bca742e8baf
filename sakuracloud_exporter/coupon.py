"""Collector for the account's coupons."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol

from .core import Collector, Desc, ErrorCounter, Metric


@dataclass
class Coupon:
    id: int
    member_id: str
    contract_id: int
    discount: int
    applied_at: datetime
    until_at: datetime


class CouponClient(Protocol):
    def find(self) -> Iterable[Coupon]:
        """Return all coupons of the account."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CouponCollector(Collector):
    """Collects balance, remaining days, expiry and usability of coupons."""

    error_label = "coupon"

    def __init__(
        self,
        client: CouponClient,
        logger: logging.Logger | None = None,
        errors: ErrorCounter | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        super().__init__(logger, errors)
        self.client = client
        self.clock = clock
        labels = ("id", "member_id", "contract_id")
        self.discount = Desc("sakuracloud_coupon_discount", "The balance of coupon", labels)
        self.remaining_days = Desc(
            "sakuracloud_coupon_remaining_days",
            "The count of coupon's remaining days",
            labels,
        )
        self.exp_date = Desc(
            "sakuracloud_coupon_exp_date",
            "Coupon expiration date in seconds since epoch (1970)",
            labels,
        )
        self.usable = Desc("sakuracloud_coupon_usable", "1 if your coupon is usable", labels)

    def describe(self) -> Iterator[Desc]:
        yield self.discount
        yield self.remaining_days
        yield self.exp_date
        yield self.usable

    def collect(self) -> Iterator[Metric]:
        try:
            coupons = list(self.client.find() or [])
        except Exception as err:
            self._report_error("can't get coupon", err)
            return

        for coupon in coupons:
            labels = (str(coupon.id), coupon.member_id, str(coupon.contract_id))
            now = self.clock()

            yield Metric(self.discount, coupon.discount, labels)

            hours = (coupon.until_at - now).total_seconds() / 3600
            remaining = max(int(hours / 24), 0)
            yield Metric(self.remaining_days, remaining, labels)

            yield Metric(self.exp_date, int(coupon.until_at.timestamp()) * 1000, labels)

            usable = (
                coupon.discount > 0
                and coupon.applied_at < now
                and coupon.until_at > now
            )
            yield Metric(self.usable, 1.0 if usable else 0.0, labels)