"""Collector for the monthly bill of the account."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from .core import Collector, Desc, ErrorCounter, Metric


@dataclass
class Bill:
    id: int
    amount: int
    date: datetime | None = None
    member_id: str = ""
    paid: bool = False
    pay_limit: datetime | None = None
    payment_class_id: int = 0


class BillClient(Protocol):
    def read(self) -> Bill | None:
        """Return the latest bill, or None when there is none."""


class BillCollector(Collector):
    """Collects the billed amount of the account."""

    error_label = "bill"

    def __init__(
        self,
        client: BillClient,
        logger: logging.Logger | None = None,
        errors: ErrorCounter | None = None,
    ) -> None:
        super().__init__(logger, errors)
        self.client = client
        self.amount = Desc(
            "sakuracloud_bill_amount",
            "Amount billed for the month",
            ("member_id",),
        )

    def describe(self) -> Iterator[Desc]:
        yield self.amount

    def collect(self) -> Iterator[Metric]:
        try:
            bill = self.client.read()
        except Exception as err:
            self._report_error("can't get bill", err)
            return
        if bill is not None:
            yield Metric(self.amount, bill.amount, (bill.member_id,))