"""Collector for internet (router) resources and their traffic."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import partial
from typing import Protocol

from .core import Collector, Desc, ErrorCounter, Metric, flatten_string_slice


@dataclass
class Internet:
    id: int
    name: str
    zone_name: str
    switch_id: int
    band_width_mbps: int = 0
    tags: list[str] = field(default_factory=list)
    description: str = ""


@dataclass
class MonitorRouterValue:
    time: datetime
    inbound: float = 0.0
    outbound: float = 0.0


class InternetClient(Protocol):
    def find(self) -> Iterable[Internet]:
        """Return all internet resources."""

    def monitor_traffic(
        self, zone: str, internet_id: int, end: datetime
    ) -> MonitorRouterValue | None:
        """Return the latest traffic values of one internet resource."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InternetCollector(Collector):
    """Collects internet information and inbound/outbound traffic."""

    error_label = "internet"

    def __init__(
        self,
        client: InternetClient,
        logger: logging.Logger | None = None,
        errors: ErrorCounter | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        super().__init__(logger, errors)
        self.client = client
        self.clock = clock
        labels = ("id", "name", "zone", "switch_id")
        self.info = Desc(
            "sakuracloud_internet_info",
            "A metric with a constant '1' value labeled by internet information",
            labels + ("bandwidth", "tags", "description"),
        )
        self.receive = Desc(
            "sakuracloud_internet_receive", "NIC's receive bytes(unit: Kbps)", labels
        )
        self.send = Desc("sakuracloud_internet_send", "NIC's send bytes(unit: Kbps)", labels)

    def describe(self) -> Iterator[Desc]:
        yield self.info
        yield self.receive
        yield self.send

    def collect(self) -> Iterator[Metric]:
        try:
            internets = list(self.client.find() or [])
        except Exception as err:
            self._report_error("can't list internets", err)
            internets = []

        jobs = []
        for internet in internets:
            yield Metric(self.info, 1.0, self._info_labels(internet))
            jobs.append(partial(self._collect_router_metrics, internet, self.clock()))
        yield from self._run_concurrently(jobs)

    @staticmethod
    def _labels(internet: Internet) -> tuple[str, ...]:
        return (str(internet.id), internet.name, internet.zone_name, str(internet.switch_id))

    def _info_labels(self, internet: Internet) -> tuple[str, ...]:
        return self._labels(internet) + (
            str(internet.band_width_mbps),
            flatten_string_slice(internet.tags),
            internet.description,
        )

    def _collect_router_metrics(self, internet: Internet, now: datetime) -> list[Metric]:
        try:
            values = self.client.monitor_traffic(internet.zone_name, internet.id, now)
        except Exception as err:
            self._report_error(
                f"can't get internet's traffic metrics: InternetID={internet.id}", err
            )
            return []
        if values is None:
            return []

        inbound = values.inbound / 1000 if values.inbound > 0 else values.inbound
        outbound = values.outbound / 1000 if values.outbound > 0 else values.outbound
        labels = self._labels(internet)
        return [
            Metric(self.receive, inbound, labels, values.time),
            Metric(self.send, outbound, labels, values.time),
        ]