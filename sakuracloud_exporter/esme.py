"""Collector for ESME (SMS sending) resources."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import datetime
from functools import partial
from typing import Protocol

from .core import Collector, Desc, ErrorCounter, Metric, flatten_string_slice


@dataclass
class ESME:
    id: int
    name: str
    tags: list[str] = field(default_factory=list)
    description: str = ""


@dataclass
class ESMELog:
    message_id: str = ""
    status: str = ""
    otp: str = ""
    destination: str = ""
    sent_at: datetime | None = None
    done_at: datetime | None = None
    retry_count: int = 0


class ESMEClient(Protocol):
    def find(self) -> Iterable[ESME]:
        """Return all ESME resources."""

    def logs(self, esme_id: int) -> Iterable[ESMELog]:
        """Return the message logs of one ESME."""


class ESMECollector(Collector):
    """Collects ESME information and message counts per status."""

    error_label = "esme"

    def __init__(
        self,
        client: ESMEClient,
        logger: logging.Logger | None = None,
        errors: ErrorCounter | None = None,
    ) -> None:
        super().__init__(logger, errors)
        self.client = client
        labels = ("id", "name")
        self.esme_info = Desc(
            "sakuracloud_esme_info",
            "A metric with a constant '1' value labeled by ESME information",
            labels + ("tags", "description"),
        )
        self.message_count = Desc(
            "sakuracloud_esme_message_count",
            "A count of messages handled by ESME",
            labels + ("status",),
        )

    def describe(self) -> Iterator[Desc]:
        yield self.esme_info
        yield self.message_count

    def collect(self) -> Iterator[Metric]:
        try:
            esmes = list(self.client.find() or [])
        except Exception as err:
            self._report_error("can't list ESME", err)
            esmes = []

        for esme in esmes:
            yield Metric(
                self.esme_info,
                1.0,
                self._labels(esme) + (flatten_string_slice(esme.tags), esme.description),
            )
        yield from self._run_concurrently(partial(self._collect_logs, esme) for esme in esmes)

    @staticmethod
    def _labels(esme: ESME) -> tuple[str, ...]:
        return (str(esme.id), esme.name)

    def _collect_logs(self, esme: ESME) -> list[Metric]:
        try:
            logs = list(self.client.logs(esme.id) or [])
        except Exception as err:
            self._report_error(f"can't collect logs of the esme[{esme.id}]", err)
            return []

        labels = self._labels(esme)
        metrics = [Metric(self.message_count, len(logs), labels + ("All",))]
        for status, count in Counter(log.status for log in logs).items():
            metrics.append(Metric(self.message_count, count, labels + (status,)))
        return metrics