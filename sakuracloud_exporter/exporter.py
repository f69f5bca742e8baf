"""Metrics about the exporter process itself."""

from __future__ import annotations

import logging
import platform
from collections.abc import Iterator
from datetime import datetime, timezone

from .core import Collector, Desc, Metric


class ExporterCollector(Collector):
    """Reports the exporter's start time and build information."""

    def __init__(
        self,
        version: str,
        revision: str,
        python_version: str | None = None,
        start_time: datetime | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(logger)
        self.version = version
        self.revision = revision
        self.python_version = python_version or platform.python_version()
        self.start_time = start_time or datetime.now(timezone.utc)

        self.start_time_desc = Desc(
            "sakuracloud_exporter_start_time",
            "Unix timestamp of the start time",
        )
        self.build_info = Desc(
            "sakuracloud_exporter_build_info",
            "A metric with a constant '1' value labeled by version, revision, "
            "and branch from which the node_exporter was built.",
            ("version", "revision", "goversion"),
        )

    def describe(self) -> Iterator[Desc]:
        yield self.start_time_desc

    def collect(self) -> Iterator[Metric]:
        started = int(self.start_time.timestamp())
        self.logger.debug(
            "starttime=%d version=%s revision=%s python_version=%s",
            started,
            self.version,
            self.revision,
            self.python_version,
        )
        yield Metric(self.start_time_desc, started)
        yield Metric(
            self.build_info,
            1.0,
            (self.version, self.revision, self.python_version),
        )