"""Collector for auto-backup schedules and the archives they created."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import datetime
from functools import partial
from typing import Protocol

from .core import (
    Collector,
    DayOfWeek,
    Desc,
    ErrorCounter,
    Metric,
    flatten_backup_span_weekdays,
    flatten_string_slice,
)


@dataclass
class AutoBackup:
    id: int
    name: str
    disk_id: int
    zone_name: str = ""
    maximum_number_of_archives: int = 0
    backup_span_weekdays: list[DayOfWeek] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    description: str = ""


@dataclass
class Archive:
    id: int
    name: str
    created_at: datetime
    tags: list[str] = field(default_factory=list)
    description: str = ""


class AutoBackupClient(Protocol):
    def find(self) -> Iterable[AutoBackup]:
        """Return all auto-backup resources."""

    def list_backups(self, zone: str, auto_backup_id: int) -> Iterable[Archive]:
        """Return the archives created by one auto-backup."""


class AutoBackupCollector(Collector):
    """Collects auto-backup information, archive counts and last backup times."""

    error_label = "auto_backup"

    def __init__(
        self,
        client: AutoBackupClient,
        logger: logging.Logger | None = None,
        errors: ErrorCounter | None = None,
    ) -> None:
        super().__init__(logger, errors)
        self.client = client
        labels = ("id", "name", "disk_id")
        self.info = Desc(
            "sakuracloud_auto_backup_info",
            "A metric with a constant '1' value labeled by auto_backup information",
            labels + ("max_backup_num", "weekdays", "tags", "description"),
        )
        self.backup_count = Desc(
            "sakuracloud_auto_backup_count",
            "A count of archives created by AutoBackup",
            labels,
        )
        self.last_backup_time = Desc(
            "sakuracloud_auto_backup_last_time",
            "Last backup time in seconds since epoch (1970)",
            labels,
        )
        self.backup_info = Desc(
            "sakuracloud_auto_backup_archive_info",
            "A metric with a constant '1' value labeled by backuped archive information",
            labels + ("archive_id", "archive_name", "archive_tags", "archive_description"),
        )

    def describe(self) -> Iterator[Desc]:
        yield self.info
        yield self.backup_count
        yield self.last_backup_time
        yield self.backup_info

    def collect(self) -> Iterator[Metric]:
        try:
            auto_backups = list(self.client.find() or [])
        except Exception as err:
            self._report_error("can't list autoBackups", err)
            auto_backups = []

        for auto_backup in auto_backups:
            yield Metric(self.info, 1.0, self._info_labels(auto_backup))
        yield from self._run_concurrently(
            partial(self._collect_backup_metrics, auto_backup) for auto_backup in auto_backups
        )

    @staticmethod
    def _labels(auto_backup: AutoBackup) -> tuple[str, ...]:
        return (str(auto_backup.id), auto_backup.name, str(auto_backup.disk_id))

    def _info_labels(self, auto_backup: AutoBackup) -> tuple[str, ...]:
        return self._labels(auto_backup) + (
            str(auto_backup.maximum_number_of_archives),
            flatten_backup_span_weekdays(auto_backup.backup_span_weekdays),
            flatten_string_slice(auto_backup.tags),
            auto_backup.description,
        )

    def _archive_labels(self, auto_backup: AutoBackup, archive: Archive) -> tuple[str, ...]:
        return self._labels(auto_backup) + (
            str(archive.id),
            archive.name,
            flatten_string_slice(archive.tags),
            archive.description,
        )

    def _collect_backup_metrics(self, auto_backup: AutoBackup) -> list[Metric]:
        try:
            archives = list(
                self.client.list_backups(auto_backup.zone_name, auto_backup.id) or []
            )
        except Exception as err:
            self._report_error("can't list backed up archives", err)
            return []

        archives.sort(key=lambda archive: archive.created_at)
        last_time = int(archives[-1].created_at.timestamp()) if archives else 0

        labels = self._labels(auto_backup)
        metrics = [
            Metric(self.backup_count, len(archives), labels),
            Metric(self.last_backup_time, last_time * 1000, labels),
        ]
        metrics.extend(
            Metric(self.backup_info, 1.0, self._archive_labels(auto_backup, archive))
            for archive in archives
        )
        return metrics