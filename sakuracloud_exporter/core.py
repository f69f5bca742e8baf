"""Metric primitives, resource enums and label helpers shared by all collectors."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


@dataclass(frozen=True)
class Desc:
    """Describes a metric family: its name, help text and label names."""

    name: str
    help: str
    label_names: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "label_names", tuple(self.label_names))


@dataclass(frozen=True)
class Metric:
    """A single gauge sample belonging to a :class:`Desc`."""

    desc: Desc
    value: float
    label_values: tuple[str, ...] = ()
    timestamp: datetime | None = None
    labels: dict[str, str] = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        values = tuple(self.label_values)
        if len(values) != len(self.desc.label_names):
            raise ValueError(
                f"{self.desc.name}: expected {len(self.desc.label_names)} label values, "
                f"got {len(values)}"
            )
        for value in values:
            if not isinstance(value, str):
                raise TypeError(f"{self.desc.name}: label values must be str, got {value!r}")
        object.__setattr__(self, "label_values", values)
        object.__setattr__(self, "value", float(self.value))
        object.__setattr__(self, "labels", dict(zip(self.desc.label_names, values)))


class ErrorCounter:
    """Thread-safe counter of collection errors, keyed by collector name."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts: dict[str, float] = {}

    def add(self, collector: str, value: float) -> None:
        if value < 0:
            raise ValueError("counter cannot decrease")
        with self._lock:
            self._counts[collector] = self._counts.get(collector, 0.0) + float(value)

    def value(self, collector: str) -> float:
        with self._lock:
            return self._counts.get(collector, 0.0)


class Collector(ABC):
    """Base class for collectors producing metrics on demand."""

    error_label = ""

    def __init__(
        self,
        logger: logging.Logger | None = None,
        errors: ErrorCounter | None = None,
    ) -> None:
        self.logger = logger if logger is not None else logging.getLogger("sakuracloud_exporter")
        self.errors = errors if errors is not None else ErrorCounter()
        if self.error_label:
            self.errors.add(self.error_label, 0)

    def describe(self) -> Iterator[Desc]:
        """Yield every descriptor held by this collector, in definition order."""
        return (value for value in vars(self).values() if isinstance(value, Desc))

    @abstractmethod
    def collect(self) -> Iterator[Metric]:
        """Yield the current metrics."""

    def _report_error(self, message: str, err: BaseException) -> None:
        self.errors.add(self.error_label, 1)
        self.logger.warning("%s err=%s", message, err)

    def _run_concurrently(
        self, jobs: Iterable[Callable[[], Iterable[Metric]]]
    ) -> Iterator[Metric]:
        jobs = list(jobs)
        if not jobs:
            return
        with ThreadPoolExecutor() as pool:
            futures = [pool.submit(lambda job=job: list(job())) for job in jobs]
            for future in as_completed(futures):
                yield from future.result()


class DayOfWeek(Enum):
    SUNDAY = "sun"
    MONDAY = "mon"
    TUESDAY = "tue"
    WEDNESDAY = "wed"
    THURSDAY = "thu"
    FRIDAY = "fri"
    SATURDAY = "sat"


class Availability(Enum):
    AVAILABLE = "available"
    UPLOADING = "uploading"
    FAILED = "failed"
    MIGRATING = "migrating"
    TRANSFERRING = "transferring"
    DISCONTINUED = "discontinued"

    def is_available(self) -> bool:
        return self is Availability.AVAILABLE


class InstanceStatus(Enum):
    UP = "up"
    CLEANING = "cleaning"
    DOWN = "down"

    def is_up(self) -> bool:
        return self is InstanceStatus.UP


@dataclass
class FeedItem:
    """A maintenance news-feed entry; dates are Unix seconds as strings."""

    str_date: str = ""
    description: str = ""
    str_event_start: str = ""
    str_event_end: str = ""
    title: str = ""
    url: str = ""

    def event_start(self) -> datetime:
        return datetime.fromtimestamp(int(self.str_event_start), timezone.utc)

    def event_end(self) -> datetime:
        return datetime.fromtimestamp(int(self.str_event_end), timezone.utc)


@dataclass
class MonitorInterfaceValue:
    time: datetime
    receive: float = 0.0
    send: float = 0.0


def flatten_string_slice(values: Iterable[str]) -> str:
    """Join sorted values as ``,a,b,``; empty input gives an empty string."""
    items = sorted(values)
    if not items:
        return ""
    return f",{','.join(items)},"


_DAY_ORDER = {day: index for index, day in enumerate(DayOfWeek)}


def flatten_backup_span_weekdays(values: Iterable[DayOfWeek]) -> str:
    """Join weekdays in calendar order (Sunday first) as ``,sun,mon,``."""
    days = sorted(values, key=_DAY_ORDER.__getitem__)
    if not days:
        return ""
    return f",{','.join(day.value for day in days)},"