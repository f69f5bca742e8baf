"""Collector for local routers, their peers, static routes and traffic."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import partial
from typing import Protocol

from .core import Availability, Collector, Desc, ErrorCounter, Metric, flatten_string_slice


@dataclass
class LocalRouterSwitch:
    code: str = ""
    category: str = ""
    zone_id: str = ""


@dataclass
class LocalRouterInterface:
    virtual_ip_address: str = ""
    ip_address: list[str] = field(default_factory=list)
    network_mask_len: int = 0
    vrid: int = 0


@dataclass
class LocalRouterPeer:
    id: int
    secret_key: str = ""
    enabled: bool = False
    description: str = ""


@dataclass
class LocalRouterStaticRoute:
    prefix: str = ""
    next_hop: str = ""


@dataclass
class LocalRouter:
    id: int
    name: str
    tags: list[str] = field(default_factory=list)
    description: str = ""
    availability: Availability | None = None
    switch: LocalRouterSwitch | None = None
    interface: LocalRouterInterface | None = None
    peers: list[LocalRouterPeer] = field(default_factory=list)
    static_routes: list[LocalRouterStaticRoute] = field(default_factory=list)

    @property
    def is_available(self) -> bool:
        return self.availability is not None and self.availability.is_available()


@dataclass
class LocalRouterHealthPeer:
    id: int
    status: str = ""
    routes: list[str] = field(default_factory=list)


@dataclass
class LocalRouterHealth:
    peers: list[LocalRouterHealthPeer] = field(default_factory=list)


@dataclass
class MonitorLocalRouterValue:
    time: datetime
    receive_bytes_per_sec: float = 0.0
    send_bytes_per_sec: float = 0.0


class LocalRouterClient(Protocol):
    def find(self) -> Iterable[LocalRouter]:
        """Return all local routers."""

    def health(self, router_id: int) -> LocalRouterHealth | None:
        """Return the peer health status of one local router."""

    def monitor(self, router_id: int, end: datetime) -> MonitorLocalRouterValue | None:
        """Return the latest traffic values of one local router."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LocalRouterCollector(Collector):
    """Collects local router information, peer health and traffic."""

    error_label = "local_router"

    def __init__(
        self,
        client: LocalRouterClient,
        logger: logging.Logger | None = None,
        errors: ErrorCounter | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        super().__init__(logger, errors)
        self.client = client
        self.clock = clock
        labels = ("id", "name")
        peer_labels = labels + ("peer_index", "peer_id")
        self.up = Desc(
            "sakuracloud_local_router_up",
            "If 1 the LocalRouter is available, 0 otherwise",
            labels,
        )
        self.local_router_info = Desc(
            "sakuracloud_local_router_info",
            "A metric with a constant '1' value labeled by localRouter information",
            labels + ("tags", "description"),
        )
        self.switch_info = Desc(
            "sakuracloud_local_router_switch_info",
            "A metric with a constant '1' value labeled by localRouter connected switch information",
            labels + ("category", "code", "zone_id"),
        )
        self.network_info = Desc(
            "sakuracloud_local_router_network_info",
            "A metric with a constant '1' value labeled by network information of the localRouter",
            labels + ("vip", "ipaddress1", "ipaddress2", "nw_mask_len", "vrid"),
        )
        self.peer_info = Desc(
            "sakuracloud_local_router_peer_info",
            "A metric with a constant '1' value labeled by peer information",
            peer_labels + ("enabled", "description"),
        )
        self.peer_up = Desc(
            "sakuracloud_local_router_peer_up",
            "If 1 the Peer is available, 0 otherwise",
            peer_labels,
        )
        self.static_route_info = Desc(
            "sakuracloud_local_router_static_route_info",
            "A metric with a constant '1' value labeled by static route information",
            labels + ("route_index", "prefix", "next_hop"),
        )
        self.receive_bytes_per_sec = Desc(
            "sakuracloud_local_router_receive_per_sec",
            "Receive bytes per seconds",
            labels,
        )
        self.send_bytes_per_sec = Desc(
            "sakuracloud_local_router_send_per_sec",
            "Send bytes per seconds",
            labels,
        )

    def describe(self) -> Iterator[Desc]:
        yield self.up
        yield self.local_router_info
        yield self.switch_info
        yield self.network_info
        yield self.peer_info
        yield self.peer_up
        yield self.static_route_info
        yield self.receive_bytes_per_sec
        yield self.send_bytes_per_sec

    def collect(self) -> Iterator[Metric]:
        try:
            routers = list(self.client.find() or [])
        except Exception as err:
            self._report_error("can't list localRouters", err)
            routers = []

        jobs = []
        for router in routers:
            labels = self._labels(router)
            yield Metric(self.up, 1.0 if router.is_available else 0.0, labels)
            yield Metric(
                self.local_router_info,
                1.0,
                labels + (flatten_string_slice(router.tags), router.description),
            )
            if router.switch is not None:
                switch = router.switch
                yield Metric(
                    self.switch_info,
                    1.0,
                    labels + (switch.category, switch.code, switch.zone_id),
                )
            if router.interface is not None:
                iface = router.interface
                yield Metric(
                    self.network_info,
                    1.0,
                    labels
                    + (
                        iface.virtual_ip_address,
                        iface.ip_address[0],
                        iface.ip_address[1],
                        str(iface.network_mask_len),
                        str(iface.vrid),
                    ),
                )

            jobs.append(partial(self._collect_peer_info, router))

            for index, route in enumerate(router.static_routes):
                yield Metric(
                    self.static_route_info,
                    1.0,
                    labels + (str(index), route.prefix, route.next_hop),
                )

            if router.is_available:
                jobs.append(partial(self._collect_traffic, router, self.clock()))

        yield from self._run_concurrently(jobs)

    @staticmethod
    def _labels(router: LocalRouter) -> tuple[str, ...]:
        return (str(router.id), router.name)

    def _collect_peer_info(self, router: LocalRouter) -> list[Metric]:
        try:
            health = self.client.health(router.id)
        except Exception as err:
            self._report_error(
                f"can't read health status of the localRouter[{router.id}]", err
            )
            return []

        statuses = {peer.id: peer for peer in (health.peers if health else [])}
        metrics = []
        for index, peer in enumerate(router.peers):
            status = statuses.get(peer.id)
            if status is None:
                continue
            labels = self._labels(router) + (str(index), str(peer.id))
            up = 1.0 if status.status.lower() == "up" else 0.0
            metrics.append(Metric(self.peer_up, up, labels))
            enabled = "1" if peer.enabled else "0"
            metrics.append(
                Metric(self.peer_info, 1.0, labels + (enabled, peer.description))
            )
        return metrics

    def _collect_traffic(self, router: LocalRouter, now: datetime) -> list[Metric]:
        try:
            values = self.client.monitor(router.id, now)
        except Exception as err:
            self._report_error(
                f"can't get localRouter's metrics: LocalRouterID={router.id}", err
            )
            return []
        if values is None:
            return []

        labels = self._labels(router)
        # bytes per second -> bits per second
        return [
            Metric(self.receive_bytes_per_sec, values.receive_bytes_per_sec * 8, labels, values.time),
            Metric(self.send_bytes_per_sec, values.send_bytes_per_sec * 8, labels, values.time),
        ]