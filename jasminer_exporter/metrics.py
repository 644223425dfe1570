"""Mapping of a device snapshot onto labeled gauge observations."""

from __future__ import annotations

from dataclasses import dataclass

from jasminer_exporter._util import format_integral
from jasminer_exporter.models.device import DeviceSnapshot

DEFAULT_NAMESPACE = "jasminer"


@dataclass(frozen=True)
class MetricDefinition:
    """Name, help text and label names of one gauge family."""

    name: str
    documentation: str
    labelnames: tuple[str, ...] = ()


@dataclass(frozen=True)
class Observation:
    """One gauge sample."""

    name: str
    labels: dict[str, str]
    value: float


# key -> (suffix, help, labels); order is exposition order
_FAMILIES: tuple[tuple[str, str, tuple[str, ...]], ...] = (
    ("miner", "Type description", ("type",)),
    ("version", "Version", ("datetime",)),
    ("mem_total", "Total memory", ()),
    ("mem_used", "Used memory", ()),
    ("mem_free", "Free memory", ()),
    ("network", "Network configuration", ("type", "mac", "ip", "mask", "gateway", "dns1", "dns2")),
    ("uptime", "Uptime in seconds", ()),
    ("rate_realtime", "Realtime hashrate (in MH/s)", ()),
    ("rate_average", "Average hashrate (in MH/s)", ()),
    ("reject_rate", "Reject rate (in %)", ()),
    ("fan_speed", "Fan speed", ("device",)),
    ("board_rate", "Board hashrate (in MH/s)", ("device", "asics", "freq")),
    ("board_temp", "Board temperature (in °C)", ("device",)),
    ("pool_config", "Pool configuration", ("pool", "status", "user", "url")),
    ("pool_works", "Pool works", ("pool",)),
    ("pool_accepted", "Pool accepted", ("pool",)),
    ("pool_rejected", "Pool rejected", ("pool",)),
)


def build_metric_definitions(namespace: str = DEFAULT_NAMESPACE) -> dict[str, MetricDefinition]:
    """Build the gauge family table, keyed by family suffix (``"board_temp"``)."""
    return {
        key: MetricDefinition(name=f"{namespace}_{key}", documentation=doc, labelnames=labels)
        for key, doc, labels in _FAMILIES
    }


class MetricAdapter:
    """Turns a :class:`DeviceSnapshot` into an ordered list of observations.

    Args:
        definitions: Table from :func:`build_metric_definitions`.
    """

    def __init__(self, definitions: dict[str, MetricDefinition]):
        self.definitions = definitions

    def to_metrics(self, snapshot: DeviceSnapshot) -> list[Observation]:
        observations: list[Observation] = []
        identity = snapshot.identity
        summary = snapshot.status.summary
        boards = snapshot.status.boards

        def emit(key: str, value: float, *label_values: str) -> None:
            definition = self.definitions[key]
            observations.append(Observation(definition.name, dict(zip(definition.labelnames, label_values)), value))

        emit("miner", 1, identity.miner_type)
        emit("version", 1, identity.firmware_version)
        emit("mem_total", identity.mem_total)
        emit("mem_used", identity.mem_used)
        emit("mem_free", identity.mem_free)
        emit(
            "network",
            1,
            identity.net_type,
            identity.mac_address,
            identity.ip_address,
            identity.netmask,
            identity.gateway,
            identity.dns1,
            identity.dns2,
        )

        emit("uptime", summary.uptime)
        emit("rate_realtime", summary.rate_realtime)
        emit("rate_average", summary.rate_average)
        emit("reject_rate", summary.reject_rate)
        emit("fan_speed", boards.fan1, "fan1")
        emit("fan_speed", boards.fan2, "fan2")

        for i, board in enumerate(boards.board):
            label = f"board{i}"
            emit("board_rate", board.rate, label, format_integral(board.asics), format_integral(board.freq))
            emit("board_temp", board.temp, label)

        for i, pool in enumerate(snapshot.status.pools.pool):
            label = f"pool{i}"
            emit("pool_config", 1, label, pool.status, pool.user, pool.url)
            emit("pool_works", pool.works, label)
            emit("pool_accepted", pool.accept, label)
            emit("pool_rejected", pool.reject, label)

        return observations
