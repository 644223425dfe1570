"""Data models for the Jasminer exporter."""

from jasminer_exporter.models.auth import Credentials, DigestChallenge
from jasminer_exporter.models.device import (
    Board,
    BoardSection,
    DeviceSnapshot,
    IdentityInfo,
    MinerStatus,
    Pool,
    PoolSection,
    Summary,
)

__all__ = [
    "Credentials",
    "DigestChallenge",
    "IdentityInfo",
    "Summary",
    "Board",
    "BoardSection",
    "Pool",
    "PoolSection",
    "MinerStatus",
    "DeviceSnapshot",
]
