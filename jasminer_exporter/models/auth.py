"""Authentication-related data models."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Credentials:
    """Device login shared by every request of the exporter."""

    username: str = "root"
    password: str = field(default="root", repr=False)


@dataclass(frozen=True)
class DigestChallenge:
    """Directives taken from a ``WWW-Authenticate: Digest`` header."""

    realm: str
    nonce: str
    qop: str
