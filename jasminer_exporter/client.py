"""Jasminer device client."""

from __future__ import annotations

from types import TracebackType
from typing import Self

from loguru import logger

from jasminer_exporter.digest import DEFAULT_TIMEOUT, DigestTransport
from jasminer_exporter.models.auth import Credentials
from jasminer_exporter.models.device import DeviceSnapshot, IdentityInfo, MinerStatus
from jasminer_exporter.parser import parse_identity, parse_status

IDENTITY_PATH = "cgi-bin/index.cgi"
STATUS_PATH = "cgi-bin/minerStatus.cgi"


class JasminerClient:
    """Reads identity and mining status from one Jasminer dashboard.

    Usage::

        with JasminerClient("http://192.168.1.50", Credentials("root", "root")) as miner:
            snapshot = miner.poll()
            print(snapshot.status.summary.rate_realtime)
    """

    def __init__(
        self,
        uri: str,
        credentials: Credentials,
        timeout: float = DEFAULT_TIMEOUT,
        pad_nonce_count: bool = False,
    ):
        self.uri = uri.rstrip("/")
        self._transport = DigestTransport(credentials, timeout=timeout, pad_nonce_count=pad_nonce_count)

    @property
    def identity_uri(self) -> str:
        return f"{self.uri}/{IDENTITY_PATH}"

    @property
    def status_uri(self) -> str:
        return f"{self.uri}/{STATUS_PATH}"

    def fetch_identity(self) -> IdentityInfo:
        return parse_identity(self._transport.fetch(self.identity_uri))

    def fetch_status(self) -> MinerStatus:
        return parse_status(self._transport.fetch(self.status_uri))

    def poll(self) -> DeviceSnapshot:
        """Fetch and decode both endpoints into a fresh snapshot.

        Any error aborts the whole poll; the status page is not requested when
        the identity page already failed.
        """
        snapshot = DeviceSnapshot(identity=self.fetch_identity(), status=self.fetch_status())
        logger.debug(
            f"Polled {self.uri}: {len(snapshot.status.boards.board)} boards, "
            f"{len(snapshot.status.pools.pool)} pools"
        )
        return snapshot

    def connect(self) -> None:
        self._transport.connect()

    def disconnect(self) -> None:
        self._transport.disconnect()

    def __enter__(self) -> Self:
        self.connect()
        return self

    def __exit__(
        self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: TracebackType | None
    ) -> None:
        self.disconnect()
