"""HTTP Digest authentication transport for the Jasminer CGI endpoints.

The device answers every unauthenticated GET with a ``401`` and a
``WWW-Authenticate: Digest`` challenge. Each fetch performs the whole
handshake again: one bare GET to obtain a fresh nonce, one GET carrying the
computed ``Authorization`` header. Nothing is cached between fetches.
"""

from __future__ import annotations

import hashlib
import secrets
from types import TracebackType
from typing import Self

import requests
from loguru import logger

from jasminer_exporter.exceptions import AuthError, NetworkError, ProtocolError
from jasminer_exporter.models.auth import Credentials, DigestChallenge

DEFAULT_TIMEOUT = 10.0
DIGEST_DIRECTIVES = ("realm", "nonce", "qop")
CNONCE_BYTES = 8
NONCE_COUNT = 1


def md5_hex(text: str) -> str:
    return hashlib.md5(text.encode()).hexdigest()


def generate_cnonce() -> str:
    """Return a fresh client nonce: 8 random bytes as 16 lowercase hex characters."""
    return secrets.token_bytes(CNONCE_BYTES).hex()[: CNONCE_BYTES * 2]


def format_nonce_count(count: int = NONCE_COUNT, padded: bool = False) -> str:
    """Render the ``nc`` value.

    The Jasminer firmware is driven with a bare decimal (``"1"``); RFC 2617
    clients send eight hex digits (``"00000001"``), selected with ``padded``.
    """
    return f"{count:08x}" if padded else str(count)


def parse_challenge(header: str) -> DigestChallenge:
    """Extract realm, nonce and qop from a ``WWW-Authenticate`` header value.

    The header is split on commas. A directive whose text contains one of the
    wanted names yields the value between the first pair of double quotes after
    the name, so ``qop="auth,auth-int"`` resolves to ``auth``.

    Raises:
        ProtocolError: If the scheme is not Digest or a directive is missing.
    """
    scheme, _, _ = header.strip().partition(" ")
    if scheme.lower() != "digest":
        raise ProtocolError(f"Expected a Digest challenge, got scheme '{scheme}'")

    found: dict[str, str] = {}
    for directive in header.split(","):
        for name in DIGEST_DIRECTIVES:
            pos = directive.find(name)
            if pos < 0:
                continue
            quoted = directive[pos + len(name) :].split('"')
            if len(quoted) < 2:
                raise ProtocolError(f"Digest directive '{name}' has no quoted value")
            found[name] = quoted[1]

    missing = [name for name in DIGEST_DIRECTIVES if name not in found]
    if missing:
        raise ProtocolError(f"Digest challenge lacks {', '.join(missing)}")

    return DigestChallenge(realm=found["realm"], nonce=found["nonce"], qop=found["qop"])


def compute_response(
    credentials: Credentials,
    challenge: DigestChallenge,
    method: str,
    uri: str,
    cnonce: str,
    nonce_count: str,
) -> str:
    """Compute the ``response`` value: MD5(HA1:nonce:nc:cnonce:qop:HA2)."""
    ha1 = md5_hex(f"{credentials.username}:{challenge.realm}:{credentials.password}")
    ha2 = md5_hex(f"{method}:{uri}")
    return md5_hex(f"{ha1}:{challenge.nonce}:{nonce_count}:{cnonce}:{challenge.qop}:{ha2}")


def build_authorization(
    credentials: Credentials,
    challenge: DigestChallenge,
    method: str,
    uri: str,
    cnonce: str,
    nonce_count: str,
) -> str:
    """Build the ``Authorization`` header value; every value but ``nc`` is quoted."""
    response = compute_response(credentials, challenge, method, uri, cnonce, nonce_count)
    return (
        f'Digest username="{credentials.username}", realm="{challenge.realm}", '
        f'nonce="{challenge.nonce}", uri="{uri}", cnonce="{cnonce}", nc={nonce_count}, '
        f'qop="{challenge.qop}", response="{response}"'
    )


class DigestTransport:
    """GET-only HTTP transport answering Digest challenges by hand.

    Args:
        credentials: Device login.
        timeout: Seconds allowed for each of the two requests of a fetch.
        pad_nonce_count: Send ``nc`` as ``00000001`` instead of ``1``.
    """

    method = "GET"

    def __init__(
        self,
        credentials: Credentials,
        timeout: float = DEFAULT_TIMEOUT,
        pad_nonce_count: bool = False,
    ):
        self.credentials = credentials
        self.timeout = timeout
        self.pad_nonce_count = pad_nonce_count
        self._session: requests.Session | None = None

    def connect(self) -> None:
        """Open the underlying HTTP session."""
        if self._session is None:
            self._session = requests.Session()

    def disconnect(self) -> None:
        """Close the underlying HTTP session."""
        if self._session:
            self._session.close()
            self._session = None

    def is_connected(self) -> bool:
        return self._session is not None

    def fetch(self, uri: str) -> bytes:
        """Fetch ``uri`` through a full digest handshake and return the body.

        Raises:
            NetworkError: Transport failure, or a non-2xx answer to the
                authenticated request.
            ProtocolError: The first answer carried no usable challenge.
            AuthError: The device rejected the computed credentials.
        """
        self._ensure_connected()

        first = self._get(uri)
        header = first.headers.get("WWW-Authenticate")
        if not header:
            raise ProtocolError(f"GET {uri} returned {first.status_code} without a WWW-Authenticate header")
        challenge = parse_challenge(header)
        logger.debug(f"Digest challenge from {uri}: realm={challenge.realm} qop={challenge.qop}")

        authorization = build_authorization(
            self.credentials,
            challenge,
            self.method,
            uri,
            generate_cnonce(),
            format_nonce_count(NONCE_COUNT, padded=self.pad_nonce_count),
        )
        second = self._get(uri, headers={"Authorization": authorization})
        if second.status_code == 401:
            raise AuthError(f"GET {uri}: digest credentials for '{self.credentials.username}' rejected")
        if not second.ok:
            raise NetworkError(f"GET {uri} failed with HTTP {second.status_code}", status_code=second.status_code)

        return second.content

    def _get(self, uri: str, headers: dict[str, str] | None = None) -> requests.Response:
        assert self._session is not None
        try:
            return self._session.get(uri, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise NetworkError(f"GET {uri} failed: {e}") from e

    def _ensure_connected(self) -> None:
        if not self.is_connected():
            raise NetworkError("Not connected. Call connect() first.")

    def __enter__(self) -> Self:
        self.connect()
        return self

    def __exit__(
        self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: TracebackType | None
    ) -> None:
        self.disconnect()


def fetch(uri: str, username: str, password: str, timeout: float = DEFAULT_TIMEOUT) -> bytes:
    """One-shot digest GET of ``uri`` with a throwaway session."""
    with DigestTransport(Credentials(username, password), timeout=timeout) as transport:
        return transport.fetch(uri)
