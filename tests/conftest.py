"""Shared fixtures for the jasminer_exporter test suite."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

# ── device payloads ───────────────────────────────────────────────────


@pytest.fixture()
def identity_payload():
    """Factory fixture returning an index.cgi document as a dict."""

    def _make(**overrides):
        defaults = {
            "minertype": "Jasminer X4-Q",
            "fs_version": "20230515-1200",
            "mem_total": "1024",
            "mem_used": "412",
            "mem_free": "612",
            "nettype": "DHCP",
            "macaddr": "aa:bb:cc:dd:ee:ff",
            "ipaddress": "192.168.1.50",
            "netmask": "255.255.255.0",
            "gateway": "192.168.1.1",
            "dns1": "1.1.1.1",
            "dns2": "8.8.8.8",
        }
        defaults.update(overrides)
        return defaults

    return _make


@pytest.fixture()
def board_entry():
    def _make(**overrides):
        defaults = {"rate": "260.5 MH/s", "asics": 120.0, "freq": 1600.0, "temp": 58.5}
        defaults.update(overrides)
        return defaults

    return _make


@pytest.fixture()
def pool_entry():
    def _make(**overrides):
        defaults = {
            "status": "Alive",
            "user": "wallet.rig1",
            "url": "stratum+tcp://eth.pool.example:4444",
            "works": 1200,
            "accept": 1180,
            "reject": 20,
        }
        defaults.update(overrides)
        return defaults

    return _make


@pytest.fixture()
def status_payload(board_entry, pool_entry):
    """Factory fixture returning a minerStatus.cgi document as a dict."""

    def _make(boards=None, pools=None, **summary_overrides):
        summary = {"uptime": 3600, "rt": "1042.00 MH/s", "avg": "1038.75 MH/s", "rejectRate": "1.5 %"}
        summary.update(summary_overrides)
        return {
            "summary": summary,
            "boards": {
                "fan1": 4200,
                "fan2": 4320,
                "board": [board_entry()] if boards is None else boards,
            },
            "pools": {"pool": [pool_entry()] if pools is None else pools},
        }

    return _make


@pytest.fixture()
def payload_bytes():
    """Serialize a payload dict the way the device sends it."""

    def _dump(payload) -> bytes:
        return json.dumps(payload).encode()

    return _dump


# ── transport mocks ───────────────────────────────────────────────────


@pytest.fixture()
def make_response():
    """Factory for MagicMock responses of requests.Session.get."""

    def _make(status_code=200, headers=None, content=b""):
        response = MagicMock()
        response.status_code = status_code
        response.ok = 200 <= status_code < 400
        response.headers = headers or {}
        response.content = content
        return response

    return _make


@pytest.fixture()
def challenge_header():
    return 'Digest realm="jasminer", nonce="5f1b9c0d7e", qop="auth", algorithm="MD5"'
