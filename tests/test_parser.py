"""Tests for payload decoding."""

from __future__ import annotations

import json

import pytest

from jasminer_exporter.exceptions import ParseError
from jasminer_exporter.models.device import DeviceSnapshot
from jasminer_exporter.parser import parse, parse_identity, parse_status, strip_unit


class TestStripUnit:
    """Test leading-number extraction from unit strings."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("123.45 MH/s", 123.45),
            ("0 %", 0.0),
            ("1.5 %", 1.5),
            ("42", 42.0),
            ("  7.25 GH/s", 7.25),
            ("12.3MH/s", 12.3),
            ("-3 C", -3.0),
            ("1e3 H/s", 1000.0),
        ],
    )
    def test_leading_number(self, text, expected):
        assert strip_unit(text) == pytest.approx(expected)

    @pytest.mark.parametrize("text", ["", "MH/s", "n/a", " % 12"])
    def test_no_number_raises(self, text):
        with pytest.raises(ValueError):
            strip_unit(text)


class TestParseIdentity:
    """Test decoding of index.cgi."""

    def test_fields_mapped(self, identity_payload, payload_bytes):
        identity = parse_identity(payload_bytes(identity_payload()))
        assert identity.miner_type == "Jasminer X4-Q"
        assert identity.firmware_version == "20230515-1200"
        assert identity.mem_total == 1024.0
        assert identity.mem_used == 412.0
        assert identity.mem_free == 612.0
        assert identity.net_type == "DHCP"
        assert identity.mac_address == "aa:bb:cc:dd:ee:ff"
        assert identity.ip_address == "192.168.1.50"
        assert identity.dns2 == "8.8.8.8"

    def test_missing_text_fields_default_empty(self, payload_bytes):
        """Only the memory fields are mandatory."""
        identity = parse_identity(payload_bytes({"mem_total": "1", "mem_used": "0", "mem_free": "1"}))
        assert identity.miner_type == ""
        assert identity.gateway == ""

    def test_null_text_fields_become_empty(self, identity_payload, payload_bytes):
        """JSON null for an unset setting decodes to an empty string."""
        identity = parse_identity(payload_bytes(identity_payload(dns2=None, gateway=None, minertype=None)))
        assert identity.dns2 == ""
        assert identity.gateway == ""
        assert identity.miner_type == ""
        assert identity.dns1 == "1.1.1.1"

    def test_memory_must_be_numeric_string(self, identity_payload, payload_bytes):
        """A JSON number where a numeric string is expected is rejected."""
        with pytest.raises(ParseError) as exc_info:
            parse_identity(payload_bytes(identity_payload(mem_total=1024)))
        assert [path for path, _ in exc_info.value.errors] == ["mem_total"]

    def test_memory_non_numeric(self, identity_payload, payload_bytes):
        with pytest.raises(ParseError, match="mem_used"):
            parse_identity(payload_bytes(identity_payload(mem_used="lots")))

    def test_non_string_text_field(self, identity_payload, payload_bytes):
        with pytest.raises(ParseError, match="minertype"):
            parse_identity(payload_bytes(identity_payload(minertype=7)))

    def test_malformed_json(self):
        with pytest.raises(ParseError, match="identity") as exc_info:
            parse_identity(b"{not json")
        assert exc_info.value.errors[0][0] == "<root>"

    def test_accepts_str(self, identity_payload):
        identity = parse_identity(json.dumps(identity_payload()))
        assert identity.mem_free == 612.0


class TestParseStatus:
    """Test decoding of minerStatus.cgi."""

    def test_summary_units_stripped(self, status_payload, payload_bytes):
        status = parse_status(payload_bytes(status_payload()))
        assert status.summary.uptime == 3600.0
        assert status.summary.rate_realtime == 1042.0
        assert status.summary.rate_average == 1038.75
        assert status.summary.reject_rate == 1.5

    def test_zero_percent(self, status_payload, payload_bytes):
        status = parse_status(payload_bytes(status_payload(rejectRate="0 %")))
        assert status.summary.reject_rate == 0.0

    def test_board_order_preserved(self, status_payload, board_entry, payload_bytes):
        boards = [board_entry(temp=t, rate=f"{r} MH/s") for t, r in ((61.0, 250), (55.0, 270), (70.5, 240))]
        status = parse_status(payload_bytes(status_payload(boards=boards)))
        assert [b.temp for b in status.boards.board] == [61.0, 55.0, 70.5]
        assert [b.rate for b in status.boards.board] == [250.0, 270.0, 240.0]

    def test_pool_missing_user_url(self, status_payload, payload_bytes):
        """Absent or null user/url become empty strings."""
        pools = [
            {"status": "Dead", "works": 0, "accept": 0, "reject": 0},
            {"status": "Alive", "user": None, "url": None, "works": 1, "accept": 1, "reject": 0},
        ]
        status = parse_status(payload_bytes(status_payload(pools=pools)))
        assert [(p.user, p.url) for p in status.pools.pool] == [("", ""), ("", "")]

    def test_empty_lists(self, status_payload, payload_bytes):
        status = parse_status(payload_bytes(status_payload(boards=[], pools=[])))
        assert status.boards.board == []
        assert status.pools.pool == []

    def test_wrong_type_reports_field_path(self, status_payload, board_entry, payload_bytes):
        """A non-numeric temperature names its full path."""
        boards = [board_entry(), board_entry(temp="hot")]
        with pytest.raises(ParseError) as exc_info:
            parse_status(payload_bytes(status_payload(boards=boards)))
        assert [path for path, _ in exc_info.value.errors] == ["boards.board.1.temp"]

    def test_all_offending_fields_listed(self, status_payload, payload_bytes):
        payload = status_payload(rt="fast")
        del payload["boards"]["fan2"]
        with pytest.raises(ParseError) as exc_info:
            parse_status(payload_bytes(payload))
        paths = {path for path, _ in exc_info.value.errors}
        assert paths == {"summary.rt", "boards.fan2"}
        assert "summary.rt" in str(exc_info.value)

    @pytest.mark.parametrize("value", [True, False, "58.5"])
    def test_board_number_must_be_json_number(self, status_payload, board_entry, payload_bytes, value):
        """Booleans and numeric strings are not accepted where a number is expected."""
        boards = [board_entry(temp=value)]
        with pytest.raises(ParseError) as exc_info:
            parse_status(payload_bytes(status_payload(boards=boards)))
        assert [path for path, _ in exc_info.value.errors] == ["boards.board.0.temp"]

    def test_numeric_string_uptime_rejected(self, status_payload, payload_bytes):
        with pytest.raises(ParseError) as exc_info:
            parse_status(payload_bytes(status_payload(uptime="3600")))
        assert [path for path, _ in exc_info.value.errors] == ["summary.uptime"]

    def test_boolean_counters_and_fans_rejected(self, status_payload, pool_entry, payload_bytes):
        payload = status_payload(pools=[pool_entry(works=True)])
        payload["boards"]["fan1"] = False
        with pytest.raises(ParseError) as exc_info:
            parse_status(payload_bytes(payload))
        paths = {path for path, _ in exc_info.value.errors}
        assert paths == {"boards.fan1", "pools.pool.0.works"}

    def test_boolean_unit_field_rejected(self, status_payload, payload_bytes):
        with pytest.raises(ParseError, match="summary.rt"):
            parse_status(payload_bytes(status_payload(rt=True)))

    def test_integer_numbers_accepted(self, status_payload, board_entry, payload_bytes):
        status = parse_status(payload_bytes(status_payload(boards=[board_entry(asics=120, freq=1600, temp=60)])))
        board = status.boards.board[0]
        assert (board.asics, board.freq, board.temp) == (120.0, 1600.0, 60.0)

    def test_missing_section(self, status_payload, payload_bytes):
        payload = status_payload()
        del payload["pools"]
        with pytest.raises(ParseError, match="pools"):
            parse_status(payload_bytes(payload))


class TestParse:
    def test_builds_snapshot(self, identity_payload, status_payload, payload_bytes):
        snapshot = parse(payload_bytes(identity_payload()), payload_bytes(status_payload()))
        assert isinstance(snapshot, DeviceSnapshot)
        assert snapshot.identity.miner_type == "Jasminer X4-Q"
        assert len(snapshot.status.pools.pool) == 1

    def test_either_payload_fails_whole_parse(self, identity_payload, payload_bytes):
        with pytest.raises(ParseError, match="status"):
            parse(payload_bytes(identity_payload()), b"[]")
