"""Pydantic models for the two Jasminer CGI payloads."""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, Strict, field_validator

from jasminer_exporter._util import unit_number

# JSON number only: ints are accepted, booleans and numeric strings are not
JsonNumber = Annotated[float, Strict()]


def _null_to_empty(value: Any) -> Any:
    return "" if value is None else value


class IdentityInfo(BaseModel):
    """Device identity and network settings from ``/cgi-bin/index.cgi``."""

    model_config = ConfigDict(populate_by_name=True)

    miner_type: str = Field("", alias="minertype")
    firmware_version: str = Field("", alias="fs_version")
    mem_total: float
    mem_used: float
    mem_free: float
    net_type: str = Field("", alias="nettype")
    mac_address: str = Field("", alias="macaddr")
    ip_address: str = Field("", alias="ipaddress")
    netmask: str = ""
    gateway: str = ""
    dns1: str = ""
    dns2: str = ""

    @field_validator("mem_total", "mem_used", "mem_free", mode="before")
    @classmethod
    def _require_numeric_string(cls, value: Any) -> Any:
        # the index page reports every value as a string
        if not isinstance(value, str):
            raise ValueError("expected a numeric string")
        return value

    @field_validator(
        "miner_type",
        "firmware_version",
        "net_type",
        "mac_address",
        "ip_address",
        "netmask",
        "gateway",
        "dns1",
        "dns2",
        mode="before",
    )
    @classmethod
    def _unset_to_empty(cls, value: Any) -> Any:
        return _null_to_empty(value)


class Summary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    uptime: JsonNumber
    rate_realtime: JsonNumber = Field(alias="rt")
    rate_average: JsonNumber = Field(alias="avg")
    reject_rate: JsonNumber = Field(alias="rejectRate")

    @field_validator("rate_realtime", "rate_average", "reject_rate", mode="before")
    @classmethod
    def _strip_units(cls, value: Any) -> Any:
        return unit_number(value)


class Board(BaseModel):
    """One hashboard; ``rate`` arrives as ``"<number> MH/s"``."""

    rate: JsonNumber
    asics: JsonNumber
    freq: JsonNumber
    temp: JsonNumber

    @field_validator("rate", mode="before")
    @classmethod
    def _strip_unit(cls, value: Any) -> Any:
        return unit_number(value)


class BoardSection(BaseModel):
    fan1: JsonNumber
    fan2: JsonNumber
    board: list[Board]


class Pool(BaseModel):
    """One configured pool; ``user`` and ``url`` may be missing or null."""

    status: str
    user: str = ""
    url: str = ""
    works: JsonNumber
    accept: JsonNumber
    reject: JsonNumber

    @field_validator("user", "url", mode="before")
    @classmethod
    def _unset_to_empty(cls, value: Any) -> Any:
        return _null_to_empty(value)


class PoolSection(BaseModel):
    pool: list[Pool]


class MinerStatus(BaseModel):
    """Mining status tree from ``/cgi-bin/minerStatus.cgi``."""

    summary: Summary
    boards: BoardSection
    pools: PoolSection


class DeviceSnapshot(BaseModel):
    """Everything read from the device during one poll."""

    identity: IdentityInfo
    status: MinerStatus
