"""Decoding of the Jasminer identity and status payloads."""

from __future__ import annotations

from typing import TypeVar

from pydantic import BaseModel, ValidationError

from jasminer_exporter._util import strip_unit
from jasminer_exporter.exceptions import ParseError
from jasminer_exporter.models.device import DeviceSnapshot, IdentityInfo, MinerStatus

__all__ = ["parse", "parse_identity", "parse_status", "strip_unit"]

_ModelT = TypeVar("_ModelT", bound=BaseModel)


def _field_errors(exc: ValidationError) -> list[tuple[str, str]]:
    """Flatten pydantic errors into ``(dotted.path, message)`` pairs."""
    return [(".".join(str(part) for part in err["loc"]) or "<root>", err["msg"]) for err in exc.errors()]


def _decode(model: type[_ModelT], payload: bytes | str, what: str) -> _ModelT:
    try:
        return model.model_validate_json(payload)
    except ValidationError as e:
        raise ParseError(f"Invalid {what} payload", _field_errors(e)) from e


def parse_identity(payload: bytes | str) -> IdentityInfo:
    """Decode the ``index.cgi`` document."""
    return _decode(IdentityInfo, payload, "identity")


def parse_status(payload: bytes | str) -> MinerStatus:
    """Decode the ``minerStatus.cgi`` document."""
    return _decode(MinerStatus, payload, "status")


def parse(identity_json: bytes | str, status_json: bytes | str) -> DeviceSnapshot:
    """Decode both payloads of one poll into a snapshot.

    Raises:
        ParseError: If either document is not valid JSON or a field has the
            wrong shape. ``errors`` lists every offending field path.
    """
    return DeviceSnapshot(identity=parse_identity(identity_json), status=parse_status(status_json))
