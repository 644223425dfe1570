"""Exception hierarchy for the Jasminer exporter."""

from __future__ import annotations


class ExporterError(Exception):
    """Base exception for all exporter errors."""


class ConfigError(ExporterError):
    """Startup configuration is missing or invalid."""


class NetworkError(ExporterError):
    """Transport failure while talking to the device."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class AuthError(ExporterError):
    """The device rejected the digest credentials."""


class ProtocolError(AuthError):
    """The digest challenge was missing or malformed."""


class ParseError(ExporterError):
    """A device payload could not be decoded.

    ``errors`` holds one ``(field_path, message)`` pair per offending field.
    """

    def __init__(self, message: str, errors: list[tuple[str, str]] | None = None):
        self.errors = errors or []
        if self.errors:
            details = "; ".join(f"{path}: {msg}" for path, msg in self.errors)
            message = f"{message} ({details})"
        super().__init__(message)
