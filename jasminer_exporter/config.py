"""Exporter configuration resolved from command line and environment."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field

from jasminer_exporter.digest import DEFAULT_TIMEOUT
from jasminer_exporter.exceptions import ConfigError
from jasminer_exporter.models.auth import Credentials

DEFAULT_LISTEN_ADDRESS = ":5896"
DEFAULT_METRICS_PATH = "/metrics"


@dataclass
class ExporterConfig:
    """Validated startup settings."""

    uri: str
    credentials: Credentials = field(default_factory=Credentials)
    listen_host: str = "0.0.0.0"
    listen_port: int = 5896
    metrics_path: str = DEFAULT_METRICS_PATH
    timeout: float = DEFAULT_TIMEOUT
    pad_nonce_count: bool = False


def parse_listen_address(address: str) -> tuple[str, int]:
    """Split ``host:port`` (host optional, ``":5896"``) into its parts.

    Raises:
        ConfigError: If the port is missing or not in 1-65535.
    """
    host, sep, port_str = address.rpartition(":")
    if not sep:
        raise ConfigError(f"Listen address '{address}' must look like [host]:port")
    try:
        port = int(port_str)
    except ValueError as e:
        raise ConfigError(f"Invalid port in listen address '{address}'") from e
    if not 1 <= port <= 65535:
        raise ConfigError(f"Port {port} out of range in listen address '{address}'")
    host = host.strip("[]")
    return host or "0.0.0.0", port


def config_from_args(parsed: argparse.Namespace) -> ExporterConfig:
    """Validate parsed CLI arguments.

    Raises:
        ConfigError: If the device URI is missing or another value is unusable.
    """
    if not parsed.jasminer_uri:
        raise ConfigError("Jasminer URI required (--jasminer-uri or JASMINER_URI)")
    if not parsed.telemetry_path.startswith("/"):
        raise ConfigError(f"Telemetry path must start with '/', got '{parsed.telemetry_path}'")
    if parsed.timeout <= 0:
        raise ConfigError(f"Timeout must be > 0, got {parsed.timeout}")

    host, port = parse_listen_address(parsed.listen_address)
    return ExporterConfig(
        uri=parsed.jasminer_uri,
        credentials=Credentials(parsed.auth_username, parsed.auth_password),
        listen_host=host,
        listen_port=port,
        metrics_path=parsed.telemetry_path,
        timeout=parsed.timeout,
        pad_nonce_count=parsed.pad_nonce_count,
    )
