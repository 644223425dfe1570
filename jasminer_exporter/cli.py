"""CLI entry point for the Jasminer Prometheus exporter.

Examples:
  jasminer-exporter --jasminer-uri http://192.168.1.50

  JASMINER_URI=http://miner.lan JASMINER_AUTH_PASSWORD=<PW> \\
      jasminer-exporter --listen-address 127.0.0.1:9100 --telemetry-path /probe
"""

from __future__ import annotations

import argparse
import os
import sys

from loguru import logger
from prometheus_client import CollectorRegistry, PlatformCollector, ProcessCollector
from tabulate import tabulate

from jasminer_exporter import __version__, configure_logging
from jasminer_exporter.client import JasminerClient
from jasminer_exporter.collector import JasminerCollector
from jasminer_exporter.config import (
    DEFAULT_LISTEN_ADDRESS,
    DEFAULT_METRICS_PATH,
    ExporterConfig,
    config_from_args,
)
from jasminer_exporter.digest import DEFAULT_TIMEOUT
from jasminer_exporter.exceptions import ConfigError
from jasminer_exporter.metrics import MetricAdapter, build_metric_definitions
from jasminer_exporter.server import make_app, serve


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser; environment variables supply the defaults."""
    parser = argparse.ArgumentParser(
        prog="jasminer-exporter",
        description="Prometheus exporter for Jasminer miners (digest-authenticated dashboard)",
    )
    parser.add_argument(
        "--listen-address",
        default=os.getenv("JASMINER_LISTEN_ADDRESS", DEFAULT_LISTEN_ADDRESS),
        help=f"Address to listen on for web interface and telemetry (default: {DEFAULT_LISTEN_ADDRESS})",
    )
    parser.add_argument(
        "--telemetry-path",
        default=os.getenv("JASMINER_TELEMETRY_PATH", DEFAULT_METRICS_PATH),
        help=f"Path to expose metrics of the exporter (default: {DEFAULT_METRICS_PATH})",
    )
    parser.add_argument(
        "--jasminer-uri",
        default=os.getenv("JASMINER_URI", ""),
        help="URI of the Jasminer dashboard, e.g. http://192.168.1.50 (required)",
    )
    parser.add_argument(
        "--auth-username",
        default=os.getenv("JASMINER_AUTH_USERNAME", "root"),
        help="Jasminer authentication username (default: root)",
    )
    parser.add_argument(
        "--auth-password",
        default=os.getenv("JASMINER_AUTH_PASSWORD", "root"),
        help="Jasminer authentication password (default: root)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"Per-request timeout in seconds (default: {DEFAULT_TIMEOUT:g})",
    )
    parser.add_argument(
        "--pad-nonce-count",
        action="store_true",
        help="Send the digest nonce count as 00000001 instead of 1",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def build_registry(config: ExporterConfig) -> tuple[CollectorRegistry, JasminerClient]:
    """Create a registry holding the miner collector plus process/platform metrics."""
    client = JasminerClient(
        config.uri,
        config.credentials,
        timeout=config.timeout,
        pad_nonce_count=config.pad_nonce_count,
    )
    registry = CollectorRegistry()
    ProcessCollector(registry=registry)
    PlatformCollector(registry=registry)
    registry.register(JasminerCollector(client, MetricAdapter(build_metric_definitions())))
    return registry, client


def _print_startup_banner(config: ExporterConfig) -> None:
    startup_rows = [
        ["version", __version__],
        ["jasminer uri", config.uri],
        ["username", config.credentials.username],
        ["listen", f"{config.listen_host}:{config.listen_port}"],
        ["metrics path", config.metrics_path],
    ]

    for var in ("GITHUB_REF", "GITHUB_SHA", "BUILDTIME"):
        val = os.environ.get(var)
        if val and not val.endswith("_is_undefined"):
            startup_rows.append([var, val])

    table_str = tabulate(startup_rows, tablefmt="mixed_grid")
    lines = table_str.split("\n")
    table_width = len(lines[0])
    title = "jasminer-exporter starting up"
    title_border = "┍" + "━" * (table_width - 2) + "┑"
    title_row = "│ " + title.center(table_width - 4) + " │"
    separator = lines[0].replace("┍", "┝").replace("┑", "┥").replace("┯", "┿")

    logger.opt(raw=True).info(
        "\n{}\n", title_border + "\n" + title_row + "\n" + separator + "\n" + "\n".join(lines[1:])
    )


def main(args: list[str] | None = None) -> None:
    """Main entry point: validate configuration, then serve until interrupted."""
    parser = build_parser()
    parsed = parser.parse_args(args)

    configure_logging("DEBUG" if parsed.verbose else None)

    try:
        config = config_from_args(parsed)
    except ConfigError as e:
        logger.error(f"{e}")
        sys.exit(1)

    _print_startup_banner(config)
    registry, client = build_registry(config)
    client.connect()
    try:
        serve(make_app(registry, config.metrics_path), config.listen_host, config.listen_port)
    except OSError as e:
        logger.error(f"Cannot listen on {config.listen_host}:{config.listen_port}: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
        sys.exit(130)
    finally:
        client.disconnect()


if __name__ == "__main__":
    main()
