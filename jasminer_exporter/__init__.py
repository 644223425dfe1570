"""Prometheus exporter for Jasminer mining rigs.

Polls the device's digest-protected CGI endpoints on every scrape and
republishes the readings as gauges.
"""

__version__ = "0.1.0"

import os
import sys
from typing import Any, Callable, Dict

from loguru import logger as glogger

glogger.disable(__name__)


def _loguru_skiplog_filter(record: dict) -> bool:  # type: ignore[type-arg]
    """Filter function to hide records with ``extra['skiplog']`` set."""
    return not record.get("extra", {}).get("skiplog", False)


def configure_logging(
    level: str | None = None,
    loguru_filter: Callable[[Dict[str, Any]], bool] = _loguru_skiplog_filter,
) -> None:
    """Configure a default ``loguru`` sink with a convenient format and filter.

    ``level`` wins over ``LOGURU_LEVEL``; without either the sink logs INFO.
    """
    os.environ["LOGURU_LEVEL"] = level or os.getenv("LOGURU_LEVEL", "INFO")
    glogger.remove()
    logger_fmt: str = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{module}</cyan>::<cyan>{extra[classname]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
    )
    glogger.add(sys.stderr, level=os.getenv("LOGURU_LEVEL"), format=logger_fmt, filter=loguru_filter)  # type: ignore[arg-type]
    glogger.configure(extra={"classname": "None", "skiplog": False})
    glogger.enable(__name__)


from jasminer_exporter.exceptions import (  # noqa: E402
    AuthError,
    ConfigError,
    ExporterError,
    NetworkError,
    ParseError,
    ProtocolError,
)

__all__ = [
    "glogger",
    "configure_logging",
    "ExporterError",
    "ConfigError",
    "NetworkError",
    "AuthError",
    "ProtocolError",
    "ParseError",
]
