"""Small helpers shared by the payload models and the metric adapter."""

from __future__ import annotations

import re
from typing import Any

_LEADING_NUMBER = re.compile(r"^\s*([-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?)")


def strip_unit(value: str) -> float:
    """Return the leading number of a unit-suffixed reading.

    ``"123.45 MH/s"`` gives ``123.45`` and ``"0 %"`` gives ``0.0``; whatever
    follows the number is ignored.

    Raises:
        ValueError: If the string does not start with a number.
    """
    match = _LEADING_NUMBER.match(value)
    if match is None:
        raise ValueError(f"no leading number in {value!r}")
    return float(match.group(1))


def unit_number(value: Any) -> Any:
    """``mode="before"`` validator body: strip units off strings, pass numbers through."""
    if isinstance(value, str):
        return strip_unit(value)
    return value


def format_integral(value: float) -> str:
    """Render a float label value without decimals (``1600.0`` -> ``"1600"``)."""
    return f"{value:.0f}"
