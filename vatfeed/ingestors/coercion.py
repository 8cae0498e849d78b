"""Tolerant conversions for raw feed fields.

Every helper takes the raw string (or ``None``) and a fallback returned when
the value is missing or malformed. None of them raise.
"""

from __future__ import annotations

from datetime import datetime, timezone
import math
import re
from typing import Any, TypeVar

T = TypeVar("T")

UPDATE_FORMAT = "%Y%m%d%H%M%S"

_WHITESPACE_RE = re.compile(r"\s+")
_INFORMATION_RE = re.compile(r"[\w]+ information", re.IGNORECASE)


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def is_number(value: Any) -> bool:
    """True for finite numbers and strings that parse as one."""

    if value is None or isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return not math.isnan(value)
    if isinstance(value, str):
        return to_float(value) is not None
    return False


def to_float(value: Any, fallback: T = None, digits: int | None = None) -> float | T:
    if is_blank(value) or isinstance(value, bool):
        return fallback
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    if math.isnan(number) or math.isinf(number):
        return fallback
    return round(number, digits) if digits is not None else number


def to_int(value: Any, fallback: T = None) -> int | T:
    number = to_float(value)
    if number is None:
        return fallback
    return int(number)


def to_bool(value: Any, fallback: T = None) -> bool | T:
    if isinstance(value, bool):
        return value
    if is_blank(value):
        return fallback
    text = str(value).strip().lower()
    if text in {"1", "true", "yes", "on", "y"}:
        return True
    if text in {"0", "false", "no", "off", "n"}:
        return False
    return fallback


def to_str(value: Any, fallback: T = None, upper: bool = False) -> str | T:
    if is_blank(value):
        return fallback
    text = str(value).strip()
    return text.upper() if upper else text


def to_datetime(value: Any, fallback: T = None, fmt: str = UPDATE_FORMAT) -> datetime | T:
    """Parse a feed timestamp (``yyyyMMddHHmmss``, UTC)."""

    if is_blank(value):
        return fallback
    try:
        return datetime.strptime(str(value).strip(), fmt).replace(tzinfo=timezone.utc)
    except ValueError:
        return fallback


def format_transponder(value: Any) -> str | None:
    """Zero-pad a squawk to four digits (``"200"`` -> ``"0200"``)."""

    text = to_str(value)
    if text is None:
        return None
    return text.rjust(4, "0")


def format_flight_rules(value: Any) -> str | None:
    """``I`` -> ``IFR``, ``V`` -> ``VFR``."""

    text = to_str(value, upper=True)
    if text is None:
        return None
    return text if text.endswith("FR") else f"{text}FR"


def format_atis(raw: Any) -> str | None:
    """Clean an ATIS message, keeping the text from the "information" phrase on.

    Messages without the phrase are not an ATIS and return ``None``.
    """

    text = to_str(raw)
    if text is None:
        return None
    text = text.replace("^", " ")
    text = text.encode("ascii", errors="ignore").decode("ascii")
    text = _WHITESPACE_RE.sub(" ", text).strip()
    lowered = text.lower()
    if lowered.startswith("information"):
        return text
    if "information" not in lowered:
        return None
    match = _INFORMATION_RE.search(text)
    if match:
        text = text[match.start():]
    return text or None


__all__ = [
    "UPDATE_FORMAT",
    "format_atis",
    "format_flight_rules",
    "format_transponder",
    "is_blank",
    "is_number",
    "to_bool",
    "to_datetime",
    "to_float",
    "to_int",
    "to_str",
]
