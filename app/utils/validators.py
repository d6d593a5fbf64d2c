"""Deterministic validators and sanitizers used by schemas and services."""

from __future__ import annotations

import re
from typing import Any

EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")
HEX_COLOR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")

PROBABILITY_MIN = 0
PROBABILITY_MAX = 100


def sanitize_text(value: str | None, max_len: int = 20000) -> str:
    """Sanitize free-form content before persistence/display."""
    if value is None:
        return ""
    cleaned = str(value).replace("\x00", "").strip()
    cleaned = cleaned[:max_len]
    return cleaned


def optional_text(value: str | None, max_len: int = 20000) -> str | None:
    """Sanitize an optional field, mapping blank input to ``None``."""
    cleaned = sanitize_text(value, max_len=max_len)
    return cleaned or None


def is_valid_email(value: str | None) -> bool:
    if not value:
        return False
    return bool(EMAIL_PATTERN.match(value.strip()))


def is_valid_color(value: str | None) -> bool:
    if not value:
        return False
    return bool(HEX_COLOR_PATTERN.match(value.strip()))


def as_number(value: Any) -> float:
    """Coerce a possibly-missing numeric field to a float, treating junk as zero."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if number != number:  # NaN
        return 0.0
    return number


def clamp_probability(value: Any) -> int:
    """Clamp a win probability into the inclusive 0-100 range."""
    number = as_number(value)
    return int(round(max(PROBABILITY_MIN, min(number, PROBABILITY_MAX))))
