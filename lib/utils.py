# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Small helpers shared by the stores, services and routers:
# - UTC timestamps in the one format every backend stores
# - Form value parsing (the admin dashboard posts everything as strings)
# =============================================================================

import math
from datetime import datetime, timezone


# =============================================================================
# Timestamps
# =============================================================================

def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """
    Current UTC time as an ISO-8601 string with microseconds.

    Every backend stores timestamps in this fixed-width format, so
    newest-first ordering works the same on strings and on timestamptz.

    Example:
        utc_now_iso()  # "2024-01-15T10:30:00.123456+00:00"
    """
    return utc_now().isoformat(timespec="microseconds")


def to_utc_iso(value: str | datetime) -> str:
    """
    Re-emit a timestamp in the format utc_now_iso() produces.

    Accepts datetimes and ISO-8601 strings, including the trailing "Z"
    JavaScript's toISOString() writes. Naive values are taken as UTC.

    Raises:
        ValueError: If the string is not ISO-8601
        TypeError: If value is neither a string nor a datetime

    Example:
        to_utc_iso("2024-01-15T10:30:00.000Z")  # "2024-01-15T10:30:00.000000+00:00"
    """
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        value = datetime.fromisoformat(text)
    elif not isinstance(value, datetime):
        raise TypeError(f"Not a timestamp: {value!r}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


# =============================================================================
# Form Parsing
# =============================================================================

_TRUE_VALUES = {"true", "1", "on", "yes"}
_FALSE_VALUES = {"false", "0", "off", "no"}


def parse_form_bool(value: str | bool | None) -> bool | None:
    """
    Parse a checkbox-style form value.

    Returns None when the field was not sent (or sent empty) so callers can
    tell "unset" apart from "false".

    Raises:
        ValueError: If the value is not a recognizable boolean
    """
    if value is None or isinstance(value, bool):
        return value
    text = value.strip().lower()
    if not text:
        return None
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"Not a boolean value: {value!r}")


def parse_price(value: str | float | int | None) -> float | None:
    """
    Parse a price field into a non-negative float.

    Returns None when the field was not sent.

    Raises:
        ValueError: If the value is not a finite, non-negative number
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    price = float(value)
    if not math.isfinite(price):
        raise ValueError(f"Price must be a finite number: {value!r}")
    if price < 0:
        raise ValueError(f"Price must not be negative: {value!r}")
    return price
