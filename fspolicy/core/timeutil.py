"""Expiry coercion and clock helpers."""

from __future__ import annotations

import math
from datetime import date, datetime, timezone
from typing import Any, Optional

from dateutil import parser as date_parser

from fspolicy.errors import InvalidExpiryError


def utcnow() -> datetime:
    """Seam for tests."""
    return datetime.now(timezone.utc)


def ensure_aware(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        # Treat naive values as UTC to keep behavior deterministic.
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _invalid_number(value: Any, e: Optional[Exception] = None) -> InvalidExpiryError:
    detail = f": {e}" if e is not None else ""
    return InvalidExpiryError(f"Invalid security policy expiry: {value!r} is not a non-negative timestamp{detail}")


def _as_epoch_seconds(value: Any) -> Optional[int]:
    """Epoch seconds for numeric input, None for non-numeric input."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        if value < 0:
            raise _invalid_number(value)
        return value
    if isinstance(value, float):
        num = value
    elif isinstance(value, str):
        try:
            num = float(value.strip())
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(num) or num < 0:
        raise _invalid_number(value)
    try:
        return int(num)
    except (OverflowError, ValueError) as e:
        raise _invalid_number(value, e) from e


def coerce_expiry(value: Any) -> datetime:
    """
    Turn a caller-supplied expiry into an absolute, tz-aware UTC datetime.

    Accepted, in order:
    - datetime (naive values are read as UTC)
    - date (midnight UTC)
    - non-negative number or numeric string: Unix epoch seconds (negative or
      non-finite numbers are rejected, never handed to the parser)
    - anything `dateutil.parser.parse` understands, e.g. "2018-05-05T06:00:00Z"

    Raises:
        InvalidExpiryError: the value could not be turned into an instant.
    """
    if isinstance(value, datetime):
        return ensure_aware(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    seconds = _as_epoch_seconds(value)
    if seconds is not None:
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise InvalidExpiryError(f"Invalid security policy expiry: {e}") from e

    try:
        result = date_parser.parse(value)
    except (ValueError, OverflowError, TypeError) as e:
        raise InvalidExpiryError(f"Invalid security policy expiry: {e}") from e

    if result is None:
        raise InvalidExpiryError("Unknown issue parsing datetime")
    return ensure_aware(result)


def to_epoch_seconds(dt: datetime) -> int:
    return int(ensure_aware(dt).timestamp())
