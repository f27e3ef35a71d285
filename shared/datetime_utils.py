"""
Date/time helpers: framework-agnostic.

MongoDB returns naive datetimes unless the client is created with
``tz_aware=True``; everything here treats naive values as UTC.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional


def utcnow() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Return *value* as an aware UTC datetime; naive values are assumed UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def expires_after(seconds: int, now: Optional[datetime] = None) -> datetime:
    """Return the instant *seconds* after *now* (defaults to the current time)."""
    return (now or utcnow()) + timedelta(seconds=seconds)


def is_expired(expires_at: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """Return True if *expires_at* is at or before *now*.

    A missing expiry counts as expired so a malformed record never matches.
    """
    if expires_at is None:
        return True
    return ensure_utc(expires_at) <= (now or utcnow())
