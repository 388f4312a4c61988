"""Small shared helpers."""
from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def from_epoch_ms(value: int) -> datetime:
    """Convert a JavaScript-style millisecond timestamp to an aware UTC datetime."""

    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
