"""Time utilities with timezone-aware defaults."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """Return current UTC time with tzinfo."""

    return datetime.now(timezone.utc)


def epoch_seconds_before(now: datetime, window: timedelta) -> int:
    """Whole Unix seconds of ``now - window``, the unit used by ``created_at_i``."""

    return int((now - window).timestamp())


__all__ = ["epoch_seconds_before", "utc_now"]
