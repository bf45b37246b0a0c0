"""Timezone-aware clock utilities.

All stored timestamps in memory-lane MUST be UTC-aware.  This module is the
single source of "now" and "today" so tests can monkey-patch it trivially.
"""

from __future__ import annotations

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


def local_today() -> date:
    """Return today's calendar date in the server's local timezone."""
    return date.today()
