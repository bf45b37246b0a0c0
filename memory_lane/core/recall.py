"""Time-machine recall — which memories to resurface today.

Three independent rules, each evaluated per memory:

    on_this_day            same month and day as today, strictly earlier year
    exactly_one_month_ago  same calendar day as ``one_month_before(today)``
    around_one_month_ago   within ± window_days of that day, excluding it

Month subtraction clamps to the last day of the previous month, so
Mar 31 → Feb 29 (leap year) or Feb 28, and Jan 31 → Dec 31 of the year
before.

Memories with unparseable dates are skipped by whichever rule cannot read
them.  Nothing here raises on bad memory data; only a "today" whose window
would leave the calendar (year 1 or 9999) raises RecallRangeError.
"""

from __future__ import annotations

import calendar
import logging
from datetime import date, timedelta
from typing import Optional, Sequence

from memory_lane.domain.memory import Memory
from memory_lane.domain.recall import RecallWindow, TemporalBuckets

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 3


def one_month_before(day: date) -> date:
    """Same day in the previous calendar month, clamped to that month's length."""
    if day.month == 1:
        year, month = day.year - 1, 12
    else:
        year, month = day.year, day.month - 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


class RecallRangeError(ValueError):
    """The recall window for *today* would fall outside the supported calendar."""

    def __init__(self, today: date, window_days: int) -> None:
        super().__init__(f"Cannot recall around {today.isoformat()} with a {window_days}-day window")
        self.today = today
        self.window_days = window_days


def recall_window(today: date, window_days: int = DEFAULT_WINDOW_DAYS) -> RecallWindow:
    """Derive the recall dates for *today*.  Raises RecallRangeError near year 1 or 9999."""
    try:
        last_month = one_month_before(today)
        window_start = last_month - timedelta(days=window_days)
        window_end = last_month + timedelta(days=window_days)
    except (ValueError, OverflowError) as exc:
        raise RecallRangeError(today, window_days) from exc
    return RecallWindow(
        today=today,
        last_month_date=last_month,
        window_start=window_start,
        window_end=window_end,
    )


def _parse_day(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        return None


def _is_anniversary(memory: Memory, today: date) -> bool:
    if not memory.date.endswith(f"-{today.month:02d}-{today.day:02d}"):
        return False
    try:
        year = int(memory.date.split("-")[0])
    except ValueError:
        return False
    return year < today.year


def recall_memories(
    memories: Sequence[Memory],
    today: date,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> TemporalBuckets:
    """Partition *memories* into the three time-machine buckets for *today*.

    Deciding what to do with an all-empty result is left to the caller.
    """
    window = recall_window(today, window_days)

    on_this_day: list[Memory] = []
    exact: list[Memory] = []
    around: list[Memory] = []

    for memory in memories:
        if _is_anniversary(memory, today):
            on_this_day.append(memory)

        day = _parse_day(memory.date)
        if day is None:
            logger.debug("Skipping month rules for memory %s: bad date %r", memory.id, memory.date)
            continue

        if day == window.last_month_date:
            exact.append(memory)
        elif window.window_start <= day <= window.window_end:
            around.append(memory)

    def by_date(m: Memory) -> str:
        return m.date

    buckets = TemporalBuckets(
        on_this_day=sorted(on_this_day, key=by_date),
        exactly_one_month_ago=sorted(exact, key=by_date),
        around_one_month_ago=sorted(around, key=by_date),
    )
    logger.debug(
        "Recall for %s: on_this_day=%d exact=%d around=%d",
        today, len(buckets.on_this_day), len(buckets.exactly_one_month_ago),
        len(buckets.around_one_month_ago),
    )
    return buckets
