"""Time machine — recall buckets plus a generated message.

Bucket computation never depends on the summarizer: it runs first, and the
summarizer is only consulted when there is something to talk about.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Sequence

from memory_lane.core.recall import DEFAULT_WINDOW_DAYS, recall_memories, recall_window
from memory_lane.domain.memory import Memory
from memory_lane.domain.recall import TimeMachineResult
from memory_lane.narrative.summarizer import Summarizer

logger = logging.getLogger(__name__)


def build_time_machine(
    memories: Sequence[Memory],
    today: date,
    summarizer: Summarizer,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> TimeMachineResult:
    """Compute recall buckets for *today* and, if any matched, summarise them."""
    buckets = recall_memories(memories, today, window_days)
    window = recall_window(today, window_days)

    if buckets.is_empty:
        logger.debug("Time machine for %s: nothing to recall", today)
        return TimeMachineResult(buckets=buckets, window=window, message="")

    message = summarizer.summarize(
        buckets.on_this_day,
        buckets.exactly_one_month_ago,
        buckets.around_one_month_ago,
    )
    logger.info("Time machine for %s recalled %d memories", today, buckets.total)
    return TimeMachineResult(buckets=buckets, window=window, message=message)
