"""Time-machine data structures.

Pure containers.  The rules that fill them live in memory_lane.core.recall.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

from memory_lane.domain.memory import Memory


class RecallWindow(BaseModel):
    """Dates derived from "today" that drive bucket selection."""

    today: date
    last_month_date: date = Field(..., description="today minus one calendar month, day clamped")
    window_start: date = Field(..., description="Inclusive lower bound of the around-last-month window")
    window_end: date = Field(..., description="Inclusive upper bound of the around-last-month window")

    model_config = {"frozen": True}


class TemporalBuckets(BaseModel):
    """Three independently selected, date-sorted groups of memories.

    A memory may appear in on_this_day and in one of the month buckets, but
    never in both month buckets.
    """

    on_this_day: list[Memory] = Field(default_factory=list)
    exactly_one_month_ago: list[Memory] = Field(default_factory=list)
    around_one_month_ago: list[Memory] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.on_this_day or self.exactly_one_month_ago or self.around_one_month_ago)

    @property
    def total(self) -> int:
        return len(self.on_this_day) + len(self.exactly_one_month_ago) + len(self.around_one_month_ago)


class TimeMachineResult(BaseModel):
    """Buckets plus the message generated for them ("" when nothing matched)."""

    buckets: TemporalBuckets
    window: RecallWindow
    message: str = ""
