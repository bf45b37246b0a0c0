"""REST endpoint for the time machine.

Path: GET /api/time-machine

Recall runs on a snapshot of the user's timeline; the Gemini summary runs in
a worker thread so a slow model never blocks the event loop.  An empty
result carries an empty message and the client hides the card.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from fastapi.concurrency import run_in_threadpool

from memory_lane.api.memories import resolve_owner
from memory_lane.core.recall import RecallRangeError, recall_window
from memory_lane.foundation.clock import local_today
from memory_lane.narrative.summarizer import Summarizer
from memory_lane.narrative.time_machine import build_time_machine
from memory_lane.store.memory_store import MemoryStore
from memory_lane.store.partner_store import PartnerStore

logger = logging.getLogger(__name__)


def create_time_machine_router(
    store: MemoryStore,
    partners: PartnerStore,
    summarizer: Summarizer,
    window_days: int = 3,
) -> APIRouter:
    router = APIRouter(prefix="/api", tags=["time-machine"])

    @router.get("/time-machine")
    async def time_machine(
        user_id: Optional[str] = None,
        today: Optional[date] = None,
    ) -> dict[str, Any]:
        day = today or local_today()
        try:
            recall_window(day, window_days)
        except RecallRangeError as exc:
            raise HTTPException(status_code=422, detail=str(exc))

        owner_id = await resolve_owner(partners, user_id)
        memories = await store.list_all(owner_id=owner_id)
        result = await run_in_threadpool(
            build_time_machine,
            memories,
            day,
            summarizer,
            window_days,
        )
        return {
            "on_this_day": result.buckets.on_this_day,
            "exactly_one_month_ago": result.buckets.exactly_one_month_ago,
            "around_one_month_ago": result.buckets.around_one_month_ago,
            "window": result.window,
            "message": result.message,
            "empty": result.buckets.is_empty,
        }

    return router
