"""memory-lane — shared memories, map clusters and the time machine.

This is the application entry point.  It wires the MemoryStore,
PartnerStore, Summarizer, partner notifications and HTTP/WebSocket
endpoints together.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from memory_lane.api.map import create_map_router
from memory_lane.api.memories import create_memories_router
from memory_lane.api.partners import create_partners_router
from memory_lane.api.time_machine import create_time_machine_router
from memory_lane.api.ws_feed import create_feed_router
from memory_lane.config import settings
from memory_lane.narrative.summarizer import GeminiSummarizer
from memory_lane.services.connection_manager import ConnectionManager
from memory_lane.services.notifier import PartnerNotifier
from memory_lane.store.memory_store import MemoryStore
from memory_lane.store.partner_store import PartnerStore

# ── Logging ──────────────────────────────────────────────────────────────────

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)

# ── State ────────────────────────────────────────────────────────────────────

memories = MemoryStore()
partners = PartnerStore()
connections = ConnectionManager()
notifier = PartnerNotifier(partners, connections)
summarizer = GeminiSummarizer()

# ── App ──────────────────────────────────────────────────────────────────────

app = FastAPI(
    title=settings.app_name,
    description="Shared memories for two: calendar, map clusters and the time machine",
    version="0.1.0",
    debug=settings.debug,
)

# ── Routes ───────────────────────────────────────────────────────────────────

app.include_router(create_memories_router(
    memories,
    partners,
    notifier=notifier,
    recent_count=settings.recent_memories_count,
))
app.include_router(create_map_router(
    memories,
    partners,
    default_radius_km=settings.cluster_radius_km,
))
app.include_router(create_time_machine_router(
    memories,
    partners,
    summarizer,
    window_days=settings.recall_window_days,
))
app.include_router(create_partners_router(partners, memories))
app.include_router(create_feed_router(connections))


# ── Health ───────────────────────────────────────────────────────────────────

@app.get("/health")
async def health() -> dict:
    return {
        "status": "ok",
        "memories": await memories.count(),
        "feed_clients": connections.active_count,
        "summarizer_configured": summarizer.configured,
    }
