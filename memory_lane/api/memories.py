"""REST endpoints for memory CRUD and calendar browsing.

Paths:
    POST   /api/memories                  create (notifies the partner)
    GET    /api/memories                  all, or one day with ?date=
    GET    /api/memories/recent           newest N
    GET    /api/memories/{id}             one
    PATCH  /api/memories/{id}             partial update
    DELETE /api/memories/{id}             delete
    GET    /api/calendar/{year}/{month}   dates that have memories
    GET    /api/activity-tags             suggested tags

Queries that take ?user_id= are scoped to that user's timeline (their
couple's once partnered).  Without it they span every owner.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Path, Query, Response, status

from memory_lane.domain.memory import PREDEFINED_ACTIVITY_TAGS, Memory, MemoryDraft, MemoryUpdate
from memory_lane.services.notifier import PartnerNotifier
from memory_lane.store.memory_store import MemoryNotFoundError, MemoryStore
from memory_lane.store.partner_store import PartnerStore

logger = logging.getLogger(__name__)


async def resolve_owner(partners: PartnerStore, user_id: Optional[str]) -> Optional[str]:
    """Map an optional user id to the owner id its memories are stored under."""
    if user_id is None:
        return None
    return await partners.owner_id_for(user_id)


def create_memories_router(
    store: MemoryStore,
    partners: PartnerStore,
    notifier: PartnerNotifier | None = None,
    recent_count: int = 6,
) -> APIRouter:
    """Factory that wires the memory endpoints to concrete stores."""

    router = APIRouter(prefix="/api", tags=["memories"])

    @router.post("/memories", status_code=status.HTTP_201_CREATED)
    async def create_memory(draft: MemoryDraft, user_id: str = Query(..., min_length=1)) -> Memory:
        owner_id = await partners.owner_id_for(user_id)
        memory = await store.create(draft, owner_id=owner_id, author_id=user_id)

        if notifier is not None:
            try:
                await notifier.memory_created(memory)
            except Exception as exc:
                logger.error("Partner notification failed for memory %s: %s", memory.id, exc)

        return memory

    @router.get("/memories")
    async def list_memories(
        user_id: Optional[str] = None,
        date: Optional[str] = Query(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$"),
    ) -> dict[str, Any]:
        owner_id = await resolve_owner(partners, user_id)
        if date is not None:
            memories = await store.by_date(date, owner_id=owner_id)
        else:
            memories = await store.list_all(owner_id=owner_id)
        return {"memories": memories, "count": len(memories)}

    @router.get("/memories/recent")
    async def recent_memories(
        user_id: Optional[str] = None,
        count: int = Query(default=recent_count, ge=1, le=100),
    ) -> dict[str, Any]:
        owner_id = await resolve_owner(partners, user_id)
        memories = await store.recent(count, owner_id=owner_id)
        return {"memories": memories, "count": len(memories)}

    @router.get("/memories/{memory_id}")
    async def get_memory(memory_id: str) -> Memory:
        memory = await store.get(memory_id)
        if memory is None:
            raise HTTPException(status_code=404, detail=f"Memory {memory_id} not found")
        return memory

    @router.patch("/memories/{memory_id}")
    async def update_memory(memory_id: str, changes: MemoryUpdate) -> Memory:
        try:
            return await store.update(memory_id, changes)
        except MemoryNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc))

    @router.delete("/memories/{memory_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_memory(memory_id: str) -> Response:
        try:
            await store.delete(memory_id)
        except MemoryNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc))
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @router.get("/calendar/{year}/{month}")
    async def calendar_month(
        year: int = Path(..., ge=1, le=9999),
        month: int = Path(..., ge=1, le=12),
        user_id: Optional[str] = None,
    ) -> dict[str, Any]:
        owner_id = await resolve_owner(partners, user_id)
        dates = await store.dates_in_month(year, month, owner_id=owner_id)
        return {"year": year, "month": month, "dates": dates}

    @router.get("/activity-tags")
    async def activity_tags() -> dict[str, Any]:
        return {"tags": list(PREDEFINED_ACTIVITY_TAGS)}

    return router
