"""In-memory Memory store with async-safe access.

Design notes:
    - An asyncio.Lock guards every read and mutation so concurrent request
      handlers always see a consistent snapshot.
    - Stored Memory objects are immutable; updates replace them.
    - Queries return plain lists (snapshots).  Callers run clustering and
      recall over those snapshots outside the lock.
    - Scoping by owner_id is optional on every query; None means all owners.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from memory_lane.domain.memory import Memory, MemoryDraft, MemoryUpdate
from memory_lane.foundation.clock import utc_now
from memory_lane.foundation.identifiers import new_id

logger = logging.getLogger(__name__)


class MemoryNotFoundError(KeyError):
    """Raised when a memory id does not exist in the store."""

    def __init__(self, memory_id: str) -> None:
        super().__init__(memory_id)
        self.memory_id = memory_id

    def __str__(self) -> str:
        return f"Memory {self.memory_id} not found"


class MemoryStore:
    """Async-safe, in-memory store for memories."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._memories: dict[str, Memory] = {}

    # ── Mutations ────────────────────────────────────────────────────────

    async def create(self, draft: MemoryDraft, owner_id: str, author_id: str) -> Memory:
        """Store a new memory built from *draft* and return it."""
        now = utc_now()
        memory = Memory(
            id=new_id(),
            owner_id=owner_id,
            author_id=author_id,
            created_at=now,
            updated_at=now,
            **draft.model_dump(),
        )
        async with self._lock:
            self._memories[memory.id] = memory
        logger.info("Created memory %s for owner %s (date=%s)", memory.id, owner_id, memory.date)
        return memory

    async def update(self, memory_id: str, changes: MemoryUpdate) -> Memory:
        """Apply only the fields set on *changes*.  Raises MemoryNotFoundError."""
        async with self._lock:
            current = self._memories.get(memory_id)
            if current is None:
                raise MemoryNotFoundError(memory_id)
            merged = {**current.model_dump(), **changes.changes(), "updated_at": utc_now()}
            updated = Memory.model_validate(merged)
            self._memories[memory_id] = updated
        logger.info("Updated memory %s (%s)", memory_id, ", ".join(sorted(changes.changes())) or "no fields")
        return updated

    async def delete(self, memory_id: str) -> None:
        async with self._lock:
            if self._memories.pop(memory_id, None) is None:
                raise MemoryNotFoundError(memory_id)
        logger.info("Deleted memory %s", memory_id)

    async def reassign_owner(self, from_owner_id: str, to_owner_id: str) -> int:
        """Move every memory owned by *from_owner_id* to *to_owner_id*.  Returns the count."""
        async with self._lock:
            moved = [m for m in self._memories.values() if m.owner_id == from_owner_id]
            for memory in moved:
                self._memories[memory.id] = memory.model_copy(update={"owner_id": to_owner_id})
        if moved:
            logger.info("Moved %d memories from owner %s to %s", len(moved), from_owner_id, to_owner_id)
        return len(moved)

    # ── Queries ──────────────────────────────────────────────────────────

    async def get(self, memory_id: str) -> Memory | None:
        async with self._lock:
            return self._memories.get(memory_id)

    async def count(self) -> int:
        async with self._lock:
            return len(self._memories)

    async def list_all(self, owner_id: Optional[str] = None) -> list[Memory]:
        """All memories, newest date first."""
        return await self._select(owner_id, newest_first=True)

    async def by_date(self, date: str, owner_id: Optional[str] = None) -> list[Memory]:
        """Memories on one calendar day, most recently created first."""
        selected = await self._select(owner_id, where=lambda m: m.date == date)
        return sorted(selected, key=lambda m: m.created_at, reverse=True)

    async def recent(self, count: int = 6, owner_id: Optional[str] = None) -> list[Memory]:
        return (await self._select(owner_id, newest_first=True))[:count]

    async def dates_in_month(self, year: int, month: int, owner_id: Optional[str] = None) -> list[str]:
        """Distinct dates with at least one memory in the given month, ascending."""
        start = f"{year:04d}-{month:02d}-01"
        end = f"{year:04d}-{month:02d}-31"
        selected = await self._select(owner_id, where=lambda m: start <= m.date <= end)
        return sorted({m.date for m in selected})

    async def with_locations(self, owner_id: Optional[str] = None) -> list[Memory]:
        """Geotagged memories only, newest date first (the map's input)."""
        return await self._select(owner_id, where=lambda m: m.location is not None, newest_first=True)

    # ── Internals ────────────────────────────────────────────────────────

    async def _select(
        self,
        owner_id: Optional[str],
        where: Callable[[Memory], bool] | None = None,
        newest_first: bool = False,
    ) -> list[Memory]:
        async with self._lock:
            selected = [
                m for m in self._memories.values()
                if (owner_id is None or m.owner_id == owner_id)
                and (where is None or where(m))
            ]
        if newest_first:
            selected.sort(key=lambda m: m.date, reverse=True)
        return selected
