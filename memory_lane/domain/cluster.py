"""MemoryCluster — a group of nearby memories rendered as one map marker."""

from __future__ import annotations

from pydantic import BaseModel, Field

from memory_lane.domain.memory import Memory


class MemoryCluster(BaseModel):
    """Memories within a fixed radius of a single seed memory.

    `lat`/`lng` are the seed's coordinates, not a centroid of the members.
    The seed is always `memories[0]`.
    """

    id: str = Field(..., description="Derived from the seed memory id")
    lat: float
    lng: float
    memories: list[Memory] = Field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.memories)

    @property
    def seed(self) -> Memory:
        return self.memories[0]
