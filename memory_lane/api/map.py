"""REST endpoint for map markers.

Path: GET /api/map/clusters

Fetches geotagged memories and groups them with cluster_memories so the
client renders one marker per cluster, badged with its size when > 1.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Query

from memory_lane.api.memories import resolve_owner
from memory_lane.core.geo import cluster_memories
from memory_lane.store.memory_store import MemoryStore
from memory_lane.store.partner_store import PartnerStore

logger = logging.getLogger(__name__)


def create_map_router(
    store: MemoryStore,
    partners: PartnerStore,
    default_radius_km: float = 1.0,
) -> APIRouter:
    router = APIRouter(prefix="/api/map", tags=["map"])

    @router.get("/clusters")
    async def map_clusters(
        user_id: Optional[str] = None,
        radius_km: float = Query(default=default_radius_km, ge=0.0),
    ) -> dict[str, Any]:
        owner_id = await resolve_owner(partners, user_id)
        located = await store.with_locations(owner_id=owner_id)
        clusters = cluster_memories(located, radius_km=radius_km)
        logger.debug("Map: %d located memories → %d clusters", len(located), len(clusters))
        return {
            "radius_km": radius_km,
            "clusters": [
                {
                    "id": c.id,
                    "lat": c.lat,
                    "lng": c.lng,
                    "size": c.size,
                    "memories": c.memories,
                }
                for c in clusters
            ],
            "count": len(clusters),
        }

    return router
