"""Proximity clustering of geotagged memories for the map view.

Algorithm (single-pass greedy, deterministic, order-dependent):
    1. Walk memories in input order, skipping unlocated or already-assigned ones.
    2. The first unassigned located memory seeds a new cluster at its own
       coordinates.
    3. Sweep the WHOLE list (before and after the seed) and pull in every
       unassigned located memory within radius_km of the seed.
    4. Repeat until the walk ends.

Clusters are seed-radius balls, not chains: a memory close to a member but
farther than radius_km from the seed is left for a later cluster.  Cluster
coordinates are the seed's, never a centroid.

Coordinates are not validated.  A NaN distance never satisfies
``distance <= radius_km``, so a memory with NaN coordinates always ends up
alone in its own cluster.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

from memory_lane.domain.cluster import MemoryCluster
from memory_lane.domain.memory import Memory

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0


def _deg2rad(deg: float) -> float:
    return deg * (math.pi / 180)


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in kilometres between two lat/lng points."""
    d_lat = _deg2rad(lat2 - lat1)
    d_lng = _deg2rad(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) * math.sin(d_lat / 2)
        + math.cos(_deg2rad(lat1)) * math.cos(_deg2rad(lat2))
        * math.sin(d_lng / 2) * math.sin(d_lng / 2)
    )
    # Rounding can push a just past [0, 1] (near-antipodal or out-of-range
    # input).  NaN fails both comparisons and is left to propagate.
    if a > 1.0:
        a = 1.0
    elif a < 0.0:
        a = 0.0
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def cluster_memories(memories: Sequence[Memory], radius_km: float = 1.0) -> list[MemoryCluster]:
    """Group located memories into seed-anchored clusters of radius *radius_km*.

    Every located memory lands in exactly one cluster; unlocated memories in
    none.  Clusters are ordered by when their seed was encountered.
    """
    clusters: list[MemoryCluster] = []
    assigned: set[str] = set()

    for seed in memories:
        if seed.location is None or seed.id in assigned:
            continue

        members = [seed]
        assigned.add(seed.id)

        for other in memories:
            if other.location is None or other.id in assigned:
                continue
            distance = haversine_km(
                seed.location.lat,
                seed.location.lng,
                other.location.lat,
                other.location.lng,
            )
            if distance <= radius_km:
                members.append(other)
                assigned.add(other.id)

        clusters.append(MemoryCluster(
            id=f"cluster-{seed.id}",
            lat=seed.location.lat,
            lng=seed.location.lng,
            memories=members,
        ))

    logger.debug(
        "Clustered %d memories into %d cluster(s) (radius=%.3f km)",
        len(assigned), len(clusters), radius_km,
    )
    return clusters
