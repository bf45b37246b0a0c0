"""Tests for haversine distance and map clustering.

Distances along a meridian are exact (haversine reduces to R * dLat), which
makes the radius boundary testable without tolerances.
"""

import math

import pytest

from memory_lane.core.geo import EARTH_RADIUS_KM, cluster_memories, haversine_km
from memory_lane.domain.memory import Memory

from tests.test_memory import _located, _memory


def _ids(clusters) -> list[list[str]]:
    return [[m.id for m in c.memories] for c in clusters]


# ── Haversine ────────────────────────────────────────────────────────────────


class TestHaversine:
    def test_same_point_is_zero(self) -> None:
        assert haversine_km(19.076, 72.8777, 19.076, 72.8777) == 0.0

    def test_one_degree_of_latitude(self) -> None:
        assert haversine_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(EARTH_RADIUS_KM * math.pi / 180)

    def test_symmetric(self) -> None:
        a = haversine_km(19.076, 72.8777, 19.2, 72.9)
        b = haversine_km(19.2, 72.9, 19.076, 72.8777)
        assert a == pytest.approx(b)

    def test_nearby_points_in_mumbai(self) -> None:
        assert haversine_km(19.0760, 72.8777, 19.0761, 72.8778) < 0.05

    def test_distant_points_in_mumbai(self) -> None:
        d = haversine_km(19.0760, 72.8777, 19.2000, 72.9000)
        assert 10.0 < d < 20.0

    def test_antipodes_are_half_circumference(self) -> None:
        assert haversine_km(0.0, 0.0, 0.0, 180.0) == pytest.approx(math.pi * EARTH_RADIUS_KM)

    def test_nan_propagates(self) -> None:
        assert math.isnan(haversine_km(float("nan"), 0.0, 0.0, 0.0))

    def test_near_antipodal_rounding_does_not_raise(self) -> None:
        d = haversine_km(66.16849958870057, -92.19208432063249, -66.16849958870057, 87.80791567936751)
        assert d == pytest.approx(math.pi * EARTH_RADIUS_KM)

    def test_out_of_range_latitude_does_not_raise(self) -> None:
        d = haversine_km(90.5, 0.0, 89.5, 180.0)
        assert not math.isnan(d)
        assert d >= 0.0


# ── Clustering ───────────────────────────────────────────────────────────────


class TestClusterMemories:
    def test_empty_input(self) -> None:
        assert cluster_memories([]) == []

    def test_unlocated_memories_produce_no_clusters(self) -> None:
        assert cluster_memories([_memory(id="a"), _memory(id="b")]) == []

    def test_mumbai_scenario(self) -> None:
        memories = [
            _located("a", 19.0760, 72.8777),
            _located("b", 19.0761, 72.8778),
            _located("c", 19.2000, 72.9000),
        ]
        clusters = cluster_memories(memories, radius_km=1)
        assert _ids(clusters) == [["a", "b"], ["c"]]

    def test_cluster_anchored_at_seed(self) -> None:
        memories = [_located("a", 19.0760, 72.8777), _located("b", 19.0761, 72.8778)]
        cluster = cluster_memories(memories)[0]
        assert cluster.id == "cluster-a"
        assert (cluster.lat, cluster.lng) == (19.0760, 72.8777)
        assert cluster.seed.id == "a"
        assert cluster.size == 2

    def test_default_radius_is_one_km(self) -> None:
        # ~0.89 km apart along the equator
        memories = [_located("a", 0.0, 0.0), _located("b", 0.0, 0.008)]
        assert _ids(cluster_memories(memories)) == [["a", "b"]]

    def test_radius_boundary_is_inclusive(self) -> None:
        a, b = _located("a", 10.0, 20.0), _located("b", 10.009, 20.0)
        d = haversine_km(10.0, 20.0, 10.009, 20.0)
        assert _ids(cluster_memories([a, b], radius_km=d)) == [["a", "b"]]

    def test_just_beyond_radius_is_excluded(self) -> None:
        a, b = _located("a", 10.0, 20.0), _located("b", 10.009, 20.0)
        d = haversine_km(10.0, 20.0, 10.009, 20.0)
        assert _ids(cluster_memories([a, b], radius_km=d - 1e-9)) == [["a"], ["b"]]

    def test_clusters_are_not_transitive(self) -> None:
        memories = [
            _located("a", 0.0, 0.0),
            _located("b", 0.008, 0.0),
            _located("c", 0.016, 0.0),
        ]
        assert haversine_km(0.0, 0.0, 0.008, 0.0) <= 1.0
        assert haversine_km(0.008, 0.0, 0.016, 0.0) <= 1.0
        assert haversine_km(0.0, 0.0, 0.016, 0.0) > 1.0
        clusters = cluster_memories(memories, radius_km=1.0)
        assert _ids(clusters) == [["a", "b"], ["c"]]

    def test_order_dependence(self) -> None:
        """Seeding from the middle point swallows both neighbours."""
        memories = [
            _located("b", 0.008, 0.0),
            _located("a", 0.0, 0.0),
            _located("c", 0.016, 0.0),
        ]
        assert _ids(cluster_memories(memories, radius_km=1.0)) == [["b", "a", "c"]]

    def test_clusters_ordered_by_seed_encounter(self) -> None:
        memories = [
            _located("a", 0.0, 0.0),
            _located("far", 10.0, 10.0),
            _memory(id="nowhere"),
            _located("near-a", 0.001, 0.0),
            _located("near-far", 10.001, 10.0),
        ]
        assert _ids(cluster_memories(memories)) == [["a", "near-a"], ["far", "near-far"]]

    def test_zero_radius_merges_only_coincident_points(self) -> None:
        memories = [
            _located("a", 5.0, 5.0),
            _located("b", 5.0, 5.0),
            _located("c", 5.0, 5.0001),
        ]
        assert _ids(cluster_memories(memories, radius_km=0)) == [["a", "b"], ["c"]]

    def test_huge_radius_makes_one_cluster(self) -> None:
        memories = [_located("a", 0.0, 0.0), _located("b", 45.0, 90.0), _located("c", -60.0, -170.0)]
        assert _ids(cluster_memories(memories, radius_km=50_000)) == [["a", "b", "c"]]

    def test_antipodal_pair_with_huge_radius(self) -> None:
        memories = [
            _located("a", 66.16849958870057, -92.19208432063249),
            _located("b", -66.16849958870057, 87.80791567936751),
        ]
        assert _ids(cluster_memories(memories, radius_km=50_000)) == [["a", "b"]]

    def test_nan_coordinates_end_up_alone(self) -> None:
        memories = [
            _located("a", 0.0, 0.0),
            _located("broken", float("nan"), 0.0),
            _located("c", 0.0, 0.0),
        ]
        assert _ids(cluster_memories(memories)) == [["a", "c"], ["broken"]]

    def test_every_located_memory_in_exactly_one_cluster(self) -> None:
        memories: list[Memory] = []
        for i in range(30):
            if i % 7 == 0:
                memories.append(_memory(id=f"m{i}"))
            else:
                memories.append(_located(f"m{i}", (i % 5) * 0.004, (i % 3) * 0.006))

        clusters = cluster_memories(memories, radius_km=0.5)
        seen = [m.id for c in clusters for m in c.memories]
        located = [m.id for m in memories if m.location is not None]
        assert sorted(seen) == sorted(located)
        assert len(seen) == len(set(seen))

    def test_deterministic(self) -> None:
        memories = [_located(f"m{i}", i * 0.003, i * 0.002) for i in range(20)]
        first = cluster_memories(memories, radius_km=0.7)
        second = cluster_memories(memories, radius_km=0.7)
        assert [c.model_dump() for c in first] == [c.model_dump() for c in second]

    def test_payload_passes_through(self) -> None:
        m = _located("a", 1.0, 1.0, title="Picnic", activity_tags=["Family"])
        cluster = cluster_memories([m])[0]
        assert cluster.memories[0] is m
