"""Tests for the clustering engine."""

from __future__ import annotations

import math

import numpy as np
import pytest

from assetmap import DEFAULT_RADIUS_PX, GeoPoint, StatusTag, Viewport, cluster
from assetmap.clustering.engine import project_points


class LinearProjector:
    """Flat projector with a fixed px/degree scale; only implements project()."""

    def __init__(self, px_per_degree: float):
        self.k = px_per_degree

    def project(self, lon, lat, viewport):
        x = viewport.width / 2 + (lon - viewport.longitude) * self.k
        y = viewport.height / 2 - (lat - viewport.latitude) * self.k
        return x, y


def membership(entities) -> list[tuple[int, ...]]:
    return sorted(tuple(sorted(e.source_indices)) for e in entities)


def random_points(n: int, seed: int = 3) -> list[GeoPoint]:
    rng = np.random.default_rng(seed)
    statuses = ["healthy", "predicted failure", "down for repairs", "???"]
    return [
        GeoPoint(
            id=str(i),
            latitude=37.77 + rng.normal(0, 0.004),
            longitude=-122.42 + rng.normal(0, 0.004),
            status=statuses[int(rng.integers(0, 4))],
        )
        for i in range(n)
    ]


def check_scenario(entities) -> None:
    clusters = [e for e in entities if e.is_cluster]
    singles = [e for e in entities if not e.is_cluster]
    assert len(clusters) == 1
    assert len(singles) == 3
    c = clusters[0]
    assert c.source_indices == (0, 1, 2)
    assert c.member_count == 3
    assert c.dominant_status is StatusTag.HEALTHY
    assert c.status_counts == {StatusTag.HEALTHY: 3}
    assert c.id == "cluster-0-1-2"
    assert c.centroid.latitude == pytest.approx((37.7749 + 37.774 + 37.7735) / 3)
    assert c.centroid.longitude == pytest.approx((-122.4194 - 122.419 - 122.4185) / 3)
    assert sorted(s.source_index for s in singles) == [3, 4, 5]
    assert [s.point.status for s in sorted(singles, key=lambda s: s.source_index)] == [
        StatusTag.PREDICTED_FAILURE,
        StatusTag.PREDICTED_FAILURE,
        StatusTag.DOWN_FOR_REPAIRS,
    ]


def test_default_radius() -> None:
    assert DEFAULT_RADIUS_PX == 50


def test_san_francisco_scenario(sf_points, sf_viewport) -> None:
    check_scenario(cluster(sf_points, sf_viewport, 50))


def test_san_francisco_scenario_zoom_13(sf_points, sf_viewport) -> None:
    check_scenario(cluster(sf_points, sf_viewport.replace(zoom=13), 20))


def test_san_francisco_scenario_with_plain_projector(sf_points, sf_viewport) -> None:
    check_scenario(cluster(sf_points, sf_viewport.replace(zoom=13), 50, LinearProjector(35000)))


def test_zoomed_out_everything_merges(sf_points, sf_viewport) -> None:
    entities = cluster(sf_points, sf_viewport.replace(zoom=10), 50)
    assert len(entities) == 1
    assert entities[0].member_count == 6
    assert entities[0].dominant_status is StatusTag.HEALTHY


def test_zero_radius_yields_singles(sf_points, sf_viewport) -> None:
    entities = cluster(sf_points, sf_viewport, 0)
    assert len(entities) == 6
    assert not any(e.is_cluster for e in entities)


def test_negative_radius_yields_singles(sf_points, sf_viewport) -> None:
    entities = cluster(sf_points, sf_viewport, -10)
    assert not any(e.is_cluster for e in entities)


def test_empty_input() -> None:
    assert cluster([], Viewport()) == []


def test_single_point_is_single() -> None:
    p = GeoPoint("only", 37.77, -122.42, "healthy")
    for radius in (0, 50, 1e9):
        (e,) = cluster([p], Viewport(), radius)
        assert e.is_cluster is False
        assert e.point is p


def test_invalid_geometry_degrades_to_singles(sf_points, sf_viewport) -> None:
    bad = [
        GeoPoint("nan", math.nan, -122.4194, "healthy"),
        GeoPoint("inf", 37.7749, math.inf, "healthy"),
        GeoPoint("nan2", math.nan, math.nan, "healthy"),
        GeoPoint("nan3", math.nan, math.nan, "healthy"),
    ]
    entities = cluster(sf_points + bad, sf_viewport, 50)
    by_index = {i: e for e in entities for i in e.source_indices}
    for i in range(6, 10):
        assert by_index[i].is_cluster is False
    assert membership(entities) == [(0, 1, 2), (3,), (4,), (5,), (6,), (7,), (8,), (9,)]


def test_identical_points_cluster_at_zero_radius() -> None:
    pts = [GeoPoint(str(i), 37.77, -122.42, "healthy") for i in range(3)]
    (e,) = cluster(pts, Viewport(), 0)
    assert e.is_cluster and e.member_count == 3


def test_partition_property() -> None:
    pts = random_points(150)
    for zoom in (11, 13, 15):
        entities = cluster(pts, Viewport(longitude=-122.42, latitude=37.77, zoom=zoom), 40)
        seen = [i for e in entities for i in e.source_indices]
        assert sorted(seen) == list(range(len(pts)))
        assert sum(e.member_count for e in entities) == len(pts)
        for e in entities:
            assert e.is_cluster == (e.member_count > 1)


def test_radius_monotonicity() -> None:
    pts = random_points(120, seed=11)
    vp = Viewport(longitude=-122.42, latitude=37.77, zoom=14)
    previous = None
    for radius in (0, 5, 15, 30, 60, 120):
        groups = [set(e.source_indices) for e in cluster(pts, vp, radius)]
        absorbed = sum(len(g) for g in groups if len(g) > 1)
        if previous is not None:
            prev_groups, prev_absorbed = previous
            assert absorbed >= prev_absorbed
            for g in prev_groups:
                assert any(g <= h for h in groups)
        previous = (groups, absorbed)


def test_idempotent() -> None:
    pts = random_points(80, seed=5)
    vp = Viewport(longitude=-122.42, latitude=37.77, zoom=14, pitch=35, bearing=-20)
    first, second = cluster(pts, vp, 45), cluster(pts, vp, 45)
    assert first == second


def test_groups_follow_input_order(sf_points, sf_viewport) -> None:
    entities = cluster(sf_points, sf_viewport, 50)
    firsts = [e.source_indices[0] for e in entities]
    assert firsts == sorted(firsts)


def test_tie_break_follows_input_order() -> None:
    coords = [(37.77, -122.42), (37.77001, -122.42), (37.77002, -122.42), (37.77003, -122.42)]
    statuses = ["down for repairs", "healthy", "healthy", "down for repairs"]
    pts = [GeoPoint(str(i), lat, lon, s) for i, ((lat, lon), s) in enumerate(zip(coords, statuses))]
    (e,) = cluster(pts, Viewport(longitude=-122.42, latitude=37.77, zoom=14), 50)
    assert e.status_counts == {StatusTag.DOWN_FOR_REPAIRS: 2, StatusTag.HEALTHY: 2}
    assert e.dominant_status is StatusTag.DOWN_FOR_REPAIRS


def test_input_is_not_mutated(sf_points, sf_viewport) -> None:
    before = list(sf_points)
    cluster(sf_points, sf_viewport, 50)
    assert sf_points == before


def test_accepts_generators(sf_points, sf_viewport) -> None:
    entities = cluster((p for p in sf_points), sf_viewport, 50)
    assert sum(e.member_count for e in entities) == 6


def test_project_points_keeps_source_index(sf_points, sf_viewport) -> None:
    projected = project_points(sf_points, sf_viewport, LinearProjector(1000))
    assert [p.source_index for p in projected] == list(range(6))
    assert projected[0].point is sf_points[0]
    assert projected[0].screen_x == pytest.approx(400 + (-122.4194 + 122.4185) * 1000)


def test_logs_each_pass(sf_points, sf_viewport, log_records) -> None:
    cluster(sf_points, sf_viewport, 50)
    assert any("clusters=1" in r["message"] for r in log_records)


@pytest.mark.parametrize("size", [(0, 0), (800, 0), (0, 600)])
def test_zero_size_viewport_yields_singles(sf_points, sf_viewport, size) -> None:
    vp = sf_viewport.replace(width=size[0], height=size[1])
    entities = cluster(sf_points, vp, 50)
    assert membership(entities) == [(i,) for i in range(6)]
    assert all(e.is_cluster is False for e in entities)
