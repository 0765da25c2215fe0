"""Shared fixtures."""

from __future__ import annotations

import sys

import matplotlib

matplotlib.use("Agg")

import pytest
from loguru import logger

from assetmap.model.models import GeoPoint, Viewport

SF_COORDS = [
    (37.7749, -122.4194),
    (37.774, -122.419),
    (37.7735, -122.4185),
    (37.772, -122.418),
    (37.77, -122.4175),
    (37.768, -122.417),
]
SF_STATUSES = [
    "healthy",
    "healthy",
    "healthy",
    "predicted failure",
    "predicted failure",
    "down for repairs",
]


@pytest.fixture(autouse=True)
def _reset_loguru():
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def log_records():
    records: list[dict] = []
    handler_id = logger.add(lambda m: records.append(m.record), level="DEBUG", format="{message}")
    yield records
    logger.remove(handler_id)


@pytest.fixture
def sf_points() -> list[GeoPoint]:
    return [
        GeoPoint(id=f"p{i}", latitude=lat, longitude=lon, status=s, display_name=f"Point {i}")
        for i, ((lat, lon), s) in enumerate(zip(SF_COORDS, SF_STATUSES))
    ]


@pytest.fixture
def sf_viewport() -> Viewport:
    # at zoom 14.5 the first three points chain within 50px, the rest stay apart
    return Viewport(longitude=-122.4185, latitude=37.7715, zoom=14.5, width=800, height=600)

