# clustering/engine.py
"""
Screen-space clustering.

cluster() is a pure function of (points, viewport, radius): it keeps no
state between calls, so the host simply calls it again whenever the camera
or the point set changes and replaces its previous result.
"""
from typing import List, Optional, Sequence

from loguru import logger

from assetmap.model.models import GeoPoint, ProjectedPoint, RenderEntity, Viewport
from assetmap.spatial.partition import partition
from assetmap.visualizer2d.projection import Projector, ViewportProjector
from .aggregate import summarize

DEFAULT_RADIUS_PX = 50.0

_default_projector: Optional[ViewportProjector] = None


def default_projector() -> ViewportProjector:
    global _default_projector
    if _default_projector is None:
        _default_projector = ViewportProjector()
    return _default_projector


def project_points(points: Sequence[GeoPoint], viewport: Viewport,
                   projector: Optional[Projector] = None) -> List[ProjectedPoint]:
    projector = projector or default_projector()
    lons = [p.longitude for p in points]
    lats = [p.latitude for p in points]
    if hasattr(projector, "project_many"):
        xy = projector.project_many(lons, lats, viewport)
    else:
        xy = [projector.project(lon, lat, viewport) for lon, lat in zip(lons, lats)]
    return [
        ProjectedPoint(point=p, screen_x=float(x), screen_y=float(y), source_index=i)
        for i, (p, (x, y)) in enumerate(zip(points, xy))
    ]


def cluster(points: Sequence[GeoPoint], viewport: Viewport,
            radius_px: float = DEFAULT_RADIUS_PX,
            projector: Optional[Projector] = None) -> List[RenderEntity]:
    """
    Group points within `radius_px` of each other on screen and summarise each group.

    Every input point ends up in exactly one returned entity. Points with
    non-finite coordinates come back as singles.
    """
    points = list(points)
    if not points:
        return []

    projected = project_points(points, viewport, projector)
    groups = partition([(p.screen_x, p.screen_y) for p in projected], radius_px)
    entities = [summarize([projected[i] for i in g]) for g in groups]

    logger.debug(
        f"cluster: points={len(points)} entities={len(entities)} "
        f"clusters={sum(1 for e in entities if e.is_cluster)} zoom={viewport.zoom:.2f} r={radius_px}"
    )
    return entities
