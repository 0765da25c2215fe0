"""
assetmap: screen-space clustering of asset status points for map views.

    from assetmap import GeoPoint, Viewport, cluster
    entities = cluster(points, Viewport(zoom=14), radius_px=50)
"""
from assetmap.model.models import (
    Centroid,
    ClusterEntity,
    GeoPoint,
    ProjectedPoint,
    RenderEntity,
    SingleEntity,
    StatusTag,
    Viewport,
)
from assetmap.clustering.engine import DEFAULT_RADIUS_PX, cluster

__all__ = [
    "cluster",
    "DEFAULT_RADIUS_PX",
    "GeoPoint",
    "Viewport",
    "ProjectedPoint",
    "StatusTag",
    "Centroid",
    "SingleEntity",
    "ClusterEntity",
    "RenderEntity",
]
