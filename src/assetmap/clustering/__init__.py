from .aggregate import cluster_id, dominant_status, status_counts, summarize
from .engine import DEFAULT_RADIUS_PX, cluster, project_points

__all__ = [
    "cluster",
    "project_points",
    "summarize",
    "dominant_status",
    "status_counts",
    "cluster_id",
    "DEFAULT_RADIUS_PX",
]
