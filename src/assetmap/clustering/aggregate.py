# clustering/aggregate.py
from collections import Counter
from typing import Iterable, Sequence

import numpy as np

from assetmap.model.models import (
    Centroid, ClusterEntity, ProjectedPoint, RenderEntity, SingleEntity, StatusTag,
)


def status_counts(statuses: Iterable[StatusTag]) -> Counter:
    """Frequency table, keys in order of first appearance."""
    return Counter(statuses)


def dominant_status(statuses: Iterable[StatusTag]) -> StatusTag:
    """
    Most frequent status. On a tie the status seen first wins, e.g.
    [down, healthy, healthy, down] -> down.
    """
    counts = status_counts(statuses)
    if not counts:
        return StatusTag.UNKNOWN
    # max() keeps the first maximal key, and Counter keeps insertion order
    return max(counts, key=counts.__getitem__)


def cluster_id(source_indices: Iterable[int]) -> str:
    return "cluster-" + "-".join(str(i) for i in sorted(source_indices))


def summarize(group: Sequence[ProjectedPoint]) -> RenderEntity:
    """One render entity for one partition group (members in input order)."""
    if not group:
        raise ValueError("empty group")
    if len(group) == 1:
        only = group[0]
        return SingleEntity(point=only.point, source_index=only.source_index)

    points = tuple(m.point for m in group)
    indices = tuple(m.source_index for m in group)
    counts = status_counts(p.status for p in points)
    return ClusterEntity(
        id=cluster_id(indices),
        centroid=Centroid(
            latitude=float(np.mean([p.latitude for p in points])),
            longitude=float(np.mean([p.longitude for p in points])),
        ),
        status_counts=dict(counts),
        dominant_status=dominant_status(p.status for p in points),
        member_count=len(points),
        members=points,
        source_indices=indices,
    )
