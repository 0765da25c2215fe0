# spatial/partition.py
from typing import Iterable, List, Tuple
import numpy as np
from loguru import logger

from .grid import candidate_pairs
from .union_find import DisjointSet

# above this many points the pairwise pass is restricted by a hash grid
GRID_THRESHOLD = 512


def _brute_force_pairs(xy: np.ndarray, radius: float) -> Iterable[Tuple[int, int]]:
    with np.errstate(invalid="ignore"):
        diff = xy[:, None, :] - xy[None, :, :]
        dist = np.hypot(diff[..., 0], diff[..., 1])
        close = np.triu(dist <= radius, k=1)
    return map(tuple, np.argwhere(close))


def partition(xy, radius: float, *, use_grid: bool | None = None) -> List[List[int]]:
    """
    Split points into groups whose members are chained by steps of at most
    `radius` pixels.

    xy: (N, 2) screen coordinates. Non-finite rows never match anything.
    Returns index groups in order of their first member, members ascending.
    """
    xy = np.asarray(xy, dtype=float).reshape(-1, 2)
    n = len(xy)
    if n == 0:
        return []

    if not radius >= 0:  # negative or NaN
        logger.warning(f"cluster radius {radius} treated as 0")
        radius = 0.0

    if use_grid is None:
        use_grid = n > GRID_THRESHOLD

    dsu = DisjointSet(n)
    if use_grid:
        for i, j in candidate_pairs(xy, radius):
            if dsu.connected(i, j):
                continue
            if np.hypot(*(xy[i] - xy[j])) <= radius:
                dsu.union(i, j)
    else:
        for i, j in _brute_force_pairs(xy, radius):
            dsu.union(int(i), int(j))

    return dsu.groups()
