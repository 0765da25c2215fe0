# spatial/grid.py
from typing import Dict, Iterator, List, Tuple
import math
import numpy as np

Cell = Tuple[int, int]

# half of the 3x3 neighbourhood; the other half is covered from the neighbour's side
_FORWARD = ((0, 0), (1, -1), (1, 0), (1, 1), (0, 1))


def build_grid(xy: np.ndarray, cell_size: float) -> Dict[Cell, List[int]]:
    """Bucket finite points into square cells of `cell_size` pixels."""
    grid: Dict[Cell, List[int]] = {}
    for i, (x, y) in enumerate(xy):
        if not (math.isfinite(x) and math.isfinite(y)):
            continue  # never within range of anything
        key = (math.floor(x / cell_size), math.floor(y / cell_size))
        grid.setdefault(key, []).append(i)
    return grid


def candidate_pairs(xy: np.ndarray, radius: float) -> Iterator[Tuple[int, int]]:
    """
    Yield (i, j), i < j, for every pair that may lie within `radius`.

    With cell size = radius, two points closer than radius are always in the
    same or adjacent cells, so only those cells are compared.
    """
    if radius <= 0:
        # only exact collisions can match
        seen: Dict[Tuple[float, float], List[int]] = {}
        for i, (x, y) in enumerate(xy):
            if math.isfinite(x) and math.isfinite(y):
                seen.setdefault((float(x), float(y)), []).append(i)
        for members in seen.values():
            for a in range(len(members)):
                for b in range(a + 1, len(members)):
                    yield members[a], members[b]
        return

    finite = [i for i, (x, y) in enumerate(xy) if math.isfinite(x) and math.isfinite(y)]
    extent = float(max((max(abs(xy[i][0]), abs(xy[i][1])) for i in finite), default=0.0))
    if not math.isfinite(extent / radius):
        # cell indices would overflow; every finite pair is a candidate
        for a in range(len(finite)):
            for b in range(a + 1, len(finite)):
                yield finite[a], finite[b]
        return

    grid = build_grid(xy, radius)
    for (cx, cy), members in grid.items():
        for dx, dy in _FORWARD:
            other = members if (dx, dy) == (0, 0) else grid.get((cx + dx, cy + dy))
            if not other:
                continue
            for a_pos, i in enumerate(members):
                start = a_pos + 1 if other is members else 0
                for j in other[start:]:
                    yield (i, j) if i < j else (j, i)
