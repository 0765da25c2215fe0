"""
Screen-space grouping.

- DisjointSet: flat-array union-find with path compression
- partition: chain points that lie within a pixel radius of each other
- grid: hash-grid candidate pairs for large point sets
"""
from .partition import GRID_THRESHOLD, partition
from .union_find import DisjointSet

__all__ = ["DisjointSet", "partition", "GRID_THRESHOLD"]
