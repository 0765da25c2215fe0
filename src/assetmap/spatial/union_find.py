# spatial/union_find.py
from typing import Dict, List


class DisjointSet:
    """
    Union-find over the indices 0..n-1.

    The forest is a flat list of parent indices (a root is its own parent).
    find() compresses paths, union() links the smaller tree under the larger.
    """

    def __init__(self, n: int):
        self._parent = list(range(n))
        self._size = [1] * n

    def __len__(self) -> int:
        return len(self._parent)

    @property
    def parents(self) -> List[int]:
        return list(self._parent)

    def find(self, i: int) -> int:
        root = i
        while self._parent[root] != root:
            root = self._parent[root]
        # path compression
        while self._parent[i] != root:
            self._parent[i], i = root, self._parent[i]
        return root

    def union(self, i: int, j: int) -> bool:
        """Merge the sets of i and j. Returns False if they were already joined."""
        ri, rj = self.find(i), self.find(j)
        if ri == rj:
            return False
        if self._size[ri] < self._size[rj]:
            ri, rj = rj, ri
        self._parent[rj] = ri
        self._size[ri] += self._size[rj]
        return True

    def connected(self, i: int, j: int) -> bool:
        return self.find(i) == self.find(j)

    def groups(self) -> List[List[int]]:
        """Sets in order of their smallest member, members ascending."""
        by_root: Dict[int, List[int]] = {}
        for i in range(len(self._parent)):
            by_root.setdefault(self.find(i), []).append(i)
        return list(by_root.values())
