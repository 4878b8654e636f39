"""Disjoint-set forest over station indices."""


class DisjointSet:
    """
    Union-find with path compression.

    Elements are the integers 0..n-1. The parent of a root is itself.
    """

    def __init__(self, size: int):
        self.parent = list(range(size))
        self.size = [1] * size

    def find(self, i: int) -> int:
        """Return the root of i, compressing the path on the way."""
        root = i
        while self.parent[root] != root:
            root = self.parent[root]

        while self.parent[i] != root:
            self.parent[i], i = root, self.parent[i]

        return root

    def union(self, a: int, b: int) -> int:
        """
        Merge the sets containing a and b.

        The root of the larger set survives (a's root on ties).

        Returns:
            Root of the merged set
        """
        root_a = self.find(a)
        root_b = self.find(b)
        if root_a == root_b:
            return root_a

        if self.size[root_a] < self.size[root_b]:
            root_a, root_b = root_b, root_a

        self.parent[root_b] = root_a
        self.size[root_a] += self.size[root_b]
        return root_a
