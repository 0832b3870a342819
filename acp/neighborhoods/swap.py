"""Swap neighbourhood - exchange the items of two periods.

For an item array of n periods one pass proposes every unordered pair
``(i, j)``, ``i < j``, exactly once: n*(n-1)/2 moves, none when n <= 1.
Pairs come in lexicographic order (inner index advances first).
"""

from itertools import combinations
from typing import Iterator, Sequence

from acp.neighborhoods.common import Move


class SwapOperator:
    """Pairwise exchange of ``item[i]`` and ``item[j]``."""

    name = "swap"

    def start(self, items: Sequence[int]) -> Iterator[Move]:
        snapshot = tuple(items)
        for i, j in combinations(range(len(snapshot)), 2):
            yield Move(self.name, {i: snapshot[j], j: snapshot[i]})
