"""Random large-neighbourhood destruction.

Each move frees a random subset of ``size`` periods (all of them when the
array is shorter); the remaining periods stay fixed and the inner search of
the driver re-assigns the freed ones.
"""

from __future__ import annotations

import random
from typing import Iterator, Optional, Sequence

from acp.neighborhoods.common import Move


class RandomLnsOperator:
    """Free ``size`` random periods per move, ``pass_length`` moves per pass."""

    name = "lns"

    def __init__(
        self,
        size: int = 10,
        pass_length: int = 100,
        rng: Optional[random.Random] = None,
    ) -> None:
        if size <= 0:
            raise ValueError("LNS size must be positive")
        if pass_length <= 0:
            raise ValueError("LNS pass length must be positive")
        self.size = size
        self.pass_length = pass_length
        self.rng = rng if rng is not None else random.Random()

    def start(self, items: Sequence[int]) -> Iterator[Move]:
        n = len(items)
        if n == 0:
            return
        k = min(self.size, n)
        for _ in range(self.pass_length):
            freed = self.rng.sample(range(n), k)
            yield Move(self.name, dict.fromkeys(freed))
