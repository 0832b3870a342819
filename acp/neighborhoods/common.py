"""Shared pieces of the local-search neighbourhoods.

Every operator is a restartable, finite producer of moves:
``start(items)`` returns a fresh iterator over the moves of one pass built
from the current item array. Restarting after an accepted move is simply a
new ``start`` call.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterator, Mapping, Optional, Protocol, Sequence


@dataclass(frozen=True)
class Move:
    """Candidate change of the item array.

    Fields:
        operator: Name of the operator that produced the move.
        delta: period -> new item value; ``None`` marks a freed period that
            the inner search has to re-assign.
    """

    operator: str
    delta: Mapping[int, Optional[int]]

    @property
    def is_partial(self) -> bool:
        return any(value is None for value in self.delta.values())

    @property
    def freed(self) -> list[int]:
        return sorted(p for p, value in self.delta.items() if value is None)

    def apply(self, items: Sequence[int]) -> list[int]:
        """Return a copy of ``items`` with a complete delta applied."""
        if self.is_partial:
            raise ValueError("Cannot apply a partial move without repair")
        applied = list(items)
        for period, value in self.delta.items():
            applied[period] = value  # type: ignore[assignment]
        return applied


class Operator(Protocol):
    """Interface for neighbourhood operators."""

    name: str

    def start(self, items: Sequence[int]) -> Iterator[Move]:
        """Return the moves of one pass around ``items``."""


class ConcatenatedOperator:
    """Chain the passes of several operators in order."""

    def __init__(self, operators: Sequence[Operator]) -> None:
        if not operators:
            raise ValueError("At least one operator is required")
        self.operators = list(operators)
        self.name = "+".join(op.name for op in self.operators)

    def start(self, items: Sequence[int]) -> Iterator[Move]:
        for operator in self.operators:
            yield from operator.start(items)


def build_neighborhood(
    names: Sequence[str],
    lns_size: int,
    lns_pass: int,
    rng: random.Random,
) -> ConcatenatedOperator:
    """Create the combined neighbourhood from operator names.

    Args:
        names: Operator names in the order their passes run (``lns``, ``swap``).
        lns_size: Number of periods freed by each random LNS move.
        lns_pass: Number of random LNS moves per pass.
        rng: Random generator shared with the search.

    Raises:
        ValueError: If an unknown operator name is provided.
    """
    from acp.neighborhoods.random_lns import RandomLnsOperator
    from acp.neighborhoods.swap import SwapOperator

    operators: list[Operator] = []
    for name in names:
        if name == "lns":
            operators.append(RandomLnsOperator(size=lns_size, pass_length=lns_pass, rng=rng))
        elif name == "swap":
            operators.append(SwapOperator())
        else:
            raise ValueError(f"Unknown operator: {name}")
    return ConcatenatedOperator(operators)
