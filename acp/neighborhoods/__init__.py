"""Local-search neighbourhoods over the item array.

Structure:
- common.py: Move, Operator protocol, ConcatenatedOperator, build_neighborhood
- swap.py: pairwise exchange of two periods
- random_lns.py: random destruction of a subset of periods
"""

from acp.neighborhoods.common import (
    ConcatenatedOperator,
    Move,
    Operator,
    build_neighborhood,
)
from acp.neighborhoods.random_lns import RandomLnsOperator
from acp.neighborhoods.swap import SwapOperator

__all__ = [
    "Move",
    "Operator",
    "ConcatenatedOperator",
    "build_neighborhood",
    "SwapOperator",
    "RandomLnsOperator",
]
