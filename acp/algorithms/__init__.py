"""Search algorithms module for the ACP scheduling problem.

Contains:
- Construction + local search driver (LocalSearchDriver)
- Shared search state and CSV trace helpers
"""

from acp.algorithms.base import SearchState
from acp.algorithms.local_search import LocalSearchDriver

__all__ = ["LocalSearchDriver", "SearchState"]
