"""Incremental acceptance filter for local-search moves.

The filter keeps a shadow copy of the last synchronised item array together
with the sorted list of active periods (periods producing a real item).
Total transition cost is the sum over consecutive active periods of
``transition_cost[a][b]`` (idle runs carry the state), so a move only changes:

* the earliness of the items in the touched periods, and
* the links of the active chain that contain a touched period.

Both are evaluated without scanning the whole schedule: O(|delta| log n)
plus O(|delta|) skips over periods the move turns idle.
"""

from __future__ import annotations

import bisect
import logging
from typing import Mapping, Optional, Sequence

from acp.decoder import evaluate
from acp.models import Instance, enumerate_items

logger = logging.getLogger("acp.filter")

Delta = Mapping[int, Optional[int]]
Link = tuple[Optional[int], int]  # (previous active period or None, active period)


class IncrementalCostFilter:
    """Accept a move iff its objective is strictly below the synchronised one."""

    def __init__(self, instance: Instance) -> None:
        self.instance = instance
        catalog = enumerate_items(instance)
        self.item_to_product = [item.product for item in catalog]
        self.due_dates = [item.due_date for item in catalog]
        self.num_items = len(catalog)
        self._solution: list[int] = []
        self._position: list[int] = []
        self._active: list[int] = []
        self._current_cost = 0

    @property
    def current_cost(self) -> int:
        return self._current_cost

    @property
    def positions(self) -> Sequence[int]:
        """positions[k] -> period currently holding item / idle slot k."""
        return self._position

    def on_synchronize(self, items: Sequence[int]) -> None:
        """Rebuild the shadow copy from an accepted item array."""
        self._solution = list(items)
        self._position = [0] * len(items)
        for period, item in enumerate(items):
            self._position[item] = period
        self._active = [p for p, item in enumerate(items) if item < self.num_items]
        self._current_cost = evaluate(self.instance, self._solution)

    def accept(self, delta: Delta) -> bool:
        """Filter a candidate move.

        A partial delta (any freed period) is accepted unconditionally and
        left to the engine; a complete one must strictly lower the cost.
        """
        if any(value is None for value in delta.values()):
            return True
        return self.evaluate_delta(delta) < 0

    def evaluate_delta(self, delta: Delta) -> int:
        """Return ``cost(after move) - cost(before move)`` for a complete delta."""
        changed = {p: v for p, v in delta.items() if v != self._solution[p]}
        if not changed:
            return 0
        inventory = 0
        for period, item in changed.items():
            inventory += self._earliness(item, period) - self._earliness(
                self._solution[period], period
            )
        old_links = self._links(changed, after_move=False)
        new_links = self._links(changed, after_move=True)
        transition = sum(self._link_cost(link, changed) for link in new_links) - sum(
            self._link_cost(link, {}) for link in old_links
        )
        return self.instance.inventory_cost_rate * inventory + transition

    def _earliness(self, item: int, period: int) -> int:
        if item >= self.num_items:
            return 0
        return self.due_dates[item] - period

    def _item_at(self, period: int, overlay: Mapping[int, int]) -> int:
        return overlay.get(period, self._solution[period])

    def _is_active(self, period: int, overlay: Mapping[int, int]) -> bool:
        return self._item_at(period, overlay) < self.num_items

    def _prev_active(self, period: int, overlay: Mapping[int, int]) -> Optional[int]:
        best: Optional[int] = None
        idx = bisect.bisect_left(self._active, period) - 1
        while idx >= 0:
            candidate = self._active[idx]
            if candidate not in overlay or self._is_active(candidate, overlay):
                best = candidate
                break
            idx -= 1
        for p in overlay:
            if p < period and self._is_active(p, overlay) and (best is None or p > best):
                best = p
        return best

    def _next_active(self, period: int, overlay: Mapping[int, int]) -> Optional[int]:
        best: Optional[int] = None
        idx = bisect.bisect_right(self._active, period)
        while idx < len(self._active):
            candidate = self._active[idx]
            if candidate not in overlay or self._is_active(candidate, overlay):
                best = candidate
                break
            idx += 1
        for p in overlay:
            if p > period and self._is_active(p, overlay) and (best is None or p < best):
                best = p
        return best

    def _links(self, changed: Mapping[int, int], after_move: bool) -> set[Link]:
        """Links of the active chain that contain at least one touched period."""
        overlay = changed if after_move else {}
        links: set[Link] = set()
        for period in changed:
            prev = self._prev_active(period, overlay)
            nxt = self._next_active(period, overlay)
            if self._is_active(period, overlay):
                links.add((prev, period))
                if nxt is not None:
                    links.add((period, nxt))
            elif nxt is not None:
                links.add((prev, nxt))
        return links

    def _link_cost(self, link: Link, overlay: Mapping[int, int]) -> int:
        prev, period = link
        if prev is None:
            return 0
        a = self.item_to_product[self._item_at(prev, overlay)]
        b = self.item_to_product[self._item_at(period, overlay)]
        return self.instance.transition_cost[a][b]
