"""Common structures and helper functions for the search driver."""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import IO, Iterator, List, Optional

from acp.models import Schedule


@dataclass
class SearchState:
    """Shared state of one search run."""

    current: Schedule
    best: Schedule
    cost_history: List[int] = field(default_factory=list)
    time_history_ms: List[int] = field(default_factory=list)
    start_time: float = 0.0
    iteration: int = 0
    solutions: int = 0

    def update_best(self) -> bool:
        """Update best solution. Returns True if improved."""
        if self.current.objective < self.best.objective:
            self.best = self.current
            self.record()
            return True
        return False

    def record(self) -> None:
        self.solutions += 1
        self.cost_history.append(self.best.objective)
        self.time_history_ms.append(self.elapsed_ms())

    def elapsed_ms(self) -> int:
        """Return elapsed time from start in ms."""
        return int((time.time() - self.start_time) * 1000)


@contextmanager
def open_trace_file(path: Optional[str]) -> Iterator[Optional[IO[str]]]:
    """Context manager for the CSV iteration trace."""
    if not path:
        yield None
        return
    with open(path, "w", encoding="utf-8") as trace_file:
        trace_file.write("iteration,elapsed_ms,operator,current_cost,best_cost,products\n")
        yield trace_file


def log_iteration(trace_file: Optional[IO[str]], state: SearchState, operator: str) -> None:
    """Write one accepted move to the trace file."""
    if trace_file is None:
        return
    trace_file.write(
        f"{state.iteration},{state.elapsed_ms()},{operator},{state.current.objective},"
        f'{state.best.objective},"{state.current.format_products()}"\n'
    )
