"""Construction + local search driver for the ACP scheduling problem.

Phases:
    1. Construction -- the engine assigns ``item[]`` with a static
       smallest-domain / minimum-value strategy. No solution means the
       instance is infeasible; the driver then reports nothing.
    2. Local search -- moves from the neighbourhood go through the
       acceptance filter; freed periods (random LNS) are repaired by a
       conflict-bounded inner search, complete moves (swap) are validated by
       the decoder. The first accepted move restarts the neighbourhood from
       the new schedule. A whole pass without acceptance, the time limit or
       the solution limit ends the search.

Every reported schedule is strictly cheaper than the previous one.
"""

from __future__ import annotations

import logging
import random
import time
from typing import Iterator, Optional

from acp import engine
from acp.algorithms.base import SearchState, log_iteration, open_trace_file
from acp.config import SolverConfig
from acp.decoder import decode_schedule
from acp.errors import ScheduleValidationError
from acp.filters import IncrementalCostFilter
from acp.model_builder import ModelBuilder
from acp.models import Instance, Schedule
from acp.neighborhoods import Move, build_neighborhood

logger = logging.getLogger("acp.search")


class LocalSearchDriver:
    """Runs construction then local search and streams improving schedules.

    Args:
        instance: Problem data.
        config: Search parameters (operators, LNS size and limits, stop limits).
        rng: Optional random generator; seeded from ``config.seed`` when None.
    """

    def __init__(
        self,
        instance: Instance,
        config: Optional[SolverConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.instance = instance
        self.config = config if config is not None else SolverConfig()
        self.rng = rng if rng is not None else random.Random(self.config.seed)
        self.builder = ModelBuilder(instance)
        self.filter = IncrementalCostFilter(instance)
        self.neighborhood = build_neighborhood(
            self.config.operators,
            lns_size=self.config.lns_size,
            lns_pass=self.config.lns_pass,
            rng=self.rng,
        )
        self.state: Optional[SearchState] = None
        self._deadline: Optional[float] = None

    def construct(self) -> Optional[Schedule]:
        """Build the initial schedule, None when the instance is infeasible."""
        outcome = engine.construct(self.builder, time_limit_s=self._remaining_time())
        if outcome.schedule is None:
            if outcome.infeasible:
                logger.warning("Model is infeasible: no schedule meets every due date")
            else:
                logger.warning("No initial schedule found (status %s)", outcome.status)
        return outcome.schedule

    def solutions(self) -> Iterator[Schedule]:
        """Yield the constructed schedule, then every strictly improving one."""
        start = time.time()
        if self.config.time_limit_s is not None:
            self._deadline = start + self.config.time_limit_s
        initial = self.construct()
        if initial is None:
            return
        self.state = SearchState(current=initial, best=initial, start_time=start)
        self.state.record()
        self.filter.on_synchronize(initial.items)
        with open_trace_file(self.config.trace_file) as trace_file:
            log_iteration(trace_file, self.state, "construction")
            yield initial
            while not self._limit_reached():
                accepted = self._run_pass()
                if accepted is None:
                    if not self._limit_reached():
                        logger.info(
                            "No improving move in a full pass after %d iterations",
                            self.state.iteration,
                        )
                    break
                move, schedule = accepted
                self.state.current = schedule
                self.state.update_best()
                self.filter.on_synchronize(schedule.items)
                log_iteration(trace_file, self.state, move.operator)
                logger.debug(
                    "iteration %d: %s accepted, cost=%d",
                    self.state.iteration,
                    move.operator,
                    schedule.objective,
                )
                yield schedule
        logger.info(
            "Search finished: %d solutions, best cost=%d, %d iterations, %d ms",
            self.state.solutions,
            self.state.best.objective,
            self.state.iteration,
            self.state.elapsed_ms(),
        )

    def best(self) -> Optional[Schedule]:
        """Run the search to completion and return the best schedule."""
        last = None
        for schedule in self.solutions():
            last = schedule
        return last

    def _run_pass(self) -> Optional[tuple[Move, Schedule]]:
        assert self.state is not None
        for move in self.neighborhood.start(self.state.current.items):
            if self._limit_reached():
                return None
            self.state.iteration += 1
            schedule = self._try_move(move)
            if schedule is not None:
                return move, schedule
        return None

    def _try_move(self, move: Move) -> Optional[Schedule]:
        """Return the schedule reached by ``move`` when it is accepted."""
        if not self.filter.accept(move.delta):
            return None
        current = self.state.current  # type: ignore[union-attr]
        if move.is_partial:
            outcome = engine.repair(
                self.builder,
                current.items,
                move.freed,
                cost_bound=self.filter.current_cost,
                failure_limit=self.config.lns_limit,
                rng=self.rng,
                time_limit_s=self._remaining_time(),
            )
            repaired = outcome.schedule
            if repaired is None:
                return None
            if not self.filter.accept({p: repaired.items[p] for p in move.freed}):
                logger.warning("Repaired schedule rejected by the cost filter")
                return None
            return repaired
        try:
            schedule = decode_schedule(self.instance, move.apply(current.items), validate=True)
        except ScheduleValidationError as e:
            logger.debug("Rejected %s move: %s", move.operator, e)
            return None
        return schedule

    def _remaining_time(self) -> Optional[float]:
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.time())

    def _limit_reached(self) -> bool:
        if self._deadline is not None and time.time() >= self._deadline:
            return True
        limit = self.config.solution_limit
        return limit is not None and self.state is not None and self.state.solutions >= limit
