"""Thin adapter over the OR-Tools CP-SAT solver.

Two search flavours are needed by the local-search driver:

construct
    Static fixed search over ``item[]``: smallest remaining domain first,
    minimum value first, stop at the first solution.
repair
    Bounded complete search over a freed subset of ``item[]`` with a
    randomised variable / value order, every other period fixed and the
    objective bounded strictly below the current cost. The number of
    conflicts (failures) is capped; hitting the cap means "no repair".

The solver always runs with a single worker.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional, Sequence

from ortools.sat.python import cp_model

from acp.model_builder import AcpModel, ModelBuilder
from acp.models import Schedule

logger = logging.getLogger("acp.engine")


@dataclass(frozen=True)
class SolveOutcome:
    """Result of one engine call.

    Fields:
        status: CP-SAT status name (``FEASIBLE``, ``OPTIMAL``, ``INFEASIBLE``,
            ``UNKNOWN``, ...).
        schedule: Solution read back from the engine, None without solution.
        conflicts: Number of conflicts the search spent.
    """

    status: str
    schedule: Optional[Schedule]
    conflicts: int

    @property
    def infeasible(self) -> bool:
        return self.status == "INFEASIBLE"


def _make_solver(
    seed: int = 0,
    failure_limit: Optional[int] = None,
    time_limit_s: Optional[float] = None,
) -> cp_model.CpSolver:
    solver = cp_model.CpSolver()
    solver.parameters.num_workers = 1
    solver.parameters.search_branching = cp_model.FIXED_SEARCH
    solver.parameters.stop_after_first_solution = True
    solver.parameters.random_seed = seed
    if failure_limit is not None:
        solver.parameters.max_number_of_conflicts = failure_limit
    if time_limit_s is not None:
        solver.parameters.max_time_in_seconds = time_limit_s
    if logger.isEnabledFor(logging.DEBUG):
        solver.parameters.log_search_progress = True
        solver.parameters.log_to_stdout = False
        solver.log_callback = logger.debug
    return solver


def _run(acp_model: AcpModel, solver: cp_model.CpSolver) -> SolveOutcome:
    status = solver.Solve(acp_model.model)
    name = solver.StatusName(status)
    schedule = None
    if status in (cp_model.OPTIMAL, cp_model.FEASIBLE):
        schedule = acp_model.extract(solver)
    return SolveOutcome(status=name, schedule=schedule, conflicts=int(solver.NumConflicts()))


def construct(builder: ModelBuilder, time_limit_s: Optional[float] = None) -> SolveOutcome:
    """Find a first schedule with the smallest-domain / minimum-value strategy."""
    acp_model = builder.build()
    acp_model.model.AddDecisionStrategy(
        acp_model.items, cp_model.CHOOSE_MIN_DOMAIN_SIZE, cp_model.SELECT_MIN_VALUE
    )
    solver = _make_solver(time_limit_s=time_limit_s)
    outcome = _run(acp_model, solver)
    logger.debug("construction status=%s conflicts=%d", outcome.status, outcome.conflicts)
    return outcome


def repair(
    builder: ModelBuilder,
    items: Sequence[int],
    freed: Sequence[int],
    cost_bound: int,
    failure_limit: int,
    rng: random.Random,
    time_limit_s: Optional[float] = None,
) -> SolveOutcome:
    """Re-optimise the freed periods of ``items`` below ``cost_bound``.

    Args:
        builder: Builder holding the relations of the instance.
        items: Current item array; periods not in ``freed`` keep their value.
        freed: Periods released for the inner search.
        cost_bound: Solutions must have an objective strictly below this.
        failure_limit: Maximum number of conflicts of the inner search.
        rng: Source of the randomised variable / value order and solver seed.
        time_limit_s: Optional wall-clock cap for this call.

    Returns:
        Outcome whose schedule is None when the limit was hit or no better
        completion exists.
    """
    freed_set = set(freed)
    acp_model = builder.build(with_objective=False)
    acp_model.fix_items({p: v for p, v in enumerate(items) if p not in freed_set})
    acp_model.bound_objective(cost_bound)
    order = [acp_model.items[p] for p in freed]
    rng.shuffle(order)
    value_strategy = rng.choice((cp_model.SELECT_MIN_VALUE, cp_model.SELECT_MAX_VALUE))
    acp_model.model.AddDecisionStrategy(order, cp_model.CHOOSE_FIRST, value_strategy)
    solver = _make_solver(
        seed=rng.randrange(2**31 - 1),
        failure_limit=failure_limit,
        time_limit_s=time_limit_s,
    )
    solver.parameters.randomize_search = True
    outcome = _run(acp_model, solver)
    logger.debug(
        "repair freed=%d status=%s conflicts=%d", len(freed_set), outcome.status, outcome.conflicts
    )
    return outcome
