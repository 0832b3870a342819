"""Constraint model of the ACP production-scheduling problem.

Formulation
-----------
Items
    One item per due-date occurrence, enumerated product-major. Each item has
    a ``delivery`` variable in ``[0, due_date]``; consecutive items of the
    same product are strictly ordered. ``num_residual`` idle slots complete
    the item list so that ``item[]`` (per period) and ``delivery[]`` (per
    item / slot) are mutual inverse permutations of ``range(num_periods)``.
Item-assignment relation
    Pairs ``(slot, product)`` (``Idle`` for idle slots); an allowed-tuple
    constraint on ``(item[p], product[p])`` ties what is produced in a period
    to the item occupying it.
Transition relation
    5-tuples ``(prev_product, prev_state, next_product, next_state, cost)``;
    ``state[p]`` carries the last active product through idle runs so a
    switch after an idle run is charged as if it happened directly.
Objective
    ``inventory_cost_rate * sum(due_date - delivery) + sum(transition_cost)``.

The relations are computed once per builder; ``build()`` declares a fresh
CP-SAT model from them, which the search uses both for the master model and
for every repair sub-model.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import NamedTuple

from ortools.sat.python import cp_model

from acp.models import (
    IDLE,
    IDLE_CODE,
    NO_STATE,
    NO_STATE_CODE,
    Active,
    Carrying,
    Instance,
    Item,
    Production,
    Schedule,
    State,
    decode_production,
    decode_state,
    encode_production,
    encode_state,
    enumerate_items,
)

logger = logging.getLogger("acp.model")


class TransitionTuple(NamedTuple):
    """Legal transition between two consecutive periods and its cost."""

    prev_product: Production
    prev_state: State
    next_product: Production
    next_state: State
    cost: int

    def encode(self) -> tuple[int, int, int, int, int]:
        return (
            encode_production(self.prev_product),
            encode_state(self.prev_state),
            encode_production(self.next_product),
            encode_state(self.next_state),
            self.cost,
        )


def build_item_product_tuples(instance: Instance) -> frozenset[tuple[int, Production]]:
    """Item-assignment relation: ``(slot, product)`` for items, ``(slot, Idle)`` for idle slots."""
    items = enumerate_items(instance)
    relation = {(item.index, Active(item.product)) for item in items}
    relation.update(
        (len(items) + residual, IDLE) for residual in range(instance.num_residual)
    )
    return frozenset(relation)


def build_transition_tuples(instance: Instance) -> frozenset[TransitionTuple]:
    """Transition-cost relation over consecutive periods.

    Contains ``2*P^2 + 3*P + 1`` tuples for ``P`` products:

    * direct switch ``(i, i, j, j, c[i][j])`` and switch after an idle run
      ``(Idle, i, j, j, c[i][j])`` for every ordered pair ``(i, j)``;
    * idle continuation ``(i, i, Idle, i, 0)`` and ``(Idle, i, Idle, i, 0)``;
    * first activation ``(Idle, NoState, i, i, 0)``;
    * the all-idle tuple ``(Idle, NoState, Idle, NoState, 0)``.
    """
    relation: set[TransitionTuple] = set()
    for i in range(instance.num_products):
        for j in range(instance.num_products):
            cost = instance.transition_cost[i][j]
            relation.add(TransitionTuple(Active(i), Carrying(i), Active(j), Carrying(j), cost))
            relation.add(TransitionTuple(IDLE, Carrying(i), Active(j), Carrying(j), cost))
        relation.add(TransitionTuple(Active(i), Carrying(i), IDLE, Carrying(i), 0))
        relation.add(TransitionTuple(IDLE, Carrying(i), IDLE, Carrying(i), 0))
        relation.add(TransitionTuple(IDLE, NO_STATE, Active(i), Carrying(i), 0))
    relation.add(TransitionTuple(IDLE, NO_STATE, IDLE, NO_STATE, 0))
    return frozenset(relation)


@dataclass
class AcpModel:
    """CP-SAT model with handles on every decision array.

    Fields:
        model: The underlying ``cp_model.CpModel``.
        items: items[p] -> item or idle slot produced in period p.
        products: products[p] -> product code (``-1`` idle).
        states: states[p] -> last active product code (``-1`` none).
        deliveries: deliveries[k] -> period of item / idle slot k.
        transition_costs: transition_costs[p] -> cost between p and p+1.
        objective: Integer variable equal to the objective expression.
    """

    instance: Instance
    catalog: tuple[Item, ...]
    model: cp_model.CpModel
    items: list[cp_model.IntVar]
    products: list[cp_model.IntVar]
    states: list[cp_model.IntVar]
    deliveries: list[cp_model.IntVar]
    transition_costs: list[cp_model.IntVar]
    objective: cp_model.IntVar

    def fix_items(self, assignment: dict[int, int]) -> None:
        """Fix ``item[p]`` to the given value for every period in ``assignment``."""
        for period, item in assignment.items():
            self.model.Add(self.items[period] == item)

    def bound_objective(self, strict_upper: int) -> None:
        """Only accept solutions with objective strictly below ``strict_upper``."""
        self.model.Add(self.objective <= strict_upper - 1)

    def extract(self, solver: cp_model.CpSolver) -> Schedule:
        """Read the current solution of ``solver`` into a ``Schedule``."""
        items = tuple(int(solver.Value(var)) for var in self.items)
        deliveries = tuple(int(solver.Value(var)) for var in self.deliveries)
        inventory_cost = sum(
            item.due_date - deliveries[item.index] for item in self.catalog
        )
        transition_cost = sum(int(solver.Value(var)) for var in self.transition_costs)
        return Schedule(
            items=items,
            products=tuple(decode_production(int(solver.Value(v))) for v in self.products),
            states=tuple(decode_state(int(solver.Value(v))) for v in self.states),
            deliveries=deliveries,
            inventory_cost=inventory_cost,
            transition_cost=transition_cost,
            objective=self.instance.inventory_cost_rate * inventory_cost + transition_cost,
        )


class ModelBuilder:
    """Derives tuple relations from an instance and declares CP-SAT models.

    Feasibility is not checked here: an instance whose due dates cannot be
    met yields a model the engine proves infeasible when search starts.
    """

    def __init__(self, instance: Instance) -> None:
        self.instance = instance
        self.catalog = enumerate_items(instance)
        self.item_to_product = [item.product for item in self.catalog]
        self.item_product_tuples = build_item_product_tuples(instance)
        self.transition_tuples = build_transition_tuples(instance)
        self._item_rows = sorted(
            (slot, encode_production(product)) for slot, product in self.item_product_tuples
        )
        self._transition_rows = sorted(t.encode() for t in self.transition_tuples)
        logger.info(
            "  - transition cost tuple set has %d tuples", len(self.transition_tuples)
        )
        logger.info(
            "  - item to product tuple set has %d tuples", len(self.item_product_tuples)
        )

    def build(self, with_objective: bool = True) -> AcpModel:
        """Declare variables, constraints and (optionally) the objective.

        Args:
            with_objective: Register ``Minimize(objective)``. Repair sub-models
                skip it and bound the objective instead.
        """
        instance = self.instance
        n = instance.num_periods
        last_product = instance.num_products - 1
        model = cp_model.CpModel()

        products = [model.NewIntVar(IDLE_CODE, last_product, f"product_{p}") for p in range(n)]
        items = [model.NewIntVar(0, n - 1, f"item_{p}") for p in range(n)]
        states = [model.NewIntVar(NO_STATE_CODE, last_product, f"state_{p}") for p in range(n)]

        deliveries: list[cp_model.IntVar] = []
        inventory_costs = []
        for item in self.catalog:
            delivery = model.NewIntVar(
                0, item.due_date, f"delivery_{item.product}_{item.rank}"
            )
            if item.rank > 0:
                # FIFO production of the same product.
                model.Add(deliveries[-1] < delivery)
            deliveries.append(delivery)
            inventory_costs.append(item.due_date - delivery)
        for residual in range(instance.num_residual):
            deliveries.append(model.NewIntVar(0, n - 1, f"inactive_{residual}"))

        model.AddInverse(items, deliveries)

        for p in range(n):
            model.AddAllowedAssignments([items[p], products[p]], self._item_rows)

        max_cost = instance.max_transition_cost
        transition_costs = [
            model.NewIntVar(0, max_cost, f"transition_cost_{p}") for p in range(n - 1)
        ]
        for p in range(n - 1):
            model.AddAllowedAssignments(
                [products[p], states[p], products[p + 1], states[p + 1], transition_costs[p]],
                self._transition_rows,
            )

        # First period: no history, so state is none exactly when idle.
        state_is_none = model.NewBoolVar("state_0_is_none")
        product_is_idle = model.NewBoolVar("product_0_is_idle")
        model.Add(states[0] == NO_STATE_CODE).OnlyEnforceIf(state_is_none)
        model.Add(states[0] != NO_STATE_CODE).OnlyEnforceIf(state_is_none.Not())
        model.Add(products[0] == IDLE_CODE).OnlyEnforceIf(product_is_idle)
        model.Add(products[0] != IDLE_CODE).OnlyEnforceIf(product_is_idle.Not())
        model.Add(state_is_none == product_is_idle)
        # Idle/none and Active(i)/Carrying(i) share codes, so state[0] is product[0].
        model.Add(states[0] == products[0])

        upper = (
            instance.inventory_cost_rate * sum(item.due_date for item in self.catalog)
            + max_cost * max(0, n - 1)
        )
        objective = model.NewIntVar(0, upper, "objective")
        model.Add(
            objective
            == instance.inventory_cost_rate * sum(inventory_costs) + sum(transition_costs)
        )
        if with_objective:
            model.Minimize(objective)

        return AcpModel(
            instance=instance,
            catalog=self.catalog,
            model=model,
            items=items,
            products=products,
            states=states,
            deliveries=deliveries,
            transition_costs=transition_costs,
            objective=objective,
        )
