"""Random ACP instance generator and writer."""

from __future__ import annotations

import random
from typing import List

from acp.models import Instance


def generate_acp_instance(
    num_periods: int,
    num_products: int,
    num_items: int,
    seed: int = 0,
    inventory_cost_rate: int = 10,
    max_transition_cost: int = 200,
) -> Instance:
    """Generate a random instance whose due dates can all be met.

    Due periods are drawn so that at most ``d + 1`` items are due by any
    period ``d``, which keeps the earliest-due-date schedule feasible.
    Transition costs are uniform in ``[1, max_transition_cost]`` with a zero
    diagonal.
    """
    if not 0 <= num_items <= num_periods:
        raise ValueError("num_items must be within [0, num_periods]")
    rng = random.Random(seed)
    due_slots = sorted(rng.sample(range(num_periods), num_items))
    owners = [rng.randrange(num_products) for _ in range(num_items)]
    due_dates: List[List[int]] = [[] for _ in range(num_products)]
    for due, product in zip(due_slots, owners):
        due_dates[product].append(due)
    transition_cost = [
        [0 if i == j else rng.randint(1, max_transition_cost) for j in range(num_products)]
        for i in range(num_products)
    ]
    return Instance(
        num_periods=num_periods,
        num_products=num_products,
        inventory_cost_rate=inventory_cost_rate,
        due_dates_per_product=tuple(tuple(d) for d in due_dates),
        transition_cost=tuple(tuple(row) for row in transition_cost),
    )


def format_instance(instance: Instance) -> str:
    """Render an instance in the ACP file format."""
    lines = [str(instance.num_periods), str(instance.num_products)]
    for dates in instance.due_dates_per_product:
        due = set(dates)
        lines.append(" ".join("1" if p in due else "0" for p in range(instance.num_periods)))
    lines.append(str(instance.inventory_cost_rate))
    for row in instance.transition_cost:
        lines.append(" ".join(str(cost) for cost in row))
    return "\n".join(lines) + "\n"


def write_instance(instance: Instance, path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(format_instance(instance))
