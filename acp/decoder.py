"""Decode an item array into a full schedule and evaluate its cost.

The item array (``items[p]`` = item or idle slot produced in period ``p``) is
the only decision the search manipulates directly; products, carried states,
deliveries and costs all follow from it and from the instance data.
"""

from __future__ import annotations

from typing import Sequence

from acp.errors import ScheduleValidationError
from acp.models import (
    IDLE,
    NO_STATE,
    Active,
    Carrying,
    Instance,
    Production,
    Schedule,
    State,
    enumerate_items,
)


def validate_items(instance: Instance, items: Sequence[int]) -> bool:
    """Validate an item array against the instance.

    Checks that ``items`` is a permutation of ``range(num_periods)``, that
    each real item is produced no later than its due date and that items of
    the same product are produced in due-date order.

    Returns:
        True if the array is valid (handy inside assertions).

    Raises:
        ScheduleValidationError: On the first violated rule.
    """
    n = instance.num_periods
    if len(items) != n or sorted(items) != list(range(n)):
        raise ScheduleValidationError("Item array is not a permutation of the periods")
    catalog = enumerate_items(instance)
    last_period: dict[int, int] = {}
    last_rank: dict[int, int] = {}
    for period, item in enumerate(items):
        if item >= len(catalog):
            continue
        entry = catalog[item]
        if period > entry.due_date:
            raise ScheduleValidationError(
                f"Item {item} of product {entry.product} produced in period {period} "
                f"after its due date {entry.due_date}"
            )
        if last_rank.get(entry.product, -1) > entry.rank:
            raise ScheduleValidationError(
                f"Item {item} of product {entry.product} produced in period {period} "
                f"before an earlier-due item (period {last_period[entry.product]})"
            )
        last_rank[entry.product] = entry.rank
        last_period[entry.product] = period
    return True


def decode_schedule(
    instance: Instance,
    items: Sequence[int],
    validate: bool = False,
) -> Schedule:
    """Build a ``Schedule`` from an item array.

    Args:
        instance: Problem data.
        items: items[p] -> item index (``< num_items``) or idle slot.
        validate: When True run ``validate_items`` first.

    Returns:
        Schedule with products, carried states, inverse deliveries and costs.

    Raises:
        ScheduleValidationError: If ``validate`` is set and the array is invalid.
    """
    if validate:
        validate_items(instance, items)
    catalog = enumerate_items(instance)
    products: list[Production] = []
    states: list[State] = []
    deliveries = [0] * len(items)
    inventory_cost = 0
    transition_cost = 0
    last_active: int | None = None
    for period, item in enumerate(items):
        deliveries[item] = period
        if item < len(catalog):
            product = catalog[item].product
            inventory_cost += catalog[item].due_date - period
            if last_active is not None:
                transition_cost += instance.transition_cost[last_active][product]
            last_active = product
            products.append(Active(product))
        else:
            products.append(IDLE)
        states.append(NO_STATE if last_active is None else Carrying(last_active))
    return Schedule(
        items=tuple(items),
        products=tuple(products),
        states=tuple(states),
        deliveries=tuple(deliveries),
        inventory_cost=inventory_cost,
        transition_cost=transition_cost,
        objective=instance.inventory_cost_rate * inventory_cost + transition_cost,
    )


def evaluate(instance: Instance, items: Sequence[int]) -> int:
    """Return the objective value of an item array (no validation)."""
    return decode_schedule(instance, items).objective
