"""Core data structures for ACP production-scheduling instances.

This module defines:
    Instance    -- immutable container with the parsed instance data.
    Item        -- one demanded delivery (a due-date occurrence of a product).
    Production  -- what a period produces: ``Idle`` or ``Active(product)``.
    State       -- last active product: ``NoState`` or ``Carrying(product)``.
    Schedule    -- a complete solution with its cost breakdown.

The engine works on plain integers, so ``Idle`` and ``NoState`` are encoded
as ``-1`` only at that boundary (see ``encode_*`` / ``decode_*``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

IDLE_CODE = -1
NO_STATE_CODE = -1


@dataclass(frozen=True)
class Idle:
    """Nothing is produced in the period."""

    def __str__(self) -> str:
        return "idle"


@dataclass(frozen=True)
class Active:
    """Product ``product`` is produced in the period."""

    product: int


@dataclass(frozen=True)
class NoState:
    """No product has been produced yet."""

    def __str__(self) -> str:
        return "none"


@dataclass(frozen=True)
class Carrying:
    """``product`` was the last product produced (possibly before idle periods)."""

    product: int


IDLE = Idle()
NO_STATE = NoState()

Production = Union[Idle, Active]
State = Union[NoState, Carrying]


def encode_production(value: Production) -> int:
    return value.product if isinstance(value, Active) else IDLE_CODE


def decode_production(code: int) -> Production:
    return IDLE if code == IDLE_CODE else Active(code)


def encode_state(value: State) -> int:
    return value.product if isinstance(value, Carrying) else NO_STATE_CODE


def decode_state(code: int) -> State:
    return NO_STATE if code == NO_STATE_CODE else Carrying(code)


@dataclass(frozen=True)
class Instance:
    """Immutable representation of an ACP instance.

    Attributes:
        num_periods: Number of discrete periods (N).
        num_products: Number of products (P).
        inventory_cost_rate: Cost of one period of earliness per item.
        due_dates_per_product: due_dates_per_product[p] -> strictly increasing
            periods at which one unit of product p is due.
        transition_cost: P x P matrix, transition_cost[i][j] is charged when
            production switches from product i to product j.
    """

    num_periods: int
    num_products: int
    inventory_cost_rate: int
    due_dates_per_product: tuple[tuple[int, ...], ...]
    transition_cost: tuple[tuple[int, ...], ...]

    @property
    def num_items(self) -> int:
        return sum(len(dates) for dates in self.due_dates_per_product)

    @property
    def num_residual(self) -> int:
        """Number of idle slots (periods without a demanded item)."""
        return self.num_periods - self.num_items

    @property
    def max_transition_cost(self) -> int:
        return max((max(row) for row in self.transition_cost if row), default=0)


@dataclass(frozen=True)
class Item:
    """Single demanded delivery.

    Fields:
        index: Position in the product-major item enumeration.
        product: Owning product id.
        due_date: Latest period in which the item may be produced.
        rank: Index of the item among the items of its product (0-based).
    """

    index: int
    product: int
    due_date: int
    rank: int


def enumerate_items(instance: Instance) -> tuple[Item, ...]:
    """Enumerate items product-major, ordered by due date within a product."""
    items: list[Item] = []
    for product, dates in enumerate(instance.due_dates_per_product):
        for rank, due_date in enumerate(dates):
            items.append(Item(index=len(items), product=product, due_date=due_date, rank=rank))
    return tuple(items)


@dataclass(frozen=True)
class Schedule:
    """Complete solution plus its cost breakdown.

    Fields:
        items: items[p] -> item (or idle slot) produced in period p.
        products: products[p] -> ``Idle`` or ``Active(product)``.
        states: states[p] -> ``NoState`` or ``Carrying(last active product)``.
        deliveries: deliveries[k] -> period of item / idle slot k (inverse of items).
        inventory_cost: Unweighted sum of earliness over all real items.
        transition_cost: Sum of transition costs between consecutive periods.
        objective: inventory_cost_rate * inventory_cost + transition_cost.
    """

    items: tuple[int, ...]
    products: tuple[Production, ...]
    states: tuple[State, ...]
    deliveries: tuple[int, ...]
    inventory_cost: int
    transition_cost: int
    objective: int

    def product_codes(self) -> list[int]:
        return [encode_production(value) for value in self.products]

    def format_products(self) -> str:
        """Render products as a space-separated line, ``-1`` for idle periods."""
        return " ".join(str(code) for code in self.product_codes())
