"""Reader for ACP challenge instance files.

File layout (blank lines are ignored)::

    num_periods
    num_products
    <num_products lines of num_periods 0/1 flags, 1 marks a due period>
    inventory_cost_rate
    <num_products lines of num_products transition costs>

The whole file either loads or raises; there is no partial result.
"""

from __future__ import annotations

import logging
from typing import Iterator

from acp.errors import InstanceIOError, MalformedInputError
from acp.models import Instance

logger = logging.getLogger("acp.parser")

Line = tuple[int, str]  # (1-based line number, stripped content)


def _numbered_lines(text: str) -> Iterator[Line]:
    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if line:
            yield number, line


def _next_line(lines: Iterator[Line], what: str) -> Line:
    try:
        return next(lines)
    except StopIteration:
        raise MalformedInputError(f"Unexpected end of file while reading {what}") from None


def _parse_ints(line: Line, expected: int, what: str) -> list[int]:
    number, content = line
    words = content.split()
    if len(words) != expected:
        raise MalformedInputError(
            f"Error with line {number} ({what}): expected {expected} values, "
            f"got {len(words)}: {content!r}"
        )
    try:
        return [int(word) for word in words]
    except ValueError:
        raise MalformedInputError(
            f"Error with line {number} ({what}): non-integer value: {content!r}"
        ) from None


def _parse_positive(line: Line, what: str) -> int:
    (value,) = _parse_ints(line, 1, what)
    if value <= 0:
        raise MalformedInputError(f"Error with line {line[0]} ({what}): must be positive")
    return value


def parse_instance(text: str) -> Instance:
    """Parse instance text in the ACP line format.

    Args:
        text: Full content of an instance file.

    Returns:
        Parsed ``Instance``.

    Raises:
        MalformedInputError: On a wrong token count, non-integer token, flag
            other than 0/1, negative cost, missing or surplus lines, or more
            demanded items than periods.
    """
    lines = _numbered_lines(text)
    num_periods = _parse_positive(_next_line(lines, "number of periods"), "number of periods")
    num_products = _parse_positive(_next_line(lines, "number of products"), "number of products")

    due_dates_per_product: list[tuple[int, ...]] = []
    for product in range(num_products):
        what = f"due dates of product {product}"
        line = _next_line(lines, what)
        flags = _parse_ints(line, num_periods, what)
        if any(flag not in (0, 1) for flag in flags):
            raise MalformedInputError(
                f"Error with line {line[0]} ({what}): flags must be 0 or 1: {line[1]!r}"
            )
        due_dates_per_product.append(tuple(p for p, flag in enumerate(flags) if flag == 1))

    line = _next_line(lines, "inventory cost")
    (inventory_cost_rate,) = _parse_ints(line, 1, "inventory cost")
    if inventory_cost_rate < 0:
        raise MalformedInputError(f"Error with line {line[0]} (inventory cost): negative value")

    transition_cost: list[tuple[int, ...]] = []
    for product in range(num_products):
        what = f"transition costs from product {product}"
        line = _next_line(lines, what)
        row = _parse_ints(line, num_products, what)
        if any(cost < 0 for cost in row):
            raise MalformedInputError(
                f"Error with line {line[0]} ({what}): negative cost: {line[1]!r}"
            )
        transition_cost.append(tuple(row))

    extra = next(lines, None)
    if extra is not None:
        raise MalformedInputError(f"Error with line {extra[0]}: unexpected content {extra[1]!r}")

    instance = Instance(
        num_periods=num_periods,
        num_products=num_products,
        inventory_cost_rate=inventory_cost_rate,
        due_dates_per_product=tuple(due_dates_per_product),
        transition_cost=tuple(transition_cost),
    )
    if instance.num_residual < 0:
        raise MalformedInputError(
            f"{instance.num_items} items cannot fit into {num_periods} periods"
        )
    return instance


def load_instance(path: str) -> Instance:
    """Load an instance file and log its statistics.

    Raises:
        InstanceIOError: If the file is missing or unreadable.
        MalformedInputError: If the content is malformed (see ``parse_instance``).
    """
    logger.info("Load %s", path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise InstanceIOError(f"Could not open acp challenge file {path}: {e}") from e
    instance = parse_instance(text)
    logger.info("  - %d periods", instance.num_periods)
    logger.info("  - %d products", instance.num_products)
    logger.info("  - earliness cost is %d", instance.inventory_cost_rate)
    logger.info("  - %d items", instance.num_items)
    logger.info("  - %d non active periods", instance.num_residual)
    return instance
