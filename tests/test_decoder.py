import pytest

from acp.decoder import decode_schedule, evaluate, validate_items
from acp.errors import ScheduleValidationError
from acp.models import IDLE, NO_STATE, Active, Carrying, enumerate_items
from acp.parser import parse_instance

SMALL = "4\n2\n0 1 0 1\n0 0 1 0\n3\n0 5\n7 0\n"


def small():
    return parse_instance(SMALL)


def test_enumerate_items_product_major() -> None:
    items = enumerate_items(small())
    assert [(i.product, i.due_date, i.rank) for i in items] == [(0, 1, 0), (0, 3, 1), (1, 2, 0)]
    assert [i.index for i in items] == [0, 1, 2]


def test_decode_costs_and_inverse() -> None:
    sched = decode_schedule(small(), [0, 2, 1, 3], validate=True)
    assert sched.products == (Active(0), Active(1), Active(0), IDLE)
    assert sched.states == (Carrying(0), Carrying(1), Carrying(0), Carrying(0))
    assert sched.deliveries == (0, 2, 1, 3)
    assert sched.inventory_cost == 3
    assert sched.transition_cost == 5 + 7
    assert sched.objective == 3 * 3 + 12
    assert sched.format_products() == "0 1 0 -1"


def test_leading_idle_has_no_state() -> None:
    sched = decode_schedule(small(), [3, 0, 2, 1], validate=True)
    assert sched.products[0] == IDLE
    assert sched.states[0] == NO_STATE
    assert sched.product_codes() == [-1, 0, 1, 0]
    assert sched.objective == 12
    assert evaluate(small(), [3, 0, 2, 1]) == 12


def test_transition_charged_across_idle_run() -> None:
    inst = parse_instance("4\n2\n1 0 0 0\n0 0 0 1\n1\n0 5\n7 0\n")
    # product 0 at period 0, idle, idle, product 1 at period 3
    sched = decode_schedule(inst, [0, 2, 3, 1])
    assert sched.states == (Carrying(0), Carrying(0), Carrying(0), Carrying(1))
    assert sched.transition_cost == 5


@pytest.mark.parametrize(
    "items",
    [
        [0, 0, 1, 2],  # not a permutation
        [0, 1, 2],  # wrong length
        [2, 3, 0, 1],  # item 0 after its due date
        [1, 0, 2, 3],  # later item of product 0 before the earlier one
    ],
)
def test_validate_rejects(items) -> None:
    with pytest.raises(ScheduleValidationError):
        validate_items(small(), items)


def test_validate_accepts() -> None:
    assert validate_items(small(), [0, 1, 2, 3])
