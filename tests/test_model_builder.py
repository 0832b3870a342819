import random

from acp import engine
from acp.decoder import decode_schedule, validate_items
from acp.model_builder import (
    ModelBuilder,
    TransitionTuple,
    build_item_product_tuples,
    build_transition_tuples,
)
from acp.models import IDLE, NO_STATE, Active, Carrying
from acp.parser import parse_instance

SMALL = "4\n2\n0 1 0 1\n0 0 1 0\n3\n0 5\n7 0\n"


def test_transition_tuple_count(sample_instance) -> None:
    tuples = build_transition_tuples(sample_instance)
    p = sample_instance.num_products
    assert len(tuples) == 2 * p * p + 3 * p + 1
    assert TransitionTuple(IDLE, NO_STATE, IDLE, NO_STATE, 0) in tuples
    assert TransitionTuple(Active(0), Carrying(0), Active(1), Carrying(1), 78) in tuples
    assert TransitionTuple(IDLE, Carrying(2), Active(6), Carrying(6), 40) in tuples
    assert TransitionTuple(IDLE, NO_STATE, Active(3), Carrying(3), 0) in tuples


def test_transition_tuples_never_leave_a_state() -> None:
    tuples = build_transition_tuples(parse_instance(SMALL))
    for t in tuples:
        # once something was produced, "no state" never comes back
        assert not (isinstance(t.prev_state, Carrying) and t.next_state == NO_STATE)
        if isinstance(t.next_product, Active):
            assert t.next_state == Carrying(t.next_product.product)


def test_item_product_tuples_have_one_idle_per_residual(sample_instance) -> None:
    tuples = build_item_product_tuples(sample_instance)
    assert len(tuples) == sample_instance.num_periods
    idle = [slot for slot, product in tuples if product == IDLE]
    assert len(idle) == sample_instance.num_residual
    assert min(idle) == sample_instance.num_items
    assert (0, Active(0)) in tuples


def test_construct_sample_is_consistent(sample_instance) -> None:
    builder = ModelBuilder(sample_instance)
    outcome = engine.construct(builder)
    assert outcome.schedule is not None
    sched = outcome.schedule
    assert validate_items(sample_instance, sched.items)
    for period, item in enumerate(sched.items):
        assert sched.deliveries[item] == period
    # engine-side arrays and costs agree with a plain decode of the items
    assert sched == decode_schedule(sample_instance, sched.items)
    assert (sched.states[0] == NO_STATE) == (sched.products[0] == IDLE)


def test_construct_infeasible_instance() -> None:
    # two items both due in period 0
    inst = parse_instance("2\n2\n1 0\n1 0\n1\n0 1\n1 0\n")
    outcome = engine.construct(ModelBuilder(inst))
    assert outcome.schedule is None
    assert outcome.infeasible


def test_single_period_instance() -> None:
    inst = parse_instance("1\n1\n1\n4\n0\n")
    outcome = engine.construct(ModelBuilder(inst))
    assert outcome.schedule is not None
    assert outcome.schedule.products == (Active(0),)
    assert outcome.schedule.objective == 0


def test_single_period_state_carries_the_produced_product() -> None:
    # one item of product 1; no transition table constrains period 0
    inst = parse_instance("1\n2\n0\n1\n4\n0 1\n1 0\n")
    outcome = engine.construct(ModelBuilder(inst))
    assert outcome.schedule is not None
    assert outcome.schedule.products == (Active(1),)
    assert outcome.schedule.states == (Carrying(1),)
    assert outcome.schedule == decode_schedule(inst, outcome.schedule.items)


def test_repair_respects_cost_bound() -> None:
    inst = parse_instance(SMALL)
    builder = ModelBuilder(inst)
    start = [0, 2, 1, 3]  # cost 21
    outcome = engine.repair(
        builder, start, freed=[0, 1, 2, 3], cost_bound=21, failure_limit=1000, rng=random.Random(0)
    )
    assert outcome.schedule is not None
    assert outcome.schedule.objective < 21
    assert validate_items(inst, outcome.schedule.items)


def test_repair_below_optimum_finds_nothing() -> None:
    inst = parse_instance(SMALL)
    builder = ModelBuilder(inst)
    optimal = [3, 0, 2, 1]  # cost 12
    outcome = engine.repair(
        builder, optimal, freed=[0, 1, 2, 3], cost_bound=12, failure_limit=1000, rng=random.Random(0)
    )
    assert outcome.schedule is None


def test_repair_keeps_fixed_periods() -> None:
    inst = parse_instance(SMALL)
    builder = ModelBuilder(inst)
    outcome = engine.repair(
        builder, [0, 2, 1, 3], freed=[0, 3], cost_bound=22, failure_limit=1000, rng=random.Random(1)
    )
    assert outcome.schedule is not None
    assert outcome.schedule.items[1:3] == (2, 1)
