"""Pytest tests for `parse_instance` / `load_instance`.

Each test either parses the bundled sample, or writes a temporary instance
file and asserts successful parsing or the correct exception.
"""

from __future__ import annotations

import os
import tempfile
from contextlib import contextmanager

import pytest

from acp.errors import AcpError, InstanceIOError, MalformedInputError
from acp.parser import load_instance, parse_instance

SMALL = """\
4
2
0 1 0 1
0 0 1 0
3
0 5
7 0
"""


@contextmanager
def temp_instance(content: str):
    fd, path = tempfile.mkstemp(text=True)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        yield path
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:  # pragma: no cover
            pass


def test_load_sample(sample_path):
    inst = load_instance(sample_path)
    assert inst.num_periods == 15
    assert inst.num_products == 8
    assert inst.inventory_cost_rate == 10
    assert inst.num_items == 12
    assert inst.num_residual == 3
    assert inst.due_dates_per_product[1] == (9, 12)
    assert inst.due_dates_per_product[6] == (6,)
    assert inst.transition_cost[0][1] == 78
    assert inst.transition_cost[7][5] == 70
    for dates in inst.due_dates_per_product:
        assert list(dates) == sorted(set(dates))


def test_parse_small_with_blank_lines():
    inst = parse_instance("\n" + SMALL.replace("3\n", "3\n\n"))
    assert inst.num_periods == 4
    assert inst.num_products == 2
    assert inst.due_dates_per_product == ((1, 3), (2,))
    assert inst.inventory_cost_rate == 3
    assert inst.transition_cost == ((0, 5), (7, 0))
    assert inst.num_residual == 1
    assert inst.max_transition_cost == 7


@pytest.mark.parametrize(
    "content",
    [
        "4\n",  # truncated after the header
        "4\n2\n0 1 0 1\n",  # missing due-date line
        "4\n2\n0 1 0\n0 0 1 0\n3\n0 5\n7 0\n",  # wrong flag count
        "4\n2\n0 1 0 2\n0 0 1 0\n3\n0 5\n7 0\n",  # flag other than 0/1
        "4\n2\n0 1 0 x\n0 0 1 0\n3\n0 5\n7 0\n",  # non-integer token
        "0\n2\n\n\n3\n0 5\n7 0\n",  # non-positive period count
        "4\n2\n0 1 0 1\n0 0 1 0\n-3\n0 5\n7 0\n",  # negative inventory cost
        "4\n2\n0 1 0 1\n0 0 1 0\n3\n0 -5\n7 0\n",  # negative transition cost
        "4\n2\n0 1 0 1\n0 0 1 0\n3\n0 5 1\n7 0\n",  # wrong cost row width
        SMALL + "1\n",  # surplus content
        "2\n2\n1 1\n1 0\n3\n0 5\n7 0\n",  # more items than periods
    ],
)
def test_parse_errors(content: str):
    with pytest.raises(ValueError):
        parse_instance(content)


def test_error_names_the_line():
    with pytest.raises(MalformedInputError, match="line 3"):
        parse_instance("4\n2\n0 1 0\n0 0 1 0\n3\n0 5\n7 0\n")


def test_load_missing_file():
    with pytest.raises(InstanceIOError) as excinfo:
        load_instance("/nonexistent/acp_instance.txt")
    assert isinstance(excinfo.value, AcpError)
    assert isinstance(excinfo.value, OSError)


def test_load_from_temp_file():
    with temp_instance(SMALL) as path:
        inst = load_instance(path)
    assert inst.num_items == 3
