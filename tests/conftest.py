"""Shared tile tables for solver tests."""

import pytest

from models import Connector, Gender
from tiles import build_tile_specs, default_tile_specs

M, F = Gender.MALE, Gender.FEMALE


def uniform_row(connector=Connector.CROSS):
    return [(connector, M), (connector, F), (connector, F), (connector, M)]


@pytest.fixture
def default_specs():
    return default_tile_specs()


@pytest.fixture
def uniform_specs():
    """Every edge fits every other: the identity placement is already solved."""
    return build_tile_specs([uniform_row() for _ in range(16)])


@pytest.fixture
def first_solution_specs():
    """Tile 1 has one odd male edge; the first fit moves it to the left border.

    The driver has to rotate tile 1 at position 1, exhaust position 2, step
    back to position 1, then exhaust position 3 before tile 1 lands on
    position 3 with its odd edge outside the board.
    """
    rows = [uniform_row() for _ in range(16)]
    rows[1] = [(Connector.CROSS, M), (Connector.CROSS, F), (Connector.CROSS, F), (Connector.ARROW_IN, M)]
    return build_tile_specs(rows)


@pytest.fixture
def dead_end_specs():
    """Male edges are arrows, female edges are cross/round: nothing ever fits."""
    row = [(Connector.ARROW_IN, M), (Connector.CROSS, F), (Connector.ROUND, F), (Connector.ARROW_OUT, M)]
    return build_tile_specs([list(row) for _ in range(16)])


@pytest.fixture
def first_solution_order():
    return (0, 2, 3, 1) + tuple(range(4, 16))
