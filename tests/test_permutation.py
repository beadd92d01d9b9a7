import random

import pytest

from models import TilePlacement
from solver.orientation import rotate
from solver.permutation import (
    last_ascending_pair_index,
    smallest_higher_value_index,
    sort_tail,
    step_sequence,
    step_sequence_forced_at,
)
from solver.state import SearchState
from tiles import spec_for


def _state_with_order(order):
    state = SearchState()
    state.tiles = [TilePlacement.from_spec(spec_for(state.specs, i)) for i in order]
    return state


def test_step_from_identity_swaps_last_pair():
    state = SearchState()
    assert step_sequence(state) is True
    assert state.order == tuple(range(14)) + (15, 14)


def test_descending_order_is_the_last_one():
    state = _state_with_order(range(15, -1, -1))
    assert last_ascending_pair_index(state) == -1
    assert step_sequence(state) is False
    assert state.order == tuple(range(15, -1, -1))


def test_step_moves_next_higher_value_into_pivot():
    state = _state_with_order([0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 15, 14, 13])
    assert last_ascending_pair_index(state) == 12
    assert smallest_higher_value_index(state, 12) == 15
    assert step_sequence(state) is True
    assert state.order == tuple(range(12)) + (13, 12, 14, 15)


def test_forced_step_replaces_occupant_at_offset():
    state = SearchState()
    assert step_sequence_forced_at(state, 5) is True
    assert state.order == (0, 1, 2, 3, 4, 6, 5) + tuple(range(7, 16))


def test_forced_step_falls_back_left_when_tail_has_nothing_higher():
    state = _state_with_order([0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 15, 14, 13])
    assert step_sequence_forced_at(state, 14) is True
    assert state.order == tuple(range(12)) + (13, 12, 14, 15)


def test_forced_step_at_last_position_equals_plain_step():
    a = _state_with_order(list(range(14)) + [15, 14])
    b = _state_with_order(list(range(14)) + [15, 14])
    assert step_sequence_forced_at(a, 15) is True
    assert step_sequence(b) is True
    assert a.order == b.order == tuple(range(13)) + (14, 13, 15)


def test_forced_step_on_descending_order_reports_exhaustion():
    state = _state_with_order(range(15, -1, -1))
    assert step_sequence_forced_at(state, 4) is False
    assert state.order == tuple(range(15, -1, -1))


@pytest.mark.parametrize("seed", [3, 7, 11, 42])
def test_forced_step_keeps_a_permutation_and_always_moves_forward(seed):
    rng = random.Random(seed)
    order = list(range(16))
    rng.shuffle(order)
    for offset in range(1, 16):
        state = _state_with_order(order)
        before = state.order
        if not step_sequence_forced_at(state, offset):
            continue
        after = state.order
        assert sorted(after) == list(range(16))
        assert after > before
        assert after[: offset + 1] != before[: offset + 1]


def test_step_resets_tail_but_keeps_prefix_transforms():
    state = SearchState()
    for pos in range(16):
        rotate(state, pos)
    assert step_sequence(state) is True
    assert [t.rotation for t in state.tiles[:14]] == [1] * 14
    for pos in (14, 15):
        t = state.tiles[pos]
        assert (t.rotation, t.face_up) == (0, True)
        assert t.sides == list(state.specs[t.tile_id].sides)


def test_swap_carries_transform_with_the_tile():
    state = SearchState()
    rotate(state, 3)
    rotated = list(state.tiles[3].sides)
    state.swap(3, 7)
    assert state.tiles[7].tile_id == 3
    assert state.tiles[7].rotation == 1
    assert state.tiles[7].sides == rotated
    assert state.tiles[3].tile_id == 7
    assert state.tiles[3].rotation == 0


def test_sort_tail_orders_by_identity():
    state = _state_with_order([0, 1, 2, 3, 4, 5, 6, 7, 15, 14, 13, 12, 11, 10, 9, 8])
    sort_tail(state, 8)
    assert state.order == tuple(range(16))
