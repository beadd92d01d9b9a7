# solver/permutation.py: lexicographic placement-order stepping
from models import TILE_COUNT

LAST_PAIR = TILE_COUNT - 2  # left index of the final (14, 15) pair


def last_ascending_pair_index(state, offset: int = LAST_PAIR) -> int:
    """
    Highest i <= offset with order[i] < order[i+1], or -1 when order[0..offset+1]
    is strictly descending (nothing left to step at or before ``offset``).
    """
    tiles = state.tiles
    for i in range(min(offset, LAST_PAIR), -1, -1):
        if tiles[i].tile_id < tiles[i + 1].tile_id:
            return i
    return -1


def smallest_higher_value_index(state, offset: int) -> int:
    """Index after ``offset`` holding the smallest identity above order[offset];
    ``offset`` itself when there is none."""
    tiles = state.tiles
    ref = tiles[offset].tile_id
    best_ix = offset
    best = TILE_COUNT
    for i in range(offset + 1, TILE_COUNT):
        v = tiles[i].tile_id
        if ref < v < best:
            best = v
            best_ix = i
    return best_ix


def sort_tail(state, offset: int) -> None:
    """Order positions ``offset``.. ascending by identity, all untransformed."""
    if offset >= TILE_COUNT:
        return
    state.tiles[offset:] = sorted(state.tiles[offset:], key=lambda t: t.tile_id)
    for pos in range(offset, TILE_COUNT):
        state.reset(pos)


def _advance_at(state, pivot: int, target: int) -> None:
    state.swap(pivot, target)
    state.reset(pivot)
    sort_tail(state, pivot + 1)


def step_sequence(state) -> bool:
    """Lexicographic successor of the full order. False once it is 15..0."""
    pivot = last_ascending_pair_index(state, LAST_PAIR)
    if pivot < 0:
        return False
    _advance_at(state, pivot, smallest_higher_value_index(state, pivot))
    return True


def step_sequence_forced_at(state, offset: int) -> bool:
    """Next order whose prefix through ``offset`` differs from the current one.

    Every arrangement that keeps positions 0..offset as they are would repeat
    the mismatch found at ``offset``, so the tail is skipped wholesale: take
    the next higher identity from the tail at ``offset`` when one exists,
    otherwise step at the first ascending pair left of it.
    """
    target = smallest_higher_value_index(state, offset)
    if target != offset:
        _advance_at(state, offset, target)
        return True

    pivot = last_ascending_pair_index(state, offset)
    if pivot < 0:
        return False
    _advance_at(state, pivot, smallest_higher_value_index(state, pivot))
    return True
