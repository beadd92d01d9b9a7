import pytest

from solver.adjacency import verify_solution
from solver.search import run_search
from solver.symmetry import (
    SolutionLedger,
    canonical_key,
    mirror_solution,
    rotate_solution,
    solution_key,
    symmetric_variants,
)


@pytest.fixture
def solved(first_solution_specs):
    result = run_search(first_solution_specs, stop_on_first=True, use_flipped=False, dedupe="none")
    return result.solutions[0]


def test_four_board_turns_are_identity(solved):
    cur = solved
    for _ in range(4):
        cur = rotate_solution(cur)
    assert cur == solved


def test_double_mirror_is_identity(solved):
    assert mirror_solution(mirror_solution(solved)) == solved


def test_turned_and_mirrored_boards_still_fit(solved):
    variants = symmetric_variants(solved)
    assert len(variants) == 8
    for v in variants:
        assert verify_solution(v)
        assert sorted(v.order) == list(range(16))


def test_turn_moves_corner_tile(solved):
    turned = rotate_solution(solved)
    # top-left corner (position 0) takes the old bottom-left corner (position 15)
    assert turned.tiles[0].tile_id == solved.tiles[15].tile_id
    assert turned.tiles[0].rotation == (solved.tiles[15].rotation + 1) % 4
    assert turned.tiles[0].position == 0


def test_mirror_turns_tiles_over(solved):
    mirrored = mirror_solution(solved)
    assert all(not t.face_up for t in mirrored.tiles)
    # position 1 sits at row 0 col 1, its mirror cell is row 1 col 0 (position 3)
    assert mirrored.tiles[3].tile_id == solved.tiles[1].tile_id


def test_canonical_key_is_shared_by_all_variants(solved):
    key = canonical_key(solved)
    assert all(canonical_key(v) == key for v in symmetric_variants(solved))
    assert solution_key(rotate_solution(solved)) != solution_key(solved)


def test_board_ledger_admits_one_per_symmetry_class(solved):
    ledger = SolutionLedger("board")
    assert ledger.admit(solved) is True
    assert ledger.admit(rotate_solution(solved)) is False
    assert ledger.admit(mirror_solution(solved)) is False
    assert ledger.duplicates == 2


def test_none_ledger_admits_everything(solved):
    ledger = SolutionLedger()
    assert ledger.admit(solved) is True
    assert ledger.admit(rotate_solution(solved)) is True
    assert ledger.duplicates == 0


def test_ledger_rejects_unknown_policy():
    with pytest.raises(ValueError, match="unknown dedupe policy"):
        SolutionLedger("rows")
