# solver/symmetry.py: whole-board rotations / mirrors of a solved layout
from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, Set, Tuple

from models import PlacedTile, Solution
from solver.adjacency import GRID_LAYOUT

DEDUPE_POLICIES = ("none", "board")

_N = len(GRID_LAYOUT)

SolutionKey = Tuple[Tuple[int, Tuple[Tuple[int, int], ...]], ...]


def _rebuild(solution: Solution, cells: List[List[PlacedTile]]) -> Solution:
    by_pos: List[Optional[PlacedTile]] = [None] * (_N * _N)
    for r in range(_N):
        for c in range(_N):
            pos = GRID_LAYOUT[r][c]
            by_pos[pos] = replace(cells[r][c], position=pos)
    tiles = tuple(by_pos)  # type: ignore[arg-type]
    return Solution(index=solution.index, order=tuple(t.tile_id for t in tiles), tiles=tiles)


def _grid(solution: Solution) -> List[List[PlacedTile]]:
    return [[solution.tiles[pos] for pos in row] for row in GRID_LAYOUT]


def rotate_solution(solution: Solution) -> Solution:
    """Turn the whole board 90° clockwise; every tile turns with it."""
    old = _grid(solution)
    cells = []
    for r in range(_N):
        row = []
        for c in range(_N):
            t = old[_N - 1 - c][r]
            sides = (t.sides[3],) + t.sides[:3]
            row.append(replace(t, sides=sides, rotation=(t.rotation + 1) % 4))
        cells.append(row)
    return _rebuild(solution, cells)


def mirror_solution(solution: Solution) -> Solution:
    """Reflect the board across its main diagonal; every tile is turned over."""
    old = _grid(solution)
    cells = []
    for r in range(_N):
        row = []
        for c in range(_N):
            t = old[c][r]
            row.append(replace(
                t,
                sides=tuple(reversed(t.sides)),
                rotation=(-t.rotation) % 4,
                face_up=not t.face_up,
            ))
        cells.append(row)
    return _rebuild(solution, cells)


def solution_key(solution: Solution) -> SolutionKey:
    return tuple(
        (t.tile_id, tuple(s.key() for s in t.sides))
        for t in solution.tiles
    )


def symmetric_variants(solution: Solution) -> List[Solution]:
    out = []
    for start in (solution, mirror_solution(solution)):
        cur = start
        for _ in range(4):
            out.append(cur)
            cur = rotate_solution(cur)
    return out


def canonical_key(solution: Solution) -> SolutionKey:
    return min(solution_key(v) for v in symmetric_variants(solution))


class SolutionLedger:
    """Decides which found solutions get reported under a dedupe policy."""

    def __init__(self, policy: str = "none"):
        policy = (policy or "none").strip().lower()
        if policy not in DEDUPE_POLICIES:
            raise ValueError(f"unknown dedupe policy {policy!r}; expected one of {DEDUPE_POLICIES}")
        self.policy = policy
        self.seen: Set[SolutionKey] = set()
        self.duplicates = 0

    def admit(self, solution: Solution) -> bool:
        if self.policy == "none":
            return True
        key = canonical_key(solution)
        if key in self.seen:
            self.duplicates += 1
            return False
        self.seen.add(key)
        return True
