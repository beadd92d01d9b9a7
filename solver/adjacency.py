# solver/adjacency.py: edge checks in spiral placement order
from typing import Dict, List, Sequence, Tuple

from models import Side, Solution, TILE_COUNT

SOLVED = 0  # check_for_solution() result when every position fits

# Board cells hold the position number placed there. Positions are checked in
# numeric order, so each new position touches as few unplaced cells as possible.
GRID_LAYOUT: Tuple[Tuple[int, ...], ...] = (
    (0, 1, 4, 9),
    (3, 2, 5, 10),
    (8, 7, 6, 11),
    (15, 14, 13, 12),
)

TRAVERSAL_ORDER: Tuple[int, ...] = tuple(pos for row in GRID_LAYOUT for pos in row)

Constraint = Tuple[int, int, int]  # (own side, neighbour position, neighbour side)

# For each position: edges shared with positions placed before it.
CONSTRAINTS: Tuple[Tuple[Constraint, ...], ...] = (
    (),                          # 0
    ((3, 0, 1),),                # 1
    ((0, 1, 2),),                # 2
    ((1, 2, 3), (0, 0, 2)),      # 3
    ((3, 1, 1),),                # 4
    ((0, 4, 2), (3, 2, 1)),      # 5
    ((0, 5, 2),),                # 6
    ((0, 2, 2), (1, 6, 3)),      # 7
    ((0, 3, 2), (1, 7, 3)),      # 8
    ((3, 4, 1),),                # 9
    ((0, 9, 2), (3, 5, 1)),      # 10
    ((0, 10, 2), (3, 6, 1)),     # 11
    ((0, 11, 2),),               # 12
    ((0, 6, 2), (1, 12, 3)),     # 13
    ((0, 7, 2), (1, 13, 3)),     # 14
    ((0, 8, 2), (1, 14, 3)),     # 15
)

# (row delta, column delta) of the neighbour across each side
_SIDE_OFFSETS = ((-1, 0), (0, 1), (1, 0), (0, -1))


def cell_of(pos: int, layout: Sequence[Sequence[int]] = GRID_LAYOUT) -> Tuple[int, int]:
    for r, row in enumerate(layout):
        for c, p in enumerate(row):
            if p == pos:
                return r, c
    raise ValueError(f"position {pos} is not on the board")


def constraints_for_layout(layout: Sequence[Sequence[int]]) -> Dict[int, List[Constraint]]:
    """Derive each position's edges to lower-numbered neighbours from a layout."""
    rows, cols = len(layout), len(layout[0])
    out: Dict[int, List[Constraint]] = {}
    for r in range(rows):
        for c in range(cols):
            pos = layout[r][c]
            edges: List[Constraint] = []
            for side, (dr, dc) in enumerate(_SIDE_OFFSETS):
                nr, nc = r + dr, c + dc
                if not (0 <= nr < rows and 0 <= nc < cols):
                    continue
                other = layout[nr][nc]
                if other < pos:
                    edges.append((side, other, (side + 2) % 4))
            out[pos] = edges
    return out


def sides_match(state, pos_a: int, side_a: int, pos_b: int, side_b: int) -> bool:
    a = state.tiles[pos_a].sides[side_a]
    b = state.tiles[pos_b].sides[side_b]
    return a.connector is b.connector and a.gender is not b.gender


def check_tile(state, pos: int) -> bool:
    """True when ``pos`` fits every neighbour placed before it."""
    tiles = state.tiles
    own = tiles[pos].sides
    for side, other, other_side in CONSTRAINTS[pos]:
        a = own[side]
        b = tiles[other].sides[other_side]
        if a.connector is not b.connector or a.gender is b.gender:
            return False
    return True


def check_for_solution(state) -> int:
    """First position (1..15) that does not fit, or SOLVED (0)."""
    for pos in range(1, TILE_COUNT):
        if not check_tile(state, pos):
            return pos
    return SOLVED


def edge_failures(sides_by_position: Sequence[Sequence[Side]]) -> List[Tuple[int, int, int, int]]:
    failures = []
    for pos, edges in enumerate(CONSTRAINTS):
        for side, other, other_side in edges:
            if not sides_by_position[pos][side].fits(sides_by_position[other][other_side]):
                failures.append((pos, side, other, other_side))
    return failures


def verify_solution(solution: Solution) -> bool:
    """Re-check all 24 edges of a snapshot, independent of any search state."""
    if sorted(solution.order) != list(range(TILE_COUNT)):
        return False
    if tuple(t.tile_id for t in solution.tiles) != tuple(solution.order):
        return False
    return not edge_failures([t.sides for t in solution.tiles])
