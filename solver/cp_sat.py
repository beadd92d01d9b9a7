# solver/cp_sat.py: CP-SAT feasibility probe for the same puzzle
from typing import List, Optional, Sequence, Tuple

from ortools.sat.python import cp_model as _cp

from config import CFG
from models import PlacedTile, Solution, TileSpec, TILE_COUNT, SIDE_COUNT
from solver.adjacency import CONSTRAINTS, verify_solution
from solver.orientation import iter_oriented
from tiles import default_tile_specs


def probe_with_cp_sat(
    specs: Optional[Sequence[TileSpec]] = None,
    *,
    use_flipped: Optional[bool] = None,
    max_seconds: Optional[float] = None,
) -> Tuple[bool, Optional[Solution], Optional[str]]:
    """
    Look for one valid board with CP-SAT instead of the exhaustive stepper.

    Each position picks exactly one (tile, orientation) and each tile is used
    exactly once; the connector and gender showing on every side become integer
    expressions so each shared edge is two linear equalities.

    Returns (ok, solution_or_None, reason_or_None).
    """
    specs = tuple(specs) if specs is not None else default_tile_specs()
    if len(specs) != TILE_COUNT:
        return False, None, f"Bad tile table: expected {TILE_COUNT} tiles, got {len(specs)}"
    flipped = bool(CFG.USE_FLIPPED_TILES if use_flipped is None else use_flipped)
    seconds = float(CFG.CP_SAT_SECONDS if max_seconds is None else max_seconds)

    choices = [list(iter_oriented(spec, flipped)) for spec in specs]

    m = _cp.CpModel()
    x = [
        [
            [m.NewBoolVar(f"x_{p}_{t}_{o}") for o in range(len(choices[t]))]
            for t in range(TILE_COUNT)
        ]
        for p in range(TILE_COUNT)
    ]

    for p in range(TILE_COUNT):
        m.Add(sum(x[p][t][o] for t in range(TILE_COUNT) for o in range(len(choices[t]))) == 1)
    for t in range(TILE_COUNT):
        m.Add(sum(x[p][t][o] for p in range(TILE_COUNT) for o in range(len(choices[t]))) == 1)

    conn: List[List[_cp.IntVar]] = []
    gend: List[List[_cp.IntVar]] = []
    for p in range(TILE_COUNT):
        conn_row, gend_row = [], []
        for s in range(SIDE_COUNT):
            c = m.NewIntVar(0, 3, f"conn_{p}_{s}")
            g = m.NewIntVar(0, 1, f"gend_{p}_{s}")
            m.Add(c == sum(
                x[p][t][o] * choices[t][o][2][s].connector.value
                for t in range(TILE_COUNT)
                for o in range(len(choices[t]))
            ))
            m.Add(g == sum(
                x[p][t][o] * choices[t][o][2][s].gender.value
                for t in range(TILE_COUNT)
                for o in range(len(choices[t]))
            ))
            conn_row.append(c)
            gend_row.append(g)
        conn.append(conn_row)
        gend.append(gend_row)

    for pos, edges in enumerate(CONSTRAINTS):
        for side, other, other_side in edges:
            m.Add(conn[pos][side] == conn[other][other_side])
            m.Add(gend[pos][side] + gend[other][other_side] == 1)

    solver = _cp.CpSolver()
    solver.parameters.max_time_in_seconds = seconds
    solver.parameters.num_workers = max(1, int(getattr(CFG, "WORKERS", 1)))
    solver.parameters.log_search_progress = False

    res = solver.Solve(m)

    if res in (_cp.OPTIMAL, _cp.FEASIBLE):
        placed: List[PlacedTile] = []
        for p in range(TILE_COUNT):
            for t in range(TILE_COUNT):
                hit = next(
                    (o for o in range(len(choices[t])) if solver.BooleanValue(x[p][t][o])),
                    None,
                )
                if hit is not None:
                    rotation, face_up, sides = choices[t][hit]
                    placed.append(PlacedTile(p, t, rotation, face_up, sides))
                    break
        solution = Solution(index=1, order=tuple(pt.tile_id for pt in placed), tiles=tuple(placed))
        if len(placed) != TILE_COUNT or not verify_solution(solution):
            return False, None, "CP-SAT answer failed the edge re-check"
        return True, solution, None

    if res == _cp.INFEASIBLE:
        return False, None, "Proven infeasible under current constraints"
    if res == _cp.MODEL_INVALID:
        return False, None, "Model invalid (configuration error)"
    return False, None, "Stopped before solution (timebox)"
