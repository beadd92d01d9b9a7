from typing import List, Sequence

from models import PlacedTile, Solution
from solver.adjacency import GRID_LAYOUT


def _face(face_up: bool) -> str:
    return "Up" if face_up else "Down"


def format_tile(tile: PlacedTile) -> str:
    lines = [f"Tile position {tile.position} : {_face(tile.face_up):<4s}    Unique Tile ID: {tile.tile_id}"]
    for side in tile.sides:
        lines.append(f"    {side.connector.label:<8s} {side.gender.label:<6s}")
    return "\n".join(lines)


def format_order(order: Sequence[int]) -> str:
    return "Tile order: " + " ".join(str(i) for i in order)


def format_grid(solution: Solution) -> str:
    """Tile ids as they sit on the board; '*' marks a face-down tile."""
    rows: List[str] = []
    for row in GRID_LAYOUT:
        cells = []
        for pos in row:
            t = solution.tiles[pos]
            cells.append(f"{t.tile_id:>2d}{'' if t.face_up else '*'}r{t.rotation}")
        rows.append("  ".join(f"{c:<6s}" for c in cells).rstrip())
    return "\n".join(rows)


def format_solution(solution: Solution) -> str:
    parts = [f"Solution found [{solution.index}]:", format_order(solution.order), format_grid(solution)]
    parts.extend(format_tile(t) for t in solution.tiles)
    return "\n\n".join(parts)


def format_summary(solution_count: int, exhausted: bool, *, duplicates: int = 0) -> str:
    head = "End of sequence ..." if exhausted else "Search stopped."
    text = f"{head}\nSolutions found: {solution_count}"
    if duplicates:
        text += f" ({duplicates} symmetric duplicates skipped)"
    return text
