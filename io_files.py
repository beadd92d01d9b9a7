"""Helpers for reading tile tables and writing solver outputs to disk."""

from __future__ import annotations

import json
import os
from typing import Sequence, Tuple

from config import CFG
from models import Solution, TileSpec
from render import format_solution, format_summary
from tiles import build_tile_specs


def _resolve_output_path(base_dir: str, configured_name: str, fallback: str) -> str:
    """Return the absolute path where an output artifact should be written."""

    name = (configured_name or "").strip() or fallback
    if os.path.isabs(name):
        return name
    return os.path.join(base_dir, name)


def solutions_path(base_dir: str) -> str:
    return _resolve_output_path(base_dir, CFG.SOLUTIONS_OUT, "solutions.txt")


def write_solutions(
    solutions: Sequence[Solution],
    base_dir: str,
    *,
    exhausted: bool = True,
    duplicates: int = 0,
) -> str:
    """Write every reported solution plus the run summary to the configured text file."""

    path = solutions_path(base_dir)
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        if not solutions:
            f.write("No solution\n\n")
        for sol in solutions:
            f.write(format_solution(sol))
            f.write("\n\n")
        f.write(format_summary(len(solutions), exhausted, duplicates=duplicates))
        f.write("\n")
    return path


def read_tile_table(path: str) -> Tuple[TileSpec, ...]:
    """Load a 16-row JSON tile table (a list, or {"tiles": [...]}) from ``path``."""

    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    rows = data.get("tiles") if isinstance(data, dict) else data
    if not isinstance(rows, list):
        raise ValueError(f"{path}: expected a list of tile rows")
    return build_tile_specs(rows)


__all__ = ["read_tile_table", "solutions_path", "write_solutions"]
