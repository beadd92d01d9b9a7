# app.py: solve / probe endpoints; progress no-cache
from __future__ import annotations
import json
import os
from typing import Any, Dict, Optional, Tuple

from flask import Flask, request, send_from_directory, jsonify, url_for

from config import CFG
from io_files import read_tile_table, solutions_path, write_solutions
from models import Solution, TileSpec
from render import format_solution
from solver.cp_sat import probe_with_cp_sat
from solver.search import run_search
from tiles import default_tile_specs, parse_tile_table, side_token, table_rows

from progress import (
    reset as progress_reset,
    as_json as progress_json,
    start_timer as progress_start,
    set_status, set_phase, set_message, set_run_options,
    publish_stats, set_done, set_result_url,
)

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# Full text of every solution goes to the solutions file; the JSON result
# carries at most this many.
MAX_SOLUTIONS_IN_RESULT = 50

LAST_RESULT: Dict[str, Any] = {
    "ok": False,
    "message": "",
    "solutions_found": 0,
    "duplicates": 0,
    "exhausted": False,
    "checks": 0,
    "nudges": 0,
    "steps": 0,
    "elapsed_str": "0s",
    "use_flipped": False,
    "stop_on_first": False,
    "solutions": [],
    "solutions_filename": "",
}

app = Flask(__name__)


@app.after_request
def _no_cache_progress(resp):
    if request.path == "/progress3":
        resp.headers["Cache-Control"] = "no-store, max-age=0"
        resp.headers["Pragma"] = "no-cache"
        resp.headers["Expires"] = "0"
    return resp


def _fmt_elapsed(seconds: float) -> str:
    if seconds < 1:
        return "0s"
    m, s = divmod(int(seconds), 60)
    if m == 0:
        return f"{s}s"
    h, m = divmod(m, 60)
    if h == 0:
        return f"{m}m {s}s"
    return f"{h}h {m}m {s}s"


def _merge_like_mapping() -> Dict[str, Any]:
    merged: Dict[str, Any] = {}
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        merged.update(payload)
    for source in (request.form, request.args):
        for k, v in source.to_dict(flat=True).items():
            merged.setdefault(k, v)
    return merged


def _to_flag(value: Any, default: bool) -> bool:
    if value is None or value == "":
        return bool(default)
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _to_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return float(default)


def _configured_specs() -> Tuple[TileSpec, ...]:
    if CFG.TILES_FILE:
        return read_tile_table(CFG.TILES_FILE)
    return default_tile_specs()


def _specs_from_request(like: Dict[str, Any]) -> Tuple[Optional[Tuple[TileSpec, ...]], Optional[str]]:
    raw = like.get("tiles")
    if raw is None or raw == "":
        try:
            return _configured_specs(), None
        except (OSError, ValueError) as e:
            return None, f"Bad tile file: {e}"
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError as e:
            return None, f"Bad tile table: {e}"
    return parse_tile_table(raw)


def _solution_payload(sol: Solution) -> Dict[str, Any]:
    return {
        "index": sol.index,
        "order": list(sol.order),
        "tiles": [
            {
                "position": t.position,
                "tile_id": t.tile_id,
                "rotation": t.rotation,
                "face_up": t.face_up,
                "sides": [side_token(s) for s in t.sides],
            }
            for t in sol.tiles
        ],
        "text": format_solution(sol),
    }


def _bad_request(reason: str):
    set_status("Error")
    set_done(False, reason=reason)
    LAST_RESULT.update({
        "ok": False,
        "message": reason,
        "solutions_found": 0,
        "duplicates": 0,
        "exhausted": False,
        "checks": 0,
        "nudges": 0,
        "steps": 0,
        "elapsed_str": "0s",
        "solutions": [],
        "solutions_filename": "",
    })
    set_result_url(url_for("result_latest"))
    return jsonify(LAST_RESULT), 400


@app.route("/")
def index():
    try:
        specs = _configured_specs()
        table, error = table_rows(specs), None
    except (OSError, ValueError) as e:
        table, error = [], f"Bad tile file: {e}"
    return jsonify({
        "stop_on_first": CFG.STOP_ON_FIRST_SOLUTION,
        "use_flipped": CFG.USE_FLIPPED_TILES,
        "dedupe": CFG.SOLUTION_DEDUPE,
        "tiles": table,
        "error": error,
    })


@app.route("/result/latest")
def result_latest():
    return jsonify(LAST_RESULT)


@app.route("/solve", methods=["POST"])
def solve():
    progress_reset()
    progress_start()
    set_status("Solving")
    set_phase("checking")

    like = _merge_like_mapping()
    specs, err = _specs_from_request(like)
    if err or not specs:
        return _bad_request(err or "nothing parsed from request")

    stop_on_first = _to_flag(like.get("stop_on_first"), CFG.STOP_ON_FIRST_SOLUTION)
    use_flipped = _to_flag(like.get("use_flipped"), CFG.USE_FLIPPED_TILES)
    dedupe = str(like.get("dedupe") or CFG.SOLUTION_DEDUPE)
    set_run_options(use_flipped=use_flipped, stop_on_first=stop_on_first)

    try:
        result = run_search(
            specs,
            stop_on_first=stop_on_first,
            use_flipped=use_flipped,
            dedupe=dedupe,
            on_progress=publish_stats,
        )
    except ValueError as e:
        return _bad_request(str(e))

    publish_stats(result.stats)
    try:
        out_path = write_solutions(
            result.solutions,
            BASE_DIR,
            exhausted=result.exhausted,
            duplicates=result.duplicates,
        )
        out_name = os.path.basename(out_path)
    except OSError as e:
        out_name = ""
        set_message(f"could not write solutions: {e}")

    ok_flag = result.solution_count > 0
    set_done(ok_flag, reason=result.message, status="Exhausted" if result.exhausted else "Solved")

    LAST_RESULT.update({
        "ok": ok_flag,
        "message": result.message,
        "solutions_found": result.solution_count,
        "duplicates": result.duplicates,
        "exhausted": result.exhausted,
        "checks": result.checks,
        "nudges": result.nudges,
        "steps": result.steps,
        "elapsed_str": _fmt_elapsed(result.elapsed_sec),
        "use_flipped": use_flipped,
        "stop_on_first": stop_on_first,
        "solutions": [_solution_payload(s) for s in result.solutions[:MAX_SOLUTIONS_IN_RESULT]],
        "solutions_filename": out_name,
    })
    set_result_url(url_for("result_latest"))
    return jsonify(LAST_RESULT)


@app.route("/probe", methods=["POST"])
def probe():
    like = _merge_like_mapping()
    specs, err = _specs_from_request(like)
    if err or not specs:
        return jsonify({"ok": False, "reason": err or "nothing parsed from request"}), 400

    use_flipped = _to_flag(like.get("use_flipped"), CFG.USE_FLIPPED_TILES)
    seconds = _to_float(like.get("max_seconds"), CFG.CP_SAT_SECONDS)
    ok, solution, reason = probe_with_cp_sat(specs, use_flipped=use_flipped, max_seconds=seconds)
    return jsonify({
        "ok": ok,
        "reason": reason,
        "use_flipped": use_flipped,
        "solution": _solution_payload(solution) if solution else None,
    })


@app.route("/download/solutions")
def download_solutions():
    full = solutions_path(BASE_DIR)
    return send_from_directory(os.path.dirname(full), os.path.basename(full), as_attachment=True)


@app.route("/progress3")
def progress3():
    return jsonify(progress_json())


if __name__ == "__main__":
    app.run(debug=False)
