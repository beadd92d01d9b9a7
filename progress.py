from __future__ import annotations

import logging
import time
import threading
from pathlib import Path
from typing import Any, Dict, Optional

# ------------------------------
# Thread-safe global progress state
# ------------------------------

PROGRESS_LOCK = threading.Lock()


def _init_logger() -> logging.Logger:
    logger = logging.getLogger("puzzle.search_log")
    if logger.handlers:
        return logger

    log_path = Path(__file__).resolve().parent / "logs" / "search.log"
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        logger.propagate = False
    except OSError:
        # No writable log directory: run without the search log.
        logger.handlers.clear()
    return logger


SEARCH_LOGGER = _init_logger()


def _log_enabled() -> bool:
    return bool(SEARCH_LOGGER.handlers)


def _fmt_seconds(seconds: Optional[float]) -> Optional[str]:
    if seconds is None:
        return None
    try:
        return f"{float(seconds):.2f}s"
    except (TypeError, ValueError):
        return None


def _emit_log(event: str, **fields: Any) -> None:
    if not _log_enabled():
        return
    extras = [
        f"{key}={value}"
        for key, value in fields.items()
        if value is not None and value != ""
    ]
    try:
        if extras:
            SEARCH_LOGGER.info("%s | %s", event, " ".join(extras))
        else:
            SEARCH_LOGGER.info("%s", event)
    except Exception:
        # Logging failures must never bubble back to the search.
        pass


def log_search_detail(event: str, **fields: Any) -> None:
    """Public entry point for solver-side lifecycle events."""
    if "elapsed" in fields and isinstance(fields["elapsed"], (int, float)):
        fields["elapsed"] = _fmt_seconds(fields["elapsed"])
    _emit_log(event, **fields)


# Single source of truth for the status endpoint
PROGRESS: Dict[str, Any] = {
    "status": "Idle",          # Idle | Solving | Solved | Exhausted | Error
    "phase": "",               # search driver phase, e.g. CHECKING
    "order": "",               # current placement order, space separated
    "checks": 0,               # adjacency evaluations so far
    "nudges": 0,               # orientation advances so far
    "steps": 0,                # permutation advances so far
    "solutions": 0,            # solutions reported so far
    "use_flipped": False,
    "stop_on_first": False,
    "elapsed_start": None,     # t0 (float) when solving started
    "elapsed": 0.0,            # seconds snapshot
    "message": "",             # optional note
    "done": False,             # run completed
    "ok": None,                # success flag if known
    "result_url": "",          # optional navigation target
    "run_id": 0,               # monotonically increasing identifier
}

_RESET_VALUES: Dict[str, Any] = {
    "status": "Idle",
    "phase": "",
    "order": "",
    "checks": 0,
    "nudges": 0,
    "steps": 0,
    "solutions": 0,
    "use_flipped": False,
    "stop_on_first": False,
    "elapsed_start": None,
    "elapsed": 0.0,
    "message": "",
    "done": False,
    "ok": None,
    "result_url": "",
}

# ------------------------------
# Helpers
# ------------------------------

def _now() -> float:
    return time.time()

def _fmt_elapsed(seconds: float) -> str:
    seconds = max(0.0, float(seconds))
    if seconds < 60:
        return f"{int(seconds)}s"
    m, s = divmod(int(seconds), 60)
    if m < 60:
        return f"{m}m {s}s"
    h, m = divmod(m, 60)
    return f"{h}h {m}m"

def reset() -> None:
    with PROGRESS_LOCK:
        try:
            current_run_id = int(PROGRESS.get("run_id", 0))
        except (TypeError, ValueError):
            current_run_id = 0
        PROGRESS.update(_RESET_VALUES)
        PROGRESS["run_id"] = current_run_id + 1
        _emit_log("Progress reset", run_id=PROGRESS["run_id"])

def start_timer() -> None:
    with PROGRESS_LOCK:
        PROGRESS["elapsed_start"] = _now()
        PROGRESS["elapsed"] = 0.0
        _emit_log("Run timer started", run_id=PROGRESS["run_id"])

def _touch_elapsed_locked() -> None:
    t0 = PROGRESS.get("elapsed_start")
    if t0 is not None:
        PROGRESS["elapsed"] = _now() - float(t0)

def _as_count(n: Any) -> int:
    try:
        return max(0, int(n))
    except (TypeError, ValueError):
        return 0

# ------------------------------
# Setters (tolerant)
# ------------------------------

def set_status(v: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["status"] = str(v)

def set_phase(v: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["phase"] = "" if v is None else str(getattr(v, "name", v))

def set_message(msg: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["message"] = "" if msg is None else str(msg)

def set_result_url(url: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["result_url"] = "" if url is None else str(url)

def set_run_options(*, use_flipped: Any = False, stop_on_first: Any = False) -> None:
    with PROGRESS_LOCK:
        PROGRESS["use_flipped"] = bool(use_flipped)
        PROGRESS["stop_on_first"] = bool(stop_on_first)

def publish_stats(stats: Dict[str, Any]) -> None:
    """Bulk update from the search driver's progress callback."""
    with PROGRESS_LOCK:
        for key in ("checks", "nudges", "steps", "solutions"):
            if key in stats:
                PROGRESS[key] = _as_count(stats[key])
        if "phase" in stats:
            phase = stats["phase"]
            PROGRESS["phase"] = "" if phase is None else str(getattr(phase, "name", phase))
        order = stats.get("order")
        if order is not None:
            PROGRESS["order"] = " ".join(str(i) for i in order)
        _touch_elapsed_locked()

def set_done(ok: Any = None, *, reason: Any = None, status: Any = None) -> None:
    """Mark the run complete.

    ``ok`` decides the terminal status when ``status`` is not given
    (``"Solved"`` / ``"Error"``); otherwise an idle status becomes ``"Solved"``.
    ``reason`` is surfaced via the ``message`` field.
    """

    ok_flag: Optional[bool] = None if ok is None else bool(ok)

    with PROGRESS_LOCK:
        _touch_elapsed_locked()
        if status is not None:
            PROGRESS["status"] = str(status)
        elif ok_flag is not None:
            PROGRESS["status"] = "Solved" if ok_flag else "Error"
        elif PROGRESS.get("status") in ("", "Idle", None):
            PROGRESS["status"] = "Solved"
            ok_flag = True
        if reason is not None:
            PROGRESS["message"] = str(reason)
        PROGRESS["done"] = True
        if ok_flag is not None:
            PROGRESS["ok"] = ok_flag
        _emit_log(
            "Run finished",
            run_id=PROGRESS.get("run_id"),
            status=PROGRESS.get("status"),
            ok=PROGRESS.get("ok"),
            duration=_fmt_seconds(PROGRESS.get("elapsed")),
            solutions=PROGRESS.get("solutions"),
            checks=PROGRESS.get("checks"),
            message=PROGRESS.get("message"),
        )

# ------------------------------
# Snapshots for the UI
# ------------------------------

def snapshot() -> Dict[str, Any]:
    with PROGRESS_LOCK:
        _touch_elapsed_locked()
        snap = {k: v for k, v in PROGRESS.items() if k != "elapsed_start"}
        snap["elapsed_str"] = _fmt_elapsed(PROGRESS["elapsed"])
        return snap

def as_json() -> Dict[str, Any]:
    # Alias used by /progress3
    return snapshot()
