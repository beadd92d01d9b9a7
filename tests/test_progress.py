from progress import (
    publish_stats,
    reset,
    set_done,
    set_phase,
    set_result_url,
    set_run_options,
    set_status,
    snapshot,
    start_timer,
)
from solver.search import SearchPhase


def test_set_done_no_args_defaults_to_solved():
    reset()
    set_done()
    snap = snapshot()
    assert snap["status"] == "Solved"
    assert snap["done"] is True
    assert snap["ok"] is True
    assert snap["result_url"] == ""


def test_set_done_accepts_legacy_arguments():
    reset()
    set_status("error")
    set_done(False, reason="boom")
    snap = snapshot()
    assert snap["status"] == "Error"
    assert snap["message"] == "boom"
    assert snap["done"] is True
    assert snap["ok"] is False


def test_set_done_explicit_status_wins():
    reset()
    set_status("Solving")
    set_done(False, reason="End of sequence ...", status="Exhausted")
    snap = snapshot()
    assert snap["status"] == "Exhausted"
    assert snap["ok"] is False
    assert snap["message"] == "End of sequence ..."


def test_set_result_url_tracks_navigation_target():
    reset()
    set_result_url("/foo")
    snap = snapshot()
    assert snap["result_url"] == "/foo"
    assert snap["done"] is False


def test_reset_increments_run_identifier():
    reset()
    first = snapshot()["run_id"]
    reset()
    second = snapshot()["run_id"]
    assert isinstance(first, int)
    assert isinstance(second, int)
    assert second == first + 1


def test_publish_stats_copies_search_counters():
    reset()
    start_timer()
    publish_stats({
        "phase": SearchPhase.ADVANCING_PERMUTATION,
        "checks": 12,
        "nudges": 9,
        "steps": "2",
        "solutions": -4,
        "order": (1, 0, 2),
    })
    snap = snapshot()
    assert snap["phase"] == "ADVANCING_PERMUTATION"
    assert (snap["checks"], snap["nudges"], snap["steps"]) == (12, 9, 2)
    # counters never go negative
    assert snap["solutions"] == 0
    assert snap["order"] == "1 0 2"
    assert "elapsed_start" not in snap
    assert snap["elapsed_str"].endswith("s")


def test_run_options_and_phase_names():
    reset()
    set_run_options(use_flipped=1, stop_on_first="")
    set_phase(SearchPhase.CHECKING)
    snap = snapshot()
    assert snap["use_flipped"] is True
    assert snap["stop_on_first"] is False
    assert snap["phase"] == "CHECKING"
