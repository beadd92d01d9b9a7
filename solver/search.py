# solver/search.py: depth-first driver over orientations and placement orders
from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence

from config import CFG
from models import Solution, TileSpec, TILE_COUNT
from progress import log_search_detail
from solver.adjacency import SOLVED, check_for_solution
from solver.orientation import nudge
from solver.permutation import step_sequence, step_sequence_forced_at
from solver.state import SearchState
from solver.symmetry import SolutionLedger

LAST_POSITION = TILE_COUNT - 1


class SearchPhase(Enum):
    CHECKING = "checking"
    FOUND = "found"
    ADVANCING_ORIENTATION = "advancing_orientation"
    ADVANCING_PERMUTATION = "advancing_permutation"
    EXHAUSTED = "exhausted"
    STOPPED = "stopped"


TERMINAL_PHASES = (SearchPhase.EXHAUSTED, SearchPhase.STOPPED)


@dataclass
class SearchResult:
    solutions: List[Solution]
    phase: SearchPhase
    checks: int
    nudges: int
    steps: int
    duplicates: int
    elapsed_sec: float
    use_flipped: bool
    stop_on_first: bool
    stats: Dict[str, Any] = field(default_factory=dict)

    @property
    def solution_count(self) -> int:
        return len(self.solutions)

    @property
    def exhausted(self) -> bool:
        return self.phase is SearchPhase.EXHAUSTED

    @property
    def message(self) -> str:
        if self.exhausted:
            return "End of sequence ..."
        return "Stopped on first solution"


class Search:
    """One exhaustive search over a tile set.

    Starts from the identity order with every tile untransformed. Each call to
    :meth:`step` performs one state transition:

    * CHECKING finds the first position that does not fit (or none);
    * FOUND records a snapshot, then either stops or treats position 15 as
      the failure so the search continues;
    * ADVANCING_ORIENTATION nudges the failing tile;
    * ADVANCING_PERMUTATION forces a new occupant at the failing position
      (plain lexicographic successor at position 15), or ends in EXHAUSTED.
    """

    def __init__(
        self,
        specs: Optional[Sequence[TileSpec]] = None,
        *,
        stop_on_first: Optional[bool] = None,
        use_flipped: Optional[bool] = None,
        dedupe: Optional[str] = None,
        on_solution: Optional[Callable[[Solution], None]] = None,
        on_progress: Optional[Callable[[Dict[str, Any]], None]] = None,
        progress_every: Optional[int] = None,
    ):
        self.stop_on_first = bool(CFG.STOP_ON_FIRST_SOLUTION if stop_on_first is None else stop_on_first)
        self.use_flipped = bool(CFG.USE_FLIPPED_TILES if use_flipped is None else use_flipped)
        self.ledger = SolutionLedger(CFG.SOLUTION_DEDUPE if dedupe is None else dedupe)
        self.on_solution = on_solution
        self.on_progress = on_progress
        every = CFG.PROGRESS_EVERY if progress_every is None else progress_every
        self.progress_every = max(0, int(every))

        self.state = SearchState(specs)
        self.phase = SearchPhase.CHECKING
        self.failed_at = SOLVED
        self.solutions: List[Solution] = []
        self.found = 0
        self.checks = 0
        self.nudges = 0
        self.steps = 0
        self._t0: Optional[float] = None
        self._t_end: Optional[float] = None

    @property
    def done(self) -> bool:
        return self.phase in TERMINAL_PHASES

    @property
    def elapsed(self) -> float:
        if self._t0 is None:
            return 0.0
        end = self._t_end if self._t_end is not None else time.time()
        return max(0.0, end - self._t0)

    def stats(self) -> Dict[str, Any]:
        return {
            "phase": self.phase,
            "checks": self.checks,
            "nudges": self.nudges,
            "steps": self.steps,
            "solutions": len(self.solutions),
            "found": self.found,
            "duplicates": self.ledger.duplicates,
            "order": self.state.order,
            "elapsed": self.elapsed,
        }

    # ---------- transitions ----------

    def step(self) -> SearchPhase:
        if self.done:
            return self.phase
        if self._t0 is None:
            self._t0 = time.time()
            log_search_detail(
                "Search started",
                use_flipped=self.use_flipped,
                stop_on_first=self.stop_on_first,
                dedupe=self.ledger.policy,
            )

        phase = self.phase
        if phase is SearchPhase.CHECKING:
            failed_at = check_for_solution(self.state)
            self.checks += 1
            if self.progress_every and self.on_progress and self.checks % self.progress_every == 0:
                self.on_progress(self.stats())
            if failed_at == SOLVED:
                self.phase = SearchPhase.FOUND
            else:
                self.failed_at = failed_at
                self.phase = SearchPhase.ADVANCING_ORIENTATION

        elif phase is SearchPhase.FOUND:
            self._record()
            if self.stop_on_first:
                self._finish(SearchPhase.STOPPED)
            else:
                self.failed_at = LAST_POSITION
                self.phase = SearchPhase.ADVANCING_ORIENTATION

        elif phase is SearchPhase.ADVANCING_ORIENTATION:
            if nudge(self.state, self.failed_at, self.use_flipped):
                self.nudges += 1
                self.phase = SearchPhase.CHECKING
            else:
                self.phase = SearchPhase.ADVANCING_PERMUTATION

        elif phase is SearchPhase.ADVANCING_PERMUTATION:
            if self.failed_at == LAST_POSITION:
                advanced = step_sequence(self.state)
            else:
                advanced = step_sequence_forced_at(self.state, self.failed_at)
            if advanced:
                self.steps += 1
                self.phase = SearchPhase.CHECKING
            else:
                self._finish(SearchPhase.EXHAUSTED)

        return self.phase

    def _record(self) -> None:
        self.found += 1
        solution = self.state.snapshot(len(self.solutions) + 1)
        if not self.ledger.admit(solution):
            return
        self.solutions.append(solution)
        log_search_detail(
            "Solution found",
            index=solution.index,
            order=" ".join(str(i) for i in solution.order),
            checks=self.checks,
            elapsed=self.elapsed,
        )
        if self.on_solution:
            self.on_solution(solution)

    def _finish(self, phase: SearchPhase) -> None:
        self.phase = phase
        self._t_end = time.time()
        log_search_detail(
            "Search exhausted" if phase is SearchPhase.EXHAUSTED else "Search stopped",
            solutions=len(self.solutions),
            duplicates=self.ledger.duplicates,
            checks=self.checks,
            nudges=self.nudges,
            steps=self.steps,
            elapsed=self.elapsed,
        )
        if self.on_progress:
            self.on_progress(self.stats())

    # ---------- drivers ----------

    def iter_solutions(self) -> Iterator[Solution]:
        while not self.done:
            before = len(self.solutions)
            self.step()
            if len(self.solutions) != before:
                yield self.solutions[-1]

    def run(self) -> SearchResult:
        while not self.done:
            self.step()
        return self.result()

    def result(self) -> SearchResult:
        return SearchResult(
            solutions=list(self.solutions),
            phase=self.phase,
            checks=self.checks,
            nudges=self.nudges,
            steps=self.steps,
            duplicates=self.ledger.duplicates,
            elapsed_sec=self.elapsed,
            use_flipped=self.use_flipped,
            stop_on_first=self.stop_on_first,
            stats=self.stats(),
        )


def run_search(specs: Optional[Sequence[TileSpec]] = None, **kwargs: Any) -> SearchResult:
    return Search(specs, **kwargs).run()
