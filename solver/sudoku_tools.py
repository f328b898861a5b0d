"""Top-level solving entry points: solve one puzzle into a typed result, solve a batch, and fold finished results into batch statistics. Also provides the tool-friendly helpers used by the CLI and the API."""

from __future__ import annotations

# sudoku_tools.py
# parse -> propagate -> (search) -> SolveResult, with a per-call SolveStats.
# No module-level mutable state: every solve() is independent, so batches can
# be spread over worker processes and collected by a single BatchSummary.

import time
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from typing import Dict, Iterable, Iterator, List, Optional

import numpy as np
from tqdm import tqdm

from types_sudoku import Candidates, Issue

from .search import search
from .solver_core import Grid, InvalidInput, SolveStats, idx_to_key
from .techniques import DEFAULT_DIFFICULTY, TECHNIQUE_NAMES, propagate, techniques_for

SOLVED = "solved"
UNSOLVABLE = "unsolvable"
INVALID_INPUT = "invalid_input"


@dataclass
class SolveResult:
    status: str  # SOLVED | UNSOLVABLE | INVALID_INPUT
    puzzle: str
    stats: SolveStats
    solution: Optional[str] = None  # 81 digits when solved
    error: Optional[str] = None

    @property
    def solved(self) -> bool:
        return self.status == SOLVED

    def to_dict(self) -> Dict:
        return {
            "status": self.status,
            "puzzle": self.puzzle,
            "solution": self.solution,
            "error": self.error,
            "stats": self.stats.to_dict(),
        }


def new_stats() -> SolveStats:
    return SolveStats(techniques_used={name: False for name in TECHNIQUE_NAMES})


def solve(text: str, max_difficulty: str = DEFAULT_DIFFICULTY) -> SolveResult:
    """Solve one puzzle given as an 81-character string ('.' = empty).

    Deduction runs first; guessing only starts once no technique up to
    `max_difficulty` makes progress. Returns the first solution found; does not
    check uniqueness.
    """
    techniques = techniques_for(max_difficulty)
    stats = new_stats()
    t0 = time.perf_counter()

    def finish(status: str, solution: Optional[str] = None, error: Optional[str] = None) -> SolveResult:
        stats.elapsed = time.perf_counter() - t0
        return SolveResult(status=status, puzzle=text, stats=stats, solution=solution, error=error)

    try:
        grid = Grid.parse(text)
    except InvalidInput as e:
        return finish(INVALID_INPUT, error=str(e))

    if not propagate(grid, stats, techniques):
        stats.contradictions += 1
        return finish(UNSOLVABLE, error=grid.contradiction or "contradiction during propagation")
    if grid.is_solved():
        return finish(SOLVED, solution=grid.to_string())

    if search(grid, stats, techniques):
        return finish(SOLVED, solution=grid.to_string())
    return finish(UNSOLVABLE, error="all branches exhausted")


def solve_batch(
    puzzles: Iterable[str],
    workers: int = 1,
    max_difficulty: str = DEFAULT_DIFFICULTY,
    progress: bool = False,
) -> Iterator[SolveResult]:
    """Yield one SolveResult per puzzle, in input order."""
    techniques_for(max_difficulty)  # fail fast on a bad level, before forking
    puzzles = list(puzzles)
    job = partial(solve, max_difficulty=max_difficulty)
    bar = partial(tqdm, total=len(puzzles), desc="[solve] puzzles", unit="puzzle", disable=not progress)
    if workers <= 1:
        yield from bar(map(job, puzzles))
        return
    chunksize = max(1, len(puzzles) // (workers * 8))
    with ProcessPoolExecutor(max_workers=workers) as pool:
        yield from bar(pool.map(job, puzzles, chunksize=chunksize))


def percentiles(x: np.ndarray, ps=(50, 90, 95, 99)):
    return {f"p{p}": float(np.percentile(x, p)) for p in ps}


@dataclass
class BatchSummary:
    """Single collector for a batch; fed finished results one at a time."""

    total: int = 0
    solved: int = 0
    solved_without_brute_force: int = 0
    unsolvable: int = 0
    invalid: int = 0
    guesses: int = 0
    contradictions: int = 0
    technique_counts: Dict[str, int] = field(default_factory=lambda: {name: 0 for name in TECHNIQUE_NAMES})
    times: List[float] = field(default_factory=list)

    def add(self, result: SolveResult) -> None:
        self.total += 1
        st = result.stats
        self.times.append(st.elapsed)
        if result.status == INVALID_INPUT:
            self.invalid += 1
            return
        if result.solved:
            self.solved += 1
            if not st.used_brute_force:
                self.solved_without_brute_force += 1
        else:
            self.unsolvable += 1
        self.guesses += st.guesses
        self.contradictions += st.contradictions
        for name, used in st.techniques_used.items():
            if used:
                self.technique_counts[name] = self.technique_counts.get(name, 0) + 1

    def timing(self) -> Dict[str, float]:
        if not self.times:
            return {"total": 0.0, "mean": 0.0}
        t = np.asarray(self.times, dtype=np.float64)
        out = {"total": float(t.sum()), "mean": float(np.mean(t)), "max": float(np.max(t))}
        out.update(percentiles(t))
        return out

    def to_dict(self) -> Dict:
        return {
            "total": self.total,
            "solved": self.solved,
            "solved_without_brute_force": self.solved_without_brute_force,
            "unsolvable": self.unsolvable,
            "invalid": self.invalid,
            "guesses": self.guesses,
            "contradictions": self.contradictions,
            "technique_counts": dict(self.technique_counts),
            "timing_sec": self.timing(),
        }


def sanity_check(text: str) -> Dict:
    """Report duplicate givens per unit. Malformed text is reported as a single issue."""
    try:
        grid = Grid.parse(text)
    except InvalidInput as e:
        return {"ok": False, "issues": [{"type": "invalid_input", "error": str(e)}]}
    issues: List[Issue] = grid.conflicts()
    return {"ok": len(issues) == 0, "issues": issues}


def compute_candidates_tool(text: str, max_difficulty: str = DEFAULT_DIFFICULTY) -> Dict:
    """Candidates of every open cell after deduction. Returns a dict like {'candidates': {'r1c2': [1, 2, 5], ...}}.

    Raises InvalidInput on malformed text. A contradictory puzzle yields
    `"consistent": False` and the candidates as far as deduction got.
    """
    grid = Grid.parse(text)
    ok = propagate(grid, None, techniques_for(max_difficulty))
    cand: Candidates = {idx_to_key(i): sorted(grid.cands[i]) for i in grid.open_cells()}
    return {"candidates": cand, "consistent": ok, "current": grid.to_string()}
