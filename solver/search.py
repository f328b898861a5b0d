"""Backtracking search for cells that deduction alone cannot resolve."""

# search.py
# Depth-first guessing on the open cell with the fewest candidates (MRV),
# re-running propagation after every guess. Each branch snapshots the grid
# before mutating it and restores that snapshot on every failing exit.

from __future__ import annotations

from typing import Optional

from .solver_core import Grid, SolveStats
from .techniques import TECHNIQUES, Technique, propagate


def select_cell(grid: Grid) -> Optional[int]:
    """Open cell with the fewest candidates; ties go to the lowest row-major index."""
    best = None
    best_len = 10
    for i in range(81):
        if grid.values[i] == 0:
            n = len(grid.cands[i])
            if n < best_len:
                best, best_len = i, n
                if n <= 1:
                    break
    return best


def search(
    grid: Grid,
    stats: SolveStats,
    techniques: tuple[tuple[str, Technique], ...] = TECHNIQUES,
) -> bool:
    """Complete a consistent, propagated grid in place.

    On success the grid is left solved. On failure it is left exactly as it was
    passed in. Recursion depth is bounded by the number of open cells.
    """
    i = select_cell(grid)
    if i is None:
        return grid.is_solved()

    for digit in sorted(grid.cands[i]):
        snap = grid.snapshot()
        stats.guesses += 1
        if grid.place(i, digit) and propagate(grid, stats, techniques):
            if grid.is_solved() or search(grid, stats, techniques):
                return True
        else:
            stats.contradictions += 1
        grid.restore(snap)
    return False
