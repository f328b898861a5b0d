"""Human-style deduction techniques over the candidate grid, and the propagation loop that applies them to a fixpoint."""

# techniques.py
# Each technique is a plain function `find_xxx(grid) -> list[Move]`:
# - placements:   {"technique", "type": "placement", "cell", "digit"}
# - eliminations: {"technique", "type": "elimination", "digit", "eliminate": [cells]}
# Only moves that would change the grid are returned. Techniques never mutate
# the grid; apply_moves() does.

from __future__ import annotations

from itertools import combinations
from typing import Callable, Optional

from types_sudoku import Move

from .solver_core import BOXES, COLS, ROWS, UNITS, Grid, SolveStats, idx_to_rc, which_box

Technique = Callable[[Grid], list]


def _positions(grid: Grid, cells: list[int], d: int) -> list[int]:
    """Open cells among `cells` that still allow digit d."""
    return [i for i in cells if grid.values[i] == 0 and d in grid.cands[i]]


def find_naked_singles(grid: Grid) -> list[Move]:
    moves = []
    for i in range(81):
        if grid.values[i] == 0 and len(grid.cands[i]) == 1:
            (d,) = grid.cands[i]
            moves.append({"technique": "naked_single", "type": "placement", "cell": i, "digit": d})
    return moves


def find_hidden_singles(grid: Grid) -> list[Move]:
    """A digit with a single possible cell in a row, column or box goes there."""
    moves = []
    seen = set()
    for cells in UNITS:
        fixed = {grid.values[i] for i in cells}
        for d in range(1, 10):
            if d in fixed:
                continue
            locs = _positions(grid, cells, d)
            if len(locs) == 1 and (locs[0], d) not in seen:
                seen.add((locs[0], d))
                moves.append({"technique": "hidden_single", "type": "placement", "cell": locs[0], "digit": d})
    return moves


def _find_naked_subsets(grid: Grid, n: int, technique: str) -> list[Move]:
    """n open cells of one unit whose candidates together are exactly n digits:
    those digits can be cleared from every other cell of the unit.
    """
    moves = []
    for cells in UNITS:
        open_cells = [i for i in cells if grid.values[i] == 0]
        small = [i for i in open_cells if 2 <= len(grid.cands[i]) <= n]
        if len(small) < n:
            continue
        for group in combinations(small, n):
            digits = set().union(*(grid.cands[i] for i in group))
            if len(digits) != n:
                continue
            others = [i for i in open_cells if i not in group]
            for d in sorted(digits):
                elim = [i for i in others if d in grid.cands[i]]
                if elim:
                    moves.append({"technique": technique, "type": "elimination", "digit": d, "eliminate": elim})
    return moves


def find_naked_pairs(grid: Grid) -> list[Move]:
    return _find_naked_subsets(grid, 2, "naked_pair")


def find_naked_triples(grid: Grid) -> list[Move]:
    return _find_naked_subsets(grid, 3, "naked_triple")


def find_locked_candidates_pointing(grid: Grid) -> list[Move]:
    """If in a box, a digit's candidates lie in a single row (or column), eliminate that digit
    from the rest of that row (or column) outside the box.
    """
    moves = []
    for cells in BOXES:
        for d in range(1, 10):
            locs = _positions(grid, cells, d)
            if len(locs) < 2:
                continue
            rows = {idx_to_rc(i)[0] for i in locs}
            cols = {idx_to_rc(i)[1] for i in locs}
            if len(rows) == 1:
                line = ROWS[rows.pop()]
            elif len(cols) == 1:
                line = COLS[cols.pop()]
            else:
                continue
            elim = [i for i in _positions(grid, line, d) if i not in cells]
            if elim:
                moves.append(
                    {"technique": "locked_candidates_pointing", "type": "elimination", "digit": d, "eliminate": elim}
                )
    return moves


def find_locked_candidates_claiming(grid: Grid) -> list[Move]:
    """If in a row/column, a digit's candidates are confined to a single box, eliminate that digit
    from other cells in that box (box-line reduction).
    """
    moves = []
    for line in ROWS + COLS:
        for d in range(1, 10):
            locs = _positions(grid, line, d)
            if len(locs) < 2:
                continue
            boxes = {which_box(*idx_to_rc(i)) for i in locs}
            if len(boxes) != 1:
                continue
            elim = [i for i in _positions(grid, BOXES[boxes.pop()], d) if i not in line]
            if elim:
                moves.append(
                    {"technique": "locked_candidates_claiming", "type": "elimination", "digit": d, "eliminate": elim}
                )
    return moves


# Cheapest first; propagate() restarts from the top after every change.
TECHNIQUES: tuple[tuple[str, Technique], ...] = (
    ("naked_single", find_naked_singles),
    ("hidden_single", find_hidden_singles),
    ("naked_pair", find_naked_pairs),
    ("naked_triple", find_naked_triples),
    ("locked_candidates_pointing", find_locked_candidates_pointing),
    ("locked_candidates_claiming", find_locked_candidates_claiming),
)
TECHNIQUE_NAMES = [name for name, _ in TECHNIQUES]

# max_difficulty -> number of leading TECHNIQUES allowed
DIFFICULTY_LEVELS = {"singles": 2, "subsets": 4, "locked": 6}
DEFAULT_DIFFICULTY = "locked"


def techniques_for(max_difficulty: str = DEFAULT_DIFFICULTY) -> tuple[tuple[str, Technique], ...]:
    if max_difficulty not in DIFFICULTY_LEVELS:
        raise ValueError(f"unknown max_difficulty {max_difficulty!r}; expected one of {sorted(DIFFICULTY_LEVELS)}")
    return TECHNIQUES[: DIFFICULTY_LEVELS[max_difficulty]]


def apply_moves(grid: Grid, moves: list[Move]) -> bool:
    """Apply moves in order; stops at the first contradiction. Returns True if anything changed."""
    changed = False
    for m in moves:
        if m["type"] == "placement":
            if grid.values[m["cell"]] == 0:
                changed = True
            if not grid.place(m["cell"], m["digit"]):
                return True
        else:
            for i in m["eliminate"]:
                if grid.eliminate(i, m["digit"]):
                    changed = True
            if grid.contradiction is not None:
                return changed
    return changed


def propagate(
    grid: Grid,
    stats: Optional[SolveStats] = None,
    techniques: tuple[tuple[str, Technique], ...] = TECHNIQUES,
) -> bool:
    """Run the techniques to a fixpoint.

    Returns False as soon as the grid is found contradictory, True when it is
    solved or no technique makes progress any more.
    """
    if not grid.is_consistent():
        return False
    while not grid.is_solved():
        for name, find in techniques:
            moves = find(grid)
            if not moves:
                continue
            changed = apply_moves(grid, moves)
            if changed and stats is not None:
                stats.mark(name)
            if not grid.is_consistent():
                return False
            if changed:
                break
        else:
            return True
    return True
