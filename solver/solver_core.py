"""Core Sudoku model used by the deduction techniques and the search: index math, units, peers, and the mutable candidate grid."""

# solver_core.py
# Candidate-grid representation:
# - 81 cells in row-major order, index 0..80
# - a cell is either Fixed (value 1..9) or Open (non-empty candidate set)
# - placements cascade eliminations to the 20 peers
# - snapshot/restore for backtracking
# Cell keys in payloads are 1-based ("r1c1") like the rest of the toolkit.

from __future__ import annotations

from dataclasses import dataclass, field

DIGITS = frozenset(range(1, 10))
PUZZLE_CHARS = frozenset("123456789.")


def rc_to_idx(r: int, c: int) -> int:
    return r * 9 + c


def idx_to_rc(i: int) -> tuple[int, int]:
    return divmod(i, 9)


def rc_to_key(r: int, c: int) -> str:
    return f"r{r + 1}c{c + 1}"


def idx_to_key(i: int) -> str:
    return rc_to_key(*idx_to_rc(i))


def key_to_idx(key: str) -> int:
    r = int(key.split("c")[0][1:])
    c = int(key.split("c")[1])
    return rc_to_idx(r - 1, c - 1)


def which_box(r: int, c: int) -> int:
    return 3 * (r // 3) + (c // 3)


def unit_cells_box(b: int) -> list[int]:
    r0 = 3 * (b // 3)
    c0 = 3 * (b % 3)
    return [rc_to_idx(r0 + i, c0 + j) for i in range(3) for j in range(3)]


ROWS = [[rc_to_idx(r, c) for c in range(9)] for r in range(9)]
COLS = [[rc_to_idx(r, c) for r in range(9)] for c in range(9)]
BOXES = [unit_cells_box(b) for b in range(9)]
UNITS = ROWS + COLS + BOXES  # 27 units: rows 0..8, cols 9..17, boxes 18..26
UNIT_NAMES = [f"r{k + 1}" for k in range(9)] + [f"c{k + 1}" for k in range(9)] + [f"b{k + 1}" for k in range(9)]

# UNITS_OF[i] = (row unit id, col unit id, box unit id) of cell i
UNITS_OF: list[tuple[int, int, int]] = []
PEERS: list[frozenset[int]] = []
for _i in range(81):
    _r, _c = idx_to_rc(_i)
    _b = which_box(_r, _c)
    UNITS_OF.append((_r, 9 + _c, 18 + _b))
    PEERS.append(frozenset(ROWS[_r] + COLS[_c] + BOXES[_b]) - {_i})


class InvalidInput(ValueError):
    """Puzzle text is not 81 characters drawn from 1-9 and '.'."""


class Grid:
    """
    values[i] : fixed digit, 0 while the cell is open
    cands[i]  : surviving candidates of an open cell (empty set once fixed)

    Invariant (while consistent): for every open cell, cands[i] is a subset of
    DIGITS minus the digits fixed among its peers. Candidate sets only shrink;
    a fixed cell never reopens except through restore().
    """

    __slots__ = ("values", "cands", "unfilled", "contradiction")

    def __init__(self) -> None:
        self.values = [0] * 81
        self.cands = [set(DIGITS) for _ in range(81)]
        self.unfilled = 81
        self.contradiction: str | None = None

    # -------------------------------------------------------------------------
    # Construction / serialization
    # -------------------------------------------------------------------------

    @classmethod
    def parse(cls, text: str) -> "Grid":
        """Build a grid from an 81-character puzzle string.

        Raises InvalidInput on a wrong length or an illegal character. Givens
        that clash with each other are kept as they are; the clash shows up
        through is_consistent().
        """
        if len(text) != 81:
            raise InvalidInput(f"invalid puzzle size: expected 81 characters, got {len(text)}")
        bad = sorted(set(text) - PUZZLE_CHARS)
        if bad:
            raise InvalidInput(f"invalid character in puzzle: {''.join(bad)!r}")

        grid = cls()
        givens = [(i, int(ch)) for i, ch in enumerate(text) if ch != "."]
        for i, d in givens:
            grid.values[i] = d
            grid.cands[i] = set()
            grid.unfilled -= 1
        for i, d in givens:
            for p in PEERS[i]:
                grid.eliminate(p, d)
        issues = grid.conflicts()
        if issues:
            first = issues[0]
            grid.contradiction = f"duplicate {first['digits'][0]} in {first['unit']}"
        return grid

    def to_string(self) -> str:
        return "".join(str(v) if v else "." for v in self.values)

    def __str__(self) -> str:
        return format_grid(self.to_string())

    def __repr__(self) -> str:
        return f"Grid({self.to_string()!r})"

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def value(self, i: int) -> int:
        return self.values[i]

    def candidates(self, i: int) -> set[int]:
        return self.cands[i]

    def is_open(self, i: int) -> bool:
        return self.values[i] == 0

    def open_cells(self) -> list[int]:
        return [i for i in range(81) if self.values[i] == 0]

    def conflicts(self) -> list[dict]:
        """Duplicate fixed digits per unit, as toolkit-style issue dicts."""
        issues = []
        for u, cells in enumerate(UNITS):
            seen = set()
            dups = set()
            for i in cells:
                v = self.values[i]
                if v == 0:
                    continue
                if v in seen:
                    dups.add(v)
                seen.add(v)
            if dups:
                issues.append(
                    {
                        "type": "duplicate",
                        "unit": UNIT_NAMES[u],
                        "digits": sorted(dups),
                        "cells": [idx_to_key(i) for i in cells if self.values[i] in dups],
                    }
                )
        return issues

    def is_consistent(self) -> bool:
        if self.contradiction is not None:
            return False
        if any(self.values[i] == 0 and not self.cands[i] for i in range(81)):
            return False
        return not self.conflicts()

    def is_solved(self) -> bool:
        if self.unfilled:
            return False
        return all(sorted(self.values[i] for i in cells) == list(range(1, 10)) for cells in UNITS)

    # -------------------------------------------------------------------------
    # Mutation primitives
    # -------------------------------------------------------------------------

    def eliminate(self, i: int, digit: int) -> bool:
        """Remove digit from open cell i. Returns True if the candidate set changed."""
        cs = self.cands[i]
        if self.values[i] or digit not in cs:
            return False
        cs.discard(digit)
        if not cs:
            self.contradiction = f"no candidates left at {idx_to_key(i)}"
        return True

    def place(self, i: int, digit: int) -> bool:
        """Fix open cell i to digit and clear digit from its peers.

        Returns False, with the grid flagged contradictory, when the digit is
        not a surviving candidate or a peer runs out of candidates.
        """
        current = self.values[i]
        if current:
            if current != digit:
                self.contradiction = f"cannot change filled cell {idx_to_key(i)}"
                return False
            return True
        if digit not in self.cands[i]:
            self.contradiction = f"{digit} is not a candidate at {idx_to_key(i)}"
            return False

        self.values[i] = digit
        self.cands[i] = set()
        self.unfilled -= 1
        for p in PEERS[i]:
            self.eliminate(p, digit)
        return self.contradiction is None

    # -------------------------------------------------------------------------
    # Backtracking support
    # -------------------------------------------------------------------------

    def snapshot(self) -> tuple:
        return (self.values[:], [cs.copy() for cs in self.cands], self.unfilled, self.contradiction)

    def restore(self, snap: tuple) -> None:
        values, cands, unfilled, contradiction = snap
        self.values = values[:]
        self.cands = [cs.copy() for cs in cands]
        self.unfilled = unfilled
        self.contradiction = contradiction


def format_grid(text: str) -> str:
    """Render an 81-character puzzle/solution string as a boxed 9x9 picture."""
    sep = "+-------+-------+-------+"
    lines = []
    for r in range(9):
        if r % 3 == 0:
            lines.append(sep)
        row = text[9 * r : 9 * r + 9]
        parts = [" ".join(row[k : k + 3]) for k in (0, 3, 6)]
        lines.append("| " + " | ".join(parts) + " |")
    lines.append(sep)
    return "\n".join(lines)


@dataclass
class SolveStats:
    """Per-puzzle counters. Owned by one solve() call; merged into batch totals afterwards."""

    techniques_used: dict[str, bool] = field(default_factory=dict)
    guesses: int = 0
    contradictions: int = 0
    elapsed: float = 0.0  # seconds

    def mark(self, technique: str) -> None:
        self.techniques_used[technique] = True

    @property
    def used_brute_force(self) -> bool:
        return self.guesses > 0

    def to_dict(self) -> dict:
        return {
            "techniques_used": dict(self.techniques_used),
            "guesses": self.guesses,
            "contradictions": self.contradictions,
            "elapsed": self.elapsed,
            "used_brute_force": self.used_brute_force,
        }
