# types_sudoku.py
from __future__ import annotations

from typing import TypedDict

Candidates = dict[str, list[int]]
"""Map from cell key (e.g., 'r1c1') to a list of candidate digits (1..9)."""


class Move(TypedDict, total=False):
    """A single deduction produced by a technique and applied by the propagator."""

    technique: str  # e.g., 'naked_single', 'hidden_single', 'locked_candidates_pointing'
    type: str  # 'placement' or 'elimination'
    digit: int  # the digit being placed or eliminated
    cell: int  # for placements, target cell index 0..80
    eliminate: list[int]  # for eliminations, cell indices to clear that digit from


class Issue(TypedDict, total=False):
    """A consistency problem found in a grid (see sanity_check)."""

    type: str  # "duplicate" | "invalid_input"
    unit: str  # e.g., 'r4', 'c7', 'b2'
    digits: list[int]
    cells: list[str]
    error: str


class StatsPayload(TypedDict):
    techniques_used: dict[str, bool]
    guesses: int
    contradictions: int
    elapsed: float
    used_brute_force: bool


class ResultPayload(TypedDict):
    status: str  # 'solved' | 'unsolvable' | 'invalid_input'
    puzzle: str
    solution: str | None
    error: str | None
    stats: StatsPayload

