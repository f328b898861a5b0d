# tests/test_search.py
import pytest

from solver.search import search, select_cell
from solver.solver_core import DIGITS, Grid
from solver.sudoku_tools import new_stats, solve
from solver.techniques import propagate, techniques_for

from helpers import (
    EASY,
    ESCARGOT,
    ESCARGOT_SOLUTION,
    MINIMAL_17,
    MINIMAL_17_SOLUTION,
    keeps_givens,
    units_are_permutations,
)


def test_select_cell_prefers_fewest_candidates_then_lowest_index():
    grid = Grid()
    assert select_cell(grid) == 0
    for d in DIGITS - {1, 2, 3}:
        grid.eliminate(50, d)
    for d in DIGITS - {4, 5}:
        grid.eliminate(70, d)
    for d in DIGITS - {6, 7}:
        grid.eliminate(20, d)
    assert select_cell(grid) == 20


def test_select_cell_on_full_grid():
    grid = Grid.parse(ESCARGOT_SOLUTION)
    assert select_cell(grid) is None


def test_search_solves_hard_puzzle_in_place():
    grid = Grid.parse(ESCARGOT)
    stats = new_stats()
    assert propagate(grid, stats)
    assert not grid.is_solved()
    assert search(grid, stats)
    assert grid.is_solved()
    assert grid.to_string() == ESCARGOT_SOLUTION
    assert stats.guesses > 0


def test_search_with_singles_only_still_finds_the_solution():
    techniques = techniques_for("singles")
    grid = Grid.parse(MINIMAL_17)
    stats = new_stats()
    assert propagate(grid, stats, techniques)
    assert search(grid, stats, techniques)
    assert grid.to_string() == MINIMAL_17_SOLUTION
    assert units_are_permutations(grid.to_string())
    assert not stats.techniques_used["naked_pair"]


def test_failed_search_restores_the_grid():
    # Three cells of one row share the candidates {1, 2}: the dead end only
    # shows up after guessing.
    grid = Grid()
    for i in (0, 1, 2):
        for d in DIGITS - {1, 2}:
            grid.eliminate(i, d)
    assert grid.is_consistent()
    before = (grid.to_string(), [set(c) for c in grid.cands], grid.unfilled)
    stats = new_stats()
    assert not search(grid, stats, ())
    assert (grid.to_string(), [set(c) for c in grid.cands], grid.unfilled) == before
    assert stats.guesses >= 2
    assert stats.contradictions >= 2


@pytest.mark.parametrize("text", ["." * 81, "1" + "." * 80])
def test_search_terminates_on_near_empty_grid(text):
    res = solve(text)
    assert res.solved
    assert units_are_permutations(res.solution)
    assert keeps_givens(text, res.solution)
    assert res.stats.guesses > 0


def test_search_on_solved_grid_makes_no_guess():
    grid = Grid.parse(ESCARGOT_SOLUTION)
    stats = new_stats()
    assert search(grid, stats)
    assert stats.guesses == 0


def test_search_easy_puzzle_needs_no_backtracking():
    grid = Grid.parse(EASY)
    stats = new_stats()
    assert propagate(grid, stats)
    assert search(grid, stats)
    assert stats.guesses == 0
    assert stats.contradictions == 0
