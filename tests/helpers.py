# tests/helpers.py
from solver.solver_core import UNITS

# Classic newspaper puzzle; singles are enough.
EASY = "53..7....6..195....98....6.8...6...34..8.3..17...2...6.6....28....419..5....8..79"
EASY_SOLUTION = "534678912672195348198342567859761423426853791713924856961537284287419635345286179"

# 17 givens; deduction stalls and the first guess at r1c1 is wrong.
MINIMAL_17 = ".......124...9...........5..7.2.....6.....4.....1.3....13..........8.7..5.2......"
MINIMAL_17_SOLUTION = "867435912425891367139726854378254196651978423294163578713649285946582731582317649"

# "AI Escargot": needs far more than locked candidates.
ESCARGOT = "1....7.9..3..2...8..96..5....53..9...1..8...26....4...3......1..4......7..7...3.."
ESCARGOT_SOLUTION = "162857493534129678789643521475312986913586742628794135356478219241935867897261354"


def units_are_permutations(solution: str) -> bool:
    digits = [int(ch) for ch in solution]
    return all(sorted(digits[i] for i in cells) == list(range(1, 10)) for cells in UNITS)


def keeps_givens(puzzle: str, solution: str) -> bool:
    return all(p == "." or p == s for p, s in zip(puzzle, solution))


def with_duplicate(solution: str) -> str:
    """Overwrite r1c2 with the digit at r1c1, duplicating it within row 1."""
    return solution[0] + solution[0] + solution[2:]
