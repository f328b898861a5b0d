"""Batch command-line front end: read puzzles one per line, solve them, optionally write the solutions, and print run statistics."""

# solve_cli.py
# Usage:
#   sudoku-solver puzzles.txt
#   sudoku-solver puzzles.txt solutions.txt --workers 4
#   python -m apps.cli.solve_cli puzzles.txt --json
#
# Input: one 81-character puzzle per line ('1'-'9', '.' = empty).
# Output (optional): one 81-digit line per solved puzzle, in input order.
# Bad or unsolvable lines are reported and skipped; the batch continues.

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path
from typing import List, Optional

from solver.solver_core import format_grid
from solver.sudoku_tools import BatchSummary, solve_batch
from solver.techniques import DEFAULT_DIFFICULTY, DIFFICULTY_LEVELS


def ts() -> str:
    return time.strftime("%Y-%m-%d %H:%M:%S")


def log(msg: str, *, quiet: bool = False) -> None:
    if not quiet:
        print(f"[{ts()}] {msg}", flush=True)


def read_puzzles(path: Path) -> List[str]:
    # undecodable bytes become U+FFFD, so the line fails parsing on its own
    with path.open("r", encoding="utf-8", errors="replace") as f:
        return [line.rstrip("\r\n") for line in f]


def print_summary(summary: BatchSummary, input_path: Path, output_path: Optional[Path]) -> None:
    print(f"Input file: {input_path}")
    if output_path is not None:
        print(f"Output file: {output_path}")
    print(f"Total solved: {summary.solved}")
    print(f"Without brute-force: {summary.solved_without_brute_force}")
    print(f"Unsolvable: {summary.unsolvable}")
    print(f"Invalid: {summary.invalid}")
    print(f"Guesses: {summary.guesses}  Contradictions: {summary.contradictions}")
    print("Techniques (puzzles using each):")
    for name, count in summary.technique_counts.items():
        print(f"  {name:<28} {count}")
    t = summary.timing()
    if summary.total:
        print(f"Time: total={t['total']:.3f}s mean={t['mean'] * 1000:.2f}ms p95={t['p95'] * 1000:.2f}ms max={t['max'] * 1000:.2f}ms")


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(
        prog="sudoku-solver",
        description="Solve 9x9 Sudoku puzzles, one per line, by deduction first and guessing only when needed.",
    )
    ap.add_argument("input", type=Path, help="Input file: one 81-character puzzle per line ('.' = empty).")
    ap.add_argument("output", type=Path, nargs="?", default=None, help="Optional output file for solutions (replaced if present).")
    ap.add_argument("--workers", type=int, default=1, help="Worker processes (default: 1 = solve in-process).")
    ap.add_argument(
        "--max-difficulty",
        default=DEFAULT_DIFFICULTY,
        choices=list(DIFFICULTY_LEVELS),
        help=f"Hardest technique family used before guessing (default: {DEFAULT_DIFFICULTY}).",
    )
    ap.add_argument("--json", action="store_true", help="Print the summary as JSON instead of text.")
    ap.add_argument("--show", action="store_true", help="Print every solution as a boxed grid.")
    ap.add_argument("--quiet", action="store_true", help="Suppress progress/status logs.")
    args = ap.parse_args(argv)

    quiet = bool(args.quiet)
    # keep stdout clean for the JSON payload
    log_quiet = quiet or bool(args.json)
    if args.workers <= 0:
        print("[error] --workers must be >= 1", file=sys.stderr)
        return 2

    try:
        puzzles = read_puzzles(args.input)
    except OSError as e:
        print(f"[error] cannot read {args.input}: {e}", file=sys.stderr)
        return 1
    log(f"Loaded {len(puzzles):,} puzzle line(s) from {args.input}", quiet=log_quiet)

    out = None
    if args.output is not None:
        try:
            out = args.output.open("w", encoding="utf-8")
        except OSError as e:
            print(f"[error] cannot write {args.output}: {e}", file=sys.stderr)
            return 1

    summary = BatchSummary()
    try:
        results = solve_batch(
            puzzles,
            workers=args.workers,
            max_difficulty=args.max_difficulty,
            progress=not quiet,
        )
        for lineno, res in enumerate(results, start=1):
            summary.add(res)
            if not res.solved:
                log(f"[warn] line {lineno}: {res.status}: {res.error}", quiet=log_quiet)
                continue
            if out is not None:
                out.write(res.solution + "\n")
            if args.show:
                print(format_grid(res.solution))
    except OSError as e:
        print(f"[error] cannot write {args.output}: {e}", file=sys.stderr)
        return 1
    finally:
        if out is not None:
            out.close()

    log("All done.", quiet=log_quiet)
    if args.json:
        payload = {"input": str(args.input), "output": str(args.output) if args.output else None}
        payload.update(summary.to_dict())
        print(json.dumps(payload, indent=2))
    else:
        print_summary(summary, args.input, args.output)
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
