# tests/test_cli.py
import json

import pytest

from apps.cli.solve_cli import main, read_puzzles

from helpers import EASY, EASY_SOLUTION, MINIMAL_17, MINIMAL_17_SOLUTION, with_duplicate


@pytest.fixture
def puzzle_file(tmp_path):
    p = tmp_path / "puzzles.txt"
    lines = [EASY, EASY[:80], MINIMAL_17, with_duplicate(EASY_SOLUTION)]
    p.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return p


def test_read_puzzles_strips_line_endings(tmp_path):
    p = tmp_path / "crlf.txt"
    p.write_bytes((EASY + "\r\n" + MINIMAL_17 + "\n").encode("utf-8"))
    assert read_puzzles(p) == [EASY, MINIMAL_17]


def test_cli_undecodable_line_is_invalid_and_batch_continues(tmp_path, capsys):
    p = tmp_path / "mixed.txt"
    p.write_bytes(EASY.encode("utf-8") + b"\n" + b"\xff" * 81 + b"\n" + EASY.encode("utf-8") + b"\n")
    out = tmp_path / "solutions.txt"

    assert main([str(p), str(out), "--json", "--quiet"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["total"] == 3
    assert payload["solved"] == 2
    assert payload["invalid"] == 1
    assert out.read_text(encoding="utf-8").splitlines() == [EASY_SOLUTION, EASY_SOLUTION]


def test_cli_writes_solutions_and_summary(puzzle_file, tmp_path, capsys):
    out = tmp_path / "solutions.txt"
    out.write_text("stale content\n", encoding="utf-8")

    assert main([str(puzzle_file), str(out), "--quiet"]) == 0

    # bad lines are skipped, good ones keep input order, old file is replaced
    assert out.read_text(encoding="utf-8").splitlines() == [EASY_SOLUTION, MINIMAL_17_SOLUTION]
    text = capsys.readouterr().out
    assert f"Input file: {puzzle_file}" in text
    assert f"Output file: {out}" in text
    assert "Total solved: 2" in text
    assert "Without brute-force: 1" in text
    assert "Unsolvable: 1" in text
    assert "Invalid: 1" in text
    assert "naked_single" in text


def test_cli_json_summary(puzzle_file, capsys):
    assert main([str(puzzle_file), "--json", "--quiet"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["input"] == str(puzzle_file)
    assert payload["output"] is None
    assert payload["total"] == 4
    assert payload["solved"] == 2
    assert payload["invalid"] == 1
    assert payload["unsolvable"] == 1


def test_cli_show_prints_grids(tmp_path, capsys):
    p = tmp_path / "one.txt"
    p.write_text(EASY + "\n", encoding="utf-8")
    assert main([str(p), "--show", "--quiet"]) == 0
    text = capsys.readouterr().out
    assert "| 5 3 4 | 6 7 8 | 9 1 2 |" in text


def test_cli_reports_bad_lines_when_not_quiet(puzzle_file, capsys):
    assert main([str(puzzle_file)]) == 0
    text = capsys.readouterr().out
    assert "[warn] line 2: invalid_input" in text
    assert "[warn] line 4: unsolvable" in text


def test_cli_missing_input_is_fatal(tmp_path, capsys):
    assert main([str(tmp_path / "nope.txt"), "--quiet"]) == 1
    assert "[error]" in capsys.readouterr().err


def test_cli_unwritable_output_is_fatal(puzzle_file, tmp_path, capsys):
    assert main([str(puzzle_file), str(tmp_path / "missing_dir" / "out.txt"), "--quiet"]) == 1
    assert "[error]" in capsys.readouterr().err


def test_cli_rejects_bad_arguments(puzzle_file):
    with pytest.raises(SystemExit) as exc:
        main([str(puzzle_file), "--max-difficulty", "expert"])
    assert exc.value.code == 2
    assert main([str(puzzle_file), "--workers", "0", "--quiet"]) == 2
