#!/usr/bin/env python3
"""
test_cli.py - Command line front end
"""

import sys
import os

# Setup path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from berserk.cli import main
from berserk.storage import SolutionPath
from berserk.games.gravity import line_board, save_board


def test_show_sample_board(capsys):
    assert main(["show", "--variant", "gravity"]) == 0
    out = capsys.readouterr().out
    assert "Fingerprint:" in out
    assert "@" in out


def test_missing_map_exits_with_error(tmp_path, capsys):
    missing = str(tmp_path / "nope.txt")
    assert main(["solve", "--map", missing, "--quiet"]) == 1
    assert "Error:" in capsys.readouterr().out


def test_malformed_map_exits_with_error(tmp_path, capsys):
    path = tmp_path / "bad.txt"
    path.write_text("#####\n#@@$#\n#####\n")
    assert main(["solve", "--map", str(path), "--quiet"]) == 1
    assert "Error:" in capsys.readouterr().out


def test_solve_and_save(tmp_path, capsys):
    board_file = str(tmp_path / "line.bin")
    save_board(line_board(2), board_file)
    solution_file = str(tmp_path / "solution.pkl")

    code = main(["solve", "--variant", "gravity", "--map", board_file,
                 "--strategy", "branch-and-bound", "--max-score", "8",
                 "--replay", "--quiet", "--save", solution_file])
    assert code == 0

    out = capsys.readouterr().out
    assert "SOLUTION: 2 moves, cost 2" in out
    assert "shift-right" in out

    path = SolutionPath.load(solution_file)
    assert path.cost == 2
    assert path.variant == "gravity"


def test_no_solution(capsys):
    code = main(["solve", "--variant", "gravity", "--strategy", "branch-and-bound",
                 "--max-score", "1", "--quiet"])
    assert code == 0
    assert "No winning sequence found" in capsys.readouterr().out
