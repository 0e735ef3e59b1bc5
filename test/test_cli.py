"""
Tests for the command-line entry point.
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from grover_sat.cli import format_assignment, main
from grover_sat.dimacs import write_dimacs_cnf
from grover_sat.formula import CNFFormula, create_simple_3sat_example


def test_format_assignment():
    assert format_assignment([True, False, True]) == "x1=true, x2=false, x3=true"


def test_solve_from_file(tmp_path, capsys):
    path = str(tmp_path / "example.cnf")
    write_dimacs_cnf(create_simple_3sat_example(), path)
    assert main(["--cnf", path, "--seed", "3", "--shots", "5"]) == 0
    out = capsys.readouterr().out
    assert "Grover iterations: 2" in out
    assert "x1=" in out
    assert "shots" in out


def test_random_with_json_and_count(tmp_path, capsys):
    json_path = str(tmp_path / "oracle.json")
    cnf_path = str(tmp_path / "random.cnf")
    code = main(["--random", "--nvars", "3", "--nclauses", "2", "--seed", "1",
                 "--solutions", "count", "--json", json_path, "--write-cnf", cnf_path])
    assert code in (0, 1)
    assert os.path.exists(json_path)
    assert os.path.exists(cnf_path)
    assert "Classical solution count" in capsys.readouterr().out


def test_unsatisfiable_exit_code(tmp_path, capsys):
    path = str(tmp_path / "unsat.cnf")
    write_dimacs_cnf(CNFFormula.from_clauses([[1], [-1]]), path)
    assert main(["--cnf", path, "--solutions", "count", "--seed", "0"]) == 1
    assert "UNSATISFIABLE" in capsys.readouterr().out


def test_missing_input(capsys):
    assert main([]) == 2
    assert "error:" in capsys.readouterr().err


def test_bad_estimate(tmp_path, capsys):
    path = str(tmp_path / "example.cnf")
    write_dimacs_cnf(create_simple_3sat_example(), path)
    assert main(["--cnf", path, "--solutions", "100"]) == 2
