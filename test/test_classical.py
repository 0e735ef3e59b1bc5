"""
Test suite for the classical reference checks (brute force and PySAT).
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from grover_sat.classical import (
    count_solutions,
    is_satisfiable,
    satisfying_assignments,
    solve_classically,
)
from grover_sat.dimacs import generate_random_cnf
from grover_sat.formula import CNFFormula, create_simple_3sat_example, evaluate_cnf


class TestBruteForce:
    """Test cases for brute-force enumeration."""

    def test_example_count(self):
        assert count_solutions(create_simple_3sat_example()) == 5

    def test_assignments_satisfy(self):
        formula = create_simple_3sat_example()
        solutions = list(satisfying_assignments(formula))
        assert [False, False, True] in solutions
        assert all(evaluate_cnf(formula, a) for a in solutions)

    def test_unsatisfiable(self):
        assert count_solutions(CNFFormula.from_clauses([[1], [-1]])) == 0


class TestPySAT:
    """Test cases for the PySAT-backed check."""

    def test_satisfiable_formula(self):
        formula = create_simple_3sat_example()
        model = solve_classically(formula)
        assert model is not None
        assert len(model) == 3
        assert evaluate_cnf(formula, model)

    def test_unsatisfiable_formula(self):
        assert is_satisfiable(CNFFormula.from_clauses([[1], [-1]])) is False

    def test_unused_variables_padded(self):
        formula = CNFFormula.from_clauses([[1]], num_variables=3)
        assert len(solve_classically(formula)) == 3

    @pytest.mark.parametrize("seed", range(5))
    def test_agrees_with_brute_force(self, seed):
        formula = generate_random_cnf(5, 20, k=3, seed=seed)
        assert is_satisfiable(formula) == (count_solutions(formula) > 0)
