"""
End-to-end tests for solve_sat.
"""

import pytest
import sys
import os
import numpy as np

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from grover_sat import SATResult, solve_sat
from grover_sat.dimacs import generate_random_cnf
from grover_sat.formula import CNFFormula, Literal, evaluate_cnf

EXAMPLE = [[1, -2, 3], [-1, 2, -3], [1, 2, 3]]


class TestSolveSAT:
    """Test cases for the solver entry point."""

    def test_result_shape(self):
        result = solve_sat(3, EXAMPLE, estimated_solutions=1, rng=0)
        assert isinstance(result, SATResult)
        assignment, satisfied = result
        assert len(assignment) == 3
        assert satisfied == evaluate_cnf(CNFFormula.from_clauses(EXAMPLE), assignment)

    def test_accepts_literal_clauses(self):
        clauses = [[Literal(1), Literal(2, False)]]
        assignment, satisfied = solve_sat(2, clauses, estimated_solutions=3, rng=1)
        assert satisfied == (assignment[0] or not assignment[1])

    def test_reproducible_with_seed(self):
        assert solve_sat(3, EXAMPLE, 1, rng=42) == solve_sat(3, EXAMPLE, 1, rng=42)

    def test_amplification_beats_uniform_baseline(self):
        """The example has 5/8 satisfying assignments; Grover lifts it to ~0.98."""
        rng = np.random.default_rng(12345)
        trials = 200
        hits = sum(solve_sat(3, EXAMPLE, 1, rng=rng).satisfied for _ in range(trials))
        # uniform sampling would give 0.625 with a standard deviation of ~0.034
        assert hits / trials > 0.85

    def test_single_solution_amplified(self):
        rng = np.random.default_rng(7)
        trials = 100
        hits = sum(solve_sat(3, [[1], [-2], [3]], 1, rng=rng).satisfied for _ in range(trials))
        # uniform baseline is 1/8
        assert hits / trials > 0.7

    @pytest.mark.parametrize("iterations", [None, 1, 2, 5])
    def test_unsatisfiable_never_verified(self, iterations):
        for seed in range(10):
            _, satisfied = solve_sat(1, [[1], [-1]], 1, rng=seed, iterations=iterations)
            assert satisfied is False

    def test_out_of_range_literal(self):
        with pytest.raises(ValueError):
            solve_sat(3, [[1, 4]], 1)
        with pytest.raises(ValueError):
            solve_sat(3, [[0, 1]], 1)

    @pytest.mark.parametrize("estimate", [0, -3, 9])
    def test_invalid_estimate(self, estimate):
        with pytest.raises(ValueError, match="Estimated solutions"):
            solve_sat(3, EXAMPLE, estimate)

    def test_invalid_estimate_even_with_iterations(self):
        with pytest.raises(ValueError):
            solve_sat(3, EXAMPLE, 0, iterations=2)

    def test_many_clauses_fit_the_register(self):
        """26 random clauses on 3 variables need a 5-bit counter, not 26 ancillas."""
        formula = generate_random_cnf(3, 26, seed=1)
        assignment, satisfied = solve_sat(3, formula.to_ints(), 1, rng=0)
        assert len(assignment) == 3
        assert satisfied == evaluate_cnf(formula, assignment)
