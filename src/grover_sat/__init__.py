"""
Grover SAT Package

A gate-level state-vector simulation of Grover search over CNF formulas.
"""

from .engine import AncillaLeakError, StateVectorEngine
from .formula import (
    Clause,
    CNFFormula,
    Literal,
    create_simple_3sat_example,
    evaluate_clause,
    evaluate_cnf,
    evaluate_literal,
)
from .grover import optimal_iterations, run_solver
from .oracle import SATOracle
from .solver import SATResult, solve_sat

__version__ = "1.0.0"
__author__ = "Grover SAT Team"
__description__ = "Simulated Grover search for SAT"

__all__ = [
    "AncillaLeakError",
    "Clause",
    "CNFFormula",
    "Literal",
    "SATOracle",
    "SATResult",
    "StateVectorEngine",
    "create_simple_3sat_example",
    "evaluate_clause",
    "evaluate_cnf",
    "evaluate_literal",
    "optimal_iterations",
    "run_solver",
    "solve_sat",
]
