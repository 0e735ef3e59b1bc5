"""
Single-shot Grover SAT solving with classical verification.
"""

import logging
from typing import Iterable, NamedTuple, Optional

from .engine import RandomSource
from .formula import Assignment, ClauseLike, CNFFormula, evaluate_cnf
from .grover import optimal_iterations, run_solver

logger = logging.getLogger(__name__)


class SATResult(NamedTuple):
    assignment: Assignment
    satisfied: bool


def solve_sat(num_variables: int, clauses: Iterable[ClauseLike], estimated_solutions: int,
              rng: RandomSource = None, iterations: Optional[int] = None) -> SATResult:
    """
    Sample one candidate assignment with Grover search and verify it.

    Args:
        num_variables: Number of variables in the formula
        clauses: Clauses as Clause objects, Literal sequences or DIMACS lists
        estimated_solutions: Caller's estimate of the number of solutions
        rng: Random source for measurement (seed, Generator or None)
        iterations: Override the iteration count derived from the estimate

    Returns:
        SATResult: The sampled assignment and whether it satisfies the formula
    """
    formula = CNFFormula.from_clauses(clauses, num_variables=num_variables)
    optimal = optimal_iterations(num_variables, estimated_solutions)
    if iterations is None:
        iterations = optimal

    logger.info(
        "Solving %d variables, %d clauses with %d Grover iterations",
        num_variables, len(formula), iterations,
    )
    assignment = run_solver(num_variables, formula, iterations, rng=rng)
    satisfied = evaluate_cnf(formula, assignment)
    logger.info("Sample %s satisfied=%s", assignment, satisfied)
    return SATResult(assignment, satisfied)
