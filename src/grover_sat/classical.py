"""
Classical reference checks: brute-force enumeration and PySAT.
"""

import itertools
import logging
import time
from typing import Iterator, Optional

from pysat.solvers import Solver

from .formula import Assignment, CNFFormula, evaluate_cnf

logger = logging.getLogger(__name__)


def satisfying_assignments(formula: CNFFormula) -> Iterator[Assignment]:
    """Yield every satisfying assignment, x1 as the least significant bit."""
    n = formula.num_variables
    for bits in itertools.product([False, True], repeat=n):
        assignment = list(reversed(bits))
        if evaluate_cnf(formula, assignment):
            yield assignment


def count_solutions(formula: CNFFormula) -> int:
    """Number of satisfying assignments, by brute force over 2**n assignments."""
    start = time.time()
    count = sum(1 for _ in satisfying_assignments(formula))
    logger.debug(
        "Brute force checked %d assignments in %.6f seconds",
        2 ** formula.num_variables, time.time() - start,
    )
    return count


def solve_classically(formula: CNFFormula) -> Optional[Assignment]:
    """Return a model found by the PySAT glucose3 solver, or None if UNSAT."""
    start = time.time()
    with Solver(name='g3', bootstrap_with=formula.to_ints()) as solver:
        sat = solver.solve()
        elapsed = time.time() - start
        if not sat:
            logger.debug("PySAT: UNSATISFIABLE in %.6f seconds", elapsed)
            return None
        model = solver.get_model()
    logger.debug("PySAT: SATISFIABLE in %.6f seconds", elapsed)
    values = {abs(lit): lit > 0 for lit in model}
    return [values.get(v, False) for v in range(1, formula.num_variables + 1)]


def is_satisfiable(formula: CNFFormula) -> bool:
    return solve_classically(formula) is not None
