"""
CNF formula model and classical evaluation.
"""

import numbers
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union

Assignment = List[bool]


@dataclass(frozen=True)
class Literal:
    """
    A variable or its negation.

    Attributes:
        var_index: 1-based variable index
        polarity: True if the variable must be true to satisfy the literal
    """

    var_index: int
    polarity: bool = True

    def __post_init__(self):
        if isinstance(self.var_index, bool) or not isinstance(self.var_index, numbers.Integral):
            raise ValueError(f"Variable index must be an integer, got {self.var_index!r}")
        object.__setattr__(self, "var_index", int(self.var_index))
        object.__setattr__(self, "polarity", bool(self.polarity))
        if self.var_index <= 0:
            raise ValueError(f"Variable index must be positive, got {self.var_index}")

    @classmethod
    def from_int(cls, lit: int) -> "Literal":
        """Build a literal from a DIMACS integer (negative for negation)."""
        if lit == 0:
            raise ValueError("Literal 0 is not allowed in DIMACS.")
        return cls(abs(lit), lit > 0)

    def to_int(self) -> int:
        return self.var_index if self.polarity else -self.var_index

    def __str__(self):
        return f"x{self.var_index}" if self.polarity else f"¬x{self.var_index}"


@dataclass(frozen=True)
class Clause:
    """A disjunction of literals. Order is kept for circuit construction."""

    literals: Tuple[Literal, ...]

    def __post_init__(self):
        literals = tuple(self.literals)
        if not literals:
            raise ValueError("Empty clause is not allowed (would make CNF UNSAT).")
        for lit in literals:
            if not isinstance(lit, Literal):
                raise ValueError(f"Clause members must be Literal, got {lit!r}")
        object.__setattr__(self, "literals", literals)

    @classmethod
    def from_ints(cls, lits: Iterable[int]) -> "Clause":
        return cls(tuple(Literal.from_int(lit) for lit in lits))

    def to_ints(self) -> List[int]:
        return [lit.to_int() for lit in self.literals]

    def max_variable(self) -> int:
        return max(lit.var_index for lit in self.literals)

    def __len__(self):
        return len(self.literals)

    def __iter__(self):
        return iter(self.literals)

    def __str__(self):
        return "(" + " ∨ ".join(str(lit) for lit in self.literals) + ")"


ClauseLike = Union[Clause, Sequence[int], Sequence[Literal]]


def to_clause(clause: ClauseLike) -> Clause:
    if isinstance(clause, Clause):
        return clause
    items = list(clause)
    if items and all(isinstance(item, Literal) for item in items):
        return Clause(tuple(items))
    return Clause.from_ints(items)


@dataclass(frozen=True)
class CNFFormula:
    """
    A conjunction of clauses over ``num_variables`` variables.

    ``num_variables`` defaults to the largest variable index used.
    """

    clauses: Tuple[Clause, ...]
    num_variables: int = 0

    def __post_init__(self):
        clauses = tuple(self.clauses)
        object.__setattr__(self, "clauses", clauses)
        used = max((c.max_variable() for c in clauses), default=0)
        if self.num_variables == 0:
            object.__setattr__(self, "num_variables", used)
        elif self.num_variables < 0:
            raise ValueError(f"num_variables must be non-negative, got {self.num_variables}")
        else:
            self.validate(self.num_variables)

    @classmethod
    def from_clauses(cls, clauses: Iterable[ClauseLike],
                     num_variables: Optional[int] = None) -> "CNFFormula":
        """
        Build a formula from clauses.

        Args:
            clauses: Clause objects, Literal sequences or DIMACS integer lists
            num_variables: Number of variables (largest index used if None)
        """
        formula = cls(tuple(to_clause(c) for c in clauses), num_variables or 0)
        if num_variables == 0:
            formula.validate(0)
        return formula

    def validate(self, num_variables: int):
        """Raise ValueError if a literal refers to a variable outside 1..num_variables."""
        for i, clause in enumerate(self.clauses):
            for lit in clause:
                if lit.var_index > num_variables:
                    raise ValueError(
                        f"Clause {i} uses variable x{lit.var_index} "
                        f"but only {num_variables} variables are declared"
                    )

    def to_ints(self) -> List[List[int]]:
        return [c.to_ints() for c in self.clauses]

    def __len__(self):
        return len(self.clauses)

    def __iter__(self):
        return iter(self.clauses)

    def __str__(self):
        return " ∧ ".join(str(c) for c in self.clauses)


def _check_length(assignment: Sequence[bool], formula: CNFFormula):
    if len(assignment) != formula.num_variables:
        raise ValueError(
            f"Assignment has {len(assignment)} values, formula has "
            f"{formula.num_variables} variables"
        )


def evaluate_literal(lit: Literal, assignment: Sequence[bool]) -> bool:
    return bool(assignment[lit.var_index - 1]) == lit.polarity


def evaluate_clause(clause: Clause, assignment: Sequence[bool]) -> bool:
    for lit in clause:
        if evaluate_literal(lit, assignment):
            return True
    return False


def evaluate_cnf(formula: CNFFormula, assignment: Sequence[bool]) -> bool:
    """Return True if every clause of ``formula`` holds under ``assignment``."""
    _check_length(assignment, formula)
    for clause in formula:
        if not evaluate_clause(clause, assignment):
            return False
    return True


def create_simple_3sat_example() -> CNFFormula:
    """
    Create a simple 3-SAT example for testing.

    Returns:
        CNFFormula: (x1 OR NOT x2 OR x3) AND (NOT x1 OR x2 OR NOT x3) AND (x1 OR x2 OR x3)
    """
    return CNFFormula.from_clauses([
        [1, -2, 3],
        [-1, 2, -3],
        [1, 2, 3],
    ], num_variables=3)
