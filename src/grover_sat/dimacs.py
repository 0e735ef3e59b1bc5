"""
DIMACS CNF reading, writing and random k-SAT generation.
"""

import random
from typing import Optional

from .formula import CNFFormula


def generate_random_cnf(nvars: int, nclauses: int, k: int = 3,
                        seed: Optional[int] = None) -> CNFFormula:
    """Random k-SAT formula with distinct variables inside each clause."""
    if k > nvars:
        raise ValueError(f"Clause width {k} exceeds number of variables {nvars}")
    rand = random.Random(seed)
    clauses = []
    for _ in range(nclauses):
        clause_vars = rand.sample(range(1, nvars + 1), k)
        clause = [v if rand.choice([True, False]) else -v for v in clause_vars]
        clauses.append(clause)
    return CNFFormula.from_clauses(clauses, num_variables=nvars)


def parse_dimacs(text: str) -> CNFFormula:
    """
    Parse DIMACS CNF text.

    Clauses may span lines; each is terminated by ``0``.
    """
    nvars = None
    nclauses = None
    clauses = []
    current = []
    for line in text.splitlines():
        line = line.strip()
        if line == '' or line.startswith('c'):
            continue
        if line.startswith('%'):
            break
        if line.startswith('p'):
            parts = line.split()
            if len(parts) != 4 or parts[1] != 'cnf':
                raise ValueError(f"Malformed DIMACS header: {line!r}")
            nvars, nclauses = int(parts[2]), int(parts[3])
            continue
        if nvars is None:
            raise ValueError("Clause found before 'p cnf' header")
        for token in line.split():
            try:
                lit = int(token)
            except ValueError:
                raise ValueError(f"Invalid literal {token!r} in DIMACS input") from None
            if lit == 0:
                if current:
                    clauses.append(current)
                current = []
            else:
                current.append(lit)
    if current:
        clauses.append(current)
    if nvars is None:
        raise ValueError("Missing 'p cnf' header")
    if nclauses != len(clauses):
        raise ValueError(f"Header declares {nclauses} clauses, found {len(clauses)}")
    return CNFFormula.from_clauses(clauses, num_variables=nvars)


def read_dimacs_cnf(path: str) -> CNFFormula:
    with open(path, 'r') as f:
        return parse_dimacs(f.read())


def format_dimacs(formula: CNFFormula, comments=()) -> str:
    lines = [f"c {comment}" for comment in comments]
    lines.append(f"p cnf {formula.num_variables} {len(formula)}")
    for clause in formula.to_ints():
        lines.append(" ".join(str(lit) for lit in clause) + " 0")
    return "\n".join(lines) + "\n"


def write_dimacs_cnf(formula: CNFFormula, path: str, comments=()):
    with open(path, 'w') as f:
        f.write(format_dimacs(formula, comments))
