"""
Command-line entry point: load or generate a CNF and run Grover search on it.
"""

import argparse
import logging
import sys
from typing import Sequence

import numpy as np

from .classical import count_solutions
from .dimacs import generate_random_cnf, read_dimacs_cnf, write_dimacs_cnf
from .export import write_circuit_json
from .formula import evaluate_cnf
from .grover import optimal_iterations, run_solver
from .oracle import build_oracle


def format_assignment(assignment: Sequence[bool]) -> str:
    """Render an assignment as ``x1=true, x2=false, ...``."""
    return ", ".join(
        f"x{i}={'true' if value else 'false'}" for i, value in enumerate(assignment, start=1)
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Solve a CNF formula by simulating Grover's algorithm.")
    parser.add_argument('--cnf', type=str, default=None, help="Input DIMACS CNF file.")
    parser.add_argument('--random', action='store_true', help="Generate a random CNF instead of reading one.")
    parser.add_argument('--nvars', type=int, default=4, help="Number of variables for random CNF.")
    parser.add_argument('--nclauses', type=int, default=6, help="Number of clauses for random CNF.")
    parser.add_argument('--k', type=int, default=3, help="Clause width for random CNF.")
    parser.add_argument('--seed', type=int, default=None, help="Seed for CNF generation and measurement.")
    parser.add_argument('--write-cnf', type=str, default=None, help="Write the (generated) CNF to this file.")
    parser.add_argument('--solutions', type=str, default="1",
                        help="Estimated number of solutions, or 'count' to count them classically.")
    parser.add_argument('--iterations', type=int, default=None, help="Override the Grover iteration count.")
    parser.add_argument('--shots', type=int, default=1, help="Number of independent solve attempts.")
    parser.add_argument('--json', type=str, default=None, help="Write the oracle circuit as JSON to this file.")
    parser.add_argument('--verbose', '-v', action='store_true', help="Enable debug logging.")
    return parser


def run(args) -> int:
    if args.random:
        formula = generate_random_cnf(args.nvars, args.nclauses, k=args.k, seed=args.seed)
        print(f"Random CNF generated (nvars={args.nvars}, nclauses={args.nclauses}, seed={args.seed})")
    elif args.cnf:
        formula = read_dimacs_cnf(args.cnf)
    else:
        raise ValueError("Either --cnf or --random is required")

    if args.write_cnf:
        write_dimacs_cnf(formula, args.write_cnf)
        print(f"CNF written to {args.write_cnf}")

    nvars = formula.num_variables
    if args.solutions == "count":
        estimate = count_solutions(formula)
        print(f"Classical solution count: {estimate}")
        if estimate == 0:
            print("Formula is UNSATISFIABLE; running with an estimate of 1")
            estimate = 1
    else:
        estimate = int(args.solutions)

    iterations = optimal_iterations(nvars, estimate)
    if args.iterations is not None:
        iterations = args.iterations
    print(f"Formula: {formula}")
    print(f"Variables: {nvars}, clauses: {len(formula)}, Grover iterations: {iterations}")

    if args.json:
        write_circuit_json(build_oracle(formula).build_oracle_circuit(), args.json)
        print(f"Oracle circuit JSON written to {args.json}")

    rng = np.random.default_rng(args.seed)
    hits = 0
    for shot in range(args.shots):
        assignment = run_solver(nvars, formula, iterations, rng=rng)
        satisfied = evaluate_cnf(formula, assignment)
        hits += satisfied
        print(f"[{shot + 1}] {format_assignment(assignment)} -> "
              f"{'SATISFIED' if satisfied else 'NOT SATISFIED'}")
    if args.shots > 1:
        print(f"Satisfied in {hits}/{args.shots} shots")
    return 0 if hits else 1


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    try:
        return run(args)
    except (ValueError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
