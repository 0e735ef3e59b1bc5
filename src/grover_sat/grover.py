"""
Grover amplitude amplification over the state-vector engine.
"""

import logging
import math
from typing import Optional, Sequence

from qiskit import ClassicalRegister, QuantumCircuit, QuantumRegister

from .diffusion import build_diffusion_circuit, diffuse
from .engine import RandomSource, StateVectorEngine
from .formula import Assignment, CNFFormula, evaluate_cnf
from .oracle import SATOracle, build_oracle

logger = logging.getLogger(__name__)


def optimal_iterations(num_variables: int, estimated_solutions: int) -> int:
    """
    Number of Grover iterations for ``estimated_solutions`` marked states.

    Args:
        num_variables: Number of variables (search space N = 2**num_variables)
        estimated_solutions: Expected number of satisfying assignments M

    Returns:
        int: round(pi / (4 * theta)) with theta = arcsin(sqrt(M/N)), at least 1
    """
    if num_variables <= 0:
        raise ValueError(f"Number of variables must be positive, got {num_variables}")
    N = 2 ** num_variables
    M = estimated_solutions
    if M <= 0 or M > N:
        raise ValueError(f"Estimated solutions must be in [1, {N}], got {M}")

    theta = math.asin(math.sqrt(M / N))
    iterations = max(1, round(math.pi / (4 * theta)))
    logger.debug("N=%d M=%d theta=%.6f -> %d iterations", N, M, theta, iterations)
    return iterations


def amplify(engine: StateVectorEngine, oracle: SATOracle, iterations: int,
            variable_qubits: Optional[Sequence[int]] = None):
    """
    Prepare the uniform superposition and run ``iterations`` Grover rounds.

    The engine is left in the pre-measurement state.
    """
    if iterations < 0:
        raise ValueError(f"Iterations must be non-negative, got {iterations}")
    if variable_qubits is None:
        variable_qubits = range(oracle.num_variables)
    variable_qubits = list(variable_qubits)

    for qubit in variable_qubits:
        engine.hadamard(qubit)

    for i in range(iterations):
        oracle.apply(engine, variable_qubits)
        diffuse(engine, variable_qubits)
        logger.debug("Grover iteration %d/%d done", i + 1, iterations)


def success_probability(engine: StateVectorEngine, formula: CNFFormula,
                        variable_qubits: Optional[Sequence[int]] = None) -> float:
    """Probability that measuring the variable register yields a satisfying assignment."""
    if variable_qubits is None:
        variable_qubits = range(formula.num_variables)
    variable_qubits = list(variable_qubits)
    probs = engine.probabilities(variable_qubits)
    total = 0.0
    for index, p in enumerate(probs):
        assignment = [bool((index >> i) & 1) for i in range(len(variable_qubits))]
        if evaluate_cnf(formula, assignment):
            total += p
    return float(total)


def run_solver(num_variables: int, formula: CNFFormula, iterations: int,
               rng: RandomSource = None, check_ancillas: bool = True) -> Assignment:
    """
    Run Grover search and sample one assignment.

    Args:
        num_variables: Number of variables
        formula: Formula to search for
        iterations: Number of oracle + diffusion rounds
        rng: Random source used by measurement
        check_ancillas: Verify ancillas return to |0> after every oracle call

    Returns:
        Assignment: Sampled values, variable x1 first
    """
    oracle = build_oracle(formula, num_variables)
    engine = StateVectorEngine(num_variables, oracle.num_ancillas, rng=rng,
                               check_ancillas=check_ancillas)
    amplify(engine, oracle, iterations)

    bits = engine.measure_all(range(num_variables))
    logger.debug("Sampled assignment %s", bits)
    return [bool(bit) for bit in bits]


def create_grover_circuit(oracle: SATOracle, iterations: Optional[int] = None,
                          estimated_solutions: int = 1) -> QuantumCircuit:
    """
    Create a complete Grover's algorithm circuit for the SAT problem.

    Args:
        oracle: Oracle for the formula
        iterations: Number of Grover iterations (auto-calculated if None)
        estimated_solutions: Solution count used for the auto-calculation

    Returns:
        QuantumCircuit: Complete Grover circuit measuring the variable register
    """
    if not oracle.clauses:
        raise ValueError("No clauses added to the oracle")

    if iterations is None:
        iterations = optimal_iterations(oracle.num_variables, estimated_solutions)

    oracle_circuit = oracle.build_oracle_circuit()
    diffusion = build_diffusion_circuit(oracle.num_variables)

    qreg = QuantumRegister(oracle.num_variables, 'q')
    ancilla = QuantumRegister(oracle.num_ancillas, 'ancilla')
    creg = ClassicalRegister(oracle.num_variables, 'c')
    grover_circuit = QuantumCircuit(qreg, ancilla, creg)

    # Initial superposition
    grover_circuit.h(qreg)

    for _ in range(iterations):
        grover_circuit.compose(oracle_circuit, qubits=list(qreg) + list(ancilla), inplace=True)
        grover_circuit.compose(diffusion, qubits=list(qreg), inplace=True)

    grover_circuit.measure(qreg, creg)
    return grover_circuit
