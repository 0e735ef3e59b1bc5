"""
Grover diffusion operator (inversion about the mean).
"""

from typing import Sequence

import numpy as np
from qiskit import QuantumCircuit

from .circuits import append_mcx
from .engine import StateVectorEngine


def build_diffusion_circuit(num_qubits: int) -> QuantumCircuit:
    """
    Build the reflection about the uniform superposition.

    The H/X/multi-controlled-Z/X/H sandwich implements I - 2|s><s|; the
    global phase of pi turns it into 2|s><s| - I, i.e. a -> 2*mean(a) - a.
    The multi-controlled Z is written as H/MCX/H on the last qubit.

    Args:
        num_qubits: Number of variable qubits

    Returns:
        QuantumCircuit: Diffusion circuit on ``num_qubits`` qubits
    """
    if num_qubits <= 0:
        raise ValueError(f"Number of qubits must be positive, got {num_qubits}")
    circuit = QuantumCircuit(num_qubits, name="diffusion")
    qubits = list(range(num_qubits))

    circuit.h(qubits)
    circuit.x(qubits)
    if num_qubits == 1:
        circuit.z(0)
    else:
        circuit.h(qubits[-1])
        append_mcx(circuit, qubits[:-1], qubits[-1])
        circuit.h(qubits[-1])
    circuit.x(qubits)
    circuit.h(qubits)

    circuit.global_phase = np.pi
    return circuit


def diffuse(engine: StateVectorEngine, variable_qubits: Sequence[int]):
    """Reflect the variable register of ``engine`` about its uniform superposition."""
    variable_qubits = list(variable_qubits)
    engine.apply_circuit(build_diffusion_circuit(len(variable_qubits)), variable_qubits)
