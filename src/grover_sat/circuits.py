"""
Small circuit-building helpers shared by the oracle and diffusion circuits.
"""

from typing import Sequence

from qiskit import QuantumCircuit


def append_mcx(circuit: QuantumCircuit, controls: Sequence, target):
    """Append an X on ``target`` controlled by every qubit in ``controls``."""
    controls = list(controls)
    if not controls:
        circuit.x(target)
    elif len(controls) == 1:
        circuit.cx(controls[0], target)
    elif len(controls) == 2:
        circuit.ccx(controls[0], controls[1], target)
    else:
        circuit.mcx(controls, target)
