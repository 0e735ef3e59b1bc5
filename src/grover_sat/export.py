"""
JSON export of gate-level circuits, validated against a JSON schema.
"""

import json
import os
from typing import Dict, List

import jsonschema
from qiskit import QuantumCircuit
from qiskit.circuit import ControlledGate

SCHEMA_PATH = os.path.join(os.path.dirname(__file__), "quantum_circuit.schema.json")


def load_schema() -> dict:
    with open(SCHEMA_PATH, "r", encoding="utf-8") as f:
        return json.load(f)


def _gate_name(op) -> str:
    if isinstance(op, ControlledGate):
        base = op.base_gate.name.upper()
        k = op.num_ctrl_qubits
        if k == 1:
            return "C" + base
        if k == 2:
            return "CC" + base
        return "MC" + base
    return op.name.upper()


def circuit_to_json(qc: QuantumCircuit) -> List[Dict]:
    """
    Describe ``qc`` as a list of gates.

    Qubits are named ``Q<i>`` by their index in the circuit; the last qubit
    of each instruction is the target, the others are controls.
    """
    qmap = {q: f"Q{i}" for i, q in enumerate(qc.qubits)}
    json_gates = []
    for instruction in qc.data:
        op = instruction.operation
        if op.name in ("barrier", "measure"):
            continue
        qargs = instruction.qubits
        gate_json = {
            "name": _gate_name(op),
            "targets": [qmap[q] for q in qargs[-1:]],
        }
        controls = [qmap[q] for q in qargs[:-1]]
        if controls:
            gate_json["controls"] = controls
        if op.params:
            gate_json["params"] = [float(p) for p in op.params]
        json_gates.append(gate_json)
    return json_gates


def validate_circuit_json(data, schema: dict = None):
    """Raise jsonschema.ValidationError if ``data`` does not match the circuit schema."""
    jsonschema.validate(instance=data, schema=schema or load_schema())


def write_circuit_json(qc: QuantumCircuit, path: str):
    json_gates = circuit_to_json(qc)
    validate_circuit_json(json_gates)
    with open(path, 'w') as f:
        json.dump(json_gates, f, indent=2, ensure_ascii=False)
