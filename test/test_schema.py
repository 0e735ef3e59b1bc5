import json
import pytest
import sys
import os
import jsonschema
from qiskit import QuantumCircuit

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from grover_sat.export import circuit_to_json, load_schema, validate_circuit_json, write_circuit_json
from grover_sat.formula import create_simple_3sat_example
from grover_sat.oracle import SATOracle


@pytest.fixture(scope="module")
def schema():
    return load_schema()


@pytest.fixture(scope="module")
def oracle_json():
    oracle = SATOracle.from_formula(create_simple_3sat_example())
    return circuit_to_json(oracle.build_oracle_circuit())


def test_oracle_circuit_valid(oracle_json, schema):
    validate_circuit_json(oracle_json, schema)


def test_oracle_gate_names(oracle_json):
    names = {gate["name"] for gate in oracle_json}
    assert {"X", "Z", "MCX"} <= names
    z_gates = [gate for gate in oracle_json if gate["name"] == "Z"]
    # one mark on the result ancilla, the last qubit
    assert z_gates == [{"name": "Z", "targets": ["Q6"]}]


def test_controls_and_params():
    qc = QuantumCircuit(5)
    qc.mcx([0, 1, 2], 4)
    qc.ry(0.5, 3)
    gates = circuit_to_json(qc)
    assert gates[0] == {"name": "MCX", "targets": ["Q4"], "controls": ["Q0", "Q1", "Q2"]}
    assert gates[1] == {"name": "RY", "targets": ["Q3"], "params": [0.5]}


@pytest.mark.parametrize("invalid", [
    [{"name": "X"}],
    [{"name": "CX", "targets": ["Q1"], "controls": []}],
    [{"name": "X", "targets": ["q1"]}],
    [{"name": "X", "targets": ["Q0"], "control_flips": [1]}],
])
def test_invalid_quantum_circuit(invalid, schema):
    with pytest.raises(jsonschema.exceptions.ValidationError):
        validate_circuit_json(invalid, schema)


def test_write_circuit_json(tmp_path, oracle_json):
    path = tmp_path / "oracle.json"
    oracle = SATOracle.from_formula(create_simple_3sat_example())
    write_circuit_json(oracle.build_oracle_circuit(), str(path))
    with open(path, "r", encoding="utf-8") as f:
        assert json.load(f) == oracle_json
