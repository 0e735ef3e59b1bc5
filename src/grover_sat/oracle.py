"""
Phase oracle for CNF satisfiability using Qiskit circuits.
"""

import logging
from typing import Dict, List, Optional, Sequence

from qiskit import QuantumCircuit, QuantumRegister
from qiskit.circuit import Qubit

from .circuits import append_mcx
from .engine import StateVectorEngine
from .formula import Clause, ClauseLike, CNFFormula, to_clause

logger = logging.getLogger(__name__)


class SATOracle:
    """
    Quantum phase oracle for a CNF formula.

    Qubit layout of the oracle circuit: the variable register ``q`` followed
    by the ancilla register ``[clause, counter_0 .. counter_{k-1}, result]``.
    The single clause ancilla is reused for every clause; the counter holds
    the number of satisfied clauses in ``k = m.bit_length()`` qubits for
    ``m`` clauses, so the register grows logarithmically in ``m``.
    """

    def __init__(self, num_variables: int):
        """
        Initialize the SAT oracle.

        Args:
            num_variables: Number of variables in the SAT problem
        """
        if num_variables <= 0:
            raise ValueError(f"Number of variables must be positive, got {num_variables}")
        self.num_variables = num_variables
        self.clauses: List[Clause] = []
        self.circuit = None

    @classmethod
    def from_formula(cls, formula: CNFFormula, num_variables: Optional[int] = None) -> "SATOracle":
        oracle = cls(num_variables if num_variables is not None else formula.num_variables)
        for clause in formula:
            oracle.add_clause(clause)
        return oracle

    @property
    def num_counter_qubits(self) -> int:
        return len(self.clauses).bit_length()

    @property
    def num_ancillas(self) -> int:
        return self.num_counter_qubits + 2

    @property
    def num_qubits(self) -> int:
        return self.num_variables + self.num_ancillas

    def add_clause(self, clause: ClauseLike):
        """
        Add a clause to the oracle.

        Args:
            clause: Clause, Literal sequence or DIMACS literals (negative for negation)
        """
        clause = to_clause(clause)
        for lit in clause:
            if lit.var_index > self.num_variables:
                raise ValueError(
                    f"Literal x{lit.var_index} out of range for {self.num_variables} variables"
                )
        self.clauses.append(clause)
        self.circuit = None

    def build_oracle_circuit(self) -> QuantumCircuit:
        """
        Build the phase oracle circuit.

        Each clause is computed into the clause ancilla, added to the counter
        and uncomputed. The result ancilla is set when the counter equals the
        number of clauses, marked with Z and cleared, then the counter is
        counted back down to zero.

        Returns:
            QuantumCircuit: Oracle flipping the phase of satisfying assignments,
            with every ancilla returned to |0>
        """
        qreg = QuantumRegister(self.num_variables, 'q')
        ancilla = QuantumRegister(self.num_ancillas, 'ancilla')
        circuit = QuantumCircuit(qreg, ancilla, name="sat_oracle")

        clause_qubit = ancilla[0]
        counter = list(ancilla[1:-1])
        result = ancilla[-1]

        for clause in self.clauses:
            self._apply_clause_oracle(circuit, qreg, clause_qubit, clause)
            self._increment(circuit, clause_qubit, counter)
            self._unapply_clause_oracle(circuit, qreg, clause_qubit, clause)

        # result = [counter == number of clauses]
        self._mark_all(circuit, counter, result)

        # Phase flip for satisfying assignments
        circuit.z(result)

        self._mark_all(circuit, counter, result)

        for clause in reversed(self.clauses):
            self._apply_clause_oracle(circuit, qreg, clause_qubit, clause)
            self._decrement(circuit, clause_qubit, counter)
            self._unapply_clause_oracle(circuit, qreg, clause_qubit, clause)

        logger.debug(
            "Built oracle for %d clauses: %d qubits, %d gates",
            len(self.clauses), circuit.num_qubits, circuit.size(),
        )
        self.circuit = circuit
        return circuit

    def apply(self, engine: StateVectorEngine, variable_qubits: Optional[Sequence[int]] = None,
              ancilla_qubits: Optional[Sequence[int]] = None):
        """
        Apply the oracle to an engine register.

        Ancillas are leased from the engine's pool when none are given and
        checked for leakage when they are released.
        """
        if variable_qubits is None:
            variable_qubits = range(self.num_variables)
        variable_qubits = list(variable_qubits)
        if len(variable_qubits) != self.num_variables:
            raise ValueError(
                f"Oracle needs {self.num_variables} variable qubits, got {len(variable_qubits)}"
            )
        circuit = self.circuit if self.circuit is not None else self.build_oracle_circuit()

        if ancilla_qubits is not None:
            engine.apply_circuit(circuit, variable_qubits + list(ancilla_qubits))
            for qubit in ancilla_qubits:
                engine.reset(qubit)
            return

        with engine.ancillas(self.num_ancillas) as leased:
            engine.apply_circuit(circuit, variable_qubits + leased)

    @staticmethod
    def _literal_controls(clause: Clause) -> Optional[Dict[int, bool]]:
        """
        Unique variables of a clause mapped to "is negative".

        Returns None if the clause contains both x and NOT x.
        """
        unique_vars = {}  # var_idx -> is_negative
        for literal in clause:
            var_idx = literal.var_index - 1
            is_negative = not literal.polarity
            if var_idx in unique_vars:
                if unique_vars[var_idx] != is_negative:
                    # (x OR NOT x) = True
                    return None
            else:
                unique_vars[var_idx] = is_negative
        return unique_vars

    def _apply_clause_oracle(self, circuit: QuantumCircuit, qreg: QuantumRegister,
                             ancilla: Qubit, clause: Clause):
        """
        Compute "clause satisfied" into ``ancilla``.
        """
        # (x1 OR x2 OR x3) = NOT(NOT x1 AND NOT x2 AND NOT x3)
        unique_vars = self._literal_controls(clause)
        if unique_vars is None:
            circuit.x(ancilla)
            return

        self._flip_to_falsity(circuit, qreg, unique_vars)

        # Multi-controlled NOT marks the clause violated, X turns it into OR
        controls = [qreg[var_idx] for var_idx in unique_vars]
        append_mcx(circuit, controls, ancilla)
        circuit.x(ancilla)

        self._flip_to_falsity(circuit, qreg, unique_vars)

    def _unapply_clause_oracle(self, circuit: QuantumCircuit, qreg: QuantumRegister,
                               ancilla: Qubit, clause: Clause):
        """
        Uncompute the clause ancilla back to |0> so it can hold the next clause.
        """
        unique_vars = self._literal_controls(clause)
        if unique_vars is None:
            circuit.x(ancilla)
            return

        self._flip_to_falsity(circuit, qreg, unique_vars)

        controls = [qreg[var_idx] for var_idx in unique_vars]
        circuit.x(ancilla)
        append_mcx(circuit, controls, ancilla)

        self._flip_to_falsity(circuit, qreg, unique_vars)

    @staticmethod
    def _flip_to_falsity(circuit: QuantumCircuit, qreg: QuantumRegister,
                         unique_vars: Dict[int, bool]):
        # A positive literal is false when its qubit is 0, so it is read
        # through an X; a negative literal's qubit already reads 1 when false.
        for var_idx, is_negative in unique_vars.items():
            if not is_negative:
                circuit.x(qreg[var_idx])

    @staticmethod
    def _increment(circuit: QuantumCircuit, control: Qubit, counter: List[Qubit]):
        """Add 1 to ``counter`` (bit 0 least significant) when ``control`` is set."""
        # Carry ripple: the highest bit flips first, while the lower bits
        # still hold the value before the addition.
        for j in reversed(range(len(counter))):
            append_mcx(circuit, [control] + counter[:j], counter[j])

    @staticmethod
    def _decrement(circuit: QuantumCircuit, control: Qubit, counter: List[Qubit]):
        """Inverse of :meth:`_increment`."""
        for j in range(len(counter)):
            append_mcx(circuit, [control] + counter[:j], counter[j])

    def _mark_all(self, circuit: QuantumCircuit, counter: List[Qubit], target: Qubit):
        """Flip ``target`` when the counter equals the number of clauses."""
        # With no clauses the counter is empty and the X is unconditional:
        # every assignment satisfies an empty formula.
        total = len(self.clauses)
        zero_bits = [qubit for j, qubit in enumerate(counter) if not (total >> j) & 1]
        for qubit in zero_bits:
            circuit.x(qubit)
        append_mcx(circuit, counter, target)
        for qubit in zero_bits:
            circuit.x(qubit)


def build_oracle(formula: CNFFormula, num_variables: Optional[int] = None) -> SATOracle:
    """Create an oracle for ``formula``, rejecting out-of-range literals."""
    num_variables = num_variables if num_variables is not None else formula.num_variables
    formula.validate(num_variables)
    return SATOracle.from_formula(formula, num_variables)
