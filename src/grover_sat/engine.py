"""
Dense state-vector engine used to execute oracle and diffusion circuits.

Qubit ``q`` is bit ``q`` of the basis-state index (little-endian, the same
convention as Qiskit), so engine amplitudes can be compared directly with
``qiskit.quantum_info.Statevector``.
"""

import logging
from contextlib import contextmanager
from typing import Iterable, List, Optional, Sequence, Union

import numpy as np
from qiskit import QuantumCircuit
from qiskit.circuit import ControlledGate

logger = logging.getLogger(__name__)

# 2**28 complex128 amplitudes is 4 GiB
MAX_QUBITS = 28

HADAMARD = np.array([[1, 1], [1, -1]], dtype=complex) / np.sqrt(2)

RandomSource = Union[None, int, np.random.Generator]


class AncillaLeakError(RuntimeError):
    """An ancilla qubit was released while still entangled or excited."""


def as_generator(rng: RandomSource) -> np.random.Generator:
    """Turn a seed, a Generator or None into a numpy Generator."""
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


def ry_matrix(angle: float) -> np.ndarray:
    c, s = np.cos(angle / 2), np.sin(angle / 2)
    return np.array([[c, -s], [s, c]], dtype=complex)


class StateVectorEngine:
    """
    Exact simulation of a register of qubits as a complex amplitude vector.

    The register holds ``num_qubits`` working qubits followed by a pool of
    ``num_ancillas`` scratch qubits. Every gate updates the vector in place.
    """

    def __init__(self, num_qubits: int, num_ancillas: int = 0,
                 rng: RandomSource = None, check_ancillas: bool = True,
                 tolerance: float = 1e-9):
        """
        Initialize the register in |0...0>.

        Args:
            num_qubits: Number of working qubits
            num_ancillas: Number of scratch qubits placed after the working qubits
            rng: Random source for measurement (seed, Generator or None)
            check_ancillas: Verify that released ancillas are back in |0>
            tolerance: Probability treated as zero by the ancilla check
        """
        if num_qubits < 0 or num_ancillas < 0:
            raise ValueError("Qubit counts must be non-negative")
        total = num_qubits + num_ancillas
        if total == 0:
            raise ValueError("Register needs at least one qubit")
        if total > MAX_QUBITS:
            raise ValueError(f"{total} qubits exceed the simulator limit of {MAX_QUBITS}")

        self.num_working_qubits = num_qubits
        self.num_ancillas = num_ancillas
        self.num_qubits = total
        self.rng = as_generator(rng)
        self.check_ancillas = check_ancillas
        self.tolerance = tolerance

        self._state = np.zeros(2 ** total, dtype=np.complex128)
        self._state[0] = 1.0
        self._free = list(range(num_qubits, total))
        self._leased = set()

    # -- state access -----------------------------------------------------

    @property
    def amplitudes(self) -> np.ndarray:
        return self._state.copy()

    def load(self, amplitudes: Sequence[complex]):
        """Replace the state with ``amplitudes`` (must be normalized)."""
        data = np.asarray(amplitudes, dtype=np.complex128)
        if data.shape != self._state.shape:
            raise ValueError(f"Expected {self._state.size} amplitudes, got {data.size}")
        norm = float(np.sum(np.abs(data) ** 2))
        if abs(norm - 1.0) > 1e-6:
            raise ValueError(f"State is not normalized (norm {norm})")
        self._state[:] = data

    def norm(self) -> float:
        return float(np.sum(np.abs(self._state) ** 2))

    def probabilities(self, qubits: Optional[Sequence[int]] = None) -> np.ndarray:
        """
        Marginal distribution over ``qubits``.

        Entry ``i`` is the probability that ``qubits[j]`` reads bit ``j`` of
        ``i``. All qubits are used when ``qubits`` is None.
        """
        probs = np.abs(self._state) ** 2
        if qubits is None:
            return probs
        qubits = list(qubits)
        self._check_distinct(qubits)
        n = self.num_qubits
        keep = [self._axis(q) for q in qubits]
        tensor = probs.reshape((2,) * n)
        other = tuple(a for a in range(n) if a not in keep)
        tensor = tensor.sum(axis=other)
        remaining = sorted(keep)
        wanted = [self._axis(q) for q in reversed(qubits)]
        tensor = np.transpose(tensor, [remaining.index(a) for a in wanted])
        return tensor.reshape(-1)

    def probability_of_one(self, qubit: int) -> float:
        self._check_qubit(qubit)
        view = self._tensor()
        return float(np.sum(np.abs(view[self._slice(qubit, 1)]) ** 2))

    # -- gates --------------------------------------------------------------

    def hadamard(self, qubit: int):
        self.apply_unitary(HADAMARD, qubit)

    def pauli_x(self, qubit: int):
        self.controlled_x([], qubit)

    def phase_z(self, qubit: int):
        self.controlled_z([], qubit)

    def rotation_y(self, angle: float, qubit: int):
        self.apply_unitary(ry_matrix(angle), qubit)

    def controlled_x(self, controls: Sequence[int], target: int, ctrl_state=None):
        """Swap the amplitude pairs differing in ``target`` where the controls match."""
        view = self._tensor()
        base = self._control_slice(controls, target, ctrl_state)
        s0, s1 = self._pair(base, target)
        zero = view[s0].copy()
        view[s0] = view[s1]
        view[s1] = zero

    def controlled_z(self, controls: Sequence[int], target: int, ctrl_state=None):
        """Negate amplitudes where ``target`` is 1 and the controls match."""
        view = self._tensor()
        base = self._control_slice(controls, target, ctrl_state)
        _, s1 = self._pair(base, target)
        view[s1] *= -1

    def apply_unitary(self, matrix: np.ndarray, target: int,
                      controls: Sequence[int] = (), ctrl_state=None):
        """Apply a (controlled) 2x2 unitary to ``target``."""
        matrix = np.asarray(matrix, dtype=complex)
        if matrix.shape != (2, 2):
            raise ValueError(f"Expected a 2x2 matrix, got shape {matrix.shape}")
        view = self._tensor()
        base = self._control_slice(controls, target, ctrl_state)
        s0, s1 = self._pair(base, target)
        a = view[s0].copy()
        b = view[s1].copy()
        view[s0] = matrix[0, 0] * a + matrix[0, 1] * b
        view[s1] = matrix[1, 0] * a + matrix[1, 1] * b

    def apply_circuit(self, circuit: QuantumCircuit, qubits: Optional[Sequence[int]] = None):
        """
        Execute a gate-level Qiskit circuit on this register.

        Args:
            circuit: Circuit made of h, x, z, ry, controlled X/Z gates and barriers
            qubits: Register qubit for each circuit qubit (identity if None)
        """
        if qubits is None:
            qubits = list(range(circuit.num_qubits))
        qubits = list(qubits)
        if len(qubits) != circuit.num_qubits:
            raise ValueError(
                f"Circuit has {circuit.num_qubits} qubits but {len(qubits)} were mapped"
            )
        self._check_distinct(qubits)

        for instruction in circuit.data:
            op = instruction.operation
            args = [qubits[circuit.find_bit(q).index] for q in instruction.qubits]
            if op.name == "barrier":
                continue
            if isinstance(op, ControlledGate):
                controls, target = args[:-1], args[-1]
                base = op.base_gate.name
                if base == "x":
                    self.controlled_x(controls, target, op.ctrl_state)
                elif base == "z":
                    self.controlled_z(controls, target, op.ctrl_state)
                elif op.base_gate.num_qubits == 1:
                    self.apply_unitary(op.base_gate.to_matrix(), target, controls, op.ctrl_state)
                else:
                    raise ValueError(f"Unsupported controlled gate '{op.name}'")
            elif op.name == "h":
                self.hadamard(args[0])
            elif op.name == "x":
                self.pauli_x(args[0])
            elif op.name == "z":
                self.phase_z(args[0])
            elif op.name == "ry":
                self.rotation_y(float(op.params[0]), args[0])
            else:
                raise ValueError(f"Unsupported operation '{op.name}'")

        phase = float(circuit.global_phase)
        if phase:
            self._state *= np.exp(1j * phase)

    # -- measurement ----------------------------------------------------------

    def measure(self, qubit: int) -> int:
        """Projectively measure ``qubit``, collapsing the state."""
        p_one = min(max(self.probability_of_one(qubit), 0.0), 1.0)
        outcome = 1 if self.rng.random() < p_one else 0
        p_outcome = p_one if outcome else 1.0 - p_one
        if p_outcome <= 0.0:
            raise RuntimeError(f"Measured qubit {qubit} in a zero-probability branch")

        view = self._tensor()
        view[self._slice(qubit, 1 - outcome)] = 0
        self._state /= np.sqrt(p_outcome)
        logger.debug("Measured qubit %d -> %d (p1=%.6f)", qubit, outcome, p_one)
        return outcome

    def measure_all(self, qubits: Iterable[int]) -> List[int]:
        return [self.measure(q) for q in qubits]

    # -- ancilla bookkeeping ----------------------------------------------------

    def allocate_ancilla(self) -> int:
        """Lease a scratch qubit from the pool. It is in |0> by construction."""
        if not self._free:
            raise RuntimeError("No free ancilla qubits left in the register")
        qubit = self._free.pop(0)
        self._leased.add(qubit)
        logger.debug("Allocated ancilla %d", qubit)
        return qubit

    def reset(self, qubit: int):
        """Check that ``qubit`` is back in |0>. Never forces a value."""
        self._check_qubit(qubit)
        if not self.check_ancillas:
            return
        p_one = self.probability_of_one(qubit)
        if p_one > self.tolerance:
            raise AncillaLeakError(
                f"Ancilla {qubit} not returned to |0> (P(1) = {p_one:.3e})"
            )

    def deallocate(self, qubit: int):
        if qubit not in self._leased:
            raise ValueError(f"Qubit {qubit} is not a leased ancilla")
        self.reset(qubit)
        self._release(qubit)

    @contextmanager
    def ancillas(self, count: int):
        """
        Lease ``count`` ancillas for the duration of a block.

        The ancillas are checked and returned to the pool on exit.
        """
        if count > len(self._free):
            raise RuntimeError(f"Requested {count} ancillas, only {len(self._free)} free")
        leased = [self.allocate_ancilla() for _ in range(count)]
        try:
            yield leased
        except BaseException:
            for qubit in leased:
                self._release(qubit)
            raise
        for qubit in leased:
            self.deallocate(qubit)

    def _release(self, qubit: int):
        self._leased.discard(qubit)
        self._free.append(qubit)
        self._free.sort()

    # -- helpers ----------------------------------------------------------------

    def _tensor(self) -> np.ndarray:
        return self._state.reshape((2,) * self.num_qubits)

    def _axis(self, qubit: int) -> int:
        return self.num_qubits - 1 - qubit

    def _slice(self, qubit: int, value: int) -> tuple:
        index = [slice(None)] * self.num_qubits
        index[self._axis(qubit)] = value
        return tuple(index)

    def _control_slice(self, controls: Sequence[int], target: int, ctrl_state) -> list:
        controls = list(controls)
        self._check_distinct(controls + [target])
        if ctrl_state is None:
            values = [1] * len(controls)
        else:
            if isinstance(ctrl_state, str):
                ctrl_state = int(ctrl_state, 2)
            values = [(int(ctrl_state) >> i) & 1 for i in range(len(controls))]
        index = [slice(None)] * self.num_qubits
        for control, value in zip(controls, values):
            index[self._axis(control)] = value
        return index

    def _pair(self, base: list, target: int):
        s0 = list(base)
        s1 = list(base)
        s0[self._axis(target)] = 0
        s1[self._axis(target)] = 1
        return tuple(s0), tuple(s1)

    def _check_qubit(self, qubit: int):
        if not 0 <= qubit < self.num_qubits:
            raise ValueError(f"Qubit index {qubit} out of range [0, {self.num_qubits - 1}]")

    def _check_distinct(self, qubits: Sequence[int]):
        for q in qubits:
            self._check_qubit(q)
        if len(set(qubits)) != len(qubits):
            raise ValueError(f"Qubits must be distinct, got {list(qubits)}")
