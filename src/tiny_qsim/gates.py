"""
Quantum gate model.

A gate is one of a closed set of immutable variants:

    Not, Hadamard, PhaseShift, Rotation, MatrixGate, Oracle, Controlled

``Oracle`` and ``Controlled`` own a nested gate, so composite gates form a
tree. Gates only describe *what* is applied; validation against a circuit and
expansion to circuit scale live in ``tiny_qsim.simulator``.

Example
-------
>>> from tiny_qsim import gates
>>> circuit = gates.hadamard_gates([0, 1]) + [gates.controlled_not(target=0, control=1)]
>>> gates.qubit_count(circuit)
2
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

from tiny_qsim.core import matrices
from tiny_qsim.core.matrices import Axis
from tiny_qsim.errors import GateFactoryError, GateFactoryErrorCode

__all__ = [
    "Axis",
    "Gate",
    "Not",
    "Hadamard",
    "PhaseShift",
    "Rotation",
    "MatrixGate",
    "Oracle",
    "Controlled",
    "not_gates",
    "hadamard_gates",
    "controlled_not",
    "oracle_not",
    "controlled_matrix",
    "inversion_about_mean",
    "quantum_fourier_transform",
    "modular_exponentiation",
    "oracle_replicator",
    "qubit_count",
]


# ---------------------------------------------------------------------------
# Gate variants
# ---------------------------------------------------------------------------

class Gate:
    """Base class of every gate variant."""

    def raw_inputs(self) -> list[int]:
        """Every qubit the gate touches, controls first."""
        raise NotImplementedError


@dataclass(frozen=True)
class Not(Gate):
    target: int

    def raw_inputs(self) -> list[int]:
        return [self.target]


@dataclass(frozen=True)
class Hadamard(Gate):
    target: int

    def raw_inputs(self) -> list[int]:
        return [self.target]


@dataclass(frozen=True)
class PhaseShift(Gate):
    """P(φ) = diag(1, e^(iφ)) on ``target``."""
    radians: float
    target: int

    def raw_inputs(self) -> list[int]:
        return [self.target]


@dataclass(frozen=True)
class Rotation(Gate):
    """R_axis(θ) = exp(-iθσ/2) on ``target``."""
    axis: Axis
    radians: float
    target: int

    def raw_inputs(self) -> list[int]:
        return [self.target]


@dataclass(frozen=True, eq=False)
class MatrixGate(Gate):
    """
    Arbitrary matrix applied to ``inputs``.

    The first input is the most significant bit of the matrix row index.
    The matrix is stored as a read-only copy.
    """
    matrix: np.ndarray
    inputs: tuple[int, ...]

    def __post_init__(self):
        matrix = np.array(self.matrix, dtype=np.complex128)
        matrix.setflags(write=False)
        object.__setattr__(self, "matrix", matrix)
        object.__setattr__(self, "inputs", tuple(self.inputs))

    def raw_inputs(self) -> list[int]:
        return list(self.inputs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MatrixGate):
            return NotImplemented
        return (self.inputs == other.inputs
                and self.matrix.shape == other.matrix.shape
                and bool(np.array_equal(self.matrix, other.matrix)))

    def __hash__(self) -> int:
        return hash((self.inputs, self.matrix.shape, self.matrix.tobytes()))

    def __repr__(self) -> str:
        return f"MatrixGate(shape={self.matrix.shape}, inputs={list(self.inputs)})"


@dataclass(frozen=True)
class Oracle(Gate):
    """
    ``gate`` applied only when the ``controls`` match one of the entries in
    ``truth_table`` (bit strings, first character for the first control).
    """
    truth_table: tuple[str, ...]
    controls: tuple[int, ...]
    gate: Gate

    def __post_init__(self):
        object.__setattr__(self, "truth_table", tuple(self.truth_table))
        object.__setattr__(self, "controls", tuple(self.controls))

    def raw_inputs(self) -> list[int]:
        return list(self.controls) + self.gate.raw_inputs()


@dataclass(frozen=True)
class Controlled(Gate):
    """``gate`` applied only when every control qubit is 1."""
    gate: Gate
    controls: tuple[int, ...]

    def __post_init__(self):
        object.__setattr__(self, "controls", tuple(self.controls))

    def raw_inputs(self) -> list[int]:
        return list(self.controls) + self.gate.raw_inputs()


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

def not_gates(targets: Iterable[int]) -> list[Gate]:
    return [Not(target) for target in targets]


def hadamard_gates(targets: Iterable[int]) -> list[Gate]:
    return [Hadamard(target) for target in targets]


def controlled_not(target: int, control: int) -> Gate:
    return Controlled(Not(target), [control])


def oracle_not(truth_table: Sequence[str], controls: Sequence[int], target: int) -> Gate:
    return Oracle(truth_table, controls, Not(target))


def controlled_matrix(matrix: np.ndarray, inputs: Sequence[int], control: int) -> Gate:
    return Controlled(MatrixGate(matrix, inputs), [control])


def inversion_about_mean(inputs: Sequence[int]) -> Gate:
    """Grover diffusion operator over ``inputs``."""
    if not inputs:
        raise GateFactoryError(GateFactoryErrorCode.INPUTS_CAN_NOT_BE_AN_EMPTY_LIST)
    return MatrixGate(matrices.inversion_about_mean(2 ** len(inputs)), inputs)


def quantum_fourier_transform(inputs: Sequence[int], inverse: bool = False) -> Gate:
    """Quantum Fourier transform (or its inverse) over ``inputs``."""
    if not inputs:
        raise GateFactoryError(GateFactoryErrorCode.INPUTS_CAN_NOT_BE_AN_EMPTY_LIST)
    return MatrixGate(matrices.quantum_fourier_transform(2 ** len(inputs), inverse), inputs)


def modular_exponentiation(base: int, modulus: int, exponent: Sequence[int],
                           inputs: Sequence[int]) -> list[Gate]:
    """
    Gates computing ``base ** exponent mod modulus`` into ``inputs``.

    Parameters
    ----------
    base : int
        Constant base, bigger than zero.
    modulus : int
        Constant modulus, bigger than zero.
    exponent : sequence of int
        Qubits holding the exponent, most significant first.
    inputs : sequence of int
        Qubits carrying the result between gates, most significant first.
        They are expected to start as |0...01⟩.

    Returns
    -------
    list[Gate]
        One controlled modular multiplication per exponent qubit.
    """
    if base <= 0:
        raise GateFactoryError(GateFactoryErrorCode.BASE_HAS_TO_BE_BIGGER_THAN_ZERO)
    if modulus <= 0:
        raise GateFactoryError(GateFactoryErrorCode.MODULUS_HAS_TO_BE_BIGGER_THAN_ZERO)
    if not inputs:
        raise GateFactoryError(GateFactoryErrorCode.INPUTS_CAN_NOT_BE_AN_EMPTY_LIST)

    gate_base = base % modulus
    result = []
    for control in reversed(exponent):
        matrix = matrices.modular_multiplication(gate_base, modulus, len(inputs))
        result.append(controlled_matrix(matrix, inputs, control))
        gate_base = (gate_base * gate_base) % modulus

    return result


def oracle_replicator(extended_truth_table: Iterable[tuple[str, str]],
                      controls: Sequence[int], targets: Sequence[int]) -> list[Gate]:
    """
    One ``oracle_not`` per target whose bit is set in at least one activation.

    ``extended_truth_table`` holds ``(truth, activation)`` pairs; bit ``i`` of
    an activation (counted from its last character) drives the ``i``-th
    target counted from the end of ``targets``.
    """
    extended_truth_table = list(extended_truth_table)
    result = []
    for i, target in enumerate(reversed(targets)):
        truth_table = [
            truth for truth, activation in extended_truth_table
            if i < len(activation) and activation[len(activation) - 1 - i] == "1"
        ]
        if truth_table:
            result.append(oracle_not(truth_table, controls, target))
    return result


def qubit_count(gates: Iterable[Gate]) -> int:
    """Smallest register able to hold every gate (0 for no gates)."""
    return max((max(gate.raw_inputs(), default=-1) + 1 for gate in gates), default=0)
