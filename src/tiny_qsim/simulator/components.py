"""
Validated extraction of gate and noise components.

``extract_components`` turns a ``Gate`` into the matrix view it represents
plus the concrete qubits it acts on, after checking it can be applied to a
register of ``qubit_count`` qubits. Everything downstream (transformations,
decomposition) trusts the returned components.
"""

from __future__ import annotations

import logging
from itertools import product
from typing import Sequence

import numpy as np

from tiny_qsim import config
from tiny_qsim.core import matrices
from tiny_qsim.core.linalg import Matrix, is_approximately_equal, is_approximately_unitary, \
    is_power_of_two, is_square, log2
from tiny_qsim.errors import GateError, GateErrorCode, NoiseError, NoiseErrorCode
from tiny_qsim.gates import Controlled, Gate, Hadamard, MatrixGate, Not, Oracle, PhaseShift, Rotation
from tiny_qsim.noise import Noise
from tiny_qsim.simulator.matrices import (
    CircuitSimulatorMatrix,
    ControlledSimulatorMatrix,
    GateSimulatorMatrix,
    OracleSimulatorMatrix,
    SimulatorGateMatrix,
)
from tiny_qsim.simulator.truth_table import TruthTableEntry

logger = logging.getLogger(__name__)

Components = tuple[SimulatorGateMatrix, list[int]]
KrausComponents = tuple[list[GateSimulatorMatrix], list[int]]


# ---------------------------------------------------------------------------
# Matrix extraction
# ---------------------------------------------------------------------------

def _gate_matrix(gate: Gate) -> Matrix:
    if isinstance(gate, Not):
        return matrices.not_matrix()
    if isinstance(gate, Hadamard):
        return matrices.hadamard()
    if isinstance(gate, PhaseShift):
        return matrices.phase_shift(gate.radians)
    if isinstance(gate, Rotation):
        return matrices.rotation(gate.axis, gate.radians)

    matrix = gate.matrix
    if not is_power_of_two(matrix.shape[0]):
        raise GateError(GateErrorCode.GATE_MATRIX_ROW_COUNT_HAS_TO_BE_A_POWER_OF_TWO)
    if not is_approximately_unitary(matrix):
        raise GateError(GateErrorCode.GATE_MATRIX_IS_NOT_UNITARY)
    return matrix


def _extract_controlled(gate: Gate) -> tuple[list[TruthTableEntry], int, Matrix]:
    """Flatten nested oracles/controlled gates into (truth table, control count, matrix)."""
    if not isinstance(gate, (Oracle, Controlled)):
        return [], 0, _gate_matrix(gate)

    controls = gate.controls
    if not controls:
        raise GateError(GateErrorCode.GATE_CONTROLS_CAN_NOT_BE_AN_EMPTY_LIST)

    truth_count = len(controls)
    if isinstance(gate, Oracle):
        entries = [TruthTableEntry.parse(truth, truth_count) for truth in gate.truth_table]
    else:
        entries = [TruthTableEntry((1 << truth_count) - 1, truth_count)]

    inner_truth_table, inner_count, controlled = _extract_controlled(gate.gate)

    if inner_count == 0:
        truth_table = entries
    elif not inner_truth_table:
        truth_table = []
    else:
        truth_table = [outer + inner for outer, inner in product(entries, inner_truth_table)]

    return truth_table, truth_count + inner_count, controlled


def extract_matrix(gate: Gate) -> SimulatorGateMatrix:
    """
    Matrix view of ``gate`` at gate scale.

    Raises
    ------
    GateError
        If the gate matrix, its controls or its truth table are not valid.
    """
    truth_table, control_count, controlled = _extract_controlled(gate)
    if control_count == 0:
        return GateSimulatorMatrix(controlled)

    all_activated = TruthTableEntry((1 << control_count) - 1, control_count)
    if truth_table == [all_activated]:
        return ControlledSimulatorMatrix(control_count, controlled)
    return OracleSimulatorMatrix(truth_table, control_count, controlled)


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------

def _validate_unique_inputs(inputs: Sequence[int]) -> None:
    if not inputs:
        raise GateError(GateErrorCode.GATE_WITH_EMPTY_INPUT_LIST)
    if len(set(inputs)) != len(inputs):
        raise GateError(GateErrorCode.GATE_INPUTS_ARE_NOT_UNIQUE)


def _validate_fit(inputs: Sequence[int], matrix_count: int, qubit_count: int) -> None:
    matrix_qubit_count = log2(matrix_count)
    if len(inputs) != matrix_qubit_count:
        raise GateError(GateErrorCode.GATE_INPUT_COUNT_DOES_NOT_MATCH_GATE_MATRIX_QUBIT_COUNT)
    if qubit_count <= 0:
        raise GateError(GateErrorCode.CIRCUIT_QUBIT_COUNT_HAS_TO_BE_BIGGER_THAN_ZERO)
    if matrix_qubit_count > qubit_count:
        raise GateError(GateErrorCode.GATE_MATRIX_HANDLES_MORE_QUBITS_THAT_CIRCUIT_ACTUALLY_HAS)
    if not all(0 <= qubit < qubit_count for qubit in inputs):
        raise GateError(GateErrorCode.GATE_INPUTS_ARE_NOT_IN_BOUND)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_components(gate: Gate, qubit_count: int) -> Components:
    """
    Validate ``gate`` against a ``qubit_count``-qubit register.

    Parameters
    ----------
    gate : Gate
        Gate to extract.
    qubit_count : int
        Size of the register the gate will be applied to.

    Returns
    -------
    tuple
        ``(matrix_view, inputs)`` where ``inputs`` lists the qubits in
        matrix order (controls first).

    Raises
    ------
    GateError
        With the code of the first failed check.
    """
    inputs = gate.raw_inputs()
    _validate_unique_inputs(inputs)
    matrix = extract_matrix(gate)
    _validate_fit(inputs, matrix.count, qubit_count)
    return matrix, inputs


def extract_circuit_matrix(gate: Gate, qubit_count: int) -> CircuitSimulatorMatrix:
    matrix, inputs = extract_components(gate, qubit_count)
    return CircuitSimulatorMatrix(qubit_count, matrix, inputs)


def extract_kraus_matrices(noise: Noise, qubit_count: int) -> KrausComponents:
    """
    Validate the Kraus matrices of ``noise`` and its inputs.

    Raises
    ------
    NoiseError
        If the matrices are not a valid Kraus set.
    GateError
        If the inputs do not fit the register (same codes as for gates).
    """
    kraus = noise.matrices
    if not kraus:
        raise NoiseError(NoiseErrorCode.NOISE_MATRICES_CAN_NOT_BE_AN_EMPTY_LIST)

    first = kraus[0]
    if not is_square(first):
        raise NoiseError(NoiseErrorCode.NOISE_MATRICES_ARE_NOT_SQUARE)
    row_count = first.shape[0]
    if not is_power_of_two(row_count):
        raise NoiseError(NoiseErrorCode.NOISE_MATRICES_ROW_COUNT_HAS_TO_BE_A_POWER_OF_TWO)

    total = first.conj().T @ first
    for matrix in kraus[1:]:
        if not is_square(matrix):
            raise NoiseError(NoiseErrorCode.NOISE_MATRICES_ARE_NOT_SQUARE)
        if matrix.shape[0] != row_count:
            raise NoiseError(NoiseErrorCode.NOISE_MATRICES_DO_NOT_HAVE_SAME_ROW_COUNT)
        total = total + matrix.conj().T @ matrix

    if not is_approximately_equal(total, np.eye(row_count, dtype=np.complex128), config.TOLERANCE):
        raise NoiseError(NoiseErrorCode.NOISE_MATRICES_DO_NOT_SATISFY_IDENTITY)

    inputs = noise.raw_inputs()
    _validate_unique_inputs(inputs)
    _validate_fit(inputs, row_count, qubit_count)

    logger.debug("Extracted %d Kraus matrices on %s", len(kraus), inputs)
    return [GateSimulatorMatrix(matrix) for matrix in kraus], inputs
