"""
Decomposition of arbitrary gates into elementary ones.

Single-qubit gates are rewritten as Z/Y rotations plus a phase shift
(cosine-sine decomposition). Multi-qubit gates are reduced to a sequence of
two-level unitaries acting on basis states adjacent in Gray code order; each
of those is a single-qubit gate controlled by every other input, with NOT
gates around the controls that have to be 0.

Usage:
    >>> from tiny_qsim import gates
    >>> decompose_gates([gates.Not(0), gates.Not(2)])
    [Not(target=0), Not(target=2)]

Reference: Nielsen & Chuang, Section 4.5.1 (two-level unitary gates are
universal) and Section 4.2 (Z-Y decomposition for a single qubit).
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from tiny_qsim import config
from tiny_qsim.core import matrices
from tiny_qsim.core.bits import gray_codes
from tiny_qsim.core.linalg import Matrix, elimination_matrix, is_approximately_equal
from tiny_qsim.errors import DecomposeGatesError, DecomposeGatesErrorCode, GateError, GateErrorCode
from tiny_qsim.gates import Axis, Controlled, Gate, MatrixGate, Not, PhaseShift, Rotation, not_gates
from tiny_qsim.gates import qubit_count as register_size
from tiny_qsim.simulator.components import extract_components

_IDENTITY = matrices.identity(2)
_NOT = matrices.not_matrix()


def _is_zero(value: float | complex) -> bool:
    return abs(value) < config.TOLERANCE


class CosineSineDecompositionSolver:
    """Rewrites a single-qubit gate as ``Rz``, ``Ry``, ``Rz`` and ``PhaseShift`` gates."""

    def decompose_gate(self, gate: Gate) -> list[Gate]:
        """
        Gates that, applied in order, reproduce the matrix of ``gate``.

        Raises
        ------
        GateError
            If ``gate`` is not valid, or acts on more than one qubit
            (``GATE_MATRIX_HANDLES_MORE_QUBITS_THAT_CIRCUIT_ACTUALLY_HAS``).
        """
        components, inputs = extract_components(gate, register_size([gate]))
        if components.count != 2:
            raise GateError(GateErrorCode.GATE_MATRIX_HANDLES_MORE_QUBITS_THAT_CIRCUIT_ACTUALLY_HAS)
        return self.decompose_matrix(components.expanded_raw_matrix(), inputs[0])

    def decompose_matrix(self, matrix: Matrix, target: int) -> list[Gate]:
        """
        Same as ``decompose_gate`` for a 2x2 unitary already validated.

        Raises
        ------
        GateError
            If ``matrix`` is not 2x2
            (``GATE_MATRIX_HANDLES_MORE_QUBITS_THAT_CIRCUIT_ACTUALLY_HAS``).
        """
        if np.shape(matrix) != (2, 2):
            raise GateError(GateErrorCode.GATE_MATRIX_HANDLES_MORE_QUBITS_THAT_CIRCUIT_ACTUALLY_HAS)

        if is_approximately_equal(matrix, _IDENTITY):
            return []
        if is_approximately_equal(matrix, _NOT):
            return [Not(target)]

        # M = P(phi) @ M' with det(M') = 1
        phase: list[Gate] = []
        phi = float(np.angle(np.linalg.det(matrix)))
        if not _is_zero(phi):
            matrix = matrices.phase_shift(-phi) @ matrix
            phase = [PhaseShift(phi, target)]

            if is_approximately_equal(matrix, _IDENTITY):
                return phase
            if is_approximately_equal(matrix, _NOT):
                return [Not(target)] + phase

        m00, m01 = matrix[0, 0], matrix[0, 1]
        theta = -np.arccos(min(abs(m00), 1.0))
        lmbda = 0.0 if _is_zero(m00) else -float(np.angle(m00))

        if _is_zero(m01):
            return [Rotation(Axis.Z, 2 * lmbda, target)] + phase

        mu = -float(np.angle(m01))
        rotations = [
            Rotation(Axis.Z, lmbda - mu, target),
            Rotation(Axis.Y, 2 * theta, target),
            Rotation(Axis.Z, lmbda + mu, target),
        ]
        return [rotation for rotation in rotations if not _is_zero(rotation.radians)] + phase


class TwoLevelDecompositionSolver:
    """
    Rewrites any gate as single-qubit gates, fully controlled single-qubit
    gates and NOT gates.

    Parameters
    ----------
    single_qubit_solver : CosineSineDecompositionSolver, optional
        Decomposes every single-qubit matrix produced along the way.
    """

    def __init__(self, single_qubit_solver: CosineSineDecompositionSolver | None = None):
        self.single_qubit_solver = single_qubit_solver or CosineSineDecompositionSolver()

    def decompose_gate(self, gate: Gate, qubit_count: int | None = None) -> list[Gate]:
        """
        Parameters
        ----------
        gate : Gate
            Gate to decompose.
        qubit_count : int, optional
            Register the gate is validated against. Defaults to the
            smallest register holding the gate.

        Returns
        -------
        list[Gate]
            Elementary gates reproducing ``gate`` when applied in order.

        Raises
        ------
        GateError
            If ``gate`` can not be applied to a ``qubit_count``-qubit register.
        """
        if qubit_count is None:
            qubit_count = register_size([gate])
        components, inputs = extract_components(gate, qubit_count)

        matrix = np.array(components.expanded_raw_matrix(), dtype=np.complex128)
        if components.count == 2:
            return self.single_qubit_solver.decompose_matrix(matrix, inputs[0])

        count = components.count
        codes = gray_codes(len(inputs))
        decomposition: list[Gate] = []

        # Zero every element right of the diagonal, row by row in Gray order
        for row_index in range(count - 1):
            row = codes[row_index]
            for index in range(count - 2, row_index - 1, -1):
                first, second = codes[index], codes[index + 1]
                elimination = elimination_matrix(np.array([matrix[row, first], matrix[row, second]]))
                if is_approximately_equal(elimination, _IDENTITY):
                    continue

                low, high = sorted((first, second))
                if first > second:
                    elimination = elimination[::-1, ::-1]

                matrix = matrix @ matrices.two_level_unitary(count, elimination, (low, high))
                decomposition += self._controlled_gates(elimination.conj().T, low, high, inputs)

        # Only phases are left on the diagonal
        for index in range(0, count - 1, 2):
            low, high = sorted(codes[index:index + 2])
            diagonal = np.diag([matrix[low, low], matrix[high, high]])
            if not is_approximately_equal(diagonal, _IDENTITY):
                decomposition += self._controlled_gates(diagonal, low, high, inputs)

        return decomposition

    def _controlled_gates(self, matrix: Matrix, low: int, high: int, inputs: Sequence[int]) -> list[Gate]:
        """
        ``matrix`` acting on basis states ``low`` and ``high`` (that differ in
        a single bit) as a controlled single-qubit gate.
        """
        last = len(inputs) - 1
        target_index = last - ((low ^ high).bit_length() - 1)
        control_indexes = [index for index in range(len(inputs)) if index != target_index]

        controls = [inputs[index] for index in control_indexes]
        nots = not_gates(inputs[index] for index in control_indexes if not low & (1 << (last - index)))

        gates = [
            Controlled(gate, controls)
            for gate in self.single_qubit_solver.decompose_matrix(matrix, inputs[target_index])
        ]
        return nots + gates + nots if gates else []


def decompose_gates(gates: Sequence[Gate], qubit_count: int | None = None,
                    solver: TwoLevelDecompositionSolver | None = None) -> list[Gate]:
    """
    Decomposition of every gate in ``gates``, in order.

    Raises
    ------
    DecomposeGatesError
        ``GATE_RAISED_ERROR`` with the first gate that could not be decomposed.
    """
    if qubit_count is None:
        qubit_count = register_size(gates)
    solver = solver or TwoLevelDecompositionSolver()

    result = []
    for gate in gates:
        try:
            result += solver.decompose_gate(gate, qubit_count)
        except GateError as e:
            raise DecomposeGatesError(DecomposeGatesErrorCode.GATE_RAISED_ERROR, gate=gate, error=e) from e
    return result
