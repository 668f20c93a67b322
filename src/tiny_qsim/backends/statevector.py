"""
Statevector simulation backend.

A ``StatevectorSimulator`` replays a list of gates onto an initial
statevector through a ``StatevectorTimeEvolution``. How each gate updates
the vector is delegated to an interchangeable transformation:

    DirectStatevectorTransformation   bit manipulation, never builds a
                                      circuit-wide matrix
    MatrixStatevectorTransformation   expands the 2^n x 2^n matrix and
                                      multiplies
    RowStatevectorTransformation      builds circuit-wide rows in blocks
    ElementStatevectorTransformation  looks up one circuit-wide element
                                      at a time

All of them produce the same vector within tolerance.

Memory: ~16 bytes * 2^n (complex128) per state. The matrix transformation
needs ~16 bytes * 4^n on top of that.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np
from numpy import ndarray

from tiny_qsim import config
from tiny_qsim.core.bits import BitwiseShift, mask, rearrange_bits
from tiny_qsim.core.linalg import Vector, is_power_of_two, log2, make_vector, squared_modulus
from tiny_qsim.errors import (
    GateError,
    StatevectorError,
    StatevectorErrorCode,
    TransformationInitErrorCode,
)
from tiny_qsim.gates import Gate
from tiny_qsim.simulator.components import Components, extract_components
from tiny_qsim.simulator.matrices import CircuitSimulatorMatrix

# Rows materialized at once by the row strategy
_ROW_BLOCK = 256


# ---------------------------------------------------------------------------
# Transformations
# ---------------------------------------------------------------------------

class StatevectorTransformation(ABC):
    """Applies one validated gate to a statevector."""

    @abstractmethod
    def apply(self, components: Components, vector: Vector) -> Vector:
        """
        Return the statevector obtained by applying ``components``.

        Parameters
        ----------
        components : tuple
            ``(matrix_view, inputs)`` as produced by ``extract_components``.
        vector : ndarray
            Current statevector, never modified.

        Returns
        -------
        ndarray
            New statevector.
        """


class DirectStatevectorTransformation(StatevectorTransformation):
    """
    Recompute every amplitude from the gate-scale matrix.

    Single-qubit gates (optionally fully controlled or oracle controlled)
    update amplitude pairs; any other gate gathers, for each position, the
    amplitudes that differ from it only in the gate inputs.
    """

    def __init__(self, max_concurrency: int = 1):
        self.max_concurrency = config.validate_concurrency(
            max_concurrency, TransformationInitErrorCode.MAX_CONCURRENCY_HAS_TO_BE_BIGGER_THAN_ZERO
        )

    def apply(self, components: Components, vector: Vector) -> Vector:
        matrix, inputs = components

        if matrix.is_single_qubit:
            return self._apply_single_qubit(matrix.controlled_matrix, inputs[0], vector)

        if matrix.is_fully_controlled_single_qubit:
            filter_mask = mask(inputs[:-1])

            def should_calculate(positions):
                return (positions & filter_mask) == filter_mask

            return self._apply_single_qubit(matrix.controlled_matrix, inputs[-1], vector,
                                            should_calculate)

        if matrix.is_oracle and matrix.controlled_matrix.shape[0] == 2:
            controls = inputs[:-1]
            filters = self._oracle_filters(matrix.truth_table, controls)

            def should_calculate(positions):
                selected = np.zeros(np.shape(positions), dtype=bool)
                for activated, deactivated in filters:
                    selected |= ((positions & activated) == activated) & ((~positions & deactivated) == deactivated)
                return selected

            return self._apply_single_qubit(matrix.controlled_matrix, inputs[-1], vector,
                                            should_calculate)

        return self._apply_multi_qubit(matrix.expanded_raw_matrix(), inputs, vector)

    @staticmethod
    def _oracle_filters(truth_table, controls: Sequence[int]) -> list[tuple[int, int]]:
        """(activated, deactivated) register masks for each truth-table entry."""
        last = len(controls) - 1
        shifts = [BitwiseShift(origin=last - index, destination=control)
                  for index, control in enumerate(controls)]
        return [(rearrange_bits(shifts, entry.activated_bits()),
                 rearrange_bits(shifts, entry.deactivated_bits()))
                for entry in truth_table]

    def _apply_single_qubit(self, matrix: ndarray, target: int, vector: Vector,
                            should_calculate=None) -> Vector:
        target_mask = 1 << target

        def value(positions: ndarray) -> ndarray:
            row = (positions & target_mask) >> target
            zero = vector[positions & ~target_mask]
            one = vector[positions | target_mask]
            updated = matrix[row, 0] * zero + matrix[row, 1] * one
            if should_calculate is None:
                return updated
            return np.where(should_calculate(positions), updated, vector[positions])

        return make_vector(len(vector), value, self.max_concurrency)

    def _apply_multi_qubit(self, matrix: ndarray, inputs: Sequence[int], vector: Vector) -> Vector:
        last = len(inputs) - 1
        shifts = [BitwiseShift(origin=qubit, destination=last - index)
                  for index, qubit in enumerate(inputs)]
        selected = mask(inputs)
        # Register mask for every gate matrix column
        column_masks = [
            mask(inputs[last - bit] for bit in range(len(inputs)) if column & (1 << bit))
            for column in range(matrix.shape[1])
        ]

        def value(positions: ndarray) -> ndarray:
            matrix_rows = rearrange_bits(shifts, positions)
            derived = positions & ~selected
            result = np.zeros(len(positions), dtype=np.complex128)
            for column, column_mask in enumerate(column_masks):
                result += matrix[matrix_rows, column] * vector[derived | column_mask]
            return result

        return make_vector(len(vector), value, self.max_concurrency)


class MatrixStatevectorTransformation(StatevectorTransformation):
    """Expand the full circuit-wide matrix and multiply."""

    def __init__(self, expansion_concurrency: int = 1):
        self.expansion_concurrency = config.validate_concurrency(
            expansion_concurrency,
            TransformationInitErrorCode.EXPANSION_CONCURRENCY_HAS_TO_BE_BIGGER_THAN_ZERO,
        )

    def apply(self, components: Components, vector: Vector) -> Vector:
        matrix, inputs = components
        circuit_matrix = CircuitSimulatorMatrix(log2(len(vector)), matrix, inputs)
        return circuit_matrix.expanded_raw_matrix(self.expansion_concurrency) @ vector


class RowStatevectorTransformation(StatevectorTransformation):
    """Build the circuit-wide rows a block at a time and multiply each block."""

    def __init__(self, max_concurrency: int = 1):
        self.max_concurrency = config.validate_concurrency(
            max_concurrency, TransformationInitErrorCode.MAX_CONCURRENCY_HAS_TO_BE_BIGGER_THAN_ZERO
        )

    def apply(self, components: Components, vector: Vector) -> Vector:
        matrix, inputs = components
        circuit_matrix = CircuitSimulatorMatrix(log2(len(vector)), matrix, inputs)

        def value(positions: ndarray) -> ndarray:
            blocks = [
                circuit_matrix.rows(positions[start:start + _ROW_BLOCK]) @ vector
                for start in range(0, len(positions), _ROW_BLOCK)
            ]
            return np.concatenate(blocks)

        return make_vector(len(vector), value, self.max_concurrency)


class ElementStatevectorTransformation(StatevectorTransformation):
    """Compute every amplitude element by element, without building rows."""

    def __init__(self, max_concurrency: int = 1):
        self.max_concurrency = config.validate_concurrency(
            max_concurrency, TransformationInitErrorCode.MAX_CONCURRENCY_HAS_TO_BE_BIGGER_THAN_ZERO
        )

    def apply(self, components: Components, vector: Vector) -> Vector:
        matrix, inputs = components
        circuit_matrix = CircuitSimulatorMatrix(log2(len(vector)), matrix, inputs)

        def value(positions: ndarray) -> ndarray:
            result = np.zeros(len(positions), dtype=np.complex128)
            for column in range(len(vector)):
                if vector[column] != 0:
                    result += circuit_matrix.element(positions, np.int64(column)) * vector[column]
            return result

        return make_vector(len(vector), value, self.max_concurrency)


# ---------------------------------------------------------------------------
# Time evolution
# ---------------------------------------------------------------------------

class StatevectorTimeEvolution:
    """
    Immutable pairing of the current statevector and a transformation.

    ``applying`` returns a new evolution; the original keeps its state, so a
    failing gate never leaves a half-updated vector behind.
    """

    def __init__(self, state: Vector, transformation: StatevectorTransformation):
        assert is_power_of_two(len(state)), "statevector length has to be a power of two"
        self._state = state
        self.transformation = transformation

    @property
    def state(self) -> Vector:
        return self._state

    @property
    def qubit_count(self) -> int:
        return log2(len(self._state))

    def applying(self, gate: Gate) -> StatevectorTimeEvolution:
        """
        Raises
        ------
        GateError
            If ``gate`` can not be applied to this register.
        """
        components = extract_components(gate, self.qubit_count)
        next_state = self.transformation.apply(components, self._state)
        return StatevectorTimeEvolution(next_state, self.transformation)


# ---------------------------------------------------------------------------
# Simulator
# ---------------------------------------------------------------------------

class StatevectorSimulator:
    """
    Apply gates, in order, to a validated initial statevector.

    Parameters
    ----------
    transformation : StatevectorTransformation
        Strategy used to apply each gate.
    logger : logging.Logger, optional
        Receives per-gate diagnostics. Defaults to this module's logger.
    """

    def __init__(self, transformation: StatevectorTransformation,
                 logger: logging.Logger | None = None):
        self.transformation = transformation
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    def apply(self, gates: Sequence[Gate], initial: Vector) -> Vector:
        """
        Returns
        -------
        ndarray
            Final statevector.

        Raises
        ------
        StatevectorError
            If the initial vector is not a valid statevector, a gate can not
            be applied (``GATE_RAISED_ERROR``) or the result lost its norm.
        """
        initial = np.asarray(initial, dtype=np.complex128)
        if not is_power_of_two(len(initial)):
            raise StatevectorError(StatevectorErrorCode.INITIAL_STATEVECTOR_COUNT_HAS_TO_BE_A_POWER_OF_TWO)
        if abs(squared_modulus(initial) - 1) > config.TOLERANCE:
            raise StatevectorError(
                StatevectorErrorCode.INITIAL_STATEVECTOR_ADDITION_OF_SQUARE_MODULUS_IS_NOT_EQUAL_TO_ONE
            )

        evolution = StatevectorTimeEvolution(initial, self.transformation)
        for index, gate in enumerate(gates):
            try:
                evolution = evolution.applying(gate)
            except GateError as e:
                self.logger.debug("Gate %d (%r) failed: %s", index, gate, e.code.name)
                raise StatevectorError(StatevectorErrorCode.GATE_RAISED_ERROR, gate=gate, error=e) from e
            self.logger.debug("Applied gate %d: %r", index, gate)

        state = evolution.state
        if abs(squared_modulus(state) - 1) > config.TOLERANCE:
            raise StatevectorError(
                StatevectorErrorCode.RESULTING_STATEVECTOR_ADDITION_OF_SQUARE_MODULUS_IS_NOT_EQUAL_TO_ONE
            )
        return state
