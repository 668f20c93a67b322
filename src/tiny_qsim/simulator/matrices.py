"""
Read-only matrix views used while applying a gate.

A view answers element queries (``view[row, col]``) without building the
matrix it describes. Indexes may be ints or broadcastable numpy integer
arrays, in which case an array of elements is returned. ``expanded_raw_matrix``
materializes the view when a dense matrix is really needed.

Views are built fresh for every gate application from already validated
data (see ``tiny_qsim.simulator.components``) and are never mutated.
"""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np
from numpy import ndarray

from tiny_qsim.core.bits import BitwiseShift, mask, rearrange_bits
from tiny_qsim.core.linalg import Matrix, Vector, log2, make_matrix, make_vector
from tiny_qsim.simulator.truth_table import TruthTableEntry


# ---------------------------------------------------------------------------
# Gate-scale views
# ---------------------------------------------------------------------------

class SimulatorMatrix:
    """Base class of every view."""

    count: int

    def element(self, rows, cols):
        raise NotImplementedError

    def __getitem__(self, index):
        row, col = index
        return self.element(row, col)

    def expanded_raw_matrix(self, max_concurrency: int = 1) -> Matrix:
        return make_matrix(self.count, self.count, self.element, max_concurrency)


class SimulatorGateMatrix(SimulatorMatrix):
    """
    View of the matrix a gate represents at gate scale: the controlled
    matrix plus how many of the gate inputs are controls.
    """

    controlled_matrix: Matrix
    control_count: int = 0
    truth_table: tuple[TruthTableEntry, ...] = ()

    @property
    def qubit_count(self) -> int:
        return log2(self.count)

    @property
    def is_single_qubit(self) -> bool:
        return self.count == 2

    @property
    def is_fully_controlled_single_qubit(self) -> bool:
        return False

    @property
    def is_oracle(self) -> bool:
        return False


class GateSimulatorMatrix(SimulatorGateMatrix):
    """Plain matrix, no controls."""

    def __init__(self, matrix: Matrix):
        self.controlled_matrix = matrix
        self.count = matrix.shape[0]

    def element(self, rows, cols):
        return self.controlled_matrix[rows, cols]

    def expanded_raw_matrix(self, max_concurrency: int = 1) -> Matrix:
        return np.array(self.controlled_matrix, dtype=np.complex128)


class ControlledSimulatorMatrix(SimulatorGateMatrix):
    """
    Identity except for the bottom-right block (every control set to 1),
    where ``controlled`` acts.
    """

    def __init__(self, control_count: int, controlled: Matrix):
        self.control_count = control_count
        self.controlled_matrix = controlled
        self.count = (2 ** control_count) * controlled.shape[0]
        self.truth_table = (TruthTableEntry((1 << control_count) - 1, control_count),)

    @property
    def is_single_qubit(self) -> bool:
        return False

    @property
    def is_fully_controlled_single_qubit(self) -> bool:
        return self.controlled_matrix.shape[0] == 2

    def element(self, rows, cols):
        size = self.controlled_matrix.shape[0]
        offset = self.count - size
        in_block = (rows >= offset) & (cols >= offset)
        inner = self.controlled_matrix[np.clip(rows - offset, 0, size - 1),
                                       np.clip(cols - offset, 0, size - 1)]
        return np.where(in_block, inner, np.where(rows == cols, 1, 0))


class OracleSimulatorMatrix(SimulatorGateMatrix):
    """
    Block-diagonal matrix with one block per control pattern: ``controlled``
    on the patterns listed in ``truth_table``, identity on the others.
    """

    def __init__(self, truth_table: Iterable[TruthTableEntry], control_count: int,
                 controlled: Matrix):
        self.truth_table = tuple(truth_table)
        self.control_count = control_count
        self.controlled_matrix = controlled
        self.count = (2 ** control_count) * controlled.shape[0]
        self._sections = np.array(sorted({int(entry) for entry in self.truth_table}),
                                  dtype=np.int64)

    @property
    def is_single_qubit(self) -> bool:
        return False

    @property
    def is_oracle(self) -> bool:
        return True

    def element(self, rows, cols):
        size = self.controlled_matrix.shape[0]
        section = rows // size
        same_section = section == (cols // size)
        activated = np.isin(section, self._sections)
        inner = self.controlled_matrix[rows % size, cols % size]
        return np.where(same_section, np.where(activated, inner, np.where(rows == cols, 1, 0)), 0)


# ---------------------------------------------------------------------------
# Circuit-scale view
# ---------------------------------------------------------------------------

class CircuitSimulatorMatrix(SimulatorMatrix):
    """
    A gate-scale view placed on ``inputs`` of a ``qubit_count``-qubit register.

    Element ``[row, col]`` is ``base[r, c]`` where ``r``/``c`` gather the
    bits of ``row``/``col`` at ``inputs`` (first input most significant),
    provided every other bit of ``row`` and ``col`` matches; otherwise 0.
    """

    def __init__(self, qubit_count: int, base: SimulatorMatrix, inputs: Sequence[int]):
        self.qubit_count = qubit_count
        self.base = base
        self.inputs = list(inputs)
        self.count = 2 ** qubit_count

        last = len(self.inputs) - 1
        self.shifts = [BitwiseShift(origin=qubit, destination=last - index)
                       for index, qubit in enumerate(self.inputs)]
        self.selected = mask(self.inputs)

    def element(self, rows, cols):
        base_rows = rearrange_bits(self.shifts, rows)
        base_cols = rearrange_bits(self.shifts, cols)
        same_rest = (rows & ~self.selected) == (cols & ~self.selected)
        return np.where(same_rest, self.base.element(base_rows, base_cols), 0)

    def row(self, index: int, max_concurrency: int = 1) -> Vector:
        """Materialize row ``index``."""
        return make_vector(self.count, lambda cols: self.element(np.int64(index), cols),
                           max_concurrency)

    def rows(self, indexes: ndarray) -> Matrix:
        """Materialize several rows at once (one per entry of ``indexes``)."""
        cols = np.arange(self.count, dtype=np.int64)[np.newaxis, :]
        return np.asarray(self.element(indexes[:, np.newaxis], cols), dtype=np.complex128)
