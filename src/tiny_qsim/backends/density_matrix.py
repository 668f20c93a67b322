"""
Density matrix simulation backend.

Supports mixed states and noise operators (Kraus matrices).
Memory: O(4^n), twice the exponent of a statevector.

Every operator updates the state as rho' = sum_i K_i rho K_i^dag, with each
K_i expanded to circuit scale. Gates are operators with a single Kraus
matrix. The final matrix is checked to still be a density matrix
(Hermitian, positive semidefinite, trace one).
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np
from numpy import ndarray

from tiny_qsim import config
from tiny_qsim.core.linalg import Matrix, eigenvalues, is_approximately_hermitian, log2, make_matrix
from tiny_qsim.errors import (
    DensityMatrixError,
    DensityMatrixErrorCode,
    GateError,
    KernelError,
    MakeDensityMatrixError,
    MakeDensityMatrixErrorCode,
    NoiseError,
    TransformationInitErrorCode,
)
from tiny_qsim.noise import Noise, QuantumOperator
from tiny_qsim.simulator.components import extract_components, extract_kraus_matrices
from tiny_qsim.simulator.matrices import CircuitSimulatorMatrix, SimulatorGateMatrix


def validate_density_matrix(matrix: Matrix) -> Matrix:
    """
    Return ``matrix`` if it is a valid density matrix.

    Raises
    ------
    MakeDensityMatrixError
        Not Hermitian, eigenvalues unavailable, negative eigenvalues or
        eigenvalues not adding up to one (all within ``config.TOLERANCE``).
    """
    if not is_approximately_hermitian(matrix):
        raise MakeDensityMatrixError(MakeDensityMatrixErrorCode.MATRIX_IS_NOT_HERMITIAN)
    try:
        values = eigenvalues(matrix)
    except KernelError as e:
        raise MakeDensityMatrixError(MakeDensityMatrixErrorCode.UNABLE_TO_COMPUTE_MATRIX_EIGENVALUES) from e
    if np.any(values < -config.TOLERANCE):
        raise MakeDensityMatrixError(MakeDensityMatrixErrorCode.MATRIX_WITH_NEGATIVE_EIGENVALUES)
    if abs(float(np.sum(values)) - 1) > config.TOLERANCE:
        raise MakeDensityMatrixError(MakeDensityMatrixErrorCode.MATRIX_EIGENVALUES_DOES_NOT_ADD_UP_TO_ONE)
    return matrix


_RESULTING_CODES = {
    MakeDensityMatrixErrorCode.MATRIX_IS_NOT_HERMITIAN:
        DensityMatrixErrorCode.RESULTING_DENSITY_MATRIX_IS_NOT_HERMITIAN,
    MakeDensityMatrixErrorCode.UNABLE_TO_COMPUTE_MATRIX_EIGENVALUES:
        DensityMatrixErrorCode.UNABLE_TO_COMPUTE_RESULTING_DENSITY_MATRIX_EIGENVALUES,
    MakeDensityMatrixErrorCode.MATRIX_WITH_NEGATIVE_EIGENVALUES:
        DensityMatrixErrorCode.RESULTING_DENSITY_MATRIX_WITH_NEGATIVE_EIGENVALUES,
    MakeDensityMatrixErrorCode.MATRIX_EIGENVALUES_DOES_NOT_ADD_UP_TO_ONE:
        DensityMatrixErrorCode.RESULTING_DENSITY_MATRIX_EIGENVALUES_DOES_NOT_ADD_UP_TO_ONE,
}


# ---------------------------------------------------------------------------
# Transformations
# ---------------------------------------------------------------------------

class DensityMatrixTransformation(ABC):
    """Applies one validated set of Kraus matrices to a density matrix."""

    @abstractmethod
    def apply(self, kraus: Sequence[SimulatorGateMatrix], inputs: Sequence[int],
              density_matrix: Matrix) -> Matrix:
        pass

    @staticmethod
    def _circuit_matrices(kraus, inputs, density_matrix) -> list[CircuitSimulatorMatrix]:
        qubit_count = log2(density_matrix.shape[0])
        return [CircuitSimulatorMatrix(qubit_count, matrix, inputs) for matrix in kraus]


class MatrixDensityMatrixTransformation(DensityMatrixTransformation):
    """Expand every Kraus matrix and sum K rho K^dag."""

    def __init__(self, expansion_concurrency: int = 1):
        self.expansion_concurrency = config.validate_concurrency(
            expansion_concurrency,
            TransformationInitErrorCode.EXPANSION_CONCURRENCY_HAS_TO_BE_BIGGER_THAN_ZERO,
        )

    def apply(self, kraus, inputs, density_matrix):
        result = np.zeros_like(density_matrix, dtype=np.complex128)
        for circuit_matrix in self._circuit_matrices(kraus, inputs, density_matrix):
            expanded = circuit_matrix.expanded_raw_matrix(self.expansion_concurrency)
            result += expanded @ density_matrix @ expanded.conj().T
        return result


class RowDensityMatrixTransformation(DensityMatrixTransformation):
    """
    Expand every Kraus matrix, then compute the rows of K rho K^dag in
    parallel chunks.
    """

    def __init__(self, calculation_concurrency: int = 1, expansion_concurrency: int = 1):
        self.calculation_concurrency = config.validate_concurrency(
            calculation_concurrency,
            TransformationInitErrorCode.CALCULATION_CONCURRENCY_HAS_TO_BE_BIGGER_THAN_ZERO,
        )
        self.expansion_concurrency = config.validate_concurrency(
            expansion_concurrency,
            TransformationInitErrorCode.EXPANSION_CONCURRENCY_HAS_TO_BE_BIGGER_THAN_ZERO,
        )

    def apply(self, kraus, inputs, density_matrix):
        count = density_matrix.shape[0]
        result = np.zeros_like(density_matrix, dtype=np.complex128)
        for circuit_matrix in self._circuit_matrices(kraus, inputs, density_matrix):
            expanded = circuit_matrix.expanded_raw_matrix(self.expansion_concurrency)
            adjoint = expanded.conj().T

            def value(rows: ndarray, cols: ndarray) -> ndarray:
                return expanded[rows[:, 0]] @ density_matrix @ adjoint

            result += make_matrix(count, count, value, self.calculation_concurrency)
        return result


# ---------------------------------------------------------------------------
# Simulator
# ---------------------------------------------------------------------------

class DensityMatrixSimulator:
    """
    Apply quantum operators, in order, to an initial density matrix.

    Parameters
    ----------
    transformation : DensityMatrixTransformation
        Strategy used to apply each operator.
    logger : logging.Logger, optional
        Receives per-operator diagnostics.
    """

    def __init__(self, transformation: DensityMatrixTransformation,
                 logger: logging.Logger | None = None):
        self.transformation = transformation
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    def apply(self, operators: Sequence[QuantumOperator], initial: Matrix) -> Matrix:
        """
        Returns
        -------
        ndarray
            Final density matrix.

        Raises
        ------
        DensityMatrixError
            ``GATE_RAISED_ERROR`` with the failing operator and its
            ``GateError``/``NoiseError``, or one of the ``RESULTING_*`` codes.
        """
        state = np.asarray(initial, dtype=np.complex128)
        qubit_count = log2(state.shape[0])

        for index, operator in enumerate(operators):
            try:
                if isinstance(operator, Noise):
                    kraus, inputs = extract_kraus_matrices(operator, qubit_count)
                else:
                    matrix, inputs = extract_components(operator, qubit_count)
                    kraus = [matrix]
            except (GateError, NoiseError) as e:
                self.logger.debug("Operator %d (%r) failed: %s", index, operator, e.code.name)
                raise DensityMatrixError(DensityMatrixErrorCode.GATE_RAISED_ERROR,
                                         gate=operator, error=e) from e

            state = self.transformation.apply(kraus, inputs, state)
            self.logger.debug("Applied operator %d: %r", index, operator)

        try:
            return validate_density_matrix(state)
        except MakeDensityMatrixError as e:
            raise DensityMatrixError(_RESULTING_CODES[e.code]) from e
