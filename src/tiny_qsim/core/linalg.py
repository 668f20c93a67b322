"""
Dense complex linear algebra used by the simulators.

Matrices and vectors are plain ``numpy`` arrays of ``complex128``. Nothing
here mutates its arguments: every operation returns a new array, so a state
handed to a simulator is never changed behind the caller's back.

Element-wise construction (``make_vector``/``make_matrix``) takes a
vectorised ``value`` callable and an explicit worker count. Work is split
into disjoint chunks of positions, each chunk computed by one worker of a
thread pool; results are written once into their own slots.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable

import numpy as np
import scipy.linalg
from numpy import ndarray

from tiny_qsim import config
from tiny_qsim.errors import KernelError, KernelErrorCode

Matrix = ndarray
Vector = ndarray

VectorValue = Callable[[ndarray], ndarray]
MatrixValue = Callable[[ndarray, ndarray], ndarray]


# ---------------------------------------------------------------------------
# Integers
# ---------------------------------------------------------------------------

def is_power_of_two(value: int) -> bool:
    return value > 0 and (value & (value - 1)) == 0


def log2(value: int) -> int:
    """Integer base-2 logarithm (exact for powers of two)."""
    return int(value).bit_length() - 1


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

def _validate_counts(max_concurrency: int, *counts: int) -> None:
    if any(count <= 0 for count in counts):
        raise KernelError(KernelErrorCode.COUNT_HAS_TO_BE_BIGGER_THAN_ZERO)
    if max_concurrency <= 0:
        raise KernelError(KernelErrorCode.MAX_CONCURRENCY_HAS_TO_BE_BIGGER_THAN_ZERO)


def _run_chunks(positions: ndarray, max_concurrency: int,
                calculate: Callable[[ndarray], ndarray]) -> list[ndarray]:
    workers = min(max_concurrency, len(positions))
    if workers == 1:
        return [calculate(positions)]
    chunks = np.array_split(positions, workers)
    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(calculate, chunks))


def make_vector(count: int, value: VectorValue, max_concurrency: int = 1) -> Vector:
    """
    Build a vector of ``count`` elements.

    Parameters
    ----------
    count : int
        Number of elements, has to be bigger than zero.
    value : callable
        Receives an int array of positions and returns their values.
    max_concurrency : int
        Maximum number of workers, has to be bigger than zero.

    Returns
    -------
    ndarray
        complex128 vector.
    """
    _validate_counts(max_concurrency, count)

    def calculate(positions: ndarray) -> ndarray:
        values = np.asarray(value(positions), dtype=np.complex128)
        return np.broadcast_to(values, positions.shape)

    positions = np.arange(count, dtype=np.int64)
    return np.concatenate(_run_chunks(positions, max_concurrency, calculate))


def make_matrix(row_count: int, column_count: int, value: MatrixValue,
                max_concurrency: int = 1) -> Matrix:
    """
    Build a ``row_count x column_count`` matrix.

    ``value(rows, cols)`` is called with broadcastable index grids (a column
    of row indexes and a row of column indexes) and returns the elements.
    Rows are distributed across at most ``max_concurrency`` workers.
    """
    _validate_counts(max_concurrency, row_count, column_count)
    cols = np.arange(column_count, dtype=np.int64)[np.newaxis, :]

    def calculate(rows: ndarray) -> ndarray:
        values = np.asarray(value(rows[:, np.newaxis], cols), dtype=np.complex128)
        return np.broadcast_to(values, (len(rows), column_count))

    rows = np.arange(row_count, dtype=np.int64)
    return np.vstack(_run_chunks(rows, max_concurrency, calculate))


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

def is_square(matrix: Matrix) -> bool:
    return matrix.ndim == 2 and matrix.shape[0] == matrix.shape[1]


def is_approximately_equal(lhs: ndarray, rhs: ndarray, tolerance: float | None = None) -> bool:
    tol = config.TOLERANCE if tolerance is None else tolerance
    return lhs.shape == rhs.shape and bool(np.all(np.abs(lhs - rhs) <= tol))


def is_approximately_unitary(matrix: Matrix, tolerance: float | None = None) -> bool:
    """Check U†U ≈ I."""
    if not is_square(matrix):
        return False
    identity = np.eye(matrix.shape[0], dtype=np.complex128)
    return is_approximately_equal(matrix.conj().T @ matrix, identity, tolerance)


def is_approximately_hermitian(matrix: Matrix, tolerance: float | None = None) -> bool:
    return is_square(matrix) and is_approximately_equal(matrix, matrix.conj().T, tolerance)


def squared_modulus(vector: Vector) -> float:
    """Sum of squared magnitudes."""
    return float(np.sum(np.abs(vector) ** 2))


def eigenvalues(matrix: Matrix) -> ndarray:
    """
    Eigenvalues of a Hermitian matrix, in ascending order.

    Raises
    ------
    KernelError
        ``MATRIX_IS_NOT_HERMITIAN`` or ``UNABLE_TO_COMPUTE_EIGENVALUES``.
    """
    if not is_approximately_hermitian(matrix):
        raise KernelError(KernelErrorCode.MATRIX_IS_NOT_HERMITIAN)
    try:
        return scipy.linalg.eigvalsh(matrix)
    except (scipy.linalg.LinAlgError, ValueError) as e:
        raise KernelError(KernelErrorCode.UNABLE_TO_COMPUTE_EIGENVALUES) from e


# ---------------------------------------------------------------------------
# Two-level helpers
# ---------------------------------------------------------------------------

def elimination_matrix(vector: Vector) -> Matrix:
    """
    2x2 unitary ``E`` such that ``(vector @ E)[1] ≈ 0``.

    For ``[a, b]`` with norm ``n`` this is ``[[a*, -b], [b*, a]] / n``; the
    first element of the product becomes the real number ``n``. Identity is
    returned when ``b`` is already zero.
    """
    if len(vector) != 2:
        raise KernelError(KernelErrorCode.VECTOR_COUNT_IS_NOT_TWO)
    a, b = complex(vector[0]), complex(vector[1])
    if b == 0:
        return np.eye(2, dtype=np.complex128)
    norm = np.sqrt(abs(a) ** 2 + abs(b) ** 2)
    return np.array([
        [a.conjugate(), -b],
        [b.conjugate(), a],
    ], dtype=np.complex128) / norm
