"""
Gate matrices as numpy arrays.

All matrices are complex128. Row/column ``i`` of a k-qubit matrix is the
basis state whose bits are the gate inputs, first input most significant.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Sequence

import numpy as np

from tiny_qsim.core.linalg import Matrix, is_approximately_unitary, make_matrix
from tiny_qsim.errors import KernelError, KernelErrorCode


# =============================================================================
# CONSTANT MATRICES
# =============================================================================

I = np.array([[1, 0], [0, 1]], dtype=np.complex128)
X = np.array([[0, 1], [1, 0]], dtype=np.complex128)
Y = np.array([[0, -1j], [1j, 0]], dtype=np.complex128)
Z = np.array([[1, 0], [0, -1]], dtype=np.complex128)

H = np.array([[1, 1], [1, -1]], dtype=np.complex128) / np.sqrt(2)

NOT = X

# CNOT: control is the first input, target the second
CNOT = np.array([
    [1, 0, 0, 0],
    [0, 1, 0, 0],
    [0, 0, 0, 1],
    [0, 0, 1, 0]
], dtype=np.complex128)


def identity(count: int) -> Matrix:
    return np.eye(count, dtype=np.complex128)


def not_matrix() -> Matrix:
    return X.copy()


def hadamard() -> Matrix:
    return H.copy()


def controlled_not() -> Matrix:
    return CNOT.copy()


# =============================================================================
# PARAMETRIC SINGLE-QUBIT MATRICES
# =============================================================================

class Axis(Enum):
    """Rotation axis on the Bloch sphere."""

    X = "x"
    Y = "y"
    Z = "z"


def Rx(theta: float) -> Matrix:
    """Rotation around X-axis: Rx(θ) = exp(-iθX/2)"""
    c, s = np.cos(theta / 2), np.sin(theta / 2)
    return np.array([[c, -1j * s], [-1j * s, c]], dtype=np.complex128)


def Ry(theta: float) -> Matrix:
    """Rotation around Y-axis: Ry(θ) = exp(-iθY/2)"""
    c, s = np.cos(theta / 2), np.sin(theta / 2)
    return np.array([[c, -s], [s, c]], dtype=np.complex128)


def Rz(theta: float) -> Matrix:
    """Rotation around Z-axis: Rz(θ) = exp(-iθZ/2)"""
    return np.array([
        [np.exp(-1j * theta / 2), 0],
        [0, np.exp(1j * theta / 2)]
    ], dtype=np.complex128)


def P(phi: float) -> Matrix:
    """Phase shift: P(φ)|1⟩ = e^(iφ)|1⟩"""
    return np.array([[1, 0], [0, np.exp(1j * phi)]], dtype=np.complex128)


def phase_shift(radians: float) -> Matrix:
    return P(radians)


_ROTATIONS = {Axis.X: Rx, Axis.Y: Ry, Axis.Z: Rz}


def rotation(axis: Axis, theta: float) -> Matrix:
    return _ROTATIONS[axis](theta)


# =============================================================================
# MULTI-QUBIT MATRICES
# =============================================================================

def average(count: int) -> Matrix:
    """Every element is 1/count (projector on the uniform superposition)."""
    return np.full((count, count), 1.0 / count, dtype=np.complex128)


def inversion_about_mean(count: int) -> Matrix:
    """Grover diffusion operator: 2·A − I."""
    return 2 * average(count) - identity(count)


def permutation(perm: Sequence[int]) -> Matrix:
    """
    Permutation matrix moving basis state ``perm[i]`` to position ``i``.

    Raises
    ------
    KernelError
        If ``perm`` is not a permutation of ``range(len(perm))``.
    """
    if sorted(perm) != list(range(len(perm))):
        raise KernelError(KernelErrorCode.PERMUTATION_IS_NOT_VALID)
    count = len(perm)
    matrix = np.zeros((count, count), dtype=np.complex128)
    matrix[np.arange(count), list(perm)] = 1
    return matrix


def oracle(truth_table: Iterable[str], control_count: int, controlled: Matrix) -> Matrix:
    """
    Dense oracle: identity everywhere except on the diagonal blocks whose
    control pattern is listed in ``truth_table``, where ``controlled`` acts.

    Truth-table strings are read as binary numbers; invalid strings are ignored.
    """
    size = controlled.shape[0]
    activated = set()
    for truth in truth_table:
        try:
            activated.add(int(truth, 2))
        except ValueError:
            continue
    sections = np.array(sorted(activated), dtype=np.int64)
    count = (2 ** control_count) * size

    def value(rows, cols):
        section = rows // size
        same_section = section == (cols // size)
        active = np.isin(section, sections)
        inner = controlled[rows % size, cols % size]
        plain = (rows == cols).astype(np.complex128)
        return np.where(same_section, np.where(active, inner, plain), 0)

    return make_matrix(count, count, value)


def two_level_unitary(count: int, submatrix: Matrix, indexes: tuple[int, int]) -> Matrix:
    """
    Identity of size ``count`` with ``submatrix`` placed on the rows/columns
    ``indexes``.
    """
    if count <= 2:
        raise KernelError(KernelErrorCode.COUNT_HAS_TO_BE_BIGGER_THAN_TWO)
    if submatrix.shape != (2, 2):
        raise KernelError(KernelErrorCode.SUBMATRIX_IS_NOT_2X2)
    if not is_approximately_unitary(submatrix):
        raise KernelError(KernelErrorCode.SUBMATRIX_IS_NOT_UNITARY)
    first, second = indexes
    if not first < second:
        raise KernelError(KernelErrorCode.FIRST_INDEX_IS_NOT_SMALLER_THAN_SECOND_INDEX)
    if first < 0 or second >= count:
        raise KernelError(KernelErrorCode.INDEXES_OUT_OF_RANGE)

    matrix = identity(count)
    positions = [first, second]
    matrix[np.ix_(positions, positions)] = submatrix
    return matrix


def quantum_fourier_transform(count: int, inverse: bool = False) -> Matrix:
    """QFT over ``count`` basis states: F[j, k] = ω^(jk) / √count."""
    sign = -1 if inverse else 1
    j = np.arange(count)
    exponent = np.outer(j, j) % count
    return np.exp(sign * 2j * np.pi * exponent / count) / np.sqrt(count)


def modular_multiplication(base: int, modulus: int, input_qubit_count: int) -> Matrix:
    """
    Permutation mapping |x⟩ to |x·base mod modulus⟩ for x < modulus; any
    other combination is left untouched.
    """
    count = 2 ** input_qubit_count
    matrix = np.zeros((count, count), dtype=np.complex128)
    for combination in range(count):
        index = combination if combination >= modulus else (combination * base) % modulus
        matrix[index, combination] = 1
    return matrix
