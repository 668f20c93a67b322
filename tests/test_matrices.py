"""Tests for the gate matrices."""

import numpy as np
import pytest

from tiny_qsim.core import matrices
from tiny_qsim.core.linalg import is_approximately_unitary
from tiny_qsim.core.matrices import Axis
from tiny_qsim.errors import KernelError, KernelErrorCode


# ---------------------------------------------------------------------------
# Single-qubit matrices
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("matrix", [matrices.I, matrices.X, matrices.Y, matrices.Z, matrices.H])
def test_constant_matrices_are_unitary(matrix):
    assert is_approximately_unitary(matrix)


def test_constructors_return_copies():
    matrix = matrices.not_matrix()
    matrix[0, 0] = 5
    assert matrices.X[0, 0] == 0


@pytest.mark.parametrize("theta", [0.0, 0.3, np.pi / 2, np.pi, 5.0])
@pytest.mark.parametrize("axis", list(Axis))
def test_rotations_are_unitary(axis, theta):
    assert is_approximately_unitary(matrices.rotation(axis, theta))


def test_rotation_dispatch():
    np.testing.assert_allclose(matrices.rotation(Axis.X, 0.4), matrices.Rx(0.4), atol=1e-12)
    np.testing.assert_allclose(matrices.rotation(Axis.Y, 0.4), matrices.Ry(0.4), atol=1e-12)
    np.testing.assert_allclose(matrices.rotation(Axis.Z, 0.4), matrices.Rz(0.4), atol=1e-12)


def test_rz_pi():
    np.testing.assert_allclose(matrices.Rz(np.pi), np.diag([-1j, 1j]), atol=1e-12)


def test_ry_pi_flips():
    np.testing.assert_allclose(matrices.Ry(np.pi), [[0, -1], [1, 0]], atol=1e-12)


def test_rx_pi_is_x_up_to_phase():
    np.testing.assert_allclose(matrices.Rx(np.pi), -1j * matrices.X, atol=1e-12)


def test_phase_shift():
    np.testing.assert_allclose(matrices.phase_shift(np.pi / 2), np.diag([1, 1j]), atol=1e-12)
    np.testing.assert_allclose(matrices.P(np.pi), matrices.Z, atol=1e-12)


# ---------------------------------------------------------------------------
# Multi-qubit matrices
# ---------------------------------------------------------------------------

def test_identity():
    np.testing.assert_allclose(matrices.identity(4), np.eye(4), atol=1e-12)


def test_inversion_about_mean():
    matrix = matrices.inversion_about_mean(4)
    assert is_approximately_unitary(matrix)
    np.testing.assert_allclose(np.diag(matrix), [-0.5] * 4, atol=1e-12)
    assert matrix[0, 1] == pytest.approx(0.5, abs=1e-12)


def test_permutation():
    matrix = matrices.permutation([1, 2, 0])
    expected = np.array([[0, 1, 0], [0, 0, 1], [1, 0, 0]], dtype=np.complex128)
    np.testing.assert_allclose(matrix, expected, atol=1e-12)


@pytest.mark.parametrize("perm", [[0, 0, 1], [1, 2, 3], [0, 2]])
def test_invalid_permutation(perm):
    with pytest.raises(KernelError) as info:
        matrices.permutation(perm)
    assert info.value.code is KernelErrorCode.PERMUTATION_IS_NOT_VALID


def test_oracle_with_truth_table_one_is_cnot():
    np.testing.assert_allclose(matrices.oracle(["1"], 1, matrices.X), matrices.CNOT, atol=1e-12)


def test_oracle_with_truth_table_zero():
    expected = np.zeros((4, 4), dtype=np.complex128)
    expected[:2, :2] = matrices.X
    expected[2:, 2:] = matrices.I
    np.testing.assert_allclose(matrices.oracle(["0"], 1, matrices.X), expected, atol=1e-12)


def test_oracle_with_empty_truth_table_is_identity():
    np.testing.assert_allclose(matrices.oracle([], 2, matrices.X), np.eye(8), atol=1e-12)


def test_two_level_unitary():
    matrix = matrices.two_level_unitary(4, matrices.X, (1, 3))
    expected = np.array([
        [1, 0, 0, 0],
        [0, 0, 0, 1],
        [0, 0, 1, 0],
        [0, 1, 0, 0],
    ], dtype=np.complex128)
    np.testing.assert_allclose(matrix, expected, atol=1e-12)


@pytest.mark.parametrize("count,submatrix,indexes,code", [
    (2, matrices.X, (0, 1), KernelErrorCode.COUNT_HAS_TO_BE_BIGGER_THAN_TWO),
    (4, np.eye(3), (0, 1), KernelErrorCode.SUBMATRIX_IS_NOT_2X2),
    (4, np.ones((2, 2)), (0, 1), KernelErrorCode.SUBMATRIX_IS_NOT_UNITARY),
    (4, matrices.X, (2, 1), KernelErrorCode.FIRST_INDEX_IS_NOT_SMALLER_THAN_SECOND_INDEX),
    (4, matrices.X, (1, 4), KernelErrorCode.INDEXES_OUT_OF_RANGE),
])
def test_two_level_unitary_errors(count, submatrix, indexes, code):
    with pytest.raises(KernelError) as info:
        matrices.two_level_unitary(count, submatrix, indexes)
    assert info.value.code is code


@pytest.mark.parametrize("count", [2, 4, 8])
def test_quantum_fourier_transform(count):
    qft = matrices.quantum_fourier_transform(count)
    inverse = matrices.quantum_fourier_transform(count, inverse=True)

    assert is_approximately_unitary(qft)
    np.testing.assert_allclose(inverse, qft.conj().T, atol=1e-10)
    np.testing.assert_allclose(qft[:, 0], np.full(count, 1 / np.sqrt(count)), atol=1e-10)


def test_quantum_fourier_transform_of_two_is_hadamard():
    np.testing.assert_allclose(matrices.quantum_fourier_transform(2), matrices.H, atol=1e-10)


def test_modular_multiplication():
    matrix = matrices.modular_multiplication(2, 3, 2)
    assert is_approximately_unitary(matrix)

    # |1> -> |2>, |2> -> |1>, |0> and |3> untouched
    np.testing.assert_allclose(matrix @ np.eye(4)[1], np.eye(4)[2], atol=1e-12)
    np.testing.assert_allclose(matrix @ np.eye(4)[2], np.eye(4)[1], atol=1e-12)
    np.testing.assert_allclose(matrix @ np.eye(4)[0], np.eye(4)[0], atol=1e-12)
    np.testing.assert_allclose(matrix @ np.eye(4)[3], np.eye(4)[3], atol=1e-12)


def test_modular_multiplication_by_seven_mod_fifteen():
    matrix = matrices.modular_multiplication(7, 15, 4)
    state = np.eye(16)[1]
    seen = []
    for _ in range(4):
        state = matrix @ state
        seen.append(int(np.argmax(np.abs(state))))
    assert seen == [7, 4, 13, 1]
