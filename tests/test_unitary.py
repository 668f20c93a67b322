"""Tests for the unitary simulation backend."""

import numpy as np
import pytest

from tiny_qsim.backends import UnitarySimulator
from tiny_qsim.core import matrices
from tiny_qsim.errors import (
    GateErrorCode,
    TransformationInitError,
    TransformationInitErrorCode,
    UnitaryError,
    UnitaryErrorCode,
)
from tiny_qsim.gates import Hadamard, MatrixGate, Not, Rotation, controlled_not
from tiny_qsim.core.matrices import Axis


@pytest.fixture
def simulator():
    return UnitarySimulator()


def test_single_gate(simulator):
    np.testing.assert_allclose(simulator.unitary([Hadamard(0)], 1), matrices.H, atol=1e-10)


def test_gates_are_composed_in_order(simulator):
    unitary = simulator.unitary([Not(0), Hadamard(0)], 1)
    np.testing.assert_allclose(unitary, matrices.H @ matrices.X, atol=1e-10)


def test_bell_circuit(simulator):
    unitary = simulator.unitary([Hadamard(0), controlled_not(target=1, control=0)], 2)
    np.testing.assert_allclose(unitary[:, 0], np.array([1, 0, 0, 1]) / np.sqrt(2), atol=1e-10)


def test_gate_on_bigger_register(simulator):
    unitary = simulator.unitary([Not(1)], 3)
    expected = np.kron(np.kron(matrices.I, matrices.X), matrices.I)
    np.testing.assert_allclose(unitary, expected, atol=1e-10)


def test_expansion_concurrency_gives_same_result():
    gates = [Hadamard(2), Rotation(Axis.Y, 0.3, 0), controlled_not(target=1, control=2)]
    serial = UnitarySimulator().unitary(gates, 3)
    parallel = UnitarySimulator(expansion_concurrency=3).unitary(gates, 3)
    np.testing.assert_allclose(serial, parallel, atol=1e-12)


def test_result_is_unitary(simulator):
    gates = [Hadamard(0), Rotation(Axis.X, 1.3, 1), controlled_not(target=0, control=1)]
    unitary = simulator.unitary(gates, 2)
    np.testing.assert_allclose(unitary.conj().T @ unitary, np.eye(4), atol=1e-10)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

def test_empty_circuit(simulator):
    with pytest.raises(UnitaryError) as info:
        simulator.unitary([], 1)
    assert info.value.code is UnitaryErrorCode.CIRCUIT_CAN_NOT_BE_AN_EMPTY_LIST


@pytest.mark.parametrize("gate,qubit_count,code", [
    (Not(2), 2, GateErrorCode.GATE_INPUTS_ARE_NOT_IN_BOUND),
    (Not(0), 0, GateErrorCode.CIRCUIT_QUBIT_COUNT_HAS_TO_BE_BIGGER_THAN_ZERO),
    (MatrixGate(np.ones((2, 2)), [0]), 1, GateErrorCode.GATE_MATRIX_IS_NOT_UNITARY),
])
def test_failing_gate_is_reported(simulator, gate, qubit_count, code):
    with pytest.raises(UnitaryError) as info:
        simulator.unitary([gate], qubit_count)
    assert info.value.code is UnitaryErrorCode.GATE_RAISED_ERROR
    assert info.value.gate == gate
    assert info.value.error.code is code


def test_resulting_matrix_has_to_be_unitary(simulator):
    almost_unitary = MatrixGate(np.diag([1.0004, 1.0]), [0])
    with pytest.raises(UnitaryError) as info:
        simulator.unitary([almost_unitary] * 3, 1)
    assert info.value.code is UnitaryErrorCode.RESULTING_MATRIX_IS_NOT_UNITARY


def test_zero_expansion_concurrency():
    with pytest.raises(TransformationInitError) as info:
        UnitarySimulator(expansion_concurrency=0)
    assert info.value.code is TransformationInitErrorCode.EXPANSION_CONCURRENCY_HAS_TO_BE_BIGGER_THAN_ZERO
