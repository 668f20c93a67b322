"""Tests for gate decomposition into elementary gates."""

import numpy as np
import pytest
from scipy.stats import unitary_group

from tiny_qsim import config
from tiny_qsim.algorithms import CosineSineDecompositionSolver, TwoLevelDecompositionSolver, decompose_gates
from tiny_qsim.backends import UnitarySimulator
from tiny_qsim.core import matrices
from tiny_qsim.errors import DecomposeGatesError, DecomposeGatesErrorCode, GateError, GateErrorCode
from tiny_qsim.gates import (
    Controlled,
    Hadamard,
    MatrixGate,
    Not,
    Oracle,
    PhaseShift,
    Rotation,
    controlled_not,
)
from tiny_qsim.core.matrices import Axis

ELEMENTARY = (Not, Rotation, PhaseShift)


@pytest.fixture
def solver():
    return CosineSineDecompositionSolver()


def _unitary(gates, qubit_count):
    if not gates:
        return np.eye(2 ** qubit_count)
    return UnitarySimulator().unitary(gates, qubit_count)


def _is_elementary(gate):
    if isinstance(gate, Controlled):
        return _is_elementary(gate.gate)
    return isinstance(gate, ELEMENTARY)


# ---------------------------------------------------------------------------
# Cosine-sine (single qubit)
# ---------------------------------------------------------------------------

def test_identity_needs_no_gates(solver):
    assert solver.decompose_matrix(matrices.identity(2), 0) == []


def test_not_is_kept(solver):
    assert solver.decompose_gate(Not(2)) == [Not(2)]


def test_phase_only(solver):
    assert solver.decompose_matrix(matrices.phase_shift(0.4), 0) == [PhaseShift(pytest.approx(0.4), 0)]


@pytest.mark.parametrize("gate", [
    Hadamard(0),
    Rotation(Axis.X, 0.9, 0),
    Rotation(Axis.Z, 1.7, 0),
    PhaseShift(2.5, 0),
    MatrixGate(-np.eye(2), [0]),
    MatrixGate(1j * matrices.X, [0]),
    MatrixGate(unitary_group.rvs(2, random_state=3), [0]),
    MatrixGate(unitary_group.rvs(2, random_state=4), [0]),
])
def test_single_qubit_gates_are_reproduced(solver, gate):
    decomposition = solver.decompose_gate(gate)
    assert all(isinstance(g, ELEMENTARY) for g in decomposition)
    np.testing.assert_allclose(_unitary(decomposition, 1), _unitary([gate], 1), atol=1e-6)


def test_single_qubit_solver_rejects_bigger_gates(solver):
    with pytest.raises(GateError) as info:
        solver.decompose_gate(controlled_not(target=0, control=1))
    assert info.value.code is GateErrorCode.GATE_MATRIX_HANDLES_MORE_QUBITS_THAT_CIRCUIT_ACTUALLY_HAS


def test_matrix_solver_rejects_bigger_matrices(solver):
    with pytest.raises(GateError) as info:
        solver.decompose_matrix(matrices.CNOT, 0)
    assert info.value.code is GateErrorCode.GATE_MATRIX_HANDLES_MORE_QUBITS_THAT_CIRCUIT_ACTUALLY_HAS


# ---------------------------------------------------------------------------
# Two-level decomposition
# ---------------------------------------------------------------------------

def test_single_qubit_gates_skip_the_two_level_pass():
    assert decompose_gates([Not(0), Not(2)]) == [Not(0), Not(2)]


@pytest.mark.parametrize("gate", [
    controlled_not(target=0, control=1),
    controlled_not(target=1, control=0),
    Controlled(Hadamard(2), [0, 1]),
])
def test_controlled_gates_are_reproduced(gate):
    decomposition = decompose_gates([gate])
    assert all(_is_elementary(g) for g in decomposition)
    np.testing.assert_allclose(_unitary(decomposition, 3), _unitary([gate], 3), atol=1e-6)


def test_not_gates_surround_controls_that_have_to_be_zero():
    decomposition = decompose_gates([Oracle(["0"], [1], Not(0))])

    assert decomposition[0] == Not(1)
    assert decomposition[-1] == Not(1)
    np.testing.assert_allclose(_unitary(decomposition, 2),
                               _unitary([Oracle(["0"], [1], Not(0))], 2), atol=1e-6)


@pytest.mark.parametrize("inputs,seed", [
    ([0, 1], 1),
    ([1, 0], 2),
    ([2, 0, 1], 3),
    ([0, 1, 2], 4),
    *[([2, 1, 0], seed) for seed in range(5, 15)],
])
def test_random_unitaries_are_reproduced(inputs, seed):
    gate = MatrixGate(unitary_group.rvs(2 ** len(inputs), random_state=seed), inputs)
    qubit_count = len(inputs)

    decomposition = decompose_gates([gate])
    assert all(_is_elementary(g) for g in decomposition)
    np.testing.assert_allclose(_unitary(decomposition, qubit_count), _unitary([gate], qubit_count),
                               atol=config.TOLERANCE)


def test_decomposed_circuit_matches_original():
    gates = [Hadamard(0), controlled_not(target=2, control=0), Oracle(["10"], [2, 0], Hadamard(1))]
    decomposition = decompose_gates(gates)
    np.testing.assert_allclose(_unitary(decomposition, 3), _unitary(gates, 3), atol=1e-6)


def test_qubit_count_is_forwarded():
    solver = TwoLevelDecompositionSolver()
    with pytest.raises(GateError) as info:
        solver.decompose_gate(Not(3), qubit_count=2)
    assert info.value.code is GateErrorCode.GATE_INPUTS_ARE_NOT_IN_BOUND


def test_invalid_gate_is_reported():
    broken = MatrixGate(matrices.CNOT, [1])
    with pytest.raises(DecomposeGatesError) as info:
        decompose_gates([Hadamard(0), broken])

    assert info.value.code is DecomposeGatesErrorCode.GATE_RAISED_ERROR
    assert info.value.gate == broken
    assert info.value.error.code is GateErrorCode.GATE_INPUT_COUNT_DOES_NOT_MATCH_GATE_MATRIX_QUBIT_COUNT
