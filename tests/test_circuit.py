"""Tests for circuit facades, statevectors and probabilities."""

import numpy as np
import pytest

from tiny_qsim import (
    CircuitDensityMatrix,
    CircuitFactory,
    CircuitStatevector,
    StatevectorConfiguration,
)
from tiny_qsim.backends import (
    DirectStatevectorTransformation,
    ElementStatevectorTransformation,
    MatrixStatevectorTransformation,
    RowStatevectorTransformation,
)
from tiny_qsim.core import matrices
from tiny_qsim.errors import (
    GateErrorCode,
    GroupedProbabilitiesError,
    GroupedProbabilitiesErrorCode,
    MakeStatevectorError,
    MakeStatevectorErrorCode,
    ProbabilitiesError,
    ProbabilitiesErrorCode,
    StatevectorError,
    StatevectorErrorCode,
    SummarizedProbabilitiesError,
    SummarizedProbabilitiesErrorCode,
    UnitaryError,
    UnitaryErrorCode,
)
from tiny_qsim.gates import Hadamard, Not, controlled_not, oracle_not

CONFIGURATIONS = [
    StatevectorConfiguration.direct(),
    StatevectorConfiguration.direct(max_concurrency=2),
    StatevectorConfiguration.matrix(),
    StatevectorConfiguration.row(),
    StatevectorConfiguration.element(),
]


@pytest.fixture(params=CONFIGURATIONS, ids=lambda c: f"{c.strategy.value}-{c.max_concurrency}")
def factory(request):
    return CircuitFactory(request.param)


@pytest.fixture
def uneven_state():
    """|q2 q1 q0⟩: 0.25 on 001, 0.25 on 010, 0.5 on 110."""
    vector = np.zeros(8, dtype=np.complex128)
    vector[0b001] = 0.5
    vector[0b010] = 0.5j
    vector[0b110] = np.sqrt(0.5)
    return CircuitStatevector(vector)


def _deutsch(truth_table):
    return [Hadamard(0), Hadamard(1), oracle_not(truth_table, [1], 0), Hadamard(1)]


# ---------------------------------------------------------------------------
# CircuitStatevector
# ---------------------------------------------------------------------------

def test_statevector_count_has_to_be_power_of_two():
    with pytest.raises(MakeStatevectorError) as info:
        CircuitStatevector(np.array([1, 0, 0]))
    assert info.value.code is MakeStatevectorErrorCode.STATE_COUNT_HAS_TO_BE_A_POWER_OF_TWO


def test_statevector_has_to_be_normalized():
    with pytest.raises(MakeStatevectorError) as info:
        CircuitStatevector(np.array([0.5, 0.5]))
    assert info.value.code is MakeStatevectorErrorCode.STATE_ADDITION_OF_SQUARE_MODULUS_IS_NOT_EQUAL_TO_ONE


def test_probabilities(uneven_state):
    np.testing.assert_allclose(uneven_state.probabilities(), [0, 0.25, 0.25, 0, 0, 0, 0.5, 0], atol=1e-10)
    assert uneven_state.qubit_count == 3


def test_summarized_probabilities_skip_zeros(uneven_state):
    summary = uneven_state.summarized_probabilities()
    assert summary == pytest.approx({"001": 0.25, "010": 0.25, "110": 0.5}, abs=1e-10)


def test_summarized_probabilities_follow_qubit_order(uneven_state):
    assert uneven_state.summarized_probabilities([0, 1]) == pytest.approx(
        {"10": 0.25, "01": 0.75}, abs=1e-10)
    assert uneven_state.summarized_probabilities([2]) == pytest.approx(
        {"0": 0.5, "1": 0.5}, abs=1e-10)


@pytest.mark.parametrize("qubits,code", [
    ([], SummarizedProbabilitiesErrorCode.QUBITS_CAN_NOT_BE_AN_EMPTY_LIST),
    ([0, 0], SummarizedProbabilitiesErrorCode.QUBITS_ARE_NOT_UNIQUE),
    ([3], SummarizedProbabilitiesErrorCode.QUBITS_ARE_NOT_INSIDE_BOUNDS),
])
def test_summarized_probabilities_errors(uneven_state, qubits, code):
    with pytest.raises(SummarizedProbabilitiesError) as info:
        uneven_state.summarized_probabilities(qubits)
    assert info.value.code is code


def test_grouped_probabilities(uneven_state):
    grouped = uneven_state.grouped_probabilities([1], summary_qubits=[2])

    assert set(grouped) == {"0", "1"}
    assert grouped["0"].probability == pytest.approx(0.25, abs=1e-10)
    assert grouped["0"].summary == pytest.approx({"0": 1.0}, abs=1e-10)
    assert grouped["1"].probability == pytest.approx(0.75, abs=1e-10)
    assert grouped["1"].summary == pytest.approx({"0": 1 / 3, "1": 2 / 3}, abs=1e-10)


def test_grouped_probabilities_rounding(uneven_state):
    grouped = uneven_state.grouped_probabilities([1], summary_qubits=[2], rounding_places=2)
    assert grouped["1"].summary == {"0": 0.33, "1": 0.67}


def test_grouped_probabilities_without_summary(uneven_state):
    grouped = uneven_state.grouped_probabilities([0])
    assert grouped["1"].probability == pytest.approx(0.25, abs=1e-10)
    assert grouped["1"].summary == {}


@pytest.mark.parametrize("group,summary,code", [
    ([], [0], GroupedProbabilitiesErrorCode.GROUP_QUBITS_CAN_NOT_BE_AN_EMPTY_LIST),
    ([0], [0], GroupedProbabilitiesErrorCode.QUBITS_ARE_NOT_UNIQUE),
    ([0, 1, 0], [], GroupedProbabilitiesErrorCode.QUBITS_ARE_NOT_UNIQUE),
    ([0], [5], GroupedProbabilitiesErrorCode.QUBITS_ARE_NOT_INSIDE_BOUNDS),
])
def test_grouped_probabilities_errors(uneven_state, group, summary, code):
    with pytest.raises(GroupedProbabilitiesError) as info:
        uneven_state.grouped_probabilities(group, summary)
    assert info.value.code is code


# ---------------------------------------------------------------------------
# Circuit
# ---------------------------------------------------------------------------

def test_bell_circuit(factory):
    circuit = factory.make_circuit([Hadamard(0), controlled_not(target=1, control=0)])
    np.testing.assert_allclose(circuit.statevector().statevector,
                               np.array([1, 0, 0, 1]) / np.sqrt(2), atol=1e-10)
    np.testing.assert_allclose(circuit.probabilities(), [0.5, 0, 0, 0.5], atol=1e-10)


def test_initial_bits_are_most_significant_first(factory):
    circuit = factory.make_circuit([Not(1)])
    state = circuit.statevector_with_initial_bits("01")
    np.testing.assert_allclose(state.statevector, np.eye(4)[0b11], atol=1e-10)


def test_initial_bits_can_grow_the_register(factory):
    circuit = factory.make_circuit([Not(0)])
    assert circuit.summarized_probabilities(initial_bits="100") == pytest.approx({"101": 1.0}, abs=1e-10)


def test_initial_statevector(factory):
    circuit = factory.make_circuit([Hadamard(0)])
    initial = CircuitStatevector(np.array([1, 1]) / np.sqrt(2))
    np.testing.assert_allclose(circuit.statevector(initial).statevector, [1, 0], atol=1e-10)


def test_deutsch_constant_function_reads_zero(factory):
    for truth_table in ([], ["0", "1"]):
        circuit = factory.make_circuit(_deutsch(truth_table))
        summary = circuit.summarized_probabilities(qubits=[1], initial_bits="01")
        assert summary["0"] == pytest.approx(1.0, abs=1e-3)


def test_deutsch_balanced_function_reads_one(factory):
    for truth_table in (["0"], ["1"]):
        circuit = factory.make_circuit(_deutsch(truth_table))
        summary = circuit.summarized_probabilities(qubits=[1], initial_bits="01")
        assert summary["1"] == pytest.approx(1.0, abs=1e-3)


def test_grouped_probabilities_of_circuit(factory):
    circuit = factory.make_circuit([Hadamard(1), controlled_not(target=0, control=1)])
    grouped = circuit.grouped_probabilities([1], summary_qubits=[0])
    assert grouped["0"].summary == pytest.approx({"0": 1.0}, abs=1e-10)
    assert grouped["1"].summary == pytest.approx({"1": 1.0}, abs=1e-10)


def test_unitary_defaults_to_register_of_gates(factory):
    circuit = factory.make_circuit([Hadamard(0)])
    np.testing.assert_allclose(circuit.unitary(), matrices.H, atol=1e-10)
    assert circuit.unitary(2).shape == (4, 4)


def test_unitary_of_empty_circuit(factory):
    with pytest.raises(UnitaryError) as info:
        factory.make_circuit([]).unitary(1)
    assert info.value.code is UnitaryErrorCode.CIRCUIT_CAN_NOT_BE_AN_EMPTY_LIST


def test_repr():
    circuit = CircuitFactory().make_circuit([Hadamard(0), Not(2)])
    assert repr(circuit) == "Circuit(qubits=3, gates=2)"


# ---------------------------------------------------------------------------
# Circuit errors
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("bits", ["", "0a", "2"])
def test_invalid_initial_bits(factory, bits):
    with pytest.raises(StatevectorError) as info:
        factory.make_circuit([Not(0)]).statevector_with_initial_bits(bits)
    assert info.value.code is StatevectorErrorCode.INITIAL_BITS_ARE_NOT_A_STRING_COMPOSED_ONLY_OF_ZEROS_AND_ONES


def test_probabilities_wrap_statevector_errors(factory):
    with pytest.raises(ProbabilitiesError) as info:
        factory.make_circuit([Not(0)]).probabilities(initial_bits="x")
    assert info.value.code is ProbabilitiesErrorCode.STATEVECTOR_RAISED_ERROR
    assert isinstance(info.value.error, StatevectorError)


def test_summarized_probabilities_wrap_gate_errors(factory):
    circuit = factory.make_circuit([Not(2)])
    with pytest.raises(SummarizedProbabilitiesError) as info:
        circuit.summarized_probabilities(initial_bits="00")

    error = info.value
    assert error.code is SummarizedProbabilitiesErrorCode.PROBABILITIES_RAISED_ERROR
    assert error.error.code is ProbabilitiesErrorCode.STATEVECTOR_RAISED_ERROR
    assert error.error.error.code is StatevectorErrorCode.GATE_RAISED_ERROR
    assert error.error.error.error.code is GateErrorCode.GATE_INPUTS_ARE_NOT_IN_BOUND


def test_grouped_probabilities_wrap_errors(factory):
    with pytest.raises(GroupedProbabilitiesError) as info:
        factory.make_circuit([Not(2)]).grouped_probabilities([0], initial_bits="00")
    assert info.value.code is GroupedProbabilitiesErrorCode.PROBABILITIES_RAISED_ERROR


# ---------------------------------------------------------------------------
# Factories and density matrices
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("configuration,expected", [
    (StatevectorConfiguration.direct(), DirectStatevectorTransformation),
    (StatevectorConfiguration.matrix(), MatrixStatevectorTransformation),
    (StatevectorConfiguration.row(), RowStatevectorTransformation),
    (StatevectorConfiguration.element(), ElementStatevectorTransformation),
])
def test_factory_builds_configured_transformation(configuration, expected):
    assert isinstance(CircuitFactory(configuration).make_transformation(), expected)


def test_density_matrix_from_statevector():
    density = CircuitDensityMatrix.from_statevector(np.array([1, 1]) / np.sqrt(2))
    np.testing.assert_allclose(density.density_matrix, np.full((2, 2), 0.5), atol=1e-10)
    assert density.purity() == pytest.approx(1.0, abs=1e-10)
    assert density.qubit_count == 1


def test_density_matrix_from_invalid_bits():
    with pytest.raises(StatevectorError):
        CircuitDensityMatrix.from_bits("12")
