"""Tests for Deutsch, Simon and Shor."""

import pytest

from tiny_qsim import CircuitFactory, StatevectorConfiguration
from tiny_qsim.apps import deutsch_circuit, factor, find_hidden_string, is_balanced, simon_function
from tiny_qsim.apps.shor import factors_from_period
from tiny_qsim.errors import SummarizedProbabilitiesError


# ---------------------------------------------------------------------------
# Deutsch
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("truth_table,balanced", [
    ([], False),
    (["0", "1"], False),
    (["0"], True),
    (["1"], True),
])
def test_deutsch(truth_table, balanced):
    assert is_balanced(truth_table) is balanced


@pytest.mark.parametrize("strategy", ["matrix", "row", "element"])
def test_deutsch_with_other_strategies(strategy):
    factory = CircuitFactory(getattr(StatevectorConfiguration, strategy)())
    assert is_balanced(["1"], factory)
    assert not is_balanced([], factory)


def test_deutsch_query_qubit_probabilities():
    circuit = CircuitFactory().make_circuit(deutsch_circuit(["0"]))
    probabilities = circuit.summarized_probabilities(qubits=[1], initial_bits="01")
    assert probabilities["1"] == pytest.approx(1.0, abs=1e-3)
    assert probabilities.get("0", 0.0) == pytest.approx(0.0, abs=1e-3)


def test_deutsch_invalid_truth_table():
    with pytest.raises(SummarizedProbabilitiesError):
        is_balanced(["11"])


# ---------------------------------------------------------------------------
# Simon
# ---------------------------------------------------------------------------

def test_simon_function_is_two_to_one():
    function = simon_function("11")
    assert function["00"] == function["11"]
    assert function["01"] == function["10"]
    assert function["00"] != function["01"]


@pytest.mark.parametrize("secret", ["110", "1", "0", "11", "01", "00", "101"])
def test_simon_recovers_secret(secret):
    assert find_hidden_string(secret) == secret


@pytest.mark.parametrize("secret", ["", "12"])
def test_simon_invalid_secret(secret):
    with pytest.raises(ValueError):
        find_hidden_string(secret)


# ---------------------------------------------------------------------------
# Shor
# ---------------------------------------------------------------------------

def test_shor_factors_15():
    result = factor(15, base=7)
    assert result.factors == (3, 5)
    assert result.period == 4
    assert result.measurement in (64, 192)


@pytest.mark.parametrize("base", [3, 5, 6])
def test_shor_classical_shortcut(base):
    result = factor(15, base=base)
    assert result.factors == (3, 5)
    assert result.period is None


@pytest.mark.parametrize("number,base", [(14, 3), (3, 2), (15, 1), (15, 15)])
def test_shor_invalid_arguments(number, base):
    with pytest.raises(ValueError):
        factor(number, base)


def test_factors_from_period_keep_power_bounded():
    # 7 has order 4 modulo 15, so 7^(period / 2) = 1 (mod 15)
    assert factors_from_period(40_000_000, 7, 15) == (1, 15)
    assert factors_from_period(4, 7, 15) == (3, 5)
