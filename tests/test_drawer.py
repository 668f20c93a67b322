"""Tests for ASCII circuit diagrams."""

import numpy as np
import pytest

from tiny_qsim import draw_circuit
from tiny_qsim.core import matrices
from tiny_qsim.drawer import probabilities_ascii
from tiny_qsim.errors import DrawCircuitError, DrawCircuitErrorCode
from tiny_qsim.gates import Controlled, Hadamard, MatrixGate, Not, Oracle, PhaseShift, controlled_not


def test_one_line_per_qubit():
    lines = draw_circuit([Hadamard(0), controlled_not(target=0, control=1)], 2).split("\n")

    assert len(lines) == 2
    assert lines[0].startswith("q0: ")
    assert lines[1].startswith("q1: ")
    assert "[H]" in lines[0]
    assert "⊕" in lines[0]
    assert "●" in lines[1]


def test_lines_have_same_length():
    lines = draw_circuit([Hadamard(3), Not(0), PhaseShift(np.pi, 1)], 4).split("\n")
    assert len({len(line) for line in lines}) == 1
    assert "[Pπ]" in lines[1]


def test_wire_between_control_and_target():
    lines = draw_circuit([controlled_not(target=0, control=2)], 3).split("\n")
    assert "│" in lines[1]


def test_oracle_controls():
    lines = draw_circuit([Oracle(["0"], [1], MatrixGate(matrices.H, [0]))], 2).split("\n")
    assert "[U]" in lines[0]
    assert "◆" in lines[1]


@pytest.mark.parametrize("gate,code", [
    (MatrixGate(matrices.X, []), DrawCircuitErrorCode.GATE_WITH_EMPTY_INPUT_LIST),
    (Controlled(Not(0), []), DrawCircuitErrorCode.GATE_WITH_EMPTY_INPUT_LIST),
    (MatrixGate(matrices.CNOT, [1, 1]), DrawCircuitErrorCode.GATE_WITH_REPEATED_INPUTS),
    (Controlled(Not(0), [1, 1]), DrawCircuitErrorCode.GATE_WITH_REPEATED_CONTROLS),
    (Controlled(Not(0), [0]), DrawCircuitErrorCode.GATE_TARGETS_ARE_ALSO_CONTROLS),
    (Not(2), DrawCircuitErrorCode.GATE_WITH_INPUTS_OUT_OF_RANGE),
    (controlled_not(target=0, control=-1), DrawCircuitErrorCode.GATE_WITH_INPUTS_OUT_OF_RANGE),
])
def test_invalid_gates(gate, code):
    with pytest.raises(DrawCircuitError) as info:
        draw_circuit([Hadamard(0), gate], 2)
    assert info.value.code is code
    assert info.value.gate == gate


def test_qubit_count_has_to_be_bigger_than_zero():
    with pytest.raises(DrawCircuitError) as info:
        draw_circuit([], 0)
    assert info.value.code is DrawCircuitErrorCode.QUBIT_COUNT_HAS_TO_BE_BIGGER_THAN_ZERO


def test_probabilities_chart_skips_small_values():
    chart = probabilities_ascii({"00": 0.5, "01": 0.001, "11": 0.499})
    assert "|00⟩" in chart
    assert "|11⟩" in chart
    assert "|01⟩" not in chart
