"""
ASCII circuit diagrams.

Example output:
    q0: ──[H]──⊕─────
               │
    q1: ───────●──[M]─

Controls of a ``Controlled`` gate are drawn as ``●``, controls of an
``Oracle`` as ``◆``.
"""
from typing import List, Sequence, Tuple

import numpy as np

from .errors import DrawCircuitError, DrawCircuitErrorCode
from .gates import Controlled, Gate, Hadamard, MatrixGate, Not, Oracle, PhaseShift, Rotation


def _split_inputs(gate: Gate) -> Tuple[List[int], List[int], List[int], Gate]:
    """(plain controls, oracle controls, targets, innermost gate)."""
    controls: List[int] = []
    oracle_controls: List[int] = []
    while isinstance(gate, (Controlled, Oracle)):
        if isinstance(gate, Oracle):
            oracle_controls += gate.controls
        else:
            controls += gate.controls
        gate = gate.gate
    return controls, oracle_controls, gate.raw_inputs(), gate


def _validate(gate: Gate, qubit_count: int) -> None:
    controls, oracle_controls, targets, _ = _split_inputs(gate)
    all_controls = controls + oracle_controls

    if not targets or (isinstance(gate, (Controlled, Oracle)) and not all_controls):
        raise DrawCircuitError(DrawCircuitErrorCode.GATE_WITH_EMPTY_INPUT_LIST, gate=gate)
    if len(set(targets)) != len(targets):
        raise DrawCircuitError(DrawCircuitErrorCode.GATE_WITH_REPEATED_INPUTS, gate=gate)
    if len(set(all_controls)) != len(all_controls):
        raise DrawCircuitError(DrawCircuitErrorCode.GATE_WITH_REPEATED_CONTROLS, gate=gate)
    if set(targets) & set(all_controls):
        raise DrawCircuitError(DrawCircuitErrorCode.GATE_TARGETS_ARE_ALSO_CONTROLS, gate=gate)
    if not all(0 <= qubit < qubit_count for qubit in targets + all_controls):
        raise DrawCircuitError(DrawCircuitErrorCode.GATE_WITH_INPUTS_OUT_OF_RANGE, gate=gate)


def _angle(radians: float) -> str:
    if abs(radians - np.pi) < 0.01:
        return 'π'
    if abs(radians + np.pi) < 0.01:
        return '-π'
    if abs(radians - np.pi / 2) < 0.01:
        return 'π/2'
    return f'{radians:.1f}'


def _symbol(gate: Gate, controlled: bool) -> str:
    if isinstance(gate, Not):
        return '⊕' if controlled else '[X]'
    if isinstance(gate, Hadamard):
        return '[H]'
    if isinstance(gate, PhaseShift):
        return f'[P{_angle(gate.radians)}]'
    if isinstance(gate, Rotation):
        return f'[R{gate.axis.value}{_angle(gate.radians)}]'
    if isinstance(gate, MatrixGate):
        return '[U]'
    return '[?]'


class CircuitDrawer:
    """
    Draw a gate list as ASCII art, one column per gate.

    Qubit 0 is the top line.
    """

    def __init__(self, qubit_count: int):
        self.qubit_count = qubit_count
        self.columns: List[List[str]] = []

    def add_gate(self, gate: Gate) -> None:
        controls, oracle_controls, targets, inner = _split_inputs(gate)
        used = controls + oracle_controls + targets
        low, high = min(used), max(used)

        col = ['│' if low < i < high else '─' for i in range(self.qubit_count)]
        symbol = _symbol(inner, controlled=bool(controls or oracle_controls))
        for target in targets:
            col[target] = symbol
        for control in controls:
            col[control] = '●'
        for control in oracle_controls:
            col[control] = '◆'
        self.columns.append(col)

    def draw(self) -> str:
        """Generate ASCII circuit diagram."""
        width = max((len(cell) for col in self.columns for cell in col), default=1)
        width = max(width, 3)

        lines = []
        label_width = len(f'q{self.qubit_count - 1}: ')
        for q in range(self.qubit_count):
            line = f'q{q}: '.ljust(label_width)
            for col in self.columns:
                cell = col[q]
                if cell == '│':
                    line += '│'.center(width + 2)
                elif cell == '─':
                    line += '─' * (width + 2)
                else:
                    line += cell.center(width + 2, '─')
            line += '───'
            lines.append(line)

        return '\n'.join(lines)


def draw_circuit(gates: Sequence[Gate], qubit_count: int) -> str:
    """
    ASCII diagram of ``gates`` on a ``qubit_count``-qubit register.

    Raises:
        DrawCircuitError: If ``qubit_count`` is not bigger than zero or a
            gate has empty, repeated or out of range inputs, repeated
            controls, or targets that are also controls. Nothing is drawn
            unless every gate is valid.
    """
    if qubit_count <= 0:
        raise DrawCircuitError(DrawCircuitErrorCode.QUBIT_COUNT_HAS_TO_BE_BIGGER_THAN_ZERO)
    for gate in gates:
        _validate(gate, qubit_count)

    drawer = CircuitDrawer(qubit_count)
    for gate in gates:
        drawer.add_gate(gate)
    return drawer.draw()


def probabilities_ascii(probabilities: dict, threshold: float = 0.01) -> str:
    """Display summarized probabilities as an ASCII bar chart."""
    lines = ["Probabilities:", "─" * 50]
    for bitstring in sorted(probabilities):
        prob = probabilities[bitstring]
        if prob < threshold:
            continue
        bar = '█' * int(prob * 40)
        lines.append(f"|{bitstring}⟩: {bar:40s} {prob * 100:5.1f}%")
    return '\n'.join(lines)
