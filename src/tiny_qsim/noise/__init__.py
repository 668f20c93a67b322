"""
Quantum Noise Operators
========================
Noise is described by Kraus matrices acting on a set of qubits.

A channel E(rho) = sum_i K_i rho K_i^dag where sum_i K_i^dag K_i = I.
Gates are noiseless operators with a single Kraus matrix, so a noise circuit
mixes both freely:

    from tiny_qsim import gates
    from tiny_qsim.noise import bit_flip, phase_damping

    operators = [gates.Hadamard(0), bit_flip(0.1, target=0), phase_damping(0.2, target=0)]

Noise Models:
- Bit Flip: Classical bit errors
- Phase Flip: Phase errors
- Phase Damping: Phase loss (T2 dephasing)
- Amplitude Damping: Energy loss (T1 decay)
- Depolarizing: Random Pauli errors
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np

from tiny_qsim.core.matrices import I, X, Y, Z
from tiny_qsim.gates import Gate


@dataclass(frozen=True, eq=False)
class Noise:
    """
    Fixed set of Kraus matrices applied to ``inputs``.

    Validation (completeness, sizes) happens when the operator is applied to
    a circuit, so invalid sets can be built and reported with a precise code.
    """

    matrices: tuple[np.ndarray, ...]
    inputs: tuple[int, ...]
    name: str = "noise"

    def __post_init__(self):
        frozen = []
        for matrix in self.matrices:
            matrix = np.array(matrix, dtype=np.complex128)
            matrix.setflags(write=False)
            frozen.append(matrix)
        object.__setattr__(self, "matrices", tuple(frozen))
        object.__setattr__(self, "inputs", tuple(self.inputs))

    def raw_inputs(self) -> list[int]:
        return list(self.inputs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Noise):
            return NotImplemented
        return (self.inputs == other.inputs
                and len(self.matrices) == len(other.matrices)
                and all(a.shape == b.shape and np.array_equal(a, b)
                        for a, b in zip(self.matrices, other.matrices)))

    def __hash__(self) -> int:
        return hash((self.inputs, tuple(m.tobytes() for m in self.matrices)))

    def __repr__(self) -> str:
        return f"Noise('{self.name}', {len(self.matrices)} Kraus ops, inputs={list(self.inputs)})"


QuantumOperator = Union[Gate, Noise]


def _check_probability(value: float, label: str) -> None:
    if not 0 <= value <= 1:
        raise ValueError(f"{label} must be in [0,1], got {value}")


# =============================================================================
# Pre-built Noise Channels
# =============================================================================

def bit_flip(p: float, target: int) -> Noise:
    """Bit flip channel: X gate applied with probability p."""
    _check_probability(p, "Probability")
    return Noise([np.sqrt(1 - p) * I, np.sqrt(p) * X], [target], f"bit_flip(p={p})")


def phase_flip(p: float, target: int) -> Noise:
    """Phase flip channel: Z gate applied with probability p."""
    _check_probability(p, "Probability")
    return Noise([np.sqrt(1 - p) * I, np.sqrt(p) * Z], [target], f"phase_flip(p={p})")


def phase_damping(gamma: float, target: int) -> Noise:
    """
    Phase damping: models dephasing without energy loss (T2 process).
    Off-diagonal elements decay by sqrt(1-gamma).
    """
    _check_probability(gamma, "Gamma")
    K0 = np.array([[1, 0], [0, np.sqrt(1 - gamma)]], dtype=np.complex128)
    K1 = np.array([[0, 0], [0, np.sqrt(gamma)]], dtype=np.complex128)
    return Noise([K0, K1], [target], f"phase_damping(g={gamma})")


def amplitude_damping(gamma: float, target: int) -> Noise:
    """
    Amplitude damping: models energy dissipation (T1 decay).
    |1> decays to |0> with probability gamma.
    """
    _check_probability(gamma, "Gamma")
    K0 = np.array([[1, 0], [0, np.sqrt(1 - gamma)]], dtype=np.complex128)
    K1 = np.array([[0, np.sqrt(gamma)], [0, 0]], dtype=np.complex128)
    return Noise([K0, K1], [target], f"amplitude_damping(g={gamma})")


def depolarizing(p: float, target: int) -> Noise:
    """
    Depolarizing channel: with probability p, replace qubit with maximally mixed state.

    E(rho) = (1-3p/4)rho + (p/4)(X rho X + Y rho Y + Z rho Z)
    """
    _check_probability(p, "Probability")
    kraus = [
        np.sqrt(1 - 3 * p / 4) * I,
        np.sqrt(p / 4) * X,
        np.sqrt(p / 4) * Y,
        np.sqrt(p / 4) * Z,
    ]
    return Noise(kraus, [target], f"depolarizing(p={p})")


__all__ = [
    "Noise",
    "QuantumOperator",
    "bit_flip",
    "phase_flip",
    "phase_damping",
    "amplitude_damping",
    "depolarizing",
]
