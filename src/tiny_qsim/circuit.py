"""
Circuit facades.

A ``Circuit`` wraps a gate list together with the simulators selected by a
``CircuitFactory``; a ``NoiseCircuit`` does the same for a list of quantum
operators (gates and noise) and a density matrix simulator.

Example
-------
>>> from tiny_qsim import CircuitFactory, gates
>>> circuit = CircuitFactory().make_circuit([gates.Hadamard(0), gates.controlled_not(1, 0)])
>>> sorted(circuit.statevector().summarized_probabilities())
['00', '11']
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
from numpy import ndarray

from tiny_qsim import config
from tiny_qsim.backends.density_matrix import (
    DensityMatrixSimulator,
    MatrixDensityMatrixTransformation,
    RowDensityMatrixTransformation,
    validate_density_matrix,
)
from tiny_qsim.backends.statevector import (
    DirectStatevectorTransformation,
    ElementStatevectorTransformation,
    MatrixStatevectorTransformation,
    RowStatevectorTransformation,
    StatevectorSimulator,
    StatevectorTransformation,
)
from tiny_qsim.backends.unitary import UnitarySimulator
from tiny_qsim.config import (
    DensityMatrixConfiguration,
    DensityMatrixStrategy,
    StatevectorConfiguration,
    StatevectorStrategy,
)
from tiny_qsim.core.bits import bit_count_string, bits_string, is_bit_string
from tiny_qsim.core.linalg import Matrix, Vector, is_power_of_two, log2, squared_modulus
from tiny_qsim.errors import (
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
)
from tiny_qsim.gates import Gate
from tiny_qsim.gates import qubit_count as register_size
from tiny_qsim.noise import QuantumOperator


def _basis_state(value: int, qubit_count: int) -> Vector:
    state = np.zeros(2 ** qubit_count, dtype=np.complex128)
    state[value] = 1.0
    return state


_SUMMARIZED_CODES = {
    GroupedProbabilitiesErrorCode.GROUP_QUBITS_CAN_NOT_BE_AN_EMPTY_LIST:
        SummarizedProbabilitiesErrorCode.QUBITS_CAN_NOT_BE_AN_EMPTY_LIST,
    GroupedProbabilitiesErrorCode.QUBITS_ARE_NOT_UNIQUE:
        SummarizedProbabilitiesErrorCode.QUBITS_ARE_NOT_UNIQUE,
    GroupedProbabilitiesErrorCode.QUBITS_ARE_NOT_INSIDE_BOUNDS:
        SummarizedProbabilitiesErrorCode.QUBITS_ARE_NOT_INSIDE_BOUNDS,
}


# ---------------------------------------------------------------------------
# Statevector
# ---------------------------------------------------------------------------

@dataclass
class GroupedProbability:
    """
    Probability of one combination of the group qubits.

    Attributes
    ----------
    probability : float
        Probability of measuring the combination.
    summary : dict[str, float]
        Probability of each combination of the summary qubits once the group
        qubits collapsed to this combination.
    """

    probability: float
    summary: dict[str, float] = field(default_factory=dict)


class CircuitStatevector:
    """
    A validated statevector.

    Raises
    ------
    MakeStatevectorError
        If the length is not a power of two or the squared moduli do not
        add up to one.
    """

    def __init__(self, statevector: Vector):
        statevector = np.asarray(statevector, dtype=np.complex128)
        if not is_power_of_two(len(statevector)):
            raise MakeStatevectorError(MakeStatevectorErrorCode.STATE_COUNT_HAS_TO_BE_A_POWER_OF_TWO)
        if abs(squared_modulus(statevector) - 1) > config.TOLERANCE:
            raise MakeStatevectorError(
                MakeStatevectorErrorCode.STATE_ADDITION_OF_SQUARE_MODULUS_IS_NOT_EQUAL_TO_ONE
            )
        self._statevector = statevector

    @property
    def statevector(self) -> Vector:
        return self._statevector

    @property
    def qubit_count(self) -> int:
        return log2(len(self._statevector))

    def probabilities(self) -> ndarray:
        """Probability of every basis state."""
        return np.abs(self._statevector) ** 2

    def summarized_probabilities(self, qubits: Sequence[int] | None = None) -> dict[str, float]:
        """
        Non-zero probabilities keyed by bit string.

        Without ``qubits`` keys span the whole register (most significant
        first). With ``qubits`` keys have one character per listed qubit and
        probabilities are added up.

        Raises
        ------
        SummarizedProbabilitiesError
            If ``qubits`` is empty, repeats a qubit or is out of bounds.
        """
        if qubits is None:
            bit_count = self.qubit_count
            return {
                bit_count_string(index, bit_count): float(value)
                for index, value in enumerate(self.probabilities()) if value > 0
            }

        try:
            grouped = self.grouped_probabilities(qubits)
        except GroupedProbabilitiesError as e:
            raise SummarizedProbabilitiesError(_SUMMARIZED_CODES[e.code]) from e
        return {key: value.probability for key, value in grouped.items()}

    def grouped_probabilities(self, group_qubits: Sequence[int], summary_qubits: Sequence[int] = (),
                              rounding_places: int | None = None) -> dict[str, GroupedProbability]:
        """
        Probability of each combination of ``group_qubits``, each with the
        conditional probabilities of the ``summary_qubits`` combinations.

        Parameters
        ----------
        group_qubits : sequence of int
            Qubits to group by. Has to be non-empty.
        summary_qubits : sequence of int
            Qubits summarized inside each group. May be empty.
        rounding_places : int, optional
            Round summary probabilities; entries rounded to 0 are dropped.

        Returns
        -------
        dict[str, GroupedProbability]
            Combinations with probability 0 are not included.

        Raises
        ------
        GroupedProbabilitiesError
            Empty group, repeated qubits or qubits out of bounds.
        """
        group_qubits = list(group_qubits)
        summary_qubits = list(summary_qubits)
        if not group_qubits:
            raise GroupedProbabilitiesError(GroupedProbabilitiesErrorCode.GROUP_QUBITS_CAN_NOT_BE_AN_EMPTY_LIST)

        all_qubits = group_qubits + summary_qubits
        if len(set(all_qubits)) != len(all_qubits):
            raise GroupedProbabilitiesError(GroupedProbabilitiesErrorCode.QUBITS_ARE_NOT_UNIQUE)

        probabilities = self.probabilities()
        qubit_count = self.qubit_count
        if not all(0 <= qubit < qubit_count for qubit in all_qubits):
            raise GroupedProbabilitiesError(GroupedProbabilitiesErrorCode.QUBITS_ARE_NOT_INSIDE_BOUNDS)

        grouped: dict[str, GroupedProbability] = {}
        for index, value in enumerate(probabilities):
            if value <= 0:
                continue
            group = grouped.setdefault(bits_string(index, group_qubits), GroupedProbability(0.0))
            group.probability += float(value)
            if summary_qubits:
                key = bits_string(index, summary_qubits)
                group.summary[key] = group.summary.get(key, 0.0) + float(value)

        for group in grouped.values():
            normalized = {}
            for key, value in group.summary.items():
                value = value / group.probability
                if rounding_places is not None:
                    value = round(value, rounding_places)
                if value > 0:
                    normalized[key] = value
            group.summary = normalized

        return grouped


# ---------------------------------------------------------------------------
# Density matrix
# ---------------------------------------------------------------------------

class CircuitDensityMatrix:
    """
    A validated density matrix.

    Raises
    ------
    MakeDensityMatrixError
        If the matrix is not Hermitian, has negative eigenvalues or its
        eigenvalues do not add up to one.
    """

    def __init__(self, density_matrix: Matrix):
        self._density_matrix = validate_density_matrix(np.asarray(density_matrix, dtype=np.complex128))

    @classmethod
    def from_statevector(cls, statevector: Vector) -> CircuitDensityMatrix:
        """Pure state |ψ⟩⟨ψ|."""
        statevector = CircuitStatevector(statevector).statevector
        return cls(np.outer(statevector, statevector.conj()))

    @classmethod
    def from_bits(cls, bits: str) -> CircuitDensityMatrix:
        """Pure basis state, first character for the most significant qubit."""
        if not bits or not is_bit_string(bits):
            raise StatevectorError(StatevectorErrorCode.INITIAL_BITS_ARE_NOT_A_STRING_COMPOSED_ONLY_OF_ZEROS_AND_ONES)
        return cls.from_statevector(_basis_state(int(bits, 2), len(bits)))

    @property
    def density_matrix(self) -> Matrix:
        return self._density_matrix

    @property
    def qubit_count(self) -> int:
        return log2(self._density_matrix.shape[0])

    def probabilities(self) -> ndarray:
        """Diagonal elements of density matrix (measurement probabilities)."""
        return np.real(np.diag(self._density_matrix))

    def summarized_probabilities(self) -> dict[str, float]:
        bit_count = self.qubit_count
        return {
            bit_count_string(index, bit_count): float(value)
            for index, value in enumerate(self.probabilities()) if value > 0
        }

    def purity(self) -> float:
        """Tr(ρ²): 1.0 for pure states, 1/d for maximally mixed."""
        return float(np.real(np.trace(self._density_matrix @ self._density_matrix)))


# ---------------------------------------------------------------------------
# Circuits
# ---------------------------------------------------------------------------

class Circuit:
    """
    A list of gates plus the simulators used to evaluate it.

    Parameters
    ----------
    gates : sequence of Gate
        Applied in order.
    unitary_simulator : UnitarySimulator
    statevector_simulator : StatevectorSimulator
    """

    def __init__(self, gates: Sequence[Gate], unitary_simulator: UnitarySimulator,
                 statevector_simulator: StatevectorSimulator):
        self.gates = list(gates)
        self.unitary_simulator = unitary_simulator
        self.statevector_simulator = statevector_simulator

    def __repr__(self) -> str:
        return f"Circuit(qubits={register_size(self.gates)}, gates={len(self.gates)})"

    def unitary(self, qubit_count: int | None = None) -> Matrix:
        """
        Unitary matrix of the circuit.

        Raises
        ------
        UnitaryError
        """
        if qubit_count is None:
            qubit_count = register_size(self.gates)
        return self.unitary_simulator.unitary(self.gates, qubit_count)

    def statevector(self, initial_statevector: Vector | CircuitStatevector | None = None) -> CircuitStatevector:
        """
        Final statevector, starting from ``initial_statevector``
        (|0...0⟩ on the qubits used by the gates if not given).

        Raises
        ------
        StatevectorError
        """
        if initial_statevector is None:
            initial = _basis_state(0, register_size(self.gates))
        elif isinstance(initial_statevector, CircuitStatevector):
            initial = initial_statevector.statevector
        else:
            initial = initial_statevector
        return CircuitStatevector(self.statevector_simulator.apply(self.gates, initial))

    def statevector_with_initial_bits(self, bits: str) -> CircuitStatevector:
        """
        Final statevector starting from the basis state ``bits``; the register
        has one qubit per character, first character most significant.

        Raises
        ------
        StatevectorError
        """
        if not bits or not is_bit_string(bits):
            raise StatevectorError(
                StatevectorErrorCode.INITIAL_BITS_ARE_NOT_A_STRING_COMPOSED_ONLY_OF_ZEROS_AND_ONES
            )
        return self.statevector(_basis_state(int(bits, 2), len(bits)))

    def _statevector(self, initial_bits: str | None) -> CircuitStatevector:
        try:
            if initial_bits is None:
                return self.statevector()
            return self.statevector_with_initial_bits(initial_bits)
        except StatevectorError as e:
            raise ProbabilitiesError(ProbabilitiesErrorCode.STATEVECTOR_RAISED_ERROR, error=e) from e

    def probabilities(self, initial_bits: str | None = None) -> ndarray:
        """
        Raises
        ------
        ProbabilitiesError
            Wraps the ``StatevectorError`` that prevented the evaluation.
        """
        return self._statevector(initial_bits).probabilities()

    def summarized_probabilities(self, qubits: Sequence[int] | None = None,
                                 initial_bits: str | None = None) -> dict[str, float]:
        try:
            state = self._statevector(initial_bits)
        except ProbabilitiesError as e:
            raise SummarizedProbabilitiesError(SummarizedProbabilitiesErrorCode.PROBABILITIES_RAISED_ERROR,
                                               error=e) from e
        return state.summarized_probabilities(qubits)

    def grouped_probabilities(self, group_qubits: Sequence[int], summary_qubits: Sequence[int] = (),
                              initial_bits: str | None = None,
                              rounding_places: int | None = None) -> dict[str, GroupedProbability]:
        try:
            state = self._statevector(initial_bits)
        except ProbabilitiesError as e:
            raise GroupedProbabilitiesError(GroupedProbabilitiesErrorCode.PROBABILITIES_RAISED_ERROR,
                                            error=e) from e
        return state.grouped_probabilities(group_qubits, summary_qubits, rounding_places)


class NoiseCircuit:
    """A list of quantum operators plus the density matrix simulator used to evaluate it."""

    def __init__(self, operators: Sequence[QuantumOperator],
                 density_matrix_simulator: DensityMatrixSimulator):
        self.operators = list(operators)
        self.density_matrix_simulator = density_matrix_simulator

    def __repr__(self) -> str:
        return f"NoiseCircuit(qubits={register_size(self.operators)}, operators={len(self.operators)})"

    def density_matrix(self, initial_state: Matrix | CircuitDensityMatrix | None = None) -> CircuitDensityMatrix:
        """
        Final density matrix, starting from ``initial_state`` (|0...0⟩⟨0...0|
        on the qubits used by the operators if not given).

        Raises
        ------
        MakeDensityMatrixError
            If ``initial_state`` is not a valid density matrix.
        DensityMatrixError
        """
        if initial_state is None:
            initial = CircuitDensityMatrix.from_statevector(_basis_state(0, register_size(self.operators)))
        elif isinstance(initial_state, CircuitDensityMatrix):
            initial = initial_state
        else:
            initial = CircuitDensityMatrix(initial_state)
        return CircuitDensityMatrix(
            self.density_matrix_simulator.apply(self.operators, initial.density_matrix)
        )


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

class CircuitFactory:
    """
    Builds ``Circuit`` instances whose statevector transformation follows
    ``statevector_configuration``.
    """

    def __init__(self, statevector_configuration: StatevectorConfiguration | None = None,
                 logger: logging.Logger | None = None):
        self.statevector_configuration = statevector_configuration or StatevectorConfiguration()
        self.logger = logger

    def make_transformation(self) -> StatevectorTransformation:
        configuration = self.statevector_configuration
        strategy = configuration.strategy
        if strategy is StatevectorStrategy.DIRECT:
            return DirectStatevectorTransformation(configuration.max_concurrency)
        if strategy is StatevectorStrategy.MATRIX:
            return MatrixStatevectorTransformation(configuration.expansion_concurrency)
        if strategy is StatevectorStrategy.ROW:
            return RowStatevectorTransformation(configuration.max_concurrency)
        return ElementStatevectorTransformation(configuration.max_concurrency)

    def make_circuit(self, gates: Sequence[Gate]) -> Circuit:
        return Circuit(
            gates,
            UnitarySimulator(self.statevector_configuration.expansion_concurrency, self.logger),
            StatevectorSimulator(self.make_transformation(), self.logger),
        )


class NoiseCircuitFactory:
    """
    Builds ``NoiseCircuit`` instances whose density matrix transformation
    follows ``density_matrix_configuration``.
    """

    def __init__(self, density_matrix_configuration: DensityMatrixConfiguration | None = None,
                 logger: logging.Logger | None = None):
        self.density_matrix_configuration = density_matrix_configuration or DensityMatrixConfiguration()
        self.logger = logger

    def make_noise_circuit(self, operators: Sequence[QuantumOperator]) -> NoiseCircuit:
        configuration = self.density_matrix_configuration
        if configuration.strategy is DensityMatrixStrategy.ROW:
            transformation = RowDensityMatrixTransformation(configuration.calculation_concurrency,
                                                            configuration.expansion_concurrency)
        else:
            transformation = MatrixDensityMatrixTransformation(configuration.expansion_concurrency)
        return NoiseCircuit(operators, DensityMatrixSimulator(transformation, self.logger))
