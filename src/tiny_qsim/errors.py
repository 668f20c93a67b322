"""
Error types raised by tiny-qsim.

Every failure is an exception carrying a ``code`` taken from an enum, so
callers can branch on the exact reason:

    try:
        circuit.statevector()
    except StatevectorError as e:
        if e.code is StatevectorErrorCode.GATE_RAISED_ERROR:
            print(e.gate, e.error.code)

Errors that wrap a failure produced by one element of a larger structure
(a gate inside a circuit, a use case inside an evaluation) keep both the
element and the inner error, and chain the inner error as ``__cause__``.
All errors derive from ``ValueError``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class SimulationError(ValueError):
    """Base class of every error raised by tiny-qsim."""

    def __init__(self, code: Enum, message: str | None = None):
        self.code = code
        super().__init__(message or code.value.replace("_", " "))

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.code is other.code

    def __hash__(self) -> int:
        return hash((type(self), self.code))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code.name})"


class CompositeError(SimulationError):
    """Error produced by one element of a sequence (usually a gate)."""

    def __init__(self, code: Enum, gate: Any = None, error: SimulationError | None = None,
                 message: str | None = None):
        self.gate = gate
        self.error = error
        if message is None and error is not None:
            message = f"{code.value.replace('_', ' ')}: {gate!r} -> {error}"
        super().__init__(code, message)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.code is other.code and self.gate == other.gate and self.error == other.error

    def __hash__(self) -> int:
        return hash((type(self), self.code))

    def __repr__(self) -> str:
        if self.error is None:
            return super().__repr__()
        return f"{type(self).__name__}({self.code.name}, gate={self.gate!r}, error={self.error!r})"


# ---------------------------------------------------------------------------
# Numeric kernel
# ---------------------------------------------------------------------------

class KernelErrorCode(Enum):
    COUNT_HAS_TO_BE_BIGGER_THAN_ZERO = "count_has_to_be_bigger_than_zero"
    MAX_CONCURRENCY_HAS_TO_BE_BIGGER_THAN_ZERO = "max_concurrency_has_to_be_bigger_than_zero"
    MATRIX_IS_NOT_HERMITIAN = "matrix_is_not_hermitian"
    UNABLE_TO_COMPUTE_EIGENVALUES = "unable_to_compute_eigenvalues"
    VECTOR_COUNT_IS_NOT_TWO = "vector_count_is_not_two"
    COUNT_HAS_TO_BE_BIGGER_THAN_TWO = "count_has_to_be_bigger_than_two"
    SUBMATRIX_IS_NOT_2X2 = "submatrix_is_not_2x2"
    SUBMATRIX_IS_NOT_UNITARY = "submatrix_is_not_unitary"
    FIRST_INDEX_IS_NOT_SMALLER_THAN_SECOND_INDEX = "first_index_is_not_smaller_than_second_index"
    INDEXES_OUT_OF_RANGE = "indexes_out_of_range"
    PERMUTATION_IS_NOT_VALID = "permutation_is_not_valid"


class KernelError(SimulationError):
    """Invalid argument given to a matrix/vector primitive."""


class TransformationInitErrorCode(Enum):
    MAX_CONCURRENCY_HAS_TO_BE_BIGGER_THAN_ZERO = "max_concurrency_has_to_be_bigger_than_zero"
    EXPANSION_CONCURRENCY_HAS_TO_BE_BIGGER_THAN_ZERO = "expansion_concurrency_has_to_be_bigger_than_zero"
    CALCULATION_CONCURRENCY_HAS_TO_BE_BIGGER_THAN_ZERO = "calculation_concurrency_has_to_be_bigger_than_zero"


class TransformationInitError(SimulationError):
    """A transformation was configured with an invalid worker count."""


# ---------------------------------------------------------------------------
# Gates and quantum operators
# ---------------------------------------------------------------------------

class GateErrorCode(Enum):
    CIRCUIT_QUBIT_COUNT_HAS_TO_BE_BIGGER_THAN_ZERO = "circuit_qubit_count_has_to_be_bigger_than_zero"
    GATE_INPUT_COUNT_DOES_NOT_MATCH_GATE_MATRIX_QUBIT_COUNT = (
        "gate_input_count_does_not_match_gate_matrix_qubit_count"
    )
    GATE_INPUTS_ARE_NOT_IN_BOUND = "gate_inputs_are_not_in_bound"
    GATE_INPUTS_ARE_NOT_UNIQUE = "gate_inputs_are_not_unique"
    GATE_MATRIX_HANDLES_MORE_QUBITS_THAT_CIRCUIT_ACTUALLY_HAS = (
        "gate_matrix_handles_more_qubits_that_circuit_actually_has"
    )
    GATE_MATRIX_IS_NOT_UNITARY = "gate_matrix_is_not_unitary"
    GATE_MATRIX_ROW_COUNT_HAS_TO_BE_A_POWER_OF_TWO = "gate_matrix_row_count_has_to_be_a_power_of_two"
    GATE_CONTROLS_CAN_NOT_BE_AN_EMPTY_LIST = "gate_controls_can_not_be_an_empty_list"
    GATE_TRUTH_TABLE_CAN_NOT_BE_REPRESENTED_WITH_GIVEN_CONTROL_COUNT = (
        "gate_truth_table_can_not_be_represented_with_given_control_count"
    )
    GATE_TRUTH_TABLE_ENTRIES_HAVE_TO_BE_NON_EMPTY_STRINGS_COMPOSED_ONLY_OF_ZEROS_AND_ONES = (
        "gate_truth_table_entries_have_to_be_non_empty_strings_composed_only_of_zeros_and_ones"
    )
    GATE_WITH_EMPTY_INPUT_LIST = "gate_with_empty_input_list"


class GateError(SimulationError):
    """A gate can not be applied to a circuit with the given qubit count."""


class NoiseErrorCode(Enum):
    NOISE_MATRICES_CAN_NOT_BE_AN_EMPTY_LIST = "noise_matrices_can_not_be_an_empty_list"
    NOISE_MATRICES_ARE_NOT_SQUARE = "noise_matrices_are_not_square"
    NOISE_MATRICES_ROW_COUNT_HAS_TO_BE_A_POWER_OF_TWO = "noise_matrices_row_count_has_to_be_a_power_of_two"
    NOISE_MATRICES_DO_NOT_HAVE_SAME_ROW_COUNT = "noise_matrices_do_not_have_same_row_count"
    NOISE_MATRICES_DO_NOT_SATISFY_IDENTITY = "noise_matrices_do_not_satisfy_identity"


class NoiseError(SimulationError):
    """The Kraus matrices of a noise operator are not valid."""


# ---------------------------------------------------------------------------
# Circuits
# ---------------------------------------------------------------------------

class StatevectorErrorCode(Enum):
    GATE_RAISED_ERROR = "gate_raised_error"
    INITIAL_STATEVECTOR_COUNT_HAS_TO_BE_A_POWER_OF_TWO = "initial_statevector_count_has_to_be_a_power_of_two"
    INITIAL_STATEVECTOR_ADDITION_OF_SQUARE_MODULUS_IS_NOT_EQUAL_TO_ONE = (
        "initial_statevector_addition_of_square_modulus_is_not_equal_to_one"
    )
    INITIAL_BITS_ARE_NOT_A_STRING_COMPOSED_ONLY_OF_ZEROS_AND_ONES = (
        "initial_bits_are_not_a_string_composed_only_of_zeros_and_ones"
    )
    RESULTING_STATEVECTOR_ADDITION_OF_SQUARE_MODULUS_IS_NOT_EQUAL_TO_ONE = (
        "resulting_statevector_addition_of_square_modulus_is_not_equal_to_one"
    )


class StatevectorError(CompositeError):
    """Raised by ``Circuit.statevector`` and friends."""


class MakeStatevectorErrorCode(Enum):
    STATE_COUNT_HAS_TO_BE_A_POWER_OF_TWO = "state_count_has_to_be_a_power_of_two"
    STATE_ADDITION_OF_SQUARE_MODULUS_IS_NOT_EQUAL_TO_ONE = "state_addition_of_square_modulus_is_not_equal_to_one"


class MakeStatevectorError(SimulationError):
    """A vector is not a valid quantum statevector."""


class UnitaryErrorCode(Enum):
    CIRCUIT_CAN_NOT_BE_AN_EMPTY_LIST = "circuit_can_not_be_an_empty_list"
    GATE_RAISED_ERROR = "gate_raised_error"
    RESULTING_MATRIX_IS_NOT_UNITARY = "resulting_matrix_is_not_unitary"


class UnitaryError(CompositeError):
    """Raised by ``Circuit.unitary``."""


class DensityMatrixErrorCode(Enum):
    GATE_RAISED_ERROR = "gate_raised_error"
    RESULTING_DENSITY_MATRIX_EIGENVALUES_DOES_NOT_ADD_UP_TO_ONE = (
        "resulting_density_matrix_eigenvalues_does_not_add_up_to_one"
    )
    RESULTING_DENSITY_MATRIX_IS_NOT_HERMITIAN = "resulting_density_matrix_is_not_hermitian"
    RESULTING_DENSITY_MATRIX_WITH_NEGATIVE_EIGENVALUES = "resulting_density_matrix_with_negative_eigenvalues"
    UNABLE_TO_COMPUTE_RESULTING_DENSITY_MATRIX_EIGENVALUES = (
        "unable_to_compute_resulting_density_matrix_eigenvalues"
    )


class DensityMatrixError(CompositeError):
    """Raised by ``NoiseCircuit.density_matrix``."""


class MakeDensityMatrixErrorCode(Enum):
    MATRIX_EIGENVALUES_DOES_NOT_ADD_UP_TO_ONE = "matrix_eigenvalues_does_not_add_up_to_one"
    MATRIX_IS_NOT_HERMITIAN = "matrix_is_not_hermitian"
    MATRIX_WITH_NEGATIVE_EIGENVALUES = "matrix_with_negative_eigenvalues"
    UNABLE_TO_COMPUTE_MATRIX_EIGENVALUES = "unable_to_compute_matrix_eigenvalues"


class MakeDensityMatrixError(SimulationError):
    """A matrix is not a valid density matrix."""


class ProbabilitiesErrorCode(Enum):
    STATEVECTOR_RAISED_ERROR = "statevector_raised_error"


class ProbabilitiesError(CompositeError):
    """Raised by ``Circuit.probabilities``; wraps the statevector failure."""


class GroupedProbabilitiesErrorCode(Enum):
    GROUP_QUBITS_CAN_NOT_BE_AN_EMPTY_LIST = "group_qubits_can_not_be_an_empty_list"
    PROBABILITIES_RAISED_ERROR = "probabilities_raised_error"
    QUBITS_ARE_NOT_INSIDE_BOUNDS = "qubits_are_not_inside_bounds"
    QUBITS_ARE_NOT_UNIQUE = "qubits_are_not_unique"


class GroupedProbabilitiesError(CompositeError):
    """Raised by ``grouped_probabilities``."""


class SummarizedProbabilitiesErrorCode(Enum):
    PROBABILITIES_RAISED_ERROR = "probabilities_raised_error"
    QUBITS_ARE_NOT_INSIDE_BOUNDS = "qubits_are_not_inside_bounds"
    QUBITS_ARE_NOT_UNIQUE = "qubits_are_not_unique"
    QUBITS_CAN_NOT_BE_AN_EMPTY_LIST = "qubits_can_not_be_an_empty_list"


class SummarizedProbabilitiesError(CompositeError):
    """Raised by ``summarized_probabilities`` when restricted to some qubits."""


# ---------------------------------------------------------------------------
# Algorithms and collaborators
# ---------------------------------------------------------------------------

class DecomposeGatesErrorCode(Enum):
    GATE_RAISED_ERROR = "gate_raised_error"


class DecomposeGatesError(CompositeError):
    """Raised by ``decompose_gates`` at the first gate that can not be decomposed."""


class GateFactoryErrorCode(Enum):
    BASE_HAS_TO_BE_BIGGER_THAN_ZERO = "base_has_to_be_bigger_than_zero"
    MODULUS_HAS_TO_BE_BIGGER_THAN_ZERO = "modulus_has_to_be_bigger_than_zero"
    INPUTS_CAN_NOT_BE_AN_EMPTY_LIST = "inputs_can_not_be_an_empty_list"


class GateFactoryError(SimulationError):
    """Invalid arguments given to a gate factory."""


class FindApproximationErrorCode(Enum):
    LIMIT_HAS_TO_BE_BIGGER_THAN_ZERO = "limit_has_to_be_bigger_than_zero"
    VALUE_HAS_TO_BE_BIGGER_THAN_ZERO = "value_has_to_be_bigger_than_zero"


class FindApproximationError(SimulationError):
    """Invalid arguments given to the continued fractions solver."""


class EvolveCircuitErrorCode(Enum):
    USE_CASE_CIRCUIT_QUBIT_COUNT_HAS_TO_BE_BIGGER_THAN_ZERO = (
        "use_case_circuit_qubit_count_has_to_be_bigger_than_zero"
    )
    USE_CASE_MEASUREMENT_RAISED_ERROR = "use_case_measurement_raised_error"
    USE_CASE_CIRCUIT_OUTPUT_HAS_TO_BE_A_NON_EMPTY_STRING_COMPOSED_ONLY_OF_ZEROS_AND_ONES = (
        "use_case_circuit_output_has_to_be_a_non_empty_string_composed_only_of_zeros_and_ones"
    )


class EvolveCircuitError(CompositeError):
    """Raised while evaluating a candidate circuit against its use cases."""


class DrawCircuitErrorCode(Enum):
    QUBIT_COUNT_HAS_TO_BE_BIGGER_THAN_ZERO = "qubit_count_has_to_be_bigger_than_zero"
    GATE_WITH_EMPTY_INPUT_LIST = "gate_with_empty_input_list"
    GATE_WITH_REPEATED_INPUTS = "gate_with_repeated_inputs"
    GATE_WITH_REPEATED_CONTROLS = "gate_with_repeated_controls"
    GATE_TARGETS_ARE_ALSO_CONTROLS = "gate_targets_are_also_controls"
    GATE_WITH_INPUTS_OUT_OF_RANGE = "gate_with_inputs_out_of_range"


class DrawCircuitError(CompositeError):
    """Raised by ``draw_circuit`` before anything is rendered."""
