"""
Fitness evaluation for genetic circuit discovery.

A candidate circuit is a list of gates in which ``UseCaseOracle``
placeholders mark where the oracle of each use case goes. Every use case
replaces the placeholders with an ``oracle_not`` built from its truth table,
runs the circuit from its input bits and measures how far the probability
of its expected output is from 1.

Usage:
    >>> use_cases = [GeneticUseCase(["1"], input_bits="00", output_bits="11")]
    >>> evaluator = GeneticCircuitEvaluator(
    ...     threshold=0.1,
    ...     evaluators=[GeneticUseCaseEvaluator(case, CircuitFactory()) for case in use_cases],
    ... )
    >>> evaluator.evaluate_circuit([gates.Not(1), UseCaseOracle(controls=[1], target=0)])
    Evaluation(misses=0, max_probability=0.0)
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Sequence, Union

from tiny_qsim import config
from tiny_qsim.circuit import CircuitFactory
from tiny_qsim.core.bits import is_bit_string
from tiny_qsim.errors import (
    EvolveCircuitError,
    EvolveCircuitErrorCode,
    StatevectorError,
    TransformationInitErrorCode,
)
from tiny_qsim.gates import Gate, oracle_not


@dataclass(frozen=True)
class UseCaseOracle:
    """Placeholder replaced by the oracle of the use case being evaluated."""
    controls: tuple[int, ...]
    target: int

    def __post_init__(self):
        object.__setattr__(self, "controls", tuple(self.controls))


CandidateGate = Union[Gate, UseCaseOracle]


@dataclass(frozen=True)
class GeneticUseCase:
    """
    One input/output pair the evolved circuit has to satisfy.

    Attributes
    ----------
    truth_table : tuple of str
        Control combinations that activate the oracle of this use case.
    input_bits : str
        Initial basis state, one character per qubit, most significant first.
    output_bits : str
        Basis state the circuit is expected to end in.
    """
    truth_table: tuple[str, ...]
    input_bits: str
    output_bits: str

    def __post_init__(self):
        object.__setattr__(self, "truth_table", tuple(self.truth_table))

    @property
    def qubit_count(self) -> int:
        return len(self.input_bits)


@dataclass(frozen=True)
class Evaluation:
    """Outcome of evaluating one candidate against every use case."""
    misses: int
    max_probability: float


class GeneticUseCaseEvaluator:
    """
    Fitness of a candidate for a single use case.

    Parameters
    ----------
    use_case : GeneticUseCase
    factory : CircuitFactory
        Builds the circuit simulated for every candidate.
    """

    def __init__(self, use_case: GeneticUseCase, factory: CircuitFactory | None = None):
        self.use_case = use_case
        self.factory = factory or CircuitFactory()

    def make_gates(self, candidate: Sequence[CandidateGate]) -> list[Gate]:
        """Candidate gates with every ``UseCaseOracle`` replaced by this use case's oracle."""
        return [
            oracle_not(self.use_case.truth_table, gate.controls, gate.target)
            if isinstance(gate, UseCaseOracle) else gate
            for gate in candidate
        ]

    def evaluate_circuit(self, candidate: Sequence[CandidateGate]) -> float:
        """
        ``abs(1 - p)`` where ``p`` is the probability of measuring the
        expected output.

        Raises
        ------
        EvolveCircuitError
            If the use case is not valid, or ``USE_CASE_MEASUREMENT_RAISED_ERROR``
            wrapping the ``StatevectorError`` raised by the simulation.
        """
        use_case = self.use_case
        if use_case.qubit_count == 0:
            raise EvolveCircuitError(
                EvolveCircuitErrorCode.USE_CASE_CIRCUIT_QUBIT_COUNT_HAS_TO_BE_BIGGER_THAN_ZERO
            )
        output = use_case.output_bits
        if not output or not is_bit_string(output) or len(output) != use_case.qubit_count:
            raise EvolveCircuitError(
                EvolveCircuitErrorCode.USE_CASE_CIRCUIT_OUTPUT_HAS_TO_BE_A_NON_EMPTY_STRING_COMPOSED_ONLY_OF_ZEROS_AND_ONES
            )

        circuit = self.factory.make_circuit(self.make_gates(candidate))
        try:
            statevector = circuit.statevector_with_initial_bits(use_case.input_bits)
        except StatevectorError as e:
            raise EvolveCircuitError(EvolveCircuitErrorCode.USE_CASE_MEASUREMENT_RAISED_ERROR,
                                     gate=use_case, error=e) from e

        return abs(1 - float(statevector.probabilities()[int(output, 2)]))


class GeneticCircuitEvaluator:
    """
    Evaluates a candidate against every use case on a thread pool.

    Simulations run concurrently; only the update of the shared accumulator
    (misses, max probability, first error) happens under the lock.

    Parameters
    ----------
    threshold : float
        A use case whose fitness is above ``threshold`` counts as a miss.
    evaluators : sequence of GeneticUseCaseEvaluator
    max_workers : int
        Threads used to evaluate use cases.
    logger : logging.Logger, optional
    """

    def __init__(self, threshold: float, evaluators: Sequence[GeneticUseCaseEvaluator],
                 max_workers: int = 1, logger: logging.Logger | None = None):
        self.threshold = threshold
        self.evaluators = list(evaluators)
        self.max_workers = config.validate_concurrency(
            max_workers, TransformationInitErrorCode.MAX_CONCURRENCY_HAS_TO_BE_BIGGER_THAN_ZERO
        )
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    def evaluate_circuit(self, candidate: Sequence[CandidateGate]) -> Evaluation:
        """
        Raises
        ------
        EvolveCircuitError
            The error of the earliest failing use case, once all of them finished.
        """
        lock = threading.Lock()
        misses = 0
        max_probability = 0.0
        first_error: tuple[int, EvolveCircuitError] | None = None

        def evaluate(index: int, evaluator: GeneticUseCaseEvaluator) -> None:
            nonlocal misses, max_probability, first_error
            try:
                probability = evaluator.evaluate_circuit(candidate)
            except EvolveCircuitError as e:
                with lock:
                    if first_error is None or index < first_error[0]:
                        first_error = (index, e)
                return
            with lock:
                if probability > self.threshold:
                    misses += 1
                max_probability = max(max_probability, probability)

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            for future in [executor.submit(evaluate, index, evaluator)
                           for index, evaluator in enumerate(self.evaluators)]:
                future.result()

        if first_error is not None:
            error = first_error[1]
            self.logger.debug("Candidate rejected: %s", error.code.name)
            raise error

        self.logger.debug("Candidate evaluated: %d misses, max %.4f", misses, max_probability)
        return Evaluation(misses, max_probability)
