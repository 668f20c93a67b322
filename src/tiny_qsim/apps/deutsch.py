"""
Deutsch's algorithm.

Decides with a single oracle call whether a one-bit function is constant or
balanced. The function is given as the truth table of the oracle: the
inputs for which it returns 1.

Usage:
    from tiny_qsim.apps import is_balanced

    is_balanced([])          # f(x) = 0     -> False
    is_balanced(["0", "1"])  # f(x) = 1     -> False
    is_balanced(["1"])       # f(x) = x     -> True
"""
from typing import List, Optional, Sequence

from ..circuit import CircuitFactory
from ..gates import Gate, Hadamard, oracle_not

# Qubit 1 is the query, qubit 0 the ancilla prepared as |1⟩
INITIAL_BITS = "01"


def deutsch_circuit(truth_table: Sequence[str]) -> List[Gate]:
    """H on both qubits, the oracle, then H on the query qubit."""
    return [Hadamard(0), Hadamard(1), oracle_not(truth_table, [1], 0), Hadamard(1)]


def is_balanced(truth_table: Sequence[str], factory: Optional[CircuitFactory] = None) -> bool:
    """
    True if the function with ``truth_table`` is balanced.

    Raises:
        SummarizedProbabilitiesError: If ``truth_table`` is not a valid
            one-bit truth table.
    """
    circuit = (factory or CircuitFactory()).make_circuit(deutsch_circuit(truth_table))
    probabilities = circuit.summarized_probabilities(qubits=[1], initial_bits=INITIAL_BITS)
    return probabilities.get("1", 0.0) > 0.5
