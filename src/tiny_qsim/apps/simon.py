"""
Simon's algorithm.

Finds the hidden string ``s`` of a function with ``f(x) == f(x ^ s)``.
Every measurement of the input register is a string ``y`` with
``y · s == 0 (mod 2)``; the XOR system built from all of them has ``s`` as
its only non-trivial solution.

Usage:
    from tiny_qsim.apps import find_hidden_string

    find_hidden_string("110")   # -> "110"
"""
from typing import Dict, List, Optional

from .. import config
from ..algorithms.xor_gaussian_elimination import find_activated_variables_in_equations
from ..circuit import CircuitFactory
from ..core.bits import bit_count_string
from ..gates import Gate, hadamard_gates, oracle_replicator


def simon_function(secret: str) -> Dict[str, str]:
    """Two-to-one (or one-to-one for an all-zero ``secret``) function hiding ``secret``."""
    bit_count = len(secret)
    mask = int(secret, 2)
    return {
        bit_count_string(x, bit_count): bit_count_string(min(x, x ^ mask), bit_count)
        for x in range(2 ** bit_count)
    }


def simon_circuit(function: Dict[str, str], bit_count: int) -> List[Gate]:
    """
    Input register on qubits ``2n-1 .. n`` (most significant first), output
    register on qubits ``n-1 .. 0``.
    """
    inputs = list(reversed(range(bit_count, 2 * bit_count)))
    outputs = list(reversed(range(bit_count)))
    return (hadamard_gates(inputs)
            + oracle_replicator(function.items(), inputs, outputs)
            + hadamard_gates(inputs))


def find_hidden_string(secret: str, factory: Optional[CircuitFactory] = None) -> str:
    """
    Run Simon's algorithm on the function hiding ``secret`` and recover it
    from the measured strings.

    Returns:
        The recovered string, all zeros if the function is one-to-one.
    """
    bit_count = len(secret)
    if bit_count == 0 or any(bit not in "01" for bit in secret):
        raise ValueError(f"secret ({secret!r}) must be a non-empty bit string")

    circuit = (factory or CircuitFactory()).make_circuit(
        simon_circuit(simon_function(secret), bit_count)
    )
    inputs = list(reversed(range(bit_count, 2 * bit_count)))
    measured = circuit.summarized_probabilities(qubits=inputs, initial_bits="0" * 2 * bit_count)

    equations = {
        frozenset(index for index, bit in enumerate(y) if bit == "1")
        for y, probability in measured.items() if probability > config.TOLERANCE
    }
    equations.discard(frozenset())

    # A bit left out of every measured string can only be set in the secret
    activated = set(range(bit_count)).difference(*equations)
    if not activated:
        solutions = [solution for solution in find_activated_variables_in_equations(equations) if solution]
        if solutions:
            activated = set(solutions[0])

    return "".join("1" if index in activated else "0" for index in range(bit_count))
