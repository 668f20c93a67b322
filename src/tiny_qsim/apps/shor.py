"""
Shor's factoring algorithm.

Quantum period finding followed by classical post-processing:

1. Phase estimation of ``x -> base * x mod number`` on a ``2n``-qubit
   exponent register (``n`` bits per number).
2. Continued fraction approximation of every measured phase ``y / 2^(2n)``;
   its denominator is a candidate period ``r``.
3. A period is valid when it is even, ``base^r = 1 (mod number)`` and
   ``base^(r/2) != -1 (mod number)``; the factors are then
   ``gcd(base^(r/2) ± 1, number)``.

The register needs ``3n`` qubits, so only small numbers are practical
(15 takes 12 qubits).

Usage:
    from tiny_qsim.apps import factor

    result = factor(15, base=7)
    print(result.factors)   # (3, 5)
"""
import logging
from dataclasses import dataclass
from fractions import Fraction
from typing import List, Optional, Tuple

from ..algorithms.number_theory import find_approximation, find_greatest_common_divisor
from ..circuit import CircuitFactory
from ..gates import Gate, Not, hadamard_gates, modular_exponentiation, quantum_fourier_transform

logger = logging.getLogger(__name__)


@dataclass
class ShorResult:
    """Result of factoring one number."""
    number: int                               # Number to factor
    base: int                                 # Base of the modular exponentiation
    period: Optional[int]                     # Period found, None if classical shortcut or failure
    factors: Optional[Tuple[int, int]]        # Non-trivial factors, None on failure
    measurement: Optional[int] = None         # Exponent register value that revealed the period

    def __repr__(self) -> str:
        return (f"ShorResult(number={self.number}, base={self.base}, "
                f"period={self.period}, factors={self.factors})")


def shor_circuit(number: int, base: int) -> List[Gate]:
    """
    Period finding circuit for ``base`` modulo ``number``.

    Qubits ``n-1 .. 0`` hold the modular product (starting at 1), qubits
    ``3n-1 .. n`` the exponent, both most significant first.
    """
    bit_count = number.bit_length()
    exponent = list(reversed(range(bit_count, 3 * bit_count)))
    inputs = list(reversed(range(bit_count)))

    return ([Not(0)]
            + hadamard_gates(exponent)
            + modular_exponentiation(base, number, exponent=exponent, inputs=inputs)
            + [quantum_fourier_transform(exponent, inverse=True)])


def period_from_measurement(measurement: int, exponent_qubit_count: int) -> int:
    """Denominator of the continued fraction approximation of the measured phase."""
    states = 2 ** exponent_qubit_count
    approximation = find_approximation(Fraction(measurement, states), Fraction(1, 2 * states),
                                       inclusive=True)
    return approximation.denominator


def is_valid_period(period: int, base: int, number: int) -> bool:
    if period % 2 != 0:
        return False
    if pow(base, period, number) != 1:
        return False
    return pow(base, period // 2, number) != number - 1


def factors_from_period(period: int, base: int, number: int) -> Tuple[int, int]:
    half = pow(base, period // 2, number)
    first = abs(find_greatest_common_divisor(half - 1, number))
    second = abs(find_greatest_common_divisor(half + 1, number))
    return tuple(sorted((first, second)))


def factor(number: int, base: int = 7, factory: Optional[CircuitFactory] = None) -> ShorResult:
    """
    Factor ``number`` with Shor's algorithm.

    Measurements are tried from the most to the least probable until one
    of them reveals a valid period.

    Args:
        number: Odd composite number, bigger than 3.
        base: Base of the modular exponentiation, in ``[2, number)``.
        factory: Builds the simulated circuit.

    Returns:
        ShorResult with ``factors`` set to None if no measurement revealed
        a valid period.
    """
    if number <= 3 or number % 2 == 0:
        raise ValueError(f"number ({number}) must be an odd number bigger than 3")
    if not 2 <= base < number:
        raise ValueError(f"base ({base}) must be in [2, {number})")

    common = abs(find_greatest_common_divisor(base, number))
    if common != 1:
        logger.info("Base %d shares factor %d with %d", base, common, number)
        return ShorResult(number, base, None, tuple(sorted((common, number // common))))

    circuit = (factory or CircuitFactory()).make_circuit(shor_circuit(number, base))
    bit_count = number.bit_length()
    exponent = list(reversed(range(bit_count, 3 * bit_count)))
    measurements = circuit.summarized_probabilities(qubits=exponent)

    for key, probability in sorted(measurements.items(), key=lambda item: item[1], reverse=True):
        measurement = int(key, 2)
        if measurement == 0:
            continue
        period = period_from_measurement(measurement, len(exponent))
        logger.debug("Measured %d (p=%.4f): candidate period %d", measurement, probability, period)
        if not is_valid_period(period, base, number):
            continue
        factors = factors_from_period(period, base, number)
        if 1 in factors:
            continue
        return ShorResult(number, base, period, factors, measurement)

    return ShorResult(number, base, None, None)
