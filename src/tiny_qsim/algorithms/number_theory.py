"""
Number theory helpers used to post-process Shor measurements.

Reference: Nielsen & Chuang, Section 5.3.1 and Appendix 4.
"""

from __future__ import annotations

from fractions import Fraction

from tiny_qsim.errors import FindApproximationError, FindApproximationErrorCode


def find_greatest_common_divisor(a: int, b: int) -> int:
    """
    Euclid's algorithm with a truncated remainder (sign of the dividend).

    The sign of the result is the sign of the last non-zero remainder, so
    ``(1071, -462)`` gives ``-21`` while ``(-1071, 462)`` gives ``21``.

    Examples
    --------
    >>> find_greatest_common_divisor(252, 105)
    21
    >>> find_greatest_common_divisor(1071, -462)
    -21
    """
    while b != 0:
        remainder = abs(a) % abs(b)
        if a < 0:
            remainder = -remainder
        a, b = b, remainder
    return a


def find_approximation(value: Fraction, limit: Fraction, inclusive: bool = False) -> Fraction:
    """
    Continued fraction approximation of ``value``.

    Convergents are generated until one is closer to ``value`` than
    ``limit`` (or exactly ``limit`` away when ``inclusive``).

    Parameters
    ----------
    value : Fraction
        Number to approximate, bigger than zero.
    limit : Fraction
        Maximum distance between ``value`` and the result, bigger than zero.
    inclusive : bool
        Accept a convergent whose distance equals ``limit``.

    Returns
    -------
    Fraction
        First convergent close enough to ``value``.

    Raises
    ------
    FindApproximationError
        If ``value`` or ``limit`` are not bigger than zero.

    Examples
    --------
    >>> find_approximation(Fraction(15, 11), Fraction(1, 30))
    Fraction(4, 3)
    """
    value = Fraction(value)
    limit = Fraction(limit)
    if value <= 0:
        raise FindApproximationError(FindApproximationErrorCode.VALUE_HAS_TO_BE_BIGGER_THAN_ZERO)
    if limit <= 0:
        raise FindApproximationError(FindApproximationErrorCode.LIMIT_HAS_TO_BE_BIGGER_THAN_ZERO)

    def close_enough(candidate: Fraction) -> bool:
        distance = abs(value - candidate)
        return distance <= limit if inclusive else distance < limit

    numerators = (0, 1)
    denominators = (1, 0)
    dividend, divisor = value.numerator, value.denominator

    result = Fraction(0)
    while not close_enough(result):
        quotient, remainder = divmod(dividend, divisor)
        dividend, divisor = divisor, remainder

        numerator = quotient * numerators[1] + numerators[0]
        denominator = quotient * denominators[1] + denominators[0]
        numerators = (numerators[1], numerator)
        denominators = (denominators[1], denominator)
        result = Fraction(numerator, denominator)

    return result
