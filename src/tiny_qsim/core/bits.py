"""
Bit-level helpers shared by the simulators and the decomposition solver.

Qubit ``q`` is bit ``q`` of a basis index. Functions accept plain ints and,
where it makes sense, numpy integer arrays so whole index tables can be
rearranged at once.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence


# Largest origin whose mask still fits in a signed 64-bit word
_MAX_ORIGIN = 62


@dataclass(frozen=True)
class BitwiseShift:
    """
    Move the bit at ``origin`` to ``destination``.

    Examples
    --------
    >>> BitwiseShift(origin=4, destination=2).perform(16)
    4
    """

    origin: int
    destination: int
    select_mask: int = field(init=False, repr=False)
    places_to_the_right: int = field(init=False, repr=False)

    def __post_init__(self):
        mask = (1 << self.origin) if 0 <= self.origin <= _MAX_ORIGIN else 0
        object.__setattr__(self, "select_mask", mask)
        object.__setattr__(self, "places_to_the_right", self.origin - self.destination)

    def perform(self, value):
        selected = value & self.select_mask
        if self.places_to_the_right >= 0:
            return selected >> self.places_to_the_right
        return selected << -self.places_to_the_right


def rearrange_bits(shifts: Iterable[BitwiseShift], value):
    """OR together every shift applied to ``value``."""
    result = value & 0
    for shift in shifts:
        result = result | shift.perform(value)
    return result


def mask(bits: Iterable[int]) -> int:
    """Integer with exactly the given bit positions set."""
    result = 0
    for bit in bits:
        result |= 1 << bit
    return result


def gray_codes(bit_count: int) -> list[int]:
    """Reflected binary code over ``bit_count`` bits, ``2**bit_count`` entries."""
    return [i ^ (i >> 1) for i in range(2 ** bit_count)]


def activated_bits(value: int, bit_count: int) -> list[int]:
    """Positions (least significant first) of the bits set in ``value``."""
    return [bit for bit in range(bit_count) if value & (1 << bit)]


def bits_string(value: int, qubits: Sequence[int]) -> str:
    """One character per listed qubit, in list order."""
    return "".join("1" if value & (1 << qubit) else "0" for qubit in qubits)


def bit_count_string(value: int, bit_count: int) -> str:
    """Most-significant-first binary representation, zero padded."""
    return format(value, "b").zfill(bit_count)[-bit_count:] if bit_count > 0 else ""


def is_bit_string(value: str) -> bool:
    return all(char in "01" for char in value)
