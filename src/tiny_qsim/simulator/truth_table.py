"""Fixed-width truth-table entries for oracle gates."""

from __future__ import annotations

from dataclasses import dataclass

from tiny_qsim.errors import GateError, GateErrorCode


@dataclass(frozen=True)
class TruthTableEntry:
    """
    Bit pattern over ``width`` controls, stored as an integer.

    The first character of the source string is the most significant bit,
    i.e. it refers to the first control.
    """

    value: int
    width: int

    @classmethod
    def parse(cls, truth: str, truth_count: int) -> TruthTableEntry:
        """
        Build an entry from a bit string for ``truth_count`` controls.

        Shorter strings are left-padded with zeros. Longer strings lose their
        leading characters, which must then be zeros.

        Raises
        ------
        GateError
            ``GATE_TRUTH_TABLE_ENTRIES_HAVE_TO_BE_NON_EMPTY_STRINGS_COMPOSED_ONLY_OF_ZEROS_AND_ONES``
            or ``GATE_TRUTH_TABLE_CAN_NOT_BE_REPRESENTED_WITH_GIVEN_CONTROL_COUNT``.
        """
        if not truth:
            raise GateError(
                GateErrorCode.GATE_TRUTH_TABLE_ENTRIES_HAVE_TO_BE_NON_EMPTY_STRINGS_COMPOSED_ONLY_OF_ZEROS_AND_ONES
            )
        if truth_count <= 0:
            raise GateError(GateErrorCode.GATE_TRUTH_TABLE_CAN_NOT_BE_REPRESENTED_WITH_GIVEN_CONTROL_COUNT)

        excess = len(truth) - truth_count
        if excess > 0:
            for char in truth[:excess]:
                if char == "1":
                    raise GateError(
                        GateErrorCode.GATE_TRUTH_TABLE_CAN_NOT_BE_REPRESENTED_WITH_GIVEN_CONTROL_COUNT
                    )
                if char != "0":
                    raise GateError(
                        GateErrorCode.GATE_TRUTH_TABLE_ENTRIES_HAVE_TO_BE_NON_EMPTY_STRINGS_COMPOSED_ONLY_OF_ZEROS_AND_ONES
                    )
            truth = truth[excess:]

        if any(char not in "01" for char in truth):
            raise GateError(
                GateErrorCode.GATE_TRUTH_TABLE_ENTRIES_HAVE_TO_BE_NON_EMPTY_STRINGS_COMPOSED_ONLY_OF_ZEROS_AND_ONES
            )

        return cls(int(truth, 2), truth_count)

    def __add__(self, other: TruthTableEntry) -> TruthTableEntry:
        if not isinstance(other, TruthTableEntry):
            return NotImplemented
        return TruthTableEntry((self.value << other.width) | other.value, self.width + other.width)

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return format(self.value, "b").zfill(self.width)

    def activated_bits(self) -> int:
        """Mask over the control index bits that have to be 1."""
        return self.value

    def deactivated_bits(self) -> int:
        """Mask over the control index bits that have to be 0."""
        return ((1 << self.width) - 1) & ~self.value
