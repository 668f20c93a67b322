"""
Runtime configuration for tiny-qsim.

Module-level settings are read once from environment variables:

    TINY_QSIM_TOLERANCE        absolute tolerance for numeric invariants (0.001)
    TINY_QSIM_LOG_LEVEL        default log level (WARNING)
    TINY_QSIM_LOG_FORMAT       logging format string
    TINY_QSIM_MAX_CONCURRENCY  default worker count for transformations (1)

The engine configurations below pick which transformation a circuit factory
builds and how many workers it may use.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum

from tiny_qsim.errors import TransformationInitError, TransformationInitErrorCode

TOLERANCE = float(os.getenv("TINY_QSIM_TOLERANCE", "0.001"))
LOG_LEVEL = os.getenv("TINY_QSIM_LOG_LEVEL", "WARNING")
LOG_FORMAT = os.getenv(
    "TINY_QSIM_LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
MAX_CONCURRENCY = int(os.getenv("TINY_QSIM_MAX_CONCURRENCY", "1"))


def validate_concurrency(value: int, code: TransformationInitErrorCode) -> int:
    """Return ``value`` if it is a valid worker count, raise otherwise."""
    if value <= 0:
        raise TransformationInitError(code, f"concurrency has to be bigger than zero, got {value}")
    return value


# ---------------------------------------------------------------------------
# Statevector engine
# ---------------------------------------------------------------------------

class StatevectorStrategy(Enum):
    """How a statevector is updated after each gate."""

    DIRECT = "direct"
    MATRIX = "matrix"
    ROW = "row"
    ELEMENT = "element"


@dataclass(frozen=True)
class StatevectorConfiguration:
    """
    Statevector transformation selected by a circuit factory.

    Attributes
    ----------
    strategy : StatevectorStrategy
        ``DIRECT`` recomputes each amplitude from the gate matrix through bit
        manipulation. ``MATRIX`` expands the circuit-wide matrix and multiplies.
        ``ROW`` builds one circuit-wide row per amplitude. ``ELEMENT`` looks up
        each circuit-wide element on demand.
    max_concurrency : int
        Workers used to calculate the statevector.
    expansion_concurrency : int
        Workers used to expand the circuit-wide matrix (``MATRIX``).
    """

    strategy: StatevectorStrategy = StatevectorStrategy.DIRECT
    max_concurrency: int = MAX_CONCURRENCY
    expansion_concurrency: int = MAX_CONCURRENCY

    def __post_init__(self):
        validate_concurrency(
            self.max_concurrency,
            TransformationInitErrorCode.MAX_CONCURRENCY_HAS_TO_BE_BIGGER_THAN_ZERO,
        )
        validate_concurrency(
            self.expansion_concurrency,
            TransformationInitErrorCode.EXPANSION_CONCURRENCY_HAS_TO_BE_BIGGER_THAN_ZERO,
        )

    @classmethod
    def direct(cls, max_concurrency: int = 1) -> StatevectorConfiguration:
        return cls(StatevectorStrategy.DIRECT, max_concurrency=max_concurrency)

    @classmethod
    def matrix(cls, expansion_concurrency: int = 1) -> StatevectorConfiguration:
        return cls(StatevectorStrategy.MATRIX, expansion_concurrency=expansion_concurrency)

    @classmethod
    def row(cls, max_concurrency: int = 1) -> StatevectorConfiguration:
        return cls(StatevectorStrategy.ROW, max_concurrency=max_concurrency)

    @classmethod
    def element(cls, max_concurrency: int = 1) -> StatevectorConfiguration:
        return cls(StatevectorStrategy.ELEMENT, max_concurrency=max_concurrency)


# ---------------------------------------------------------------------------
# Density matrix engine
# ---------------------------------------------------------------------------

class DensityMatrixStrategy(Enum):
    """How a density matrix is updated after each quantum operator."""

    MATRIX = "matrix"
    ROW = "row"


@dataclass(frozen=True)
class DensityMatrixConfiguration:
    """Density matrix transformation selected by a noise circuit factory."""

    strategy: DensityMatrixStrategy = DensityMatrixStrategy.MATRIX
    calculation_concurrency: int = MAX_CONCURRENCY
    expansion_concurrency: int = MAX_CONCURRENCY

    def __post_init__(self):
        validate_concurrency(
            self.calculation_concurrency,
            TransformationInitErrorCode.CALCULATION_CONCURRENCY_HAS_TO_BE_BIGGER_THAN_ZERO,
        )
        validate_concurrency(
            self.expansion_concurrency,
            TransformationInitErrorCode.EXPANSION_CONCURRENCY_HAS_TO_BE_BIGGER_THAN_ZERO,
        )

    @classmethod
    def matrix(cls, expansion_concurrency: int = 1) -> DensityMatrixConfiguration:
        return cls(DensityMatrixStrategy.MATRIX, expansion_concurrency=expansion_concurrency)

    @classmethod
    def row(cls, calculation_concurrency: int = 1,
            expansion_concurrency: int = 1) -> DensityMatrixConfiguration:
        return cls(
            DensityMatrixStrategy.ROW,
            calculation_concurrency=calculation_concurrency,
            expansion_concurrency=expansion_concurrency,
        )
