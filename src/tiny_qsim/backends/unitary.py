"""
Unitary simulation backend.

Accumulates the 2^n x 2^n matrix of a whole circuit, ``U = G_k ... G_1``,
expanding each gate to circuit scale through ``CircuitSimulatorMatrix``.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from tiny_qsim import config
from tiny_qsim.core.linalg import Matrix, is_approximately_unitary
from tiny_qsim.errors import GateError, TransformationInitErrorCode, UnitaryError, UnitaryErrorCode
from tiny_qsim.gates import Gate
from tiny_qsim.simulator.components import extract_circuit_matrix


class UnitarySimulator:
    """
    Parameters
    ----------
    expansion_concurrency : int
        Workers used to expand each gate to circuit scale.
    logger : logging.Logger, optional
        Receives per-gate diagnostics.
    """

    def __init__(self, expansion_concurrency: int = 1, logger: logging.Logger | None = None):
        self.expansion_concurrency = config.validate_concurrency(
            expansion_concurrency,
            TransformationInitErrorCode.EXPANSION_CONCURRENCY_HAS_TO_BE_BIGGER_THAN_ZERO,
        )
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    def unitary(self, gates: Sequence[Gate], qubit_count: int) -> Matrix:
        """
        Unitary matrix of ``gates`` on a ``qubit_count``-qubit register.

        Raises
        ------
        UnitaryError
            ``CIRCUIT_CAN_NOT_BE_AN_EMPTY_LIST``, ``GATE_RAISED_ERROR`` (with the
            failing gate and its ``GateError``) or ``RESULTING_MATRIX_IS_NOT_UNITARY``.
        """
        if not gates:
            raise UnitaryError(UnitaryErrorCode.CIRCUIT_CAN_NOT_BE_AN_EMPTY_LIST)

        result = None
        for index, gate in enumerate(gates):
            try:
                circuit_matrix = extract_circuit_matrix(gate, qubit_count)
            except GateError as e:
                self.logger.debug("Gate %d (%r) failed: %s", index, gate, e.code.name)
                raise UnitaryError(UnitaryErrorCode.GATE_RAISED_ERROR, gate=gate, error=e) from e

            expanded = circuit_matrix.expanded_raw_matrix(self.expansion_concurrency)
            result = expanded if result is None else expanded @ result
            self.logger.debug("Accumulated gate %d: %r", index, gate)

        if not is_approximately_unitary(result):
            raise UnitaryError(UnitaryErrorCode.RESULTING_MATRIX_IS_NOT_UNITARY)
        return np.asarray(result, dtype=np.complex128)
