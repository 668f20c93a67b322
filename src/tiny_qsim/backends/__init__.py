"""Simulation backends for tiny-qsim."""

from tiny_qsim.backends.density_matrix import (
    DensityMatrixSimulator,
    MatrixDensityMatrixTransformation,
    RowDensityMatrixTransformation,
)
from tiny_qsim.backends.statevector import (
    DirectStatevectorTransformation,
    ElementStatevectorTransformation,
    MatrixStatevectorTransformation,
    RowStatevectorTransformation,
    StatevectorSimulator,
    StatevectorTimeEvolution,
)
from tiny_qsim.backends.unitary import UnitarySimulator

__all__ = [
    "DensityMatrixSimulator",
    "DirectStatevectorTransformation",
    "ElementStatevectorTransformation",
    "MatrixDensityMatrixTransformation",
    "MatrixStatevectorTransformation",
    "RowDensityMatrixTransformation",
    "RowStatevectorTransformation",
    "StatevectorSimulator",
    "StatevectorTimeEvolution",
    "UnitarySimulator",
]
