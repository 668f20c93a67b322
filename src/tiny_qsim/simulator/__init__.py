"""Gate validation and the matrix views used to apply gates."""

from tiny_qsim.simulator.components import (
    extract_circuit_matrix,
    extract_components,
    extract_kraus_matrices,
    extract_matrix,
)
from tiny_qsim.simulator.matrices import (
    CircuitSimulatorMatrix,
    ControlledSimulatorMatrix,
    GateSimulatorMatrix,
    OracleSimulatorMatrix,
    SimulatorGateMatrix,
)
from tiny_qsim.simulator.truth_table import TruthTableEntry

__all__ = [
    "CircuitSimulatorMatrix",
    "ControlledSimulatorMatrix",
    "GateSimulatorMatrix",
    "OracleSimulatorMatrix",
    "SimulatorGateMatrix",
    "TruthTableEntry",
    "extract_circuit_matrix",
    "extract_components",
    "extract_kraus_matrices",
    "extract_matrix",
]
