"""
tiny-qsim: a classical simulator for quantum circuits.

Features:
- Gates: not, hadamard, phase shift, rotations, arbitrary matrices,
  oracles and controlled gates (nested at will)
- Statevector simulation with interchangeable transformations
- Unitary and density matrix (Kraus noise) simulation
- Two-level decomposition of any gate into elementary gates
- Deutsch, Simon and Shor on top of the simulator

Quick Start:
    >>> from tiny_qsim import CircuitFactory, gates
    >>> circuit = CircuitFactory().make_circuit([gates.Hadamard(0), gates.controlled_not(1, 0)])
    >>> circuit.statevector().summarized_probabilities()  # {'00': ~0.5, '11': ~0.5}

Noise:
    >>> from tiny_qsim import NoiseCircuitFactory, noise
    >>> circuit = NoiseCircuitFactory().make_noise_circuit([gates.Hadamard(0), noise.phase_flip(0.1, 0)])
    >>> circuit.density_matrix().purity()
"""
__version__ = "1.0.0"

# Core components
from . import gates, noise
from .circuit import (
    Circuit,
    CircuitDensityMatrix,
    CircuitFactory,
    CircuitStatevector,
    GroupedProbability,
    NoiseCircuit,
    NoiseCircuitFactory,
)
from .config import (
    DensityMatrixConfiguration,
    DensityMatrixStrategy,
    StatevectorConfiguration,
    StatevectorStrategy,
)
from .errors import SimulationError

# Algorithms and drawing
from .algorithms import decompose_gates
from .drawer import draw_circuit

# Make apps accessible
from . import apps

__all__ = [
    # Core
    'Circuit',
    'CircuitDensityMatrix',
    'CircuitFactory',
    'CircuitStatevector',
    'GroupedProbability',
    'NoiseCircuit',
    'NoiseCircuitFactory',
    'gates',
    'noise',
    # Configuration
    'DensityMatrixConfiguration',
    'DensityMatrixStrategy',
    'StatevectorConfiguration',
    'StatevectorStrategy',
    # Errors
    'SimulationError',
    # Algorithms and drawing
    'decompose_gates',
    'draw_circuit',
    # Submodules
    'apps',
]
