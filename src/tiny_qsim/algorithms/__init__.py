"""
Classical and hybrid algorithms around the simulator.

- decomposition: rewrite any gate as elementary gates
- number_theory: GCD and continued fractions for Shor
- xor_gaussian_elimination: XOR systems for Simon
- genetic: fitness evaluation for circuit discovery
"""
from .decomposition import (
    CosineSineDecompositionSolver,
    TwoLevelDecompositionSolver,
    decompose_gates,
)
from .genetic import (
    Evaluation,
    GeneticCircuitEvaluator,
    GeneticUseCase,
    GeneticUseCaseEvaluator,
    UseCaseOracle,
)
from .number_theory import find_approximation, find_greatest_common_divisor
from .xor_gaussian_elimination import find_activated_variables_in_equations

__all__ = [
    'CosineSineDecompositionSolver',
    'TwoLevelDecompositionSolver',
    'decompose_gates',
    'Evaluation',
    'GeneticCircuitEvaluator',
    'GeneticUseCase',
    'GeneticUseCaseEvaluator',
    'UseCaseOracle',
    'find_approximation',
    'find_greatest_common_divisor',
    'find_activated_variables_in_equations',
]
