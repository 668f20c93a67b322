"""Example: Bell state on tiny-qsim, ideal and with a noisy qubit."""
import sys
sys.path.insert(0, 'src')

from tiny_qsim import CircuitFactory, NoiseCircuitFactory, StatevectorConfiguration, draw_circuit, noise
from tiny_qsim.drawer import probabilities_ascii
from tiny_qsim.gates import Hadamard, controlled_not

print("=" * 50)
print("tiny-qsim: Bell State Example")
print("=" * 50)

gates = [Hadamard(0), controlled_not(target=1, control=0)]
print()
print(draw_circuit(gates, qubit_count=2))

circuit = CircuitFactory(StatevectorConfiguration.row(max_concurrency=2)).make_circuit(gates)
print()
print(probabilities_ascii(circuit.summarized_probabilities()))

noisy = NoiseCircuitFactory().make_noise_circuit(gates + [noise.bit_flip(0.1, 1)])
density_matrix = noisy.density_matrix()
print()
print(probabilities_ascii(density_matrix.summarized_probabilities()))
print(f"\nPurity: {density_matrix.purity():.3f}")

print("\nExpected: 50% |00⟩ and 50% |11⟩ (entangled!), some |01⟩/|10⟩ once qubit 1 flips")
