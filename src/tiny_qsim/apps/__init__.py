"""
Quantum algorithms built on the simulator.

- Deutsch: constant or balanced one-bit function
- Simon: hidden XOR mask of a two-to-one function
- Shor: factoring through period finding
"""
from .deutsch import deutsch_circuit, is_balanced
from .simon import find_hidden_string, simon_circuit, simon_function
from .shor import ShorResult, factor, shor_circuit

__all__ = [
    # Deutsch
    'deutsch_circuit', 'is_balanced',
    # Simon
    'find_hidden_string', 'simon_circuit', 'simon_function',
    # Shor
    'ShorResult', 'factor', 'shor_circuit',
]
