"""
Command-line interface for tiny-qsim.

Usage:
    tiny-qsim deutsch --truth-table 1
    tiny-qsim simon --secret 110
    tiny-qsim shor --number 15 --base 7
    tiny-qsim decompose --qubits 2 --seed 7
    tiny-qsim draw --truth-table 0
    tiny-qsim info
"""
import argparse
import time
from pathlib import Path

from scipy.stats import unitary_group


def cmd_deutsch(args):
    """Classify a one-bit function as constant or balanced."""
    from ..apps import deutsch_circuit, is_balanced
    from ..circuit import CircuitFactory
    from ..drawer import probabilities_ascii

    factory = CircuitFactory(_statevector_configuration(args))
    truth_table = args.truth_table
    print(f"Truth table: {truth_table}")

    circuit = factory.make_circuit(deutsch_circuit(truth_table))
    print(probabilities_ascii(circuit.summarized_probabilities(initial_bits="01")))

    kind = "balanced" if is_balanced(truth_table, factory) else "constant"
    print(f"\nResult: f is {kind}")


def cmd_simon(args):
    """Recover the hidden string of a two-to-one function."""
    from ..apps import find_hidden_string
    from ..circuit import CircuitFactory

    print(f"Running Simon's algorithm on {2 * len(args.secret)} qubits...")
    start = time.time()
    found = find_hidden_string(args.secret, CircuitFactory(_statevector_configuration(args)))
    elapsed = time.time() - start

    print(f"\nResult:")
    print(f"  Hidden string: {found}")
    print(f"  Time: {elapsed:.2f}s")


def cmd_shor(args):
    """Factor a small odd number."""
    from ..apps import factor
    from ..circuit import CircuitFactory

    qubits = 3 * args.number.bit_length()
    print(f"Factoring {args.number} with base {args.base} ({qubits} qubits)...")

    start = time.time()
    result = factor(args.number, args.base, CircuitFactory(_statevector_configuration(args)))
    elapsed = time.time() - start

    print(f"\nResult:")
    if result.factors is None:
        print("  No valid period found, try another base")
    else:
        if result.period is not None:
            print(f"  Measured: {result.measurement}")
            print(f"  Period: {result.period}")
        print(f"  Factors: {result.factors[0]} x {result.factors[1]}")
    print(f"  Time: {elapsed:.2f}s")


def cmd_decompose(args):
    """Decompose a random unitary into elementary gates."""
    from ..algorithms import decompose_gates
    from ..circuit import CircuitFactory
    from ..core.linalg import is_approximately_equal
    from ..gates import MatrixGate

    inputs = list(reversed(range(args.qubits)))
    matrix = unitary_group.rvs(2 ** args.qubits, random_state=args.seed)
    gate = MatrixGate(matrix, inputs)

    start = time.time()
    decomposition = decompose_gates([gate])
    elapsed = time.time() - start

    factory = CircuitFactory()
    original = factory.make_circuit([gate]).unitary()
    rebuilt = factory.make_circuit(decomposition).unitary(args.qubits)

    print(f"Random {2 ** args.qubits}x{2 ** args.qubits} unitary (seed={args.seed})")
    print(f"  Elementary gates: {len(decomposition)}")
    print(f"  Same unitary: {is_approximately_equal(original, rebuilt)}")
    print(f"  Time: {elapsed:.2f}s")


def cmd_draw(args):
    """Draw the Deutsch circuit."""
    from ..apps import deutsch_circuit
    from ..drawer import draw_circuit

    print(draw_circuit(deutsch_circuit(args.truth_table), qubit_count=2))


def cmd_info(args):
    """Show tiny-qsim information."""
    from .. import __version__

    print(f"""
tiny-qsim v{__version__}
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

A classical simulator for quantum circuits.

Features:
  • Gates: not, hadamard, phase shift, rotations, matrix, oracle, controlled
  • Statevector strategies: direct, matrix, row, element
  • Unitary and density matrix (noise) simulation
  • Two-level decomposition into elementary gates

Algorithms:
  • Deutsch  - constant or balanced function
  • Simon    - hidden XOR mask
  • Shor     - factoring small numbers

Usage:
  tiny-qsim deutsch --truth-table 1
  tiny-qsim shor --number 15
  tiny-qsim decompose --qubits 3
""")


def _statevector_configuration(args):
    from ..config import StatevectorConfiguration, StatevectorStrategy

    strategy = StatevectorStrategy(args.strategy)
    if strategy is StatevectorStrategy.MATRIX:
        return StatevectorConfiguration.matrix(args.concurrency)
    if strategy is StatevectorStrategy.ROW:
        return StatevectorConfiguration.row(args.concurrency)
    if strategy is StatevectorStrategy.ELEMENT:
        return StatevectorConfiguration.element(args.concurrency)
    return StatevectorConfiguration.direct(args.concurrency)


def _add_strategy_arguments(parser):
    parser.add_argument('--strategy', default='direct',
                        choices=['direct', 'matrix', 'row', 'element'],
                        help='Statevector transformation')
    parser.add_argument('--concurrency', type=int, default=1, help='Worker threads')


def main(argv=None):
    """Main CLI entry point."""
    from ..logging_config import setup_logging

    parser = argparse.ArgumentParser(
        prog='tiny-qsim',
        description='A classical quantum circuit simulator'
    )
    parser.add_argument('--log-level', default=None,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level (default: TINY_QSIM_LOG_LEVEL or WARNING)')
    parser.add_argument('--log-file', default=None, help='Also log to this file')
    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Deutsch command
    deutsch_parser = subparsers.add_parser('deutsch', help='Constant or balanced one-bit function')
    deutsch_parser.add_argument('--truth-table', nargs='*', default=['1'], choices=['0', '1'],
                                help='Inputs for which f returns 1')
    _add_strategy_arguments(deutsch_parser)
    deutsch_parser.set_defaults(func=cmd_deutsch)

    # Simon command
    simon_parser = subparsers.add_parser('simon', help="Simon's hidden string")
    simon_parser.add_argument('--secret', default='110', help='Hidden bit string')
    _add_strategy_arguments(simon_parser)
    simon_parser.set_defaults(func=cmd_simon)

    # Shor command
    shor_parser = subparsers.add_parser('shor', help='Factor a small number')
    shor_parser.add_argument('--number', type=int, default=15, help='Odd number to factor')
    shor_parser.add_argument('--base', type=int, default=7, help='Base of the modular exponentiation')
    _add_strategy_arguments(shor_parser)
    shor_parser.set_defaults(func=cmd_shor)

    # Decompose command
    decompose_parser = subparsers.add_parser('decompose', help='Decompose a random unitary')
    decompose_parser.add_argument('--qubits', type=int, default=2, help='Qubits of the unitary')
    decompose_parser.add_argument('--seed', type=int, default=None, help='Random seed')
    decompose_parser.set_defaults(func=cmd_decompose)

    # Draw command
    draw_parser = subparsers.add_parser('draw', help='Draw the Deutsch circuit')
    draw_parser.add_argument('--truth-table', nargs='*', default=['1'], choices=['0', '1'],
                             help='Inputs for which f returns 1')
    draw_parser.set_defaults(func=cmd_draw)

    # Info command
    info_parser = subparsers.add_parser('info', help='Show tiny-qsim info')
    info_parser.set_defaults(func=cmd_info)

    args = parser.parse_args(argv)
    setup_logging(level=args.log_level, log_file=Path(args.log_file) if args.log_file else None)

    if args.command is None:
        parser.print_help()
        return

    args.func(args)


if __name__ == '__main__':
    main()
