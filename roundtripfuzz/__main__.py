"""CLI entry point for roundtripfuzz."""

import sys
import argparse
import logging
from pathlib import Path

from .config import EmptyMapPolicy, FuzzConfig
from .errors import InvariantViolation
from .fuzzer import default_fuzzer, random_inputs
from .schema import SchemaValidator


def read_inputs(paths):
    """Replay inputs from files; the first byte selects the type."""
    for path in paths:
        data = path.read_bytes()
        if data:
            yield data[1:], data[0]


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Round-trip fuzz serializable objects through their codecs',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 1000 seeded random iterations through both codecs
  python -m roundtripfuzz -n 1000 --seed 42

  # Only the textual codec, with a run configuration
  python -m roundtripfuzz --config run.json --codec json

  # Replay crash inputs
  python -m roundtripfuzz crash-1234 crash-5678
        """
    )

    parser.add_argument('inputs', type=Path, nargs='*',
                        help='Input files to replay instead of random inputs')
    parser.add_argument('--config', type=Path, default=None,
                        help='Path to a run configuration JSON file')
    parser.add_argument('-n', '--iterations', type=int, default=None,
                        help='Number of random iterations (default: 100)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for reproducibility')
    parser.add_argument('--input-size', type=int, default=None,
                        help='Bytes per random input (default: 4096)')
    parser.add_argument('--codec', action='append', choices=['json', 'msgpack'], default=None,
                        help='Codec to verify (repeatable, default: all)')
    parser.add_argument('--empty-maps', choices=[p.value for p in EmptyMapPolicy], default=None,
                        help='Normalization for maps that end up empty (default: absent)')
    parser.add_argument('-c', '--customizers', type=Path, default=None,
                        help='Path to Python file with extra customizer functions')
    parser.add_argument('-q', '--quiet', action='store_true',
                        help='Suppress progress output')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Debug logging')

    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    config = FuzzConfig()
    if args.config is not None:
        if not args.config.exists():
            print(f"ERROR: Configuration file not found: {args.config}")
            sys.exit(1)
        try:
            SchemaValidator().load(args.config, config)
        except ValueError as e:
            print(f"ERROR: {e}")
            sys.exit(1)

    if args.iterations is not None:
        config.iterations = args.iterations
    if args.seed is not None:
        config.seed = args.seed
    if args.input_size is not None:
        config.input_size = args.input_size
    if args.codec:
        config.codecs = args.codec
    if args.empty_maps is not None:
        config.empty_maps = EmptyMapPolicy(args.empty_maps)
    if args.customizers is not None:
        config.customizers_file = args.customizers

    if config.customizers_file is not None and not config.customizers_file.exists():
        print(f"ERROR: Customizers file not found: {config.customizers_file}")
        sys.exit(1)
    for path in args.inputs:
        if not path.exists():
            print(f"ERROR: Input file not found: {path}")
            sys.exit(1)

    config.verbose = not args.quiet and sys.stdout.isatty()

    fuzzer = default_fuzzer(config)
    inputs = read_inputs(args.inputs) if args.inputs else random_inputs(config)
    try:
        summary = fuzzer.run(inputs)
    except InvariantViolation as e:
        print(f"\nINVARIANT VIOLATION: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
    sys.exit(0 if summary.iterations > 0 else 1)


if __name__ == '__main__':
    main()
