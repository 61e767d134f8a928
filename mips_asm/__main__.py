# mips_asm/__main__.py
"""Command-line assembler.

Usage:
    python -m mips_asm [input.asm] [-o output.bin] [-f bin|hex] [-v]

Reads standard input when no input file is given and writes the big-endian
word stream to standard output when no output file is given.
"""
import argparse
import logging
import sys

from mips_asm.mips_assembler import MipsAssembler
from mips_asm.mips_encoder import words_to_bytes
from mips_asm.mips_errors import AssemblerError

EXIT_OK = 0
EXIT_ERROR = 1


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog='mips_asm', description='MIPS assembler')
    parser.add_argument('input', nargs='?', help='Input assembly file (default: stdin)')
    parser.add_argument('-o', '--output', help='Output file (default: stdout)')
    parser.add_argument('-f', '--format', choices=['bin', 'hex'], default='bin',
                        help='Raw big-endian words or one hex word per line')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log tokens and symbols to stderr')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        if args.input:
            with open(args.input, 'r', encoding='utf-8') as f:
                source = f.read()
        else:
            source = sys.stdin.read()
    except OSError as e:
        print(f"ERROR: Could not open file \"{args.input}\" for reading: {e}", file=sys.stderr)
        return EXIT_ERROR
    except UnicodeDecodeError as e:
        print(f"ERROR: Input is not valid UTF-8 text: {e}", file=sys.stderr)
        return EXIT_ERROR

    try:
        words = MipsAssembler().run(source)
    except AssemblerError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_ERROR

    if args.format == 'hex':
        output = "".join(f"0x{w:08x}\n" for w in words).encode('ascii')
    else:
        output = words_to_bytes(words)

    if args.output:
        with open(args.output, 'wb') as f:
            f.write(output)
    else:
        sys.stdout.buffer.write(output)
        sys.stdout.buffer.flush()
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
