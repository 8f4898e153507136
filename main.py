import argparse
import logging
import sys

from typing import List, Optional, Sequence
from bitops import pack_bits
from coder import HuffmanCoder
from errors import HuffmanError
from huffman import TieBreak

DEFAULT_TEXT = "abacabad"  #: Message used when no input is given

logger = logging.getLogger(__name__)


def get_parser():
    """Create and configure the CLI argument parser.

    :returns: Configured argument parser.
    :rtype: argparse.ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Huffman coder: build codes, encode and decode a message"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress (-v for info, -vv for debug)",
    )
    subparsers = parser.add_subparsers(
        title="subcommands", dest="cmd", required=True
    )

    codes = subparsers.add_parser(
        "codes", aliases=["c"], help="Show symbol frequencies and codes"
    )
    roundtrip = subparsers.add_parser(
        "roundtrip",
        aliases=["r"],
        help="Encode the message, decode it back and compare",
    )
    for sub in (codes, roundtrip):
        sub.add_argument(
            "text",
            nargs="?",
            default=DEFAULT_TEXT,
            help=f"Message to encode (default: {DEFAULT_TEXT})",
        )
        sub.add_argument(
            "-f",
            "--file",
            help="Read the message from a file as raw bytes instead",
        )
        sub.add_argument(
            "--tie-break",
            choices=[policy.value for policy in TieBreak],
            default=TieBreak.INSERTION.value,
            help="Order of equal-frequency nodes (default: insertion)",
        )

    return parser


def _configure_logging(verbosity: int) -> None:
    """Set the root log level from the number of ``-v`` flags.

    :param verbosity: How many times ``-v`` was given.
    :type verbosity: int
    :returns: None
    :rtype: None
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level, format="%(levelname)s %(name)s: %(message)s"
    )


def _read_message(args) -> Sequence:
    """Return the message selected on the command line.

    :returns: File contents as ``bytes`` if ``--file`` was given, the
        positional text otherwise.
    :raises OSError: If ``--file`` cannot be opened or read.
    """
    if args.file:
        with open(args.file, "rb") as f:
            return f.read()
    return args.text


def _fmt_symbol(symbol) -> str:
    """Format a symbol for display; bytes are shown as hex and character.

    :param symbol: A ``str`` character or an ``int`` byte.
    :returns: Printable representation.
    :rtype: str
    """
    if isinstance(symbol, int):
        if 32 <= symbol < 127:
            return f"0x{symbol:02x} {chr(symbol)!r}"
        return f"0x{symbol:02x}"
    return repr(symbol)


def _fmt_bytes(n: int) -> str:
    """Format a byte count into a human-readable string.

    :param n: Number of bytes.
    :type n: int
    :returns: Human-readable string.
    :rtype: str
    """
    for unit in ['', 'Ki', 'Mi', 'Gi', 'Ti']:
        if abs(n) < 1024:
            return f"{n:.2f} {unit}B"
        n /= 1024
    return f"{n:.2f} PiB"


def show_codes(message: Sequence, tie_break: str) -> None:
    """Print the frequency and code of every symbol of ``message``.

    Rows are sorted by code length, then by code.

    :raises EmptyInputError: If ``message`` is empty.
    """
    coder = HuffmanCoder.from_data(message, tie_break)
    rows = sorted(coder.codes.items(), key=lambda kv: (len(kv[1]), kv[1]))
    width = max(len(_fmt_symbol(symbol)) for symbol, _ in rows)
    for symbol, code in rows:
        print(
            f"{_fmt_symbol(symbol):<{width}}  "
            f"{coder.frequencies[symbol]:>8}  {code}"
        )
    stats = coder.stats(message)
    print(f"Average code length: {stats.average_code_length:.3f} bits")


def run_roundtrip(message: Sequence, tie_break: str) -> bool:
    """Encode ``message``, decode it with the same tree and compare.

    Both the bit string and its packed bytes are decoded back.

    :returns: ``True`` if both decodings equal the original.
    :rtype: bool
    :raises HuffmanError: If encoding or decoding fails.
    """
    coder = HuffmanCoder.from_data(message, tie_break)
    bits = coder.encode(message)
    decoded = coder.decode(bits, like=message)
    payload, bit_length = pack_bits(bits)
    unpacked = coder.decode_packed(payload, bit_length, like=message)
    logger.info("Encoded %d symbols into %d bits", len(message), bit_length)

    if len(bits) <= 256:
        print("Encoded:", bits)
        print("Decoded:", decoded)
    ok = decoded == message and unpacked == message
    print("Success!" if ok else "Error!")

    stats = coder.stats(message, bits)
    print("Encoded size: ", f"{stats.encoded_bits} bits",
          f"({_fmt_bytes(len(payload))} packed)")
    print("Fixed-width size: ", f"{stats.fixed_width_bits} bits")
    print(f"Compression ratio: {stats.ratio:.2f}")
    return ok


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI tool.

    :param argv: Arguments to parse instead of ``sys.argv[1:]``.
    :type argv: Optional[List[str]]
    :returns: Process exit status.
    :rtype: int
    """
    parser = get_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        message = _read_message(args)
    except FileNotFoundError:
        print(f"[!] Input file not found: {args.file}")
        return 1
    except OSError as e:
        print(f"[!] Cannot read input file: {args.file} ({e.strerror})")
        return 1

    try:
        if args.cmd in ["codes", "c"]:
            show_codes(message, args.tie_break)
        elif args.cmd in ["roundtrip", "r"]:
            if not run_roundtrip(message, args.tie_break):
                return 1
    except HuffmanError as e:
        print(f"[!] {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
