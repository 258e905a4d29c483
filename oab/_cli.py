"""OAB command-line interface.

Usage:
    echo '[1, {"a": true}]' | python3 -m oab encode [--format hex|base64]
    echo '0801090101016101' | python3 -m oab decode
    python3 -m oab encode --dictionary keys.json --input message.json
    python3 -m oab version

The dictionary file is a JSON array of strings.  Pass the same file (and
the same --ascii flag) to encode and decode.
"""

from __future__ import annotations

import argparse
import base64
import logging
import sys
from typing import List, Optional

from . import (
    EMPTY_DICTIONARY,
    KeyDictionary,
    OabError,
    __version__,
    decode,
    encode,
    json_to_value,
    load_dictionary,
    value_to_json,
)

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="oab",
        description="OAB v1 — compact binary encoding for tree-shaped data",
    )
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log codec diagnostics to stderr")
    sub = parser.add_subparsers(dest="command")

    def add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument("--input", "-i", metavar="FILE",
                       help="Read from FILE instead of stdin")
        p.add_argument("--dictionary", "-d", metavar="FILE",
                       help="JSON array of shared map keys")
        p.add_argument("--ascii", action="store_true",
                       help="One byte per character instead of UTF-8")
        p.add_argument("--format", "-f", choices=("hex", "base64"), default="hex",
                       help="Text form of the binary side (default: hex)")

    # ── encode ──
    enc_p = sub.add_parser("encode", help="JSON in, encoded bytes out")
    add_common(enc_p)

    # ── decode ──
    dec_p = sub.add_parser("decode", help="Encoded bytes in, JSON out")
    add_common(dec_p)
    dec_p.add_argument("--indent", type=int, default=None,
                       help="Pretty-print JSON with this indent")

    # ── version ──
    sub.add_parser("version", help="Print version and exit")

    return parser


def _read_input(filepath: Optional[str]) -> bytes:
    """Read bytes from a file or stdin."""
    if filepath:
        with open(filepath, "rb") as f:
            return f.read()
    if sys.stdin.isatty():
        print("oab: reading from stdin (Ctrl-D to end)...", file=sys.stderr)
    return sys.stdin.buffer.read()


def _load_dictionary(filepath: Optional[str]) -> KeyDictionary:
    if not filepath:
        return EMPTY_DICTIONARY
    with open(filepath, "rb") as f:
        dictionary = load_dictionary(f.read())
    logger.debug("loaded %d dictionary key(s) from %s", len(dictionary), filepath)
    return dictionary


def _cmd_encode(args: argparse.Namespace) -> None:
    value = json_to_value(_read_input(args.input))
    data = encode(value, dictionary=_load_dictionary(args.dictionary),
                  ascii_only=args.ascii, warn_unknown_keys=args.verbose)
    if args.format == "base64":
        print(base64.b64encode(data).decode("ascii"))
    else:
        print(data.hex())


def _cmd_decode(args: argparse.Namespace) -> None:
    text = _read_input(args.input).decode("ascii").strip()
    if args.format == "base64":
        data = base64.b64decode(text, validate=True)
    else:
        data = bytes.fromhex(text)
    value = decode(data, dictionary=_load_dictionary(args.dictionary),
                   ascii_only=args.ascii)
    print(value_to_json(value, indent=args.indent))


def main(argv: Optional[List[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="oab: %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "version":
        print(f"oab {__version__}")
        return

    try:
        if args.command == "encode":
            _cmd_encode(args)
        elif args.command == "decode":
            _cmd_decode(args)
    except OabError as e:
        print(f"oab: error [{e.code}]: {e}", file=sys.stderr)
        sys.exit(2)
    except ValueError as e:
        # Malformed hex/base64 or non-ASCII input on the decode side.
        print(f"oab: bad input: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
