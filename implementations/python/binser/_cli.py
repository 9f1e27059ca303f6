"""binser command-line interface.

Usage:
    python3 -m binser demo
    python3 -m binser encode --input class.json --output class.bin
    echo '{"name": "Class of 2023"}' | python3 -m binser encode
    python3 -m binser decode --input class.bin [--exact]
    python3 -m binser decode --base64 < class.b64
    python3 -m binser --align 4 demo
    python3 -m binser version

encode and decode work on SchoolClass records.  Without --output, encode
prints base64 so the result is safe to show on a terminal.
"""

from __future__ import annotations

import argparse
import base64
import binascii
import sys
from typing import List, Optional

from . import (
    ALIGN_BY,
    BinserError,
    SchoolClass,
    __version__,
    decode,
    encode,
    sample_class,
)
from ._json_adapter import record_from_json, record_to_json


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="binser",
        description="binser — bounds-checked binary serialization for nested records",
    )
    parser.add_argument("--align", type=int, default=ALIGN_BY, metavar="N",
                        help="field alignment in bytes, a power of two (default: %(default)s)")
    sub = parser.add_subparsers(dest="command")

    # ── demo ──
    sub.add_parser("demo", help="Round-trip a sample class and report the result")

    # ── encode ──
    enc_p = sub.add_parser("encode", help="Encode a JSON class to binary")
    enc_p.add_argument("--input", "-i", metavar="FILE",
                       help="Read JSON from FILE instead of stdin")
    enc_p.add_argument("--output", "-o", metavar="FILE",
                       help="Write raw bytes to FILE instead of base64 to stdout")

    # ── decode ──
    dec_p = sub.add_parser("decode", help="Decode binary to JSON")
    dec_p.add_argument("--input", "-i", metavar="FILE",
                       help="Read bytes from FILE instead of stdin")
    dec_p.add_argument("--base64", action="store_true",
                       help="Input is base64 text rather than raw bytes")
    dec_p.add_argument("--exact", action="store_true",
                       help="Reject trailing bytes after the record")

    # ── version ──
    sub.add_parser("version", help="Print version and exit")

    return parser


def _read_input(filepath: Optional[str]) -> bytes:
    """Read bytes from a file or stdin."""
    if filepath:
        with open(filepath, "rb") as f:
            return f.read()
    if sys.stdin.isatty():
        print("binser: reading from stdin (Ctrl-D to end)...", file=sys.stderr)
    return sys.stdin.buffer.read()


def _cmd_demo(args: argparse.Namespace) -> int:
    cls = sample_class()
    blob = encode(cls, align=args.align)
    print("Serialized OK, length of data: {}".format(len(blob)))

    result = decode(SchoolClass, blob, align=args.align)
    if not result.ok:
        print("binser: error [{}]: {}".format(result.error, result.message), file=sys.stderr)
        return 2
    if result.consumed != len(blob) or result.record != cls:
        print("binser: demo round-trip mismatch", file=sys.stderr)
        return 2
    print("De-serialized OK!")
    return 0


def _cmd_encode(args: argparse.Namespace) -> int:
    cls = record_from_json(SchoolClass, _read_input(args.input))
    blob = encode(cls, align=args.align)
    if args.output:
        with open(args.output, "wb") as f:
            f.write(blob)
    else:
        print(base64.b64encode(blob).decode("ascii"))
    return 0


def _cmd_decode(args: argparse.Namespace) -> int:
    raw = _read_input(args.input)
    if args.base64:
        try:
            raw = base64.b64decode(raw, validate=False)
        except binascii.Error as e:
            print("binser: base64 error: {}".format(e), file=sys.stderr)
            return 2

    result = decode(SchoolClass, raw, align=args.align, exact=args.exact)
    if not result.ok:
        print("binser: error [{}]: {}".format(result.error, result.message), file=sys.stderr)
        return 2
    print(record_to_json(result.record))
    if result.consumed != len(raw):
        print("binser: {} trailing bytes ignored".format(len(raw) - result.consumed),
              file=sys.stderr)
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "version":
        print(f"binser {__version__}")
        return

    if args.align < 1 or args.align & (args.align - 1):
        parser.error("--align must be a power of two")

    try:
        if args.command == "demo":
            status = _cmd_demo(args)
        elif args.command == "encode":
            status = _cmd_encode(args)
        else:
            status = _cmd_decode(args)
    except BinserError as e:
        print(f"binser: error [{e.code}]: {e}", file=sys.stderr)
        sys.exit(2)
    except OSError as e:
        print(f"binser: {e}", file=sys.stderr)
        sys.exit(2)

    if status:
        sys.exit(status)


if __name__ == "__main__":
    main()
