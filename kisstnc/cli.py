"""Command-line entry: feed KISS bytes from a file through the TNC."""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence, TextIO

from .host import ByteStream, Kiss


def run(data: bytes, log: TextIO) -> Kiss:
    """Process every KISS frame in data, logging to log; return the TNC state."""
    kiss = Kiss(kiss_term=ByteStream(data), log=log)
    while kiss.kiss_term.available():
        kiss.receive_from_host()
    return kiss


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="kisstnc", description="Decode KISS frames sent by a host."
    )
    parser.add_argument(
        "input", nargs="?", default="-", help="file of raw KISS bytes ('-' for stdin)"
    )
    args = parser.parse_args(argv)

    if args.input == "-":
        data = sys.stdin.buffer.read()
    else:
        try:
            with open(args.input, "rb") as handle:
                data = handle.read()
        except OSError as exc:
            parser.error(f"cannot read {args.input}: {exc.strerror}")

    sys.stdout.write("KISS TNC Ready\n")
    run(data, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())