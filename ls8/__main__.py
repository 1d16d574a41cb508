"""
Command-line entry point: run one LS-8 program file.

Usage:
    python -m ls8 asm/print8.ls8
"""

from __future__ import annotations

import argparse
import logging
import sys

from .errors import InvalidArgumentValue, LS8Error
from .machine import Machine


class _ArgumentParser(argparse.ArgumentParser):
    """Usage errors as a single diagnostic line."""

    def error(self, message):
        print(f"Error: {message}", file=sys.stderr)
        sys.exit(1)


def main(argv: list[str] | None = None) -> int:
    parser = _ArgumentParser(
        description="Run an LS-8 program",
        prog="python -m ls8",
    )
    parser.add_argument("file", help="Path to .ls8 program file")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    try:
        machine = Machine.from_file(args.file)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: Failed to read file contents: {e}", file=sys.stderr)
        return 1
    except InvalidArgumentValue as e:
        print(f"Error: Failed to initialize machine: {e}", file=sys.stderr)
        return 1

    try:
        machine.run()
    except LS8Error as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
