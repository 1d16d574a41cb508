"""
Program loader: LS-8 source text to a byte image.

One byte per line, written as eight binary digits. Lines starting with ``#``
are comments, lines shorter than eight characters are skipped, and anything
after column eight is ignored::

    # print8.ls8
    10000010 # LDI R0,8
    00000000
    00001000
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from .errors import InvalidArgumentValue

logger = logging.getLogger(__name__)

BYTE_WIDTH = 8
COMMENT = "#"

_BYTE_RE = re.compile(r"[01]{8}")
_BINARY_RE = re.compile(r"[01]+")


def _parse_line(line_number: int, line: str) -> int:
    field = line[:BYTE_WIDTH]
    if not _BYTE_RE.fullmatch(field):
        raise InvalidArgumentValue(line_number, line)
    return int(field, 2)


def _parse_line_strict(line_number: int, line: str) -> int:
    field = line.strip()
    if not _BINARY_RE.fullmatch(field):
        raise InvalidArgumentValue(line_number, line)
    value = int(field, 2)
    if value > 0xFF:
        raise InvalidArgumentValue(line_number, line, "too large for one byte")
    return value


def _lines(text: str) -> list[str]:
    """Newline-only split. Drops a trailing CR per line and the empty tail after a final newline."""
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def load_program(text: str, strict: bool = False) -> bytes:
    """
    Parse program text into a byte image.

    In the default mode comment and short lines are skipped and each kept
    line is cut to its first eight characters. With ``strict`` every line
    must be a whitespace-padded binary literal. Raises InvalidArgumentValue
    on the first bad line; nothing is returned in that case.
    """
    code = []
    for line_number, line in enumerate(_lines(text), start=1):
        if strict:
            code.append(_parse_line_strict(line_number, line))
            continue
        if line.startswith(COMMENT) or len(line) < BYTE_WIDTH:
            continue
        code.append(_parse_line(line_number, line))

    logger.info(f"Loaded program: {len(code)} bytes")
    return bytes(code)


def load_file(path: str | Path, strict: bool = False) -> bytes:
    """Read a UTF-8 program file and parse it."""
    text = Path(path).read_text(encoding="utf-8")
    return load_program(text, strict=strict)
