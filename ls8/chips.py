"""
Storage primitives for the LS-8 machine.

Models the machine's state-holding parts: Register, RegisterFile, Stack,
OutputBuffer.
"""

from __future__ import annotations

import collections

from .errors import RegisterOutOfRange, StackUnderflow


class Register:
    """N-bit register. Loads wrap to the register width."""

    def __init__(self, width: int):
        self.width = width
        self.value = 0
        self._mask = (1 << width) - 1

    def load(self, val: int):
        self.value = val & self._mask


class RegisterFile:
    """
    Fixed bank of equal-width registers indexed by register number.

    Reads and writes go through ``Register.load`` so every slot keeps its
    width. Indices outside ``[0, count)`` raise RegisterOutOfRange.
    """

    def __init__(self, count: int, width: int):
        self._regs = [Register(width) for _ in range(count)]

    def _reg(self, index: int) -> Register:
        if not 0 <= index < len(self._regs):
            raise RegisterOutOfRange(index)
        return self._regs[index]

    def __getitem__(self, index: int) -> int:
        return self._reg(index).value

    def __setitem__(self, index: int, val: int):
        self._reg(index).load(val)

    def __len__(self) -> int:
        return len(self._regs)

    def __iter__(self):
        return (r.value for r in self._regs)

    def values(self) -> list[int]:
        return [r.value for r in self._regs]


class Stack:
    """Growable LIFO of bytes. Tracks its peak depth."""

    def __init__(self):
        self.buffer: list[int] = []
        self.peak = 0

    def push(self, byte: int):
        self.buffer.append(byte & 0xFF)
        if len(self.buffer) > self.peak:
            self.peak = len(self.buffer)

    def pop(self) -> int:
        if not self.buffer:
            raise StackUnderflow()
        return self.buffer.pop()

    def top(self) -> int | None:
        return self.buffer[-1] if self.buffer else None

    def __len__(self) -> int:
        return len(self.buffer)


class OutputBuffer:
    """Collects PRN values instead of writing them to stdout."""

    def __init__(self):
        self.buffer: collections.deque[int] = collections.deque()

    def __call__(self, value: int):
        self.buffer.append(value)

    def drain(self) -> list[int]:
        out = list(self.buffer)
        self.buffer.clear()
        return out

    def __len__(self) -> int:
        return len(self.buffer)
