"""
Error taxonomy for the LS-8 machine.

Loader errors surface before a machine exists. Decode and execution errors
halt the machine and propagate out of ``Machine.run``.
"""

from __future__ import annotations


class LS8Error(Exception):
    """Base class for every loader and machine fault."""


class InvalidArgumentValue(LS8Error, ValueError):
    """A program line is not a valid 8-bit binary literal."""

    def __init__(self, line_number: int, line: str, reason: str = "not an 8-bit binary literal"):
        self.line_number = line_number
        self.line = line
        super().__init__(f"line {line_number}: {line!r} is {reason}")


class InvalidInstruction(LS8Error):
    """The decoder met a byte that is not in the opcode table."""

    def __init__(self, opcode: int, address: int):
        self.opcode = opcode
        self.address = address
        super().__init__(f"invalid instruction {opcode} (0b{opcode:08b}) at address {address}")


class MissingOperand(LS8Error):
    """An instruction's operand bytes run past the end of code."""

    def __init__(self, address: int):
        self.address = address
        super().__init__(f"missing operand for instruction at address {address}")


class RegisterOutOfRange(LS8Error, IndexError):
    def __init__(self, index: int, address: int | None = None):
        self.index = index
        self.address = address
        where = f" at address {address}" if address is not None else ""
        super().__init__(f"register index {index} out of range{where}")


class StackUnderflow(LS8Error):
    """POP or RET executed against an empty stack."""

    def __init__(self, address: int | None = None):
        self.address = address
        where = f" at address {address}" if address is not None else ""
        super().__init__(f"stack underflow{where}")


class DivideByZero(LS8Error, ZeroDivisionError):
    def __init__(self, address: int):
        self.address = address
        super().__init__(f"division by zero at address {address}")
