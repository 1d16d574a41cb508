"""
LS-8 — a small register-and-stack bytecode machine.

Programs are text files of 8-bit binary literals, one byte per line.
"""

from .errors import (
    LS8Error, InvalidArgumentValue, InvalidInstruction, MissingOperand,
    RegisterOutOfRange, StackUnderflow, DivideByZero,
)
from .isa import Instruction, Opcode, decode, disassemble
from .loader import load_file, load_program
from .machine import Machine, State

__version__ = "0.1.0"
