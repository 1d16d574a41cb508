"""
LS-8 machine: fetch/decode/execute loop over a byte program image.

Holds the instruction pointer, an 8-entry register file of 64-bit words,
a byte stack for call frames and PUSH/POP, and a three-state run flag.
"""

from __future__ import annotations

import enum
import logging
from pathlib import Path

from .chips import RegisterFile, Stack
from .errors import DivideByZero, LS8Error, StackUnderflow
from .isa import Instruction, Opcode, decode
from .loader import load_file, load_program

logger = logging.getLogger(__name__)


class State(enum.IntEnum):
    IDLE    = 0   # constructed, run() not yet called
    RUNNING = 1
    HALTED  = 2   # HLT, end of code, or a fault; never leaves this state


def _print_value(value: int):
    print(value)


# ---------------------------------------------------------------------------
# Machine
# ---------------------------------------------------------------------------

class Machine:
    """Single-threaded LS-8 interpreter. One instance per program run."""

    NUM_REGISTERS = 8
    WORD_BITS     = 64

    def __init__(self, code: bytes, output=None):
        self.code = bytes(code)
        self.ip = 0
        self.state = State.IDLE
        self.registers = RegisterFile(self.NUM_REGISTERS, self.WORD_BITS)
        self.stack = Stack()
        # PRN sink: called with each printed register value
        self.output = output if output is not None else _print_value

        # --- Counters ---
        self.cycles = 0
        self.prints = 0

    @classmethod
    def from_str(cls, program: str, strict: bool = False, **kwargs) -> Machine:
        return cls(load_program(program, strict=strict), **kwargs)

    @classmethod
    def from_file(cls, path: str | Path, strict: bool = False, **kwargs) -> Machine:
        return cls(load_file(path, strict=strict), **kwargs)

    @property
    def terminated(self) -> bool:
        return self.state != State.RUNNING

    # -------------------------------------------------------------------
    # Decode / execute
    # -------------------------------------------------------------------

    def decode(self) -> Instruction:
        """Decode at ip. Leaves ip on the instruction's last byte."""
        inst, self.ip = decode(self.code, self.ip)
        return inst

    def execute(self, inst: Instruction):
        """Apply one decoded instruction. Raises an LS8Error subclass on a fault."""
        op = inst.opcode
        regs = self.registers

        if op == Opcode.NOP:
            pass

        elif op == Opcode.HLT:
            self.state = State.HALTED

        elif op == Opcode.PRN:
            (reg,) = inst.operands
            self.output(regs[reg])
            self.prints += 1

        elif op == Opcode.LDI:
            reg, imm = inst.operands
            regs[reg] = imm

        elif op == Opcode.JMP:
            # The loop still adds 1: targets are encoded as landing address - 1.
            (reg,) = inst.operands
            self.ip = regs[reg]

        elif op == Opcode.PUSH:
            (reg,) = inst.operands
            self.stack.push(regs[reg])

        elif op == Opcode.POP:
            (reg,) = inst.operands
            regs[reg] = self._pop(inst)

        elif op == Opcode.CALL:
            # Return address is the operand byte; RET plus the loop's +1 lands after CALL.
            (reg,) = inst.operands
            self.stack.push(inst.address + 1)
            self.ip = regs[reg]

        elif op == Opcode.RET:
            self.ip = self._pop(inst)

        elif op == Opcode.MUL:
            a, b = inst.operands
            regs[a] = regs[a] * regs[b]

        elif op == Opcode.DIV:
            a, b = inst.operands
            divisor = regs[b]
            if divisor == 0:
                raise DivideByZero(inst.address)
            regs[a] = regs[a] // divisor

    def _pop(self, inst: Instruction) -> int:
        try:
            return self.stack.pop()
        except StackUnderflow:
            raise StackUnderflow(inst.address) from None

    # -------------------------------------------------------------------
    # Run loop
    # -------------------------------------------------------------------

    def tick(self) -> bool:
        """Execute one instruction. Returns True if still running."""
        if self.state == State.HALTED:
            return False
        self.state = State.RUNNING

        if self.ip >= len(self.code):
            self.state = State.HALTED
            return False

        try:
            inst = self.decode()
            logger.debug(f"{inst.address:3d}: {inst}")
            self.execute(inst)
        except LS8Error as e:
            self.state = State.HALTED
            logger.info(f"Halted on fault: {e}")
            raise
        except Exception:
            # Faults from the output sink halt the machine too.
            self.state = State.HALTED
            raise

        self.ip += 1
        self.cycles += 1
        return self.state == State.RUNNING

    def run(self):
        """
        Run from IDLE until HLT or end of code.

        A machine that is already running or halted is left untouched.
        Faults propagate as LS8Error subclasses with the machine HALTED.
        """
        if self.state != State.IDLE:
            return
        self.state = State.RUNNING
        while self.tick():
            pass

    def stats(self) -> dict:
        return {
            "cycles": self.cycles,
            "prints": self.prints,
            "ip": self.ip,
            "code_size": len(self.code),
            "stack_depth": len(self.stack),
            "stack_peak": self.stack.peak,
            "state": self.state.name,
        }

    def stats_summary(self) -> str:
        s = self.stats()
        return (
            f"State: {s['state']}\n"
            f"Cycles: {s['cycles']}\n"
            f"IP: {s['ip']} / {s['code_size']} bytes\n"
            f"PRN: {s['prints']} values\n"
            f"Stack: {s['stack_depth']} (peak {s['stack_peak']})"
        )
