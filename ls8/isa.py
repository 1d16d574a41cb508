"""
LS-8 instruction set: opcode table, decoder and disassembler.

Every instruction is one opcode byte followed by zero, one or two operand
bytes. Operands are either a register number (0-7) or an 8-bit immediate.

    LDI R0, 8   ->  10000010 00000000 00001000
    PRN R0      ->  01000111 00000000
    HLT         ->  00000001
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from .errors import InvalidInstruction, MissingOperand, RegisterOutOfRange


NUM_REGISTERS = 8

# Operand kinds
REG = "reg"
IMM = "imm"


class Opcode(enum.IntEnum):
    NOP  = 0b00000000
    HLT  = 0b00000001
    JMP  = 0b00000011
    RET  = 0b00010001
    PUSH = 0b01000101
    POP  = 0b01000110
    PRN  = 0b01000111
    CALL = 0b01010000
    LDI  = 0b10000010
    MUL  = 0b10100010
    DIV  = 0b10100011


# Operand layout per opcode. The table is closed: decode rejects anything else.
OPERANDS: dict[Opcode, tuple[str, ...]] = {
    Opcode.NOP:  (),
    Opcode.HLT:  (),
    Opcode.JMP:  (REG,),
    Opcode.RET:  (),
    Opcode.PUSH: (REG,),
    Opcode.POP:  (REG,),
    Opcode.PRN:  (REG,),
    Opcode.CALL: (REG,),
    Opcode.LDI:  (REG, IMM),
    Opcode.MUL:  (REG, REG),
    Opcode.DIV:  (REG, REG),
}

_BY_VALUE = {op.value: op for op in Opcode}


@dataclass(frozen=True)
class Instruction:
    opcode: Opcode
    operands: tuple[int, ...] = ()
    address: int = 0

    @property
    def size(self) -> int:
        """Encoded length in bytes, opcode included."""
        return 1 + len(self.operands)

    def __str__(self) -> str:
        kinds = OPERANDS[self.opcode]
        args = [f"R{v}" if k == REG else str(v) for k, v in zip(kinds, self.operands)]
        if not args:
            return self.opcode.name
        return f"{self.opcode.name} {', '.join(args)}"


def decode(code: bytes, address: int) -> tuple[Instruction, int]:
    """
    Decode the instruction whose opcode byte sits at ``address``.

    Returns the instruction and the address of the last byte it consumed:
    the opcode itself when there are no operands, otherwise the final
    operand. The caller advances one past that.
    """
    byte = code[address]
    opcode = _BY_VALUE.get(byte)
    if opcode is None:
        raise InvalidInstruction(byte, address)

    ip = address
    operands = []
    for kind in OPERANDS[opcode]:
        ip += 1
        if ip >= len(code):
            raise MissingOperand(address)
        value = code[ip]
        if kind == REG and value >= NUM_REGISTERS:
            raise RegisterOutOfRange(value, address)
        operands.append(value)

    return Instruction(opcode, tuple(operands), address), ip


def disassemble(code: bytes):
    """
    Walk the program image linearly.

    Yields ``(address, instruction, raw)`` where ``instruction`` is None for
    bytes that do not decode (data, or a truncated tail); those advance by one.
    """
    address = 0
    while address < len(code):
        try:
            inst, last = decode(code, address)
        except (InvalidInstruction, MissingOperand, RegisterOutOfRange):
            yield address, None, bytes(code[address:address + 1])
            address += 1
            continue
        yield address, inst, bytes(code[address:last + 1])
        address = last + 1


def format_listing(code: bytes) -> list[str]:
    """Disassembly as ``addr: bytes  mnemonic`` lines."""
    lines = []
    for address, inst, raw in disassemble(code):
        hex_bytes = " ".join(f"{b:02X}" for b in raw)
        text = str(inst) if inst is not None else f"DB 0x{raw[0]:02X}"
        lines.append(f"{address:3d}: {hex_bytes:<8s}  {text}")
    return lines
