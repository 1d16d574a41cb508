"""
Decoder and disassembler tests.
"""

from __future__ import annotations

import pytest

from ls8.errors import InvalidInstruction, MissingOperand, RegisterOutOfRange
from ls8.isa import OPERANDS, Instruction, Opcode, decode, disassemble, format_listing


def test_opcode_table_is_closed():
    assert {op.value for op in Opcode} == {0, 1, 3, 17, 69, 70, 71, 80, 130, 162, 163}
    assert set(OPERANDS) == set(Opcode)


def test_decode_without_operands():
    inst, last = decode(bytes([0, 1]), 1)
    assert inst == Instruction(Opcode.HLT, (), 1)
    assert last == 1


def test_decode_advances_past_operands():
    code = bytes([130, 3, 200, 162, 1, 2])
    inst, last = decode(code, 0)
    assert inst.opcode == Opcode.LDI
    assert inst.operands == (3, 200)
    assert last == 2

    inst, last = decode(code, 3)
    assert inst.opcode == Opcode.MUL
    assert inst.operands == (1, 2)
    assert last == 5


def test_every_undefined_byte_is_invalid():
    defined = {op.value for op in Opcode}
    for byte in range(256):
        if byte in defined:
            continue
        with pytest.raises(InvalidInstruction) as exc:
            decode(bytes([byte, 0, 0]), 0)
        assert exc.value.opcode == byte


def test_register_operand_checked():
    with pytest.raises(RegisterOutOfRange) as exc:
        decode(bytes([71, 8]), 0)
    assert exc.value.index == 8
    assert exc.value.address == 0


def test_immediate_operand_not_range_checked():
    inst, _ = decode(bytes([130, 7, 255]), 0)
    assert inst.operands == (7, 255)


def test_missing_operand():
    with pytest.raises(MissingOperand):
        decode(bytes([162, 0]), 0)


def test_str():
    assert str(Instruction(Opcode.LDI, (0, 8))) == "LDI R0, 8"
    assert str(Instruction(Opcode.MUL, (1, 2))) == "MUL R1, R2"
    assert str(Instruction(Opcode.RET)) == "RET"
    assert Instruction(Opcode.LDI, (0, 8)).size == 3


def test_disassemble():
    code = bytes([130, 0, 8, 71, 0, 0xFF, 1])
    entries = list(disassemble(code))
    assert [(addr, str(inst) if inst else None) for addr, inst, _ in entries] == [
        (0, "LDI R0, 8"),
        (3, "PRN R0"),
        (5, None),
        (6, "HLT"),
    ]
    assert entries[0][2] == bytes([130, 0, 8])


def test_format_listing():
    lines = format_listing(bytes([130, 0, 8, 0xFF]))
    assert lines[0].endswith("LDI R0, 8")
    assert lines[1].endswith("DB 0xFF")
