"""Ensure every opcode has a dedicated behavioral test."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

import pytest

from lc3vm import Engine, BufferConsole, IllegalOpcode
from lc3vm.cpu import Flag, Reg
from lc3vm.decoder import Opcode

import encode


def expect_reg(reg: int, value: int, cond: Optional[Flag] = None) -> Callable:
    def _check(engine):
        assert engine.cpu.get(reg) == value
        if cond is not None:
            assert engine.cpu.cond == cond

    return _check


def expect_pc(value: int) -> Callable:
    def _check(engine):
        assert engine.cpu.pc == value

    return _check


def expect_mem(addr: int, value: int) -> Callable:
    def _check(engine):
        assert engine.memory.read(addr) == value
        assert engine.cpu.cond == Flag.ZRO

    return _check


def expect_output(text: str) -> Callable:
    def _check(engine):
        assert engine.console.get_output() == text

    return _check


def expect_halted_untouched(engine):
    assert engine.halted
    assert all(engine.cpu.get(r) == 0 for r in range(8))
    assert engine.cpu.cond == Flag.ZRO


def _setup(registers=None, memory=None) -> Callable:
    def _apply(engine):
        for reg, value in (registers or {}).items():
            engine.cpu.set(reg, value)
        for addr, value in (memory or {}).items():
            engine.memory.write(addr, value)

    return _apply


@dataclass
class InstructionCase:
    opcode: Opcode
    word: int
    checker: Callable
    setup: Callable = _setup()
    raises: Optional[type] = None


INSTRUCTION_CASES = [
    InstructionCase(
        Opcode.BR, encode.br(2, z=True), expect_pc(0x3003),
    ),
    InstructionCase(
        Opcode.ADD, encode.add_imm(0, 1, -3), expect_reg(Reg.R0, 2, Flag.POS),
        setup=_setup(registers={Reg.R1: 5}),
    ),
    InstructionCase(
        Opcode.LD, encode.ld(2, 4), expect_reg(Reg.R2, 0x8000, Flag.NEG),
        setup=_setup(memory={0x3005: 0x8000}),
    ),
    InstructionCase(
        Opcode.ST, encode.st(3, -1), expect_mem(0x3000, 77),
        setup=_setup(registers={Reg.R3: 77}),
    ),
    InstructionCase(
        Opcode.JSR, encode.jsr(0x10), expect_reg(Reg.R7, 0x3001),
    ),
    InstructionCase(
        Opcode.AND, encode.and_reg(0, 1, 2), expect_reg(Reg.R0, 0b1000, Flag.POS),
        setup=_setup(registers={Reg.R1: 0b1100, Reg.R2: 0b1010}),
    ),
    InstructionCase(
        Opcode.LDR, encode.ldr(4, 5, -2), expect_reg(Reg.R4, 0, Flag.ZRO),
        setup=_setup(registers={Reg.R5: 0x4002}, memory={0x4000: 0}),
    ),
    InstructionCase(
        Opcode.STR, encode.str_(1, 2, 3), expect_mem(0x4003, 0xBEEF),
        setup=_setup(registers={Reg.R1: 0xBEEF, Reg.R2: 0x4000}),
    ),
    InstructionCase(
        Opcode.RTI, 0x8000, expect_halted_untouched, raises=IllegalOpcode,
    ),
    InstructionCase(
        Opcode.NOT, encode.not_(0, 1), expect_reg(Reg.R0, 0xFFFF, Flag.NEG),
    ),
    InstructionCase(
        Opcode.LDI, encode.ldi(6, 1), expect_reg(Reg.R6, 0x1234, Flag.POS),
        setup=_setup(memory={0x3002: 0x5000, 0x5000: 0x1234}),
    ),
    InstructionCase(
        Opcode.STI, encode.sti(1, 1), expect_mem(0x5000, 0x00AA),
        setup=_setup(registers={Reg.R1: 0xAA}, memory={0x3002: 0x5000}),
    ),
    InstructionCase(
        Opcode.JMP, encode.jmp(3), expect_pc(0x4444),
        setup=_setup(registers={Reg.R3: 0x4444}),
    ),
    InstructionCase(
        Opcode.RES, 0xD000, expect_halted_untouched, raises=IllegalOpcode,
    ),
    InstructionCase(
        Opcode.LEA, encode.lea(5, -1), expect_reg(Reg.R5, 0x3000, Flag.POS),
    ),
    InstructionCase(
        Opcode.TRAP, encode.OUT, expect_output("A"),
        setup=_setup(registers={Reg.R0: ord("A")}),
    ),
]


@pytest.mark.parametrize("case", INSTRUCTION_CASES, ids=lambda case: case.opcode.name)
def test_all_instructions_have_behavioral_tests(case: InstructionCase):
    engine = Engine(console=BufferConsole())
    engine.memory.write(0x3000, case.word)
    case.setup(engine)
    if case.raises:
        with pytest.raises(case.raises):
            engine.step()
    else:
        engine.step()
    case.checker(engine)


def test_instruction_case_coverage_matches_opcodes():
    covered = {case.opcode for case in INSTRUCTION_CASES}
    assert covered == set(Opcode)
