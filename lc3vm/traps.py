"""Trap service routines for the LC-3 virtual machine."""

import logging
from enum import IntEnum
from typing import Callable

from .console import Console
from .cpu import CPU, Reg
from .errors import UnknownTrapVector
from .memory import Memory

logger = logging.getLogger(__name__)

IN_PROMPT = "Enter a character: "
HALT_NOTICE = "HALT\n"


class TrapVector(IntEnum):
    GETC = 0x20
    OUT = 0x21
    PUTS = 0x22
    IN = 0x23
    PUTSP = 0x24
    HALT = 0x25


def trap_getc(dispatcher: "TrapDispatcher", cpu: CPU, mem: Memory) -> None:
    """GETC: R0 := next input character, no echo."""
    cpu.set(Reg.R0, dispatcher.console.read_char())


def trap_out(dispatcher: "TrapDispatcher", cpu: CPU, mem: Memory) -> None:
    """OUT: write low byte of R0."""
    console = dispatcher.console
    console.write_char(cpu.get(Reg.R0) & 0xFF)
    console.flush()


def trap_puts(dispatcher: "TrapDispatcher", cpu: CPU, mem: Memory) -> None:
    """PUTS: write one character per cell from MEM[R0] up to a zero cell."""
    console = dispatcher.console
    addr = cpu.get(Reg.R0)
    word = mem.read(addr)
    while word:
        console.write_char(word & 0xFF)
        addr += 1
        word = mem.read(addr)
    console.flush()


def trap_in(dispatcher: "TrapDispatcher", cpu: CPU, mem: Memory) -> None:
    """IN: prompt, read one character, echo it, R0 := character."""
    console = dispatcher.console
    if dispatcher.echo_prompt:
        console.write_text(IN_PROMPT)
        console.flush()
    code = console.read_char()
    console.write_char(code)
    console.flush()
    cpu.set(Reg.R0, code)


def trap_putsp(dispatcher: "TrapDispatcher", cpu: CPU, mem: Memory) -> None:
    """PUTSP: two characters per cell, low byte first, up to a zero cell."""
    console = dispatcher.console
    addr = cpu.get(Reg.R0)
    word = mem.read(addr)
    while word:
        console.write_char(word & 0xFF)
        high = word >> 8
        if high:
            console.write_char(high)
        addr += 1
        word = mem.read(addr)
    console.flush()


def trap_halt(dispatcher: "TrapDispatcher", cpu: CPU, mem: Memory) -> None:
    """HALT: print notice and stop the machine."""
    console = dispatcher.console
    console.write_text(HALT_NOTICE)
    console.flush()
    cpu.halted = True


TrapRoutine = Callable[["TrapDispatcher", CPU, Memory], None]

# Trap dispatch table
TRAP_ROUTINES: dict[TrapVector, TrapRoutine] = {
    TrapVector.GETC: trap_getc,
    TrapVector.OUT: trap_out,
    TrapVector.PUTS: trap_puts,
    TrapVector.IN: trap_in,
    TrapVector.PUTSP: trap_putsp,
    TrapVector.HALT: trap_halt,
}


class TrapDispatcher:
    """Routes TRAP vectors to service routines bound to a console."""

    def __init__(self, console: Console, echo_prompt: bool = True):
        self.console = console
        self.echo_prompt = echo_prompt

    def dispatch(self, vector: int, cpu: CPU, mem: Memory) -> None:
        try:
            routine = TRAP_ROUTINES[TrapVector(vector)]
        except ValueError:
            raise UnknownTrapVector(
                f"Unknown trap vector: 0x{vector:02X}", vector=vector
            ) from None
        logger.debug("TRAP %s", TrapVector(vector).name)
        routine(self, cpu, mem)
