"""Fetch-decode-execute engine for the LC-3 virtual machine."""

import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from .console import BufferConsole, Console
from .cpu import CPU, PC_START
from .decoder import decode
from .errors import LC3RuntimeError, MachineHalted, StepLimitExceeded
from .instructions import execute_instruction
from .loader import parse_image, read_image_file
from .memory import Memory
from .traps import TrapDispatcher

logger = logging.getLogger(__name__)


class Engine:
    """Memory, registers and trap dispatcher for one run.

    The engine is RUNNING until a HALT trap or a fatal error, after which
    it is HALTED and refuses to fetch.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        keyboard_mmio: bool = False,
        start_pc: int = PC_START,
        echo_prompt: bool = True,
    ):
        self.console = console if console is not None else BufferConsole()
        self.cpu = CPU(start_pc=start_pc)
        self.memory = Memory(keyboard=self.console if keyboard_mmio else None)
        self.traps = TrapDispatcher(self.console, echo_prompt=echo_prompt)
        self.steps = 0

    @property
    def halted(self) -> bool:
        return self.cpu.halted

    @property
    def running(self) -> bool:
        return not self.cpu.halted

    def load(self, origin: int, words: Iterable[int]) -> int:
        count = self.memory.load(origin, words)
        logger.debug("Loaded %d words at 0x%04X", count, origin)
        return count

    def load_image(self, data: bytes) -> int:
        """Load a raw image; return its origin."""
        origin, words = parse_image(data)
        self.load(origin, words)
        return origin

    def load_image_file(self, path: Union[str, Path]) -> int:
        origin, words = read_image_file(path)
        self.load(origin, words)
        return origin

    def step(self) -> None:
        """Fetch, decode and execute one instruction."""
        cpu = self.cpu
        if cpu.halted:
            raise MachineHalted("Machine is halted", step=self.steps, addr=cpu.pc)

        addr = cpu.pc
        word = self.memory.read(addr)
        cpu.pc = addr + 1
        instr = decode(word)

        try:
            execute_instruction(instr, cpu, self.memory, self.traps)
        except LC3RuntimeError as e:
            cpu.halted = True
            e.step = self.steps
            e.addr = addr
            e.word = word
            logger.warning("Halting at 0x%04X: %s", addr, e.message)
            raise

        self.steps += 1
        if cpu.halted:
            logger.info("Halted at 0x%04X after %d steps", addr, self.steps)

    def run(self, max_steps: Optional[int] = None) -> int:
        """Run until halted; return the number of instructions executed.

        ``max_steps`` bounds this call. Exceeding it raises
        ``StepLimitExceeded`` and leaves the machine RUNNING.
        """
        executed = 0
        while not self.cpu.halted:
            if max_steps is not None and executed >= max_steps:
                raise StepLimitExceeded(
                    f"Step limit exceeded: {max_steps}",
                    step=self.steps,
                    addr=self.cpu.pc,
                )
            self.step()
            executed += 1
        return executed

    def reset(self) -> None:
        """Reset registers and run state; memory is kept."""
        self.cpu.reset()
        self.steps = 0

    def get_state(self) -> dict:
        return self.cpu.get_state()
