"""Program runner for the LC-3 virtual machine."""

import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from .console import BufferConsole
from .cpu import PC_START
from .engine import Engine
from .errors import LC3Error, ErrorInfo

logger = logging.getLogger(__name__)


@dataclass
class RunOptions:
    """Options for program execution."""
    max_steps: int = 1_000_000
    start_pc: int = PC_START
    keyboard_mmio: bool = False
    echo_prompt: bool = True
    watch: list[int] = field(default_factory=list)
    initial_memory: dict[int, int] = field(default_factory=dict)


@dataclass
class RunResult:
    """Result of program execution."""
    status: str  # "ok" | "error"
    output_text: str
    steps_executed: int
    final_state: dict
    final_memory: dict[str, int]
    error: Optional[ErrorInfo] = None

    def to_dict(self) -> dict:
        result = {
            "status": self.status,
            "output_text": self.output_text,
            "steps_executed": self.steps_executed,
            "final_state": self.final_state,
            "final_memory": self.final_memory,
        }
        if self.error:
            result["error"] = self.error.to_dict()
        return result


def run_program(
    images: Union[bytes, list[bytes]],
    input_text: str = "",
    options: Optional[RunOptions] = None,
) -> RunResult:
    """Load one or more images and run until HALT.

    Args:
        images: Raw image bytes, or a list of them loaded in order
        input_text: Console input for GETC/IN and the keyboard device
        options: Execution options

    Returns:
        RunResult with execution status, console output and final state
    """
    if options is None:
        options = RunOptions()
    if isinstance(images, (bytes, bytearray)):
        images = [bytes(images)]

    console = BufferConsole(input_text)
    engine = Engine(
        console=console,
        keyboard_mmio=options.keyboard_mmio,
        start_pc=options.start_pc,
        echo_prompt=options.echo_prompt,
    )
    error_info: Optional[ErrorInfo] = None

    try:
        for data in images:
            engine.load_image(data)
        for addr, val in options.initial_memory.items():
            engine.memory.write(addr, val)

        logger.debug("Running from 0x%04X", engine.cpu.pc)
        engine.run(max_steps=options.max_steps)
    except LC3Error as e:
        error_info = e.to_error_info()

    logger.debug("Run finished after %d steps (error=%s)", engine.steps,
                 error_info.type if error_info else None)

    return RunResult(
        status="ok" if error_info is None else "error",
        output_text=console.get_output(),
        steps_executed=engine.steps,
        final_state=engine.get_state(),
        final_memory=engine.memory.get_watched(options.watch),
        error=error_info,
    )
