"""LC-3 Virtual Machine Package."""

from .engine import Engine
from .runner import run_program, RunOptions, RunResult
from .console import Console, BufferConsole, StreamConsole
from .errors import (
    LC3Error,
    ImageError,
    LC3RuntimeError,
    IllegalOpcode,
    UnknownTrapVector,
    InputUnderflow,
    StepLimitExceeded,
)

__all__ = [
    "Engine",
    "run_program",
    "RunOptions",
    "RunResult",
    "Console",
    "BufferConsole",
    "StreamConsole",
    "LC3Error",
    "ImageError",
    "LC3RuntimeError",
    "IllegalOpcode",
    "UnknownTrapVector",
    "InputUnderflow",
    "StepLimitExceeded",
]
