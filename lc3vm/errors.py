"""Custom exceptions for the LC-3 virtual machine."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ErrorInfo:
    """Structured error information for API responses."""
    type: str
    message: str
    step: int
    addr: int
    word: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "message": self.message,
            "step": self.step,
            "addr": self.addr,
            "word": self.word,
        }


class LC3Error(Exception):
    """Base exception for all LC-3 VM errors."""

    def __init__(
        self,
        message: str,
        step: int = 0,
        addr: int = 0,
        word: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.step = step
        self.addr = addr
        self.word = word

    def to_error_info(self) -> ErrorInfo:
        return ErrorInfo(
            type=self.__class__.__name__,
            message=self.message,
            step=self.step,
            addr=self.addr,
            word=self.word,
        )


class ImageError(LC3Error):
    """Malformed or unreadable program image."""
    pass


class LC3RuntimeError(LC3Error):
    """Error during program execution."""
    pass


class IllegalOpcode(LC3RuntimeError):
    """Reserved (RES) or unsupported (RTI) opcode executed."""

    def __init__(self, message: str, opcode: int, **kwargs):
        super().__init__(message, **kwargs)
        self.opcode = opcode


class UnknownTrapVector(LC3RuntimeError):
    """TRAP executed with a vector that has no service routine."""

    def __init__(self, message: str, vector: int, **kwargs):
        super().__init__(message, **kwargs)
        self.vector = vector


class InputUnderflow(LC3RuntimeError):
    """Console input exhausted while a character was required."""
    pass


class StepLimitExceeded(LC3RuntimeError):
    """Maximum step count exceeded."""
    pass


class MachineHalted(LC3RuntimeError):
    """Attempt to step a machine that is already halted."""
    pass
