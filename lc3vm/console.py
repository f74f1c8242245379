"""Console I/O collaborators for trap routines and the keyboard device."""

import os
import select
from typing import BinaryIO, Optional

from .errors import InputUnderflow


class Console:
    """Character input/output boundary used by the VM.

    Subclasses supply blocking single-byte input, single-byte output and a
    non-blocking readiness check for the memory-mapped keyboard.
    """

    def read_char(self) -> int:
        """Block until a character is available and return its byte value."""
        raise NotImplementedError

    def write_char(self, code: int) -> None:
        """Write the low byte of ``code``."""
        raise NotImplementedError

    def key_ready(self) -> bool:
        """Return True if ``read_char`` would not block."""
        raise NotImplementedError

    def flush(self) -> None:
        pass

    def write_text(self, text: str) -> None:
        for char in text:
            self.write_char(ord(char))


class BufferConsole(Console):
    """Scripted input and captured output.

    Text is exchanged with the machine as UTF-8 bytes, one byte per
    read or write.
    """

    def __init__(self, input_text: str = ""):
        self._input = input_text.encode("utf-8")
        self._input_pos = 0
        self._output = bytearray()

    def read_char(self) -> int:
        if self._input_pos >= len(self._input):
            raise InputUnderflow("Console input is exhausted")
        code = self._input[self._input_pos]
        self._input_pos += 1
        return code

    def write_char(self, code: int) -> None:
        self._output.append(code & 0xFF)

    def key_ready(self) -> bool:
        return self._input_pos < len(self._input)

    def get_output(self) -> str:
        """Get accumulated output as string; invalid UTF-8 becomes U+FFFD."""
        return self._output.decode("utf-8", errors="replace")

    def get_output_bytes(self) -> bytes:
        return bytes(self._output)

    @property
    def remaining_input(self) -> int:
        return len(self._input) - self._input_pos


class StreamConsole(Console):
    """Console backed by binary streams such as ``sys.stdin.buffer``.

    When the input stream has a file descriptor, bytes are read from the
    descriptor directly so ``select`` sees everything not yet consumed.
    """

    def __init__(self, input_stream: BinaryIO, output_stream: BinaryIO):
        self.input_stream = input_stream
        self.output_stream = output_stream
        self._pending: Optional[int] = None
        try:
            self._fd: Optional[int] = input_stream.fileno()
        except (AttributeError, OSError, ValueError):
            self._fd = None

    def _read_byte(self) -> bytes:
        if self._fd is not None:
            return os.read(self._fd, 1)
        return self.input_stream.read(1)

    def read_char(self) -> int:
        if self._pending is not None:
            code, self._pending = self._pending, None
            return code
        data = self._read_byte()
        if not data:
            raise InputUnderflow("End of console input stream")
        return data[0]

    def write_char(self, code: int) -> None:
        self.output_stream.write(bytes([code & 0xFF]))

    def flush(self) -> None:
        self.output_stream.flush()

    def key_ready(self) -> bool:
        if self._pending is not None:
            return True
        if self._fd is not None:
            readable, _, _ = select.select([self._fd], [], [], 0)
            return bool(readable)
        # In-memory streams never block: read ahead one byte.
        data = self.input_stream.read(1)
        if not data:
            return False
        self._pending = data[0]
        return True
