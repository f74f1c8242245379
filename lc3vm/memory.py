"""Memory model for the LC-3 virtual machine."""

from typing import Iterable, Optional
from .console import Console

MEMORY_SIZE = 1 << 16
WORD_MASK = 0xFFFF

# Memory-mapped keyboard registers
KBSR = 0xFE00  # keyboard status
KBDR = 0xFE02  # keyboard data


class Memory:
    """65,536 unsigned 16-bit cells with wraparound addressing.

    When a ``keyboard`` console is attached, reading KBSR polls it and
    latches the next character into KBDR. Without one, every address is
    plain storage.
    """

    def __init__(
        self,
        keyboard: Optional[Console] = None,
        initial_values: Optional[dict[int, int]] = None,
    ):
        self.keyboard = keyboard
        self._data: list[int] = [0] * MEMORY_SIZE

        if initial_values:
            for addr, val in initial_values.items():
                self.write(addr, val)

    def read(self, addr: int) -> int:
        """Read word at the low 16 bits of ``addr``."""
        addr &= WORD_MASK
        if addr == KBSR and self.keyboard is not None:
            self._poll_keyboard()
        return self._data[addr]

    def write(self, addr: int, value: int) -> None:
        """Write the low 16 bits of ``value`` at the low 16 bits of ``addr``."""
        self._data[addr & WORD_MASK] = value & WORD_MASK

    def _poll_keyboard(self) -> None:
        if self.keyboard.key_ready():
            self._data[KBSR] = 1 << 15
            self._data[KBDR] = self.keyboard.read_char() & 0xFF
        else:
            self._data[KBSR] = 0

    def load(self, origin: int, words: Iterable[int]) -> int:
        """Place ``words`` consecutively from ``origin``; return count written."""
        count = 0
        for offset, word in enumerate(words):
            self.write(origin + offset, word)
            count += 1
        return count

    def get_watched(self, addresses: list[int]) -> dict[str, int]:
        """Get values at watched addresses as string-keyed dict.

        Reads bypass the keyboard device.
        """
        return {str(addr): self._data[addr & WORD_MASK] for addr in addresses}

    def snapshot(self) -> list[int]:
        """Return a copy of the entire memory."""
        return self._data.copy()
