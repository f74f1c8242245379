"""CPU state model for the LC-3 virtual machine."""

from enum import IntEnum, IntFlag

PC_START = 0x3000


class Reg(IntEnum):
    R0 = 0
    R1 = 1
    R2 = 2
    R3 = 3
    R4 = 4
    R5 = 5
    R6 = 6
    R7 = 7
    PC = 8
    COND = 9


class Flag(IntFlag):
    POS = 1 << 0
    ZRO = 1 << 1
    NEG = 1 << 2


FLAG_NAMES = {Flag.POS: "P", Flag.ZRO: "Z", Flag.NEG: "N"}


def flag_for(value: int) -> Flag:
    """Classify a 16-bit value by its signed interpretation."""
    value &= 0xFFFF
    if value == 0:
        return Flag.ZRO
    if value >> 15:
        return Flag.NEG
    return Flag.POS


class CPU:
    """Register file (R0-R7, PC, COND) and the running/halted flag."""

    def __init__(self, start_pc: int = PC_START):
        self.start_pc = start_pc
        self._regs: list[int] = [0] * len(Reg)
        self.halted: bool = False
        self.reset()

    def get(self, reg: int) -> int:
        return self._regs[reg]

    def set(self, reg: int, value: int) -> None:
        """Set register, truncating to 16 bits. COND is left alone."""
        self._regs[reg] = value & 0xFFFF

    def set_and_flag(self, reg: int, value: int) -> None:
        """Set register, then recompute COND from the stored value."""
        self.set(reg, value)
        self._regs[Reg.COND] = int(flag_for(self._regs[reg]))

    @property
    def pc(self) -> int:
        return self._regs[Reg.PC]

    @pc.setter
    def pc(self, value: int) -> None:
        self._regs[Reg.PC] = value & 0xFFFF

    @property
    def cond(self) -> Flag:
        return Flag(self._regs[Reg.COND])

    def get_state(self) -> dict:
        """Get current register state as dictionary."""
        state = {f"r{i}": self._regs[i] for i in range(8)}
        state["pc"] = self.pc
        state["cond"] = FLAG_NAMES[self.cond]
        state["halted"] = self.halted
        return state

    def reset(self) -> None:
        """Reset CPU to initial state."""
        self._regs = [0] * len(Reg)
        self._regs[Reg.PC] = self.start_pc & 0xFFFF
        self._regs[Reg.COND] = int(Flag.ZRO)
        self.halted = False
