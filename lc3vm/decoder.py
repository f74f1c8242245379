"""Instruction word decoding for the LC-3 virtual machine."""

from dataclasses import dataclass
from enum import IntEnum


class Opcode(IntEnum):
    BR = 0b0000
    ADD = 0b0001
    LD = 0b0010
    ST = 0b0011
    JSR = 0b0100
    AND = 0b0101
    LDR = 0b0110
    STR = 0b0111
    RTI = 0b1000
    NOT = 0b1001
    LDI = 0b1010
    STI = 0b1011
    JMP = 0b1100
    RES = 0b1101
    LEA = 0b1110
    TRAP = 0b1111


def sign_extend(value: int, bit_count: int) -> int:
    """Sign-extend a ``bit_count``-wide two's complement field to 16 bits."""
    value &= (1 << bit_count) - 1
    if (value >> (bit_count - 1)) & 1:
        value |= (0xFFFF << bit_count) & 0xFFFF
    return value


@dataclass(frozen=True)
class Instruction:
    """A fetched instruction word and its operand fields.

    Register fields are 3 bits wide; offsets and immediates are returned
    sign-extended to 16 bits.
    """
    word: int
    opcode: Opcode

    @property
    def dr(self) -> int:
        """Destination register, bits [11:9]. Also SR for stores."""
        return (self.word >> 9) & 0x7

    @property
    def sr1(self) -> int:
        """First source or base register, bits [8:6]."""
        return (self.word >> 6) & 0x7

    @property
    def sr2(self) -> int:
        return self.word & 0x7

    @property
    def imm_flag(self) -> bool:
        return bool((self.word >> 5) & 0x1)

    @property
    def imm5(self) -> int:
        return sign_extend(self.word & 0x1F, 5)

    @property
    def offset6(self) -> int:
        return sign_extend(self.word & 0x3F, 6)

    @property
    def pc_offset9(self) -> int:
        return sign_extend(self.word & 0x1FF, 9)

    @property
    def pc_offset11(self) -> int:
        return sign_extend(self.word & 0x7FF, 11)

    @property
    def long_flag(self) -> bool:
        """JSR (PC-relative) when set, JSRR (base register) when clear."""
        return bool((self.word >> 11) & 0x1)

    @property
    def cond_mask(self) -> int:
        """BR n/z/p mask, bits [11:9], aligned with ``Flag``."""
        return (self.word >> 9) & 0x7

    @property
    def trap_vector(self) -> int:
        return self.word & 0xFF


def opcode_of(word: int) -> Opcode:
    return Opcode((word >> 12) & 0xF)


def decode(word: int) -> Instruction:
    """Decode a raw 16-bit word."""
    word &= 0xFFFF
    return Instruction(word=word, opcode=opcode_of(word))
