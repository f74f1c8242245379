"""Instruction execution for the LC-3 virtual machine."""

from typing import Callable
from .cpu import CPU, Reg
from .memory import Memory
from .decoder import Instruction, Opcode
from .traps import TrapDispatcher
from .errors import IllegalOpcode


def _second_operand(instr: Instruction, cpu: CPU) -> int:
    """imm5 when bit 5 is set, else SR2."""
    if instr.imm_flag:
        return instr.imm5
    return cpu.get(instr.sr2)


# Instruction executor type
InstructionExecutor = Callable[[Instruction, CPU, Memory, TrapDispatcher], None]


def execute_add(instr: Instruction, cpu: CPU, mem: Memory, traps: TrapDispatcher) -> None:
    """ADD DR, SR1, SR2|imm5: DR := SR1 + operand"""
    cpu.set_and_flag(instr.dr, cpu.get(instr.sr1) + _second_operand(instr, cpu))


def execute_and(instr: Instruction, cpu: CPU, mem: Memory, traps: TrapDispatcher) -> None:
    """AND DR, SR1, SR2|imm5: DR := SR1 & operand"""
    cpu.set_and_flag(instr.dr, cpu.get(instr.sr1) & _second_operand(instr, cpu))


def execute_not(instr: Instruction, cpu: CPU, mem: Memory, traps: TrapDispatcher) -> None:
    """NOT DR, SR: DR := ~SR"""
    cpu.set_and_flag(instr.dr, ~cpu.get(instr.sr1))


def execute_br(instr: Instruction, cpu: CPU, mem: Memory, traps: TrapDispatcher) -> None:
    """BRnzp offset9: if (mask & COND) PC := PC + offset9"""
    if instr.cond_mask & cpu.get(Reg.COND):
        cpu.pc = cpu.pc + instr.pc_offset9


def execute_jmp(instr: Instruction, cpu: CPU, mem: Memory, traps: TrapDispatcher) -> None:
    """JMP BaseR: PC := BaseR (RET is JMP R7)"""
    cpu.pc = cpu.get(instr.sr1)


def execute_jsr(instr: Instruction, cpu: CPU, mem: Memory, traps: TrapDispatcher) -> None:
    """JSR offset11 / JSRR BaseR: R7 := PC, then jump"""
    cpu.set(Reg.R7, cpu.pc)
    if instr.long_flag:
        cpu.pc = cpu.pc + instr.pc_offset11
    else:
        # BaseR is read after the link, so JSRR R7 lands on the return address.
        cpu.pc = cpu.get(instr.sr1)


def execute_ld(instr: Instruction, cpu: CPU, mem: Memory, traps: TrapDispatcher) -> None:
    """LD DR, offset9: DR := MEM[PC + offset9]"""
    cpu.set_and_flag(instr.dr, mem.read(cpu.pc + instr.pc_offset9))


def execute_ldi(instr: Instruction, cpu: CPU, mem: Memory, traps: TrapDispatcher) -> None:
    """LDI DR, offset9: DR := MEM[MEM[PC + offset9]]"""
    indirect_addr = mem.read(cpu.pc + instr.pc_offset9)
    cpu.set_and_flag(instr.dr, mem.read(indirect_addr))


def execute_ldr(instr: Instruction, cpu: CPU, mem: Memory, traps: TrapDispatcher) -> None:
    """LDR DR, BaseR, offset6: DR := MEM[BaseR + offset6]"""
    cpu.set_and_flag(instr.dr, mem.read(cpu.get(instr.sr1) + instr.offset6))


def execute_lea(instr: Instruction, cpu: CPU, mem: Memory, traps: TrapDispatcher) -> None:
    """LEA DR, offset9: DR := PC + offset9"""
    cpu.set_and_flag(instr.dr, cpu.pc + instr.pc_offset9)


def execute_st(instr: Instruction, cpu: CPU, mem: Memory, traps: TrapDispatcher) -> None:
    """ST SR, offset9: MEM[PC + offset9] := SR"""
    mem.write(cpu.pc + instr.pc_offset9, cpu.get(instr.dr))


def execute_sti(instr: Instruction, cpu: CPU, mem: Memory, traps: TrapDispatcher) -> None:
    """STI SR, offset9: MEM[MEM[PC + offset9]] := SR"""
    indirect_addr = mem.read(cpu.pc + instr.pc_offset9)
    mem.write(indirect_addr, cpu.get(instr.dr))


def execute_str(instr: Instruction, cpu: CPU, mem: Memory, traps: TrapDispatcher) -> None:
    """STR SR, BaseR, offset6: MEM[BaseR + offset6] := SR"""
    mem.write(cpu.get(instr.sr1) + instr.offset6, cpu.get(instr.dr))


def execute_trap(instr: Instruction, cpu: CPU, mem: Memory, traps: TrapDispatcher) -> None:
    """TRAP trapvect8: R7 := PC, run service routine"""
    cpu.set(Reg.R7, cpu.pc)
    traps.dispatch(instr.trap_vector, cpu, mem)


def execute_illegal(instr: Instruction, cpu: CPU, mem: Memory, traps: TrapDispatcher) -> None:
    """RES / RTI: not supported, fatal"""
    raise IllegalOpcode(
        f"Illegal opcode {instr.opcode.name} (0x{instr.word:04X})",
        opcode=int(instr.opcode),
        word=instr.word,
    )


# Instruction dispatch table
INSTRUCTION_EXECUTORS: dict[Opcode, InstructionExecutor] = {
    Opcode.BR: execute_br,
    Opcode.ADD: execute_add,
    Opcode.LD: execute_ld,
    Opcode.ST: execute_st,
    Opcode.JSR: execute_jsr,
    Opcode.AND: execute_and,
    Opcode.LDR: execute_ldr,
    Opcode.STR: execute_str,
    Opcode.RTI: execute_illegal,
    Opcode.NOT: execute_not,
    Opcode.LDI: execute_ldi,
    Opcode.STI: execute_sti,
    Opcode.JMP: execute_jmp,
    Opcode.RES: execute_illegal,
    Opcode.LEA: execute_lea,
    Opcode.TRAP: execute_trap,
}


def execute_instruction(
    instr: Instruction,
    cpu: CPU,
    mem: Memory,
    traps: TrapDispatcher,
) -> None:
    """Execute a single decoded instruction.

    Unknown opcodes fall back to the illegal-opcode handler.
    """
    executor = INSTRUCTION_EXECUTORS.get(instr.opcode, execute_illegal)
    executor(instr, cpu, mem, traps)
