#!/usr/bin/env python3

import operator

from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Callable, Optional, Sequence, Union

from pm0channels import InputChannel, OutputChannel, ListInputChannel, ListOutputChannel
from pm0config import MachineConfig
from pm0fault import FaultKind, PM0Error, PM0Fault, InvalidOpcode, DivisionByZero
from pm0frames import FrameManager
from pm0isa import Opcode, Inst, InstructionStore
from pm0memory import RegisterFile, OperandStack, trunc_div, trunc_mod

class State(Enum):
    RUNNING = 'running'
    HALTED = 'halted'

@dataclass(frozen=True)
class Snapshot:
    index: int
    inst: Inst
    pc: int
    bp: int
    sp: int
    stack: tuple[int, ...]
    # frame bases reachable over dynamic links, outermost first
    frames: tuple[int, ...]

@dataclass(frozen=True)
class Termination:
    fault: Optional[PM0Fault]
    steps: int

    @property
    def halted_normally(self) -> bool:
        return self.fault is None

    @property
    def kind(self) -> Optional[FaultKind]:
        return None if self.fault is None else self.fault.kind

Reporter = Callable[[Snapshot], None]

_binary_ops: dict[Opcode, Callable[[int, int], int]] = {
    Opcode.ADD: operator.add,
    Opcode.SUB: operator.sub,
    Opcode.MUL: operator.mul,
    Opcode.EQL: operator.eq,
    Opcode.NEQ: operator.ne,
    Opcode.LSS: operator.lt,
    Opcode.LEQ: operator.le,
    Opcode.GTR: operator.gt,
    Opcode.GEQ: operator.ge,
}

class Vm:
    def __init__(self,
                 prog: Union[InstructionStore, Sequence[Inst]],
                 config: Optional[MachineConfig] = None,
                 input_channel: Optional[InputChannel] = None,
                 output_channel: Optional[OutputChannel] = None):
        self.config = config if config is not None else MachineConfig()
        if not isinstance(prog, InstructionStore):
            prog = InstructionStore(prog, self.config.max_code_length)
        self.prog = prog
        self.regs = RegisterFile(self.config.register_count, self.config.word_bits)
        self.frames = FrameManager(OperandStack(self.config.stack_capacity), len(prog))
        self.input = input_channel if input_channel is not None else ListInputChannel()
        self.output = output_channel if output_channel is not None else ListOutputChannel()
        self.pc = 0
        self.state = State.RUNNING
        self.fault: Optional[PM0Fault] = None
        self.steps = 0
        self.code: dict[Opcode, Callable[[Inst], None]] = {
            Opcode.LIT: self.lit,
            Opcode.RTN: self.rtn,
            Opcode.LOD: self.lod,
            Opcode.STO: self.sto,
            Opcode.CAL: self.cal,
            Opcode.INC: self.inc,
            Opcode.JMP: self.jmp,
            Opcode.JPC: self.jpc,
            Opcode.WRITE: self.write,
            Opcode.READ: self.read,
            Opcode.HALT: self.halt,
            Opcode.NEG: self.neg,
            Opcode.DIV: self.div,
            Opcode.ODD: self.odd,
            Opcode.MOD: self.mod,
        }
        for op, fn in _binary_ops.items():
            self.code[op] = partial(self.binary, fn)

    @property
    def bp(self) -> int:
        return self.frames.bp

    @property
    def sp(self) -> int:
        return self.frames.sp

    def lit(self, inst: Inst):
        self.regs.write(inst.r, inst.m)

    def rtn(self, _: Inst):
        self.pc = self.frames.ret()

    def lod(self, inst: Inst):
        self.regs.write(inst.r, self.frames.load(inst.l, inst.m))

    def sto(self, inst: Inst):
        self.frames.store(inst.l, inst.m, self.regs.read(inst.r))

    def cal(self, inst: Inst):
        self.frames.call(inst.l, self.pc)
        self.pc = inst.m

    def inc(self, inst: Inst):
        self.frames.reserve(inst.m)

    def jmp(self, inst: Inst):
        self.pc = inst.m

    def jpc(self, inst: Inst):
        if self.regs.read(inst.r) == 0:
            self.pc = inst.m

    def write(self, inst: Inst):
        self.output.write(self.regs.read(inst.r))

    def read(self, inst: Inst):
        self.regs.write(inst.r, self.input.read())

    def halt(self, _: Inst):
        self.state = State.HALTED

    def neg(self, inst: Inst):
        self.regs.write(inst.r, -self.regs.read(inst.l))

    def odd(self, inst: Inst):
        self.regs.write(inst.r, self.regs.read(inst.r) % 2)

    def binary(self, fn: Callable[[int, int], int], inst: Inst):
        value = fn(self.regs.read(inst.l), self.regs.read(inst.m))
        self.regs.write(inst.r, int(value))

    def _divisor(self, inst: Inst) -> int:
        divisor = self.regs.read(inst.m)
        if divisor == 0:
            raise DivisionByZero(f'r{inst.m} is 0')
        return divisor

    def div(self, inst: Inst):
        divisor = self._divisor(inst)
        self.regs.write(inst.r, trunc_div(self.regs.read(inst.l), divisor))

    def mod(self, inst: Inst):
        divisor = self._divisor(inst)
        self.regs.write(inst.r, trunc_mod(self.regs.read(inst.l), divisor))

    def step(self) -> Snapshot:
        if self.state is State.HALTED:
            raise PM0Error('machine is halted')
        index = self.pc
        try:
            inst = self.prog.fetch(index)
            # pc moves on before dispatch; control transfers overwrite it
            self.pc += 1
            try:
                op = Opcode(inst.op)
            except ValueError:
                raise InvalidOpcode(f'opcode {inst.op} at {index}') from None
            self.code[op](inst)
            snapshot = Snapshot(index, inst, self.pc, self.bp, self.sp,
                                self.frames.live(), tuple(reversed(self.frames.chain())))
        except PM0Fault as fault:
            self.state = State.HALTED
            self.fault = fault
            raise
        self.steps += 1
        return snapshot

    def run(self, reporter: Optional[Reporter] = None) -> Termination:
        while self.state is State.RUNNING:
            try:
                snapshot = self.step()
            except PM0Fault:
                break
            if reporter is not None:
                reporter(snapshot)
        return Termination(self.fault, self.steps)
