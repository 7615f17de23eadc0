#!/usr/bin/env python3

from typing import NamedTuple, Sequence
from enum import IntEnum, unique

from pm0fault import OutOfRange, LoadError

@unique
class Opcode(IntEnum):
    LIT = 1     # reg[r] <- m
    RTN = 2     # pop frame, restore bp and pc
    LOD = 3     # reg[r] <- stack[resolve(l, m)]
    STO = 4     # stack[resolve(l, m)] <- reg[r]
    CAL = 5     # push frame header, bp <- sp + 1, pc <- m
    INC = 6     # sp <- sp + m
    JMP = 7     # pc <- m
    JPC = 8     # if reg[r] == 0 goto m
    WRITE = 9   # output reg[r]
    READ = 10   # reg[r] <- input
    HALT = 11   # stop
    NEG = 12    # reg[r] <- -reg[l]
    ADD = 13    # reg[r] <- reg[l] + reg[m]
    SUB = 14    # reg[r] <- reg[l] - reg[m]
    MUL = 15    # reg[r] <- reg[l] * reg[m]
    DIV = 16    # reg[r] <- reg[l] / reg[m]
    ODD = 17    # reg[r] <- reg[r] is odd
    MOD = 18    # reg[r] <- reg[l] % reg[m]
    EQL = 19    # reg[r] <- reg[l] == reg[m]
    NEQ = 20    # reg[r] <- reg[l] != reg[m]
    LSS = 21    # reg[r] <- reg[l] < reg[m]
    LEQ = 22    # reg[r] <- reg[l] <= reg[m]
    GTR = 23    # reg[r] <- reg[l] > reg[m]
    GEQ = 24    # reg[r] <- reg[l] >= reg[m]

# the three system i/o opcodes share one mnemonic
MNEMONICS: dict[Opcode, str] = {
    op: 'sio' if op in (Opcode.WRITE, Opcode.READ, Opcode.HALT) else op.name.lower()
    for op in Opcode
}

def mnemonic(op: int) -> str:
    try:
        return MNEMONICS[Opcode(op)]
    except ValueError:
        return '???'

# op is kept as a raw int so that unknown opcodes only fault when executed
Inst = NamedTuple('Inst', op=int, r=int, l=int, m=int)

class InstructionStore:
    def __init__(self, insts: Sequence[Inst], max_length: int | None = None):
        if max_length is not None and len(insts) > max_length:
            raise LoadError(f'program has {len(insts)} instructions, limit is {max_length}')
        self.__insts = tuple(Inst(*inst) for inst in insts)

    def __len__(self) -> int:
        return len(self.__insts)

    def __iter__(self):
        return iter(self.__insts)

    def fetch(self, pc: int) -> Inst:
        if not 0 <= pc < len(self.__insts):
            raise OutOfRange(f'pc {pc} outside program of {len(self.__insts)} instructions')
        return self.__insts[pc]
