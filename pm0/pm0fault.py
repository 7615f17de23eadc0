#!/usr/bin/env python3

import pyparsing

from enum import Enum
from typing import NoReturn

class FaultKind(Enum):
    INVALID_OPCODE = 'InvalidOpcode'
    INVALID_REGISTER = 'InvalidRegister'
    STACK_OVERFLOW = 'StackOverflow'
    STACK_UNDERFLOW = 'StackUnderflow'
    DIVISION_BY_ZERO = 'DivisionByZero'
    CHANNEL_EXHAUSTED = 'ChannelExhausted'
    OUT_OF_RANGE = 'OutOfRange'

class PM0Error(RuntimeError):
    pass

class LoadError(PM0Error):
    pass

def load_error(src: str, loc: int, msg: str) -> NoReturn:
    lineno = pyparsing.lineno(loc, src)
    col = pyparsing.col(loc, src)
    line = pyparsing.line(loc, src)
    ptr = f'{" " * (col-1)}^'
    raise LoadError(f'{lineno}:{col}: error: {msg}\n{line}\n{ptr}')

class PM0Fault(PM0Error):
    """A runtime fault. Always halts the machine that raised it."""
    kind: FaultKind

    def __str__(self) -> str:
        return f'{self.kind.value}: {self.args[0] if self.args else ""}'

class InvalidOpcode(PM0Fault):
    kind = FaultKind.INVALID_OPCODE

class InvalidRegister(PM0Fault):
    kind = FaultKind.INVALID_REGISTER

class StackOverflow(PM0Fault):
    kind = FaultKind.STACK_OVERFLOW

class StackUnderflow(PM0Fault):
    kind = FaultKind.STACK_UNDERFLOW

class DivisionByZero(PM0Fault):
    kind = FaultKind.DIVISION_BY_ZERO

class ChannelExhausted(PM0Fault):
    kind = FaultKind.CHANNEL_EXHAUSTED

class OutOfRange(PM0Fault):
    kind = FaultKind.OUT_OF_RANGE
