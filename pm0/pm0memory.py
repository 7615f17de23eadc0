#!/usr/bin/env python3

from pm0fault import InvalidRegister, StackOverflow, StackUnderflow

def wrap(value: int, bits: int) -> int:
    """Reduce value to a signed two's-complement integer of the given width."""
    half = 1 << (bits - 1)
    return (value + half) % (1 << bits) - half

def trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q

def trunc_mod(a: int, b: int) -> int:
    return a - b * trunc_div(a, b)

class RegisterFile:
    def __init__(self, count: int, word_bits: int):
        self.word_bits = word_bits
        self.__regs = [0] * count

    def __len__(self) -> int:
        return len(self.__regs)

    def _check(self, i: int):
        if not 0 <= i < len(self.__regs):
            raise InvalidRegister(f'register {i} outside r0..r{len(self.__regs) - 1}')

    def read(self, i: int) -> int:
        self._check(i)
        return self.__regs[i]

    def write(self, i: int, value: int):
        self._check(i)
        self.__regs[i] = wrap(value, self.word_bits)

    def values(self) -> tuple[int, ...]:
        return tuple(self.__regs)

class OperandStack:
    """
    Fixed-capacity integer array shared by user data and frame headers.

    Only bounds are checked here; liveness relative to SP is the frame
    manager's business.
    """

    def __init__(self, capacity: int):
        self.__cells = [0] * capacity

    @property
    def capacity(self) -> int:
        return len(self.__cells)

    def _check(self, i: int):
        if i < 0:
            raise StackUnderflow(f'stack index {i} below 0')
        if i >= len(self.__cells):
            raise StackOverflow(f'stack index {i} exceeds capacity {len(self.__cells)}')

    def read(self, i: int) -> int:
        self._check(i)
        return self.__cells[i]

    def write(self, i: int, value: int):
        self._check(i)
        self.__cells[i] = value

    def slice(self, stop: int) -> tuple[int, ...]:
        return tuple(self.__cells[:stop])
