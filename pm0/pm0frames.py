#!/usr/bin/env python3

from pm0config import INITIAL_BP, INITIAL_SP
from pm0fault import StackOverflow, StackUnderflow
from pm0memory import OperandStack

# An activation record starting at stack index s looks like
#
#   s      reserved flag (always 0)
#   s + 1  static link       <- bp
#   s + 2  dynamic link
#   s + 3  return address
#   s + 4  first local
#
# Lexical offsets count from the reserved flag, so offset 4 is the first local.
STATIC_LINK = 0
DYNAMIC_LINK = 1
RETURN_ADDRESS = 2
HEADER_SIZE = 3
# offset 0 is the reserved flag at bp - 1 (see layout above), not bp - HEADER_SIZE
ADDRESS_BIAS = 1

class FrameManager:
    def __init__(self, stack: OperandStack, code_length: int):
        self.stack = stack
        self.code_length = code_length
        self.bp = INITIAL_BP
        self.sp = INITIAL_SP
        # active calls; the sentinel frame is not counted
        self.depth = 0

    def frames(self) -> list[int]:
        """Bases of the live frames, innermost first. The last one is the sentinel."""
        bases = [self.bp]
        for _ in range(self.depth):
            bases.append(self.stack.read(bases[-1] + DYNAMIC_LINK))
        return bases

    def chain(self) -> list[int]:
        """
        Like frames(), but stops quietly at the first dynamic link whose
        header would fall outside the stack. Used for inspection only.
        """
        bases = [self.bp]
        for _ in range(self.depth):
            link = self.stack.read(bases[-1] + DYNAMIC_LINK)
            if link < INITIAL_BP or link + RETURN_ADDRESS >= self.stack.capacity:
                break
            bases.append(link)
        return bases

    def base(self, level: int) -> int:
        """
        Base of the frame `level` static links out from the current one.

        Every link followed must name a frame further out on the dynamic
        chain, otherwise the chase stops with StackUnderflow.
        """
        if level < 0:
            raise StackUnderflow(f'negative lexical level {level}')
        chain = self.frames()
        pos = 0
        for _ in range(level):
            if pos == len(chain) - 1:
                raise StackUnderflow(f'lexical level {level} reaches past the outermost frame')
            link = self.stack.read(chain[pos] + STATIC_LINK)
            try:
                pos = chain.index(link, pos + 1)
            except ValueError:
                raise StackUnderflow(f'static link {link} of frame {chain[pos]} names no live frame') from None
        return chain[pos]

    def resolve(self, level: int, offset: int) -> int:
        addr = self.base(level) + offset - ADDRESS_BIAS
        if addr < 0:
            raise StackUnderflow(f'address {addr} (level {level}, offset {offset}) below 0')
        if addr > self.sp:
            raise StackUnderflow(f'address {addr} (level {level}, offset {offset}) above sp {self.sp}')
        return addr

    def load(self, level: int, offset: int) -> int:
        return self.stack.read(self.resolve(level, offset))

    def store(self, level: int, offset: int, value: int):
        self.stack.write(self.resolve(level, offset), value)

    def call(self, level: int, return_address: int):
        static_link = self.base(level)
        flag = self.sp
        if flag + HEADER_SIZE >= self.stack.capacity:
            raise StackOverflow(f'frame header at {flag} exceeds capacity {self.stack.capacity}')
        bp = flag + 1
        self.stack.write(flag, 0)
        self.stack.write(bp + STATIC_LINK, static_link)
        self.stack.write(bp + DYNAMIC_LINK, self.bp)
        self.stack.write(bp + RETURN_ADDRESS, return_address)
        # sp stays put until the callee reserves its locals
        self.bp = bp
        self.depth += 1

    def ret(self) -> int:
        if self.depth == 0:
            raise StackUnderflow('return with no matching call')
        bp = self.stack.read(self.bp + DYNAMIC_LINK)
        pc = self.stack.read(self.bp + RETURN_ADDRESS)
        if not INITIAL_BP <= bp < self.stack.capacity:
            raise StackUnderflow(f'dynamic link {bp} of frame {self.bp} out of range')
        if not 0 <= pc <= self.code_length:
            raise StackUnderflow(f'return address {pc} of frame {self.bp} out of range')
        self.sp = self.bp - 1
        self.bp = bp
        self.depth -= 1
        return pc

    def reserve(self, count: int):
        sp = self.sp + count
        if sp >= self.stack.capacity:
            raise StackOverflow(f'reserving {count} slots moves sp to {sp}, capacity is {self.stack.capacity}')
        if sp < 0:
            raise StackUnderflow(f'reserving {count} slots moves sp to {sp}')
        self.sp = sp

    def live(self) -> tuple[int, ...]:
        return self.stack.slice(self.sp + 1)
