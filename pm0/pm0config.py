#!/usr/bin/env python3

from dataclasses import dataclass

REGISTER_FILE_SIZE = 16
MAX_STACK_HEIGHT = 2000
MAX_CODE_LENGTH = 500
WORD_BITS = 32

# BP of the sentinel frame, SP starts one below it
INITIAL_BP = 1
INITIAL_SP = 0

@dataclass(frozen=True)
class MachineConfig:
    register_count: int = REGISTER_FILE_SIZE
    stack_capacity: int = MAX_STACK_HEIGHT
    max_code_length: int = MAX_CODE_LENGTH
    word_bits: int = WORD_BITS

    def __post_init__(self):
        if self.register_count <= 0:
            raise ValueError(f'register count must be positive, got {self.register_count}')
        # the sentinel frame's base must be addressable
        if self.stack_capacity <= INITIAL_BP:
            raise ValueError(f'stack capacity must exceed {INITIAL_BP}, got {self.stack_capacity}')
        if self.max_code_length <= 0:
            raise ValueError(f'code length limit must be positive, got {self.max_code_length}')
        if self.word_bits < 2:
            raise ValueError(f'word width must be at least 2 bits, got {self.word_bits}')
