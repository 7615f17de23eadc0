#!/usr/bin/env python3

from abc import ABC, abstractmethod
from collections import deque
from typing import Iterable, TextIO

from pm0fault import ChannelExhausted

class InputChannel(ABC):
    @abstractmethod
    def read(self) -> int:
        ...

class OutputChannel(ABC):
    @abstractmethod
    def write(self, value: int):
        ...

class StreamInputChannel(InputChannel):
    """Whitespace-separated integers, read a line at a time as they are needed."""

    def __init__(self, stream: TextIO):
        self.stream = stream
        self.pending: deque[str] = deque()

    def read(self) -> int:
        while not self.pending:
            line = self.stream.readline()
            if not line:
                raise ChannelExhausted('input channel ended')
            self.pending.extend(line.split())
        token = self.pending.popleft()
        try:
            return int(token)
        except ValueError:
            raise ChannelExhausted(f'input token `{token}` is not an integer') from None

class StreamOutputChannel(OutputChannel):
    def __init__(self, stream: TextIO):
        self.stream = stream

    def write(self, value: int):
        self.stream.write(f'{value} ')
        self.stream.flush()

class ListInputChannel(InputChannel):
    def __init__(self, values: Iterable[int] = ()):
        self.values = deque(values)

    def read(self) -> int:
        try:
            return self.values.popleft()
        except IndexError:
            raise ChannelExhausted('input channel ended') from None

class ListOutputChannel(OutputChannel):
    def __init__(self):
        self.values: list[int] = []

    def write(self, value: int):
        self.values.append(value)
