#!/usr/bin/env python3

from typing import Iterable, TextIO

from pm0config import INITIAL_BP
from pm0interpreter import Snapshot, Termination
from pm0isa import Inst, mnemonic

def _columns(*values) -> str:
    return ''.join(f'{v:>3} ' for v in values)

def format_listing(prog: Iterable[Inst]) -> str:
    lines = ['***Code Memory***', _columns('#', 'OP', 'R', 'L', 'M')]
    for i, inst in enumerate(prog):
        lines.append(_columns(i, mnemonic(inst.op), inst.r, inst.l, inst.m))
    return '\n'.join(lines) + '\n'

def format_execution_header() -> str:
    return '\n***Execution***\n' + _columns('#', 'OP', 'R', 'L', 'M', 'PC', 'BP', 'SP', 'STK') + '\n'

def frame_starts(frames: tuple[int, ...]) -> list[int]:
    # a called frame starts at its reserved flag, one below its base
    return [INITIAL_BP if i == 0 else base - 1 for i, base in enumerate(frames)]

def format_stack(snapshot: Snapshot) -> str:
    stack = snapshot.stack
    out = _columns(stack[0])
    starts = frame_starts(snapshot.frames)
    for i, start in enumerate(starts):
        end = starts[i + 1] - 1 if i + 1 < len(starts) else snapshot.sp
        end = min(end, snapshot.sp)
        if start > end:
            continue
        out += '| ' + _columns(*stack[start:end + 1])
    return out

def format_snapshot(snapshot: Snapshot) -> str:
    inst = snapshot.inst
    row = _columns(snapshot.index, mnemonic(inst.op), inst.r, inst.l, inst.m,
                   snapshot.pc, snapshot.bp, snapshot.sp)
    return row + format_stack(snapshot)

def format_termination(termination: Termination) -> str:
    if termination.fault is None:
        return 'HLT'
    return f'FAULT {termination.fault}'

class TraceReporter:
    def __init__(self, out: TextIO):
        self.out = out

    def __call__(self, snapshot: Snapshot):
        print(format_snapshot(snapshot), file=self.out)
