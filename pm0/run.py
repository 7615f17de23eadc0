#!/usr/bin/env python3

import pm0config
import pm0parser
import pm0trace

import optparse
import sys

from contextlib import ExitStack
from typing import Optional, TextIO

from pm0channels import StreamInputChannel, StreamOutputChannel
from pm0fault import LoadError
from pm0interpreter import Vm
from pm0isa import InstructionStore

def parse_args(argv: list[str]) -> tuple[optparse.Values, list[str]]:
    usage = 'usage: %prog [options] filename'
    p = optparse.OptionParser(usage=usage)
    p.add_option('--input',
                 metavar='FILE',
                 action='store',
                 type='string',
                 help='read machine input from FILE instead of stdin'
                 )
    p.add_option('--output',
                 metavar='FILE',
                 action='store',
                 type='string',
                 help='write machine output to FILE instead of stdout'
                 )
    p.add_option('--trace',
                 metavar='FILE',
                 action='store',
                 type='string',
                 help='write code listing and execution trace to FILE (- for stdout)'
                 )
    p.add_option('--registers',
                 metavar='N',
                 action='store',
                 type='int',
                 default=pm0config.REGISTER_FILE_SIZE,
                 help='number of registers [default: %default]'
                 )
    p.add_option('--stack-size',
                 metavar='N',
                 action='store',
                 type='int',
                 dest='stack_size',
                 default=pm0config.MAX_STACK_HEIGHT,
                 help='operand stack capacity [default: %default]'
                 )
    p.add_option('--max-code',
                 metavar='N',
                 action='store',
                 type='int',
                 dest='max_code',
                 default=pm0config.MAX_CODE_LENGTH,
                 help='maximum program length [default: %default]'
                 )
    p.add_option('--dis',
                 action='store_true',
                 default=False,
                 help='print the code listing and exit'
                 )
    return p.parse_args(argv)

def make_config(options: optparse.Values) -> pm0config.MachineConfig:
    return pm0config.MachineConfig(register_count=options.registers,
                                   stack_capacity=options.stack_size,
                                   max_code_length=options.max_code)

def load(filename: str, config: pm0config.MachineConfig) -> InstructionStore:
    insts = pm0parser.parse_file(filename)
    return InstructionStore(insts, config.max_code_length)

def dis(filename: str, config: pm0config.MachineConfig) -> Optional[int]:
    prog = load(filename, config)
    sys.stdout.write(pm0trace.format_listing(prog))

def simulate(filename: str, options: optparse.Values, config: pm0config.MachineConfig) -> Optional[int]:
    prog = load(filename, config)
    with ExitStack() as files:
        vm_in: TextIO = sys.stdin
        vm_out: TextIO = sys.stdout
        trace: Optional[TextIO] = None
        if options.input is not None:
            vm_in = files.enter_context(open(options.input, 'r'))
        if options.output is not None:
            vm_out = files.enter_context(open(options.output, 'w'))
        if options.trace == '-':
            trace = sys.stdout
        elif options.trace is not None:
            trace = files.enter_context(open(options.trace, 'w'))
        vm = Vm(prog, config, StreamInputChannel(vm_in), StreamOutputChannel(vm_out))
        reporter = None
        if trace is not None:
            trace.write(pm0trace.format_listing(prog))
            trace.write(pm0trace.format_execution_header())
            reporter = pm0trace.TraceReporter(trace)
        termination = vm.run(reporter)
        if trace is not None:
            print(pm0trace.format_termination(termination), file=trace)
    if termination.fault is not None:
        print(f'{filename}: fault: {termination.fault}', file=sys.stderr)
        return 1
    return 0

def main(argv: list[str]) -> Optional[int]:
    options, args = parse_args(argv)
    try:
        filename = args[1]
    except IndexError:
        print('error: no file provided', file=sys.stderr)
        return 1
    try:
        config = make_config(options)
        if options.dis:
            return dis(filename, config)
        return simulate(filename, options, config)
    except ValueError as e:
        print(f'error: {e}', file=sys.stderr)
        return 1
    except OSError as os_err:
        print(f'error: {os_err.filename}: {os_err.strerror}', file=sys.stderr)
        return 1
    except LoadError as le:
        print(f'{filename}:{le.args[0]}', file=sys.stderr)
        return 1

if __name__ == '__main__':
    status = main(sys.argv)
    sys.exit(status)
