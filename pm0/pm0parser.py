#!/usr/bin/env python3

import pyparsing as pp

from pm0fault import load_error
from pm0isa import Inst

# The feed is a flat stream of integers taken four at a time; line breaks
# carry no meaning.
integer = pp.pyparsing_common.signed_integer.copy()
integer.set_name('integer')

record = integer - integer - integer - integer
record.set_parse_action(lambda s, loc, toks: Inst(*toks))
record.set_name('instruction')

program = record[...]
parser = program
parser.ignore(pp.dbl_slash_comment)

def parse_program(src: str) -> list[Inst]:
    try:
        insts = parser.parse_string(src, parse_all=True).as_list()
    except pp.ParseBaseException as pe:
        load_error(src, pe.loc, pe.msg)
    assert all(isinstance(inst, Inst) for inst in insts)
    return insts

def parse_file(filename: str) -> list[Inst]:
    with open(filename, 'r') as f:
        return parse_program(f.read())
