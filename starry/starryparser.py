#!/usr/bin/env python3

import pyparsing as pp

from starryerrors import *
from starryvm import Opcode, Inst

STACK, CALC, OUTPUT, INPUT, LABEL, JUMP = '+', '*', '.', ',', '`', "'"

# locations must match the raw source: no whitespace skipping, no tab expansion
command = pp.Char(STACK + CALC + OUTPUT + INPUT + LABEL + JUMP)
command.leave_whitespace()
command.parse_with_tabs()
command.set_name('command')

_stack_opcodes = {
    1: Opcode.DUP,
    2: Opcode.SWAP,
    3: Opcode.ROTATE,
    4: Opcode.POP,
}
_calc_opcodes = (Opcode.ADD, Opcode.SUB, Opcode.MUL, Opcode.DIV, Opcode.MOD)
_output_opcodes = (Opcode.OUTPUT_NUMBER, Opcode.OUTPUT_CHAR)
_input_opcodes = (Opcode.INPUT_NUMBER, Opcode.INPUT_CHAR)

class __Context:
    def __init__(self, src: str):
        self.src = src
        self.loc = 0
        self.prog: list[Inst] = []
        self.labels: dict[int, int] = {}
        self.errors: list[ParseError] = []
        self.handlers = {
            STACK: self.stack_op,
            CALC: self.calc_op,
            OUTPUT: self.output_op,
            INPUT: self.input_op,
            LABEL: self.label,
            JUMP: self.jump,
        }

    def emit(self, opcode: Opcode, x=0):
        self.prog.append(Inst(opcode, x))

    def error(self, error_type: type[ParseError]):
        # lines are counted from 0
        self.errors.append(error_type(pp.lineno(self.loc, self.src) - 1))

    def stack_op(self, spaces: int):
        if spaces == 0:
            self.error(ZeroSpaceStackOp)
        elif spaces in _stack_opcodes:
            self.emit(_stack_opcodes[spaces])
        else:
            self.emit(Opcode.PUSH, spaces - 5)

    def calc_op(self, spaces: int):
        self.emit(_calc_opcodes[spaces % 5])

    def output_op(self, spaces: int):
        self.emit(_output_opcodes[spaces % 2])

    def input_op(self, spaces: int):
        self.emit(_input_opcodes[spaces % 2])

    def label(self, spaces: int):
        if spaces in self.labels:
            self.error(DuplicatedLabel)
            return
        # the label instruction itself is the jump destination
        self.labels[spaces] = len(self.prog)
        self.emit(Opcode.LABEL, spaces)

    def jump(self, spaces: int):
        self.emit(Opcode.JMP_NZ, spaces)

    def parse(self) -> tuple[list[Inst], dict[int, int], list[ParseError]]:
        end = 0
        for toks, start, stop in command.scan_string(self.src):
            spaces = self.src.count(' ', end, start)
            self.loc = start
            self.handlers[toks[0]](spaces)
            end = stop
        return self.prog, self.labels, self.errors

def parse(src: str) -> tuple[list[Inst], dict[int, int], list[ParseError]]:
    ctx = __Context(src)
    return ctx.parse()
