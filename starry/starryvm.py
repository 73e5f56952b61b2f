#!/usr/bin/env python3

import sys

from enum import IntEnum, auto, unique
from typing import Callable, NamedTuple, Optional, TextIO

from starryerrors import *

@unique
class Opcode(IntEnum):
    NOP = 0               # nop
    PUSH = auto()         # stack.append(arg)
    POP = auto()          # stack.pop()
    DUP = auto()          # stack.append(stack[-1])
    SWAP = auto()         # stack[-2], stack[-1] <- stack[-1], stack[-2]
    ROTATE = auto()       # stack[-3:] <- stack[-1], stack[-3], stack[-2]
    ADD = auto()          # stack[-1] <- stack[-2] + stack[-1]
    SUB = auto()          # stack[-1] <- stack[-2] - stack[-1]
    MUL = auto()          # stack[-1] <- stack[-2] * stack[-1]
    DIV = auto()          # stack[-1] <- stack[-2] / stack[-1], truncated
    MOD = auto()          # stack[-1] <- stack[-2] % stack[-1], truncated
    LABEL = auto()        # nop, jump destination for arg
    JMP_NZ = auto()       # if stack.pop() != 0 goto labels[arg]
    OUTPUT_NUMBER = auto()
    OUTPUT_CHAR = auto()
    INPUT_NUMBER = auto()
    INPUT_CHAR = auto()

_mnemonics = {
    Opcode.NOP: 'nop',
    Opcode.PUSH: 'push',
    Opcode.POP: 'pop',
    Opcode.DUP: 'dup',
    Opcode.SWAP: 'swap',
    Opcode.ROTATE: 'rotate',
    Opcode.ADD: '+',
    Opcode.SUB: '-',
    Opcode.MUL: '*',
    Opcode.DIV: '/',
    Opcode.MOD: '%',
    Opcode.LABEL: 'label',
    Opcode.JMP_NZ: 'jumpnz',
    Opcode.OUTPUT_NUMBER: 'output number',
    Opcode.OUTPUT_CHAR: 'output character',
    Opcode.INPUT_NUMBER: 'input number',
    Opcode.INPUT_CHAR: 'input character',
}

_with_arg = { Opcode.PUSH, Opcode.LABEL, Opcode.JMP_NZ }

class Inst(NamedTuple):
    op: Opcode
    arg: int = 0

    def decode(self) -> str:
        if self.op in _with_arg:
            return f'{_mnemonics[self.op]} {self.arg}'
        return _mnemonics[self.op]

    def __str__(self) -> str:
        return self.decode()

def _quot(y: int, x: int) -> int:
    q = abs(y) // abs(x)
    return q if (y < 0) == (x < 0) else -q

def _to_char(value: int) -> str:
    if value < 0 or value > 0x10ffff or 0xd800 <= value <= 0xdfff:
        return '\ufffd'
    return chr(value)

class _Input:
    """Character source with one character of pushback.

    Reads never fail: exhausted or malformed input reads as 0.
    """

    def __init__(self, stream: TextIO):
        self.stream = stream
        self.pending = ''

    def getc(self) -> str:
        if self.pending:
            c, self.pending = self.pending, ''
            return c
        return self.stream.read(1)

    def ungetc(self, c: str):
        self.pending = c

    def read_char(self) -> int:
        c = self.getc()
        return ord(c) if c else 0

    def read_number(self) -> int:
        c = self.getc()
        while c and c.isspace():
            c = self.getc()
        sign = 1
        if c and c in '+-':
            if c == '-':
                sign = -1
            c = self.getc()
        digits = ''
        while c and c in '0123456789':
            digits += c
            c = self.getc()
        if c:
            self.ungetc(c)
        return sign * int(digits) if digits else 0

class Vm:
    def __init__(self, prog: list[Inst], labels: dict[int, int],
                 stdin: Optional[TextIO] = None,
                 stdout: Optional[TextIO] = None,
                 stderr: Optional[TextIO] = None):
        self.prog = prog
        self.labels = labels
        self.stack: list[int] = []
        self.pc = 0
        self.stdin = _Input(sys.stdin if stdin is None else stdin)
        self.stdout = sys.stdout if stdout is None else stdout
        self.stderr = sys.stderr if stderr is None else stderr
        self.code: dict[Opcode, Callable[[int], None]] = {
            Opcode.NOP: self.nop,
            Opcode.PUSH: self.push,
            Opcode.POP: self.discard,
            Opcode.DUP: self.dup,
            Opcode.SWAP: self.swap,
            Opcode.ROTATE: self.rotate,
            Opcode.ADD: self.add,
            Opcode.SUB: self.sub,
            Opcode.MUL: self.mul,
            Opcode.DIV: self.div,
            Opcode.MOD: self.mod,
            Opcode.LABEL: self.nop,
            Opcode.JMP_NZ: self.jmp_nz,
            Opcode.OUTPUT_NUMBER: self.output_number,
            Opcode.OUTPUT_CHAR: self.output_char,
            Opcode.INPUT_NUMBER: self.input_number,
            Opcode.INPUT_CHAR: self.input_char,
        }

    def pop(self) -> int:
        if not self.stack:
            raise StackUnderflow(self.pc)
        return self.stack.pop()

    def nop(self, _: int):
        pass

    def push(self, value: int):
        self.stack.append(value)

    def discard(self, _: int):
        self.pop()

    def dup(self, _: int):
        top = self.pop()
        self.stack.append(top)
        self.stack.append(top)

    def swap(self, _: int):
        x = self.pop()
        y = self.pop()
        self.stack.append(x)
        self.stack.append(y)

    def rotate(self, _: int):
        x = self.pop()
        y = self.pop()
        z = self.pop()
        self.stack.append(x)
        self.stack.append(z)
        self.stack.append(y)

    def add(self, _: int):
        x = self.pop()
        y = self.pop()
        self.stack.append(y + x)

    def sub(self, _: int):
        x = self.pop()
        y = self.pop()
        self.stack.append(y - x)

    def mul(self, _: int):
        x = self.pop()
        y = self.pop()
        self.stack.append(y * x)

    def div(self, _: int):
        x = self.pop()
        y = self.pop()
        if x == 0:
            raise DivisionByZero(self.pc)
        self.stack.append(_quot(y, x))

    def mod(self, _: int):
        x = self.pop()
        y = self.pop()
        if x == 0:
            raise DivisionByZero(self.pc)
        self.stack.append(y - x * _quot(y, x))

    def jmp_nz(self, label: int):
        if label not in self.labels:
            raise UnresolvedJumpTarget(self.pc)
        if self.pop() != 0:
            self.pc = self.labels[label]
        else:
            self.pc += 1

    def output_number(self, _: int):
        self.stdout.write(str(self.pop()))

    def output_char(self, _: int):
        self.stdout.write(_to_char(self.pop()))

    def input_number(self, _: int):
        self.stdout.flush()
        self.stack.append(self.stdin.read_number())

    def input_char(self, _: int):
        self.stdout.flush()
        self.stack.append(self.stdin.read_char())

    def step(self) -> Optional[RuntimeFault]:
        inst = self.prog[self.pc]
        handler = self.code.get(inst.op)
        if handler is None:
            return UnknownInstruction(self.pc)
        try:
            handler(inst.arg)
        except RuntimeFault as fault:
            return fault
        # jmp_nz moves pc itself
        if inst.op != Opcode.JMP_NZ:
            self.pc += 1
        return None

    def run(self) -> tuple[int, Optional[RuntimeFault]]:
        return self._run(trace=False)

    def run_with_trace(self) -> tuple[int, Optional[RuntimeFault]]:
        return self._run(trace=True)

    def _run(self, trace: bool) -> tuple[int, Optional[RuntimeFault]]:
        length = len(self.prog)
        while self.pc < length:
            fault = self.step()
            if fault is not None:
                return 1, fault
            if trace:
                snapshot = ' '.join(map(str, self.stack))
                print(f'[Debug] Stack=[{snapshot}] PC={self.pc}', file=self.stderr)
        return 0, None
