#!/usr/bin/env python3

class StarryError(RuntimeError):
    pass

class ParseError(StarryError):
    message = 'parse error'

    def __init__(self, line: int):
        super().__init__(f'line {line} - {self.message}')
        self.line = line

class ZeroSpaceStackOp(ParseError):
    message = "zero space on '+'"

class DuplicatedLabel(ParseError):
    message = 'duplicated label'

class RuntimeFault(StarryError):
    message = 'runtime fault'

    def __init__(self, pc: int):
        super().__init__(f'pc={pc} {self.message}')
        self.pc = pc

class StackUnderflow(RuntimeFault):
    message = 'insufficient stack size'

class DivisionByZero(RuntimeFault):
    message = 'division by zero'

class UnresolvedJumpTarget(RuntimeFault):
    message = 'jump target is not found'

class UnknownInstruction(RuntimeFault):
    message = 'unknown instruction'
