import logging
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Callable, Dict, List, Optional, Union

from wslang.diagnostics import Diagnostics, Severity
from wslang.errors import (
    ExecutionError, UndefinedLabelError, CallStackUnderflowError, DivisionByZeroError, InvalidInputError,
    DuplicateLabelWarning,
)
from wslang.instructions import Instruction, Opcode, Program
from wslang.io_channels import ConsoleIO
from wslang.memory import Memory
from wslang.ws_parser import Parser

logger = logging.getLogger(__name__)


class ErrorPolicy(Enum):
    """What a runtime fault does to the run.

    LENIENT records an Error diagnostic and continues with a safe default:
    a pop from an empty stack yields 0, a failed stack shaping operation
    leaves the stack as it was, division or modulo by zero pushes 0, an
    undefined label or an empty call stack does not jump, bad input reads
    as 0. STRICT records the same diagnostic and stops the run.
    """
    LENIENT = "lenient"
    STRICT = "strict"


@dataclass
class RunConfig:
    policy: ErrorPolicy = ErrorPolicy.LENIENT
    # bind every Mark before the first step; False binds labels only when Marks execute
    prebind_labels: bool = True
    trace: bool = False


def divide(a: int, b: int) -> int:
    # rounds toward zero
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def modulo(a: int, b: int) -> int:
    return a - b * divide(a, b)


class Runner:
    """Executes one Program once.

    Flow instructions never move the program counter themselves: they leave
    a pending jump which ``step`` consumes after the instruction finishes.
    """

    def __init__(self, program: Program, io: Optional[ConsoleIO] = None, config: Optional[RunConfig] = None,
                 diagnostics: Optional[Diagnostics] = None):
        self.program = program
        self.io = io if io is not None else ConsoleIO()
        self.config = config if config is not None else RunConfig()
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.memory = Memory(self.fault)
        self.labels: Dict[str, int] = {}
        self.call_stack: List[int] = []
        self.pc = 0
        self.pending_jump: Optional[int] = None
        self.halted = False
        self.failed = False
        self.started = False
        self.steps = 0
        self.handlers: Dict[Opcode, Callable[[Instruction], None]] = {
            Opcode.PUSH: lambda i: self.memory.push(i.argument),
            Opcode.COPY: lambda i: self.memory.copy(i.argument),
            Opcode.SWAP: lambda i: self.memory.swap(),
            Opcode.DISCARD: lambda i: self.memory.discard(),
            Opcode.DUPLICATE: lambda i: self.memory.duplicate(),
            Opcode.SLIDE: lambda i: self.memory.slide(i.argument),
            Opcode.ADD: self.arithmetic,
            Opcode.SUB: self.arithmetic,
            Opcode.MUL: self.arithmetic,
            Opcode.DIV: self.arithmetic,
            Opcode.MOD: self.arithmetic,
            Opcode.HEAP_STORE: self.heap_store,
            Opcode.HEAP_READ: self.heap_read,
            Opcode.OUTPUT_CHAR: self.output,
            Opcode.OUTPUT_NUM: self.output,
            Opcode.MARK: lambda i: self.set_label(i.argument, self.pc),
            Opcode.CALL: lambda i: self.call(i.argument),
            Opcode.JUMP: lambda i: self.jump(i.argument),
            Opcode.JUMP_ZERO: lambda i: self.jump_if_zero(i.argument),
            Opcode.JUMP_NEGATIVE: lambda i: self.jump_if_negative(i.argument),
            Opcode.RETURN: lambda i: self.return_from_call(),
            Opcode.EXIT: lambda i: self.exit(),
            Opcode.INPUT_CHAR: self.input,
            Opcode.INPUT_NUM: self.input,
        }
        if self.config.prebind_labels:
            self.bind_labels()

    @property
    def finished(self) -> bool:
        return self.halted or not 0 <= self.pc < len(self.program)

    def fault(self, error: ExecutionError):
        self.diagnostics.report(error, self.pc)
        if self.config.policy is ErrorPolicy.STRICT:
            raise error

    def bind_labels(self):
        for label, positions in self.program.marks().items():
            if len(positions) > 1:
                warning = DuplicateLabelWarning(label, positions[0], positions[-1])
                self.diagnostics.report(warning, positions[-1], Severity.WARNING)
            self.labels[label] = positions[-1]

    def execute(self, instruction: Instruction):
        self.handlers[instruction.opcode](instruction)

    def step(self):
        if self.finished:
            return
        self.started = True
        instruction = self.program[self.pc]
        if self.config.trace:
            logger.debug("[%d] %s", self.pc, instruction)
        try:
            instruction.execute(self)
        except ExecutionError as e:
            # already reported by fault()
            logger.info("Run stopped at instruction %d: %s", self.pc, e)
            self.halted = True
            self.failed = True
            return
        finally:
            self.steps += 1
        if self.pending_jump is not None:
            self.pc = self.pending_jump
            self.pending_jump = None
        else:
            self.pc += 1

    def run(self) -> Diagnostics:
        if self.started:
            raise ValueError("Runner has already executed its program, create a new one")
        if len(self.program) == 0:
            self.diagnostics.notice("Program contains no instructions")
        while not self.finished:
            self.step()
        logger.debug("Run finished after %d steps", self.steps)
        return self.diagnostics

    def set_label(self, label: str, pos: int):
        self.labels[label] = pos

    def jump(self, label: str):
        target = self.labels.get(label)
        if target is None:
            self.fault(UndefinedLabelError(label))
            return
        self.pending_jump = target

    def jump_if_zero(self, label: str):
        if self.memory.pop() == 0:
            self.jump(label)

    def jump_if_negative(self, label: str):
        if self.memory.pop() < 0:
            self.jump(label)

    def call(self, label: str):
        if label not in self.labels:
            self.fault(UndefinedLabelError(label))
            return
        self.call_stack.append(self.pc + 1)
        self.jump(label)

    def return_from_call(self):
        if not self.call_stack:
            self.fault(CallStackUnderflowError())
            return
        self.pending_jump = self.call_stack.pop()

    def exit(self):
        self.halted = True

    def arithmetic(self, instruction: Instruction):
        b = self.memory.pop()
        a = self.memory.pop()
        opcode = instruction.opcode
        if opcode is Opcode.ADD:
            result = a + b
        elif opcode is Opcode.SUB:
            result = a - b
        elif opcode is Opcode.MUL:
            result = a * b
        elif b == 0:
            self.fault(DivisionByZeroError("div" if opcode is Opcode.DIV else "mod"))
            result = 0
        elif opcode is Opcode.DIV:
            result = divide(a, b)
        else:
            result = modulo(a, b)
        self.memory.push(result)

    def heap_store(self, instruction: Instruction):
        value = self.memory.pop()
        address = self.memory.pop()
        self.memory.heap_store(address, value)

    def heap_read(self, instruction: Instruction):
        address = self.memory.pop()
        self.memory.push(self.memory.heap_retrieve(address))

    def output(self, instruction: Instruction):
        value = self.memory.pop()
        try:
            if instruction.opcode is Opcode.OUTPUT_CHAR:
                self.io.write_char(value)
            else:
                self.io.write_number(value)
        except ExecutionError as e:
            self.fault(e)

    def input(self, instruction: Instruction):
        address = self.memory.pop()
        try:
            if instruction.opcode is Opcode.INPUT_CHAR:
                value = self.io.read_char()
            else:
                value = self.io.read_number()
        except InvalidInputError as e:
            self.fault(e)
            value = 0
        self.memory.heap_store(address, value)


def run_program(source: Union[bytes, str], stdin: Optional[BinaryIO] = None, stdout: Optional[BinaryIO] = None,
                config: Optional[RunConfig] = None, diagnostics: Optional[Diagnostics] = None) -> Diagnostics:
    """Parse ``source`` and run it with a fresh Runner.

    Under the strict policy a program with parse errors is not run.
    """
    if diagnostics is None:
        diagnostics = Diagnostics()
    config = config if config is not None else RunConfig()
    program = Parser().parse_program(source, diagnostics)
    if config.policy is ErrorPolicy.STRICT and diagnostics.has_errors():
        logger.info("Not running: the program has parse errors")
        return diagnostics
    Runner(program, ConsoleIO(stdin, stdout), config, diagnostics).run()
    return diagnostics
