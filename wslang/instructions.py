from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Sequence, Tuple, Union


class Family(Enum):
    STACK = "stack"
    ARITHMETIC = "arithmetic"
    HEAP = "heap"
    FLOW = "flow"
    IO = "io"


class Operand(Enum):
    NONE = "none"
    NUMBER = "number"
    LABEL = "label"


S, T, L = " ", "\t", "\n"


class Opcode(Enum):
    """Every instruction kind with its mnemonic, family, token prefix and operand."""
    PUSH = ("PUSH", Family.STACK, S + S, Operand.NUMBER)
    COPY = ("COPY", Family.STACK, S + T + S, Operand.NUMBER)
    SWAP = ("SWAP", Family.STACK, S + T + T, Operand.NONE)
    DISCARD = ("DISCARD", Family.STACK, S + T + L, Operand.NONE)
    DUPLICATE = ("DUP", Family.STACK, S + L + S, Operand.NONE)
    SLIDE = ("SLIDE", Family.STACK, S + L + T, Operand.NUMBER)

    ADD = ("ADD", Family.ARITHMETIC, T + S + S, Operand.NONE)
    SUB = ("SUB", Family.ARITHMETIC, T + S + T, Operand.NONE)
    MUL = ("MUL", Family.ARITHMETIC, T + S + L, Operand.NONE)
    DIV = ("DIV", Family.ARITHMETIC, T + T + S, Operand.NONE)
    MOD = ("MOD", Family.ARITHMETIC, T + T + T, Operand.NONE)

    HEAP_STORE = ("STORE", Family.HEAP, T + T + L, Operand.NONE)
    HEAP_READ = ("RETRIEVE", Family.HEAP, T + L + S, Operand.NONE)

    OUTPUT_CHAR = ("OUTCHAR", Family.IO, T + L + T, Operand.NONE)
    OUTPUT_NUM = ("OUTNUM", Family.IO, T + L + L, Operand.NONE)

    MARK = ("MARK", Family.FLOW, L + S + S, Operand.LABEL)
    CALL = ("CALL", Family.FLOW, L + S + T, Operand.LABEL)
    JUMP = ("JUMP", Family.FLOW, L + S + L, Operand.LABEL)
    JUMP_ZERO = ("JZ", Family.FLOW, L + T + S, Operand.LABEL)
    JUMP_NEGATIVE = ("JN", Family.FLOW, L + T + T, Operand.LABEL)
    RETURN = ("RETURN", Family.FLOW, L + T + L, Operand.NONE)
    EXIT = ("EXIT", Family.FLOW, L + L + S, Operand.NONE)

    INPUT_CHAR = ("INCHAR", Family.IO, L + L + T, Operand.NONE)
    INPUT_NUM = ("INNUM", Family.IO, L + L + L, Operand.NONE)

    def __init__(self, mnemonic: str, family: Family, prefix: str, operand: Operand):
        self.mnemonic = mnemonic
        self.family = family
        self.prefix = prefix
        self.operand = operand

    @classmethod
    def from_mnemonic(cls, mnemonic: str) -> 'Opcode':
        for opcode in cls:
            if opcode.mnemonic == mnemonic.upper():
                return opcode
        raise ValueError(f"Unsupported instruction: {mnemonic}")


def is_label(value) -> bool:
    return isinstance(value, str) and len(value) > 0 and set(value) <= {"0", "1"}


@dataclass(frozen=True)
class Instruction:
    opcode: Opcode
    argument: Union[int, str, None] = None

    def __post_init__(self):
        operand = self.opcode.operand
        if operand is Operand.NUMBER:
            if not isinstance(self.argument, int) or isinstance(self.argument, bool):
                raise ValueError(f"{self.opcode.mnemonic} expects a number, got: {self.argument!r}")
        elif operand is Operand.LABEL:
            if not is_label(self.argument):
                raise ValueError(f"{self.opcode.mnemonic} expects a non-empty 0/1 label, got: {self.argument!r}")
        elif self.argument is not None:
            raise ValueError(f"{self.opcode.mnemonic} takes no argument, got: {self.argument!r}")

    @property
    def family(self) -> Family:
        return self.opcode.family

    def execute(self, runner):
        runner.execute(self)

    def __str__(self):
        if self.argument is None:
            return self.opcode.mnemonic
        return f"{self.opcode.mnemonic} {self.argument}"


@dataclass(frozen=True)
class Program:
    """Decoded instructions, read-only and re-runnable.

    ``positions[i]`` is the source offset where instruction ``i`` started;
    empty when the program was not parsed from source.
    """
    instructions: Tuple[Instruction, ...]
    positions: Tuple[int, ...] = ()

    @classmethod
    def of(cls, instructions: Iterable[Instruction]) -> 'Program':
        return cls(tuple(instructions))

    def marks(self) -> Dict[str, List[int]]:
        """Label -> indices of every Mark instruction for it, in program order."""
        result: Dict[str, List[int]] = {}
        for idx, instr in enumerate(self.instructions):
            if instr.opcode is Opcode.MARK:
                result.setdefault(instr.argument, []).append(idx)
        return result

    def __len__(self):
        return len(self.instructions)

    def __getitem__(self, idx) -> Instruction:
        return self.instructions[idx]

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self.instructions)


def parse_ir(lines: Sequence[str]) -> List[Instruction]:
    """Parse the one-instruction-per-line IR produced by ``str(instruction)``."""
    result = []
    for raw_line in lines:
        line = raw_line.split("#", 1)[0].strip()
        if not line:
            continue
        mnemonic, *args = line.split()
        opcode = Opcode.from_mnemonic(mnemonic)
        if opcode.operand is Operand.NONE:
            if args:
                raise ValueError(f"{opcode.mnemonic} expects no arguments, got: {line}")
            result.append(Instruction(opcode))
            continue
        if len(args) != 1:
            raise ValueError(f"{opcode.mnemonic} expects 1 argument, got: {line}")
        if opcode.operand is Operand.NUMBER:
            try:
                value = int(args[0])
            except ValueError:
                raise ValueError(f"{opcode.mnemonic} expects a number, got: {line}") from None
            result.append(Instruction(opcode, value))
        else:
            result.append(Instruction(opcode, args[0]))
    return result
