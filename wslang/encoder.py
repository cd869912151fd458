from typing import Iterable

from wslang.instructions import Instruction, Operand, S, T, L, is_label


def encode_number(value: int) -> str:
    # The 1st token is the sign. Other tokens are the magnitude, MSB first.
    sign = T if value < 0 else S
    magnitude = abs(value)
    bits = format(magnitude, "b") if magnitude else ""
    return sign + "".join(T if b == "1" else S for b in bits) + L


def encode_label(label: str) -> str:
    if not is_label(label):
        raise ValueError(f"Label must be a non-empty 0/1 string, got: {label!r}")
    return "".join(T if b == "1" else S for b in label) + L


def encode_instruction(instruction: Instruction) -> str:
    opcode = instruction.opcode
    if opcode.operand is Operand.NUMBER:
        return opcode.prefix + encode_number(instruction.argument)
    if opcode.operand is Operand.LABEL:
        return opcode.prefix + encode_label(instruction.argument)
    return opcode.prefix


def encode_program(instructions: Iterable[Instruction]) -> str:
    return "".join(encode_instruction(i) for i in instructions)


def encode_binary(instructions: Iterable[Instruction]) -> bytes:
    return encode_program(instructions).encode("ascii")
