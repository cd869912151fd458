from wslang.instructions import Instruction, Opcode, Program


class Formatter:
    """Renders a program as IR text that ``parse_ir`` reads back."""

    def __init__(self, indent_size=4, numbered=True):
        self.indent_size = indent_size
        self.numbered = numbered

    def format_instruction(self, instruction: Instruction) -> str:
        # marks sit at column 0 like assembler labels
        if instruction.opcode is Opcode.MARK:
            return str(instruction)
        return " " * self.indent_size + str(instruction)

    def format(self, program: Program) -> str:
        lines = [self.format_instruction(i) for i in program]
        if self.numbered and lines:
            width = max(len(line) for line in lines)
            lines = [f"{line.ljust(width)}  # {idx}" for idx, line in enumerate(lines)]
        return "\n".join(lines) + "\n" if lines else ""
