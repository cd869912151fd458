import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from pyparsing import Group, Literal, MatchFirst, OneOrMore, ParserElement, Regex, StringEnd, Suppress, ZeroOrMore
from pyparsing import col, lineno

from wslang.diagnostics import Diagnostics
from wslang.errors import (
    ParseError, UnknownInstructionError, TruncatedLiteralError, InvalidSignError, EmptyLabelError,
)
from wslang.instructions import Instruction, Opcode, Operand, Program, S, T, L
from wslang.tokens import TokenStream, describe, tokenize

logger = logging.getLogger(__name__)


@dataclass
class Decoded:
    """What one grammar match produced: an instruction or the reason it was dropped."""
    start: int
    instruction: Optional[Instruction] = None
    error: Optional[ParseError] = None


class Parser:
    def __init__(self):
        self.stream: Optional[TokenStream] = None
        self.grammar = self.build_grammar()

    def make_number(self, tokens):
        sign, bits = tokens[0], tokens[1]
        value = int("".join("1" if b == T else "0" for b in bits) or "0", 2)
        return -value if sign == T else value

    def make_label(self, tokens):
        return "".join("1" if b == T else "0" for b in tokens[0])

    def make_instruction(self, opcode: Opcode) -> Callable:
        def action(s, loc, tokens):
            argument = None if opcode.operand is Operand.NONE else tokens[0]
            return Decoded(loc, instruction=Instruction(opcode, argument))
        return action

    def make_error(self, factory: Callable[[str], ParseError]) -> Callable:
        def action(s, loc, tokens):
            return Decoded(loc, error=factory(s[loc:loc + 3]))
        return action

    def build_grammar(self) -> ParserElement:
        space, tab, linefeed = Literal(S), Literal(T), Literal(L)
        bit = space | tab
        number = (space | tab) + Group(ZeroOrMore(bit)) + Suppress(linefeed)
        number.set_parse_action(self.make_number)
        label = Group(OneOrMore(bit)) + Suppress(linefeed)
        label.set_parse_action(self.make_label)

        valid = []
        malformed = []
        for opcode in Opcode:
            prefix = Suppress(Literal(opcode.prefix))
            name = opcode.mnemonic
            if opcode.operand is Operand.NONE:
                expr = prefix
            elif opcode.operand is Operand.NUMBER:
                expr = prefix + number
                bad_sign = prefix + Suppress(linefeed)
                bad_sign.set_parse_action(self.make_error(lambda _, n=name: InvalidSignError(n)))
                truncated = prefix + ZeroOrMore(bit) + StringEnd()
                truncated.set_parse_action(self.make_error(lambda _, n=name: TruncatedLiteralError("number", n)))
                malformed.extend([bad_sign, truncated])
            else:
                expr = prefix + label
                empty = prefix + Suppress(linefeed)
                empty.set_parse_action(self.make_error(lambda _, n=name: EmptyLabelError(n)))
                truncated = prefix + ZeroOrMore(bit) + StringEnd()
                truncated.set_parse_action(self.make_error(lambda _, n=name: TruncatedLiteralError("label", n)))
                malformed.extend([empty, truncated])
            expr.set_parse_action(self.make_instruction(opcode))
            valid.append(expr)

        unknown = Literal(S + L + L)
        unknown.set_parse_action(self.make_error(lambda text: UnknownInstructionError(describe(text))))
        incomplete = Regex(r"[ \t\n]{1,2}") + StringEnd()
        incomplete.set_parse_action(
            self.make_error(lambda text: UnknownInstructionError(describe(text) + " <end of stream>")))

        entry = MatchFirst(valid + malformed + [unknown, incomplete])
        # tokens are the whitespace itself: nothing may be skipped or expanded
        entry.leave_whitespace()
        entry.set_whitespace_chars("")
        return entry.parse_with_tabs()

    def report(self, diagnostics: Diagnostics, error: ParseError, index: int):
        offset = self.stream.offset_of(index)
        source = self.stream.source
        diagnostics.report(error, offset, line=lineno(offset, source), column=col(offset, source))

    def parse_program(self, source: Union[bytes, str], diagnostics: Optional[Diagnostics] = None) -> Program:
        if diagnostics is None:
            diagnostics = Diagnostics()
        self.stream = tokenize(source)
        text = self.stream.text
        instructions: List[Instruction] = []
        positions: List[int] = []
        expected = 0
        for tokens, start, end in self.grammar.scan_string(text, always_skip_whitespace=False):
            if start > expected:
                self.report(diagnostics, UnknownInstructionError(describe(text[expected:start])), expected)
            expected = end
            decoded: Decoded = tokens[0]
            if decoded.error is not None:
                self.report(diagnostics, decoded.error, decoded.start)
            else:
                instructions.append(decoded.instruction)
                positions.append(self.stream.offset_of(decoded.start))
        if expected < len(text):
            self.report(diagnostics, UnknownInstructionError(describe(text[expected:])), expected)
        logger.debug("Parsed %d instructions from %d tokens", len(instructions), len(text))
        return Program(tuple(instructions), tuple(positions))


def parse_program(source: Union[bytes, str], diagnostics: Optional[Diagnostics] = None) -> Program:
    """Convenience function to parse a program."""
    return Parser().parse_program(source, diagnostics)
