import unittest

from wslang.encoder import encode_binary, encode_instruction, encode_label, encode_number, encode_program
from wslang.formatter import Formatter
from wslang.instructions import Instruction, Opcode, Program, parse_ir
from wslang.ws_parser import Parser, parse_program


class TestEncoder(unittest.TestCase):
    def test_number_encoding(self):
        """Test the token layout of number literals."""
        self.assertEqual(encode_number(0), " \n")
        self.assertEqual(encode_number(5), " \t \t\n")
        self.assertEqual(encode_number(-2), "\t\t \n")

    def test_label_encoding(self):
        """Test the token layout of label literals."""
        self.assertEqual(encode_label("0110"), " \t\t \n")

    def test_invalid_label(self):
        """Test that bad labels are rejected."""
        self.assertRaises(ValueError, encode_label, "")
        self.assertRaises(ValueError, encode_label, "012")

    def test_instruction_without_argument(self):
        """Test encoding an opcode with no operand."""
        self.assertEqual(encode_instruction(Instruction(Opcode.EXIT)), "\n\n ")

    def test_push_decodes_to_same_value(self):
        """Test that every push from -1000 to 1000 parses back unchanged."""
        parser = Parser()
        for n in range(-1000, 1001):
            program = parser.parse_program(encode_instruction(Instruction(Opcode.PUSH, n)))
            self.assertEqual(list(program), [Instruction(Opcode.PUSH, n)])

    def test_large_numbers_keep_precision(self):
        """Test that very large literals keep every bit."""
        n = -(2 ** 100) + 7
        program = parse_program(encode_instruction(Instruction(Opcode.PUSH, n)))
        self.assertEqual(program[0].argument, n)

    def test_binary_output_is_ascii(self):
        """Test the byte form of an encoded program."""
        data = encode_binary([Instruction(Opcode.PUSH, 1), Instruction(Opcode.OUTPUT_NUM)])
        self.assertEqual(data, b"   \t\n\t\n\n")


class TestIRText(unittest.TestCase):
    SOURCE = """
        PUSH 1
    MARK 01
        DUP
        OUTNUM   # print the counter
        PUSH 1
        ADD
        DUP
        PUSH -4
        ADD
        JN 01
        EXIT
    """

    def test_parse_ir_ignores_case_and_comments(self):
        """Test that IR text skips comments and blank lines."""
        instructions = parse_ir(["push 3  # three", "", "  # only a comment", "jz 10"])
        self.assertEqual(instructions, [Instruction(Opcode.PUSH, 3), Instruction(Opcode.JUMP_ZERO, "10")])

    def test_parse_ir_errors(self):
        """Test malformed IR lines."""
        for line in ["FOO", "PUSH", "PUSH x", "ADD 1", "MARK 2", "JUMP 1 2"]:
            with self.subTest(line=line):
                self.assertRaises(ValueError, parse_ir, [line])

    def test_listing_reads_back(self):
        """Test that a plain listing parses back to the same program."""
        instructions = parse_ir(self.SOURCE.splitlines())
        listing = Formatter(numbered=False).format(Program.of(instructions))
        self.assertEqual(parse_ir(listing.splitlines()), instructions)
        self.assertEqual(list(parse_program(encode_program(instructions))), instructions)

    def test_numbered_listing(self):
        """Test the layout of a numbered listing."""
        listing = Formatter().format(Program.of(parse_ir(["MARK 1", "PUSH 2", "JUMP 1"])))
        lines = listing.splitlines()
        self.assertTrue(lines[0].startswith("MARK 1"))
        self.assertTrue(lines[1].startswith("    PUSH 2"))
        self.assertTrue(lines[2].endswith("# 2"))
        self.assertEqual(len({line.index("#") for line in lines}), 1)
        self.assertEqual(len(parse_ir(lines)), 3)

    def test_empty_listing(self):
        """Test listing an empty program."""
        self.assertEqual(Formatter().format(Program.of([])), "")


if __name__ == "__main__":
    unittest.main()
