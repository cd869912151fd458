import sys
from typing import BinaryIO, Optional

from wslang.errors import InvalidCharacterError, InvalidInputError


class ConsoleIO:
    """Character and number channels over binary streams.

    A character is one raw byte in both directions. Numbers are ASCII
    decimal, one per input line. Every write is flushed so output stays
    ordered with later input prompts. End of stream reads as 0.
    """

    def __init__(self, stdin: Optional[BinaryIO] = None, stdout: Optional[BinaryIO] = None):
        self.stdin = stdin if stdin is not None else sys.stdin.buffer
        self.stdout = stdout if stdout is not None else sys.stdout.buffer

    def write_char(self, value: int):
        if not 0 <= value <= 0xFF:
            raise InvalidCharacterError(value)
        self.stdout.write(bytes([value]))
        self.stdout.flush()

    def write_number(self, value: int):
        self.stdout.write(str(value).encode("ascii"))
        self.stdout.flush()

    def read_char(self) -> int:
        data = self.stdin.read(1)
        return data[0] if data else 0

    def read_number(self) -> int:
        line = self.stdin.readline()
        if not line:
            return 0
        try:
            return int(line.decode("ascii").strip())
        except (UnicodeDecodeError, ValueError):
            raise InvalidInputError(line.decode("latin-1").strip()) from None
