from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union


class Token(Enum):
    SPACE = " "
    TAB = "\t"
    LINEFEED = "\n"

    @property
    def short(self) -> str:
        return {Token.SPACE: "S", Token.TAB: "T", Token.LINEFEED: "L"}[self]


@dataclass(frozen=True)
class TokenStream:
    """Whitespace tokens of a source with every comment byte dropped.

    ``text`` holds only the three token characters; ``offsets[i]`` is the
    position of ``text[i]`` in ``source``.
    """
    source: str
    text: str
    offsets: Tuple[int, ...]

    def offset_of(self, index: int) -> int:
        if index < len(self.offsets):
            return self.offsets[index]
        return len(self.source)

    def __len__(self):
        return len(self.text)


def decode_source(source: Union[bytes, bytearray, str]) -> str:
    # latin-1 maps each byte to one character, so offsets stay byte offsets
    if isinstance(source, (bytes, bytearray)):
        return bytes(source).decode("latin-1")
    return source


def tokenize(source: Union[bytes, bytearray, str]) -> TokenStream:
    text = decode_source(source)
    kept = []
    offsets = []
    for i, ch in enumerate(text):
        if ch in " \t\n":
            kept.append(ch)
            offsets.append(i)
    return TokenStream(text, "".join(kept), tuple(offsets))


def describe(text: str) -> str:
    """Render raw token characters as ``S``/``T``/``L`` letters."""
    return " ".join(Token(ch).short for ch in text)
