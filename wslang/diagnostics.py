from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional

from wslang.errors import WhitespaceError


class Severity(Enum):
    NOTICE = "Note"
    WARNING = "Warning"
    ERROR = "Error"


@dataclass(frozen=True)
class Diagnostic:
    """One reported problem.

    ``position`` is a byte offset for parse diagnostics and an instruction
    index for runtime ones; ``line``/``column`` are only known for the former.
    """
    severity: Severity
    message: str
    position: int
    code: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def __str__(self):
        if self.line is not None:
            where = f"line {self.line}, column {self.column}"
        else:
            where = f"instruction {self.position}"
        code = f" {self.code}" if self.code else ""
        return f"[{self.severity.value}]{code} at {where}: {self.message}"


class Diagnostics:
    """Collects diagnostics of one parse and/or run.

    The caller owns the collector and passes it to the parser and the runner,
    so separate runs in one process never share reports.
    """

    def __init__(self):
        self.items: List[Diagnostic] = []

    def append(self, severity: Severity, message: str, position: int, code: Optional[str] = None,
               line: Optional[int] = None, column: Optional[int] = None) -> Diagnostic:
        diagnostic = Diagnostic(severity, message, position, code, line, column)
        self.items.append(diagnostic)
        return diagnostic

    def report(self, error: WhitespaceError, position: int, severity: Severity = Severity.ERROR,
               line: Optional[int] = None, column: Optional[int] = None) -> Diagnostic:
        return self.append(severity, str(error), position, error.code, line, column)

    def notice(self, message: str, position: int = 0) -> Diagnostic:
        return self.append(Severity.NOTICE, message, position)

    def has_errors(self) -> bool:
        return any(d.is_error for d in self.items)

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.items if d.is_error]

    def with_code(self, code: str) -> List[Diagnostic]:
        return [d for d in self.items if d.code == code]

    def format(self) -> str:
        return "\n".join(str(d) for d in self.items)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.items)

    def __len__(self):
        return len(self.items)
