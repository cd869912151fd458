from typing import Optional


class WhitespaceError(Exception):
    """Base class for parse and execution errors."""
    code = "WSE00"


class ParseError(WhitespaceError):
    """Base class for errors found while decoding the token stream."""
    pass


class UnknownInstructionError(ParseError):
    """Raised when a token sequence does not start any instruction."""
    code = "WSE09"

    def __init__(self, tokens: str):
        self.tokens = tokens
        super().__init__(f"Unknown instruction: {tokens}")


class TruncatedLiteralError(ParseError):
    """Raised when the stream ends inside a number or label literal."""
    code = "WSE10"

    def __init__(self, literal: str, instruction: str):
        self.literal = literal
        self.instruction = instruction
        super().__init__(f"Unterminated {literal} literal in {instruction}")


class InvalidSignError(ParseError):
    """Raised when a number literal starts with a linefeed instead of a sign."""
    code = "WSE11"

    def __init__(self, instruction: str):
        self.instruction = instruction
        super().__init__(f"Invalid number sign in {instruction}")


class EmptyLabelError(ParseError):
    code = "WSE12"

    def __init__(self, instruction: str):
        self.instruction = instruction
        super().__init__(f"Empty label in {instruction}")


class ExecutionError(WhitespaceError):
    """Base class for errors raised while a program runs."""
    pass


class StackUnderflowError(ExecutionError):
    code = "WSE01"

    def __init__(self):
        super().__init__("Stack underflow: cannot pop from an empty stack")


class EmptyStackError(ExecutionError):
    """Raised when duplicate or discard meets an empty stack."""
    code = "WSE02"

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Stack is empty: cannot {operation}")


class InvalidStackIndexError(ExecutionError):
    """Raised by copy and slide for an index outside the stack."""
    code = "WSE03"

    def __init__(self, operation: str, index: int, size: int):
        self.operation = operation
        self.index = index
        self.size = size
        super().__init__(f"Invalid {operation} index {index} for stack of size {size}")


class SwapUnderflowError(ExecutionError):
    code = "WSE04"

    def __init__(self, size: int):
        self.size = size
        super().__init__(f"Swap needs two elements, stack has {size}")


class UndefinedLabelError(ExecutionError):
    code = "WSE05"

    def __init__(self, label: str):
        self.label = label
        super().__init__(f"Undefined label: {label}")


class CallStackUnderflowError(ExecutionError):
    code = "WSE06"

    def __init__(self):
        super().__init__("Return outside of a subroutine: call stack is empty")


class DivisionByZeroError(ExecutionError):
    """Raised by div and mod when the divisor is zero."""

    def __init__(self, operation: str):
        self.operation = operation
        self.code = "WSE08" if operation == "mod" else "WSE07"
        super().__init__("Modulo by zero" if operation == "mod" else "Division by zero")


class InvalidInputError(ExecutionError):
    code = "WSE13"

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Invalid number input: {text!r}")


class InvalidCharacterError(ExecutionError):
    code = "WSE14"

    def __init__(self, value: int):
        self.value = value
        super().__init__(f"Value {value} is not a valid character byte (0..255)")


class DuplicateLabelWarning(WhitespaceError):
    """Reported (never raised) when one label is marked more than once."""
    code = "WSW01"

    def __init__(self, label: str, first: int, second: Optional[int] = None):
        self.label = label
        self.first = first
        self.second = second
        where = f" at instructions {first} and {second}" if second is not None else ""
        super().__init__(f"Label {label} is marked more than once{where}")
