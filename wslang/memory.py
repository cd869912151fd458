from typing import Callable, Dict, List, Optional

from wslang.errors import (
    ExecutionError, StackUnderflowError, EmptyStackError, InvalidStackIndexError, SwapUnderflowError,
)


def raise_fault(error: ExecutionError):
    raise error


class Memory:
    """Evaluation stack and sparse heap of one run.

    Faults go to ``fault_handler``. The default one raises; a handler that
    returns instead makes the operation fall back to its safe default: ``pop``
    yields 0 and the stack shaping operations leave the stack untouched.
    """

    def __init__(self, fault_handler: Optional[Callable[[ExecutionError], None]] = None):
        self.stack: List[int] = []
        self.heap: Dict[int, int] = {}
        self.fault_handler = fault_handler or raise_fault

    @property
    def size(self) -> int:
        return len(self.stack)

    def push(self, v: int):
        self.stack.append(v)

    def pop(self) -> int:
        if not self.stack:
            self.fault_handler(StackUnderflowError())
            return 0
        return self.stack.pop()

    def duplicate(self):
        if not self.stack:
            self.fault_handler(EmptyStackError("duplicate"))
            return
        self.stack.append(self.stack[-1])

    def copy(self, n: int):
        if n < 0 or n >= len(self.stack):
            self.fault_handler(InvalidStackIndexError("copy", n, len(self.stack)))
            return
        self.stack.append(self.stack[-1 - n])

    def swap(self):
        if len(self.stack) < 2:
            self.fault_handler(SwapUnderflowError(len(self.stack)))
            return
        self.stack[-1], self.stack[-2] = self.stack[-2], self.stack[-1]

    def discard(self):
        if not self.stack:
            self.fault_handler(EmptyStackError("discard"))
            return
        self.stack.pop()

    def slide(self, n: int):
        # the top element itself is kept, so at most size - 1 can go
        if n < 0 or n >= len(self.stack):
            self.fault_handler(InvalidStackIndexError("slide", n, len(self.stack)))
            return
        top = self.stack.pop()
        if n:
            del self.stack[-n:]
        self.stack.append(top)

    def heap_store(self, address: int, value: int):
        self.heap[address] = value

    def heap_retrieve(self, address: int) -> int:
        return self.heap.get(address, 0)

    def snapshot(self):
        return list(self.stack), dict(self.heap)
