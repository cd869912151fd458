import sys
from typing import List, Optional, TextIO

from wslang.runner import Runner


class Debugger:
    """Single-step front end over a Runner."""
    shown_values = 40

    def __init__(self, runner: Runner):
        self.runner = runner

    def forward(self):
        self.runner.step()

    def run_to_end(self):
        while not self.runner.finished:
            self.runner.step()

    def format_state(self) -> str:
        runner = self.runner
        stack, heap = runner.memory.snapshot()
        lines: List[str] = [""]
        lines.append(f"-----------------------------------------------------------{len(stack)}")
        lines.append(f"| {' '.join(map(str, stack[-self.shown_values:][::-1]))}")
        lines.append("--------------------------------------------------------------")
        if heap:
            shown = ", ".join(f"{k}: {v}" for k, v in sorted(heap.items()))
            lines.append(f"heap = {{{shown}}}")
        if runner.call_stack:
            lines.append(f"calls = {runner.call_stack}")
        lines.append("")
        instructions = runner.program.instructions
        cur = runner.pc
        prefix = f"{cur}"
        shift_str = " " * (len(prefix) + 3)
        if 0 <= cur - 1 < len(instructions):
            lines.append(shift_str + str(instructions[cur - 1]))
        if runner.finished:
            state = "halted" if runner.halted else "finished"
            lines.append(f"{prefix} > <{state} after {runner.steps} steps>")
        else:
            lines.append(f"{prefix} > {instructions[cur]}")
            if cur + 1 < len(instructions):
                lines.append(shift_str + str(instructions[cur + 1]))
        lines.append("")
        return "\n".join(lines)

    def print_state(self, out: Optional[TextIO] = None):
        print(self.format_state(), file=out or sys.stderr)


def run_debugger(debugger: Debugger, commands: Optional[TextIO] = None, out: Optional[TextIO] = None):
    """Empty line steps, ``c`` runs to the end, ``q`` quits."""
    commands = commands or sys.stdin
    debugger.print_state(out)
    while not debugger.runner.finished:
        line = commands.readline()
        if not line:
            break
        command = line.strip()
        if command == "":
            debugger.forward()
        elif command == "c":
            debugger.run_to_end()
        elif command == "q":
            break
        debugger.print_state(out)
