from wslang.diagnostics import Diagnostic, Diagnostics, Severity
from wslang.instructions import Instruction, Opcode, Program, parse_ir
from wslang.runner import ErrorPolicy, RunConfig, Runner, run_program
from wslang.ws_parser import Parser, parse_program

__version__ = "0.1.0"
