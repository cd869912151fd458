import io
import logging
import sys
from typing import List, Optional

from wslang.debugger import Debugger, run_debugger
from wslang.diagnostics import Diagnostics
from wslang.encoder import encode_binary
from wslang.formatter import Formatter
from wslang.instructions import parse_ir
from wslang.io_channels import ConsoleIO
from wslang.runner import ErrorPolicy, RunConfig, Runner, run_program
from wslang.ws_parser import Parser

EXIT_OK = 0
EXIT_ERROR = 1


def configure_logging(verbosity: int):
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    root = logging.getLogger("wslang")
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
        root.addHandler(handler)


def report(diagnostics: Diagnostics) -> int:
    if len(diagnostics):
        print(diagnostics.format(), file=sys.stderr)
    return EXIT_ERROR if diagnostics.has_errors() else EXIT_OK


def read_source(ifile: str) -> bytes:
    with open(ifile, 'rb') as f:
        return f.read()


def make_config(args) -> RunConfig:
    return RunConfig(
        policy=ErrorPolicy.STRICT if args.strict else ErrorPolicy.LENIENT,
        prebind_labels=not args.late_labels,
        trace=args.trace,
    )


def execute(args) -> int:
    diagnostics = Diagnostics()
    source = read_source(args.input)
    if args.stdin:
        with open(args.stdin, 'rb') as stdin:
            run_program(source, stdin, None, make_config(args), diagnostics)
    else:
        run_program(source, None, None, make_config(args), diagnostics)
    return report(diagnostics)


def dump_ir(args) -> int:
    diagnostics = Diagnostics()
    program = Parser().parse_program(read_source(args.input), diagnostics)
    sys.stdout.write(Formatter(numbered=not args.plain).format(program))
    return report(diagnostics)


def assemble(args) -> int:
    with open(args.input, 'r') as f:
        try:
            instructions = parse_ir(f.readlines())
        except ValueError as e:
            print(f"[Error]: {e}", file=sys.stderr)
            return EXIT_ERROR
    data = encode_binary(instructions)
    if args.output:
        with open(args.output, 'wb') as f:
            f.write(data)
    else:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
    return EXIT_OK


def debug(args) -> int:
    # stdin carries debugger commands; program input comes only from --stdin
    diagnostics = Diagnostics()
    program = Parser().parse_program(read_source(args.input), diagnostics)
    stdin = open(args.stdin, 'rb') if args.stdin else io.BytesIO()
    try:
        runner = Runner(program, ConsoleIO(stdin=stdin), make_config(args), diagnostics)
        run_debugger(Debugger(runner), sys.stdin, sys.stderr)
    finally:
        stdin.close()
    return report(diagnostics)


def build_arg_parser():
    import argparse

    arg_parser = argparse.ArgumentParser(prog="wslang", description="Whitespace virtual machine")
    arg_parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-vv for debug)")
    subparsers = arg_parser.add_subparsers(dest="command", required=True)

    def add_run_options(p):
        p.add_argument("input", help="Whitespace source file")
        p.add_argument("--stdin", help="Read program input from this file (debug: the program gets no input without it)")
        p.add_argument("--strict", action="store_true", help="Stop at the first runtime error")
        p.add_argument("--late-labels", action="store_true", help="Bind labels only when their mark executes")
        p.add_argument("--trace", action="store_true", help="Log every executed instruction (needs -vv)")

    run_parser = subparsers.add_parser("run", help="Execute a whitespace program")
    add_run_options(run_parser)

    ir_parser = subparsers.add_parser("ir", help="Print the decoded instructions as IR text")
    ir_parser.add_argument("input", help="Whitespace source file")
    ir_parser.add_argument("--plain", action="store_true", help="Omit instruction numbers")

    asm_parser = subparsers.add_parser("assemble", help="Turn IR text into whitespace source")
    asm_parser.add_argument("input", help="IR text file")
    asm_parser.add_argument("-o", "--output", help="Output file (default: stdout)")

    debug_parser = subparsers.add_parser("debug", help="Step through a whitespace program")
    add_run_options(debug_parser)
    return arg_parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    configure_logging(args.verbose)

    if args.command == "run":
        return execute(args)
    elif args.command == "ir":
        return dump_ir(args)
    elif args.command == "assemble":
        return assemble(args)
    elif args.command == "debug":
        return debug(args)
    return EXIT_ERROR


if __name__ == '__main__':
    sys.exit(main())
