"""CLI entry point for the Lox interpreter.

Usage:
    python -m lox [-v|-vv|-vvv] [program_file]
    python -m lox [-v...] --emit-ast <program_file>
    python -m lox [-v...] --ast <ast_json_file>
    python -m lox --print-ast <program_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given .lox file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file
  --print-ast   Print each expression of the program in prefix form

Without a program file an interactive prompt is started. Debug information
is written to `debug.txt` in the current directory when verbosity is
greater than zero.

Exit status is 65 when the program is malformed (parse or resolve error),
70 when it fails while running and 1 when the input file is missing.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List

from .ast import ExprStmt, PrintStmt
from .ast_json import program_from_obj, program_to_obj
from .errors import ParseError, ResolveError
from .interpreter import Interpreter
from .parser import parse_program
from .printer import AstPrinter
from .resolver import Resolver

EXIT_DATAERR = 65
EXIT_SOFTWARE = 70


def read_source(path: str) -> str:
    program_file = Path(path)
    if not program_file.exists():
        print(f"Error: file {program_file} not found", file=sys.stderr)
        sys.exit(1)
    with open(program_file, 'r', encoding='utf-8') as f:
        return f.read()


def execute(statements: List, verbosity: int) -> int:
    interpreter = Interpreter(debug_level=verbosity)
    try:
        Resolver(interpreter).resolve(statements)
        interpreter.interpret(statements)
    except ResolveError as e:
        print(str(e), file=sys.stderr)
        return EXIT_DATAERR
    finally:
        interpreter.close()
    return EXIT_SOFTWARE if interpreter.had_runtime_error else 0


def repl(verbosity: int) -> None:
    interpreter = Interpreter(debug_level=verbosity)
    try:
        while True:
            try:
                line = input('> ')
            except EOFError:
                print()
                break
            try:
                statements = parse_program(line)
                Resolver(interpreter).resolve(statements)
            except (ParseError, ResolveError) as e:
                print(str(e), file=sys.stderr)
                continue
            interpreter.interpret(statements)
    finally:
        interpreter.close()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog='lox', description="Lox language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='LOX_FILE', help='emit AST JSON for the given .lox file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    group.add_argument('--print-ast', metavar='LOX_FILE', help='print expression trees of the given .lox file')
    parser.add_argument('program', nargs='?', help='Lox program file (.lox) to execute')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        source = read_source(args.emit_ast)
        try:
            statements = parse_program(source)
        except ParseError as e:
            print(str(e), file=sys.stderr)
            sys.exit(EXIT_DATAERR)
        program_file = Path(args.emit_ast)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(program_to_obj(statements), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Print expression trees
    if args.print_ast:
        source = read_source(args.print_ast)
        try:
            statements = parse_program(source)
        except ParseError as e:
            print(str(e), file=sys.stderr)
            sys.exit(EXIT_DATAERR)
        printer = AstPrinter()
        for stmt in statements:
            if isinstance(stmt, (ExprStmt, PrintStmt)):
                print(printer.print(stmt.expression))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        if not ast_path.exists():
            print(f"Error: file {ast_path} not found", file=sys.stderr)
            sys.exit(1)
        with open(ast_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        status = execute(program_from_obj(data), args.v)
        if status:
            sys.exit(status)
        return

    # Default: execute source file, or start a prompt
    if not args.program:
        repl(args.v)
        return
    source = read_source(args.program)
    try:
        statements = parse_program(source)
    except ParseError as e:
        print(str(e), file=sys.stderr)
        sys.exit(EXIT_DATAERR)
    status = execute(statements, args.v)
    if status:
        sys.exit(status)


if __name__ == '__main__':
    main()
