from pathlib import Path

from lox.interpreter import Interpreter
from lox.parser import parse_program
from lox.resolver import Resolver

PROGRAMS = Path(__file__).parent / 'programs'


def test_program_3_recursive_fib(capsys):
    with open(PROGRAMS / 'program_3.lox', 'r', encoding='utf-8') as f:
        source = f.read()
    statements = parse_program(source)
    interp = Interpreter()
    Resolver(interp).resolve(statements)
    interp.interpret(statements)
    out = capsys.readouterr().out.strip().split('\n')
    assert out == ['0', '1', '1', '2', '3', '5', '8', '13', '21', '34']
