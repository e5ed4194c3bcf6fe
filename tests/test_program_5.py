from pathlib import Path

from lox.interpreter import Interpreter
from lox.parser import parse_program
from lox.resolver import Resolver

PROGRAMS = Path(__file__).parent / 'programs'


def test_program_5_classes_and_init(capsys):
    with open(PROGRAMS / 'program_5.lox', 'r', encoding='utf-8') as f:
        source = f.read()
    statements = parse_program(source)
    interp = Interpreter()
    Resolver(interp).resolve(statements)
    interp.interpret(statements)
    out = capsys.readouterr().out.strip().split('\n')
    assert out == ['3', 'Point instance', 'Point', 'true', 'Early instance', '12']
    assert not interp.had_runtime_error
