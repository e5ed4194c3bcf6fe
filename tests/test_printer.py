import pytest

from lox.ast import BinaryOp, Grouping, Literal, Token, UnaryOp
from lox.parser import parse_program
from lox.printer import AstPrinter


def expression(source):
    return parse_program(source)[0].expression


def test_hand_built_tree():
    expr = BinaryOp(
        UnaryOp(Token('MINUS', '-', None, 1), Literal(123.0)),
        Token('STAR', '*', None, 1),
        Grouping(Literal(45.67)),
    )
    assert AstPrinter().print(expr) == '(* (- 123) (group 45.67))'


@pytest.mark.parametrize('source, text', [
    ('1 + 2 * 3;', '(+ 1 (* 2 3))'),
    ('(1 + 2) * 3;', '(* (group (+ 1 2)) 3)'),
    ('!true == false;', '(== (! true) false)'),
    ('a or b and c;', '(or a (and b c))'),
    ('a = nil;', '(= a nil)'),
    ('f(1, "two");', '(call f 1 two)'),
    ('f();', '(call f)'),
    ('a.b;', '(. a b)'),
    ('a.b = c;', '(= (. a b) c)'),
    ('this.x;', '(. this x)'),
    ('super.m();', '(call (super m))'),
    ('-1.5 <= 2;', '(<= (- 1.5) 2)'),
])
def test_parsed_expressions(source, text):
    assert AstPrinter().print(expression(source)) == text
