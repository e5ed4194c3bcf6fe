import math

import pytest

from lox.types import divide, is_truthy, to_string, values_equal


@pytest.mark.parametrize('source, expected', [
    ('print 1 + 2;', '3'),
    ('print 7 - 10;', '-3'),
    ('print 2.5 * 4;', '10'),
    ('print 3 / 2;', '1.5'),
    ('print 0.1 + 0.2;', '0.30000000000000004'),
    ('print (1 + 2) * 3;', '9'),
    ('print -(4);', '-4'),
    ('print !nil;', 'true'),
    ('print !0;', 'false'),
])
def test_arithmetic_and_unary(run_lox, source, expected):
    out, errors = run_lox(source)
    assert errors == []
    assert out == [expected]


def test_division_by_zero_follows_ieee(run_lox):
    out, errors = run_lox('print 1 / 0; print -1 / 0; print 0 / 0;')
    assert errors == []
    assert out == ['inf', '-inf', 'nan']


def test_divide_helper():
    assert divide(6.0, 3.0) == 2.0
    assert divide(1.0, 0.0) == math.inf
    assert divide(1.0, -0.0) == -math.inf
    assert math.isnan(divide(0.0, 0.0))


def test_string_concatenation(run_lox):
    out, errors = run_lox('print "x" + "y"; var s = "a"; s = s + "b"; print s;')
    assert errors == []
    assert out == ['xy', 'ab']


@pytest.mark.parametrize('source', ['print 1 + "x";', 'print "x" + 1;', 'print nil + nil;', 'print true + 1;'])
def test_plus_rejects_mixed_operands(run_lox, source):
    out, errors = run_lox(source)
    assert out == []
    assert errors == [(1, 'Operands must be two numbers or two strings.')]


def test_comparisons(run_lox):
    out, errors = run_lox('print 1 < 2; print 2 <= 2; print 3 > 2; print 2 >= 2; print 2 < 1;')
    assert errors == []
    assert out == ['true', 'true', 'true', 'true', 'false']


@pytest.mark.parametrize('source', ['print "a" < 1;', 'print 1 >= "a";', 'print "a" - "b";', 'print nil * 2;'])
def test_numeric_operators_require_numbers(run_lox, source):
    out, errors = run_lox(source)
    assert out == []
    assert errors == [(1, 'Operands must be numbers.')]


def test_negation_requires_number(run_lox):
    out, errors = run_lox('print -"a";')
    assert out == []
    assert errors == [(1, 'Operand must be a number.')]


def test_equality_is_type_aware(run_lox):
    out, errors = run_lox(
        'print nil == nil;\n'
        'print 1 == "1";\n'
        'print false != nil;\n'
        'print true == 1;\n'
        'print "a" == "a";\n'
        'print 2 == 2.0;\n'
        'print nil == false;\n'
    )
    assert errors == []
    assert out == ['true', 'false', 'true', 'false', 'true', 'true', 'false']


def test_values_equal_helper():
    assert values_equal(None, None)
    assert not values_equal(None, False)
    assert not values_equal(1.0, True)
    assert not values_equal(0.0, False)
    assert values_equal('x', 'x')
    assert not values_equal(math.nan, math.nan)


def test_truthiness(run_lox):
    out, errors = run_lox(
        'if (0) print "zero"; else print "no";\n'
        'if ("") print "empty"; else print "no";\n'
        'if (nil) print "nil"; else print "falsy nil";\n'
        'if (false) print "false"; else print "falsy false";\n'
        'fun f() {} if (f) print "callable";\n'
        'class C {} if (C()) print "instance";\n'
    )
    assert errors == []
    assert out == ['zero', 'empty', 'falsy nil', 'falsy false', 'callable', 'instance']


def test_is_truthy_helper():
    assert not is_truthy(None)
    assert not is_truthy(False)
    assert is_truthy(0.0)
    assert is_truthy('')
    assert is_truthy(True)


def test_logical_operators_return_operands(run_lox):
    out, errors = run_lox(
        'print nil or "default";\n'
        'print "x" and "y";\n'
        'print false and "never";\n'
        'print 1 or "never";\n'
    )
    assert errors == []
    assert out == ['default', 'y', 'false', '1']


def test_logical_operators_short_circuit(run_lox):
    # the right operands name undefined globals; evaluating them would fail
    out, errors = run_lox('print false and missing; print true or missing;')
    assert errors == []
    assert out == ['false', 'true']


def test_undefined_variable(run_lox):
    out, errors = run_lox('print nope;')
    assert out == []
    assert errors == [(1, "Undefined variable 'nope'.")]


def test_assignment_to_undefined_global(run_lox):
    out, errors = run_lox('nope = 1;')
    assert errors == [(1, "Undefined variable 'nope'.")]


def test_assignment_is_an_expression(run_lox):
    out, errors = run_lox('var a; var b; a = b = 3; print a; print b;')
    assert errors == []
    assert out == ['3', '3']


@pytest.mark.parametrize('value, text', [
    (None, 'NIL'),
    (True, 'true'),
    (False, 'false'),
    (10.0, '10'),
    (-0.5, '-0.5'),
    (1234.5678, '1234.5678'),
    (12345678.0, '12345678'),
    (1e21, '1e+21'),
    (0.0001, '0.0001'),
    (-0.0, '-0'),
    ('plain', 'plain'),
])
def test_to_string(value, text):
    assert to_string(value) == text
