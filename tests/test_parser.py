import pytest

from lox.ast import (
    Assign, BinaryOp, Block, Call, ClassDecl, ExprStmt, FuncDecl, Get, IfStmt,
    Literal, PrintStmt, ReturnStmt, Set, Super, This, VarDecl, Variable, WhileStmt,
)
from lox.errors import ParseError
from lox.parser import parse_program


def test_empty_program():
    assert parse_program('') == []
    assert parse_program('// only a comment\n') == []


def test_literals():
    number, string, true, nil = [s.expression for s in parse_program('1.5; "hi there"; true; nil;')]
    assert number == Literal(1.5)
    assert isinstance(number.value, float)
    assert string == Literal('hi there')
    assert true == Literal(True)
    assert nil == Literal(None)


def test_integers_become_floats():
    stmt = parse_program('print 42;')[0]
    assert isinstance(stmt, PrintStmt)
    assert stmt.expression.value == 42.0
    assert isinstance(stmt.expression.value, float)


def test_var_decl_with_and_without_initializer():
    with_init, without = parse_program('var a = 1;\nvar b;')
    assert isinstance(with_init, VarDecl)
    assert with_init.name.lexeme == 'a'
    assert with_init.initializer == Literal(1.0)
    assert without.initializer is None
    assert without.name.line == 2


def test_binary_tokens_carry_type_and_line():
    expr = parse_program('\n1 +\n 2;')[0].expression
    assert isinstance(expr, BinaryOp)
    assert expr.operator.type == 'PLUS'
    assert expr.operator.lexeme == '+'
    assert expr.operator.line == 2


def test_assignment_targets():
    assign, setter = [s.expression for s in parse_program('a = 1; a.b = 2;')]
    assert isinstance(assign, Assign)
    assert assign.name.lexeme == 'a'
    assert isinstance(setter, Set)
    assert isinstance(setter.object, Variable)
    assert setter.name.lexeme == 'b'
    assert setter.value == Literal(2.0)


def test_assignment_is_right_associative():
    expr = parse_program('a = b = c;')[0].expression
    assert isinstance(expr, Assign)
    assert isinstance(expr.value, Assign)
    assert expr.value.name.lexeme == 'b'


@pytest.mark.parametrize('source', ['1 = 2;', '(a) = 1;', 'a + b = c;', 'f() = 1;'])
def test_invalid_assignment_target(source):
    with pytest.raises(ParseError) as excinfo:
        parse_program(source)
    assert excinfo.value.message == 'Invalid assignment target.'


def test_for_loop_is_desugared():
    stmt = parse_program('for (var i = 0; i < 3; i = i + 1) print i;')[0]
    assert isinstance(stmt, Block)
    init, loop = stmt.statements
    assert isinstance(init, VarDecl)
    assert isinstance(loop, WhileStmt)
    assert isinstance(loop.condition, BinaryOp)
    body, increment = loop.body.statements
    assert isinstance(body, PrintStmt)
    assert isinstance(increment, ExprStmt)
    assert isinstance(increment.expression, Assign)


def test_for_loop_without_clauses():
    stmt = parse_program('for (;;) print 1;')[0]
    assert isinstance(stmt, WhileStmt)
    assert stmt.condition == Literal(True)
    assert isinstance(stmt.body, PrintStmt)


def test_dangling_else():
    stmt = parse_program('if (a) if (b) print 1; else print 2;')[0]
    assert isinstance(stmt, IfStmt)
    assert stmt.else_branch is None
    assert isinstance(stmt.then_branch, IfStmt)
    assert stmt.then_branch.else_branch is not None


def test_function_declaration():
    stmt = parse_program('fun add(a, b) { return a + b; }')[0]
    assert isinstance(stmt, FuncDecl)
    assert [p.lexeme for p in stmt.params] == ['a', 'b']
    assert isinstance(stmt.body[0], ReturnStmt)
    assert stmt.body[0].keyword.lexeme == 'return'


def test_function_without_parameters():
    stmt = parse_program('fun f() {}')[0]
    assert stmt.params == []
    assert stmt.body == []


def test_class_declaration():
    plain, derived = parse_program('class A { m() {} init(x) {} }\nclass B < A {}')
    assert isinstance(plain, ClassDecl)
    assert plain.superclass is None
    assert [m.name.lexeme for m in plain.methods] == ['m', 'init']
    assert isinstance(derived.superclass, Variable)
    assert derived.superclass.name.lexeme == 'A'
    assert derived.methods == []


def test_call_and_property_chain():
    expr = parse_program('a.b(1)(2).c;')[0].expression
    assert isinstance(expr, Get)
    assert expr.name.lexeme == 'c'
    outer_call = expr.object
    assert isinstance(outer_call, Call)
    assert outer_call.arguments == [Literal(2.0)]
    inner_call = outer_call.callee
    assert isinstance(inner_call.callee, Get)


def test_call_paren_is_closing_parenthesis():
    call = parse_program('f(\n1,\n2\n);')[0].expression
    assert isinstance(call, Call)
    assert call.paren.lexeme == ')'
    assert call.paren.line == 4


def test_this_and_super():
    this_expr, super_expr = [s.expression for s in parse_program('this; super.method;')]
    assert isinstance(this_expr, This)
    assert this_expr.keyword.lexeme == 'this'
    assert isinstance(super_expr, Super)
    assert super_expr.method.lexeme == 'method'


def test_keywords_do_not_swallow_identifiers():
    stmt = parse_program('var classy = orchid;')[0]
    assert stmt.name.lexeme == 'classy'
    assert stmt.initializer.name.lexeme == 'orchid'


def test_reference_nodes_get_distinct_ids():
    first, second = [s.expression for s in parse_program('a; a;')]
    assert first == second
    assert first.uid != second.uid


def test_too_many_arguments():
    args = ', '.join(['1'] * 256)
    with pytest.raises(ParseError) as excinfo:
        parse_program(f'f({args});')
    assert excinfo.value.message == "Can't have more than 255 arguments."


def test_too_many_parameters():
    params = ', '.join(f'p{i}' for i in range(256))
    with pytest.raises(ParseError) as excinfo:
        parse_program(f'fun f({params}) {{}}')
    assert excinfo.value.message == "Can't have more than 255 parameters."


def test_255_arguments_is_fine():
    args = ', '.join(['1'] * 255)
    call = parse_program(f'f({args});')[0].expression
    assert len(call.arguments) == 255


@pytest.mark.parametrize('source, line', [
    ('print 1', 1),
    ('var a = 1;\nvar = 2;', 2),
    ('print 1 @ 2;', 1),
    ('{\nprint 1;', 2),
])
def test_syntax_errors(source, line):
    with pytest.raises(ParseError) as excinfo:
        parse_program(source)
    assert excinfo.value.line == line
