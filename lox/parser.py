"""Parser for the Lox language.

Source text is fed into a Lark LALR parser configured with the Lox
grammar below. The resulting parse tree is turned into the AST defined in
`lox.ast` by `ASTTransformer`.

The front end does a little more than build nodes:

* `for` loops are desugared into `while` loops wrapped in blocks, so the
  resolver and interpreter never see a `for` statement.
* assignment targets are checked: `a = 1` becomes `Assign`, `a.b = 1`
  becomes `Set`, anything else is rejected.
* functions and calls are limited to 255 parameters/arguments.

The `parse_program` function is the public entry point and returns the
list of top-level statements.
"""

from __future__ import annotations

from typing import List, Optional

from lark import Lark, Transformer, v_args
from lark.exceptions import UnexpectedEOF, UnexpectedInput, UnexpectedToken, VisitError

from .ast import (
    Token, Node, Literal, Grouping, UnaryOp, BinaryOp, LogicalOp, Variable,
    Assign, Call, Get, Set, This, Super, ExprStmt, PrintStmt, VarDecl, Block,
    IfStmt, WhileStmt, FuncDecl, ReturnStmt, ClassDecl,
)
from .errors import ParseError

MAX_ARGUMENTS = 255


LOX_GRAMMAR = r"""
    ?start: program
    program: declaration*

    // Declarations
    ?declaration: class_decl
                | fun_decl
                | var_decl
                | statement

    class_decl: "class" IDENTIFIER [superclass] "{" function* "}"
    superclass: "<" IDENTIFIER
    fun_decl: "fun" function
    function: IDENTIFIER "(" [parameters] ")" block
    parameters: IDENTIFIER ("," IDENTIFIER)*
    var_decl: "var" IDENTIFIER ["=" expression] ";"

    // Statements
    ?statement: expr_stmt
              | for_stmt
              | if_stmt
              | print_stmt
              | return_stmt
              | while_stmt
              | block

    expr_stmt: expression ";"
    for_stmt: "for" "(" for_init [expression] ";" [expression] ")" statement
    ?for_init: var_decl
             | expr_stmt
             | no_init
    no_init: ";"
    if_stmt: "if" "(" expression ")" statement ["else" statement]
    print_stmt: "print" expression ";"
    return_stmt: RETURN [expression] ";"
    while_stmt: "while" "(" expression ")" statement
    block: "{" declaration* "}"

    // Expressions with precedence
    ?expression: assignment
    ?assignment: logic_or EQUAL assignment -> assign
               | logic_or
    ?logic_or: logic_and
             | logic_or OR logic_and -> logical
    ?logic_and: equality
              | logic_and AND equality -> logical
    ?equality: comparison
             | equality (BANG_EQUAL | EQUAL_EQUAL) comparison -> binary
    ?comparison: term
               | comparison (GREATER | GREATER_EQUAL | LESS | LESS_EQUAL) term -> binary
    ?term: factor
         | term (MINUS | PLUS) factor -> binary
    ?factor: unary
           | factor (SLASH | STAR) unary -> binary
    ?unary: (BANG | MINUS) unary -> unary_expr
          | call
    ?call: primary
         | call "(" [arguments] ")" -> call_expr
         | call "." IDENTIFIER -> get_expr
    arguments: expression ("," expression)*
    ?primary: "true" -> true_lit
            | "false" -> false_lit
            | "nil" -> nil_lit
            | THIS -> this_expr
            | NUMBER -> number
            | STRING -> string
            | IDENTIFIER -> variable
            | "(" expression ")" -> grouping
            | SUPER "." IDENTIFIER -> super_expr

    // Tokens
    RETURN: "return"
    THIS: "this"
    SUPER: "super"
    OR: "or"
    AND: "and"
    BANG: "!"
    BANG_EQUAL: "!="
    EQUAL: "="
    EQUAL_EQUAL: "=="
    GREATER: ">"
    GREATER_EQUAL: ">="
    LESS: "<"
    LESS_EQUAL: "<="
    MINUS: "-"
    PLUS: "+"
    SLASH: "/"
    STAR: "*"
    NUMBER: /\d+(\.\d+)?/
    STRING: /"[^"]*"/
    IDENTIFIER: /[A-Za-z_][A-Za-z0-9_]*/

    // Comments
    COMMENT: /\/\/[^\n]*/
    %ignore COMMENT
    %import common.WS
    %ignore WS
"""


LOX_PARSER = Lark(
    LOX_GRAMMAR,
    parser='lalr',
    propagate_positions=True,
    maybe_placeholders=True,
)


def to_token(tok) -> Token:
    """Convert a Lark token into a Lox `Token`."""
    return Token(tok.type, str(tok), None, tok.line)


class ASTTransformer(Transformer):
    """Transforms the raw parse tree into an AST."""

    def program(self, items):
        return list(items)

    # Declarations
    def class_decl(self, items):
        name = to_token(items[0])
        superclass: Optional[Variable] = items[1]
        methods: List[FuncDecl] = list(items[2:])
        return ClassDecl(name, superclass, methods)

    def superclass(self, items):
        return Variable(to_token(items[-1]))

    def fun_decl(self, items):
        return items[0]

    def function(self, items):
        name = to_token(items[0])
        params: List[Token] = items[1] if items[1] is not None else []
        body: Block = items[2]
        return FuncDecl(name, params, body.statements)

    def parameters(self, items):
        if len(items) > MAX_ARGUMENTS:
            raise ParseError(items[MAX_ARGUMENTS].line, f"Can't have more than {MAX_ARGUMENTS} parameters.")
        return [to_token(item) for item in items]

    def var_decl(self, items):
        # the '=' token may or may not be kept; the initializer is always last
        return VarDecl(to_token(items[0]), items[-1])

    # Statements
    def expr_stmt(self, items):
        return ExprStmt(items[0])

    def no_init(self, items):
        return None

    def for_stmt(self, items):
        initializer, condition, increment, body = items
        if increment is not None:
            body = Block([body, ExprStmt(increment)])
        if condition is None:
            condition = Literal(True)
        loop: Node = WhileStmt(condition, body)
        if initializer is not None:
            loop = Block([initializer, loop])
        return loop

    def if_stmt(self, items):
        condition, then_branch, else_branch = items
        return IfStmt(condition, then_branch, else_branch)

    def print_stmt(self, items):
        return PrintStmt(items[0])

    def return_stmt(self, items):
        return ReturnStmt(to_token(items[0]), items[1])

    def while_stmt(self, items):
        return WhileStmt(items[0], items[1])

    def block(self, items):
        return Block(list(items))

    # Expressions
    def assign(self, items):
        target, equals, value = items[0], items[1], items[-1]
        if isinstance(target, Variable):
            return Assign(target.name, value)
        if isinstance(target, Get):
            return Set(target.object, target.name, value)
        raise ParseError(equals.line, 'Invalid assignment target.')

    def logical(self, items):
        left, op, right = items
        return LogicalOp(left, to_token(op), right)

    def binary(self, items):
        left, op, right = items
        return BinaryOp(left, to_token(op), right)

    def unary_expr(self, items):
        op, right = items
        return UnaryOp(to_token(op), right)

    @v_args(meta=True)
    def call_expr(self, meta, items):
        callee = items[0]
        arguments: List[Node] = items[1] if items[1] is not None else []
        if len(arguments) > MAX_ARGUMENTS:
            raise ParseError(meta.end_line, f"Can't have more than {MAX_ARGUMENTS} arguments.")
        paren = Token('RIGHT_PAREN', ')', None, meta.end_line)
        return Call(callee, paren, arguments)

    def arguments(self, items):
        return list(items)

    def get_expr(self, items):
        obj, name = items
        return Get(obj, to_token(name))

    def true_lit(self, items):
        return Literal(True)

    def false_lit(self, items):
        return Literal(False)

    def nil_lit(self, items):
        return Literal(None)

    def this_expr(self, items):
        return This(to_token(items[0]))

    def number(self, items):
        value = float(items[0])
        return Literal(value)

    def string(self, items):
        value = str(items[0])[1:-1]
        return Literal(value)

    def variable(self, items):
        return Variable(to_token(items[0]))

    def grouping(self, items):
        return Grouping(items[0])

    def super_expr(self, items):
        keyword, method = items
        return Super(to_token(keyword), to_token(method))


def _describe(err: UnexpectedInput) -> str:
    if isinstance(err, UnexpectedEOF):
        return 'Unexpected end of input.'
    if isinstance(err, UnexpectedToken):
        if err.token.type == '$END':
            return 'Unexpected end of input.'
        return f"Unexpected '{err.token}'."
    return f"Unexpected character '{getattr(err, 'char', '?')}'."


def parse_program(source: str) -> List[Node]:
    """Parse the given source code into a list of top-level statements."""
    try:
        tree = LOX_PARSER.parse(source)
    except UnexpectedInput as err:
        # lark reports -1 or '?' when the input ended early
        line = err.line if isinstance(err.line, int) and err.line > 0 else source.count('\n') + 1
        raise ParseError(line, _describe(err)) from None
    try:
        return ASTTransformer().transform(tree)
    except VisitError as err:
        if isinstance(err.orig_exc, ParseError):
            raise err.orig_exc from None
        raise
