"""Tree-walking interpreter for the Lox language.

`Interpreter.execute` carries out a statement for its effect and
`Interpreter.evaluate` computes the value of an expression. Both take the
active `Environment` explicitly. Local variables are found by walking the
exact number of frames the resolver recorded for the reference; globals are
looked up by name in the outermost frame.

`return` is not an exception here. `execute` returns None when a statement
completes normally and a `ReturnSignal` when it executed `return`; every
statement sequence stops at the first `ReturnSignal` and hands it outward
until the function call in progress unwraps it.
"""

from __future__ import annotations

import sys
from typing import Any, Callable, Dict, List, Optional

from .ast import (
    Node, Token, Literal, Grouping, UnaryOp, BinaryOp, LogicalOp, Variable,
    Assign, Call, Get, Set, This, Super, ExprStmt, PrintStmt, VarDecl, Block,
    IfStmt, WhileStmt, FuncDecl, ReturnStmt, ClassDecl,
)
from .builtin_function import BUILTINS
from .environment import Environment
from .errors import LoxRuntimeError, ReturnSignal
from .parser import parse_program
from .printer import AstPrinter
from .resolver import Resolver
from .types import (
    LoxCallable, LoxClass, LoxFunction, LoxInstance,
    divide, is_number, is_truthy, to_string, type_name, values_equal,
)

ErrorSink = Callable[[Token, str], None]

# Python frames allowed while a program runs; one Lox call takes about seven
RECURSION_LIMIT = 20000


def report_runtime_error(token: Token, message: str):
    print(f"{message}\n[line {token.line}]", file=sys.stderr)


class Interpreter:
    """Core interpreter that executes a resolved Lox syntax tree."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt',
                 on_error: Optional[ErrorSink] = None):
        self.globals = Environment()
        # expression uid -> number of frames to its declaration
        self.locals: Dict[int, int] = {}
        self.on_error: ErrorSink = on_error or report_runtime_error
        self.had_runtime_error = False
        self.debug_level = debug_level
        self.debug_file = debug_file
        self.debug_fp = None
        self.printer = AstPrinter()
        for name, builtin in BUILTINS.items():
            self.globals.define(name, builtin)

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp is None:
                self.debug_fp = open(self.debug_file, 'w', encoding='utf-8')
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    def close(self):
        if self.debug_fp is not None:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def interpret(self, statements: List[Node]):
        """Run a top-level statement sequence, reporting at most one runtime error."""
        previous_limit = sys.getrecursionlimit()
        sys.setrecursionlimit(max(previous_limit, RECURSION_LIMIT))
        try:
            for stmt in statements:
                self.execute(stmt, self.globals)
        except LoxRuntimeError as err:
            self.had_runtime_error = True
            self.debug(f"runtime error at line {err.token.line}: {err.message}")
            self.on_error(err.token, err.message)
        finally:
            sys.setrecursionlimit(previous_limit)

    def resolve(self, expr: Node, depth: int):
        self.locals[expr.uid] = depth
        if self.debug_level >= 1:
            self.debug(f"resolve {self._reference_name(expr)} at depth {depth}")

    @staticmethod
    def _reference_name(expr: Node) -> str:
        if isinstance(expr, (Variable, Assign)):
            return expr.name.lexeme
        return expr.keyword.lexeme

    # Statements
    def execute_block(self, statements: List[Node], env: Environment) -> Optional[ReturnSignal]:
        for stmt in statements:
            result = self.execute(stmt, env)
            # propagate return signals
            if result is not None:
                return result
        return None

    def execute(self, node: Node, env: Environment) -> Optional[ReturnSignal]:
        if isinstance(node, ExprStmt):
            self.evaluate(node.expression, env)
            return None
        if isinstance(node, PrintStmt):
            value = self.evaluate(node.expression, env)
            print(to_string(value))
            return None
        if isinstance(node, VarDecl):
            value = self.evaluate(node.initializer, env) if node.initializer is not None else None
            env.define(node.name.lexeme, value)
            if self.debug_level >= 2:
                self.debug(f"declare {node.name.lexeme}: {type_name(value)} = {to_string(value)}")
            return None
        if isinstance(node, Block):
            # the child frame is simply dropped on exit, however the block ends
            return self.execute_block(node.statements, Environment(parent=env))
        if isinstance(node, IfStmt):
            cond = self.evaluate(node.condition, env)
            truthy = is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {self.printer.print(node.condition)} -> {truthy}")
            if truthy:
                return self.execute(node.then_branch, env)
            if node.else_branch is not None:
                return self.execute(node.else_branch, env)
            return None
        if isinstance(node, WhileStmt):
            while True:
                cond = self.evaluate(node.condition, env)
                if not is_truthy(cond):
                    break
                res = self.execute(node.body, env)
                if res is not None:
                    return res
            return None
        if isinstance(node, FuncDecl):
            env.define(node.name.lexeme, LoxFunction(node, env))
            if self.debug_level >= 2:
                self.debug(f"define function {node.name.lexeme}")
            return None
        if isinstance(node, ReturnStmt):
            value = self.evaluate(node.value, env) if node.value is not None else None
            return ReturnSignal(value)
        if isinstance(node, ClassDecl):
            self.execute_class(node, env)
            return None
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def execute_class(self, node: ClassDecl, env: Environment):
        env.define(node.name.lexeme, None)

        superclass = None
        if node.superclass is not None:
            superclass = self.evaluate(node.superclass, env)
            if not isinstance(superclass, LoxClass):
                raise LoxRuntimeError(node.superclass.name, 'Superclass must be a class.')

        method_env = env
        if superclass is not None:
            method_env = Environment(parent=env)
            method_env.define('super', superclass)

        methods: Dict[str, LoxFunction] = {}
        for method in node.methods:
            is_init = method.name.lexeme == 'init'
            methods[method.name.lexeme] = LoxFunction(method, method_env, is_init)

        klass = LoxClass(node.name.lexeme, superclass, methods)
        env.assign(node.name, klass)
        if self.debug_level >= 2:
            parent = f" < {superclass.name}" if superclass is not None else ''
            self.debug(f"define class {klass.name}{parent} [{', '.join(methods)}]")

    # Expressions
    def evaluate(self, node: Node, env: Environment) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Grouping):
            return self.evaluate(node.expression, env)
        if isinstance(node, Variable):
            return self.look_up_variable(node.name, node, env)
        if isinstance(node, Assign):
            value = self.evaluate(node.value, env)
            distance = self.locals.get(node.uid)
            if distance is not None:
                env.assign_at(distance, node.name, value)
            else:
                self.globals.assign(node.name, value)
            return value
        if isinstance(node, UnaryOp):
            right = self.evaluate(node.right, env)
            if node.operator.type == 'MINUS':
                self.check_number_operand(node.operator, right)
                return -right
            if node.operator.type == 'BANG':
                return not is_truthy(right)
            raise LoxRuntimeError(node.operator, f"Unknown unary operator '{node.operator.lexeme}'.")
        if isinstance(node, BinaryOp):
            left = self.evaluate(node.left, env)
            right = self.evaluate(node.right, env)
            return self.apply_binary_op(node.operator, left, right)
        if isinstance(node, LogicalOp):
            left = self.evaluate(node.left, env)
            if node.operator.type == 'OR':
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(node.right, env)
        if isinstance(node, Call):
            callee = self.evaluate(node.callee, env)
            args = [self.evaluate(arg, env) for arg in node.arguments]
            return self.call_function(callee, args, node.paren)
        if isinstance(node, Get):
            obj = self.evaluate(node.object, env)
            if isinstance(obj, LoxInstance):
                return obj.get(node.name)
            raise LoxRuntimeError(node.name, 'Only instances have properties.')
        if isinstance(node, Set):
            obj = self.evaluate(node.object, env)
            if not isinstance(obj, LoxInstance):
                raise LoxRuntimeError(node.name, 'Only instances have fields.')
            value = self.evaluate(node.value, env)
            obj.set(node.name, value)
            return value
        if isinstance(node, This):
            return self.look_up_variable(node.keyword, node, env)
        if isinstance(node, Super):
            distance = self.locals[node.uid]
            superclass = env.get_at(distance, 'super')
            # the 'this' frame always sits directly inside the 'super' frame
            instance = env.get_at(distance - 1, 'this')
            method = superclass.find_method(node.method.lexeme)
            if method is None:
                raise LoxRuntimeError(node.method, f"Undefined property '{node.method.lexeme}'.")
            return method.bind(instance)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def look_up_variable(self, name: Token, expr: Node, env: Environment) -> Any:
        distance = self.locals.get(expr.uid)
        if distance is not None:
            return env.get_at(distance, name.lexeme)
        return self.globals.get(name)

    def call_function(self, callee: Any, args: List[Any], paren: Token) -> Any:
        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(paren, 'Can only call functions and classes.')
        arity = callee.arity()
        if len(args) != arity:
            raise LoxRuntimeError(paren, f"Expected {arity} arguments but got {len(args)}.")
        try:
            return callee.call(self, args)
        except RecursionError:
            raise LoxRuntimeError(paren, 'Stack overflow.') from None

    @staticmethod
    def check_number_operand(operator: Token, operand: Any):
        if is_number(operand):
            return
        raise LoxRuntimeError(operator, 'Operand must be a number.')

    @staticmethod
    def check_number_operands(operator: Token, left: Any, right: Any):
        if is_number(left) and is_number(right):
            return
        raise LoxRuntimeError(operator, 'Operands must be numbers.')

    def apply_binary_op(self, operator: Token, a: Any, b: Any) -> Any:
        op = operator.type
        if op == 'PLUS':
            if is_number(a) and is_number(b):
                return a + b
            if isinstance(a, str) and isinstance(b, str):
                return a + b
            raise LoxRuntimeError(operator, 'Operands must be two numbers or two strings.')
        if op == 'EQUAL_EQUAL':
            return values_equal(a, b)
        if op == 'BANG_EQUAL':
            return not values_equal(a, b)
        self.check_number_operands(operator, a, b)
        if op == 'MINUS':
            return a - b
        if op == 'STAR':
            return a * b
        if op == 'SLASH':
            return divide(a, b)
        if op == 'GREATER':
            return a > b
        if op == 'GREATER_EQUAL':
            return a >= b
        if op == 'LESS':
            return a < b
        if op == 'LESS_EQUAL':
            return a <= b
        raise LoxRuntimeError(operator, f"Unknown binary operator '{operator.lexeme}'.")


def run_program(source: str, **kwargs) -> Interpreter:
    """Convenience function to parse, resolve and run a Lox program from source.

    Parse and resolve errors propagate as `ParseError` / `ResolveError` before
    anything executes. Runtime errors go to the interpreter's error sink.
    """
    statements = parse_program(source)
    interpreter = Interpreter(**kwargs)
    Resolver(interpreter).resolve(statements)
    interpreter.interpret(statements)
    return interpreter
