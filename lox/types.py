"""Runtime value model for Lox.

A Lox value is exactly one of:

* number  -> Python `float`
* string  -> Python `str`
* boolean -> Python `bool`
* nil     -> `None`
* callable -> a `LoxCallable` (builtin function, user function, bound
  method or class)
* instance -> a `LoxInstance`

The helpers at the bottom of the module implement the language rules that
apply to every value: truthiness, equality and the textual form used by
`print`.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .ast import FuncDecl, Token
from .environment import Environment
from .errors import LoxRuntimeError

if TYPE_CHECKING:
    from .interpreter import Interpreter


class LoxCallable:
    """Anything that can appear on the left of a call expression."""

    def arity(self) -> int:
        raise NotImplementedError

    def call(self, interpreter: Interpreter, arguments: List[Any]) -> Any:
        raise NotImplementedError


class LoxFunction(LoxCallable):
    """A user-defined function together with the frame it was declared in."""

    def __init__(self, declaration: FuncDecl, closure: Environment, is_initializer: bool = False):
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    @property
    def name(self) -> str:
        return self.declaration.name.lexeme

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: Interpreter, arguments: List[Any]) -> Any:
        return self.invoke(interpreter, arguments, self.closure)

    def invoke(self, interpreter: Interpreter, arguments: List[Any], parent: Environment) -> Any:
        call_env = Environment(parent=parent)
        for param, arg in zip(self.declaration.params, arguments):
            call_env.define(param.lexeme, arg)
        outcome = interpreter.execute_block(self.declaration.body, call_env)
        if outcome is None:
            return None
        return outcome.value

    def bind(self, instance: LoxInstance) -> BoundMethod:
        return BoundMethod(self, instance)

    def __str__(self) -> str:
        return f"<fn {self.name}>"

    __repr__ = __str__


class BoundMethod(LoxCallable):
    """A method paired with the instance it was looked up on.

    Calling it opens a frame holding `this` on top of the method's closure
    and runs the method body beneath that frame, which is exactly the shape
    the resolver assumed when it computed distances inside the method.
    """

    def __init__(self, method: LoxFunction, receiver: LoxInstance):
        self.method = method
        self.receiver = receiver

    def arity(self) -> int:
        return self.method.arity()

    def call(self, interpreter: Interpreter, arguments: List[Any]) -> Any:
        this_env = Environment(parent=self.method.closure)
        this_env.define('this', self.receiver)
        result = self.method.invoke(interpreter, arguments, this_env)
        if self.method.is_initializer:
            # init always yields the instance, whatever it returned
            return self.receiver
        return result

    def __str__(self) -> str:
        return str(self.method)

    __repr__ = __str__


class LoxClass(LoxCallable):
    """A class: a name, an optional superclass and a fixed method table."""

    def __init__(self, name: str, superclass: Optional[LoxClass], methods: Dict[str, LoxFunction]):
        self.name = name
        self.superclass = superclass
        self.methods = dict(methods)

    def find_method(self, name: str) -> Optional[LoxFunction]:
        klass: Optional[LoxClass] = self
        while klass is not None:
            if name in klass.methods:
                return klass.methods[name]
            klass = klass.superclass
        return None

    def arity(self) -> int:
        initializer = self.find_method('init')
        if initializer is None:
            return 0
        return initializer.arity()

    def call(self, interpreter: Interpreter, arguments: List[Any]) -> Any:
        instance = LoxInstance(self)
        initializer = self.find_method('init')
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)
        return instance

    def __str__(self) -> str:
        return self.name

    __repr__ = __str__


class LoxInstance:
    def __init__(self, klass: LoxClass):
        self.klass = klass
        self.fields: Dict[str, Any] = {}

    def get(self, name: Token) -> Any:
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]
        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)
        raise LoxRuntimeError(name, f"Undefined property '{name.lexeme}'.")

    def set(self, name: Token, value: Any):
        self.fields[name.lexeme] = value

    def __str__(self) -> str:
        return f"{self.klass.name} instance"

    __repr__ = __str__


def is_number(value: Any) -> bool:
    # bool is not a float subclass, so this also rejects true/false
    return isinstance(value, float)


def is_truthy(value: Any) -> bool:
    """nil and false are falsy; everything else, 0 and "" included, is truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def values_equal(a: Any, b: Any) -> bool:
    if a is None:
        return b is None
    if type(a) is not type(b):
        return False
    if isinstance(a, (bool, float, str)):
        return a == b
    return a is b


def type_name(value: Any) -> str:
    """Return the Lox kind of a runtime value."""
    if value is None:
        return 'nil'
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, float):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, LoxInstance):
        return 'instance'
    if isinstance(value, LoxCallable):
        return 'callable'
    return type(value).__name__


def divide(a: float, b: float) -> float:
    """IEEE-754 division; Python raises on a zero divisor, Lox does not."""
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def to_string(value: Any) -> str:
    """Convert a Lox value to the text written by `print`."""
    if value is None:
        return 'NIL'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        text = repr(value)
        if text.endswith('.0'):
            text = text[:-2]
        return text
    return str(value)
