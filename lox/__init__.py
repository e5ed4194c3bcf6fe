# Lox language package
# This package provides a resolver and tree-walking interpreter for Lox.
from .errors import LoxError, LoxRuntimeError, ParseError, ResolveError
from .interpreter import Interpreter, run_program
from .parser import parse_program
from .resolver import Resolver

__all__ = [
    'run_program',
    'parse_program',
    'Interpreter',
    'Resolver',
    'LoxError',
    'LoxRuntimeError',
    'ParseError',
    'ResolveError',
]
