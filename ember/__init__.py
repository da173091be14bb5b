# Ember language package
# This package provides a lexer, parser and tree-walking interpreter for the Ember language.
from .errors import EmberError, EmberSyntaxError, LexError, ParseError
from .environment import Environment
from .interpreter import Interpreter, run_source
from .lexer import tokenize
from .parser import parse_program, parse_source

__all__ = [
    'tokenize',
    'parse_program',
    'parse_source',
    'Interpreter',
    'Environment',
    'run_source',
    'EmberError',
    'EmberSyntaxError',
    'LexError',
    'ParseError',
]
