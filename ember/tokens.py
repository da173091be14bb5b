"""Token definitions shared by the Ember lexer and parser."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


# Keyword spelling -> token kind. ``null`` is kept as an alias of ``nil``.
KEYWORDS = {
    'let': 'LET',
    'fn': 'FN',
    'class': 'CLASS',
    'this': 'THIS',
    'if': 'IF',
    'else': 'ELSE',
    'for': 'FOR',
    'while': 'WHILE',
    'return': 'RETURN',
    'print': 'PRINT',
    'true': 'TRUE',
    'false': 'FALSE',
    'nil': 'NIL',
    'null': 'NIL',
}

# Operator and punctuation spelling -> token kind.
OPERATORS = {
    '**': 'POW',
    '==': 'EQUAL',
    '!=': 'NOT_EQUAL',
    '<=': 'LESS_EQUAL',
    '>=': 'GREATER_EQUAL',
    '&&': 'AND',
    '||': 'OR',
    '=': 'ASSIGN',
    '!': 'BANG',
    '<': 'LESS',
    '>': 'GREATER',
    '+': 'PLUS',
    '-': 'MINUS',
    '*': 'STAR',
    '/': 'SLASH',
    ',': 'COMMA',
    ';': 'SEMICOLON',
    '.': 'DOT',
    '(': 'LPAREN',
    ')': 'RPAREN',
    '{': 'LBRACE',
    '}': 'RBRACE',
}

EOF = 'EOF'


@dataclass(frozen=True)
class Token:
    """A lexical token.

    ``type`` is the kind tag (``'INTEGER'``, ``'IDENT'``, ``'PLUS'`` ...),
    ``literal`` is the exact source text and ``value`` the decoded value:
    an int for integers, the unescaped text for strings and identifiers,
    a bool for ``true``/``false`` and None for everything else.
    """
    type: str
    literal: str
    value: Any = None
    line: int = 0
    column: int = 0

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.literal!r})"

    @property
    def where(self) -> str:
        return f"{self.line}:{self.column}"


def eof_token(line: int = 0, column: int = 0) -> Token:
    return Token(EOF, 'eof', None, line, column)
