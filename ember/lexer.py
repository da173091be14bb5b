"""Tokenizer for the Ember language.

Lexing is delegated to a Lark basic lexer configured with a tiny grammar
that only describes the terminals. Lark takes care of longest-match
ordering (``**`` before ``*``, ``==`` before ``=``), line/column tracking
and skipping whitespace and ``//`` comments; this module maps the raw Lark
tokens onto Ember :class:`~ember.tokens.Token` objects, decodes literal
values and reports malformed input as :class:`~ember.errors.LexError`.
"""

from __future__ import annotations

import re
from typing import List

from lark import Lark
from lark.exceptions import UnexpectedCharacters

from .errors import LexError
from .tokens import KEYWORDS, OPERATORS, Token, eof_token


EMBER_TERMINALS = r"""
    start: (INTEGER | STRING | IDENT | OP)*

    INTEGER: /[0-9]+/
    STRING: /"(\\.|[^"\\])*"/
    IDENT: /[^\W\d]\w*/
    OP: /\*\*|==|!=|<=|>=|&&|\|\||[=!<>+\-*\/,;.(){}]/

    %import common.WS
    %import common.CPP_COMMENT
    %ignore WS
    %ignore CPP_COMMENT
"""


EMBER_LEXER = Lark(
    EMBER_TERMINALS,
    parser='lalr',
    lexer='basic',
)

INT64_MAX = 2 ** 63 - 1

_ESCAPES = {'n': '\n', 't': '\t', '"': '"', '\\': '\\'}
_ESCAPE_RE = re.compile(r'\\(.)', re.DOTALL)


def _unescape(raw: str, line: int, column: int) -> str:
    def replace(match: re.Match) -> str:
        ch = match.group(1)
        if ch not in _ESCAPES:
            raise LexError(f"invalid escape sequence \\{ch} in string at {line}:{column}")
        return _ESCAPES[ch]
    return _ESCAPE_RE.sub(replace, raw)


def _convert(tok) -> Token:
    text = str(tok)
    kind = tok.type
    if kind == 'INTEGER':
        value = int(text)
        if value > INT64_MAX:
            raise LexError(f"integer literal {text} out of range at {tok.line}:{tok.column}")
        return Token('INTEGER', text, value, tok.line, tok.column)
    if kind == 'STRING':
        value = _unescape(text[1:-1], tok.line, tok.column)
        return Token('STRING', text, value, tok.line, tok.column)
    if kind == 'IDENT':
        keyword = KEYWORDS.get(text)
        if keyword is None:
            return Token('IDENT', text, text, tok.line, tok.column)
        if keyword in ('TRUE', 'FALSE'):
            return Token(keyword, text, keyword == 'TRUE', tok.line, tok.column)
        return Token(keyword, text, None, tok.line, tok.column)
    return Token(OPERATORS[text], text, None, tok.line, tok.column)


def tokenize(source: str) -> List[Token]:
    """Convert source text into a list of tokens terminated by ``EOF``.

    Raises LexError on an unsupported character, an unterminated string
    literal or an integer literal outside the signed 64-bit range.
    """
    tokens: List[Token] = []
    try:
        for tok in EMBER_LEXER.lex(source):
            tokens.append(_convert(tok))
    except UnexpectedCharacters as e:
        if e.char == '"':
            raise LexError(f"unterminated string literal at {e.line}:{e.column}") from None
        raise LexError(f"unsupported character {e.char!r} at {e.line}:{e.column}") from None
    lines = source.split('\n')
    tokens.append(eof_token(len(lines), len(lines[-1]) + 1))
    return tokens
