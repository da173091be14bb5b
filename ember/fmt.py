"""Formatting for the ``print`` statement.

``print(format, args...)`` substitutes its arguments positionally into the
format string:

``%d``  an Integer
``%t``  a Bool
``%s``  any value, via its ``inspect()`` text
``%v``  same as ``%s``
``%%``  a literal percent sign

A verb may carry flags and a width between the ``%`` and the verb letter,
as in ``%5d``, ``%-8s`` or ``%03d``:

``-``   pad on the right instead of the left
``0``   pad an Integer with leading zeros (ignored together with ``-``)
``+``   always print the sign of an Integer
`` ``   leave a space where a positive Integer's sign would go
``#``   accepted, no effect

A ``%`` at the very end of the format, with or without flags, is printed as
it stands.
"""

from __future__ import annotations

import re
from typing import List, Sequence

from .errors import TypeMismatch
from .types import BOOL, INTEGER, Object

_VERB_RE = re.compile(r'%([-+ 0#]*)(\d*)(.?)', re.DOTALL)

_VERB_TYPES = {'d': INTEGER, 't': BOOL}


def pad(text: str, flags: str, width: str) -> str:
    if not width:
        return text
    align = '<' if '-' in flags else '>'
    return format(text, f'{align}{width}')


def format_integer(value: int, flags: str, width: str) -> str:
    sign = '+' if '+' in flags else (' ' if ' ' in flags else '-')
    if '-' in flags:
        return format(value, f'<{sign}{width}d')
    if '0' in flags and width:
        return format(value, f'{sign}0{width}d')
    return format(value, f'>{sign}{width}d')


def format_values(template: str, args: Sequence[Object]) -> str:
    pieces: List[str] = []
    index = 0
    pos = 0
    for match in _VERB_RE.finditer(template):
        pieces.append(template[pos:match.start()])
        pos = match.end()
        flags, width, verb = match.groups()
        if verb == '':
            pieces.append(match.group(0))
            continue
        if verb == '%' and not flags and not width:
            pieces.append('%')
            continue
        spelled = f'%{flags}{width}{verb}'
        if verb not in ('d', 't', 's', 'v'):
            raise TypeMismatch(f"print: unknown format verb {spelled}")
        if index >= len(args):
            raise TypeMismatch(f"print: missing argument for {spelled}")
        arg = args[index]
        index += 1
        expected = _VERB_TYPES.get(verb)
        if expected is not None and arg.type != expected:
            raise TypeMismatch(f"print: {spelled} expects {expected}, got {arg.type}")
        if verb == 'd':
            pieces.append(format_integer(arg.value, flags, width))
        else:
            pieces.append(pad(arg.inspect(), flags, width))
    pieces.append(template[pos:])
    if index < len(args):
        raise TypeMismatch(f"print: {len(args) - index} unused argument(s) for format {template!r}")
    return ''.join(pieces)
