"""Runtime values for Ember.

This module defines the closed set of values the interpreter works with.
Every value carries a ``type`` tag that operator implementations dispatch
on; they never rely on Python's own dynamic typing of the payload, so an
unsupported combination of operands is always reported as a failure.

:class:`ReturnValue` is internal: it wraps the value of a ``return``
statement while it travels up through blocks and loops to the enclosing
call, and is never visible to Ember programs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, Dict, Tuple

if TYPE_CHECKING:
    from .ast import Block
    from .environment import Environment


INTEGER = 'INTEGER'
BOOL = 'BOOL'
STRING = 'STRING'
NULL = 'NULL'
FUNCTION = 'FUNCTION'
CLASS = 'CLASS'
CLASS_INSTANCE = 'CLASS_INSTANCE'
RETURN = 'RETURN'
ERROR = 'ERROR'


class Object:
    """Base class of all runtime values."""
    type: ClassVar[str]

    def inspect(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class Integer(Object):
    type: ClassVar[str] = INTEGER
    value: int

    def inspect(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Bool(Object):
    type: ClassVar[str] = BOOL
    value: bool

    def inspect(self) -> str:
        return 'true' if self.value else 'false'


@dataclass(frozen=True)
class String(Object):
    type: ClassVar[str] = STRING
    value: str

    def inspect(self) -> str:
        return self.value


@dataclass(frozen=True)
class Null(Object):
    type: ClassVar[str] = NULL

    def inspect(self) -> str:
        return 'nil'


@dataclass(eq=False)
class Function(Object):
    """A user function or method paired with the environment it closes over."""
    type: ClassVar[str] = FUNCTION
    name: str
    params: Tuple[str, ...]
    body: 'Block'
    env: 'Environment'

    @property
    def arity(self) -> int:
        return len(self.params)

    def inspect(self) -> str:
        return f"<fn {self.name}>"


@dataclass(eq=False)
class Class(Object):
    type: ClassVar[str] = CLASS
    name: str
    methods: Dict[str, Function]
    env: 'Environment'

    def inspect(self) -> str:
        return f"<class {self.name}>"


@dataclass(eq=False)
class ClassInstance(Object):
    """An instance of a Class. Fields are created on first assignment."""
    type: ClassVar[str] = CLASS_INSTANCE
    cls: Class
    fields: Dict[str, Object] = field(default_factory=dict)

    def inspect(self) -> str:
        return f"<{self.cls.name} instance>"


@dataclass(frozen=True)
class ReturnValue(Object):
    type: ClassVar[str] = RETURN
    value: Object

    def inspect(self) -> str:
        return self.value.inspect()


@dataclass(frozen=True)
class Error(Object):
    """Represents an Ember runtime failure as a value.

    Errors carry a name (the failure class, e.g. ``'TypeError'``) and a
    message.
    """
    type: ClassVar[str] = ERROR
    name: str
    message: str

    def inspect(self) -> str:
        return f"{self.name}: {self.message}"


NIL = Null()
TRUE = Bool(True)
FALSE = Bool(False)


def native_bool(value: bool) -> Bool:
    return TRUE if value else FALSE


def to_int64(value: int) -> int:
    """Wrap an arbitrary Python int into the signed 64-bit range."""
    value &= 0xFFFFFFFFFFFFFFFF
    if value >= 0x8000000000000000:
        value -= 0x10000000000000000
    return value
