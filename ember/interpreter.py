"""Tree-walking interpreter for the Ember language.

Statements are run by :meth:`Interpreter.execute` and expressions by
:meth:`Interpreter.evaluate`; both dispatch on the AST node class and work
against an :class:`~ember.environment.Environment` chain.

Two channels carry non-local outcomes:

* ``return`` produces a :class:`~ember.types.ReturnValue` sentinel. Blocks,
  ``if`` and ``while`` check every statement result for it and hand it
  upwards unchanged; the enclosing call unwraps it.
* Runtime failures raise an :class:`~ember.errors.EmberError`.
  :meth:`Interpreter.run` catches it at the top-level statement boundary and
  returns the carried :class:`~ember.types.Error` value instead, so a REPL can
  report it and carry on with the next input.
"""

from __future__ import annotations

import math
import operator
import sys
from contextlib import contextmanager
from typing import Callable, Dict, List, Optional, TextIO

from .ast import (
    Node, Program, Let, Block, Function, ClassDecl, ExpressionStmt, If,
    Print, While, Return, Identifier, Assign, Set, Logical, Binary, Unary,
    Literal, Grouping, Call, Get, This,
)
from .environment import Environment
from .errors import (
    EmberError, TypeMismatch, NotAnInstance, DivideByZero, IntegerOverflow,
    ArityMismatch, NotCallable, PropertyNotFound, ThisOutsideMethod,
)
from .fmt import format_values
from .parser import parse_source
from . import types
from .types import (
    Object, Integer, Bool, String, ClassInstance, ReturnValue, Error,
    NIL, INTEGER, STRING, native_bool, to_int64,
)

COMPARISONS: Dict[str, Callable[[object, object], bool]] = {
    '>': operator.gt,
    '>=': operator.ge,
    '<': operator.lt,
    '<=': operator.le,
    '!=': operator.ne,
    '==': operator.eq,
}

INT64_MIN = -2 ** 63
INT64_LIMIT = 2 ** 63

# Each Ember call takes about six Python frames.
RECURSION_LIMIT = 12000


@contextmanager
def recursion_limit(limit: int):
    previous = sys.getrecursionlimit()
    sys.setrecursionlimit(max(previous, limit))
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


class Interpreter:
    """Core interpreter that executes an Ember AST."""
    def __init__(self, debug_level: int = 0, debug_file: Optional[str] = None,
                 out: Optional[TextIO] = None):
        self.global_env = Environment()
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 and debug_file else None
        self.out = out

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg, file=sys.stderr)

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def run(self, program: Program, env: Optional[Environment] = None) -> Optional[Object]:
        """Execute a program and return the value of its last statement.

        A top-level ``return`` stops the program and its value is returned.
        A runtime failure stops the program too and is returned as an
        :class:`~ember.types.Error` value rather than raised.
        """
        if env is None:
            env = self.global_env
        result: Optional[Object] = None
        with recursion_limit(RECURSION_LIMIT):
            for stmt in program.statements:
                try:
                    result = self.execute(stmt, env)
                except EmberError as ex:
                    self.debug(f"error {ex.err.inspect()}")
                    return ex.err
                except RecursionError:
                    return Error('RecursionError', 'maximum recursion depth exceeded')
                if isinstance(result, ReturnValue):
                    return result.value
        return result

    def execute_block(self, statements, env: Environment) -> Optional[Object]:
        result: Optional[Object] = None
        for stmt in statements:
            result = self.execute(stmt, env)
            if isinstance(result, ReturnValue):
                return result
        return result

    def execute(self, node: Node, env: Environment) -> Optional[Object]:
        if isinstance(node, ExpressionStmt):
            return self.evaluate(node.expr, env)
        if isinstance(node, Let):
            value = self.evaluate(node.initializer, env) if node.initializer is not None else NIL
            env.define(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"let {node.name} = {value.inspect()}")
            return value
        if isinstance(node, Block):
            return self.execute_block(node.statements, env.child())
        if isinstance(node, Function):
            return self.declare_function(node, env)
        if isinstance(node, ClassDecl):
            class_env = env.child()
            methods = {method.name: self.declare_function(method, class_env) for method in node.methods}
            cls = types.Class(node.name, methods, class_env)
            env.define(node.name, cls)
            if self.debug_level >= 1:
                self.debug(f"define class {node.name} with methods {', '.join(methods) or '-'}")
            return cls
        if isinstance(node, If):
            truthy = self.condition(node.condition, env)
            if self.debug_level >= 3:
                self.debug(f"if condition -> {truthy}")
            if truthy:
                return self.execute(node.then_branch, env)
            if node.else_branch is not None:
                return self.execute(node.else_branch, env)
            return None
        if isinstance(node, While):
            result: Optional[Object] = None
            while self.condition(node.condition, env):
                result = self.execute(node.body, env)
                if isinstance(result, ReturnValue):
                    return result
            return result
        if isinstance(node, Return):
            value = self.evaluate(node.value, env) if node.value is not None else NIL
            return ReturnValue(value)
        if isinstance(node, Print):
            self.print_values(node, env)
            return None
        if isinstance(node, Program):
            return self.run(node, env)
        raise NotImplementedError(f"execute: unexpected node type {type(node).__name__}")

    def declare_function(self, node: Function, env: Environment) -> types.Function:
        # Registered before the body ever runs, so the function can call
        # itself by name.
        fn = types.Function(node.name, node.params, node.body, env)
        env.define(node.name, fn)
        if self.debug_level >= 1:
            self.debug(f"define function {node.name}({', '.join(node.params)})")
        return fn

    def condition(self, node: Node, env: Environment) -> bool:
        cond = self.evaluate(node, env)
        if not isinstance(cond, Bool):
            raise TypeMismatch(f'condition must be a bool value: {cond.inspect()}')
        return cond.value

    def print_values(self, node: Print, env: Environment):
        values = [self.evaluate(arg, env) for arg in node.args]
        template = values[0]
        if not isinstance(template, String):
            raise TypeMismatch(f'print: first argument must be a format string, got {template.type}')
        text = format_values(template.value, values[1:])
        print(text, end='', file=self.out if self.out is not None else sys.stdout)

    def evaluate(self, node: Node, env: Environment) -> Object:
        # Evaluate expression nodes
        if isinstance(node, Literal):
            return self.literal(node.value)
        if isinstance(node, Identifier):
            return env.get(node.name)
        if isinstance(node, Grouping):
            return self.evaluate(node.expr, env)
        if isinstance(node, Assign):
            value = self.evaluate(node.value, env)
            return env.assign(node.name, value)
        if isinstance(node, Binary):
            left = self.evaluate(node.left, env)
            right = self.evaluate(node.right, env)
            return self.apply_binary_op(node.op, left, right)
        if isinstance(node, Logical):
            # both sides are always evaluated
            left = self.evaluate(node.left, env)
            right = self.evaluate(node.right, env)
            if not isinstance(left, Bool) or not isinstance(right, Bool):
                raise TypeMismatch(f'operands of {node.op} must be bool: {left.type}, {right.type}')
            if node.op == '&&':
                return native_bool(left.value and right.value)
            return native_bool(left.value or right.value)
        if isinstance(node, Unary):
            operand = self.evaluate(node.operand, env)
            if node.op == '!':
                if not isinstance(operand, Bool):
                    raise TypeMismatch(f'right value must be boolean: {operand.inspect()}')
                return native_bool(not operand.value)
            if node.op == '-':
                if not isinstance(operand, Integer):
                    raise TypeMismatch(f'right value must be integer: {operand.inspect()}')
                return Integer(to_int64(-operand.value))
            raise TypeMismatch(f'unsupported unary operator {node.op}')
        if isinstance(node, Call):
            callee = self.evaluate(node.callee, env)
            if isinstance(callee, types.Function):
                return self.call_function(callee, node.args, env)
            if isinstance(callee, types.Class):
                if node.args:
                    raise ArityMismatch(f'class {callee.name} takes no arguments, got {len(node.args)}')
                if self.debug_level >= 2:
                    self.debug(f"new {callee.name} instance")
                return ClassInstance(callee)
            raise NotCallable(f'{callee.inspect()} is not callable (it should be a function or a class)')
        if isinstance(node, Get):
            instance = self.evaluate(node.target, env)
            if not isinstance(instance, ClassInstance):
                raise NotAnInstance(
                    f'{instance.inspect()} can not get property {node.name}, only class instances have properties')
            if node.name in instance.fields:
                return instance.fields[node.name]
            method = instance.cls.methods.get(node.name)
            if method is not None:
                return self.bind(method, instance)
            raise PropertyNotFound(f'property {node.name} not found on {instance.cls.name} instance')
        if isinstance(node, Set):
            instance = self.evaluate(node.target, env)
            if not isinstance(instance, ClassInstance):
                raise NotAnInstance(f'{instance.inspect()} is not a class instance, only instances have fields')
            value = self.evaluate(node.value, env)
            instance.fields[node.name] = value
            return value
        if isinstance(node, This):
            instance = env.lookup('this')
            if instance is None:
                raise ThisOutsideMethod('this can not find the class instance (used outside a method)')
            return instance
        raise NotImplementedError(f"evaluate: unexpected node type {type(node).__name__}")

    def literal(self, value) -> Object:
        if value is None:
            return NIL
        # bool is a subclass of int; test it first
        if isinstance(value, bool):
            return native_bool(value)
        if isinstance(value, int):
            return Integer(value)
        if isinstance(value, str):
            return String(value)
        raise TypeMismatch(f'unsupported literal type: {type(value).__name__}')

    def bind(self, method: types.Function, instance: ClassInstance) -> types.Function:
        """Return a copy of ``method`` whose environment defines ``this``."""
        bound_env = method.env.child()
        bound_env.define('this', instance)
        return types.Function(method.name, method.params, method.body, bound_env)

    def call_function(self, fn: types.Function, arg_nodes, caller_env: Environment) -> Object:
        if len(arg_nodes) != fn.arity:
            raise ArityMismatch(f'function {fn.name} expects {fn.arity} arguments, got {len(arg_nodes)}')
        # Arguments are evaluated where the call appears; the body runs in a
        # scope chained to the function's own environment.
        args: List[Object] = [self.evaluate(arg, caller_env) for arg in arg_nodes]
        call_env = fn.env.child()
        for param, arg in zip(fn.params, args):
            call_env.define(param, arg)
        if self.debug_level >= 2:
            self.debug(f"call {fn.name}({', '.join(a.inspect() for a in args)})")
        result = self.execute(fn.body, call_env)
        while isinstance(result, ReturnValue):
            result = result.value
        return result if result is not None else NIL

    def apply_binary_op(self, op: str, a: Object, b: Object) -> Object:
        if op in COMPARISONS:
            if a.type != b.type:
                raise TypeMismatch(f'can not compare 2 different types: {a.type}, {b.type}')
            if a.type not in (INTEGER, STRING):
                raise TypeMismatch(f'unsupported compare type: {a.type}')
            return native_bool(COMPARISONS[op](a.value, b.value))
        if op == '+':
            if a.type != b.type:
                raise TypeMismatch(f'can not add 2 different types: {a.type}, {b.type}')
            if isinstance(a, Integer):
                return Integer(to_int64(a.value + b.value))
            if isinstance(a, String):
                return String(a.value + b.value)
            raise TypeMismatch(f'unsupported + for {a.type}')
        if not isinstance(a, Integer):
            raise TypeMismatch(f'{a.inspect()} must be an integer')
        if not isinstance(b, Integer):
            raise TypeMismatch(f'{b.inspect()} must be an integer')
        x, y = a.value, b.value
        if op == '-':
            return Integer(to_int64(x - y))
        if op == '*':
            return Integer(to_int64(x * y))
        if op == '/':
            if y == 0:
                raise DivideByZero('integer divide by zero')
            # integer division truncating toward zero
            quotient = abs(x) // abs(y)
            if (x < 0) != (y < 0):
                quotient = -quotient
            return Integer(to_int64(quotient))
        if op == '**':
            return Integer(self.power(x, y))
        raise TypeMismatch(f'operator is not supported: {op}')

    def power(self, base: int, exponent: int) -> int:
        """Floating-point exponentiation truncated back to an int64.

        Large results lose precision the same way a float64 does.
        """
        try:
            result = math.pow(base, exponent)
        except (OverflowError, ValueError):
            raise IntegerOverflow(f'{base} ** {exponent} is not representable as an integer') from None
        if not math.isfinite(result) or not INT64_MIN <= result < INT64_LIMIT:
            raise IntegerOverflow(f'{base} ** {exponent} is not representable as an integer')
        return int(result)


def run_source(source: str, debug_level: int = 0) -> Optional[Object]:
    """Convenience function to tokenize, parse and run Ember source text."""
    program = parse_source(source)
    interpreter = Interpreter(debug_level=debug_level)
    try:
        return interpreter.run(program)
    finally:
        interpreter.close()
