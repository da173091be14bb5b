"""Recursive-descent parser for the Ember language.

The parser consumes the token list produced by :func:`ember.lexer.tokenize`
and builds an immutable :class:`~ember.ast.Program`. Each grammar rule is a
method; operator precedence is encoded by the order in which the
expression methods call each other, from ``parse_assignment`` (loosest) down
to ``parse_primary`` (tightest).

There is no error recovery: the first token that does not fit the grammar
raises :class:`~ember.errors.ParseError` and the whole parse is abandoned.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Union

from .ast import (
    Program, Stmt, Expr, Let, Block, Function, ClassDecl, ExpressionStmt,
    If, Print, While, Return, Identifier, Assign, Set, Logical, Binary,
    Unary, Literal, Grouping, Call, Get, This,
)
from .errors import ParseError
from .lexer import tokenize
from .tokens import EOF, Token

MAX_PARAMETERS = 8


class Parser:
    def __init__(self, tokens: Sequence[Token]):
        if not tokens or tokens[-1].type != EOF:
            raise ParseError("token stream must end with EOF")
        self.tokens = tokens
        self.pos = 0

    # Token stream helpers

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def is_at_end(self) -> bool:
        return self.peek().type == EOF

    def advance(self) -> Token:
        token = self.peek()
        if not self.is_at_end():
            self.pos += 1
        return token

    def check(self, expected: Union[str, List[str]]) -> bool:
        token = self.peek()
        if isinstance(expected, list):
            return token.type in expected
        return token.type == expected

    def match(self, expected: Union[str, List[str]]) -> bool:
        if self.check(expected):
            self.advance()
            return True
        return False

    def consume(self, expected: str, message: str) -> Token:
        if self.check(expected):
            return self.advance()
        token = self.peek()
        found = 'end of input' if token.type == EOF else repr(token.literal)
        raise ParseError(f"{message} at {token.where}, got {found}")

    # Declarations and statements

    def parse_program(self) -> Program:
        statements: List[Stmt] = []
        while not self.is_at_end():
            statements.append(self.parse_declaration())
        return Program(tuple(statements))

    def parse_declaration(self) -> Stmt:
        if self.match('LET'):
            return self.parse_let()
        if self.match('FN'):
            return self.parse_function()
        if self.match('CLASS'):
            return self.parse_class()
        return self.parse_statement()

    def parse_let(self) -> Let:
        name = self.consume('IDENT', "expected variable name after 'let'")
        initializer: Optional[Expr] = None
        if self.match('ASSIGN'):
            initializer = self.parse_expression()
        self.consume('SEMICOLON', "expected ';' after variable declaration")
        return Let(name.value, initializer)

    def parse_function(self) -> Function:
        name = self.consume('IDENT', "expected function name")
        self.consume('LPAREN', f"expected '(' after function name {name.value}")
        params: List[str] = []
        if not self.check('RPAREN'):
            while True:
                if len(params) >= MAX_PARAMETERS:
                    raise ParseError(
                        f"function {name.value} has more than {MAX_PARAMETERS} parameters at {self.peek().where}")
                param = self.consume('IDENT', "expected parameter name")
                params.append(param.value)
                if not self.match('COMMA'):
                    break
        self.consume('RPAREN', "expected ')' after parameters")
        self.consume('LBRACE', f"expected '{{' before body of {name.value}")
        body = self.parse_block()
        return Function(name.value, tuple(params), body)

    def parse_class(self) -> ClassDecl:
        name = self.consume('IDENT', "expected class name")
        self.consume('LBRACE', f"expected '{{' before body of class {name.value}")
        methods: List[Function] = []
        while not self.check('RBRACE') and not self.is_at_end():
            methods.append(self.parse_function())
        self.consume('RBRACE', f"expected '}}' after body of class {name.value}")
        return ClassDecl(name.value, tuple(methods))

    def parse_statement(self) -> Stmt:
        if self.match('FOR'):
            return self.parse_for()
        if self.match('IF'):
            return self.parse_if()
        if self.match('RETURN'):
            return self.parse_return()
        if self.match('PRINT'):
            return self.parse_print()
        if self.match('WHILE'):
            return self.parse_while()
        if self.match('LBRACE'):
            return self.parse_block()
        return self.parse_expression_statement()

    def parse_block(self) -> Block:
        # the opening brace has already been consumed
        statements: List[Stmt] = []
        while not self.check('RBRACE') and not self.is_at_end():
            statements.append(self.parse_declaration())
        self.consume('RBRACE', "expected '}' after block")
        return Block(tuple(statements))

    def parse_expression_statement(self) -> ExpressionStmt:
        expr = self.parse_expression()
        self.consume('SEMICOLON', "expected ';' after expression")
        return ExpressionStmt(expr)

    def parse_for(self) -> Stmt:
        """Parse a for loop and desugar it into a block holding a while loop.

        ``for (init; cond; incr) body`` becomes
        ``{ init; while (cond) { body; incr; } }`` with a missing condition
        replaced by ``true``.
        """
        self.consume('LPAREN', "expected '(' after 'for'")
        initializer: Optional[Stmt]
        if self.match('SEMICOLON'):
            initializer = None
        elif self.match('LET'):
            initializer = self.parse_let()
        else:
            initializer = self.parse_expression_statement()

        condition: Optional[Expr] = None
        if not self.check('SEMICOLON'):
            condition = self.parse_expression()
        self.consume('SEMICOLON', "expected ';' after loop condition")

        increment: Optional[Expr] = None
        if not self.check('RPAREN'):
            increment = self.parse_expression()
        self.consume('RPAREN', "expected ')' after for clauses")

        body = self.parse_statement()
        if increment is not None:
            body = Block((body, ExpressionStmt(increment)))
        if condition is None:
            condition = Literal(True)
        loop: Stmt = While(condition, body)
        if initializer is not None:
            return Block((initializer, loop))
        return Block((loop,))

    def parse_if(self) -> If:
        self.consume('LPAREN', "expected '(' after 'if'")
        condition = self.parse_expression()
        self.consume('RPAREN', "expected ')' after if condition")
        then_branch = self.parse_statement()
        else_branch: Optional[Stmt] = None
        if self.match('ELSE'):
            else_branch = self.parse_statement()
        return If(condition, then_branch, else_branch)

    def parse_return(self) -> Return:
        value: Optional[Expr] = None
        if not self.check('SEMICOLON'):
            value = self.parse_expression()
        self.consume('SEMICOLON', "expected ';' after return value")
        return Return(value)

    def parse_print(self) -> Print:
        self.consume('LPAREN', "expected '(' after 'print'")
        args = [self.parse_expression()]
        while self.match('COMMA'):
            args.append(self.parse_expression())
        self.consume('RPAREN', "expected ')' after print arguments")
        self.consume('SEMICOLON', "expected ';' after print statement")
        return Print(tuple(args))

    def parse_while(self) -> While:
        self.consume('LPAREN', "expected '(' after 'while'")
        condition = self.parse_expression()
        self.consume('RPAREN', "expected ')' after while condition")
        body = self.parse_statement()
        return While(condition, body)

    # Expressions, loosest binding first

    def parse_expression(self) -> Expr:
        return self.parse_assignment()

    def parse_assignment(self) -> Expr:
        expr = self.parse_logic_or()
        if self.match('ASSIGN'):
            equals = self.previous()
            value = self.parse_assignment()
            if isinstance(expr, Identifier):
                return Assign(expr.name, value)
            if isinstance(expr, Get):
                return Set(expr.target, expr.name, value)
            raise ParseError(f"invalid assignment target at {equals.where}")
        return expr

    def parse_logic_or(self) -> Expr:
        expr = self.parse_logic_and()
        while self.match('OR'):
            op = self.previous()
            right = self.parse_logic_and()
            expr = Logical(expr, right, op.literal)
        return expr

    def parse_logic_and(self) -> Expr:
        expr = self.parse_equality()
        while self.match('AND'):
            op = self.previous()
            right = self.parse_equality()
            expr = Logical(expr, right, op.literal)
        return expr

    def parse_equality(self) -> Expr:
        expr = self.parse_comparison()
        while self.match(['NOT_EQUAL', 'EQUAL']):
            op = self.previous()
            right = self.parse_comparison()
            expr = Binary(expr, right, op.literal)
        return expr

    def parse_comparison(self) -> Expr:
        # == and != are accepted here too; the result is the same as when
        # they are parsed by parse_equality.
        expr = self.parse_term()
        while self.match(['GREATER', 'GREATER_EQUAL', 'LESS', 'LESS_EQUAL', 'NOT_EQUAL', 'EQUAL']):
            op = self.previous()
            right = self.parse_term()
            expr = Binary(expr, right, op.literal)
        return expr

    def parse_term(self) -> Expr:
        expr = self.parse_factor()
        while self.match(['MINUS', 'PLUS']):
            op = self.previous()
            right = self.parse_factor()
            expr = Binary(expr, right, op.literal)
        return expr

    def parse_factor(self) -> Expr:
        expr = self.parse_unary()
        while self.match(['SLASH', 'STAR', 'POW']):
            op = self.previous()
            right = self.parse_unary()
            expr = Binary(expr, right, op.literal)
        return expr

    def parse_unary(self) -> Expr:
        if self.match(['BANG', 'MINUS']):
            op = self.previous()
            operand = self.parse_unary()
            return Unary(op.literal, operand)
        return self.parse_call()

    def parse_call(self) -> Expr:
        expr = self.parse_primary()
        while True:
            if self.match('LPAREN'):
                expr = self.finish_call(expr)
            elif self.match('DOT'):
                name = self.consume('IDENT', "expected property name after '.'")
                expr = Get(expr, name.value)
            else:
                break
        return expr

    def finish_call(self, callee: Expr) -> Call:
        args: List[Expr] = []
        if not self.check('RPAREN'):
            while True:
                if len(args) >= MAX_PARAMETERS:
                    raise ParseError(f"more than {MAX_PARAMETERS} arguments at {self.peek().where}")
                args.append(self.parse_expression())
                if not self.match('COMMA'):
                    break
        self.consume('RPAREN', "expected ')' after arguments")
        return Call(callee, tuple(args))

    def parse_primary(self) -> Expr:
        token = self.peek()
        if self.match(['INTEGER', 'STRING', 'TRUE', 'FALSE']):
            return Literal(token.value)
        if self.match('NIL'):
            return Literal(None)
        if self.match('IDENT'):
            return Identifier(token.value)
        if self.match('THIS'):
            return This()
        if self.match('LPAREN'):
            expr = self.parse_expression()
            self.consume('RPAREN', "expected ')' after expression")
            return Grouping(expr)
        if token.type == EOF:
            raise ParseError(f"unexpected end of input in expression at {token.where}")
        raise ParseError(f"unexpected token {token.literal!r} at {token.where}")


def parse_program(tokens: Sequence[Token]) -> Program:
    """Parse a token list (ending with EOF) into an AST Program."""
    return Parser(tokens).parse_program()


def parse_source(source: str) -> Program:
    """Tokenize and parse Ember source text."""
    return parse_program(tokenize(source))
