import pytest

from ember.ast import (
    Program, Let, Block, Function, ClassDecl, ExpressionStmt, If, Print,
    While, Return, Identifier, Assign, Set, Logical, Binary, Unary, Literal,
    Grouping, Call, Get, This,
)
from ember.errors import ParseError
from ember.parser import parse_program, parse_source
from ember.tokens import Token


def parse_expr(source):
    program = parse_source(source)
    assert len(program.statements) == 1
    stmt = program.statements[0]
    assert isinstance(stmt, ExpressionStmt)
    return stmt.expr


def test_multiplication_binds_tighter_than_addition():
    assert parse_expr('1 + 2 * 3;') == Binary(
        Literal(1), Binary(Literal(2), Literal(3), '*'), '+')


def test_binary_operators_are_left_associative():
    assert parse_expr('1 - 2 - 3;') == Binary(
        Binary(Literal(1), Literal(2), '-'), Literal(3), '-')


def test_power_shares_factor_level():
    assert parse_expr('2 * 3 ** 2;') == Binary(
        Binary(Literal(2), Literal(3), '*'), Literal(2), '**')


def test_grouping():
    assert parse_expr('(1 + 2) * 3;') == Binary(
        Grouping(Binary(Literal(1), Literal(2), '+')), Literal(3), '*')


def test_logical_precedence():
    assert parse_expr('a || b && c;') == Logical(
        Identifier('a'), Logical(Identifier('b'), Identifier('c'), '&&'), '||')


def test_comparison_level_also_accepts_equality_operators():
    assert parse_expr('1 < 2 == true;') == Binary(
        Binary(Literal(1), Literal(2), '<'), Literal(True), '==')


def test_unary_nests():
    assert parse_expr('!!true;') == Unary('!', Unary('!', Literal(True)))
    assert parse_expr('-x;') == Unary('-', Identifier('x'))


def test_literals():
    assert parse_expr('nil;') == Literal(None)
    assert parse_expr('null;') == Literal(None)
    assert parse_expr('"hi";') == Literal('hi')
    assert parse_expr('false;') == Literal(False)


def test_assignment_is_right_associative():
    assert parse_expr('a = b = 1;') == Assign('a', Assign('b', Literal(1)))


def test_property_assignment_becomes_set():
    assert parse_expr('p.x = 1;') == Set(Identifier('p'), 'x', Literal(1))
    assert parse_expr('this.x = y;') == Set(This(), 'x', Identifier('y'))


def test_invalid_assignment_target():
    with pytest.raises(ParseError, match='invalid assignment target'):
        parse_source('1 = 2;')
    with pytest.raises(ParseError, match='invalid assignment target'):
        parse_source('f() = 2;')


def test_call_and_get_chain():
    assert parse_expr('a.b(1).c;') == Get(
        Call(Get(Identifier('a'), 'b'), (Literal(1),)), 'c')


def test_let_with_and_without_initializer():
    program = parse_source('let a; let b = 2;')
    assert program == Program((Let('a', None), Let('b', Literal(2))))


def test_function_declaration():
    program = parse_source('fn add(a, b) { return a + b; }')
    assert program.statements == (
        Function('add', ('a', 'b'), Block((
            Return(Binary(Identifier('a'), Identifier('b'), '+')),
        ))),
    )


def test_function_parameter_limit():
    params = ', '.join(f'p{i}' for i in range(9))
    with pytest.raises(ParseError, match='more than 8 parameters'):
        parse_source(f'fn f({params}) {{}}')
    args = ', '.join(str(i) for i in range(9))
    with pytest.raises(ParseError, match='more than 8 arguments'):
        parse_source(f'f({args});')


def test_class_declaration_keeps_method_order():
    program = parse_source('class A { a() {} b(x) { return x; } }')
    decl = program.statements[0]
    assert isinstance(decl, ClassDecl)
    assert decl.name == 'A'
    assert [method.name for method in decl.methods] == ['a', 'b']
    assert decl.methods[1].params == ('x',)


def test_if_else_and_while():
    program = parse_source('if (a) print("y"); else { b; } while (c) c = false;')
    assert program.statements == (
        If(Identifier('a'), Print((Literal('y'),)), Block((ExpressionStmt(Identifier('b')),))),
        While(Identifier('c'), ExpressionStmt(Assign('c', Literal(False)))),
    )


def test_return_without_value():
    program = parse_source('fn f() { return; }')
    assert program.statements[0].body == Block((Return(None),))


def test_for_loop_desugars_to_while():
    program = parse_source('for (let i = 0; i < 3; i = i + 1) print("x");')
    assert program.statements == (
        Block((
            Let('i', Literal(0)),
            While(
                Binary(Identifier('i'), Literal(3), '<'),
                Block((
                    Print((Literal('x'),)),
                    ExpressionStmt(Assign('i', Binary(Identifier('i'), Literal(1), '+'))),
                )),
            ),
        )),
    )


def test_empty_for_loop_clauses():
    program = parse_source('for (;;) {}')
    assert program.statements == (Block((While(Literal(True), Block(())),)),)


def test_for_with_expression_initializer():
    program = parse_source('for (i = 0; i < 1;) {}')
    loop_block = program.statements[0]
    assert loop_block.statements[0] == ExpressionStmt(Assign('i', Literal(0)))
    assert loop_block.statements[1] == While(Binary(Identifier('i'), Literal(1), '<'), Block(()))


def test_print_requires_parentheses_and_semicolon():
    assert parse_source('print("%d", 1, x);').statements == (
        Print((Literal('%d'), Literal(1), Identifier('x'))),
    )
    with pytest.raises(ParseError, match="expected ';' after print statement"):
        parse_source('print("a")')


def test_missing_semicolon_reports_position():
    with pytest.raises(ParseError, match=r"expected ';' after expression at 1:3"):
        parse_source('1 2;')


def test_unterminated_block():
    with pytest.raises(ParseError, match="expected '}' after block"):
        parse_source('{ let a = 1;')


def test_unexpected_end_of_expression():
    with pytest.raises(ParseError, match='unexpected end of input'):
        parse_source('1 +')


def test_first_error_aborts_whole_parse():
    with pytest.raises(ParseError):
        parse_source('let ok = 1; let = 2; let fine = 3;')


def test_token_stream_must_end_with_eof():
    with pytest.raises(ParseError, match='EOF'):
        parse_program([Token('INTEGER', '1', 1)])


def test_ast_is_immutable():
    program = parse_source('let a = 1;')
    with pytest.raises(AttributeError):
        program.statements[0].name = 'b'
