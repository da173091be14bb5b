from ember.ast import Block
from ember.environment import Environment
from ember.types import (
    Integer, Bool, String, Null, Function, Class, ClassInstance, ReturnValue,
    Error, NIL, TRUE, FALSE, native_bool, to_int64,
)


def test_inspect():
    env = Environment()
    fn = Function('area', ('w', 'h'), Block(()), env)
    cls = Class('Box', {'area': fn}, env)
    assert Integer(-3).inspect() == '-3'
    assert TRUE.inspect() == 'true'
    assert FALSE.inspect() == 'false'
    assert String('hi').inspect() == 'hi'
    assert NIL.inspect() == 'nil'
    assert fn.inspect() == '<fn area>'
    assert cls.inspect() == '<class Box>'
    assert ClassInstance(cls).inspect() == '<Box instance>'
    assert ReturnValue(Integer(1)).inspect() == '1'
    assert Error('TypeError', 'bad').inspect() == 'TypeError: bad'


def test_scalar_values_compare_by_value():
    assert Integer(14) == Integer(14)
    assert String('a') != String('b')
    assert Null() == NIL
    assert native_bool(True) is TRUE
    assert Bool(False) == FALSE


def test_instances_compare_by_identity_and_start_empty():
    cls = Class('A', {}, Environment())
    a, b = ClassInstance(cls), ClassInstance(cls)
    assert a != b
    assert a.fields == {}
    a.fields['x'] = Integer(1)
    assert b.fields == {}


def test_function_arity():
    fn = Function('f', ('a', 'b'), Block(()), Environment())
    assert fn.arity == 2


def test_type_tags():
    assert Integer(1).type == 'INTEGER'
    assert NIL.type == 'NULL'
    assert ReturnValue(NIL).type == 'RETURN'


def test_to_int64_wraps():
    assert to_int64(2 ** 63) == -2 ** 63
    assert to_int64(-2 ** 63 - 1) == 2 ** 63 - 1
    assert to_int64(42) == 42
