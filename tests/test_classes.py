from textwrap import dedent

from ember.environment import Environment
from ember.interpreter import Interpreter
from ember.parser import parse_source
from ember.types import Integer, String, Error, ClassInstance

COUNTER = dedent(
    """\
    class Counter {
      get() {
        return this.count;
      }
      add(n) {
        this.count = this.count + n;
        return this;
      }
      double() {
        return this.get() * 2;
      }
    }
    """
)


def run(source, env=None):
    return Interpreter().run(parse_source(COUNTER + source), env)


def test_method_reads_field_through_this():
    assert run('let c = Counter(); c.count = 41; c.get();') == Integer(41)


def test_methods_mutate_instance_and_chain():
    assert run('let c = Counter(); c.count = 1; c.add(2).add(3); c.count;') == Integer(6)


def test_method_calls_sibling_method_through_this():
    assert run('let c = Counter(); c.count = 5; c.double();') == Integer(10)


def test_instances_have_independent_fields():
    source = '''
    let a = Counter();
    let b = Counter();
    a.count = 1;
    b.count = 100;
    a.add(1);
    a.get() + b.get();
    '''
    assert run(source) == Integer(102)


def test_bound_method_keeps_its_instance():
    source = '''
    let c = Counter();
    c.count = 1;
    let get = c.get;
    c.count = 9;
    get();
    '''
    assert run(source) == Integer(9)


def test_field_shadows_method():
    assert run('let c = Counter(); c.get = "field"; c.get;') == String('field')


def test_set_returns_assigned_value():
    assert run('let c = Counter(); c.count = 7;') == Integer(7)


def test_fields_are_created_on_first_assignment():
    env = Environment()
    run('let c = Counter(); c.anything = 3;', env)
    instance = env.get('c')
    assert isinstance(instance, ClassInstance)
    assert instance.fields == {'anything': Integer(3)}


def test_undefined_property_fails():
    result = run('let c = Counter(); c.missing;')
    assert isinstance(result, Error)
    assert result.name == 'PropertyError'
    assert 'missing' in result.message


def test_reading_unset_field_inside_method_fails():
    result = run('let c = Counter(); c.get();')
    assert isinstance(result, Error)
    assert result.name == 'PropertyError'


def test_method_arity_is_checked():
    result = run('let c = Counter(); c.count = 0; c.add();')
    assert isinstance(result, Error)
    assert result.name == 'ArityError'
    assert 'expects 1 arguments, got 0' in result.message


def test_class_takes_no_constructor_arguments():
    result = run('Counter(1);')
    assert isinstance(result, Error)
    assert result.name == 'ArityError'


def test_class_declaration_is_bound_in_enclosing_scope():
    env = Environment()
    result = run('', env)
    assert result.inspect() == '<class Counter>'
    assert env.get('Counter') is result
    # methods live in the class environment, not the enclosing one
    assert env.lookup('get') is None


def test_methods_close_over_the_declaring_scope():
    source = '''
    fn makeClass(step) {
      class Stepper {
        next(n) { return n + step; }
      }
      return Stepper;
    }
    let S = makeClass(3);
    let s = S();
    s.next(4);
    '''
    assert run(source) == Integer(7)


def test_this_is_not_visible_after_method_returns():
    result = run('let c = Counter(); c.count = 1; c.get(); this;')
    assert isinstance(result, Error)
    assert result.name == 'ThisError'
