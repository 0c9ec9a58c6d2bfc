import math

import pytest

from ember.types import HostObject, Nil, Pair, Primitive, Symbol, Vector
from ember.types.pair import list_from
from ember.values import (
    ValueKind,
    display_string,
    is_equal,
    is_eqv,
    is_integer,
    is_list,
    is_number,
    is_true,
    kind_of,
    make_list,
    to_string,
)


@pytest.mark.parametrize(
    "value,kind",
    [
        (Nil, ValueKind.NIL),
        (True, ValueKind.BOOLEAN),
        (0, ValueKind.INTEGER),
        (1.5, ValueKind.FLOAT),
        ("s", ValueKind.STRING),
        (Symbol("s"), ValueKind.SYMBOL),
        (Pair(1, 2), ValueKind.PAIR),
        (Vector([1]), ValueKind.VECTOR),
        (HostObject(object()), ValueKind.OBJECT),
    ],
)
def test_kind_of(value, kind):
    assert kind_of(value) is kind


def test_kind_of_rejects_foreign_values():
    with pytest.raises(TypeError):
        kind_of(object())


def test_booleans_are_not_integers():
    assert not is_integer(True)
    assert not is_number(False)
    assert is_integer(3)


def test_truthiness():
    assert is_true(Nil)
    assert is_true(0)
    assert is_true("")
    assert not is_true(False)


def test_symbols_are_interned():
    assert Symbol("abc") is Symbol("abc")
    assert Symbol("abc") is not Symbol("abd")


def test_is_list():
    assert is_list(Nil)
    assert is_list(make_list(1, 2))
    assert not is_list(Pair(1, 2))
    assert not is_list(Vector())


def test_eqv_and_equal():
    a = list_from([1, 2])
    b = list_from([1, 2])
    assert not is_eqv(a, b)
    assert is_equal(a, b)
    assert is_eqv(a, a)
    assert is_eqv(2, 2)
    assert not is_eqv(2, 2.0)
    assert is_equal(2, 2.0)
    assert is_equal(Vector([a]), Vector([b]))
    assert not is_equal(True, 1)


@pytest.mark.parametrize(
    "value,text",
    [
        (Nil, "nil"),
        (True, "#t"),
        (False, "#f"),
        (-12, "-12"),
        (2.5, "2.5"),
        (math.inf, "+inf.0"),
        (-math.inf, "-inf.0"),
        (math.nan, "+nan.0"),
        ('say "hi"\n', '"say \\"hi\\"\\n"'),
        (Symbol("sym"), "sym"),
        (list_from([1, 2, 3]), "(1 2 3)"),
        (Pair(1, 2), "(1 . 2)"),
        (list_from([1, 2], 3), "(1 2 . 3)"),
        (list_from([Symbol("quote"), Symbol("x")]), "'x"),
        (Vector([1, list_from(["a"])]), '#(1 ("a"))'),
        (Vector(), "#()"),
        (HostObject(42, "answer"), "<object: answer>"),
    ],
)
def test_to_string(value, text):
    assert to_string(value) == text


def test_display_string_leaves_strings_bare():
    assert display_string(list_from(["a b", 1])) == "(a b 1)"


def test_primitive_and_closure_rendering(interp):
    assert to_string(interp.lookup("car")) == "<prim: car>"
    interp.eval("(define (f a b . c) a)")
    assert to_string(interp.lookup("f")) == "<function f (a b . c)>"
    assert to_string(interp.eval("(lambda (x) x)")) == "<function anonymous (x)>"


def test_pair_mutation_is_shared():
    shared = Pair(1, Nil)
    holder = list_from([shared, shared])
    holder.car.car = 99
    assert holder.cdr.car.car == 99


def test_host_object_tag_defaults_to_payload_type():
    assert HostObject({}).tag == "dict"


def test_primitive_repr():
    prim = Primitive("p", 0, lambda env, args: Nil, special=True)
    assert repr(prim) == "<special: p>"


def test_host_constructors_and_accessors():
    from ember import values as v

    assert v.integer_value(v.make_integer(7)) == 7
    assert v.float_value(v.make_float(2)) == 2.0
    assert v.boolean_value(v.make_boolean(0)) is False
    assert v.string_value(v.make_string("s")) == "s"
    assert v.symbol_name(v.intern("k")) == "k"
    assert v.number_value(3) == 3
    pair = v.cons(1, Nil)
    assert v.car(pair) == 1 and v.cdr(pair) is Nil
    items = v.vector_items(v.make_vector([1, 2]))
    items.append(3)
    assert v.list_to_python(v.make_list(1, 2)) == [1, 2]
    obj = v.make_object([1], "box")
    assert v.object_payload(obj) == [1]
    assert obj.tag == "box"
    assert v.is_nil(Nil) and not v.is_nil(False)


def test_primitive_predicate(interp):
    from ember.values import is_function, is_primitive

    assert is_primitive(interp.lookup("car"))
    assert not is_primitive(interp.eval("(lambda () 1)"))
    assert is_function(interp.eval("(lambda () 1)"))
