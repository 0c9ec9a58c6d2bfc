"""Predicates, constructors, accessors and rendering for runtime values.

This module is the sanctioned way for primitives to build and inspect
runtime data. Every value belongs to exactly one ValueKind; `kind_of`
is the single place that maps Python objects to kinds.

Accessors assume the caller already checked the matching predicate: a
mistagged call is a programming error and fails an assertion.
"""

from __future__ import annotations

import enum
import math
from io import StringIO
from typing import Any, Iterable

from ember import LispValue
from ember.types.nil import Nil, NilType
from ember.types.symbol import Symbol
from ember.types.pair import Pair, list_from
from ember.types.vector import Vector
from ember.types.closure import Closure
from ember.types.primitive import Primitive
from ember.types.host_object import HostObject


class ValueKind(enum.Enum):
    NIL = "nil"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    SYMBOL = "symbol"
    PAIR = "pair"
    VECTOR = "vector"
    CLOSURE = "closure"
    PRIMITIVE = "primitive"
    OBJECT = "object"


def kind_of(value: LispValue) -> ValueKind:
    match value:
        case NilType():
            return ValueKind.NIL
        case bool():
            return ValueKind.BOOLEAN
        case int():
            return ValueKind.INTEGER
        case float():
            return ValueKind.FLOAT
        case str():
            return ValueKind.STRING
        case Symbol():
            return ValueKind.SYMBOL
        case Pair():
            return ValueKind.PAIR
        case Vector():
            return ValueKind.VECTOR
        case Closure():
            return ValueKind.CLOSURE
        case Primitive():
            return ValueKind.PRIMITIVE
        case HostObject():
            return ValueKind.OBJECT
    raise TypeError(f"Not an Ember value: {value!r} ({type(value).__name__})")


# -------------------------------
# Predicates
# -------------------------------
def is_nil(value: LispValue) -> bool:
    return value is Nil


def is_boolean(value: LispValue) -> bool:
    return isinstance(value, bool)


def is_integer(value: LispValue) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_float(value: LispValue) -> bool:
    return isinstance(value, float)


def is_number(value: LispValue) -> bool:
    return is_integer(value) or is_float(value)


def is_string(value: LispValue) -> bool:
    return isinstance(value, str)


def is_symbol(value: LispValue) -> bool:
    return isinstance(value, Symbol)


def is_pair(value: LispValue) -> bool:
    return isinstance(value, Pair)


def is_list(value: LispValue) -> bool:
    """Nil or a pair chain ending in Nil."""
    return value is Nil or (isinstance(value, Pair) and value.is_proper())


def is_vector(value: LispValue) -> bool:
    return isinstance(value, Vector)


def is_closure(value: LispValue) -> bool:
    return isinstance(value, Closure)


def is_primitive(value: LispValue) -> bool:
    return isinstance(value, Primitive)


def is_function(value: LispValue) -> bool:
    return isinstance(value, (Closure, Primitive))


def is_object(value: LispValue) -> bool:
    return isinstance(value, HostObject)


def is_true(value: LispValue) -> bool:
    """Truthiness: everything except boolean false, including Nil and 0."""
    return value is not False


# -------------------------------
# Constructors
# -------------------------------
def make_integer(n: int) -> int:
    return int(n)


def make_float(x: float) -> float:
    return float(x)


def make_boolean(b: Any) -> bool:
    return bool(b)


def make_string(s: str) -> str:
    return str(s)


def intern(name: str) -> Symbol:
    return Symbol(name)


def cons(head: LispValue, tail: LispValue) -> Pair:
    return Pair(head, tail)


def make_list(*items: LispValue) -> LispValue:
    return list_from(items)


def make_vector(items: Iterable[LispValue] = ()) -> Vector:
    return Vector(items)


def make_object(payload: Any, tag: str | None = None) -> HostObject:
    return HostObject(payload, tag)


# -------------------------------
# Accessors
# -------------------------------
def integer_value(value: LispValue) -> int:
    assert is_integer(value), f"not an integer: {value!r}"
    return value


def float_value(value: LispValue) -> float:
    assert is_float(value), f"not a float: {value!r}"
    return value


def number_value(value: LispValue) -> int | float:
    assert is_number(value), f"not a number: {value!r}"
    return value


def boolean_value(value: LispValue) -> bool:
    assert is_boolean(value), f"not a boolean: {value!r}"
    return value


def string_value(value: LispValue) -> str:
    assert is_string(value), f"not a string: {value!r}"
    return value


def symbol_name(value: LispValue) -> str:
    assert is_symbol(value), f"not a symbol: {value!r}"
    return value.id


def car(value: LispValue) -> LispValue:
    assert is_pair(value), f"not a pair: {value!r}"
    return value.car


def cdr(value: LispValue) -> LispValue:
    assert is_pair(value), f"not a pair: {value!r}"
    return value.cdr


def vector_items(value: LispValue) -> list[LispValue]:
    """The live backing list of a vector; writes through it mutate the vector."""
    assert is_vector(value), f"not a vector: {value!r}"
    return value.items


def object_payload(value: LispValue) -> Any:
    assert is_object(value), f"not an object: {value!r}"
    return value.payload


def list_to_python(value: LispValue) -> list[LispValue]:
    assert is_list(value), f"not a proper list: {value!r}"
    return list(value)


# -------------------------------
# Equality
# -------------------------------
def is_eqv(a: LispValue, b: LispValue) -> bool:
    """Identity for heap values, value equality for atoms of the same kind."""
    if a is b:
        return True
    ka, kb = kind_of(a), kind_of(b)
    if ka is not kb:
        return False
    if ka in (ValueKind.INTEGER, ValueKind.FLOAT, ValueKind.STRING):
        return a == b
    return False


def is_equal(a: LispValue, b: LispValue) -> bool:
    """Structural equality; numbers of different kinds compare by value."""
    if a is b:
        return True
    if is_number(a) and is_number(b):
        return a == b
    ka, kb = kind_of(a), kind_of(b)
    if ka is not kb:
        return False
    if ka is ValueKind.PAIR:
        while isinstance(a, Pair) and isinstance(b, Pair):
            if not is_equal(a.car, b.car):
                return False
            a, b = a.cdr, b.cdr
        return is_equal(a, b)
    if ka is ValueKind.VECTOR:
        return len(a) == len(b) and all(is_equal(x, y) for x, y in zip(a, b))
    if ka is ValueKind.OBJECT:
        return a.payload is b.payload
    return is_eqv(a, b)


# -------------------------------
# Rendering
# -------------------------------
_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\t": "\\t", "\r": "\\r"}


def _quote_string(s: str) -> str:
    return '"' + "".join(_ESCAPES.get(c, c) for c in s) + '"'


def _format_float(x: float) -> str:
    if math.isnan(x):
        return "+nan.0"
    if math.isinf(x):
        return "+inf.0" if x > 0 else "-inf.0"
    return repr(x)


def to_string(value: LispValue, quote_strings: bool = True) -> str:
    """Canonical text for any value, used by diagnostics and the debugger."""
    with StringIO() as buffer:
        _write(buffer, value, quote_strings)
        return buffer.getvalue()


def display_string(value: LispValue) -> str:
    """Like to_string, but strings print without quotes."""
    return to_string(value, quote_strings=False)


def _write(buffer: StringIO, value: LispValue, quote_strings: bool) -> None:
    match kind_of(value):
        case ValueKind.NIL:
            buffer.write("nil")
        case ValueKind.BOOLEAN:
            buffer.write("#t" if value else "#f")
        case ValueKind.INTEGER:
            buffer.write(str(value))
        case ValueKind.FLOAT:
            buffer.write(_format_float(value))
        case ValueKind.STRING:
            buffer.write(_quote_string(value) if quote_strings else value)
        case ValueKind.SYMBOL:
            buffer.write(value.id)
        case ValueKind.PAIR:
            if (
                value.car is Symbol("quote")
                and isinstance(value.cdr, Pair)
                and value.cdr.cdr is Nil
            ):
                buffer.write("'")
                _write(buffer, value.cdr.car, quote_strings)
                return
            buffer.write("(")
            cell = value
            first = True
            while isinstance(cell, Pair):
                if not first:
                    buffer.write(" ")
                _write(buffer, cell.car, quote_strings)
                first = False
                cell = cell.cdr
            if cell is not Nil:
                buffer.write(" . ")
                _write(buffer, cell, quote_strings)
            buffer.write(")")
        case ValueKind.VECTOR:
            buffer.write("#(")
            for i, item in enumerate(value):
                if i:
                    buffer.write(" ")
                _write(buffer, item, quote_strings)
            buffer.write(")")
        case ValueKind.CLOSURE | ValueKind.PRIMITIVE | ValueKind.OBJECT:
            buffer.write(repr(value))
