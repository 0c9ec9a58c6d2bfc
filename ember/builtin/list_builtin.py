"""List primitives and the generic sequence functions.

`map`, `for-each`, `reduce`, `filter`, `remove`, `find` and `sort` accept
either lists or vectors; given a vector they defer to the matching vector
primitive.
"""
from __future__ import annotations

from ember import LispValue
from ember.builtin import vector_builtin
from ember.errors import EmberIndexError, EmberTypeError
from ember.evaluation.apply import apply_without_eval
from ember.registry import PrimitiveRegistry
from ember.types.environment import Environment
from ember.types.nil import Nil
from ember.types.pair import Pair, list_from
from ember.values import is_function, is_integer, is_list, is_pair, is_vector, to_string


def _list_arg(name: str, value: LispValue, what: str = "its argument") -> list[LispValue]:
    if not is_list(value):
        raise EmberTypeError(f"{name} needs a list as {what}, but got {to_string(value)}.")
    return list(value)


def _pair_arg(name: str, value: LispValue) -> Pair:
    if not is_pair(value):
        raise EmberTypeError(f"{name} needs a pair, but got {to_string(value)}.")
    return value


# -------------------------------
# Construction and access
# -------------------------------
def cons(env: Environment, args: list[LispValue]) -> Pair:
    return Pair(args[0], args[1])


def car(env: Environment, args: list[LispValue]) -> LispValue:
    """(car p): head of a pair; (car nil) is nil."""
    if args[0] is Nil:
        return Nil
    return _pair_arg("car", args[0]).car


def cdr(env: Environment, args: list[LispValue]) -> LispValue:
    """(cdr p): tail of a pair; (cdr nil) is nil."""
    if args[0] is Nil:
        return Nil
    return _pair_arg("cdr", args[0]).cdr


def set_car(env: Environment, args: list[LispValue]) -> LispValue:
    _pair_arg("set-car!", args[0]).car = args[1]
    return args[1]


def set_cdr(env: Environment, args: list[LispValue]) -> LispValue:
    _pair_arg("set-cdr!", args[0]).cdr = args[1]
    return args[1]


def make_list(env: Environment, args: list[LispValue]) -> LispValue:
    return list_from(args)


def length(env: Environment, args: list[LispValue]) -> int:
    if is_vector(args[0]):
        return len(args[0])
    return len(_list_arg("length", args[0]))


def append(env: Environment, args: list[LispValue]) -> LispValue:
    """(append l1 l2 ... last): copies every list but the last, which is shared."""
    if not args:
        return Nil
    items: list[LispValue] = []
    for i, lst in enumerate(args[:-1]):
        items.extend(_list_arg("append", lst, f"argument {i + 1}"))
    return list_from(items, args[-1])


def reverse(env: Environment, args: list[LispValue]) -> LispValue:
    return list_from(reversed(_list_arg("reverse", args[0])))


def nth(env: Environment, args: list[LispValue]) -> LispValue:
    """(nth seq k): zero-based element of a list or vector."""
    seq, k = args
    if is_vector(seq):
        return vector_builtin.vector_ref(env, [seq, k])
    items = _list_arg("nth", seq, "its first argument")
    if not is_integer(k):
        raise EmberTypeError(f"nth needs an integer index, but got {to_string(k)}.")
    if k < 0 or k >= len(items):
        raise EmberIndexError(f"nth needs an index between 0 and {len(items) - 1}, but got {k}.")
    return items[k]


def _ordinal(position: int):
    name = vector_builtin.ORDINALS[position]
    vector_accessor = vector_builtin.ordinal_accessor(position)

    def accessor(env: Environment, args: list[LispValue]) -> LispValue:
        if is_vector(args[0]):
            return vector_accessor(env, args)
        items = _list_arg(name, args[0])
        if len(items) <= position:
            raise EmberIndexError(
                f"{name} needs a list with length of at least {position + 1}, but got {len(items)}."
            )
        return items[position]

    return accessor


first = _ordinal(0)
second = _ordinal(1)
third = _ordinal(2)


def last_pair(env: Environment, args: list[LispValue]) -> LispValue:
    cell = _pair_arg("last-pair", args[0])
    while isinstance(cell.cdr, Pair):
        cell = cell.cdr
    return cell


# -------------------------------
# Generic sequence functions
# -------------------------------
def _function(name: str, f: LispValue) -> LispValue:
    if not is_function(f):
        raise EmberTypeError(f"{name} needs a function as its first argument, but got {to_string(f)}.")
    return f


def map_builtin(env: Environment, args: list[LispValue]) -> LispValue:
    """(map f seq...): lists map to a list, vectors to a vector."""
    if is_vector(args[1]):
        return vector_builtin.vector_map(env, args)
    f = _function("map", args[0])
    columns = [_list_arg("map", lst, "its other arguments") for lst in args[1:]]
    return list_from([apply_without_eval(f, row, env) for row in zip(*columns)])


def for_each(env: Environment, args: list[LispValue]) -> LispValue:
    if is_vector(args[1]):
        return vector_builtin.vector_for_each(env, args)
    f = _function("for-each", args[0])
    columns = [_list_arg("for-each", lst, "its other arguments") for lst in args[1:]]
    for row in zip(*columns):
        apply_without_eval(f, row, env)
    return Nil


def reduce(env: Environment, args: list[LispValue]) -> LispValue:
    """(reduce f initial seq), with the same rules as vector-reduce."""
    if is_vector(args[2]):
        return vector_builtin.vector_reduce(env, args)
    f = _function("reduce", args[0])
    items = _list_arg("reduce", args[2], "its third argument")
    if not items:
        return args[1]
    result = items[0]
    for item in items[1:]:
        result = apply_without_eval(f, [result, item], env)
    return result


def filter_builtin(env: Environment, args: list[LispValue]) -> LispValue:
    if is_vector(args[1]):
        return vector_builtin.vector_filter(env, args)
    f = _function("filter", args[0])
    items = _list_arg("filter", args[1], "its second argument")
    return list_from(
        [x for x in items if vector_builtin.predicate_result("filter", apply_without_eval(f, [x], env))]
    )


def remove(env: Environment, args: list[LispValue]) -> LispValue:
    if is_vector(args[1]):
        return vector_builtin.vector_remove(env, args)
    f = _function("remove", args[0])
    items = _list_arg("remove", args[1], "its second argument")
    return list_from(
        [x for x in items if not vector_builtin.predicate_result("remove", apply_without_eval(f, [x], env))]
    )


def find(env: Environment, args: list[LispValue]) -> LispValue:
    if is_vector(args[1]):
        return vector_builtin.vector_find(env, args)
    f = _function("find", args[0])
    for x in _list_arg("find", args[1], "its second argument"):
        if vector_builtin.predicate_result("find", apply_without_eval(f, [x], env)):
            return x
    return False


def sort(env: Environment, args: list[LispValue]) -> LispValue:
    """(sort seq less-than): a sorted copy, of the same sequence kind."""
    if is_vector(args[0]):
        return vector_builtin.vector_sort(env, args)
    items = _list_arg("sort", args[0], "its first argument")
    proc = args[1]
    if not is_function(proc):
        raise EmberTypeError(f"sort needs a function as its second argument, but got {to_string(proc)}.")
    return list_from(vector_builtin.merge_sort(items, proc, env))


def apply_builtin(env: Environment, args: list[LispValue]) -> LispValue:
    """(apply f a b ... lst): call f with the leading args followed by the elements of lst."""
    f = _function("apply", args[0])
    spread = _list_arg("apply", args[-1], "its last argument") if len(args) > 1 else []
    return apply_without_eval(f, list(args[1:-1]) + spread, env)


def register(registry: PrimitiveRegistry) -> None:
    registry.register_all(
        [
            ("cons", 2, cons),
            ("car", 1, car),
            ("cdr", 1, cdr),
            ("set-car!", 2, set_car),
            ("set-cdr!", 2, set_cdr),
            ("list", "*", make_list),
            ("length", 1, length),
            ("append", "*", append),
            ("reverse", 1, reverse),
            ("nth", 2, nth),
            ("first", 1, first),
            ("second", 1, second),
            ("third", 1, third),
            ("last-pair", 1, last_pair),
            ("map", ">=2", map_builtin),
            ("for-each", ">=2", for_each),
            ("reduce", 3, reduce),
            ("filter", 2, filter_builtin),
            ("remove", 2, remove),
            ("find", 2, find),
            ("sort", 2, sort),
            ("apply", ">=1", apply_builtin),
        ]
    )
