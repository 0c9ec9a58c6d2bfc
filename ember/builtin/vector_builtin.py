"""Vector primitives.

Vectors are fixed length; growing one produces a new Vector. Index checks
fail with EmberIndexError, malformed ranges and growth requests that do not
grow fail with EmberDomainError. The generic list functions in
`list_builtin` hand vectors over to the functions here.
"""
from __future__ import annotations

from typing import Callable

from ember import LispValue
from ember.errors import EmberDomainError, EmberIndexError, EmberTypeError
from ember.evaluation.apply import apply_without_eval
from ember.registry import PrimitiveRegistry
from ember.types.environment import Environment
from ember.types.nil import Nil
from ember.types.pair import list_from
from ember.types.vector import Vector
from ember.values import is_boolean, is_function, is_integer, is_list, is_vector, to_string, vector_items

ORDINALS = (
    "first",
    "second",
    "third",
    "fourth",
    "fifth",
    "sixth",
    "seventh",
    "eighth",
    "ninth",
    "tenth",
)


# -------------------------------
# Argument checks
# -------------------------------
def vector_arg(name: str, value: LispValue, what: str = "its argument") -> list[LispValue]:
    if not is_vector(value):
        raise EmberTypeError(f"{name} needs a vector as {what}, but got {to_string(value)}.")
    return vector_items(value)


def integer_arg(name: str, value: LispValue, what: str) -> int:
    if not is_integer(value):
        raise EmberTypeError(f"{name} needs an integer as {what}, but got {to_string(value)}.")
    return value


def function_arg(name: str, value: LispValue, what: str = "its first argument") -> LispValue:
    if not is_function(value):
        raise EmberTypeError(f"{name} needs a function as {what}, but got {to_string(value)}.")
    return value


def predicate_result(name: str, value: LispValue) -> bool:
    """Predicates handed to filter/remove/find have to answer with a boolean."""
    if not is_boolean(value):
        raise EmberTypeError(
            f"{name} needs a predicate function as its first argument, but it returned {to_string(value)}."
        )
    return value


def _check_range(name: str, values: list[LispValue], start: int, end: int) -> None:
    if start < 0 or start > len(values):
        raise EmberIndexError(
            f"{name} starting index is out of bounds (0-{len(values)}), got {start}."
        )
    if end < start:
        raise EmberDomainError(
            f"{name} ending index {end} is before the starting index {start}."
        )
    if end > len(values):
        raise EmberIndexError(
            f"{name} ending index is out of bounds ({start}-{len(values)}), got {end}."
        )


def _range_args(name: str, args: list[LispValue]) -> tuple[list[LispValue], int, int]:
    values = vector_arg(name, args[0], "its first argument")
    start = integer_arg(name, args[1], "its starting index")
    end = integer_arg(name, args[2], "its ending index")
    _check_range(name, values, start, end)
    return values, start, end


def merge_sort(values: list[LispValue], proc: LispValue, env: Environment) -> list[LispValue]:
    """Stable merge sort; `proc` is a less-than comparator called back through apply."""
    if len(values) <= 1:
        return list(values)
    middle = len(values) // 2
    left = merge_sort(values[:middle], proc, env)
    right = merge_sort(values[middle:], proc, env)

    merged: list[LispValue] = []
    i = j = 0
    while i < len(left) and j < len(right):
        # take from the right only when it is strictly less, keeping equal elements in order
        if apply_without_eval(proc, [right[j], left[i]], env) is not False:
            merged.append(right[j])
            j += 1
        else:
            merged.append(left[i])
            i += 1
    merged.extend(left[i:])
    merged.extend(right[j:])
    return merged


# -------------------------------
# Construction
# -------------------------------
def make_vector(env: Environment, args: list[LispValue]) -> Vector:
    """(make-vector k [fill])"""
    size = integer_arg("make-vector", args[0], "its first argument")
    if size < 0:
        raise EmberDomainError(f"make-vector needs a non-negative size, but got {size}.")
    fill = args[1] if len(args) == 2 else Nil
    return Vector([fill] * size)


def vector(env: Environment, args: list[LispValue]) -> Vector:
    return Vector(args)


def vector_copy(env: Environment, args: list[LispValue]) -> Vector:
    return Vector(vector_arg("vector-copy", args[0]))


def list_to_vector(env: Environment, args: list[LispValue]) -> Vector:
    lst = args[0]
    if not is_list(lst):
        raise EmberTypeError(f"list->vector needs a list as its argument, but got {to_string(lst)}.")
    return Vector(list(lst))


def vector_to_list(env: Environment, args: list[LispValue]) -> LispValue:
    return list_from(vector_arg("vector->list", args[0]))


def make_initialized_vector(env: Environment, args: list[LispValue]) -> Vector:
    """(make-initialized-vector k f): element i is (f i)."""
    size = integer_arg("make-initialized-vector", args[0], "its first argument")
    f = function_arg("make-initialized-vector", args[1], "its second argument")
    return Vector([apply_without_eval(f, [i], env) for i in range(size)])


def vector_grow(env: Environment, args: list[LispValue]) -> Vector:
    """(vector-grow v k): a new vector of size k starting with the elements of v."""
    values = vector_arg("vector-grow", args[0], "its first argument")
    size = integer_arg("vector-grow", args[1], "its second argument")
    if size <= len(values):
        raise EmberDomainError(
            f"vector-grow needs a new size that is larger than the size of its vector argument ({len(values)}), but got {size}."
        )
    return Vector(values + [Nil] * (size - len(values)))


# -------------------------------
# Higher-order functions
# -------------------------------
def _collections(name: str, args: list[LispValue]) -> list[list[LispValue]]:
    return [vector_arg(name, v, "its other arguments") for v in args[1:]]


def vector_map(env: Environment, args: list[LispValue]) -> Vector:
    """(vector-map f v...): f applied across the vectors, up to the shortest."""
    f = function_arg("vector-map", args[0])
    columns = _collections("vector-map", args)
    return Vector([apply_without_eval(f, row, env) for row in zip(*columns)])


def vector_for_each(env: Environment, args: list[LispValue]) -> LispValue:
    f = function_arg("vector-for-each", args[0])
    for row in zip(*_collections("vector-for-each", args)):
        apply_without_eval(f, row, env)
    return Nil


def vector_reduce(env: Environment, args: list[LispValue]) -> LispValue:
    """(vector-reduce f initial v)

    `initial` is only used for an empty vector; a single element is returned
    as is, otherwise f folds left starting from the first element.
    """
    f = function_arg("vector-reduce", args[0])
    values = vector_arg("vector-reduce", args[2], "its third argument")
    if not values:
        return args[1]
    result = values[0]
    for value in values[1:]:
        result = apply_without_eval(f, [result, value], env)
    return result


def vector_filter(env: Environment, args: list[LispValue]) -> Vector:
    f = function_arg("vector-filter", args[0])
    values = vector_arg("vector-filter", args[1], "its second argument")
    return Vector(
        [v for v in values if predicate_result("vector-filter", apply_without_eval(f, [v], env))]
    )


def vector_remove(env: Environment, args: list[LispValue]) -> Vector:
    f = function_arg("vector-remove", args[0])
    values = vector_arg("vector-remove", args[1], "its second argument")
    return Vector(
        [v for v in values if not predicate_result("vector-remove", apply_without_eval(f, [v], env))]
    )


def vector_find(env: Environment, args: list[LispValue]) -> LispValue:
    """(vector-find pred v): the first element satisfying pred, or #f."""
    f = function_arg("vector-find", args[0])
    for value in vector_arg("vector-find", args[1], "its second argument"):
        if predicate_result("vector-find", apply_without_eval(f, [value], env)):
            return value
    return False


def vector_binary_search(env: Environment, args: list[LispValue]) -> LispValue:
    """(vector-binary-search v key compare [default])

    The vector must already be ordered for `compare`, which is called as
    (compare key element) and answers negative, zero or positive.
    """
    values = vector_arg("vector-binary-search", args[0], "its first argument")
    key = args[1]
    compare = function_arg("vector-binary-search", args[2], "its third argument")
    default = args[3] if len(args) == 4 else False

    low, high = 0, len(values) - 1
    while low <= high:
        middle = (low + high) // 2
        order = apply_without_eval(compare, [key, values[middle]], env)
        if not is_integer(order):
            raise EmberTypeError(
                f"vector-binary-search needs its compare function to return an integer, but got {to_string(order)}."
            )
        if order == 0:
            return values[middle]
        if order < 0:
            high = middle - 1
        else:
            low = middle + 1
    return default


def vector_sort(env: Environment, args: list[LispValue]) -> Vector:
    values = vector_arg("vector-sort", args[0], "its first argument")
    proc = function_arg("vector-sort", args[1], "its second argument")
    return Vector(merge_sort(values, proc, env))


def vector_sort_in_place(env: Environment, args: list[LispValue]) -> Vector:
    values = vector_arg("vector-sort!", args[0], "its first argument")
    proc = function_arg("vector-sort!", args[1], "its second argument")
    values[:] = merge_sort(values, proc, env)
    return args[0]


# -------------------------------
# Access
# -------------------------------
def vector_p(env: Environment, args: list[LispValue]) -> bool:
    return is_vector(args[0])


def vector_length(env: Environment, args: list[LispValue]) -> int:
    return len(vector_arg("vector-length", args[0]))


def _index(name: str, values: list[LispValue], k: LispValue) -> int:
    index = integer_arg(name, k, "its second argument")
    if index < 0 or index >= len(values):
        raise EmberIndexError(
            f"{name} needs an index between 0 and {len(values) - 1}, but got {index}."
        )
    return index


def vector_ref(env: Environment, args: list[LispValue]) -> LispValue:
    values = vector_arg("vector-ref", args[0], "its first argument")
    return values[_index("vector-ref", values, args[1])]


def vector_set(env: Environment, args: list[LispValue]) -> Vector:
    """(vector-set! v k x): store x at index k, returning v."""
    values = vector_arg("vector-set!", args[0], "its first argument")
    values[_index("vector-set!", values, args[1])] = args[2]
    return args[0]


def ordinal_accessor(position: int) -> Callable[[Environment, list[LispValue]], LispValue]:
    name = f"vector-{ORDINALS[position]}"

    def accessor(env: Environment, args: list[LispValue]) -> LispValue:
        values = vector_arg(name, args[0])
        if len(values) <= position:
            raise EmberIndexError(
                f"{name} needs a vector with length of at least {position + 1}, but got {len(values)}."
            )
        return values[position]

    accessor.__name__ = name.replace("-", "_")
    return accessor


# -------------------------------
# Slices and mutation
# -------------------------------
def subvector(env: Environment, args: list[LispValue]) -> Vector:
    """(subvector v start end): the elements in [start, end) as a new vector."""
    values, start, end = _range_args("subvector", args)
    return Vector(values[start:end])


def vector_head(env: Environment, args: list[LispValue]) -> Vector:
    values = vector_arg("vector-head", args[0], "its first argument")
    end = integer_arg("vector-head", args[1], "its ending index")
    _check_range("vector-head", values, 0, end)
    return Vector(values[:end])


def vector_tail(env: Environment, args: list[LispValue]) -> Vector:
    values = vector_arg("vector-tail", args[0], "its first argument")
    start = integer_arg("vector-tail", args[1], "its starting index")
    _check_range("vector-tail", values, start, len(values))
    return Vector(values[start:])


def vector_fill(env: Environment, args: list[LispValue]) -> Vector:
    values = vector_arg("vector-fill!", args[0], "its first argument")
    values[:] = [args[1]] * len(values)
    return args[0]


def subvector_fill(env: Environment, args: list[LispValue]) -> Vector:
    """(subvector-fill! v start end x)"""
    values, start, end = _range_args("subvector-fill!", args)
    values[start:end] = [args[3]] * (end - start)
    return args[0]


def _move_args(name: str, args: list[LispValue]) -> tuple[list[LispValue], int, int, list[LispValue], int]:
    values, start, end = _range_args(name, args)
    target = vector_arg(name, args[3], "its second vector argument")
    at = integer_arg(name, args[4], "its second starting index")
    if at < 0 or at > len(target):
        raise EmberIndexError(
            f"{name} destination index is out of bounds (0-{len(target)}), got {at}."
        )
    if end - start > len(target) - at:
        raise EmberIndexError(
            f"{name} source subvector is longer than the available space in the destination ({len(target) - at}), got {end - start}."
        )
    return values, start, end, target, at


def subvector_move_left(env: Environment, args: list[LispValue]) -> Vector:
    """(subvector-move-left! v1 start end v2 at): copy lowest index first."""
    values, start, end, target, at = _move_args("subvector-move-left!", args)
    for offset in range(end - start):
        target[at + offset] = values[start + offset]
    return args[3]


def subvector_move_right(env: Environment, args: list[LispValue]) -> Vector:
    """(subvector-move-right! v1 start end v2 at): copy highest index first."""
    values, start, end, target, at = _move_args("subvector-move-right!", args)
    for offset in reversed(range(end - start)):
        target[at + offset] = values[start + offset]
    return args[3]


def register(registry: PrimitiveRegistry) -> None:
    registry.register_all(
        [
            ("make-vector", "1|2", make_vector),
            ("vector", "*", vector),
            ("vector-copy", 1, vector_copy),
            ("list->vector", 1, list_to_vector),
            ("vector->list", 1, vector_to_list),
            ("make-initialized-vector", 2, make_initialized_vector),
            ("vector-grow", 2, vector_grow),
            ("vector-map", ">=2", vector_map),
            ("vector-for-each", ">=2", vector_for_each),
            ("vector-reduce", 3, vector_reduce),
            ("vector-filter", 2, vector_filter),
            ("vector-remove", 2, vector_remove),
            ("vector?", 1, vector_p),
            ("vector-length", 1, vector_length),
            ("vector-ref", 2, vector_ref),
            ("vector-set!", 3, vector_set),
            ("vector-binary-search", "3|4", vector_binary_search),
            ("vector-find", 2, vector_find),
            ("subvector", 3, subvector),
            ("vector-head", 2, vector_head),
            ("vector-tail", 2, vector_tail),
            ("vector-fill!", 2, vector_fill),
            ("subvector-fill!", 4, subvector_fill),
            ("subvector-move-left!", 5, subvector_move_left),
            ("subvector-move-right!", 5, subvector_move_right),
            ("vector-sort", 2, vector_sort),
            ("vector-sort!", 2, vector_sort_in_place),
        ]
    )
    registry.register_all(
        (f"vector-{ordinal}", 1, ordinal_accessor(i)) for i, ordinal in enumerate(ORDINALS)
    )
