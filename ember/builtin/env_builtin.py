"""Built-in functions for the Ember runtime environment.

This module defines core arithmetic, comparison, equality, type predicates,
string helpers and output primitives, and the table that registers them.
"""
from __future__ import annotations

import logging
import sys

from ember import LispValue
from ember.types.environment import Environment
from ember.types.nil import Nil
from ember.types.symbol import Symbol
from ember.errors import EmberDivideByZero, EmberDomainError, EmberTypeError
from ember.registry import PrimitiveRegistry
from ember.values import (
    display_string,
    is_boolean,
    is_closure,
    is_equal,
    is_eqv,
    is_float,
    is_function,
    is_integer,
    is_list,
    is_number,
    is_object,
    is_pair,
    is_string,
    is_symbol,
    is_true,
    to_string,
)

logger = logging.getLogger(__name__)


def _check_numbers(name: str, args: list[LispValue]) -> None:
    """Fail before any arithmetic happens if any operand is not a number."""
    for i, x in enumerate(args):
        if not is_number(x):
            raise EmberTypeError(
                f"{name} needs numbers, but argument {i + 1} is {to_string(x)}"
            )


def _overflow(name: str, e: OverflowError) -> EmberDomainError:
    return EmberDomainError(f"{name} result is out of range: {e}")


def _int_quotient(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


# -------------------------------
# Arithmetic
# -------------------------------
def add(env: Environment, args: list[LispValue]) -> LispValue:
    """Return the numeric sum of all arguments; 0 for none."""
    _check_numbers("+", args)
    result = 0
    try:
        for x in args:
            result += x
    except OverflowError as e:
        raise _overflow("+", e) from e
    return result


def sub(env: Environment, args: list[LispValue]) -> LispValue:
    """Subtract all subsequent numbers from the first; unary negation for one arg."""
    _check_numbers("-", args)
    if len(args) == 1:
        return -args[0]
    result = args[0]
    try:
        for x in args[1:]:
            result -= x
    except OverflowError as e:
        raise _overflow("-", e) from e
    return result


def mul(env: Environment, args: list[LispValue]) -> LispValue:
    """Return the product of all arguments; 1 for none."""
    _check_numbers("*", args)
    result = 1
    try:
        for x in args:
            result *= x
    except OverflowError as e:
        raise _overflow("*", e) from e
    return result


def div(env: Environment, args: list[LispValue]) -> LispValue:
    """Divide left-to-right.

    Integer operands use integer division truncating toward zero; once a
    float is involved the division is a float division. A single argument is
    returned unchanged.
    """
    _check_numbers("/", args)
    result = args[0]
    for x in args[1:]:
        if x == 0:
            raise EmberDivideByZero("Division by zero")
        if is_integer(result) and is_integer(x):
            result = _int_quotient(result, x)
        else:
            try:
                result = result / x
            except OverflowError as e:
                raise _overflow("/", e) from e
    return result


def quotient(env: Environment, args: list[LispValue]) -> LispValue:
    """(quotient n d): integer division truncating toward zero."""
    n, d = args
    if not is_integer(n) or not is_integer(d):
        raise EmberTypeError("quotient needs integer arguments")
    if d == 0:
        raise EmberDivideByZero("Division by zero")
    return _int_quotient(n, d)


def remainder(env: Environment, args: list[LispValue]) -> LispValue:
    """(remainder n d): sign follows the dividend."""
    n, d = args
    if not is_integer(n) or not is_integer(d):
        raise EmberTypeError("remainder needs integer arguments")
    if d == 0:
        raise EmberDivideByZero("Remainder by zero")
    return n - d * _int_quotient(n, d)


def modulo(env: Environment, args: list[LispValue]) -> LispValue:
    """(modulo n d): sign follows the divisor."""
    n, d = args
    if not is_integer(n) or not is_integer(d):
        raise EmberTypeError("modulo needs integer arguments")
    if d == 0:
        raise EmberDivideByZero("Modulo by zero")
    return n % d


# -------------------------------
# Comparison
# -------------------------------
def _chain(name: str, args: list[LispValue], test) -> bool:
    _check_numbers(name, args)
    return all(test(a, b) for a, b in zip(args, args[1:]))


def num_eq(env: Environment, args: list[LispValue]) -> bool:
    """Chainable numeric equality."""
    return _chain("=", args, lambda a, b: a == b)


def num_ne(env: Environment, args: list[LispValue]) -> bool:
    return not num_eq(env, args)


def lt(env: Environment, args: list[LispValue]) -> bool:
    """Chainable less-than: #t if a0 < a1 < a2 ... holds for all pairs."""
    return _chain("<", args, lambda a, b: a < b)


def lte(env: Environment, args: list[LispValue]) -> bool:
    return _chain("<=", args, lambda a, b: a <= b)


def gt(env: Environment, args: list[LispValue]) -> bool:
    return _chain(">", args, lambda a, b: a > b)


def gte(env: Environment, args: list[LispValue]) -> bool:
    return _chain(">=", args, lambda a, b: a >= b)


def logical_not(env: Environment, args: list[LispValue]) -> bool:
    """Logical NOT: #t only for #f."""
    return not is_true(args[0])


# -------------------------------
# Equality and predicates
# -------------------------------
def eq(env: Environment, args: list[LispValue]) -> bool:
    return args[0] is args[1] or (is_eqv(args[0], args[1]) and not is_string(args[0]))


def eqv(env: Environment, args: list[LispValue]) -> bool:
    return is_eqv(args[0], args[1])


def equal(env: Environment, args: list[LispValue]) -> bool:
    return is_equal(args[0], args[1])


def _predicate(test):
    def check(env: Environment, args: list[LispValue]) -> bool:
        return bool(test(args[0]))
    check.__doc__ = test.__doc__
    return check


# -------------------------------
# Strings and symbols
# -------------------------------
def symbol_to_string(env: Environment, args: list[LispValue]) -> str:
    """(symbol->string x) -> the name of symbol x"""
    x = args[0]
    if not is_symbol(x):
        raise EmberTypeError(f"symbol->string needs a symbol, but got {to_string(x)}")
    return x.id


def string_to_symbol(env: Environment, args: list[LispValue]) -> Symbol:
    """(string->symbol x) -> the interned symbol named x"""
    x = args[0]
    if not is_string(x):
        raise EmberTypeError(f"string->symbol needs a string, but got {to_string(x)}")
    return Symbol(x)


def string_append(env: Environment, args: list[LispValue]) -> str:
    for x in args:
        if not is_string(x):
            raise EmberTypeError(f"string-append needs strings, but got {to_string(x)}")
    return "".join(args)


def number_to_string(env: Environment, args: list[LispValue]) -> str:
    x = args[0]
    if not is_number(x):
        raise EmberTypeError(f"number->string needs a number, but got {to_string(x)}")
    return to_string(x)


def to_string_builtin(env: Environment, args: list[LispValue]) -> str:
    return display_string(args[0])


# -------------------------------
# Output
# -------------------------------
def output_stream(env: Environment):
    """The debugger's output stream when one is installed, else stdout."""
    ctx = env.context
    if ctx is not None and ctx.debugger is not None and ctx.debugger.output is not None:
        return ctx.debugger.output
    return sys.stdout


def display(env: Environment, args: list[LispValue]) -> LispValue:
    """Write the display form of each argument with no newline."""
    output_stream(env).write("".join(display_string(a) for a in args))
    return Nil


def print_builtin(env: Environment, args: list[LispValue]) -> LispValue:
    """Print space-separated display forms followed by newline; returns Nil."""
    print(" ".join(display_string(a) for a in args), file=output_stream(env))
    return Nil


def newline(env: Environment, args: list[LispValue]) -> LispValue:
    output_stream(env).write("\n")
    return Nil


def quit_builtin(env: Environment, args: list[LispValue]) -> LispValue:
    """(quit [code]) ends the process."""
    code = args[0] if args else 0
    if not is_integer(code):
        raise EmberTypeError(f"quit needs an integer exit code, but got {to_string(code)}")
    logger.debug("quit called with code %d", code)
    raise SystemExit(code)


def register(registry: PrimitiveRegistry) -> None:
    """Register all builtin functions into the registry's global frame."""
    registry.register_all(
        [
            ("+", "*", add),
            ("-", ">=1", sub),
            ("*", "*", mul),
            ("/", ">=1", div),
            ("quotient", 2, quotient),
            ("remainder", 2, remainder),
            ("modulo", 2, modulo),
            ("%", 2, modulo),
            ("=", ">=1", num_eq),
            ("==", ">=1", num_eq),
            ("!=", ">=1", num_ne),
            ("/=", ">=1", num_ne),
            ("<", ">=1", lt),
            ("<=", ">=1", lte),
            (">", ">=1", gt),
            (">=", ">=1", gte),
            ("not", 1, logical_not),
            ("eq?", 2, eq),
            ("eqv?", 2, eqv),
            ("equal?", 2, equal),
            ("nil?", 1, _predicate(lambda x: x is Nil)),
            ("null?", 1, _predicate(lambda x: x is Nil)),
            ("boolean?", 1, _predicate(is_boolean)),
            ("integer?", 1, _predicate(is_integer)),
            ("float?", 1, _predicate(is_float)),
            ("number?", 1, _predicate(is_number)),
            ("string?", 1, _predicate(is_string)),
            ("symbol?", 1, _predicate(is_symbol)),
            ("pair?", 1, _predicate(is_pair)),
            ("list?", 1, _predicate(is_list)),
            ("function?", 1, _predicate(is_function)),
            ("procedure?", 1, _predicate(is_function)),
            ("closure?", 1, _predicate(is_closure)),
            ("object?", 1, _predicate(is_object)),
            ("symbol->string", 1, symbol_to_string),
            ("string->symbol", 1, string_to_symbol),
            ("string-append", "*", string_append),
            ("number->string", 1, number_to_string),
            ("->string", 1, to_string_builtin),
            ("display", ">=1", display),
            ("print", "*", print_builtin),
            ("newline", 0, newline),
            ("quit", "0|1", quit_builtin),
        ]
    )
