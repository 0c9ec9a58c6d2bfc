"""Script access to the interpreter's debug controller."""
from __future__ import annotations

from ember import LispValue
from ember.builtin.env_builtin import output_stream
from ember.debug.controller import DebugController, debugger_of
from ember.errors import EmberError, EmberTypeError
from ember.registry import PrimitiveRegistry
from ember.types.environment import Environment
from ember.values import is_boolean, to_string


def _debugger(name: str, env: Environment) -> DebugController:
    debugger = debugger_of(env)
    if debugger is None:
        raise EmberError(f"{name} needs an interpreter with a debugger")
    return debugger


def _flag(name: str, args: list[LispValue]) -> bool:
    if not is_boolean(args[0]):
        raise EmberTypeError(f"{name} needs a boolean, but got {to_string(args[0])}")
    return args[0]


def debug_trace(env: Environment, args: list[LispValue]) -> bool:
    """(debug-trace [flag]) -> whether evaluations are traced"""
    debugger = _debugger("debug-trace", env)
    if args:
        debugger.trace = _flag("debug-trace", args)
    return debugger.trace


def debug_on_error(env: Environment, args: list[LispValue]) -> bool:
    """(debug-on-error [flag]) -> whether failures enter the debugger"""
    debugger = _debugger("debug-on-error", env)
    if args:
        debugger.break_on_error = _flag("debug-on-error", args)
    return debugger.break_on_error


def debug(env: Environment, args: list[LispValue]) -> LispValue:
    """(debug) pauses in the calling frame; evaluates to the :r value, or nil."""
    return _debugger("debug", env).enter(env)


def dump(env: Environment, args: list[LispValue]) -> LispValue:
    print(env.dump(), file=output_stream(env))


def register(registry: PrimitiveRegistry) -> None:
    registry.register_all(
        [
            ("debug-trace", "0|1", debug_trace),
            ("debug-on-error", "0|1", debug_on_error),
            ("debug", 0, debug),
            ("dump", 0, dump),
        ]
    )
