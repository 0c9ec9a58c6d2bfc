"""Application engine for Ember.

This module centralizes function application for the interpreter:
- `apply` evaluates operand forms left to right, then applies.
- `apply_without_eval` applies to an already evaluated argument list; it is
  what higher-order primitives use to call back into script functions.

Both check the callee's arity before anything else runs. A Primitive whose
check fails never sees its arguments; a Closure gets exactly one new frame,
a child of the frame it captured.
"""

from __future__ import annotations

from typing import Iterable

from ember import LispValue, SExpression, EvaluatorFn
from ember.errors import EmberTypeError
from ember.types.closure import Closure
from ember.types.environment import Environment
from ember.types.nil import Nil
from ember.types.primitive import Primitive


def evaluate_operands(
    forms: Iterable[SExpression], env: Environment, evaluate_fn: EvaluatorFn
) -> list[LispValue]:
    """Evaluate each form in order; a failure stops before the next one starts."""
    return [evaluate_fn(form, env) for form in forms]


def apply_closure(
    fn: Closure, args: list[LispValue], evaluate_fn: EvaluatorFn
) -> LispValue:
    """Bind args in a fresh frame under the closure's captured env and run the body."""
    fn.arity.check(fn.display_name, len(args))
    local_env = fn.extend_env(args)
    result: LispValue = Nil
    for form in fn.body:
        result = evaluate_fn(form, local_env)
    return result


def apply_primitive(
    fn: Primitive, args: list[LispValue], env: Environment
) -> LispValue:
    fn.arity.check(fn.name, len(args))
    result = fn.fn(env, args)
    return Nil if result is None else result


def apply_without_eval(
    fn: LispValue,
    args: Iterable[LispValue],
    env: Environment,
    evaluate_fn: EvaluatorFn | None = None,
) -> LispValue:
    """Apply `fn` to evaluated `args` (a Python sequence or a proper list)."""
    if evaluate_fn is None:
        from ember.evaluation.evaluator import evaluate as evaluate_fn
    args = list(args)
    if isinstance(fn, Primitive):
        if fn.special:
            raise EmberTypeError(f"Cannot apply special primitive {fn.name} to evaluated arguments")
        return apply_primitive(fn, args, env)
    if isinstance(fn, Closure):
        return apply_closure(fn, args, evaluate_fn)
    from ember.values import to_string
    raise EmberTypeError(f"Cannot apply non-function {to_string(fn)}")


def apply(
    fn: LispValue,
    arg_forms: Iterable[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn | None = None,
) -> LispValue:
    """Evaluate `arg_forms` in `env`, left to right, then apply `fn` to the results."""
    if evaluate_fn is None:
        from ember.evaluation.evaluator import evaluate as evaluate_fn
    if isinstance(fn, Primitive) and fn.special:
        forms = list(arg_forms)
        fn.arity.check(fn.name, len(forms))
        result = fn.fn(env, forms, evaluate_fn)
        return Nil if result is None else result
    if not isinstance(fn, (Primitive, Closure)):
        from ember.values import to_string
        raise EmberTypeError(f"Cannot apply non-function {to_string(fn)}")
    args = evaluate_operands(arg_forms, env, evaluate_fn)
    return apply_without_eval(fn, args, env, evaluate_fn)
