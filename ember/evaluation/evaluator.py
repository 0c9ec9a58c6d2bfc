"""Core evaluator for the Ember interpreter.

`evaluate` is the public entry point: it wraps the plain dispatch in
`evaluate0` with the debug controller's hooks whenever the controller is
watching (tracing, stepping, or breaking on errors). There is no tail-call
elimination; every nested application uses one Python stack frame.
"""

from __future__ import annotations

from ember import SExpression, LispValue
from ember.errors import EmberError, EmberRecursionError, EmberSyntaxError
from ember.types.environment import Environment
from ember.types.nil import Nil
from ember.types.pair import Pair
from ember.types.symbol import Symbol
from ember.evaluation.apply import apply
from ember.evaluation.special_forms import SPECIAL_FORMS
from ember.debug.controller import UNSET


def operand_list(rest: LispValue) -> list[SExpression]:
    """The operand forms of a combination; the chain must be a proper list."""
    if rest is Nil:
        return []
    if not isinstance(rest, Pair) or not rest.is_proper():
        raise EmberSyntaxError("Combination must be a proper list")
    return list(rest)


def evaluate(expr: SExpression, env: Environment) -> LispValue:
    """
    Evaluate `expr` in `env`, letting the debug controller observe it.
    """
    ctx = env.context
    debugger = ctx.debugger if ctx is not None else None
    if debugger is None or not debugger.watching:
        return evaluate0(expr, env)

    debugger.depth += 1
    try:
        substitute = debugger.before_eval(expr, env)
        if substitute is not UNSET:
            return substitute
        try:
            result = evaluate0(expr, env)
        except EmberError as err:
            result = debugger.intercept(err, env)
        debugger.after_eval(expr, result)
        return result
    finally:
        debugger.depth -= 1


def evaluate0(expr: SExpression, env: Environment) -> LispValue:
    """
    Core evaluator: one dispatch step keyed on the kind of `expr`.
    """
    match expr:
        case Symbol():
            return env.lookup(expr)

        case Pair(car=head, cdr=rest):
            try:
                # --- Special forms handling ---
                if isinstance(head, Symbol):
                    form = SPECIAL_FORMS.get(head)
                    if form is not None:
                        return form(operand_list(rest), env, evaluate)

                fn = evaluate(head, env)
                return apply(fn, operand_list(rest), env, evaluate)
            except RecursionError as e:
                raise EmberRecursionError("Maximum evaluation depth exceeded") from e

    # --- Atoms return as-is ---
    return expr
