"""Short-circuiting and/or. Only boolean false counts as false."""

from ember import EvaluatorFn
from ember import SExpression, LispValue
from ember.types.environment import Environment
from ember.values import is_true


def and_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> LispValue:
    """Value of the last operand, or #f at the first false one; #t when empty."""
    result: LispValue = True
    for expr in tail:
        result = evaluate_fn(expr, env)
        if not is_true(result):
            return False
    return result


def or_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> LispValue:
    """Value of the first true operand; #f when none is."""
    for expr in tail:
        result = evaluate_fn(expr, env)
        if is_true(result):
            return result
    return False
