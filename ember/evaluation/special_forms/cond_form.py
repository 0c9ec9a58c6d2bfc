"""Special form: cond, the multi-branch conditional."""

from ember import SExpression, LispValue, EvaluatorFn
from ember.errors import EmberArityError, EmberSyntaxError
from ember.types.environment import Environment
from ember.types.nil import Nil
from ember.types.pair import Pair
from ember.types.symbol import Symbol
from ember.values import is_true

ELSE = Symbol("else")


def cond_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> LispValue:
    """(cond (test expr...)... [(else expr...)])

    The first clause whose test is true has its body evaluated; a clause with
    no body yields the test value. Nil when no clause matches.
    """
    for i, clause in enumerate(tail):
        if not isinstance(clause, Pair) or not clause.is_proper():
            raise EmberSyntaxError("cond clauses must be lists")
        test, *body = list(clause)
        if test is ELSE:
            if i != len(tail) - 1:
                raise EmberSyntaxError("else must be the last cond clause")
            if not body:
                raise EmberArityError("else clause requires at least one expression")
            value: LispValue = Nil
        else:
            value = evaluate_fn(test, env)
            if not is_true(value):
                continue
        for expr in body:
            value = evaluate_fn(expr, env)
        return value
    return Nil
