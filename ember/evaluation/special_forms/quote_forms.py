from ember import SExpression, LispValue, EvaluatorFn
from ember.errors import EmberArityError, EmberTypeError, EmberSyntaxError
from ember.types.environment import Environment
from ember.types.nil import Nil
from ember.types.pair import Pair
from ember.types.symbol import Symbol
from ember.types.vector import Vector

QUASIQUOTE = Symbol("quasiquote")
UNQUOTE = Symbol("unquote")
UNQUOTE_SPLICING = Symbol("unquote-splicing")


def _tagged(expr: SExpression, tag: Symbol) -> bool:
    return (
        isinstance(expr, Pair)
        and expr.car is tag
        and isinstance(expr.cdr, Pair)
        and expr.cdr.cdr is Nil
    )


def eval_quasiquote(
    evaluate_fn: EvaluatorFn,
    expr: SExpression,
    env: Environment,
    depth: int = 1,
) -> SExpression:
    """Build the template `expr`, evaluating unquoted parts at nesting depth 1."""
    if isinstance(expr, Vector):
        spliced = eval_quasiquote(evaluate_fn, _vector_as_list(expr), env, depth)
        return Vector(spliced)
    if not isinstance(expr, Pair):
        return expr

    if _tagged(expr, UNQUOTE):
        if depth == 1:
            return evaluate_fn(expr.cdr.car, env)
        return Pair(UNQUOTE, Pair(eval_quasiquote(evaluate_fn, expr.cdr.car, env, depth - 1), Nil))
    if _tagged(expr, QUASIQUOTE):
        return Pair(QUASIQUOTE, Pair(eval_quasiquote(evaluate_fn, expr.cdr.car, env, depth + 1), Nil))

    items: list[LispValue] = []
    cell: SExpression = expr
    while isinstance(cell, Pair):
        if _tagged(cell, UNQUOTE):
            # `(a . ,b) reads as (a unquote b): the unquote is the tail
            break
        item = cell.car
        if _tagged(item, UNQUOTE_SPLICING) and depth == 1:
            spliced_val = evaluate_fn(item.cdr.car, env)
            if spliced_val is not Nil and not (isinstance(spliced_val, Pair) and spliced_val.is_proper()):
                raise EmberTypeError("unquote-splicing must produce a list")
            items.extend(spliced_val)
        else:
            items.append(eval_quasiquote(evaluate_fn, item, env, depth))
        cell = cell.cdr

    result = eval_quasiquote(evaluate_fn, cell, env, depth)
    for item in reversed(items):
        result = Pair(item, result)
    return result


def _vector_as_list(vec: Vector) -> SExpression:
    result: SExpression = Nil
    for item in reversed(vec.items):
        result = Pair(item, result)
    return result


def quote_form(
    tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn
) -> LispValue:
    if len(tail) != 1:
        raise EmberArityError("quote expects exactly 1 argument")
    return tail[0]


def quasiquote_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> LispValue:
    if len(tail) != 1:
        raise EmberArityError("quasiquote expects exactly 1 argument")
    return eval_quasiquote(evaluate_fn, tail[0], env)


def unquote_form(
    tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn
) -> LispValue:
    raise EmberSyntaxError("unquote not valid outside of quasiquote")


def unquote_splice_form(
    tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn
) -> LispValue:
    raise EmberSyntaxError("unquote-splicing not valid outside of quasiquote")
