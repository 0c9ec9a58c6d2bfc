import math

import pytest
from hypothesis import HealthCheck, given, settings, strategies as st

from ember.errors import EmberArityError, EmberDivideByZero, EmberDomainError, EmberTypeError


@pytest.mark.parametrize(
    "source,expected",
    [
        ("(+ 1 2 3)", 6),
        ("(- 10 3 2)", 5),
        ("(* 2 3 4)", 24),
        ("(/ 12 3)", 4),
        ("(+ (* 2 3) (- 10 4))", 12),
        ("(/ (+ 20 10) (* 2 5))", 3),
        ("(+ 1 2.5 3)", 6.5),
        ("(* 1 2 3 4 5 6)", 720),
        ("(+ -1 5 -3)", 1),
        ("(- -10 -5)", -5),
        ("(- 7)", -7),
        ("(/ -12 3)", -4),
        ("(/ 7 2)", 3),
        ("(/ -7 2)", -3),
        ("(/ 7.0 2)", 3.5),
        ("(/ 9)", 9),
        ("(+)", 0),
        ("(*)", 1),
        ("(+ 1 (* 2 (+ 3 4) (- 10 6)))", 57),
        ("(quotient 17 5)", 3),
        ("(quotient -17 5)", -3),
        ("(remainder -17 5)", -2),
        ("(modulo -17 5)", 3),
    ],
)
def test_arithmetic(interp, source, expected):
    result = interp.eval(source)
    assert result == expected
    assert type(result) is type(expected)


@pytest.mark.parametrize(
    "source,expected",
    [
        ("(< 1 2 3)", True),
        ("(< 1 3 2)", False),
        ("(<= 1 1 2)", True),
        ("(> 3 2 1)", True),
        ("(>= 3 3 4)", False),
        ("(= 2 2.0)", True),
        ("(!= 1 2)", True),
        ("(not #f)", True),
        ("(not nil)", False),
        ("(not 0)", False),
    ],
)
def test_comparisons(interp, source, expected):
    assert interp.eval(source) is expected


@pytest.mark.parametrize(
    "source,error",
    [
        ("(/ 1 0)", EmberDivideByZero),
        ("(quotient 1 0)", EmberDivideByZero),
        ("(+ 1 \"two\")", EmberTypeError),
        ("(< 1 'a)", EmberTypeError),
        ("(-)", EmberArityError),
        ("(/)", EmberArityError),
        ("(quotient 1.5 2)", EmberTypeError),
    ],
)
def test_arithmetic_errors(interp, source, error):
    with pytest.raises(error):
        interp.eval(source)


HUGE = "1" + "0" * 400


@pytest.mark.parametrize(
    "source",
    [
        f"(+ 1.0 {HUGE})",
        f"(- {HUGE} 0.5)",
        f"(* 2.0 {HUGE})",
        f"(/ 1.0 {HUGE})",
        f"(/ {HUGE} 2.0)",
    ],
)
def test_float_overflow_is_a_domain_error(interp, source):
    with pytest.raises(EmberDomainError, match="out of range"):
        interp.eval(source)


def test_huge_integers_stay_exact(interp):
    assert interp.eval(f"(+ {HUGE} 1)") == 10**400 + 1


def test_divide_by_zero_is_a_domain_error(interp):
    with pytest.raises(EmberDomainError, match="Division by zero"):
        interp.eval("(/ 10 2 0)")


def test_failing_operand_stops_later_operands(interp):
    interp.eval("(define hits 0)")
    with pytest.raises(EmberTypeError):
        interp.eval("(+ 1 (car 5) (begin (set! hits 1) 2))")
    assert interp.lookup("hits") == 0


fixture_ok = settings(suppress_health_check=[HealthCheck.function_scoped_fixture])


@fixture_ok
@given(st.lists(st.integers(min_value=-10**6, max_value=10**6), max_size=20))
def test_sum_matches_python(interp, numbers):
    source = "(+ " + " ".join(str(n) for n in numbers) + ")"
    assert interp.eval(source) == sum(numbers)


@fixture_ok
@given(st.lists(st.integers(min_value=-100, max_value=100), min_size=1, max_size=8))
def test_product_matches_python(interp, numbers):
    source = "(* " + " ".join(str(n) for n in numbers) + ")"
    assert interp.eval(source) == math.prod(numbers)


@fixture_ok
@given(
    st.integers(min_value=-10**6, max_value=10**6),
    st.integers(min_value=-1000, max_value=1000).filter(lambda d: d != 0),
)
def test_integer_division_truncates_toward_zero(interp, n, d):
    q = interp.eval(f"(/ {n} {d})")
    assert q == int(n / d)
    assert interp.eval(f"(+ (* (quotient {n} {d}) {d}) (remainder {n} {d}))") == n
