import pytest

from ember.errors import EmberIndexError, EmberTypeError
from ember.types import Nil
from ember.values import to_string


@pytest.mark.parametrize(
    "source,expected",
    [
        ("(cons 1 2)", "(1 . 2)"),
        ("(cons 1 nil)", "(1)"),
        ("(list 1 2 3)", "(1 2 3)"),
        ("(list)", "nil"),
        ("(car '(1 2))", "1"),
        ("(cdr '(1 2))", "(2)"),
        ("(car nil)", "nil"),
        ("(append '(1 2) '(3) '(4 5))", "(1 2 3 4 5)"),
        ("(append)", "nil"),
        ("(reverse '(1 2 3))", "(3 2 1)"),
        ("(length '(a b c))", "3"),
        ("(length nil)", "0"),
        ("(length #(1 2))", "2"),
        ("(nth '(a b c) 1)", "b"),
        ("(nth #(a b c) 2)", "c"),
        ("(first '(1 2 3))", "1"),
        ("(second '(1 2 3))", "2"),
        ("(third #(1 2 3))", "3"),
        ("(last-pair '(1 2 3))", "(3)"),
        ("(map (lambda (x) (* x x)) '(1 2 3))", "(1 4 9)"),
        ("(map + '(1 2 3) '(10 20))", "(11 22)"),
        ("(map (lambda (x) (* x x)) #(1 2 3))", "#(1 4 9)"),
        ("(reduce + 0 '(1 2 3 4))", "10"),
        ("(reduce + 0 nil)", "0"),
        ("(reduce + 0 #(5))", "5"),
        ("(filter (lambda (x) (> x 1)) '(1 2 3))", "(2 3)"),
        ("(remove (lambda (x) (> x 1)) '(1 2 3))", "(1)"),
        ("(find (lambda (x) (> x 1)) '(1 2 3))", "2"),
        ("(find (lambda (x) (> x 5)) '(1 2 3))", "#f"),
        ("(sort '(3 1 2) <)", "(1 2 3)"),
        ("(sort #(3 1 2) >)", "#(3 2 1)"),
        ("(apply + 1 2 '(3 4))", "10"),
        ("(apply list '())", "nil"),
    ],
)
def test_list_functions(interp, source, expected):
    assert to_string(interp.eval(source)) == expected


def test_set_car_is_visible_through_every_reference(interp):
    interp.eval("(define a '(1 2 3)) (define b a)")
    interp.eval("(set-car! a 99) (set-cdr! (cdr a) nil)")
    assert to_string(interp.lookup("b")) == "(99 2)"


def test_append_shares_the_last_list(interp):
    interp.eval("(define tail '(3 4)) (define joined (append '(1 2) tail))")
    interp.eval("(set-car! tail 'x)")
    assert to_string(interp.lookup("joined")) == "(1 2 x 4)"


def test_for_each_runs_for_effect(interp):
    interp.eval("(define total 0)")
    assert interp.eval("(for-each (lambda (x) (set! total (+ total x))) '(1 2 3))") is Nil
    assert interp.lookup("total") == 6


@pytest.mark.parametrize(
    "source,error",
    [
        ("(car 5)", EmberTypeError),
        ("(set-car! nil 1)", EmberTypeError),
        ("(length 5)", EmberTypeError),
        ("(nth '(1 2) 2)", EmberIndexError),
        ("(second '(1))", EmberIndexError),
        ("(map 5 '(1))", EmberTypeError),
        ("(filter (lambda (x) x) '(1 2))", EmberTypeError),
        ("(reverse '(1 . 2))", EmberTypeError),
    ],
)
def test_list_errors(interp, source, error):
    with pytest.raises(error):
        interp.eval(source)


@pytest.mark.parametrize(
    "source,expected",
    [
        ("(eq? 'a 'a)", True),
        ("(eq? '(1) '(1))", False),
        ("(equal? '(1 (2 #(3))) '(1 (2 #(3))))", True),
        ("(eqv? 1.5 1.5)", True),
        ("(eqv? 1 1.0)", False),
        ("(nil? nil)", True),
        ("(pair? nil)", False),
        ("(list? '(1 . 2))", False),
        ("(integer? 1.0)", False),
        ("(number? 1.0)", True),
        ("(boolean? nil)", False),
        ("(function? car)", True),
        ("(function? (lambda () 1))", True),
        ("(symbol? 'x)", True),
        ("(string? \"x\")", True),
        ("(object? 1)", False),
    ],
)
def test_equality_and_predicates(interp, source, expected):
    assert interp.eval(source) is expected


@pytest.mark.parametrize(
    "source,expected",
    [
        ("(symbol->string 'abc)", "abc"),
        ('(string-append "a" "b" "c")', "abc"),
        ("(number->string 2.5)", "2.5"),
    ],
)
def test_string_functions(interp, source, expected):
    assert interp.eval(source) == expected


def test_string_to_symbol_interns(interp):
    assert interp.eval('(eq? (string->symbol "k") \'k)') is True


def test_print_and_display_write_to_the_output(interp):
    interp.eval('(display "a" 1) (newline) (print "x" \'(1 "y"))')
    assert interp.debugger.output.getvalue() == 'a1\nx (1 y)\n'


def test_quit_raises_system_exit(interp):
    with pytest.raises(SystemExit) as info:
        interp.eval("(quit 3)")
    assert info.value.code == 3
