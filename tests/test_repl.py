import pytest

from ember import __version__
from ember.repl import create_arg_parser, main, needs_more_input


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for var in ["EMBER_TRACE", "EMBER_DEBUG_ON_ERROR", "EMBER_INTERACTIVE", "EMBER_DEBUG_PREFIX", "EMBER_RECURSION_LIMIT"]:
        monkeypatch.delenv(var, raising=False)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("(+ 1 2)", False),
        ("(+ 1", True),
        ("(define (f x)\n  (* x", True),
        ("#(1 2", True),
        ('(display "abc', True),
        ("#| open comment", True),
        ("42", False),
        ("", False),
    ],
)
def test_needs_more_input(text, expected):
    assert needs_more_input(text) is expected


def test_arg_parser_defaults():
    args = create_arg_parser().parse_args([])
    assert args.script is None
    assert args.trace is None
    assert args.debug_on_error is None


def test_version(capsys):
    with pytest.raises(SystemExit):
        main(["--version"])
    assert __version__ in capsys.readouterr().out


def test_run_script(tmp_path, capsys):
    script = tmp_path / "hello.lisp"
    script.write_text('(define (sq x) (* x x))\n(print "square" (sq 7))\n')
    assert main([str(script)]) == 0
    assert capsys.readouterr().out == "square 49\n"


def test_script_error_exit_code(tmp_path, capsys):
    script = tmp_path / "broken.lisp"
    script.write_text("(car 5)")
    assert main([str(script)]) == 1
    assert "car needs a pair" in capsys.readouterr().err


def test_missing_script(tmp_path, capsys):
    assert main([str(tmp_path / "absent.lisp")]) == 2
    assert "Cannot read" in capsys.readouterr().err


def test_interactive_session(monkeypatch, capsys):
    lines = iter(["(define x 4)", "(+ x", " 1)", "(car 1)"])

    def fake_input(prompt):
        try:
            return next(lines)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr("builtins.input", fake_input)
    assert main([]) == 0
    out = capsys.readouterr().out
    assert "\n5\n" in out
    assert "Error: car needs a pair" in out


def test_script_with_deep_recursion(tmp_path, capsys):
    script = tmp_path / "deep.lisp"
    script.write_text("(define (f n) (if (= n 0) 0 (+ 1 (f (- n 1)))))\n(print (f 200))\n")
    assert main([str(script)]) == 0
    assert capsys.readouterr().out == "200\n"


def test_runaway_recursion_exits_with_error(tmp_path, capsys):
    script = tmp_path / "runaway.lisp"
    script.write_text("(define (f n) (+ 1 (f n)))\n(f 0)\n")
    assert main([str(script)]) == 1
    assert "Maximum evaluation depth exceeded" in capsys.readouterr().err
