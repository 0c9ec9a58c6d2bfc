import io

import pytest

from ember.config import RuntimeConfig
from ember.debug import DebugController, ScriptedLineSource, signal_error
from ember.errors import EmberDomainError, EmberError, EmberTypeError
from ember.interpreter import Interpreter
from ember.types import Environment, Nil


# ------------------ break on error ------------------

def test_return_command_recovers_failed_evaluation(debug_interp):
    interp, _, output = debug_interp(":r 42", debug_on_error=True)
    assert interp.eval("(+ 1 (car 5))") == 43
    assert "ERROR!  car needs a pair" in output.getvalue()


def test_continue_lets_the_failure_propagate_once(debug_interp):
    interp, source, output = debug_interp(":c", debug_on_error=True)
    with pytest.raises(EmberTypeError):
        interp.eval("(+ 1 (* 2 (car 5)))")
    assert output.getvalue().count("ERROR!") == 1
    assert source.prompts == ["D> "]


def test_exhausted_input_acts_as_continue(debug_interp):
    interp, _, _ = debug_interp(debug_on_error=True)
    with pytest.raises(EmberTypeError):
        interp.eval("(car 5)")
    assert interp.debugger.paused_frame is None


def test_failed_return_expression_stays_in_the_loop(debug_interp):
    interp, _, output = debug_interp(":r (car 1)", ":r 7", debug_on_error=True)
    assert interp.eval("(list (car 5))") == interp.eval("'(7)")
    assert "Error in evaluation:" in output.getvalue()


def test_break_on_error_pauses_in_the_failing_frame(debug_interp):
    interp, _, output = debug_interp(":r (* x 10)", debug_on_error=True)
    interp.eval("(define (f x) (+ x (car x)))")
    assert interp.eval("(f 4)") == 44
    assert "<f> depth 1" in output.getvalue()


def test_non_interactive_interpreter_never_prompts():
    source = ScriptedLineSource([":r 1"])
    interp = Interpreter(
        RuntimeConfig(debug_on_error=True), line_source=source, output=io.StringIO(), interactive=False
    )
    with pytest.raises(EmberTypeError):
        interp.eval("(car 5)")
    assert source.prompts == []


def test_errors_at_the_prompt_do_not_reenter_the_debugger(debug_interp):
    interp, source, output = debug_interp("(car 5)", ":r 1", debug_on_error=True)
    assert interp.eval("(car 'x)") == 1
    text = output.getvalue()
    assert text.count("ERROR!") == 1
    assert "Error in evaluation: car needs a pair" in text


# ------------------ explicit entry and stepping ------------------

def test_debug_primitive_returns_override(debug_interp):
    interp, _, output = debug_interp(":r (* 5 2)")
    assert interp.eval("(+ 1 (debug))") == 11
    assert output.getvalue().startswith("Debugger\n<global> depth 0")


def test_debug_primitive_without_override_is_nil(debug_interp):
    interp, _, _ = debug_interp(":c")
    assert interp.eval("(debug)") is Nil


def test_expressions_at_the_prompt_see_the_paused_frame(debug_interp):
    interp, _, output = debug_interp("(* y 3)", ":c")
    interp.eval("(define (g y) (debug) y)")
    assert interp.eval("(g 4)") == 4
    assert "==> 12" in output.getvalue()


def test_single_step_pauses_before_next_evaluation(debug_interp):
    interp, source, output = debug_interp(":s", ":c")
    assert interp.eval("(progn (debug) (+ 1 2))") == 3
    assert ": (+ 1 2)" in output.getvalue()
    assert len(source.prompts) == 2
    assert not interp.debugger.single_step


def test_single_step_can_substitute_a_value(debug_interp):
    interp, _, _ = debug_interp(":s", ":r 100")
    assert interp.eval("(progn (debug) (+ 1 2))") == 100


def test_step_out_pauses_back_in_the_enclosing_frame(debug_interp):
    interp, source, output = debug_interp(":u", ":c")
    interp.eval("(define (f x) (debug) (* x 2))")
    assert interp.eval("(progn (f 3) (+ 1 2))") == 3
    text = output.getvalue()
    assert f"{interp.global_env.dump_header()}: (+ 1 2)" in text
    assert len(source.prompts) == 2
    assert interp.debugger.current_frame is None


def test_step_out_at_top_frame(debug_interp):
    interp, _, output = debug_interp(":u", ":c")
    interp.eval("(debug)")
    assert "Already at top frame." in output.getvalue()


# ------------------ commands ------------------

def test_toggle_commands(debug_interp):
    interp, _, _ = debug_interp(":t on", ":e on", ":c")
    interp.eval("(debug)")
    assert interp.debugger.trace
    assert interp.debugger.break_on_error


@pytest.mark.parametrize(
    "command,message",
    [
        (":t maybe", "on/off expected."),
        (":e", "Missing on/off."),
        (":f", "Missing frame number."),
        (":f x", "Bad frame number: 'x'."),
        (":f 5", "Frame number must be between 0 and 0"),
        (":z", "Unknown command: z"),
        (":", "Missing command"),
        (":r", "Missing value."),
    ],
)
def test_command_diagnostics(debug_interp, command, message):
    interp, _, output = debug_interp(command, ":c")
    interp.eval("(debug)")
    assert message in output.getvalue()


def test_frame_listing_commands(debug_interp):
    interp, _, output = debug_interp(":b", ":f 0", ":d", ":?", ":c")
    interp.eval("(define answer 42) (define (h n) (debug)) (h 1)")
    text = output.getvalue()
    assert "0: <h> depth 1, 1 binding(s)" in text
    assert "1: <global> depth 0" in text
    assert "  n => 1" in text
    assert "answer => 42" in text
    assert ":s        - single step" in text


def test_quit_command_exits(debug_interp):
    interp, _, _ = debug_interp(":q")
    with pytest.raises(SystemExit):
        interp.eval("(debug)")


def test_command_prefix_is_configurable():
    source = ScriptedLineSource(["/r 5"])
    config = RuntimeConfig(interactive=True, command_prefix="/")
    interp = Interpreter(config, line_source=source, output=io.StringIO())
    assert interp.eval("(debug)") == 5


# ------------------ trace ------------------

def test_trace_writes_entry_and_result(debug_interp):
    interp, _, output = debug_interp(trace=True)
    interp.eval("(+ 1 (* 2 3))")
    lines = output.getvalue().splitlines()
    assert lines[0] == "(+ 1 (* 2 3))"
    assert "  (* 2 3)" in lines
    assert "  => 6" in lines
    assert lines[-1] == "=> 7"


def test_debug_primitives_toggle_flags(debug_interp):
    interp, _, output = debug_interp()
    assert interp.eval("(debug-trace)") is False
    assert interp.eval("(debug-on-error #t)") is True
    assert interp.debugger.break_on_error
    with pytest.raises(EmberTypeError):
        interp.eval("(debug-trace 1)")
    interp.eval("(dump)")
    assert "<global> depth 0" in output.getvalue()


# ------------------ signal_error ------------------

def _checked(env, args):
    if args[0] < 0:
        return signal_error(f"negative input {args[0]}", env, EmberDomainError)
    return args[0]


def test_signal_error_raises_without_debugger():
    with pytest.raises(EmberError, match="boom"):
        signal_error("boom", Environment())


def test_signal_error_raises_when_not_breaking(interp):
    interp.register("checked", 1, _checked)
    with pytest.raises(EmberDomainError, match="negative input -1"):
        interp.eval("(checked -1)")


def test_signal_error_returns_recovery_value(debug_interp):
    interp, _, output = debug_interp(":r 0", debug_on_error=True)
    interp.register("checked", 1, _checked)
    assert interp.eval("(+ 1 (checked -5))") == 1
    assert output.getvalue().count("ERROR!") == 1


# ------------------ isolation ------------------

def test_interpreters_are_independent():
    a = Interpreter(RuntimeConfig(), output=io.StringIO())
    b = Interpreter(RuntimeConfig(), output=io.StringIO())
    a.eval("(define shared 1)")
    a.eval("(debug-trace #t)")
    assert not b.debugger.trace
    assert a.debugger is not b.debugger
    with pytest.raises(EmberError):
        b.lookup("shared")


def test_controller_defaults():
    controller = DebugController()
    assert not controller.watching
    assert not controller.interactive


def test_break_on_error_is_logged(debug_interp, caplog):
    interp, _, _ = debug_interp(":r 1", debug_on_error=True)
    with caplog.at_level("DEBUG", logger="ember.debug.controller"):
        interp.eval("(car 5)")
    assert "Break on error in frame global" in caplog.text


def test_runaway_recursion_breaks_into_the_debugger(debug_interp):
    # Pauses too close to the stack limit unwind and retry further out,
    # each retry possibly using up a line.
    interp, _, output = debug_interp(*[":r 0"] * 50, debug_on_error=True)
    interp.eval("(define (forever n) (+ 1 (forever n)))")
    assert isinstance(interp.eval("(forever 0)"), int)
    assert "ERROR!  Maximum evaluation depth exceeded" in output.getvalue()


def test_host_apply_breaks_on_error(debug_interp):
    interp, source, _ = debug_interp(":r 5", debug_on_error=True)
    assert interp.apply("car", [1]) == 5
    assert source.prompts == ["D> "]


def test_host_apply_raises_when_not_breaking(interp):
    with pytest.raises(EmberTypeError, match="car needs a pair"):
        interp.apply("car", [1])
