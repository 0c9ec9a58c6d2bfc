from ember.debug.controller import DebugController, UNSET, debugger_of, signal_error
from ember.debug.line_source import ConsoleLineSource, LineSource, ScriptedLineSource

__all__ = [
    "DebugController",
    "UNSET",
    "debugger_of",
    "signal_error",
    "LineSource",
    "ConsoleLineSource",
    "ScriptedLineSource",
]
