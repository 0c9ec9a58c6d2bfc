import io

import pytest

from ember.config import RuntimeConfig
from ember.debug.line_source import ScriptedLineSource
from ember.interpreter import Interpreter


# Every interpreter gets an explicit RuntimeConfig so EMBER_* variables in the
# calling shell cannot change test behavior.


@pytest.fixture
def interp():
    """Fresh, non-interactive interpreter with all libraries registered."""
    return Interpreter(RuntimeConfig(), output=io.StringIO())


@pytest.fixture
def env(interp):
    """The global frame of a fresh interpreter."""
    return interp.global_env


@pytest.fixture
def debug_interp():
    """
    Factory for an interactive interpreter whose debugger reads the given
    lines and writes to a StringIO. Returns (interpreter, line source, output).
    """

    def make(*lines, debug_on_error=False, trace=False):
        source = ScriptedLineSource(lines)
        output = io.StringIO()
        config = RuntimeConfig(trace=trace, debug_on_error=debug_on_error, interactive=True)
        return Interpreter(config, line_source=source, output=output), source, output

    return make
