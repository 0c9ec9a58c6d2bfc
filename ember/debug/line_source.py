"""Blocking line input for the debugger command loop."""

from __future__ import annotations

from collections import deque
from typing import Iterable, Optional, Protocol


class LineSource(Protocol):
    def read_line(self, prompt: str) -> Optional[str]:
        """Block until a line is available; None means the input is exhausted."""
        ...


class ConsoleLineSource:
    """Reads from standard input via `input`."""

    def read_line(self, prompt: str) -> Optional[str]:
        try:
            return input(prompt)
        except EOFError:
            return None


class ScriptedLineSource:
    """Feeds a fixed sequence of lines, then reports end of input.

    Hosts use it to drive the debugger programmatically; tests use it to
    script a session. `prompts` records every prompt that was shown.
    """

    def __init__(self, lines: Iterable[str] = ()):
        self._lines: deque[str] = deque(lines)
        self.prompts: list[str] = []

    def read_line(self, prompt: str) -> Optional[str]:
        self.prompts.append(prompt)
        if not self._lines:
            return None
        return self._lines.popleft()

    def __len__(self) -> int:
        return len(self._lines)
