import sys

import pytest

from ember.config import RuntimeConfig, load_config
from ember.interpreter import Interpreter

ENV_VARS = [
    "EMBER_TRACE",
    "EMBER_DEBUG_ON_ERROR",
    "EMBER_INTERACTIVE",
    "EMBER_DEBUG_PREFIX",
    "EMBER_LOG_LEVEL",
    "EMBER_RECURSION_LIMIT",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


def test_defaults():
    assert load_config() == RuntimeConfig()


def test_environment_variables(monkeypatch):
    monkeypatch.setenv("EMBER_TRACE", "on")
    monkeypatch.setenv("EMBER_DEBUG_ON_ERROR", "TRUE")
    monkeypatch.setenv("EMBER_INTERACTIVE", "1")
    monkeypatch.setenv("EMBER_DEBUG_PREFIX", "/")
    monkeypatch.setenv("EMBER_LOG_LEVEL", "debug")
    cfg = load_config()
    assert cfg.trace and cfg.debug_on_error and cfg.interactive
    assert cfg.command_prefix == "/"
    assert cfg.log_level == "DEBUG"


def test_explicit_arguments_win(monkeypatch):
    monkeypatch.setenv("EMBER_TRACE", "yes")
    monkeypatch.setenv("EMBER_LOG_LEVEL", "ERROR")
    cfg = load_config(trace=False, log_level="info", command_prefix="!")
    assert not cfg.trace
    assert cfg.log_level == "INFO"
    assert cfg.command_prefix == "!"


def test_empty_prefix_falls_back_to_default(monkeypatch):
    monkeypatch.setenv("EMBER_DEBUG_PREFIX", "")
    assert load_config().command_prefix == ":"


def test_bad_flag_is_rejected(monkeypatch):
    monkeypatch.setenv("EMBER_TRACE", "sometimes")
    with pytest.raises(ValueError, match="EMBER_TRACE"):
        load_config()


def test_recursion_limit_from_environment(monkeypatch):
    monkeypatch.setenv("EMBER_RECURSION_LIMIT", "50000")
    assert load_config().recursion_limit == 50000
    monkeypatch.setenv("EMBER_RECURSION_LIMIT", "deep")
    with pytest.raises(ValueError, match="EMBER_RECURSION_LIMIT"):
        load_config()


def test_interpreter_raises_the_recursion_limit(monkeypatch):
    monkeypatch.setattr(sys, "getrecursionlimit", lambda: 1000)
    requested = []
    monkeypatch.setattr(sys, "setrecursionlimit", requested.append)
    Interpreter(RuntimeConfig(recursion_limit=12345))
    assert requested == [12345]
