from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Optional

_TRUE_WORDS = {"1", "true", "yes", "on"}
_FALSE_WORDS = {"0", "false", "no", "off", ""}


def flag_from_env(var: str, default: bool) -> bool:
    raw = os.environ.get(var)
    if raw is None:
        return default
    word = raw.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise ValueError(f"{var} must be one of on/off, true/false, 1/0; got {raw!r}")


def int_from_env(var: str, default: int) -> int:
    raw = os.environ.get(var)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{var} must be an integer; got {raw!r}") from e


def str_from_env(var: str, default: str) -> str:
    raw = os.environ.get(var)
    return raw if raw else default


@dataclass
class RuntimeConfig:
    """Settings for one interpreter instance."""

    trace: bool = False
    debug_on_error: bool = False
    interactive: bool = False
    command_prefix: str = ":"
    prompt: str = "D> "
    log_level: str = "WARNING"
    # Python stack depth the interpreter asks for; each script call uses about a dozen frames
    recursion_limit: int = 20000


def load_config(
    *,
    trace: Optional[bool] = None,
    debug_on_error: Optional[bool] = None,
    interactive: Optional[bool] = None,
    command_prefix: Optional[str] = None,
    log_level: Optional[str] = None,
) -> RuntimeConfig:
    """Build a RuntimeConfig from EMBER_* environment variables.

    Explicit arguments win over the environment.
    """
    cfg = RuntimeConfig(
        trace=flag_from_env("EMBER_TRACE", False),
        debug_on_error=flag_from_env("EMBER_DEBUG_ON_ERROR", False),
        interactive=flag_from_env("EMBER_INTERACTIVE", False),
        command_prefix=str_from_env("EMBER_DEBUG_PREFIX", ":"),
        log_level=str_from_env("EMBER_LOG_LEVEL", "WARNING").upper(),
        recursion_limit=int_from_env("EMBER_RECURSION_LIMIT", 20000),
    )
    if trace is not None:
        cfg.trace = trace
    if debug_on_error is not None:
        cfg.debug_on_error = debug_on_error
    if interactive is not None:
        cfg.interactive = interactive
    if command_prefix is not None:
        cfg.command_prefix = command_prefix
    if log_level is not None:
        cfg.log_level = log_level.upper()
    return cfg
