"""
Script: dudk_tools/common.py
What: Shared helper functions used by all `dudk_tools` modules.
Doing: Wraps env reads, command execution, and colored console output.
Why: Avoids duplicated helper code.
Goal: Keep behavior consistent across all helper modules.
"""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from typing import Callable, Mapping, Sequence


class DudkToolError(RuntimeError):
    """Raised when a workflow helper hits a known error condition."""


# ANSI color codes used by the console helpers below.
RESET = "\033[0m"
DEBUG_COLORS = {
    "green": "\033[32m",
    "yellow": "\033[33m",
    "red": "\033[31m",
    "blue": "\033[94m",
}
INFO_COLOR = "\033[38;5;183m"

TRUE_VALUES = {"1", "true", "yes", "on"}

_debug_enabled = True


def set_debug(enabled: bool) -> None:
    """Turn `debug()` output on or off for the rest of the run."""
    global _debug_enabled
    _debug_enabled = enabled


def debug(message: str, color: str = "green") -> None:
    """
    Print a debug line when debug output is enabled.

    Unknown color names fall back to green.
    """
    if not _debug_enabled:
        return
    code = DEBUG_COLORS.get(color, DEBUG_COLORS["green"])
    print(f"{code}DEBUG: {message}{RESET}")


def info(message: str) -> None:
    """Print an informational line (always shown)."""
    print(f"{INFO_COLOR}INFO: {message}{RESET}")


def error(message: str) -> None:
    """Print an error line to stdout, regardless of debug settings."""
    print(f"Error: {message}")


def require_env(name: str, environ: Mapping[str, str] | None = None) -> str:
    """Return a required environment variable or raise a clear error.

    `environ` defaults to the process environment.
    """
    source = os.environ if environ is None else environ
    value = source.get(name)
    if value is None or value == "":
        raise DudkToolError(f"Missing required environment variable: {name}")
    return value


def optional_env(name: str, default: str = "") -> str:
    """Return an environment variable with a fallback default."""
    return os.environ.get(name, default)


def env_flag(name: str, default: bool = False) -> bool:
    """Read a true/false style environment variable."""
    raw = optional_env(name).strip().lower()
    if not raw:
        return default
    return raw in TRUE_VALUES


@dataclass(frozen=True)
class CommandResult:
    """Captured result of one external tool call."""

    args: tuple[str, ...]
    output: str
    exit_status: int

    @property
    def ok(self) -> bool:
        return self.exit_status == 0


Runner = Callable[..., CommandResult]


def run_cmd(
    args: Sequence[str],
    *,
    cwd: str | None = None,
    env: Mapping[str, str] | None = None,
) -> str:
    """Run a command and return stdout, raising a readable error on failure."""
    try:
        result = subprocess.run(
            list(args),
            check=True,
            text=True,
            capture_output=True,
            cwd=cwd,
            env=dict(env) if env is not None else None,
        )
    except FileNotFoundError as exc:
        raise DudkToolError(f"Command not found: {args[0]}") from exc
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or "").strip()
        stdout = (exc.stdout or "").strip()
        details = stderr or stdout or str(exc)
        raise DudkToolError(f"Command failed: {' '.join(args)}\n{details}") from exc

    return result.stdout


def run_captured(
    args: Sequence[str],
    *,
    cwd: str | None = None,
    env: Mapping[str, str] | None = None,
) -> CommandResult:
    """
    Run a command with stderr folded into stdout and return both output and exit status.

    Unlike `run_cmd`, a nonzero exit is not an error here: callers decide
    whether the failure is fatal. A missing executable is reported the way a
    shell would, with exit status 127.
    """
    try:
        result = subprocess.run(
            list(args),
            check=False,
            text=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            cwd=cwd,
            env=dict(env) if env is not None else None,
        )
    except FileNotFoundError:
        return CommandResult(tuple(args), f"{args[0]}: command not found\n", 127)
    return CommandResult(tuple(args), result.stdout or "", result.returncode)


def run_interactive(
    args: Sequence[str],
    *,
    cwd: str | None = None,
    env: Mapping[str, str] | None = None,
) -> int:
    """Run a command attached to the terminal and return its exit status."""
    try:
        result = subprocess.run(
            list(args),
            check=False,
            cwd=cwd,
            env=dict(env) if env is not None else None,
        )
    except FileNotFoundError:
        return 127
    return result.returncode
