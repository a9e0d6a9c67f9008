"""Shared utility functions."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from aftercare.models.project import CommandResult

log = logging.getLogger(__name__)

SESSION_ROOT_ENV = "CLAUDE_PROJECT_DIR"
DEBUG_ENV = "DEBUG"

# Timeout for lint, format and type-check commands (seconds).
DEFAULT_COMMAND_TIMEOUT = 120


def session_root() -> Path:
    """Return the session root from the environment, defaulting to the cwd."""
    return absolute_path(os.environ.get(SESSION_ROOT_ENV) or os.getcwd())


def debug_enabled() -> bool:
    """Whether verbose diagnostics for suppressed errors are requested."""
    return bool(os.environ.get(DEBUG_ENV))


def absolute_path(path: Path | str) -> Path:
    """Make a path absolute and collapse ``..`` without resolving symlinks."""
    return Path(os.path.abspath(path))


def to_posix(path: Path | str) -> str:
    return str(path).replace("\\", "/")


def relative_posix(path: Path | str, root: Path | str) -> str:
    """Return *path* relative to *root* with ``/`` separators.

    Paths outside *root* come back normalised but otherwise unchanged.
    """
    normalized = to_posix(path)
    prefix = to_posix(root).rstrip("/") + "/"
    if normalized.startswith(prefix):
        return normalized[len(prefix):]
    return normalized


def run_command(
    command: str | list[str],
    cwd: Path,
    *,
    timeout: float = DEFAULT_COMMAND_TIMEOUT,
    input_text: str | None = None,
    env: dict[str, str] | None = None,
) -> CommandResult:
    """Run a command and capture its combined stdout and stderr.

    A string is run through the shell, a list is executed directly. Never
    raises: spawn failures and timeouts come back as a failed
    ``CommandResult``.
    """
    try:
        proc = subprocess.run(
            command,
            shell=isinstance(command, str),
            cwd=cwd,
            input=input_text,
            env=env,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        log.debug("Command timed out after %ss: %s", timeout, command)
        return CommandResult(
            success=False,
            output=_decode(e.stdout) + _decode(e.stderr),
            timed_out=True,
        )
    except OSError as e:
        log.debug("Command failed to start: %s (%s)", command, e)
        return CommandResult(success=False, output=str(e))

    return CommandResult(
        success=proc.returncode == 0,
        output=(proc.stdout or "") + (proc.stderr or ""),
    )


def _decode(data: bytes | str | None) -> str:
    # TimeoutExpired may carry bytes even when text=True was requested
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def format_elapsed(seconds: float) -> str:
    """Format an elapsed time as a human-readable string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f} ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes = int(seconds) // 60
    secs = seconds - minutes * 60
    return f"{minutes}m {secs:.0f}s"
