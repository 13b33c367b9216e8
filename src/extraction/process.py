"""Run external commands and capture their output."""

import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from rich.markup import escape

from common.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of one external command."""

    successful: bool
    stdout: str
    stderr: str


# (command, working directory) -> ExecutionResult
ProcessRunner = Callable[[Sequence[str], Path | None], ExecutionResult]


def command_string(command: Sequence[str]) -> str:
    """Render a command vector for log messages."""
    return " ".join(command)


def run_command(command: Sequence[str], cwd: Path | None = None) -> ExecutionResult:
    """
    Run a command synchronously and capture stdout and stderr.

    Args:
        command: Argument vector, e.g. ["git", "--version"]
        cwd: Working directory, or None for the current directory

    Returns:
        ExecutionResult; successful only if the process started and exited with 0.
        A missing executable or working directory yields an unsuccessful result
        with the OS error as stderr.
    """
    try:
        completed = subprocess.run(
            list(command),
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except OSError as e:
        logger.debug(f"Could not run '{escape(command_string(command))}': {escape(str(e))}")
        return ExecutionResult(successful=False, stdout="", stderr=str(e))

    return ExecutionResult(
        successful=completed.returncode == 0,
        stdout=completed.stdout,
        stderr=completed.stderr,
    )
