"""Exceptions raised by the scaffold pipeline.

Only generator failures are fatal.  Manifest, collection, removal and
cleanup problems are reported as warning events instead of exceptions.
"""

from __future__ import annotations

from typing import Optional, Sequence

_OUTPUT_TAIL_CHARS = 2000


def _tail(text: str, limit: int = _OUTPUT_TAIL_CHARS) -> str:
    text = text.strip()
    if len(text) <= limit:
        return text
    return "..." + text[-limit:]


class ScaffoldError(Exception):
    """Base class for every error the scaffolder raises."""


class ProcessError(ScaffoldError):
    """Raised when an external command cannot be run to a zero exit."""

    def __init__(self, message: str, command: str = "", args: Sequence[str] = ()):
        self.command = command
        self.args_list = list(args)
        super().__init__(message)

    @property
    def command_line(self) -> str:
        return " ".join([self.command, *self.args_list]).strip()


class ProcessSpawnError(ProcessError):
    """The executable could not be started (missing binary, permissions)."""

    def __init__(self, command: str, args: Sequence[str], reason: str):
        self.reason = reason
        super().__init__(
            f"Failed to run {command}: {reason}",
            command=command,
            args=args,
        )


class ProcessExitError(ProcessError):
    """The process ran but exited with a nonzero status."""

    def __init__(
        self,
        command: str,
        args: Sequence[str],
        exit_code: int,
        stdout: str = "",
        stderr: str = "",
        description: str = "",
    ):
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
        label = description or command
        lines = [f"{label} failed with exit code {exit_code}: {' '.join([command, *args])}"]
        if stderr.strip():
            lines.append(f"stderr:\n{_tail(stderr)}")
        if stdout.strip():
            lines.append(f"stdout:\n{_tail(stdout)}")
        super().__init__("\n".join(lines), command=command, args=args)


class ProcessTimeoutError(ProcessError):
    """The process did not finish within the configured timeout and was killed."""

    def __init__(
        self,
        command: str,
        args: Sequence[str],
        timeout: float,
        stdout: str = "",
        stderr: str = "",
    ):
        self.timeout = timeout
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(
            f"Command timed out after {timeout}s: {' '.join([command, *args])}",
            command=command,
            args=args,
        )


class GenerationError(ScaffoldError):
    """The Generate phase failed; the whole scaffold is aborted."""

    def __init__(self, message: str, process_error: Optional[ProcessError] = None):
        self.process_error = process_error
        super().__init__(message)


class EmptyOutputError(ScaffoldError):
    """The generator reported success but left no files behind."""

    def __init__(self, project_dir: str):
        self.project_dir = project_dir
        super().__init__(f"Generator produced no files in {project_dir}")
