"""External process execution for the scaffold pipeline.

Spawns a command in a working directory, buffers its stdout/stderr in
memory, reports progress while it runs, and turns spawn failures, nonzero
exits and timeouts into typed exceptions.
"""

from __future__ import annotations

import asyncio
import os
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Protocol, Sequence

from .errors import ProcessExitError, ProcessSpawnError, ProcessTimeoutError
from .events import EventLevel, Reporter, report

_READ_CHUNK = 4096


@dataclass
class ProcessResult:
    """Outcome of a successful (exit code 0) process run."""

    command: str
    args: list[str] = field(default_factory=list)
    exit_code: int = 0
    stdout: str = ""
    stderr: str = ""
    duration_seconds: float = 0.0

    @property
    def command_line(self) -> str:
        return " ".join([self.command, *self.args])


class CommandRunner(Protocol):
    """Anything that can run a command the way ``ProcessRunner`` does."""

    async def run(
        self,
        command: str,
        args: Sequence[str],
        cwd: str | Path,
        description: str = "",
    ) -> ProcessResult: ...


def resolve_executable(command: str, platform: str = sys.platform) -> str:
    """Return the executable name to spawn on *platform*.

    Windows ships npm tooling as ``.cmd`` shims, so bare names get the
    suffix there.  Names that already carry an extension are left alone.
    """
    if platform == "win32" and not os.path.splitext(command)[1]:
        return f"{command}.cmd"
    return command


async def _drain(
    stream: Optional[asyncio.StreamReader],
    chunks: list[bytes],
    reporter: Optional[Reporter],
    progress: bool,
) -> None:
    if stream is None:
        return
    while True:
        chunk = await stream.read(_READ_CHUNK)
        if not chunk:
            return
        chunks.append(chunk)
        if progress:
            report(reporter, "process.output", level=EventLevel.DEBUG, size=len(chunk))


def _decode(chunks: list[bytes]) -> str:
    return b"".join(chunks).decode("utf-8", errors="replace")


class ProcessRunner:
    """Runs external commands and waits for them to finish.

    Args:
        timeout_seconds: Wall-clock limit per command; ``None`` waits forever.
        reporter: Receives ``process.*`` events.
        env: Extra environment variables merged on top of ``os.environ``.
    """

    def __init__(
        self,
        timeout_seconds: Optional[float] = None,
        reporter: Optional[Reporter] = None,
        env: Optional[dict[str, str]] = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.reporter = reporter
        self.env = env

    async def run(
        self,
        command: str,
        args: Sequence[str],
        cwd: str | Path,
        description: str = "",
    ) -> ProcessResult:
        """Run ``command args...`` in *cwd*.

        Returns:
            A ``ProcessResult`` when the process exits with code 0.

        Raises:
            ProcessSpawnError: The executable could not be started.
            ProcessExitError: The process exited with a nonzero code.
            ProcessTimeoutError: ``timeout_seconds`` elapsed first.
        """
        args = list(args)
        label = description or command
        executable = resolve_executable(command)
        command_line = " ".join([command, *args])

        report(
            self.reporter,
            "process.start",
            f"{label}...",
            command=command,
            args=args,
            cwd=str(cwd),
        )
        report(
            self.reporter,
            "process.command",
            f"Running: {command_line} (in {cwd})",
            level=EventLevel.DEBUG,
            command_line=command_line,
        )

        merged_env = {**os.environ, **self.env} if self.env else None
        start_time = time.monotonic()
        try:
            process = await asyncio.create_subprocess_exec(
                executable,
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(cwd),
                env=merged_env,
            )
        except OSError as exc:
            reason = exc.strerror or str(exc)
            report(
                self.reporter,
                "process.failed",
                f"Failed to run {command}: {reason}",
                level=EventLevel.ERROR,
                command=command,
                reason=reason,
            )
            raise ProcessSpawnError(command, args, reason) from exc

        stdout_chunks: list[bytes] = []
        stderr_chunks: list[bytes] = []
        try:
            await asyncio.wait_for(
                asyncio.gather(
                    _drain(process.stdout, stdout_chunks, self.reporter, True),
                    _drain(process.stderr, stderr_chunks, self.reporter, False),
                    process.wait(),
                ),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            stdout_text, stderr_text = _decode(stdout_chunks), _decode(stderr_chunks)
            report(
                self.reporter,
                "process.failed",
                f"{label} timed out after {self.timeout_seconds}s",
                level=EventLevel.ERROR,
                command=command,
                stdout=stdout_text,
                stderr=stderr_text,
            )
            raise ProcessTimeoutError(
                command, args, self.timeout_seconds or 0, stdout_text, stderr_text
            )
        finally:
            if process.returncode is None:
                process.kill()
                await process.wait()

        elapsed = time.monotonic() - start_time
        exit_code = process.returncode if process.returncode is not None else -1
        stdout_text, stderr_text = _decode(stdout_chunks), _decode(stderr_chunks)

        if exit_code != 0:
            report(
                self.reporter,
                "process.failed",
                f"{label} failed with code {exit_code}",
                level=EventLevel.ERROR,
                command=command,
                exit_code=exit_code,
                stdout=stdout_text,
                stderr=stderr_text,
            )
            raise ProcessExitError(
                command, args, exit_code, stdout_text, stderr_text, description=label
            )

        report(
            self.reporter,
            "process.finish",
            f"{label} completed successfully",
            level=EventLevel.SUCCESS,
            command=command,
            duration_seconds=elapsed,
        )
        return ProcessResult(
            command=command,
            args=args,
            exit_code=exit_code,
            stdout=stdout_text,
            stderr=stderr_text,
            duration_seconds=elapsed,
        )
