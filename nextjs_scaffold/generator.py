"""create-next-app invocation.

Builds the fixed argument vector for ``npx create-next-app`` and hands it to
a command runner.  The generated project lands in a subdirectory named after
the project name, inside the working directory.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

from .config import ScaffoldSettings
from .events import EventLevel, Reporter, report
from .runner import CommandRunner, ProcessResult, ProcessRunner, resolve_executable

# Flags passed on every run.  Installation and git init belong to the caller.
BASE_FLAGS: tuple[str, ...] = (
    "--yes",
    "--typescript",
    "--tailwind",
    "--eslint",
    "--src-dir",
    "--import-alias", "@/*",
    "--turbopack",
    "--skip-install",
    "--disable-git",
)
APP_ROUTER_FLAG = "--app"


class CreateNextAppGenerator:
    """Runs ``create-next-app`` through a ``CommandRunner``."""

    VERSION_TIMEOUT = 10.0

    def __init__(
        self,
        settings: Optional[ScaffoldSettings] = None,
        runner: Optional[CommandRunner] = None,
        reporter: Optional[Reporter] = None,
    ) -> None:
        self.settings = settings or ScaffoldSettings()
        self.reporter = reporter
        self.runner = runner or ProcessRunner(
            timeout_seconds=self.settings.generator_timeout,
            reporter=reporter,
        )

    def build_args(self, project_name: str, use_app_router: bool = True) -> list[str]:
        """Return the npx argument vector for *project_name*.

        ``--app`` is added unless *use_app_router* is ``False``; the pages
        router is the generator's own default, so it is never requested.
        """
        args = [self.settings.generator_spec, project_name, *BASE_FLAGS]
        if use_app_router is not False:
            args.append(APP_ROUTER_FLAG)
        return args

    async def invoke(
        self,
        cwd: str | Path,
        project_name: str,
        use_app_router: bool = True,
    ) -> ProcessResult:
        """Generate *project_name* inside *cwd*.  Runner errors propagate unchanged."""
        return await self.runner.run(
            self.settings.npx_binary,
            self.build_args(project_name, use_app_router=use_app_router),
            cwd,
            description="Creating Next.js project",
        )

    async def check_available(self) -> bool:
        """Return ``True`` if the npx binary can be executed."""
        try:
            process = await asyncio.create_subprocess_exec(
                resolve_executable(self.settings.npx_binary), "--version",
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError:
            report(
                self.reporter,
                "generator.unavailable",
                f"'{self.settings.npx_binary}' not found in PATH",
                level=EventLevel.ERROR,
            )
            return False

        try:
            stdout_bytes, _ = await asyncio.wait_for(
                process.communicate(), timeout=self.VERSION_TIMEOUT
            )
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            report(
                self.reporter,
                "generator.unavailable",
                f"'{self.settings.npx_binary} --version' did not answer "
                f"within {self.VERSION_TIMEOUT}s",
                level=EventLevel.ERROR,
            )
            return False

        if process.returncode != 0:
            return False
        version = stdout_bytes.decode("utf-8", errors="replace").strip()
        report(
            self.reporter,
            "generator.available",
            f"{self.settings.npx_binary} {version} available",
            version=version,
        )
        return True
