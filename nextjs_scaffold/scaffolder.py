"""Main scaffolding orchestrator.

Takes a module configuration (the module's ``meta.json``) and a scaffold
context, runs ``create-next-app`` in a private temporary directory, merges
the module's npm dependencies into the generated manifest, and returns the
generated tree as a FileMap with the configured removals applied.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Mapping, Optional, TypeVar, Union

from pydantic import BaseModel

from .collector import collect_tree
from .config import ScaffoldSettings
from .errors import EmptyOutputError, GenerationError, ProcessError
from .events import ConsoleReporter, EventLevel, Reporter, report
from .generator import CreateNextAppGenerator
from .manifest import merge_dependencies
from .models import FileMap, ModuleConfig, ScaffoldContext
from .removal import apply_removals
from .runner import CommandRunner
from .utils import format_duration
from .workspace import ScaffoldWorkspace

PHASES: tuple[str, ...] = ("init", "generate", "post_process", "collect", "filter", "cleanup")

_M = TypeVar("_M", bound=BaseModel)


def _coerce(model: type[_M], value: Union[_M, Mapping[str, Any], None]) -> _M:
    if isinstance(value, model):
        return value
    return model.model_validate(dict(value or {}))


class NextjsScaffolder:
    """Produces a FileMap for one Next.js module configuration.

    Each call to :meth:`scaffold` owns its own temporary directory, so one
    instance can serve concurrent scaffolds.

    Args:
        settings: Generator and workspace settings.
        runner: Command runner used for the generator (a ``ProcessRunner``
            honouring ``settings.generator_timeout`` by default).
        reporter: Receives progress events (Rich console output by default).
    """

    def __init__(
        self,
        settings: Optional[ScaffoldSettings] = None,
        runner: Optional[CommandRunner] = None,
        reporter: Optional[Reporter] = None,
    ) -> None:
        self.settings = settings or ScaffoldSettings()
        self.reporter: Reporter = (
            reporter if reporter is not None else ConsoleReporter(verbose=self.settings.verbose)
        )
        self.generator = CreateNextAppGenerator(
            settings=self.settings, runner=runner, reporter=self.reporter
        )

    # -- Public API --------------------------------------------------------

    async def scaffold(
        self,
        module_config: Union[ModuleConfig, Mapping[str, Any], None],
        context: Union[ScaffoldContext, Mapping[str, Any], None],
    ) -> FileMap:
        """Generate the project and return its files.

        Raises:
            GenerationError: ``create-next-app`` could not be started, exited
                nonzero or timed out.
            EmptyOutputError: The generator succeeded but left no files.
        """
        module_config = _coerce(ModuleConfig, module_config)
        context = _coerce(ScaffoldContext, context)
        start_time = time.monotonic()

        # 1. Init
        self._phase("init")
        use_app_router = context.use_app_router
        report(
            self.reporter,
            "scaffold.parameters",
            f"Next.js parameters: router={'app' if use_app_router else 'pages'}, "
            f"version={context.nextjs_version}, project={context.project.name or '-'}",
            use_app_router=use_app_router,
            nextjs_version=context.nextjs_version,
            project_name=context.project.name,
        )
        workspace = ScaffoldWorkspace(
            prefix=self.settings.temp_prefix,
            base_dir=self.settings.temp_base_dir,
            reporter=self.reporter,
        )
        workspace.acquire()
        try:
            files = await self._run_phases(workspace, module_config, use_app_router)
        finally:
            self._phase("cleanup")
            workspace.release()

        report(
            self.reporter,
            "scaffold.completed",
            f"Next.js project generated successfully ({len(files)} files, "
            f"{format_duration(time.monotonic() - start_time)})",
            level=EventLevel.SUCCESS,
            file_count=len(files),
        )
        return files

    # -- Phases ------------------------------------------------------------

    async def _run_phases(
        self,
        workspace: ScaffoldWorkspace,
        module_config: ModuleConfig,
        use_app_router: bool,
    ) -> FileMap:
        project_name = self.settings.synthetic_project_name

        # 2. Generate: create-next-app writes <workspace>/<project_name>/
        self._phase("generate")
        try:
            await self.generator.invoke(
                workspace.path, project_name, use_app_router=use_app_router
            )
        except ProcessError as exc:
            report(
                self.reporter,
                "scaffold.failed",
                f"Next.js project generation failed: {exc}",
                level=EventLevel.ERROR,
                phase="generate",
            )
            raise GenerationError(
                f"Next.js project generation failed: {exc}", process_error=exc
            ) from exc

        project_dir = workspace.project_dir(project_name)

        # 3. Post-process: merge module npm dependencies (warnings only)
        self._phase("post_process")
        await asyncio.to_thread(
            merge_dependencies, project_dir, module_config.dependencies, self.reporter
        )
        report(
            self.reporter,
            "scaffold.install_skipped",
            "Skipping npm install (run after cloning the project)",
            level=EventLevel.DEBUG,
        )

        # 4. Collect
        self._phase("collect")
        files = await asyncio.to_thread(collect_tree, project_dir, self.reporter)
        if not files:
            report(
                self.reporter,
                "scaffold.failed",
                f"Generator produced no files in {project_dir}",
                level=EventLevel.ERROR,
                phase="collect",
            )
            raise EmptyOutputError(str(project_dir))
        report(
            self.reporter,
            "collect.completed",
            f"Read {len(files)} files from Next.js project",
            file_count=len(files),
        )

        # 5. Filter
        self._phase("filter")
        return apply_removals(files, module_config.files_to_remove, self.reporter)

    def _phase(self, name: str) -> None:
        report(self.reporter, "phase", f"Phase: {name}", level=EventLevel.DEBUG, phase=name)


# ---------------------------------------------------------------------------
# Functional entry points
# ---------------------------------------------------------------------------


async def scaffold(
    module_config: Union[ModuleConfig, Mapping[str, Any], None],
    context: Union[ScaffoldContext, Mapping[str, Any], None],
    *,
    settings: Optional[ScaffoldSettings] = None,
    runner: Optional[CommandRunner] = None,
    reporter: Optional[Reporter] = None,
) -> FileMap:
    """Scaffold a Next.js project and return its FileMap.

    Convenience wrapper around ``NextjsScaffolder(...).scaffold(...)``.
    """
    scaffolder = NextjsScaffolder(settings=settings, runner=runner, reporter=reporter)
    return await scaffolder.scaffold(module_config, context)


def scaffold_sync(
    module_config: Union[ModuleConfig, Mapping[str, Any], None],
    context: Union[ScaffoldContext, Mapping[str, Any], None],
    **kwargs: Any,
) -> FileMap:
    """Blocking variant of :func:`scaffold` for callers without an event loop."""
    return asyncio.run(scaffold(module_config, context, **kwargs))
