"""Scoped temporary working directory for one scaffold run."""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from typing import Optional

from .events import EventLevel, Reporter, report


class WorkspaceError(RuntimeError):
    """Raised when the workspace is used before ``acquire`` or after ``release``."""


class ScaffoldWorkspace:
    """A uniquely-named temporary directory owned by a single scaffold run.

    Usable as a sync or async context manager; the directory is removed on
    every exit path.  ``release`` is best-effort and idempotent: a failed
    removal is reported as ``workspace.cleanup_failed`` and never raised.
    """

    def __init__(
        self,
        prefix: str = "nextjs-scaffold-",
        base_dir: Optional[str | Path] = None,
        reporter: Optional[Reporter] = None,
    ) -> None:
        self.prefix = prefix
        self.base_dir = Path(base_dir) if base_dir is not None else None
        self.reporter = reporter
        self._path: Optional[Path] = None
        self._released = False

    @property
    def path(self) -> Path:
        if self._path is None or self._released:
            raise WorkspaceError("Workspace is not active")
        return self._path

    @property
    def active(self) -> bool:
        return self._path is not None and not self._released

    def project_dir(self, name: str) -> Path:
        """Directory the generator creates for project *name*."""
        return self.path / name

    def acquire(self) -> Path:
        if self._path is not None:
            raise WorkspaceError("Workspace already acquired")
        if self.base_dir is not None:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        self._path = Path(
            tempfile.mkdtemp(
                prefix=self.prefix,
                dir=str(self.base_dir) if self.base_dir is not None else None,
            )
        )
        report(
            self.reporter,
            "workspace.created",
            f"Working directory: {self._path}",
            level=EventLevel.DEBUG,
            path=str(self._path),
        )
        return self._path

    def release(self) -> bool:
        """Remove the directory tree.  Returns ``False`` if removal failed."""
        if self._path is None or self._released:
            return True
        self._released = True
        try:
            shutil.rmtree(self._path)
        except FileNotFoundError:
            pass
        except OSError as exc:
            report(
                self.reporter,
                "workspace.cleanup_failed",
                f"Could not clean up temporary directory {self._path}: {exc}",
                level=EventLevel.WARNING,
                path=str(self._path),
                error=str(exc),
            )
            return False
        report(
            self.reporter,
            "workspace.removed",
            f"Removed working directory {self._path}",
            level=EventLevel.DEBUG,
            path=str(self._path),
        )
        return True

    def __enter__(self) -> "ScaffoldWorkspace":
        self.acquire()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    async def __aenter__(self) -> "ScaffoldWorkspace":
        self.acquire()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        # Inline: a cancelled run must still remove its directory.
        self.release()
