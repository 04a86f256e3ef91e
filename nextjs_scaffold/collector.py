"""Generated-tree collection.

Walks a directory depth-first and loads every regular file into a FileMap
keyed by its POSIX path relative to the root.  Image and font files are
carried as base64, everything else as UTF-8 text.
"""

from __future__ import annotations

import os
from pathlib import Path, PurePath
from typing import Optional

from .events import EventLevel, Reporter, report
from .models import FileEntry, FileMap

BINARY_EXTENSIONS: frozenset[str] = frozenset(
    {"png", "jpg", "jpeg", "gif", "ico", "woff", "woff2", "ttf", "eot", "svg"}
)


def is_binary_path(path: str | PurePath) -> bool:
    """Return ``True`` if *path* has one of the binary extensions (any case)."""
    suffix = PurePath(path).suffix
    return suffix[1:].lower() in BINARY_EXTENSIONS


def read_entry(path: Path) -> FileEntry:
    """Load a single file as a ``FileEntry``.

    Raises:
        OSError: The file could not be read.
    """
    if is_binary_path(path.name):
        return FileEntry.binary(path.read_bytes())
    return FileEntry.text_entry(path.read_bytes().decode("utf-8", errors="replace"))


def collect_tree(root: str | Path, reporter: Optional[Reporter] = None) -> FileMap:
    """Collect every file under *root* into a FileMap.

    A missing root yields an empty map.  Files that cannot be read are
    skipped with a ``collect.skipped`` warning; the walk continues.
    Symlinked directories are not descended into.
    """
    root_path = Path(root)
    files: FileMap = {}
    if not root_path.is_dir():
        return files
    _walk(root_path, PurePath(), files, reporter)
    return files


def _walk(
    directory: Path,
    relative: PurePath,
    files: FileMap,
    reporter: Optional[Reporter],
) -> None:
    try:
        with os.scandir(directory) as it:
            items = sorted(it, key=lambda e: e.name)
    except OSError as exc:
        report(
            reporter,
            "collect.skipped",
            f"Could not read directory {relative.as_posix() or '.'}: {exc}",
            level=EventLevel.WARNING,
            path=relative.as_posix(),
            error=str(exc),
        )
        return

    for item in items:
        rel_path = relative / item.name
        key = rel_path.as_posix()
        if item.is_dir(follow_symlinks=False):
            _walk(Path(item.path), rel_path, files, reporter)
            continue
        if not item.is_file():
            continue
        try:
            files[key] = read_entry(Path(item.path))
        except OSError as exc:
            report(
                reporter,
                "collect.skipped",
                f"Could not read file {key}: {exc}",
                level=EventLevel.WARNING,
                path=key,
                error=str(exc),
            )
