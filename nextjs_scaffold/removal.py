"""Removal of configured paths from a generated FileMap."""

from __future__ import annotations

from typing import Iterable, Optional

from .events import EventLevel, Reporter, report
from .models import FileMap


def normalize_path(path: str) -> str:
    """Turn a configured path into FileMap key form (POSIX, no leading ``./`` or ``/``)."""
    key = path.strip().replace("\\", "/")
    while key.startswith("./"):
        key = key[2:]
    return key.lstrip("/")


def apply_removals(
    file_map: FileMap,
    paths: Optional[Iterable[str]],
    reporter: Optional[Reporter] = None,
) -> FileMap:
    """Delete each of *paths* from *file_map* and return it.

    The map is modified in place.  Paths that are not present are reported
    as ``removal.missing`` warnings and otherwise ignored.
    """
    targets = list(paths or [])
    if not targets:
        return file_map

    report(reporter, "removal.start", "Removing files as specified in module configuration...")
    for target in targets:
        key = normalize_path(target)
        if key in file_map:
            del file_map[key]
            report(reporter, "removal.removed", f"Removed file: {key}", path=key)
        else:
            report(
                reporter,
                "removal.missing",
                f"File not found for removal: {target}",
                level=EventLevel.WARNING,
                path=target,
            )
    return file_map
