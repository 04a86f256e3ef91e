"""package.json dependency merging.

Adds a module's npm dependencies to the manifest the generator wrote.
Incoming versions win over existing ones; every other manifest field is
left as it was.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Optional

from .events import EventLevel, Reporter, report
from .models import ModuleDependencies, NpmDependencies
from .utils import load_json, write_json

MANIFEST_NAME = "package.json"

_SECTIONS: tuple[tuple[str, str], ...] = (
    ("dependencies", "dependencies"),
    ("devDependencies", "dev_dependencies"),
)


def merge_manifest(manifest: Mapping[str, Any], npm: NpmDependencies) -> dict[str, Any]:
    """Return a copy of *manifest* with *npm* merged in.

    Each section is a right-biased union: ``{a: 1, b: 2}`` merged with
    ``{b: 3, c: 4}`` gives ``{a: 1, b: 3, c: 4}``.  Sections with no incoming
    entries are not touched (and not created).
    """
    merged = dict(manifest)
    for manifest_key, attr in _SECTIONS:
        incoming: dict[str, str] = getattr(npm, attr)
        if not incoming:
            continue
        existing = merged.get(manifest_key)
        base = dict(existing) if isinstance(existing, Mapping) else {}
        merged[manifest_key] = {**base, **incoming}
    return merged


def merge_dependencies(
    project_dir: str | Path,
    dependencies: ModuleDependencies | NpmDependencies | Mapping[str, Any],
    reporter: Optional[Reporter] = None,
) -> bool:
    """Merge *dependencies* into ``<project_dir>/package.json`` in place.

    *dependencies* may be the module's ``dependencies`` section (with an
    ``npm`` key), the ``npm`` section itself, or a raw mapping of either.

    Returns:
        ``True`` if the manifest was rewritten, ``False`` if it was missing
        or unreadable (reported as a warning, never raised).
    """
    npm = _as_npm(dependencies)
    manifest_path = Path(project_dir) / MANIFEST_NAME

    if not manifest_path.is_file():
        report(
            reporter,
            "manifest.missing",
            f"{MANIFEST_NAME} not found, skipping dependency update",
            level=EventLevel.WARNING,
            path=str(manifest_path),
        )
        return False

    try:
        manifest = load_json(manifest_path)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        report(
            reporter,
            "manifest.unreadable",
            f"Could not read {MANIFEST_NAME}: {exc}",
            level=EventLevel.WARNING,
            path=str(manifest_path),
            error=str(exc),
        )
        return False
    if not isinstance(manifest, dict):
        report(
            reporter,
            "manifest.unreadable",
            f"{MANIFEST_NAME} is not a JSON object",
            level=EventLevel.WARNING,
            path=str(manifest_path),
        )
        return False

    report(reporter, "manifest.update", f"Updating {MANIFEST_NAME} with additional dependencies...")
    try:
        write_json(merge_manifest(manifest, npm), manifest_path)
    except OSError as exc:
        report(
            reporter,
            "manifest.unreadable",
            f"Could not write {MANIFEST_NAME}: {exc}",
            level=EventLevel.WARNING,
            path=str(manifest_path),
            error=str(exc),
        )
        return False

    report(
        reporter,
        "manifest.updated",
        f"{MANIFEST_NAME} updated",
        level=EventLevel.SUCCESS,
        dependencies=sorted(npm.dependencies),
        dev_dependencies=sorted(npm.dev_dependencies),
    )
    return True


def _as_npm(
    dependencies: ModuleDependencies | NpmDependencies | Mapping[str, Any],
) -> NpmDependencies:
    if isinstance(dependencies, NpmDependencies):
        return dependencies
    if isinstance(dependencies, ModuleDependencies):
        return dependencies.npm
    if "npm" in dependencies:
        return ModuleDependencies.model_validate(dependencies).npm
    return NpmDependencies.model_validate(dependencies)
