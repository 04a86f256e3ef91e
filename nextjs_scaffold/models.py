"""Data models exchanged between the scaffolder and its caller.

Provides Pydantic v2 models for the module configuration and scaffold
context the pipeline consumes, and for the ``FileMap`` it produces.  Both
input models accept the camelCase keys used by module ``meta.json`` files
and ignore keys they do not recognise.
"""

from __future__ import annotations

import base64
import json
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ---------------------------------------------------------------------------
# Generated files
# ---------------------------------------------------------------------------


class FileKind(str, Enum):
    """How a file's content is carried in a ``FileEntry``."""

    BINARY = "binary"
    TEXT = "text"


class FileEntry(BaseModel):
    """A single generated file.

    Binary content is base64 text; text content is the decoded UTF-8 string.
    The JSON form is ``{"type": ..., "content": ...}``.
    """

    model_config = ConfigDict(frozen=True)

    type: FileKind
    content: str

    @classmethod
    def binary(cls, data: bytes) -> "FileEntry":
        return cls(type=FileKind.BINARY, content=base64.b64encode(data).decode("ascii"))

    @classmethod
    def text_entry(cls, content: str) -> "FileEntry":
        return cls(type=FileKind.TEXT, content=content)

    @property
    def is_binary(self) -> bool:
        return self.type is FileKind.BINARY

    def raw(self) -> bytes:
        """Return the file payload as bytes."""
        if self.is_binary:
            return base64.b64decode(self.content)
        return self.content.encode("utf-8")

    def text(self) -> str:
        """Return the payload as a string, decoding binary content leniently."""
        if self.is_binary:
            return self.raw().decode("utf-8", errors="replace")
        return self.content


FileMap = dict[str, FileEntry]


def file_map_to_json(file_map: FileMap) -> dict[str, dict[str, str]]:
    """Return a JSON-serialisable ``{path: {type, content}}`` mapping."""
    return {path: entry.model_dump(mode="json") for path, entry in file_map.items()}


def file_map_from_json(data: dict[str, dict[str, str]]) -> FileMap:
    """Inverse of :func:`file_map_to_json`."""
    return {path: FileEntry.model_validate(entry) for path, entry in data.items()}


def write_file_map(file_map: FileMap, output_dir: Union[str, Path]) -> list[Path]:
    """Materialise a FileMap under *output_dir*.

    Returns:
        The written file paths, in FileMap order.

    Raises:
        ValueError: If a key would escape *output_dir*.
    """
    root = Path(output_dir).resolve()
    written: list[Path] = []
    for rel_path, entry in file_map.items():
        target = (root / rel_path).resolve()
        if root != target and root not in target.parents:
            raise ValueError(f"Refusing to write outside output directory: {rel_path}")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(entry.raw())
        written.append(target)
    return written


def dump_file_map(file_map: FileMap, path: Union[str, Path]) -> Path:
    """Write a FileMap as pretty-printed JSON to *path*."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(
        json.dumps(file_map_to_json(file_map), indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    return target


# ---------------------------------------------------------------------------
# Module configuration (meta.json)
# ---------------------------------------------------------------------------


class _MetaModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        """Treat an explicit ``null`` section like a missing one."""
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class NpmDependencies(_MetaModel):
    """``dependencies.npm`` section: package name -> version constraint."""

    dependencies: dict[str, str] = Field(default_factory=dict)
    dev_dependencies: dict[str, str] = Field(default_factory=dict, alias="devDependencies")


class ModuleDependencies(_MetaModel):
    npm: NpmDependencies = Field(default_factory=NpmDependencies)


class GenerationFiles(_MetaModel):
    remove: list[str] = Field(default_factory=list)


class Generation(_MetaModel):
    files: GenerationFiles = Field(default_factory=GenerationFiles)


class ModuleConfig(_MetaModel):
    """The parts of a module's ``meta.json`` the scaffolder reads."""

    id: Optional[str] = Field(default=None, alias="moduleId")
    name: Optional[str] = None
    dependencies: ModuleDependencies = Field(default_factory=ModuleDependencies)
    generation: Generation = Field(default_factory=Generation)

    @property
    def npm(self) -> NpmDependencies:
        return self.dependencies.npm

    @property
    def files_to_remove(self) -> list[str]:
        return list(self.generation.files.remove)


# ---------------------------------------------------------------------------
# Scaffold context
# ---------------------------------------------------------------------------

PAGES_ROUTER = "pages"
APP_ROUTER = "app"
DEFAULT_NEXTJS_VERSION = "15"
DEFAULT_RENDERING_MODE = "static"


class ProjectInfo(_MetaModel):
    name: str = ""


class ModuleInstance(_MetaModel):
    """A module as configured for one project.  ``fieldValues`` is free-form."""

    field_values: dict[str, Any] = Field(default_factory=dict, alias="fieldValues")


class ScaffoldContext(_MetaModel):
    """Per-project values handed to the scaffolder by the outer system."""

    project: ProjectInfo = Field(default_factory=ProjectInfo)
    module: ModuleInstance = Field(default_factory=ModuleInstance)

    @property
    def field_values(self) -> dict[str, Any]:
        return self.module.field_values

    @property
    def router_type(self) -> str:
        return str(self.field_values.get("routerType") or APP_ROUTER)

    @property
    def use_app_router(self) -> bool:
        """App Router unless ``routerType`` is exactly ``'pages'``."""
        return self.field_values.get("routerType") != PAGES_ROUTER

    @property
    def nextjs_version(self) -> str:
        return str(self.field_values.get("nextjsVersion") or DEFAULT_NEXTJS_VERSION)

    @property
    def rendering_mode(self) -> str:
        return str(self.field_values.get("renderingMode") or DEFAULT_RENDERING_MODE)
