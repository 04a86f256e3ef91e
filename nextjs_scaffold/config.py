"""Next.js scaffolder configuration.

Typed settings for the scaffold pipeline. All settings use Pydantic v2
models so they can be validated at construction time and serialised to/from
JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field


class ScaffoldSettings(BaseModel):
    """Tuning knobs for one scaffolder instance.

    Instances are typically created once by the caller (or by the CLI entry
    point) and handed to ``NextjsScaffolder``. Nothing here is mutated by the
    pipeline itself.
    """

    npx_binary: str = Field(default="npx", description="Package runner used to launch the generator")
    generator_package: str = Field(default="create-next-app")
    generator_version: str = Field(default="latest", description="Dist-tag or version of the generator")
    synthetic_project_name: str = Field(
        default="project",
        min_length=1,
        description="Directory name the generator creates inside the working directory",
    )
    temp_prefix: str = Field(default="nextjs-scaffold-")
    temp_base_dir: Optional[Path] = Field(
        default=None, description="Parent for working directories (system temp dir when unset)"
    )
    generator_timeout: Optional[int] = Field(
        default=600, ge=1, description="Generator process timeout in seconds; None disables it"
    )
    verbose: bool = Field(default=False, description="Echo generator output progress to the console")

    @property
    def generator_spec(self) -> str:
        """The ``package@version`` token passed to npx."""
        return f"{self.generator_package}@{self.generator_version}"

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the settings to a JSON file and return the written path."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "ScaffoldSettings":
        """Load previously-saved settings from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "ScaffoldSettings":
        """Build settings from environment variables.

        Recognised variables (all optional):
            NEXTJS_SCAFFOLD_NPX, NEXTJS_SCAFFOLD_GENERATOR_VERSION,
            NEXTJS_SCAFFOLD_PROJECT_NAME, NEXTJS_SCAFFOLD_TEMP_DIR,
            NEXTJS_SCAFFOLD_TIMEOUT (``0`` or ``none`` disables the timeout),
            NEXTJS_SCAFFOLD_VERBOSE.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("NEXTJS_SCAFFOLD_NPX"):
            kwargs["npx_binary"] = os.environ["NEXTJS_SCAFFOLD_NPX"]
        if os.environ.get("NEXTJS_SCAFFOLD_GENERATOR_VERSION"):
            kwargs["generator_version"] = os.environ["NEXTJS_SCAFFOLD_GENERATOR_VERSION"]
        if os.environ.get("NEXTJS_SCAFFOLD_PROJECT_NAME"):
            kwargs["synthetic_project_name"] = os.environ["NEXTJS_SCAFFOLD_PROJECT_NAME"]
        if os.environ.get("NEXTJS_SCAFFOLD_TEMP_DIR"):
            kwargs["temp_base_dir"] = Path(os.environ["NEXTJS_SCAFFOLD_TEMP_DIR"])

        timeout = os.environ.get("NEXTJS_SCAFFOLD_TIMEOUT")
        if timeout:
            kwargs["generator_timeout"] = (
                None if timeout.strip().lower() in ("0", "none") else int(timeout)
            )

        verbose = os.environ.get("NEXTJS_SCAFFOLD_VERBOSE", "")
        kwargs["verbose"] = verbose.strip().lower() in ("1", "true", "yes")

        return cls(**kwargs)
