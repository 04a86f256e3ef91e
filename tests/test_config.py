"""Unit tests for ScaffoldSettings (nextjs_scaffold.config).

Tests cover:
- Defaults and validation
- generator_spec
- save/load round trip
- from_env
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from nextjs_scaffold.config import ScaffoldSettings


class TestScaffoldSettingsDefaults:
    @pytest.mark.unit
    def test_defaults(self):
        settings = ScaffoldSettings()
        assert settings.npx_binary == "npx"
        assert settings.generator_version == "latest"
        assert settings.synthetic_project_name == "project"
        assert settings.temp_prefix == "nextjs-scaffold-"
        assert settings.temp_base_dir is None
        assert settings.generator_timeout == 600
        assert settings.verbose is False

    @pytest.mark.unit
    def test_generator_spec(self):
        assert ScaffoldSettings().generator_spec == "create-next-app@latest"
        assert ScaffoldSettings(generator_version="14.2.3").generator_spec == "create-next-app@14.2.3"

    @pytest.mark.unit
    def test_timeout_can_be_disabled(self):
        assert ScaffoldSettings(generator_timeout=None).generator_timeout is None

    @pytest.mark.unit
    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            ScaffoldSettings(generator_timeout=0)

    @pytest.mark.unit
    def test_project_name_must_not_be_empty(self):
        with pytest.raises(ValidationError):
            ScaffoldSettings(synthetic_project_name="")


class TestScaffoldSettingsPersistence:
    @pytest.mark.unit
    def test_save_and_load(self, tmp_path: Path):
        original = ScaffoldSettings(
            npx_binary="/usr/local/bin/npx",
            generator_timeout=120,
            temp_base_dir=tmp_path / "scratch",
        )
        path = original.save(tmp_path / "conf" / "settings.json")

        assert path.exists()
        loaded = ScaffoldSettings.load(path)
        assert loaded == original


class TestScaffoldSettingsFromEnv:
    @pytest.mark.unit
    def test_defaults_when_no_env(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = ScaffoldSettings.from_env()
        assert settings == ScaffoldSettings()

    @pytest.mark.unit
    def test_all_variables(self):
        env = {
            "NEXTJS_SCAFFOLD_NPX": "bunx",
            "NEXTJS_SCAFFOLD_GENERATOR_VERSION": "15.0.3",
            "NEXTJS_SCAFFOLD_PROJECT_NAME": "web",
            "NEXTJS_SCAFFOLD_TEMP_DIR": "/var/tmp/scaffold",
            "NEXTJS_SCAFFOLD_TIMEOUT": "90",
            "NEXTJS_SCAFFOLD_VERBOSE": "true",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = ScaffoldSettings.from_env()

        assert settings.npx_binary == "bunx"
        assert settings.generator_spec == "create-next-app@15.0.3"
        assert settings.synthetic_project_name == "web"
        assert settings.temp_base_dir == Path("/var/tmp/scaffold")
        assert settings.generator_timeout == 90
        assert settings.verbose is True

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["0", "none", "None"])
    def test_timeout_disabled(self, value):
        with patch.dict(os.environ, {"NEXTJS_SCAFFOLD_TIMEOUT": value}, clear=True):
            assert ScaffoldSettings.from_env().generator_timeout is None

    @pytest.mark.unit
    def test_invalid_timeout_raises(self):
        with patch.dict(os.environ, {"NEXTJS_SCAFFOLD_TIMEOUT": "soon"}, clear=True):
            with pytest.raises(ValueError):
                ScaffoldSettings.from_env()
