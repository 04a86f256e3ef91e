"""Pydantic models describing module test scenarios."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _ScenarioModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class FileContentCheck(_ScenarioModel):
    """Fragments a generated file must (or must not) contain."""

    file: str
    contains: list[str] = Field(default_factory=list)
    not_contains: list[str] = Field(default_factory=list, alias="notContains")


class ScenarioConfig(_ScenarioModel):
    """The module instance a scenario scaffolds."""

    module_id: str = Field(..., alias="moduleId")
    kind: str = "code"
    type: str = "nextjs"
    providers: list[str] = Field(default_factory=list)
    enabled: bool = True
    field_values: dict[str, Any] = Field(default_factory=dict, alias="fieldValues")

    def to_context(self, project_name: str = "test-project") -> dict[str, Any]:
        """Scaffold context equivalent of this config."""
        return {"project": {"name": project_name}, "module": {"fieldValues": dict(self.field_values)}}


class Scenario(_ScenarioModel):
    name: str
    description: str = ""
    config: ScenarioConfig
    expected_files: list[str] = Field(default_factory=list, alias="expectedFiles")
    absent_files: list[str] = Field(default_factory=list, alias="absentFiles")
    file_content_checks: list[FileContentCheck] = Field(
        default_factory=list, alias="fileContentChecks"
    )


class ModuleTestSuite(_ScenarioModel):
    module_id: str = Field(..., alias="moduleId")
    module_name: str = Field(default="", alias="moduleName")
    scenarios: list[Scenario] = Field(default_factory=list)

    def get(self, name: str) -> Scenario:
        for scenario in self.scenarios:
            if scenario.name == name:
                return scenario
        raise KeyError(f"Unknown scenario: {name}")

    def names(self) -> list[str]:
        return [s.name for s in self.scenarios]
