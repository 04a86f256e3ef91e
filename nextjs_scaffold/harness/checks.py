"""Scenario assertions against generated FileMaps.

A scenario passes when every expected file is present, every absent file
is missing, and each content check finds all of its ``contains`` fragments
and none of its ``not_contains`` fragments.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Iterable

from pydantic import BaseModel, Field, computed_field
from rich.markup import escape

from ..models import FileMap
from .models import ModuleTestSuite, Scenario


class FailureKind(str, Enum):
    MISSING_FILE = "missing_file"
    UNEXPECTED_FILE = "unexpected_file"
    MISSING_FRAGMENT = "missing_fragment"
    FORBIDDEN_FRAGMENT = "forbidden_fragment"


class CheckFailure(BaseModel):
    file: str
    kind: FailureKind
    fragment: str = ""

    def describe(self) -> str:
        if self.kind is FailureKind.MISSING_FILE:
            return f"{self.file}: expected file is missing"
        if self.kind is FailureKind.UNEXPECTED_FILE:
            return f"{self.file}: file should not be generated"
        if self.kind is FailureKind.MISSING_FRAGMENT:
            return f"{self.file}: does not contain {self.fragment!r}"
        return f"{self.file}: must not contain {self.fragment!r}"


class ScenarioReport(BaseModel):
    """Outcome of checking one scenario."""

    scenario: str
    checked_files: int = Field(default=0, ge=0)
    failures: list[CheckFailure] = Field(default_factory=list)

    @computed_field  # type: ignore[misc]
    @property
    def passed(self) -> bool:
        return not self.failures

    def summary(self) -> str:
        status = "[green]PASSED[/green]" if self.passed else "[red]FAILED[/red]"
        lines = [f"{self.scenario}: {status} ({self.checked_files} files checked)"]
        lines.extend(f"  - {escape(f.describe())}" for f in self.failures)
        return "\n".join(lines)


def mount_file_map(file_map: FileMap, prefix: str) -> FileMap:
    """Return *file_map* with every key placed under *prefix* (e.g. ``frontend/``)."""
    prefix = prefix.strip("/")
    if not prefix:
        return dict(file_map)
    return {f"{prefix}/{path}": entry for path, entry in file_map.items()}


def verify_scenario(file_map: FileMap, scenario: Scenario) -> ScenarioReport:
    """Check *file_map* against *scenario*."""
    failures: list[CheckFailure] = []

    for path in scenario.expected_files:
        if path not in file_map:
            failures.append(CheckFailure(file=path, kind=FailureKind.MISSING_FILE))

    for path in scenario.absent_files:
        if path in file_map:
            failures.append(CheckFailure(file=path, kind=FailureKind.UNEXPECTED_FILE))

    checked = 0
    for check in scenario.file_content_checks:
        entry = file_map.get(check.file)
        if entry is None:
            if check.file not in scenario.expected_files:
                failures.append(CheckFailure(file=check.file, kind=FailureKind.MISSING_FILE))
            continue
        checked += 1
        content = entry.text()
        for fragment in check.contains:
            if fragment not in content:
                failures.append(
                    CheckFailure(
                        file=check.file, kind=FailureKind.MISSING_FRAGMENT, fragment=fragment
                    )
                )
        for fragment in check.not_contains:
            if fragment in content:
                failures.append(
                    CheckFailure(
                        file=check.file, kind=FailureKind.FORBIDDEN_FRAGMENT, fragment=fragment
                    )
                )

    return ScenarioReport(scenario=scenario.name, checked_files=checked, failures=failures)


def verify_suite(
    suite: ModuleTestSuite,
    file_map_for: Callable[[Scenario], FileMap],
    names: Iterable[str] | None = None,
) -> list[ScenarioReport]:
    """Run every (or each named) scenario of *suite*.

    *file_map_for* produces the FileMap to check for a given scenario.
    """
    selected = [suite.get(n) for n in names] if names else list(suite.scenarios)
    return [verify_scenario(file_map_for(s), s) for s in selected]
