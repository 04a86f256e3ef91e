"""Scenario-based assertions over generated files.

Quick usage::

    from nextjs_scaffold.harness import NEXTJS_SUITE, verify_scenario

    report = verify_scenario(file_map, NEXTJS_SUITE.get("nextjs-15-static"))
    assert report.passed, report.summary()
"""

from .checks import (
    CheckFailure,
    FailureKind,
    ScenarioReport,
    mount_file_map,
    verify_scenario,
    verify_suite,
)
from .models import FileContentCheck, ModuleTestSuite, Scenario, ScenarioConfig
from .scenarios import NEXTJS_SUITE, SSR_HEALTH_ROUTE, STATIC_EXPORT_MARKER

__all__ = [
    "CheckFailure",
    "FailureKind",
    "FileContentCheck",
    "ModuleTestSuite",
    "NEXTJS_SUITE",
    "SSR_HEALTH_ROUTE",
    "STATIC_EXPORT_MARKER",
    "Scenario",
    "ScenarioConfig",
    "ScenarioReport",
    "mount_file_map",
    "verify_scenario",
    "verify_suite",
]
