"""Command-line entry point.

Usage::

    python -m nextjs_scaffold generate --module-config meta.json -o ./frontend
    python -m nextjs_scaffold generate --field routerType=pages --json files.json
    python -m nextjs_scaffold verify --dir ./assembled --scenario nextjs-15-static
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from .collector import collect_tree
from .config import ScaffoldSettings
from .errors import ScaffoldError
from .events import ConsoleReporter
from .harness import NEXTJS_SUITE, mount_file_map, verify_suite
from .models import ModuleConfig, ScaffoldContext, dump_file_map, write_file_map
from .scaffolder import NextjsScaffolder
from .utils import console, load_structured, print_error, print_success, print_summary_table


def _parse_fields(pairs: Sequence[str]) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Invalid --field value (expected key=value): {pair}")
        fields[key.strip()] = value
    return fields


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nextjs-scaffold",
        description="Scaffold a configured Next.js frontend with create-next-app",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Run the scaffold pipeline")
    gen.add_argument("--module-config", "-m", default=None, help="Module meta.json / YAML file")
    gen.add_argument(
        "--field", "-f", action="append", default=[],
        help="Module field value as key=value (repeatable), e.g. routerType=pages",
    )
    gen.add_argument("--project-name", default="", help="Project name (informational)")
    target = gen.add_mutually_exclusive_group()
    target.add_argument("--output", "-o", default=None, help="Write the files under this directory")
    target.add_argument("--json", default=None, help="Write the FileMap as JSON to this file")
    gen.add_argument("--timeout", type=int, default=None, help="Generator timeout in seconds")
    gen.add_argument("--verbose", "-v", action="store_true")

    ver = sub.add_parser("verify", help="Check a generated tree against test scenarios")
    ver.add_argument("--dir", "-d", required=True, help="Directory to collect and check")
    ver.add_argument(
        "--scenario", "-s", action="append", default=[],
        help=f"Scenario name (repeatable; default: all). Known: {', '.join(NEXTJS_SUITE.names())}",
    )
    ver.add_argument(
        "--mount", default="",
        help="Prefix to place collected paths under, e.g. 'frontend/' for raw module output",
    )
    return parser


def _cmd_generate(args: argparse.Namespace) -> int:
    settings = ScaffoldSettings.from_env()
    if args.timeout is not None:
        settings.generator_timeout = args.timeout if args.timeout > 0 else None
    settings.verbose = settings.verbose or args.verbose

    raw_config = load_structured(args.module_config) if args.module_config else {}
    module_config = ModuleConfig.model_validate(raw_config)
    context = ScaffoldContext.model_validate(
        {
            "project": {"name": args.project_name},
            "module": {"fieldValues": _parse_fields(args.field)},
        }
    )

    scaffolder = NextjsScaffolder(
        settings=settings, reporter=ConsoleReporter(verbose=settings.verbose)
    )
    try:
        files = asyncio.run(scaffolder.scaffold(module_config, context))
    except ScaffoldError as exc:
        print_error(f"Scaffold failed: {exc}")
        return 1

    if args.json:
        destination = dump_file_map(files, args.json)
    else:
        destination = Path(args.output or "./output")
        write_file_map(files, destination)

    print_summary_table(
        {
            "Files": len(files),
            "Router": "app" if context.use_app_router else "pages",
            "Next.js version": context.nextjs_version,
            "Written to": destination,
        },
        title="Scaffold",
    )
    return 0


def _cmd_verify(args: argparse.Namespace) -> int:
    root = Path(args.dir)
    if not root.is_dir():
        print_error(f"Directory not found: {root}")
        return 1

    reporter = ConsoleReporter()
    file_map = mount_file_map(collect_tree(root, reporter), args.mount)
    try:
        reports = verify_suite(NEXTJS_SUITE, lambda _scenario: file_map, args.scenario or None)
    except KeyError as exc:
        print_error(str(exc.args[0]))
        return 1

    for scenario_report in reports:
        console.print(scenario_report.summary())

    failed = [r for r in reports if not r.passed]
    if failed:
        print_error(f"{len(failed)} of {len(reports)} scenarios failed")
        return 1
    print_success(f"All {len(reports)} scenarios passed")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entry point for ``python -m nextjs_scaffold``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "generate":
            code = _cmd_generate(args)
        else:
            code = _cmd_verify(args)
    except (OSError, ValueError) as exc:
        print_error(f"Error: {exc}")
        code = 1

    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
