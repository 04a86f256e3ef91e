"""Shared pytest fixtures for the nextjs-scaffold test suite.

Provides reusable fixtures for:
- A recording reporter to assert on progress events
- Mock asyncio subprocesses with streamed stdout/stderr
- A fake generator runner that writes a create-next-app style tree
- Sample module configurations and scaffold contexts
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Optional, Sequence
from unittest.mock import MagicMock

import pytest

from nextjs_scaffold.config import ScaffoldSettings
from nextjs_scaffold.events import RecordingReporter
from nextjs_scaffold.runner import ProcessResult

# 1x1 transparent PNG
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000001e221bc330000000049454e44ae426082"
)

SVG_TEXT = '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 10 10"><rect/></svg>\n'


def next_app_files(app_router: bool = True) -> dict[str, str | bytes]:
    """Files create-next-app would write (trimmed to what the tests need)."""
    package_json = {
        "name": "project",
        "version": "0.1.0",
        "private": True,
        "scripts": {"dev": "next dev --turbopack", "build": "next build", "start": "next start"},
        "dependencies": {"next": "15.1.0", "react": "^19.0.0", "react-dom": "^19.0.0"},
        "devDependencies": {"typescript": "^5", "tailwindcss": "^3.4.1", "eslint": "^9"},
    }
    files: dict[str, str | bytes] = {
        "package.json": json.dumps(package_json, indent=2) + "\n",
        "tsconfig.json": json.dumps(
            {"compilerOptions": {"strict": True, "paths": {"@/*": ["./src/*"]}}}, indent=2
        ),
        "next.config.ts": (
            'import type { NextConfig } from "next";\n\n'
            "const nextConfig: NextConfig = {};\n\nexport default nextConfig;\n"
        ),
        "README.md": "This is a [Next.js](https://nextjs.org) project.\n",
        ".gitignore": "/node_modules\n/.next/\n",
        "public/next.svg": SVG_TEXT,
        "public/vercel.svg": SVG_TEXT,
    }
    if app_router:
        files["src/app/layout.tsx"] = "export default function RootLayout() { return null; }\n"
        files["src/app/page.tsx"] = "export default function Home() { return <main />; }\n"
        files["src/app/favicon.ico"] = PNG_BYTES
    else:
        files["src/pages/index.tsx"] = "export default function Home() { return <main />; }\n"
        files["src/pages/_app.tsx"] = "export default function App() { return null; }\n"
    return files


def write_tree(root: Path, files: dict[str, str | bytes]) -> Path:
    for rel_path, content in files.items():
        target = root / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            target.write_bytes(content)
        else:
            target.write_text(content, encoding="utf-8")
    return root


class FakeGeneratorRunner:
    """Stands in for ``ProcessRunner``: writes a Next.js tree instead of running npx.

    The generated project is written to ``<cwd>/<args[1]>`` the way
    create-next-app does.  Set ``error`` to make every run raise it.
    """

    def __init__(
        self,
        files: Optional[dict[str, str | bytes]] = None,
        error: Optional[BaseException] = None,
    ) -> None:
        self.files = files
        self.error = error
        self.calls: list[dict[str, Any]] = []

    @property
    def last_cwd(self) -> Path:
        return Path(self.calls[-1]["cwd"])

    @property
    def last_args(self) -> list[str]:
        return self.calls[-1]["args"]

    async def run(
        self,
        command: str,
        args: Sequence[str],
        cwd: str | Path,
        description: str = "",
    ) -> ProcessResult:
        args = list(args)
        self.calls.append(
            {"command": command, "args": args, "cwd": str(cwd), "description": description}
        )
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        files = self.files if self.files is not None else next_app_files("--app" in args)
        write_tree(Path(cwd) / args[1], files)
        return ProcessResult(command=command, args=args)


class FakeStream:
    """Minimal ``asyncio.StreamReader`` replacement yielding fixed chunks."""

    def __init__(self, data: bytes, chunk_size: int = 8) -> None:
        self._chunks = [data[i : i + chunk_size] for i in range(0, len(data), chunk_size)]

    async def read(self, n: int = -1) -> bytes:
        await asyncio.sleep(0)
        if not self._chunks:
            return b""
        return self._chunks.pop(0)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def recorder() -> RecordingReporter:
    """Reporter that keeps every emitted event."""
    return RecordingReporter()


@pytest.fixture
def settings(tmp_path: Path) -> ScaffoldSettings:
    """Settings whose working directories live under the test's tmp_path."""
    return ScaffoldSettings(temp_base_dir=tmp_path / "work", generator_timeout=30)


@pytest.fixture
def fake_generator():
    """Factory for ``FakeGeneratorRunner`` instances.

    Usage:
        def test_scaffold(fake_generator):
            runner = fake_generator()
            runner = fake_generator(error=ProcessSpawnError("npx", [], "not found"))
    """
    return FakeGeneratorRunner


@pytest.fixture
def make_tree():
    """Write ``{relative_path: content}`` under a root directory."""
    return write_tree


@pytest.fixture
def next_files():
    return next_app_files


@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess with streamed output.

    Returns a factory that creates mock processes with configurable stdout,
    stderr, and return codes.  With ``hang=True`` the process never exits on
    its own; ``kill()`` sets the return code to -9.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """

    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
        hang: bool = False,
    ) -> MagicMock:
        proc = MagicMock()
        proc.pid = 99999
        proc.returncode = None
        proc.stdout = FakeStream(stdout.encode("utf-8"))
        proc.stderr = FakeStream(stderr.encode("utf-8"))

        def kill() -> None:
            proc.returncode = -9

        async def wait() -> int:
            if hang:
                while proc.returncode is None:
                    await asyncio.sleep(0.01)
            elif proc.returncode is None:
                proc.returncode = returncode
            return proc.returncode

        proc.kill = MagicMock(side_effect=kill)
        proc.wait = wait
        return proc

    return factory


@pytest.fixture
def module_config() -> dict[str, Any]:
    """A meta.json-style module configuration."""
    return {
        "id": "code-nextjs",
        "name": "Next.js Frontend",
        "dependencies": {
            "npm": {
                "dependencies": {
                    "lucide-react": "^0.460.0",
                    "clsx": "^2.1.1",
                    "tailwind-merge": "^2.5.4",
                    "react": "^19.0.1",
                },
                "devDependencies": {"prettier": "^3.3.3"},
            }
        },
        "generation": {"files": {"remove": ["README.md", "public/vercel.svg"]}},
    }


@pytest.fixture
def scaffold_context() -> dict[str, Any]:
    """A scaffold context for an App Router project."""
    return {
        "project": {"name": "acme-shop"},
        "module": {"fieldValues": {"nextjsVersion": "15", "renderingMode": "static"}},
    }
