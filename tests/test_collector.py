"""Unit tests for tree collection (nextjs_scaffold.collector).

Tests cover:
- Binary extension classification
- Recursive collection with POSIX relative keys
- Text decoding (including invalid UTF-8)
- Unreadable files and symlinked directories
"""

from __future__ import annotations

import base64
import os
import sys
from pathlib import Path

import pytest

from nextjs_scaffold.collector import BINARY_EXTENSIONS, collect_tree, is_binary_path
from nextjs_scaffold.models import FileKind

from conftest import PNG_BYTES


# ---------------------------------------------------------------------------
# is_binary_path
# ---------------------------------------------------------------------------


class TestIsBinaryPath:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "path",
        [
            "public/logo.svg",
            "src/app/favicon.ico",
            "a.png",
            "b.JPG",
            "c.jpeg",
            "d.gif",
            "fonts/e.woff",
            "fonts/e.woff2",
            "fonts/f.TTF",
            "fonts/g.eot",
        ],
    )
    def test_binary(self, path):
        assert is_binary_path(path)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "path",
        ["src/app/page.tsx", "package.json", "README.md", ".gitignore", "next-env.d.ts", "svg"],
    )
    def test_text(self, path):
        assert not is_binary_path(path)

    @pytest.mark.unit
    def test_extension_set(self):
        assert BINARY_EXTENSIONS == {
            "png", "jpg", "jpeg", "gif", "ico", "woff", "woff2", "ttf", "eot", "svg",
        }


# ---------------------------------------------------------------------------
# collect_tree
# ---------------------------------------------------------------------------


class TestCollectTree:
    @pytest.mark.unit
    def test_collects_nested_files(self, tmp_path: Path, make_tree, next_files):
        make_tree(tmp_path, next_files())

        files = collect_tree(tmp_path)

        assert set(files) == set(next_files())
        assert "src/app/page.tsx" in files
        assert all("\\" not in key for key in files)

    @pytest.mark.unit
    def test_text_and_binary_entries(self, tmp_path: Path, make_tree, next_files):
        make_tree(tmp_path, next_files())

        files = collect_tree(tmp_path)

        page = files["src/app/page.tsx"]
        assert page.type is FileKind.TEXT
        assert "export default function Home" in page.content

        favicon = files["src/app/favicon.ico"]
        assert favicon.type is FileKind.BINARY
        assert base64.b64decode(favicon.content) == PNG_BYTES

        assert files["public/next.svg"].type is FileKind.BINARY

    @pytest.mark.unit
    def test_dotfiles_included(self, tmp_path: Path, make_tree):
        make_tree(tmp_path, {".gitignore": "/node_modules\n", ".github/workflows/ci.yml": "on: push\n"})
        assert set(collect_tree(tmp_path)) == {".gitignore", ".github/workflows/ci.yml"}

    @pytest.mark.unit
    def test_empty_directory(self, tmp_path: Path):
        (tmp_path / "empty" / "nested").mkdir(parents=True)
        assert collect_tree(tmp_path) == {}

    @pytest.mark.unit
    def test_missing_root(self, tmp_path: Path):
        assert collect_tree(tmp_path / "nope") == {}

    @pytest.mark.unit
    def test_invalid_utf8_is_replaced(self, tmp_path: Path):
        (tmp_path / "notes.txt").write_bytes(b"ok \xff\xfe end")

        entry = collect_tree(tmp_path)["notes.txt"]

        assert entry.type is FileKind.TEXT
        assert entry.content.startswith("ok ")
        assert entry.content.endswith(" end")
        assert "�" in entry.content

    @pytest.mark.unit
    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    @pytest.mark.skipif(hasattr(os, "geteuid") and os.geteuid() == 0, reason="root ignores modes")
    def test_unreadable_file_is_skipped(self, tmp_path: Path, recorder):
        (tmp_path / "ok.ts").write_text("export {}\n")
        secret = tmp_path / "secret.ts"
        secret.write_text("nope")
        secret.chmod(0)
        try:
            files = collect_tree(tmp_path, recorder)
        finally:
            secret.chmod(0o644)

        assert set(files) == {"ok.ts"}
        skipped = recorder.of("collect.skipped")
        assert skipped[0].data["path"] == "secret.ts"

    @pytest.mark.unit
    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges")
    def test_symlinked_directory_not_followed(self, tmp_path: Path):
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "leak.txt").write_text("x")
        root = tmp_path / "root"
        root.mkdir()
        (root / "page.tsx").write_text("p")
        (root / "linked").symlink_to(outside, target_is_directory=True)

        assert set(collect_tree(root)) == {"page.tsx"}

    @pytest.mark.unit
    def test_keys_are_sorted_depth_first(self, tmp_path: Path, make_tree):
        make_tree(tmp_path, {"b.txt": "b", "a/z.txt": "z", "a/b/c.txt": "c"})
        assert list(collect_tree(tmp_path)) == ["a/b/c.txt", "a/z.txt", "b.txt"]
