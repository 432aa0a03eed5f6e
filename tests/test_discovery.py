# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for markdown file discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from mdqa.cli.discovery import collect_markdown_files


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("# Title\n", encoding="utf-8")
    return path


def test_directories_are_walked_in_sorted_order(tmp_path: Path) -> None:
    _touch(tmp_path / "b.md")
    _touch(tmp_path / "a.markdown")
    _touch(tmp_path / "guide" / "intro.md")
    _touch(tmp_path / "notes.txt")

    found = collect_markdown_files([tmp_path])

    assert found == [tmp_path / "a.markdown", tmp_path / "b.md", tmp_path / "guide" / "intro.md"]


def test_tooling_directories_are_skipped(tmp_path: Path) -> None:
    _touch(tmp_path / "docs" / "index.md")
    _touch(tmp_path / "node_modules" / "pkg" / "README.md")
    _touch(tmp_path / ".git" / "notes.md")

    assert collect_markdown_files([tmp_path]) == [tmp_path / "docs" / "index.md"]


def test_explicit_files_are_kept_and_deduplicated(tmp_path: Path) -> None:
    text = _touch(tmp_path / "CHANGES.txt")
    doc = _touch(tmp_path / "doc.md")

    found = collect_markdown_files([text, doc, tmp_path])

    assert found == [text, doc]


def test_missing_path_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="missing.md"):
        collect_markdown_files([tmp_path / "missing.md"])
