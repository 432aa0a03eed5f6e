# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Markdown file discovery for command-line runs."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Final

MARKDOWN_SUFFIXES: Final[frozenset[str]] = frozenset({".md", ".markdown"})

ALWAYS_EXCLUDE_DIRS: Final[frozenset[str]] = frozenset(
    {
        ".git",
        ".hg",
        ".venv",
        "venv",
        "node_modules",
        "__pycache__",
        ".pytest_cache",
        ".tox",
        ".cache",
        "target",
    }
)


def _walk(base: Path) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(base):
        dirnames[:] = sorted(name for name in dirnames if name not in ALWAYS_EXCLUDE_DIRS)
        current = Path(dirpath)
        for filename in sorted(filenames):
            candidate = current / filename
            if candidate.suffix.lower() in MARKDOWN_SUFFIXES:
                yield candidate


def collect_markdown_files(paths: Iterable[Path]) -> list[Path]:
    """Expand ``paths`` into the markdown files they name or contain.

    Files given explicitly are kept whatever their suffix. Directories are
    walked recursively, skipping version-control and tooling directories.
    The result is de-duplicated and keeps first-seen order.

    Args:
        paths: Files or directories supplied on the command line.

    Returns:
        list[Path]: Markdown files in a stable order.

    Raises:
        FileNotFoundError: If an entry does not exist.
    """

    found: dict[Path, None] = {}
    for entry in paths:
        if entry.is_file():
            found.setdefault(entry, None)
        elif entry.is_dir():
            for candidate in _walk(entry):
                found.setdefault(candidate, None)
        else:
            raise FileNotFoundError(f"No such file or directory: {entry}")
    return list(found)


__all__ = ["ALWAYS_EXCLUDE_DIRS", "MARKDOWN_SUFFIXES", "collect_markdown_files"]
