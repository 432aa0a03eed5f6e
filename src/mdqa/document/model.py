# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Markdown document wrapper owning raw lines and the shared syntax tree."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from threading import Lock

from ..errors import DocumentEncodingError, DocumentParseError
from .parser import parse_markdown
from .tree import CODE_BLOCK_KINDS, HEADING_KINDS, NodeId, SyntaxTree

LOGGER = logging.getLogger(__name__)


def split_lines(content: str) -> tuple[str, ...]:
    """Split ``content`` on ``\\n`` boundaries, dropping a trailing ``\\r``.

    A final newline does not produce an extra empty line.

    Args:
        content: Document text.

    Returns:
        tuple[str, ...]: Lines without their terminators.
    """

    if not content:
        return ()
    parts = content.split("\n")
    if content.endswith("\n"):
        parts.pop()
    return tuple(part[:-1] if part.endswith("\r") else part for part in parts)


class Document:
    """Markdown document with a lazily built, shared syntax tree.

    The tree is parsed at most once per document and cached; concurrent first
    access is serialised so only one thread performs the parse.
    """

    __slots__ = ("content", "path", "lines", "_tree", "_lock")

    def __init__(self, content: str | bytes, path: Path | str) -> None:
        """Create a document from ``content`` located at ``path``.

        Args:
            content: Document text, or UTF-8 encoded bytes.
            path: Path used to identify the document in reports.

        Raises:
            DocumentEncodingError: If ``content`` is bytes that are not valid UTF-8.
        """

        self.path = Path(path)
        if isinstance(content, bytes):
            try:
                content = content.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise DocumentEncodingError(self.path, str(exc)) from exc
        self.content: str = content
        self.lines: tuple[str, ...] = split_lines(content)
        self._tree: SyntaxTree | None = None
        self._lock = Lock()

    @classmethod
    def from_path(cls, path: Path) -> Document:
        """Read ``path`` from disk and wrap it in a :class:`Document`.

        Args:
            path: Markdown file to load.

        Returns:
            Document: Loaded document.
        """

        return cls(path.read_bytes(), path)

    def __repr__(self) -> str:
        return f"Document(path={str(self.path)!r}, lines={len(self.lines)})"

    @property
    def has_tree(self) -> bool:
        """Return whether the syntax tree has already been built.

        Returns:
            bool: ``True`` once :meth:`tree` has succeeded.
        """

        return self._tree is not None

    def tree(self) -> SyntaxTree:
        """Return the shared syntax tree, parsing the content on first use.

        Returns:
            SyntaxTree: Cached arena tree for this document.

        Raises:
            DocumentParseError: If the markdown parser fails.
        """

        cached = self._tree
        if cached is not None:
            return cached
        with self._lock:
            if self._tree is None:
                started = time.perf_counter()
                try:
                    self._tree = parse_markdown(self.content.encode("utf-8"))
                except (ValueError, RuntimeError, OSError) as exc:
                    raise DocumentParseError(self.path, str(exc)) from exc
                LOGGER.debug(
                    "parsed %s in %.2fms",
                    self.path,
                    (time.perf_counter() - started) * 1000,
                )
            return self._tree

    def line(self, number: int) -> str:
        """Return the 1-based line ``number`` or an empty string when out of range.

        Args:
            number: 1-based line number.

        Returns:
            str: Line text without terminator.
        """

        if 1 <= number <= len(self.lines):
            return self.lines[number - 1]
        return ""

    def headings(self, tree: SyntaxTree) -> list[NodeId]:
        """Return heading handles (ATX and setext) in document order.

        Args:
            tree: Syntax tree of this document.

        Returns:
            list[NodeId]: Heading handles.
        """

        return list(tree.iter_kind(*HEADING_KINDS))

    @staticmethod
    def heading_level(tree: SyntaxTree, node: NodeId) -> int | None:
        """Return the depth 1-6 of heading ``node``.

        Args:
            tree: Syntax tree owning ``node``.
            node: Node handle.

        Returns:
            int | None: Heading level, or ``None`` when ``node`` is not a heading.
        """

        return tree.node(node).heading_level

    def code_blocks(self, tree: SyntaxTree) -> list[NodeId]:
        """Return fenced and indented code block handles in document order.

        Args:
            tree: Syntax tree of this document.

        Returns:
            list[NodeId]: Code block handles; ``tree.node(h).fenced`` tells them apart.
        """

        return list(tree.iter_kind(*CODE_BLOCK_KINDS))

    def node_position(self, tree: SyntaxTree, node: NodeId) -> tuple[int, int] | None:
        """Map ``node`` back to its 1-based ``(line, column)`` source position.

        Args:
            tree: Syntax tree owning ``node``.
            node: Node handle.

        Returns:
            tuple[int, int] | None: Position, or ``None`` when it falls outside the document.
        """

        data = tree.node(node)
        if data.start_line > max(len(self.lines), 1):
            return None
        return data.start_line, data.start_column

    def node_text(self, tree: SyntaxTree, node: NodeId) -> str:
        """Return the literal text of ``node`` (heading title for headings).

        Args:
            tree: Syntax tree owning ``node``.
            node: Node handle.

        Returns:
            str: Stripped text.
        """

        return tree.content_text(node)


__all__ = ["Document", "split_lines"]
