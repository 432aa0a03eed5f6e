# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tree-sitter backed markdown parsing into the :mod:`mdqa.document.tree` arena."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Final, cast

import tree_sitter_markdown
from tree_sitter import Language, Node, Parser, Tree

from .tree import (
    ATX_HEADING,
    FENCED_CODE_BLOCK,
    SETEXT_HEADING,
    NodeData,
    NodeId,
    SyntaxTree,
)

LOGGER = logging.getLogger(__name__)

_ATX_MARKER_PATTERN: Final[re.Pattern[str]] = re.compile(r"^atx_h([1-6])_marker$")
_SETEXT_LEVELS: Final[dict[str, int]] = {
    "setext_h1_underline": 1,
    "setext_h2_underline": 2,
}
_INFO_STRING: Final[str] = "info_string"
_ATX_CONTENT: Final[str] = "inline"
_SETEXT_CONTENT: Final[str] = "paragraph"


@lru_cache(maxsize=1)
def load_markdown_language() -> Language:
    """Return the compiled Tree-sitter language for markdown block structure.

    Returns:
        Language: Tree-sitter language handle for the markdown block grammar.
    """

    return Language(tree_sitter_markdown.language())


def build_markdown_parser() -> Parser:
    """Return a new Tree-sitter parser configured for markdown.

    Parsers are not shared between threads, so each parse builds its own.

    Returns:
        Parser: Parser instance ready to parse markdown source.
    """

    parser = Parser()
    language = load_markdown_language()
    if hasattr(parser, "set_language"):
        setter = cast(Callable[[Language], None], getattr(parser, "set_language"))
        setter(language)
    else:
        setattr(parser, "language", language)
    return parser


def parse_markdown(source: bytes) -> SyntaxTree:
    """Parse ``source`` and return the resulting arena tree.

    Args:
        source: UTF-8 encoded markdown content.

    Returns:
        SyntaxTree: Arena holding one record per named grammar node.

    Raises:
        ValueError: If Tree-sitter does not produce a tree.
    """

    tree = build_markdown_parser().parse(source)
    if tree is None:
        raise ValueError("tree-sitter returned no tree")
    return build_syntax_tree(tree, source)


class _LineIndex:
    """Translate Tree-sitter byte columns into 1-based character columns."""

    __slots__ = ("_source", "_starts")

    def __init__(self, source: bytes) -> None:
        self._source = source
        starts = [0]
        position = source.find(b"\n")
        while position != -1:
            starts.append(position + 1)
            position = source.find(b"\n", position + 1)
        self._starts = starts

    def column(self, row: int, byte_column: int) -> int:
        if byte_column == 0 or row >= len(self._starts):
            return byte_column + 1
        start = self._starts[row]
        prefix = self._source[start : start + byte_column]
        return len(prefix.decode("utf-8", errors="ignore")) + 1


@dataclass(slots=True)
class _PendingNode:
    """Mutable node record used while the arena is being allocated."""

    node: Node
    parent: NodeId | None
    children: list[NodeId] = field(default_factory=list)


def build_syntax_tree(tree: Tree, source: bytes) -> SyntaxTree:
    """Flatten a Tree-sitter ``tree`` into an arena of :class:`NodeData` records.

    Args:
        tree: Tree produced by the markdown grammar.
        source: Source buffer ``tree`` was parsed from.

    Returns:
        SyntaxTree: Arena with handles allocated in document order.
    """

    pending: list[_PendingNode] = []
    stack: list[tuple[Node, NodeId | None]] = [(tree.root_node, None)]
    while stack:
        node, parent = stack.pop()
        node_id = len(pending)
        pending.append(_PendingNode(node=node, parent=parent))
        if parent is not None:
            pending[parent].children.append(node_id)
        named = [child for child in node.children if child.is_named]
        stack.extend((child, node_id) for child in reversed(named))

    subtree_end = [0] * len(pending)
    for node_id in range(len(pending) - 1, -1, -1):
        children = pending[node_id].children
        subtree_end[node_id] = subtree_end[children[-1]] if children else node_id + 1

    index = _LineIndex(source)
    records = [
        _freeze(entry, subtree_end=subtree_end[node_id], index=index, source=source)
        for node_id, entry in enumerate(pending)
    ]
    LOGGER.debug("built syntax tree with %d nodes", len(records))
    return SyntaxTree(records, source)


def _freeze(entry: _PendingNode, *, subtree_end: NodeId, index: _LineIndex, source: bytes) -> NodeData:
    """Return the immutable record for ``entry``.

    Args:
        entry: Pending node collected during traversal.
        subtree_end: One past the last handle in the node's subtree.
        index: Line index used for column conversion.
        source: Source buffer used to decode info strings.

    Returns:
        NodeData: Frozen record.
    """

    node = entry.node
    start_row, start_col = node.start_point[0], node.start_point[1]
    end_row, end_col = node.end_point[0], node.end_point[1]
    level, content_span = _heading_attributes(node)
    fenced = node.type == FENCED_CODE_BLOCK
    return NodeData(
        kind=node.type,
        start_line=start_row + 1,
        start_column=index.column(start_row, start_col),
        end_line=end_row + 1,
        end_column=index.column(end_row, end_col),
        start_byte=node.start_byte,
        end_byte=node.end_byte,
        parent=entry.parent,
        children=tuple(entry.children),
        subtree_end=subtree_end,
        heading_level=level,
        fenced=fenced,
        info=_info_string(node, source) if fenced else "",
        content_span=content_span,
    )


def _heading_attributes(node: Node) -> tuple[int | None, tuple[int, int] | None]:
    """Return the heading level and content byte span of ``node``.

    Args:
        node: Tree-sitter node.

    Returns:
        tuple[int | None, tuple[int, int] | None]: Level and span, both ``None``
        when ``node`` is not a heading.
    """

    if node.type == ATX_HEADING:
        level: int | None = None
        span: tuple[int, int] | None = None
        for child in node.children:
            match = _ATX_MARKER_PATTERN.match(child.type)
            if match is not None:
                level = int(match.group(1))
                span = (child.end_byte, child.end_byte)
            elif child.type == _ATX_CONTENT:
                span = (child.start_byte, child.end_byte)
        return level, span
    if node.type == SETEXT_HEADING:
        level = None
        span = None
        for child in node.children:
            if child.type in _SETEXT_LEVELS:
                level = _SETEXT_LEVELS[child.type]
            elif child.type == _SETEXT_CONTENT:
                span = (child.start_byte, child.end_byte)
        return level, span
    return None, None


def _info_string(node: Node, source: bytes) -> str:
    for child in node.children:
        if child.type == _INFO_STRING:
            return source[child.start_byte : child.end_byte].decode("utf-8", errors="replace").strip()
    return ""


__all__ = ["build_markdown_parser", "build_syntax_tree", "load_markdown_language", "parse_markdown"]
