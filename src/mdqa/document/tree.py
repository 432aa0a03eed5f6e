# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Arena representation of a parsed markdown syntax tree.

Nodes live in a flat tuple owned by :class:`SyntaxTree` and are addressed by
integer :data:`NodeId` handles allocated in document (pre-)order. Rules only
ever hold handles, so nothing references parser objects once the arena has
been built.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Final, TypeAlias

NodeId: TypeAlias = int

ATX_HEADING: Final[str] = "atx_heading"
SETEXT_HEADING: Final[str] = "setext_heading"
FENCED_CODE_BLOCK: Final[str] = "fenced_code_block"
INDENTED_CODE_BLOCK: Final[str] = "indented_code_block"

HEADING_KINDS: Final[frozenset[str]] = frozenset({ATX_HEADING, SETEXT_HEADING})
CODE_BLOCK_KINDS: Final[frozenset[str]] = frozenset({FENCED_CODE_BLOCK, INDENTED_CODE_BLOCK})


@dataclass(frozen=True, slots=True)
class NodeData:
    """Immutable record describing one node of the syntax tree.

    Attributes:
        kind: Grammar node type (``atx_heading``, ``paragraph`` ...).
        start_line: 1-based line on which the node starts.
        start_column: 1-based character column on which the node starts.
        end_line: 1-based line on which the node ends (exclusive end point).
        end_column: 1-based character column of the exclusive end point.
        start_byte: Byte offset of the node start in the UTF-8 source.
        end_byte: Byte offset of the node end in the UTF-8 source.
        parent: Handle of the parent node, ``None`` for the root.
        children: Handles of the direct children in document order.
        subtree_end: One past the largest handle contained in this subtree.
        heading_level: Depth 1-6 for heading nodes, otherwise ``None``.
        fenced: ``True`` for fenced code blocks.
        info: Trimmed info string of a fenced code block.
        content_span: Byte span of the heading text for heading nodes.
    """

    kind: str
    start_line: int
    start_column: int
    end_line: int
    end_column: int
    start_byte: int
    end_byte: int
    parent: NodeId | None
    children: tuple[NodeId, ...]
    subtree_end: NodeId
    heading_level: int | None = None
    fenced: bool = False
    info: str = ""
    content_span: tuple[int, int] | None = None

    @property
    def is_heading(self) -> bool:
        """Return whether the node is an ATX or setext heading.

        Returns:
            bool: ``True`` for heading nodes.
        """

        return self.kind in HEADING_KINDS

    @property
    def is_code_block(self) -> bool:
        """Return whether the node is a fenced or indented code block.

        Returns:
            bool: ``True`` for code block nodes.
        """

        return self.kind in CODE_BLOCK_KINDS


class SyntaxTree:
    """Read-only arena of :class:`NodeData` records sharing one source buffer."""

    __slots__ = ("_nodes", "_source")

    def __init__(self, nodes: Sequence[NodeData], source: bytes) -> None:
        """Wrap ``nodes`` allocated in pre-order over ``source``.

        Args:
            nodes: Node records; index ``0`` is the document root.
            source: UTF-8 encoded document content the offsets refer to.

        Raises:
            ValueError: If ``nodes`` is empty.
        """

        if not nodes:
            raise ValueError("a syntax tree requires at least a root node")
        self._nodes: tuple[NodeData, ...] = tuple(nodes)
        self._source = source

    @property
    def root(self) -> NodeId:
        """Return the handle of the document root.

        Returns:
            NodeId: Always ``0``.
        """

        return 0

    @property
    def source(self) -> bytes:
        """Return the UTF-8 source buffer the tree was built from.

        Returns:
            bytes: Encoded document content.
        """

        return self._source

    def __len__(self) -> int:
        return len(self._nodes)

    def node(self, node_id: NodeId) -> NodeData:
        """Return the record addressed by ``node_id``.

        Args:
            node_id: Handle returned by another tree query.

        Returns:
            NodeData: Node record.

        Raises:
            IndexError: If ``node_id`` does not belong to this tree.
        """

        if node_id < 0:
            raise IndexError(f"invalid node handle {node_id}")
        return self._nodes[node_id]

    def kind(self, node_id: NodeId) -> str:
        return self.node(node_id).kind

    def parent(self, node_id: NodeId) -> NodeId | None:
        return self.node(node_id).parent

    def children(self, node_id: NodeId) -> tuple[NodeId, ...]:
        return self.node(node_id).children

    def descendants(self, node_id: NodeId | None = None) -> range:
        """Return the handles below ``node_id`` in document order.

        Handles are allocated in pre-order, so a subtree is a contiguous range.

        Args:
            node_id: Subtree root; defaults to the document root.

        Returns:
            range: Handles of every descendant, excluding ``node_id`` itself.
        """

        start = self.root if node_id is None else node_id
        return range(start + 1, self.node(start).subtree_end)

    def iter_kind(self, *kinds: str, within: NodeId | None = None) -> Iterator[NodeId]:
        """Yield handles of nodes whose kind is one of ``kinds``.

        Args:
            *kinds: Grammar node types to select.
            within: Optional subtree root restricting the search.

        Yields:
            NodeId: Matching handles in document order.
        """

        wanted = frozenset(kinds)
        for node_id in self.descendants(within):
            if self._nodes[node_id].kind in wanted:
                yield node_id

    def text(self, node_id: NodeId) -> str:
        """Return the literal source text covered by ``node_id``.

        Args:
            node_id: Node handle.

        Returns:
            str: Decoded source slice.
        """

        data = self.node(node_id)
        return self._source[data.start_byte : data.end_byte].decode("utf-8", errors="replace")

    def content_text(self, node_id: NodeId) -> str:
        """Return the textual content of ``node_id``.

        Headings yield their title without markers or underline; any other node
        yields its literal source text.

        Args:
            node_id: Node handle.

        Returns:
            str: Stripped text content.
        """

        data = self.node(node_id)
        if data.content_span is None:
            return self.text(node_id).strip()
        start, end = data.content_span
        return self._source[start:end].decode("utf-8", errors="replace").strip()


__all__ = [
    "ATX_HEADING",
    "CODE_BLOCK_KINDS",
    "FENCED_CODE_BLOCK",
    "HEADING_KINDS",
    "INDENTED_CODE_BLOCK",
    "NodeData",
    "NodeId",
    "SETEXT_HEADING",
    "SyntaxTree",
]
