# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Document model and the arena-backed markdown syntax tree."""

from __future__ import annotations

from .model import Document, split_lines
from .tree import (
    ATX_HEADING,
    FENCED_CODE_BLOCK,
    INDENTED_CODE_BLOCK,
    SETEXT_HEADING,
    NodeData,
    NodeId,
    SyntaxTree,
)

__all__ = [
    "ATX_HEADING",
    "Document",
    "FENCED_CODE_BLOCK",
    "INDENTED_CODE_BLOCK",
    "NodeData",
    "NodeId",
    "SETEXT_HEADING",
    "SyntaxTree",
    "split_lines",
]
