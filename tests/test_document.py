# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the document model and its shared syntax tree."""

from __future__ import annotations

from pathlib import Path

import pytest

from mdqa.document import ATX_HEADING, SETEXT_HEADING, Document, split_lines
from mdqa.errors import DocumentEncodingError

SAMPLE = """# Title

Intro paragraph.

Section
-------

```python
print("hi")
```

    indented code

### Deep
"""


def test_split_lines_drops_final_terminator_and_carriage_returns() -> None:
    assert split_lines("") == ()
    assert split_lines("a\nb\n") == ("a", "b")
    assert split_lines("a\r\nb") == ("a", "b")
    assert split_lines("a\n\n") == ("a", "")


def test_document_decodes_utf8_bytes() -> None:
    document = Document("# Café\n".encode("utf-8"), "cafe.md")
    assert document.lines == ("# Café",)
    assert document.path == Path("cafe.md")


def test_document_rejects_invalid_utf8() -> None:
    with pytest.raises(DocumentEncodingError) as excinfo:
        Document(b"\xff\xfe broken", "bad.md")
    assert excinfo.value.path == Path("bad.md")


def test_tree_is_built_lazily_and_shared() -> None:
    document = Document(SAMPLE, "sample.md")
    assert not document.has_tree
    first = document.tree()
    assert document.has_tree
    assert document.tree() is first


def test_headings_report_levels_for_atx_and_setext() -> None:
    document = Document(SAMPLE, "sample.md")
    tree = document.tree()
    headings = document.headings(tree)

    assert [tree.kind(node) for node in headings] == [ATX_HEADING, SETEXT_HEADING, ATX_HEADING]
    assert [document.heading_level(tree, node) for node in headings] == [1, 2, 3]
    assert [document.node_text(tree, node) for node in headings] == ["Title", "Section", "Deep"]
    assert [document.node_position(tree, node) for node in headings] == [(1, 1), (5, 1), (14, 1)]


def test_code_blocks_distinguish_fenced_from_indented() -> None:
    document = Document(SAMPLE, "sample.md")
    tree = document.tree()
    blocks = document.code_blocks(tree)

    assert [tree.node(node).fenced for node in blocks] == [True, False]
    assert tree.node(blocks[0]).info == "python"
    assert document.node_position(tree, blocks[0]) == (8, 1)


def test_heading_level_is_none_for_other_nodes() -> None:
    document = Document(SAMPLE, "sample.md")
    tree = document.tree()
    block = document.code_blocks(tree)[0]
    assert document.heading_level(tree, block) is None


def test_line_lookup_is_one_based_and_bounded() -> None:
    document = Document("first\nsecond\n", "lines.md")
    assert document.line(1) == "first"
    assert document.line(2) == "second"
    assert document.line(0) == ""
    assert document.line(3) == ""


def test_from_path_reads_file(tmp_path: Path) -> None:
    target = tmp_path / "doc.md"
    target.write_text("# Hello\n", encoding="utf-8")
    document = Document.from_path(target)
    assert document.content == "# Hello\n"
    assert document.path == target
