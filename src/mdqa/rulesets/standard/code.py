# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Code block rules (MD040)."""

from __future__ import annotations

from ...document import Document, SyntaxTree
from ...rules import RuleCategory, RuleMetadata, TreeRule
from ...severity import Severity
from ...violation import Violation


class FencedCodeLanguage(TreeRule):
    """Fenced code blocks should declare a language."""

    rule_id = "MD040"
    name = "fenced-code-language"
    description = "Fenced code blocks should have a language specified"
    metadata = RuleMetadata.stable(RuleCategory.CONTENT, introduced_in="markdownlint v0.1.0")

    def check(self, document: Document, tree: SyntaxTree) -> list[Violation]:
        violations: list[Violation] = []
        for node in document.code_blocks(tree):
            data = tree.node(node)
            if not data.fenced or data.info:
                continue
            position = document.node_position(tree, node)
            if position is None:
                continue
            violations.append(
                self.create_violation(
                    "Fenced code block is missing language specification",
                    *position,
                    Severity.WARNING,
                )
            )
        return violations


__all__ = ["FencedCodeLanguage"]
