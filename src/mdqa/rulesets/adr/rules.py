# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Per-document ADR rules (ADR001, ADR002)."""

from __future__ import annotations

from ...document import Document, SyntaxTree
from ...rules import RuleCategory, RuleMetadata, TreeRule
from ...severity import Severity
from ...violation import Violation
from ..common import body_headings
from .format import AdrFormat, detect_format, is_adr_document, is_nygard_title, parse_frontmatter

STATUS_HEADING = "status"


class AdrTitleFormat(TreeRule):
    """ADRs need an H1 title; Nygard titles follow ``# N. Title``."""

    rule_id = "ADR001"
    name = "adr-title-format"
    description = "ADR title should follow the appropriate format for its type"
    metadata = RuleMetadata.stable(RuleCategory.ADR, introduced_in="mdbook-lint v0.14.0")

    def check(self, document: Document, tree: SyntaxTree) -> list[Violation]:
        if not is_adr_document(document):
            return []
        adr_format = detect_format(document.content)
        title = next(
            (node for node in body_headings(document, tree) if document.heading_level(tree, node) == 1),
            None,
        )
        if title is None:
            expectation = (
                "a title like '# 1. Record architecture decisions'"
                if adr_format is AdrFormat.NYGARD
                else "an H1 heading"
            )
            return [
                self.create_violation(
                    f"ADR is missing a title (H1 heading). {adr_format.label} format ADRs should have {expectation}",
                    1,
                    1,
                    Severity.ERROR,
                )
            ]
        if adr_format is not AdrFormat.NYGARD:
            return []
        line = tree.node(title).start_line
        source = document.line(line)
        if is_nygard_title(source):
            return []
        return [
            self.create_violation(
                "Nygard format ADR title should follow pattern '# N. Title' "
                f"(e.g., '# 1. Record architecture decisions'), found: '{source.strip()}'",
                line,
                1,
                Severity.ERROR,
            )
        ]


class AdrRequiredStatus(TreeRule):
    """ADRs must declare a status in the place their layout expects."""

    rule_id = "ADR002"
    name = "adr-required-status"
    description = "ADR must have a status defined"
    metadata = RuleMetadata.stable(RuleCategory.ADR, introduced_in="mdbook-lint v0.14.0")

    def check(self, document: Document, tree: SyntaxTree) -> list[Violation]:
        if not is_adr_document(document):
            return []
        if detect_format(document.content) is AdrFormat.MADR:
            return self._check_frontmatter(document)
        for node in body_headings(document, tree):
            if document.heading_level(tree, node) == 2 and document.node_text(tree, node).lower() == STATUS_HEADING:
                return []
        return [
            self.create_violation(
                "Nygard format ADR is missing '## Status' section",
                1,
                1,
                Severity.ERROR,
            )
        ]

    def _check_frontmatter(self, document: Document) -> list[Violation]:
        frontmatter = parse_frontmatter(document.content)
        if frontmatter is None:
            return [
                self.create_violation(
                    "MADR format ADR is missing frontmatter with 'status' field",
                    1,
                    1,
                    Severity.ERROR,
                )
            ]
        if frontmatter.error is not None:
            return [
                self.create_violation(
                    f"Cannot check status: {frontmatter.error}",
                    frontmatter.start_line,
                    1,
                    Severity.WARNING,
                )
            ]
        if frontmatter.data is None or frontmatter.data.get("status") is None:
            return [
                self.create_violation(
                    "MADR format ADR is missing 'status' field in frontmatter",
                    frontmatter.start_line,
                    1,
                    Severity.ERROR,
                )
            ]
        return []


__all__ = ["AdrRequiredStatus", "AdrTitleFormat"]
