# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Heading structure rules (MD001, MD002, MD025, MD041)."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Final, Self

from pydantic import Field

from ...document import Document, SyntaxTree
from ...rules import LineRule, RuleCategory, RuleMetadata, TreeRule
from ...severity import Severity
from ...violation import Violation
from ..common import RuleOptions, body_headings, frontmatter_span, parse_options, relevel_heading_fix

ATX_H1_PATTERN: Final[re.Pattern[str]] = re.compile(r"^#(?!#)\s*\S")
SETEXT_H1_UNDERLINE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^=+$")


def _titled(message: str, title: str) -> str:
    return f"{message}: {title}" if title else message


class HeadingLevelOptions(RuleOptions):
    level: int = Field(default=1, ge=1, le=6)


class HeadingIncrement(TreeRule):
    """Heading levels should only increment by one level at a time."""

    rule_id = "MD001"
    name = "heading-increment"
    description = "Heading levels should only increment by one level at a time"
    metadata = RuleMetadata.stable(RuleCategory.STRUCTURE, introduced_in="markdownlint v0.1.0")

    def can_fix(self) -> bool:
        return True

    def check(self, document: Document, tree: SyntaxTree) -> list[Violation]:
        violations: list[Violation] = []
        previous: int | None = None
        for node in body_headings(document, tree):
            level = document.heading_level(tree, node)
            if level is None:
                continue
            if previous is not None and level > previous + 1:
                expected = previous + 1
                line, column = document.node_position(tree, node) or (1, 1)
                message = _titled(
                    f"Expected heading level {expected} (max {expected}) but got level {level}",
                    document.node_text(tree, node),
                )
                fix = relevel_heading_fix(
                    document,
                    tree,
                    node,
                    expected,
                    f"Change heading level from {level} to {expected}",
                )
                violations.append(self.create_violation(message, line, column, Severity.ERROR, fix=fix))
            previous = level
        return violations


class FirstHeadingH1(TreeRule):
    """First heading should be a top-level heading; superseded by MD041."""

    rule_id = "MD002"
    name = "first-heading-h1"
    description = "First heading should be a top-level heading"
    metadata = RuleMetadata.deprecated(
        RuleCategory.STRUCTURE,
        "Superseded by MD041 which offers improved implementation",
        superseded_by="MD041",
        introduced_in="markdownlint v0.1.0",
    )

    def __init__(self, options: HeadingLevelOptions | None = None) -> None:
        self.options = options or HeadingLevelOptions()

    @classmethod
    def from_config(cls, options: Mapping[str, object]) -> Self:
        return cls(parse_options(HeadingLevelOptions, cls.rule_id, options))

    def can_fix(self) -> bool:
        return True

    def check(self, document: Document, tree: SyntaxTree) -> list[Violation]:
        headings = body_headings(document, tree)
        if not headings:
            return []
        first = headings[0]
        level = document.heading_level(tree, first)
        expected = self.options.level
        if level is None or level == expected:
            return []
        position = document.node_position(tree, first)
        if position is None:
            return []
        message = _titled(
            f"First heading should be level {expected} but got level {level}",
            document.node_text(tree, first),
        )
        fix = relevel_heading_fix(
            document,
            tree,
            first,
            expected,
            f"Change first heading level from {level} to {expected}",
        )
        return [self.create_violation(message, *position, Severity.WARNING, fix=fix)]


class SingleTitle(TreeRule):
    """A document should contain a single top-level heading."""

    rule_id = "MD025"
    name = "single-title"
    description = "Multiple top-level headings in the same document"
    metadata = RuleMetadata.stable(RuleCategory.STRUCTURE, introduced_in="mdbook-lint v0.1.0")

    def __init__(self, options: HeadingLevelOptions | None = None) -> None:
        self.options = options or HeadingLevelOptions()

    @classmethod
    def from_config(cls, options: Mapping[str, object]) -> Self:
        return cls(parse_options(HeadingLevelOptions, cls.rule_id, options))

    def can_fix(self) -> bool:
        return True

    def check(self, document: Document, tree: SyntaxTree) -> list[Violation]:
        level = self.options.level
        titles = [node for node in body_headings(document, tree) if document.heading_level(tree, node) == level]
        if len(titles) < 2:
            return []
        first_line = tree.node(titles[0]).start_line
        demoted = min(level + 1, 6)
        violations: list[Violation] = []
        for node in titles[1:]:
            position = document.node_position(tree, node)
            if position is None:
                continue
            message = (
                f"Multiple top-level headings in the same document (first at line {first_line}): "
                f"{document.node_text(tree, node)}"
            )
            fix = relevel_heading_fix(document, tree, node, demoted, f"Demote heading to level {demoted}")
            violations.append(self.create_violation(message, *position, Severity.ERROR, fix=fix))
        return violations


class FirstLineHeading(LineRule):
    """The first content line of a file should be a top-level heading."""

    rule_id = "MD041"
    name = "first-line-heading"
    description = "First line in file should be a top level heading"
    metadata = RuleMetadata.stable(RuleCategory.STRUCTURE, introduced_in="mdbook-lint v0.1.0")

    def check(self, document: Document) -> list[Violation]:
        span = frontmatter_span(document.lines)
        start = span[1] if span is not None else 0
        for index in range(start, len(document.lines)):
            line = document.lines[index].strip()
            if not line:
                continue
            if ATX_H1_PATTERN.match(line):
                return []
            following = document.line(index + 2).strip()
            if not line.startswith("#") and SETEXT_H1_UNDERLINE_PATTERN.match(following):
                return []
            return [
                self.create_violation(
                    "First line in file should be a top level heading",
                    index + 1,
                    1,
                    Severity.WARNING,
                )
            ]
        return []


__all__ = ["FirstHeadingH1", "FirstLineHeading", "HeadingIncrement", "SingleTitle"]
