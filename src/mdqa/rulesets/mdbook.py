# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""mdBook specific rules (MDBOOK001, MDBOOK021, MDBOOK022)."""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from typing import Final, Self

from pydantic import Field

from ..document import Document, SyntaxTree
from ..rules import LineRule, RuleCategory, RuleMetadata, TreeRule
from ..severity import Severity
from ..violation import Violation
from .common import BuiltinProvider, RuleOptions, fenced_code_lines, parse_options

TITLE_DIRECTIVE_PATTERN: Final[re.Pattern[str]] = re.compile(r"\{\{#title\s+[^}]+\}\}")


def _title_directives(document: Document) -> Iterator[tuple[int, int]]:
    """Yield ``(line, column)`` of every ``{{#title}}`` directive outside code blocks."""

    code_lines = fenced_code_lines(document.lines)
    for number, line in enumerate(document.lines, start=1):
        if number in code_lines:
            continue
        for match in TITLE_DIRECTIVE_PATTERN.finditer(line):
            yield number, match.start() + 1


class CodeBlockLanguage(TreeRule):
    """Code blocks need a language tag for mdBook syntax highlighting."""

    rule_id = "MDBOOK001"
    name = "code-block-language"
    description = "Code blocks should have language tags for proper syntax highlighting"
    metadata = RuleMetadata.stable(RuleCategory.MDBOOK, introduced_in="mdbook-lint v0.1.0", overrides="MD040")

    def check(self, document: Document, tree: SyntaxTree) -> list[Violation]:
        violations: list[Violation] = []
        for node in document.code_blocks(tree):
            data = tree.node(node)
            if not data.fenced or data.info:
                continue
            line, column = document.node_position(tree, node) or (1, 1)
            violations.append(
                self.create_violation(
                    "Code block is missing language tag for syntax highlighting",
                    line,
                    column,
                    Severity.WARNING,
                )
            )
        return violations


class SingleTitleDirective(LineRule):
    """A chapter should carry at most one ``{{#title}}`` directive."""

    rule_id = "MDBOOK021"
    name = "single-title-directive"
    description = "{{#title}} directive should appear only once per chapter"
    metadata = RuleMetadata.stable(RuleCategory.MDBOOK, introduced_in="mdbook-lint v0.12.0")

    def check(self, document: Document) -> list[Violation]:
        occurrences = list(_title_directives(document))
        if len(occurrences) < 2:
            return []
        first_line = occurrences[0][0]
        return [
            self.create_violation(
                f"Duplicate {{{{#title}}}} directive - first occurrence at line {first_line}. "
                "Only one title directive should be used per chapter",
                line,
                column,
                Severity.WARNING,
            )
            for line, column in occurrences[1:]
        ]


class TitlePlacementOptions(RuleOptions):
    max_line: int = Field(default=5, ge=1, alias="max-line")


class TitleDirectivePlacement(LineRule):
    """The first ``{{#title}}`` directive should sit near the top of the file."""

    rule_id = "MDBOOK022"
    name = "title-directive-placement"
    description = "{{#title}} directive should appear near the top of the file"
    metadata = RuleMetadata.stable(RuleCategory.MDBOOK, introduced_in="mdbook-lint v0.12.0")

    def __init__(self, options: TitlePlacementOptions | None = None) -> None:
        self.options = options or TitlePlacementOptions()

    @classmethod
    def from_config(cls, options: Mapping[str, object]) -> Self:
        return cls(parse_options(TitlePlacementOptions, cls.rule_id, options))

    def check(self, document: Document) -> list[Violation]:
        first = next(_title_directives(document), None)
        if first is None:
            return []
        line, column = first
        max_line = self.options.max_line
        if line <= max_line:
            return []
        return [
            self.create_violation(
                f"{{{{#title}}}} directive at line {line} should appear within the first {max_line} lines of the file",
                line,
                column,
                Severity.WARNING,
            )
        ]


class MdBookProvider(BuiltinProvider):
    """Rules for mdBook projects."""

    provider_id = "mdbook"
    description = "mdBook specific rules"
    rule_types = (CodeBlockLanguage, SingleTitleDirective, TitleDirectivePlacement)


__all__ = [
    "CodeBlockLanguage",
    "MdBookProvider",
    "SingleTitleDirective",
    "TitleDirectivePlacement",
]
