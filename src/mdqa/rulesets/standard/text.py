# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Line length and spelling rules (MD013, MD044)."""

from __future__ import annotations

import re
from collections.abc import Mapping
from functools import cached_property
from typing import Final, Self

from pydantic import Field

from ...document import Document
from ...rules import LineRule, RuleCategory, RuleMetadata
from ...severity import Severity
from ...violation import Fix, Position, Violation
from ..common import INLINE_CODE_PATTERN, RuleOptions, fenced_code_lines, parse_options

URL_LINE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^(?:https?://|<https?://)\S*$")
TABLE_ROW_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\s*\|")
HEADING_LINE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^ {0,3}#{1,6}(?:\s|$)")

DEFAULT_PROPER_NAMES: Final[tuple[str, ...]] = (
    "JavaScript",
    "TypeScript",
    "GitHub",
    "GitLab",
    "PostgreSQL",
    "MySQL",
    "MongoDB",
    "Kubernetes",
    "GraphQL",
    "OAuth",
)


class LineLengthOptions(RuleOptions):
    line_length: int = Field(default=80, ge=1, alias="line-length")
    code_blocks: bool = Field(default=True, alias="code-blocks")
    headings: bool = True
    tables: bool = True


class LineLength(LineRule):
    """Lines should not exceed ``line-length`` characters.

    Lines consisting of a single URL are never reported. Code blocks, headings
    and tables are checked unless their option is turned off.
    """

    rule_id = "MD013"
    name = "line-length"
    description = "Line length should not exceed a specified limit"
    metadata = RuleMetadata.stable(RuleCategory.FORMATTING, introduced_in="markdownlint v0.1.0")

    def __init__(self, options: LineLengthOptions | None = None) -> None:
        self.options = options or LineLengthOptions()

    @classmethod
    def from_config(cls, options: Mapping[str, object]) -> Self:
        return cls(parse_options(LineLengthOptions, cls.rule_id, options))

    def _skipped(self, line: str, in_code: bool) -> bool:
        options = self.options
        if in_code:
            return not options.code_blocks
        if URL_LINE_PATTERN.match(line.strip()):
            return True
        if not options.headings and HEADING_LINE_PATTERN.match(line):
            return True
        return not options.tables and TABLE_ROW_PATTERN.match(line) is not None

    def check(self, document: Document) -> list[Violation]:
        limit = self.options.line_length
        code_lines = fenced_code_lines(document.lines)
        violations: list[Violation] = []
        for number, line in enumerate(document.lines, start=1):
            if len(line) <= limit or self._skipped(line, number in code_lines):
                continue
            violations.append(
                self.create_violation(
                    f"Line length is {len(line)} characters, expected no more than {limit}",
                    number,
                    limit + 1,
                    Severity.WARNING,
                )
            )
        return violations


class ProperNamesOptions(RuleOptions):
    names: tuple[str, ...] = DEFAULT_PROPER_NAMES
    code_blocks: bool = Field(default=False, alias="code-blocks")


class ProperNames(LineRule):
    """Proper names should use their canonical capitalisation.

    Inline code spans, URLs and file names are left alone; fenced code blocks
    are only checked when ``code-blocks`` is set.
    """

    rule_id = "MD044"
    name = "proper-names"
    description = "Proper names should have the correct capitalization"
    metadata = RuleMetadata.stable(RuleCategory.CONTENT, introduced_in="mdbook-lint v0.1.0")

    def __init__(self, options: ProperNamesOptions | None = None) -> None:
        self.options = options or ProperNamesOptions()

    @classmethod
    def from_config(cls, options: Mapping[str, object]) -> Self:
        return cls(parse_options(ProperNamesOptions, cls.rule_id, options))

    @cached_property
    def _patterns(self) -> tuple[tuple[str, re.Pattern[str]], ...]:
        return tuple(
            (name, re.compile(rf"(?<![\w./-]){re.escape(name)}(?![\w/-])(?!\.\w)", re.IGNORECASE))
            for name in self.options.names
            if name
        )

    def can_fix(self) -> bool:
        return True

    def check(self, document: Document) -> list[Violation]:
        code_lines = frozenset() if self.options.code_blocks else fenced_code_lines(document.lines)
        violations: list[Violation] = []
        for number, line in enumerate(document.lines, start=1):
            if number in code_lines:
                continue
            masked = INLINE_CODE_PATTERN.sub(lambda match: " " * len(match.group(0)), line)
            for correct, pattern in self._patterns:
                for match in pattern.finditer(masked):
                    actual = line[match.start() : match.end()]
                    if actual == correct:
                        continue
                    column = match.start() + 1
                    fix = Fix(
                        description=f"Replace '{actual}' with '{correct}'",
                        replacement=correct,
                        start=Position(line=number, column=column),
                        end=Position(line=number, column=match.end() + 1),
                    )
                    violations.append(
                        self.create_violation(
                            f"Proper name '{actual}' should be capitalized as '{correct}'",
                            number,
                            column,
                            Severity.WARNING,
                            fix=fix,
                        )
                    )
        return violations


__all__ = ["DEFAULT_PROPER_NAMES", "LineLength", "ProperNames"]
