# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Editorial content rules (CONTENT001, CONTENT009, CONTENT010).

The family is opt-in: every rule is disabled unless enabled by id or through
the ``content`` category.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from functools import cached_property
from typing import Final, Self

from pydantic import Field

from ..document import Document
from ..rules import LineRule, RuleCategory, RuleMetadata
from ..severity import Severity
from ..violation import Violation
from .common import INLINE_CODE_PATTERN, BuiltinProvider, RuleOptions, fenced_code_lines, parse_options

DEFAULT_MARKERS: Final[tuple[str, ...]] = ("TODO", "FIXME", "XXX", "HACK", "WIP")
HTML_COMMENT_PATTERN: Final[re.Pattern[str]] = re.compile(r"<!--.*?(?:-->|$)")
HEADING_PATTERN: Final[re.Pattern[str]] = re.compile(r"^(#{1,6})\s+\S")
LINK_PATTERN: Final[re.Pattern[str]] = re.compile(r"\[([^\]]*)\]\([^)]+\)")
GENERIC_LINK_TEXT: Final[frozenset[str]] = frozenset(
    {
        "click here",
        "here",
        "this link",
        "this page",
        "this article",
        "this",
        "link",
        "read more",
        "more",
        "learn more",
        "see more",
        "more info",
        "more information",
        "details",
        "info",
    }
)


def _spans(pattern: re.Pattern[str], line: str) -> list[tuple[int, int]]:
    return [match.span() for match in pattern.finditer(line)]


def _inside(offset: int, spans: list[tuple[int, int]]) -> bool:
    return any(start <= offset < end for start, end in spans)


class TodoOptions(RuleOptions):
    markers: tuple[str, ...] = DEFAULT_MARKERS
    code_blocks: bool = Field(default=False, alias="code-blocks")


class NoTodoComments(LineRule):
    """Work-in-progress markers should be resolved before publishing."""

    rule_id = "CONTENT001"
    name = "no-todo-comments"
    description = "TODO/FIXME/XXX comments should be resolved before publishing"
    metadata = RuleMetadata.stable(RuleCategory.CONTENT, introduced_in="mdbook-lint v0.11.0", default_enabled=False)

    def __init__(self, options: TodoOptions | None = None) -> None:
        self.options = options or TodoOptions()

    @classmethod
    def from_config(cls, options: Mapping[str, object]) -> Self:
        return cls(parse_options(TodoOptions, cls.rule_id, options))

    @cached_property
    def _pattern(self) -> re.Pattern[str]:
        markers = self.options.markers or DEFAULT_MARKERS
        return re.compile(rf"\b({'|'.join(re.escape(marker) for marker in markers)})\b", re.IGNORECASE)

    def check(self, document: Document) -> list[Violation]:
        check_code = self.options.code_blocks
        code_lines = frozenset() if check_code else fenced_code_lines(document.lines)
        violations: list[Violation] = []
        for number, line in enumerate(document.lines, start=1):
            if number in code_lines:
                continue
            inline_code = [] if check_code else _spans(INLINE_CODE_PATTERN, line)
            comments = _spans(HTML_COMMENT_PATTERN, line)
            for match in self._pattern.finditer(line):
                if _inside(match.start(), inline_code):
                    continue
                marker = match.group(1).upper()
                if _inside(match.start(), comments):
                    message = f"{marker} comment found in HTML comment"
                else:
                    message = f"{marker} comment found - resolve before publishing"
                violations.append(self.create_violation(message, number, match.start() + 1, Severity.WARNING))
        return violations


class NestingOptions(RuleOptions):
    max_depth: int = Field(default=4, ge=1, le=6, alias="max-depth")


class NoExcessiveNesting(LineRule):
    """Headings should not nest deeper than ``max-depth``."""

    rule_id = "CONTENT009"
    name = "no-excessive-nesting"
    description = "Heading nesting should not be too deep (default max: h4)"
    metadata = RuleMetadata.stable(RuleCategory.CONTENT, introduced_in="mdbook-lint v0.14.0", default_enabled=False)

    def __init__(self, options: NestingOptions | None = None) -> None:
        self.options = options or NestingOptions()

    @classmethod
    def from_config(cls, options: Mapping[str, object]) -> Self:
        return cls(parse_options(NestingOptions, cls.rule_id, options))

    def check(self, document: Document) -> list[Violation]:
        limit = self.options.max_depth
        code_lines = fenced_code_lines(document.lines)
        violations: list[Violation] = []
        for number, line in enumerate(document.lines, start=1):
            if number in code_lines:
                continue
            match = HEADING_PATTERN.match(line.strip())
            if match is None or len(match.group(1)) <= limit:
                continue
            violations.append(
                self.create_violation(
                    f"Heading level h{len(match.group(1))} exceeds maximum depth of h{limit}. "
                    "Consider restructuring to reduce nesting or splitting into separate documents",
                    number,
                    1,
                    Severity.WARNING,
                )
            )
        return violations


class LinkTextQuality(LineRule):
    """Link text should describe its destination."""

    rule_id = "CONTENT010"
    name = "link-text-quality"
    description = "Link text should be descriptive, not generic like 'click here' or 'here'"
    metadata = RuleMetadata.stable(RuleCategory.CONTENT, introduced_in="mdbook-lint v0.14.0", default_enabled=False)

    def check(self, document: Document) -> list[Violation]:
        code_lines = fenced_code_lines(document.lines)
        violations: list[Violation] = []
        for number, line in enumerate(document.lines, start=1):
            if number in code_lines:
                continue
            for match in LINK_PATTERN.finditer(line):
                text = match.group(1).strip()
                if text.lower() not in GENERIC_LINK_TEXT:
                    continue
                violations.append(
                    self.create_violation(
                        f"Generic link text '{text}' is not descriptive. "
                        "Use meaningful text that describes the link destination",
                        number,
                        match.start(1) + 1,
                        Severity.WARNING,
                    )
                )
        return violations


class ContentProvider(BuiltinProvider):
    """Opt-in editorial checks."""

    provider_id = "content"
    description = "Content quality rules (disabled by default)"
    rule_types = (NoTodoComments, NoExcessiveNesting, LinkTextQuality)


__all__ = [
    "ContentProvider",
    "LinkTextQuality",
    "NoExcessiveNesting",
    "NoTodoComments",
]
