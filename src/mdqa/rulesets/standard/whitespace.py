# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Whitespace rules (MD009, MD010, MD012, MD047)."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Self

from pydantic import Field

from ...document import Document
from ...rules import LineRule, RuleCategory, RuleMetadata
from ...severity import Severity
from ...violation import Fix, Position, Violation
from ..common import FENCE_PATTERN, RuleOptions, fenced_code_lines, parse_options, plural, whole_line_fix


class TrailingSpacesOptions(RuleOptions):
    br_spaces: int = Field(default=2, ge=0, alias="br-spaces")
    strict: bool = False


class NoTrailingSpaces(LineRule):
    """Lines should not end with whitespace.

    Exactly ``br-spaces`` trailing spaces are accepted as a hard line break
    unless ``strict`` is set. Fenced code blocks are only checked in strict mode.
    """

    rule_id = "MD009"
    name = "no-trailing-spaces"
    description = "Trailing spaces are not allowed"
    metadata = RuleMetadata.stable(RuleCategory.FORMATTING, introduced_in="markdownlint v0.1.0")

    def __init__(self, options: TrailingSpacesOptions | None = None) -> None:
        self.options = options or TrailingSpacesOptions()

    @classmethod
    def from_config(cls, options: Mapping[str, object]) -> Self:
        return cls(parse_options(TrailingSpacesOptions, cls.rule_id, options))

    def can_fix(self) -> bool:
        return True

    def check(self, document: Document) -> list[Violation]:
        strict = self.options.strict
        code_lines = frozenset() if strict else fenced_code_lines(document.lines)
        violations: list[Violation] = []
        for number, line in enumerate(document.lines, start=1):
            if not line.endswith((" ", "\t")) or number in code_lines:
                continue
            stripped = line.rstrip()
            trailing = len(line) - len(stripped)
            if not strict and trailing == self.options.br_spaces and stripped:
                continue
            fix = whole_line_fix(document, number, stripped, f"Remove {plural(trailing, 'trailing space')}")
            violations.append(
                self.create_violation(
                    f"Trailing spaces detected (found {plural(trailing, 'trailing space')})",
                    number,
                    len(stripped) + 1,
                    Severity.WARNING,
                    fix=fix,
                )
            )
        return violations


class HardTabsOptions(RuleOptions):
    spaces_per_tab: int = Field(default=4, ge=1, alias="spaces-per-tab")
    code_blocks: bool = Field(default=True, alias="code-blocks")


class NoHardTabs(LineRule):
    """Hard tab characters should be replaced by spaces."""

    rule_id = "MD010"
    name = "no-hard-tabs"
    description = "Hard tabs are not allowed"
    metadata = RuleMetadata.stable(RuleCategory.FORMATTING, introduced_in="markdownlint v0.1.0")

    def __init__(self, options: HardTabsOptions | None = None) -> None:
        self.options = options or HardTabsOptions()

    @classmethod
    def from_config(cls, options: Mapping[str, object]) -> Self:
        return cls(parse_options(HardTabsOptions, cls.rule_id, options))

    def can_fix(self) -> bool:
        return True

    def check(self, document: Document) -> list[Violation]:
        spaces = self.options.spaces_per_tab
        code_lines = frozenset() if self.options.code_blocks else fenced_code_lines(document.lines)
        violations: list[Violation] = []
        for number, line in enumerate(document.lines, start=1):
            column = line.find("\t") + 1
            if not column:
                continue
            if number in code_lines and not FENCE_PATTERN.match(line):
                continue
            fix = whole_line_fix(
                document,
                number,
                line.replace("\t", " " * spaces),
                f"Replace tab with {spaces} spaces",
            )
            violations.append(
                self.create_violation(
                    f"Hard tab character found (consider using {spaces} spaces)",
                    number,
                    column,
                    Severity.WARNING,
                    fix=fix,
                )
            )
        return violations


class MultipleBlanksOptions(RuleOptions):
    maximum: int = Field(default=1, ge=0)


class NoMultipleBlanks(LineRule):
    """Runs of blank lines should not exceed ``maximum`` outside code blocks."""

    rule_id = "MD012"
    name = "no-multiple-blanks"
    description = "Multiple consecutive blank lines are not allowed"
    metadata = RuleMetadata.stable(RuleCategory.FORMATTING, introduced_in="markdownlint v0.1.0")

    def __init__(self, options: MultipleBlanksOptions | None = None) -> None:
        self.options = options or MultipleBlanksOptions()

    @classmethod
    def from_config(cls, options: Mapping[str, object]) -> Self:
        return cls(parse_options(MultipleBlanksOptions, cls.rule_id, options))

    def can_fix(self) -> bool:
        return True

    def check(self, document: Document) -> list[Violation]:
        code_lines = fenced_code_lines(document.lines)
        violations: list[Violation] = []
        run_start = 0
        run_length = 0
        for number, line in enumerate(document.lines, start=1):
            if not line.strip() and number not in code_lines:
                if run_length == 0:
                    run_start = number
                run_length += 1
                continue
            if run_length > self.options.maximum:
                violations.append(self._report(run_start, run_length, at_end=False))
            run_length = 0
        if run_length > self.options.maximum:
            violations.append(self._report(run_start, run_length, at_end=True))
        return violations

    def _report(self, run_start: int, run_length: int, *, at_end: bool) -> Violation:
        maximum = self.options.maximum
        extra = run_length - maximum
        first_extra = run_start + maximum
        where = " at end of file" if at_end else ""
        fix = Fix(
            description=f"Remove {extra} extra blank line{'' if extra == 1 else 's'}{where}",
            replacement=None,
            start=Position(line=first_extra, column=1),
            end=Position(line=run_start + run_length, column=1),
        )
        return self.create_violation(
            f"Multiple consecutive blank lines{where} ({run_length} found, {maximum} allowed)",
            first_extra,
            1,
            Severity.WARNING,
            fix=fix,
        )


class SingleTrailingNewline(LineRule):
    """Files should end with exactly one newline character."""

    rule_id = "MD047"
    name = "single-trailing-newline"
    description = "Files should end with a single newline character"
    metadata = RuleMetadata.stable(RuleCategory.FORMATTING, introduced_in="mdbook-lint v0.1.0")

    def can_fix(self) -> bool:
        return True

    def check(self, document: Document) -> list[Violation]:
        content = document.content
        if not content:
            return []
        line_count = len(document.lines)
        if not content.endswith("\n"):
            last = document.line(line_count)
            end = Position(line=line_count, column=len(last) + 1)
            fix = Fix(description="Add newline at end of file", replacement="\n", start=end, end=end)
            return [
                self.create_violation(
                    "File should end with a single newline character",
                    line_count,
                    1,
                    Severity.WARNING,
                    fix=fix,
                )
            ]
        trailing = len(content) - len(content.rstrip("\n"))
        if trailing < 2:
            return []
        keep = max(line_count - trailing + 1, 1)
        fix = Fix(
            description="Remove extra trailing newlines",
            replacement="\n",
            start=Position(line=keep, column=len(document.line(keep)) + 1),
            end=Position(line=line_count + 1, column=1),
        )
        return [
            self.create_violation(
                f"File should end with a single newline character (found {trailing} trailing newlines)",
                line_count,
                1,
                Severity.WARNING,
                fix=fix,
            )
        ]


__all__ = ["NoHardTabs", "NoMultipleBlanks", "NoTrailingSpaces", "SingleTrailingNewline"]
