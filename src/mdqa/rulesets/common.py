# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Helpers shared by the built-in rule families."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from typing import ClassVar, Final, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from ..config import Config
from ..document import SETEXT_HEADING, Document, NodeId, SyntaxTree
from ..errors import ConfigError
from ..plugins import RuleProvider
from ..rules import Rule, RuleRegistry
from ..violation import Fix, Position

FENCE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^ {0,3}(`{3,}|~{3,})")
FRONTMATTER_DELIMITER: Final[str] = "---"
SETEXT_UNDERLINE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^ {0,3}(=+|-+)\s*$")
INLINE_CODE_PATTERN: Final[re.Pattern[str]] = re.compile(r"(`+)(?:(?!\1).)+?\1")
_RULE_ID_PATTERN: Final[re.Pattern[str]] = re.compile(r"([A-Z]+)(\d+)$")

OptionsT = TypeVar("OptionsT", bound="RuleOptions")


class RuleOptions(BaseModel):
    """Base model for per-rule option tables.

    Keys outside the model (such as ``auto-fix``) are ignored.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


def parse_options(model: type[OptionsT], rule_id: str, options: Mapping[str, object]) -> OptionsT:
    """Validate ``options`` for ``rule_id`` against ``model``.

    Args:
        model: Options model of the rule.
        rule_id: Identifier of the configured rule.
        options: Raw configuration table.

    Returns:
        OptionsT: Validated options.

    Raises:
        ConfigError: If an option has an invalid value.
    """

    try:
        return model.model_validate(dict(options))
    except ValidationError as exc:
        raise ConfigError(f"Invalid options for {rule_id}: {exc}") from exc


def plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def fenced_code_lines(lines: Sequence[str]) -> frozenset[int]:
    """Return 1-based line numbers inside fenced code blocks, fences included.

    A block closes on a fence of the same character at least as long as the
    opening one; an unclosed block runs to the end of the document.

    Args:
        lines: Document lines.

    Returns:
        frozenset[int]: Line numbers covered by fenced code blocks.
    """

    covered: set[int] = set()
    opening: str | None = None
    for number, line in enumerate(lines, start=1):
        match = FENCE_PATTERN.match(line)
        if opening is None:
            if match is not None:
                opening = match.group(1)
                covered.add(number)
            continue
        covered.add(number)
        if match is not None and match.group(1)[0] == opening[0] and len(match.group(1)) >= len(opening):
            if not line[match.end() :].strip():
                opening = None
    return frozenset(covered)


def frontmatter_span(lines: Sequence[str]) -> tuple[int, int] | None:
    """Return the 1-based inclusive line span of a leading YAML frontmatter block.

    Args:
        lines: Document lines.

    Returns:
        tuple[int, int] | None: ``(first, last)`` lines, or ``None`` without frontmatter.
    """

    if not lines or lines[0].strip() != FRONTMATTER_DELIMITER:
        return None
    for number, line in enumerate(lines[1:], start=2):
        if line.strip() == FRONTMATTER_DELIMITER:
            return 1, number
    return None


def body_headings(document: Document, tree: SyntaxTree) -> list[NodeId]:
    """Return headings in document order, skipping any inside frontmatter.

    Args:
        document: Document owning ``tree``.
        tree: Syntax tree of ``document``.

    Returns:
        list[NodeId]: Heading handles outside the frontmatter block.
    """

    span = frontmatter_span(document.lines)
    headings = document.headings(tree)
    if span is None:
        return headings
    return [node for node in headings if tree.node(node).start_line > span[1]]


def heading_line_span(document: Document, tree: SyntaxTree, node: NodeId) -> tuple[int, int]:
    """Return the first and last source lines of heading ``node``.

    Setext headings end on their underline.

    Args:
        document: Document owning ``tree``.
        tree: Syntax tree of ``document``.
        node: Heading handle.

    Returns:
        tuple[int, int]: Inclusive 1-based line span.
    """

    data = tree.node(node)
    first = data.start_line
    if data.kind != SETEXT_HEADING:
        return first, first
    for number in range(first + 1, len(document.lines) + 1):
        if SETEXT_UNDERLINE_PATTERN.match(document.line(number)):
            return first, number
    return first, first


def relevel_heading_fix(document: Document, tree: SyntaxTree, node: NodeId, level: int, description: str) -> Fix:
    """Return a fix rewriting heading ``node`` as an ATX heading of ``level``.

    Args:
        document: Document owning ``tree``.
        tree: Syntax tree of ``document``.
        node: Heading handle.
        level: Target heading level.
        description: Fix description.

    Returns:
        Fix: Replacement covering the whole heading.
    """

    first, last = heading_line_span(document, tree, node)
    title = tree.content_text(node)
    source = document.line(first)
    stripped = source.lstrip()
    if first == last and stripped.startswith("#"):
        replacement = "#" * level + stripped.lstrip("#")
    else:
        replacement = f"{'#' * level} {title}"
    return Fix(
        description=description,
        replacement=replacement,
        start=Position(line=first, column=1),
        end=Position(line=last, column=len(document.line(last)) + 1),
    )


def whole_line_fix(document: Document, line: int, replacement: str, description: str) -> Fix:
    """Return a fix replacing line ``line`` (without its terminator).

    Args:
        document: Document the fix applies to.
        line: 1-based line number.
        replacement: New line text.
        description: Fix description.

    Returns:
        Fix: Replacement covering the line.
    """

    return Fix(
        description=description,
        replacement=replacement,
        start=Position(line=line, column=1),
        end=Position(line=line, column=len(document.line(line)) + 1),
    )


class BuiltinProvider(RuleProvider):
    """Provider registering a fixed tuple of rule classes and placeholders.

    Subclasses set ``provider_id``, ``description`` and ``rule_types``; the
    optional ``placeholders`` hook contributes pre-built rules such as
    reserved numbers. Rules register ordered by id number.
    """

    rule_types: ClassVar[tuple[type[Rule], ...]] = ()

    def placeholders(self) -> Iterable[Rule]:
        return ()

    def register_rules(self, registry: RuleRegistry, config: Config | None = None) -> None:
        rules: list[Rule] = []
        for rule_type in self.rule_types:
            options = config.rule_config(rule_type.rule_id) if config is not None else {}
            rules.append(rule_type.from_config(options))
        rules.extend(self.placeholders())
        for rule in sorted(rules, key=_rule_sort_key):
            registry.register(rule)


def _rule_sort_key(rule: Rule) -> tuple[str, int, str]:
    match = _RULE_ID_PATTERN.match(rule.rule_id)
    if match is None:
        return rule.rule_id, 0, ""
    return match.group(1), int(match.group(2)), rule.rule_id


__all__ = [
    "BuiltinProvider",
    "FENCE_PATTERN",
    "FRONTMATTER_DELIMITER",
    "INLINE_CODE_PATTERN",
    "RuleOptions",
    "body_headings",
    "fenced_code_lines",
    "frontmatter_span",
    "heading_line_span",
    "parse_options",
    "plural",
    "relevel_heading_fix",
    "whole_line_fix",
]
