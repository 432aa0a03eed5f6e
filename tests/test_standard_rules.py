# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the markdownlint-style standard rules."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from mdqa.config import Config
from mdqa.document import Document
from mdqa.engine import LintEngine
from mdqa.errors import ConfigError
from mdqa.fixes import apply_fix, apply_fixes
from mdqa.plugins import PluginRegistry
from mdqa.rules import Rule
from mdqa.rulesets.standard import (
    FirstHeadingH1,
    FirstLineHeading,
    HeadingIncrement,
    LineLength,
    NoHardTabs,
    NoMultipleBlanks,
    NoTrailingSpaces,
    ProperNames,
    SingleTitle,
    SingleTrailingNewline,
)
from mdqa.severity import Severity

EngineFactory = Callable[..., LintEngine]


def _lint(engine_for: EngineFactory, rule: Rule, content: str) -> list:
    return engine_for([rule]).lint_content(content, "doc.md")


def test_heading_increment_first_heading_may_start_deep(engine_for: EngineFactory) -> None:
    assert _lint(engine_for, HeadingIncrement(), "### Start\n\n#### Next\n") == []


def test_heading_increment_reports_skipped_level(engine_for: EngineFactory) -> None:
    violations = _lint(engine_for, HeadingIncrement(), "# One\n\n#### Four\n")
    assert len(violations) == 1
    violation = violations[0]
    assert (violation.line, violation.column, violation.severity) == (3, 1, Severity.ERROR)
    assert violation.message == "Expected heading level 2 (max 2) but got level 4: Four"
    assert apply_fix("# One\n\n#### Four\n", violation) == "# One\n\n## Four\n"


def test_heading_increment_allows_decrease(engine_for: EngineFactory) -> None:
    assert _lint(engine_for, HeadingIncrement(), "# A\n\n## B\n\n### C\n\n# D\n\n## E\n") == []


def test_heading_increment_handles_setext(engine_for: EngineFactory) -> None:
    violations = _lint(engine_for, HeadingIncrement(), "Title\n=====\n\n### Deep\n")
    assert [(v.line, v.rule_id) for v in violations] == [(4, "MD001")]


def test_heading_increment_skips_frontmatter(engine_for: EngineFactory) -> None:
    content = "---\ntitle: Demo\n---\n\n## Start\n\n### Next\n"
    assert _lint(engine_for, HeadingIncrement(), content) == []


def test_first_heading_h1_reports_and_fixes(engine_for: EngineFactory) -> None:
    content = "## Intro\n\ntext\n"
    engine = engine_for([FirstHeadingH1()], Config(enabled_rules={"MD002"}))
    violations = engine.lint_content(content)
    assert [v.message for v in violations] == ["First heading should be level 1 but got level 2: Intro"]
    assert apply_fix(content, violations[0]) == "# Intro\n\ntext\n"


def test_single_title_demotes_extra_h1(engine_for: EngineFactory) -> None:
    content = "# One\n\n# Two\n"
    violations = _lint(engine_for, SingleTitle(), content)
    assert [(v.line, v.severity) for v in violations] == [(3, Severity.ERROR)]
    assert "first at line 1" in violations[0].message
    assert apply_fix(content, violations[0]) == "# One\n\n## Two\n"


def test_first_line_heading(engine_for: EngineFactory) -> None:
    rule = FirstLineHeading()
    assert _lint(engine_for, rule, "\n# Title\n") == []
    assert _lint(engine_for, rule, "Title\n=====\n") == []
    assert _lint(engine_for, rule, "---\ntitle: x\n---\n# Title\n") == []
    assert [(v.line, v.rule_id) for v in _lint(engine_for, rule, "\nIntro text\n")] == [(2, "MD041")]
    assert _lint(engine_for, rule, "") == []


def test_trailing_spaces_allow_hard_break(engine_for: EngineFactory) -> None:
    content = "line one  \nline two \nline three   \n"
    violations = _lint(engine_for, NoTrailingSpaces(), content)
    assert [(v.line, v.column) for v in violations] == [(2, 9), (3, 11)]
    fixed, unfixed = apply_fixes(content, violations)
    assert fixed == "line one  \nline two\nline three\n"
    assert unfixed == []


def test_trailing_spaces_strict_mode() -> None:
    rule = NoTrailingSpaces.from_config({"strict": True})
    violations = rule.check(Document("line one  \n", "doc.md"))
    assert violations[0].message == "Trailing spaces detected (found 2 trailing spaces)"


def test_hard_tab_fix_is_idempotent(engine_for: EngineFactory) -> None:
    content = "Text\twith\ttabs\n"
    engine = engine_for([NoHardTabs()])
    violations = engine.lint_content(content)
    assert [(v.line, v.column) for v in violations] == [(1, 5)]

    fixed = apply_fix(content, violations[0])
    assert fixed == "Text    with    tabs\n"
    assert engine.lint_content(fixed) == []


def test_hard_tabs_respect_options() -> None:
    rule = NoHardTabs.from_config({"spaces-per-tab": 2, "code-blocks": False})
    content = "```\n\tcode\n```\n\ttext\n"
    violations = rule.check(Document(content, "doc.md"))
    assert [v.line for v in violations] == [4]
    assert violations[0].fix is not None and violations[0].fix.replacement == "  text"


def test_invalid_rule_options_raise_config_error() -> None:
    with pytest.raises(ConfigError, match="MD010"):
        NoHardTabs.from_config({"spaces-per-tab": "many"})


def test_multiple_blanks_fix_removes_extra_lines(engine_for: EngineFactory) -> None:
    content = "a\n\n\n\nb\n"
    violations = _lint(engine_for, NoMultipleBlanks(), content)
    assert [(v.line, v.message) for v in violations] == [(3, "Multiple consecutive blank lines (3 found, 1 allowed)")]
    assert apply_fix(content, violations[0]) == "a\n\nb\n"


def test_multiple_blanks_ignore_code_blocks(engine_for: EngineFactory) -> None:
    assert _lint(engine_for, NoMultipleBlanks(), "```\n\n\n\n```\n") == []


def test_line_length_limits(engine_for: EngineFactory) -> None:
    long_line = "word " * 20
    content = f"{long_line.strip()}\n\nhttps://example.com/{'x' * 100}\n"
    violations = _lint(engine_for, LineLength(), content)
    assert [(v.line, v.column) for v in violations] == [(1, 81)]

    relaxed = LineLength.from_config({"line-length": 120})
    assert relaxed.check(Document(content, "doc.md")) == []


def test_line_length_can_skip_headings() -> None:
    content = "# " + "h" * 90 + "\n"
    assert LineLength().check(Document(content, "doc.md"))
    assert LineLength.from_config({"headings": False}).check(Document(content, "doc.md")) == []


def test_proper_names_are_capitalised(engine_for: EngineFactory) -> None:
    content = "We use github and `github` at https://github.com.\n"
    violations = _lint(engine_for, ProperNames(), content)
    assert [(v.column, v.message) for v in violations] == [
        (8, "Proper name 'github' should be capitalized as 'GitHub'"),
    ]
    assert apply_fix(content, violations[0]) == "We use GitHub and `github` at https://github.com.\n"


def test_proper_names_disabled_in_markdownlint_mode() -> None:
    engine = PluginRegistry.with_default_providers().create_engine(Config(markdownlint_compatible=True))
    assert "MD044" not in {rule.rule_id for rule in engine.enabled_rules()}


def test_single_trailing_newline(engine_for: EngineFactory) -> None:
    rule = SingleTrailingNewline()
    assert _lint(engine_for, rule, "a\n") == []

    missing = _lint(engine_for, rule, "a")
    assert apply_fix("a", missing[0]) == "a\n"

    extra = _lint(engine_for, rule, "a\n\n\n")
    assert "found 3 trailing newlines" in extra[0].message
    assert apply_fix("a\n\n\n", extra[0]) == "a\n"
