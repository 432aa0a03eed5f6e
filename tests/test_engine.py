# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for rule dispatch, deduplication and batch linting."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from mdqa.config import Config, DeprecatedWarningLevel
from mdqa.document import Document, SyntaxTree
from mdqa.engine import COLLECTION_PATH, LintEngine, deduplicate_violations
from mdqa.errors import DocumentParseError, RuleCheckError
from mdqa.rules import CollectionRule, LineRule, ReservedRule, RuleCategory, RuleMetadata, TreeRule
from mdqa.rulesets.adr import AdrNoDuplicateNumbers
from mdqa.rulesets.mdbook import CodeBlockLanguage
from mdqa.rulesets.standard import (
    FencedCodeLanguage,
    FirstHeadingH1,
    NoHardTabs,
    NoTrailingSpaces,
)
from mdqa.severity import Severity
from mdqa.violation import Violation

EngineFactory = Callable[..., LintEngine]

UNTAGGED_FENCE_AT_LINE_5 = "# Title\n\nSome text.\n\n```\ncode\n```\n"


class ExplodingRule(LineRule):
    """Fails on documents named ``bad.md``."""

    rule_id = "TEST900"
    name = "exploding"
    description = "Raises for bad documents"
    metadata = RuleMetadata.stable(RuleCategory.CONTENT)

    def check(self, document: Document) -> list[Violation]:
        if document.path.name == "bad.md":
            raise RuntimeError("boom")
        return [self.create_violation("seen", 1, 1, Severity.INFO)]


class CountingTreeRule(TreeRule):
    """Records every tree it receives."""

    rule_id = "TEST901"
    name = "counting"
    description = "Records trees"
    metadata = RuleMetadata.stable(RuleCategory.STRUCTURE)

    def __init__(self) -> None:
        self.trees: list[SyntaxTree] = []

    def check(self, document: Document, tree: SyntaxTree) -> list[Violation]:
        self.trees.append(tree)
        return []


class SecondCountingTreeRule(CountingTreeRule):
    rule_id = "TEST902"


class BrokenCollectionRule(CollectionRule):
    """Always fails."""

    rule_id = "TEST903"
    name = "broken-collection"
    description = "Raises for every project"
    metadata = RuleMetadata.stable(RuleCategory.ADR)

    def check_collection(self, documents: Sequence[Document]) -> list[Violation]:
        raise RuntimeError("collection boom")


def test_lint_document_is_deterministic(default_engine: LintEngine) -> None:
    content = "# Title\n\n#### Deep\n\nText\twith tab   \n\n\n\n```\ncode\n```"
    first = default_engine.lint_content(content, "doc.md")
    second = default_engine.lint_content(content, "doc.md")
    assert first
    assert [v.model_dump_json() for v in first] == [v.model_dump_json() for v in second]
    assert first == sorted(first, key=Violation.sort_key)


def test_overriding_rule_wins_on_same_line(default_engine: LintEngine) -> None:
    violations = default_engine.lint_content(UNTAGGED_FENCE_AT_LINE_5, "book.md")
    assert [(v.rule_id, v.line) for v in violations] == [("MDBOOK001", 5)]


def test_overridden_rule_reports_alone(engine_for: EngineFactory) -> None:
    engine = engine_for([FencedCodeLanguage()])
    violations = engine.lint_content(UNTAGGED_FENCE_AT_LINE_5)
    assert [(v.rule_id, v.line, v.message) for v in violations] == [
        ("MD040", 5, "Fenced code block is missing language specification"),
    ]


def test_overridden_rule_disabled_still_keeps_overriding_rule(engine_for: EngineFactory) -> None:
    engine = engine_for([FencedCodeLanguage(), CodeBlockLanguage()], Config(disabled_rules={"MD040"}))
    assert [v.rule_id for v in engine.lint_content(UNTAGGED_FENCE_AT_LINE_5)] == ["MDBOOK001"]


def test_deduplication_ignores_columns_and_other_lines(engine_for: EngineFactory) -> None:
    rules = [FencedCodeLanguage(), CodeBlockLanguage()]

    def violation(rule_id: str, line: int, column: int) -> Violation:
        return Violation(
            rule_id=rule_id,
            rule_name=rule_id.lower(),
            severity=Severity.WARNING,
            message="m",
            line=line,
            column=column,
        )

    kept = deduplicate_violations(
        [violation("MD040", 5, 1), violation("MDBOOK001", 5, 4), violation("MD040", 9, 1)],
        rules,
    )
    assert [(v.rule_id, v.line) for v in kept] == [("MDBOOK001", 5), ("MD040", 9)]


def test_reserved_rules_never_report(engine_for: EngineFactory, default_engine: LintEngine) -> None:
    reserved = ReservedRule("MD008", "Unused number")
    assert reserved.check(Document("", "empty.md")) == []

    engine = engine_for([reserved], Config(enabled_rules={"MD008"}))
    assert engine.lint_content("") == []
    assert engine.lint_content("\t# anything   \n") == []
    assert default_engine.lint_content("") == []


def test_rule_level_enable_beats_category_disable(engine_for: EngineFactory) -> None:
    config = Config(enabled_rules={"MD010"}, disabled_categories={"formatting"})
    engine = engine_for([NoHardTabs(), NoTrailingSpaces()], config)
    violations = engine.lint_content("Text\twith tab   \n")
    assert {v.rule_id for v in violations} == {"MD010"}


def test_lint_document_with_config_leaves_engine_config_alone(engine_for: EngineFactory) -> None:
    engine = engine_for([NoHardTabs()])
    document = Document("a\tb\n", "tabs.md")
    assert engine.lint_document_with_config(document, Config(disabled_rules={"MD010"})) == []
    assert [v.rule_id for v in engine.lint_document(document)] == ["MD010"]
    assert engine.config == Config()


def test_tree_is_parsed_once_and_shared(engine_for: EngineFactory) -> None:
    first, second = CountingTreeRule(), SecondCountingTreeRule()
    engine = engine_for([first, second])
    document = Document("# Title\n", "doc.md")
    engine.lint_document(document)
    assert len(first.trees) == 1
    assert first.trees[0] is second.trees[0] is document.tree()


def test_tree_is_not_built_for_line_rules_only(engine_for: EngineFactory) -> None:
    engine = engine_for([NoHardTabs(), ReservedRule("MD008", "Unused")], Config(enabled_rules={"MD008"}))
    document = Document("# Title\n", "doc.md")
    engine.lint_document(document)
    assert not document.has_tree


def test_rule_failure_is_wrapped(engine_for: EngineFactory) -> None:
    engine = engine_for([ExplodingRule()])
    with pytest.raises(RuleCheckError) as excinfo:
        engine.lint_document(Document("x\n", "bad.md"))
    assert excinfo.value.rule_id == "TEST900"
    assert excinfo.value.path == Path("bad.md")
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_parse_failure_propagates(engine_for: EngineFactory, monkeypatch: pytest.MonkeyPatch) -> None:
    from mdqa.document import model

    def broken(source: bytes) -> SyntaxTree:
        raise ValueError("parser unavailable")

    monkeypatch.setattr(model, "parse_markdown", broken)
    engine = engine_for([CountingTreeRule()])
    with pytest.raises(DocumentParseError, match="parser unavailable"):
        engine.lint_document(Document("# Title\n", "doc.md"))


@pytest.mark.parametrize("jobs", [1, 4])
def test_batch_failures_are_isolated(engine_for: EngineFactory, jobs: int) -> None:
    engine = engine_for([ExplodingRule()])
    documents = [Document("x\n", name) for name in ("a.md", "bad.md", "c.md", "d.md")]

    batch = engine.lint_documents(documents, jobs=jobs)

    assert list(batch.results) == [Path("a.md"), Path("bad.md"), Path("c.md"), Path("d.md")]
    assert batch.results[Path("bad.md")] == []
    assert [(failure.path, failure.rule_id) for failure in batch.failures] == [(Path("bad.md"), "TEST900")]
    assert not batch.ok
    assert batch.count() == 3
    assert batch.count(Severity.ERROR) == 0
    assert all(violation.path is not None for violation in batch.violations())


@pytest.mark.parametrize("jobs", [1, 2])
def test_failing_rule_keeps_other_rules_findings(engine_for: EngineFactory, jobs: int) -> None:
    engine = engine_for([NoHardTabs(), ExplodingRule()])
    documents = [Document("a\tb\n", "bad.md"), Document("c\td\n", "good.md")]

    batch = engine.lint_documents(documents, jobs=jobs)

    assert [v.rule_id for v in batch.results[Path("bad.md")]] == ["MD010"]
    assert [v.rule_id for v in batch.results[Path("good.md")]] == ["TEST900", "MD010"]
    assert [str(failure) for failure in batch.failures] == ["bad.md: rule TEST900 failed (boom)"]


def test_lint_document_raises_after_running_every_rule(engine_for: EngineFactory) -> None:
    counting = CountingTreeRule()
    engine = engine_for([ExplodingRule(), counting])
    with pytest.raises(RuleCheckError):
        engine.lint_document(Document("# Title\n", "bad.md"))
    assert len(counting.trees) == 1


def test_parse_failure_in_batch_has_no_results(engine_for: EngineFactory, monkeypatch: pytest.MonkeyPatch) -> None:
    from mdqa.document import model

    def broken(source: bytes) -> SyntaxTree:
        raise ValueError("parser unavailable")

    monkeypatch.setattr(model, "parse_markdown", broken)
    batch = engine_for([CountingTreeRule()]).lint_documents([Document("# Title\n", "doc.md")])

    assert batch.results == {}
    assert [failure.rule_id for failure in batch.failures] == [None]
    assert str(batch.failures[0]).startswith("doc.md: failed to parse markdown")


def test_failing_collection_rule_keeps_other_collection_findings(engine_for: EngineFactory) -> None:
    engine = engine_for([BrokenCollectionRule(), AdrNoDuplicateNumbers()])
    documents = [
        Document("# 1. First\n\n## Status\n\nAccepted\n", "adr/0001-a.md"),
        Document("# 1. Second\n\n## Status\n\nAccepted\n", "adr/0001-b.md"),
    ]

    result = engine.lint_project(documents)

    assert result.results[Path("adr/0001-a.md")] == []
    assert [v.rule_id for v in result.results[Path("adr/0001-b.md")]] == ["ADR012"]
    assert [(failure.path, failure.rule_id) for failure in result.failures] == [(COLLECTION_PATH, "TEST903")]
    assert str(result.failures[0]) == "<collection>: rule TEST903 failed (collection boom)"
    assert isinstance(result.failures[0].error.__cause__, RuntimeError)

    with pytest.raises(RuleCheckError) as excinfo:
        engine.lint_collection(documents)
    assert excinfo.value.rule_id == "TEST903"


def test_lint_collection_with_config_leaves_engine_config_alone(engine_for: EngineFactory) -> None:
    engine = engine_for([AdrNoDuplicateNumbers()])
    documents = [Document("# 1. A\n", "adr/0001-a.md"), Document("# 1. B\n", "adr/0001-b.md")]

    assert engine.lint_collection_with_config(documents, Config(disabled_rules={"ADR012"})) == []
    assert [v.rule_id for v in engine.lint_collection(documents)] == ["ADR012"]


def test_deprecated_rule_is_announced_once(
    engine_for: EngineFactory,
    caplog: pytest.LogCaptureFixture,
) -> None:
    engine = engine_for([FirstHeadingH1()], Config(enabled_rules={"MD002"}))
    with caplog.at_level(logging.INFO, logger="mdqa"):
        engine.lint_content("## Start\n")
        violations = engine.lint_content("## Again\n")

    notices = [record for record in caplog.records if "deprecated" in record.getMessage()]
    assert len(notices) == 1
    assert notices[0].levelno == logging.WARNING
    assert "MD041" in notices[0].getMessage()
    assert [v.rule_id for v in violations] == ["MD002"]


def test_deprecated_rule_notice_levels(engine_for: EngineFactory, caplog: pytest.LogCaptureFixture) -> None:
    info_engine = engine_for([FirstHeadingH1()], Config(enabled_rules={"MD002"}, deprecated_warning="info"))
    silent_engine = engine_for(
        [FirstHeadingH1()],
        Config(enabled_rules={"MD002"}, deprecated_warning=DeprecatedWarningLevel.SILENT),
    )
    with caplog.at_level(logging.INFO, logger="mdqa"):
        info_engine.lint_content("# Title\n")
        silent_engine.lint_content("# Title\n")

    notices = [record for record in caplog.records if "deprecated" in record.getMessage()]
    assert [record.levelno for record in notices] == [logging.INFO]


def test_deprecated_rule_is_disabled_by_default(default_engine: LintEngine) -> None:
    assert "MD002" not in {rule.rule_id for rule in default_engine.enabled_rules()}
    assert all(not v.rule_id == "MD002" for v in default_engine.lint_content("## Start\n"))


def test_apply_fixes_respects_auto_fix(engine_for: EngineFactory) -> None:
    content = "a\tb   \n"
    rules = [NoHardTabs(), NoTrailingSpaces()]
    enabled = engine_for(rules)
    fixed, unfixed = enabled.apply_fixes(content, enabled.lint_content(content))
    assert unfixed == [v for v in enabled.lint_content(content) if v.rule_id == "MD009"]
    assert fixed == "a    b   \n"

    blocked = engine_for(rules, Config.model_validate({"auto-fix": False}))
    violations = blocked.lint_content(content)
    assert blocked.apply_fixes(content, violations) == (content, violations)
    assert blocked.apply_fix(content, violations[0]) is None
