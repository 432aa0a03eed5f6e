# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Lint engine dispatching rules over documents and projects."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from threading import Lock
from typing import TypeAlias

from ..config import Config
from ..document import Document, SyntaxTree
from ..errors import MdqaError, RuleCheckError
from ..fixes import apply_fix, apply_fixes
from ..rules import (
    CollectionRule,
    Deprecated,
    DocumentRule,
    Rule,
    RuleRegistry,
    TreeRule,
    invoke_collection_rule,
    invoke_document_rule,
)
from ..violation import Violation
from .deduplication import deduplicate_violations
from .results import BatchResult, LintFailure, ProjectResult

LOGGER = logging.getLogger(__name__)

DEFAULT_CONTENT_PATH = Path("<content>")
COLLECTION_PATH = Path("<collection>")

_Outcome: TypeAlias = tuple[list[Violation], list[RuleCheckError]] | MdqaError


class LintEngine:
    """Run the enabled rules of a registry against markdown documents.

    The registry and configuration are never mutated after construction, so a
    single engine may lint many documents concurrently.
    """

    def __init__(self, registry: RuleRegistry, config: Config | None = None) -> None:
        """Bind the engine to ``registry`` and ``config``.

        Args:
            registry: Rules available to the engine.
            config: Configuration used by :meth:`lint_document`; defaults apply when ``None``.
        """

        self._registry = registry
        self._config = config or Config()
        self._announced: set[str] = set()
        self._announce_lock = Lock()

    @property
    def registry(self) -> RuleRegistry:
        return self._registry

    @property
    def config(self) -> Config:
        return self._config

    def is_enabled(self, rule: Rule, config: Config | None = None) -> bool:
        """Return whether ``rule`` runs under ``config``.

        Args:
            rule: Rule to evaluate.
            config: Configuration; the engine's own when ``None``.

        Returns:
            bool: ``True`` when the rule should run.
        """

        active = config or self._config
        default = active.default_enabled(
            rule.rule_id,
            declared=rule.metadata.default_enabled,
            deprecated=rule.metadata.is_deprecated,
        )
        return active.should_run(rule.rule_id, rule.metadata.category, default)

    def enabled_rules(self, config: Config | None = None) -> tuple[Rule, ...]:
        """Return enabled rules in registration order.

        Args:
            config: Configuration; the engine's own when ``None``.

        Returns:
            tuple[Rule, ...]: Rules that should run.
        """

        active = config or self._config
        rules = tuple(rule for rule in self._registry.rules() if self.is_enabled(rule, active))
        self._announce_deprecations(rules, active)
        return rules

    def _announce_deprecations(self, rules: Sequence[Rule], config: Config) -> None:
        for rule in rules:
            stability = rule.metadata.stability
            if not isinstance(stability, Deprecated):
                continue
            with self._announce_lock:
                if rule.rule_id in self._announced:
                    continue
                self._announced.add(rule.rule_id)
            notice = config.deprecation_notice(rule.rule_id, stability)
            if notice is not None:
                level, message = notice
                LOGGER.log(level, message)

    def lint_document(self, document: Document) -> list[Violation]:
        """Lint ``document`` with the engine's configuration.

        Args:
            document: Document to analyse.

        Returns:
            list[Violation]: Deduplicated violations sorted by position and rule id.

        Raises:
            DocumentParseError: If the document cannot be parsed.
            RuleCheckError: If a rule fails.
        """

        return self.lint_document_with_config(document, self._config)

    def lint_document_with_config(self, document: Document, config: Config) -> list[Violation]:
        """Lint ``document`` choosing rules according to ``config``.

        The syntax tree is built only when an enabled tree rule exists and is
        shared by every tree rule. Every rule runs even when another one fails;
        the first failure is raised once dispatch is complete.

        Args:
            document: Document to analyse.
            config: Configuration deciding which rules run.

        Returns:
            list[Violation]: Deduplicated violations sorted by position and rule id.

        Raises:
            DocumentParseError: If the document cannot be parsed.
            RuleCheckError: If a rule fails.
        """

        violations, failures = self._dispatch(document, config)
        if failures:
            raise failures[0]
        return violations

    def _dispatch(self, document: Document, config: Config) -> tuple[list[Violation], list[RuleCheckError]]:
        rules = [rule for rule in self.enabled_rules(config) if not isinstance(rule, CollectionRule)]
        tree: SyntaxTree | None = None
        if any(isinstance(rule, TreeRule) and not rule.metadata.is_reserved for rule in rules):
            tree = document.tree()
        LOGGER.debug("linting %s with %d rules", document.path, len(rules))

        violations: list[Violation] = []
        failures: list[RuleCheckError] = []
        for rule in rules:
            try:
                violations.extend(self._check_rule(rule, document, tree))
            except RuleCheckError as exc:
                LOGGER.debug("%s", exc)
                failures.append(exc)
        return deduplicate_violations(violations, rules), failures

    def _check_rule(self, rule: DocumentRule, document: Document, tree: SyntaxTree | None) -> list[Violation]:
        try:
            return invoke_document_rule(rule, document, tree)
        except MdqaError:
            raise
        except Exception as exc:
            raise RuleCheckError(rule.rule_id, document.path, str(exc)) from exc

    def lint_content(self, content: str | bytes, path: Path | str = DEFAULT_CONTENT_PATH) -> list[Violation]:
        """Lint raw ``content`` as if it were the file at ``path``.

        Args:
            content: Markdown text or UTF-8 bytes.
            path: Path attributed to the content.

        Returns:
            list[Violation]: Deduplicated violations sorted by position and rule id.
        """

        return self.lint_document(Document(content, path))

    def lint_documents(self, documents: Sequence[Document], *, jobs: int = 1) -> BatchResult:
        """Lint each document independently, collecting failures.

        A failing rule is recorded as a failure while the findings of the
        document's other rules are kept. A document that cannot be parsed has
        a failure and no results.

        Args:
            documents: Documents to analyse.
            jobs: Worker threads; ``1`` lints sequentially.

        Returns:
            BatchResult: Violations per path in input order plus failures.
        """

        outcomes = self._run_batch(documents, jobs=jobs)
        batch = BatchResult()
        for document, outcome in zip(documents, outcomes, strict=True):
            if isinstance(outcome, MdqaError):
                LOGGER.debug("skipping %s: %s", document.path, outcome)
                batch.failures.append(LintFailure(document.path, outcome))
                continue
            violations, failures = outcome
            batch.results[document.path] = violations
            batch.failures.extend(LintFailure(document.path, failure) for failure in failures)
        return batch

    def _run_batch(self, documents: Sequence[Document], *, jobs: int) -> list[_Outcome]:
        def guarded(document: Document) -> _Outcome:
            try:
                return self._dispatch(document, self._config)
            except MdqaError as exc:
                return exc

        if jobs <= 1 or len(documents) <= 1:
            return [guarded(document) for document in documents]

        outcomes: list[_Outcome | None] = [None] * len(documents)
        with ThreadPoolExecutor(max_workers=jobs) as executor:
            future_map = {executor.submit(guarded, document): index for index, document in enumerate(documents)}
            for future in as_completed(future_map):
                outcomes[future_map[future]] = future.result()
        return [outcome for outcome in outcomes if outcome is not None]

    def lint_collection(self, documents: Sequence[Document]) -> list[Violation]:
        """Run enabled collection rules across ``documents``.

        Args:
            documents: Every document of the project, in order.

        Returns:
            list[Violation]: Collection findings, each carrying its ``path``.

        Raises:
            RuleCheckError: If a collection rule fails.
        """

        return self.lint_collection_with_config(documents, self._config)

    def lint_collection_with_config(self, documents: Sequence[Document], config: Config) -> list[Violation]:
        """Run the collection rules ``config`` enables across ``documents``.

        Every collection rule runs even when another one fails; the first
        failure is raised afterwards.

        Args:
            documents: Every document of the project, in order.
            config: Configuration deciding which rules run.

        Returns:
            list[Violation]: Collection findings, each carrying its ``path``.

        Raises:
            RuleCheckError: If a collection rule fails.
        """

        violations, failures = self._run_collection(documents, config)
        if failures:
            raise failures[0]
        return violations

    def _run_collection(
        self, documents: Sequence[Document], config: Config
    ) -> tuple[list[Violation], list[RuleCheckError]]:
        violations: list[Violation] = []
        failures: list[RuleCheckError] = []
        for rule in self.enabled_rules(config):
            if not isinstance(rule, CollectionRule):
                continue
            try:
                violations.extend(invoke_collection_rule(rule, documents))
            except RuleCheckError as exc:
                failures.append(exc)
            except MdqaError:
                raise
            except Exception as exc:
                failure = RuleCheckError(rule.rule_id, None, str(exc))
                failure.__cause__ = exc
                failures.append(failure)
        return violations, failures

    def lint_project(self, documents: Sequence[Document], *, jobs: int = 1) -> ProjectResult:
        """Lint every document, then run collection rules over all of them.

        Collection rules start only once every per-document pass has finished.
        Their findings are merged into the results of the file they name. A
        failing collection rule is recorded under the ``<collection>`` path
        and the findings of the other collection rules are still merged.

        Args:
            documents: Every document of the project, in order.
            jobs: Worker threads for the per-document pass.

        Returns:
            ProjectResult: Merged per-file results, failures and unattributed findings.
        """

        batch = self.lint_documents(documents, jobs=jobs)
        project = ProjectResult(results=batch.results, failures=batch.failures)
        collection, failures = self._run_collection(documents, self._config)
        project.failures.extend(LintFailure(COLLECTION_PATH, failure) for failure in failures)

        by_path: dict[Path, list[Violation]] = defaultdict(list)
        for violation in collection:
            if violation.path is None:
                project.unattributed.append(violation)
            else:
                by_path[violation.path].append(violation.model_copy(update={"path": None}))

        rules = self.enabled_rules()
        for path, extra in by_path.items():
            existing = project.results.get(path, [])
            project.results[path] = deduplicate_violations([*existing, *extra], rules)
        return project

    def apply_fix(self, content: str, violation: Violation) -> str | None:
        """Apply the fix of ``violation`` when auto-fix permits it.

        Args:
            content: Document content.
            violation: Violation carrying an optional fix.

        Returns:
            str | None: Fixed content, or ``None`` when nothing was applied.
        """

        if not self._config.should_auto_fix(violation.rule_id):
            return None
        return apply_fix(content, violation)

    def apply_fixes(self, content: str, violations: Sequence[Violation]) -> tuple[str, list[Violation]]:
        """Apply every permitted fix in ``violations``.

        Args:
            content: Document content.
            violations: Violations reported for ``content``.

        Returns:
            tuple[str, list[Violation]]: Fixed content and violations left unfixed.
        """

        allowed = [violation for violation in violations if self._config.should_auto_fix(violation.rule_id)]
        fixed, unfixed = apply_fixes(content, allowed)
        blocked = [violation for violation in violations if not self._config.should_auto_fix(violation.rule_id)]
        return fixed, [*unfixed, *blocked]


__all__ = ["COLLECTION_PATH", "DEFAULT_CONTENT_PATH", "LintEngine"]
