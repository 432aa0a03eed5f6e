# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rule capability interface shared by every lint rule.

A rule implements exactly one of three capability shapes:

* :class:`LineRule` inspects ``document.lines`` and ``document.content``.
* :class:`TreeRule` receives the document's shared, already built syntax tree.
* :class:`CollectionRule` reasons across an ordered sequence of documents.

Registries and the engine only depend on these abstract types, so rule
families stay decoupled from the engine.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import ClassVar, Self, TypeAlias

from ..document import Document, SyntaxTree
from ..fixes import apply_fix
from ..severity import Severity
from ..violation import Fix, Violation


class RuleCategory(str, Enum):
    """Closed set of categories used for grouping and configuration."""

    STRUCTURE = "structure"
    FORMATTING = "formatting"
    CONTENT = "content"
    LINKS = "links"
    ACCESSIBILITY = "accessibility"
    MDBOOK = "mdbook"
    ADR = "adr"


class RuleKind(str, Enum):
    """Capability shape implemented by a rule."""

    LINE = "line"
    TREE = "tree"
    COLLECTION = "collection"


@dataclass(frozen=True, slots=True)
class Stable:
    """Rule is stable and recommended for general use."""


@dataclass(frozen=True, slots=True)
class Experimental:
    """Rule is experimental and may change."""


@dataclass(frozen=True, slots=True)
class Deprecated:
    """Rule is deprecated, optionally in favour of ``superseded_by``."""

    reason: str
    superseded_by: str | None = None


@dataclass(frozen=True, slots=True)
class Reserved:
    """Rule number reserved for catalogue continuity; never reports anything."""

    reason: str


RuleStability: TypeAlias = Stable | Experimental | Deprecated | Reserved


@dataclass(frozen=True, slots=True)
class RuleMetadata:
    """Describe a rule's category, lifecycle and relations to other rules.

    Attributes:
        category: Category used for configuration filtering.
        stability: Lifecycle state of the rule.
        introduced_in: Informational version tag.
        overrides: Identifier of a rule whose findings this rule subsumes.
        default_enabled: Whether the rule runs when configuration is silent.
    """

    category: RuleCategory
    stability: RuleStability = field(default_factory=Stable)
    introduced_in: str | None = None
    overrides: str | None = None
    default_enabled: bool = True

    @classmethod
    def stable(
        cls,
        category: RuleCategory,
        *,
        introduced_in: str | None = None,
        overrides: str | None = None,
        default_enabled: bool = True,
    ) -> RuleMetadata:
        return cls(
            category=category,
            introduced_in=introduced_in,
            overrides=overrides,
            default_enabled=default_enabled,
        )

    @classmethod
    def experimental(cls, category: RuleCategory, *, introduced_in: str | None = None) -> RuleMetadata:
        return cls(category=category, stability=Experimental(), introduced_in=introduced_in)

    @classmethod
    def deprecated(
        cls,
        category: RuleCategory,
        reason: str,
        *,
        superseded_by: str | None = None,
        introduced_in: str | None = None,
    ) -> RuleMetadata:
        return cls(
            category=category,
            stability=Deprecated(reason=reason, superseded_by=superseded_by),
            introduced_in=introduced_in,
        )

    @classmethod
    def reserved(cls, reason: str, *, category: RuleCategory = RuleCategory.STRUCTURE) -> RuleMetadata:
        return cls(category=category, stability=Reserved(reason=reason), default_enabled=False)

    @property
    def is_deprecated(self) -> bool:
        return isinstance(self.stability, Deprecated)

    @property
    def is_reserved(self) -> bool:
        return isinstance(self.stability, Reserved)

    @property
    def stability_label(self) -> str:
        """Return a lowercase label for the stability variant.

        Returns:
            str: ``stable``, ``experimental``, ``deprecated`` or ``reserved``.
        """

        return type(self.stability).__name__.lower()


class Rule(ABC):
    """Base class holding the identity and helpers shared by all rules."""

    kind: ClassVar[RuleKind]

    rule_id: str
    name: str
    description: str
    metadata: RuleMetadata

    @classmethod
    def from_config(cls, options: Mapping[str, object]) -> Self:
        """Build the rule from its per-rule configuration table.

        Rules without options ignore ``options``.

        Args:
            options: Opaque configuration section keyed by option name.

        Returns:
            Self: Configured rule instance.
        """

        del options
        return cls()

    def can_fix(self) -> bool:
        """Return whether the rule proposes automatic fixes.

        Returns:
            bool: ``False`` unless overridden.
        """

        return False

    def fix(self, content: str, violation: Violation) -> str | None:
        """Return ``content`` with the fix carried by ``violation`` applied.

        Args:
            content: Document text the violation was reported against.
            violation: Violation produced by this rule.

        Returns:
            str | None: Fixed content, or ``None`` when no fix applies.
        """

        if violation.rule_id != self.rule_id:
            return None
        return apply_fix(content, violation)

    def create_violation(
        self,
        message: str,
        line: int,
        column: int,
        severity: Severity,
        *,
        fix: Fix | None = None,
        path: Path | None = None,
    ) -> Violation:
        """Return a violation attributed to this rule.

        Args:
            message: Human readable description of the finding.
            line: 1-based line number.
            column: 1-based column number.
            severity: Severity of the finding.
            fix: Optional mechanical repair.
            path: Optional file attribution for collection findings.

        Returns:
            Violation: New violation.
        """

        return Violation(
            rule_id=self.rule_id,
            rule_name=self.name,
            severity=severity,
            message=message,
            line=line,
            column=column,
            fix=fix,
            path=path,
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.rule_id} ({self.kind.value})>"


class LineRule(Rule):
    """Rule operating on raw lines; never receives the syntax tree."""

    kind = RuleKind.LINE

    @abstractmethod
    def check(self, document: Document) -> list[Violation]:
        """Return violations found in ``document``.

        Args:
            document: Document to analyse.

        Returns:
            list[Violation]: Findings, empty when the document is clean.
        """


class TreeRule(Rule):
    """Rule operating on the shared syntax tree borrowed for one call."""

    kind = RuleKind.TREE

    @abstractmethod
    def check(self, document: Document, tree: SyntaxTree) -> list[Violation]:
        """Return violations found in ``document`` using ``tree``.

        Args:
            document: Document to analyse.
            tree: Syntax tree of ``document``; must not be retained.

        Returns:
            list[Violation]: Findings, empty when the document is clean.
        """


class CollectionRule(Rule):
    """Rule reasoning across every document of a project."""

    kind = RuleKind.COLLECTION

    @abstractmethod
    def check_collection(self, documents: Sequence[Document]) -> list[Violation]:
        """Return violations found across ``documents``.

        Args:
            documents: Every document of the project, in order.

        Returns:
            list[Violation]: Findings; each carries the ``path`` it belongs to.
        """


DocumentRule: TypeAlias = LineRule | TreeRule


class ReservedRule(LineRule):
    """Placeholder occupying a rule number that was never implemented."""

    def __init__(self, rule_id: str, reason: str, *, category: RuleCategory = RuleCategory.STRUCTURE) -> None:
        self.rule_id = rule_id
        self.name = "reserved"
        self.description = "Reserved rule number (never implemented)"
        self.metadata = RuleMetadata.reserved(reason, category=category)

    def check(self, document: Document) -> list[Violation]:
        del document
        return []


def invoke_document_rule(rule: Rule, document: Document, tree: SyntaxTree | None = None) -> list[Violation]:
    """Dispatch ``rule`` against ``document`` using its capability shape.

    Reserved rules always yield an empty list without being called.

    Args:
        rule: Line or tree rule.
        document: Document to analyse.
        tree: Pre-built syntax tree; built on demand for tree rules when ``None``.

    Returns:
        list[Violation]: Findings reported by ``rule``.

    Raises:
        TypeError: If ``rule`` is a collection rule.
    """

    if rule.metadata.is_reserved:
        return []
    if isinstance(rule, TreeRule):
        return list(rule.check(document, tree if tree is not None else document.tree()))
    if isinstance(rule, LineRule):
        return list(rule.check(document))
    raise TypeError(f"rule {rule.rule_id} is not a per-document rule")


def invoke_collection_rule(rule: CollectionRule, documents: Sequence[Document]) -> list[Violation]:
    """Run ``rule`` over ``documents`` unless it is reserved.

    Args:
        rule: Collection rule.
        documents: Every document of the project.

    Returns:
        list[Violation]: Findings reported by ``rule``.
    """

    if rule.metadata.is_reserved:
        return []
    return list(rule.check_collection(documents))


__all__ = [
    "CollectionRule",
    "Deprecated",
    "DocumentRule",
    "Experimental",
    "LineRule",
    "Reserved",
    "ReservedRule",
    "Rule",
    "RuleCategory",
    "RuleKind",
    "RuleMetadata",
    "RuleStability",
    "Stable",
    "TreeRule",
    "invoke_collection_rule",
    "invoke_document_rule",
]
