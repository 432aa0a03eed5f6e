# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Cross-document ADR rules (ADR010, ADR011, ADR012)."""

from __future__ import annotations

import re
from collections import defaultdict
from collections.abc import Sequence
from typing import Final

from ...document import Document
from ...rules import CollectionRule, RuleCategory, RuleMetadata
from ...severity import Severity
from ...violation import Violation
from .format import adr_number, adr_status, is_adr_document

ADR_REFERENCE_PATTERN: Final[re.Pattern[str]] = re.compile(r"ADR[-\s]?(\d+)", re.IGNORECASE)
ADR_LINK_PATTERN: Final[re.Pattern[str]] = re.compile(r"\[.*?\]\([^)]*?(?:adr|ADR)[/\\]?\d+[^)]*\.md\)")
SUPERSEDED_STATUS: Final[str] = "superseded"


def numbered_adrs(documents: Sequence[Document]) -> list[tuple[int, Document]]:
    """Return ``(number, document)`` pairs for ADR documents, in input order.

    Args:
        documents: Every document of the project.

    Returns:
        list[tuple[int, Document]]: Numbered ADRs.
    """

    numbered: list[tuple[int, Document]] = []
    for document in documents:
        if not is_adr_document(document):
            continue
        number = adr_number(document)
        if number is not None:
            numbered.append((number, document))
    return numbered


class AdrSupersededHasReplacement(CollectionRule):
    """Superseded ADRs should point at the decision that replaced them."""

    rule_id = "ADR010"
    name = "adr-superseded-has-replacement"
    description = "Superseded ADRs should reference the ADR that replaces them"
    metadata = RuleMetadata.stable(RuleCategory.ADR, introduced_in="mdbook-lint v0.14.0")

    def check_collection(self, documents: Sequence[Document]) -> list[Violation]:
        violations: list[Violation] = []
        for document in documents:
            if not is_adr_document(document):
                continue
            status = adr_status(document)
            if status is None or status.lower() != SUPERSEDED_STATUS:
                continue
            if ADR_REFERENCE_PATTERN.search(document.content) or ADR_LINK_PATTERN.search(document.content):
                continue
            violations.append(
                self.create_violation(
                    "Superseded ADR should reference the ADR that replaces it",
                    1,
                    1,
                    Severity.WARNING,
                    path=document.path,
                )
            )
        return violations


class AdrSequentialNumbering(CollectionRule):
    """ADR numbers should start at 0 or 1 and leave no gaps.

    A gap is reported once per missing number, on the next ADR that exists.
    """

    rule_id = "ADR011"
    name = "adr-sequential-numbering"
    description = "ADR numbers should be sequential with no gaps"
    metadata = RuleMetadata.stable(RuleCategory.ADR, introduced_in="mdbook-lint v0.14.0")

    def check_collection(self, documents: Sequence[Document]) -> list[Violation]:
        by_number: dict[int, Document] = {}
        for number, document in numbered_adrs(documents):
            by_number[number] = document
        if not by_number:
            return []
        numbers = sorted(by_number)
        first = numbers[0]
        violations: list[Violation] = []
        if first not in (0, 1):
            violations.append(
                self.create_violation(
                    f"ADR numbering should start at 1 (or 0), but first ADR is {first}",
                    1,
                    1,
                    Severity.WARNING,
                )
            )
        start = 0 if first == 0 else 1
        for expected in range(start, numbers[-1]):
            if expected in by_number:
                continue
            following = next(number for number in numbers if number > expected)
            violations.append(
                self.create_violation(
                    f"Missing ADR number {expected} (gap before ADR {following})",
                    1,
                    1,
                    Severity.WARNING,
                    path=by_number[following].path,
                )
            )
        return violations


class AdrNoDuplicateNumbers(CollectionRule):
    """Each ADR number should be used by exactly one document."""

    rule_id = "ADR012"
    name = "adr-no-duplicate-numbers"
    description = "Each ADR number should be unique"
    metadata = RuleMetadata.stable(RuleCategory.ADR, introduced_in="mdbook-lint v0.14.0")

    def check_collection(self, documents: Sequence[Document]) -> list[Violation]:
        by_number: dict[int, list[Document]] = defaultdict(list)
        for number, document in numbered_adrs(documents):
            by_number[number].append(document)
        violations: list[Violation] = []
        for number in sorted(by_number):
            users = by_number[number]
            for document in users[1:]:
                others = ", ".join(str(other.path) for other in users if other.path != document.path)
                violations.append(
                    self.create_violation(
                        f"Duplicate ADR number {number}. Also used in: {others}",
                        1,
                        1,
                        Severity.ERROR,
                        path=document.path,
                    )
                )
        return violations


__all__ = [
    "AdrNoDuplicateNumbers",
    "AdrSequentialNumbering",
    "AdrSupersededHasReplacement",
    "numbered_adrs",
]
