# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Result containers returned by batch and project linting."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ..errors import MdqaError, RuleCheckError
from ..severity import Severity
from ..violation import Violation


@dataclass(frozen=True, slots=True)
class LintFailure:
    """Document or rule pass that failed, with the error it raised."""

    path: Path
    error: MdqaError

    @property
    def rule_id(self) -> str | None:
        """Return the failing rule id when a rule raised.

        Returns:
            str | None: Rule identifier, ``None`` for parse or encoding failures.
        """

        if isinstance(self.error, RuleCheckError):
            return self.error.rule_id
        return None

    def __str__(self) -> str:
        message = str(self.error)
        if message.startswith(f"{self.path}:"):
            return message
        return f"{self.path}: {message}"


@dataclass(slots=True)
class BatchResult:
    """Violations per document plus the documents that failed.

    Attributes:
        results: Sorted violations keyed by document path, in input order.
        failures: Documents whose analysis raised.
    """

    results: dict[Path, list[Violation]] = field(default_factory=dict)
    failures: list[LintFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def violations(self) -> list[Violation]:
        """Return every violation, attributed to its path, in input order.

        Returns:
            list[Violation]: Flattened violations.
        """

        return [violation.with_path(path) for path, items in self.results.items() for violation in items]

    def count(self, severity: Severity | None = None) -> int:
        """Return the number of violations, optionally of one severity.

        Args:
            severity: Severity to count; ``None`` counts everything.

        Returns:
            int: Number of matching violations.
        """

        return sum(
            1 for items in self.results.values() for violation in items if severity is None or violation.severity is severity
        )


@dataclass(slots=True)
class ProjectResult(BatchResult):
    """Batch result extended with collection findings not tied to a file."""

    unattributed: list[Violation] = field(default_factory=list)

    def violations(self) -> list[Violation]:
        return [*BatchResult.violations(self), *self.unattributed]


__all__ = ["BatchResult", "LintFailure", "ProjectResult"]
