# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Value types describing lint findings and their mechanical repairs."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .severity import Severity


class Position(BaseModel):
    """1-based line/column coordinate inside a document."""

    model_config = ConfigDict(frozen=True)

    line: int = Field(ge=1)
    column: int = Field(ge=1)

    def as_tuple(self) -> tuple[int, int]:
        """Return the position as a ``(line, column)`` tuple.

        Returns:
            tuple[int, int]: Sortable representation of the position.
        """

        return self.line, self.column


class Fix(BaseModel):
    """Describe a replacement of the text between ``start`` and ``end``.

    A ``replacement`` of ``None`` means the span is deleted. The span is
    half-open: ``end`` points at the first character that is kept.
    """

    model_config = ConfigDict(frozen=True)

    description: str
    replacement: str | None = None
    start: Position
    end: Position

    @model_validator(mode="after")
    def _check_span(self) -> Fix:
        """Reject spans whose end precedes their start.

        Returns:
            Fix: The validated fix.

        Raises:
            ValueError: If ``end`` is before ``start``.
        """

        if self.end.as_tuple() < self.start.as_tuple():
            raise ValueError(
                f"fix span is inverted: {self.start.as_tuple()} > {self.end.as_tuple()}",
            )
        return self


class Violation(BaseModel):
    """Single finding reported by a rule."""

    model_config = ConfigDict(frozen=True)

    rule_id: str
    rule_name: str
    severity: Severity
    message: str
    line: int = Field(ge=1)
    column: int = Field(ge=1)
    fix: Fix | None = None
    path: Path | None = None

    def sort_key(self) -> tuple[int, int, str]:
        """Return the deterministic ordering key ``(line, column, rule_id)``.

        Returns:
            tuple[int, int, str]: Key used when ordering violations.
        """

        return self.line, self.column, self.rule_id

    def with_path(self, path: Path) -> Violation:
        """Return a copy of the violation attributed to ``path``.

        Args:
            path: File the violation belongs to.

        Returns:
            Violation: Copy carrying ``path``.
        """

        return self.model_copy(update={"path": path})

    def to_record(self) -> dict[str, object]:
        """Return the stable, JSON-compatible record for this violation.

        Returns:
            dict[str, object]: Mapping with ``rule_id``, ``rule_name``, ``severity``,
            ``message``, ``line``, ``column`` and, when present, ``fix``.
        """

        return self.model_dump(mode="json", exclude_none=True, exclude={"path"})

    def __str__(self) -> str:
        return f"{self.line}:{self.column}:{self.severity}: {self.rule_id}/{self.rule_name}: {self.message}"


def sort_violations(violations: list[Violation]) -> list[Violation]:
    """Return ``violations`` ordered by ``(line, column, rule_id)``.

    Args:
        violations: Violations to order.

    Returns:
        list[Violation]: New list in deterministic order.
    """

    return sorted(violations, key=Violation.sort_key)


__all__ = ["Fix", "Position", "Violation", "sort_violations"]
