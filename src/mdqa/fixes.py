# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Apply the mechanical repairs attached to violations."""

from __future__ import annotations

from collections.abc import Sequence

from .violation import Position, Violation


def position_to_offset(text: str, position: Position) -> int | None:
    """Convert a 1-based ``position`` into a character offset within ``text``.

    The column directly after the last character of a line (the newline, or the
    end of ``text``) is addressable.

    Args:
        text: Document content.
        position: Line/column coordinate.

    Returns:
        int | None: Offset, or ``None`` when the position lies outside ``text``.
    """

    line_start = 0
    for _ in range(position.line - 1):
        newline = text.find("\n", line_start)
        if newline == -1:
            return None
        line_start = newline + 1
    line_end = text.find("\n", line_start)
    if line_end == -1:
        line_end = len(text)
    offset = line_start + position.column - 1
    if offset > line_end:
        return None
    return offset


def apply_fix(content: str, violation: Violation) -> str | None:
    """Return ``content`` with the fix of ``violation`` applied.

    Args:
        content: Document content.
        violation: Violation carrying an optional fix.

    Returns:
        str | None: Fixed content, or ``None`` when the violation has no
        applicable fix.
    """

    fix = violation.fix
    if fix is None:
        return None
    start = position_to_offset(content, fix.start)
    end = position_to_offset(content, fix.end)
    if start is None or end is None or start > end:
        return None
    return content[:start] + (fix.replacement or "") + content[end:]


def apply_fixes(content: str, violations: Sequence[Violation]) -> tuple[str, list[Violation]]:
    """Apply every applicable fix in ``violations`` to ``content``.

    Fixes are applied from the end of the document backwards so earlier
    offsets stay valid. A fix overlapping one that was already applied is
    skipped.

    Args:
        content: Document content.
        violations: Violations reported against ``content``.

    Returns:
        tuple[str, list[Violation]]: Fixed content and the violations that were
        not fixed, in their original order.
    """

    fixable = [(index, violation.fix) for index, violation in enumerate(violations) if violation.fix is not None]
    if not fixable:
        return content, list(violations)

    fixable.sort(key=lambda item: (item[1].start.as_tuple(), item[1].end.as_tuple()), reverse=True)
    result = content
    applied: set[int] = set()
    boundary: int | None = None
    for index, fix in fixable:
        start = position_to_offset(result, fix.start)
        end = position_to_offset(result, fix.end)
        if start is None or end is None or start > end:
            continue
        if boundary is not None and end > boundary:
            continue
        result = result[:start] + (fix.replacement or "") + result[end:]
        boundary = start
        applied.add(index)

    unfixed = [violation for index, violation in enumerate(violations) if index not in applied]
    return result, unfixed


__all__ = ["apply_fix", "apply_fixes", "position_to_offset"]
