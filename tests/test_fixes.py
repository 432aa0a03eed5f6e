# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for violation values and fix application."""

from __future__ import annotations

from pathlib import Path

import pytest

from mdqa.fixes import apply_fix, apply_fixes, position_to_offset
from mdqa.severity import Severity
from mdqa.violation import Fix, Position, Violation, sort_violations


def _violation(
    line: int,
    column: int = 1,
    *,
    rule_id: str = "MD999",
    fix: Fix | None = None,
) -> Violation:
    return Violation(
        rule_id=rule_id,
        rule_name="test-rule",
        severity=Severity.WARNING,
        message="message",
        line=line,
        column=column,
        fix=fix,
    )


def _fix(start: tuple[int, int], end: tuple[int, int], replacement: str | None) -> Fix:
    return Fix(
        description="test fix",
        replacement=replacement,
        start=Position(line=start[0], column=start[1]),
        end=Position(line=end[0], column=end[1]),
    )


def test_inverted_fix_span_is_rejected() -> None:
    with pytest.raises(ValueError):
        _fix((2, 1), (1, 1), "x")


def test_violation_positions_are_one_based() -> None:
    with pytest.raises(ValueError):
        _violation(0)


def test_sort_violations_orders_by_line_column_rule() -> None:
    items = [
        _violation(2, 1, rule_id="MD002"),
        _violation(1, 5, rule_id="MD001"),
        _violation(1, 5, rule_id="MD000"),
        _violation(1, 1, rule_id="MD009"),
    ]
    ordered = sort_violations(items)
    assert [(v.line, v.column, v.rule_id) for v in ordered] == [
        (1, 1, "MD009"),
        (1, 5, "MD000"),
        (1, 5, "MD001"),
        (2, 1, "MD002"),
    ]


def test_to_record_omits_path_and_missing_fix() -> None:
    record = _violation(3).with_path(Path("a.md")).to_record()
    assert record == {
        "rule_id": "MD999",
        "rule_name": "test-rule",
        "severity": "warning",
        "message": "message",
        "line": 3,
        "column": 1,
    }


def test_position_to_offset_addresses_line_ends() -> None:
    text = "ab\ncd"
    assert position_to_offset(text, Position(line=1, column=3)) == 2
    assert position_to_offset(text, Position(line=2, column=3)) == 5
    assert position_to_offset(text, Position(line=1, column=4)) is None
    assert position_to_offset(text, Position(line=3, column=1)) is None


def test_apply_fix_replaces_span() -> None:
    content = "hello world\n"
    violation = _violation(1, fix=_fix((1, 7), (1, 12), "there"))
    assert apply_fix(content, violation) == "hello there\n"


def test_apply_fix_without_fix_returns_none() -> None:
    assert apply_fix("text\n", _violation(1)) is None


def test_apply_fix_deletes_when_replacement_is_none() -> None:
    content = "a\n\n\nb\n"
    violation = _violation(3, fix=_fix((3, 1), (4, 1), None))
    assert apply_fix(content, violation) == "a\n\nb\n"


def test_apply_fixes_applies_back_to_front_and_skips_overlaps() -> None:
    content = "one two three\n"
    first = _violation(1, 1, fix=_fix((1, 1), (1, 4), "ONE"))
    overlapping = _violation(1, 2, fix=_fix((1, 2), (1, 4), "X"))
    last = _violation(1, 9, fix=_fix((1, 9), (1, 14), "THREE"))
    plain = _violation(1, 1)

    fixed, unfixed = apply_fixes(content, [first, overlapping, last, plain])

    assert fixed == "oX two THREE\n"
    assert unfixed == [first, plain]


def test_apply_fixes_handles_adjacent_spans() -> None:
    content = "ab\n"
    left = _violation(1, 1, fix=_fix((1, 1), (1, 2), "A"))
    right = _violation(1, 2, fix=_fix((1, 2), (1, 3), "B"))

    fixed, unfixed = apply_fixes(content, [left, right])

    assert fixed == "AB\n"
    assert unfixed == []


def test_apply_fixes_without_fixes_returns_content_unchanged() -> None:
    violations = [_violation(1)]
    fixed, unfixed = apply_fixes("text\n", violations)
    assert fixed == "text\n"
    assert unfixed == violations
