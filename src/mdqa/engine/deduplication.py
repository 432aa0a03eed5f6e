# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Override-based deduplication of violations reported for one document."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence

from ..rules import Rule
from ..violation import Violation, sort_violations


def deduplicate_violations(violations: Sequence[Violation], rules: Iterable[Rule]) -> list[Violation]:
    """Drop findings subsumed by an overriding rule, then sort.

    For every rule ``B`` declaring ``overrides = A``, violations of ``A`` on a
    line where ``B`` also reported are removed. Columns are not compared.

    Args:
        violations: Violations reported for a single document.
        rules: Rules that ran for the document.

    Returns:
        list[Violation]: Remaining violations ordered by line, column and rule id.
    """

    lines_by_rule: dict[str, set[int]] = defaultdict(set)
    for violation in violations:
        lines_by_rule[violation.rule_id].add(violation.line)

    suppressed: dict[str, set[int]] = defaultdict(set)
    for rule in rules:
        overridden = rule.metadata.overrides
        if overridden and rule.rule_id in lines_by_rule:
            suppressed[overridden] |= lines_by_rule[rule.rule_id]

    kept = [violation for violation in violations if violation.line not in suppressed.get(violation.rule_id, ())]
    return sort_violations(kept)


__all__ = ["deduplicate_violations"]
