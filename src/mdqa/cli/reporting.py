# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Render lint results and rule catalogues for the console and for machines."""

from __future__ import annotations

import json
from collections import Counter
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Final

from rich import box
from rich.table import Table
from rich.text import Text

from .. import __version__
from ..engine import ProjectResult
from ..logging import fail, ok, stdout_console, warn
from ..rules import Rule, RuleRegistry
from ..severity import Severity, severity_to_sarif
from ..violation import Violation

SARIF_VERSION: Final[str] = "2.1.0"
SARIF_SCHEMA: Final[str] = "https://schemastore.azurewebsites.net/schemas/json/sarif-2.1.0.json"

_SEVERITY_STYLE: Final[dict[Severity, str]] = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "yellow",
    Severity.INFO: "cyan",
}


def severity_counts(violations: Sequence[Violation]) -> Counter[Severity]:
    return Counter(violation.severity for violation in violations)


def _location(path: Path | None, violation: Violation) -> str:
    prefix = f"{path}:" if path is not None else ""
    return f"{prefix}{violation.line}:{violation.column}"


def _violation_line(path: Path | None, violation: Violation, *, use_color: bool) -> Text:
    text = Text()
    text.append(_location(path, violation), style="bold" if use_color else None)
    text.append(" ")
    text.append(str(violation.severity), style=_SEVERITY_STYLE[violation.severity] if use_color else None)
    text.append(" ")
    text.append(violation.rule_id, style="magenta" if use_color else None)
    text.append(f"/{violation.rule_name} {violation.message}")
    return text


def render_text(result: ProjectResult, *, use_color: bool, use_emoji: bool, fixed: int = 0) -> None:
    """Print violations grouped by file followed by a one-line summary.

    Args:
        result: Project lint result.
        use_color: Whether ANSI styling is applied.
        use_emoji: Whether summary lines carry emoji.
        fixed: Number of violations repaired before this report.
    """

    console = stdout_console(use_color=use_color, use_emoji=use_emoji)
    for path, violations in result.results.items():
        for violation in violations:
            console.print(_violation_line(path, violation, use_color=use_color))
    for violation in result.unattributed:
        console.print(_violation_line(None, violation, use_color=use_color))
    for failure in result.failures:
        fail(str(failure), use_emoji=use_emoji, use_color=use_color)

    counts = severity_counts(result.violations())
    total = sum(counts.values())
    summary = (
        f"{total} issue(s) in {len(result.results)} file(s): "
        f"{counts[Severity.ERROR]} error(s), {counts[Severity.WARNING]} warning(s), {counts[Severity.INFO]} info"
    )
    if fixed:
        summary += f"; fixed {fixed}"
    if counts[Severity.ERROR] or result.failures:
        fail(summary, use_emoji=use_emoji, use_color=use_color)
    elif total:
        warn(summary, use_emoji=use_emoji, use_color=use_color)
    else:
        ok(summary, use_emoji=use_emoji, use_color=use_color)


def json_report(result: ProjectResult, *, fixed: int = 0) -> dict[str, Any]:
    """Return a JSON-compatible report of ``result``.

    Args:
        result: Project lint result.
        fixed: Number of violations repaired before this report.

    Returns:
        dict[str, Any]: Files with their violation records, unattributed
        findings, failures and a severity summary.
    """

    counts = severity_counts(result.violations())
    return {
        "version": __version__,
        "files": [
            {"path": str(path), "violations": [violation.to_record() for violation in violations]}
            for path, violations in result.results.items()
        ],
        "unattributed": [violation.to_record() for violation in result.unattributed],
        "failures": [
            {"path": str(failure.path), "rule_id": failure.rule_id, "error": str(failure.error)}
            for failure in result.failures
        ],
        "summary": {
            "files": len(result.results),
            "errors": counts[Severity.ERROR],
            "warnings": counts[Severity.WARNING],
            "info": counts[Severity.INFO],
            "fixed": fixed,
        },
    }


def sarif_report(result: ProjectResult, registry: RuleRegistry) -> dict[str, Any]:
    """Return a SARIF 2.1.0 document describing ``result``.

    Args:
        result: Project lint result.
        registry: Registry used to describe the rules that reported.

    Returns:
        dict[str, Any]: SARIF log with a single run.
    """

    violations = result.violations()
    rules: dict[str, dict[str, object]] = {}
    entries: list[dict[str, object]] = []
    for violation in violations:
        if violation.rule_id not in rules:
            rule = registry.get_rule(violation.rule_id)
            rules[violation.rule_id] = {
                "id": violation.rule_id,
                "name": violation.rule_name,
                "shortDescription": {"text": rule.description if rule is not None else violation.rule_name},
            }
        entry: dict[str, object] = {
            "ruleId": violation.rule_id,
            "level": severity_to_sarif(violation.severity),
            "message": {"text": violation.message},
        }
        region = {"startLine": violation.line, "startColumn": violation.column}
        if violation.path is not None:
            entry["locations"] = [
                {"physicalLocation": {"artifactLocation": {"uri": violation.path.as_posix()}, "region": region}}
            ]
        entries.append(entry)
    return {
        "version": SARIF_VERSION,
        "$schema": SARIF_SCHEMA,
        "runs": [
            {
                "tool": {"driver": {"name": "mdqa", "version": __version__, "rules": list(rules.values())}},
                "results": entries,
            }
        ],
    }


def dumps(payload: dict[str, Any] | list[dict[str, Any]]) -> str:
    return json.dumps(payload, indent=2)


def rule_record(rule: Rule, provider_id: str | None, *, enabled: bool) -> dict[str, Any]:
    """Describe ``rule`` for rule listings.

    Args:
        rule: Rule to describe.
        provider_id: Provider that contributed the rule.
        enabled: Whether the active configuration runs the rule.

    Returns:
        dict[str, Any]: JSON-compatible description.
    """

    metadata = rule.metadata
    return {
        "id": rule.rule_id,
        "name": rule.name,
        "description": rule.description,
        "provider": provider_id,
        "kind": rule.kind.value,
        "category": metadata.category.value,
        "stability": metadata.stability_label,
        "overrides": metadata.overrides,
        "fixable": rule.can_fix(),
        "enabled": enabled,
    }


def render_rules_table(records: Sequence[dict[str, Any]], *, use_color: bool) -> None:
    """Print ``records`` produced by :func:`rule_record` as a table.

    Args:
        records: Rule descriptions.
        use_color: Whether ANSI styling is applied.
    """

    table = Table(box=box.SIMPLE, show_lines=False, header_style="bold" if use_color else "")
    for column in ("Rule", "Name", "Provider", "Category", "Stability", "Fix", "Enabled", "Description"):
        table.add_column(column)
    for record in records:
        table.add_row(
            record["id"],
            record["name"],
            record["provider"] or "-",
            record["category"],
            record["stability"],
            "yes" if record["fixable"] else "",
            "yes" if record["enabled"] else "no",
            record["description"],
        )
    stdout_console(use_color=use_color, use_emoji=False).print(table)


__all__ = [
    "SARIF_SCHEMA",
    "SARIF_VERSION",
    "dumps",
    "json_report",
    "render_rules_table",
    "render_text",
    "rule_record",
    "sarif_report",
    "severity_counts",
]
