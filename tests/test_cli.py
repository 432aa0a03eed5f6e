# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the ``mdqa`` command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from mdqa import __version__
from mdqa.cli.app import app


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def _check(*args: str):
    runner = CliRunner()
    return runner.invoke(app, ["check", "--no-plugins", "--no-color", "--no-emoji", *args])


def test_version_option() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"mdqa {__version__}" in result.stdout


def test_clean_document_exits_zero(tmp_path: Path) -> None:
    doc = _write(tmp_path / "clean.md", "# Title\n\nSome text.\n")

    result = _check(str(doc))

    assert result.exit_code == 0
    assert "0 issue(s) in 1 file(s)" in result.stdout


def test_errors_exit_one_and_are_listed(tmp_path: Path) -> None:
    doc = _write(tmp_path / "deep.md", "# Title\n\n#### Deep\n")

    result = _check(str(doc))

    assert result.exit_code == 1
    assert f"{doc}:3:1 error MD001/heading-increment" in result.stdout


def test_warnings_fail_only_when_requested(tmp_path: Path) -> None:
    doc = _write(tmp_path / "tabs.md", "# Title\n\nText\tmore\n")

    assert _check(str(doc)).exit_code == 0
    assert _check("--fail-on-warnings", str(doc)).exit_code == 1
    assert _check("--fail-on-warnings", "--disable", "MD010", str(doc)).exit_code == 0


def test_fix_rewrites_files(tmp_path: Path) -> None:
    doc = _write(tmp_path / "tabs.md", "# Title\n\nText\tmore\n")

    result = _check("--fix", "--format", "json", str(doc))

    assert result.exit_code == 0
    assert doc.read_text(encoding="utf-8") == "# Title\n\nText    more\n"
    report = json.loads(result.stdout)
    assert report["summary"]["fixed"] == 1
    assert report["files"] == [{"path": str(doc), "violations": []}]


def test_json_report(tmp_path: Path) -> None:
    _write(tmp_path / "docs" / "a.md", "# Title\n\n#### Deep\n")
    _write(tmp_path / "docs" / "b.md", "# Title\n\nText\tmore\n")

    result = _check("--format", "json", "--jobs", "2", str(tmp_path / "docs"))

    assert result.exit_code == 1
    report = json.loads(result.stdout)
    assert [entry["path"] for entry in report["files"]] == [
        str(tmp_path / "docs" / "a.md"),
        str(tmp_path / "docs" / "b.md"),
    ]
    assert [v["rule_id"] for v in report["files"][0]["violations"]] == ["MD001"]
    assert [v["rule_id"] for v in report["files"][1]["violations"]] == ["MD010"]
    assert report["summary"] == {"files": 2, "errors": 1, "warnings": 1, "info": 0, "fixed": 0}
    assert report["failures"] == []


def test_enable_option_turns_on_opt_in_rules(tmp_path: Path) -> None:
    doc = _write(tmp_path / "todo.md", "# Title\n\nTODO: finish\n")

    result = _check("--format", "json", "--enable", "CONTENT001", str(doc))

    report = json.loads(result.stdout)
    assert [v["rule_id"] for v in report["files"][0]["violations"]] == ["CONTENT001"]


def test_sarif_report(tmp_path: Path) -> None:
    doc = _write(tmp_path / "deep.md", "# Title\n\n#### Deep\n")

    result = _check("--format", "sarif", str(doc))

    sarif = json.loads(result.stdout)
    assert sarif["version"] == "2.1.0"
    run = sarif["runs"][0]
    assert run["tool"]["driver"]["name"] == "mdqa"
    assert [rule["id"] for rule in run["tool"]["driver"]["rules"]] == ["MD001"]
    assert run["results"][0]["level"] == "error"
    location = run["results"][0]["locations"][0]["physicalLocation"]
    assert location["region"] == {"startLine": 3, "startColumn": 1}


def test_missing_path_exits_two(tmp_path: Path) -> None:
    result = _check(str(tmp_path / "missing.md"))
    assert result.exit_code == 2


def test_invalid_config_exits_two(tmp_path: Path) -> None:
    doc = _write(tmp_path / "clean.md", "# Title\n")
    config = _write(tmp_path / "broken.toml", "enabled-rules = [\n")

    result = _check("--config", str(config), str(doc))

    assert result.exit_code == 2


def test_discovered_config_is_applied(tmp_path: Path) -> None:
    _write(tmp_path / ".mdqa.toml", 'disabled-rules = ["MD001"]\n')
    doc = _write(tmp_path / "deep.md", "# Title\n\n#### Deep\n")

    assert _check(str(doc)).exit_code == 0


def test_rules_json_listing() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["rules", "--no-plugins", "--format", "json"])

    assert result.exit_code == 0
    records = {record["id"]: record for record in json.loads(result.stdout)}
    assert records["MD001"]["provider"] == "standard"
    assert records["MD001"]["enabled"] is True
    assert records["MD002"]["enabled"] is False
    assert records["CONTENT001"]["enabled"] is False
    assert records["MDBOOK001"]["overrides"] == "MD040"
    assert records["ADR011"]["kind"] == "collection"


def test_rules_provider_filter() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["rules", "--no-plugins", "--format", "json", "--provider", "mdbook"])

    assert result.exit_code == 0
    assert [record["id"] for record in json.loads(result.stdout)] == ["MDBOOK001", "MDBOOK021", "MDBOOK022"]


def test_rules_unknown_provider_exits_two() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["rules", "--no-plugins", "--provider", "nope"])
    assert result.exit_code == 2


def test_rules_invalid_rule_options_exit_two(tmp_path: Path) -> None:
    config = _write(tmp_path / "mdqa.toml", '[MD013]\nline-length = "wide"\n')
    runner = CliRunner()

    result = runner.invoke(app, ["rules", "--no-plugins", "--no-color", "--config", str(config)])

    assert result.exit_code == 2
    assert "Invalid options for MD013" in result.stdout


def test_check_reports_rule_failures_with_other_findings(tmp_path: Path, monkeypatch) -> None:
    from mdqa.rulesets.standard import LineLength

    def explode(self, document):
        raise RuntimeError("boom")

    monkeypatch.setattr(LineLength, "check", explode)
    doc = _write(tmp_path / "deep.md", "# Title\n\n#### Deep\n")

    result = _check("--format", "json", str(doc))

    assert result.exit_code == 2
    report = json.loads(result.stdout)
    assert [v["rule_id"] for v in report["files"][0]["violations"]] == ["MD001"]
    assert [(f["rule_id"], f["error"]) for f in report["failures"]] == [
        ("MD013", f"{doc}: rule MD013 failed (boom)"),
    ]
