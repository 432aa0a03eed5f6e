# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command-line entry point exposing ``check`` and ``rules``."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import Enum
from pathlib import Path

import typer

from .. import __version__
from ..config import Config, discover_config, load_config
from ..document import Document
from ..engine import LintEngine, LintFailure, ProjectResult
from ..errors import MdqaError
from ..logging import configure_logging, detect_tty, fail, info
from ..plugins import PluginRegistry
from ..severity import Severity
from .discovery import collect_markdown_files
from .reporting import (
    dumps,
    json_report,
    render_rules_table,
    render_text,
    rule_record,
    sarif_report,
    severity_counts,
)
from .typer_ext import create_typer

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_VIOLATIONS = 1
EXIT_ERROR = 2

app = create_typer(
    name="mdqa",
    help="Rule-based markdown linter.",
    no_args_is_help=True,
    add_completion=False,
)


class OutputFormat(str, Enum):
    """Report formats supported by ``mdqa check``."""

    TEXT = "text"
    JSON = "json"
    SARIF = "sarif"


class ListFormat(str, Enum):
    """Listing formats supported by ``mdqa rules``."""

    TABLE = "table"
    JSON = "json"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"mdqa {__version__}")
        raise typer.Exit(code=EXIT_OK)


@app.callback()
def _root(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Lint markdown documents with pluggable rule providers."""


def resolve_config(
    config_path: Path | None,
    paths: Sequence[Path],
    *,
    enable: Sequence[str] = (),
    disable: Sequence[str] = (),
) -> Config:
    """Load the run configuration and apply command-line rule overrides.

    An explicit ``config_path`` wins; otherwise the nearest configuration file
    above the first path (or the working directory) is used.

    Args:
        config_path: Configuration file given with ``--config``.
        paths: Paths being linted.
        enable: Rule ids forced on.
        disable: Rule ids forced off.

    Returns:
        Config: Effective configuration.

    Raises:
        ConfigError: If the configuration file is invalid.
    """

    if config_path is not None:
        config = load_config(config_path)
    else:
        start = paths[0] if paths else Path.cwd()
        discovered = discover_config(start)
        config = load_config(discovered) if discovered is not None else Config()
        if discovered is not None:
            LOGGER.debug("using configuration %s", discovered)

    enabled = {rule_id.strip() for rule_id in enable if rule_id.strip()}
    disabled = {rule_id.strip() for rule_id in disable if rule_id.strip()}
    if not enabled and not disabled:
        return config
    return config.model_copy(
        update={
            "enabled_rules": frozenset((config.enabled_rules - disabled) | enabled),
            "disabled_rules": frozenset((config.disabled_rules - enabled) | disabled),
        }
    )


def load_documents(files: Sequence[Path]) -> tuple[list[Document], list[LintFailure]]:
    """Read ``files`` into documents, collecting unreadable ones as failures.

    Args:
        files: Markdown files to read.

    Returns:
        tuple[list[Document], list[LintFailure]]: Loaded documents and failures.
    """

    documents: list[Document] = []
    failures: list[LintFailure] = []
    for path in files:
        try:
            documents.append(Document.from_path(path))
        except MdqaError as exc:
            failures.append(LintFailure(path, exc))
        except OSError as exc:
            failures.append(LintFailure(path, MdqaError(f"{path}: {exc.strerror or exc}")))
    return documents, failures


def fix_documents(engine: LintEngine, documents: Sequence[Document], result: ProjectResult) -> tuple[int, list[Document]]:
    """Apply permitted fixes and write changed documents back to disk.

    Args:
        engine: Engine deciding which fixes are allowed.
        documents: Documents that were linted.
        result: Lint result for ``documents``.

    Returns:
        tuple[int, list[Document]]: Number of applied fixes and the documents
        reloaded from their new content.
    """

    fixed = 0
    updated: list[Document] = []
    for document in documents:
        violations = result.results.get(document.path, [])
        if not any(violation.fix is not None for violation in violations):
            updated.append(document)
            continue
        content, unfixed = engine.apply_fixes(document.content, violations)
        if content == document.content:
            updated.append(document)
            continue
        document.path.write_text(content, encoding="utf-8")
        fixed += len(violations) - len(unfixed)
        LOGGER.debug("fixed %d issue(s) in %s", len(violations) - len(unfixed), document.path)
        updated.append(Document(content, document.path))
    return fixed, updated


def exit_code(result: ProjectResult, *, fail_on_warnings: bool) -> int:
    """Return the process exit code for ``result``.

    Args:
        result: Project lint result.
        fail_on_warnings: Whether warnings fail the run.

    Returns:
        int: ``2`` for failures, ``1`` for errors (or warnings when requested), else ``0``.
    """

    if result.failures:
        return EXIT_ERROR
    counts = severity_counts(result.violations())
    if counts[Severity.ERROR] or (fail_on_warnings and counts[Severity.WARNING]):
        return EXIT_VIOLATIONS
    return EXIT_OK


@app.command()
def check(
    paths: list[Path] = typer.Argument(..., help="Markdown files or directories to lint."),
    config_path: Path | None = typer.Option(None, "--config", "-c", help="Configuration file to use."),
    fix: bool = typer.Option(False, "--fix", help="Apply automatic fixes in place."),
    jobs: int = typer.Option(1, "--jobs", "-j", min=1, help="Worker threads for per-document linting."),
    enable: list[str] | None = typer.Option(None, "--enable", help="Enable a rule by id (repeatable)."),
    disable: list[str] | None = typer.Option(None, "--disable", help="Disable a rule by id (repeatable)."),
    fail_on_warnings: bool = typer.Option(False, "--fail-on-warnings", help="Exit non-zero on warnings."),
    output_format: OutputFormat = typer.Option(OutputFormat.TEXT, "--format", "-f", help="Report format."),
    no_plugins: bool = typer.Option(False, "--no-plugins", help="Skip entry-point rule providers."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable ANSI colour output."),
    no_emoji: bool = typer.Option(False, "--no-emoji", help="Disable emoji in console output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug details to stderr."),
) -> None:
    """Lint markdown documents and report violations."""

    use_color = detect_tty() and not no_color
    use_emoji = not no_emoji
    configure_logging(logging.DEBUG if verbose else logging.INFO, use_color=use_color)

    try:
        config = resolve_config(config_path, paths, enable=enable or (), disable=disable or ())
        files = collect_markdown_files(paths)
        registry = PluginRegistry.with_default_providers(include_plugins=not no_plugins)
        engine = registry.create_engine(config)
    except (MdqaError, FileNotFoundError) as exc:
        fail(str(exc), use_emoji=use_emoji, use_color=use_color)
        raise typer.Exit(code=EXIT_ERROR) from exc

    documents, load_failures = load_documents(files)
    result = engine.lint_project(documents, jobs=jobs)
    fixed = 0
    if fix:
        try:
            fixed, documents = fix_documents(engine, documents, result)
        except OSError as exc:
            fail(f"could not write fixes: {exc}", use_emoji=use_emoji, use_color=use_color)
            raise typer.Exit(code=EXIT_ERROR) from exc
        if fixed:
            result = engine.lint_project(documents, jobs=jobs)
    result.failures[:0] = load_failures

    match output_format:
        case OutputFormat.JSON:
            typer.echo(dumps(json_report(result, fixed=fixed)))
        case OutputFormat.SARIF:
            typer.echo(dumps(sarif_report(result, engine.registry)))
        case OutputFormat.TEXT:
            if not files:
                info("no markdown files found", use_emoji=use_emoji, use_color=use_color)
            render_text(result, use_color=use_color, use_emoji=use_emoji, fixed=fixed)

    raise typer.Exit(code=exit_code(result, fail_on_warnings=fail_on_warnings))


@app.command()
def rules(
    provider: str | None = typer.Option(None, "--provider", "-p", help="Only list rules from this provider."),
    config_path: Path | None = typer.Option(None, "--config", "-c", help="Configuration used to mark enabled rules."),
    output_format: ListFormat = typer.Option(ListFormat.TABLE, "--format", "-f", help="Listing format."),
    no_plugins: bool = typer.Option(False, "--no-plugins", help="Skip entry-point rule providers."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable ANSI colour output."),
) -> None:
    """List available rules with their provider, category and status."""

    use_color = detect_tty() and not no_color
    try:
        config = load_config(config_path) if config_path is not None else Config()
        plugins = PluginRegistry.with_default_providers(include_plugins=not no_plugins)
        engine = plugins.create_engine(config)
    except MdqaError as exc:
        fail(str(exc), use_emoji=True, use_color=use_color)
        raise typer.Exit(code=EXIT_ERROR) from exc

    if provider is not None and plugins.get_provider(provider) is None:
        known = ", ".join(item.provider_id for item in plugins.providers())
        fail(f"unknown provider '{provider}' (known: {known})", use_emoji=True, use_color=use_color)
        raise typer.Exit(code=EXIT_ERROR)

    records = [
        rule_record(rule, plugins.provider_for_rule(rule.rule_id), enabled=engine.is_enabled(rule))
        for rule in engine.registry.rules()
        if provider is None or plugins.provider_for_rule(rule.rule_id) == provider
    ]
    if output_format is ListFormat.JSON:
        typer.echo(dumps(records))
    else:
        render_rules_table(records, use_color=use_color)


def main() -> None:
    """Run the ``mdqa`` console script."""

    app()


__all__ = ["EXIT_ERROR", "EXIT_OK", "EXIT_VIOLATIONS", "OutputFormat", "app", "check", "main", "rules"]
