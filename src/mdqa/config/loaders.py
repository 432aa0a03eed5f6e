# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Configuration file sources (TOML, YAML, JSON, pyproject)."""

from __future__ import annotations

import json
import logging
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

import yaml
from pydantic import ValidationError

from ..errors import ConfigError
from .models import Config

LOGGER = logging.getLogger(__name__)

PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "mdqa"
PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
CONFIG_FILENAMES: Final[tuple[str, ...]] = (
    ".mdqa.toml",
    "mdqa.toml",
    ".mdqa.yaml",
    ".mdqa.yml",
    ".mdqa.json",
)

_LIST_OPTIONS: Final[tuple[str, ...]] = (
    "enabled-categories",
    "disabled-categories",
    "enabled-rules",
    "disabled-rules",
)


def _read_payload(path: Path) -> Mapping[str, Any]:
    """Parse ``path`` according to its suffix.

    Args:
        path: Configuration file.

    Returns:
        Mapping[str, Any]: Raw configuration table.

    Raises:
        ConfigError: If the file cannot be read or decoded.
    """

    suffix = path.suffix.lower()
    try:
        text = path.read_text(encoding="utf-8")
        if suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(text) or {}
        elif suffix == ".json":
            data = json.loads(text)
        else:
            data = tomllib.loads(text)
    except OSError as exc:
        raise ConfigError(f"Unable to read configuration {path}: {exc}") from exc
    except (tomllib.TOMLDecodeError, yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid configuration in {path}: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ConfigError(f"Configuration at {path} must be a table")
    if path.name == PYPROJECT_FILENAME:
        tool = data.get(PYPROJECT_TOOL_KEY, {})
        section = tool.get(PYPROJECT_SECTION_KEY, {}) if isinstance(tool, Mapping) else {}
        if not isinstance(section, Mapping):
            raise ConfigError(f"[tool.{PYPROJECT_SECTION_KEY}] in {path} must be a table")
        return section
    return data


def config_from_mapping(data: Mapping[str, Any], *, source: str = "<mapping>") -> Config:
    """Validate ``data`` into a :class:`Config`.

    Args:
        data: Raw configuration table.
        source: Description of where ``data`` came from, used in errors.

    Returns:
        Config: Validated configuration.

    Raises:
        ConfigError: If validation fails.
    """

    try:
        return Config.model_validate(dict(data))
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {source}: {exc}") from exc


def load_config(path: Path) -> Config:
    """Load configuration from ``path``.

    TOML, YAML and JSON are selected by suffix; any other suffix is read as
    TOML. For ``pyproject.toml`` only the ``[tool.mdqa]`` table is used.

    Args:
        path: Configuration file.

    Returns:
        Config: Validated configuration.
    """

    config = config_from_mapping(_read_payload(path), source=str(path))
    LOGGER.debug("loaded configuration from %s", path)
    return config


def _has_pyproject_section(path: Path) -> bool:
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError):
        return False
    tool = data.get(PYPROJECT_TOOL_KEY, {})
    return isinstance(tool, Mapping) and PYPROJECT_SECTION_KEY in tool


def discover_config(start: Path) -> Path | None:
    """Return the nearest configuration file at or above ``start``.

    Dedicated configuration files win over a ``pyproject.toml`` in the same
    directory; the latter only counts when it has a ``[tool.mdqa]`` table.

    Args:
        start: File or directory where the search begins.

    Returns:
        Path | None: Configuration path, or ``None`` when none exists.
    """

    directory = start if start.is_dir() else start.parent
    for candidate_dir in (directory.resolve(), *directory.resolve().parents):
        for name in CONFIG_FILENAMES:
            candidate = candidate_dir / name
            if candidate.is_file():
                return candidate
        pyproject = candidate_dir / PYPROJECT_FILENAME
        if pyproject.is_file() and _has_pyproject_section(pyproject):
            return pyproject
    return None


def merge_configs(base: Config, override: Config) -> Config:
    """Layer ``override`` on top of ``base``.

    Non-empty lists replace, booleans are set when truthy in ``override``, a
    non-default deprecation level replaces, and rule tables extend ``base``.

    Args:
        base: Lower priority configuration.
        override: Higher priority configuration.

    Returns:
        Config: Merged configuration.
    """

    merged = base.to_dict()
    incoming = override.to_dict()
    for key in _LIST_OPTIONS:
        if incoming[key]:
            merged[key] = incoming[key]
    if override.markdownlint_compatible:
        merged["markdownlint-compatible"] = True
    if override.deprecated_warning is not Config().deprecated_warning:
        merged["deprecated-warning"] = incoming["deprecated-warning"]
    if not override.auto_fix:
        merged["auto-fix"] = False
    for rule_id, options in override.rule_configs.items():
        merged[rule_id] = {**base.rule_config(rule_id), **options}
    return config_from_mapping(merged, source="merged configuration")


__all__ = [
    "CONFIG_FILENAMES",
    "config_from_mapping",
    "discover_config",
    "load_config",
    "merge_configs",
]
