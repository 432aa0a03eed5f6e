# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolved lint configuration and rule-selection semantics."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..rules.base import Deprecated

# Rules markdownlint ships disabled; skipped by default in compatible mode.
MARKDOWNLINT_DISABLED_RULES: Final[frozenset[str]] = frozenset({"MD044"})

_RULES_TABLE_KEY: Final[str] = "rules"
_RULE_CONFIGS_KEY: Final[str] = "rule_configs"
_AUTO_FIX_KEY: Final[str] = "auto-fix"


class DeprecatedWarningLevel(str, Enum):
    """How loudly to announce that a deprecated rule is active."""

    WARN = "warn"
    INFO = "info"
    SILENT = "silent"

    @property
    def log_level(self) -> int | None:
        """Return the :mod:`logging` level used for notices.

        Returns:
            int | None: Logging level, ``None`` when notices are silenced.
        """

        return _LOG_LEVELS[self]


_LOG_LEVELS: Final[dict[DeprecatedWarningLevel, int | None]] = {
    DeprecatedWarningLevel.WARN: logging.WARNING,
    DeprecatedWarningLevel.INFO: logging.INFO,
    DeprecatedWarningLevel.SILENT: None,
}


def _category_token(category: object) -> str:
    value = getattr(category, "value", category)
    return str(value).strip().lower()


class Config(BaseModel):
    """Immutable configuration shared by every document of a run.

    Options use the kebab-case names of configuration files as aliases, while
    the snake_case field names are accepted as well. Any other table in the
    input is treated as the per-rule configuration for the rule of that id.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    enabled_categories: frozenset[str] = Field(default_factory=frozenset, alias="enabled-categories")
    disabled_categories: frozenset[str] = Field(default_factory=frozenset, alias="disabled-categories")
    enabled_rules: frozenset[str] = Field(default_factory=frozenset, alias="enabled-rules")
    disabled_rules: frozenset[str] = Field(default_factory=frozenset, alias="disabled-rules")
    deprecated_warning: DeprecatedWarningLevel = Field(
        default=DeprecatedWarningLevel.WARN,
        alias="deprecated-warning",
    )
    markdownlint_compatible: bool = Field(default=False, alias="markdownlint-compatible")
    auto_fix: bool = Field(default=True, alias="auto-fix")
    rule_configs: dict[str, dict[str, Any]] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _collect_rule_tables(cls, data: object) -> object:
        """Move per-rule tables into :attr:`rule_configs`.

        Args:
            data: Raw configuration mapping.

        Returns:
            object: Normalised payload.

        Raises:
            ValueError: If an unknown scalar option is present.
        """

        if not isinstance(data, Mapping):
            return data
        known: set[str] = set()
        for name, info in cls.model_fields.items():
            known.add(name)
            if info.alias:
                known.add(info.alias)
        payload: dict[str, object] = {}
        rule_configs: dict[str, dict[str, Any]] = {}
        for key, value in data.items():
            if key == _RULE_CONFIGS_KEY or key == _RULES_TABLE_KEY:
                if not isinstance(value, Mapping):
                    raise ValueError(f"'{key}' must be a table keyed by rule id")
                rule_configs.update({str(rule): dict(options) for rule, options in value.items()})
            elif key in known:
                payload[key] = value
            elif isinstance(value, Mapping):
                rule_configs[str(key)] = dict(value)
            else:
                raise ValueError(f"unknown configuration option '{key}'")
        payload[_RULE_CONFIGS_KEY] = rule_configs
        return payload

    @field_validator("enabled_categories", "disabled_categories", mode="before")
    @classmethod
    def _normalise_categories(cls, value: object) -> object:
        if isinstance(value, str):
            value = [value]
        if isinstance(value, (list, tuple, set, frozenset)):
            return frozenset(_category_token(item) for item in value)
        return value

    @field_validator("enabled_rules", "disabled_rules", mode="before")
    @classmethod
    def _normalise_rules(cls, value: object) -> object:
        if isinstance(value, str):
            return frozenset({value.strip()})
        if isinstance(value, (list, tuple, set, frozenset)):
            return frozenset(str(item).strip() for item in value)
        return value

    def should_run(self, rule_id: str, rule_category: object, default_enabled: bool) -> bool:
        """Return whether ``rule_id`` runs under this configuration.

        Precedence: enabled rule, disabled rule, enabled category, disabled
        category, then ``default_enabled``.

        Args:
            rule_id: Identifier of the rule.
            rule_category: Category of the rule (enum member or name).
            default_enabled: State used when no option mentions the rule.

        Returns:
            bool: ``True`` when the rule should run.
        """

        if rule_id in self.enabled_rules:
            return True
        if rule_id in self.disabled_rules:
            return False
        category = _category_token(rule_category)
        if category in self.enabled_categories:
            return True
        if category in self.disabled_categories:
            return False
        return default_enabled

    def default_enabled(self, rule_id: str, *, declared: bool, deprecated: bool) -> bool:
        """Return the default-enabled state of a rule under this configuration.

        Args:
            rule_id: Identifier of the rule.
            declared: Default declared by the rule's metadata.
            deprecated: Whether the rule is deprecated.

        Returns:
            bool: Default state fed into :meth:`should_run`.
        """

        if deprecated:
            return False
        if self.markdownlint_compatible and rule_id in MARKDOWNLINT_DISABLED_RULES:
            return False
        return declared

    def rule_config(self, rule_id: str) -> Mapping[str, Any]:
        """Return the opaque configuration table of ``rule_id``.

        Args:
            rule_id: Identifier of the rule.

        Returns:
            Mapping[str, Any]: Rule options, empty when none are configured.
        """

        return self.rule_configs.get(rule_id, {})

    def should_auto_fix(self, rule_id: str) -> bool:
        """Return whether fixes from ``rule_id`` may be applied automatically.

        Args:
            rule_id: Identifier of the rule.

        Returns:
            bool: Per-rule ``auto-fix`` when set, otherwise the global switch.
        """

        value = self.rule_config(rule_id).get(_AUTO_FIX_KEY)
        if isinstance(value, bool):
            return value
        return self.auto_fix

    def deprecation_notice(self, rule_id: str, stability: Deprecated) -> tuple[int, str] | None:
        """Return the log level and message announcing an active deprecated rule.

        Args:
            rule_id: Identifier of the deprecated rule.
            stability: Deprecation details of the rule.

        Returns:
            tuple[int, str] | None: ``(level, message)``, or ``None`` when silenced.
        """

        level = self.deprecated_warning.log_level
        if level is None:
            return None
        message = f"Rule {rule_id} is deprecated - {stability.reason}."
        if stability.superseded_by:
            message = f"{message} Consider using {stability.superseded_by} instead."
        return level, message

    def to_dict(self) -> dict[str, Any]:
        """Return the configuration using file option names.

        Returns:
            dict[str, Any]: Serialisable mapping.
        """

        payload = self.model_dump(mode="json", by_alias=True, exclude={"rule_configs"})
        for key in ("enabled-categories", "disabled-categories", "enabled-rules", "disabled-rules"):
            payload[key] = sorted(payload[key])
        payload.update(self.rule_configs)
        return payload


__all__ = ["Config", "DeprecatedWarningLevel", "MARKDOWNLINT_DISABLED_RULES"]
