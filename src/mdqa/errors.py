# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Custom exceptions raised by the lint engine and its registries."""

from __future__ import annotations

from pathlib import Path


class MdqaError(RuntimeError):
    """Base class for every error raised by mdqa."""


class DocumentEncodingError(MdqaError):
    """Raised when document content cannot be decoded as text."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: content is not valid UTF-8 text ({reason})")
        self.path = path


class DocumentParseError(MdqaError):
    """Raised when the markdown syntax tree for a document cannot be built."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: failed to parse markdown ({reason})")
        self.path = path
        self.reason = reason


class DuplicateRuleIdError(MdqaError):
    """Raised when two rules are registered under the same identifier."""

    def __init__(self, rule_id: str, *, provider_id: str | None = None) -> None:
        origin = f" by provider '{provider_id}'" if provider_id else ""
        super().__init__(f"Rule '{rule_id}' registered more than once{origin}")
        self.rule_id = rule_id
        self.provider_id = provider_id


class RuleCheckError(MdqaError):
    """Raised when a single rule fails while checking a single document."""

    def __init__(self, rule_id: str, path: Path | None, reason: str) -> None:
        location = str(path) if path is not None else "<collection>"
        super().__init__(f"{location}: rule {rule_id} failed ({reason})")
        self.rule_id = rule_id
        self.path = path
        self.reason = reason


class PluginError(MdqaError):
    """Raised when a rule provider cannot be registered."""


class ConfigError(MdqaError):
    """Raised when configuration input is invalid."""


__all__ = [
    "ConfigError",
    "DocumentEncodingError",
    "DocumentParseError",
    "DuplicateRuleIdError",
    "MdqaError",
    "PluginError",
    "RuleCheckError",
]
