# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rule-based markdown linting with pluggable rule providers."""

from __future__ import annotations

from importlib import metadata

try:
    __version__ = metadata.version("mdqa")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"

from .config import Config, DeprecatedWarningLevel, discover_config, load_config
from .document import Document, SyntaxTree
from .engine import BatchResult, LintEngine, LintFailure, ProjectResult
from .errors import (
    ConfigError,
    DocumentEncodingError,
    DocumentParseError,
    DuplicateRuleIdError,
    MdqaError,
    PluginError,
    RuleCheckError,
)
from .fixes import apply_fix, apply_fixes
from .plugins import PluginRegistry, RuleProvider
from .rules import (
    CollectionRule,
    Deprecated,
    Experimental,
    LineRule,
    Reserved,
    Rule,
    RuleCategory,
    RuleMetadata,
    RuleRegistry,
    Stable,
    TreeRule,
)
from .severity import Severity
from .violation import Fix, Position, Violation

__all__ = [
    "BatchResult",
    "CollectionRule",
    "Config",
    "ConfigError",
    "Deprecated",
    "DeprecatedWarningLevel",
    "Document",
    "DocumentEncodingError",
    "DocumentParseError",
    "DuplicateRuleIdError",
    "Experimental",
    "Fix",
    "LineRule",
    "LintEngine",
    "LintFailure",
    "MdqaError",
    "PluginError",
    "PluginRegistry",
    "Position",
    "ProjectResult",
    "Reserved",
    "Rule",
    "RuleCategory",
    "RuleCheckError",
    "RuleMetadata",
    "RuleProvider",
    "RuleRegistry",
    "Severity",
    "Stable",
    "SyntaxTree",
    "TreeRule",
    "Violation",
    "__version__",
    "apply_fix",
    "apply_fixes",
    "discover_config",
    "load_config",
]
