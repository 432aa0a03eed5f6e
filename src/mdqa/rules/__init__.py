# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rule abstractions and the rule registry."""

from __future__ import annotations

from .base import (
    CollectionRule,
    Deprecated,
    DocumentRule,
    Experimental,
    LineRule,
    Reserved,
    ReservedRule,
    Rule,
    RuleCategory,
    RuleKind,
    RuleMetadata,
    RuleStability,
    Stable,
    TreeRule,
    invoke_collection_rule,
    invoke_document_rule,
)
from .registry import RuleRegistry

__all__ = [
    "CollectionRule",
    "Deprecated",
    "DocumentRule",
    "Experimental",
    "LineRule",
    "Reserved",
    "ReservedRule",
    "Rule",
    "RuleCategory",
    "RuleKind",
    "RuleMetadata",
    "RuleRegistry",
    "RuleStability",
    "Stable",
    "TreeRule",
    "invoke_collection_rule",
    "invoke_document_rule",
]
