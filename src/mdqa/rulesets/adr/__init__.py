# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Architecture Decision Record rules."""

from __future__ import annotations

from ..common import BuiltinProvider
from .collection import AdrNoDuplicateNumbers, AdrSequentialNumbering, AdrSupersededHasReplacement
from .format import AdrFormat, adr_number, adr_status, detect_format, is_adr_document, parse_frontmatter
from .rules import AdrRequiredStatus, AdrTitleFormat


class AdrProvider(BuiltinProvider):
    """Rules for Nygard and MADR decision records."""

    provider_id = "adr"
    description = "Architecture Decision Record rules"
    rule_types = (
        AdrTitleFormat,
        AdrRequiredStatus,
        AdrSupersededHasReplacement,
        AdrSequentialNumbering,
        AdrNoDuplicateNumbers,
    )


__all__ = [
    "AdrFormat",
    "AdrNoDuplicateNumbers",
    "AdrProvider",
    "AdrRequiredStatus",
    "AdrSequentialNumbering",
    "AdrSupersededHasReplacement",
    "AdrTitleFormat",
    "adr_number",
    "adr_status",
    "detect_format",
    "is_adr_document",
    "parse_frontmatter",
]
