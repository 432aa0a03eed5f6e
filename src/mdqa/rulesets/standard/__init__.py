# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""markdownlint-compatible standard rules."""

from __future__ import annotations

from collections.abc import Iterable

from ...rules import ReservedRule, Rule, RuleCategory
from ..common import BuiltinProvider
from .code import FencedCodeLanguage
from .headings import FirstHeadingH1, FirstLineHeading, HeadingIncrement, SingleTitle
from .text import LineLength, ProperNames
from .whitespace import NoHardTabs, NoMultipleBlanks, NoTrailingSpaces, SingleTrailingNewline


class StandardProvider(BuiltinProvider):
    """Standard markdown rules numbered after markdownlint."""

    provider_id = "standard"
    description = "Standard markdown rules (MD001-MD047)"
    rule_types = (
        HeadingIncrement,
        FirstHeadingH1,
        NoTrailingSpaces,
        NoHardTabs,
        NoMultipleBlanks,
        LineLength,
        SingleTitle,
        FencedCodeLanguage,
        FirstLineHeading,
        ProperNames,
        SingleTrailingNewline,
    )

    def placeholders(self) -> Iterable[Rule]:
        yield ReservedRule(
            "MD008",
            "Unused rule number in markdownlint; kept so numbering stays aligned",
            category=RuleCategory.FORMATTING,
        )


__all__ = [
    "FencedCodeLanguage",
    "FirstHeadingH1",
    "FirstLineHeading",
    "HeadingIncrement",
    "LineLength",
    "NoHardTabs",
    "NoMultipleBlanks",
    "NoTrailingSpaces",
    "ProperNames",
    "SingleTitle",
    "SingleTrailingNewline",
    "StandardProvider",
]
