# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Built-in rule families."""

from __future__ import annotations

from ..plugins import RuleProvider
from .adr import AdrProvider
from .content import ContentProvider
from .mdbook import MdBookProvider
from .standard import StandardProvider


def builtin_providers() -> tuple[RuleProvider, ...]:
    """Return fresh instances of the built-in providers in registration order.

    Returns:
        tuple[RuleProvider, ...]: Standard, mdBook, ADR and content providers.
    """

    return (StandardProvider(), MdBookProvider(), AdrProvider(), ContentProvider())


__all__ = [
    "AdrProvider",
    "ContentProvider",
    "MdBookProvider",
    "StandardProvider",
    "builtin_providers",
]
