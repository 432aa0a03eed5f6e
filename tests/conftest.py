# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable, Iterable

import pytest

from mdqa.config import Config
from mdqa.engine import LintEngine
from mdqa.plugins import PluginRegistry
from mdqa.rules import Rule, RuleRegistry


@pytest.fixture
def default_engine() -> LintEngine:
    """Return an engine over every built-in provider with default configuration."""
    return PluginRegistry.with_default_providers().create_engine()


@pytest.fixture
def engine_for() -> Callable[..., LintEngine]:
    """Return a factory building an engine over the given rules only."""

    def factory(rules: Iterable[Rule], config: Config | None = None) -> LintEngine:
        return LintEngine(RuleRegistry(rules), config)

    return factory
