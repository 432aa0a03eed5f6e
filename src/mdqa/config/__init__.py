# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and loaders."""

from __future__ import annotations

from .loaders import CONFIG_FILENAMES, config_from_mapping, discover_config, load_config, merge_configs
from .models import MARKDOWNLINT_DISABLED_RULES, Config, DeprecatedWarningLevel

__all__ = [
    "CONFIG_FILENAMES",
    "Config",
    "DeprecatedWarningLevel",
    "MARKDOWNLINT_DISABLED_RULES",
    "config_from_mapping",
    "discover_config",
    "load_config",
    "merge_configs",
]
