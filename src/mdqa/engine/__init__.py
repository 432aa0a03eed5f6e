# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Lint engine and its result containers."""

from __future__ import annotations

from .deduplication import deduplicate_violations
from .engine import COLLECTION_PATH, DEFAULT_CONTENT_PATH, LintEngine
from .results import BatchResult, LintFailure, ProjectResult

__all__ = [
    "BatchResult",
    "COLLECTION_PATH",
    "DEFAULT_CONTENT_PATH",
    "LintEngine",
    "LintFailure",
    "ProjectResult",
    "deduplicate_violations",
]
