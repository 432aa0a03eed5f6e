# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Recognise Architecture Decision Records and extract their fields.

Two layouts are understood:

* Nygard: ``# N. Title`` followed by a ``## Status`` section.
* MADR: YAML frontmatter carrying ``status`` with the number in the file name.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Final

import yaml

from ...document import Document
from ..common import FRONTMATTER_DELIMITER

NYGARD_TITLE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^#\s+(\d+)[.\-\s]+\s*(.+)$")
NYGARD_STATUS_PATTERN: Final[re.Pattern[str]] = re.compile(r"^##\s+Status\s*\n+\s*(\w+)", re.IGNORECASE | re.MULTILINE)
FILENAME_NUMBER_PATTERN: Final[re.Pattern[str]] = re.compile(r"^([^-_]+)")
ADR_DIRECTORIES: Final[frozenset[str]] = frozenset({"adr", "adrs"})
TITLE_SEARCH_LINES: Final[int] = 10
DETECTION_LINES: Final[int] = 5


class AdrFormat(str, Enum):
    """Layout of an ADR document."""

    NYGARD = "nygard"
    MADR = "madr"

    @property
    def label(self) -> str:
        return "Nygard" if self is AdrFormat.NYGARD else "MADR"


@dataclass(frozen=True, slots=True)
class Frontmatter:
    """Parsed YAML frontmatter block.

    Attributes:
        start_line: 1-based line of the opening delimiter.
        data: Parsed mapping, ``None`` when parsing failed.
        error: Description of the parse failure.
    """

    start_line: int
    data: Mapping[str, Any] | None
    error: str | None = None


def detect_format(content: str) -> AdrFormat:
    if content.lstrip().startswith(FRONTMATTER_DELIMITER):
        return AdrFormat.MADR
    return AdrFormat.NYGARD


def parse_frontmatter(content: str) -> Frontmatter | None:
    """Parse the YAML frontmatter at the top of ``content``.

    Leading blank lines before the opening delimiter are allowed.

    Args:
        content: Document text.

    Returns:
        Frontmatter | None: Parsed block, or ``None`` when there is none.
    """

    lines = content.split("\n")
    start = 0
    while start < len(lines) and not lines[start].strip():
        start += 1
    if start >= len(lines) or lines[start].strip() != FRONTMATTER_DELIMITER:
        return None
    for end in range(start + 1, len(lines)):
        if lines[end].strip() == FRONTMATTER_DELIMITER:
            break
    else:
        return Frontmatter(start + 1, None, "No closing '---' delimiter found for frontmatter")
    try:
        data = yaml.safe_load("\n".join(lines[start + 1 : end]))
    except yaml.YAMLError as exc:
        return Frontmatter(start + 1, None, f"Failed to parse YAML frontmatter: {exc}")
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        return Frontmatter(start + 1, None, "Frontmatter must be a mapping")
    return Frontmatter(start + 1, data)


def extract_nygard_number(line: str) -> int | None:
    match = NYGARD_TITLE_PATTERN.match(line)
    return int(match.group(1)) if match else None


def is_nygard_title(line: str) -> bool:
    return NYGARD_TITLE_PATTERN.match(line) is not None


def is_adr_document(document: Document) -> bool:
    """Return whether ``document`` looks like an ADR.

    A document qualifies when it lives under an ``adr``/``adrs`` directory,
    has frontmatter declaring ``status``, or opens with a Nygard title.

    Args:
        document: Document to classify.

    Returns:
        bool: ``True`` for ADR documents.
    """

    if any(part.lower() in ADR_DIRECTORIES for part in document.path.parts[:-1]):
        return True
    frontmatter = parse_frontmatter(document.content)
    if frontmatter is not None and frontmatter.data is not None and "status" in frontmatter.data:
        return True
    return any(is_nygard_title(line) for line in document.lines[:DETECTION_LINES])


def adr_number(document: Document) -> int | None:
    """Return the ADR number from the Nygard title or the MADR file name.

    Args:
        document: ADR document.

    Returns:
        int | None: ADR number when one can be determined.
    """

    if detect_format(document.content) is AdrFormat.NYGARD:
        for line in document.lines[:TITLE_SEARCH_LINES]:
            number = extract_nygard_number(line)
            if number is not None:
                return number
        return None
    match = FILENAME_NUMBER_PATTERN.match(document.path.name)
    if match is None or not match.group(1).isdigit():
        return None
    return int(match.group(1))


def adr_status(document: Document) -> str | None:
    """Return the declared status of an ADR.

    Args:
        document: ADR document.

    Returns:
        str | None: Status word, or ``None`` when none is declared.
    """

    if detect_format(document.content) is AdrFormat.MADR:
        frontmatter = parse_frontmatter(document.content)
        if frontmatter is None or frontmatter.data is None:
            return None
        status = frontmatter.data.get("status")
        return str(status).strip() if status is not None else None
    match = NYGARD_STATUS_PATTERN.search(document.content)
    return match.group(1) if match else None


__all__ = [
    "AdrFormat",
    "Frontmatter",
    "adr_number",
    "adr_status",
    "detect_format",
    "extract_nygard_number",
    "is_adr_document",
    "is_nygard_title",
    "parse_frontmatter",
]
