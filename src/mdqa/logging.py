# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Console output and log routing for mdqa's command-line surface.

Status lines (``info``, ``ok``, ``warn``, ``fail``) go to stdout through
cached Rich consoles; records of the ``mdqa`` logger hierarchy go to stderr
once :func:`configure_logging` has installed a Rich handler.
"""

from __future__ import annotations

import logging
import sys
from enum import Enum
from functools import lru_cache
from typing import Final

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

PACKAGE_LOGGER: Final[str] = "mdqa"


class MessageKind(Enum):
    """Status line flavours with their glyph and colour."""

    INFO = ("ℹ️ ", "cyan")
    OK = ("✅ ", "green")
    WARN = ("⚠️ ", "yellow")
    FAIL = ("❌ ", "red")

    @property
    def glyph(self) -> str:
        return self.value[0]

    @property
    def style(self) -> str:
        return self.value[1]


def detect_tty() -> bool:
    """Report whether stdout is attached to a terminal.

    Returns:
        bool: ``False`` when stdout is redirected, closed or lacks ``isatty``.
    """

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


class ConsoleCache:
    """Hand out stdout consoles, one per colour/emoji/terminal combination.

    A cached console is replaced when ``sys.stdout`` has been swapped since it
    was built, which keeps output redirection (test runners, pipes) working.
    """

    def __init__(self) -> None:
        self._consoles: dict[tuple[bool, bool, bool], Console] = {}

    def console(self, *, color: bool, emoji: bool) -> Console:
        tty = detect_tty()
        styled = color and tty
        key = (styled, emoji, tty)
        cached = self._consoles.get(key)
        if cached is not None and cached.file is sys.stdout:
            return cached
        built = Console(
            file=sys.stdout,
            color_system="auto" if styled else None,
            force_terminal=tty,
            no_color=not styled,
            emoji=emoji,
            soft_wrap=True,
        )
        self._consoles[key] = built
        return built


@lru_cache(maxsize=1)
def get_console_cache() -> ConsoleCache:
    return ConsoleCache()


def stdout_console(*, use_color: bool, use_emoji: bool) -> Console:
    """Return the shared stdout console for the given output preferences.

    Args:
        use_color: Whether ANSI styling may be emitted on a terminal.
        use_emoji: Whether Rich renders emoji codes.

    Returns:
        Console: Console writing to the current ``sys.stdout``.
    """

    return get_console_cache().console(color=use_color, emoji=use_emoji)


def say(kind: MessageKind, msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Print one status line of ``kind``.

    Args:
        kind: Status flavour deciding glyph and colour.
        msg: Text of the line.
        use_emoji: Prefix the line with the kind's glyph.
        use_color: Colour the line; follows terminal detection when ``None``.
    """

    styled = detect_tty() if use_color is None else use_color
    text = Text(f"{kind.glyph}{msg}" if use_emoji else msg)
    if styled:
        text.stylize(kind.style)
    stdout_console(use_color=styled, use_emoji=use_emoji).print(text)


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    say(MessageKind.INFO, msg, use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    say(MessageKind.OK, msg, use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    say(MessageKind.WARN, msg, use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    say(MessageKind.FAIL, msg, use_emoji=use_emoji, use_color=use_color)


def configure_logging(level: int = logging.WARNING, *, use_color: bool = True) -> None:
    """Send ``mdqa`` log records at ``level`` and above to stderr via Rich.

    Repeated calls swap the handler rather than stacking another one.

    Args:
        level: Minimum level emitted.
        use_color: Whether the handler may emit ANSI styling.
    """

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        if isinstance(handler, RichHandler):
            package_logger.removeHandler(handler)
    handler = RichHandler(
        console=Console(stderr=True, no_color=not use_color, soft_wrap=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)


__all__ = [
    "ConsoleCache",
    "MessageKind",
    "configure_logging",
    "detect_tty",
    "fail",
    "get_console_cache",
    "info",
    "ok",
    "say",
    "stdout_console",
    "warn",
]
