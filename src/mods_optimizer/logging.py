# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Console status lines for the command line, with optional colour and emoji."""

from __future__ import annotations

import sys
from functools import lru_cache
from typing import Final, NamedTuple

from rich.console import Console
from rich.rule import Rule
from rich.text import Text


class _Level(NamedTuple):
    symbol: str
    style: str


_LEVELS: Final[dict[str, _Level]] = {
    "info": _Level("ℹ️ ", "cyan"),
    "ok": _Level("✅ ", "green"),
    "warn": _Level("⚠️ ", "yellow"),
    "fail": _Level("❌ ", "red"),
}


def detect_tty() -> bool:
    """Return ``True`` when stdout is attached to a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


@lru_cache(maxsize=8)
def get_console(*, color: bool, emoji: bool) -> Console:
    """Return a shared Rich console for the requested ``color``/``emoji`` pair.

    Colour is only enabled when requested *and* stdout is a terminal. The
    console resolves ``sys.stdout`` lazily, so captured streams keep working.
    """

    colored = color and detect_tty()
    return Console(
        color_system="auto" if colored else None,
        no_color=not colored,
        emoji=emoji,
        soft_wrap=True,
        highlight=False,
    )


def _emit(level: str, msg: str, *, use_emoji: bool, use_color: bool | None) -> None:
    symbol, style = _LEVELS[level]
    color = detect_tty() if use_color is None else use_color
    text = Text(f"{symbol if use_emoji else ''}{msg}")
    if color:
        text.stylize(style)
    get_console(color=color, emoji=use_emoji).print(text)


def section(title: str, *, use_color: bool) -> None:
    """Print a rule (or a plain dashed header without colour) titled ``title``."""

    console = get_console(color=use_color, emoji=True)
    console.print()
    console.print(Rule(title) if use_color else f"--- {title} ---")


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Print ``msg`` as an informational line.

    Args:
        msg: Message text to print.
        use_emoji: Whether to prefix the status emoji.
        use_color: Explicit colour flag; ``None`` follows terminal detection.
    """

    _emit("info", msg, use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Print ``msg`` as a success line.

    Args:
        msg: Message text to print.
        use_emoji: Whether to prefix the status emoji.
        use_color: Explicit colour flag; ``None`` follows terminal detection.
    """

    _emit("ok", msg, use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Print ``msg`` as a warning line.

    Args:
        msg: Message text to print.
        use_emoji: Whether to prefix the status emoji.
        use_color: Explicit colour flag; ``None`` follows terminal detection.
    """

    _emit("warn", msg, use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Print ``msg`` as an error line.

    Args:
        msg: Message text to print.
        use_emoji: Whether to prefix the status emoji.
        use_color: Explicit colour flag; ``None`` follows terminal detection.
    """

    _emit("fail", msg, use_emoji=use_emoji, use_color=use_color)


__all__ = ["detect_tty", "fail", "get_console", "info", "ok", "section", "warn"]
