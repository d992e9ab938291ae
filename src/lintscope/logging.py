# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Console messages for command output, styled through Rich."""

from __future__ import annotations

import sys
from enum import Enum
from functools import lru_cache
from typing import Final

from rich.console import Console
from rich.text import Text


class MessageKind(str, Enum):
    """Kinds of user-facing console messages."""

    INFO = "info"
    OK = "ok"
    WARN = "warn"
    FAIL = "fail"


# kind -> (emoji prefix, Rich style)
_DECORATIONS: Final[dict[MessageKind, tuple[str, str]]] = {
    MessageKind.INFO: ("ℹ️ ", "cyan"),
    MessageKind.OK: ("✅ ", "green"),
    MessageKind.WARN: ("⚠️ ", "yellow"),
    MessageKind.FAIL: ("❌ ", "red"),
}


def detect_tty() -> bool:
    """Return ``True`` when stdout appears to be backed by a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


@lru_cache(maxsize=8)
def get_console(*, color: bool, emoji: bool) -> Console:
    """Return a cached Rich console for the ``color``/``emoji`` preferences.

    The console writes to whatever ``sys.stdout`` is at print time, so captured
    output (tests, ``CliRunner``) sees every message.
    """

    return Console(
        color_system="auto" if color else None,
        no_color=not color,
        emoji=emoji,
        highlight=False,
        soft_wrap=True,
    )


def render(kind: MessageKind, msg: str, *, use_emoji: bool, use_color: bool) -> Text:
    """Return ``msg`` decorated for ``kind``.

    Args:
        kind: Message kind selecting the prefix and style.
        msg: Message body.
        use_emoji: Prefix the message with the kind's emoji.
        use_color: Apply the kind's Rich style.

    Returns:
        Text: Rich text ready for printing.
    """

    prefix, style = _DECORATIONS[kind]
    text = Text(f"{prefix}{msg}" if use_emoji else msg)
    if use_color:
        text.stylize(style)
    return text


def emit(kind: MessageKind, msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Print ``msg`` as a ``kind`` message; colour follows TTY detection unless given."""

    color = detect_tty() if use_color is None else use_color
    get_console(color=color, emoji=use_emoji).print(render(kind, msg, use_emoji=use_emoji, use_color=color))


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    emit(MessageKind.INFO, msg, use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    emit(MessageKind.OK, msg, use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    emit(MessageKind.WARN, msg, use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    emit(MessageKind.FAIL, msg, use_emoji=use_emoji, use_color=use_color)


__all__ = ["MessageKind", "detect_tty", "emit", "fail", "get_console", "info", "ok", "render", "warn"]
