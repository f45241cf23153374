# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing logging helpers with optional colour and emoji support.

Status lines go to stdout next to the index summaries and dry-run JSON;
library log records go to stderr so redirected output stays parseable.
"""

from __future__ import annotations

import logging as _stdlib_logging
import sys
from functools import lru_cache
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

PACKAGE_LOGGER_NAME = "packtrans"


def _is_terminal(stream: TextIO) -> bool:
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False


@lru_cache(maxsize=16)
def _cached_console(*, stderr: bool, color: bool, emoji: bool) -> Console:
    return Console(
        stderr=stderr,
        color_system="auto" if color else None,
        no_color=not color,
        emoji=emoji,
        soft_wrap=True,
        highlight=False,
    )


def output_console(*, color: bool | None = None, emoji: bool = True, stderr: bool = False) -> Console:
    """Return the shared console for status lines or, with ``stderr``, log records.

    Colour is only enabled when the target stream is a terminal.

    Args:
        color: Explicit colour preference; ``None`` follows terminal detection.
        emoji: Whether Rich may render emoji glyphs.
        stderr: Write to standard error instead of standard output.

    Returns:
        Console: A console cached per stream, colour and emoji setting.
    """

    terminal = _is_terminal(sys.stderr if stderr else sys.stdout)
    enabled = terminal if color is None else color and terminal
    return _cached_console(stderr=stderr, color=enabled, emoji=emoji)


def emoji(symbol: str, enable: bool) -> str:
    """Return ``symbol`` when emoji output is enabled, otherwise an empty string."""

    return symbol if enable else ""


def _print_line(msg: str, *, style: str | None, use_emoji: bool, use_color: bool | None = None) -> None:
    console = output_console(color=use_color, emoji=use_emoji)
    text = Text(msg)
    if style and not console.no_color:
        text.stylize(style)
    console.print(text)


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an informational message."""

    _print_line(f"{emoji('ℹ️ ', use_emoji)}{msg}", style="cyan", use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a success message."""

    _print_line(f"{emoji('✅ ', use_emoji)}{msg}", style="green", use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a warning message."""

    _print_line(f"{emoji('⚠️ ', use_emoji)}{msg}", style="yellow", use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an error message."""

    _print_line(f"{emoji('❌ ', use_emoji)}{msg}", style="red", use_emoji=use_emoji, use_color=use_color)


def configure_logging(*, debug: bool = False, use_color: bool | None = None) -> _stdlib_logging.Logger:
    """Route the package's library loggers through a Rich handler.

    Args:
        debug: Emit ``DEBUG`` records when ``True``; ``WARNING`` and above otherwise.
        use_color: Optional explicit colour flag; colour still needs a terminal on stderr.

    Returns:
        logging.Logger: The configured package logger.
    """

    logger = _stdlib_logging.getLogger(PACKAGE_LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(
        console=output_console(color=use_color, emoji=False, stderr=True),
        show_path=False,
        markup=False,
    )
    logger.addHandler(handler)
    logger.setLevel(_stdlib_logging.DEBUG if debug else _stdlib_logging.WARNING)
    return logger


__all__ = ["configure_logging", "emoji", "fail", "info", "ok", "output_console", "warn"]
