# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing logging helpers with optional colour and emoji support."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.text import Text

from .process import format_command


def detect_tty() -> bool:
    """Return ``True`` when stdout appears to be backed by a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


def emoji(symbol: str, enable: bool) -> str:
    """Return *symbol* when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


@dataclass(slots=True)
class PatchLogger:
    """Console logger handed to every pipeline component.

    Progress messages only render when ``verbose`` is set; warnings, failures
    and success lines are always shown. The logger is passed explicitly so
    concurrent stages never share mutable global state.
    """

    console: Console
    verbose: bool = False
    use_emoji: bool = True
    use_color: bool = True

    def _print(self, msg: str, *, style: str | None) -> None:
        text = Text(msg)
        if style and self.use_color:
            text.stylize(style)
        self.console.print(text)

    def info(self, message: str) -> None:
        """Emit a progress message when verbose output is enabled.

        Args:
            message: Text describing the progress step.
        """

        if self.verbose:
            self._print(f"{emoji('ℹ️ ', self.use_emoji)}[Info] {message}", style="cyan")

    def ok(self, message: str) -> None:
        """Emit a success message.

        Args:
            message: Text describing the successful state.
        """

        self._print(f"{emoji('✅ ', self.use_emoji)}{message}", style="bright_green")

    def warn(self, message: str) -> None:
        """Emit a warning message.

        Args:
            message: Text describing the warning condition.
        """

        self._print(f"{emoji('⚠️ ', self.use_emoji)}[Warning] {message}", style="yellow")

    def fail(self, message: str) -> None:
        """Emit an error message regardless of verbosity.

        Args:
            message: Text describing the failure state.
        """

        self._print(f"{emoji('❌ ', self.use_emoji)}[Error] {message}", style="bright_red")

    def command(self, cmd: Sequence[str | Path]) -> None:
        """Report the external command attempted before a failure."""

        self._print(f"Attempted command: {format_command(cmd)}", style="dim")

    def echo(self, message: str = "", *, underline: bool = False) -> None:
        """Write ``message`` verbatim, optionally underlined."""

        self._print(message, style="underline" if underline else None)


def build_logger(
    *,
    verbose: bool = False,
    emoji: bool = True,
    color: bool = True,
    console: Console | None = None,
) -> PatchLogger:
    """Return a :class:`PatchLogger` bound to a dedicated Rich console.

    Args:
        verbose: Whether progress messages should be printed.
        emoji: Whether log output may include emoji glyphs.
        color: Whether terminal colour output is desired.
        console: Optional pre-built console, used by tests to capture output.

    Returns:
        PatchLogger: Logger ready to be passed into pipeline components.
    """

    color_enabled = color and detect_tty()
    if console is None:
        console = Console(no_color=not color_enabled, highlight=False, soft_wrap=True, emoji=emoji)
    return PatchLogger(console=console, verbose=verbose, use_emoji=emoji, use_color=color_enabled)


__all__ = ["PatchLogger", "build_logger", "detect_tty", "emoji"]
