# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run external tools as argument vectors, never through a shell."""

from __future__ import annotations

import shlex
import shutil

# Bandit: the archive and diff delegates shell out to jar and xdelta3 through
# this wrapper only, which never enables ``shell=True``.
import subprocess  # nosec B404
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    # Bandit: type-only import of subprocess metadata is part of the safe wrapper.
    from subprocess import CompletedProcess as _CompletedProcess  # nosec B404


class SubprocessExecutionError(RuntimeError):
    """Raised when an external tool exits non-zero while ``check`` is true."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stdout: str | None,
        stderr: str | None,
    ) -> None:
        detail = (stderr or "").strip() or "<no stderr>"
        super().__init__(f"`{format_command(command)}` exited with status {returncode}: {detail}")
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


def format_command(args: Sequence[str | Path]) -> str:
    """Return *args* rendered as a single shell-quoted command line."""

    return shlex.join(str(part) for part in args)


def _normalize_args(args: Sequence[str]) -> list[str]:
    """Return *args* with a bare tool name replaced by its path on ``PATH``."""

    if not args:
        raise ValueError("a tool command needs at least the executable")

    head, *rest = (str(arg) for arg in args)
    if Path(head).is_absolute():
        return [head, *rest]

    located = shutil.which(head)
    if located is None:
        raise FileNotFoundError(f"Executable '{head}' was not found on PATH")
    return [located, *rest]


def run_command(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    check: bool = True,
    capture_output: bool = False,
    discard_stdin: bool = False,
) -> _CompletedProcess[str]:
    """Execute *args* after normalising the executable path.

    Args:
        args: Executable followed by its arguments.
        cwd: Working directory for the child process.
        check: Raise :class:`SubprocessExecutionError` on a non-zero exit.
        capture_output: Capture stdout and stderr instead of inheriting them.
        discard_stdin: Attach ``/dev/null`` to the child's stdin.

    Returns:
        CompletedProcess[str]: Completed process metadata.

    Raises:
        FileNotFoundError: If a bare executable name is not on ``PATH``.
        SubprocessExecutionError: If ``check`` is true and the command fails.
    """

    normalized = _normalize_args(args)

    # Bandit: commands originate from resolved tool references; we pass
    # argument lists directly without shell expansion.
    completed: _CompletedProcess[str] = subprocess.run(  # nosec B603
        normalized,
        cwd=str(cwd) if cwd is not None else None,
        check=False,
        capture_output=capture_output,
        text=True,
        stdin=subprocess.DEVNULL if discard_stdin else None,
    )

    if check and completed.returncode != 0:
        raise SubprocessExecutionError(
            normalized,
            completed.returncode,
            completed.stdout if isinstance(completed.stdout, str) else None,
            completed.stderr if isinstance(completed.stderr, str) else None,
        )

    return completed


__all__ = ["SubprocessExecutionError", "format_command", "run_command"]
