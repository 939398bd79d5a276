# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Capability protocols for the archive and diff delegates."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from ..models import ToolRun
from ..process import SubprocessExecutionError, run_command

COMMAND_NOT_FOUND_EXIT: Final[int] = 127


@runtime_checkable
class ArchiveTool(Protocol):
    """Archive operations the pipeline delegates to a jar-compatible tool."""

    def extract(self, archive: Path, members: Sequence[str], *, cwd: Path) -> ToolRun:
        """Extract *members* of *archive* into *cwd*, keeping their directory layout."""

        raise NotImplementedError

    def update(self, archive: Path, members: Sequence[str], *, cwd: Path) -> ToolRun:
        """Replace or add *members* (relative to *cwd*) inside *archive*."""

        raise NotImplementedError

    def update_with_metadata(self, archive: Path, metadata_member: str, *, cwd: Path) -> ToolRun:
        """Insert *metadata_member* as the authoritative manifest of *archive*."""

        raise NotImplementedError


@runtime_checkable
class DiffTool(Protocol):
    """Binary-diff decoding delegated to an xdelta3-compatible tool."""

    def decode(self, source: Path, delta: Path, output: Path, *, force: bool = True, cwd: Path) -> ToolRun:
        """Rebuild *output* from *source* plus *delta* without writing to *source*."""

        raise NotImplementedError


def run_tool(command: Sequence[str], *, cwd: Path) -> ToolRun:
    """Run an external tool command and capture its outcome as a :class:`ToolRun`.

    Args:
        command: Argument vector starting with the resolved tool invocation.
        cwd: Working directory relative member paths are resolved against.

    Returns:
        ToolRun: Exit status plus captured output; never raises for tool failure.
    """

    argv = tuple(command)
    try:
        completed = run_command(argv, cwd=cwd, check=True, capture_output=True, discard_stdin=True)
    except SubprocessExecutionError as exc:
        return ToolRun(command=argv, returncode=exc.returncode, stdout=exc.stdout or "", stderr=exc.stderr or "")
    except FileNotFoundError as exc:
        return ToolRun(command=argv, returncode=COMMAND_NOT_FOUND_EXIT, stderr=str(exc))
    return ToolRun(
        command=argv,
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )


__all__ = ["ArchiveTool", "COMMAND_NOT_FOUND_EXIT", "DiffTool", "run_tool"]
