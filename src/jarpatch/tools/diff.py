# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Diff delegates: the external ``xdelta3`` decoder and an in-process ``bsdiff4`` backend."""

from __future__ import annotations

from pathlib import Path
from typing import Final

import bsdiff4

from ..models import ToolRun
from .base import run_tool
from .resolver import ToolReference

BSDIFF4_COMMAND: Final[str] = "bsdiff4"


class Xdelta3DiffTool:
    """Decode VCDIFF deltas with the ``xdelta3`` executable."""

    def __init__(self, tool: ToolReference) -> None:
        self._tool = tool

    @property
    def tool(self) -> ToolReference:
        """Return the resolved ``xdelta3`` reference."""

        return self._tool

    def decode(self, source: Path, delta: Path, output: Path, *, force: bool = True, cwd: Path) -> ToolRun:
        flags = ("-d", "-f") if force else ("-d",)
        return run_tool(self._tool.command(*flags, "-s", str(source), str(delta), str(output)), cwd=cwd)


class Bsdiff4DiffTool:
    """Apply BSDIFF4 deltas in-process through :mod:`bsdiff4`."""

    def decode(self, source: Path, delta: Path, output: Path, *, force: bool = True, cwd: Path) -> ToolRun:
        command = (BSDIFF4_COMMAND, "patch", str(source), str(delta), str(output))
        source_path = source if source.is_absolute() else cwd / source
        delta_path = delta if delta.is_absolute() else cwd / delta
        output_path = output if output.is_absolute() else cwd / output
        if output_path.exists() and not force:
            return ToolRun(command=command, returncode=1, stderr=f"{output} exists; refusing to overwrite")
        try:
            patched = bsdiff4.patch(source_path.read_bytes(), delta_path.read_bytes())
            output_path.write_bytes(patched)
        except (OSError, ValueError) as exc:
            return ToolRun(command=command, returncode=1, stderr=str(exc))
        return ToolRun(command=command, returncode=0)


__all__ = ["Bsdiff4DiffTool", "Xdelta3DiffTool"]
