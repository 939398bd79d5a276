# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Value objects shared between the patch pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class PipelineStage(str, Enum):
    """Enumerate the states of the patch pipeline."""

    RESOLVE_TOOLS = "resolve-tools"
    EXTRACT = "extract"
    PATCH = "patch"
    MERGE = "merge"
    CLEANUP = "cleanup"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ToolRun:
    """Outcome of a single delegated tool invocation."""

    command: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        """Return ``True`` when the invocation exited successfully."""

        return self.returncode == 0


@dataclass(frozen=True, slots=True)
class PipelineResult:
    """Summary returned by a successful pipeline run."""

    output: Path
    patched: tuple[str, ...]
    removed: tuple[Path, ...] = field(default_factory=tuple)
    stage: PipelineStage = PipelineStage.DONE


__all__ = ["PipelineResult", "PipelineStage", "ToolRun"]
