# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Remove the intermediate working tree left behind by extraction and patching."""

from __future__ import annotations

import shutil
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from .config import MemberSpec
from .errors import FileOperationError
from .logging import PatchLogger
from .models import PipelineStage
from .patching import patched_sibling


@dataclass(slots=True)
class CleanPlan:
    """Filesystem paths scheduled for removal."""

    paths: list[Path] = field(default_factory=list)

    def add(self, path: Path) -> None:
        """Schedule *path* unless it is already planned."""

        if path not in self.paths:
            self.paths.append(path)


def plan_cleanup(
    members: Sequence[MemberSpec],
    delta_files: Iterable[Path],
    workdir: Path,
    *,
    protected: Iterable[Path] = (),
) -> CleanPlan:
    """Build the list of intermediates to delete after a successful run.

    Each member contributes the top-level entry of its path (for example
    ``META-INF`` for ``META-INF/MANIFEST.MF``). A member stored at the archive
    root also contributes its ``.patched`` sibling, which no directory removal
    would catch. Expanded delta files contribute their top-level entry too, so
    directories created by the bundle go with them. Paths in *protected*, and
    any directory containing one of them, are never planned.
    """

    guarded = {path.resolve() for path in protected}
    plan = CleanPlan()
    candidates: list[Path] = []
    for member in members:
        parts = PurePosixPath(member.path).parts
        top_level = workdir / parts[0]
        candidates.append(top_level)
        if len(parts) == 1:
            candidates.append(patched_sibling(top_level))
    for delta in delta_files:
        try:
            parts = delta.relative_to(workdir).parts
        except ValueError:
            candidates.append(delta)
            continue
        candidates.append(workdir / parts[0])
    for candidate in candidates:
        resolved = candidate.resolve()
        if resolved in guarded or any(resolved in guard.parents for guard in guarded):
            continue
        plan.add(candidate)
    return plan


def execute_cleanup(plan: CleanPlan, *, logger: PatchLogger) -> list[Path]:
    """Delete every planned path, returning those actually removed.

    Raises:
        FileOperationError: If a planned path cannot be removed.
    """

    logger.info("Cleaning up intermediate files...")
    removed: list[Path] = []
    for path in plan.paths:
        try:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            elif path.exists() or path.is_symlink():
                path.unlink()
            else:
                continue
        except OSError as exc:
            message = f"Failed to remove intermediate {path}: {exc}"
            logger.fail(message)
            raise FileOperationError(message, path=path, operation="remove", stage=PipelineStage.CLEANUP) from exc
        removed.append(path)
    logger.info("Intermediate files removed")
    return removed


__all__ = ["CleanPlan", "execute_cleanup", "plan_cleanup"]
