# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rebuild patched members from their originals plus a binary delta."""

from __future__ import annotations

import shutil
from pathlib import Path, PurePosixPath

from .config import MemberSpec
from .constants import PATCHED_SUFFIX
from .errors import FileOperationError, PatchingError
from .logging import PatchLogger
from .models import PipelineStage
from .tools.base import DiffTool


def patched_sibling(path: Path) -> Path:
    """Return the temporary output path written next to *path*."""

    return path.with_name(f"{path.name}{PATCHED_SUFFIX}")


def apply_delta(member: MemberSpec, diff_tool: DiffTool, workdir: Path, *, logger: PatchLogger) -> Path:
    """Patch the extracted copy of *member* in place.

    The diff tool writes a ``.patched`` sibling so it never overwrites the
    file it is reading. Only after it succeeds is the sibling swapped into
    the member's path; on failure the original is left untouched.

    Args:
        member: Member and delta to apply.
        diff_tool: Delegate decoding the delta.
        workdir: Directory holding the extracted member and its delta.
        logger: Logger receiving progress and failure messages.

    Returns:
        Path: Local path of the patched member.

    Raises:
        PatchingError: If the diff tool reports failure.
        FileOperationError: If swapping the patched file into place fails.
    """

    source = Path(member.os_path)
    delta = Path(*PurePosixPath(member.delta).parts)
    output = patched_sibling(source)
    logger.info(f"Patching {member.path} with {member.delta}")

    run = diff_tool.decode(source, delta, output, force=True, cwd=workdir)
    if not run.ok:
        message = f"Failed to patch {member.path} with the diff tool."
        logger.fail(message)
        logger.command(run.command)
        raise PatchingError(message, command=run.command, returncode=run.returncode, stderr=run.stderr)

    target = workdir / source
    patched = workdir / output
    try:
        target.unlink()
        shutil.copyfile(patched, target)
        patched.unlink()
    except OSError as exc:
        message = f"Failed to move the patched {member.path} into place: {exc}"
        logger.fail(message)
        raise FileOperationError(message, path=target, operation="swap", stage=PipelineStage.PATCH) from exc
    logger.info(f"Patched {member.path}")
    return target


__all__ = ["apply_delta", "patched_sibling"]
