# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Merge patched members back into the output container archive."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from .errors import MergeError
from .logging import PatchLogger
from .models import ToolRun
from .tools.base import ArchiveTool


def _abort(run: ToolRun, target: Path, message: str, *, logger: PatchLogger) -> MergeError:
    logger.fail(message)
    logger.command(run.command)
    target.unlink(missing_ok=True)
    return MergeError(message, command=run.command, returncode=run.returncode, stderr=run.stderr)


def apply_patches(
    archive_tool: ArchiveTool,
    target: Path,
    member_paths: Sequence[str],
    metadata_member: str | None = None,
    *,
    workdir: Path,
    logger: PatchLogger,
) -> None:
    """Update *target* with the patched members found under *workdir*.

    Ordinary members go in with a single batch update. The metadata member
    cannot be updated in place: a plain update first drops the old entry,
    then a metadata update re-inserts it as the archive's manifest. Both
    steps run after the batch update, in that order.

    Any failed step deletes *target* since a partially updated archive cannot
    be trusted.

    Args:
        archive_tool: Delegate performing the updates.
        target: Working copy of the container archive.
        member_paths: Ordinary member paths relative to *workdir*.
        metadata_member: Manifest-equivalent member path, if any.
        workdir: Directory holding the patched members.
        logger: Logger receiving progress and failure messages.

    Raises:
        MergeError: If any update step fails.
    """

    if member_paths:
        logger.info(f'Applying patched class files to "{target}"...')
        run = archive_tool.update(target, member_paths, cwd=workdir)
        if not run.ok:
            raise _abort(run, target, f'Failed to apply patched class files to "{target}".', logger=logger)
        logger.info(f'Applied patched class files to "{target}"')

    if metadata_member is None:
        return

    logger.info(f"Handling special case for applying {metadata_member}...")
    removal = archive_tool.update(target, [metadata_member], cwd=workdir)
    if not removal.ok:
        raise _abort(removal, target, f'Failed to apply patched {metadata_member} to "{target}".', logger=logger)

    insertion = archive_tool.update_with_metadata(target, metadata_member, cwd=workdir)
    if not insertion.ok:
        raise _abort(insertion, target, f'Failed to apply patched {metadata_member} to "{target}".', logger=logger)
    logger.info(f'Special case for {metadata_member} handled and applied to "{target}"')


__all__ = ["apply_patches"]
