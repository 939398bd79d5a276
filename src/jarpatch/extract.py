# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Expand the delta bundle and selectively extract container members."""

from __future__ import annotations

import tarfile
from collections.abc import Sequence
from pathlib import Path

from .config import MemberSpec
from .errors import ExtractionError
from .logging import PatchLogger
from .tools.base import ArchiveTool


def expand_delta_bundle(bundle: Path, workdir: Path, *, logger: PatchLogger) -> list[Path]:
    """Write every regular file in *bundle* to the same relative path under *workdir*.

    Existing files are overwritten, so expanding the same bundle twice leaves
    identical delta files on disk.

    Args:
        bundle: Tar archive containing one delta per member.
        workdir: Directory receiving the expanded delta files.
        logger: Logger receiving progress messages.

    Returns:
        list[Path]: Paths of the delta files written, in archive order.

    Raises:
        ExtractionError: If the bundle is unreadable or contains unsafe entries.
    """

    logger.info(f"Extracting patches from {bundle.name}...")
    written: list[Path] = []
    try:
        with tarfile.open(bundle, "r:*") as archive:
            for entry in archive:
                if not entry.isfile():
                    continue
                archive.extract(entry, path=workdir, filter="data")
                written.append(workdir / entry.name)
    except (tarfile.TarError, OSError) as exc:
        logger.fail(f'Failed to extract the patch bundle "{bundle}": {exc}')
        raise ExtractionError(f'Failed to extract the patch bundle "{bundle}": {exc}') from exc
    logger.info(f"Patches extracted from {bundle.name}")
    return written


def extract_members(
    archive_tool: ArchiveTool,
    container: Path,
    members: Sequence[MemberSpec],
    workdir: Path,
    *,
    logger: PatchLogger,
) -> list[Path]:
    """Extract only *members* from *container* into *workdir*.

    Args:
        archive_tool: Delegate performing the extraction.
        container: Container archive to read from.
        members: Members to extract; their internal layout is preserved.
        workdir: Directory receiving the extracted members.
        logger: Logger receiving progress and failure messages.

    Returns:
        list[Path]: Local paths of the extracted members.

    Raises:
        ExtractionError: If the tool fails or a requested member is missing afterwards.
    """

    logger.info("Selectively extracting installer jar for patching...")
    run = archive_tool.extract(container, [member.os_path for member in members], cwd=workdir)
    if not run.ok:
        message = f'Failed to extract "{container}" with the archive tool.'
        logger.fail(message)
        logger.command(run.command)
        raise ExtractionError(message, command=run.command, returncode=run.returncode, stderr=run.stderr)

    extracted = [member.local_path(workdir) for member in members]
    missing = [member.path for member, path in zip(members, extracted) if not path.is_file()]
    if missing:
        message = f'Members missing from "{container}" after extraction: {", ".join(missing)}'
        logger.fail(message)
        logger.command(run.command)
        raise ExtractionError(message, command=run.command, returncode=run.returncode, stderr=run.stderr)
    logger.info("Selective installer jar extraction complete")
    return extracted


__all__ = ["expand_delta_bundle", "extract_members"]
