# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Archive delegates: the external ``jar`` tool and an in-process ``zipfile`` backend."""

from __future__ import annotations

import os
import zipfile
from collections.abc import Mapping, Sequence
from pathlib import Path, PurePath
from typing import Final

from ..constants import MANIFEST_MEMBER
from ..models import ToolRun
from .base import run_tool
from .resolver import ToolReference

ZIPFILE_COMMAND: Final[str] = "zipfile"
_TEMP_SUFFIX: Final[str] = ".tmp"


class JarArchiveTool:
    """Drive the JDK ``jar`` executable."""

    def __init__(self, tool: ToolReference) -> None:
        self._tool = tool

    @property
    def tool(self) -> ToolReference:
        """Return the resolved ``jar`` reference."""

        return self._tool

    def extract(self, archive: Path, members: Sequence[str], *, cwd: Path) -> ToolRun:
        return run_tool(self._tool.command("-xf", str(archive), *members), cwd=cwd)

    def update(self, archive: Path, members: Sequence[str], *, cwd: Path) -> ToolRun:
        return run_tool(self._tool.command("-uf", str(archive), *members), cwd=cwd)

    def update_with_metadata(self, archive: Path, metadata_member: str, *, cwd: Path) -> ToolRun:
        return run_tool(self._tool.command("-ufm", str(archive), metadata_member), cwd=cwd)


def _entry_name(member: str) -> str:
    return PurePath(member).as_posix()


class ZipfileArchiveTool:
    """In-process stand-in for ``jar`` built on :mod:`zipfile`.

    Updates rewrite the archive into a sibling temporary file and atomically
    replace the original. As with ``jar -u``, naming the manifest without
    metadata mode drops the existing manifest entry rather than replacing it.
    """

    def __init__(self, *, manifest_name: str = MANIFEST_MEMBER) -> None:
        self._manifest_name = manifest_name

    def extract(self, archive: Path, members: Sequence[str], *, cwd: Path) -> ToolRun:
        command = (ZIPFILE_COMMAND, "extract", str(archive), *members)
        try:
            with zipfile.ZipFile(archive) as source:
                available = set(source.namelist())
                missing = [member for member in members if _entry_name(member) not in available]
                if missing:
                    return ToolRun(command=command, returncode=1, stderr=f"members not found: {', '.join(missing)}")
                for member in members:
                    source.extract(_entry_name(member), path=cwd)
        except (OSError, zipfile.BadZipFile) as exc:
            return ToolRun(command=command, returncode=1, stderr=str(exc))
        return ToolRun(command=command, returncode=0)

    def update(self, archive: Path, members: Sequence[str], *, cwd: Path) -> ToolRun:
        command = (ZIPFILE_COMMAND, "update", str(archive), *members)
        replacements = {_entry_name(member): cwd / member for member in members}
        dropped = {self._manifest_name} if self._manifest_name in replacements else set()
        replacements.pop(self._manifest_name, None)
        return self._rewrite(command, archive, replacements=replacements, dropped=dropped)

    def update_with_metadata(self, archive: Path, metadata_member: str, *, cwd: Path) -> ToolRun:
        command = (ZIPFILE_COMMAND, "update-manifest", str(archive), metadata_member)
        return self._rewrite(
            command,
            archive,
            replacements={},
            dropped={self._manifest_name},
            leading=(self._manifest_name, cwd / metadata_member),
        )

    def _rewrite(
        self,
        command: tuple[str, ...],
        archive: Path,
        *,
        replacements: Mapping[str, Path],
        dropped: set[str],
        leading: tuple[str, Path] | None = None,
    ) -> ToolRun:
        temp_path = archive.with_name(f"{archive.name}{_TEMP_SUFFIX}")
        skipped = set(replacements) | dropped
        try:
            with zipfile.ZipFile(archive) as source, zipfile.ZipFile(temp_path, "w", zipfile.ZIP_DEFLATED) as target:
                if leading is not None:
                    name, path = leading
                    target.write(path, arcname=name)
                for info in source.infolist():
                    if info.filename in skipped:
                        continue
                    target.writestr(info, source.read(info.filename))
                for name, path in replacements.items():
                    target.write(path, arcname=name)
            os.replace(temp_path, archive)
        except (OSError, zipfile.BadZipFile) as exc:
            temp_path.unlink(missing_ok=True)
            return ToolRun(command=command, returncode=1, stderr=str(exc))
        return ToolRun(command=command, returncode=0)


__all__ = ["JarArchiveTool", "ZipfileArchiveTool"]
