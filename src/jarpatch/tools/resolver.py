# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate external executables, preferring system installs over local copies."""

from __future__ import annotations

import os
import shutil
import sys
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from ..constants import TOOL_DOWNLOAD_HINTS, WINDOWS_EXECUTABLE_SUFFIX
from ..errors import ToolNotFoundError
from ..logging import PatchLogger

Which = Callable[[str], str | None]
ToolSource = Literal["system", "local"]


@dataclass(frozen=True, slots=True)
class ToolReference:
    """Resolved invocation path for a logical tool name."""

    name: str
    invocation: str
    source: ToolSource

    def command(self, *args: str) -> tuple[str, ...]:
        """Return the argument vector invoking this tool with *args*."""

        return (self.invocation, *args)


def executable_name(name: str, *, platform: str | None = None) -> str:
    """Return *name* with the platform executable suffix applied."""

    current = sys.platform if platform is None else platform
    if current.startswith("win") and not name.lower().endswith(WINDOWS_EXECUTABLE_SUFFIX):
        return f"{name}{WINDOWS_EXECUTABLE_SUFFIX}"
    return name


def resolve_tool(
    name: str,
    *,
    workdir: Path,
    which: Which = shutil.which,
    platform: str | None = None,
) -> ToolReference:
    """Resolve *name* to an invocation path.

    A tool found on the search path is invoked by its bare name. Otherwise an
    executable in *workdir* is used, referenced by absolute path so it is never
    re-resolved against ``PATH``.

    Args:
        name: Logical tool name such as ``"jar"``.
        workdir: Directory searched for a local copy of the tool.
        which: Search-path probe, injectable for tests.
        platform: Override for ``sys.platform``.

    Returns:
        ToolReference: Immutable reference consumed by every later invocation.

    Raises:
        ToolNotFoundError: If the tool is neither installed nor present locally.
    """

    if which(name) is not None:
        return ToolReference(name=name, invocation=name, source="system")

    candidate = workdir / executable_name(name, platform=platform)
    if candidate.is_file() and os.access(candidate, os.X_OK):
        return ToolReference(name=name, invocation=str(candidate.resolve()), source="local")

    raise ToolNotFoundError(name, hint=TOOL_DOWNLOAD_HINTS.get(name))


class ToolResolver:
    """Resolve and memoise tool references for a single working directory."""

    def __init__(
        self,
        workdir: Path,
        *,
        logger: PatchLogger,
        which: Which = shutil.which,
        platform: str | None = None,
    ) -> None:
        self._workdir = workdir
        self._logger = logger
        self._which = which
        self._platform = platform
        self._cache: dict[str, ToolReference] = {}
        self._lock = threading.Lock()

    def resolve(self, name: str) -> ToolReference:
        """Return the reference for *name*, resolving it on first use."""

        with self._lock:
            cached = self._cache.get(name)
        if cached is not None:
            return cached

        self._logger.info(f"Checking {name} tool existence...")
        try:
            reference = resolve_tool(name, workdir=self._workdir, which=self._which, platform=self._platform)
        except ToolNotFoundError as exc:
            self._logger.fail(str(exc))
            if exc.hint:
                self._logger.echo(exc.hint)
            raise
        self._logger.info(f"{name} tool found ({reference.source}: {reference.invocation})")
        with self._lock:
            return self._cache.setdefault(name, reference)


__all__ = ["ToolReference", "ToolResolver", "ToolSource", "Which", "executable_name", "resolve_tool"]
