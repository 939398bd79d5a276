# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tool resolution and the archive/diff delegates built on top of it."""

from __future__ import annotations

from .archive import JarArchiveTool, ZipfileArchiveTool
from .base import ArchiveTool, DiffTool, run_tool
from .diff import Bsdiff4DiffTool, Xdelta3DiffTool
from .resolver import ToolReference, ToolResolver, executable_name, resolve_tool

__all__ = [
    "ArchiveTool",
    "Bsdiff4DiffTool",
    "DiffTool",
    "JarArchiveTool",
    "ToolReference",
    "ToolResolver",
    "Xdelta3DiffTool",
    "ZipfileArchiveTool",
    "executable_name",
    "resolve_tool",
    "run_tool",
]
