# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared constants for the jarpatch package."""

from __future__ import annotations

from typing import Final

EXIT_OK: Final[int] = 0
EXIT_MISSING_ARGUMENT: Final[int] = 1
EXIT_PATCH_ERROR: Final[int] = 2

DEFAULT_BUNDLE_NAME: Final[str] = "patches.tar"
DELTA_SUFFIX: Final[str] = ".delta"
PATCHED_SUFFIX: Final[str] = ".patched"

ARCHIVE_TOOL_NAME: Final[str] = "jar"
DIFF_TOOL_NAME: Final[str] = "xdelta3"
WINDOWS_EXECUTABLE_SUFFIX: Final[str] = ".exe"

MANIFEST_MEMBER: Final[str] = "META-INF/MANIFEST.MF"

TOOL_DOWNLOAD_HINTS: Final[dict[str, str]] = {
    ARCHIVE_TOOL_NAME: (
        "You can download it here: https://adoptopenjdk.net/?variant=openjdk8&jvmVariant=hotspot "
        '("OpenJDK 8 HotSpot")'
    ),
    DIFF_TOOL_NAME: "You can download it here: https://github.com/jmacd/xdelta-gpl/releases/tag/v3.1.0",
}

INPUT_DOWNLOAD_HINT: Final[str] = "You can download the Forge installer jar here: https://files.minecraftforge.net"

NOTICE_LINES: Final[tuple[str, ...]] = (
    "Notice:",
    "Please do not automate downloading the Forge installer - please direct your users to manually download it instead.",
    "Forge is a free open source project that relies on Patreon and adfocus download links, automated downloads hurt",
    "this revenue which makes it harder to pay for server hosting costs and development time as a result.",
    "",
    "Forge installer downloads: https://files.minecraftforge.net | Patreon: https://www.patreon.com/LexManos",
    "",
)

__all__ = [
    "ARCHIVE_TOOL_NAME",
    "DEFAULT_BUNDLE_NAME",
    "DELTA_SUFFIX",
    "DIFF_TOOL_NAME",
    "EXIT_MISSING_ARGUMENT",
    "EXIT_OK",
    "EXIT_PATCH_ERROR",
    "INPUT_DOWNLOAD_HINT",
    "MANIFEST_MEMBER",
    "NOTICE_LINES",
    "PATCHED_SUFFIX",
    "TOOL_DOWNLOAD_HINTS",
    "WINDOWS_EXECUTABLE_SUFFIX",
]
