# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy raised by the patch pipeline.

Library code raises these errors instead of terminating the process. Each
error carries the exit status the CLI should report, so only the command
layer decides how the process ends.
"""

from __future__ import annotations

import shlex
from collections.abc import Sequence
from pathlib import Path

from .constants import EXIT_MISSING_ARGUMENT, EXIT_PATCH_ERROR
from .models import PipelineStage


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class PatchError(RuntimeError):
    """Base class for failures that abort the patch pipeline."""

    exit_code: int = EXIT_PATCH_ERROR

    def __init__(self, message: str, *, stage: PipelineStage | None = None) -> None:
        """Initialise the error with a message and optional failing stage.

        Args:
            message: Human-readable error message shown to the user.
            stage: Pipeline stage that raised the error, when known.
        """

        super().__init__(message)
        self.stage = stage


class UsageError(PatchError):
    """Raised when a required command-line argument is missing."""

    exit_code = EXIT_MISSING_ARGUMENT


class MissingPrerequisiteError(PatchError):
    """Raised when an input file, delta bundle or tool cannot be found."""


class InputNotFoundError(MissingPrerequisiteError):
    """Raised when the container archive to patch does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(f'Input file "{path}" not found.', stage=PipelineStage.RESOLVE_TOOLS)
        self.path = path


class BundleNotFoundError(MissingPrerequisiteError):
    """Raised when the delta bundle does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(f'Installer patch file "{path}" not found.', stage=PipelineStage.RESOLVE_TOOLS)
        self.path = path


class ToolNotFoundError(MissingPrerequisiteError):
    """Raised when a required executable is neither installed nor local."""

    def __init__(self, name: str, *, hint: str | None = None) -> None:
        super().__init__(f'Required dependency "{name}" tool not found.', stage=PipelineStage.RESOLVE_TOOLS)
        self.name = name
        self.hint = hint


class ToolInvocationError(PatchError):
    """Raised when a delegated archive or diff tool reports failure."""

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str],
        returncode: int,
        stderr: str | None = None,
        stage: PipelineStage | None = None,
    ) -> None:
        super().__init__(message, stage=stage)
        self.command = tuple(command)
        self.returncode = returncode
        self.stderr = stderr

    @property
    def command_line(self) -> str:
        """Return the attempted command as a copy-pasteable shell string."""

        return shlex.join(self.command)


class ExtractionError(ToolInvocationError):
    """Raised when the delta bundle or container members cannot be extracted."""

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str] = (),
        returncode: int = 1,
        stderr: str | None = None,
    ) -> None:
        super().__init__(
            message,
            command=command,
            returncode=returncode,
            stderr=stderr,
            stage=PipelineStage.EXTRACT,
        )


class PatchingError(ToolInvocationError):
    """Raised when the diff tool cannot reconstruct a patched member."""

    def __init__(self, message: str, *, command: Sequence[str], returncode: int, stderr: str | None = None) -> None:
        super().__init__(
            message,
            command=command,
            returncode=returncode,
            stderr=stderr,
            stage=PipelineStage.PATCH,
        )


class MergeError(ToolInvocationError):
    """Raised when patched members cannot be merged into the output archive."""

    def __init__(self, message: str, *, command: Sequence[str], returncode: int, stderr: str | None = None) -> None:
        super().__init__(
            message,
            command=command,
            returncode=returncode,
            stderr=stderr,
            stage=PipelineStage.MERGE,
        )


class FileOperationError(PatchError):
    """Raised when copying, moving or removing a file fails."""

    def __init__(
        self,
        message: str,
        *,
        path: Path,
        operation: str,
        stage: PipelineStage | None = None,
    ) -> None:
        super().__init__(message, stage=stage)
        self.path = path
        self.operation = operation


__all__ = [
    "BundleNotFoundError",
    "ConfigError",
    "ExtractionError",
    "FileOperationError",
    "InputNotFoundError",
    "MergeError",
    "MissingPrerequisiteError",
    "PatchError",
    "PatchingError",
    "ToolInvocationError",
    "ToolNotFoundError",
    "UsageError",
]
