# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Existence checks run before any file is touched."""

from __future__ import annotations

from pathlib import Path

from .constants import INPUT_DOWNLOAD_HINT
from .errors import BundleNotFoundError, InputNotFoundError
from .logging import PatchLogger


def check_input_exists(path: Path, *, logger: PatchLogger) -> Path:
    """Ensure the container archive to patch exists.

    Raises:
        InputNotFoundError: If *path* is not a file.
    """

    logger.info("Checking input installer file existence...")
    if not path.is_file():
        error = InputNotFoundError(path)
        logger.fail(str(error))
        logger.echo(INPUT_DOWNLOAD_HINT)
        raise error
    logger.info("Input installer file found")
    return path


def check_bundle_exists(path: Path, *, logger: PatchLogger) -> Path:
    """Ensure the delta bundle exists.

    Raises:
        BundleNotFoundError: If *path* is not a file.
    """

    logger.info("Checking patch file existence...")
    if not path.is_file():
        error = BundleNotFoundError(path)
        logger.fail(str(error))
        raise error
    logger.info("Patch file found")
    return path


__all__ = ["check_bundle_exists", "check_input_exists"]
