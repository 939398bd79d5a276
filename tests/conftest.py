# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console

from jarpatch.logging import PatchLogger


@pytest.fixture
def log_buffer() -> io.StringIO:
    """Return the buffer backing :func:`logger` output."""
    return io.StringIO()


@pytest.fixture
def logger(log_buffer: io.StringIO) -> PatchLogger:
    """Return a verbose logger writing plain text into ``log_buffer``."""
    console = Console(file=log_buffer, no_color=True, highlight=False, width=400)
    return PatchLogger(console=console, verbose=True, use_emoji=False, use_color=False)


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    """Return an empty working directory separate from archive inputs."""
    path = tmp_path / "work"
    path.mkdir()
    return path
