# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the declared packaging metadata."""

from __future__ import annotations

import tomllib
from pathlib import Path

PYPROJECT = Path(__file__).resolve().parents[1] / "pyproject.toml"


def test_python_floor_supports_tar_extraction_filters() -> None:
    with PYPROJECT.open("rb") as handle:
        project = tomllib.load(handle)["project"]

    # tarfile extraction filters first shipped in 3.11.4.
    assert project["requires-python"] == ">=3.11.4"
