# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for merging patched members back into the output archive."""

from __future__ import annotations

from pathlib import Path

import pytest
from support.archives import RecordingArchiveTool, build_jar, jar_names, read_jar

from jarpatch.constants import MANIFEST_MEMBER
from jarpatch.errors import MergeError
from jarpatch.logging import PatchLogger
from jarpatch.merge import apply_patches
from jarpatch.models import PipelineStage


@pytest.fixture
def staged(tmp_path: Path, workdir: Path) -> Path:
    target = build_jar(
        tmp_path / "out.jar",
        {MANIFEST_MEMBER: b"old manifest", "x.class": b"old x", "y.class": b"old y", "z.class": b"untouched"},
    )
    (workdir / "META-INF").mkdir()
    (workdir / "META-INF" / "MANIFEST.MF").write_bytes(b"new manifest")
    (workdir / "x.class").write_bytes(b"new x")
    (workdir / "y.class").write_bytes(b"new y")
    return target


def test_apply_patches_runs_batch_then_two_stage_manifest(staged: Path, workdir: Path, logger: PatchLogger) -> None:
    tool = RecordingArchiveTool()

    apply_patches(tool, staged, ["x.class", "y.class"], "META-INF/MANIFEST.MF", workdir=workdir, logger=logger)

    assert tool.calls == [
        ("update", ("x.class", "y.class")),
        ("update", ("META-INF/MANIFEST.MF",)),
        ("update_with_metadata", ("META-INF/MANIFEST.MF",)),
    ]
    names = jar_names(staged)
    assert names.count(MANIFEST_MEMBER) == 1
    assert read_jar(staged) == {
        MANIFEST_MEMBER: b"new manifest",
        "x.class": b"new x",
        "y.class": b"new y",
        "z.class": b"untouched",
    }


def test_apply_patches_skips_batch_without_ordinary_members(
    staged: Path, workdir: Path, logger: PatchLogger
) -> None:
    tool = RecordingArchiveTool()

    apply_patches(tool, staged, [], "META-INF/MANIFEST.MF", workdir=workdir, logger=logger)

    assert [call for call, _ in tool.calls] == ["update", "update_with_metadata"]
    assert read_jar(staged)[MANIFEST_MEMBER] == b"new manifest"


def test_apply_patches_without_metadata_member(staged: Path, workdir: Path, logger: PatchLogger) -> None:
    tool = RecordingArchiveTool()

    apply_patches(tool, staged, ["x.class"], workdir=workdir, logger=logger)

    assert tool.calls == [("update", ("x.class",))]
    assert read_jar(staged)[MANIFEST_MEMBER] == b"old manifest"


@pytest.mark.parametrize("failing", ["update", "update_with_metadata"])
def test_apply_patches_failure_deletes_target(
    staged: Path, workdir: Path, logger: PatchLogger, failing: str
) -> None:
    tool = RecordingArchiveTool(fail_on={failing})

    with pytest.raises(MergeError) as excinfo:
        apply_patches(tool, staged, ["x.class"], "META-INF/MANIFEST.MF", workdir=workdir, logger=logger)

    assert excinfo.value.stage is PipelineStage.MERGE
    assert not staged.exists()
    assert (workdir / "x.class").read_bytes() == b"new x"
