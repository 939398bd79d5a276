# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for configuration models and TOML loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from jarpatch.config import MemberSpec, PatchSet, PatcherConfig, ToolConfig, default_parallel_jobs, load_config
from jarpatch.constants import MANIFEST_MEMBER
from jarpatch.errors import ConfigError


def test_defaults_describe_forge_installer() -> None:
    config = PatcherConfig()

    assert config.patch_set.bundle == Path("patches.tar")
    assert config.bundle_path == Path("patches.tar")
    assert [member.path for member in config.patch_set.members] == [
        "net/minecraftforge/installer/SimpleInstaller.class",
        "net/minecraftforge/installer/SimpleInstaller$1.class",
        MANIFEST_MEMBER,
        "META-INF/FORGE.DSA",
        "META-INF/FORGE.SF",
    ]
    assert config.patch_set.metadata_member is not None
    assert config.patch_set.metadata_member.delta == "MANIFEST.vcdiff"
    assert len(config.patch_set.ordinary_members) == 4
    assert config.tools.required_executables() == ["jar", "xdelta3"]
    assert config.jobs == default_parallel_jobs() >= 1


def test_member_spec_derives_delta_name() -> None:
    member = MemberSpec.for_member("net/a/Outer$Inner.class")

    assert member.delta == "Outer$Inner.class.delta"
    assert member.local_path(Path("/work")) == Path("/work/net/a/Outer$Inner.class")


def test_for_member_keeps_full_file_name_for_forge_members() -> None:
    paths = [member.path for member in PatcherConfig().patch_set.members]

    patch_set = PatchSet(members=[MemberSpec.for_member(path, metadata=path == MANIFEST_MEMBER) for path in paths])

    assert [member.delta for member in patch_set.members] == [
        "SimpleInstaller.class.delta",
        "SimpleInstaller$1.class.delta",
        "MANIFEST.MF.delta",
        "FORGE.DSA.delta",
        "FORGE.SF.delta",
    ]


def test_member_spec_normalises_backslashes() -> None:
    assert MemberSpec(path="META-INF\\FORGE.SF", delta="FORGE.SF.delta").path == "META-INF/FORGE.SF"


@pytest.mark.parametrize("path", ["/etc/passwd", "../escape.class", "a/../../b.class", ""])
def test_member_spec_rejects_unsafe_paths(path: str) -> None:
    with pytest.raises(ValidationError):
        MemberSpec(path=path, delta="x.delta")


def test_patch_set_validation() -> None:
    with pytest.raises(ValidationError):
        PatchSet(members=[])
    with pytest.raises(ValidationError):
        PatchSet(members=[MemberSpec.for_member("a/X.class"), MemberSpec(path="a/X.class", delta="other.delta")])
    with pytest.raises(ValidationError):
        PatchSet(members=[MemberSpec.for_member("a/X.class"), MemberSpec.for_member("b/X.class")])
    with pytest.raises(ValidationError):
        PatchSet(
            members=[
                MemberSpec.for_member("META-INF/MANIFEST.MF", metadata=True),
                MemberSpec.for_member("META-INF/OTHER.MF", metadata=True),
            ]
        )


def test_in_process_backends_need_no_executables() -> None:
    tools = ToolConfig(archive_backend="zipfile", diff_backend="bsdiff4")
    assert tools.required_executables() == []


def test_bundle_path_resolves_against_workdir(tmp_path: Path) -> None:
    config = PatcherConfig(workdir=tmp_path)
    assert config.bundle_path == tmp_path / "patches.tar"

    config.patch_set.bundle = tmp_path / "elsewhere" / "deltas.tar"
    assert config.bundle_path == tmp_path / "elsewhere" / "deltas.tar"


def test_load_config_reads_standalone_toml(tmp_path: Path) -> None:
    path = tmp_path / "jarpatch.toml"
    path.write_text(
        """
jobs = 2

[tools]
archive_backend = "zipfile"
diff_backend = "bsdiff4"

[patch_set]
bundle = "deltas.tar"

[[patch_set.members]]
path = "a/B.class"
delta = "B.delta"

[[patch_set.members]]
path = "META-INF/MANIFEST.MF"
delta = "MANIFEST.delta"
metadata = true
""",
        encoding="utf-8",
    )

    config = load_config(path, overrides={"jobs": 3, "output": {"verbose": True}})

    assert config.jobs == 3
    assert config.output.verbose is True
    assert config.output.emoji is True
    assert config.tools.archive_backend == "zipfile"
    assert config.patch_set.bundle == Path("deltas.tar")
    assert [member.path for member in config.patch_set.members] == ["a/B.class", "META-INF/MANIFEST.MF"]
    assert config.patch_set.metadata_member == MemberSpec(
        path="META-INF/MANIFEST.MF", delta="MANIFEST.delta", metadata=True
    )


def test_load_config_reads_pyproject_section(tmp_path: Path) -> None:
    path = tmp_path / "pyproject.toml"
    path.write_text(
        '[project]\nname = "demo"\n\n[tool.jarpatch]\njobs = 5\n\n[tool.jarpatch.tools]\ndiff_backend = "bsdiff4"\n',
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.jobs == 5
    assert config.tools.diff_backend == "bsdiff4"
    assert config.tools.archive_backend == "jar"


def test_load_config_without_file_uses_defaults() -> None:
    assert load_config() == PatcherConfig(jobs=default_parallel_jobs())


@pytest.mark.parametrize(
    ("content", "needle"),
    [
        ("jobs = [", "not valid TOML"),
        ("jobs = 0", "jobs"),
        ('[tools]\narchive_backend = "tar"', "archive_backend"),
    ],
)
def test_load_config_reports_errors(tmp_path: Path, content: str, needle: str) -> None:
    path = tmp_path / "jarpatch.toml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError, match=needle):
        load_config(path)


def test_load_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="does not exist"):
        load_config(tmp_path / "absent.toml")
