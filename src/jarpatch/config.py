# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and loaders for the jarpatch pipeline."""

from __future__ import annotations

import math
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path, PurePosixPath
from typing import Any, Final, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .constants import (
    ARCHIVE_TOOL_NAME,
    DEFAULT_BUNDLE_NAME,
    DELTA_SUFFIX,
    DIFF_TOOL_NAME,
    MANIFEST_MEMBER,
)
from .errors import ConfigError

PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "jarpatch"

ArchiveBackend = Literal["jar", "zipfile"]
DiffBackend = Literal["xdelta3", "bsdiff4"]


def default_parallel_jobs() -> int:
    """Return 75% of available CPU cores (minimum of 1)."""
    cores = os.cpu_count() or 1
    return max(1, math.floor(cores * 0.75))


class MemberSpec(BaseModel):
    """A container member to patch together with the delta that patches it."""

    model_config = ConfigDict(frozen=True)

    path: str
    delta: str
    metadata: bool = False

    @field_validator("path")
    @classmethod
    def _validate_path(cls, value: str) -> str:
        member = PurePosixPath(value.replace("\\", "/"))
        if member.is_absolute() or not member.parts or ".." in member.parts:
            raise ValueError(f"member path must be relative and stay inside the archive: {value!r}")
        return member.as_posix()

    @field_validator("delta")
    @classmethod
    def _validate_delta(cls, value: str) -> str:
        delta = PurePosixPath(value.replace("\\", "/"))
        if delta.is_absolute() or not delta.parts or ".." in delta.parts:
            raise ValueError(f"delta name must be relative: {value!r}")
        return delta.as_posix()

    @classmethod
    def for_member(cls, path: str, *, metadata: bool = False) -> MemberSpec:
        """Build a member entry whose delta is named ``<file name>.delta``.

        The full file name is kept, suffix included, so members such as
        ``FORGE.DSA`` and ``FORGE.SF`` get distinct deltas.
        """

        name = PurePosixPath(path.replace("\\", "/")).name
        return cls(path=path, delta=f"{name}{DELTA_SUFFIX}", metadata=metadata)

    def local_path(self, workdir: Path) -> Path:
        """Return where the extracted member lives beneath *workdir*."""

        return workdir.joinpath(*PurePosixPath(self.path).parts)

    def delta_path(self, workdir: Path) -> Path:
        """Return where the expanded delta file lives beneath *workdir*."""

        return workdir.joinpath(*PurePosixPath(self.delta).parts)

    @property
    def os_path(self) -> str:
        """Return the member path using the platform separator, relative to the workdir."""

        return str(Path(*PurePosixPath(self.path).parts))


def _forge_installer_members() -> list[MemberSpec]:
    return [
        MemberSpec(
            path="net/minecraftforge/installer/SimpleInstaller.class",
            delta="SimpleInstaller.vcdiff",
        ),
        MemberSpec(
            path="net/minecraftforge/installer/SimpleInstaller$1.class",
            delta="SimpleInstaller$1.vcdiff",
        ),
        MemberSpec(path=MANIFEST_MEMBER, delta="MANIFEST.vcdiff", metadata=True),
        MemberSpec(path="META-INF/FORGE.DSA", delta="FORGE.DSA.vcdiff"),
        MemberSpec(path="META-INF/FORGE.SF", delta="FORGE.SF.vcdiff"),
    ]


class PatchSet(BaseModel):
    """Ordered members to patch plus the bundle holding their deltas."""

    model_config = ConfigDict(validate_assignment=True)

    bundle: Path = Field(default_factory=lambda: Path(DEFAULT_BUNDLE_NAME))
    members: list[MemberSpec] = Field(default_factory=_forge_installer_members)

    @model_validator(mode="after")
    def _validate_members(self) -> PatchSet:
        if not self.members:
            raise ValueError("a patch set requires at least one member")
        paths = [member.path for member in self.members]
        if len(set(paths)) != len(paths):
            raise ValueError("member paths must be unique")
        deltas = [member.delta for member in self.members]
        if len(set(deltas)) != len(deltas):
            raise ValueError("delta names must be unique")
        if sum(1 for member in self.members if member.metadata) > 1:
            raise ValueError("at most one member may be flagged as metadata")
        return self

    @property
    def metadata_member(self) -> MemberSpec | None:
        """Return the manifest-equivalent member, if the set has one."""

        return next((member for member in self.members if member.metadata), None)

    @property
    def ordinary_members(self) -> list[MemberSpec]:
        """Return the members merged with a single batch update."""

        return [member for member in self.members if not member.metadata]


class ToolConfig(BaseModel):
    """Names and backends of the archive and diff delegates."""

    model_config = ConfigDict(validate_assignment=True)

    archive_tool: str = ARCHIVE_TOOL_NAME
    diff_tool: str = DIFF_TOOL_NAME
    archive_backend: ArchiveBackend = "jar"
    diff_backend: DiffBackend = "xdelta3"

    def required_executables(self) -> list[str]:
        """Return the external tools that must be resolved before patching."""

        required: list[str] = []
        if self.archive_backend == "jar":
            required.append(self.archive_tool)
        if self.diff_backend == "xdelta3":
            required.append(self.diff_tool)
        return required


class OutputConfig(BaseModel):
    """Console presentation preferences."""

    model_config = ConfigDict(validate_assignment=True)

    verbose: bool = False
    emoji: bool = True
    color: bool = True


class PatcherConfig(BaseModel):
    """Top-level configuration for a patch run."""

    model_config = ConfigDict(validate_assignment=True)

    workdir: Path = Field(default_factory=Path)
    jobs: int = Field(default_factory=default_parallel_jobs, ge=1)
    patch_set: PatchSet = Field(default_factory=PatchSet)
    tools: ToolConfig = Field(default_factory=ToolConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @property
    def bundle_path(self) -> Path:
        """Return the delta bundle path resolved against the working directory."""

        bundle = self.patch_set.bundle
        return bundle if bundle.is_absolute() else self.workdir / bundle


def _extract_section(path: Path, document: Mapping[str, Any]) -> Mapping[str, Any]:
    if path.name != "pyproject.toml":
        return document
    tool_section = document.get(PYPROJECT_TOOL_KEY, {})
    if not isinstance(tool_section, Mapping):
        raise ConfigError(f"[{PYPROJECT_TOOL_KEY}] in {path} must be a table")
    section = tool_section.get(PYPROJECT_SECTION_KEY, {})
    if not isinstance(section, Mapping):
        raise ConfigError(f"[{PYPROJECT_TOOL_KEY}.{PYPROJECT_SECTION_KEY}] in {path} must be a table")
    return section


def load_config(path: Path | None = None, *, overrides: Mapping[str, Any] | None = None) -> PatcherConfig:
    """Load a :class:`PatcherConfig` from a TOML file merged over the defaults.

    Args:
        path: Standalone TOML file or ``pyproject.toml``. ``None`` loads defaults.
        overrides: Values applied on top of the file, typically from the CLI.

    Returns:
        PatcherConfig: Validated configuration.

    Raises:
        ConfigError: If the file cannot be parsed or fails validation.
    """

    data: dict[str, Any] = {}
    if path is not None:
        if not path.is_file():
            raise ConfigError(f"Configuration file {path} does not exist")
        try:
            with path.open("rb") as handle:
                document = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Configuration at {path} is not valid TOML: {exc}") from exc
        data = _deep_merge(data, _extract_section(path, document))
    if overrides:
        data = _deep_merge(data, overrides)
    try:
        return PatcherConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc


def _deep_merge(base: Mapping[str, Any], fragment: Mapping[str, Any]) -> dict[str, Any]:
    merged: dict[str, Any] = dict(base)
    for key, value in fragment.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


__all__ = [
    "ArchiveBackend",
    "DiffBackend",
    "MemberSpec",
    "OutputConfig",
    "PatchSet",
    "PatcherConfig",
    "ToolConfig",
    "default_parallel_jobs",
    "load_config",
]
