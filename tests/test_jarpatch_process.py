# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the subprocess wrapper and delegated tool runs."""

from __future__ import annotations

import inspect
import sys
from pathlib import Path
from subprocess import CompletedProcess

import pytest

from jarpatch.process import SubprocessExecutionError, format_command, run_command
from jarpatch.tools.base import COMMAND_NOT_FOUND_EXIT, run_tool


def test_run_command_raises_on_failure_when_checked(tmp_path: Path) -> None:
    with pytest.raises(SubprocessExecutionError) as excinfo:
        run_command(
            [sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"],
            cwd=tmp_path,
            capture_output=True,
        )

    assert excinfo.value.returncode == 3
    assert excinfo.value.stderr == "boom"
    assert str(excinfo.value).endswith("exited with status 3: boom")


def test_run_command_returns_completed_process_when_unchecked(tmp_path: Path) -> None:
    completed = run_command(
        [sys.executable, "-c", "import sys; sys.exit(4)"],
        cwd=tmp_path,
        check=False,
    )

    assert completed.returncode == 4


def test_run_command_rejects_unknown_executable() -> None:
    with pytest.raises(FileNotFoundError):
        run_command(["definitely-not-a-real-tool-jarpatch"])


def test_format_command_quotes_arguments() -> None:
    assert format_command(["jar", "-uf", "out dir/a.jar", "net/Simple$1.class"]) == (
        "jar -uf 'out dir/a.jar' 'net/Simple$1.class'"
    )


def test_run_tool_maps_subprocess_failure(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    def fake_run_command(args, **kwargs):  # noqa: ANN001
        raise SubprocessExecutionError(list(args), 2, "", "jar: bad archive")

    monkeypatch.setattr("jarpatch.tools.base.run_command", fake_run_command)

    run = run_tool(("jar", "-xf", "a.jar"), cwd=tmp_path)

    assert not run.ok
    assert run.returncode == 2
    assert run.stderr == "jar: bad archive"
    assert run.command == ("jar", "-xf", "a.jar")


def test_run_tool_maps_missing_executable(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    def fake_run_command(args, **kwargs):  # noqa: ANN001
        raise FileNotFoundError("Executable 'jar' was not found on PATH")

    monkeypatch.setattr("jarpatch.tools.base.run_command", fake_run_command)

    run = run_tool(("jar", "-xf", "a.jar"), cwd=tmp_path)

    assert run.returncode == COMMAND_NOT_FOUND_EXIT
    assert "not found" in run.stderr


def test_run_tool_passes_cwd_and_captures(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    seen: dict[str, object] = {}

    def fake_run_command(args, **kwargs):  # noqa: ANN001
        seen.update(kwargs)
        return CompletedProcess(args=list(args), returncode=0, stdout="ok", stderr="")

    monkeypatch.setattr("jarpatch.tools.base.run_command", fake_run_command)

    run = run_tool(("xdelta3", "-d"), cwd=tmp_path)

    assert run.ok
    assert run.stdout == "ok"
    assert seen["cwd"] == tmp_path
    assert seen["capture_output"] is True
    assert seen["check"] is True


def test_run_command_exposes_only_used_options() -> None:
    parameters = list(inspect.signature(run_command).parameters)

    assert parameters == ["args", "cwd", "check", "capture_output", "discard_stdin"]
