# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the subprocess wrapper."""

from __future__ import annotations

import stat
from pathlib import Path

import pytest

from livecode.process import CommandOptions, resolve_executable, run_command


def _script(path: Path, body: str) -> Path:
    path.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return path


def test_run_command_returns_failing_exit_status(tmp_path: Path) -> None:
    tool = _script(tmp_path / "tool", "echo broken >&2\nexit 4")

    completed = run_command([str(tool)], options=CommandOptions(capture_output=True))

    assert completed.returncode == 4
    assert completed.stderr == "broken\n"


def test_run_command_runs_in_requested_directory(tmp_path: Path) -> None:
    tool = _script(tmp_path / "tool", "pwd\nexit 1")

    completed = run_command([str(tool)], options=CommandOptions(cwd=tmp_path, capture_output=True))

    assert completed.returncode == 1
    assert Path(completed.stdout.strip()).resolve() == tmp_path.resolve()


def test_run_command_closes_stdin(tmp_path: Path) -> None:
    tool = _script(tmp_path / "tool", "cat\necho done")

    completed = run_command([str(tool)], options=CommandOptions(capture_output=True))

    assert completed.returncode == 0
    assert completed.stdout == "done\n"


def test_missing_executable(tmp_path: Path) -> None:
    assert resolve_executable(str(tmp_path / "nope")) is None
    assert resolve_executable("definitely-not-a-livecode-tool") is None
    with pytest.raises(FileNotFoundError):
        run_command(["definitely-not-a-livecode-tool"])
    with pytest.raises(ValueError):
        run_command([])
