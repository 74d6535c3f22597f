# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

import pytest

from livecode.config import SuiteConfig


class FakeGit:
    """Git runner double returning canned output per command."""

    def __init__(self, responses: Mapping[tuple[str, ...], Sequence[str]] | None = None) -> None:
        self.responses = {key: list(value) for key, value in (responses or {}).items()}
        self.calls: list[tuple[str, ...]] = []

    def __call__(self, cmd: Sequence[str], root: Path) -> list[str]:
        self.calls.append(tuple(cmd))
        return list(self.responses.get(tuple(cmd), []))


WORKTREE_DIFF = ("git", "diff", "--name-only")
STAGED_DIFF = ("git", "diff", "--cached", "--name-only")
ADDED_DIFF = ("git", "diff", "--cached", "--name-only", "--diff-filter=A")


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Return an empty, canonical project root."""

    root = tmp_path / "project"
    root.mkdir()
    return root.resolve()


@pytest.fixture
def suite_config(project_root: Path) -> SuiteConfig:
    """Return a configuration with the suite and change lists inside the project."""

    return SuiteConfig(project_root=project_root, suite_dir="suite", changed_files_dir="changes")


@pytest.fixture
def write_file(project_root: Path) -> Callable[..., Path]:
    """Return a helper writing ``content`` to a root-relative path."""

    def _write(relative: str, content: str = "") -> Path:
        target = project_root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        return target

    return _write
