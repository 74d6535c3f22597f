# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Discovery of changed and newly added files."""

from __future__ import annotations

import glob
import logging
from collections.abc import Callable, Sequence
from enum import Enum
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from .config import SuiteConfig
from .lists import read_list_lines
from .paths import project_path, unique_paths
from .process import CommandOptions, run_command

LOGGER = logging.getLogger(__name__)

LIST_FILES_DIR: Final[str] = "_files"

GitRunner = Callable[[Sequence[str], Path], list[str]]


class ChangeKind(Enum):
    """Kinds of change sets, valued by the list-file pattern that records them."""

    CHANGED = "changed_files*"
    ADDED = "changed_files*.added.*"

    @property
    def list_pattern(self) -> str:
        """Return the glob matching pre-generated list files of this kind."""

        return self.value


@runtime_checkable
class ChangeSetStrategy(Protocol):
    """Source of root-relative changed file entries."""

    def collect(self, kind: ChangeKind) -> list[str]:
        """Return root-relative entries for ``kind`` in encounter order."""
        ...


class FromListFiles:
    """Read change sets recorded in pre-generated list files."""

    def __init__(self, list_files: Sequence[Path]) -> None:
        """Create a strategy over ``list_files``.

        Args:
            list_files: Change list files in the order they should be read.
        """

        self.list_files = tuple(list_files)

    def collect(self, kind: ChangeKind) -> list[str]:
        """Return every entry of the list files, in file then line order."""

        entries: list[str] = []
        for list_file in self.list_files:
            entries.extend(read_list_lines(list_file))
        return entries


class FromLiveDiff:
    """Ask git which files differ from the last commit."""

    def __init__(self, root: Path, *, runner: GitRunner | None = None) -> None:
        """Create a git-backed strategy.

        Args:
            root: Repository root the git commands run in.
            runner: Optional command runner used to execute git commands. A
                default based on :func:`run_command` is used when omitted.
        """

        self.root = root
        self._runner = runner or _default_runner

    def collect(self, kind: ChangeKind) -> list[str]:
        """Return file names reported by ``git diff`` for ``kind``.

        ``CHANGED`` unions the working tree and staged diffs; ``ADDED`` lists
        staged files whose status is "added".
        """

        if kind is ChangeKind.ADDED:
            commands = [["git", "diff", "--cached", "--name-only", "--diff-filter=A"]]
        else:
            commands = [["git", "diff", "--name-only"], ["git", "diff", "--cached", "--name-only"]]
        entries: list[str] = []
        for command in commands:
            entries.extend(line.strip() for line in self._runner(command, self.root) if line.strip())
        return entries


def _default_runner(cmd: Sequence[str], root: Path) -> list[str]:
    """Execute ``cmd`` returning stdout lines, or nothing when git fails.

    Args:
        cmd: Git command to execute.
        root: Repository root directory.

    Returns:
        list[str]: Raw stdout lines; empty when git is unavailable or errors.
    """

    try:
        cp = run_command(cmd, options=CommandOptions(cwd=root, capture_output=True))
    except OSError as exc:
        LOGGER.debug("git unavailable, treating change set as empty: %s", exc)
        return []
    if cp.returncode != 0:
        LOGGER.debug("%s exited with %s: %s", " ".join(cmd), cp.returncode, (cp.stderr or "").strip())
        return []
    return (cp.stdout or "").splitlines()


class ChangeSetResolver:
    """Resolve the absolute paths of changed or added files."""

    def __init__(self, config: SuiteConfig, *, runner: GitRunner | None = None) -> None:
        """Create a resolver bound to ``config``.

        Args:
            config: Suite configuration providing the project root and the
                default change list directory.
            runner: Optional git runner forwarded to :class:`FromLiveDiff`.
        """

        self.config = config
        self._runner = runner

    def strategy(self, kind: ChangeKind, base_dir: Path | None = None) -> ChangeSetStrategy:
        """Return the strategy that will supply the ``kind`` change set.

        Args:
            kind: Change set kind to resolve.
            base_dir: Directory holding the ``_files`` change lists; defaults
                to the configured change list directory.

        Returns:
            ChangeSetStrategy: ``FromListFiles`` when list files exist,
            otherwise ``FromLiveDiff``.
        """

        lists_dir = (base_dir or self.config.changed_files_dir) / LIST_FILES_DIR
        list_files = sorted(glob.glob(f"{lists_dir}/{kind.list_pattern}"))
        if list_files:
            return FromListFiles([Path(item) for item in list_files])
        return FromLiveDiff(self.config.project_root, runner=self._runner)

    def resolve(self, kind: ChangeKind = ChangeKind.CHANGED, base_dir: Path | None = None) -> list[Path]:
        """Return absolute paths for the ``kind`` change set.

        Args:
            kind: Change set kind to resolve.
            base_dir: Optional override for the change list directory.

        Returns:
            list[Path]: Fresh list of unique paths anchored at the project root.
        """

        entries = self.strategy(kind, base_dir).collect(kind)
        root = self.config.project_root
        return unique_paths(project_path(root, entry) for entry in entries)


__all__ = [
    "ChangeKind",
    "ChangeSetResolver",
    "ChangeSetStrategy",
    "FromListFiles",
    "FromLiveDiff",
    "GitRunner",
]
