# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Narrow candidate file sets by extension and containing directory."""

from __future__ import annotations

import re
from collections.abc import Collection, Iterable
from pathlib import Path

from .paths import canonical_path, unique_paths


def _has_allowed_type(path: Path, allowed_types: Collection[str]) -> bool:
    """Return ``True`` when the suffix of ``path`` is allowed; empty allows all."""

    if not allowed_types:
        return True
    return path.suffix[1:] in allowed_types


def canonical_directories(directories: Iterable[Path | str]) -> list[str]:
    """Return canonical directory strings ordered by ascending length.

    Unresolvable directories are dropped. The sort is stable, so directories
    of equal length keep their input order.

    Args:
        directories: Allowed directories in any form.

    Returns:
        list[str]: Canonical directory strings, shortest first.
    """

    resolved = [str(path) for path in map(canonical_path, directories) if path is not None]
    return sorted(resolved, key=len)


def _in_allowed_directory(path: Path, directories: list[str] | None) -> bool:
    """Return ``True`` when ``path`` starts with a directory; ``None`` allows all."""

    if directories is None:
        return True
    text = str(path)
    # Plain string prefix: "/a/b" also admits "/a/bc/file".
    return any(text.startswith(directory) for directory in directories)


def filter_files(
    files: Iterable[Path | str],
    allowed_types: Collection[str] = (),
    allowed_dirs: Collection[Path | str] = (),
) -> list[Path]:
    """Return the existing files that pass the type and directory checks.

    A file is kept when it resolves to a canonical path, its extension is in
    ``allowed_types`` (any extension when empty) and its canonical path starts
    with one of ``allowed_dirs`` (any location when empty). Surviving files
    keep their input order and are returned in canonical form.

    Args:
        files: Candidate file paths.
        allowed_types: Extensions without the leading dot, case-sensitive.
        allowed_dirs: Directories that may contain the files.

    Returns:
        list[Path]: Fresh list of unique canonical paths.
    """

    directories = canonical_directories(allowed_dirs) if allowed_dirs else None
    kept: list[Path] = []
    for candidate in files:
        resolved = canonical_path(candidate)
        if resolved is None:
            continue
        if _has_allowed_type(resolved, allowed_types) and _in_allowed_directory(resolved, directories):
            kept.append(resolved)
    return unique_paths(kept)


def exclude_matching(files: Iterable[Path], patterns: Iterable[str]) -> list[Path]:
    """Return ``files`` whose path matches none of ``patterns``.

    Patterns are matched literally anywhere in the path, ignoring case.

    Args:
        files: Candidate file paths.
        patterns: Path fragments to exclude.

    Returns:
        list[Path]: Fresh list of the remaining files in input order.
    """

    fragments = [re.escape(pattern) for pattern in patterns if pattern]
    if not fragments:
        return list(files)
    blacklist = re.compile("|".join(fragments), re.IGNORECASE)
    return [path for path in files if not blacklist.search(str(path))]


__all__ = ["canonical_directories", "exclude_matching", "filter_files"]
