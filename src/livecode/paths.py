# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Helpers for canonicalising filesystem paths."""

from __future__ import annotations

from collections.abc import Iterable
from os import PathLike
from pathlib import Path

_Pathish = str | PathLike[str] | Path


def canonical_path(path: _Pathish) -> Path | None:
    """Return the canonical absolute form of ``path`` when it exists.

    Symlinks are resolved. Paths that do not exist, or that cannot be
    resolved for any other filesystem reason, yield ``None``.

    Args:
        path: Candidate path to canonicalise.

    Returns:
        Path | None: Canonical path, or ``None`` when unresolvable.
    """

    try:
        return Path(path).resolve(strict=True)
    except (OSError, RuntimeError):
        return None


def project_path(root: Path, entry: str) -> Path:
    """Return ``entry`` anchored at the project ``root``.

    The entry is joined as a string so that leading separators in list
    files are kept verbatim, matching how list entries are written.

    Args:
        root: Project root directory.
        entry: Root-relative path read from a list or diff.

    Returns:
        Path: Absolute, non-canonicalised path.
    """

    return Path(f"{root}/{entry}")


def unique_paths(paths: Iterable[Path]) -> list[Path]:
    """Return ``paths`` without duplicates, keeping first-seen order.

    Args:
        paths: Candidate paths, possibly repeated.

    Returns:
        list[Path]: Fresh list of unique paths.
    """

    seen: set[str] = set()
    result: list[Path] = []
    for path in paths:
        key = str(path)
        if key in seen:
            continue
        seen.add(key)
        result.append(path)
    return result


__all__ = ["canonical_path", "project_path", "unique_paths"]
