# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Loading of newline-delimited whitelist and blacklist files."""

from __future__ import annotations

import glob
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Final, TypeAlias

from .errors import ListNotFoundError
from .paths import unique_paths

COMMENT_PREFIX: Final[str] = "#"
_BRACE_PATTERN: Final[re.Pattern[str]] = re.compile(r"\{([^{}]*)\}")


@dataclass(frozen=True, slots=True)
class ListLoaded:
    """List files were found; ``specs`` holds their raw entries in order."""

    specs: tuple[str, ...]

    def or_empty(self) -> tuple[str, ...]:
        """Return the loaded specs."""

        return self.specs

    def require(self) -> tuple[str, ...]:
        """Return the loaded specs."""

        return self.specs


@dataclass(frozen=True, slots=True)
class ListNotFound:
    """No list file matched ``pattern``."""

    pattern: str

    def or_empty(self) -> tuple[str, ...]:
        """Treat the missing list as listing nothing."""

        return ()

    def require(self) -> tuple[str, ...]:
        """Raise for callers that cannot proceed without the list.

        Raises:
            ListNotFoundError: Always.
        """

        raise ListNotFoundError(self.pattern)


ListOutcome: TypeAlias = ListLoaded | ListNotFound


def read_list_lines(path: Path) -> list[str]:
    """Return the non-empty lines of ``path`` without line terminators."""

    return [line for line in path.read_text(encoding="utf-8").splitlines() if line]


class ListFileLoader:
    """Read whitelist/blacklist entries from one or more list files."""

    def load(self, pattern: str | Path) -> ListOutcome:
        """Load every list file matching ``pattern``.

        Files are read in sorted discovery order; entries are concatenated and
        deduplicated, keeping the first occurrence.

        Args:
            pattern: Path or glob pointing at the list files.

        Returns:
            ListOutcome: ``ListLoaded`` with the raw entries, or
            ``ListNotFound`` when no list file matched.
        """

        text = str(pattern)
        list_files = sorted(glob.glob(text))
        if not list_files:
            return ListNotFound(text)
        specs: dict[str, None] = {}
        for list_file in list_files:
            for line in read_list_lines(Path(list_file)):
                specs.setdefault(line, None)
        return ListLoaded(tuple(specs))


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives in ``pattern`` into separate patterns.

    Args:
        pattern: Glob pattern possibly holding brace alternatives.

    Returns:
        list[str]: Expanded patterns in left-to-right alternative order.
    """

    match = _BRACE_PATTERN.search(pattern)
    if match is None:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end() :]
    expanded: list[str] = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(f"{head}{option}{tail}"))
    return expanded


def _iter_spec_matches(spec: str, root: Path) -> Iterator[Path]:
    """Yield the sorted glob matches of ``spec`` anchored at ``root``."""

    anchored = spec if Path(spec).is_absolute() else f"{root}/{spec}"
    for pattern in expand_braces(anchored):
        for match in sorted(glob.glob(pattern, recursive=True)):
            yield Path(match)


def resolve_specs(specs: Iterable[str], root: Path) -> list[Path]:
    """Resolve list entries to the filesystem paths they match.

    Relative entries are anchored at ``root``. Comment lines are skipped and
    entries matching nothing contribute nothing.

    Args:
        specs: Raw list entries (paths, directories, or globs).
        root: Project root used for relative entries.

    Returns:
        list[Path]: Matched paths, deduplicated in first-seen order.
    """

    matches: list[Path] = []
    for raw in specs:
        spec = raw.strip()
        if not spec or spec.startswith(COMMENT_PREFIX):
            continue
        matches.extend(_iter_spec_matches(spec, root))
    return unique_paths(matches)


__all__ = [
    "ListFileLoader",
    "ListLoaded",
    "ListNotFound",
    "ListOutcome",
    "expand_braces",
    "read_list_lines",
    "resolve_specs",
]
