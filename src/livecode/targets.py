# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Compose change sets, list files and filters into analysis targets."""

from __future__ import annotations

from collections.abc import Collection
from pathlib import Path
from typing import Final

from .changes import ChangeKind, ChangeSetResolver, GitRunner
from .config import SuiteConfig
from .filters import filter_files
from .lists import ListFileLoader, ListLoaded, resolve_specs
from .paths import canonical_path

DEFAULT_WHITELIST: Final[str] = "_files/whitelist/common.txt"
STRICT_TYPES_BLACKLIST: Final[str] = "_files/blacklist/strict_type.txt"


class TargetSetBuilder:
    """Build the ordered, deduplicated file lists each check runs against."""

    def __init__(
        self,
        config: SuiteConfig,
        *,
        resolver: ChangeSetResolver | None = None,
        loader: ListFileLoader | None = None,
        runner: GitRunner | None = None,
    ) -> None:
        """Create a builder bound to ``config``.

        Args:
            config: Suite configuration shared by the run.
            resolver: Optional change set resolver; built from ``config`` and
                ``runner`` when omitted.
            loader: Optional list file loader.
            runner: Optional git runner used by the default resolver.
        """

        self.config = config
        self.resolver = resolver or ChangeSetResolver(config, runner=runner)
        self.loader = loader or ListFileLoader()

    def list_location(self, spec: str | Path) -> Path:
        """Return ``spec`` anchored at the suite directory unless absolute."""

        path = Path(spec)
        return path if path.is_absolute() else self.config.suite_dir / path

    def resolve_list(self, spec: str | Path) -> list[Path]:
        """Return the paths matched by the list file(s) at ``spec``.

        A missing list resolves to nothing.

        Args:
            spec: List file path or glob, relative to the suite directory.

        Returns:
            list[Path]: Matched paths in list order.
        """

        outcome = self.loader.load(self.list_location(spec))
        return resolve_specs(outcome.or_empty(), self.config.project_root)

    def build_incremental(
        self,
        file_types: Collection[str],
        whitelist: str | Path = DEFAULT_WHITELIST,
        *,
        base_dir: Path | None = None,
    ) -> list[Path]:
        """Return changed files of ``file_types`` located in whitelisted directories.

        When nothing changed the whitelist is never loaded.

        Args:
            file_types: Allowed extensions; empty allows every extension.
            whitelist: Whitelist file path or glob.
            base_dir: Optional override for the change list directory.

        Returns:
            list[Path]: Canonical target paths in change set order.
        """

        changed = self.resolver.resolve(ChangeKind.CHANGED, base_dir)
        if not changed:
            return []
        outcome = self.loader.load(self.list_location(whitelist))
        if not isinstance(outcome, ListLoaded):
            return []
        directories = resolve_specs(outcome.specs, self.config.project_root)
        if not directories:
            return []
        return filter_files(changed, file_types, directories)

    def build_full(self, whitelist: str | Path = DEFAULT_WHITELIST) -> list[Path]:
        """Return every path the whitelist resolves to, unfiltered.

        Args:
            whitelist: Whitelist file path or glob.

        Returns:
            list[Path]: Whitelisted paths; empty when the whitelist is missing.
        """

        return self.resolve_list(whitelist)

    def build_added(self, file_type: str, blacklist: str | Path = STRICT_TYPES_BLACKLIST) -> list[Path]:
        """Return newly added files of ``file_type`` not listed in ``blacklist``.

        Unlike :meth:`build_incremental` this subtracts a blacklist rather than
        intersecting with a whitelist.

        Args:
            file_type: Single allowed extension.
            blacklist: Blacklist file path or glob.

        Returns:
            list[Path]: Canonical added paths minus blacklisted ones.
        """

        added = filter_files(self.resolver.resolve(ChangeKind.ADDED), {file_type})
        if not added:
            return []
        excluded = {
            str(resolved)
            for resolved in map(canonical_path, self.resolve_list(blacklist))
            if resolved is not None
        }
        return [path for path in added if str(path) not in excluded]

    def build_for_scan(self, file_types: Collection[str], whitelist: str | Path = DEFAULT_WHITELIST) -> list[Path]:
        """Return full or incremental targets according to the scan mode.

        Args:
            file_types: Extensions used in incremental mode.
            whitelist: Whitelist file path or glob.

        Returns:
            list[Path]: Targets for the configured scan mode.
        """

        if self.config.full_scan:
            return self.build_full(whitelist)
        return self.build_incremental(file_types, whitelist)


__all__ = ["DEFAULT_WHITELIST", "STRICT_TYPES_BLACKLIST", "TargetSetBuilder"]
