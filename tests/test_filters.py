# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for extension and directory filtering."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

from livecode.filters import canonical_directories, exclude_matching, filter_files


def test_type_filter_and_existence_pruning(project_root: Path, write_file: Callable[..., Path]) -> None:
    php = write_file("a.php")
    write_file("b.txt")

    files = [project_root / "a.php", project_root / "b.txt", project_root / "missing.php"]

    assert filter_files(files, {"php"}, set()) == [php]


def test_empty_filters_only_prune_missing(project_root: Path, write_file: Callable[..., Path]) -> None:
    first = write_file("one.php")
    second = write_file("two.txt")

    files = [second, project_root / "gone.php", first, second]

    assert filter_files(files) == [second, first]


def test_extension_match_is_case_sensitive(write_file: Callable[..., Path]) -> None:
    upper = write_file("Upper.PHP")

    assert filter_files([upper], {"php"}) == []
    assert filter_files([upper], {"PHP"}) == [upper]


def test_directory_filter_keeps_input_order(project_root: Path, write_file: Callable[..., Path]) -> None:
    inside_b = write_file("app/b/Model.php")
    outside = write_file("lib/Other.php")
    inside_a = write_file("app/a/Model.php")

    result = filter_files([inside_b, outside, inside_a], {"php"}, [project_root / "app/a", project_root / "app/b"])

    assert result == [inside_b, inside_a]


def test_directory_filter_uses_plain_string_prefix(project_root: Path, write_file: Callable[..., Path]) -> None:
    (project_root / "a/b").mkdir(parents=True)
    sibling = write_file("a/bc/file.php")

    assert filter_files([sibling], (), [project_root / "a/b"]) == [sibling]


def test_unresolvable_directories_are_ignored(project_root: Path, write_file: Callable[..., Path]) -> None:
    kept = write_file("app/code/Model.php")

    assert filter_files([kept], (), [project_root / "missing", project_root / "app"]) == [kept]
    assert filter_files([kept], (), [project_root / "missing"]) == []


def test_symlinked_files_are_canonicalised(project_root: Path, write_file: Callable[..., Path]) -> None:
    real = write_file("real/Model.php")
    link = project_root / "link"
    os.symlink(project_root / "real", link)

    assert filter_files([link / "Model.php", real], {"php"}, [project_root / "real"]) == [real]


def test_canonical_directories_sorted_by_length(project_root: Path) -> None:
    for name in ("app/code/Vendor", "app", "lib/internal"):
        (project_root / name).mkdir(parents=True, exist_ok=True)

    ordered = canonical_directories(
        [project_root / "lib/internal", project_root / "app/code/Vendor", project_root / "app"],
    )

    assert ordered == [str(project_root / "app"), str(project_root / "lib/internal"), str(project_root / "app/code/Vendor")]


def test_canonical_directories_keep_input_order_for_equal_lengths(project_root: Path) -> None:
    for name in ("app/aa", "app/bb", "lib"):
        (project_root / name).mkdir(parents=True, exist_ok=True)

    ordered = canonical_directories([project_root / "app/bb", project_root / "lib", project_root / "app/aa"])

    assert ordered == [str(project_root / "lib"), str(project_root / "app/bb"), str(project_root / "app/aa")]


def test_filtering_is_idempotent(project_root: Path, write_file: Callable[..., Path]) -> None:
    files = [write_file("app/x.php"), write_file("app/y.phtml"), write_file("lib/z.php"), project_root / "gone.php"]
    types = {"php", "phtml"}
    dirs = [project_root / "app"]

    once = filter_files(files, types, dirs)

    assert filter_files(once, types, dirs) == once


def test_exclude_matching_is_case_insensitive_and_literal() -> None:
    files = [Path("/repo/app/Legacy/Old.php"), Path("/repo/app/New.php"), Path("/repo/lib/aXb.php")]

    assert exclude_matching(files, ["app/legacy", "a.b"]) == [Path("/repo/app/New.php"), Path("/repo/lib/aXb.php")]
    assert exclude_matching(files, []) == files
