# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the live code suite checks."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

import pytest
from conftest import ADDED_DIFF, STAGED_DIFF, WORKTREE_DIFF, FakeGit

from livecode.checks import CheckStatus, LiveCodeSuite
from livecode.config import SuiteConfig
from livecode.errors import ConfigError
from livecode.targets import TargetSetBuilder


class FakeAnalyzer:
    """Analyzer double recording the files it receives."""

    def __init__(self, name: str, report_file: Path, *, available: bool, exit_code: int, report: str) -> None:
        self.name = name
        self.report_file = report_file
        self.available = available
        self.exit_code = exit_code
        self.report = report
        self.runs: list[list[Path]] = []

    def can_run(self) -> bool:
        return self.available

    def run(self, files: Sequence[Path]) -> int:
        self.runs.append(list(files))
        if self.report:
            self.report_file.write_text(self.report, encoding="utf-8")
        return self.exit_code


class FakeFactory:
    """Analyzer factory handing out one :class:`FakeAnalyzer` per check."""

    def __init__(self, *, available: bool = True, exit_code: int = 0, report: str = "") -> None:
        self.available = available
        self.exit_code = exit_code
        self.report = report
        self.created: dict[str, FakeAnalyzer] = {}
        self.variables: dict[str, Mapping[str, str]] = {}
        self.excludes: dict[str, Sequence[str]] = {}

    def __call__(
        self,
        name: str,
        config: SuiteConfig,
        variables: Mapping[str, str],
        excludes: Sequence[str],
    ) -> FakeAnalyzer:
        analyzer = FakeAnalyzer(
            name,
            config.report_dir / f"{name}.txt",
            available=self.available,
            exit_code=self.exit_code,
            report=self.report,
        )
        self.created[name] = analyzer
        self.variables[name] = variables
        self.excludes[name] = excludes
        return analyzer


@pytest.fixture
def changed_project(suite_config: SuiteConfig, write_file: Callable[..., Path]) -> dict[str, Path]:
    write_file("suite/_files/whitelist/common.txt", "app\n")
    write_file("composer.json", json.dumps({"require": {"php": "~8.2.0||~8.3.0"}}))
    return {
        "model": write_file("app/Model.php", "<?php\ndeclare(strict_types=1);\n"),
        "view": write_file("app/view.phtml", "<?= 1 ?>\n"),
        "loose": write_file("app/Loose.php", "<?php\n"),
    }


def _suite(config: SuiteConfig, git: FakeGit, factory: FakeFactory) -> LiveCodeSuite:
    return LiveCodeSuite(config, builder=TargetSetBuilder(config, runner=git), analyzer_factory=factory)


def _git() -> FakeGit:
    return FakeGit(
        {
            WORKTREE_DIFF: ["app/Model.php", "app/view.phtml"],
            STAGED_DIFF: [],
            ADDED_DIFF: ["app/Loose.php", "app/Model.php"],
        }
    )


def test_code_style_runs_on_php_and_templates(suite_config: SuiteConfig, changed_project: dict[str, Path]) -> None:
    factory = FakeFactory()

    (outcome,) = _suite(suite_config, _git(), factory).run(["code-style"])

    assert outcome.status is CheckStatus.PASSED
    assert factory.created["code-style"].runs == [[changed_project["model"], changed_project["view"]]]
    assert (suite_config.report_dir / "code-style.txt").exists()


def test_failed_tool_reports_violations(suite_config: SuiteConfig, changed_project: dict[str, Path]) -> None:
    factory = FakeFactory(exit_code=2, report="Model.php: line too long")

    (outcome,) = _suite(suite_config, _git(), factory).run(["code-style"])

    assert outcome.failed
    assert "detected 2 violation(s)" in outcome.message
    assert "line too long" in outcome.message


def test_unavailable_tool_is_skipped(suite_config: SuiteConfig, changed_project: dict[str, Path]) -> None:
    factory = FakeFactory(available=False)

    (outcome,) = _suite(suite_config, _git(), factory).run(["code-mess"])

    assert outcome.status is CheckStatus.SKIPPED
    assert factory.created["code-mess"].runs == []


def test_nothing_changed_passes_without_running_tool(suite_config: SuiteConfig, changed_project: dict[str, Path]) -> None:
    factory = FakeFactory()

    (outcome,) = _suite(suite_config, FakeGit(), factory).run(["code-mess"])

    assert outcome.status is CheckStatus.PASSED
    assert outcome.message == "No files to check."
    assert factory.created["code-mess"].runs == []


def test_code_mess_removes_report_after_success(suite_config: SuiteConfig, changed_project: dict[str, Path]) -> None:
    factory = FakeFactory(report="")
    suite = _suite(suite_config, _git(), factory)
    suite_config.report_dir.mkdir(parents=True)
    (suite_config.report_dir / "code-mess.txt").write_text("stale", encoding="utf-8")

    (outcome,) = suite.run(["code-mess"])

    assert outcome.status is CheckStatus.PASSED
    assert factory.created["code-mess"].runs == [[changed_project["model"]]]
    assert not (suite_config.report_dir / "code-mess.txt").exists()


def test_copy_paste_scans_project_with_blacklist(
    suite_config: SuiteConfig,
    changed_project: dict[str, Path],
    write_file: Callable[..., Path],
) -> None:
    write_file("suite/_files/phpcpd/blacklist/common.txt", "lib/legacy\nsetup\n")
    factory = FakeFactory()

    (outcome,) = _suite(suite_config, _git(), factory).run(["copy-paste"])

    assert outcome.status is CheckStatus.PASSED
    assert factory.created["copy-paste"].runs == [[suite_config.project_root]]
    assert factory.excludes["copy-paste"] == ("lib/legacy", "setup")


def test_strict_types_flags_added_files_missing_declaration(
    suite_config: SuiteConfig,
    changed_project: dict[str, Path],
) -> None:
    (outcome,) = _suite(suite_config, _git(), FakeFactory()).run(["strict-types"])

    assert outcome.failed
    assert str(changed_project["loose"]) in outcome.message
    assert str(changed_project["model"]) not in outcome.message


def test_strict_types_ignores_added_directories(
    suite_config: SuiteConfig,
    changed_project: dict[str, Path],
    project_root: Path,
) -> None:
    (project_root / "app/Legacy.php").mkdir()
    git = FakeGit({WORKTREE_DIFF: [], STAGED_DIFF: [], ADDED_DIFF: ["app/Legacy.php", "app/Model.php"]})

    (outcome,) = _suite(suite_config, git, FakeFactory()).run(["strict-types"])

    assert outcome.status is CheckStatus.PASSED
    assert outcome.files == (changed_project["model"],)


def test_strict_types_honours_blacklist(
    suite_config: SuiteConfig,
    changed_project: dict[str, Path],
    write_file: Callable[..., Path],
) -> None:
    write_file("suite/_files/blacklist/strict_type.txt", "app/Loose.php\n")

    (outcome,) = _suite(suite_config, _git(), FakeFactory()).run(["strict-types"])

    assert outcome.status is CheckStatus.PASSED
    assert outcome.files == (changed_project["model"],)


def test_compatibility_passes_version_range(suite_config: SuiteConfig, changed_project: dict[str, Path]) -> None:
    factory = FakeFactory()

    (outcome,) = _suite(suite_config, _git(), factory).run(["compatibility"])

    assert outcome.status is CheckStatus.PASSED
    assert factory.variables["compatibility"] == {"test_version": "8.2-8.3"}


def test_compatibility_fails_without_declared_versions(
    suite_config: SuiteConfig,
    write_file: Callable[..., Path],
) -> None:
    write_file("composer.json", json.dumps({"require": {}}))
    factory = FakeFactory()

    (outcome,) = _suite(suite_config, _git(), factory).run(["compatibility"])

    assert outcome.failed
    assert "No supported versions information in composer.json" in outcome.message
    assert "compatibility" not in factory.created


def test_static_types_excludes_blacklisted_files(
    suite_config: SuiteConfig,
    changed_project: dict[str, Path],
    write_file: Callable[..., Path],
) -> None:
    write_file("suite/_files/phpstan/blacklist/common.txt", "app/Model.php\n")
    factory = FakeFactory()
    git = FakeGit({WORKTREE_DIFF: ["app/Model.php", "app/Loose.php"]})

    (outcome,) = _suite(suite_config, git, factory).run(["static-types"])

    assert outcome.status is CheckStatus.PASSED
    assert factory.created["static-types"].runs == [[changed_project["loose"]]]


def test_static_types_empty_report_means_run_failure(
    suite_config: SuiteConfig,
    changed_project: dict[str, Path],
) -> None:
    factory = FakeFactory(exit_code=1)

    (outcome,) = _suite(suite_config, _git(), factory).run(["static-types"])

    assert outcome.failed
    assert outcome.message == "Static type checker command run failed."


def test_run_executes_checks_in_declaration_order(suite_config: SuiteConfig, changed_project: dict[str, Path]) -> None:
    outcomes = _suite(suite_config, _git(), FakeFactory()).run(["static-types", "code-style"])

    assert [outcome.name for outcome in outcomes] == ["code-style", "static-types"]


def test_run_rejects_unknown_checks(suite_config: SuiteConfig) -> None:
    with pytest.raises(ConfigError, match="spelling"):
        _suite(suite_config, FakeGit(), FakeFactory()).run(["spelling"])
