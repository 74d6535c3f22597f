# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""The live code suite: static-analysis checks over selected target files."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Final

from .analyzers import Analyzer, CommandAnalyzer
from .config import SuiteConfig
from .errors import ConfigError, VersionRangeError
from .filters import exclude_matching
from .targets import STRICT_TYPES_BLACKLIST, TargetSetBuilder
from .versions import resolve_target_versions

STRICT_TYPES_MARKER: Final[str] = "strict_types=1"
COPY_PASTE_BLACKLIST: Final[str] = "_files/phpcpd/blacklist/*.txt"
STATIC_TYPES_BLACKLIST: Final[str] = "_files/phpstan/blacklist/*.txt"
SOURCE_TYPES: Final[frozenset[str]] = frozenset({"php", "phtml"})
PHP_TYPES: Final[frozenset[str]] = frozenset({"php"})

AnalyzerFactory = Callable[[str, SuiteConfig, Mapping[str, str], Sequence[str]], Analyzer]


class CheckStatus(str, Enum):
    """Result states of a single check."""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True, slots=True)
class CheckOutcome:
    """Outcome of one check, with the files it analysed."""

    name: str
    status: CheckStatus
    message: str = ""
    files: tuple[Path, ...] = ()

    @property
    def failed(self) -> bool:
        """Return ``True`` when the check failed."""

        return self.status is CheckStatus.FAILED


def command_analyzer_factory(
    name: str,
    config: SuiteConfig,
    variables: Mapping[str, str],
    excludes: Sequence[str],
) -> Analyzer:
    """Return the configured :class:`CommandAnalyzer` for check ``name``.

    Raises:
        ConfigError: If no analyzer is configured for ``name``.
    """

    analyzer_config = config.analyzer(name)
    return CommandAnalyzer(
        name,
        analyzer_config,
        report_file=config.report_dir / analyzer_config.report,
        variables={"root": str(config.project_root), "suite": str(config.suite_dir), **variables},
        excludes=excludes,
        cwd=config.project_root,
    )


def _read_report(path: Path) -> str:
    """Return the report text, or an empty string when no report was written."""

    if not path.is_file():
        return ""
    return path.read_text(encoding="utf-8", errors="replace")


def _touch(path: Path) -> None:
    if not path.exists():
        path.touch()


class LiveCodeSuite:
    """Run static-analysis checks against the files each check selects."""

    def __init__(
        self,
        config: SuiteConfig,
        *,
        builder: TargetSetBuilder | None = None,
        analyzer_factory: AnalyzerFactory | None = None,
    ) -> None:
        """Create a suite for ``config``.

        Args:
            config: Immutable configuration of this run.
            builder: Optional target set builder; built from ``config`` when omitted.
            analyzer_factory: Optional factory creating analyzers per check.
        """

        self.config = config
        self.builder = builder or TargetSetBuilder(config)
        self.analyzer_factory = analyzer_factory or command_analyzer_factory
        self.checks: dict[str, Callable[[], CheckOutcome]] = {
            "code-style": self.check_code_style,
            "code-mess": self.check_code_mess,
            "copy-paste": self.check_copy_paste,
            "strict-types": self.check_strict_types,
            "compatibility": self.check_compatibility,
            "static-types": self.check_static_types,
        }

    def run(self, names: Iterable[str] | None = None) -> list[CheckOutcome]:
        """Run the selected checks in declaration order.

        Args:
            names: Check names to run; every check when ``None``.

        Returns:
            list[CheckOutcome]: One outcome per executed check.

        Raises:
            ConfigError: If an unknown check name is requested.
        """

        selected = list(self.checks) if names is None else list(names)
        unknown = sorted(set(selected) - set(self.checks))
        if unknown:
            raise ConfigError(f"Unknown check(s): {', '.join(unknown)}")
        self.config.report_dir.mkdir(parents=True, exist_ok=True)
        return [self.checks[name]() for name in self.checks if name in selected]

    def analyzer(
        self,
        name: str,
        *,
        variables: Mapping[str, str] | None = None,
        excludes: Sequence[str] = (),
    ) -> Analyzer:
        """Return the analyzer serving check ``name``."""

        return self.analyzer_factory(name, self.config, variables or {}, excludes)

    def _run_analyzer(
        self,
        analyzer: Analyzer,
        files: Sequence[Path],
        failure: Callable[[int, str], str],
    ) -> CheckOutcome:
        """Run ``analyzer`` over ``files`` and translate its exit code.

        Args:
            analyzer: Tool collaborator to invoke.
            files: Targets; an empty list passes without invoking the tool.
            failure: Builds the failure message from the exit code and report.

        Returns:
            CheckOutcome: Passed on a zero exit code, failed otherwise.
        """

        if not files:
            return CheckOutcome(analyzer.name, CheckStatus.PASSED, "No files to check.")
        exit_code = analyzer.run(files)
        if exit_code == 0:
            return CheckOutcome(analyzer.name, CheckStatus.PASSED, files=tuple(files))
        message = failure(exit_code, _read_report(analyzer.report_file))
        return CheckOutcome(analyzer.name, CheckStatus.FAILED, message, tuple(files))

    @staticmethod
    def _unavailable(analyzer: Analyzer, label: str) -> CheckOutcome:
        """Return the skipped outcome for a tool that cannot run."""

        return CheckOutcome(analyzer.name, CheckStatus.SKIPPED, f"{label} is not available.")

    def check_code_style(self) -> CheckOutcome:
        """Check coding standard violations in changed or whitelisted sources."""

        analyzer = self.analyzer("code-style")
        if not analyzer.can_run():
            return self._unavailable(analyzer, "Code style checker")
        _touch(analyzer.report_file)
        files = self.builder.build_for_scan(SOURCE_TYPES)
        return self._run_analyzer(
            analyzer,
            files,
            lambda code, report: f"Code style checker detected {code} violation(s):\n{report}",
        )

    def check_code_mess(self) -> CheckOutcome:
        """Check complexity and design problems in changed PHP files."""

        analyzer = self.analyzer("code-mess")
        if not analyzer.can_run():
            return self._unavailable(analyzer, "Mess detector")
        files = self.builder.build_incremental(PHP_TYPES)
        outcome = self._run_analyzer(
            analyzer,
            files,
            lambda _code, report: f"Mess detector has found error(s):\n{report}",
        )
        if not outcome.failed:
            analyzer.report_file.unlink(missing_ok=True)
        return outcome

    def check_copy_paste(self) -> CheckOutcome:
        """Check the whole project for duplicated code."""

        blacklist = self.builder.loader.load(self.builder.list_location(COPY_PASTE_BLACKLIST)).or_empty()
        analyzer = self.analyzer("copy-paste", excludes=blacklist)
        if not analyzer.can_run():
            return self._unavailable(analyzer, "Copy/paste detector")
        return self._run_analyzer(
            analyzer,
            [self.config.project_root],
            lambda _code, report: f"Copy/paste detector has found error(s):\n{report}",
        )

    def check_strict_types(self) -> CheckOutcome:
        """Check that newly added PHP files declare strict types."""

        files = [path for path in self.builder.build_added("php", STRICT_TYPES_BLACKLIST) if path.is_file()]
        missing = [
            str(path)
            for path in files
            if STRICT_TYPES_MARKER not in path.read_text(encoding="utf-8", errors="replace")
        ]
        if missing:
            message = "Following files are missing strict type declaration:\n" + "\n".join(missing)
            return CheckOutcome("strict-types", CheckStatus.FAILED, message, tuple(files))
        return CheckOutcome("strict-types", CheckStatus.PASSED, files=tuple(files))

    def check_compatibility(self) -> CheckOutcome:
        """Check sources against the runtime versions the manifest supports."""

        try:
            versions = resolve_target_versions(self.config.manifest, self.config.runtime_package)
        except VersionRangeError as exc:
            return CheckOutcome("compatibility", CheckStatus.FAILED, str(exc))
        analyzer = self.analyzer("compatibility", variables={"test_version": versions.test_version()})
        if not analyzer.can_run():
            return self._unavailable(analyzer, "Compatibility checker")
        _touch(analyzer.report_file)
        files = self.builder.build_for_scan(SOURCE_TYPES)
        return self._run_analyzer(
            analyzer,
            files,
            lambda _code, report: f"Compatibility checker detected violation(s):\n{report}",
        )

    def check_static_types(self) -> CheckOutcome:
        """Run the static type checker over changed, non-blacklisted PHP files."""

        analyzer = self.analyzer("static-types")
        if not analyzer.can_run():
            return self._unavailable(analyzer, "Static type checker")
        _touch(analyzer.report_file)
        blacklisted = self.builder.resolve_list(STATIC_TYPES_BLACKLIST)
        files = exclude_matching(
            self.builder.build_incremental(PHP_TYPES),
            (str(path) for path in blacklisted),
        )
        return self._run_analyzer(
            analyzer,
            files,
            lambda _code, report: (
                f"Static type checker detected violation(s):\n{report}"
                if report
                else "Static type checker command run failed."
            ),
        )


__all__ = [
    "AnalyzerFactory",
    "CheckOutcome",
    "CheckStatus",
    "LiveCodeSuite",
    "command_analyzer_factory",
]
