# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and loaders for the live code suite."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .errors import ConfigError

CONFIG_FILENAME: Final[str] = "livecode.toml"
PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
TOOL_SECTION: Final[str] = "livecode"
FULL_SCAN_ENV: Final[str] = "LIVECODE_FULL_SCAN"

DEFAULT_SUITE_DIR: Final[str] = "dev/tests/static/testsuite/Magento/Test/Php"
DEFAULT_REPORT_DIR: Final[str] = "dev/tests/static/report"
DEFAULT_MANIFEST: Final[str] = "composer.json"
DEFAULT_RUNTIME_PACKAGE: Final[str] = "php"

_PATH_FIELDS: Final[tuple[str, ...]] = ("suite_dir", "changed_files_dir", "report_dir", "manifest")


class AnalyzerConfig(BaseModel):
    """Command template describing how an external analyzer is invoked.

    Tokens may reference ``{root}``, ``{suite}``, ``{report}`` and
    ``{test_version}``. A token equal to ``{files}`` is replaced by the
    target files joined with ``files_separator``; without such a token the
    targets are appended as separate arguments.
    """

    model_config = ConfigDict(frozen=True)

    command: tuple[str, ...]
    report: str
    exclude_flag: str | None = None
    files_separator: str = ","
    capture_report: bool = False

    @field_validator("command")
    @classmethod
    def _require_executable(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            raise ValueError("analyzer command must not be empty")
        return value


def default_analyzers() -> dict[str, AnalyzerConfig]:
    """Return the default analyzer commands keyed by check name."""

    return {
        "code-style": AnalyzerConfig(
            command=("{root}/vendor/bin/phpcs", "--standard=Magento2", "--report-file={report}"),
            report="phpcs_report.txt",
        ),
        "code-mess": AnalyzerConfig(
            command=(
                "{root}/vendor/bin/phpmd",
                "{files}",
                "text",
                "{suite}/_files/phpmd/ruleset.xml",
                "--reportfile",
                "{report}",
            ),
            report="phpmd_report.txt",
        ),
        "copy-paste": AnalyzerConfig(
            command=("{root}/vendor/bin/phpcpd", "--log-pmd={report}", "--min-lines=13"),
            report="phpcpd_report.xml",
            exclude_flag="--exclude={path}",
        ),
        "compatibility": AnalyzerConfig(
            command=(
                "{root}/vendor/bin/phpcs",
                "--standard={suite}/_files/PHPCompatibilityMagento",
                "--runtime-set",
                "testVersion",
                "{test_version}",
                "--report-file={report}",
            ),
            report="phpcompatibility_report.txt",
        ),
        "static-types": AnalyzerConfig(
            command=(
                "{root}/vendor/bin/phpstan",
                "analyse",
                "--configuration={suite}/_files/phpstan/phpstan.neon",
                "--no-progress",
                "--error-format=table",
            ),
            report="phpstan_report.txt",
            capture_report=True,
        ),
    }


class SuiteConfig(BaseModel):
    """Immutable settings shared by every check of a single suite run."""

    model_config = ConfigDict(frozen=True)

    project_root: Path
    suite_dir: Path
    changed_files_dir: Path
    report_dir: Path
    manifest: Path
    runtime_package: str = DEFAULT_RUNTIME_PACKAGE
    full_scan: bool = False
    analyzers: dict[str, AnalyzerConfig] = Field(default_factory=default_analyzers)

    @model_validator(mode="before")
    @classmethod
    def _anchor_paths(cls, data: Any) -> Any:
        """Fill default locations and anchor relative paths at the project root.

        Args:
            data: Raw payload supplied to the model.

        Returns:
            Any: Payload with every path field absolute.
        """

        if not isinstance(data, Mapping) or "project_root" not in data:
            return data
        payload = dict(data)
        root = Path(payload["project_root"]).expanduser().resolve()
        payload["project_root"] = root
        payload.setdefault("suite_dir", DEFAULT_SUITE_DIR)
        payload.setdefault("report_dir", DEFAULT_REPORT_DIR)
        payload.setdefault("manifest", DEFAULT_MANIFEST)
        for name in _PATH_FIELDS:
            value = payload.get(name)
            if value is None:
                continue
            candidate = Path(value).expanduser()
            payload[name] = candidate if candidate.is_absolute() else root / candidate
        if payload.get("changed_files_dir") is None:
            payload["changed_files_dir"] = Path(payload["suite_dir"]).parent
        analyzers = payload.get("analyzers")
        if isinstance(analyzers, Mapping):
            merged: dict[str, Any] = dict(default_analyzers())
            merged.update(analyzers)
            payload["analyzers"] = merged
        return payload

    def analyzer(self, name: str) -> AnalyzerConfig:
        """Return the analyzer configuration registered for check ``name``.

        Raises:
            ConfigError: If no analyzer is configured under ``name``.
        """

        try:
            return self.analyzers[name]
        except KeyError as exc:
            raise ConfigError(f"No analyzer configured for check '{name}'") from exc


def _read_toml(path: Path) -> dict[str, Any]:
    """Parse ``path`` as TOML, raising :class:`ConfigError` on any failure."""

    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Unable to read {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc


def _file_settings(root: Path) -> dict[str, Any]:
    """Return settings declared in ``livecode.toml`` or ``pyproject.toml``.

    Args:
        root: Project root searched for configuration files.

    Returns:
        dict[str, Any]: Raw settings, empty when no file declares any.

    Raises:
        ConfigError: If a configuration file exists but cannot be parsed.
    """

    dedicated = root / CONFIG_FILENAME
    if dedicated.is_file():
        data = _read_toml(dedicated)
        section = data.get("tool", {}).get(TOOL_SECTION, data)
        return dict(section) if isinstance(section, Mapping) else {}
    pyproject = root / PYPROJECT_FILENAME
    if pyproject.is_file():
        section = _read_toml(pyproject).get("tool", {}).get(TOOL_SECTION, {})
        if not isinstance(section, Mapping):
            raise ConfigError(f"[tool.{TOOL_SECTION}] in {pyproject} must be a table")
        return dict(section)
    return {}


def load_suite_config(
    project_root: Path,
    *,
    overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> SuiteConfig:
    """Build the suite configuration for ``project_root``.

    File settings are applied first, then the ``LIVECODE_FULL_SCAN``
    environment flag, then explicit ``overrides``.

    Args:
        project_root: Root of the analysed codebase.
        overrides: Optional explicit settings, typically from the CLI.
        environ: Environment mapping; defaults to ``os.environ``.

    Returns:
        SuiteConfig: Validated, immutable configuration.

    Raises:
        ConfigError: If any configuration source is invalid.
    """

    root = project_root.expanduser().resolve()
    settings = _file_settings(root)
    env = os.environ if environ is None else environ
    if env.get(FULL_SCAN_ENV) == "1":
        settings["full_scan"] = True
    settings.update(overrides or {})
    settings["project_root"] = root
    try:
        return SuiteConfig.model_validate(settings)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc


__all__ = [
    "AnalyzerConfig",
    "ConfigError",
    "FULL_SCAN_ENV",
    "SuiteConfig",
    "default_analyzers",
    "load_suite_config",
]
