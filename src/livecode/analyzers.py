# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""External static-analysis tools the suite hands target files to."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from .config import AnalyzerConfig
from .process import CommandOptions, resolve_executable, run_command

FILES_TOKEN: Final[str] = "{files}"


class _Placeholders(dict[str, str]):
    """Placeholder values; unknown fields are left as written."""

    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


@runtime_checkable
class Analyzer(Protocol):
    """Collaborator that analyses files and reports through an exit code."""

    name: str
    report_file: Path

    def can_run(self) -> bool:
        """Return ``True`` when the tool is available."""
        ...

    def run(self, files: Sequence[Path]) -> int:
        """Analyse ``files`` and return the tool's exit code."""
        ...


class CommandAnalyzer:
    """Analyzer backed by an external command template."""

    def __init__(
        self,
        name: str,
        config: AnalyzerConfig,
        *,
        report_file: Path,
        variables: Mapping[str, str] | None = None,
        excludes: Sequence[str] = (),
        cwd: Path | None = None,
    ) -> None:
        """Create an analyzer for ``config``.

        Args:
            name: Check name the analyzer serves.
            config: Command template and reporting options.
            report_file: File receiving the tool's report.
            variables: Placeholder values substituted into the template.
            excludes: Paths passed through ``config.exclude_flag``.
            cwd: Working directory for the command.
        """

        self.name = name
        self.config = config
        self.report_file = report_file
        self.variables = _Placeholders({**(variables or {}), "report": str(report_file)})
        self.excludes = tuple(excludes)
        self.cwd = cwd

    def _expand(self, token: str) -> str:
        return token.format_map(self.variables)

    def executable(self) -> str:
        """Return the expanded executable token."""

        return self._expand(self.config.command[0])

    def can_run(self) -> bool:
        """Return ``True`` when the executable exists."""

        return resolve_executable(self.executable()) is not None

    def build_command(self, files: Sequence[Path]) -> list[str]:
        """Return the full argument list for analysing ``files``.

        Args:
            files: Target files.

        Returns:
            list[str]: Command with placeholders, excludes and targets applied.
        """

        targets = [str(path) for path in files]
        command: list[str] = []
        joined = False
        for token in self.config.command:
            if token == FILES_TOKEN:
                command.append(self.config.files_separator.join(targets))
                joined = True
                continue
            command.append(self._expand(token))
        if self.config.exclude_flag:
            command.extend(self.config.exclude_flag.format(path=path) for path in self.excludes)
        if not joined:
            command.extend(targets)
        return command

    def run(self, files: Sequence[Path]) -> int:
        """Run the tool against ``files`` and return its exit code.

        With ``capture_report`` the tool's stdout is written to the report file.

        Raises:
            FileNotFoundError: If the executable is missing.
        """

        completed = run_command(
            self.build_command(files),
            options=CommandOptions(cwd=self.cwd, capture_output=self.config.capture_report),
        )
        if self.config.capture_report:
            self.report_file.write_text(completed.stdout or "", encoding="utf-8")
        return completed.returncode


__all__ = ["Analyzer", "CommandAnalyzer"]
