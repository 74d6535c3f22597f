# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command line interface for the live code suite."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.logging import RichHandler

from .checks import LiveCodeSuite
from .config import SuiteConfig, load_suite_config
from .errors import ConfigError, VersionRangeError
from .reporting import OutputOptions, render_error, render_header, render_outcome, render_summary
from .targets import DEFAULT_WHITELIST, STRICT_TYPES_BLACKLIST, TargetSetBuilder
from .versions import resolve_target_versions

CONFIG_ERROR_EXIT_CODE = 2

ROOT_OPTION = Annotated[Path, typer.Option("--root", "-r", help="Root of the analysed codebase.")]
FULL_SCAN_OPTION = Annotated[
    bool,
    typer.Option("--full-scan", help="Analyse the whole whitelist instead of changed files."),
]
EMOJI_OPTION = Annotated[bool, typer.Option("--emoji/--no-emoji", help="Toggle emoji output.")]
COLOR_OPTION = Annotated[bool, typer.Option("--color/--no-color", help="Toggle coloured output.")]
DEBUG_OPTION = Annotated[bool, typer.Option("--debug", help="Log diagnostic details.")]
CHECKS_ARGUMENT = Annotated[
    list[str] | None,
    typer.Argument(metavar="[CHECK]...", help="Checks to run; all checks when omitted."),
]
TYPE_OPTION = Annotated[
    list[str] | None,
    typer.Option("--type", "-t", help="Allowed file extension, repeatable."),
]
ADDED_OPTION = Annotated[bool, typer.Option("--added", help="Select newly added files minus the blacklist.")]
WHITELIST_OPTION = Annotated[str, typer.Option("--whitelist", help="Whitelist file relative to the suite directory.")]
BLACKLIST_OPTION = Annotated[str, typer.Option("--blacklist", help="Blacklist file relative to the suite directory.")]

app = typer.Typer(
    name="livecode",
    help="Select changed files and run static-analysis checks against them.",
    no_args_is_help=True,
    add_completion=False,
)


def _load_config(root: Path, *, full_scan: bool, output: OutputOptions | None = None) -> SuiteConfig:
    """Return the suite configuration or exit with the configuration error status.

    Raises:
        typer.Exit: With status 2 when configuration is invalid.
    """

    overrides: dict[str, Any] = {"full_scan": True} if full_scan else {}
    try:
        return load_suite_config(root, overrides=overrides)
    except ConfigError as exc:
        render_error(f"Invalid configuration: {exc}", output or OutputOptions())
        raise typer.Exit(code=CONFIG_ERROR_EXIT_CODE) from exc


def _configure_logging(debug: bool) -> None:
    """Route library debug logging through a Rich handler when ``debug`` is set."""

    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(message)s", handlers=[RichHandler(show_path=False)])


@app.command("run")
def run_checks(
    checks: CHECKS_ARGUMENT = None,
    root: ROOT_OPTION = Path(),
    full_scan: FULL_SCAN_OPTION = False,
    emoji: EMOJI_OPTION = True,
    color: COLOR_OPTION = True,
    debug: DEBUG_OPTION = False,
) -> None:
    """Run static-analysis checks and exit non-zero when any fails.

    Raises:
        typer.Exit: With status 1 when a check failed, 2 on configuration errors.
    """

    _configure_logging(debug)
    output = OutputOptions(color=color, emoji=emoji)
    config = _load_config(root, full_scan=full_scan, output=output)
    suite = LiveCodeSuite(config)
    try:
        outcomes = suite.run(checks or None)
    except ConfigError as exc:
        render_error(str(exc), output)
        raise typer.Exit(code=CONFIG_ERROR_EXIT_CODE) from exc

    render_header("Live code checks", output)
    for outcome in outcomes:
        render_outcome(outcome, output)
    render_summary(outcomes, output)
    if any(outcome.failed for outcome in outcomes):
        raise typer.Exit(code=1)


@app.command("targets")
def list_targets(
    root: ROOT_OPTION = Path(),
    file_types: TYPE_OPTION = None,
    full_scan: FULL_SCAN_OPTION = False,
    added: ADDED_OPTION = False,
    whitelist: WHITELIST_OPTION = DEFAULT_WHITELIST,
    blacklist: BLACKLIST_OPTION = STRICT_TYPES_BLACKLIST,
    debug: DEBUG_OPTION = False,
) -> None:
    """Print the files a check would analyse, one per line.

    With ``--added`` a single ``--type`` selects the extension (``php`` when
    omitted).

    Raises:
        typer.BadParameter: If ``--added`` is combined with several types.
    """

    types = file_types or []
    if added and len(types) > 1:
        raise typer.BadParameter("--added accepts a single --type", param_hint="--type")
    _configure_logging(debug)
    config = _load_config(root, full_scan=full_scan)
    builder = TargetSetBuilder(config)
    if added:
        files = builder.build_added(types[0] if types else "php", blacklist)
    else:
        files = builder.build_for_scan(set(types), whitelist)
    for path in files:
        typer.echo(str(path))


@app.command("versions")
def show_versions(root: ROOT_OPTION = Path()) -> None:
    """Print the runtime version expression compatibility checks target.

    Raises:
        typer.Exit: With status 1 when the manifest declares no versions.
    """

    config = _load_config(root, full_scan=False)
    try:
        versions = resolve_target_versions(config.manifest, config.runtime_package)
    except VersionRangeError as exc:
        render_error(str(exc), OutputOptions())
        raise typer.Exit(code=1) from exc
    typer.echo(versions.test_version())


def main() -> None:
    """Console script entry point."""

    app()


__all__ = ["app", "main"]
