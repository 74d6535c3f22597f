# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Console rendering of live code check outcomes."""

from __future__ import annotations

import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Final

from rich.console import Console
from rich.rule import Rule
from rich.text import Text

from .checks import CheckOutcome, CheckStatus

# Rich style and emoji prefix per check status.
STATUS_PRESENTATION: Final[Mapping[CheckStatus, tuple[str, str]]] = {
    CheckStatus.PASSED: ("green", "✅"),
    CheckStatus.FAILED: ("red", "❌"),
    CheckStatus.SKIPPED: ("yellow", "⚠️"),
}
ERROR_PRESENTATION: Final[tuple[str, str]] = ("red", "❌")


@dataclass(frozen=True, slots=True)
class OutputOptions:
    """Colour and emoji preferences for console output."""

    color: bool = True
    emoji: bool = True


def detect_tty() -> bool:
    """Return ``True`` when stdout appears to be backed by a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


@lru_cache(maxsize=8)
def _console(color: bool, emoji: bool, tty: bool) -> Console:
    styled = color and tty
    return Console(
        color_system="auto" if styled else None,
        force_terminal=tty,
        no_color=not styled,
        emoji=emoji,
        highlight=False,
        soft_wrap=True,
    )


def get_console(options: OutputOptions) -> Console:
    """Return the Rich console matching ``options`` and the current terminal.

    Args:
        options: Colour and emoji preferences.

    Returns:
        Console: Console shared by every caller with the same preferences.
    """

    return _console(options.color, options.emoji, detect_tty())


def format_outcome(outcome: CheckOutcome) -> str:
    """Return the plain-text line describing ``outcome``.

    Passed and failed checks show how many files were analysed; skipped checks
    did not analyse any. The outcome message (the tool report for failures)
    follows the status.

    Args:
        outcome: Result of a single check.

    Returns:
        str: Text such as ``"code-style: failed (3 file(s)). <report>"``.
    """

    if outcome.status is CheckStatus.SKIPPED:
        line = f"{outcome.name}: {outcome.status.value}"
    else:
        line = f"{outcome.name}: {outcome.status.value} ({len(outcome.files)} file(s))"
    return f"{line}. {outcome.message}" if outcome.message else line


def format_summary(outcomes: Sequence[CheckOutcome]) -> str:
    """Return the closing line counting outcomes per status."""

    counts = ", ".join(
        f"{sum(1 for outcome in outcomes if outcome.status is status)} {status.value}" for status in CheckStatus
    )
    return f"{len(outcomes)} check(s): {counts}"


def _print(message: str, presentation: tuple[str, str], options: OutputOptions) -> None:
    style, symbol = presentation
    prefix = f"{symbol} " if options.emoji else ""
    get_console(options).print(Text(f"{prefix}{message}", style=style))


def render_header(title: str, options: OutputOptions) -> None:
    """Render a rule (or a plain marker without colour) above a block of results."""

    console = get_console(options)
    if options.color:
        console.print()
        console.print(Rule(title))
    else:
        console.print(f"\n--- {title} ---")


def render_outcome(outcome: CheckOutcome, options: OutputOptions) -> None:
    """Render one check outcome styled by its status."""

    _print(format_outcome(outcome), STATUS_PRESENTATION[outcome.status], options)


def render_summary(outcomes: Sequence[CheckOutcome], options: OutputOptions) -> None:
    """Render the outcome counts, styled as a failure when any check failed."""

    status = CheckStatus.FAILED if any(outcome.failed for outcome in outcomes) else CheckStatus.PASSED
    _print(format_summary(outcomes), STATUS_PRESENTATION[status], options)


def render_error(message: str, options: OutputOptions) -> None:
    """Render an error that stopped the command before any check ran."""

    _print(message, ERROR_PRESENTATION, options)


__all__ = [
    "OutputOptions",
    "STATUS_PRESENTATION",
    "detect_tty",
    "format_outcome",
    "format_summary",
    "get_console",
    "render_error",
    "render_header",
    "render_outcome",
    "render_summary",
]
