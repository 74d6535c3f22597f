# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared across the live code suite."""

from __future__ import annotations


class LiveCodeError(Exception):
    """Base class for errors raised by the live code suite."""


class ConfigError(LiveCodeError):
    """Raised when configuration input is invalid."""


class VersionRangeError(LiveCodeError):
    """Raised when target runtime versions cannot be determined."""


class ListNotFoundError(LiveCodeError):
    """Raised when a required list file does not exist."""

    def __init__(self, pattern: str) -> None:
        """Initialise the error for the missing list ``pattern``.

        Args:
            pattern: Path or glob that matched no list files.
        """

        super().__init__(f"No list files matched {pattern!r}")
        self.pattern = pattern


__all__ = ["ConfigError", "ListNotFoundError", "LiveCodeError", "VersionRangeError"]
