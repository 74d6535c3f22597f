# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolve target runtime versions from a dependency manifest constraint."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Final

from packaging.version import Version
from pydantic import BaseModel, ConfigDict

from .errors import VersionRangeError

ALTERNATIVE_SEPARATOR: Final[str] = "||"
RANGE_OPERATORS: Final[str] = "^~"
WILDCARD: Final[str] = "*"
WILDCARD_SENTINEL: Final[str] = "999"

_NUMERIC_VERSION: Final[re.Pattern[str]] = re.compile(r"\d+(?:\.\d+)*")


class VersionRange(BaseModel):
    """Lowest and highest ``major.minor`` runtime versions a project targets."""

    model_config = ConfigDict(frozen=True)

    minimum: str | None = None
    maximum: str | None = None

    @property
    def is_empty(self) -> bool:
        """Return ``True`` when no bound could be determined."""

        return self.minimum is None

    @property
    def is_single(self) -> bool:
        """Return ``True`` when only the minimum bound is populated."""

        return self.minimum is not None and self.maximum is None

    def test_version(self) -> str:
        """Return the version expression handed to compatibility tooling.

        Returns:
            str: ``"min"`` for a single bound, otherwise ``"min-max"``.

        Raises:
            VersionRangeError: If the range is empty.
        """

        if self.minimum is None:
            raise VersionRangeError("Version range is empty")
        if self.maximum is None:
            return self.minimum
        return f"{self.minimum}-{self.maximum}"


def _normalize_alternative(raw: str) -> str:
    """Strip whitespace and range operators; turn wildcards into the sentinel."""

    return raw.strip().lstrip(RANGE_OPERATORS).replace(WILDCARD, WILDCARD_SENTINEL)


def _numeric_part(version: str) -> str:
    """Return the first dotted-number run of ``version`` (``"0"`` when absent).

    Operators such as ``>=`` and trailing qualifiers such as ``.x`` are ignored,
    so ``">=7.4"`` and ``"7.4.x"`` both yield ``"7.4"``.
    """

    match = _NUMERIC_VERSION.search(version)
    return match.group(0) if match else "0"


def _sort_key(version: str) -> Version:
    """Return a semantic ordering key that never rejects an alternative."""

    return Version(_numeric_part(version))


def _major_minor(version: str) -> str:
    """Return ``major.minor`` for ``version``, padding a missing minor with ``0``."""

    parts = _numeric_part(version).split(".")
    minor = parts[1] if len(parts) > 1 else "0"
    return f"{parts[0]}.{minor}"


def parse_version_range(constraint: str) -> VersionRange:
    """Return the target version range described by ``constraint``.

    Alternatives separated by ``||`` are stripped of ``^``/``~`` operators,
    wildcards become ``999`` so they sort as the newest release, and the
    result is ordered semantically. The first entry is the minimum; the last
    becomes the maximum only when more than one alternative exists. Only the
    first dotted-number run of an alternative is compared, and an
    alternative without one sorts as ``0``.

    Args:
        constraint: Raw manifest constraint such as ``"^7.4||^8.1"``.

    Returns:
        VersionRange: Range truncated to ``major.minor`` bounds; empty when
        ``constraint`` holds no alternatives.
    """

    alternatives = [_normalize_alternative(item) for item in constraint.split(ALTERNATIVE_SEPARATOR)]
    alternatives = [item for item in alternatives if item]
    if not alternatives:
        return VersionRange()
    ordered = sorted(alternatives, key=_sort_key)
    minimum = _major_minor(ordered[0])
    maximum = _major_minor(ordered[-1]) if len(ordered) > 1 else None
    return VersionRange(minimum=minimum, maximum=maximum)


def read_runtime_constraint(manifest: Path, package: str) -> str | None:
    """Return the ``require`` constraint declared for ``package`` in ``manifest``.

    Args:
        manifest: Path to a JSON dependency manifest such as ``composer.json``.
        package: Runtime package name, e.g. ``"php"``.

    Returns:
        str | None: Raw constraint, or ``None`` when the manifest is missing,
        unreadable, or declares none.
    """

    try:
        payload = json.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    if not isinstance(payload, dict):
        return None
    requirements = payload.get("require")
    if not isinstance(requirements, dict):
        return None
    constraint = requirements.get(package)
    return constraint if isinstance(constraint, str) else None


def resolve_target_versions(manifest: Path, package: str) -> VersionRange:
    """Return the populated target version range declared by ``manifest``.

    Args:
        manifest: Path to the dependency manifest.
        package: Runtime package whose constraint is read.

    Returns:
        VersionRange: Range with at least the minimum populated.

    Raises:
        VersionRangeError: If the manifest declares no usable constraint.
    """

    constraint = read_runtime_constraint(manifest, package)
    if constraint is None:
        raise VersionRangeError(f"No supported versions information in {manifest.name}")
    version_range = parse_version_range(constraint)
    if version_range.is_empty:
        raise VersionRangeError(f"No supported versions information in {manifest.name}")
    return version_range


__all__ = [
    "VersionRange",
    "parse_version_range",
    "read_runtime_constraint",
    "resolve_target_versions",
]
