# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Normalisation of free-form mod version strings into semantic versions.

Mod authors embed platform versions, loader names and build counters into
their version strings in many inconsistent shapes. Normalisation happens in
three stages:

1. :func:`remove_unnecessary_version_parts` strips well known noise tokens.
2. :func:`remove_leading_zeros` drops zero padding.
3. :data:`VERSION_RULES` rewrites the first matching loose shape into strict
   ``major.minor.patch[-pre][+build]`` form.

:func:`parse_version` only runs the pipeline when a strict parse fails.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Final

from semver import Version

from .constants import DEFAULT_PLATFORM_VERSION
from .models import EMPTY_VERSION

LOGGER = logging.getLogger(__name__)

MC_NAME_VERSION_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"[+_-]?(mc|minecraft)[1,2]{1,2}\.\d{1,2}\.?[0-9x]?",
)
FORGE_VERSION_PATTERN: Final[re.Pattern[str]] = re.compile(r"[+_-]?(forge)[+_-]?")
BUILD_VERSION_PATTERN: Final[re.Pattern[str]] = re.compile(r"[_.-]?(build)[_.-]?")
RELEASE_VERSION_PATTERN: Final[re.Pattern[str]] = re.compile(r"[+_-]?(release)[+_-]?")
SNAPSHOT_VERSION_PATTERN: Final[re.Pattern[str]] = re.compile(r"[+_-]?(snapshot)[+_-]?")
LEADING_ZEROS_PATTERN: Final[re.Pattern[str]] = re.compile(r"\.0+\d")
_PART_LEADING_ZEROS: Final[re.Pattern[str]] = re.compile(r"^0+(?!$)")
_CLEANUP_DOUBLE_PATTERN: Final[re.Pattern[str]] = re.compile(r"([._+\-\s])[._+\-\s]")
_CLEANUP_START_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[._+\-\s]")
_CLEANUP_END_PATTERN: Final[re.Pattern[str]] = re.compile(r"[._+\-\s]$")

# (pattern, replacement) pairs applied in order by
# :func:`remove_unnecessary_version_parts`.
_NOISE_REWRITES: Final[tuple[tuple[re.Pattern[str], str], ...]] = (
    (MC_NAME_VERSION_PATTERN, ""),
    (FORGE_VERSION_PATTERN, ""),
    (BUILD_VERSION_PATTERN, "-"),
    (RELEASE_VERSION_PATTERN, ""),
    (SNAPSHOT_VERSION_PATTERN, "-"),
)


@dataclass(frozen=True, slots=True)
class VersionRule:
    """Rewrite applied to versions matching ``pattern`` in full."""

    name: str
    pattern: re.Pattern[str]
    rewrite: Callable[[str], str]

    def matches(self, version: str) -> bool:
        """Return ``True`` when the rule applies to ``version``."""

        return self.pattern.fullmatch(version) is not None


def _replace_last(version: str, separator: str, replacement: str) -> str:
    head, _, tail = version.rpartition(separator)
    return f"{head}{replacement}{tail}"


def _after_last_dash(version: str) -> str:
    return version.rpartition("-")[2]


def _first_char_value(version: str) -> str:
    head, _, word = version.rpartition(".")
    # Letters map to 10-35, digits to themselves.
    return f"{head}.{int(word[0], 36)}"


VERSION_RULES: Final[tuple[VersionRule, ...]] = (
    VersionRule("major-only", re.compile(r"\d+"), lambda v: f"{v}.0.0"),
    VersionRule("major-minor", re.compile(r"\d+\.\d+"), lambda v: f"{v}.0"),
    VersionRule(
        "dotted-qualifier",
        re.compile(r"\d+\.\d+\.\d+\.[a-z0-9]+"),
        lambda v: _replace_last(v, ".", "-"),
    ),
    VersionRule(
        "plus-patch",
        re.compile(r"\d+\.\d+\+[A-Za-z0-9]+"),
        lambda v: _replace_last(v, "+", "."),
    ),
    VersionRule(
        "underscore-qualifier",
        re.compile(r"\d+\.\d+\.\d+_[A-Za-z0-9]+"),
        lambda v: _replace_last(v, "_", "-"),
    ),
    VersionRule(
        "trailing-four-part",
        re.compile(r"\d+\.\d+(\.\d+)?-\d+\.\d+\.\d+\.\d+"),
        lambda v: _replace_last(_after_last_dash(v), ".", "-"),
    ),
    VersionRule(
        "trailing-three-part",
        re.compile(r"\d+\.\d+(\.\d+)?-\d+\.\d+\.\d+"),
        _after_last_dash,
    ),
    VersionRule("dash-patch", re.compile(r"\d+\.\d+-\d+"), lambda v: v.replace("-", ".")),
    VersionRule("word-patch", re.compile(r"\d+\.\d+\.[a-z]+"), _first_char_value),
)


def parse_strict(raw: str | None) -> Version | None:
    """Return ``raw`` as a strict semantic version, or ``None`` when invalid."""

    if not raw:
        return None
    try:
        return Version.parse(raw)
    except (TypeError, ValueError):
        return None


def remove_unnecessary_version_parts(
    version: str | None,
    *,
    platform_version: str = DEFAULT_PLATFORM_VERSION,
) -> str:
    """Strip platform, loader and build noise from ``version``.

    Args:
        version: Raw version string; matching is case-sensitive.
        platform_version: Host platform version removed when used as a prefix.

    Returns:
        str: Version with noise tokens removed and separators collapsed.
    """

    if not version:
        return ""
    if platform_version and version.startswith(platform_version):
        version = version[len(platform_version) :]
    for pattern, replacement in _NOISE_REWRITES:
        version = pattern.sub(replacement, version)

    version = _CLEANUP_START_PATTERN.sub("", version, count=1)
    version = _CLEANUP_END_PATTERN.sub("", version, count=1)
    return _CLEANUP_DOUBLE_PATTERN.sub(r"\1", version)


def remove_leading_zeros(version: str | None) -> str:
    """Drop zero padding from ``version`` and from each dotted segment."""

    if not version:
        return ""
    if version.startswith("0."):
        version = version[2:]
    if version.startswith("0"):
        version = version[1:]
    if LEADING_ZEROS_PATTERN.search(version):
        return ".".join(_PART_LEADING_ZEROS.sub("", part, count=1) for part in version.split("."))
    return version


def apply_version_rules(
    version: str,
    rules: tuple[VersionRule, ...] = VERSION_RULES,
) -> str:
    """Rewrite ``version`` with the first matching rule, if any."""

    for rule in rules:
        if rule.matches(version):
            return rule.rewrite(version)
    return version


def normalize_version(
    version: str | None,
    *,
    platform_version: str = DEFAULT_PLATFORM_VERSION,
) -> str:
    """Return ``version`` rewritten towards strict semantic-version form.

    Args:
        version: Raw version string as found in a descriptor or manifest.
        platform_version: Host platform version stripped when used as a prefix.

    Returns:
        str: Normalised version text, which may still fail strict parsing.
    """

    if not version:
        return ""
    version = version.lower()
    version = remove_unnecessary_version_parts(version, platform_version=platform_version)
    version = remove_leading_zeros(version)
    return apply_version_rules(version)


def parse_version(
    raw: str | None,
    default: Version = EMPTY_VERSION,
    *,
    platform_version: str = DEFAULT_PLATFORM_VERSION,
) -> Version:
    """Parse ``raw`` strictly, falling back to the normalisation pipeline.

    Args:
        raw: Raw version string, possibly ``None`` or empty.
        default: Value returned when no interpretation succeeds.
        platform_version: Host platform version stripped when used as a prefix.

    Returns:
        Version: Parsed semantic version or ``default``.
    """

    strict = parse_strict(raw)
    if strict is not None:
        return strict
    LOGGER.debug("No valid semantic version %r, will try to normalize version.", raw)

    normalized = normalize_version(raw, platform_version=platform_version)
    parsed = parse_strict(normalized)
    if parsed is not None:
        return parsed
    LOGGER.debug("Unable to parse version %r or %r", raw, normalized)
    return default


__all__ = [
    "BUILD_VERSION_PATTERN",
    "FORGE_VERSION_PATTERN",
    "LEADING_ZEROS_PATTERN",
    "MC_NAME_VERSION_PATTERN",
    "RELEASE_VERSION_PATTERN",
    "SNAPSHOT_VERSION_PATTERN",
    "VERSION_RULES",
    "VersionRule",
    "apply_version_rules",
    "normalize_version",
    "parse_strict",
    "parse_version",
    "remove_leading_zeros",
    "remove_unnecessary_version_parts",
]
