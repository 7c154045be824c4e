# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the mods_optimizer package."""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from semver import Version

from .constants import EMPTY_MOD_NAME
from .severity import Severity, log_level

LOGGER = logging.getLogger(__name__)

EMPTY_VERSION = Version(0, 0, 0)


class ModFormat(str, Enum):
    """Packaging format of a mod archive."""

    FABRIC = "fabric"
    FORGE = "forge"
    NEOFORGE = "neoforge"
    QUILT = "quilt"
    MIXED = "mixed"
    UNKNOWN = "unknown"


class ModEnvironment(str, Enum):
    """Execution context a mod is restricted to."""

    DEFAULT = "default"
    CLIENT = "client"
    SERVER = "server"
    LIBRARY = "library"
    LANGUAGE_PROVIDER = "language_provider"
    DATA_PACK = "data_pack"
    SERVICE = "service"
    UNKNOWN = "unknown"


class ModDescriptor(BaseModel):
    """Fully populated, immutable metadata record for a single mod archive."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    path: Path
    id: str = Field(min_length=1)
    format: ModFormat
    name: str = EMPTY_MOD_NAME
    version: Version = EMPTY_VERSION
    environment: ModEnvironment = ModEnvironment.UNKNOWN
    timestamp: datetime

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, value: object) -> object:
        """Accept strict version strings in addition to :class:`Version` objects."""
        if isinstance(value, str):
            return Version.parse(value)
        return value

    @field_serializer("version")
    def _serialize_version(self, value: Version) -> str:
        return str(value)

    @property
    def file_name(self) -> str:
        """Return the archive file name."""
        return self.path.name

    def with_updates(self, **changes: object) -> ModDescriptor:
        """Return a copy of the descriptor with ``changes`` applied."""
        return self.model_copy(update=changes)


class ExtractionIssue(BaseModel):
    """Degradation observed while reading a single archive."""

    model_config = ConfigDict(frozen=True)

    severity: Severity
    code: str
    message: str
    path: Path | None = None


class IssueCollector:
    """Collect extraction issues and mirror them to the module logger."""

    def __init__(self) -> None:
        self._issues: list[ExtractionIssue] = []

    def report(
        self,
        severity: Severity,
        code: str,
        message: str,
        *,
        path: Path | None = None,
    ) -> ExtractionIssue:
        """Record an issue and log it at the matching level.

        Args:
            severity: Severity of the degradation.
            code: Stable machine-readable issue code.
            message: Human-readable explanation.
            path: Archive the issue relates to, when known.

        Returns:
            ExtractionIssue: The recorded issue.
        """

        issue = ExtractionIssue(severity=severity, code=code, message=message, path=path)
        self._issues.append(issue)
        LOGGER.log(log_level(severity), "%s (%s)", message, code)
        return issue

    def error(self, code: str, message: str, *, path: Path | None = None) -> ExtractionIssue:
        return self.report(Severity.ERROR, code, message, path=path)

    def warning(self, code: str, message: str, *, path: Path | None = None) -> ExtractionIssue:
        return self.report(Severity.WARNING, code, message, path=path)

    def notice(self, code: str, message: str, *, path: Path | None = None) -> ExtractionIssue:
        return self.report(Severity.NOTICE, code, message, path=path)

    def extend(self, issues: list[ExtractionIssue] | tuple[ExtractionIssue, ...]) -> None:
        """Append already-logged ``issues`` without logging them again."""
        self._issues.extend(issues)

    @property
    def issues(self) -> tuple[ExtractionIssue, ...]:
        """Return the issues recorded so far."""
        return tuple(self._issues)

    def codes(self) -> list[str]:
        """Return recorded issue codes in insertion order."""
        return [issue.code for issue in self._issues]

    def __len__(self) -> int:
        return len(self._issues)


__all__ = [
    "EMPTY_VERSION",
    "ExtractionIssue",
    "IssueCollector",
    "ModDescriptor",
    "ModEnvironment",
    "ModFormat",
]
