# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by the archive, document and config layers."""

from __future__ import annotations


class ModsOptimizerError(Exception):
    """Base class for all errors raised by ``mods_optimizer``."""


class DocumentParseError(ModsOptimizerError):
    """Raised when an embedded TOML or JSON document cannot be parsed."""

    def __init__(self, entry: str, reason: str) -> None:
        """Initialise the error with the failing archive entry and cause.

        Args:
            entry: Archive-internal path of the document.
            reason: Parser message describing the failure.
        """

        super().__init__(f"Unable to parse {entry}: {reason}")
        self.entry = entry
        self.reason = reason


class MissingEntryError(ModsOptimizerError):
    """Raised when an expected archive entry does not exist."""

    def __init__(self, entry: str) -> None:
        super().__init__(f"Archive entry {entry} not found")
        self.entry = entry


class ArchiveReadError(ModsOptimizerError):
    """Raised when an archive cannot be opened as a zip container."""


class ConfigError(ModsOptimizerError):
    """Raised when configuration input is invalid."""


__all__ = [
    "ArchiveReadError",
    "ConfigError",
    "DocumentParseError",
    "MissingEntryError",
    "ModsOptimizerError",
]
