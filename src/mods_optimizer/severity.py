# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Final


class Severity(str, Enum):
    """Severity levels attached to extraction issues."""

    ERROR = "error"
    WARNING = "warning"
    NOTICE = "notice"


_LOG_LEVELS: Final[dict[Severity, int]] = {
    Severity.ERROR: logging.ERROR,
    Severity.WARNING: logging.WARNING,
    Severity.NOTICE: logging.INFO,
}


def log_level(severity: Severity) -> int:
    """Return the :mod:`logging` level matching ``severity``."""

    return _LOG_LEVELS[severity]


def severity_from_label(label: str | None) -> Severity | None:
    """Return the severity for a textual label such as ``"warn"``.

    Args:
        label: Free-form label supplied by configuration or the CLI.

    Returns:
        Severity | None: Matching severity, or ``None`` when unrecognised.
    """

    if not label:
        return None
    normalized = label.strip().lower()
    if normalized == "warn":
        normalized = Severity.WARNING.value
    try:
        return Severity(normalized)
    except ValueError:
        return None


__all__ = ["Severity", "log_level", "severity_from_label"]
