# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (logging, errors, configuration)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import ScanConfig, load_config
from ..errors import ConfigError
from ..logging import fail as core_fail
from ..logging import get_console
from ..logging import info as core_info
from ..logging import ok as core_ok
from ..logging import section as core_section
from ..logging import warn as core_warn

USAGE_EXIT_CODE = 2


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Adapter around project logging helpers respecting CLI emoji and colour settings."""

    console: Console
    use_emoji: bool
    use_color: bool

    def fail(self, message: str) -> None:
        """Log a failure message honouring emoji preferences.

        Args:
            message: Text shown to the user.
        """

        core_fail(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def warn(self, message: str) -> None:
        """Log a warning message honouring emoji preferences.

        Args:
            message: Text shown to the user.
        """

        core_warn(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def ok(self, message: str) -> None:
        """Log a success message honouring emoji preferences.

        Args:
            message: Text shown to the user.
        """

        core_ok(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def info(self, message: str) -> None:
        """Log an informational message honouring emoji preferences.

        Args:
            message: Text describing the progress or state.
        """

        core_info(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def section(self, title: str) -> None:
        """Render a section header separating output blocks.

        Args:
            title: Header text.
        """

        core_section(title, use_color=self.use_color)

    def error_panel(self, error: CLIError) -> None:
        """Render ``error`` inside a red panel."""

        self.console.print(Panel(str(error), title="Error", border_style="red"))


def build_cli_logger(*, emoji: bool, color: bool) -> CLILogger:
    """Return a ``CLILogger`` bound to the shared Rich console.

    Args:
        emoji: Whether log output may include emoji glyphs.
        color: Whether terminal colour output may be used.

    Returns:
        CLILogger: Logger instance for command output.
    """

    return CLILogger(console=get_console(color=color, emoji=emoji), use_emoji=emoji, use_color=color)


def configure_logging(verbose: bool) -> None:
    """Route library log records to stderr at INFO (verbose) or WARNING level."""

    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def require_directory(directory: Path) -> Path:
    """Return ``directory`` resolved, raising :class:`CLIError` when it is missing."""

    resolved = directory.expanduser()
    if not resolved.is_dir():
        raise CLIError(f"Unable to find valid mod path: {directory}", exit_code=USAGE_EXIT_CODE)
    return resolved


def resolve_config(
    directory: Path,
    config_path: Path | None,
    **overrides: object,
) -> ScanConfig:
    """Load configuration for ``directory`` and apply command line overrides.

    ``None`` overrides leave the loaded value untouched.

    Raises:
        CLIError: If the configuration cannot be loaded or an override is invalid.
    """

    try:
        config = load_config(directory, config_path)
        updates = {key: value for key, value in overrides.items() if value is not None}
        if not updates:
            return config
        return ScanConfig.model_validate({**config.model_dump(), **updates})
    except ConfigError as exc:
        raise CLIError(str(exc), exit_code=USAGE_EXIT_CODE) from exc
    except ValueError as exc:
        raise CLIError(f"Invalid option: {exc}", exit_code=USAGE_EXIT_CODE) from exc


def exit_with(error: CLIError, logger: CLILogger) -> NoReturn:
    """Render ``error`` and terminate the command with its exit code."""

    logger.error_panel(error)
    raise typer.Exit(code=error.exit_code)


__all__ = [
    "CLIError",
    "CLILogger",
    "USAGE_EXIT_CODE",
    "build_cli_logger",
    "configure_logging",
    "exit_with",
    "require_directory",
    "resolve_config",
]
