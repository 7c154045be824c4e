# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring the scan, duplicates and version commands."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import typer
from rich import box
from rich.table import Table

from ..constants import DEFAULT_PLATFORM_VERSION
from ..models import ModEnvironment
from ..reporting import build_duplicates_table, dumps_scan, render_scan
from ..scanner import ScanResult, scan_mods
from ..severity import Severity, severity_from_label
from ..versioning import normalize_version, parse_strict, parse_version
from .shared import (
    USAGE_EXIT_CODE,
    CLIError,
    CLILogger,
    build_cli_logger,
    configure_logging,
    exit_with,
    require_directory,
    resolve_config,
)

app = typer.Typer(
    help="Inspect a directory of game mods: formats, environments, versions and duplicates.",
    no_args_is_help=True,
    add_completion=False,
)


class Side(str, Enum):
    """Host side the mods directory is deployed on."""

    CLIENT = "client"
    SERVER = "server"

    def to_environment(self) -> ModEnvironment:
        return ModEnvironment(self.value)


def _run_scan(
    directory: Path,
    config_path: Path | None,
    *,
    jobs: int | None,
    emoji: bool | None,
    color: bool | None,
) -> tuple[ScanResult, CLILogger]:
    logger = build_cli_logger(emoji=emoji is not False, color=color is not False)
    try:
        root = require_directory(directory)
        config = resolve_config(root, config_path, jobs=jobs, emoji=emoji, color=color)
        logger = build_cli_logger(emoji=config.emoji, color=config.color)
        return scan_mods(root, config), logger
    except CLIError as exc:
        exit_with(exc, logger)


@app.command()
def scan(
    directory: Path = typer.Argument(..., help="Directory holding mod archives."),
    config_path: Path | None = typer.Option(None, "--config", "-c", help="Explicit configuration file."),
    side: Side | None = typer.Option(None, "--side", case_sensitive=False, help="Side the mods run on."),
    as_json: bool = typer.Option(False, "--json", help="Emit the scan result as JSON."),
    jobs: int | None = typer.Option(None, "--jobs", "-j", min=1, help="Worker threads for extraction."),
    emoji: bool | None = typer.Option(None, "--emoji/--no-emoji", help="Toggle emoji output."),
    color: bool | None = typer.Option(None, "--color/--no-color", help="Toggle colour output."),
    min_severity: str = typer.Option(
        Severity.WARNING.value,
        "--min-severity",
        help="Lowest issue severity to display (error, warning, notice).",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress to stderr."),
) -> None:
    """Print the overview table, statistics, duplicate plan and client-side plan."""

    configure_logging(verbose)
    threshold = severity_from_label(min_severity)
    if threshold is None:
        raise typer.BadParameter(f"Unknown severity {min_severity!r}", param_hint="--min-severity")

    result, logger = _run_scan(directory, config_path, jobs=jobs, emoji=emoji, color=color)
    host_side = side.to_environment() if side is not None else None
    if as_json:
        typer.echo(dumps_scan(result, side=host_side))
        return

    logger.section(f"Mods in {result.root}")
    render_scan(result, logger.console, side=host_side, min_severity=threshold)
    for path in result.skipped:
        logger.warn(f"Skipped unreadable archive {path.name}")
    logger.ok(f"Scanned {len(result.descriptors)} mods")


@app.command()
def duplicates(
    directory: Path = typer.Argument(..., help="Directory holding mod archives."),
    config_path: Path | None = typer.Option(None, "--config", "-c", help="Explicit configuration file."),
    emoji: bool | None = typer.Option(None, "--emoji/--no-emoji", help="Toggle emoji output."),
    color: bool | None = typer.Option(None, "--color/--no-color", help="Toggle colour output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress to stderr."),
) -> None:
    """Print the duplicate plan; exits with status 1 when duplicates exist."""

    configure_logging(verbose)
    result, logger = _run_scan(directory, config_path, jobs=None, emoji=emoji, color=color)
    if not result.resolutions:
        logger.ok("No duplicated mods found")
        raise typer.Exit(code=0)

    logger.console.print(build_duplicates_table(result.resolutions))
    removable = sum(len(resolution.removed) for resolution in result.resolutions)
    logger.fail(f"{len(result.resolutions)} duplicated mods, {removable} archives can be removed")
    raise typer.Exit(code=1)


@app.command()
def version(
    raw_versions: list[str] = typer.Argument(..., metavar="RAW...", help="Raw version strings."),
    platform_version: str = typer.Option(
        DEFAULT_PLATFORM_VERSION,
        "--platform-version",
        help="Host platform version stripped from version prefixes.",
    ),
) -> None:
    """Show how raw version strings are normalized and parsed."""

    logger = build_cli_logger(emoji=True, color=True)
    table = Table(title="Versions", box=box.SIMPLE_HEAVY)
    table.add_column("RAW")
    table.add_column("NORMALIZED")
    table.add_column("PARSED")
    unparsed = 0
    for raw in raw_versions:
        normalized = normalize_version(raw, platform_version=platform_version)
        parsed = parse_version(raw, platform_version=platform_version)
        if parse_strict(raw) is None and parse_strict(normalized) is None:
            unparsed += 1
        table.add_row(raw, normalized, str(parsed))
    logger.console.print(table)
    if unparsed:
        logger.warn(f"{unparsed} version(s) fell back to the empty version")


def main() -> None:
    """Console script entry point."""

    app()


__all__ = ["USAGE_EXIT_CODE", "Side", "app", "main"]
