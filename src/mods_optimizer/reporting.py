# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rendering of scan results as Rich tables or JSON payloads."""

from __future__ import annotations

import json
from typing import Any, Final

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .models import ModDescriptor, ModEnvironment
from .resolver import DuplicateResolution
from .scanner import ScanResult
from .severity import Severity

TIMESTAMP_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"
_SEVERITY_STYLES: Final[dict[Severity, str]] = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.NOTICE: "cyan",
}


def build_overview_table(descriptors: list[ModDescriptor]) -> Table:
    """Return a table listing id, version, format, environment and timestamp per mod."""

    table = Table(title="Mods", box=box.SIMPLE_HEAVY)
    table.add_column("ID", overflow="fold")
    table.add_column("VERSION")
    table.add_column("TYPE")
    table.add_column("ENVIRONMENT")
    table.add_column("TIMESTAMP")
    for descriptor in descriptors:
        table.add_row(
            descriptor.id,
            str(descriptor.version),
            descriptor.format.value,
            descriptor.environment.value,
            descriptor.timestamp.strftime(TIMESTAMP_FORMAT),
        )
    return table


def build_duplicates_table(resolutions: list[DuplicateResolution]) -> Table:
    """Return a table with the kept and removable archive per duplicated id."""

    table = Table(title="Duplicated mods", box=box.SIMPLE_HEAVY)
    table.add_column("ID")
    table.add_column("KEEP", style="green")
    table.add_column("REMOVE", style="red")
    for resolution in resolutions:
        table.add_row(
            resolution.mod_id,
            f"{resolution.survivor.file_name} ({resolution.survivor.version})",
            "\n".join(f"{item.file_name} ({item.version})" for item in resolution.removed),
        )
    return table


def render_scan(
    result: ScanResult,
    console: Console,
    *,
    side: ModEnvironment | None = None,
    min_severity: Severity = Severity.WARNING,
) -> None:
    """Print the overview, statistics, duplicate plan and issues for ``result``."""

    console.print(build_overview_table(result.catalog.sorted_known()))
    stats = result.catalog.stats()
    console.print(
        f"Found {stats.known} mods: {stats.client} client, {stats.server} server, "
        f"{stats.default} default, {stats.duplicates} duplicated.",
    )
    if result.resolutions:
        console.print(build_duplicates_table(result.resolutions))
    if side is not None:
        candidates = result.client_side_candidates(side)
        if candidates:
            console.print(f"Client side mods to disable on {side.value}:")
            for descriptor in candidates:
                console.print(f"  {descriptor.id} ({descriptor.file_name})")
    _render_issues(result, console, min_severity=min_severity)


def _render_issues(result: ScanResult, console: Console, *, min_severity: Severity) -> None:
    ranks = list(_SEVERITY_STYLES)
    threshold = ranks.index(min_severity)
    for issue in result.issues:
        if ranks.index(issue.severity) > threshold:
            continue
        text = Text(issue.severity.value, style=_SEVERITY_STYLES[issue.severity])
        text.append(f" {issue.code}: {issue.message}")
        console.print(text)


def scan_payload(result: ScanResult, *, side: ModEnvironment | None = None) -> dict[str, Any]:
    """Return a JSON-serialisable representation of ``result``."""

    return {
        "root": str(result.root),
        "mods": [descriptor.model_dump(mode="json") for descriptor in result.descriptors],
        "duplicates": [
            {
                "id": resolution.mod_id,
                "keep": str(resolution.survivor.path),
                "remove": [str(item.path) for item in resolution.removed],
            }
            for resolution in result.resolutions
        ],
        "client_side": [str(item.path) for item in result.client_side_candidates(side)] if side else [],
        "skipped": [str(path) for path in result.skipped],
        "issues": [issue.model_dump(mode="json") for issue in result.issues],
    }


def dumps_scan(result: ScanResult, *, side: ModEnvironment | None = None) -> str:
    """Return :func:`scan_payload` encoded as indented JSON."""

    return json.dumps(scan_payload(result, side=side), indent=2, sort_keys=True)


__all__ = [
    "build_duplicates_table",
    "build_overview_table",
    "dumps_scan",
    "render_scan",
    "scan_payload",
]
