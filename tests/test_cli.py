# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the mods-optimizer command line interface."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from mods_optimizer.cli.app import app


def _populate(make_jar, forge_toml) -> Path:
    make_jar("alpha-1.0.0.jar", {"META-INF/mods.toml": forge_toml("alpha", version="1.0.0", side="CLIENT")})
    return make_jar("beta.jar", {"META-INF/mods.toml": forge_toml("beta", side="SERVER")}).parent


def test_scan_prints_overview(make_jar, forge_toml) -> None:
    runner = CliRunner()
    mods = _populate(make_jar, forge_toml)

    result = runner.invoke(app, ["scan", str(mods), "--no-emoji", "--no-color", "--side", "server"])

    assert result.exit_code == 0, result.output
    assert "alpha" in result.stdout
    assert "Client side mods to disable on server" in result.stdout
    assert "Scanned 2 mods" in result.stdout


def test_scan_json_output(make_jar, forge_toml) -> None:
    runner = CliRunner()
    mods = _populate(make_jar, forge_toml)

    result = runner.invoke(app, ["scan", str(mods), "--json", "--jobs", "2"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert sorted(mod["id"] for mod in payload["mods"]) == ["alpha", "beta"]
    assert payload["duplicates"] == []


def test_scan_missing_directory_exits_with_usage_error(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["scan", str(tmp_path / "missing"), "--no-color"])

    assert result.exit_code == 2
    assert "Unable to find valid mod path" in result.stdout


def test_scan_invalid_config_exits_with_usage_error(make_jar, forge_toml, tmp_path: Path) -> None:
    runner = CliRunner()
    mods = _populate(make_jar, forge_toml)
    config = tmp_path / "bad.toml"
    config.write_text("jobs = 0\n", encoding="utf-8")

    result = runner.invoke(app, ["scan", str(mods), "--config", str(config)])

    assert result.exit_code == 2
    assert "Invalid configuration" in result.stdout


def test_scan_rejects_unknown_severity(make_jar, forge_toml) -> None:
    runner = CliRunner()
    mods = _populate(make_jar, forge_toml)

    result = runner.invoke(app, ["scan", str(mods), "--min-severity", "loud"])

    assert result.exit_code == 2


def test_duplicates_exit_code(make_jar, forge_toml) -> None:
    runner = CliRunner()
    mods = _populate(make_jar, forge_toml)

    clean = runner.invoke(app, ["duplicates", str(mods), "--no-emoji"])
    assert clean.exit_code == 0
    assert "No duplicated mods found" in clean.stdout

    make_jar("alpha-1.1.0.jar", {"META-INF/mods.toml": forge_toml("alpha", version="1.1.0", side="CLIENT")})
    dirty = runner.invoke(app, ["duplicates", str(mods), "--no-emoji"])
    assert dirty.exit_code == 1
    assert "alpha-1.1.0.jar" in dirty.stdout
    assert "1 duplicated mods" in dirty.stdout


def test_version_command() -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["version", "1.2+mc1.18.x", "14.15-SNAPSHOT-348"])

    assert result.exit_code == 0, result.output
    assert "1.2.0" in result.stdout
    assert "14.15.348" in result.stdout
