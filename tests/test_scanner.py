# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for directory scanning."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from mods_optimizer.config import ScanConfig
from mods_optimizer.models import ModEnvironment
from mods_optimizer.scanner import discover_mod_files, read_mod_file, scan_mods


@pytest.fixture
def populated(mods_dir: Path, make_jar, forge_toml) -> Path:
    make_jar("alpha-1.0.0.jar", {"META-INF/mods.toml": forge_toml("alpha", version="1.0.0", side="CLIENT")})
    make_jar("alpha-1.1.0.jar", {"META-INF/mods.toml": forge_toml("alpha", version="1.1.0", side="CLIENT")})
    make_jar(
        "beta.jar",
        {"fabric.mod.json": json.dumps({"id": "beta", "version": "2.0.0", "environment": "server"})},
        {"Implementation-Title": "beta"},
    )
    make_jar("gamma.jar", {"META-INF/mods.toml": forge_toml("gamma", side="BOTH")}, {"FMLModType": "MOD"})
    (mods_dir / "broken.jar").write_text("not a zip", encoding="utf-8")
    (mods_dir / "notes.txt").write_text("ignored", encoding="utf-8")
    return mods_dir


def test_discover_mod_files_filters_by_extension(populated: Path) -> None:
    names = [path.name for path in discover_mod_files(populated, ".JAR")]

    assert names == ["alpha-1.0.0.jar", "alpha-1.1.0.jar", "beta.jar", "broken.jar", "gamma.jar"]


def test_scan_mods_builds_catalog(populated: Path) -> None:
    result = scan_mods(populated)

    assert sorted(result.catalog.known) == ["alpha", "beta", "gamma"]
    assert [path.name for path in result.skipped] == ["broken.jar"]
    assert "archive-read-error" in {issue.code for issue in result.issues}
    assert len(result.descriptors) == 4


def test_scan_mods_resolves_duplicates(populated: Path) -> None:
    result = scan_mods(populated)

    assert len(result.resolutions) == 1
    resolution = result.resolutions[0]
    assert resolution.mod_id == "alpha"
    assert resolution.survivor.file_name == "alpha-1.1.0.jar"
    assert [item.file_name for item in resolution.removed] == ["alpha-1.0.0.jar"]


def test_scan_mods_reports_missing_manifest(populated: Path) -> None:
    result = scan_mods(populated)

    paths = {issue.path.name for issue in result.issues if issue.code == "missing-manifest"}
    assert "alpha-1.0.0.jar" in paths
    assert "beta.jar" not in paths


def test_client_side_candidates_only_on_server(populated: Path) -> None:
    result = scan_mods(populated)

    server_plan = result.client_side_candidates(ModEnvironment.SERVER)
    assert {item.id for item in server_plan} == {"alpha"}
    assert result.client_side_candidates(ModEnvironment.CLIENT) == []


def test_environment_override(populated: Path) -> None:
    config = ScanConfig(environment_overrides={"beta": ModEnvironment.CLIENT})

    descriptor = read_mod_file(populated / "beta.jar", config)

    assert descriptor is not None
    assert descriptor.environment is ModEnvironment.CLIENT


def test_parallel_scan_matches_sequential(populated: Path) -> None:
    sequential = scan_mods(populated, ScanConfig(jobs=1))
    parallel = scan_mods(populated, ScanConfig(jobs=4))

    assert [item.path for item in parallel.descriptors] == [item.path for item in sequential.descriptors]
    assert parallel.skipped == sequential.skipped
    assert [issue.code for issue in parallel.issues] == [issue.code for issue in sequential.issues]


def test_custom_file_extension(mods_dir: Path, make_jar, forge_toml) -> None:
    make_jar("alpha.zip", {"META-INF/mods.toml": forge_toml("alpha")})
    make_jar("beta.jar", {"META-INF/mods.toml": forge_toml("beta")})

    result = scan_mods(mods_dir, ScanConfig(file_extension="zip"))

    assert list(result.catalog.known) == ["alpha"]


def test_scan_mods_requires_directory(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        scan_mods(tmp_path / "missing")


def test_corrupt_entry_does_not_abort_scan(mods_dir: Path, make_jar, make_corrupt_jar, forge_toml) -> None:
    make_jar("good.jar", {"META-INF/mods.toml": forge_toml("good")})
    content = json.dumps({"id": "bad", "version": "1.0.0", "description": "x" * 512})
    make_corrupt_jar("bad.jar", "fabric.mod.json", content)

    result = scan_mods(mods_dir)

    assert "good" in result.catalog.known
    codes = {issue.code for issue in result.issues if issue.path is not None and issue.path.name == "bad.jar"}
    assert "archive-read-error" in codes


def test_deeply_nested_descriptor_does_not_abort_scan(mods_dir: Path, make_jar, forge_toml) -> None:
    make_jar("good.jar", {"META-INF/mods.toml": forge_toml("good")})
    make_jar("deep.jar", {"fabric.mod.json": '{"id":"deep","x":' + "[" * 100_000 + "]" * 100_000 + "}"})

    result = scan_mods(mods_dir)

    assert "good" in result.catalog.known
    assert "parse-error" in {issue.code for issue in result.issues}
