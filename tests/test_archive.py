# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for archive access helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from mods_optimizer.archive import ModArchive, creation_time, parse_manifest
from mods_optimizer.errors import ArchiveReadError, MissingEntryError


def test_parse_manifest_reads_main_section_with_continuations() -> None:
    text = (
        "Manifest-Version: 1.0\r\n"
        "Implementation-Title: A very long title that\r\n"
        " continues here\r\n"
        "FMLModType: LIBRARY\r\n"
        "\r\n"
        "Name: com/example/\r\n"
        "Sealed: true\r\n"
    )

    attributes = parse_manifest(text)

    assert attributes["Implementation-Title"] == "A very long title thatcontinues here"
    assert attributes["FMLModType"] == "LIBRARY"
    assert "Sealed" not in attributes


def test_mod_archive_lookups(make_jar) -> None:
    path = make_jar(
        "alpha.jar",
        {"META-INF/mods.toml": "x = 1", "assets/alpha/lang/en_us.json": "{}", "pack.mcmeta": "{}"},
        {"Implementation-Version": "1.0.0"},
    )

    with ModArchive.open(path) as archive:
        assert archive.has_entry("META-INF/mods.toml")
        assert "pack.mcmeta" in archive.entries()
        assert not archive.has_entry("fabric.mod.json")
        assert archive.read_entry("META-INF/mods.toml") == b"x = 1"
        assert archive.top_level_directories() == frozenset({"META-INF/", "assets/"})
        assert archive.manifest() == {"Manifest-Version": "1.0", "Implementation-Version": "1.0.0"}
        with pytest.raises(MissingEntryError):
            archive.read_entry("quilt.mod.json")


def test_mod_archive_without_manifest(make_jar) -> None:
    path = make_jar("plain.jar", {"fabric.mod.json": "{}"})

    with ModArchive.open(path) as archive:
        assert archive.manifest() is None


def test_mod_archive_rejects_non_zip(tmp_path: Path) -> None:
    bogus = tmp_path / "broken.jar"
    bogus.write_text("not a zip", encoding="utf-8")

    with pytest.raises(ArchiveReadError):
        with ModArchive.open(bogus):
            pass


def test_creation_time_is_timezone_aware(tmp_path: Path) -> None:
    target = tmp_path / "file.jar"
    target.write_bytes(b"")

    stamp = creation_time(target)

    assert stamp is not None
    assert stamp.tzinfo is not None
    assert creation_time(tmp_path / "missing.jar") is None


def test_read_entry_wraps_corrupt_deflate_stream(make_corrupt_jar) -> None:
    path = make_corrupt_jar("bad.jar", "fabric.mod.json", '{"id": "bad"}' * 64)

    with ModArchive.open(path) as archive:
        with pytest.raises(ArchiveReadError):
            archive.read_entry("fabric.mod.json")


def test_manifest_lookup_is_case_insensitive() -> None:
    attributes = parse_manifest("Manifest-Version: 1.0\nfmlModType: LIBRARY\nFabric-loader-version: 0.14.21\n")

    assert attributes["FMLModType"] == "LIBRARY"
    assert attributes.get("Fabric-Loader-Version") == "0.14.21"
    assert list(attributes) == ["Manifest-Version", "fmlModType", "Fabric-loader-version"]
