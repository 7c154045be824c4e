# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import struct
import zipfile
from collections.abc import Callable, Mapping
from pathlib import Path

import pytest

JarFactory = Callable[..., Path]


def write_jar(
    path: Path,
    entries: Mapping[str, str | bytes] | None = None,
    manifest: Mapping[str, str] | None = None,
) -> Path:
    """Write a zip archive with ``entries`` and an optional jar manifest."""

    with zipfile.ZipFile(path, "w") as archive:
        if manifest is not None:
            lines = ["Manifest-Version: 1.0", *(f"{key}: {value}" for key, value in manifest.items())]
            archive.writestr("META-INF/MANIFEST.MF", "\r\n".join(lines) + "\r\n\r\n")
        for name, content in (entries or {}).items():
            archive.writestr(name, content)
    return path


@pytest.fixture
def mods_dir(tmp_path: Path) -> Path:
    """Return an empty mods directory inside ``tmp_path``."""
    directory = tmp_path / "mods"
    directory.mkdir()
    return directory


@pytest.fixture
def make_jar(mods_dir: Path) -> JarFactory:
    """Return a factory building jars inside :func:`mods_dir`."""

    def factory(
        name: str,
        entries: Mapping[str, str | bytes] | None = None,
        manifest: Mapping[str, str] | None = None,
    ) -> Path:
        return write_jar(mods_dir / name, entries, manifest)

    return factory


def build_forge_toml(
    mod_id: str = "examplemod",
    *,
    version: str = "1.2.3",
    display_name: str = "Example Mod",
    side: str | None = None,
    extra: str = "",
) -> str:
    """Return a minimal ``META-INF/mods.toml`` document."""

    document = (
        'modLoader = "javafml"\n'
        'loaderVersion = "[47,)"\n'
        'license = "MIT"\n'
        "\n"
        "[[mods]]\n"
        f'modId = "{mod_id}"\n'
        f'version = "{version}"\n'
        f'displayName = "{display_name}"\n'
        f"{extra}"
    )
    if side is not None:
        document += (
            f"\n[[dependencies.{mod_id}]]\n"
            'modId = "forge"\n'
            "mandatory = true\n"
            f'side = "{side}"\n'
        )
    return document


@pytest.fixture
def forge_toml() -> Callable[..., str]:
    """Return the ``mods.toml`` builder."""
    return build_forge_toml


def corrupt_deflated_entry(path: Path, name: str) -> Path:
    """Overwrite the first byte of ``name``'s deflate stream with an invalid block header."""

    with zipfile.ZipFile(path) as archive:
        info = archive.getinfo(name)
    raw = bytearray(path.read_bytes())
    name_length, extra_length = struct.unpack_from("<HH", raw, info.header_offset + 26)
    raw[info.header_offset + 30 + name_length + extra_length] = 0xFF
    path.write_bytes(bytes(raw))
    return path


@pytest.fixture
def make_corrupt_jar(mods_dir: Path) -> Callable[[str, str, str], Path]:
    """Return a factory building a jar whose single deflated entry cannot be inflated."""

    def factory(file_name: str, entry: str, content: str) -> Path:
        path = mods_dir / file_name
        with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            archive.writestr(entry, content)
        return corrupt_deflated_entry(path, entry)

    return factory
