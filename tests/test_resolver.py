# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for duplicate survivor selection."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest
from semver import Version

from mods_optimizer.models import ModDescriptor, ModEnvironment, ModFormat
from mods_optimizer.resolver import is_copy_name, prefers, resolve_duplicates, select_survivor


def descriptor(file_name: str, version: str = "1.0.0", mod_id: str = "alpha") -> ModDescriptor:
    return ModDescriptor(
        path=Path("/mods") / file_name,
        id=mod_id,
        format=ModFormat.FABRIC,
        version=version,
        environment=ModEnvironment.DEFAULT,
        timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


@pytest.mark.parametrize(
    ("file_name", "expected"),
    [("alpha - Copy.jar", True), ("alpha-kopie.jar", True), ("alpha.jar", False)],
)
def test_is_copy_name(file_name: str, expected: bool) -> None:
    assert is_copy_name(file_name) is expected


def test_higher_version_wins() -> None:
    resolution = select_survivor("alpha", [descriptor("a-2.0.0.jar", "2.0.0"), descriptor("b-1.9.9.jar", "1.9.9")])

    assert resolution.survivor.version == Version(2, 0, 0)
    assert [item.file_name for item in resolution.removed] == ["b-1.9.9.jar"]


def test_plain_name_beats_copy_on_equal_version() -> None:
    plain = descriptor("alpha.jar")
    copy = descriptor("alpha (copy).jar")

    assert select_survivor("alpha", [copy, plain]).survivor is plain
    assert prefers(plain, copy)
    assert not prefers(copy, plain)


def test_shorter_name_wins_on_equal_version() -> None:
    short = descriptor("alpha.jar")
    long = descriptor("alpha-1.0.0.jar")

    assert select_survivor("alpha", [long, short]).survivor is short


def test_equal_candidates_keep_first_in_path_order() -> None:
    first = descriptor("a1.jar")
    second = descriptor("b1.jar")

    assert select_survivor("alpha", [second, first]).survivor is first


def test_select_survivor_requires_descriptors() -> None:
    with pytest.raises(ValueError):
        select_survivor("alpha", [])


def test_resolve_duplicates_orders_by_id() -> None:
    groups = {
        "zeta": {descriptor("z1.jar", mod_id="zeta"), descriptor("z2.jar", mod_id="zeta")},
        "alpha": {descriptor("a1.jar"), descriptor("a2.jar", "1.1.0")},
    }

    resolutions = resolve_duplicates(groups)

    assert [item.mod_id for item in resolutions] == ["alpha", "zeta"]
    assert resolutions[0].survivor.file_name == "a2.jar"
    assert resolutions[1].survivor.file_name == "z1.jar"
