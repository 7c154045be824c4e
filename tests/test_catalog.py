# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for catalog ingestion and duplicate detection."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest
from pydantic import ValidationError

from mods_optimizer.catalog import CatalogDelta, ModCatalog
from mods_optimizer.models import ModDescriptor, ModEnvironment, ModFormat

STAMP = datetime(2024, 1, 1, tzinfo=timezone.utc)


def descriptor(
    file_name: str,
    mod_id: str,
    version: str = "1.0.0",
    environment: ModEnvironment = ModEnvironment.DEFAULT,
) -> ModDescriptor:
    return ModDescriptor(
        path=Path("/mods") / file_name,
        id=mod_id,
        format=ModFormat.FORGE,
        version=version,
        environment=environment,
        timestamp=STAMP,
    )


def test_first_seen_wins_and_later_ones_are_diverted() -> None:
    catalog = ModCatalog()
    first = descriptor("a.jar", "alpha")
    second = descriptor("b.jar", "alpha", "2.0.0")

    assert catalog.ingest(first) is CatalogDelta.NEW_KNOWN
    assert catalog.ingest(second) is CatalogDelta.DIVERTED_TO_DUPLICATE
    assert catalog.known == {"alpha": first}
    assert catalog.duplicates == {"alpha": {first, second}}


def test_duplicate_groups_grow() -> None:
    catalog = ModCatalog()
    catalog.ingest_all([descriptor(name, "alpha") for name in ("a.jar", "b.jar", "c.jar")])

    assert len(catalog.duplicates["alpha"]) == 3


def test_every_descriptor_lands_in_one_partition() -> None:
    catalog = ModCatalog()
    catalog.ingest_all(
        [
            descriptor("client.jar", "client", environment=ModEnvironment.CLIENT),
            descriptor("server.jar", "server", environment=ModEnvironment.SERVER),
            descriptor("library.jar", "library", environment=ModEnvironment.LIBRARY),
            descriptor("unknown.jar", "unknown", environment=ModEnvironment.UNKNOWN),
        ],
    )

    assert {item.id for item in catalog.client} == {"client"}
    assert {item.id for item in catalog.server} == {"server"}
    assert {item.id for item in catalog.default} == {"library", "unknown"}
    assert catalog.stats().known == 4


def test_ingest_all_is_order_independent() -> None:
    items = [descriptor("b.jar", "alpha", "2.0.0"), descriptor("a.jar", "alpha", "1.0.0")]
    forward = ModCatalog()
    backward = ModCatalog()

    forward.ingest_all(items)
    backward.ingest_all(reversed(items))

    assert forward.known["alpha"].file_name == "a.jar"
    assert backward.known == forward.known


def test_sorted_known_orders_by_id() -> None:
    catalog = ModCatalog()
    catalog.ingest_all([descriptor("z.jar", "zeta"), descriptor("a.jar", "beta"), descriptor("m.jar", "alpha")])

    assert [item.id for item in catalog.sorted_known()] == ["alpha", "beta", "zeta"]


def test_descriptor_requires_identity() -> None:
    with pytest.raises(ValidationError):
        descriptor("a.jar", "")
