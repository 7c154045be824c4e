# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""In-memory catalog of scanned mods with duplicate detection."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from .models import ModDescriptor, ModEnvironment

LOGGER = logging.getLogger(__name__)


class CatalogDelta(str, Enum):
    """Outcome of ingesting a descriptor into the catalog."""

    NEW_KNOWN = "new_known"
    DIVERTED_TO_DUPLICATE = "diverted_to_duplicate"


@dataclass(frozen=True, slots=True)
class CatalogStats:
    """Counts summarising a populated catalog."""

    known: int
    duplicates: int
    client: int
    server: int
    default: int


@dataclass(slots=True)
class ModCatalog:
    """Aggregate of all descriptors found during a scan.

    The first descriptor seen for an id is kept in :attr:`known`; later ones
    with the same id are diverted into :attr:`duplicates` together with the
    first one. Every descriptor is also routed into one environment partition.
    """

    known: dict[str, ModDescriptor] = field(default_factory=dict)
    duplicates: dict[str, set[ModDescriptor]] = field(default_factory=dict)
    client: set[ModDescriptor] = field(default_factory=set)
    server: set[ModDescriptor] = field(default_factory=set)
    default: set[ModDescriptor] = field(default_factory=set)

    def ingest(self, descriptor: ModDescriptor) -> CatalogDelta:
        """Add ``descriptor`` to the catalog.

        Args:
            descriptor: Descriptor produced by the extractor.

        Returns:
            CatalogDelta: Whether the descriptor became known or was diverted.
        """

        self._partition_for(descriptor.environment).add(descriptor)
        existing = self.known.get(descriptor.id)
        if existing is None:
            self.known[descriptor.id] = descriptor
            return CatalogDelta.NEW_KNOWN

        LOGGER.error(
            "Duplicated mod %s found in %s and %s",
            descriptor.id,
            descriptor.path,
            existing.path,
        )
        group = self.duplicates.setdefault(descriptor.id, {existing})
        group.add(descriptor)
        return CatalogDelta.DIVERTED_TO_DUPLICATE

    def ingest_all(self, descriptors: Iterable[ModDescriptor]) -> list[CatalogDelta]:
        """Ingest ``descriptors`` in path order so first-seen wins reproducibly."""

        return [self.ingest(descriptor) for descriptor in sorted(descriptors, key=lambda item: str(item.path))]

    def _partition_for(self, environment: ModEnvironment) -> set[ModDescriptor]:
        if environment is ModEnvironment.CLIENT:
            return self.client
        if environment is ModEnvironment.SERVER:
            return self.server
        return self.default

    def stats(self) -> CatalogStats:
        """Return summary counts for reporting."""

        return CatalogStats(
            known=len(self.known),
            duplicates=len(self.duplicates),
            client=len(self.client),
            server=len(self.server),
            default=len(self.default),
        )

    def sorted_known(self) -> list[ModDescriptor]:
        """Return known descriptors ordered by id."""

        return sorted(self.known.values(), key=lambda item: item.id)


__all__ = ["CatalogDelta", "CatalogStats", "ModCatalog"]
