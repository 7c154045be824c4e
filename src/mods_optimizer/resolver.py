# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Selection of a single surviving archive among duplicated mods."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from .constants import COPY_MARKERS
from .models import ModDescriptor

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DuplicateResolution:
    """Survivor and removal candidates for one duplicated mod id."""

    mod_id: str
    survivor: ModDescriptor
    removed: tuple[ModDescriptor, ...]


def is_copy_name(file_name: str) -> bool:
    """Return ``True`` when ``file_name`` looks like a manual copy of another archive."""

    lowered = file_name.lower()
    return any(marker in lowered for marker in COPY_MARKERS)


def prefers(candidate: ModDescriptor, current: ModDescriptor) -> bool:
    """Return ``True`` when ``candidate`` should replace ``current`` as survivor.

    A strictly higher version always wins. On equal versions a file name
    without a copy marker beats one with a marker; otherwise the shorter file
    name wins.
    """

    if candidate.version > current.version:
        return True
    if candidate.version != current.version:
        return False
    candidate_name = candidate.file_name.lower()
    current_name = current.file_name.lower()
    candidate_copy = is_copy_name(candidate_name)
    current_copy = is_copy_name(current_name)
    if candidate_copy != current_copy:
        return current_copy
    return len(candidate_name) < len(current_name)


def select_survivor(mod_id: str, descriptors: Iterable[ModDescriptor]) -> DuplicateResolution:
    """Pick the survivor among ``descriptors`` visited in path order.

    Raises:
        ValueError: If ``descriptors`` is empty.
    """

    ordered = sorted(descriptors, key=lambda item: str(item.path))
    if not ordered:
        raise ValueError(f"No descriptors supplied for duplicated mod {mod_id}")
    survivor = ordered[0]
    for candidate in ordered[1:]:
        if prefers(candidate, survivor):
            survivor = candidate
    removed = tuple(item for item in ordered if item is not survivor)
    return DuplicateResolution(mod_id=mod_id, survivor=survivor, removed=removed)


def resolve_duplicates(groups: Mapping[str, Iterable[ModDescriptor]]) -> list[DuplicateResolution]:
    """Resolve every duplicate group, ordered by mod id.

    Args:
        groups: Mod id mapped to the descriptors sharing it.

    Returns:
        list[DuplicateResolution]: One resolution per group. Nothing is removed
        from disk; callers act on :attr:`DuplicateResolution.removed`.
    """

    resolutions: list[DuplicateResolution] = []
    for mod_id in sorted(groups):
        resolution = select_survivor(mod_id, groups[mod_id])
        LOGGER.warning(
            "Found %d duplicated mods with mod id %s, keeping %s",
            len(resolution.removed) + 1,
            mod_id,
            resolution.survivor.path,
        )
        resolutions.append(resolution)
    return resolutions


__all__ = ["DuplicateResolution", "is_copy_name", "prefers", "resolve_duplicates", "select_survivor"]
