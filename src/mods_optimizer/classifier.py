# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Detection of a mod archive's packaging format."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Final

from .constants import (
    DEFAULT_FILE_EXTENSION,
    FABRIC_DESCRIPTOR,
    FORGE_DESCRIPTOR,
    MANIFEST_FABRIC_GRADLE_VERSION,
    MANIFEST_FABRIC_LOADER_VERSION,
    MANIFEST_FML_MOD_TYPE,
    MANIFEST_IMPLEMENTATION_TITLE,
    NEOFORGE_DESCRIPTOR,
    QUILT_DESCRIPTOR,
    TRANSFORMATION_SERVICE_ENTRY,
)
from .models import ModFormat

LOGGER = logging.getLogger(__name__)

EntryPredicate = Callable[[str], bool]

# Checked in order; "neoforge" must precede "forge".
_FILE_NAME_HINTS: Final[tuple[tuple[str, ModFormat], ...]] = (
    ("neoforge", ModFormat.NEOFORGE),
    ("fabric", ModFormat.FABRIC),
    ("forge", ModFormat.FORGE),
    ("quilt", ModFormat.QUILT),
)
NEOFORGE_TITLE: Final[str] = "NeoForge"


def has_attribute(attributes: Mapping[str, str] | None, name: str) -> bool:
    """Return ``True`` when ``attributes`` holds a non-empty value for ``name``."""

    return bool(attributes and attributes.get(name))


def format_from_file_name(file_name: str, file_extension: str = DEFAULT_FILE_EXTENSION) -> ModFormat | None:
    """Return the format hinted by ``file_name`` (``-forge-`` infix or ``-forge`` suffix).

    Only ``file_extension`` is removed before matching; other dots belong to the name.
    """

    stem = file_name.lower()
    suffix = file_extension.lower()
    if suffix and stem.endswith(suffix):
        stem = stem[: -len(suffix)]
    if not stem:
        return None
    for tag, mod_format in _FILE_NAME_HINTS:
        if f"-{tag}-" in stem or stem.endswith(f"-{tag}"):
            return mod_format
    return None


def _format_from_manifest(
    attributes: Mapping[str, str] | None,
    has_entry: EntryPredicate,
) -> ModFormat | None:
    if not attributes:
        return None
    if has_attribute(attributes, MANIFEST_FABRIC_LOADER_VERSION) or has_attribute(
        attributes,
        MANIFEST_FABRIC_GRADLE_VERSION,
    ):
        if has_entry(QUILT_DESCRIPTOR):
            return ModFormat.QUILT
        if has_entry(FORGE_DESCRIPTOR) and has_entry(TRANSFORMATION_SERVICE_ENTRY):
            return ModFormat.MIXED
        return ModFormat.FABRIC
    if attributes.get(MANIFEST_IMPLEMENTATION_TITLE) == NEOFORGE_TITLE:
        return ModFormat.NEOFORGE
    if has_attribute(attributes, MANIFEST_FML_MOD_TYPE):
        return ModFormat.FORGE
    return None


def _format_from_entries(has_entry: EntryPredicate) -> ModFormat | None:
    has_forge = has_entry(FORGE_DESCRIPTOR)
    has_fabric = has_entry(FABRIC_DESCRIPTOR)
    if has_forge and has_fabric:
        return ModFormat.MIXED
    if has_forge:
        return ModFormat.FORGE
    if has_fabric:
        return ModFormat.FABRIC
    if has_entry(QUILT_DESCRIPTOR):
        return ModFormat.QUILT
    if has_entry(NEOFORGE_DESCRIPTOR):
        return ModFormat.NEOFORGE
    return None


def classify(
    attributes: Mapping[str, str] | None,
    has_entry: EntryPredicate,
    file_name: str = "",
    *,
    file_extension: str = DEFAULT_FILE_EXTENSION,
) -> ModFormat:
    """Return the packaging format of an archive.

    Signals are consulted in priority order and the first match wins: file
    name hints, the Forge plus Fabric descriptor pair, manifest attributes,
    then descriptor presence alone.

    Args:
        attributes: Main manifest attributes, ``None`` when the archive has no manifest.
        has_entry: Predicate reporting whether an archive entry exists.
        file_name: Archive file name used for suffix/infix hints.
        file_extension: Archive extension stripped from ``file_name`` before matching.

    Returns:
        ModFormat: Detected format, :attr:`ModFormat.UNKNOWN` when nothing matched.
    """

    hinted = format_from_file_name(file_name, file_extension)
    if hinted is not None:
        return hinted
    if has_entry(FORGE_DESCRIPTOR) and has_entry(FABRIC_DESCRIPTOR):
        return ModFormat.MIXED
    detected = _format_from_manifest(attributes, has_entry) or _format_from_entries(has_entry)
    if detected is not None:
        return detected

    LOGGER.warning(
        "Unable to detect mod type for %s with manifest %s",
        file_name or "<archive>",
        attributes,
    )
    return ModFormat.UNKNOWN


__all__ = ["EntryPredicate", "classify", "format_from_file_name", "has_attribute"]
