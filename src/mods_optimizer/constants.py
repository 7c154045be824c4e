# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared constants describing mod archive layouts and manifest attributes."""

from __future__ import annotations

from typing import Final

DEFAULT_PLATFORM_VERSION: Final[str] = "1.20.1"
DEFAULT_FILE_EXTENSION: Final[str] = ".jar"

FORGE_DESCRIPTOR: Final[str] = "META-INF/mods.toml"
NEOFORGE_DESCRIPTOR: Final[str] = "META-INF/neoforge.mods.toml"
FABRIC_DESCRIPTOR: Final[str] = "fabric.mod.json"
QUILT_DESCRIPTOR: Final[str] = "quilt.mod.json"
MANIFEST_ENTRY: Final[str] = "META-INF/MANIFEST.MF"
TRANSFORMATION_SERVICE_ENTRY: Final[str] = (
    "META-INF/services/cpw.mods.modlauncher.api.ITransformationService"
)

MANIFEST_AUTOMATIC_MODULE_NAME: Final[str] = "Automatic-Module-Name"
MANIFEST_IMPLEMENTATION_VERSION: Final[str] = "Implementation-Version"
MANIFEST_IMPLEMENTATION_TIMESTAMP: Final[str] = "Implementation-Timestamp"
MANIFEST_IMPLEMENTATION_TITLE: Final[str] = "Implementation-Title"
MANIFEST_SPECIFICATION_TITLE: Final[str] = "Specification-Title"
MANIFEST_FML_MOD_TYPE: Final[str] = "FMLModType"
MANIFEST_FABRIC_LOADER_VERSION: Final[str] = "Fabric-Loader-Version"
MANIFEST_FABRIC_GRADLE_VERSION: Final[str] = "Fabric-Gradle-Version"

# Java ``yyyy-MM-dd'T'HH:mm:ssZ`` expressed for :func:`datetime.strptime`.
MANIFEST_TIMESTAMP_FORMAT: Final[str] = "%Y-%m-%dT%H:%M:%S%z"

EMPTY_MOD_ID: Final[str] = ""
EMPTY_MOD_NAME: Final[str] = "Unknown"
TEMPLATE_PLACEHOLDER_PREFIX: Final[str] = "${"

HOST_PLATFORM_IDS: Final[frozenset[str]] = frozenset({"forge", "neoforge"})
LOW_CODE_LOADER: Final[str] = "lowcodefml"
MAX_DEPENDENCY_ENTRIES: Final[int] = 10

DATA_PACK_DIRECTORIES: Final[frozenset[str]] = frozenset(
    {"assets/", "data/", "META-INF/", "things/"},
)
COPY_MARKERS: Final[tuple[str, ...]] = ("copy", "kopie")

CONFIG_FILENAME: Final[str] = "mods-optimizer.toml"
PYPROJECT_SECTION: Final[str] = "mods-optimizer"

__all__ = [
    "COPY_MARKERS",
    "CONFIG_FILENAME",
    "DATA_PACK_DIRECTORIES",
    "DEFAULT_FILE_EXTENSION",
    "DEFAULT_PLATFORM_VERSION",
    "EMPTY_MOD_ID",
    "EMPTY_MOD_NAME",
    "FABRIC_DESCRIPTOR",
    "FORGE_DESCRIPTOR",
    "HOST_PLATFORM_IDS",
    "LOW_CODE_LOADER",
    "MANIFEST_AUTOMATIC_MODULE_NAME",
    "MANIFEST_ENTRY",
    "MANIFEST_FABRIC_GRADLE_VERSION",
    "MANIFEST_FABRIC_LOADER_VERSION",
    "MANIFEST_FML_MOD_TYPE",
    "MANIFEST_IMPLEMENTATION_TIMESTAMP",
    "MANIFEST_IMPLEMENTATION_TITLE",
    "MANIFEST_IMPLEMENTATION_VERSION",
    "MANIFEST_SPECIFICATION_TITLE",
    "MANIFEST_TIMESTAMP_FORMAT",
    "MAX_DEPENDENCY_ENTRIES",
    "NEOFORGE_DESCRIPTOR",
    "PYPROJECT_SECTION",
    "QUILT_DESCRIPTOR",
    "TEMPLATE_PLACEHOLDER_PREFIX",
    "TRANSFORMATION_SERVICE_ENTRY",
]
