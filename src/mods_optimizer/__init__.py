# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Classification, metadata extraction and duplicate planning for mod archives."""

from __future__ import annotations

from importlib import metadata

from .catalog import CatalogDelta, ModCatalog
from .classifier import classify
from .extractors import extract
from .models import ModDescriptor, ModEnvironment, ModFormat
from .resolver import DuplicateResolution, resolve_duplicates
from .scanner import ScanResult, scan_mods
from .versioning import normalize_version, parse_version

try:
    __version__ = metadata.version("mods-optimizer")
except metadata.PackageNotFoundError:  # pragma: no cover - source checkout without install
    __version__ = "0.0.0"

__all__ = [
    "CatalogDelta",
    "DuplicateResolution",
    "ModCatalog",
    "ModDescriptor",
    "ModEnvironment",
    "ModFormat",
    "ScanResult",
    "__version__",
    "classify",
    "extract",
    "normalize_version",
    "parse_version",
    "resolve_duplicates",
    "scan_mods",
]
