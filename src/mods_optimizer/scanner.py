# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Directory scanning that drives classification, extraction and the catalog."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from .archive import ModArchive
from .catalog import ModCatalog
from .classifier import classify
from .config import ScanConfig
from .errors import ArchiveReadError
from .extractors import extract
from .models import ExtractionIssue, IssueCollector, ModDescriptor, ModEnvironment
from .resolver import DuplicateResolution, resolve_duplicates

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ScanResult:
    """Outcome of scanning a mods directory."""

    root: Path
    catalog: ModCatalog
    resolutions: list[DuplicateResolution] = field(default_factory=list)
    issues: tuple[ExtractionIssue, ...] = ()
    skipped: list[Path] = field(default_factory=list)

    @property
    def descriptors(self) -> list[ModDescriptor]:
        """Return every ingested descriptor ordered by path."""

        everything = self.catalog.client | self.catalog.server | self.catalog.default
        return sorted(everything, key=lambda item: str(item.path))

    def client_side_candidates(self, side: ModEnvironment) -> list[ModDescriptor]:
        """Return client-only mods that should be disabled for ``side``.

        Only a dedicated server disables client mods; any other side returns
        an empty list.
        """

        if side is not ModEnvironment.SERVER:
            return []
        return sorted(self.catalog.client, key=lambda item: item.id)


def discover_mod_files(directory: Path, file_extension: str) -> list[Path]:
    """Return files in ``directory`` ending with ``file_extension``, sorted by path."""

    suffix = file_extension.lower()
    return sorted(
        path for path in directory.iterdir() if path.is_file() and path.name.lower().endswith(suffix)
    )


def read_mod_file(
    path: Path,
    config: ScanConfig | None = None,
    issues: IssueCollector | None = None,
) -> ModDescriptor | None:
    """Classify and extract a single archive.

    Args:
        path: Archive to read.
        config: Scan configuration; defaults apply when omitted.
        issues: Collector receiving degradations for this archive.

    Returns:
        ModDescriptor | None: Descriptor, or ``None`` when ``path`` is not a readable archive.
    """

    cfg = config or ScanConfig()
    collector = issues if issues is not None else IssueCollector()
    try:
        with ModArchive.open(path) as archive:
            manifest = archive.manifest()
            if manifest is None:
                collector.warning("missing-manifest", f"Unable to read manifest from mod file {path}", path=path)
            mod_format = classify(manifest, archive.has_entry, path.name, file_extension=cfg.file_extension)
            descriptor = extract(
                mod_format,
                manifest,
                archive,
                path,
                issues=collector,
                platform_version=cfg.platform_version,
            )
    except ArchiveReadError as exc:
        collector.error("archive-read-error", str(exc), path=path)
        return None

    override = cfg.override_for(descriptor.id)
    if override is not None and override is not descriptor.environment:
        LOGGER.info(
            "Overwrite mod environment for %s from %s to %s",
            descriptor.id,
            descriptor.environment.value,
            override.value,
        )
        descriptor = descriptor.with_updates(environment=override)
    return descriptor


def _read_isolated(path: Path, config: ScanConfig) -> tuple[Path, ModDescriptor | None, tuple[ExtractionIssue, ...]]:
    collector = IssueCollector()
    descriptor = read_mod_file(path, config, collector)
    return path, descriptor, collector.issues


def read_mod_files(
    paths: Sequence[Path],
    config: ScanConfig,
) -> list[tuple[Path, ModDescriptor | None, tuple[ExtractionIssue, ...]]]:
    """Read ``paths`` sequentially or with ``config.jobs`` worker threads.

    Results are returned in the order of ``paths`` regardless of completion order.
    """

    if config.jobs <= 1 or len(paths) <= 1:
        return [_read_isolated(path, config) for path in paths]
    with ThreadPoolExecutor(max_workers=config.jobs) as executor:
        return list(executor.map(lambda path: _read_isolated(path, config), paths))


def build_catalog(descriptors: Iterable[ModDescriptor]) -> ModCatalog:
    """Return a catalog populated from ``descriptors`` in path order."""

    catalog = ModCatalog()
    catalog.ingest_all(descriptors)
    return catalog


def scan_mods(directory: Path, config: ScanConfig | None = None) -> ScanResult:
    """Scan ``directory`` for mod archives and resolve duplicated mods.

    Args:
        directory: Directory holding mod archives.
        config: Scan configuration; defaults apply when omitted.

    Returns:
        ScanResult: Populated catalog, duplicate resolutions and issues.

    Raises:
        FileNotFoundError: If ``directory`` does not exist or is not a directory.
    """

    cfg = config or ScanConfig()
    if not directory.is_dir():
        raise FileNotFoundError(f"Unable to find valid mod path: {directory}")

    paths = discover_mod_files(directory, cfg.file_extension)
    LOGGER.info(
        "Parsing ~%d mods in %s with file extension %s ...",
        len(paths),
        directory,
        cfg.file_extension,
    )

    collector = IssueCollector()
    descriptors: list[ModDescriptor] = []
    skipped: list[Path] = []
    for path, descriptor, issues in read_mod_files(paths, cfg):
        collector.extend(issues)
        if descriptor is None:
            skipped.append(path)
        else:
            descriptors.append(descriptor)

    catalog = build_catalog(descriptors)
    resolutions = resolve_duplicates(catalog.duplicates)
    return ScanResult(
        root=directory,
        catalog=catalog,
        resolutions=resolutions,
        issues=collector.issues,
        skipped=skipped,
    )


__all__ = [
    "ScanResult",
    "build_catalog",
    "discover_mod_files",
    "read_mod_file",
    "read_mod_files",
    "scan_mods",
]
