# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Per-format extraction of mod metadata from archive descriptors.

Every extractor returns a fully populated :class:`ModDescriptor` and never
raises; unreadable or missing descriptors degrade to sentinel values and are
recorded on the supplied :class:`IssueCollector`.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path
from typing import Final

from semver import Version

from .archive import ModArchive, creation_time
from .classifier import has_attribute
from .constants import (
    DATA_PACK_DIRECTORIES,
    DEFAULT_PLATFORM_VERSION,
    EMPTY_MOD_ID,
    EMPTY_MOD_NAME,
    FABRIC_DESCRIPTOR,
    FORGE_DESCRIPTOR,
    HOST_PLATFORM_IDS,
    LOW_CODE_LOADER,
    MANIFEST_AUTOMATIC_MODULE_NAME,
    MANIFEST_FML_MOD_TYPE,
    MANIFEST_IMPLEMENTATION_TIMESTAMP,
    MANIFEST_IMPLEMENTATION_TITLE,
    MANIFEST_IMPLEMENTATION_VERSION,
    MANIFEST_SPECIFICATION_TITLE,
    MANIFEST_TIMESTAMP_FORMAT,
    MAX_DEPENDENCY_ENTRIES,
    NEOFORGE_DESCRIPTOR,
    QUILT_DESCRIPTOR,
    TEMPLATE_PLACEHOLDER_PREFIX,
    TRANSFORMATION_SERVICE_ENTRY,
)
from .documents import DocumentTree, parse_json, parse_toml
from .errors import ArchiveReadError, DocumentParseError, MissingEntryError
from .models import EMPTY_VERSION, IssueCollector, ModDescriptor, ModEnvironment, ModFormat
from .versioning import parse_version

FORGE_SIDES: Final[Mapping[str, ModEnvironment]] = {
    "client": ModEnvironment.CLIENT,
    "server": ModEnvironment.SERVER,
    "both": ModEnvironment.DEFAULT,
}
FORGE_DISPLAY_TESTS: Final[Mapping[str, ModEnvironment]] = {
    "IGNORE_SERVER_VERSION": ModEnvironment.SERVER,
    "IGNORE_ALL_VERSION": ModEnvironment.CLIENT,
    "MATCH_VERSION": ModEnvironment.DEFAULT,
}
FABRIC_ENVIRONMENTS: Final[Mapping[str, ModEnvironment]] = {
    "client": ModEnvironment.CLIENT,
    "server": ModEnvironment.SERVER,
    "*": ModEnvironment.DEFAULT,
}
QUILT_ENVIRONMENTS: Final[Mapping[str, ModEnvironment]] = {
    "client": ModEnvironment.CLIENT,
    "dedicated_server": ModEnvironment.SERVER,
    "*": ModEnvironment.DEFAULT,
}
FML_MOD_TYPES: Final[Mapping[str, ModEnvironment | None]] = {
    "LIBRARY": ModEnvironment.LIBRARY,
    "GAMELIBRARY": ModEnvironment.LIBRARY,
    "LANGPROVIDER": ModEnvironment.LANGUAGE_PROVIDER,
    "MOD": None,
}
GENERATED_ID_PREFIXES: Final[Mapping[ModEnvironment, str]] = {
    ModEnvironment.LIBRARY: "library-",
    ModEnvironment.LANGUAGE_PROVIDER: "language-provider-",
    ModEnvironment.DATA_PACK: "data-pack-",
}
UNKNOWN_ID_PREFIX: Final[str] = "unknown-"


@dataclass(slots=True)
class ExtractionContext:
    """Inputs shared by the extractors for a single archive."""

    archive: ModArchive
    manifest: Mapping[str, str] | None
    path: Path
    issues: IssueCollector = field(default_factory=IssueCollector)
    platform_version: str = DEFAULT_PLATFORM_VERSION

    def warning(self, code: str, message: str) -> None:
        """Record a warning issue against this archive.

        Args:
            code: Stable issue code such as ``missing-entry``.
            message: Human-readable explanation.
        """

        self.issues.warning(code, message, path=self.path)

    def error(self, code: str, message: str) -> None:
        """Record an error issue against this archive.

        Args:
            code: Stable issue code such as ``parse-error``.
            message: Human-readable explanation.
        """

        self.issues.error(code, message, path=self.path)

    def notice(self, code: str, message: str) -> None:
        """Record a notice issue against this archive.

        Args:
            code: Stable issue code such as ``unresolved-version``.
            message: Human-readable explanation.
        """

        self.issues.notice(code, message, path=self.path)

    def version(self, raw: str | None) -> Version:
        """Parse ``raw`` with this archive's platform version.

        Args:
            raw: Version text from a descriptor or manifest.

        Returns:
            Version: Parsed version, or the empty version when unusable.
        """

        return parse_version(raw, platform_version=self.platform_version)


@dataclass(slots=True)
class _Draft:
    """Mutable accumulator turned into a :class:`ModDescriptor` at the end."""

    format: ModFormat
    id: str = EMPTY_MOD_ID
    name: str = EMPTY_MOD_NAME
    version: Version = EMPTY_VERSION
    environment: ModEnvironment = ModEnvironment.UNKNOWN
    timestamp: datetime | None = None


Extractor = Callable[[ExtractionContext], _Draft]


def _is_placeholder(value: str | None) -> bool:
    return value is not None and value.startswith(TEMPLATE_PLACEHOLDER_PREFIX)


def _read_document(
    ctx: ExtractionContext,
    entry: str,
    parser: Callable[[bytes, str], DocumentTree],
) -> DocumentTree | None:
    try:
        return parser(ctx.archive.read_entry(entry), entry)
    except MissingEntryError:
        ctx.warning("missing-entry", f"Found no {entry} file for {ctx.path}")
    except DocumentParseError as exc:
        ctx.error("parse-error", f"Was unable to read mods file {entry} from {ctx.path}: {exc.reason}")
    except ArchiveReadError as exc:
        ctx.error("archive-read-error", str(exc))
    return None


def _parse_timestamp(ctx: ExtractionContext, raw: str | None) -> datetime | None:
    if not raw:
        return None
    try:
        return datetime.strptime(raw, MANIFEST_TIMESTAMP_FORMAT)
    except ValueError:
        ctx.warning("invalid-timestamp", f"Was unable to parse timestamp {raw!r} for {ctx.path}")
    return None


def _resolve_timestamp(ctx: ExtractionContext) -> datetime:
    raw = ctx.manifest.get(MANIFEST_IMPLEMENTATION_TIMESTAMP) if ctx.manifest else None
    timestamp = _parse_timestamp(ctx, raw) or creation_time(ctx.path)
    if timestamp is None:
        ctx.notice("unresolved-timestamp", f"Using scan time as timestamp for {ctx.path}")
        timestamp = datetime.now().astimezone()
    return timestamp


def _apply_manifest(draft: _Draft, ctx: ExtractionContext) -> None:
    """Backfill version, name and id from the manifest where the descriptor left gaps."""

    attributes = ctx.manifest
    if not attributes:
        return
    if draft.version == EMPTY_VERSION and has_attribute(attributes, MANIFEST_IMPLEMENTATION_VERSION):
        draft.version = ctx.version(attributes[MANIFEST_IMPLEMENTATION_VERSION])
    if (draft.name == EMPTY_MOD_NAME or _is_placeholder(draft.name)) and has_attribute(
        attributes,
        MANIFEST_SPECIFICATION_TITLE,
    ):
        draft.name = attributes[MANIFEST_SPECIFICATION_TITLE]
    if not draft.id:
        for attribute in (MANIFEST_AUTOMATIC_MODULE_NAME, MANIFEST_IMPLEMENTATION_TITLE):
            if has_attribute(attributes, attribute):
                draft.id = attributes[attribute].replace(" ", "-").lower()
                break


def _apply_fml_mod_type(draft: _Draft, ctx: ExtractionContext) -> None:
    if draft.environment is not ModEnvironment.UNKNOWN:
        return
    fml_mod_type = (ctx.manifest or {}).get(MANIFEST_FML_MOD_TYPE)
    if not fml_mod_type:
        return
    if fml_mod_type not in FML_MOD_TYPES:
        ctx.warning("unknown-fml-mod-type", f"Found unknown fml mod type {fml_mod_type} for {ctx.path}")
        return
    environment = FML_MOD_TYPES[fml_mod_type]
    if environment is not None:
        draft.environment = environment


def _environment_from_dependencies(
    doc: DocumentTree,
    mod_id: str,
    ctx: ExtractionContext,
) -> ModEnvironment:
    """Return the side declared on the dependency towards the host platform."""

    dependencies = doc.subtree("dependencies")
    entries = dependencies.root.get(mod_id) if dependencies is not None else None
    if not isinstance(entries, list):
        return ModEnvironment.UNKNOWN
    for index, entry in enumerate(entries[:MAX_DEPENDENCY_ENTRIES]):
        if not isinstance(entry, Mapping):
            break
        if entry.get("modId") not in HOST_PLATFORM_IDS:
            continue
        side = entry.get("side")
        if not isinstance(side, str):
            ctx.warning(
                "missing-side",
                f"Found no side tag inside the dependencies.{mod_id}[{index}] section of {ctx.path}",
            )
            return ModEnvironment.UNKNOWN
        return FORGE_SIDES.get(side.lower(), ModEnvironment.UNKNOWN)
    return ModEnvironment.UNKNOWN


def _apply_forge_descriptor(draft: _Draft, doc: DocumentTree, ctx: ExtractionContext, entry: str) -> None:
    mod_id = doc.get_string("mods[0].modId")
    if mod_id:
        draft.id = mod_id
    name = doc.get_string("mods[0].displayName")
    if name:
        draft.name = name

    mod_loader = doc.get_string("modLoader")
    if mod_loader and mod_loader.lower() == LOW_CODE_LOADER:
        draft.environment = ModEnvironment.DATA_PACK

    mod_version = doc.get_string("mods[0].version")
    file_version = doc.get_string("version")
    if mod_version and not _is_placeholder(mod_version):
        draft.version = ctx.version(mod_version)
    elif file_version and not _is_placeholder(file_version):
        ctx.warning(
            "deprecated-version-location",
            f"The version tag should be placed inside the [[mods]] section of {entry} in {ctx.path}",
        )
        draft.version = ctx.version(file_version)

    if draft.environment is ModEnvironment.UNKNOWN and mod_id:
        draft.environment = _environment_from_dependencies(doc, mod_id, ctx)

    # displayTest is rarely set, but still a usable hint.
    if draft.environment is ModEnvironment.UNKNOWN:
        display_test = doc.get_string("mods[0].displayTest")
        if display_test:
            draft.environment = FORGE_DISPLAY_TESTS.get(display_test, ModEnvironment.UNKNOWN)


def extract_forge(ctx: ExtractionContext, entry: str = FORGE_DESCRIPTOR) -> _Draft:
    """Read ``META-INF/mods.toml`` plus manifest hints."""

    draft = _Draft(ModFormat.FORGE)
    doc = _read_document(ctx, entry, parse_toml)
    if doc is not None:
        _apply_forge_descriptor(draft, doc, ctx, entry)
    _apply_manifest(draft, ctx)
    _apply_fml_mod_type(draft, ctx)
    draft.timestamp = _resolve_timestamp(ctx)
    return draft


def extract_neoforge(ctx: ExtractionContext) -> _Draft:
    """Read a NeoForge archive, which reuses the Forge descriptor layout."""

    entry = NEOFORGE_DESCRIPTOR if ctx.archive.has_entry(NEOFORGE_DESCRIPTOR) else FORGE_DESCRIPTOR
    return replace(extract_forge(ctx, entry), format=ModFormat.NEOFORGE)


def extract_fabric(ctx: ExtractionContext) -> _Draft:
    """Read ``fabric.mod.json`` plus manifest hints."""

    draft = _Draft(ModFormat.FABRIC)
    doc = _read_document(ctx, FABRIC_DESCRIPTOR, parse_json)
    if doc is not None:
        draft.id = doc.get_string("id") or EMPTY_MOD_ID
        draft.name = doc.get_string("name") or EMPTY_MOD_NAME
        version = doc.get_string("version")
        if version and not _is_placeholder(version):
            draft.version = ctx.version(version)
        environment = doc.get_string("environment")
        if environment:
            draft.environment = FABRIC_ENVIRONMENTS.get(environment, ModEnvironment.UNKNOWN)
    _apply_manifest(draft, ctx)
    draft.timestamp = _resolve_timestamp(ctx)
    return draft


def extract_quilt(ctx: ExtractionContext) -> _Draft:
    """Read ``quilt.mod.json`` plus manifest hints."""

    draft = _Draft(ModFormat.QUILT)
    doc = _read_document(ctx, QUILT_DESCRIPTOR, parse_json)
    if doc is not None:
        draft.id = doc.get_string("quilt_loader.id") or EMPTY_MOD_ID
        draft.name = doc.get_string("quilt_loader.metadata.name") or EMPTY_MOD_NAME
        version = doc.get_string("quilt_loader.version")
        if version and not _is_placeholder(version):
            draft.version = ctx.version(version)
        environment = doc.get_string("minecraft.environment")
        if environment:
            draft.environment = QUILT_ENVIRONMENTS.get(environment, ModEnvironment.UNKNOWN)
    _apply_manifest(draft, ctx)
    draft.timestamp = _resolve_timestamp(ctx)
    return draft


def is_data_pack_layout(directories: frozenset[str]) -> bool:
    """Return ``True`` when every top-level directory belongs to the data pack allow-list."""

    return bool(directories) and directories <= DATA_PACK_DIRECTORIES


def extract_mixed(ctx: ExtractionContext) -> _Draft:
    """Merge Forge, Fabric and Quilt extraction for archives shipping several descriptors.

    The first sub-extraction that found an id supplies name, version,
    environment and timestamp together; Quilt is only consulted when neither
    Forge nor Fabric produced an id.
    """

    chosen = extract_forge(ctx)
    if not chosen.id:
        fabric = extract_fabric(ctx)
        chosen = fabric if fabric.id else extract_quilt(ctx)
    draft = replace(chosen, format=ModFormat.MIXED)

    if ctx.archive.has_entry(TRANSFORMATION_SERVICE_ENTRY):
        draft.environment = ModEnvironment.SERVICE
    if draft.environment is ModEnvironment.UNKNOWN and is_data_pack_layout(
        ctx.archive.top_level_directories(),
    ):
        draft.environment = ModEnvironment.DATA_PACK
    return draft


def extract_unknown(ctx: ExtractionContext) -> _Draft:
    """Return an all-sentinel draft for archives of unknown format."""

    ctx.error(
        "unknown-format",
        f"Found unknown mod type for mod file {ctx.path} with manifest {dict(ctx.manifest or {})}",
    )
    return _Draft(ModFormat.UNKNOWN, timestamp=_resolve_timestamp(ctx))


EXTRACTORS: Final[Mapping[ModFormat, Extractor]] = {
    ModFormat.FORGE: extract_forge,
    ModFormat.NEOFORGE: extract_neoforge,
    ModFormat.FABRIC: extract_fabric,
    ModFormat.QUILT: extract_quilt,
    ModFormat.MIXED: extract_mixed,
    ModFormat.UNKNOWN: extract_unknown,
}


def _resolve_identity(draft: _Draft, ctx: ExtractionContext) -> str:
    if draft.id:
        return draft.id
    prefix = GENERATED_ID_PREFIXES.get(draft.environment)
    if prefix is None:
        ctx.error("unresolved-identity", f"Found no valid modId for {ctx.path}")
        prefix = UNKNOWN_ID_PREFIX
    return f"{prefix}{uuid.uuid4()}"


def _finalize(draft: _Draft, ctx: ExtractionContext) -> ModDescriptor:
    if draft.version == EMPTY_VERSION:
        ctx.notice("unresolved-version", f"No usable version found for {ctx.path}")
    if draft.environment is ModEnvironment.UNKNOWN:
        ctx.notice("unresolved-environment", f"No environment hints found for {ctx.path}")
    return ModDescriptor(
        path=ctx.path,
        id=_resolve_identity(draft, ctx),
        format=draft.format,
        name=draft.name or EMPTY_MOD_NAME,
        version=draft.version,
        environment=draft.environment,
        timestamp=draft.timestamp or _resolve_timestamp(ctx),
    )


def extract(
    mod_format: ModFormat,
    manifest: Mapping[str, str] | None,
    archive: ModArchive,
    path: Path | None = None,
    *,
    issues: IssueCollector | None = None,
    platform_version: str = DEFAULT_PLATFORM_VERSION,
) -> ModDescriptor:
    """Extract a :class:`ModDescriptor` from ``archive`` using the ``mod_format`` extractor.

    Args:
        mod_format: Format returned by :func:`mods_optimizer.classifier.classify`.
        manifest: Main manifest attributes, ``None`` when absent.
        archive: Open archive to read descriptors from.
        path: Archive location recorded on the descriptor; defaults to ``archive.path``.
        issues: Collector receiving degradations; a private one is used when omitted.
        platform_version: Host platform version stripped from version strings.

    Returns:
        ModDescriptor: Fully populated descriptor; never raises for malformed input.
    """

    ctx = ExtractionContext(
        archive=archive,
        manifest=manifest,
        path=path or archive.path,
        issues=issues if issues is not None else IssueCollector(),
        platform_version=platform_version,
    )
    draft = EXTRACTORS[mod_format](ctx)
    return _finalize(draft, ctx)


__all__ = [
    "EXTRACTORS",
    "ExtractionContext",
    "extract",
    "extract_fabric",
    "extract_forge",
    "extract_mixed",
    "extract_neoforge",
    "extract_quilt",
    "extract_unknown",
    "is_data_pack_layout",
]
