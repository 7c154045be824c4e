# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Read-only access to mod archives (zip containers with a jar manifest)."""

from __future__ import annotations

import logging
import zipfile
import zlib
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from datetime import datetime
from functools import cached_property
from pathlib import Path

from .constants import MANIFEST_ENTRY
from .errors import ArchiveReadError, MissingEntryError

LOGGER = logging.getLogger(__name__)


class ManifestAttributes(Mapping[str, str]):
    """Manifest main attributes with case-insensitive name lookup.

    Iteration yields the names as written in the manifest.
    """

    def __init__(self, items: Iterable[tuple[str, str]] = ()) -> None:
        self._data: dict[str, tuple[str, str]] = {}
        for name, value in items:
            self._data[name.lower()] = (name, value)

    def __getitem__(self, name: str) -> str:
        if not isinstance(name, str):
            raise KeyError(name)
        return self._data[name.lower()][1]

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._data.values())

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self)!r})"


def parse_manifest(text: str) -> ManifestAttributes:
    """Return the main attributes of a jar manifest.

    Only the main section (everything before the first blank line) is read.
    Continuation lines start with a single space and are appended to the
    previous value.

    Args:
        text: Decoded ``META-INF/MANIFEST.MF`` content.

    Returns:
        ManifestAttributes: Attribute names mapped to their values.
    """

    attributes: dict[str, str] = {}
    last_key: str | None = None
    for raw_line in text.splitlines():
        if not raw_line.strip():
            if attributes:
                break
            continue
        if raw_line.startswith(" ") and last_key is not None:
            attributes[last_key] += raw_line[1:]
            continue
        key, separator, value = raw_line.partition(":")
        if not separator:
            LOGGER.debug("Ignoring malformed manifest line %r", raw_line)
            continue
        last_key = key.strip()
        attributes[last_key] = value.strip()
    return ManifestAttributes(attributes.items())


class ModArchive:
    """Entry lookups over an open zip archive.

    Instances are created through :meth:`open`, which guarantees the
    underlying file handle is closed on every exit path.
    """

    def __init__(self, path: Path, handle: zipfile.ZipFile) -> None:
        self.path = path
        self._handle = handle

    @classmethod
    @contextmanager
    def open(cls, path: Path) -> Iterator[ModArchive]:
        """Open ``path`` for the duration of the ``with`` block.

        Raises:
            ArchiveReadError: If ``path`` is not a readable zip archive.
        """

        try:
            handle = zipfile.ZipFile(path)
        except (OSError, zipfile.BadZipFile) as exc:
            raise ArchiveReadError(f"Unable to open mod archive {path}: {exc}") from exc
        try:
            yield cls(path, handle)
        finally:
            handle.close()

    @cached_property
    def _names(self) -> frozenset[str]:
        return frozenset(self._handle.namelist())

    def entries(self) -> frozenset[str]:
        """Return every entry name stored in the archive."""

        return self._names

    def has_entry(self, name: str) -> bool:
        """Return ``True`` when ``name`` exists as a file or directory entry."""

        return name in self._names or f"{name.rstrip('/')}/" in self._names

    def read_entry(self, name: str) -> bytes:
        """Return the bytes stored at ``name``.

        Raises:
            MissingEntryError: If the entry is absent or is a directory.
            ArchiveReadError: If the entry data is corrupt or uses an unsupported compression.
        """

        if name not in self._names or name.endswith("/"):
            raise MissingEntryError(name)
        try:
            return self._handle.read(name)
        except (OSError, zipfile.BadZipFile, zlib.error, NotImplementedError, RuntimeError) as exc:
            raise ArchiveReadError(f"Unable to read {name} from {self.path}: {exc}") from exc

    def top_level_directories(self) -> frozenset[str]:
        """Return top-level directory names (with trailing ``/``) present in the archive."""

        return frozenset(f"{name.split('/', 1)[0]}/" for name in self._names if "/" in name)

    def manifest(self) -> ManifestAttributes | None:
        """Return the main manifest attributes, or ``None`` when there is no manifest."""

        try:
            data = self.read_entry(MANIFEST_ENTRY)
        except MissingEntryError:
            return None
        return parse_manifest(data.decode("utf-8", errors="replace"))


def creation_time(path: Path) -> datetime | None:
    """Return the filesystem creation time of ``path`` as an aware datetime.

    Birth time is used where the platform reports it, otherwise the inode
    change time. ``None`` means the file could not be inspected.
    """

    try:
        stat = path.stat()
    except OSError as exc:
        LOGGER.error("Was unable to read file attributes from %s: %s", path, exc)
        return None
    seconds = getattr(stat, "st_birthtime", None)
    if seconds is None:
        seconds = stat.st_ctime
    return datetime.fromtimestamp(seconds).astimezone()


__all__ = ["ManifestAttributes", "ModArchive", "creation_time", "parse_manifest"]
