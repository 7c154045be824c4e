# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsing of embedded TOML and JSON descriptors into queryable trees."""

from __future__ import annotations

import json
import logging
import re
import tomllib
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Final

from .errors import DocumentParseError

LOGGER = logging.getLogger(__name__)

_PATH_SEGMENT: Final[re.Pattern[str]] = re.compile(r"([^.\[\]]+)((?:\[\d+\])*)")
_INDEX: Final[re.Pattern[str]] = re.compile(r"\[(\d+)\]")
_TRAILING_COMMA: Final[re.Pattern[str]] = re.compile(r",(\s*[}\]])")
_TOML_HEADER: Final[re.Pattern[str]] = re.compile(r"^\s*\[\[?[^\]]+\]\]?\s*(#.*)?$")
_TOML_KEY: Final[re.Pattern[str]] = re.compile(r"^\s*([A-Za-z0-9_\-\"'.]+)\s*=")

_MISSING: Final = object()


@dataclass(frozen=True, slots=True)
class DocumentTree:
    """Read-only view over a parsed document supporting dotted/indexed lookup.

    Paths use ``.`` between table keys and ``[n]`` for array indices, for
    example ``mods[0].modId`` or ``dependencies.example[2].side``.
    """

    root: Mapping[str, Any]

    def get(self, path: str, default: Any = None) -> Any:
        """Return the value stored at ``path`` or ``default`` when absent."""

        value = self._resolve(path)
        return default if value is _MISSING else value

    def get_string(self, path: str) -> str | None:
        """Return the scalar at ``path`` as text, or ``None`` for tables, arrays and gaps."""

        value = self._resolve(path)
        if value is _MISSING or value is None:
            return None
        if isinstance(value, str):
            return value
        if isinstance(value, (bool, int, float)):
            return str(value)
        return None

    def subtree(self, path: str) -> DocumentTree | None:
        """Return the table at ``path`` wrapped as a :class:`DocumentTree`."""

        value = self._resolve(path)
        if isinstance(value, Mapping):
            return DocumentTree(value)
        return None

    def _resolve(self, path: str) -> Any:
        node: Any = self.root
        for segment in path.split("."):
            match = _PATH_SEGMENT.fullmatch(segment)
            if match is None:
                return _MISSING
            key, indices = match.groups()
            if not isinstance(node, Mapping) or key not in node:
                return _MISSING
            node = node[key]
            for index_match in _INDEX.finditer(indices):
                index = int(index_match.group(1))
                if not isinstance(node, list) or index >= len(node):
                    return _MISSING
                node = node[index]
        return node


def _decode(data: bytes, *, lenient: bool) -> str:
    if lenient:
        return data.decode("utf-8-sig", errors="replace").replace("\r\n", "\n")
    return data.decode("utf-8")


def _drop_duplicate_toml_keys(text: str) -> str:
    """Keep the first assignment of each key within a table, dropping repeats."""

    seen: set[str] = set()
    lines: list[str] = []
    for line in text.splitlines():
        if _TOML_HEADER.match(line):
            seen = set()
            lines.append(line)
            continue
        key_match = _TOML_KEY.match(line)
        if key_match:
            key = key_match.group(1).strip("\"'")
            if key in seen:
                LOGGER.debug("Dropping duplicate TOML key %s", key)
                continue
            seen.add(key)
        lines.append(line)
    return "\n".join(lines)


def _parse_toml_text(text: str) -> Mapping[str, Any]:
    return tomllib.loads(text)


def _parse_toml_lenient(text: str) -> Mapping[str, Any]:
    return tomllib.loads(_drop_duplicate_toml_keys(text))


def _parse_json_text(text: str) -> Any:
    return json.loads(text)


def _parse_json_lenient(text: str) -> Any:
    return json.loads(_TRAILING_COMMA.sub(r"\1", text), strict=False)


def _parse_with_fallback(
    data: bytes,
    entry: str,
    *,
    strict: Callable[[str], Any],
    lenient: Callable[[str], Any],
    errors: tuple[type[Exception], ...],
) -> DocumentTree:
    try:
        root = strict(_decode(data, lenient=False))
    except RecursionError as exc:
        raise DocumentParseError(entry, "document is nested too deeply") from exc
    except (*errors, UnicodeDecodeError) as exc:
        LOGGER.warning("Invalid document %s, retrying leniently: %s", entry, exc)
        try:
            root = lenient(_decode(data, lenient=True))
        except (*errors, RecursionError) as lenient_exc:
            raise DocumentParseError(entry, str(lenient_exc)) from lenient_exc
    if not isinstance(root, Mapping):
        raise DocumentParseError(entry, f"expected a table/object, found {type(root).__name__}")
    return DocumentTree(root)


def parse_toml(data: bytes, entry: str = "<toml>") -> DocumentTree:
    """Parse ``data`` as TOML, retrying leniently before giving up.

    Args:
        data: Raw document bytes.
        entry: Archive-internal path used in error messages.

    Returns:
        DocumentTree: Parsed document.

    Raises:
        DocumentParseError: If neither the strict nor the lenient parse succeeds.
    """

    return _parse_with_fallback(
        data,
        entry,
        strict=_parse_toml_text,
        lenient=_parse_toml_lenient,
        errors=(tomllib.TOMLDecodeError,),
    )


def parse_json(data: bytes, entry: str = "<json>") -> DocumentTree:
    """Parse ``data`` as a JSON object, retrying leniently before giving up.

    The lenient pass tolerates a byte-order mark, control characters inside
    strings and trailing commas.

    Raises:
        DocumentParseError: If neither the strict nor the lenient parse succeeds.
    """

    return _parse_with_fallback(
        data,
        entry,
        strict=_parse_json_text,
        lenient=_parse_json_lenient,
        errors=(json.JSONDecodeError,),
    )


__all__ = ["DocumentTree", "parse_json", "parse_toml"]
