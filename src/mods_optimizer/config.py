# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and loaders for mod scanning."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import (
    CONFIG_FILENAME,
    DEFAULT_FILE_EXTENSION,
    DEFAULT_PLATFORM_VERSION,
    PYPROJECT_SECTION,
)
from .errors import ConfigError
from .models import ModEnvironment

PYPROJECT_TOOL_KEY: Final[str] = "tool"


class ScanConfig(BaseModel):
    """Settings controlling how a mods directory is scanned and reported."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    file_extension: str = DEFAULT_FILE_EXTENSION
    platform_version: str = DEFAULT_PLATFORM_VERSION
    environment_overrides: dict[str, ModEnvironment] = Field(default_factory=dict)
    jobs: int = Field(default=1, ge=1)
    emoji: bool = True
    color: bool = True

    @field_validator("file_extension")
    @classmethod
    def _dotted_extension(cls, value: str) -> str:
        """Ensure the extension carries a leading dot."""
        value = value.strip()
        if not value:
            raise ValueError("file_extension must not be empty")
        return value if value.startswith(".") else f".{value}"

    def override_for(self, mod_id: str) -> ModEnvironment | None:
        """Return the configured environment override for ``mod_id``."""
        return self.environment_overrides.get(mod_id)


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except OSError as exc:
        raise ConfigError(f"Unable to read configuration {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc


def _pyproject_section(path: Path) -> Mapping[str, Any] | None:
    data = _read_toml(path)
    tool_section = data.get(PYPROJECT_TOOL_KEY)
    if not isinstance(tool_section, Mapping):
        return None
    section = tool_section.get(PYPROJECT_SECTION)
    return section if isinstance(section, Mapping) else None


def build_config(data: Mapping[str, Any], *, source: str = "<mapping>") -> ScanConfig:
    """Validate ``data`` into a :class:`ScanConfig`.

    Raises:
        ConfigError: If ``data`` does not satisfy the configuration schema.
    """

    normalized = {str(key).replace("-", "_"): value for key, value in data.items()}
    try:
        return ScanConfig.model_validate(normalized)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {source}: {exc}") from exc


def discover_config_file(start: Path) -> Path | None:
    """Return the first ``mods-optimizer.toml`` or ``pyproject.toml`` with our section."""

    for directory in (start, start.parent):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    for directory in (start, start.parent):
        candidate = directory / "pyproject.toml"
        if candidate.is_file() and _pyproject_section(candidate) is not None:
            return candidate
    return None


def load_config(directory: Path, config_path: Path | None = None) -> ScanConfig:
    """Load configuration for scanning ``directory``.

    Args:
        directory: Mods directory being scanned; used for discovery.
        config_path: Explicit configuration file, bypassing discovery.

    Returns:
        ScanConfig: Loaded configuration, or defaults when nothing was found.

    Raises:
        ConfigError: If the configuration file is unreadable or invalid.
    """

    path = config_path or discover_config_file(directory.resolve())
    if path is None:
        return ScanConfig()
    if config_path is not None and not config_path.is_file():
        raise ConfigError(f"Configuration file {config_path} does not exist")
    if path.name == "pyproject.toml":
        data = _pyproject_section(path) or {}
    else:
        data = _read_toml(path)
    return build_config(data, source=str(path))


__all__ = ["ScanConfig", "build_config", "discover_config_file", "load_config"]
