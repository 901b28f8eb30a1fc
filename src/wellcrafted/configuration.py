"""Helpers to load the ``[tool.wellcrafted]`` project configuration."""

from __future__ import annotations

import logging
from collections.abc import Mapping as ABCMapping
from pathlib import Path
from typing import Any

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - Python < 3.11 fallback
    import tomli as tomllib  # type: ignore


logger = logging.getLogger(__name__)

PROJECT_FILENAME = "pyproject.toml"
TOOL_SECTION = "wellcrafted"
KNOWN_KEYS = frozenset({"data_dir", "logging", "overlay"})


def _as_dict(payload: ABCMapping[str, Any]) -> dict[str, Any]:
    """Recursively coerce TOML mappings into regular dictionaries."""

    result: dict[str, Any] = {}
    for key, value in payload.items():
        if isinstance(value, ABCMapping):
            value = _as_dict(value)
        elif isinstance(value, list):
            value = [_as_dict(item) if isinstance(item, ABCMapping) else item for item in value]
        result[str(key)] = value
    return result


def pyproject_path_for(candidate: Path) -> Path | None:
    """Map a directory or ``pyproject.toml`` path to the file to read."""

    candidate = candidate.expanduser()
    if candidate.name == PROJECT_FILENAME:
        return candidate
    if candidate.suffix:
        return None
    return candidate / PROJECT_FILENAME


def load_project_config(path: Path) -> tuple[dict[str, Any], Path] | None:
    """Load ``[tool.wellcrafted]`` from the ``pyproject.toml`` at ``path``.

    Returns the section as plain dictionaries with the resolved file path,
    or ``None`` when the file or the section is missing.  Unknown keys are
    kept but logged so typos do not go unnoticed.
    """

    pyproject_path = pyproject_path_for(path)
    if pyproject_path is None:
        return None
    pyproject_path = pyproject_path.resolve(strict=False)
    if not pyproject_path.is_file():
        return None

    with pyproject_path.open("rb") as handle:
        document = tomllib.load(handle)

    section = config_section(config_section(document, "tool"), TOOL_SECTION)
    if not section:
        return None

    unknown = sorted(set(section) - KNOWN_KEYS)
    if unknown:
        logger.warning(
            "Ignoring unknown [tool.%s] keys: %s",
            TOOL_SECTION,
            ", ".join(unknown),
            extra={"event": "config.unknown_keys", "path": str(pyproject_path)},
        )
    return section, pyproject_path


def config_section(config: ABCMapping[str, Any] | None, name: str) -> dict[str, Any]:
    """Return ``config[name]`` as a new dict, or ``{}`` if it is not a table."""

    value = (config or {}).get(name)
    if isinstance(value, ABCMapping):
        return _as_dict(value)
    return {}


def deep_merge(base: dict[str, Any], overrides: ABCMapping[str, Any]) -> dict[str, Any]:
    """Merge ``overrides`` into ``base`` recursively and return ``base``."""

    for key, value in overrides.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, ABCMapping):
            deep_merge(current, value)
        elif isinstance(value, ABCMapping):
            base[str(key)] = deep_merge({}, value)
        else:
            base[str(key)] = value
    return base


__all__ = [
    "KNOWN_KEYS",
    "PROJECT_FILENAME",
    "TOOL_SECTION",
    "config_section",
    "deep_merge",
    "load_project_config",
    "pyproject_path_for",
]
