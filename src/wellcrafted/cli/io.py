"""Configuration and data-directory helpers for the WellCrafted CLI."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from wellcrafted.cli.errors import CliError
from wellcrafted.configuration import PROJECT_FILENAME, load_project_config, pyproject_path_for

__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_DATA_DIR",
    "PROJECT_CONFIG_FILENAME",
    "load_cli_config",
    "read_text_source",
    "resolve_data_dir",
]


CONFIG_ENV_VAR = "WELLCRAFTED_CONFIG"
PROJECT_CONFIG_FILENAME = PROJECT_FILENAME
DEFAULT_DATA_DIR = Path("~/.wellcrafted")


def _normalise_cli_config(payload: Mapping[str, Any], source: Path) -> dict[str, Any]:
    data = {str(key): value for key, value in payload.items()}
    data["_config_path"] = str(source.expanduser().resolve())
    return data


def _iter_unique_paths(candidates: Iterable[Path]) -> List[Path]:
    seen: Dict[Path, None] = {}
    ordered: List[Path] = []
    for candidate in candidates:
        resolved = candidate.expanduser().resolve(strict=False)
        if resolved in seen:
            continue
        seen[resolved] = None
        ordered.append(resolved)
    return ordered


def load_cli_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load CLI defaults from ``pyproject.toml`` files.

    Candidates are tried in order: ``path``, the ``WELLCRAFTED_CONFIG``
    environment variable and the working directory.  The first file with a
    ``[tool.wellcrafted]`` table wins.
    """

    env_config = os.environ.get(CONFIG_ENV_VAR)
    env_path = Path(env_config) if env_config else None

    bases: List[Path] = []
    if path is not None:
        bases.append(path)
    if env_path is not None:
        bases.append(env_path)
    bases.append(Path.cwd())

    candidates = [pyproject_path_for(base) for base in bases]
    for candidate in _iter_unique_paths(item for item in candidates if item is not None):
        loaded = load_project_config(candidate)
        if not loaded:
            continue
        payload, resolved = loaded
        return _normalise_cli_config(payload, resolved)

    return {"_config_path": None}


def resolve_data_dir(explicit: Optional[Path], config: Mapping[str, Any]) -> Path:
    """Return the data directory from ``--data-dir``, ``data_dir`` or the default."""

    if explicit is not None:
        return Path(explicit).expanduser()
    configured = config.get("data_dir")
    if isinstance(configured, str) and configured.strip():
        candidate = Path(configured.strip()).expanduser()
        source = config.get("_config_path")
        if not candidate.is_absolute() and isinstance(source, str):
            candidate = Path(source).parent / candidate
        return candidate
    return DEFAULT_DATA_DIR.expanduser()


def read_text_source(source: str) -> str:
    """Read ``source`` as UTF-8 text; ``-`` reads standard input."""

    if source == "-":
        return sys.stdin.read()
    path = Path(source).expanduser()
    if not path.exists():
        raise CliError(
            f"Import source {path} does not exist",
            category="not_found",
            context={"path": str(path)},
        )
    try:
        return path.read_text(encoding="utf8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CliError(
            f"Unable to read import source {path}: {exc}",
            category="io",
            context={"path": str(path)},
        ) from exc
