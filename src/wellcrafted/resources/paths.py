"""Locate the mapping seeds and overlay defaults bundled with WellCrafted."""

from __future__ import annotations

from importlib import resources
from pathlib import Path

__all__ = ["config_root", "data_root", "resource_root", "set_resource_root_override"]

_PACKAGE = "wellcrafted.resources"
_LOCAL_ROOT = Path(__file__).resolve().parent

_ROOT_OVERRIDE: Path | None = None


def set_resource_root_override(path: Path | None) -> None:
    """Make :func:`resource_root` return ``path``; ``None`` restores the default."""

    global _ROOT_OVERRIDE
    _ROOT_OVERRIDE = Path(path) if path is not None else None


def resource_root() -> Path:
    """Return the directory holding the ``data`` and ``config`` resources."""

    if _ROOT_OVERRIDE is not None:
        return _ROOT_OVERRIDE
    try:
        root = Path(str(resources.files(_PACKAGE)))
    except ModuleNotFoundError:  # pragma: no cover - running from a bare checkout
        return _LOCAL_ROOT
    return root if root.exists() else _LOCAL_ROOT


def _subdirectory(name: str) -> Path:
    candidate = resource_root() / name
    if candidate.is_dir():
        return candidate
    return _LOCAL_ROOT / name


def data_root() -> Path:
    """Return the directory holding ``HiddenMap.seeds.json``."""

    return _subdirectory("data")


def config_root() -> Path:
    """Return the directory holding packaged configuration defaults."""

    return _subdirectory("config")
