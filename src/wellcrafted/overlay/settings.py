"""Overlay settings resolved from packaged defaults and project overrides."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from wellcrafted.configuration import config_section, deep_merge
from wellcrafted.resources import config_root
from wellcrafted.scoring.colors import Palette, Thresholds

__all__ = [
    "DEFAULTS_RESOURCE_NAME",
    "GRACE_MS_RANGE",
    "OverlaySettings",
    "load_overlay_defaults",
    "load_overlay_settings",
]


logger = logging.getLogger(__name__)

DEFAULTS_RESOURCE_NAME = "overlay.yaml"
GRACE_MS_RANGE = (0, 10_000)
_DEFAULT_GRACE_MS = 3000
_DEFAULT_PLACEHOLDER = "No mod  (0.0)"



def _flag(value: object, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if value is not None:
        logger.warning("Invalid boolean %r; using %s", value, default)
    return default

@dataclass(frozen=True)
class OverlaySettings:
    """Knobs consumed by :class:`wellcrafted.overlay.OverlayEvaluator`."""

    grace_ms: int = _DEFAULT_GRACE_MS
    log_unknown_hidden: bool = True
    placeholder: str = _DEFAULT_PLACEHOLDER
    thresholds: Thresholds = field(default_factory=Thresholds)
    palette: Palette = field(default_factory=Palette)

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> "OverlaySettings":
        if not isinstance(payload, Mapping):
            return cls()
        low, high = GRACE_MS_RANGE
        raw_grace = payload.get("grace_ms", _DEFAULT_GRACE_MS)
        try:
            grace_ms = int(raw_grace)
        except (TypeError, ValueError):
            logger.warning("Invalid grace_ms %r; using %d", raw_grace, _DEFAULT_GRACE_MS)
            grace_ms = _DEFAULT_GRACE_MS
        grace_ms = max(low, min(high, grace_ms))
        placeholder = payload.get("placeholder", _DEFAULT_PLACEHOLDER)
        return cls(
            grace_ms=grace_ms,
            log_unknown_hidden=_flag(payload.get("log_unknown_hidden"), True),
            placeholder=placeholder if isinstance(placeholder, str) else _DEFAULT_PLACEHOLDER,
            thresholds=Thresholds.from_mapping(payload.get("thresholds")),
            palette=Palette.from_mapping(payload.get("palette")),
        )


@lru_cache(maxsize=4)
def _read_defaults(path: Path) -> Mapping[str, Any]:
    with path.open("r", encoding="utf8") as handle:
        payload = yaml.safe_load(handle)
    if not isinstance(payload, Mapping):
        return MappingProxyType({})
    return MappingProxyType(dict(payload))


def load_overlay_defaults(path: str | Path | None = None) -> dict[str, Any]:
    """Return the packaged (or ``path``) YAML overlay defaults as a new dict."""

    candidate = Path(path) if path is not None else config_root() / DEFAULTS_RESOURCE_NAME
    if not candidate.is_file():
        return {}
    try:
        payload = _read_defaults(candidate.resolve())
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Failed reading overlay defaults '%s': %s", candidate, exc)
        return {}
    return copy.deepcopy(dict(payload))


def load_overlay_settings(
    config: Mapping[str, Any] | None = None,
    *,
    defaults_path: str | Path | None = None,
) -> OverlaySettings:
    """Merge ``config["overlay"]`` over the YAML defaults."""

    merged = load_overlay_defaults(defaults_path)
    deep_merge(merged, config_section(config, "overlay"))
    return OverlaySettings.from_mapping(merged)
