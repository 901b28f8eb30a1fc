"""Shared builders for the WellCrafted test-suite."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from wellcrafted.tracking import Rect

__all__ = ["lane_rects", "write_json"]


def write_json(path: Path, payload: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2), encoding="utf8")
    return path


def lane_rects(offset: float = 0.0) -> list[Rect]:
    """Three side-by-side lane rectangles, shifted horizontally by ``offset``."""

    return [Rect(100.0 + offset + index * 220.0, 300.0, 200.0, 120.0) for index in range(3)]
