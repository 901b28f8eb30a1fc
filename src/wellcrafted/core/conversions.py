"""Numeric coercion helpers."""

from __future__ import annotations

import math

__all__ = ["safe_float"]


def safe_float(value: object, default: float = 0.0) -> float:
    """Convert ``value`` to ``float`` returning ``default`` when impossible.

    ``NaN`` is treated as missing; infinities are preserved so sentinel
    comparisons keep working on them.
    """

    if isinstance(value, bool):
        return default
    try:
        numeric = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    if math.isnan(numeric):
        return default
    return numeric
