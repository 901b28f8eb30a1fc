"""Weight resolution and score combination.

Weights live on a -11..+11 slider.  The two extremes are sentinels: -11 bans
a choice and +11 marks it as a favourite.  A favourite wins over everything,
including bans.  Normal scores are clamped to a fixed ±20 band.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Final

import numpy as np

from wellcrafted.core.canonical import canonicalize
from wellcrafted.core.conversions import safe_float
from wellcrafted.profiles.model import WeightCategory, WeightProfile

__all__ = [
    "BANNED_SCORE",
    "BANNED_WEIGHT",
    "FAVORITE_SCORE",
    "FAVORITE_WEIGHT",
    "OVERRUN_ROW",
    "SCORE_LIMIT",
    "combine",
    "format_score",
    "is_score_banned",
    "is_score_favorite",
    "is_weight_banned",
    "is_weight_favorite",
    "weight_of",
]


BANNED_WEIGHT: Final[int] = -11
FAVORITE_WEIGHT: Final[int] = 11
BANNED_SCORE: Final[float] = -math.inf
FAVORITE_SCORE: Final[float] = math.inf
SCORE_LIMIT: Final[float] = 20.0

# Every "overrun" phrasing shares this slider row.
OVERRUN_ROW: Final[str] = canonicalize("Area is overrun by the Abyssal")
_OVERRUN_TOKEN: Final[str] = "overrun"


def is_weight_banned(weight: float) -> bool:
    return weight <= BANNED_WEIGHT


def is_weight_favorite(weight: float) -> bool:
    return weight >= FAVORITE_WEIGHT


def is_score_banned(score: float) -> bool:
    return score == BANNED_SCORE


def is_score_favorite(score: float) -> bool:
    return score == FAVORITE_SCORE


def weight_of(
    profile: WeightProfile | None,
    category: WeightCategory | str,
    attribute_text: object,
) -> float:
    """Return the weight of ``attribute_text`` in ``category`` (``0.0`` if unset)."""

    if profile is None:
        return 0.0
    table = profile.weights(category)
    key = canonicalize(attribute_text)
    if table is None or not key:
        return 0.0
    value = table.get(key)
    if value is None and _OVERRUN_TOKEN in key:
        value = table.get(OVERRUN_ROW)
    return safe_float(value)


def combine(
    visible_default: object,
    visible_desecrated: object,
    hidden_weights: Iterable[object] | None,
    profile: WeightProfile | None = None,
) -> float:
    """Combine the weights of one choice into a score.

    Returns :data:`FAVORITE_SCORE` when any weight reaches the favourite
    sentinel, :data:`BANNED_SCORE` when any weight reaches the ban sentinel,
    otherwise the bias-scaled sum clamped to ``[-20, 20]``.
    """

    default_weight = safe_float(visible_default)
    desecrated_weight = safe_float(visible_desecrated)
    hidden = np.asarray([safe_float(value) for value in (hidden_weights or ())], dtype=float)

    weights = np.concatenate(([default_weight, desecrated_weight], hidden))
    if np.any(weights >= FAVORITE_WEIGHT):
        return FAVORITE_SCORE
    if np.any(weights <= BANNED_WEIGHT):
        return BANNED_SCORE

    hidden_average = float(hidden.mean()) if hidden.size else 0.0
    bias_default = safe_float(profile.bias_default) if profile is not None else 0.0
    bias_desecrated = safe_float(profile.bias_desecrated) if profile is not None else 0.0
    bias_hidden = safe_float(profile.bias_hidden) if profile is not None else 0.0

    total = (
        default_weight * (1.0 + bias_default)
        + desecrated_weight * (1.0 + bias_desecrated)
        + hidden_average * (1.0 + bias_hidden)
    )
    if math.isnan(total):
        total = 0.0
    return float(np.clip(total, -SCORE_LIMIT, SCORE_LIMIT))


def format_score(score: float) -> str:
    """Badge label for ``score``."""

    if is_score_favorite(score):
        return "FAVORITE"
    if is_score_banned(score):
        return "BANNED"
    return f"{score:.1f}"
