"""Score combination and band classification."""

from wellcrafted.scoring.colors import (
    Palette,
    ScoreBand,
    Thresholds,
    band_color,
    classify_score,
    classify_weight,
    score_color,
    weight_color,
)
from wellcrafted.scoring.engine import (
    BANNED_SCORE,
    BANNED_WEIGHT,
    FAVORITE_SCORE,
    FAVORITE_WEIGHT,
    combine,
    format_score,
    is_score_banned,
    is_score_favorite,
    is_weight_banned,
    is_weight_favorite,
    weight_of,
)

__all__ = [
    "BANNED_SCORE",
    "BANNED_WEIGHT",
    "FAVORITE_SCORE",
    "FAVORITE_WEIGHT",
    "Palette",
    "ScoreBand",
    "Thresholds",
    "band_color",
    "classify_score",
    "classify_weight",
    "combine",
    "format_score",
    "is_score_banned",
    "is_score_favorite",
    "is_weight_banned",
    "is_weight_favorite",
    "score_color",
    "weight_color",
    "weight_of",
]
