"""Band and colour classification for scores and slider weights."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum

from wellcrafted.core.conversions import safe_float
from wellcrafted.scoring.engine import (
    is_score_banned,
    is_score_favorite,
    is_weight_banned,
    is_weight_favorite,
)

__all__ = [
    "RGBA",
    "Palette",
    "ScoreBand",
    "Thresholds",
    "band_color",
    "classify_score",
    "classify_weight",
    "score_color",
    "weight_color",
]


RGBA = tuple[int, int, int, int]


class ScoreBand(str, Enum):
    FAVORITE = "favorite"
    BANNED = "banned"
    LOW = "low"
    MID = "mid"
    HIGH = "high"


@dataclass(frozen=True, slots=True)
class Thresholds:
    """Score cut-offs separating the low, mid and high bands."""

    low: float = -4.0
    high: float = 4.0

    @classmethod
    def from_mapping(cls, payload: Mapping[str, object] | None) -> "Thresholds":
        if not isinstance(payload, Mapping):
            return cls()
        defaults = cls()
        return cls(
            low=safe_float(payload.get("low"), defaults.low),
            high=safe_float(payload.get("high"), defaults.high),
        )


def _coerce_rgba(value: object, fallback: RGBA) -> RGBA:
    if not isinstance(value, Sequence) or isinstance(value, str) or len(value) not in (3, 4):
        return fallback
    channels: list[int] = []
    for channel in value:
        if isinstance(channel, bool) or not isinstance(channel, (int, float)):
            return fallback
        channels.append(max(0, min(255, int(channel))))
    if len(channels) == 3:
        channels.append(255)
    return (channels[0], channels[1], channels[2], channels[3])


@dataclass(frozen=True, slots=True)
class Palette:
    low: RGBA = (230, 60, 60, 255)
    mid: RGBA = (240, 240, 240, 255)
    high: RGBA = (60, 200, 90, 255)
    favorite: RGBA = (245, 210, 60, 255)

    @classmethod
    def from_mapping(cls, payload: Mapping[str, object] | None) -> "Palette":
        if not isinstance(payload, Mapping):
            return cls()
        defaults = cls()
        return cls(
            low=_coerce_rgba(payload.get("low"), defaults.low),
            mid=_coerce_rgba(payload.get("mid"), defaults.mid),
            high=_coerce_rgba(payload.get("high"), defaults.high),
            favorite=_coerce_rgba(payload.get("favorite"), defaults.favorite),
        )


def _classify(value: float, thresholds: Thresholds) -> ScoreBand:
    if value <= thresholds.low:
        return ScoreBand.LOW
    if value >= thresholds.high:
        return ScoreBand.HIGH
    return ScoreBand.MID


def classify_score(score: float, thresholds: Thresholds | None = None) -> ScoreBand:
    """Return the band of a combined score; sentinels ignore ``thresholds``."""

    if is_score_favorite(score):
        return ScoreBand.FAVORITE
    if is_score_banned(score):
        return ScoreBand.BANNED
    return _classify(score, thresholds or Thresholds())


def classify_weight(weight: float, thresholds: Thresholds | None = None) -> ScoreBand:
    """Return the band of a single slider weight."""

    if is_weight_favorite(weight):
        return ScoreBand.FAVORITE
    if is_weight_banned(weight):
        return ScoreBand.BANNED
    return _classify(weight, thresholds or Thresholds())


def band_color(band: ScoreBand, palette: Palette | None = None) -> RGBA:
    palette = palette or Palette()
    if band is ScoreBand.FAVORITE:
        return palette.favorite
    if band in (ScoreBand.BANNED, ScoreBand.LOW):
        return palette.low
    if band is ScoreBand.HIGH:
        return palette.high
    return palette.mid


def score_color(
    score: float, thresholds: Thresholds | None = None, palette: Palette | None = None
) -> RGBA:
    return band_color(classify_score(score, thresholds), palette)


def weight_color(
    weight: float, thresholds: Thresholds | None = None, palette: Palette | None = None
) -> RGBA:
    return band_color(classify_weight(weight, thresholds), palette)
