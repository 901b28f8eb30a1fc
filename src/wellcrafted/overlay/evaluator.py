"""Per-frame evaluation of the three-choice panel.

:class:`OverlayEvaluator` ties the mapping index, the active weight profile
and the generation tracker together.  A caller feeds it one
:class:`PanelSnapshot` per frame and receives a :class:`PanelEvaluation`
describing what should be drawn for every lane.  Nothing here draws; the
result is plain data.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from wellcrafted.core.canonical import canonicalize
from wellcrafted.mapping.index import MappingIndex
from wellcrafted.overlay.settings import OverlaySettings
from wellcrafted.profiles.model import ProfileSet, WeightCategory
from wellcrafted.scoring.colors import (
    RGBA,
    ScoreBand,
    band_color,
    classify_score,
    classify_weight,
)
from wellcrafted.scoring.engine import combine, format_score, weight_of
from wellcrafted.tracking.generation import (
    LANE_COUNT,
    GenerationTracker,
    LaneObservation,
    Rect,
    TrackerStatus,
)

__all__ = [
    "HiddenLine",
    "LaneEvaluation",
    "LaneSnapshot",
    "OverlayEvaluator",
    "PanelEvaluation",
    "PanelSnapshot",
]


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LaneSnapshot:
    """Raw per-lane input captured by the host for one frame."""

    rect: Rect | None = None
    visible: bool = False
    text: str = ""
    text_ready: bool = False

    def to_observation(self) -> LaneObservation:
        return LaneObservation(rect=self.rect, visible=self.visible, text_ready=self.text_ready)


@dataclass(frozen=True, slots=True)
class PanelSnapshot:
    lanes: tuple[LaneSnapshot, ...] = ()

    @classmethod
    def from_lanes(cls, lanes: Sequence[LaneSnapshot | None]) -> "PanelSnapshot":
        padded = [lane if isinstance(lane, LaneSnapshot) else LaneSnapshot() for lane in lanes]
        padded = padded[:LANE_COUNT]
        padded.extend(LaneSnapshot() for _ in range(LANE_COUNT - len(padded)))
        return cls(lanes=tuple(padded))


@dataclass(frozen=True, slots=True)
class HiddenLine:
    text: str
    weight: float
    band: ScoreBand
    color: RGBA


@dataclass(frozen=True, slots=True)
class LaneEvaluation:
    index: int
    text: str
    hidden: tuple[HiddenLine, ...]
    mapped: bool
    visible_default: float
    visible_desecrated: float
    score: float
    label: str
    band: ScoreBand
    color: RGBA


@dataclass(frozen=True, slots=True)
class PanelEvaluation:
    visible: bool
    gated: bool
    generation: int
    in_grace: bool
    lanes: tuple[LaneEvaluation, ...] = field(default_factory=tuple)


class OverlayEvaluator:
    """Evaluate panel snapshots against a mapping index and profile set."""

    def __init__(
        self,
        index: MappingIndex,
        profiles: ProfileSet,
        *,
        tracker: GenerationTracker | None = None,
        settings: OverlaySettings | None = None,
    ) -> None:
        self.index = index
        self.profiles = profiles
        self.settings = settings or OverlaySettings()
        self.tracker = tracker or GenerationTracker(self.settings.grace_ms)
        self._logged_unknown: set[str] = set()
        self._logged_generation = self.tracker.generation

    def lookup_hidden_attributes(self, text: object) -> list[str] | None:
        implied = self.index.lookup(text)
        return list(implied) if implied else None

    def tracker_update(
        self, observations: Sequence[LaneObservation | None] | None, now_ms: int
    ) -> TrackerStatus:
        status = self.tracker.update(observations, now_ms)
        if status.generation != self._logged_generation:
            self._logged_unknown.clear()
            self._logged_generation = status.generation
        return status

    def evaluate(self, snapshot: PanelSnapshot, now_ms: int) -> PanelEvaluation:
        lanes = PanelSnapshot.from_lanes(snapshot.lanes).lanes
        status = self.tracker_update([lane.to_observation() for lane in lanes], now_ms)
        if not status.visible:
            return PanelEvaluation(
                visible=False,
                gated=False,
                generation=status.generation,
                in_grace=False,
            )
        if not status.in_grace and not any(lane.text_ready for lane in lanes):
            return PanelEvaluation(
                visible=True,
                gated=True,
                generation=status.generation,
                in_grace=False,
            )

        evaluated = tuple(
            self.score_lane(position, lane, in_grace=status.in_grace)
            for position, lane in enumerate(lanes)
            if lane.to_observation().geometry_valid
        )
        return PanelEvaluation(
            visible=True,
            gated=False,
            generation=status.generation,
            in_grace=status.in_grace,
            lanes=evaluated,
        )

    def score_lane(self, index: int, lane: LaneSnapshot, *, in_grace: bool) -> LaneEvaluation:
        profile = self.profiles.active_profile
        settings = self.settings
        text = lane.text if isinstance(lane.text, str) else ""

        implied = self.lookup_hidden_attributes(text)
        hidden_lines: list[HiddenLine] = []
        hidden_weights: list[float] = []
        if implied is None:
            self._note_unknown(text)
            if not in_grace and text.strip():
                band = classify_weight(0.0, settings.thresholds)
                hidden_lines.append(
                    HiddenLine(
                        text=settings.placeholder,
                        weight=0.0,
                        band=band,
                        color=band_color(band, settings.palette),
                    )
                )
        else:
            for attribute in implied:
                weight = weight_of(profile, WeightCategory.HIDDEN, attribute)
                band = classify_weight(weight, settings.thresholds)
                hidden_weights.append(weight)
                hidden_lines.append(
                    HiddenLine(
                        text=attribute,
                        weight=weight,
                        band=band,
                        color=band_color(band, settings.palette),
                    )
                )

        visible_default = weight_of(profile, WeightCategory.DEFAULT, text)
        visible_desecrated = weight_of(profile, WeightCategory.DESECRATED, text)
        score = combine(visible_default, visible_desecrated, hidden_weights, profile)
        band = classify_score(score, settings.thresholds)
        return LaneEvaluation(
            index=index,
            text=text,
            hidden=tuple(hidden_lines),
            mapped=implied is not None,
            visible_default=visible_default,
            visible_desecrated=visible_desecrated,
            score=score,
            label=format_score(score),
            band=band,
            color=band_color(band, settings.palette),
        )

    def _note_unknown(self, text: str) -> None:
        if not self.settings.log_unknown_hidden:
            return
        key = canonicalize(text)
        if not key or key in self._logged_unknown:
            return
        self._logged_unknown.add(key)
        logger.debug(
            "No hidden mapping for visible text",
            extra={"event": "overlay.unknown_hidden", "text": text, "key": key},
        )
