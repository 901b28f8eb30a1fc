"""Rebuild detection for the three-choice panel.

The tracker is fed one set of lane observations per frame.  Screen geometry
is a steadier rebuild signal than element identity or text, because text
often lags the rectangles by a frame or more.  Each lane rectangle is rounded
and packed into a 64-bit word, and the three words are folded into a
fingerprint; a changed fingerprint (or the panel reappearing) counts as a
rebuild, bumps :attr:`GenerationTracker.generation` and opens a grace window
during which consumers relax their text gating.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

__all__ = [
    "LANE_COUNT",
    "MIN_LANE_EXTENT",
    "GenerationTracker",
    "LaneObservation",
    "Rect",
    "TrackerStatus",
    "fingerprint",
    "mix",
    "pack_rect",
]


LANE_COUNT: Final[int] = 3
MIN_LANE_EXTENT: Final[float] = 8.0

_MASK64: Final[int] = 0xFFFFFFFFFFFFFFFF
_MASK16: Final[int] = 0xFFFF
_MIX_SEED: Final[int] = 0x9E3779B97F4A7C15


@dataclass(frozen=True, slots=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    def is_valid(self) -> bool:
        """``True`` when the rectangle is finite and larger than the lane minimum."""

        values = (self.x, self.y, self.width, self.height)
        if not all(isinstance(value, (int, float)) and math.isfinite(value) for value in values):
            return False
        return self.width > MIN_LANE_EXTENT and self.height > MIN_LANE_EXTENT


@dataclass(frozen=True, slots=True)
class LaneObservation:
    """What the caller saw of one lane this frame."""

    rect: Rect | None = None
    visible: bool = False
    text_ready: bool = False

    @property
    def geometry_valid(self) -> bool:
        return self.rect is not None and self.rect.is_valid()


@dataclass(frozen=True, slots=True)
class TrackerStatus:
    visible: bool
    generation: int
    in_grace: bool
    grace_deadline: int
    rebuilt: bool = False


def pack_rect(rect: Rect) -> int:
    """Pack rounded ``x, y, width, height`` into four 16-bit fields."""

    x = round(rect.x) & _MASK16
    y = round(rect.y) & _MASK16
    w = round(rect.width) & _MASK16
    h = round(rect.height) & _MASK16
    return x | (y << 16) | (w << 32) | (h << 48)


def mix(*lanes: int) -> int:
    """Fold packed lane words into one order-sensitive 64-bit value."""

    value = _MIX_SEED
    for lane in lanes:
        value ^= (lane + ((value << 6) & _MASK64) + (value >> 2)) & _MASK64
    return value & _MASK64


def _normalise(observations: Sequence[LaneObservation | None] | None) -> tuple[LaneObservation, ...]:
    lanes = list(observations or ())[:LANE_COUNT]
    lanes.extend([None] * (LANE_COUNT - len(lanes)))
    return tuple(lane if isinstance(lane, LaneObservation) else LaneObservation() for lane in lanes)


def fingerprint(observations: Sequence[LaneObservation | None] | None) -> int:
    """Geometry fingerprint of the lanes; invalid lanes contribute ``0``."""

    packed = [
        pack_rect(lane.rect) if lane.rect is not None and lane.geometry_valid else 0
        for lane in _normalise(observations)
    ]
    return mix(*packed)


class GenerationTracker:
    """Frame-over-frame visibility, generation and grace-window state.

    Calls into a tracker must be serialised; it is mutated in place by
    :meth:`update` and by nothing else.
    """

    def __init__(self, grace_window_ms: int = 3000) -> None:
        self.grace_window_ms = max(0, int(grace_window_ms))
        self.panel_visible = False
        self.generation = 0
        self.grace_deadline = 0
        self.last_fingerprint = 0

    def update(
        self, observations: Sequence[LaneObservation | None] | None, now_ms: int
    ) -> TrackerStatus:
        lanes = _normalise(observations)
        any_visible = any(lane.visible for lane in lanes)
        any_geometry = any(lane.geometry_valid for lane in lanes)

        if not (any_visible and any_geometry):
            self.panel_visible = False
            self.grace_deadline = 0
            self.last_fingerprint = 0
            return self.status(now_ms)

        current = fingerprint(lanes)
        rebuilt = not self.panel_visible or current != self.last_fingerprint
        if rebuilt:
            self.generation += 1
            self.grace_deadline = now_ms + self.grace_window_ms
            self.last_fingerprint = current
        self.panel_visible = True
        return self.status(now_ms, rebuilt=rebuilt)

    def in_grace(self, now_ms: int) -> bool:
        return now_ms < self.grace_deadline

    def status(self, now_ms: int, *, rebuilt: bool = False) -> TrackerStatus:
        return TrackerStatus(
            visible=self.panel_visible,
            generation=self.generation,
            in_grace=self.in_grace(now_ms),
            grace_deadline=self.grace_deadline,
            rebuilt=rebuilt,
        )
