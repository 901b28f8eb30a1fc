"""Panel visibility, generation and grace-window tracking."""

from wellcrafted.tracking.generation import (
    LANE_COUNT,
    MIN_LANE_EXTENT,
    GenerationTracker,
    LaneObservation,
    Rect,
    TrackerStatus,
    fingerprint,
)

__all__ = [
    "LANE_COUNT",
    "MIN_LANE_EXTENT",
    "GenerationTracker",
    "LaneObservation",
    "Rect",
    "TrackerStatus",
    "fingerprint",
]
