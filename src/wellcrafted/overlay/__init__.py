"""Frame evaluation for the three-choice overlay."""

from wellcrafted.overlay.evaluator import (
    HiddenLine,
    LaneEvaluation,
    LaneSnapshot,
    OverlayEvaluator,
    PanelEvaluation,
    PanelSnapshot,
)
from wellcrafted.overlay.settings import (
    OverlaySettings,
    load_overlay_defaults,
    load_overlay_settings,
)

__all__ = [
    "HiddenLine",
    "LaneEvaluation",
    "LaneSnapshot",
    "OverlayEvaluator",
    "OverlaySettings",
    "PanelEvaluation",
    "PanelSnapshot",
    "load_overlay_defaults",
    "load_overlay_settings",
]
