"""Top-level package for WellCrafted.

WellCrafted maps the visible modifier text of each choice in a three-choice
panel to the hidden modifiers it implies, weights both with user profiles
and combines them into a score badge.  The package is host-agnostic: hosts
feed it text and lane geometry and draw whatever :class:`OverlayEvaluator`
returns.
"""

from ._version import __version__
from .core.canonical import canonicalize
from .mapping import MappingEntry, MappingIndex, MappingRepository, build_table, lookup
from .overlay import OverlayEvaluator, OverlaySettings, load_overlay_settings
from .profiles import ProfileSet, ProfileStore, WeightCategory, WeightProfile
from .scoring import combine, format_score, weight_of
from .tracking import GenerationTracker, TrackerStatus

__all__ = [
    "GenerationTracker",
    "MappingEntry",
    "MappingIndex",
    "MappingRepository",
    "OverlayEvaluator",
    "OverlaySettings",
    "ProfileSet",
    "ProfileStore",
    "TrackerStatus",
    "WeightCategory",
    "WeightProfile",
    "__version__",
    "build_table",
    "canonicalize",
    "combine",
    "format_score",
    "load_overlay_settings",
    "lookup",
    "weight_of",
]
