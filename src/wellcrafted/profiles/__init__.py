"""Weight profiles: in-memory model and JSON persistence."""

from wellcrafted.profiles.model import (
    DEFAULT_PROFILE_NAME,
    ProfileSet,
    WeightCategory,
    WeightProfile,
    canonical_weights,
    default_profile_set,
)
from wellcrafted.profiles.store import PROFILES_FILENAME, ProfileStore

__all__ = [
    "DEFAULT_PROFILE_NAME",
    "PROFILES_FILENAME",
    "ProfileSet",
    "ProfileStore",
    "WeightCategory",
    "WeightProfile",
    "canonical_weights",
    "default_profile_set",
]
