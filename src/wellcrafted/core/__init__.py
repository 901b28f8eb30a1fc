"""Pure helpers shared by the mapping, scoring and profile layers."""

from wellcrafted.core.canonical import ALIASES, canonicalize, is_canonical
from wellcrafted.core.conversions import safe_float

__all__ = ["ALIASES", "canonicalize", "is_canonical", "safe_float"]
