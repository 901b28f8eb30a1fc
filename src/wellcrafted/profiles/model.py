"""Weight profiles and the named profile set.

Every weight map key is produced by :func:`wellcrafted.core.canonicalize` at
the point it is written, so lookups never depend on comparer configuration.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict

from wellcrafted.core.canonical import canonicalize
from wellcrafted.core.conversions import safe_float

__all__ = [
    "DEFAULT_PROFILE_NAME",
    "ProfileSet",
    "WeightCategory",
    "WeightProfile",
    "canonical_weights",
    "default_profile_set",
]


DEFAULT_PROFILE_NAME = "Default"


class WeightCategory(str, Enum):
    """Weight tables kept per profile."""

    DEFAULT = "default"
    DESECRATED = "desecrated"
    HIDDEN = "hidden"

    @classmethod
    def parse(cls, value: object) -> "WeightCategory | None":
        """Resolve ``value`` case-insensitively, returning ``None`` when unknown."""

        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        token = value.strip().lower()
        for member in cls:
            if member.value == token:
                return member
        return None


def canonical_weights(weights: Mapping[object, object] | None) -> Dict[str, float]:
    """Return ``weights`` re-keyed through the canonicaliser.

    Non-numeric values and keys that canonicalise to ``""`` are dropped.
    """

    result: Dict[str, float] = {}
    if not isinstance(weights, Mapping):
        return result
    for raw_key, raw_value in weights.items():
        key = canonicalize(raw_key)
        if not key or isinstance(raw_value, bool) or not isinstance(raw_value, (int, float)):
            continue
        result[key] = safe_float(raw_value)
    return result


@dataclass
class WeightProfile:
    """Per-category weights and bias multipliers of one named profile."""

    name: str = DEFAULT_PROFILE_NAME
    visible_default: Dict[str, float] = field(default_factory=dict)
    visible_desecrated: Dict[str, float] = field(default_factory=dict)
    hidden: Dict[str, float] = field(default_factory=dict)
    bias_default: float = 0.0
    bias_desecrated: float = 0.0
    bias_hidden: float = 0.0

    def weights(self, category: WeightCategory | str) -> Dict[str, float] | None:
        resolved = WeightCategory.parse(category)
        if resolved is WeightCategory.DEFAULT:
            return self.visible_default
        if resolved is WeightCategory.DESECRATED:
            return self.visible_desecrated
        if resolved is WeightCategory.HIDDEN:
            return self.hidden
        return None

    def bias(self, category: WeightCategory | str) -> float:
        resolved = WeightCategory.parse(category)
        if resolved is WeightCategory.DEFAULT:
            return self.bias_default
        if resolved is WeightCategory.DESECRATED:
            return self.bias_desecrated
        if resolved is WeightCategory.HIDDEN:
            return self.bias_hidden
        return 0.0

    def set_weight(self, category: WeightCategory | str, text: object, value: object) -> str | None:
        """Store ``value`` under the canonical key of ``text``.

        Returns the key written, or ``None`` when the category or text is
        unusable.
        """

        table = self.weights(category)
        key = canonicalize(text)
        if table is None or not key:
            return None
        table[key] = safe_float(value)
        return key

    def normalise_keys(self) -> None:
        """Re-canonicalise every weight map (idempotent)."""

        self.visible_default = canonical_weights(self.visible_default)
        self.visible_desecrated = canonical_weights(self.visible_desecrated)
        self.hidden = canonical_weights(self.hidden)

    def copy(self, *, name: str | None = None) -> "WeightProfile":
        return WeightProfile(
            name=self.name if name is None else name,
            visible_default=dict(self.visible_default),
            visible_desecrated=dict(self.visible_desecrated),
            hidden=dict(self.hidden),
            bias_default=self.bias_default,
            bias_desecrated=self.bias_desecrated,
            bias_hidden=self.bias_hidden,
        )


def _clean_name(name: object) -> str:
    return name.strip() if isinstance(name, str) else ""


class ProfileSet:
    """Named weight profiles with a guaranteed ``Default`` entry.

    Profile names are unique case-insensitively.  Every successful mutation
    bumps :attr:`version` so UIs can poll for changes.
    """

    def __init__(
        self,
        profiles: Mapping[str, WeightProfile] | None = None,
        active: str | None = None,
    ) -> None:
        self._profiles: Dict[str, WeightProfile] = {}
        self._active = DEFAULT_PROFILE_NAME
        self._version = 0
        for name, profile in (profiles or {}).items():
            cleaned = _clean_name(name)
            if not cleaned or self._find(cleaned) is not None:
                continue
            profile.name = cleaned
            self._profiles[cleaned] = profile
        self._ensure_default()
        resolved = self._find(_clean_name(active))
        if resolved is not None:
            self._active = resolved

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def version(self) -> int:
        return self._version

    @property
    def active_name(self) -> str:
        resolved = self._find(self._active)
        return resolved if resolved is not None else self._default_name()

    @property
    def active_profile(self) -> WeightProfile:
        return self._profiles[self.active_name]

    @property
    def default_profile(self) -> WeightProfile:
        return self._profiles[self._default_name()]

    def get(self, name: object) -> WeightProfile | None:
        resolved = self._find(_clean_name(name))
        return self._profiles[resolved] if resolved is not None else None

    def names(self) -> list[str]:
        return sorted(self._profiles, key=lambda value: (value.casefold(), value))

    def __contains__(self, name: object) -> bool:
        return self._find(_clean_name(name)) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._profiles)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def set_active(self, name: object) -> bool:
        resolved = self._find(_clean_name(name))
        if resolved is None:
            return False
        self._active = resolved
        self._touch()
        return True

    def create(self, name: object) -> bool:
        cleaned = _clean_name(name)
        if not cleaned or self._find(cleaned) is not None:
            return False
        self._profiles[cleaned] = WeightProfile(name=cleaned)
        self._touch()
        return True

    def delete(self, name: object) -> bool:
        resolved = self._find(_clean_name(name))
        if resolved is None or self._is_default(resolved):
            return False
        was_active = self.active_name == resolved
        del self._profiles[resolved]
        if was_active:
            self._active = self._default_name()
        self._touch()
        return True

    def rename(self, old_name: object, new_name: object) -> bool:
        resolved = self._find(_clean_name(old_name))
        cleaned = _clean_name(new_name)
        if resolved is None or not cleaned or self._is_default(resolved):
            return False
        if self._find(cleaned) is not None:
            return False
        was_active = self.active_name == resolved
        profile = self._profiles.pop(resolved)
        profile.name = cleaned
        self._profiles[cleaned] = profile
        if was_active:
            self._active = cleaned
        self._touch()
        return True

    def update_weight(
        self,
        category: WeightCategory | str,
        text: object,
        value: object,
        *,
        profile: str | None = None,
    ) -> bool:
        """Set a weight on ``profile`` (the active profile by default)."""

        target = self.active_profile if profile is None else self.get(profile)
        if target is None:
            return False
        if target.set_weight(category, text, value) is None:
            return False
        self._touch()
        return True

    def normalise_keys(self) -> None:
        for profile in self._profiles.values():
            profile.normalise_keys()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _find(self, name: str) -> str | None:
        if not name:
            return None
        if name in self._profiles:
            return name
        folded = name.casefold()
        for existing in self._profiles:
            if existing.casefold() == folded:
                return existing
        return None

    def _default_name(self) -> str:
        resolved = self._find(DEFAULT_PROFILE_NAME)
        assert resolved is not None  # guaranteed by _ensure_default
        return resolved

    def _is_default(self, name: str) -> bool:
        return name.casefold() == DEFAULT_PROFILE_NAME.casefold()

    def _ensure_default(self) -> None:
        if self._find(DEFAULT_PROFILE_NAME) is None:
            self._profiles[DEFAULT_PROFILE_NAME] = WeightProfile(name=DEFAULT_PROFILE_NAME)

    def _touch(self) -> None:
        self._version += 1


def default_profile_set() -> ProfileSet:
    """Profile set synthesised when no profiles file exists yet."""

    profile = WeightProfile(name=DEFAULT_PROFILE_NAME)
    profile.set_weight(WeightCategory.HIDDEN, "Map Item Drop Chance", 3.0)
    profile.set_weight(WeightCategory.DEFAULT, "pack size", 2.0)
    profile.set_weight(WeightCategory.DEFAULT, "quantity", 2.0)
    profile.set_weight(WeightCategory.DEFAULT, "rarity", 0.0)
    return ProfileSet({DEFAULT_PROFILE_NAME: profile}, active=DEFAULT_PROFILE_NAME)
