"""JSON persistence for weight profiles.

The profiles document uses schema 2::

    {"schema": 2, "active": "Default",
     "profiles": {"Default": {"visibleDefault": {...}, "visibleDesecrated": {...},
                              "hidden": {...}, "multDefault": 0.0,
                              "multDesecrated": 0.0, "multHidden": 0.0}}}

Schema 1 documents stored ``Visible``/``Hidden`` tables per profile; they are
migrated on load with every key canonicalised and the multipliers reset.
Saving keeps timestamped copies of the previous document in ``Backups``.
"""

from __future__ import annotations

import json
import logging
import shutil
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

from wellcrafted.core.conversions import safe_float
from wellcrafted.io.results import LoadResult, SaveResult
from wellcrafted.profiles.model import (
    ProfileSet,
    WeightProfile,
    canonical_weights,
    default_profile_set,
)

__all__ = [
    "BACKUP_DIRNAME",
    "BACKUP_RETENTION",
    "PROFILES_FILENAME",
    "PROFILES_SCHEMA",
    "ProfileStore",
    "profile_set_from_payload",
    "profile_set_to_payload",
]


logger = logging.getLogger(__name__)

PROFILES_SCHEMA = 2
PROFILES_FILENAME = "WellCraftedProfiles.json"
BACKUP_DIRNAME = "Backups"
BACKUP_RETENTION = 3
_BACKUP_PREFIX = "WellCraftedProfiles_"


def _property(payload: Mapping[Any, Any], name: str) -> Any:
    folded = name.casefold()
    for key, value in payload.items():
        if isinstance(key, str) and key.casefold() == folded:
            return value
    return None


def _schema_of(payload: Mapping[Any, Any]) -> int:
    raw = _property(payload, "schema")
    if raw is None:
        return PROFILES_SCHEMA
    if isinstance(raw, bool):
        return PROFILES_SCHEMA
    try:
        return int(raw)
    except (TypeError, ValueError):
        return PROFILES_SCHEMA


def _profile_from_entry(name: str, entry: Mapping[Any, Any]) -> WeightProfile:
    return WeightProfile(
        name=name,
        visible_default=canonical_weights(_property(entry, "visibleDefault")),
        visible_desecrated=canonical_weights(_property(entry, "visibleDesecrated")),
        hidden=canonical_weights(_property(entry, "hidden")),
        bias_default=safe_float(_property(entry, "multDefault")),
        bias_desecrated=safe_float(_property(entry, "multDesecrated")),
        bias_hidden=safe_float(_property(entry, "multHidden")),
    )


def _migrate_profile(name: str, entry: Mapping[Any, Any]) -> WeightProfile:
    # Schema 1 only knew a single visible table; it becomes the default one.
    return WeightProfile(
        name=name,
        visible_default=canonical_weights(_property(entry, "Visible")),
        hidden=canonical_weights(_property(entry, "Hidden")),
    )


def profile_set_from_payload(payload: Mapping[Any, Any]) -> ProfileSet:
    """Build a :class:`ProfileSet` from a decoded profiles document."""

    schema = _schema_of(payload)
    migrate = schema < PROFILES_SCHEMA
    if migrate:
        logger.info("Migrating profiles from schema %d to %d", schema, PROFILES_SCHEMA)

    profiles: Dict[str, WeightProfile] = {}
    raw_profiles = _property(payload, "profiles")
    if isinstance(raw_profiles, Mapping):
        for raw_name, entry in raw_profiles.items():
            if not isinstance(raw_name, str) or not raw_name.strip():
                continue
            if not isinstance(entry, Mapping):
                logger.warning("Skipping malformed profile '%s'", raw_name)
                continue
            name = raw_name.strip()
            profiles[name] = _migrate_profile(name, entry) if migrate else _profile_from_entry(name, entry)
    elif raw_profiles is not None:
        logger.warning("Ignoring non-object 'profiles' property")

    active = _property(payload, "active")
    return ProfileSet(profiles, active=active if isinstance(active, str) else None)


def profile_set_to_payload(profile_set: ProfileSet) -> dict[str, Any]:
    """Serialise ``profile_set`` as a schema 2 document."""

    profile_set.normalise_keys()
    profiles: dict[str, Any] = {}
    for name in profile_set.names():
        profile = profile_set.get(name)
        assert profile is not None
        profiles[name] = {
            "visibleDefault": dict(profile.visible_default),
            "visibleDesecrated": dict(profile.visible_desecrated),
            "hidden": dict(profile.hidden),
            "multDefault": profile.bias_default,
            "multDesecrated": profile.bias_desecrated,
            "multHidden": profile.bias_hidden,
        }
    return {
        "schema": PROFILES_SCHEMA,
        "active": profile_set.active_name,
        "profiles": profiles,
    }


class ProfileStore:
    """Load and save the profiles document of a data directory."""

    def __init__(self, directory: str | Path, *, filename: str = PROFILES_FILENAME) -> None:
        self.directory = Path(directory)
        self.path = self.directory / filename
        self.backup_dir = self.directory / BACKUP_DIRNAME

    def load(self) -> LoadResult[ProfileSet]:
        if not self.path.exists():
            logger.info("No profiles file found, using defaults for '%s'", self.path)
            return LoadResult.success(default_profile_set(), path=self.path, existed=False)
        try:
            payload = json.loads(self.path.read_text(encoding="utf8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning(
                "Error loading profiles from '%s': %s",
                self.path,
                exc,
                extra={"event": "profiles.load_failed", "path": str(self.path)},
            )
            return LoadResult.failure(default_profile_set(), str(exc), path=self.path)
        if not isinstance(payload, Mapping):
            logger.warning("Profiles file '%s' is not a JSON object, using defaults", self.path)
            return LoadResult.failure(
                default_profile_set(), "document is not a JSON object", path=self.path
            )

        profile_set = profile_set_from_payload(payload)
        logger.info("Loaded %d profiles", len(profile_set))
        return LoadResult.success(profile_set, path=self.path)

    def save(self, profile_set: ProfileSet) -> SaveResult:
        payload = profile_set_to_payload(profile_set)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            backup = self._create_backup()
            self.path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf8")
        except OSError as exc:
            logger.error(
                "Error saving profiles to '%s': %s",
                self.path,
                exc,
                extra={"event": "profiles.save_failed", "path": str(self.path)},
            )
            return SaveResult.failure(self.path, str(exc))
        logger.info("Profiles saved to '%s'", self.path)
        return SaveResult.success(self.path, count=len(profile_set), backup=backup)

    def backups(self) -> list[Path]:
        """Return existing backups, newest first."""

        if not self.backup_dir.is_dir():
            return []
        candidates = [
            path for path in self.backup_dir.glob(f"{_BACKUP_PREFIX}*.json") if path.is_file()
        ]
        return sorted(candidates, key=lambda path: (path.stat().st_mtime, path.name), reverse=True)

    def _create_backup(self) -> Path | None:
        if not self.path.exists():
            return None
        try:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
            target = self.backup_dir / f"{_BACKUP_PREFIX}{stamp}.json"
            shutil.copyfile(self.path, target)
            for stale in self.backups()[BACKUP_RETENTION:]:
                stale.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Backup creation failed: %s", exc)
            return None
        return target
