"""Utilities for retrieving and validating the package version."""

from __future__ import annotations

import re
from importlib import metadata
from pathlib import Path
from typing import Iterable, Optional

from packaging.version import InvalidVersion, Version

_DISTRIBUTION = "wellcrafted"
_CHANGELOG_HEADING = re.compile(r"^## v(?P<version>\d+\.\d+\.\d+)\b")


def _changelog_candidates() -> list[Path]:
    # src/wellcrafted/_version.py -> src/CHANGELOG.md, <repo>/CHANGELOG.md
    parents = Path(__file__).resolve().parents
    return [parent / "CHANGELOG.md" for parent in parents[1:3]]


def _version_from_sources(changelogs: Optional[Iterable[Path]] = None) -> str:
    """Return the newest ``## vX.Y.Z`` heading found in ``CHANGELOG.md``.

    Used in development checkouts where no distribution metadata exists.
    """

    for changelog in changelogs if changelogs is not None else _changelog_candidates():
        if not changelog.is_file():
            continue
        for line in changelog.read_text(encoding="utf-8").splitlines():
            match = _CHANGELOG_HEADING.match(line)
            if match:
                return match.group("version")

    raise RuntimeError(
        f"Unable to determine the '{_DISTRIBUTION}' version from package metadata or "
        "repository sources."
    )


def validate_version(raw_version: str) -> str:
    """Return ``raw_version`` when it is a ``MAJOR.MINOR.PATCH`` version."""

    try:
        parsed = Version(raw_version)
    except InvalidVersion as exc:
        raise RuntimeError(
            f"Invalid version string for '{_DISTRIBUTION}': {raw_version!r}."
        ) from exc

    if len(parsed.release) != 3:
        raise RuntimeError(
            f"The '{_DISTRIBUTION}' version must follow the MAJOR.MINOR.PATCH format. "
            f"Found: {raw_version!r}."
        )
    return raw_version


def _load_version() -> str:
    try:
        raw_version = metadata.version(_DISTRIBUTION)
    except metadata.PackageNotFoundError:
        raw_version = _version_from_sources()
    return validate_version(raw_version)


__version__ = _load_version()

__all__ = ["__version__", "validate_version"]
