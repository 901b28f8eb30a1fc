"""Shared helpers for the WellCrafted CLI sub-commands."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping

from wellcrafted.cli.errors import CliError
from wellcrafted.cli.io import resolve_data_dir
from wellcrafted.io.results import SaveResult
from wellcrafted.mapping import MappingEntry, MappingIndex, MappingRepository
from wellcrafted.profiles import ProfileSet, ProfileStore

__all__ = [
    "CliError",
    "format_mapping_lines",
    "load_index",
    "load_profiles",
    "profile_store",
    "repository",
    "require_saved",
    "resolve_data_dir_from_namespace",
]


logger = logging.getLogger(__name__)


def resolve_data_dir_from_namespace(namespace: argparse.Namespace, config: Mapping[str, Any]) -> Path:
    return resolve_data_dir(getattr(namespace, "data_dir", None), config)


def repository(namespace: argparse.Namespace, config: Mapping[str, Any]) -> MappingRepository:
    return MappingRepository(resolve_data_dir_from_namespace(namespace, config))


def load_index(namespace: argparse.Namespace, config: Mapping[str, Any]) -> MappingIndex:
    return repository(namespace, config).load_index()


def profile_store(namespace: argparse.Namespace, config: Mapping[str, Any]) -> ProfileStore:
    return ProfileStore(resolve_data_dir_from_namespace(namespace, config))


def load_profiles(store: ProfileStore) -> ProfileSet:
    """Load the profile set, warning (not failing) on a malformed file."""

    result = store.load()
    if not result.ok:
        logger.warning(
            "Using default profiles: %s",
            result.reason,
            extra={"event": "cli.profiles_defaulted", "path": str(store.path)},
        )
    return result.value


def require_saved(result: SaveResult, *, what: str) -> SaveResult:
    if not result:
        raise CliError.from_result(result, what=what)
    return result


def format_mapping_lines(entries: Iterable[MappingEntry]) -> str:
    """Render entries in the ``visible => hidden1; hidden2`` bulk format."""

    return "\n".join(f"{entry.match_key} => {'; '.join(entry.implied)}" for entry in entries)
