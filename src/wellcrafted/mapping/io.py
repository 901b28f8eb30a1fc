"""Persistence for hidden-mapping seed and user files.

Mapping files are JSON documents shaped as::

    {"schema": 2, "mappings": [{"match": "...", "hidden": ["...", ...]}]}

Reading is forgiving: missing files are empty, malformed documents degrade to
an empty list with a logged warning, and property names are matched
case-insensitively.  The built-in entries stay available in every case.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path

from wellcrafted.io.results import LoadResult, SaveResult
from wellcrafted.mapping.builtin import builtin_entries
from wellcrafted.mapping.index import MappingEntry, MappingIndex, MappingTable, coerce_entry
from wellcrafted.resources import data_root

__all__ = [
    "MAPPING_SCHEMA",
    "SEEDS_FILENAME",
    "USER_FILENAME",
    "MappingRepository",
    "parse_bulk_import",
    "read_mapping_file",
    "write_mapping_file",
]


logger = logging.getLogger(__name__)

MAPPING_SCHEMA = 2
SEEDS_FILENAME = "HiddenMap.seeds.json"
USER_FILENAME = "HiddenMap.user.json"

_ARROW = "=>"


def _property(payload: Mapping[object, object], name: str) -> object:
    for key, value in payload.items():
        if isinstance(key, str) and key.casefold() == name:
            return value
    return None


def read_mapping_file(path: Path) -> LoadResult[list[MappingEntry]]:
    """Read the mapping entries stored at ``path``."""

    if not path.exists():
        return LoadResult.success([], path=path, existed=False)
    try:
        payload = json.loads(path.read_text(encoding="utf8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning(
            "Failed reading hidden map file '%s': %s",
            path,
            exc,
            extra={"event": "mapping.load_failed", "path": str(path)},
        )
        return LoadResult.failure([], str(exc), path=path)

    if not isinstance(payload, Mapping):
        logger.warning("Hidden map file '%s' is not a JSON object", path)
        return LoadResult.failure([], "document is not a JSON object", path=path)

    schema = _property(payload, "schema")
    if schema is not None and schema != MAPPING_SCHEMA:
        logger.info("Hidden map file '%s' declares schema %r; reading best effort", path, schema)

    raw_entries = _property(payload, "mappings")
    if raw_entries is None:
        return LoadResult.success([], path=path)
    if not isinstance(raw_entries, list):
        logger.warning("Hidden map file '%s' has a non-list 'mappings' property", path)
        return LoadResult.failure([], "'mappings' is not a list", path=path)

    entries = [entry for entry in map(coerce_entry, raw_entries) if entry is not None]
    return LoadResult.success(entries, path=path)


def write_mapping_file(path: Path, entries: Iterable[MappingEntry]) -> SaveResult:
    """Persist ``entries`` to ``path`` using schema 2."""

    normalised = [entry for entry in map(coerce_entry, entries) if entry is not None]
    document = {
        "schema": MAPPING_SCHEMA,
        "mappings": [entry.as_dict() for entry in normalised],
    }
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(document, indent=2, ensure_ascii=False) + "\n", encoding="utf8")
    except OSError as exc:
        logger.error(
            "Failed writing hidden map file '%s': %s",
            path,
            exc,
            extra={"event": "mapping.save_failed", "path": str(path)},
        )
        return SaveResult.failure(path, str(exc))
    return SaveResult.success(path, count=len(normalised))


def parse_bulk_import(buffer: str | None) -> list[MappingEntry]:
    """Parse ``visible => hidden1; hidden2`` lines into mapping entries.

    Blank lines, lines without ``=>`` and lines without any hidden modifier
    are ignored.
    """

    entries: list[MappingEntry] = []
    for line in (buffer or "").splitlines():
        if _ARROW not in line:
            continue
        # text after a second arrow is dropped
        visible, hidden_part = line.split(_ARROW)[:2]
        hidden = [token.strip() for token in hidden_part.split(";")]
        entry = MappingEntry.create(visible.strip(), hidden)
        if entry.match_key and entry.implied:
            entries.append(entry)
    return entries


class MappingRepository:
    """Locate, load and write the seed and user mapping files of a data directory."""

    def __init__(self, data_dir: str | Path, *, seeds_path: str | Path | None = None) -> None:
        self.data_dir = Path(data_dir)
        self.user_path = self.data_dir / USER_FILENAME
        if seeds_path is not None:
            self.seeds_path = Path(seeds_path)
        else:
            local = self.data_dir / SEEDS_FILENAME
            self.seeds_path = local if local.exists() else data_root() / SEEDS_FILENAME

    def load_seeds(self) -> LoadResult[list[MappingEntry]]:
        return read_mapping_file(self.seeds_path)

    def load_user(self) -> LoadResult[list[MappingEntry]]:
        return read_mapping_file(self.user_path)

    def reload(self, index: MappingIndex) -> MappingTable:
        """Rebuild ``index`` from the built-in entries and both files."""

        built_in = builtin_entries()
        seeds = self.load_seeds().value
        user = self.load_user().value
        table = index.reload(built_in, seeds, user)
        logger.info(
            "Hidden mappings: built-in %d + seeds %d + user %d -> total %d",
            len(built_in),
            len(seeds),
            len(user),
            len(table),
            extra={"event": "mapping.reloaded", "total": len(table)},
        )
        return table

    def load_index(self) -> MappingIndex:
        index = MappingIndex()
        self.reload(index)
        return index

    def import_buffer(self, buffer: str | None) -> SaveResult:
        """Replace the user file with the entries parsed from ``buffer``."""

        entries = parse_bulk_import(buffer)
        result = write_mapping_file(self.user_path, entries)
        if result.ok:
            logger.info("Imported %d entries to '%s'", len(entries), self.user_path)
        return result

    def export(self, table: MappingTable) -> SaveResult:
        """Write every entry of ``table`` to the user file."""

        result = write_mapping_file(self.user_path, table)
        if result.ok:
            logger.info("Exported %d mappings to '%s'", result.count, self.user_path)
        return result
