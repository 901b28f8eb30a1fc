"""Visible → hidden modifier index.

The index merges three ordered sources (built-in, distributable seeds and
user entries) into an immutable :class:`MappingTable`.  Colliding match keys
are unioned rather than overridden, and lookups are additive: every entry
whose key is contained in the canonical visible text contributes its hidden
modifiers.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator

from wellcrafted.core.canonical import canonicalize

__all__ = [
    "MappingEntry",
    "MappingIndex",
    "MappingTable",
    "build_table",
    "coerce_entry",
    "known_hidden_attributes",
    "known_visible_keys",
    "lookup",
]


def _unique_casefold(values: Iterable[object]) -> tuple[str, ...]:
    seen: set[str] = set()
    ordered: list[str] = []
    for value in values:
        if not isinstance(value, str):
            continue
        text = value.strip()
        if not text:
            continue
        folded = text.casefold()
        if folded in seen:
            continue
        seen.add(folded)
        ordered.append(text)
    return tuple(ordered)


@dataclass(frozen=True, slots=True)
class MappingEntry:
    """A canonical match key and the hidden modifiers it implies."""

    match_key: str
    implied: tuple[str, ...] = ()

    @classmethod
    def create(cls, match: object, hidden: Iterable[object] | str | None = None) -> "MappingEntry":
        """Build an entry, canonicalising ``match`` and de-duplicating ``hidden``."""

        if isinstance(hidden, str):
            hidden = (hidden,)
        return cls(match_key=canonicalize(match), implied=_unique_casefold(hidden or ()))

    def as_dict(self) -> dict[str, object]:
        return {"match": self.match_key, "hidden": list(self.implied)}


def _lookup_key(payload: Mapping[object, object], name: str) -> object:
    for key, value in payload.items():
        if isinstance(key, str) and key.casefold() == name:
            return value
    return None


def coerce_entry(candidate: object) -> MappingEntry | None:
    """Return ``candidate`` as a :class:`MappingEntry` or ``None`` when unusable.

    Raw mappings are read with case-insensitive ``match``/``hidden`` keys.
    Entries whose match text canonicalises to an empty key are discarded.
    """

    if isinstance(candidate, MappingEntry):
        entry = MappingEntry.create(candidate.match_key, candidate.implied)
    elif isinstance(candidate, Mapping):
        hidden = _lookup_key(candidate, "hidden")
        if not isinstance(hidden, (str, list, tuple)):
            hidden = ()
        entry = MappingEntry.create(_lookup_key(candidate, "match"), hidden)
    else:
        return None
    if not entry.match_key:
        return None
    return entry


class MappingTable:
    """Immutable ordered collection of :class:`MappingEntry` keyed by match key."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, MappingEntry] | None = None) -> None:
        self._entries: Mapping[str, MappingEntry] = MappingProxyType(dict(entries or {}))

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[MappingEntry]:
        return iter(self._entries.values())

    def __contains__(self, text: object) -> bool:
        key = canonicalize(text)
        return bool(key) and key in self._entries

    def __repr__(self) -> str:
        return f"MappingTable(entries={len(self._entries)})"

    def get(self, text: object) -> MappingEntry | None:
        return self._entries.get(canonicalize(text))

    @property
    def entries(self) -> tuple[MappingEntry, ...]:
        return tuple(self._entries.values())


def _iter_source(source: object) -> Iterator[MappingEntry]:
    if source is None or isinstance(source, (str, bytes, Mapping)):
        return
    if not isinstance(source, Iterable):
        return
    for candidate in source:
        entry = coerce_entry(candidate)
        if entry is not None:
            yield entry


def build_table(
    built_in: Iterable[object] | None = None,
    seeds: Iterable[object] | None = None,
    user: Iterable[object] | None = None,
) -> MappingTable:
    """Union ``built_in``, ``seeds`` and ``user`` into a :class:`MappingTable`."""

    merged: dict[str, list[str]] = {}
    for source in (built_in, seeds, user):
        for entry in _iter_source(source):
            existing = merged.get(entry.match_key)
            if existing is None:
                merged[entry.match_key] = list(entry.implied)
                continue
            folded = {value.casefold() for value in existing}
            for hidden in entry.implied:
                if hidden.casefold() not in folded:
                    existing.append(hidden)
                    folded.add(hidden.casefold())
    return MappingTable(
        {key: MappingEntry(match_key=key, implied=tuple(hidden)) for key, hidden in merged.items()}
    )


def lookup(visible_text: object, table: MappingTable | None) -> tuple[str, ...] | None:
    """Return the hidden modifiers implied by ``visible_text``.

    Combined two-line display blocks concatenate several game texts, so every
    entry whose key is a substring of the canonical text contributes.
    """

    if table is None or not len(table):
        return None
    key = canonicalize(visible_text)
    if not key:
        return None
    hits: list[str] = []
    for entry in table:
        if entry.match_key in key:
            hits.extend(entry.implied)
    unique = _unique_casefold(hits)
    return unique or None


def known_visible_keys(table: MappingTable | None) -> list[str]:
    if table is None:
        return []
    return sorted({entry.match_key for entry in table})


def known_hidden_attributes(table: MappingTable | None) -> list[str]:
    if table is None:
        return []
    unique = _unique_casefold(hidden for entry in table for hidden in entry.implied)
    return sorted(unique, key=lambda value: (value.casefold(), value))


class MappingIndex:
    """Owner of the current :class:`MappingTable`.

    ``reload`` swaps in a freshly built table; the previous table is never
    modified, so readers holding it keep a consistent view.
    """

    def __init__(self, table: MappingTable | None = None) -> None:
        self._table = table if table is not None else MappingTable()
        self._version = 0

    @classmethod
    def from_sources(
        cls,
        built_in: Iterable[object] | None = None,
        seeds: Iterable[object] | None = None,
        user: Iterable[object] | None = None,
    ) -> "MappingIndex":
        return cls(build_table(built_in, seeds, user))

    @property
    def table(self) -> MappingTable:
        return self._table

    @property
    def version(self) -> int:
        """Counter bumped on every reload."""

        return self._version

    def reload(
        self,
        built_in: Iterable[object] | None = None,
        seeds: Iterable[object] | None = None,
        user: Iterable[object] | None = None,
    ) -> MappingTable:
        self._table = build_table(built_in, seeds, user)
        self._version += 1
        return self._table

    def lookup(self, visible_text: object) -> tuple[str, ...] | None:
        return lookup(visible_text, self._table)

    def known_visible_keys(self) -> list[str]:
        return known_visible_keys(self._table)

    def known_hidden_attributes(self) -> list[str]:
        return known_hidden_attributes(self._table)

    def __len__(self) -> int:
        return len(self._table)
