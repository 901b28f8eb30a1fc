"""Built-in visible → hidden modifier mappings.

These entries are always present, whatever the state of the seed and user
files on disk.
"""

from __future__ import annotations

from typing import Final

from wellcrafted.mapping.index import MappingEntry

__all__ = [
    "HIDDEN_ITEM_RARITY",
    "HIDDEN_MAGIC_MONSTERS",
    "HIDDEN_PACK_SIZE",
    "HIDDEN_RARE_MONSTERS",
    "HIDDEN_WAYSTONES",
    "builtin_entries",
]


# Hidden labels double as the row names of the "hidden" weight table.
HIDDEN_RARE_MONSTERS: Final[str] = "# increased Number of Rare Monsters"
HIDDEN_MAGIC_MONSTERS: Final[str] = "# increased Number of Magic Monsters"
HIDDEN_ITEM_RARITY: Final[str] = "# increased Item Rarity"
HIDDEN_WAYSTONES: Final[str] = "# increased Waystones found"
HIDDEN_PACK_SIZE: Final[str] = "# increased Pack Size"

_BUILTIN_SPECS: Final[tuple[tuple[str, tuple[str, ...]], ...]] = (
    (
        "Natural Monster Packs in Area are in a Union of Souls",
        (HIDDEN_PACK_SIZE,),
    ),
    (
        "Natural Rare Monsters in Area are in a Union of Souls with the Map Boss",
        (HIDDEN_RARE_MONSTERS,),
    ),
    (
        "Area has patches of Mana Siphoning Ground",
        (HIDDEN_PACK_SIZE,),
    ),
    (
        "Players are Marked for Death for 10 seconds after killing a Rare or Unique monster",
        (HIDDEN_ITEM_RARITY, HIDDEN_PACK_SIZE),
    ),
)


def builtin_entries() -> tuple[MappingEntry, ...]:
    """Return the built-in mapping entries with canonical match keys."""

    return tuple(MappingEntry.create(match, hidden) for match, hidden in _BUILTIN_SPECS)
