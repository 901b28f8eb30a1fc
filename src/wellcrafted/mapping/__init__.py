"""Hidden modifier mapping: canonical index, built-in entries and files."""

from wellcrafted.mapping.builtin import builtin_entries
from wellcrafted.mapping.index import (
    MappingEntry,
    MappingIndex,
    MappingTable,
    build_table,
    known_hidden_attributes,
    known_visible_keys,
    lookup,
)
from wellcrafted.mapping.io import (
    MappingRepository,
    parse_bulk_import,
    read_mapping_file,
    write_mapping_file,
)

__all__ = [
    "MappingEntry",
    "MappingIndex",
    "MappingRepository",
    "MappingTable",
    "build_table",
    "builtin_entries",
    "known_hidden_attributes",
    "known_visible_keys",
    "lookup",
    "parse_bulk_import",
    "read_mapping_file",
    "write_mapping_file",
]
