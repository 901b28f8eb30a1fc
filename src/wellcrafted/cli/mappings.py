"""The ``mappings`` sub-command group."""

from __future__ import annotations

import argparse
from typing import Any, Mapping

from wellcrafted.cli.common import format_mapping_lines, repository, require_saved
from wellcrafted.cli.io import read_text_source


def register_subparser(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    *,
    config: Mapping[str, Any],
) -> None:
    """Register ``mappings list|export|import``."""

    parser = subparsers.add_parser("mappings", help="Inspect and edit hidden modifier mappings.")
    actions = parser.add_subparsers(dest="mappings_command", required=True)

    list_parser = actions.add_parser("list", help="Print every merged mapping.")
    list_parser.set_defaults(handler=handle_list)

    export_parser = actions.add_parser(
        "export",
        help="Write the merged mappings to the user mapping file.",
    )
    export_parser.set_defaults(handler=handle_export)

    import_parser = actions.add_parser(
        "import",
        help="Replace the user mapping file with 'visible => hidden1; hidden2' lines.",
    )
    import_parser.add_argument("source", metavar="FILE", help="Text file to import ('-' for stdin).")
    import_parser.set_defaults(handler=handle_import)


def handle_list(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    index = repository(namespace, config).load_index()
    return format_mapping_lines(index.table)


def handle_export(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    repo = repository(namespace, config)
    index = repo.load_index()
    result = require_saved(repo.export(index.table), what="mappings")
    return f"Exported {result.count} mappings to {result.path}"


def handle_import(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    buffer = read_text_source(namespace.source)
    repo = repository(namespace, config)
    result = require_saved(repo.import_buffer(buffer), what="mappings")
    index = repo.load_index()
    return f"Imported {result.count} mappings to {result.path} ({len(index)} total)"
