"""Argument parsing helpers for the WellCrafted CLI."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Mapping, Optional

from wellcrafted.cli import queries as query_commands
from wellcrafted.cli import mappings as mappings_command
from wellcrafted.cli import profiles as profiles_command
from wellcrafted.configuration import config_section


def add_global_arguments(
    parser: argparse.ArgumentParser, logging_defaults: Optional[Mapping[str, Any]] = None
) -> None:
    """Add the options accepted before any sub-command.

    ``logging_defaults`` supplies the ``level``, ``output`` and ``format``
    defaults; missing keys default to ``None`` so callers can tell which
    options were given explicitly.
    """

    defaults = logging_defaults or {}
    parser.add_argument(
        "--config",
        dest="config_path",
        type=Path,
        default=None,
        help="Path to the TOML configuration file to load.",
    )
    parser.add_argument(
        "--data-dir",
        dest="data_dir",
        type=Path,
        default=None,
        help="Directory holding mapping and profile files (overrides data_dir).",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default=defaults.get("level"),
        help="Logging level (e.g. debug, info, warning).",
    )
    parser.add_argument(
        "--log-output",
        dest="log_output",
        default=defaults.get("output"),
        help="Logging destination (stdout, stderr or a file path).",
    )
    parser.add_argument(
        "--log-format",
        dest="log_format",
        choices=("json", "text"),
        default=defaults.get("format"),
        help="Logging formatter (json or text).",
    )


def build_parser(config: Optional[Mapping[str, Any]] = None) -> argparse.ArgumentParser:
    config = dict(config or {})
    logging_cfg = config_section(config, "logging")

    parser = argparse.ArgumentParser(
        prog="wellcrafted",
        description="WellCrafted: hidden modifier lookup and scoring for the three-choice panel",
    )
    add_global_arguments(
        parser,
        {
            "level": logging_cfg.get("level", "info"),
            "output": logging_cfg.get("output", "stderr"),
            "format": logging_cfg.get("format", "json"),
        },
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    query_commands.register_subparsers(subparsers, config=config)
    mappings_command.register_subparser(subparsers, config=config)
    profiles_command.register_subparser(subparsers, config=config)
    return parser


__all__ = ["add_global_arguments", "build_parser"]
