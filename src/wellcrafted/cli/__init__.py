"""Command line utilities for WellCrafted."""

from wellcrafted.cli.app import main, run_cli
from wellcrafted.cli.errors import CliError

__all__ = ["CliError", "main", "run_cli"]
