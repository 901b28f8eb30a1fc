"""Logging utilities for WellCrafted."""

from wellcrafted.logging.config import JsonFormatter, setup_logging

__all__ = ["JsonFormatter", "setup_logging"]
