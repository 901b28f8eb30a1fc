"""Bundled resources distributed with WellCrafted."""

from __future__ import annotations

from wellcrafted.resources.paths import (
    config_root,
    data_root,
    resource_root,
    set_resource_root_override,
)

__all__ = ["config_root", "data_root", "resource_root", "set_resource_root_override"]
