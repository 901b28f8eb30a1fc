"""The ``profiles`` sub-command group."""

from __future__ import annotations

import argparse
from typing import Any, Callable, Mapping

from wellcrafted.cli.common import CliError, load_profiles, profile_store, require_saved
from wellcrafted.profiles import ProfileSet, WeightCategory

_CATEGORY_CHOICES = tuple(category.value for category in WeightCategory)


def register_subparser(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    *,
    config: Mapping[str, Any],
) -> None:
    """Register ``profiles list|create|delete|rename|activate|set-weight``."""

    parser = subparsers.add_parser("profiles", help="Manage weight profiles.")
    actions = parser.add_subparsers(dest="profiles_command", required=True)

    list_parser = actions.add_parser("list", help="List profiles; '*' marks the active one.")
    list_parser.set_defaults(handler=handle_list)

    create_parser = actions.add_parser("create", help="Create an empty profile.")
    create_parser.add_argument("name")
    create_parser.set_defaults(handler=handle_create)

    delete_parser = actions.add_parser("delete", help="Delete a profile.")
    delete_parser.add_argument("name")
    delete_parser.set_defaults(handler=handle_delete)

    rename_parser = actions.add_parser("rename", help="Rename a profile.")
    rename_parser.add_argument("old_name", metavar="OLD")
    rename_parser.add_argument("new_name", metavar="NEW")
    rename_parser.set_defaults(handler=handle_rename)

    activate_parser = actions.add_parser("activate", help="Make a profile the active one.")
    activate_parser.add_argument("name")
    activate_parser.set_defaults(handler=handle_activate)

    weight_parser = actions.add_parser("set-weight", help="Set one slider weight.")
    weight_parser.add_argument("category", choices=_CATEGORY_CHOICES)
    weight_parser.add_argument("text", metavar="TEXT")
    weight_parser.add_argument("value", type=float, metavar="VALUE")
    weight_parser.add_argument(
        "--profile",
        dest="profile",
        default=None,
        help="Profile to edit (default: the active profile).",
    )
    weight_parser.set_defaults(handler=handle_set_weight)


def _mutate(
    namespace: argparse.Namespace,
    config: Mapping[str, Any],
    operation: Callable[[ProfileSet], bool],
    *,
    failure: str,
    success: str,
) -> str:
    store = profile_store(namespace, config)
    profiles = load_profiles(store)
    if not operation(profiles):
        raise CliError(failure, category="rejected", context={"command": namespace.profiles_command})
    require_saved(store.save(profiles), what="profiles")
    return success


def handle_list(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    profiles = load_profiles(profile_store(namespace, config))
    active = profiles.active_name
    return "\n".join(
        f"{'*' if name == active else ' '} {name}" for name in profiles.names()
    )


def handle_create(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    return _mutate(
        namespace,
        config,
        lambda profiles: profiles.create(namespace.name),
        failure=f"Cannot create profile '{namespace.name}'.",
        success=f"Created profile '{namespace.name}'.",
    )


def handle_delete(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    return _mutate(
        namespace,
        config,
        lambda profiles: profiles.delete(namespace.name),
        failure=f"Cannot delete profile '{namespace.name}'.",
        success=f"Deleted profile '{namespace.name}'.",
    )


def handle_rename(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    return _mutate(
        namespace,
        config,
        lambda profiles: profiles.rename(namespace.old_name, namespace.new_name),
        failure=f"Cannot rename profile '{namespace.old_name}' to '{namespace.new_name}'.",
        success=f"Renamed profile '{namespace.old_name}' to '{namespace.new_name}'.",
    )


def handle_activate(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    return _mutate(
        namespace,
        config,
        lambda profiles: profiles.set_active(namespace.name),
        failure=f"Unknown profile '{namespace.name}'.",
        success=f"Active profile: {namespace.name}",
    )


def handle_set_weight(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    return _mutate(
        namespace,
        config,
        lambda profiles: profiles.update_weight(
            namespace.category, namespace.text, namespace.value, profile=namespace.profile
        ),
        failure=f"Cannot set weight for '{namespace.text}'.",
        success=f"Set {namespace.category} weight of '{namespace.text}' to {namespace.value:g}.",
    )
