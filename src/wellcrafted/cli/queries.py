"""The ``canonicalize``, ``lookup`` and ``score`` sub-commands."""

from __future__ import annotations

import argparse
from typing import Any, Mapping

from wellcrafted.cli.common import CliError, load_index, load_profiles, profile_store
from wellcrafted.core.canonical import canonicalize
from wellcrafted.overlay.settings import load_overlay_settings
from wellcrafted.profiles.model import WeightCategory
from wellcrafted.scoring import classify_score, combine, format_score, weight_of

_NO_MAPPING = "(none)"


def register_subparsers(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    *,
    config: Mapping[str, Any],
) -> None:
    canonical_parser = subparsers.add_parser(
        "canonicalize",
        help="Print the canonical key of each text, one per line.",
    )
    canonical_parser.add_argument("texts", nargs="+", metavar="TEXT")
    canonical_parser.set_defaults(handler=handle_canonicalize)

    lookup_parser = subparsers.add_parser(
        "lookup",
        help="List the hidden modifiers implied by a visible modifier text.",
    )
    lookup_parser.add_argument("text", metavar="TEXT")
    lookup_parser.set_defaults(handler=handle_lookup)

    score_parser = subparsers.add_parser(
        "score",
        help="Score a visible modifier text with a weight profile.",
    )
    score_parser.add_argument("text", metavar="TEXT")
    score_parser.add_argument(
        "--profile",
        dest="profile",
        default=None,
        help="Profile used for the weights (default: the active profile).",
    )
    score_parser.set_defaults(handler=handle_score)


def handle_canonicalize(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    return "\n".join(canonicalize(text) for text in namespace.texts)


def handle_lookup(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    implied = load_index(namespace, config).lookup(namespace.text)
    if not implied:
        return _NO_MAPPING
    return "\n".join(implied)


def handle_score(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    profiles = load_profiles(profile_store(namespace, config))
    if namespace.profile is None:
        profile = profiles.active_profile
    else:
        profile = profiles.get(namespace.profile)
        if profile is None:
            raise CliError(
                f"Unknown profile '{namespace.profile}'.",
                category="not_found",
                context={"profile": namespace.profile},
            )

    settings = load_overlay_settings(config)
    implied = load_index(namespace, config).lookup(namespace.text) or ()
    lines: list[str] = []
    hidden_weights: list[float] = []
    for attribute in implied:
        weight = weight_of(profile, WeightCategory.HIDDEN, attribute)
        hidden_weights.append(weight)
        lines.append(f"{attribute}  ({weight:.1f})")
    if not lines:
        lines.append(settings.placeholder)

    score = combine(
        weight_of(profile, WeightCategory.DEFAULT, namespace.text),
        weight_of(profile, WeightCategory.DESECRATED, namespace.text),
        hidden_weights,
        profile,
    )
    band = classify_score(score, settings.thresholds)
    lines.append(f"score: {format_score(score)} [{band.value}] (profile: {profile.name})")
    return "\n".join(lines)
