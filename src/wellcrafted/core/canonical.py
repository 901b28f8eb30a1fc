"""Canonical keys for display text.

Every weight map and mapping table is keyed exclusively by the output of
:func:`canonicalize`, so texts that only differ by alternate-token brackets,
numeric rolls, case, punctuation or the ``packs``/``pack`` plural compare
equal.  The function is total and idempotent.
"""

from __future__ import annotations

import re
from typing import Final

__all__ = ["ALIASES", "canonicalize", "is_canonical"]


_SPACE_TRANSLATION: Final[dict[int, str]] = {
    0x00A0: " ",  # no-break space
    0x2007: " ",  # figure space
    0x202F: " ",  # narrow no-break space
    0x2009: " ",  # thin space
    0x200A: " ",  # hair space
    0x2013: "-",  # en dash
    0x2014: "-",  # em dash
}

_SQUARE_GROUP = re.compile(r"\[(.*?)\]")
_BRACE_GROUP = re.compile(r"\{(.*?)\}")
_NUMBER = re.compile(r"\d+(?:[.,]\d+)?")
_PLACEHOLDER_RUN = re.compile(r"#{2,}")
_DISALLOWED = re.compile(r"[^a-z0-9 #\-]")
_SPACES = re.compile(r" {2,}")

ALIASES: Final[tuple[tuple[str, str], ...]] = (("packs", "pack"),)

_ALIAS_PATTERNS: Final[tuple[tuple[re.Pattern[str], str], ...]] = tuple(
    (re.compile(rf"\b{re.escape(source)}\b"), target) for source, target in ALIASES
)


def _resolve_group(match: re.Match[str]) -> str:
    body = match.group(1).strip()
    if "|" in body:
        body = body.split("|")[-1].strip()
    return f" {body} "


def canonicalize(text: object) -> str:
    """Return the canonical key for ``text``.

    ``None``, non-string values and blank strings map to ``""``.
    """

    if not isinstance(text, str) or not text.strip():
        return ""

    value = text.translate(_SPACE_TRANSLATION)
    # Alternation groups resolve to their last option.
    value = _SQUARE_GROUP.sub(_resolve_group, value)
    value = _BRACE_GROUP.sub(_resolve_group, value)
    value = value.lower()
    value = _NUMBER.sub("#", value)
    value = _PLACEHOLDER_RUN.sub("#", value)
    value = _DISALLOWED.sub(" ", value)
    for pattern, target in _ALIAS_PATTERNS:
        value = pattern.sub(target, value)
    value = _SPACES.sub(" ", value)
    return value.strip()


def is_canonical(text: object) -> bool:
    """Return ``True`` when ``text`` is already a canonical key."""

    return isinstance(text, str) and canonicalize(text) == text
