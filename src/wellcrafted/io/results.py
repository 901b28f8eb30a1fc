"""Explicit outcomes for load/save operations on persisted data."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Generic, TypeVar

__all__ = ["LoadResult", "SaveResult"]


T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class LoadResult(Generic[T]):
    """Outcome of reading a persisted document.

    ``value`` always holds something usable: on failure it is the default the
    caller should fall back to, and ``reason`` explains what went wrong.
    """

    value: T
    ok: bool = True
    reason: str | None = None
    path: Path | None = None
    existed: bool = True

    @classmethod
    def success(cls, value: T, *, path: Path | None = None, existed: bool = True) -> "LoadResult[T]":
        return cls(value=value, ok=True, path=path, existed=existed)

    @classmethod
    def failure(cls, fallback: T, reason: str, *, path: Path | None = None) -> "LoadResult[T]":
        return cls(value=fallback, ok=False, reason=reason, path=path)


@dataclass(frozen=True, slots=True)
class SaveResult:
    """Outcome of writing a persisted document."""

    ok: bool
    path: Path | None = None
    reason: str | None = None
    count: int = 0
    backup: Path | None = None

    @classmethod
    def success(
        cls, path: Path, *, count: int = 0, backup: Path | None = None
    ) -> "SaveResult":
        return cls(ok=True, path=path, count=count, backup=backup)

    @classmethod
    def failure(cls, path: Path | None, reason: str) -> "SaveResult":
        return cls(ok=False, path=path, reason=reason)

    def __bool__(self) -> bool:
        return self.ok
