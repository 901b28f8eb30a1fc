"""Error reporting for the WellCrafted command line tools.

Handlers raise :class:`CliError`; :func:`wellcrafted.cli.app.run_cli` logs
it once, prints the message and exits with the status of its category.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from wellcrafted.io.results import LoadResult, SaveResult

__all__ = [
    "CliError",
    "ERROR_STATUS_CODES",
    "ErrorPayload",
    "log_cli_error",
]


ERROR_STATUS_CODES: Mapping[str, int] = {
    "runtime": 1,
    "usage": 2,
    "io": 3,
    "not_found": 4,
    # a profile operation refused by the model (duplicate, default, missing)
    "rejected": 5,
}

_FALLBACK_CATEGORY = "runtime"

logger = logging.getLogger(__name__)


def _plain(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


@dataclass(frozen=True, slots=True)
class ErrorPayload:
    """What a failed command reports: status, category, message and context."""

    status_code: int
    category: str
    message: str
    context: Mapping[str, Any]

    @classmethod
    def build(
        cls,
        message: str,
        *,
        category: Optional[str] = None,
        status_code: Optional[int] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> "ErrorPayload":
        resolved = category if category in ERROR_STATUS_CODES else _FALLBACK_CATEGORY
        return cls(
            status_code=ERROR_STATUS_CODES[resolved] if status_code is None else status_code,
            category=resolved,
            message=message,
            context={str(key): _plain(value) for key, value in (context or {}).items()},
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "status_code": self.status_code,
            "category": self.category,
            "message": self.message,
            "context": dict(self.context),
        }


class CliError(RuntimeError):
    """Failure raised by a CLI handler."""

    def __init__(
        self,
        message: str,
        *,
        category: Optional[str] = None,
        status_code: Optional[int] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.payload = ErrorPayload.build(
            message, category=category, status_code=status_code, context=context
        )
        self.logged = False

    @property
    def category(self) -> str:
        return self.payload.category

    @property
    def status_code(self) -> int:
        return self.payload.status_code

    @classmethod
    def from_result(cls, result: LoadResult[Any] | SaveResult, *, what: str) -> "CliError":
        """Describe a failed load or save of ``what`` as an ``io`` error."""

        verb = "write" if isinstance(result, SaveResult) else "read"
        return cls(
            f"Unable to {verb} {what} at {result.path}: {result.reason}",
            category="io",
            context={"path": result.path, "what": what},
        )


def log_cli_error(error: CliError) -> None:
    """Log ``error`` once with its structured payload."""

    if error.logged:
        return
    payload = error.payload
    logger.error(
        payload.message,
        extra={
            "event": "cli.error",
            "category": payload.category,
            "status_code": payload.status_code,
            "context": dict(payload.context),
        },
        exc_info=error,
    )
    error.logged = True
