"""Logging configuration for the ``wellcrafted`` logger hierarchy."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from wellcrafted.configuration import config_section

__all__ = ["JsonFormatter", "ROOT_LOGGER_NAME", "setup_logging"]


ROOT_LOGGER_NAME = "wellcrafted"
_HANDLER_MARKER = "_wellcrafted_handler"
_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Attributes present on every LogRecord; anything else arrived via ``extra``.
_RESERVED_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime"}


def _jsonable(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, Mapping):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_jsonable(item) for item in value]
    return str(value)


class JsonFormatter(logging.Formatter):
    """Render records as one JSON object per line.

    Structured fields passed through ``extra`` are copied onto the payload
    next to the standard ``timestamp``/``level``/``logger``/``message`` keys.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key in _RESERVED_ATTRIBUTES or key.startswith("_"):
                continue
            payload[key] = _jsonable(value)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, sort_keys=False)


def _resolve_level(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        level = logging.getLevelName(value.strip().upper())
        if isinstance(level, int):
            return level
    return logging.INFO


def _build_handler(output: Any) -> logging.Handler:
    target = str(output or "stderr").strip()
    lowered = target.lower()
    if lowered == "stdout":
        return logging.StreamHandler(sys.stdout)
    if lowered == "stderr":
        return logging.StreamHandler(sys.stderr)
    path = Path(target).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, encoding="utf8")


def setup_logging(config: Mapping[str, Any] | None = None) -> logging.Logger:
    """Install a single handler on the ``wellcrafted`` logger.

    ``config["logging"]`` may define ``level`` (name or number), ``output``
    (``stdout``, ``stderr`` or a file path) and ``format`` (``json`` or
    ``text``).  Calling it again replaces the previously installed handler.
    """

    options = config_section(config, "logging")

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            logger.removeHandler(handler)
            handler.close()

    handler = _build_handler(options.get("output"))
    setattr(handler, _HANDLER_MARKER, True)
    if str(options.get("format", "json")).strip().lower() == "text":
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT))
    else:
        handler.setFormatter(JsonFormatter())

    logger.addHandler(handler)
    logger.setLevel(_resolve_level(options.get("level", "info")))
    return logger
