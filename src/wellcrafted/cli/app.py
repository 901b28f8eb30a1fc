"""Command line application entry point for WellCrafted."""

from __future__ import annotations

import argparse
import sys
from typing import Any, Callable, Mapping, Optional, Sequence

from wellcrafted.cli.errors import CliError, log_cli_error
from wellcrafted.cli.io import load_cli_config
from wellcrafted.cli.parser import add_global_arguments, build_parser
from wellcrafted.configuration import config_section
from wellcrafted.logging.config import setup_logging


CommandHandler = Callable[[argparse.Namespace, Mapping[str, Any]], str]
_LOGGING_FALLBACKS: Mapping[str, str] = {"level": "info", "output": "stderr", "format": "json"}


def _write_line(text: str) -> None:
    sys.stdout.write(text)
    if not text.endswith("\n"):
        sys.stdout.write("\n")


def run_cli(args: Optional[Sequence[str]] = None) -> str:
    """Execute the WellCrafted command line interface."""

    config_parser = argparse.ArgumentParser(add_help=False)
    add_global_arguments(config_parser)
    preliminary, remaining = config_parser.parse_known_args(args)
    remaining = list(remaining)
    if preliminary.data_dir is not None:
        remaining = ["--data-dir", str(preliminary.data_dir)] + remaining

    config = load_cli_config(preliminary.config_path)
    logging_config = config_section(config, "logging")
    for key, fallback in _LOGGING_FALLBACKS.items():
        explicit = getattr(preliminary, f"log_{key}")
        if explicit is not None:
            logging_config[key] = explicit
        logging_config.setdefault(key, fallback)
    config["logging"] = logging_config
    setup_logging(config)

    namespace = build_parser(config).parse_args(remaining, namespace=preliminary)
    for key in _LOGGING_FALLBACKS:
        setattr(namespace, f"log_{key}", logging_config[key])
    namespace.config = config

    handler: CommandHandler | None = getattr(namespace, "handler", None)
    if handler is None:
        raise CliError(
            f"Unknown command '{getattr(namespace, 'command', None)}'.",
            category="usage",
            context={"command": getattr(namespace, "command", None)},
        )

    try:
        result = handler(namespace, config=config)
    except CliError as exc:
        log_cli_error(exc)
        message = exc.payload.message
        if message:
            _write_line(message)
        raise SystemExit(exc.status_code) from exc
    if result:
        _write_line(result)
    return result


def main() -> None:  # pragma: no cover - thin wrapper
    run_cli()


if __name__ == "__main__":  # pragma: no cover - CLI invocation guard
    main()
