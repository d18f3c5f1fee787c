"""Command line application entry point for reliability-buffer."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Mapping, Optional, Sequence

from ..configuration import BufferSettings, load_cli_config
from ..logging.config import setup_logging
from ..receiver import SequencedReceiver
from .errors import CliError, log_cli_error
from .io import ResetMarker, load_arrivals
from .parser import add_global_arguments, build_parser


def _handle_replay(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    events = load_arrivals(namespace.arrivals)
    receiver: SequencedReceiver[Any] = SequencedReceiver(
        namespace.capacity, name=str(namespace.arrivals)
    )

    delivered: list[Any] = []
    for event in events:
        if isinstance(event, ResetMarker):
            receiver.reset()
            continue
        delivered.extend(receiver.receive(event.sequence_number, event.item))

    if namespace.output_format == "text":
        return "\n".join(str(item) for item in delivered)
    payload = {
        "delivered": delivered,
        "pending": receiver.pending,
        "next_sequence_number": receiver.next_sequence_number,
        "statistics": receiver.statistics,
    }
    return json.dumps(payload, indent=2, sort_keys=True)


def _resolve_logging_config(
    config: Mapping[str, Any], preliminary: argparse.Namespace
) -> dict[str, Any]:
    section = config.get("logging", {})
    logging_config = dict(section) if isinstance(section, Mapping) else {}
    if preliminary.log_level is not None:
        logging_config["level"] = preliminary.log_level
    if preliminary.log_output is not None:
        logging_config["output"] = preliminary.log_output
    if preliminary.log_format is not None:
        logging_config["format"] = preliminary.log_format
    logging_config.setdefault("level", "info")
    logging_config.setdefault("output", "stderr")
    logging_config.setdefault("format", "json")
    return logging_config


def _emit(message: str) -> None:
    if not message:
        return
    sys.stdout.write(message)
    if not message.endswith("\n"):
        sys.stdout.write("\n")


def run_cli(args: Optional[Sequence[str]] = None) -> str:
    """Execute the reliability-buffer command line interface."""

    config_parser = argparse.ArgumentParser(add_help=False)
    add_global_arguments(config_parser)
    preliminary, _ = config_parser.parse_known_args(args)

    config = load_cli_config(preliminary.config_path)
    config["logging"] = _resolve_logging_config(config, preliminary)
    try:
        setup_logging(config)
        BufferSettings.from_config(config)
    except ValueError as exc:
        error = CliError(
            f"Invalid configuration: {exc}",
            category="usage",
            context={"config_path": config.get("_config_path")},
        )
        log_cli_error(error.payload, exc_info=exc)
        _emit(error.payload.message)
        raise SystemExit(error.status_code) from exc

    parser = build_parser(config)
    namespace = parser.parse_args(args)

    try:
        result = namespace.handler(namespace, config=config)
    except CliError as exc:
        if not exc.logged:
            log_cli_error(exc.payload, exc_info=exc)
            exc.logged = True
        _emit(exc.payload.message)
        raise SystemExit(exc.status_code) from exc
    _emit(result)
    return result


def main() -> None:  # pragma: no cover - thin wrapper
    run_cli()


if __name__ == "__main__":  # pragma: no cover - CLI invocation guard
    main()
