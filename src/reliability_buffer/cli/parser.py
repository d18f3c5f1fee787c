"""Argument parsing helpers for the reliability-buffer CLI."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Mapping, Optional

from ..configuration import BufferSettings


def positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from None
    if parsed <= 0:
        raise argparse.ArgumentTypeError(f"capacity must be positive, got {parsed}")
    return parsed


def add_global_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        dest="config_path",
        type=Path,
        default=None,
        help="Path to the pyproject.toml (or its directory) holding [tool.reliability_buffer].",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default=None,
        help="Logging level (default: info).",
    )
    parser.add_argument(
        "--log-output",
        dest="log_output",
        default=None,
        help="Logging destination (stdout, stderr or a file path).",
    )
    parser.add_argument(
        "--log-format",
        dest="log_format",
        choices=("json", "text"),
        default=None,
        help="Logging formatter (json or text).",
    )


def build_parser(config: Optional[Mapping[str, Any]] = None) -> argparse.ArgumentParser:
    from .app import _handle_replay

    settings = BufferSettings.from_config(config)

    parser = argparse.ArgumentParser(
        prog="reliability-buffer",
        description="Replay sequenced arrivals through a bounded reorder buffer.",
    )
    add_global_arguments(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    replay = subparsers.add_parser(
        "replay",
        help="Feed an arrival log through the buffer and print delivered items in order.",
    )
    replay.add_argument(
        "arrivals",
        help="Arrival log (JSON lines or '<sequence> <payload>' lines); '-' reads stdin.",
    )
    replay.add_argument(
        "--capacity",
        type=positive_int,
        default=settings.capacity,
        help=f"Reorder buffer capacity (default: {settings.capacity}).",
    )
    replay.add_argument(
        "--format",
        dest="output_format",
        choices=("json", "text"),
        default="json",
        help="Output format for the delivered items.",
    )
    replay.set_defaults(handler=_handle_replay)

    return parser
