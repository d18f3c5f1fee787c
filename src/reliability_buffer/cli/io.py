"""Arrival-log readers for the reliability-buffer CLI.

An arrival log lists what a transport handed over, one arrival per line,
in arrival order.  Two spellings are accepted and may be mixed:

* JSON objects: ``{"sequence": 3, "item": "payload"}`` or ``{"reset": true}``.
* Plain text: ``3 payload`` (the payload is optional) or ``reset``.

Blank lines and lines starting with ``#`` are ignored.
"""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Union

from reliability_buffer.cli.errors import CliError

__all__ = ["Arrival", "ResetMarker", "ArrivalEvent", "iter_arrivals", "load_arrivals"]


@dataclass(frozen=True)
class Arrival:
    sequence_number: int
    item: Any


@dataclass(frozen=True)
class ResetMarker:
    """Session restart observed upstream."""


ArrivalEvent = Union[Arrival, ResetMarker]

_RESET_KEYWORD = "reset"


_MAX_SEQUENCE_NUMBER = 2**64 - 1


def _invalid_sequence(message: str, line_number: int, raw: Any) -> CliError:
    return CliError(
        f"Line {line_number}: {message}, got {raw!r}.",
        category="io",
        context={"line": line_number, "sequence": raw},
    )


def _parse_sequence(raw: Any, line_number: int) -> int:
    if isinstance(raw, bool):
        raise _invalid_sequence("sequence number must be an integer", line_number, raw)
    if isinstance(raw, float):
        if not raw.is_integer():
            raise _invalid_sequence("sequence number must be an integer", line_number, raw)
        raw = int(raw)
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise _invalid_sequence("sequence number must be an integer", line_number, raw) from None
    if value < 0:
        raise _invalid_sequence("sequence number must not be negative", line_number, raw)
    if value > _MAX_SEQUENCE_NUMBER:
        raise _invalid_sequence("sequence number exceeds 64 bits", line_number, raw)
    return value


def _parse_json_line(text: str, line_number: int) -> ArrivalEvent:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CliError(
            f"Line {line_number}: invalid JSON ({exc.msg}).",
            category="io",
            context={"line": line_number},
        ) from exc
    if not isinstance(payload, dict):
        raise CliError(
            f"Line {line_number}: expected a JSON object.",
            category="io",
            context={"line": line_number},
        )
    if payload.get(_RESET_KEYWORD) is True:
        return ResetMarker()
    if "sequence" not in payload:
        raise CliError(
            f"Line {line_number}: missing 'sequence' field.",
            category="io",
            context={"line": line_number},
        )
    return Arrival(_parse_sequence(payload["sequence"], line_number), payload.get("item"))


def _parse_text_line(text: str, line_number: int) -> ArrivalEvent:
    head, *rest = text.split(None, 1)
    payload = rest[0].strip() if rest else ""
    if head.lower() == _RESET_KEYWORD and not payload:
        return ResetMarker()
    sequence_number = _parse_sequence(head, line_number)
    return Arrival(sequence_number, payload if payload else str(sequence_number))


def iter_arrivals(lines: Iterable[str]) -> Iterator[ArrivalEvent]:
    for line_number, raw_line in enumerate(lines, start=1):
        text = raw_line.strip()
        if not text or text.startswith("#"):
            continue
        if text.startswith("{"):
            yield _parse_json_line(text, line_number)
        else:
            yield _parse_text_line(text, line_number)


def _unreadable(source: str, exc: Exception) -> CliError:
    return CliError(
        f"Unable to read arrival log {source}: {exc}",
        category="io",
        context={"path": source},
    )


def load_arrivals(source: Union[str, Path]) -> List[ArrivalEvent]:
    """Read every arrival from ``source`` (``-`` reads standard input)."""

    if str(source) == "-":
        try:
            return list(iter_arrivals(sys.stdin))
        except (OSError, UnicodeDecodeError) as exc:
            raise _unreadable("<stdin>", exc) from exc
    path = Path(source).expanduser()
    if not path.exists():
        raise CliError(
            f"Arrival log not found: {path}",
            category="not_found",
            context={"path": str(path)},
        )
    try:
        with path.open("r", encoding="utf-8") as handle:
            return list(iter_arrivals(handle))
    except (OSError, UnicodeDecodeError) as exc:
        raise _unreadable(str(path), exc) from exc
