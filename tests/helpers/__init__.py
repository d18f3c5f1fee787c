"""Reusable helpers for buffer-focused tests."""

from __future__ import annotations

from typing import Any, Iterable

from reliability_buffer.buffer import InsertResult, ReliabilityBuffer

__all__ = ["ReleasableItem", "check_buffer_invariants", "insert_all"]


class ReleasableItem:
    """Pooled-payload stand-in that counts ``release`` calls."""

    def __init__(self, value: int) -> None:
        self.value = value
        self.release_count = 0

    def release(self) -> None:
        self.release_count += 1

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"ReleasableItem({self.value})"


def check_buffer_invariants(buffer: ReliabilityBuffer[Any]) -> None:
    start, stop = buffer.window
    assert buffer.read_pos == buffer.next_sequence_number % buffer.capacity
    occupied = list(buffer.slots())
    assert len(occupied) == len(buffer)
    for slot, sequence_number, _ in occupied:
        assert sequence_number % buffer.capacity == slot
        assert start <= sequence_number < stop


def insert_all(buffer: ReliabilityBuffer[Any], sequence_numbers: Iterable[int]) -> list[InsertResult]:
    return [buffer.insert(sequence_number, sequence_number) for sequence_number in sequence_numbers]
