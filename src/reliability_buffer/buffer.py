"""Fixed-capacity reorder buffer keyed by sequence numbers.

Items tagged with a monotonically increasing sequence number may arrive in
any order and more than once.  The buffer stores each of them in a
preallocated slot addressed by ``sequence_number % capacity`` and releases
them strictly in sequence order through :meth:`ReliabilityBuffer.drain` as
soon as a contiguous run is available.  Memory stays bounded: anything that
does not fit the current window is rejected rather than evicting
undelivered data.
"""

from __future__ import annotations

import enum
from typing import Generic, Iterator, Optional, TypeVar


T = TypeVar("T")


DEFAULT_RELIABILITY_BUFFER_SIZE = 64

__all__ = [
    "DEFAULT_RELIABILITY_BUFFER_SIZE",
    "InsertResult",
    "ReliabilityBuffer",
]


class InsertResult(enum.Enum):
    """Outcome of :meth:`ReliabilityBuffer.insert`."""

    INSERTED = "inserted"
    DUPLICATE = "duplicate"
    EXPIRED = "expired"
    FULL_BUFFER = "full_buffer"

    @property
    def accepted(self) -> bool:
        return self is InsertResult.INSERTED


class ReliabilityBuffer(Generic[T]):
    """Circular buffer restoring sequence order over a sliding window.

    The live window is ``[next_sequence_number, next_sequence_number +
    capacity)``.  Every occupied slot holds a sequence number inside that
    window and ``read_pos`` always equals ``next_sequence_number %
    capacity``.
    """

    __slots__ = ("_capacity", "_sequences", "_items", "_read_pos", "_next_sequence_number", "_size")

    def __init__(self, capacity: int = DEFAULT_RELIABILITY_BUFFER_SIZE) -> None:
        if capacity <= 0:
            raise ValueError("ReliabilityBuffer requires a positive capacity")
        self._capacity = capacity
        self._sequences: list[Optional[int]] = [None] * capacity
        self._items: list[Optional[T]] = [None] * capacity
        self._read_pos = 0
        self._next_sequence_number = 0
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:  # pragma: no cover - delegating to __len__
        return self._size > 0

    def __contains__(self, sequence_number: object) -> bool:
        if not isinstance(sequence_number, int):
            return False
        return self._sequences[sequence_number % self._capacity] == sequence_number

    def __repr__(self) -> str:
        start, stop = self.window
        return (
            f"{type(self).__name__}(capacity={self._capacity}, "
            f"window=[{start}, {stop}), buffered={self._size})"
        )

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def next_sequence_number(self) -> int:
        return self._next_sequence_number

    @property
    def read_pos(self) -> int:
        return self._read_pos

    @property
    def window(self) -> tuple[int, int]:
        """Half-open range of sequence numbers currently accepted."""

        return self._next_sequence_number, self._next_sequence_number + self._capacity

    def insert(self, sequence_number: int, item: T) -> InsertResult:
        """Store ``item`` under ``sequence_number`` when it fits the window.

        Rejected items are never retained and leave the buffer untouched.
        """

        slot = sequence_number % self._capacity
        existing = self._sequences[slot]
        if existing is not None:
            if sequence_number < existing:
                return InsertResult.EXPIRED
            if sequence_number == existing:
                return InsertResult.DUPLICATE
            # The ring wrapped onto a slot still waiting for delivery.
            return InsertResult.FULL_BUFFER

        if sequence_number >= self._next_sequence_number + self._capacity:
            return InsertResult.FULL_BUFFER
        if sequence_number < self._next_sequence_number:
            return InsertResult.DUPLICATE

        self._sequences[slot] = sequence_number
        self._items[slot] = item
        self._size += 1
        return InsertResult.INSERTED

    def drain(self) -> Iterator[T]:
        """Yield the contiguous run starting at ``next_sequence_number``.

        Each item is removed from the buffer before it is yielded, so the
        iterator may be abandoned at any point.  Draining again after
        further inserts resumes from the first undelivered sequence number.
        """

        while True:
            popped = self._pop_ready()
            if popped is None:
                return
            yield popped[1]

    def insert_and_drain(self, sequence_number: int, item: T) -> tuple[InsertResult, list[T]]:
        """Insert ``item`` and collect whatever run became deliverable.

        Nothing is drained when the insert is rejected.
        """

        result = self.insert(sequence_number, item)
        if not result.accepted:
            return result, []
        return result, list(self.drain())

    def reset(self) -> None:
        for index in range(self._capacity):
            self._sequences[index] = None
            self._items[index] = None
        self._read_pos = 0
        self._next_sequence_number = 0
        self._size = 0

    def slots(self) -> Iterator[tuple[int, int, T]]:
        """Iterate ``(slot_index, sequence_number, item)`` for occupied slots."""

        for index in range(self._capacity):
            sequence_number = self._sequences[index]
            if sequence_number is None:
                continue
            yield index, sequence_number, self._items[index]  # type: ignore[misc]

    def _pop_ready(self) -> Optional[tuple[int, T]]:
        idx = self._read_pos
        sequence_number = self._sequences[idx]
        if sequence_number is None:
            return None
        item = self._items[idx]
        self._sequences[idx] = None
        self._items[idx] = None
        self._size -= 1
        self._read_pos = (idx + 1) % self._capacity
        self._next_sequence_number = sequence_number + 1
        return sequence_number, item  # type: ignore[return-value]
