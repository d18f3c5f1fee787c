"""Per-session accounting around :class:`ReliabilityBuffer`.

:class:`SequencedReceiver` is what a transport session feeds with every
``(sequence_number, item)`` pair it decodes.  Accepted items are buffered
and released in order; duplicates, stale arrivals and arrivals that do not
fit the window are dropped, counted in :attr:`SequencedReceiver.statistics`
and logged with structured context so that monitoring code can tell
harmless retransmissions from genuine loss.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar

from .buffer import DEFAULT_RELIABILITY_BUFFER_SIZE, InsertResult, ReliabilityBuffer

__all__ = ["SequencedReceiver"]


logger = logging.getLogger(__name__)


T = TypeVar("T")


def _release(item: Any) -> None:
    release = getattr(item, "release", None)
    if callable(release):
        release()


class SequencedReceiver(Generic[T]):
    """Insert-then-drain loop with delivery statistics."""

    def __init__(
        self,
        capacity: int = DEFAULT_RELIABILITY_BUFFER_SIZE,
        *,
        name: str = "receiver",
    ) -> None:
        self._buffer: ReliabilityBuffer[T] = ReliabilityBuffer(capacity)
        self._name = name
        self._received = 0
        self._inserted = 0
        self._delivered = 0
        self._duplicates = 0
        self._expired = 0
        self._buffer_full = 0
        self._loss_events = 0
        self._resets = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def capacity(self) -> int:
        return self._buffer.capacity

    @property
    def next_sequence_number(self) -> int:
        return self._buffer.next_sequence_number

    @property
    def pending(self) -> int:
        return len(self._buffer)

    @property
    def statistics(self) -> dict[str, int]:
        return {
            "received": self._received,
            "inserted": self._inserted,
            "delivered": self._delivered,
            "duplicates": self._duplicates,
            "expired": self._expired,
            "buffer_full": self._buffer_full,
            "loss_events": self._loss_events,
            "resets": self._resets,
        }

    def record(self, sequence_number: int, item: T) -> InsertResult:
        self._received += 1
        result = self._buffer.insert(sequence_number, item)
        if result is InsertResult.INSERTED:
            self._inserted += 1
            return result

        window_start, window_stop = self._buffer.window
        context = {
            "receiver": self._name,
            "sequence_number": sequence_number,
            "window_start": window_start,
            "window_stop": window_stop,
        }
        if result is InsertResult.DUPLICATE:
            self._duplicates += 1
            logger.info(
                "Duplicate item dropped.",
                extra={"event": "receiver.duplicate", **context},
            )
        elif result is InsertResult.EXPIRED:
            self._expired += 1
            logger.warning(
                "Expired item dropped; its slot holds a newer sequence number.",
                extra={"event": "receiver.expired", **context},
            )
        else:
            self._buffer_full += 1
            self._loss_events += 1
            logger.warning(
                "Reorder buffer full; item outside the window dropped (possible loss).",
                extra={
                    "event": "receiver.buffer_full",
                    "capacity": self._buffer.capacity,
                    **context,
                },
            )
        _release(item)
        return result

    def drain_ready(self) -> list[T]:
        ready = list(self._buffer.drain())
        self._delivered += len(ready)
        return ready

    def receive(self, sequence_number: int, item: T) -> list[T]:
        """Record ``item`` and return every item that is now deliverable."""

        self.record(sequence_number, item)
        return self.drain_ready()

    def reset(self) -> None:
        """Forget the current session, e.g. after the peer renegotiated."""

        discarded = 0
        for _, _, item in self._buffer.slots():
            _release(item)
            discarded += 1
        previous = self._buffer.next_sequence_number
        self._buffer.reset()
        self._resets += 1
        logger.info(
            "Receiver session reset.",
            extra={
                "event": "receiver.reset",
                "receiver": self._name,
                "discarded": discarded,
                "previous_next_sequence_number": previous,
            },
        )
