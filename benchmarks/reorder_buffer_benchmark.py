"""Benchmark insert-then-drain throughput for ordered and jittered arrivals."""

from __future__ import annotations

import argparse
import random
import statistics
import time

from reliability_buffer.buffer import ReliabilityBuffer


def _format(label: str, durations: list[float], iterations: int) -> str:
    mean = statistics.fmean(durations)
    throughput = iterations / mean if mean else float("nan")
    deviation = statistics.pstdev(durations) if len(durations) > 1 else 0.0
    return (
        f"{label}: {mean * 1_000:.3f} ms +/- {deviation * 1_000:.3f} ms "
        f"({throughput:,.0f} items/s)"
    )


def _jittered(count: int, window: int, seed: int) -> list[int]:
    rng = random.Random(seed)
    order: list[int] = []
    for start in range(0, count, window):
        block = list(range(start, min(start + window, count)))
        rng.shuffle(block)
        order.extend(block)
    return order


def _run(order: list[int], capacity: int) -> int:
    buffer: ReliabilityBuffer[int] = ReliabilityBuffer(capacity)
    delivered = 0
    for sequence_number in order:
        buffer.insert(sequence_number, sequence_number)
        for _ in buffer.drain():
            delivered += 1
    return delivered


def _measure(order: list[int], *, capacity: int, repeats: int) -> list[float]:
    durations: list[float] = []
    for _ in range(repeats):
        start = time.perf_counter()
        _run(order, capacity)
        durations.append(time.perf_counter() - start)
    return durations


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--iterations", type=int, default=100_000)
    parser.add_argument("--capacity", type=int, default=64)
    parser.add_argument("--repeats", type=int, default=5)
    parser.add_argument("--seed", type=int, default=0)
    args = parser.parse_args()

    ordered = list(range(args.iterations))
    jittered = _jittered(args.iterations, args.capacity, args.seed)

    print(_format("ordered", _measure(ordered, capacity=args.capacity, repeats=args.repeats), args.iterations))
    print(_format("jittered", _measure(jittered, capacity=args.capacity, repeats=args.repeats), args.iterations))


if __name__ == "__main__":
    main()
