"""Ordered, bounded-concurrency map over a thread pool.

``p_map(items, fn, concurrency=n)`` behaves like ``list(map(fn, items))``:
results come back in input order no matter which call finishes first, and at
most ``n`` calls run at the same time. With ``concurrency=1`` the calls run
inline on the caller's thread, one after another.

The first exception raised by ``fn`` propagates; calls that have not started
yet are cancelled.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import TypeVar

InT = TypeVar("InT")
OutT = TypeVar("OutT")


def p_map(
    iterable: Iterable[InT],
    mapper: Callable[[InT], OutT],
    *,
    concurrency: int,
) -> list[OutT]:
    if not isinstance(concurrency, int) or concurrency < 1:
        raise ValueError("concurrency must be a positive integer")

    if concurrency == 1:
        return [mapper(item) for item in iterable]

    pending = enumerate(iterable)
    results: dict[int, OutT] = {}
    in_flight: dict[Future[OutT], int] = {}

    def _top_up(pool: ThreadPoolExecutor) -> None:
        while len(in_flight) < concurrency:
            try:
                idx, item = next(pending)
            except StopIteration:
                return
            in_flight[pool.submit(mapper, item)] = idx

    with ThreadPoolExecutor(max_workers=concurrency) as pool:
        _top_up(pool)
        while in_flight:
            done, _ = wait(in_flight, return_when=FIRST_COMPLETED)
            for fut in done:
                idx = in_flight.pop(fut)
                try:
                    results[idx] = fut.result()
                except Exception:
                    pool.shutdown(wait=False, cancel_futures=True)
                    raise
            _top_up(pool)

    return [results[i] for i in range(len(results))]


__all__ = ["p_map"]
