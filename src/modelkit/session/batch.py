"""Bounded parallel fan-out with results in input order."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

T = TypeVar("T")
R = TypeVar("R")


async def gather_ordered(
    items: Sequence[T],
    fn: Callable[[T], Awaitable[R]],
    *,
    concurrency: int | None = None,
) -> list[R]:
    """Run `fn` over `items` with at most `concurrency` in flight.

    The i-th result belongs to the i-th item regardless of completion order.
    The first failure cancels the remaining work and is re-raised.
    """
    if not items:
        return []
    sem = asyncio.Semaphore(concurrency or len(items))

    async def run_one(item: T) -> R:
        async with sem:
            return await fn(item)

    tasks = [asyncio.create_task(run_one(item)) for item in items]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for t in tasks:
            t.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
