"""
Опускание callback-операций в await.

Run a callback-style operation on the current asyncio loop and get its
outcome back as a Result, a value, or kungfu's LazyCoroResult.
"""

from __future__ import annotations

import asyncio
import logging

from kungfu import LazyCoroResult

from .._helpers import invoke
from .._types import Outcome, Task

logger = logging.getLogger(__name__)


async def to_result[T](start: Task[T]) -> Outcome[T]:
    """
    Start a callback-style operation and await its Result.

    **When to use:** Any combinator call with its callback left open, e.g.
    ``functools.partial(map, items, fn)``.

    Example:
        from functools import partial
        from callflow import lift as L

        result = await L.to_result(partial(map, [1, 2, 3], double))
        # result: Ok([2, 4, 6])
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[Outcome[T]] = loop.create_future()

    def settle(result: Outcome[T]) -> None:
        if future.done():
            logger.debug("operation reported after its awaiter went away: %r", result)
            return
        future.set_result(result)

    invoke(start, settle, label="awaited operation")
    return await future


async def unsafe[T](start: Task[T]) -> T:
    """
    Await the operation and unwrap, raises on Error.

    NOTE: Raises kungfu's UnwrapError carrying the failure cause.
    """
    result = await to_result(start)
    return result.unwrap()


def to_lazy[T](start: Task[T]) -> LazyCoroResult[T, Exception]:
    """
    Wrap the operation as a kungfu LazyCoroResult.

    Nothing starts until the result is awaited; every await starts it anew.
    """
    async def run() -> Outcome[T]:
        return await to_result(start)

    return LazyCoroResult(run)


__all__ = ("to_lazy", "to_result", "unsafe")
