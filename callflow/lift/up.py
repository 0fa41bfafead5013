"""
Подъем значений и функций в callback-задачи.

Turn plain values, synchronous functions and coroutines into Task / Transform
callables that the combinators accept.
"""

from __future__ import annotations

import asyncio
import typing
from collections.abc import Awaitable, Callable
from functools import partial

from kungfu import Error, Ok, Result

from .._types import Callback, Task, Transform


def pure[T](value: T) -> Task[T]:
    """
    Task that always succeeds with ``value``.

    Example:
        from callflow import lift as L

        series([L.pure(1), L.pure(2)], print)  # Ok([1, 2])
    """
    def task(callback: Callback[T]) -> None:
        callback(Ok(value))

    return task


def fail(cause: Exception) -> Task[typing.Never]:
    """Task that always fails with ``cause``. Dual of pure()."""
    def task(callback: Callback[typing.Never]) -> None:
        callback(Error(cause))

    return task


def from_sync[A, T](fn: Callable[[A], T]) -> Transform[A, T]:
    """
    Lift a synchronous function into a Transform.

    **When to use:** Bridge between exception-based code and callback
    combinators. Exceptions raised by ``fn`` become Error results.

    Example:
        from callflow import lift as L

        map(["1", "2", "x"], L.from_sync(int), print)  # Error(ValueError(...))
    """
    def transform(value: A, callback: Callback[T]) -> None:
        try:
            produced = fn(value)
        except Exception as exc:
            callback(Error(exc))
            return
        callback(Ok(produced))

    return transform


def _report[T](callback: Callback[T], future: asyncio.Future[typing.Any]) -> None:
    if future.cancelled():
        callback(Error(typing.cast(Exception, asyncio.CancelledError())))
        return
    exc = future.exception()
    if exc is not None:
        if not isinstance(exc, Exception):
            raise exc
        callback(Error(exc))
        return
    value = future.result()
    match value:
        case Ok() | Error():
            callback(value)
        case _:
            callback(Ok(value))


def from_coro[T](factory: Callable[[], Awaitable[Result[T, Exception] | T]]) -> Task[T]:
    """
    Lift a coroutine factory into a Task running on the current asyncio loop.

    The coroutine may return a Result (passed through), a plain value
    (wrapped in Ok) or raise (turned into Error).

    NOTE: factory must be a zero-arg callable; the coroutine is created only
          when the task is invoked, never at lift time.
    """
    def task(callback: Callback[T]) -> None:
        future = asyncio.ensure_future(factory())
        future.add_done_callback(partial(_report, callback))

    return task


def from_async[A, T](fn: Callable[[A], Awaitable[Result[T, Exception] | T]]) -> Transform[A, T]:
    """Lift an async function of one argument into a Transform. See from_coro()."""
    def transform(value: A, callback: Callback[T]) -> None:
        future = asyncio.ensure_future(fn(value))
        future.add_done_callback(partial(_report, callback))

    return transform


__all__ = (
    "fail",
    "from_async",
    "from_coro",
    "from_sync",
    "pure",
)
