"""
Fold combinators
================

Series counterparts of the collection fan-out: transform, reduce.

Шаги выполняются строго последовательно, в порядке итерации.
"""

from __future__ import annotations

import typing
from collections.abc import Callable, Iterable, Mapping

from .._helpers import entries
from .._tracker import SeriesRun, append, replace
from .._types import Callback, Pair, Transform
from ..scheduler import Scheduler, resolve


# ============================================================================
# transform
# ============================================================================


def transform[A, B](
    items: Iterable[A] | Mapping[typing.Any, typing.Any],
    fn: Transform[A, B] | Transform[Pair[typing.Any, typing.Any], typing.Any],
    callback: Callback[list[B]] | Callback[dict[typing.Any, typing.Any]],
    *,
    scheduler: Scheduler | None = None,
) -> None:
    """
    Sequential map: one task at a time, in iteration order.

    For a Mapping every step receives a Pair(key, value) and must produce a
    Pair (or a 2-tuple); the delivered value is the dict of produced pairs.
    For any other iterable the delivered value is the list of results.
    """
    def call(item: typing.Any, state: typing.Any, cb: Callback[typing.Any]) -> None:
        _ = state
        fn(item, cb)

    if isinstance(items, Mapping):
        SeriesRun(
            entries(items),
            invoke=call,
            fold=_put,
            state={},
            callback=callback,
            scheduler=resolve(scheduler),
            label="transform",
        ).start()
        return

    SeriesRun(
        items,
        invoke=call,
        fold=append,
        state=[],
        callback=callback,
        scheduler=resolve(scheduler),
        label="transform",
    ).start()


def _put(acc: dict[typing.Any, typing.Any], produced: typing.Any) -> dict[typing.Any, typing.Any]:
    key, value = produced
    acc[key] = value
    return acc


# ============================================================================
# reduce
# ============================================================================


def reduce[A, T](
    items: Iterable[A],
    memo: T,
    fn: Callable[[T, A, Callback[T]], None],
    callback: Callback[T],
    *,
    scheduler: Scheduler | None = None,
) -> None:
    """
    Effectful fold: ``fn(acc, item, cb)`` produces the next accumulator.

    Empty input delivers ``memo``. A failure at any step is delivered as is;
    the partial accumulator is never exposed.
    """
    def call(item: A, acc: T, cb: Callback[T]) -> None:
        fn(acc, item, cb)

    SeriesRun(
        items,
        invoke=call,
        fold=replace,
        state=memo,
        callback=callback,
        scheduler=resolve(scheduler),
        label="reduce",
    ).start()


__all__ = ("reduce", "transform")
