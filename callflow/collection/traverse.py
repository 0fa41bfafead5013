"""
Traverse combinators
====================

Parallel fan-out over a collection: each, map, concat.

Все элементы планируются в одном тике; порядок завершения произвольный.
"""

from __future__ import annotations

import typing
from collections.abc import Iterable

from .._helpers import entries
from .._tracker import CompletionTracker, fan_out
from .._types import Callback, Outcome, Transform
from ..scheduler import Scheduler, resolve


def each[A](
    items: Iterable[A],
    fn: Transform[A, typing.Any],
    callback: Callback[None],
    *,
    scheduler: Scheduler | None = None,
) -> None:
    """
    Apply fn to every item in parallel. Fail-fast on first error.

    Values produced by fn are ignored; success carries None.
    """
    def on_ok(tracker: CompletionTracker[None], index: int, item: A, value: typing.Any) -> None:
        _ = (tracker, index, item, value)

    def finish(tracker: CompletionTracker[None]) -> None:
        _ = tracker

    fan_out(
        entries(items),
        fn,
        callback,
        scheduler=resolve(scheduler),
        on_ok=on_ok,
        finish=finish,
        ordered=False,
        label="each",
    )


def map[A, B](
    items: Iterable[A],
    fn: Transform[A, B],
    callback: Callback[list[B]],
    *,
    scheduler: Scheduler | None = None,
) -> None:
    """
    Apply fn to every item in parallel, collect results in input order.

    Every task writes to its own reserved slot, so completion order never
    affects output order.

    Example:
        def double(x: int, cb: Callback[int]) -> None:
            cb(Ok(x * 2))

        map([1, 2, 3], double, print)  # Ok([2, 4, 6])
    """
    def on_ok(tracker: CompletionTracker[list[B]], index: int, item: A, value: B) -> None:
        _ = item
        tracker.results[index] = value

    def finish(tracker: CompletionTracker[list[B]]) -> list[B]:
        return list(tracker.results)

    fan_out(
        entries(items),
        fn,
        callback,
        scheduler=resolve(scheduler),
        on_ok=on_ok,
        finish=finish,
        label="map",
    )


def concat[A, B](
    items: Iterable[A],
    fn: Transform[A, Iterable[B] | None],
    callback: Callback[list[B]],
    *,
    scheduler: Scheduler | None = None,
) -> None:
    """
    Apply fn to every item in parallel, concatenate produced sequences.

    NOTE: Concatenation follows arrival order, not input order.
          A None result contributes nothing.
    """
    def on_ok(
        tracker: CompletionTracker[list[B]],
        index: int,
        item: A,
        value: Iterable[B] | None,
    ) -> Outcome[list[B]] | None:
        _ = (index, item)
        if value is not None:
            tracker.results.extend(value)
        return None

    def finish(tracker: CompletionTracker[list[B]]) -> list[B]:
        return list(tracker.results)

    fan_out(
        entries(items),
        fn,
        callback,
        scheduler=resolve(scheduler),
        on_ok=on_ok,
        finish=finish,
        ordered=False,
        label="concat",
    )


__all__ = ("concat", "each", "map")
