"""
Detect combinators
==================

Short-circuiting predicates over a collection: detect, some, every.

Первый решающий ответ фиксирует результат; остальные завершения игнорируются.
"""

from __future__ import annotations

from collections.abc import Iterable

from kungfu import Ok

from .._helpers import entries
from .._tracker import CompletionTracker, fan_out
from .._types import Callback, Outcome, Transform
from ..scheduler import Scheduler, resolve


def detect[A](
    items: Iterable[A],
    fn: Transform[A, bool],
    callback: Callback[A | None],
    *,
    scheduler: Scheduler | None = None,
) -> None:
    """
    First item (by completion, not by index) whose predicate is truthy.

    Success with None when nothing matches or the collection is empty.
    """
    def on_ok(
        tracker: CompletionTracker[A | None],
        index: int,
        item: A,
        value: bool,
    ) -> Outcome[A | None] | None:
        _ = (tracker, index)
        return Ok(item) if value else None

    def finish(tracker: CompletionTracker[A | None]) -> None:
        _ = tracker

    fan_out(
        entries(items),
        fn,
        callback,
        scheduler=resolve(scheduler),
        on_ok=on_ok,
        finish=finish,
        ordered=False,
        label="detect",
    )


def some[A](
    items: Iterable[A],
    fn: Transform[A, bool],
    callback: Callback[bool],
    *,
    scheduler: Scheduler | None = None,
) -> None:
    """True as soon as any predicate is truthy; False if none is (or no items)."""
    def on_ok(tracker: CompletionTracker[bool], index: int, item: A, value: bool) -> Outcome[bool] | None:
        _ = (tracker, index, item)
        return Ok(True) if value else None

    def finish(tracker: CompletionTracker[bool]) -> bool:
        _ = tracker
        return False

    fan_out(
        entries(items),
        fn,
        callback,
        scheduler=resolve(scheduler),
        on_ok=on_ok,
        finish=finish,
        ordered=False,
        label="some",
    )


def every[A](
    items: Iterable[A],
    fn: Transform[A, bool],
    callback: Callback[bool],
    *,
    scheduler: Scheduler | None = None,
) -> None:
    """
    False as soon as any predicate reports a falsy value; True otherwise.

    A None report is not a verdict and counts as a pass.

    NOTE: An empty collection yields False, not the vacuous True. Callers rely
          on this, so it is kept as is.
    """
    materialised = entries(items)
    if not materialised:
        callback(Ok(False))
        return

    def on_ok(tracker: CompletionTracker[bool], index: int, item: A, value: bool) -> Outcome[bool] | None:
        _ = (tracker, index, item)
        return None if value or value is None else Ok(False)

    def finish(tracker: CompletionTracker[bool]) -> bool:
        _ = tracker
        return True

    fan_out(
        materialised,
        fn,
        callback,
        scheduler=resolve(scheduler),
        on_ok=on_ok,
        finish=finish,
        ordered=False,
        label="every",
    )


__all__ = ("detect", "every", "some")
