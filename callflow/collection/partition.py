"""Filter combinators

Parallel predicate over a collection, keeping (or dropping) matching items
in input order."""

from __future__ import annotations

from collections.abc import Iterable

from kungfu import Error, Ok

from .._helpers import entries
from .._tracker import CompletionTracker, fan_out
from .._types import Callback, Outcome, Transform
from ..scheduler import Scheduler, resolve

def filter[A](
    items: Iterable[A],
    fn: Transform[A, bool],
    callback: Callback[list[A]],
    *,
    scheduler: Scheduler | None = None,
) -> None:
    """Keep items whose predicate task reports a truthy value. Input order preserved."""

    def on_ok(tracker: CompletionTracker[list[A]], index: int, item: A, value: bool) -> None:
        _ = item
        tracker.results[index] = bool(value)

    materialised = entries(items)

    def finish(tracker: CompletionTracker[list[A]]) -> list[A]:
        return [item for item, keep in zip(materialised, tracker.results) if keep]

    fan_out(
        materialised,
        fn,
        callback,
        scheduler=resolve(scheduler),
        on_ok=on_ok,
        finish=finish,
        label="filter",
    )

def reject[A](
    items: Iterable[A],
    fn: Transform[A, bool],
    callback: Callback[list[A]],
    *,
    scheduler: Scheduler | None = None,
) -> None:
    """Drop items whose predicate task reports a truthy value. Dual of filter."""

    def negated(item: A, cb: Callback[bool]) -> None:
        def flip(result: Outcome[bool]) -> None:
            match result:
                case Ok(value):
                    cb(Ok(not value))
                case Error(e):
                    cb(Error(e))

        fn(item, flip)

    filter(items, negated, callback, scheduler=scheduler)

__all__ = ("filter", "reject")
