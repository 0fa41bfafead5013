"""
Batch combinators
=================

Комбинаторы для batch обработки с ограничением параллелизма.
"""

from __future__ import annotations

from collections.abc import Iterable

from .._helpers import entries
from .._tracker import CompletionTracker, fan_out
from .._types import Callback, Transform
from ..scheduler import Scheduler, resolve


def batch[A, T](
    items: Iterable[A],
    fn: Transform[A, T],
    callback: Callback[list[T]],
    *,
    concurrency: int = 5,
    scheduler: Scheduler | None = None,
) -> None:
    """
    Process with bounded concurrency. Results match input order.

    Fail-fast: after the first failure no further item is started.
    """
    if concurrency < 1:
        raise ValueError("batch() requires concurrency >= 1")

    def on_ok(tracker: CompletionTracker[list[T]], index: int, item: A, value: T) -> None:
        _ = item
        tracker.results[index] = value

    def finish(tracker: CompletionTracker[list[T]]) -> list[T]:
        return list(tracker.results)

    fan_out(
        entries(items),
        fn,
        callback,
        scheduler=resolve(scheduler),
        on_ok=on_ok,
        finish=finish,
        limit=concurrency,
        label="batch",
    )


__all__ = ("batch",)
