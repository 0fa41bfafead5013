"""
Parallel combinators
====================

Fan-out over tasks that take no input; results in input order.
"""

from __future__ import annotations

from collections.abc import Iterable

from .._tracker import CompletionTracker, fan_out
from .._types import Callback, Task
from ..scheduler import Scheduler, resolve


def _run[T](task: Task[T], cb: Callback[T]) -> None:
    task(cb)


def _on_ok[T](tracker: CompletionTracker[list[T]], index: int, task: Task[T], value: T) -> None:
    _ = task
    tracker.results[index] = value


def _finish[T](tracker: CompletionTracker[list[T]]) -> list[T]:
    return list(tracker.results)


def parallel[T](
    tasks: Iterable[Task[T]],
    callback: Callback[list[T]],
    *,
    scheduler: Scheduler | None = None,
) -> None:
    """
    Run all tasks concurrently, collect results in input order. Fail-fast on first error.
    """
    fan_out(
        list(tasks),
        _run,
        callback,
        scheduler=resolve(scheduler),
        on_ok=_on_ok,
        finish=_finish,
        label="parallel",
    )


def parallel_limit[T](
    tasks: Iterable[Task[T]],
    callback: Callback[list[T]],
    *,
    concurrency: int,
    scheduler: Scheduler | None = None,
) -> None:
    """
    Like parallel, with at most ``concurrency`` tasks outstanding.

    The next task is posted as soon as one succeeds.
    """
    if concurrency < 1:
        raise ValueError("parallel_limit() requires concurrency >= 1")
    fan_out(
        list(tasks),
        _run,
        callback,
        scheduler=resolve(scheduler),
        on_ok=_on_ok,
        finish=_finish,
        limit=concurrency,
        label="parallel_limit",
    )


__all__ = ("parallel", "parallel_limit")
