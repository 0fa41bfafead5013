"""
Series combinators
==================

Sequential flows: series, waterfall, seq, times; plus apply_each, which fans
several functions out over a single value.

Каждый шаг запускается только после успеха предыдущего.
"""

from __future__ import annotations

import typing
from collections.abc import Iterable

from .._tracker import CompletionTracker, SeriesRun, append, fan_out, replace
from .._types import Callback, Task, Transform
from ..scheduler import Scheduler, resolve


def _run_task[T](task: Task[T], state: typing.Any, cb: Callback[T]) -> None:
    _ = state
    task(cb)


def _thread(stage: Transform[typing.Any, typing.Any], state: typing.Any, cb: Callback[typing.Any]) -> None:
    stage(state, cb)


def series[T](
    tasks: Iterable[Task[T]],
    callback: Callback[list[T]],
    *,
    scheduler: Scheduler | None = None,
) -> None:
    """
    Run tasks one at a time, collect results positionally.

    The first failure aborts the rest and is delivered as is.
    """
    SeriesRun(
        tasks,
        invoke=_run_task,
        fold=append,
        state=[],
        callback=callback,
        scheduler=resolve(scheduler),
        label="series",
    ).start()


def waterfall(
    tasks: Iterable[Transform[typing.Any, typing.Any]],
    callback: Callback[typing.Any],
    *,
    scheduler: Scheduler | None = None,
) -> None:
    """
    Thread a value through tasks: each output is the next task's input.

    The first task receives None. Delivers the last produced value.

    NOTE: Stage types may differ from one task to the next, so the pipeline
          is typed as Any at its boundary only.
    """
    SeriesRun(
        tasks,
        invoke=_thread,
        fold=replace,
        state=None,
        callback=callback,
        scheduler=resolve(scheduler),
        label="waterfall",
    ).start()


def seq(
    *fns: Transform[typing.Any, typing.Any],
    scheduler: Scheduler | None = None,
) -> Transform[typing.Any, typing.Any]:
    """
    Compose value -> value transforms into one reusable transform.

    Example:
        def inc(x: int, cb: Callback[int]) -> None:
            cb(Ok(x + 1))

        def quad(x: int, cb: Callback[int]) -> None:
            cb(Ok(x * 4))

        inc_then_quad = seq(inc, quad)
        inc_then_quad(3, print)  # Ok(16)

    NOTE: seq() with no functions is the identity transform.
    """
    stages = tuple(fns)

    def composed(value: typing.Any, callback: Callback[typing.Any]) -> None:
        SeriesRun(
            stages,
            invoke=_thread,
            fold=replace,
            state=value,
            callback=callback,
            scheduler=resolve(scheduler),
            label="seq",
        ).start()

    return composed


def times[T](
    n: int,
    fn: Transform[int, T],
    callback: Callback[list[T]],
    *,
    scheduler: Scheduler | None = None,
) -> None:
    """Call ``fn(index, cb)`` for index 0..n-1 in series, collect results positionally."""
    if n < 0:
        raise ValueError("times() requires n >= 0")

    def call(index: int, state: list[T], cb: Callback[T]) -> None:
        _ = state
        fn(index, cb)

    SeriesRun(
        range(n),
        invoke=call,
        fold=append,
        state=[],
        callback=callback,
        scheduler=resolve(scheduler),
        label="times",
    ).start()


def apply_each[A](
    fns: Iterable[Transform[A, typing.Any]],
    value: A,
    callback: Callback[None],
    *,
    scheduler: Scheduler | None = None,
) -> None:
    """Apply every function to the same value in parallel. Fail-fast on first error."""
    def call(fn: Transform[A, typing.Any], cb: Callback[typing.Any]) -> None:
        fn(value, cb)

    def on_ok(tracker: CompletionTracker[None], index: int, fn: typing.Any, result: typing.Any) -> None:
        _ = (tracker, index, fn, result)

    def finish(tracker: CompletionTracker[None]) -> None:
        _ = tracker

    fan_out(
        list(fns),
        call,
        callback,
        scheduler=resolve(scheduler),
        on_ok=on_ok,
        finish=finish,
        ordered=False,
        label="apply_each",
    )


__all__ = ("apply_each", "seq", "series", "times", "waterfall")
