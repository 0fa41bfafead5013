"""
Race combinators
================

Комбинаторы для гонки между задачами.

Tasks are never interrupted: losers keep running, only their outcomes are
discarded.
"""

from __future__ import annotations

import typing
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from kungfu import Error, Ok

from .._tracker import CompletionTracker, fan_out
from .._types import Callback, Outcome, Task
from ..scheduler import Scheduler, resolve


@dataclass(frozen=True, slots=True)
class RaceOkPolicy:
    """Configuration for race_ok: which error to return when every task fails."""

    error_strategy: Literal["first", "last"] = "last"

    def __post_init__(self) -> None:
        if self.error_strategy not in ("first", "last"):
            raise ValueError("RaceOkPolicy.error_strategy must be 'first' or 'last'")


def _run[T](task: Task[T], cb: Callback[T]) -> None:
    task(cb)


def _finish_none(tracker: CompletionTracker[typing.Any]) -> None:
    _ = tracker


def race[T](
    tasks: Iterable[Task[T]],
    callback: Callback[T | None],
    *,
    scheduler: Scheduler | None = None,
) -> None:
    """
    Return first completed result (Ok or Error, whichever finishes first).

    Every task is invoked, even if a sibling settled the race synchronously.
    Empty input succeeds with None.
    """
    def on_ok(tracker: CompletionTracker[T | None], index: int, task: Task[T], value: T) -> Outcome[T | None]:
        _ = (tracker, index, task)
        return Ok(value)

    fan_out(
        list(tasks),
        _run,
        callback,
        scheduler=resolve(scheduler),
        on_ok=on_ok,
        finish=_finish_none,
        ordered=False,
        skip_done=False,
        label="race",
    )


def race_ok[T](
    tasks: Iterable[Task[T]],
    callback: Callback[T | None],
    *,
    policy: RaceOkPolicy = RaceOkPolicy(),
    scheduler: Scheduler | None = None,
) -> None:
    """Run all, return first Ok. If all fail, return chosen error."""
    def on_ok(tracker: CompletionTracker[T | None], index: int, task: Task[T], value: T) -> Outcome[T | None]:
        _ = (tracker, index, task)
        return Ok(value)

    def on_error(tracker: CompletionTracker[T | None], index: int, cause: Exception) -> Outcome[T | None] | None:
        _ = index
        tracker.results.append(cause)
        if not tracker.complete_one():
            return None
        chosen = tracker.results[0] if policy.error_strategy == "first" else tracker.results[-1]
        return Error(chosen)

    fan_out(
        list(tasks),
        _run,
        callback,
        scheduler=resolve(scheduler),
        on_ok=on_ok,
        on_error=on_error,
        finish=_finish_none,
        ordered=False,
        skip_done=False,
        label="race_ok",
    )


__all__ = ("RaceOkPolicy", "race", "race_ok")
