"""
Completion accounting
=====================

Per-invocation bookkeeping shared by every combinator:

- CompletionTracker: remaining count, done latch, result buffer
- fan_out: generic parallel engine (collection combinators, parallel, race)
- SeriesRun: generic sequential engine (series, waterfall, times, reduce...)

Sugar functions in collection/control/concurrency only supply the hooks.
"""

from __future__ import annotations

import logging
import typing
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from functools import partial

from kungfu import Error, Ok

from ._helpers import identity, invoke
from ._types import Callback, Outcome
from .scheduler import Scheduler

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CompletionTracker[O]:
    """
    State of one fan-out invocation.

    Invariant: once ``done`` is set the callback has fired and nothing else
    is written to ``results`` or delivered.
    """

    remaining: int
    callback: Callback[O]
    results: list[typing.Any] = field(default_factory=list)
    done: bool = False
    cursor: int = 0

    @classmethod
    def sized(cls, width: int, callback: Callback[O], *, ordered: bool = True) -> CompletionTracker[O]:
        """Tracker for ``width`` tasks; ordered trackers reserve one slot per task."""
        results: list[typing.Any] = [None] * width if ordered else []
        return cls(remaining=width, callback=callback, results=results)

    def settle(self, outcome: Outcome[O]) -> bool:
        """Latch and deliver. False (and nothing delivered) if already done."""
        if self.done:
            return False
        self.done = True
        self.callback(outcome)
        return True

    def complete_one(self) -> bool:
        """Count one completion. True when it was the last and nothing latched yet."""
        self.remaining -= 1
        return self.remaining == 0 and not self.done


# ============================================================================
# Fan-out engine
# ============================================================================


# Hooks return an Outcome to settle right away, or None to keep going
type OkHook[O, A, R] = Callable[[CompletionTracker[O], int, A, R], Outcome[O] | None]
type ErrorHook[O] = Callable[[CompletionTracker[O], int, Exception], Outcome[O] | None]


def fan_out[A, R, O](
    items: Sequence[A],
    fn: Callable[[A, Callback[R]], None],
    callback: Callback[O],
    *,
    scheduler: Scheduler,
    on_ok: OkHook[O, A, R],
    finish: Callable[[CompletionTracker[O]], O],
    on_error: ErrorHook[O] | None = None,
    ordered: bool = True,
    skip_done: bool = True,
    limit: int | None = None,
    label: str = "task",
) -> CompletionTracker[O]:
    """
    Generic parallel combinator.

    Post ``fn(item, cb)`` for every item (at most ``limit`` outstanding),
    route each completion through one CompletionTracker.

    Args:
        items: Materialised input, one task per element
        fn: Task body for one element
        callback: Final callback, fired exactly once
        scheduler: Where invocations are posted
        on_ok: Records a success; returns an Outcome to settle early
        finish: Builds the aggregate once every task succeeded
        on_error: Handles a failure; default is fail-fast with the same cause
        ordered: Pre-size ``results`` to len(items) for positional writes
        skip_done: Do not invoke tasks whose turn comes after the latch
        limit: Max outstanding invocations (None = all at once)
        label: Name used in log records
    """
    tracker = CompletionTracker.sized(len(items), callback, ordered=ordered)
    if not items:
        tracker.settle(Ok(finish(tracker)))
        return tracker

    def on_result(index: int, result: Outcome[R]) -> None:
        if tracker.done:
            logger.debug("%s #%d completed after settlement, discarded: %r", label, index, result)
            return

        verdict: Outcome[O] | None
        try:
            match result:
                case Error(cause):
                    verdict = Error(cause) if on_error is None else on_error(tracker, index, cause)
                case Ok(value):
                    verdict = on_ok(tracker, index, items[index], value)
                    if verdict is None and tracker.complete_one():
                        verdict = Ok(finish(tracker))
        except Exception as exc:
            verdict = Error(exc)

        if verdict is not None:
            tracker.settle(verdict)
        elif limit is not None:
            post_next()

    def run_slot(index: int) -> None:
        if skip_done and tracker.done:
            logger.debug("%s #%d skipped, already settled", label, index)
            return
        invoke(partial(fn, items[index]), partial(on_result, index), label=f"{label} #{index}")

    def post_next() -> None:
        if tracker.cursor < len(items):
            scheduler.post(partial(run_slot, tracker.cursor))
            tracker.cursor += 1

    width = len(items) if limit is None else min(limit, len(items))
    for _ in range(width):
        post_next()
    return tracker


# ============================================================================
# Sequential engine
# ============================================================================


class SeriesRun[A, R, S, O]:
    """
    Explicit step machine for sequential combinators.

    Each step pulls the next item, invokes its task with the current state and
    posts the following step only after a success. State is threaded through
    ``fold``; ``finish`` turns the final state into the delivered value.
    """

    __slots__ = (
        "_callback",
        "_finish",
        "_fold",
        "_invoke",
        "_label",
        "_scheduler",
        "_steps",
        "index",
        "state",
    )

    def __init__(
        self,
        steps: Iterable[A],
        *,
        invoke: Callable[[A, S, Callback[R]], None],
        fold: Callable[[S, R], S],
        state: S,
        callback: Callback[O],
        scheduler: Scheduler,
        finish: Callable[[S], O] = identity,
        label: str = "step",
    ) -> None:
        self._steps = iter(steps)
        self._invoke = invoke
        self._fold = fold
        self._finish = finish
        self._callback = callback
        self._scheduler = scheduler
        self._label = label
        self.state = state
        self.index = 0

    def start(self) -> None:
        self._scheduler.post(self._step)

    def _step(self) -> None:
        try:
            item = next(self._steps)
        except StopIteration:
            self._deliver_final()
            return
        except Exception as exc:
            self._callback(Error(exc))
            return
        invoke(
            partial(self._invoke, item, self.state),
            self._on_result,
            label=f"{self._label} #{self.index}",
        )

    def _on_result(self, result: Outcome[R]) -> None:
        match result:
            case Error(cause):
                self._callback(Error(cause))
            case Ok(value):
                try:
                    self.state = self._fold(self.state, value)
                except Exception as exc:
                    self._callback(Error(exc))
                    return
                self.index += 1
                self._scheduler.post(self._step)

    def _deliver_final(self) -> None:
        try:
            final = self._finish(self.state)
        except Exception as exc:
            self._callback(Error(exc))
            return
        self._callback(Ok(final))


def append[T](acc: list[T], value: T) -> list[T]:
    """Fold step that collects values positionally."""
    acc.append(value)
    return acc


def replace[T](acc: typing.Any, value: T) -> T:
    """Fold step that threads the latest value."""
    _ = acc
    return value


__all__ = (
    "CompletionTracker",
    "SeriesRun",
    "append",
    "fan_out",
    "replace",
)
