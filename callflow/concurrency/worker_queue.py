"""
Worker queue
============

Bounded worker queue (queue) and its batching variant (cargo).

Items are submitted over time; at most ``concurrency`` worker invocations
are active at once. Each item's callback fires exactly once, with the result
of the worker invocation that handled it.

NOTE: Not thread-safe. Backlog and active count must only be touched from
      the scheduler's thread (inside posted callbacks or code running on it).
"""

from __future__ import annotations

import logging
import typing
from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from functools import partial

from kungfu import Error

from .._errors import QueueKilledError
from .._helpers import invoke
from .._types import Callback, Outcome, Transform
from ..scheduler import Scheduler, resolve

logger = logging.getLogger(__name__)

type Hook = Callable[[], None]


@dataclass(frozen=True, slots=True)
class QueuePolicy:
    """
    Worker queue configuration.

    ``payload`` None means one item per worker invocation (queue);
    a number means batches of up to that many items (cargo).
    """

    concurrency: int = 1
    payload: int | None = None

    def __post_init__(self) -> None:
        if self.concurrency < 1:
            raise ValueError("QueuePolicy.concurrency must be >= 1")
        if self.payload is not None and self.payload < 1:
            raise ValueError("QueuePolicy.payload must be >= 1")


@dataclass(frozen=True, slots=True)
class _Entry[A, R]:
    item: A
    callback: Callback[R] | None


class WorkerQueue[A, R]:
    """
    Concurrency-limited runner.

    States:
    - idle: empty backlog, no active workers
    - draining: work admitted while below the limit
    - saturated: ``concurrency`` workers active, backlog waiting
    """

    __slots__ = (
        "_backlog",
        "_policy",
        "_paused",
        "_running",
        "_scheduler",
        "_worker",
        "on_drain",
        "on_empty",
        "on_saturated",
    )

    def __init__(
        self,
        worker: Transform[typing.Any, R],
        *,
        policy: QueuePolicy,
        scheduler: Scheduler,
    ) -> None:
        self._worker = worker
        self._policy = policy
        self._scheduler = scheduler
        self._backlog: deque[_Entry[A, R]] = deque()
        self._running = 0
        self._paused = False
        self.on_saturated: Hook | None = None
        self.on_empty: Hook | None = None
        self.on_drain: Hook | None = None

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def concurrency(self) -> int:
        return self._policy.concurrency

    @property
    def payload(self) -> int | None:
        return self._policy.payload

    @property
    def length(self) -> int:
        """Items waiting in the backlog."""
        return len(self._backlog)

    @property
    def running(self) -> int:
        """Worker invocations admitted and not yet reported."""
        return self._running

    @property
    def idle(self) -> bool:
        return not self._backlog and self._running == 0

    @property
    def paused(self) -> bool:
        return self._paused

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def push(self, item: A, callback: Callback[R] | None = None) -> None:
        """Append one item to the backlog and admit work up to the limit."""
        self._backlog.append(_Entry(item, callback))
        self._admit()

    def extend(self, items: Iterable[A], callback: Callback[R] | None = None) -> None:
        """Append several items; ``callback`` fires once per item."""
        for item in items:
            self._backlog.append(_Entry(item, callback))
        self._admit()

    def unshift(self, item: A, callback: Callback[R] | None = None) -> None:
        """Put an item at the front of the backlog."""
        self._backlog.appendleft(_Entry(item, callback))
        self._admit()

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    def pause(self) -> None:
        """Stop admitting work. Active workers keep running."""
        self._paused = True

    def resume(self) -> None:
        self._paused = False
        self._admit()

    def kill(self) -> None:
        """
        Drop the backlog and clear hooks.

        Every dropped item's callback receives Error(QueueKilledError).
        Active workers are not interrupted and still report.
        """
        dropped = list(self._backlog)
        self._backlog.clear()
        self.on_saturated = None
        self.on_empty = None
        self.on_drain = None
        logger.debug("queue killed, %d items dropped", len(dropped))
        for entry in dropped:
            self._notify(entry, Error(QueueKilledError(entry.item)))

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def _admit(self) -> None:
        size = self._policy.payload or 1
        while not self._paused and self._backlog and self._running < self._policy.concurrency:
            batch = [self._backlog.popleft() for _ in range(min(size, len(self._backlog)))]
            self._running += 1
            if not self._backlog:
                self._fire("empty", self.on_empty)
            if self._running == self._policy.concurrency:
                self._fire("saturated", self.on_saturated)
            self._scheduler.post(partial(self._dispatch, batch))

    def _dispatch(self, batch: list[_Entry[A, R]]) -> None:
        payload: typing.Any
        if self._policy.payload is None:
            payload = batch[0].item
        else:
            payload = [entry.item for entry in batch]

        def body(cb: Callback[R]) -> None:
            self._worker(payload, cb)

        invoke(body, partial(self._on_done, batch), label="queue worker")

    def _on_done(self, batch: list[_Entry[A, R]], result: Outcome[R]) -> None:
        self._running -= 1
        for entry in batch:
            self._notify(entry, result)
        if self.idle:
            self._fire("drain", self.on_drain)
        self._admit()

    def _notify(self, entry: _Entry[A, R], result: Outcome[R]) -> None:
        if entry.callback is None:
            return
        try:
            entry.callback(result)
        except Exception:
            logger.exception("queue item callback raised for %r", entry.item)

    def _fire(self, name: str, hook: Hook | None) -> None:
        logger.debug("queue %s (running=%d, backlog=%d)", name, self._running, len(self._backlog))
        if hook is None:
            return
        try:
            hook()
        except Exception:
            logger.exception("queue %s hook raised", name)

    def __repr__(self) -> str:
        return (
            f"WorkerQueue(concurrency={self._policy.concurrency}, payload={self._policy.payload}, "
            f"running={self._running}, backlog={len(self._backlog)})"
        )


def queue[A, R](
    worker: Transform[A, R],
    *,
    concurrency: int = 1,
    scheduler: Scheduler | None = None,
) -> WorkerQueue[A, R]:
    """
    Create a worker queue handing one item per worker invocation.

    Example:
        q = queue(download, concurrency=4)
        for url in urls:
            q.push(url, on_downloaded)
        q.on_drain = lambda: print("all done")
    """
    return WorkerQueue(
        worker,
        policy=QueuePolicy(concurrency=concurrency),
        scheduler=resolve(scheduler),
    )


def cargo[A, R](
    worker: Transform[list[A], R],
    *,
    payload: int,
    concurrency: int = 1,
    scheduler: Scheduler | None = None,
) -> WorkerQueue[A, R]:
    """Create a worker queue handing batches of up to ``payload`` items per invocation."""
    return WorkerQueue(
        worker,
        policy=QueuePolicy(concurrency=concurrency, payload=payload),
        scheduler=resolve(scheduler),
    )


__all__ = ("QueuePolicy", "WorkerQueue", "cargo", "queue")
