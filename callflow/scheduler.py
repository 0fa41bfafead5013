"""
Scheduler port
==============

The only environmental dependency of every combinator: ``post(callback)``
runs ``callback`` later, preserving FIFO order relative to other posts.
"""

from __future__ import annotations

import asyncio
import logging
import typing
from collections import deque
from collections.abc import Callable

logger = logging.getLogger(__name__)


@typing.runtime_checkable
class Scheduler(typing.Protocol):
    """Post a callback to run asynchronously, in submission order."""

    def post(self, callback: Callable[[], None], /) -> None: ...


class LoopScheduler:
    """
    Scheduler backed by an asyncio event loop.

    ``loop.call_soon`` is FIFO, which is exactly the ordering contract the
    combinators rely on. Without an explicit loop the running loop is looked
    up on every post.
    """

    __slots__ = ("_loop",)

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        return asyncio.get_running_loop()

    def post(self, callback: Callable[[], None], /) -> None:
        self.loop.call_soon(callback)

    def __repr__(self) -> str:
        return f"LoopScheduler({self._loop!r})"


class ManualScheduler:
    """
    FIFO of posted callbacks, drained explicitly.

    Nothing runs until ``run()`` / ``run_once()`` is called, which makes
    every tick observable. Useful for synchronous drivers and tests.
    """

    __slots__ = ("_pending", "_executed")

    def __init__(self) -> None:
        self._pending: deque[Callable[[], None]] = deque()
        self._executed = 0

    @property
    def pending(self) -> int:
        """Number of callbacks waiting to run."""
        return len(self._pending)

    @property
    def executed(self) -> int:
        """Number of callbacks run so far."""
        return self._executed

    def post(self, callback: Callable[[], None], /) -> None:
        self._pending.append(callback)

    def run_once(self) -> bool:
        """Run the oldest pending callback. False when nothing was pending."""
        if not self._pending:
            return False
        callback = self._pending.popleft()
        self._executed += 1
        callback()
        return True

    def run(self, limit: int | None = None) -> int:
        """
        Run callbacks until the queue is empty (or ``limit`` were run).

        Callbacks posted while draining are run too. Returns how many ran.
        """
        count = 0
        while self._pending and (limit is None or count < limit):
            self.run_once()
            count += 1
        if self._pending:
            logger.debug("ManualScheduler stopped with %d pending callbacks", len(self._pending))
        return count

    def __repr__(self) -> str:
        return f"ManualScheduler(pending={len(self._pending)})"


def resolve(scheduler: Scheduler | None) -> Scheduler:
    """Explicit scheduler, or one bound to the running asyncio loop."""
    if scheduler is not None:
        return scheduler
    return LoopScheduler(asyncio.get_running_loop())


__all__ = ("LoopScheduler", "ManualScheduler", "Scheduler", "resolve")
