"""Repeat combinators

Loops driven by a test: whilst, during, until; and forever, which only ends
on failure. Every iteration is posted, so stack depth stays flat however long
the loop runs."""

from __future__ import annotations

import logging
import typing
from collections.abc import Callable

from kungfu import Error, Ok

from .._helpers import invoke
from .._types import AsyncTest, Callback, Outcome, Task
from ..scheduler import Scheduler, resolve

logger = logging.getLogger(__name__)

def _sync_test(test: Callable[[], bool]) -> AsyncTest:
    def check(cb: Callback[bool]) -> None:
        cb(Ok(bool(test())))

    return check

class _Loop:
    """
    Loop state machine.

    - test_first: whilst/during check before the body, until checks after
    - proceed_on: test value that keeps the loop going
    - test None: forever, only a failure stops it
    """

    __slots__ = (
        "_body",
        "_callback",
        "_proceed_on",
        "_scheduler",
        "_test",
        "_test_first",
        "iterations",
        "name",
    )

    def __init__(
        self,
        name: str,
        body: Task[typing.Any],
        callback: Callback[None],
        scheduler: Scheduler,
        *,
        test: AsyncTest | None = None,
        test_first: bool = True,
        proceed_on: bool = True,
    ) -> None:
        self.name = name
        self._body = body
        self._callback = callback
        self._scheduler = scheduler
        self._test = test
        self._test_first = test_first
        self._proceed_on = proceed_on
        self.iterations = 0

    def start(self) -> None:
        if self._test is not None and self._test_first:
            self._scheduler.post(self._check)
        else:
            self._scheduler.post(self._run_body)

    def _check(self) -> None:
        invoke(typing.cast(AsyncTest, self._test), self._on_test, label=f"{self.name} test")

    def _on_test(self, result: Outcome[bool]) -> None:
        match result:
            case Error(e):
                self._callback(Error(e))
            case Ok(value):
                if bool(value) != self._proceed_on:
                    logger.debug("%s finished after %d iterations", self.name, self.iterations)
                    self._callback(Ok(None))
                elif self._test_first:
                    self._run_body()
                else:
                    self._scheduler.post(self._run_body)

    def _run_body(self) -> None:
        invoke(self._body, self._on_body, label=f"{self.name} body #{self.iterations}")

    def _on_body(self, result: Outcome[typing.Any]) -> None:
        match result:
            case Error(e):
                self._callback(Error(e))
            case Ok(_):
                self.iterations += 1
                if self._test is None:
                    self._scheduler.post(self._run_body)
                else:
                    self._scheduler.post(self._check)

def forever[T](
    task: Task[T],
    callback: Callback[None],
    *,
    scheduler: Scheduler | None = None,
) -> None:
    """
    Re-invoke task after every success. Ends only on failure.

    NOTE: There is no success terminal state; the callback fires once, with
          the failure that stopped the loop.
    """
    _Loop("forever", task, callback, resolve(scheduler)).start()

def whilst[T](
    test: Callable[[], bool],
    body: Task[T],
    callback: Callback[None],
    *,
    scheduler: Scheduler | None = None,
) -> None:
    """Run body while the synchronous test holds. Test is checked first."""
    _Loop(
        "whilst",
        body,
        callback,
        resolve(scheduler),
        test=_sync_test(test),
    ).start()

def during[T](
    test: AsyncTest,
    body: Task[T],
    callback: Callback[None],
    *,
    scheduler: Scheduler | None = None,
) -> None:
    """Like whilst, with a test reporting through a callback."""
    _Loop("during", body, callback, resolve(scheduler), test=test).start()

def until[T](
    test: Callable[[], bool],
    body: Task[T],
    callback: Callback[None],
    *,
    scheduler: Scheduler | None = None,
) -> None:
    """
    Do-until: run body, then test; repeat while the test is false.

    The body always runs at least once.
    """
    _Loop(
        "until",
        body,
        callback,
        resolve(scheduler),
        test=_sync_test(test),
        test_first=False,
        proceed_on=False,
    ).start()

__all__ = ("during", "forever", "until", "whilst")
