"""
Pytest configuration and fixtures for callflow tests.

Provides a manually drained scheduler, a callback recorder and small task
factories shared by the test modules.
"""

from __future__ import annotations

import asyncio
import typing

import pytest
from kungfu import Error, Ok

from callflow import Callback, ManualScheduler, Outcome, Task, Transform


class Recorder:
    """Final callback that remembers every delivery."""

    def __init__(self) -> None:
        self.calls: list[Outcome[typing.Any]] = []

    def __call__(self, result: Outcome[typing.Any]) -> None:
        self.calls.append(result)

    @property
    def single(self) -> Outcome[typing.Any]:
        assert len(self.calls) == 1, f"expected exactly one delivery, got {self.calls!r}"
        return self.calls[0]

    @property
    def value(self) -> typing.Any:
        match self.single:
            case Ok(value):
                return value
            case Error(cause):
                raise AssertionError(f"expected Ok, got Error({cause!r})")

    @property
    def error(self) -> Exception:
        match self.single:
            case Error(cause):
                return cause
            case Ok(value):
                raise AssertionError(f"expected Error, got Ok({value!r})")


class Boom(Exception):
    """Failure raised or reported by test tasks."""


def ok_task[T](value: T, log: list[typing.Any] | None = None) -> Task[T]:
    def task(cb: Callback[T]) -> None:
        if log is not None:
            log.append(value)
        cb(Ok(value))

    return task


def err_task(cause: Exception, log: list[typing.Any] | None = None) -> Task[typing.Any]:
    def task(cb: Callback[typing.Any]) -> None:
        if log is not None:
            log.append(cause)
        cb(Error(cause))

    return task


def sync_fn[A, B](fn: typing.Callable[[A], B]) -> Transform[A, B]:
    """Transform reporting ``fn(item)`` synchronously."""
    def transform(item: A, cb: Callback[B]) -> None:
        cb(Ok(fn(item)))

    return transform


def later[T](delay: float, result: Outcome[T]) -> Task[T]:
    """Task reporting ``result`` after ``delay`` seconds on the running loop."""
    def task(cb: Callback[T]) -> None:
        asyncio.get_running_loop().call_later(delay, cb, result)

    return task


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()
