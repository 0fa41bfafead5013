"""
Retry combinators
=================

Bounded re-attempt of one task. The only combinator that retries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from kungfu import Error, Ok

from .._helpers import invoke
from .._types import Callback, Outcome, Predicate, Task
from ..scheduler import Scheduler, resolve

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """
    Retry configuration.

    ``times`` is the total number of attempts, the first one included.
    ``retry_on`` narrows which failures are worth another attempt.
    """

    times: int
    retry_on: Predicate[Exception] | None = None

    def __post_init__(self) -> None:
        if self.times < 1:
            raise ValueError("RetryPolicy.times must be >= 1")


def _should_retry(*, policy: RetryPolicy, attempt: int, error: Exception) -> bool:
    if attempt + 1 >= policy.times:
        return False
    if policy.retry_on is not None and not policy.retry_on(error):
        return False
    return True


class _RetryRun[T]:
    """One retry invocation: attempt counter plus the task being re-run."""

    __slots__ = ("_callback", "_policy", "_scheduler", "_task", "attempt")

    def __init__(
        self,
        task: Task[T],
        callback: Callback[T],
        policy: RetryPolicy,
        scheduler: Scheduler,
    ) -> None:
        self._task = task
        self._callback = callback
        self._policy = policy
        self._scheduler = scheduler
        self.attempt = 0

    def start(self) -> None:
        self._scheduler.post(self._run_attempt)

    def _run_attempt(self) -> None:
        invoke(self._task, self._on_result, label=f"retry attempt {self.attempt + 1}")

    def _on_result(self, result: Outcome[T]) -> None:
        match result:
            case Ok(_):
                self._callback(result)
            case Error(e):
                try:
                    again = _should_retry(policy=self._policy, attempt=self.attempt, error=e)
                except Exception as exc:
                    self._callback(Error(exc))
                    return
                if not again:
                    self._callback(result)
                    return
                logger.warning(
                    "Attempt %d/%d failed (%r), retrying",
                    self.attempt + 1,
                    self._policy.times,
                    e,
                )
                self.attempt += 1
                self._scheduler.post(self._run_attempt)


def retry[T](
    task: Task[T],
    callback: Callback[T],
    *,
    policy: RetryPolicy | int,
    scheduler: Scheduler | None = None,
) -> None:
    """
    Invoke task until it succeeds or attempts are exhausted.

    Each attempt is posted on its own tick. Delivers the first success, or
    the last failure once the policy gives up.

    Example:
        retry(fetch, on_done, policy=RetryPolicy(times=3, retry_on=is_transient))
        retry(fetch, on_done, policy=3)
    """
    if isinstance(policy, int):
        policy = RetryPolicy(times=policy)
    _RetryRun(task, callback, policy, resolve(scheduler)).start()


__all__ = ("RetryPolicy", "retry")
