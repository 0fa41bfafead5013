"""Internal helpers for combinators.

Common functions used across multiple combinator modules: error containment
around task bodies and input normalisation. Not part of the public API."""

from __future__ import annotations

import logging
import typing
from collections.abc import Callable, Iterable, Mapping

from kungfu import Error

from ._types import Callback, Outcome, Pair

logger = logging.getLogger(__name__)

# Identity function
def identity[T](x: T) -> T:
    """Identity function: returns its argument unchanged."""
    return x

class Once[T]:
    """
    Callback guard that forwards only the first invocation.

    A task must report exactly once; anything after that is a contract
    violation by the task and is dropped here, before it can reach any
    bookkeeping.
    """

    __slots__ = ("_callback", "_label", "called")

    def __init__(self, callback: Callback[T], label: str) -> None:
        self._callback = callback
        self._label = label
        self.called = False

    def __call__(self, result: Outcome[T], /) -> None:
        if self.called:
            logger.warning("%s reported more than once, dropping %r", self._label, result)
            return
        self.called = True
        self._callback(result)

def once[T](callback: Callback[T], *, label: str = "task") -> Once[T]:
    """Wrap callback so that only its first invocation is forwarded."""
    return Once(callback, label)

def invoke[T](
    body: Callable[[Callback[T]], None],
    callback: Callback[T],
    *,
    label: str = "task",
) -> None:
    """
    Run a task body with error containment.

    The body receives a once-guarded callback. An exception raised by the body
    is delivered as Error(exc) to the same guarded callback, so a throw and an
    explicit failure are indistinguishable to the caller.

    NOTE: If the body already reported, the exception is a late event. It is
          logged with its traceback and dropped.
    """
    guarded = once(callback, label=label)
    try:
        body(guarded)
    except Exception as exc:
        if guarded.called:
            logger.exception("%s raised after reporting its result", label)
            return
        guarded(Error(exc))

def entries[A](items: Iterable[A] | Mapping[typing.Any, typing.Any]) -> list[typing.Any]:
    """
    Materialise input items once.

    Mappings are iterated as Pair(key, value) entries.
    """
    if isinstance(items, Mapping):
        return [Pair(key, value) for key, value in items.items()]
    return list(items)

__all__ = (
    "Once",
    "entries",
    "identity",
    "invoke",
    "once",
)
