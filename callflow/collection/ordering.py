"""Sort combinators

sort: synchronous ordering moved off the calling stack with one post.
sort_by: keys computed by async tasks, then a stable sort."""

from __future__ import annotations

import typing
from collections.abc import Iterable
from functools import cmp_to_key

from kungfu import Error, Ok

from .._helpers import entries
from .._types import Callback, Comparator, Outcome, Selector, Transform
from ..scheduler import Scheduler, resolve
from .traverse import map as map_

def sort[A](
    items: Iterable[A],
    callback: Callback[list[A]],
    *,
    key: Selector[A, typing.Any] | None = None,
    comparator: Comparator[A] | None = None,
    reverse: bool = False,
    scheduler: Scheduler | None = None,
) -> None:
    """
    Sort the whole collection in one posted step.

    Natural ordering unless ``key`` or a cmp-style ``comparator`` is given
    (not both). Incomparable items deliver Error(TypeError).
    A Mapping is sorted as Pair entries, by key then value.
    """
    if key is not None and comparator is not None:
        raise ValueError("sort() accepts key or comparator, not both")
    materialised = entries(items)
    sort_key = cmp_to_key(comparator) if comparator is not None else key

    def run() -> None:
        try:
            ordered = sorted(materialised, key=sort_key, reverse=reverse)
        except Exception as exc:
            callback(Error(exc))
            return
        callback(Ok(ordered))

    resolve(scheduler).post(run)

def sort_by[A, K](
    items: Iterable[A],
    fn: Transform[A, K],
    callback: Callback[list[A]],
    *,
    reverse: bool = False,
    scheduler: Scheduler | None = None,
) -> None:
    """Sort by keys produced by an async task per item (keys fanned out like map)."""
    port = resolve(scheduler)
    materialised = entries(items)

    def on_keys(result: Outcome[list[K]]) -> None:
        match result:
            case Error(e):
                callback(Error(e))
            case Ok(keys):
                ranked = list(zip(keys, range(len(materialised))))
                sort(
                    ranked,
                    lambda r: callback(r.map(lambda pairs: [materialised[i] for _, i in pairs])),
                    key=_first,
                    reverse=reverse,
                    scheduler=port,
                )

    map_(materialised, fn, on_keys, scheduler=port)

def _first(pair: tuple[typing.Any, int]) -> typing.Any:
    return pair[0]

__all__ = ("sort", "sort_by")
