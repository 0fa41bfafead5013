"""
Core type definitions for callflow.

Типы и алиасы используемые по всей библиотеке.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass

from kungfu import Result

# ============================================================================
# Type aliases
# ============================================================================

# Outcome = Result whose error side is always an exception
type Outcome[T] = Result[T, Exception]

# Callback = receives exactly one Outcome
type Callback[T] = Callable[[Outcome[T]], None]

# Task = unit of work reporting completion through a callback
type Task[T] = Callable[[Callback[T]], None]

# Transform = task parametrised by an input value
type Transform[I, O] = Callable[[I, Callback[O]], None]

# AsyncTest = task reporting a boolean (during loop condition)
type AsyncTest = Callable[[Callback[bool]], None]

# Predicate = function that tests a value
type Predicate[T] = Callable[[T], bool]

# Selector = function that extracts a key for comparison/sorting
type Selector[T, K] = Callable[[T], K]

# Comparator = cmp-style ordering (negative, zero, positive)
type Comparator[T] = Callable[[T, T], int]


# ============================================================================
# Records
# ============================================================================


@dataclass(frozen=True, slots=True, order=True)
class Pair[K, V]:
    """Mapping entry passed to combinators that iterate a Mapping. Orders by key, then value."""

    key: K
    value: V

    def __iter__(self) -> Iterator[K | V]:
        yield self.key
        yield self.value


__all__ = (
    # Type aliases
    "AsyncTest",
    "Callback",
    "Comparator",
    "Outcome",
    "Predicate",
    "Selector",
    "Task",
    "Transform",
    # Records
    "Pair",
)
