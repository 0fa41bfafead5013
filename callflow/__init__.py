"""
Callback-driven control-flow combinators.

Composable primitives for sequencing, parallelizing, racing, retrying and
looping asynchronous units of work that report completion by invoking a
callback with a kungfu Result.

Architecture:
- Every task reports through Callback[T] = Callable[[Result[T, Exception]], None]
- Fan-out combinators share one CompletionTracker per invocation
- Sequential combinators are step machines posted on a Scheduler
- lift bridges callback tasks and asyncio coroutines / LazyCoroResult
"""

# Core types
from ._types import (
    AsyncTest,
    Callback,
    Comparator,
    Outcome,
    Pair,
    Predicate,
    Selector,
    Task,
    Transform,
)

# Errors
from ._errors import QueueKilledError

# Scheduler port
from .scheduler import LoopScheduler, ManualScheduler, Scheduler

# Lift helpers (bridge to asyncio)
from . import lift
from .lift import fail, from_async, from_coro, from_sync, pure, to_lazy, to_result

# Collections
from .collection import (
    concat,
    detect,
    each,
    every,
    filter,
    map,
    reduce,
    reject,
    some,
    sort,
    sort_by,
    transform,
)

# Control flow
from .control import (
    RetryPolicy,
    apply_each,
    during,
    forever,
    retry,
    seq,
    series,
    times,
    until,
    waterfall,
    whilst,
)

# Concurrency
from .concurrency import (
    QueuePolicy,
    RaceOkPolicy,
    WorkerQueue,
    batch,
    cargo,
    parallel,
    parallel_limit,
    queue,
    race,
    race_ok,
)

__all__ = (
    # Types
    "AsyncTest",
    "Callback",
    "Comparator",
    "Outcome",
    "Pair",
    "Predicate",
    "Selector",
    "Task",
    "Transform",
    # Errors
    "QueueKilledError",
    # Scheduler
    "LoopScheduler",
    "ManualScheduler",
    "Scheduler",
    # Lift
    "lift",
    "fail",
    "from_async",
    "from_coro",
    "from_sync",
    "pure",
    "to_lazy",
    "to_result",
    # Collections
    "concat",
    "detect",
    "each",
    "every",
    "filter",
    "map",
    "reduce",
    "reject",
    "some",
    "sort",
    "sort_by",
    "transform",
    # Control
    "RetryPolicy",
    "apply_each",
    "during",
    "forever",
    "retry",
    "seq",
    "series",
    "times",
    "until",
    "waterfall",
    "whilst",
    # Concurrency
    "QueuePolicy",
    "RaceOkPolicy",
    "WorkerQueue",
    "batch",
    "cargo",
    "parallel",
    "parallel_limit",
    "queue",
    "race",
    "race_ok",
)
