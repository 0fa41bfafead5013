from .batch import batch
from .parallel import parallel, parallel_limit
from .race import race, race_ok, RaceOkPolicy
from .worker_queue import cargo, queue, QueuePolicy, WorkerQueue

__all__ = (
    # Policies
    "QueuePolicy",
    "RaceOkPolicy",
    # Batch
    "batch",
    # Parallel
    "parallel",
    "parallel_limit",
    # Race
    "race",
    "race_ok",
    # Worker queue
    "WorkerQueue",
    "cargo",
    "queue",
)
