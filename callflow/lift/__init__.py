"""
Lift helpers with semantic namespaces.

Architecture:
- L.up.*    - values, sync functions and coroutines -> callback tasks
- L.down.*  - callback operations -> await (Result, value, LazyCoroResult)

Examples:
    from functools import partial
    from callflow import lift as L

    fetch = L.from_async(fetch_user)            # Transform[int, User]
    result = await L.to_result(partial(map, [1, 2], fetch))
"""

from __future__ import annotations

from . import down as down_ns
from . import up as up_ns
from .down import to_lazy, to_result, unsafe
from .up import fail, from_async, from_coro, from_sync, pure

# L.up.* / L.down.* for explicit use
up = up_ns
down = down_ns

__all__ = (
    # Namespaces
    "up",
    "down",
    # Up
    "pure",
    "fail",
    "from_sync",
    "from_coro",
    "from_async",
    # Down
    "to_result",
    "to_lazy",
    "unsafe",
)
