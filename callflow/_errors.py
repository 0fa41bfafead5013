from __future__ import annotations

class QueueKilledError(Exception):
    """Item was still in the backlog when its WorkerQueue was killed."""

    item: object

    def __init__(self, item: object) -> None:
        self.item = item
        super().__init__(f"Queue killed before {item!r} was processed")

__all__ = ("QueueKilledError",)
