from __future__ import annotations

import asyncio

from _infra import FakeBackend, banner, run

from callflow import cargo, lift as L, queue
from kungfu import Error, Ok


async def main() -> None:
    banner("03_worker_queue: bounded queue and batching cargo")

    api = FakeBackend(name="api", delay_seconds=0.01)
    fetch = L.from_async(api.fetch_user)

    drained = asyncio.Event()
    q = queue(fetch, concurrency=2)
    q.on_saturated = lambda: print(f"saturated: {q!r}")
    q.on_drain = drained.set

    def report(result) -> None:
        match result:
            case Ok(user):
                print(f"fetched {user.name}")
            case Error(err):
                print(f"failed: {err!r}")

    q.extend(range(1, 6), report)
    await drained.wait()

    async def store(user_ids: list[int]) -> int:
        await asyncio.sleep(0.01)
        print(f"stored batch {user_ids}")
        return len(user_ids)

    stored = asyncio.Event()
    c = cargo(L.from_async(store), payload=3)
    c.on_drain = stored.set
    c.extend(range(1, 8))
    await stored.wait()


if __name__ == "__main__":
    run(main)
