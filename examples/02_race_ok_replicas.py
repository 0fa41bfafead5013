from __future__ import annotations

from functools import partial

from _infra import FakeBackend, FakeCache, User, banner, run

from callflow import RaceOkPolicy, lift as L, race_ok
from kungfu import Error, Ok


async def main() -> None:
    banner("02_race_ok_replicas: race replicas and the cache, first success wins")

    user_id = 42
    cache = FakeCache(users={user_id: User(id=user_id, name="user:42@cache")}, delay_seconds=0.05)

    replicas = [
        FakeBackend(name="replica-a", delay_seconds=0.01, failures_before_ok=10),
        FakeBackend(name="replica-b", delay_seconds=0.02, failures_before_ok=10),
        FakeBackend(name="replica-c", delay_seconds=0.03),
    ]

    tasks = [L.from_coro(partial(r.fetch_user, user_id)) for r in replicas]
    tasks.append(L.from_coro(partial(cache.get_user, user_id)))

    result = await L.to_result(partial(race_ok, tasks, policy=RaceOkPolicy(error_strategy="last")))
    match result:
        case Ok(user):
            print(f"ok: {user.name}")
        case Error(err):
            print(f"error: {err!r}")


if __name__ == "__main__":
    run(main)
