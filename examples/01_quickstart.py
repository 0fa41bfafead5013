from __future__ import annotations

from functools import partial

from _infra import FakeBackend, banner, run

from callflow import RetryPolicy, lift as L, map, retry
from kungfu import Error, Ok


async def main() -> None:
    banner("01_quickstart: lift + retry + map")

    api = FakeBackend(
        name="api",
        delay_seconds=0.01,
        failures_before_ok=2,
        failure_transient=True,
    )

    # Callback-style transform: one user id in, retried fetch out.
    def fetch_user(user_id: int, callback) -> None:
        retry(
            L.from_coro(partial(api.fetch_user, user_id)),
            callback,
            policy=RetryPolicy(times=3, retry_on=lambda e: getattr(e, "transient", False)),
        )

    result = await L.to_result(partial(map, [1, 2, 3], fetch_user))
    match result:
        case Ok(users):
            print(", ".join(user.name for user in users))
        case Error(err):
            print(f"error: {err!r}")
    print(f"backend calls: {api.calls}")


if __name__ == "__main__":
    run(main)
