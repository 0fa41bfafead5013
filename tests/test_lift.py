"""
Tests for bridging callback tasks and asyncio coroutines.
"""

from __future__ import annotations

import asyncio
from functools import partial

import pytest
from kungfu import Error, LazyCoroResult, Ok

from callflow import lift as L
from callflow import map, series

from conftest import Boom, Recorder


class TestUp:
    def test_pure_and_fail(self, recorder: Recorder) -> None:
        exc = Boom("failed")

        L.pure(5)(recorder)
        L.fail(exc)(recorder)

        assert recorder.calls == [Ok(5), Error(exc)]

    def test_from_sync_catches(self) -> None:
        parse = L.from_sync(int)
        good, bad = Recorder(), Recorder()

        parse("12", good)
        parse("x", bad)

        assert good.value == 12
        assert isinstance(bad.error, ValueError)

    @pytest.mark.asyncio
    async def test_from_coro_plain_value(self) -> None:
        async def answer() -> int:
            await asyncio.sleep(0)
            return 42

        assert await L.to_result(L.from_coro(answer)) == Ok(42)

    @pytest.mark.asyncio
    async def test_from_coro_result_passes_through(self) -> None:
        exc = Boom("as value")

        async def failing():
            return Error(exc)

        result = await L.to_result(L.from_coro(failing))

        assert result == Error(exc)

    @pytest.mark.asyncio
    async def test_from_coro_raise_becomes_error(self) -> None:
        async def raising():
            raise Boom("raised")

        result = await L.to_result(L.from_coro(raising))

        match result:
            case Error(cause):
                assert isinstance(cause, Boom)
            case Ok(value):
                pytest.fail(f"unexpected success {value!r}")

    @pytest.mark.asyncio
    async def test_from_coro_cancelled(self) -> None:
        async def cancelled():
            raise asyncio.CancelledError

        result = await L.to_result(L.from_coro(cancelled))

        match result:
            case Error(cause):
                assert isinstance(cause, asyncio.CancelledError)
            case Ok(value):
                pytest.fail(f"unexpected success {value!r}")

    def test_from_coro_is_lazy(self) -> None:
        created: list[int] = []

        async def probe() -> int:
            return 1

        def factory():
            created.append(1)
            return probe()

        L.from_coro(factory)
        assert created == []

    @pytest.mark.asyncio
    async def test_from_async_with_map(self) -> None:
        async def double(x: int) -> int:
            await asyncio.sleep(0.001 * (3 - x))
            return x * 2

        result = await L.to_result(partial(map, [1, 2, 3], L.from_async(double)))

        assert result == Ok([2, 4, 6])


class TestDown:
    @pytest.mark.asyncio
    async def test_to_result_with_series(self) -> None:
        result = await L.to_result(partial(series, [L.pure(1), L.pure(2)]))

        assert result == Ok([1, 2])

    @pytest.mark.asyncio
    async def test_to_result_contains_throwing_start(self) -> None:
        def start(cb):
            raise Boom("start")

        result = await L.to_result(start)

        assert not result
        assert isinstance(result.unwrap_err(), Boom)

    @pytest.mark.asyncio
    async def test_to_lazy_starts_on_every_await(self) -> None:
        starts: list[int] = []

        def start(cb):
            starts.append(1)
            cb(Ok(len(starts)))

        lazy = L.to_lazy(start)
        assert isinstance(lazy, LazyCoroResult)
        assert starts == []

        assert await lazy == Ok(1)
        assert await lazy == Ok(2)

    @pytest.mark.asyncio
    async def test_unsafe(self) -> None:
        assert await L.unsafe(L.pure("value")) == "value"

        with pytest.raises(ValueError):
            await L.unsafe(L.fail(ValueError("bad")))

    def test_namespaces(self) -> None:
        assert L.up.pure is L.pure
        assert L.down.to_result is L.to_result
