"""
Tests for collection combinators, driven tick by tick on a ManualScheduler.
"""

from __future__ import annotations

import pytest
from kungfu import Error, Ok

from callflow import (
    ManualScheduler,
    Pair,
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

from conftest import Boom, Recorder, sync_fn


class Deferred:
    """Transform that parks callbacks so the test decides completion order."""

    def __init__(self) -> None:
        self.pending: dict[object, object] = {}
        self.invoked: list[object] = []

    def __call__(self, item, cb) -> None:
        self.invoked.append(item)
        self.pending[item] = cb

    def complete(self, item, result) -> None:
        self.pending.pop(item)(result)


# ============================================================================
# Fan-out: each / map / concat
# ============================================================================


class TestMap:
    def test_collects_in_input_order(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        fn = Deferred()
        map([1, 2, 3], fn, recorder, scheduler=scheduler)
        scheduler.run()

        fn.complete(3, Ok(30))
        fn.complete(1, Ok(10))
        assert recorder.calls == []
        fn.complete(2, Ok(20))

        assert recorder.value == [10, 20, 30]

    def test_empty_fires_synchronously(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        map([], sync_fn(str), recorder, scheduler=scheduler)

        assert recorder.value == []
        assert scheduler.pending == 0

    def test_invocations_are_posted_not_inline(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        fn = Deferred()
        map(["a", "b"], fn, recorder, scheduler=scheduler)

        assert fn.invoked == []
        assert scheduler.pending == 2

    def test_fail_fast_skips_later_items(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        exc = Boom("item 1")
        invoked: list[int] = []

        def fn(item, cb):
            invoked.append(item)
            if item == 1:
                cb(Error(exc))
            else:
                cb(Ok(item))

        map([1, 2, 3], fn, recorder, scheduler=scheduler)
        scheduler.run()

        assert recorder.error is exc
        assert invoked == [1]

    def test_thrown_exception_is_the_failure(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        def fn(item, cb):
            if item == 2:
                raise Boom("thrown")
            cb(Ok(item))

        map([1, 2, 3], fn, recorder, scheduler=scheduler)
        scheduler.run()

        assert isinstance(recorder.error, Boom)

    def test_failure_after_partial_success_is_delivered_once(
        self,
        scheduler: ManualScheduler,
        recorder: Recorder,
    ) -> None:
        fn = Deferred()
        map([1, 2, 3], fn, recorder, scheduler=scheduler)
        scheduler.run()

        fn.complete(1, Ok(1))
        fn.complete(2, Error(Boom("second")))
        fn.complete(3, Ok(3))

        assert isinstance(recorder.error, Boom)

    def test_duplicate_report_counts_once(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        parked = []

        def fn(item, cb):
            if item == 1:
                cb(Ok("one"))
                cb(Ok("again"))
            else:
                parked.append(cb)

        map([1, 2], fn, recorder, scheduler=scheduler)
        scheduler.run()
        assert recorder.calls == []

        parked[0](Ok("two"))
        assert recorder.value == ["one", "two"]

    def test_mapping_items_are_pairs(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        map({"a": 1, "b": 2}, sync_fn(lambda pair: f"{pair.key}={pair.value}"), recorder, scheduler=scheduler)
        scheduler.run()

        assert recorder.value == ["a=1", "b=2"]


class TestEach:
    def test_success_carries_none(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        seen: list[int] = []

        def fn(item, cb):
            seen.append(item)
            cb(Ok(item * 100))

        each([1, 2, 3], fn, recorder, scheduler=scheduler)
        scheduler.run()

        assert recorder.value is None
        assert seen == [1, 2, 3]

    def test_mapping_items_are_pairs(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        seen: list[object] = []

        def fn(pair, cb):
            seen.append(pair)
            cb(Ok(None))

        each({"x": 1, "y": 2}, fn, recorder, scheduler=scheduler)
        scheduler.run()

        assert recorder.single == Ok(None)
        assert seen == [Pair("x", 1), Pair("y", 2)]

    def test_empty(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        each([], sync_fn(str), recorder, scheduler=scheduler)
        assert recorder.single == Ok(None)

    def test_fail_fast(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        invoked: list[int] = []

        def fn(item, cb):
            invoked.append(item)
            cb(Error(Boom(item)) if item == 2 else Ok(None))

        each([1, 2, 3, 4], fn, recorder, scheduler=scheduler)
        scheduler.run()

        assert isinstance(recorder.error, Boom)
        assert invoked == [1, 2]


class TestConcat:
    def test_arrival_order(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        fn = Deferred()
        concat(["a", "b", "c"], fn, recorder, scheduler=scheduler)
        scheduler.run()

        fn.complete("c", Ok(["c1", "c2"]))
        fn.complete("a", Ok(["a1"]))
        fn.complete("b", Ok(None))

        assert recorder.value == ["c1", "c2", "a1"]

    def test_empty(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        concat([], sync_fn(list), recorder, scheduler=scheduler)
        assert recorder.value == []


# ============================================================================
# Filter
# ============================================================================


class TestFilter:
    def test_keeps_input_order(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        fn = Deferred()
        filter([1, 2, 3, 4], fn, recorder, scheduler=scheduler)
        scheduler.run()

        for item in (4, 3, 2, 1):
            fn.complete(item, Ok(item % 2 == 0))

        assert recorder.value == [2, 4]

    def test_reject(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        reject([1, 2, 3, 4, 5], sync_fn(lambda x: x % 2 == 0), recorder, scheduler=scheduler)
        scheduler.run()

        assert recorder.value == [1, 3, 5]

    def test_reject_propagates_failure(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        exc = Boom("predicate")
        reject([1], lambda item, cb: cb(Error(exc)), recorder, scheduler=scheduler)
        scheduler.run()

        assert recorder.error is exc

    def test_mapping_keeps_pairs_in_insertion_order(
        self,
        scheduler: ManualScheduler,
        recorder: Recorder,
    ) -> None:
        filter({"b": 2, "a": 1, "d": 4, "c": 3}, sync_fn(lambda pair: pair.value % 2 == 0), recorder, scheduler=scheduler)
        scheduler.run()

        assert recorder.value == [Pair("b", 2), Pair("d", 4)]

    def test_empty(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        filter([], sync_fn(bool), recorder, scheduler=scheduler)
        reject([], sync_fn(bool), recorder, scheduler=scheduler)

        assert recorder.calls == [Ok([]), Ok([])]


# ============================================================================
# Detect / some / every
# ============================================================================


class TestDetect:
    def test_first_by_completion_wins(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        fn = Deferred()
        detect([1, 2, 3], fn, recorder, scheduler=scheduler)
        scheduler.run()

        fn.complete(3, Ok(True))
        fn.complete(2, Ok(True))
        fn.complete(1, Ok(False))

        assert recorder.value == 3

    def test_no_match(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        detect([1, 2], sync_fn(lambda x: x > 5), recorder, scheduler=scheduler)
        scheduler.run()

        assert recorder.single == Ok(None)

    def test_empty(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        detect([], sync_fn(bool), recorder, scheduler=scheduler)
        assert recorder.single == Ok(None)


class TestSome:
    def test_short_circuits_on_true(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        invoked: list[int] = []

        def fn(item, cb):
            invoked.append(item)
            cb(Ok(item == 1))

        some([1, 2, 3], fn, recorder, scheduler=scheduler)
        scheduler.run()

        assert recorder.value is True
        assert invoked == [1]

    def test_none_true(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        some([1, 2], sync_fn(lambda x: x > 5), recorder, scheduler=scheduler)
        scheduler.run()

        assert recorder.value is False

    def test_empty(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        some([], sync_fn(bool), recorder, scheduler=scheduler)
        assert recorder.value is False


class TestEvery:
    def test_all_true(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        every([1, 2, 3], sync_fn(lambda x: x > 0), recorder, scheduler=scheduler)
        scheduler.run()

        assert recorder.value is True

    def test_short_circuits_on_false(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        fn = Deferred()
        every([1, 2, 3], fn, recorder, scheduler=scheduler)
        scheduler.run()

        fn.complete(2, Ok(False))
        fn.complete(1, Ok(True))
        fn.complete(3, Ok(True))

        assert recorder.value is False

    def test_none_counts_as_pass(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        every([1, 2], lambda item, cb: cb(Ok(None)), recorder, scheduler=scheduler)
        scheduler.run()

        assert recorder.value is True

    def test_empty_is_false(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        # Not the vacuous True: an empty collection reports False.
        every([], sync_fn(bool), recorder, scheduler=scheduler)
        assert recorder.value is False


# ============================================================================
# Sort
# ============================================================================


class TestSort:
    def test_natural_order(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        sort([3, 1, 2], recorder, scheduler=scheduler)
        assert recorder.calls == []
        scheduler.run()

        assert recorder.value == [1, 2, 3]

    def test_key_and_reverse(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        sort(["bb", "a", "ccc"], recorder, key=len, reverse=True, scheduler=scheduler)
        scheduler.run()

        assert recorder.value == ["ccc", "bb", "a"]

    def test_comparator(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        sort([1, 3, 2], recorder, comparator=lambda a, b: b - a, scheduler=scheduler)
        scheduler.run()

        assert recorder.value == [3, 2, 1]

    def test_key_and_comparator_rejected(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        with pytest.raises(ValueError):
            sort([1], recorder, key=abs, comparator=lambda a, b: a - b, scheduler=scheduler)

    def test_incomparable_items(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        sort([1, "a"], recorder, scheduler=scheduler)
        scheduler.run()

        assert isinstance(recorder.error, TypeError)

    def test_mapping_sorts_pairs_by_key(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        sort({"b": 1, "c": 0, "a": 2}, recorder, scheduler=scheduler)
        scheduler.run()

        assert recorder.value == [Pair("a", 2), Pair("b", 1), Pair("c", 0)]

    def test_empty(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        sort([], recorder, scheduler=scheduler)
        scheduler.run()

        assert recorder.value == []


class TestSortBy:
    def test_async_keys(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        sort_by(["ccc", "a", "bb"], sync_fn(len), recorder, scheduler=scheduler)
        scheduler.run()

        assert recorder.value == ["a", "bb", "ccc"]

    def test_stable_on_ties(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        sort_by(["b", "a", "cc", "d"], sync_fn(len), recorder, scheduler=scheduler)
        scheduler.run()

        assert recorder.value == ["b", "a", "d", "cc"]

    def test_key_failure(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        exc = Boom("key")
        sort_by([1, 2], lambda item, cb: cb(Error(exc)), recorder, scheduler=scheduler)
        scheduler.run()

        assert recorder.error is exc


# ============================================================================
# Series counterparts
# ============================================================================


class TestTransform:
    def test_runs_one_step_at_a_time(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        fn = Deferred()
        transform([1, 2, 3], fn, recorder, scheduler=scheduler)

        scheduler.run()
        assert fn.invoked == [1]
        fn.complete(1, Ok("one"))

        scheduler.run()
        assert fn.invoked == [1, 2]
        fn.complete(2, Ok("two"))

        scheduler.run()
        fn.complete(3, Ok("three"))
        scheduler.run()

        assert recorder.value == ["one", "two", "three"]

    def test_mapping_builds_dict(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        def fn(pair, cb):
            cb(Ok(Pair(pair.key.upper(), pair.value * 10)))

        transform({"a": 1, "b": 2}, fn, recorder, scheduler=scheduler)
        scheduler.run()

        assert recorder.value == {"A": 10, "B": 20}

    def test_failure_stops_iteration(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        exc = Boom("step 2")
        invoked: list[int] = []

        def fn(item, cb):
            invoked.append(item)
            cb(Error(exc) if item == 2 else Ok(item))

        transform([1, 2, 3], fn, recorder, scheduler=scheduler)
        scheduler.run()

        assert recorder.error is exc
        assert invoked == [1, 2]


class TestReduce:
    def test_folds_in_order(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        def fn(acc, item, cb):
            cb(Ok(acc + [item]))

        reduce([1, 2, 3], [], fn, recorder, scheduler=scheduler)
        scheduler.run()

        assert recorder.value == [1, 2, 3]

    def test_empty_delivers_memo(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        reduce([], 42, lambda acc, item, cb: cb(Ok(acc + item)), recorder, scheduler=scheduler)
        scheduler.run()

        assert recorder.value == 42

    def test_failure_hides_partial_accumulator(self, scheduler: ManualScheduler, recorder: Recorder) -> None:
        exc = Boom("halfway")

        def fn(acc, item, cb):
            if item == 3:
                raise exc
            cb(Ok(acc + item))

        reduce([1, 2, 3, 4], 0, fn, recorder, scheduler=scheduler)
        scheduler.run()

        assert recorder.single == Error(exc)
