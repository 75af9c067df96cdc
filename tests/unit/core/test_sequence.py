from __future__ import annotations

import inspect

import pytest

from resultkit.core.result import Failure, Success, failure, success
from resultkit.core.sequence import gen, sequence
from resultkit.errors import UnknownException
from tests.helpers import resolved

pytestmark = pytest.mark.unit


def assert_unknown(result: object, cause_type: type | None = None) -> None:
    assert isinstance(result, Failure)
    assert isinstance(result.error, UnknownException)
    if cause_type is not None:
        assert isinstance(result.error.cause, cause_type)


class TestSyncSequence:
    def test_unwraps_successes_and_wraps_return_value(self) -> None:
        def steps():
            n = yield success(1)
            return n + 1

        assert gen(steps) == Success(2)

    def test_yield_from_unwraps_like_yield(self) -> None:
        def steps():
            a = yield from success(2)
            b = yield from success(3)
            return a * b

        assert gen(steps) == Success(6)

    def test_failure_ends_sequence_and_runs_finally_once(self) -> None:
        cleanups = []
        reached = []

        def steps():
            try:
                yield failure("boom")
                reached.append("after")
            finally:
                cleanups.append("done")

        assert gen(steps) == Failure("boom")
        assert cleanups == ["done"]
        assert reached == []

    def test_failure_stands_when_cleanup_yields_again(self) -> None:
        cleanups = []

        def steps():
            try:
                yield failure("boom")
            finally:
                cleanups.append("done")
                yield success("ignored")

        assert gen(steps) == Failure("boom")
        assert cleanups == ["done"]

    def test_cleanup_that_raises_becomes_unknown_failure(self) -> None:
        def steps():
            try:
                yield failure("boom")
            finally:
                raise OSError("cleanup failed")

        assert_unknown(gen(steps), OSError)

    def test_yield_from_failure_ends_sequence(self) -> None:
        cleanups = []

        def steps():
            try:
                yield from failure("boom")
            finally:
                cleanups.append("done")
            return "unreachable"

        assert gen(steps) == Failure("boom")
        assert cleanups == ["done"]

    def test_returned_result_is_not_wrapped_again(self) -> None:
        def steps():
            yield success(1)
            return failure("late")

        assert gen(steps) == Failure("late")

    def test_generator_without_yields_returns_value(self) -> None:
        def steps():
            return "v"
            yield  # pragma: no cover

        assert gen(steps) == Success("v")

    def test_arguments_are_forwarded_to_factory(self) -> None:
        def steps(a, *, b):
            x = yield success(a)
            return x + b

        assert gen(steps, 1, b=2) == Success(3)

    def test_raised_exception_becomes_unknown_failure(self) -> None:
        cleanups = []

        def steps():
            try:
                yield success(1)
                raise ValueError("bad")
            finally:
                cleanups.append("done")

        assert_unknown(gen(steps), ValueError)
        assert cleanups == ["done"]

    def test_factory_exception_becomes_unknown_failure(self) -> None:
        def steps():
            raise RuntimeError("factory")

        assert_unknown(gen(steps), RuntimeError)

    def test_non_result_yield_becomes_unknown_failure(self) -> None:
        cleanups = []

        def steps():
            try:
                yield 42
            finally:
                cleanups.append("done")

        result = gen(steps)

        assert_unknown(result)
        assert result.error.cause == 42
        assert cleanups == ["done"]

    def test_awaitable_yield_in_sync_sequence_becomes_unknown_failure(self) -> None:
        def steps():
            yield resolved(success(1))

        result = gen(steps)

        assert not inspect.isawaitable(result)
        assert_unknown(result)

    def test_non_generator_factory_becomes_unknown_failure(self) -> None:
        async def not_a_generator():
            return success(1)

        assert_unknown(gen(not_a_generator))
        assert_unknown(gen(lambda: [success(1)]))

    def test_sequence_decorator_runs_generator(self) -> None:
        @sequence
        def checkout(price, qty):
            total = yield success(price * qty)
            return total

        assert checkout(3, 2) == Success(6)
        assert checkout.__name__ == "checkout"


class TestAsyncSequence:
    @pytest.mark.asyncio
    async def test_awaits_yielded_awaitables(self) -> None:
        async def steps():
            n = yield resolved(success(1))
            yield success(n + 1)

        out = gen(steps)

        assert inspect.isawaitable(out)
        assert await out == Success(2)

    @pytest.mark.asyncio
    async def test_completes_with_last_success(self) -> None:
        async def steps():
            yield success("a")
            yield success("b")

        assert await gen(steps) == Success("b")

    @pytest.mark.asyncio
    async def test_empty_async_generator_gives_success_none(self) -> None:
        async def steps():
            return
            yield  # pragma: no cover

        assert await gen(steps) == Success(None)

    @pytest.mark.asyncio
    async def test_failure_ends_sequence_and_runs_finally_once(self) -> None:
        cleanups = []

        async def steps():
            try:
                yield resolved(failure("boom"))
                yield success("unreachable")
            finally:
                cleanups.append("done")

        assert await gen(steps) == Failure("boom")
        assert cleanups == ["done"]

    @pytest.mark.asyncio
    async def test_failure_stands_when_cleanup_yields_again(self) -> None:
        cleanups = []

        async def steps():
            try:
                yield failure("boom")
            finally:
                cleanups.append("done")
                yield success("ignored")

        assert await gen(steps) == Failure("boom")
        assert cleanups == ["done"]

    @pytest.mark.asyncio
    async def test_raised_exception_becomes_unknown_failure(self) -> None:
        async def steps():
            yield success(1)
            raise KeyError("missing")

        assert_unknown(await gen(steps), KeyError)

    @pytest.mark.asyncio
    async def test_rejected_awaitable_becomes_unknown_failure(self) -> None:
        async def explode():
            raise TimeoutError

        async def steps():
            yield explode()

        assert_unknown(await gen(steps), TimeoutError)

    @pytest.mark.asyncio
    async def test_non_result_yield_becomes_unknown_failure(self) -> None:
        async def steps():
            yield resolved("not a result")

        result = await gen(steps)

        assert_unknown(result)
        assert result.error.cause == "not a result"

    @pytest.mark.asyncio
    async def test_sequence_decorator_on_async_generator(self) -> None:
        @sequence
        async def lookup(key):
            value = yield resolved(success({"a": 1}[key]))
            yield success(value * 10)

        assert await lookup("a") == Success(10)
