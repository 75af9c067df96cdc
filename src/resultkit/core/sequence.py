"""Generator-driven sequencing: write fallible steps as straight-line code.

Each ``yield`` hands a result to the driver. A success sends its value back
into the generator; a failure ends the sequence with that failure, after the
generator is closed so its ``finally`` blocks run.

Synchronous flavor::

    def checkout(user_id):
        user = yield from find_user(user_id)    # or: user = yield find_user(user_id)
        cart = yield load_cart(user)
        return cart.total                       # -> Success(cart.total)

    gen(checkout, 7)

Asynchronous flavor (an async generator; yielded awaitables are awaited).
Async generators cannot ``return`` a value, so the sequence completes with
the last success it yielded::

    async def checkout(user_id):
        user = yield fetch_user(user_id)
        cart = yield fetch_cart(user)
        yield success(cart.total)

    await gen(checkout, 7)

Whatever goes wrong inside the driver boundary (an exception, a yielded
non-result, an awaitable yielded from a synchronous generator, a factory that
does not produce a generator) ends as a ``Failure`` holding an
``UnknownException``. Nothing raised inside a sequence escapes ``gen``.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Generator
import functools
import inspect
import logging
from typing import TYPE_CHECKING, Any

from resultkit.core.guards import is_failure, is_result
from resultkit.core.result import Failure, Success, settle
from resultkit.errors import UnknownException

if TYPE_CHECKING:
    from collections.abc import Callable

log = logging.getLogger(__name__)


def _unknown(cause: Any) -> Failure[UnknownException]:
    return Failure(UnknownException(cause=cause))


def _discard(value: Any) -> None:
    # Closing an unawaited coroutine keeps it from warning at collection.
    if inspect.iscoroutine(value):
        value.close()


def gen(factory: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Any:
    """Run the generator produced by ``factory(*args, **kwargs)`` to a result.

    Returns a result for a synchronous generator and a coroutine resolving to
    a result for an asynchronous one.
    """
    try:
        steps = factory(*args, **kwargs)
    except Exception as exc:
        log.debug("Sequence factory raised %s", type(exc).__name__)
        return _unknown(exc)
    if isinstance(steps, AsyncGenerator):
        return _drive_async(steps)
    if isinstance(steps, Generator):
        return _drive_sync(steps)
    log.debug("Sequence factory returned %s, not a generator", type(steps).__name__)
    _discard(steps)
    return _unknown(steps)


def sequence[**P](factory: Callable[P, Any]) -> Callable[P, Any]:
    """Decorate a generator function so that calling it runs ``gen``."""

    @functools.wraps(factory)
    def run(*args: P.args, **kwargs: P.kwargs) -> Any:
        return gen(factory, *args, **kwargs)

    return run


def _drive_sync(steps: Generator[Any, Any, Any]) -> Any:
    try:
        try:
            return _run_sync(steps)
        finally:
            _close_sync(steps)
    except Exception as exc:
        log.debug("Sequence raised %s", type(exc).__name__)
        return _unknown(exc)


def _close_sync(steps: Generator[Any, Any, Any]) -> None:
    """Close *steps*, tolerating a generator that yields again while closing.

    The outcome already decided stands in that case. An exception raised by
    the generator's own cleanup still propagates.
    """
    try:
        steps.close()
    except RuntimeError:
        if inspect.getgeneratorstate(steps) != inspect.GEN_SUSPENDED:
            raise
        log.debug("Sequence yielded while closing; keeping its outcome")


def _run_sync(steps: Generator[Any, Any, Any]) -> Any:
    sent: Any = None
    while True:
        try:
            yielded = steps.send(sent)
        except StopIteration as stop:
            returned = stop.value
            if inspect.isawaitable(returned):
                log.debug("Synchronous sequence returned an awaitable")
                _discard(returned)
                return _unknown(returned)
            return returned if is_result(returned) else Success(returned)
        if inspect.isawaitable(yielded):
            log.debug("Synchronous sequence yielded an awaitable")
            _discard(yielded)
            return _unknown(yielded)
        if not is_result(yielded):
            log.debug("Sequence yielded %s, not a result", type(yielded).__name__)
            return _unknown(yielded)
        if is_failure(yielded):
            return yielded
        sent = yielded.value


async def _drive_async(steps: AsyncGenerator[Any, Any]) -> Any:
    try:
        try:
            return await _run_async(steps)
        finally:
            await _close_async(steps)
    except Exception as exc:
        log.debug("Sequence raised %s", type(exc).__name__)
        return _unknown(exc)


async def _close_async(steps: AsyncGenerator[Any, Any]) -> None:
    try:
        await steps.aclose()
    except RuntimeError:
        if inspect.getasyncgenstate(steps) != inspect.AGEN_SUSPENDED:
            raise
        log.debug("Sequence yielded while closing; keeping its outcome")


async def _run_async(steps: AsyncGenerator[Any, Any]) -> Any:
    sent: Any = None
    last: Any = Success(None)
    while True:
        try:
            yielded = await steps.asend(sent)
        except StopAsyncIteration:
            return last
        resolved = await settle(yielded)
        if not is_result(resolved):
            log.debug("Sequence yielded %s, not a result", type(resolved).__name__)
            return _unknown(resolved)
        if is_failure(resolved):
            return resolved
        last = resolved
        sent = resolved.value
