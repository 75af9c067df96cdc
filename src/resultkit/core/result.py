"""Result primitives for explicit, value-level error handling.

A ``Result`` is either a ``Success`` carrying a value or a ``Failure``
carrying an error. Both variants are frozen: combinators always build new
results instead of editing their input.

Any function in this package that receives an awaitable where a value or a
result is expected answers with an awaitable, and answers synchronously
otherwise. ``select_shape`` is the single place where that rule is applied at
runtime; the ``Combinator`` protocol states it for type checkers.
"""

from __future__ import annotations

import dataclasses
import functools
import inspect
import logging
from typing import TYPE_CHECKING, Any, ClassVar, Literal, Never, Protocol, overload

from resultkit.errors import ResultkitError, UnknownException

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Generator

log = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class Success[A]:
    """The successful variant, holding ``value``."""

    value: A
    tag: ClassVar[Literal["ok"]] = "ok"

    def __iter__(self) -> Generator[Success[A], A, A]:
        # ``x = yield from result`` inside a sequenced generator.
        return (yield self)


@dataclasses.dataclass(frozen=True, slots=True)
class Failure[E]:
    """The failed variant, holding ``error``."""

    error: E
    tag: ClassVar[Literal["error"]] = "error"

    def __iter__(self) -> Generator[Failure[E], Any, Never]:
        yield self
        raise ResultkitError("A failed step cannot be resumed")


type Result[A, E] = Success[A] | Failure[E]
type ResultAsync[A, E] = Awaitable[Result[A, E]]
type ResultMaybeAsync[A, E] = Result[A, E] | ResultAsync[A, E]


class Combinator[I, O](Protocol):
    """A configured ``Result -> Result`` step that keeps its input's shape.

    Called with a resolved result it returns a resolved result; called with
    an awaitable it returns an awaitable.
    """

    @overload
    def __call__(self, result: Awaitable[I], /) -> Awaitable[O]: ...

    @overload
    def __call__(self, result: I, /) -> O: ...


@overload
def success[A](value: Awaitable[A]) -> ResultAsync[A, Never]: ...


@overload
def success[A](value: A) -> Result[A, Never]: ...


@overload
def success() -> Result[None, Never]: ...


def success(value: Any = None) -> Any:
    """Wrap *value* as a ``Success``, awaiting it first if it is awaitable."""
    if inspect.isawaitable(value):
        return _success_async(value)
    return Success(value)


@overload
def failure[E](error: Awaitable[E]) -> ResultAsync[Never, E]: ...


@overload
def failure[E](error: E) -> Result[Never, E]: ...


def failure(error: Any) -> Any:
    """Wrap *error* as a ``Failure``, awaiting it first if it is awaitable.

    An awaitable error that raises while being awaited still resolves to a
    ``Failure``, carrying an ``UnknownException`` around the raised exception.
    """
    if inspect.isawaitable(error):
        return _failure_async(error)
    return Failure(error)


async def _success_async(pending: Awaitable[Any]) -> Success[Any]:
    return Success(await pending)


async def _failure_async(pending: Awaitable[Any]) -> Failure[Any]:
    try:
        error = await pending
    except Exception as exc:
        log.debug("Awaited failure payload raised %s", type(exc).__name__)
        return Failure(UnknownException(cause=exc))
    return Failure(error)


async def settle(value: Any) -> Any:
    """Await *value* until it is no longer awaitable."""
    while inspect.isawaitable(value):
        value = await value
    return value


def select_shape(result: Any, apply: Callable[[Any], Any]) -> Any:
    """Apply *apply* to *result*, matching the sync/async shape of *result*.

    A resolved *result* is handled synchronously, with no event-loop round
    trip. An awaitable *result* yields a coroutine that awaits it, applies
    *apply*, and settles whatever *apply* returns.
    """
    if inspect.isawaitable(result):
        return _select_async(result, apply)
    return apply(result)


async def _select_async(pending: Awaitable[Any], apply: Callable[[Any], Any]) -> Any:
    resolved = await pending
    return await settle(apply(resolved))


def _fail_with(exc: Exception, on_error: Callable[[Exception], Any] | None) -> Any:
    if on_error is None:
        log.debug("Guarded call raised %s", type(exc).__name__)
        return Failure(UnknownException(cause=exc))
    return failure(on_error(exc))


async def _guard_pending(
    pending: Awaitable[Any], on_error: Callable[[Exception], Any] | None
) -> Result[Any, Any]:
    try:
        value = await pending
    except Exception as exc:
        return await settle(_fail_with(exc, on_error))
    return Success(value)


def wrap[**P](
    fn: Callable[P, Any], on_error: Callable[[Exception], Any] | None = None
) -> Callable[P, Any]:
    """Turn a raising callable into one that returns a ``Result``.

    Raised exceptions become failures: ``on_error(exc)`` when given, else an
    ``UnknownException`` with the exception as its cause. Coroutine functions
    (and plain functions that return awaitables) give awaitable results.

    Example:
        parse_int = wrap(int, on_error=lambda exc: "not a number")
        parse_int("42")   # Success(value=42)
        parse_int("x")    # Failure(error='not a number')
    """
    if inspect.iscoroutinefunction(fn):

        @functools.wraps(fn)
        async def guarded_async(*args: P.args, **kwargs: P.kwargs) -> Any:
            try:
                value = await fn(*args, **kwargs)
            except Exception as exc:
                return await settle(_fail_with(exc, on_error))
            return Success(value)

        return guarded_async

    @functools.wraps(fn)
    def guarded(*args: P.args, **kwargs: P.kwargs) -> Any:
        try:
            value = fn(*args, **kwargs)
        except Exception as exc:
            return _fail_with(exc, on_error)
        if inspect.isawaitable(value):
            return _guard_pending(value, on_error)
        return Success(value)

    return guarded


def attempt(
    fn: Callable[..., Any],
    /,
    *args: Any,
    on_error: Callable[[Exception], Any] | None = None,
    **kwargs: Any,
) -> Any:
    """Call *fn* right away through ``wrap``."""
    return wrap(fn, on_error)(*args, **kwargs)
