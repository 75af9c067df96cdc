"""Combinators: configured ``Result -> Result`` steps for use with ``pipe``.

Every factory here returns a unary function built on ``select_shape``, so a
resolved result goes in and a resolved result comes out, and an awaitable
goes in and an awaitable comes out. Callbacks may return awaitables too; the
output is then awaitable as well.

Success-side combinators (``map_``, ``flat_map``, ``tap``, ``filter_*``)
return failures untouched, and failure-side combinators (``map_error``,
``tap_error*``, ``catch_*``, ``or_*``) return successes untouched. A failure
that a combinator does not handle is returned as the very same object.

Example:
    from resultkit import catch_tag, map_, pipe, success

    pipe(
        success(2),
        map_(lambda n: n * 10),
        catch_tag("NotFound", lambda _: success(0)),
    )  # Success(value=20)
"""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any, Never

from resultkit._dev_flags import strict_enabled
from resultkit.core.guards import (
    assert_result,
    is_failure,
    is_result,
    is_success,
    is_tagged,
)
from resultkit.core.result import failure, select_shape, success
from resultkit.errors import EscapedFailure

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from resultkit.core.result import Combinator, Result

_NO_CAUSE = object()


def _combinator(apply: Callable[[Any], Any]) -> Any:
    def combinator(result: Any) -> Any:
        return select_shape(result, apply)

    return combinator


def _checked(output: Any) -> Any:
    """Assert *output* is a result when strict mode is on."""
    if not strict_enabled():
        return output
    if inspect.isawaitable(output):
        return _checked_async(output)
    assert_result(output)
    return output


async def _checked_async(pending: Awaitable[Any]) -> Any:
    resolved = await pending
    assert_result(resolved)
    return resolved


def _then_return(effect: Any, result: Any) -> Any:
    """Return *result*, after *effect* completes if it is awaitable."""
    if inspect.isawaitable(effect):
        return _await_then_return(effect, result)
    return result


async def _await_then_return(effect: Awaitable[Any], result: Any) -> Any:
    await effect
    return result


def raise_escaped(payload: Any, cause: Any = _NO_CAUSE) -> Never:
    """Raise *payload* out of the Result algebra.

    Exceptions are raised as they are; anything else inside ``EscapedFailure``.
    An exception *cause* is chained as ``__cause__``.
    """
    exc = payload if isinstance(payload, BaseException) else EscapedFailure(payload)
    if isinstance(cause, BaseException) and cause is not exc:
        raise exc from cause
    raise exc


# --- Success channel ---


def flat_map[A, B, E, F](
    fn: Callable[[A], Result[B, F] | Awaitable[Result[B, F]]],
) -> Combinator[Result[A, E], Result[B, E | F]]:
    """Replace a success with the result ``fn(value)`` returns."""

    def apply(result: Any) -> Any:
        if is_failure(result):
            return result
        return _checked(fn(result.value))

    return _combinator(apply)


def map_[A, B, E](fn: Callable[[A], B]) -> Combinator[Result[A, E], Result[B, E]]:
    """Replace a success's value with ``fn(value)``."""

    def apply(result: Any) -> Any:
        if is_failure(result):
            return result
        return success(fn(result.value))

    return _combinator(apply)


def tap[A, E](fn: Callable[[A], Any]) -> Combinator[Result[A, E], Result[A, E]]:
    """Run ``fn(value)`` for its effect; an awaitable effect is awaited first."""

    def apply(result: Any) -> Any:
        if is_failure(result):
            return result
        return _then_return(fn(result.value), result)

    return _combinator(apply)


def filter_or_else[A, B, E](
    predicate: Callable[[A], bool], or_else: Callable[[], B]
) -> Combinator[Result[A, E], Result[A | B, E]]:
    """Keep a success passing *predicate*, else succeed with ``or_else()``."""

    def apply(result: Any) -> Any:
        if is_failure(result) or predicate(result.value):
            return result
        return success(or_else())

    return _combinator(apply)


def filter_or_fail[A, E, F](
    predicate: Callable[[A], bool], on_fail: Callable[[A], F]
) -> Combinator[Result[A, E], Result[A, E | F]]:
    """Keep a success passing *predicate*, else fail with ``on_fail(value)``."""

    def apply(result: Any) -> Any:
        if is_failure(result) or predicate(result.value):
            return result
        return failure(on_fail(result.value))

    return _combinator(apply)


def filter_or_die[A, E](
    predicate: Callable[[A], bool], on_die: Callable[[], Any]
) -> Combinator[Result[A, E], Result[A, E]]:
    """Keep a success whose value passes *predicate*, else call *on_die*.

    *on_die* is expected to raise. If it returns an exception instead, that
    exception is raised; any other return value escapes as ``EscapedFailure``.
    """

    def apply(result: Any) -> Any:
        if is_failure(result) or predicate(result.value):
            return result
        raise_escaped(on_die())

    return _combinator(apply)


# --- Failure channel ---


def map_error[A, E, F](fn: Callable[[E], F]) -> Combinator[Result[A, E], Result[A, F]]:
    """Replace a failure's error with ``fn(error)``."""
    return or_else_fail(fn)


def tap_error[A, E](fn: Callable[[E], Any]) -> Combinator[Result[A, E], Result[A, E]]:
    """Run ``fn(error)`` for its effect; an awaitable effect is awaited first."""

    def apply(result: Any) -> Any:
        if is_success(result):
            return result
        return _then_return(fn(result.error), result)

    return _combinator(apply)


def tap_error_tag[A, E](
    tag: str, fn: Callable[[Any], Any]
) -> Combinator[Result[A, E], Result[A, E]]:
    """Like ``tap_error``, but only for errors tagged *tag*."""

    def apply(result: Any) -> Any:
        if is_success(result) or not is_tagged(result.error, tag):
            return result
        return _then_return(fn(result.error), result)

    return _combinator(apply)


def catch_all[A, B, E](
    fn: Callable[[E], Result[B, Never] | Awaitable[Result[B, Never]]],
) -> Combinator[Result[A, E], Result[A | B, Never]]:
    """Replace a failure with ``fn(error)``, which is trusted never to fail."""

    def apply(result: Any) -> Any:
        if is_success(result):
            return result
        return _checked(fn(result.error))

    return _combinator(apply)


def catch_if[A, B, E, F](
    predicate: Callable[[E], bool],
    fn: Callable[[E], Result[B, F] | Awaitable[Result[B, F]]],
) -> Combinator[Result[A, E], Result[A | B, E | F]]:
    """Replace a failure whose error passes *predicate* with ``fn(error)``."""

    def apply(result: Any) -> Any:
        if is_success(result) or not predicate(result.error):
            return result
        return _checked(fn(result.error))

    return _combinator(apply)


def catch_some[A, B, E, F](
    fn: Callable[[E], Result[B, F] | Awaitable[Result[B, F] | None] | None],
) -> Combinator[Result[A, E], Result[A | B, E | F]]:
    """Let ``fn(error)`` pick a replacement result, or return None to pass."""

    def pick(result: Any, replacement: Any) -> Any:
        if replacement is None:
            return result
        if is_result(replacement):
            return replacement
        if strict_enabled():
            assert_result(replacement)
        return result

    def apply(result: Any) -> Any:
        if is_success(result):
            return result
        replacement = fn(result.error)
        if inspect.isawaitable(replacement):
            return _pick_async(replacement, result, pick)
        return pick(result, replacement)

    return _combinator(apply)


async def _pick_async(
    pending: Awaitable[Any], result: Any, pick: Callable[[Any, Any], Any]
) -> Any:
    return pick(result, await pending)


def catch_tag[A, B, E, F](
    tag: str, fn: Callable[[Any], Result[B, F] | Awaitable[Result[B, F]]]
) -> Combinator[Result[A, E], Result[A | B, E | F]]:
    """Replace a failure whose error is tagged *tag* with ``fn(error)``."""

    def apply(result: Any) -> Any:
        if is_success(result) or not is_tagged(result.error, tag):
            return result
        return _checked(fn(result.error))

    return _combinator(apply)


def catch_tags[A, B, E, F](
    handlers: Mapping[str, Callable[[Any], Result[B, F] | Awaitable[Result[B, F]]]],
) -> Combinator[Result[A, E], Result[A | B, E | F]]:
    """Dispatch a tagged failure to ``handlers[error.tag]``.

    Failures whose tag has no handler, and untagged failures, pass through.
    """

    def apply(result: Any) -> Any:
        if is_success(result) or not is_tagged(result.error):
            return result
        handler = handlers.get(result.error.tag)
        if handler is None:
            return result
        return _checked(handler(result.error))

    return _combinator(apply)


def or_else[A, B, E, F](
    fn: Callable[[E], Result[B, F] | Awaitable[Result[B, F]]],
) -> Combinator[Result[A, E], Result[A | B, F]]:
    """Replace a failure with ``fn(error)``, keeping that result's failure channel."""

    def apply(result: Any) -> Any:
        if is_success(result):
            return result
        return _checked(fn(result.error))

    return _combinator(apply)


def or_else_fail[A, E, F](
    fn: Callable[[E], F],
) -> Combinator[Result[A, E], Result[A, F]]:
    """Fail with ``fn(error)`` instead of the original error."""

    def apply(result: Any) -> Any:
        if is_success(result):
            return result
        return failure(fn(result.error))

    return _combinator(apply)


def or_else_succeed[A, B, E](
    fn: Callable[[E], B],
) -> Combinator[Result[A, E], Result[A | B, Never]]:
    """Turn a failure into a success holding ``fn(error)``."""

    def apply(result: Any) -> Any:
        if is_success(result):
            return result
        return success(fn(result.error))

    return _combinator(apply)


# --- Escaping ---


def or_die[A, E]() -> Combinator[Result[A, E], Result[A, Never]]:
    """Raise a failure's error, wrapping non-exceptions in ``EscapedFailure``."""

    def apply(result: Any) -> Any:
        if is_success(result):
            return result
        raise_escaped(result.error)

    return _combinator(apply)


def or_die_with[A, E](
    fn: Callable[[E], Any],
) -> Combinator[Result[A, E], Result[A, Never]]:
    """Raise ``fn(error)``, chained to the original error when that is an exception."""

    def apply(result: Any) -> Any:
        if is_success(result):
            return result
        raise_escaped(fn(result.error), cause=result.error)

    return _combinator(apply)
