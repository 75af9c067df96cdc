"""Bounded re-attempts of result-returning effects.

Design goals:
- Retry on the failure channel only; raised exceptions are not caught here
- Keep the effect's shape: sync effects retry synchronously, awaitable ones
  give back an awaitable
- Explicit state (policy + attempt counter)
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import inspect
import logging
import math
import time
from typing import TYPE_CHECKING, Any

from resultkit.core.guards import is_success
from resultkit.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from resultkit.core.result import Result

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryContext[E]:
    """What a ``times`` predicate or ``delay_ms`` function gets to look at."""

    #: Zero-based index of the call that just failed.
    attempt: int
    error: E


type RetryTimes = int | float | Callable[[RetryContext[Any]], bool]
type RetryDelay = int | float | Callable[[RetryContext[Any]], float]


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to call an effect and how long to wait in between."""

    #: Total call cap (``math.inf`` for no cap), or a predicate deciding
    #: whether to call again after a failure.
    times: RetryTimes = 3
    #: Milliseconds to wait before the next call, or a function computing it.
    delay_ms: RetryDelay = 0

    def __post_init__(self) -> None:
        """Validate invariants to keep retry behavior predictable."""
        if not callable(self.times):
            if isinstance(self.times, bool) or not isinstance(self.times, (int, float)):
                raise ConfigurationError(
                    "RetryPolicy.times must be a number or a predicate, "
                    f"got {self.times!r}",
                    hint="Pass times=3, times=math.inf, or times=lambda ctx: ...",
                )
            if math.isnan(self.times) or self.times < 1:
                raise ConfigurationError(
                    f"RetryPolicy.times must be >= 1, got {self.times!r}",
                    hint="times counts every call, including the first one.",
                )
        if not callable(self.delay_ms):
            if isinstance(self.delay_ms, bool) or not isinstance(
                self.delay_ms, (int, float)
            ):
                raise ConfigurationError(
                    "RetryPolicy.delay_ms must be a number or a function, "
                    f"got {self.delay_ms!r}",
                    hint="Pass delay_ms=100 or delay_ms=lambda ctx: 100 * 2**ctx.attempt.",
                )
            if math.isnan(self.delay_ms) or self.delay_ms < 0:
                raise ConfigurationError(
                    f"RetryPolicy.delay_ms must be >= 0, got {self.delay_ms!r}"
                )

    def should_retry(self, context: RetryContext[Any]) -> bool:
        if callable(self.times):
            return bool(self.times(context))
        return context.attempt + 1 < self.times

    def delay_for(self, context: RetryContext[Any]) -> float:
        if callable(self.delay_ms):
            return float(self.delay_ms(context))
        return float(self.delay_ms)


def _resolve_policy(
    policy: RetryPolicy | None,
    times: RetryTimes | None,
    delay_ms: RetryDelay | None,
) -> RetryPolicy:
    if policy is None:
        from resultkit.config import get_settings

        policy = get_settings().retry
    if times is None and delay_ms is None:
        return policy
    return RetryPolicy(
        times=policy.times if times is None else times,
        delay_ms=policy.delay_ms if delay_ms is None else delay_ms,
    )


def retry[A, E](
    effect: Callable[[], Result[A, E] | Awaitable[Result[A, E]]],
    *,
    policy: RetryPolicy | None = None,
    times: RetryTimes | None = None,
    delay_ms: RetryDelay | None = None,
) -> Any:
    """Call *effect* until it succeeds or the policy gives up.

    Returns the first success, or the last failure once ``times`` says stop.
    Options left as ``None`` come from *policy*, which defaults to the
    environment-derived ``Settings.retry``.

    Example:
        result = retry(fetch_user, times=5, delay_ms=lambda ctx: 50 * 2**ctx.attempt)
    """
    resolved = _resolve_policy(policy, times, delay_ms)
    current = effect()
    attempt = 0
    while True:
        if inspect.isawaitable(current):
            return _retry_async(effect, resolved, current, attempt)
        if is_success(current):
            return current
        context = RetryContext(attempt=attempt, error=current.error)
        if not resolved.should_retry(context):
            return current
        wait_ms = resolved.delay_for(context)
        log.debug("Retrying after failed attempt %d (delay_ms=%s)", attempt, wait_ms)
        if wait_ms > 0:
            time.sleep(wait_ms / 1000)
        attempt += 1
        current = effect()


async def _retry_async[A, E](
    effect: Callable[[], Result[A, E] | Awaitable[Result[A, E]]],
    policy: RetryPolicy,
    pending: Awaitable[Result[A, E]],
    attempt: int,
) -> Result[A, E]:
    current = await pending
    while True:
        if is_success(current):
            return current
        context = RetryContext(attempt=attempt, error=current.error)
        if not policy.should_retry(context):
            return current
        wait_ms = policy.delay_for(context)
        log.debug("Retrying after failed attempt %d (delay_ms=%s)", attempt, wait_ms)
        if wait_ms > 0:
            await asyncio.sleep(wait_ms / 1000)
        attempt += 1
        next_result = effect()
        current = await next_result if inspect.isawaitable(next_result) else next_result


def eventually[A, E](
    effect: Callable[[], Result[A, E] | Awaitable[Result[A, E]]],
    *,
    delay_ms: RetryDelay | None = None,
) -> Any:
    """Call *effect* until it succeeds, with no cap on attempts."""
    return retry(effect, times=math.inf, delay_ms=delay_ms)
