"""Left-to-right function application for building combinator chains."""

from __future__ import annotations

from functools import reduce
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable


def pipe(value: Any, *functions: Callable[[Any], Any]) -> Any:
    """Feed *value* through *functions* in order and return the last output.

    Example:
        pipe(success(1), map_(lambda n: n + 1), tap(print))  # Success(value=2)
    """
    return reduce(lambda acc, fn: fn(acc), functions, value)


def flow(*functions: Callable[[Any], Any]) -> Callable[[Any], Any]:
    """Compose *functions* left to right into one reusable unary function.

    ``flow()`` is the identity. Useful for naming a recovery policy once and
    applying it in many pipelines.
    """

    def composed(value: Any) -> Any:
        return pipe(value, *functions)

    return composed
