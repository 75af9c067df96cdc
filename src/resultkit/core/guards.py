"""Structural guards and assertions for results and tagged values.

Guards inspect shape, not class: anything exposing ``tag == "ok"`` and a
``value`` attribute is a success, whether or not it is a ``Success``. They
never raise, whatever object they are handed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeGuard

from resultkit.errors import ResultAssertionError

if TYPE_CHECKING:
    from resultkit.core.result import Failure, Success

_MISSING = object()


def _probe(value: Any, name: str) -> Any:
    try:
        return getattr(value, name, _MISSING)
    except Exception:
        return _MISSING


def is_tagged(value: Any, tag: str | None = None) -> bool:
    """Return True when *value* exposes a string ``tag`` (equal to *tag* if given)."""
    found = _probe(value, "tag")
    if not isinstance(found, str):
        return False
    return tag is None or found == tag


def is_success(value: Any) -> TypeGuard[Success[Any]]:
    return is_tagged(value, "ok") and _probe(value, "value") is not _MISSING


def is_failure(value: Any) -> TypeGuard[Failure[Any]]:
    return is_tagged(value, "error") and _probe(value, "error") is not _MISSING


def is_result(value: Any) -> TypeGuard[Success[Any] | Failure[Any]]:
    return is_success(value) or is_failure(value)


def assert_tagged(value: Any, tag: str | None = None) -> None:
    """Raise ``ResultAssertionError`` unless *value* is tagged (with *tag*)."""
    if tag is not None:
        if not is_tagged(value, tag):
            raise ResultAssertionError(f"Tagged[{tag}]", value)
    elif not is_tagged(value):
        raise ResultAssertionError("Tagged", value)


def assert_success(value: Any) -> None:
    if not is_success(value):
        raise ResultAssertionError("Success", value)


def assert_failure(value: Any) -> None:
    if not is_failure(value):
        raise ResultAssertionError("Failure", value)


def assert_result(value: Any) -> None:
    if not is_result(value):
        raise ResultAssertionError("Result", value)
