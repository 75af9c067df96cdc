"""Exception hierarchy and tagged failure payloads for resultkit."""

from __future__ import annotations

from typing import Any, ClassVar


class ResultkitError(Exception):
    """Base exception for all resultkit errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(ResultkitError):
    """Settings or retry policy validation failed."""


class ResultAssertionError(ResultkitError, AssertionError):
    """A runtime shape assertion failed at a trust boundary.

    ``cause`` holds the offending value, whatever its type.
    """

    def __init__(self, expected: str, cause: Any) -> None:
        super().__init__(f"Assertion failed. Expected value of type {expected}")
        self.expected = expected
        self.cause = cause
        if isinstance(cause, BaseException):
            self.__cause__ = cause


class EscapedFailure(ResultkitError):
    """A failure payload raised out of the Result algebra.

    Escaping combinators raise exception payloads as they are. Any other
    payload is carried here, in ``error``.
    """

    def __init__(self, error: Any) -> None:
        super().__init__(f"Unhandled failure: {error!r}")
        self.error = error


class TaggedError(Exception):
    """Exception that doubles as a tagged failure payload.

    Subclasses declare their discriminant at class creation::

        class NotFound(TaggedError, tag="NotFound"):
            pass

    Instances satisfy ``is_tagged`` and can be raised like any exception.
    """

    tag: ClassVar[str] = "TaggedError"

    def __init_subclass__(cls, *, tag: str | None = None, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if tag is not None:
            if not isinstance(tag, str) or not tag:
                raise TypeError("TaggedError tag must be a non-empty string")
            cls.tag = tag

    def __init__(self, message: str = "", *, cause: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        if isinstance(cause, BaseException):
            self.__cause__ = cause

    def __repr__(self) -> str:
        return f"{type(self).__name__}(tag={self.tag!r}, message={self.message!r})"


def tagged_error(tag: str) -> type[TaggedError]:
    """Return a fresh ``TaggedError`` subclass carrying *tag*.

    Each call creates a distinct class, so two factories with the same tag
    are still different exception types (but match the same ``catch_tag``).
    """
    return type(tag, (TaggedError,), {"__module__": __name__}, tag=tag)


class UnknownException(TaggedError, tag="UnknownException"):
    """Default failure payload for a raised exception or a malformed step."""

    def __init__(self, *, cause: Any = None) -> None:
        super().__init__("Unknown exception", cause=cause)
