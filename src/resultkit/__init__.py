"""resultkit: failures as values, with combinators that work sync or async.

Public API:
    - success() / failure(): Result constructors
    - wrap() / attempt(): guard raising callables
    - pipe() / flow(): chain combinators left to right
    - gen() / sequence(): straight-line sequencing with early exit
    - retry() / eventually(): bounded re-attempts
    - schema(): validation through a pluggable validator

Example:
    from resultkit import TaggedError, catch_tags, failure, flat_map, pipe, success

    class NotFound(TaggedError, tag="NotFound"):
        pass

    def positive(n):
        return success(n) if n > 0 else failure(NotFound("no such item"))

    pipe(
        success(-1),
        flat_map(positive),
        catch_tags({"NotFound": lambda _: success(0)}),
    )  # Success(value=0)
"""

from __future__ import annotations

import logging

from resultkit.config import Settings, get_settings
from resultkit.core.combinators import (
    catch_all,
    catch_if,
    catch_some,
    catch_tag,
    catch_tags,
    filter_or_die,
    filter_or_else,
    filter_or_fail,
    flat_map,
    map_,
    map_error,
    or_die,
    or_die_with,
    or_else,
    or_else_fail,
    or_else_succeed,
    raise_escaped,
    tap,
    tap_error,
    tap_error_tag,
)
from resultkit.core.guards import (
    assert_failure,
    assert_result,
    assert_success,
    assert_tagged,
    is_failure,
    is_result,
    is_success,
    is_tagged,
)
from resultkit.core.result import (
    Combinator,
    Failure,
    Result,
    ResultAsync,
    ResultMaybeAsync,
    Success,
    attempt,
    failure,
    select_shape,
    success,
    wrap,
)
from resultkit.core.sequence import gen, sequence
from resultkit.errors import (
    ConfigurationError,
    EscapedFailure,
    ResultAssertionError,
    ResultkitError,
    TaggedError,
    UnknownException,
    tagged_error,
)
from resultkit.pipe import flow, pipe
from resultkit.retry import RetryContext, RetryPolicy, eventually, retry
from resultkit.schema import (
    PydanticValidator,
    SchemaError,
    Validator,
    schema,
    schema_or_die,
    schema_or_else,
    schema_or_fail,
    validate,
)

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("resultkit")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("resultkit").addHandler(logging.NullHandler())

__all__ = [
    "Combinator",
    "ConfigurationError",
    "EscapedFailure",
    "Failure",
    "PydanticValidator",
    "Result",
    "ResultAssertionError",
    "ResultAsync",
    "ResultMaybeAsync",
    "ResultkitError",
    "RetryContext",
    "RetryPolicy",
    "SchemaError",
    "Settings",
    "Success",
    "TaggedError",
    "UnknownException",
    "Validator",
    "assert_failure",
    "assert_result",
    "assert_success",
    "assert_tagged",
    "attempt",
    "catch_all",
    "catch_if",
    "catch_some",
    "catch_tag",
    "catch_tags",
    "eventually",
    "failure",
    "filter_or_die",
    "filter_or_else",
    "filter_or_fail",
    "flat_map",
    "flow",
    "gen",
    "get_settings",
    "is_failure",
    "is_result",
    "is_success",
    "is_tagged",
    "map_",
    "map_error",
    "or_die",
    "or_die_with",
    "or_else",
    "or_else_fail",
    "or_else_succeed",
    "pipe",
    "raise_escaped",
    "retry",
    "schema",
    "schema_or_die",
    "schema_or_else",
    "schema_or_fail",
    "select_shape",
    "sequence",
    "success",
    "tagged_error",
    "tap",
    "tap_error",
    "tap_error_tag",
    "validate",
    "wrap",
]
