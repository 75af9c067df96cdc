"""Schema validation as combinators.

A validator is any object with ``validate(value)`` returning (or resolving
to) ``{"value": parsed}`` on success or ``{"issues": [...]}`` on failure, each
issue being ``{"message": str, "path": [...]}``. ``PydanticValidator`` adapts
pydantic models and types to that contract.
"""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any, NotRequired, Protocol, TypedDict

from pydantic import TypeAdapter, ValidationError

from resultkit.core.combinators import flat_map, raise_escaped
from resultkit.core.guards import is_failure
from resultkit.core.result import Failure, Success, failure, select_shape, success
from resultkit.errors import TaggedError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping, Sequence

    from resultkit.core.result import Combinator, Result


class Issue(TypedDict):
    message: str
    path: NotRequired[Sequence[Any]]


class Validator(Protocol):
    def validate(
        self, value: Any, /
    ) -> Mapping[str, Any] | Awaitable[Mapping[str, Any]]: ...


class SchemaError(TaggedError, tag="SchemaError"):
    """Validation failed; ``issues`` lists every reported problem."""

    def __init__(self, issues: Sequence[Issue]) -> None:
        issues = tuple(issues)
        message = issues[0].get("message", "Schema error") if issues else "Schema error"
        super().__init__(message)
        self.issues = issues


def _outcome_to_result(outcome: Mapping[str, Any]) -> Result[Any, SchemaError]:
    issues = outcome.get("issues")
    if issues is None:
        return Success(outcome.get("value"))
    return Failure(SchemaError(issues))


def validate(validator: Validator, value: Any) -> Any:
    """Validate *value* once, as a result; awaitable if the validator is."""
    outcome = validator.validate(value)
    if inspect.isawaitable(outcome):
        return select_shape(outcome, _outcome_to_result)
    return _outcome_to_result(outcome)


def _on_schema_error(validation: Any, handle: Callable[[SchemaError], Any]) -> Any:
    def apply(result: Any) -> Any:
        if is_failure(result):
            return handle(result.error)
        return result

    return select_shape(validation, apply)


def schema[A, E](
    validator: Validator,
) -> Combinator[Result[A, E], Result[Any, E | SchemaError]]:
    """Validate a success's value; an invalid one fails with ``SchemaError``."""
    return flat_map(lambda value: validate(validator, value))


def schema_or_else[A, B, E](
    validator: Validator, or_else: Callable[[], B]
) -> Combinator[Result[A, E], Result[Any, E]]:
    """Like ``schema``, but an invalid value becomes ``success(or_else())``."""
    return flat_map(
        lambda value: _on_schema_error(
            validate(validator, value), lambda _: success(or_else())
        )
    )


def schema_or_fail[A, E, F](
    validator: Validator, on_fail: Callable[[SchemaError], F]
) -> Combinator[Result[A, E], Result[Any, E | F]]:
    """Like ``schema``, but an invalid value fails with ``on_fail(schema_error)``."""
    return flat_map(
        lambda value: _on_schema_error(
            validate(validator, value), lambda error: failure(on_fail(error))
        )
    )


def schema_or_die[A, E](
    validator: Validator, on_die: Callable[[], Any]
) -> Combinator[Result[A, E], Result[Any, E]]:
    """Like ``schema``, but an invalid value calls *on_die*, which should raise."""
    return flat_map(
        lambda value: _on_schema_error(
            validate(validator, value), lambda _: raise_escaped(on_die())
        )
    )


class PydanticValidator:
    """Validator backed by a pydantic ``TypeAdapter``.

    Accepts a ``BaseModel`` subclass or any type pydantic can validate.

    Example:
        class User(BaseModel):
            name: str

        pipe(success({"name": "Ada"}), schema(PydanticValidator(User)))
    """

    def __init__(self, target: Any) -> None:
        self.target = target
        self._adapter: TypeAdapter[Any] = TypeAdapter(target)

    def validate(self, value: Any, /) -> dict[str, Any]:
        try:
            parsed = self._adapter.validate_python(value)
        except ValidationError as e:
            return {
                "issues": [
                    {"message": err["msg"], "path": list(err["loc"])}
                    for err in e.errors()
                ]
            }
        return {"value": parsed}
