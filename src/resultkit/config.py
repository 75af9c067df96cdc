"""Configuration: frozen Settings resolved once from ``RESULTKIT_*`` variables.

Recognized environment variables (a ``.env`` file is honored):

- ``RESULTKIT_STRICT``: ``1``/``true`` turns on strict mode, where handlers
  passed to ``flat_map`` and the catch/or-else family must return results.
  Combinators read it from the process environment on each call, apart
  from the rest of these settings.
- ``RESULTKIT_RETRY_TIMES``: default call cap for ``retry`` (>= 1).
- ``RESULTKIT_RETRY_DELAY_MS``: default wait between retries (>= 0).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cache
import os
from typing import TYPE_CHECKING

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError

from resultkit.errors import ConfigurationError
from resultkit.retry import RetryPolicy

if TYPE_CHECKING:
    from collections.abc import Mapping

ENV_PREFIX = "RESULTKIT_"


class _EnvSchema(BaseModel):
    """Validation wall for the environment layer."""

    strict: bool = False
    retry_times: int = Field(default=3, ge=1)
    retry_delay_ms: float = Field(default=0.0, ge=0)

    model_config = {"extra": "ignore"}


@dataclass(frozen=True)
class Settings:
    """Immutable library-wide defaults.

    Example:
        settings = Settings(strict=True, retry=RetryPolicy(times=5))
    """

    strict: bool = False
    retry: RetryPolicy = field(default_factory=RetryPolicy)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from *environ* (``os.environ`` plus ``.env`` by default)."""
        if environ is None:
            load_dotenv(find_dotenv(usecwd=True))
            environ = os.environ
        raw = {
            key[len(ENV_PREFIX) :].lower(): value
            for key, value in environ.items()
            if key.startswith(ENV_PREFIX)
        }
        try:
            parsed = _EnvSchema.model_validate(raw)
        except ValidationError as e:
            err = e.errors()[0]
            name = ENV_PREFIX + "_".join(str(p) for p in err.get("loc", ())).upper()
            raise ConfigurationError(
                f"Invalid {name}: {err.get('msg')}",
                hint=f"Fix or unset {name}; see resultkit.config for accepted values.",
            ) from e
        return cls(
            strict=parsed.strict,
            retry=RetryPolicy(times=parsed.retry_times, delay_ms=parsed.retry_delay_ms),
        )


@cache
def get_settings() -> Settings:
    """Return the environment-derived settings, resolved on first use."""
    return Settings.from_env()
