"""Internal helpers for development-time feature flags.

This module stays minimal so combinators can check opt-in validation
toggles without pulling in the rest of the settings layer. A malformed
retry setting must never make a combinator raise.
"""

from __future__ import annotations

import os

__all__ = ["strict_enabled"]

_TRUTHY = frozenset({"1", "true", "t", "yes", "y", "on"})


def strict_enabled(*, override: bool | None = None) -> bool:
    """Return True when handler outputs should be checked to be results.

    - If ``override`` is provided, it takes precedence.
    - Otherwise, returns True when ``RESULTKIT_STRICT`` holds a truthy
      value (``1``, ``true``, ``yes``, ``on``; case-insensitive).
    """
    if override is not None:
        return bool(override)
    return os.getenv("RESULTKIT_STRICT", "").strip().lower() in _TRUTHY
