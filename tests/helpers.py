"""Test helpers (small, reusable doubles).

Keep this file tiny and purpose-built: it exists so retry, tap and
sequencing suites do not each grow their own one-off fakes.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ScriptedEffect:
    """Zero-argument effect returning a scripted sequence of results.

    Counts calls so retry tests can assert exact attempt numbers. The last
    scripted item repeats once the script runs out.
    """

    script: list[Any]
    calls: int = 0

    def __call__(self) -> Any:
        self.calls += 1
        index = min(self.calls, len(self.script)) - 1
        return self.script[index]


@dataclass
class AsyncScriptedEffect(ScriptedEffect):
    """``ScriptedEffect`` whose results arrive through a coroutine."""

    def __call__(self) -> Any:
        item = super().__call__()

        async def deliver() -> Any:
            await asyncio.sleep(0)
            return item

        return deliver()


@dataclass
class Recorder:
    """Callable that records every argument it is called with."""

    seen: list[Any] = field(default_factory=list)

    def __call__(self, value: Any) -> None:
        self.seen.append(value)


@dataclass
class AsyncRecorder(Recorder):
    """``Recorder`` whose call returns a coroutine; records once awaited."""

    def __call__(self, value: Any) -> Any:
        async def record() -> None:
            await asyncio.sleep(0)
            self.seen.append(value)

        return record()


async def resolved(value: Any) -> Any:
    """Return *value* from a coroutine, after one loop turn."""
    await asyncio.sleep(0)
    return value
