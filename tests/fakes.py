# tests/fakes.py

from __future__ import annotations

import asyncio
import itertools

from salesboard.tasks.task_loader import TaskLoadError
from salesboard.tasks.task_models import Task


class FakeLoader:
    """
    Deterministic TaskLoader for unit tests.

    - Counts calls (the store must load exactly once)
    - Optionally blocks until `release()` so tests can act while a load is in flight
    - Optionally raises a given error instead of returning tasks
    """

    def __init__(
        self,
        tasks: list[Task] | None = None,
        *,
        error: Exception | None = None,
        gated: bool = False,
    ) -> None:
        self.tasks = list(tasks or [])
        self.error = error
        self.calls = 0
        self._gate = asyncio.Event()
        if not gated:
            self._gate.set()

    def release(self) -> None:
        self._gate.set()

    async def load(self) -> list[Task]:
        self.calls += 1
        await self._gate.wait()
        if self.error is not None:
            raise self.error
        return list(self.tasks)


def failing_loader(message: str = "Failed to load tasks: HTTP 500 from http://x") -> FakeLoader:
    return FakeLoader(error=TaskLoadError(message))


class FakeClock:
    """Returns increasing ISO timestamps, one second apart."""

    def __init__(self) -> None:
        self._counter = itertools.count()
        self.last: str | None = None

    def __call__(self) -> str:
        n = next(self._counter)
        self.last = f"2024-01-01T00:00:{n:02d}.000Z"
        return self.last
