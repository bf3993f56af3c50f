# src/salesboard/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The store depends on a loader Protocol instead of a concrete transport, so tests can
swap in fakes and consumers can plug their own data source.
"""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import Task


class TaskLoader(Protocol):
    """Supplies the initial task collection. May raise TaskLoadError."""

    async def load(self) -> list[Task]: ...
