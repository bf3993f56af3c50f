# src/salesboard/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..core.ports import TaskLoader
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Settings object (real Settings or a SimpleNamespace in tests).
    settings: Any

    store: TaskStore
    loader: TaskLoader
