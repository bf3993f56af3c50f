# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from salesboard.core.state import AppState
from salesboard.tasks.task_models import Task, TaskPriority, TaskStatus
from salesboard.tasks.task_store import TaskStore

from .fakes import FakeClock, FakeLoader


def make_task(
    title: str,
    revenue: float = 100.0,
    time_taken: float = 10.0,
    *,
    id: str | None = None,
    priority: TaskPriority = TaskPriority.MEDIUM,
    status: TaskStatus = TaskStatus.TODO,
    completed_at: str | None = None,
    notes: str | None = None,
) -> Task:
    return Task(
        id=id or f"id-{title}",
        title=title,
        revenue=revenue,
        time_taken=time_taken,
        priority=priority,
        status=status,
        created_at="2024-01-01T00:00:00.000Z",
        completed_at=completed_at,
        notes=notes,
    )


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI helpers.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="salesboard-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        tasks_source=str(tmp_path / "tasks.json"),
        seed_count=5,
        seed=7,
        load_timeout_seconds=1.0,
        reference_revenue_per_hour=100.0,
        console_enabled=False,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(clock: FakeClock) -> TaskStore:
    return TaskStore(clock=clock)


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore) -> AppState:
    """AppState with a pre-initialized store and a fake loader."""
    store.initialize(
        [
            make_task("X", 100, 10, id="x"),
            make_task("Y", 300, 10, id="y"),
        ]
    )
    return AppState(settings=settings, store=store, loader=FakeLoader())
