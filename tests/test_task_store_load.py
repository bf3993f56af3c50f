# tests/test_task_store_load.py

from __future__ import annotations

import asyncio

import pytest

from salesboard.tasks.task_store import TaskStore

from .conftest import make_task
from .fakes import FakeLoader, failing_loader


@pytest.mark.asyncio
async def test_load_initializes_store(store: TaskStore) -> None:
    loader = FakeLoader([make_task("A", id="a"), make_task("B", id="b")])

    await store.load(loader)

    assert [t.id for t in store.tasks] == ["a", "b"]
    assert store.loading is False
    assert store.error is None
    assert store.initialized


@pytest.mark.asyncio
async def test_load_runs_exactly_once(store: TaskStore) -> None:
    loader = FakeLoader([make_task("A", id="a")], gated=True)

    first = asyncio.create_task(store.load(loader))
    second = asyncio.create_task(store.load(loader))
    await asyncio.sleep(0)
    assert store.loading is True

    loader.release()
    await asyncio.gather(first, second)
    await store.load(loader)

    assert loader.calls == 1
    assert len(store.tasks) == 1


@pytest.mark.asyncio
async def test_load_failure_sets_error_and_store_stays_usable(store: TaskStore) -> None:
    await store.load(failing_loader("Failed to load tasks: HTTP 503 from http://x"))

    assert store.error == "Failed to load tasks: HTTP 503 from http://x"
    assert store.loading is False
    assert store.tasks == ()
    assert store.initialized is False

    task_id = store.add_task(title="Manual", revenue=1, time_taken=1)
    assert store.get_task(task_id) is not None


@pytest.mark.asyncio
async def test_unexpected_loader_crash_is_reported(store: TaskStore) -> None:
    await store.load(FakeLoader(error=ValueError("bad payload")))
    assert store.error == "bad payload"


@pytest.mark.asyncio
async def test_load_after_close_does_not_write(store: TaskStore) -> None:
    loader = FakeLoader([make_task("A", id="a")], gated=True)

    pending = asyncio.create_task(store.load(loader))
    await asyncio.sleep(0)
    store.close()
    loader.release()
    await pending

    assert store.tasks == ()
    assert store.initialized is False


@pytest.mark.asyncio
async def test_failed_load_after_close_leaves_no_error(store: TaskStore) -> None:
    loader = FakeLoader(error=RuntimeError("late"), gated=True)

    pending = asyncio.create_task(store.load(loader))
    await asyncio.sleep(0)
    store.close()
    loader.release()
    await pending

    assert store.error is None


@pytest.mark.asyncio
async def test_tasks_added_during_load_are_kept(store: TaskStore) -> None:
    loader = FakeLoader([make_task("Loaded", id="loaded")], gated=True)

    pending = asyncio.create_task(store.load(loader))
    await asyncio.sleep(0)
    added = store.add_task(title="Added meanwhile", revenue=10, time_taken=1)
    loader.release()
    await pending

    assert [t.id for t in store.tasks] == ["loaded", added]


@pytest.mark.asyncio
async def test_closed_store_never_starts_a_load(store: TaskStore) -> None:
    loader = FakeLoader([make_task("A", id="a")])
    store.close()
    await store.load(loader)
    assert loader.calls == 0
