# src/salesboard/tasks/task_store.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import replace
from typing import Any

from ..core.ports import TaskLoader
from .task_loader import TaskLoadError
from .task_metrics import REFERENCE_REVENUE_PER_HOUR, compute_metrics
from .task_models import (
    DerivedTask,
    Metrics,
    Task,
    TaskPriority,
    TaskStatus,
    clamp_time_taken,
    new_task_id,
    now_iso,
    parse_revenue,
)
from .task_ranking import rank_tasks

logger = logging.getLogger(__name__)

StoreListener = Callable[["TaskStore"], None]

_PATCHABLE = frozenset({"title", "revenue", "time_taken", "priority", "status", "notes"})
_PATCH_ALIASES = {"timeTaken": "time_taken"}


class TaskStore:
    """
    In-memory task collection with one-level undo for deletes.

    The collection is an immutable tuple; every mutation builds a new tuple and swaps it
    in with a single assignment. Ranked tasks and metrics are derived from the current
    tuple on read and cached per tuple, so they are never stale.

    Invariants kept here (and only here):
    - ids are unique
    - time_taken > 0
    - completed_at is set on the first transition into Done and never cleared
    """

    def __init__(
        self,
        *,
        reference_rate: float = REFERENCE_REVENUE_PER_HOUR,
        clock: Callable[[], str] = now_iso,
    ) -> None:
        self._reference_rate = float(reference_rate)
        self._clock = clock

        self._tasks: tuple[Task, ...] = ()
        self._last_deleted: Task | None = None

        self._initialized = False
        self._loading = False
        self._error: str | None = None
        self._alive = True
        self._load_task: asyncio.Task[None] | None = None

        self._view_source: tuple[Task, ...] | None = None
        self._view_ranked: tuple[DerivedTask, ...] = ()
        self._view_metrics: Metrics | None = None

        self._listeners: list[StoreListener] = []

    # ---- read-only surface ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._tasks

    @property
    def derived_sorted(self) -> tuple[DerivedTask, ...]:
        self._refresh_views()
        return self._view_ranked

    @property
    def metrics(self) -> Metrics:
        return self._refresh_views()

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def last_deleted(self) -> Task | None:
        return self._last_deleted

    @property
    def initialized(self) -> bool:
        return self._initialized

    def get_task(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def existing_titles(self) -> list[str]:
        return [t.title for t in self._tasks]

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Register a change listener. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ---- lifecycle ----

    def initialize(self, tasks: Iterable[Task]) -> bool:
        """
        Set the initial collection. Only the first call has an effect.

        Tasks added before initialization are kept after the initial ones; loaded tasks
        whose id is already taken are dropped.
        """
        if self._initialized:
            logger.debug("TaskStore.initialize ignored: already initialized")
            return False
        self._initialized = True

        taken = {t.id for t in self._tasks}
        if self._last_deleted is not None:
            taken.add(self._last_deleted.id)

        incoming: list[Task] = []
        for task in tasks:
            if task.id in taken:
                logger.warning("Dropping task with duplicate id=%s title=%r", task.id, task.title)
                continue
            taken.add(task.id)
            incoming.append(self._normalize(task))

        self._tasks = (*incoming, *self._tasks)
        logger.info("TaskStore initialized with %d tasks (total=%d)", len(incoming), len(self._tasks))
        self._notify()
        return True

    async def load(self, loader: TaskLoader) -> None:
        """
        Run the bootstrap load once per store.

        Repeated or concurrent calls share the first load; they never start another one.
        On failure `error` is set and the store stays usable with its current collection.
        """
        if self._load_task is None:
            if not self._alive:
                return
            self._loading = True
            self._notify()
            self._load_task = asyncio.ensure_future(self._run_load(loader))
        else:
            logger.debug("TaskStore.load: load already started, awaiting it")
        await asyncio.shield(self._load_task)

    async def _run_load(self, loader: TaskLoader) -> None:
        try:
            tasks = await loader.load()
        except TaskLoadError as e:
            if self._alive:
                self._error = str(e) or "Failed to load tasks"
                logger.warning("Task load failed: %s", self._error)
            return
        except Exception as e:
            if self._alive:
                self._error = str(e) or "Failed to load tasks"
                logger.exception("Task load crashed")
            return
        else:
            if self._alive:
                self.initialize(tasks)
            else:
                logger.info("Discarding task load result: store closed")
        finally:
            if self._alive:
                self._loading = False
                self._notify()

    def close(self) -> None:
        """Mark the store as torn down; an in-flight load will not write into it."""
        self._alive = False
        self._listeners.clear()

    # ---- mutations ----

    def add_task(
        self,
        *,
        title: str,
        revenue: float,
        time_taken: float,
        priority: TaskPriority | str = TaskPriority.MEDIUM,
        status: TaskStatus | str = TaskStatus.TODO,
        notes: str | None = None,
        id: str | None = None,
    ) -> str:
        """
        Append a new task and return its id.

        Input is normalized, never rejected: hours are clamped, a non-numeric or non-finite
        revenue becomes 0, negative revenue is floored at 0.
        """
        now = self._clock()
        status_v = TaskStatus.parse(status)

        revenue_v = parse_revenue(revenue)
        if revenue_v is None:
            logger.warning("Invalid revenue %r on new task %r; using 0", revenue, title)
            revenue_v = 0.0

        task_id = id or new_task_id()
        if self._id_taken(task_id):
            fresh = new_task_id()
            logger.warning("Task id %s already in use; assigned %s instead", task_id, fresh)
            task_id = fresh

        task = Task(
            id=task_id,
            title=title,
            revenue=revenue_v,
            time_taken=clamp_time_taken(time_taken),
            priority=TaskPriority.parse(priority),
            status=status_v,
            created_at=now,
            completed_at=now if status_v is TaskStatus.DONE else None,
            notes=notes,
        )
        self._tasks = (*self._tasks, task)
        logger.debug("Task added id=%s title=%r status=%s", task.id, task.title, task.status.value)
        self._notify()
        return task.id

    def update_task(self, task_id: str, patch: Mapping[str, Any] | None = None, **fields: Any) -> bool:
        """
        Apply a partial patch. Returns False (and changes nothing) if the id is unknown.

        id/created_at/completed_at cannot be patched. Invalid priority/status values are
        ignored; a non-positive time_taken becomes 1.
        """
        changes = self._clean_patch({**(patch or {}), **fields})

        for idx, current in enumerate(self._tasks):
            if current.id != task_id:
                continue

            updated = replace(current, **changes)
            if updated.status is TaskStatus.DONE and not current.completed_at:
                updated = replace(updated, completed_at=self._clock())

            self._tasks = (*self._tasks[:idx], updated, *self._tasks[idx + 1 :])
            logger.debug("Task updated id=%s fields=%s", task_id, sorted(changes))
            self._notify()
            return True

        logger.debug("Task update ignored: id=%s not found", task_id)
        return False

    def delete_task(self, task_id: str) -> bool:
        """Remove a task. The removed task (or None) replaces the last-deleted buffer."""
        target = self.get_task(task_id)
        self._last_deleted = target
        if target is None:
            logger.debug("Task delete: id=%s not found", task_id)
        else:
            self._tasks = tuple(t for t in self._tasks if t.id != task_id)
            logger.debug("Task deleted id=%s title=%r", task_id, target.title)
        self._notify()
        return target is not None

    def undo_delete(self) -> bool:
        """Re-append the last deleted task unchanged and clear the buffer."""
        task = self._last_deleted
        if task is None:
            return False
        if self.get_task(task.id) is not None:
            logger.warning("Cannot restore task id=%s: id is in use", task.id)
            return False

        self._tasks = (*self._tasks, task)
        self._last_deleted = None
        logger.debug("Task restored id=%s", task.id)
        self._notify()
        return True

    def clear_last_deleted(self) -> None:
        if self._last_deleted is None:
            return
        self._last_deleted = None
        self._notify()

    # ---- helpers ----

    def _id_taken(self, task_id: str) -> bool:
        if self._last_deleted is not None and self._last_deleted.id == task_id:
            return True
        return self.get_task(task_id) is not None

    @staticmethod
    def _normalize(task: Task) -> Task:
        hours = clamp_time_taken(task.time_taken)
        if hours != task.time_taken:
            task = replace(task, time_taken=hours)
        revenue = parse_revenue(task.revenue)
        if revenue is None or revenue != task.revenue:
            task = replace(task, revenue=revenue or 0.0)
        if task.status is TaskStatus.DONE and not task.completed_at:
            task = replace(task, completed_at=task.created_at)
        return task

    @staticmethod
    def _clean_patch(raw: Mapping[str, Any]) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for key, value in raw.items():
            name = _PATCH_ALIASES.get(key, key)
            if name not in _PATCHABLE:
                logger.debug("Ignoring non-patchable field %r", key)
                continue

            if name == "time_taken":
                out[name] = clamp_time_taken(value)
            elif name == "revenue":
                revenue = parse_revenue(value)
                if revenue is None:
                    logger.warning("Ignoring invalid revenue %r", value)
                else:
                    out[name] = revenue
            elif name == "priority":
                priority = TaskPriority.lookup(value)
                if priority is None:
                    logger.warning("Ignoring invalid priority %r", value)
                else:
                    out[name] = priority
            elif name == "status":
                status = TaskStatus.lookup(value)
                if status is None:
                    logger.warning("Ignoring invalid status %r", value)
                else:
                    out[name] = status
            elif name == "title":
                out[name] = str(value)
            else:
                out[name] = value
        return out

    def _refresh_views(self) -> Metrics:
        """Recompute ranked view + metrics if the collection changed; returns the metrics."""
        if self._view_source is self._tasks and self._view_metrics is not None:
            return self._view_metrics
        source = self._tasks
        metrics = compute_metrics(source, reference_rate=self._reference_rate)
        self._view_ranked = tuple(rank_tasks(source))
        self._view_metrics = metrics
        self._view_source = source
        return metrics

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("TaskStore listener failed")
