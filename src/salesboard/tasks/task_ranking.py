# src/salesboard/tasks/task_ranking.py

from __future__ import annotations

from collections.abc import Iterable

from .task_metrics import with_derived
from .task_models import DerivedTask, Task, TaskPriority

PRIORITY_RANK: dict[TaskPriority, int] = {
    TaskPriority.HIGH: 3,
    TaskPriority.MEDIUM: 2,
    TaskPriority.LOW: 1,
}


def ranking_key(item: DerivedTask) -> tuple:
    """
    Sort key for the ranked view:
    1. ROI descending, undefined ROI last
    2. priority descending (High > Medium > Low)
    3. title ascending (case-insensitive, then exact), id as the final tie-break

    The key is total over distinct tasks, so the result never depends on input order.
    """
    roi = item.roi
    return (
        roi is None,
        -roi if roi is not None else 0.0,
        -PRIORITY_RANK.get(item.priority, 0),
        item.title.casefold(),
        item.title,
        item.id,
    )


def rank_derived(items: Iterable[DerivedTask]) -> list[DerivedTask]:
    return sorted(items, key=ranking_key)


def rank_tasks(tasks: Iterable[Task]) -> list[DerivedTask]:
    return rank_derived(with_derived(t) for t in tasks)
