# tests/test_task_ranking.py

from __future__ import annotations

import random

from salesboard.tasks.task_models import TaskPriority
from salesboard.tasks.task_ranking import rank_tasks

from .conftest import make_task


def _titles(tasks) -> list[str]:
    return [d.title for d in rank_tasks(tasks)]


def test_higher_roi_first() -> None:
    x = make_task("X", 100, 10)
    y = make_task("Y", 300, 10)
    assert _titles([x, y]) == ["Y", "X"]


def test_priority_breaks_roi_ties() -> None:
    low = make_task("A", 100, 10, priority=TaskPriority.LOW)
    high = make_task("B", 100, 10, priority=TaskPriority.HIGH)
    med = make_task("C", 100, 10, priority=TaskPriority.MEDIUM)
    assert _titles([low, med, high]) == ["B", "C", "A"]


def test_title_breaks_roi_and_priority_ties() -> None:
    tasks = [make_task(t, 100, 10) for t in ("delta", "Bravo", "alpha", "Charlie")]
    assert _titles(tasks) == ["alpha", "Bravo", "Charlie", "delta"]


def test_undefined_roi_sorts_last() -> None:
    broken = make_task("Broken", 10_000, 0, priority=TaskPriority.HIGH)
    cheap = make_task("Cheap", 1, 100, priority=TaskPriority.LOW)
    assert _titles([broken, cheap]) == ["Cheap", "Broken"]


def test_zero_revenue_still_ranks_before_undefined() -> None:
    zero = make_task("Zero", 0, 5)
    broken = make_task("Broken", 50, 0)
    assert _titles([broken, zero]) == ["Zero", "Broken"]


def test_order_is_independent_of_input_order() -> None:
    tasks = [
        make_task(f"T{i % 7}", revenue=(i * 37) % 500, time_taken=(i % 5) + 1, id=f"id{i}",
                  priority=list(TaskPriority)[i % 3])
        for i in range(60)
    ]
    expected = [d.id for d in rank_tasks(tasks)]

    rng = random.Random(1)
    for _ in range(10):
        shuffled = list(tasks)
        rng.shuffle(shuffled)
        assert [d.id for d in rank_tasks(shuffled)] == expected
