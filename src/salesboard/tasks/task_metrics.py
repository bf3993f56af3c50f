# src/salesboard/tasks/task_metrics.py

from __future__ import annotations

"""
Pure derivation functions over tasks.

Definitions:
- ROI (per task) = revenue / time_taken, None when time_taken <= 0
- revenue per hour (per task) = revenue / time_taken
- time efficiency % = (total revenue / total hours) / reference rate * 100

Nothing here reads the clock or keeps state: identical input -> identical output.
"""

import math
from collections.abc import Sequence

from .task_models import DerivedTask, Metrics, Task

REFERENCE_REVENUE_PER_HOUR = 100.0

GRADE_EXCELLENT = "Excellent"
GRADE_GOOD = "Good"
GRADE_AVERAGE = "Average"
GRADE_NEEDS_IMPROVEMENT = "Needs Improvement"

# (lower bound inclusive, grade), highest first. Anything below the last bound (or NaN)
# is "Needs Improvement".
GRADE_BANDS: tuple[tuple[float, str], ...] = (
    (200.0, GRADE_EXCELLENT),
    (100.0, GRADE_GOOD),
    (50.0, GRADE_AVERAGE),
)

INITIAL_METRICS = Metrics(
    total_revenue=0.0,
    total_time_taken=0.0,
    time_efficiency_pct=0.0,
    revenue_per_hour=0.0,
    average_roi=0.0,
    performance_grade=GRADE_NEEDS_IMPROVEMENT,
)


def compute_roi(task: Task) -> float | None:
    if task.time_taken <= 0:
        return None
    return task.revenue / task.time_taken


def compute_revenue_per_hour(task: Task) -> float | None:
    if task.time_taken <= 0:
        return None
    return task.revenue / task.time_taken


def with_derived(task: Task) -> DerivedTask:
    return DerivedTask(
        task=task,
        roi=compute_roi(task),
        revenue_per_hour=compute_revenue_per_hour(task),
    )


def compute_total_revenue(tasks: Sequence[Task]) -> float:
    return float(sum(t.revenue for t in tasks))


def compute_total_time(tasks: Sequence[Task]) -> float:
    return float(sum(t.time_taken for t in tasks))


def compute_aggregate_revenue_per_hour(tasks: Sequence[Task]) -> float:
    total_time = compute_total_time(tasks)
    if total_time <= 0:
        return 0.0
    return compute_total_revenue(tasks) / total_time


def compute_time_efficiency(
    tasks: Sequence[Task],
    *,
    reference_rate: float = REFERENCE_REVENUE_PER_HOUR,
) -> float:
    """Aggregate revenue per hour as a percentage of the reference rate (1 decimal)."""
    if not tasks or reference_rate <= 0:
        return 0.0
    rate = compute_aggregate_revenue_per_hour(tasks)
    return round(rate / reference_rate * 100.0, 1)


def compute_average_roi(tasks: Sequence[Task]) -> float:
    """Mean ROI over tasks whose ROI is defined; 0.0 if there are none."""
    values = [r for r in (compute_roi(t) for t in tasks) if r is not None]
    if not values:
        return 0.0
    return round(sum(values) / len(values), 2)


def compute_performance_grade(average_roi: float) -> str:
    if math.isnan(average_roi):
        return GRADE_NEEDS_IMPROVEMENT
    for lower, grade in GRADE_BANDS:
        if average_roi >= lower:
            return grade
    return GRADE_NEEDS_IMPROVEMENT


def compute_metrics(
    tasks: Sequence[Task],
    *,
    reference_rate: float = REFERENCE_REVENUE_PER_HOUR,
) -> Metrics:
    if not tasks:
        return INITIAL_METRICS

    average_roi = compute_average_roi(tasks)
    return Metrics(
        total_revenue=compute_total_revenue(tasks),
        total_time_taken=compute_total_time(tasks),
        time_efficiency_pct=compute_time_efficiency(tasks, reference_rate=reference_rate),
        revenue_per_hour=round(compute_aggregate_revenue_per_hour(tasks), 2),
        average_roi=average_roi,
        performance_grade=compute_performance_grade(average_roi),
    )
