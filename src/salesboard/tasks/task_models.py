# src/salesboard/tasks/task_models.py

from __future__ import annotations

import math
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any


class TaskPriority(StrEnum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @classmethod
    def lookup(cls, raw: Any) -> TaskPriority | None:
        """Case-insensitive match; None for anything unknown."""
        if isinstance(raw, cls):
            return raw
        key = str(raw or "").strip().lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        return None

    @classmethod
    def parse(cls, raw: Any) -> TaskPriority:
        return cls.lookup(raw) or cls.MEDIUM


class TaskStatus(StrEnum):
    """
    Task workflow status.

    Wire values match the records produced by the bootstrap source ("In Progress" has a space).
    """

    TODO = "Todo"
    IN_PROGRESS = "In Progress"
    DONE = "Done"

    @classmethod
    def lookup(cls, raw: Any) -> TaskStatus | None:
        """Case-insensitive match ("in_progress" works too); None for anything unknown."""
        if isinstance(raw, cls):
            return raw
        key = str(raw or "").strip().lower().replace("_", " ")
        for member in cls:
            if member.value.lower() == key:
                return member
        return None

    @classmethod
    def parse(cls, raw: Any) -> TaskStatus:
        return cls.lookup(raw) or cls.TODO


@dataclass(slots=True, frozen=True)
class Task:
    id: str
    title: str
    revenue: float
    time_taken: float
    priority: TaskPriority
    status: TaskStatus
    created_at: str
    completed_at: str | None = None
    notes: str | None = None


@dataclass(slots=True, frozen=True)
class DerivedTask:
    """A Task plus values computed from it. Never stored."""

    task: Task
    roi: float | None
    revenue_per_hour: float | None

    @property
    def id(self) -> str:
        return self.task.id

    @property
    def title(self) -> str:
        return self.task.title

    @property
    def priority(self) -> TaskPriority:
        return self.task.priority


@dataclass(slots=True, frozen=True)
class Metrics:
    total_revenue: float
    total_time_taken: float
    time_efficiency_pct: float
    revenue_per_hour: float
    average_roi: float
    performance_grade: str


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_task_id() -> str:
    return uuid.uuid4().hex


def clamp_time_taken(value: Any) -> float:
    """Non-positive, non-finite or unparseable hours become 1."""
    try:
        hours = float(value)
    except (TypeError, ValueError):
        return 1.0
    if not math.isfinite(hours) or hours <= 0:
        return 1.0
    return hours


def parse_revenue(value: Any) -> float | None:
    """Revenue as a finite float floored at 0; None if it is not a finite number."""
    try:
        out = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(out):
        return None
    return max(0.0, out)


def _pick(record: Mapping[str, Any], *keys: str) -> Any:
    for k in keys:
        if k in record and record[k] is not None:
            return record[k]
    return None


def task_from_record(record: Mapping[str, Any], *, now: str | None = None) -> Task:
    """
    Convert one JSON-like record into a Task.

    Accepts camelCase keys (timeTaken, createdAt, completedAt) as produced by the bootstrap
    source, and snake_case keys as well. Parsing is lenient: bad enums fall back to defaults,
    revenue is floored at 0 and time_taken is clamped.
    """
    created_at = _pick(record, "createdAt", "created_at") or now or now_iso()
    status = TaskStatus.parse(_pick(record, "status"))
    completed_at = _pick(record, "completedAt", "completed_at")
    if status is TaskStatus.DONE and not completed_at:
        completed_at = created_at

    raw_id = _pick(record, "id")
    notes = _pick(record, "notes")

    return Task(
        id=str(raw_id) if raw_id not in (None, "") else new_task_id(),
        title=str(_pick(record, "title") or "").strip(),
        revenue=parse_revenue(_pick(record, "revenue")) or 0.0,
        time_taken=clamp_time_taken(_pick(record, "timeTaken", "time_taken")),
        priority=TaskPriority.parse(_pick(record, "priority")),
        status=status,
        created_at=str(created_at),
        completed_at=str(completed_at) if completed_at else None,
        notes=str(notes) if notes is not None else None,
    )


def task_to_record(task: Task) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": task.id,
        "title": task.title,
        "revenue": task.revenue,
        "timeTaken": task.time_taken,
        "priority": task.priority.value,
        "status": task.status.value,
        "createdAt": task.created_at,
    }
    if task.completed_at is not None:
        record["completedAt"] = task.completed_at
    if task.notes is not None:
        record["notes"] = task.notes
    return record


def validate_task_input(
    *,
    title: str,
    revenue: Any,
    time_taken: Any,
    priority: Any,
    status: Any,
    existing_titles: Iterable[str] = (),
    current_title: str | None = None,
) -> list[str]:
    """
    Form-level validation for consumers. The store itself never rejects input.

    Title uniqueness is case-insensitive and only checked for new tasks, or for edits
    that actually change the title.
    """
    errors: list[str] = []

    clean_title = (title or "").strip()
    if not clean_title:
        errors.append("Title is required.")
    else:
        changed = current_title is None or clean_title.lower() != current_title.strip().lower()
        taken = {t.strip().lower() for t in existing_titles}
        if changed and clean_title.lower() in taken:
            errors.append(f"A task titled {clean_title!r} already exists.")

    try:
        revenue_v = float(revenue)
    except (TypeError, ValueError):
        revenue_v = math.nan
    if not math.isfinite(revenue_v):
        errors.append("Revenue must be a number.")
    elif revenue_v < 0:
        errors.append("Revenue must be >= 0.")

    try:
        hours_v = float(time_taken)
    except (TypeError, ValueError):
        hours_v = math.nan
    if not math.isfinite(hours_v):
        errors.append("Time taken must be a number.")
    elif hours_v <= 0:
        errors.append("Time taken must be > 0.")

    if TaskPriority.lookup(priority) is None:
        errors.append("Priority must be one of: High, Medium, Low.")
    if TaskStatus.lookup(status) is None:
        errors.append("Status must be one of: Todo, In Progress, Done.")

    return errors
