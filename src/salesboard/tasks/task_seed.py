# src/salesboard/tasks/task_seed.py

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone
from typing import Any

from .task_models import TaskPriority, TaskStatus

_ACTIONS = (
    "Follow up with",
    "Send proposal to",
    "Demo for",
    "Renew contract with",
    "Negotiate pricing with",
    "Onboard",
    "Quarterly review with",
    "Upsell add-ons to",
    "Cold call",
    "Close deal with",
)

_ACCOUNTS = (
    "Acme Corp",
    "Globex",
    "Initech",
    "Umbrella",
    "Stark Industries",
    "Wayne Enterprises",
    "Hooli",
    "Soylent",
    "Vandelay Imports",
    "Wonka Industries",
    "Cyberdyne",
    "Tyrell Corp",
)

_NOTES = (
    None,
    "Decision maker is the CFO.",
    "Waiting on legal review.",
    "Asked for a volume discount.",
    "Warm lead from the conference.",
    None,
)


def _iso(ts: datetime) -> str:
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def generate_sales_tasks(
    count: int,
    *,
    seed: int | None = None,
    now: datetime | None = None,
) -> list[dict[str, Any]]:
    """
    Generate `count` plausible sales task records (camelCase, same shape as tasks.json).

    With a seed and a fixed `now` the output is fully reproducible. Titles are unique.
    """
    rng = random.Random(seed)
    now = now or datetime.now(timezone.utc)

    records: list[dict[str, Any]] = []
    used_titles: set[str] = set()

    for i in range(max(0, int(count))):
        title = f"{rng.choice(_ACTIONS)} {rng.choice(_ACCOUNTS)}"
        if title.lower() in used_titles:
            title = f"{title} #{i + 1}"
        used_titles.add(title.lower())

        created = now - timedelta(days=rng.randint(0, 30), minutes=rng.randint(0, 24 * 60))
        status = rng.choice(list(TaskStatus))
        completed_at = None
        if status is TaskStatus.DONE:
            completed_at = _iso(created + timedelta(hours=rng.randint(1, 72)))

        record: dict[str, Any] = {
            "id": f"seed-{i + 1:03d}",
            "title": title,
            "revenue": float(rng.randrange(100, 10_000, 50)),
            "timeTaken": float(rng.randint(1, 40)),
            "priority": rng.choice(list(TaskPriority)).value,
            "status": status.value,
            "createdAt": _iso(created),
        }
        if completed_at is not None:
            record["completedAt"] = completed_at
        notes = rng.choice(_NOTES)
        if notes is not None:
            record["notes"] = notes
        records.append(record)

    return records
