# src/salesboard/tasks/task_loader.py

from __future__ import annotations

"""
Bootstrap loader.

Fetches the initial task collection from a JSON source:
- http(s) URL -> httpx.AsyncClient
- anything else -> local file path (read in a worker thread)

A source that yields a non-list or an empty list falls back to synthetic seed data.
Transport/decoding failures raise TaskLoadError with a human-readable message.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

import httpx

from .task_models import Task, task_from_record
from .task_seed import generate_sales_tasks

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_COUNT = 50


class TaskLoadError(RuntimeError):
    """The bootstrap source could not be read."""


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


async def fetch_task_records(
    source: str | Path,
    *,
    timeout_seconds: float = 10.0,
    client: httpx.AsyncClient | None = None,
) -> Any:
    """Return the decoded JSON payload of `source` (not validated)."""
    src = str(source)

    if _is_url(src):
        try:
            if client is not None:
                resp = await client.get(src, timeout=timeout_seconds)
            else:
                async with httpx.AsyncClient(timeout=timeout_seconds) as own:
                    resp = await own.get(src)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as e:
            raise TaskLoadError(
                f"Failed to load tasks: HTTP {e.response.status_code} from {src}"
            ) from e
        except httpx.HTTPError as e:
            raise TaskLoadError(f"Failed to load tasks from {src}: {e.__class__.__name__}") from e
        except json.JSONDecodeError as e:
            raise TaskLoadError(f"Failed to load tasks: invalid JSON from {src}") from e

    path = Path(src).expanduser()
    try:
        raw = await asyncio.to_thread(path.read_text, "utf-8")
    except OSError as e:
        raise TaskLoadError(f"Failed to load tasks: cannot read {path} ({e.strerror or e})") from e
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise TaskLoadError(f"Failed to load tasks: invalid JSON in {path}") from e


class BootstrapLoader:
    """Produces the initial task list for a TaskStore."""

    def __init__(
        self,
        source: str | Path | None,
        *,
        fallback_count: int = DEFAULT_FALLBACK_COUNT,
        seed: int | None = None,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.source = source
        self.fallback_count = fallback_count
        self.seed = seed
        self.timeout_seconds = timeout_seconds
        self._client = client

    def synthetic(self) -> list[Task]:
        records = generate_sales_tasks(self.fallback_count, seed=self.seed)
        return [task_from_record(r) for r in records]

    async def load(self) -> list[Task]:
        if self.source is None or str(self.source).strip() == "":
            logger.info("No task source configured; generating %d synthetic tasks", self.fallback_count)
            return self.synthetic()

        payload = await fetch_task_records(
            self.source,
            timeout_seconds=self.timeout_seconds,
            client=self._client,
        )

        if not isinstance(payload, list) or not payload:
            logger.info(
                "Task source %s returned no records; generating %d synthetic tasks",
                self.source,
                self.fallback_count,
            )
            return self.synthetic()

        tasks: list[Task] = []
        for item in payload:
            if not isinstance(item, dict):
                logger.warning("Skipping non-object task record: %r", item)
                continue
            tasks.append(task_from_record(item))

        logger.info("Loaded %d tasks from %s", len(tasks), self.source)
        return tasks
