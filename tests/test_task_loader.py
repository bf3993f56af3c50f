# tests/test_task_loader.py

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import httpx
import pytest

from salesboard.tasks.task_loader import BootstrapLoader, TaskLoadError, fetch_task_records
from salesboard.tasks.task_models import TaskStatus
from salesboard.tasks.task_seed import generate_sales_tasks

RECORDS = [
    {"id": "1", "title": "Demo for Hooli", "revenue": 900, "timeTaken": 3,
     "priority": "High", "status": "Todo", "createdAt": "2024-01-01T00:00:00.000Z"},
    {"id": "2", "title": "Renew Globex", "revenue": 400, "timeTaken": 0,
     "priority": "Low", "status": "Done", "createdAt": "2024-01-02T00:00:00.000Z",
     "completedAt": "2024-01-03T00:00:00.000Z"},
]


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_http_source_is_parsed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/tasks.json"
        return httpx.Response(200, json=RECORDS)

    async with _client(handler) as client:
        loader = BootstrapLoader("http://example.test/tasks.json", client=client)
        tasks = await loader.load()

    assert [t.id for t in tasks] == ["1", "2"]
    assert tasks[1].time_taken == 1
    assert tasks[1].status is TaskStatus.DONE
    assert tasks[1].completed_at == "2024-01-03T00:00:00.000Z"


@pytest.mark.asyncio
async def test_http_error_status_raises_readable_error() -> None:
    async with _client(lambda request: httpx.Response(500)) as client:
        with pytest.raises(TaskLoadError, match="HTTP 500"):
            await fetch_task_records("http://example.test/tasks.json", client=client)


@pytest.mark.asyncio
async def test_transport_error_raises_task_load_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async with _client(handler) as client:
        with pytest.raises(TaskLoadError, match="ConnectError"):
            await fetch_task_records("http://example.test/tasks.json", client=client)


@pytest.mark.asyncio
async def test_invalid_json_raises_task_load_error() -> None:
    async with _client(lambda request: httpx.Response(200, text="<html>")) as client:
        with pytest.raises(TaskLoadError, match="invalid JSON"):
            await fetch_task_records("http://example.test/tasks.json", client=client)


@pytest.mark.asyncio
async def test_empty_list_falls_back_to_seed(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text("[]", "utf-8")

    tasks = await BootstrapLoader(path, fallback_count=12, seed=3).load()
    assert len(tasks) == 12


@pytest.mark.asyncio
async def test_non_list_payload_falls_back_to_seed(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps({"tasks": RECORDS}), "utf-8")

    tasks = await BootstrapLoader(path, fallback_count=4, seed=3).load()
    assert len(tasks) == 4


@pytest.mark.asyncio
async def test_file_source_skips_non_object_records(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps([RECORDS[0], "junk", 42]), "utf-8")

    tasks = await BootstrapLoader(path).load()
    assert [t.title for t in tasks] == ["Demo for Hooli"]


@pytest.mark.asyncio
async def test_missing_file_raises_task_load_error(tmp_path: Path) -> None:
    with pytest.raises(TaskLoadError, match="cannot read"):
        await BootstrapLoader(tmp_path / "missing.json").load()


@pytest.mark.asyncio
async def test_no_source_generates_seed_data() -> None:
    tasks = await BootstrapLoader(None, fallback_count=3, seed=1).load()
    assert len(tasks) == 3


def test_seed_is_reproducible_and_titles_unique() -> None:
    now = datetime(2024, 6, 1, tzinfo=timezone.utc)
    a = generate_sales_tasks(50, seed=42, now=now)
    b = generate_sales_tasks(50, seed=42, now=now)

    assert a == b
    assert len(a) == 50
    assert len({r["title"].lower() for r in a}) == 50
    assert len({r["id"] for r in a}) == 50


def test_seed_records_are_plausible() -> None:
    for r in generate_sales_tasks(30, seed=9):
        assert r["revenue"] >= 100
        assert r["timeTaken"] > 0
        assert r["priority"] in ("High", "Medium", "Low")
        assert r["status"] in ("Todo", "In Progress", "Done")
        assert ("completedAt" in r) == (r["status"] == "Done")
