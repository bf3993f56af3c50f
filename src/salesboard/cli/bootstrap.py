# src/salesboard/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local data directory exists,
- wires the store and the bootstrap loader into AppState,
- runs the initial load (falling back to synthetic data on failure),
- exports the current collection as JSON.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path

from ..config import get_settings
from ..core.state import AppState
from ..tasks.task_loader import BootstrapLoader
from ..tasks.task_models import task_to_record
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    settings.data_dir.mkdir(parents=True, exist_ok=True)

    store = TaskStore(reference_rate=settings.reference_revenue_per_hour)
    loader = BootstrapLoader(
        settings.tasks_source or None,
        fallback_count=settings.seed_count,
        seed=settings.seed,
        timeout_seconds=settings.load_timeout_seconds,
    )
    return AppState(settings=settings, store=store, loader=loader)


async def load_initial_tasks(state: AppState, *, fallback_to_seed: bool = True) -> None:
    """
    Run the store's one-time load.

    The store only reports the failure; deciding to fall back to synthetic data is
    the caller's job, done here when fallback_to_seed is set.
    """
    await state.store.load(state.loader)

    if state.store.error and fallback_to_seed and not state.store.initialized:
        synthetic = getattr(state.loader, "synthetic", None)
        if callable(synthetic):
            logger.info("Load failed (%s); using synthetic tasks", state.store.error)
            state.store.initialize(synthetic())


def export_tasks(state: AppState, path: str | Path) -> int:
    """Write the current collection as a JSON list of records. Returns the count."""
    target = Path(path).expanduser()
    target.parent.mkdir(parents=True, exist_ok=True)
    records = [task_to_record(t) for t in state.store.tasks]

    tmp = target.with_suffix(target.suffix + ".tmp")
    tmp.write_text(json.dumps(records, ensure_ascii=False, indent=2), "utf-8")
    os.replace(tmp, target)
    with contextlib.suppress(OSError):
        tmp.unlink()
    logger.info("Exported %d tasks to %s", len(records), target)
    return len(records)
