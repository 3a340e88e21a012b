# src/taskflow/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- ensures local (gitignored) directories exist,
- picks the task store (SQLite, or straight to memory when forced),
- wires the repository and UI state into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..tasks.task_models import Task
from ..tasks.task_repository import StoreFactory, TaskRepository
from ..tasks.task_store import SqliteTaskStore
from ..ui.preference_storage import JsonFilePreferenceStorage
from ..ui.ui_state import UiStateStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.ui_state_path.parent.mkdir(parents=True, exist_ok=True)


def _log_snapshot(active: list[Task], deleted: list[Task]) -> None:
    logger.debug("Tasks snapshot active=%s deleted=%s", len(active), len(deleted))


def build_store_factory(settings) -> StoreFactory | None:
    if getattr(settings, "force_memory", False):
        return None
    db_path = settings.tasks_db_path
    return lambda: SqliteTaskStore(db_path)


async def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    repository = await TaskRepository.open(build_store_factory(settings))
    repository.subscribe(_log_snapshot)

    ui_state = UiStateStore(JsonFilePreferenceStorage(settings.ui_state_path))

    return AppState(settings=settings, repository=repository, ui_state=ui_state)
