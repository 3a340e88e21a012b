# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest
import pytest_asyncio

from taskflow.core.state import AppState
from taskflow.tasks.task_repository import TaskRepository
from taskflow.tasks.task_store import SqliteTaskStore
from taskflow.ui.preference_storage import MemoryPreferenceStorage
from taskflow.ui.ui_state import UiStateStore

from .fakes import CounterClock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the bootstrap code.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskflow-test",
        log_level="DEBUG",
        force_memory=False,
        data_dir=tmp_path / "data",
        tasks_db_path=tmp_path / "data" / "tasks.sqlite3",
        ui_state_path=tmp_path / "data" / "ui_state.json",
    )


@pytest_asyncio.fixture(params=["memory", "sqlite"])
async def repo(request, tmp_path: Path):
    """
    TaskRepository in both storage modes.

    Every behavioral test runs against the in-memory fallback and real SQLite,
    since both must behave identically.
    """
    if request.param == "memory":
        factory = None
    else:
        db_path = tmp_path / "tasks.sqlite3"
        factory = lambda: SqliteTaskStore(db_path)  # noqa: E731

    repository = await TaskRepository.open(factory, clock=CounterClock())
    yield repository
    repository.close()


@pytest_asyncio.fixture()
async def state() -> AppState:
    """AppState wired with in-memory storage for command tests."""
    repository = await TaskRepository.open(None, clock=CounterClock())
    return AppState(
        settings=SimpleNamespace(app_name="taskflow-test"),
        repository=repository,
        ui_state=UiStateStore(MemoryPreferenceStorage()),
    )
