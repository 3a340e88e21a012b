# src/taskflow/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.task_repository import TaskRepository
from ..ui.ui_state import UiStateStore


@dataclass
class AppState:
    # Settings object (or a test stand-in with the same attributes).
    settings: object

    repository: TaskRepository
    ui_state: UiStateStore
