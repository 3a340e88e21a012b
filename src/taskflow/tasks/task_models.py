# src/taskflow/tasks/task_models.py

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass
from enum import StrEnum

ACTIVE = "active"
DELETED = "deleted"


class TaskFilter(StrEnum):
    """Display filter applied to the active list."""

    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"


def new_task_id() -> str:
    return uuid.uuid4().hex


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True, slots=True)
class Task:
    """
    A single task record.

    Notes:
    - order is unique within the partition the task currently lives in (best effort)
    - original_order is stamped on the first soft-delete and never cleared
    - timestamps are epoch milliseconds
    """

    id: str
    title: str
    completed: bool
    deleted: bool
    order: int
    created_at: int
    updated_at: int
    original_order: int | None = None

