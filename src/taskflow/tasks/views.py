# src/taskflow/tasks/views.py

from __future__ import annotations

from collections.abc import Iterable

from .task_models import Task, TaskFilter


def filter_tasks(tasks: Iterable[Task], task_filter: TaskFilter | str) -> list[Task]:
    """Apply a display filter to active tasks, keeping input order."""
    f = TaskFilter(task_filter)
    if f == TaskFilter.ACTIVE:
        return [t for t in tasks if not t.completed]
    if f == TaskFilter.COMPLETED:
        return [t for t in tasks if t.completed]
    return list(tasks)


def count_remaining(tasks: Iterable[Task]) -> int:
    return sum(1 for t in tasks if not t.completed)
