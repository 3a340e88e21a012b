# src/taskflow/tasks/ordering.py

"""
Display-order helpers.

All functions are pure: they never mutate their inputs. Ties in `order` are
tolerated here; the repository keeps orders consistent by always assigning
them through these helpers.
"""

from __future__ import annotations

from collections.abc import Iterable

from .task_models import Task


def assign_initial_order(existing_active: Iterable[Task]) -> int:
    """Order for a task appended to the end: 1 for an empty list, else max + 1."""
    orders = [t.order for t in existing_active]
    if not orders:
        return 1
    return max(orders) + 1


def compute_restore_order(active: Iterable[Task], deleted_task: Task) -> int:
    """
    Order a deleted task should take when restored.

    Reclaims `original_order` when no active task holds it; otherwise appends.
    """
    active = list(active)
    slot = deleted_task.original_order
    if slot is not None and not any(t.order == slot for t in active):
        return slot
    return assign_initial_order(active)


def sort_tasks(tasks: Iterable[Task]) -> list[Task]:
    # sorted() is stable, so equal orders keep input order.
    return sorted(tasks, key=lambda t: t.order)
