# src/taskflow/core/errors.py

"""
Error taxonomy shared by the task core.

- ValidationError: bad input, do not retry without changing it
- NotFoundError: id is not in the expected partition
- PersistenceError: the durable store rejected a read/write
"""

from __future__ import annotations


class TaskflowError(Exception):
    """Base class for all errors raised by the task core."""


class ValidationError(TaskflowError, ValueError):
    EMPTY = "empty"
    TOO_LONG = "too_long"

    def __init__(self, kind: str, message: str | None = None) -> None:
        self.kind = kind
        super().__init__(message or kind)


class NotFoundError(TaskflowError, LookupError):
    def __init__(self, task_id: str, partition: str) -> None:
        self.task_id = task_id
        self.partition = partition
        super().__init__(f"task {task_id!r} not found in {partition} partition")


class PersistenceError(TaskflowError):
    """Raised by a persistent store; never converted by the repository."""


def friendly_error_message(exc: BaseException) -> str:
    """Short user-facing text for a core error."""
    if isinstance(exc, ValidationError):
        return str(exc)
    if isinstance(exc, NotFoundError):
        return "That task no longer exists here. Refresh the list and try again."
    if isinstance(exc, PersistenceError):
        return f"Storage error: {exc}"
    return "Internal error."
