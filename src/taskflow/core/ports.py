# src/taskflow/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The repository and the UI state store depend on Protocols instead of concrete
storage. A persistent and an in-memory implementation exist for each, so the
storage substrate is picked once at construction and tests can use in-memory
stand-ins.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import Task

TasksObserver = Callable[[list["Task"], list["Task"]], None]
# Receives (active_snapshot, deleted_snapshot), both sorted by order.


class PartitionStore(Protocol):
    """
    Keyed storage with two named partitions ("active", "deleted").

    Records are keyed by task id inside each partition.
    """

    async def load_all(self, partition: str) -> list[Task]: ...

    async def put(self, partition: str, task: Task) -> None: ...

    async def delete(self, partition: str, task_id: str) -> None: ...

    async def move(self, src: str, dst: str, task: Task) -> None:
        """Remove task.id from src and write task into dst as one unit."""
        ...

    async def clear(self, partition: str) -> int:
        """Drop every record in the partition; return how many were removed."""
        ...

    def close(self) -> None: ...


class PreferenceStorage(Protocol):
    """A string-keyed slot store for small serialized UI snapshots."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...
