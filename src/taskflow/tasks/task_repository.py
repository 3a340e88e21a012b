# src/taskflow/tasks/task_repository.py

from __future__ import annotations

"""
Task repository.

Owns two partitions of tasks:
- active: visible tasks, ordered by `order`
- deleted: soft-deleted tasks kept until purge

Storage is picked exactly once, in initialize():
- persistent: the store factory succeeded, existing rows are loaded
- memory_fallback: the factory (or the initial load) failed; an in-process
  store is used for the rest of the process lifetime

Every mutation follows the same sequence:
1) validate + look up (fail fast, nothing changed yet)
2) write to the store
3) update the local snapshot
4) publish to observers

A store failure in step 2 propagates unchanged and nothing is published.
"""

import logging
from collections.abc import Callable
from dataclasses import replace
from enum import StrEnum

from ..core.errors import NotFoundError
from ..core.ports import PartitionStore, TasksObserver
from .ordering import assign_initial_order, compute_restore_order, sort_tasks
from .task_models import ACTIVE, DELETED, Task, new_task_id, now_ms
from .task_store import MemoryPartitionStore
from .validation import validate_title

logger = logging.getLogger(__name__)

StoreFactory = Callable[[], PartitionStore]


class StorageMode(StrEnum):
    UNINITIALIZED = "uninitialized"
    PERSISTENT = "persistent"
    MEMORY_FALLBACK = "memory_fallback"


class TaskRepository:
    def __init__(
        self,
        *,
        clock: Callable[[], int] = now_ms,
        id_factory: Callable[[], str] = new_task_id,
    ) -> None:
        self._clock = clock
        self._id_factory = id_factory

        self._mode = StorageMode.UNINITIALIZED
        self._store: PartitionStore | None = None
        self._active: dict[str, Task] = {}
        self._deleted: dict[str, Task] = {}
        self._observers: list[TasksObserver] = []

    @classmethod
    async def open(cls, store_factory: StoreFactory | None, **kwargs) -> TaskRepository:
        """Construct and initialize in one step."""
        repo = cls(**kwargs)
        await repo.initialize(store_factory)
        return repo

    async def initialize(self, store_factory: StoreFactory | None) -> None:
        """
        One-shot storage selection.

        store_factory=None means "no persistent store available" and goes
        straight to memory fallback.
        """
        if self._mode != StorageMode.UNINITIALIZED:
            raise RuntimeError(f"TaskRepository already initialized (mode={self._mode})")

        if store_factory is not None:
            store: PartitionStore | None = None
            try:
                store = store_factory()
                active = await store.load_all(ACTIVE)
                deleted = await store.load_all(DELETED)
            except Exception:
                logger.warning(
                    "Persistent task store unavailable; using in-memory fallback.",
                    exc_info=True,
                )
                if store is not None:
                    store.close()
            else:
                self._store = store
                self._active = {t.id: t for t in active}
                self._deleted = {t.id: t for t in deleted}
                self._mode = StorageMode.PERSISTENT
                logger.info(
                    "TaskRepository ready mode=%s active=%s deleted=%s",
                    self._mode,
                    len(self._active),
                    len(self._deleted),
                )
                self._publish()
                return

        self._store = MemoryPartitionStore()
        self._mode = StorageMode.MEMORY_FALLBACK
        logger.info("TaskRepository ready mode=%s", self._mode)
        self._publish()

    def close(self) -> None:
        if self._store is not None:
            self._store.close()

    @property
    def mode(self) -> StorageMode:
        return self._mode

    # ---- observers ----

    def subscribe(self, observer: TasksObserver) -> Callable[[], None]:
        """
        Register an observer; it is called immediately with the current snapshot
        and after every successful mutation. Returns an unsubscribe callable.
        """
        self._observers.append(observer)
        self._notify(observer, self._snapshot(self._active), self._snapshot(self._deleted))

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    @staticmethod
    def _snapshot(bucket: dict[str, Task]) -> list[Task]:
        return sort_tasks(bucket.values())

    @staticmethod
    def _notify(observer: TasksObserver, active: list[Task], deleted: list[Task]) -> None:
        try:
            observer(list(active), list(deleted))
        except Exception:
            logger.exception("Task observer failed: %r", observer)

    def _publish(self) -> None:
        active = self._snapshot(self._active)
        deleted = self._snapshot(self._deleted)
        for observer in list(self._observers):
            self._notify(observer, active, deleted)

    def _require_store(self) -> PartitionStore:
        if self._store is None:
            raise RuntimeError("TaskRepository used before initialize()")
        return self._store

    def _get(self, bucket: dict[str, Task], task_id: str, partition: str) -> Task:
        task = bucket.get(task_id)
        if task is None:
            raise NotFoundError(task_id, partition)
        return task

    # ---- queries ----

    async def list_active(self) -> list[Task]:
        self._require_store()
        return self._snapshot(self._active)

    async def list_deleted(self) -> list[Task]:
        self._require_store()
        return self._snapshot(self._deleted)

    # ---- mutations ----

    async def create_task(self, raw_title: str) -> Task:
        store = self._require_store()
        title = validate_title(raw_title)

        now = self._clock()
        task = Task(
            id=self._id_factory(),
            title=title,
            completed=False,
            deleted=False,
            order=assign_initial_order(self._active.values()),
            created_at=now,
            updated_at=now,
        )

        await store.put(ACTIVE, task)
        self._active[task.id] = task
        logger.debug("Task created id=%s order=%s", task.id, task.order)
        self._publish()
        return task

    async def update_task(
        self,
        task_id: str,
        *,
        title: str | None = None,
        completed: bool | None = None,
    ) -> Task:
        store = self._require_store()
        current = self._get(self._active, task_id, ACTIVE)

        new_title = current.title if title is None else validate_title(title)
        new_completed = current.completed if completed is None else bool(completed)

        task = replace(
            current,
            title=new_title,
            completed=new_completed,
            updated_at=self._clock(),
        )

        await store.put(ACTIVE, task)
        self._active[task.id] = task
        logger.debug("Task updated id=%s completed=%s", task.id, task.completed)
        self._publish()
        return task

    async def toggle_completed(self, task_id: str) -> Task:
        current = self._get(self._active, task_id, ACTIVE)
        return await self.update_task(task_id, completed=not current.completed)

    async def soft_delete(self, task_id: str) -> Task:
        store = self._require_store()
        current = self._get(self._active, task_id, ACTIVE)

        original_order = current.original_order
        if original_order is None:
            original_order = current.order

        task = replace(
            current,
            deleted=True,
            original_order=original_order,
            updated_at=self._clock(),
        )

        await store.move(ACTIVE, DELETED, task)
        del self._active[task.id]
        self._deleted[task.id] = task
        logger.debug("Task soft-deleted id=%s original_order=%s", task.id, task.original_order)
        self._publish()
        return task

    async def restore(self, task_id: str) -> Task:
        store = self._require_store()
        current = self._get(self._deleted, task_id, DELETED)

        task = replace(
            current,
            deleted=False,
            order=compute_restore_order(self._active.values(), current),
            updated_at=self._clock(),
        )

        await store.move(DELETED, ACTIVE, task)
        del self._deleted[task.id]
        self._active[task.id] = task
        logger.debug("Task restored id=%s order=%s", task.id, task.order)
        self._publish()
        return task

    async def purge_deleted(self) -> int:
        """Irrevocably drop every soft-deleted task. Idempotent."""
        store = self._require_store()
        if not self._deleted:
            return 0

        await store.clear(DELETED)
        n = len(self._deleted)
        self._deleted = {}
        logger.info("Purged %s deleted task(s)", n)
        self._publish()
        return n
