# src/taskflow/tasks/task_store.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import sqlite3
from pathlib import Path

from ..core.errors import PersistenceError
from .task_models import ACTIVE, DELETED, Task

logger = logging.getLogger(__name__)

_TABLES = {
    ACTIVE: "active_tasks",
    DELETED: "deleted_tasks",
}


def _table(partition: str) -> str:
    try:
        return _TABLES[partition]
    except KeyError:
        raise ValueError(f"unknown partition: {partition!r}") from None


class SqliteTaskStore:
    """
    SQLite partition store: one table per partition.

    The schema is migration-safe:
    - create tables if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Each call opens its own short-lived connection and runs in a worker thread,
    so the async methods really suspend while SQLite does I/O.
    Any sqlite3/OS failure surfaces as PersistenceError.
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._ensure_schema()
        except (sqlite3.Error, OSError) as e:
            raise PersistenceError(f"cannot open task store {self._db_path}: {e}") from e
        logger.info("SqliteTaskStore ready db=%s", self._db_path)

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            for table in _TABLES.values():
                cur.execute(
                    f"""
                    CREATE TABLE IF NOT EXISTS {table} (
                        id TEXT PRIMARY KEY,
                        title TEXT NOT NULL,
                        completed INTEGER NOT NULL DEFAULT 0,
                        sort_order INTEGER NOT NULL,
                        created_at INTEGER NOT NULL,
                        updated_at INTEGER NOT NULL,
                        original_order INTEGER
                    )
                    """
                )

                cur.execute(f"PRAGMA table_info({table})")
                cols = {row["name"] for row in cur.fetchall()}

                # Older files predate original_order.
                if "original_order" not in cols:
                    cur.execute(f"ALTER TABLE {table} ADD COLUMN original_order INTEGER")
                    logger.info("SqliteTaskStore migration: added %s.original_order", table)

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row, partition: str) -> Task:
        return Task(
            id=str(row["id"]),
            title=str(row["title"]),
            completed=bool(row["completed"]),
            deleted=partition == DELETED,
            order=int(row["sort_order"]),
            created_at=int(row["created_at"]),
            updated_at=int(row["updated_at"]),
            original_order=int(row["original_order"]) if row["original_order"] is not None else None,
        )

    @staticmethod
    def _upsert(cur: sqlite3.Cursor, table: str, task: Task) -> None:
        cur.execute(
            f"""
            INSERT INTO {table}(
                id, title, completed, sort_order, created_at, updated_at, original_order
            )
            VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                title = excluded.title,
                completed = excluded.completed,
                sort_order = excluded.sort_order,
                updated_at = excluded.updated_at,
                original_order = excluded.original_order
            """,
            (
                task.id,
                task.title,
                int(task.completed),
                int(task.order),
                int(task.created_at),
                int(task.updated_at),
                task.original_order,
            ),
        )

    def _run(self, fn, *args):
        try:
            return fn(*args)
        except sqlite3.Error as e:
            raise PersistenceError(f"task store operation failed: {e}") from e

    # ---- sync operations (run in a worker thread) ----

    def _load_all_sync(self, partition: str) -> list[Task]:
        table = _table(partition)
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(f"SELECT * FROM {table} ORDER BY sort_order ASC, created_at ASC")
            return [self._row_to_task(r, partition) for r in cur.fetchall()]
        finally:
            conn.close()

    def _put_sync(self, partition: str, task: Task) -> None:
        table = _table(partition)
        conn = self._get_conn()
        try:
            self._upsert(conn.cursor(), table, task)
            conn.commit()
        finally:
            conn.close()

    def _delete_sync(self, partition: str, task_id: str) -> None:
        table = _table(partition)
        conn = self._get_conn()
        try:
            conn.execute(f"DELETE FROM {table} WHERE id = ?", (task_id,))
            conn.commit()
        finally:
            conn.close()

    def _move_sync(self, src: str, dst: str, task: Task) -> None:
        src_table, dst_table = _table(src), _table(dst)
        conn = self._get_conn()
        try:
            # One transaction: the id is never in both tables, nor in neither.
            with conn:
                cur = conn.cursor()
                cur.execute(f"DELETE FROM {src_table} WHERE id = ?", (task.id,))
                self._upsert(cur, dst_table, task)
        finally:
            conn.close()

    def _clear_sync(self, partition: str) -> int:
        table = _table(partition)
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(f"DELETE FROM {table}")
            conn.commit()
            return int(cur.rowcount)
        finally:
            conn.close()

    # ---- public API ----

    async def load_all(self, partition: str) -> list[Task]:
        return await asyncio.to_thread(self._run, self._load_all_sync, partition)

    async def put(self, partition: str, task: Task) -> None:
        await asyncio.to_thread(self._run, self._put_sync, partition, task)
        logger.debug("put partition=%s id=%s order=%s", partition, task.id, task.order)

    async def delete(self, partition: str, task_id: str) -> None:
        await asyncio.to_thread(self._run, self._delete_sync, partition, task_id)

    async def move(self, src: str, dst: str, task: Task) -> None:
        await asyncio.to_thread(self._run, self._move_sync, src, dst, task)
        logger.debug("move %s -> %s id=%s order=%s", src, dst, task.id, task.order)

    async def clear(self, partition: str) -> int:
        n = await asyncio.to_thread(self._run, self._clear_sync, partition)
        logger.debug("clear partition=%s removed=%s", partition, n)
        return n


class MemoryPartitionStore:
    """
    In-process partition store.

    Used as the fallback when the persistent store cannot be opened, and in tests.
    State lives only as long as this instance.
    """

    def __init__(self) -> None:
        self._data: dict[str, dict[str, Task]] = {ACTIVE: {}, DELETED: {}}

    def close(self) -> None:
        return

    def _partition(self, partition: str) -> dict[str, Task]:
        _table(partition)
        return self._data[partition]

    async def load_all(self, partition: str) -> list[Task]:
        return list(self._partition(partition).values())

    async def put(self, partition: str, task: Task) -> None:
        self._partition(partition)[task.id] = task

    async def delete(self, partition: str, task_id: str) -> None:
        self._partition(partition).pop(task_id, None)

    async def move(self, src: str, dst: str, task: Task) -> None:
        self._partition(src).pop(task.id, None)
        self._partition(dst)[task.id] = task

    async def clear(self, partition: str) -> int:
        bucket = self._partition(partition)
        n = len(bucket)
        bucket.clear()
        return n
