# tests/test_task_store.py

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from taskflow.core.errors import PersistenceError
from taskflow.tasks.task_store import MemoryPartitionStore, SqliteTaskStore

from .fakes import make_task


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path: Path):
    if request.param == "memory":
        return MemoryPartitionStore()
    return SqliteTaskStore(tmp_path / "tasks.sqlite3")


@pytest.mark.asyncio
async def test_put_load_delete(store) -> None:
    await store.put("active", make_task("a", 1))
    await store.put("active", make_task("b", 2, completed=True))
    await store.put("active", make_task("a", 1, title="renamed"))

    loaded = {t.id: t for t in await store.load_all("active")}
    assert set(loaded) == {"a", "b"}
    assert loaded["a"].title == "renamed"
    assert loaded["b"].completed is True
    assert await store.load_all("deleted") == []

    await store.delete("active", "a")
    await store.delete("active", "missing")
    assert [t.id for t in await store.load_all("active")] == ["b"]


@pytest.mark.asyncio
async def test_move_keeps_id_in_exactly_one_partition(store) -> None:
    await store.put("active", make_task("a", 3))
    await store.move("active", "deleted", make_task("a", 3, original_order=3, deleted=True))

    assert await store.load_all("active") == []
    (moved,) = await store.load_all("deleted")
    assert moved.id == "a"
    assert moved.deleted is True
    assert moved.original_order == 3


@pytest.mark.asyncio
async def test_clear_returns_removed_count(store) -> None:
    await store.put("deleted", make_task("a", 1, deleted=True))
    await store.put("deleted", make_task("b", 2, deleted=True))
    await store.put("active", make_task("c", 1))

    assert await store.clear("deleted") == 2
    assert await store.clear("deleted") == 0
    assert [t.id for t in await store.load_all("active")] == ["c"]


@pytest.mark.asyncio
async def test_unknown_partition_is_rejected(store) -> None:
    with pytest.raises(ValueError):
        await store.load_all("archive")


def test_sqlite_store_rejects_unopenable_path(tmp_path: Path) -> None:
    with pytest.raises(PersistenceError):
        SqliteTaskStore(tmp_path)


@pytest.mark.asyncio
async def test_sqlite_store_migrates_missing_original_order(tmp_path: Path) -> None:
    db_path = tmp_path / "old.sqlite3"
    conn = sqlite3.connect(str(db_path))
    conn.execute(
        """
        CREATE TABLE deleted_tasks (
            id TEXT PRIMARY KEY,
            title TEXT NOT NULL,
            completed INTEGER NOT NULL DEFAULT 0,
            sort_order INTEGER NOT NULL,
            created_at INTEGER NOT NULL,
            updated_at INTEGER NOT NULL
        )
        """
    )
    conn.execute(
        "INSERT INTO deleted_tasks VALUES ('old', 'legacy', 0, 4, 1, 1)",
    )
    conn.commit()
    conn.close()

    store = SqliteTaskStore(db_path)
    (task,) = await store.load_all("deleted")
    assert task.title == "legacy"
    assert task.original_order is None


@pytest.mark.asyncio
async def test_sqlite_errors_become_persistence_errors(tmp_path: Path) -> None:
    db_path = tmp_path / "tasks.sqlite3"
    store = SqliteTaskStore(db_path)

    conn = sqlite3.connect(str(db_path))
    conn.execute("DROP TABLE active_tasks")
    conn.commit()
    conn.close()

    with pytest.raises(PersistenceError):
        await store.put("active", make_task("a", 1))
