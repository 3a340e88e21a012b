# tests/test_ui_state.py

from __future__ import annotations

import json
from pathlib import Path

from taskflow.tasks.task_models import TaskFilter
from taskflow.ui.preference_storage import JsonFilePreferenceStorage, MemoryPreferenceStorage
from taskflow.ui.ui_state import STORAGE_KEY, UiStateStore

from .fakes import BrokenPreferenceStorage


def test_defaults_on_first_run() -> None:
    storage = MemoryPreferenceStorage()
    ui = UiStateStore(storage)
    assert ui.filter == TaskFilter.ALL
    assert ui.deleted_panel_open is False
    assert storage.writes == 0


def test_loads_persisted_snapshot() -> None:
    storage = MemoryPreferenceStorage(
        {STORAGE_KEY: json.dumps({"filter": "completed", "deletedPanelOpen": True})}
    )
    ui = UiStateStore(storage)
    assert ui.filter == TaskFilter.COMPLETED
    assert ui.deleted_panel_open is True


def test_corrupt_or_unknown_snapshot_falls_back_to_defaults() -> None:
    for raw in ("{not json", "[]", json.dumps({"filter": "someday"}), json.dumps({"deletedPanelOpen": "yes"})):
        ui = UiStateStore(MemoryPreferenceStorage({STORAGE_KEY: raw}))
        assert ui.filter == TaskFilter.ALL
        assert ui.deleted_panel_open is False


def test_unreadable_storage_falls_back_to_defaults() -> None:
    ui = UiStateStore(BrokenPreferenceStorage())
    assert ui.snapshot().filter == TaskFilter.ALL


def test_set_filter_same_value_persists_once() -> None:
    storage = MemoryPreferenceStorage()
    ui = UiStateStore(storage)
    seen: list[TaskFilter] = []
    ui.subscribe_filter(seen.append)

    ui.set_filter("active")
    ui.set_filter(TaskFilter.ACTIVE)

    assert storage.writes == 1
    assert seen == [TaskFilter.ACTIVE]
    assert json.loads(storage.data[STORAGE_KEY]) == {"filter": "active", "deletedPanelOpen": False}

    # The default value is also a no-op on a fresh store.
    fresh = MemoryPreferenceStorage()
    UiStateStore(fresh).set_filter("all")
    assert fresh.writes == 0


def test_toggle_deleted_panel_flips_and_always_persists() -> None:
    storage = MemoryPreferenceStorage()
    ui = UiStateStore(storage)
    seen: list[bool] = []
    ui.subscribe_deleted_panel(seen.append)

    assert ui.toggle_deleted_panel() is True
    assert ui.toggle_deleted_panel() is False
    assert ui.toggle_deleted_panel() is True

    # Forcing the current value still persists and publishes.
    assert ui.toggle_deleted_panel(True) is True
    assert ui.toggle_deleted_panel(False) is False

    assert seen == [True, False, True, True, False]
    assert storage.writes == 5


def test_changes_are_persisted_before_publishing() -> None:
    storage = MemoryPreferenceStorage()
    ui = UiStateStore(storage)
    persisted_at_publish: list[str] = []
    ui.subscribe_filter(lambda _f: persisted_at_publish.append(storage.data[STORAGE_KEY]))

    ui.set_filter("completed")

    assert json.loads(persisted_at_publish[0])["filter"] == "completed"


def test_unsubscribe_stops_notifications() -> None:
    ui = UiStateStore(MemoryPreferenceStorage())
    seen: list[bool] = []
    unsubscribe = ui.subscribe_deleted_panel(seen.append)
    ui.toggle_deleted_panel()
    unsubscribe()
    ui.toggle_deleted_panel()
    assert seen == [True]


def test_persist_failure_is_not_raised() -> None:
    ui = UiStateStore(BrokenPreferenceStorage())
    ui.set_filter("completed")
    ui.toggle_deleted_panel()
    assert ui.filter == TaskFilter.COMPLETED
    assert ui.deleted_panel_open is True


def test_json_file_storage_survives_restart(tmp_path: Path) -> None:
    path = tmp_path / "prefs" / "ui_state.json"

    first = UiStateStore(JsonFilePreferenceStorage(path))
    first.set_filter("active")
    first.toggle_deleted_panel(True)
    assert path.exists()

    second = UiStateStore(JsonFilePreferenceStorage(path))
    assert second.filter == TaskFilter.ACTIVE
    assert second.deleted_panel_open is True


def test_json_file_storage_keeps_other_keys(tmp_path: Path) -> None:
    path = tmp_path / "ui_state.json"
    storage = JsonFilePreferenceStorage(path)
    storage.set("other", "1")
    storage.set(STORAGE_KEY, "{}")
    assert storage.get("other") == "1"
    assert storage.get("missing") is None


def test_json_file_storage_overwrites_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "ui_state.json"
    path.write_text("garbage", "utf-8")

    ui = UiStateStore(JsonFilePreferenceStorage(path))
    assert ui.filter == TaskFilter.ALL

    ui.set_filter("completed")
    assert UiStateStore(JsonFilePreferenceStorage(path)).filter == TaskFilter.COMPLETED


def test_failing_observer_does_not_break_publish() -> None:
    storage = MemoryPreferenceStorage()
    ui = UiStateStore(storage)

    def boom(_value) -> None:
        raise RuntimeError("observer bug")

    filters: list[TaskFilter] = []
    panels: list[bool] = []
    ui.subscribe_filter(boom)
    ui.subscribe_filter(filters.append)
    ui.subscribe_deleted_panel(boom)
    ui.subscribe_deleted_panel(panels.append)

    ui.set_filter("completed")
    assert ui.toggle_deleted_panel() is True

    assert filters == [TaskFilter.COMPLETED]
    assert panels == [True]
    assert storage.writes == 2


def test_unsubscribe_twice_is_harmless() -> None:
    ui = UiStateStore(MemoryPreferenceStorage())
    seen: list[TaskFilter] = []
    unsubscribe = ui.subscribe_filter(seen.append)
    unsubscribe()
    unsubscribe()
    ui.set_filter("active")
    assert seen == []
