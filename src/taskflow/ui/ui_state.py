# src/taskflow/ui/ui_state.py

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..core.ports import PreferenceStorage
from ..tasks.task_models import TaskFilter

logger = logging.getLogger(__name__)

STORAGE_KEY = "taskflow_ui_state_v1"

FilterObserver = Callable[[TaskFilter], None]
PanelObserver = Callable[[bool], None]


@dataclass(slots=True)
class UiStateSnapshot:
    filter: TaskFilter = TaskFilter.ALL
    deleted_panel_open: bool = False

    def to_json(self) -> str:
        return json.dumps({"filter": self.filter.value, "deletedPanelOpen": self.deleted_panel_open})

    @classmethod
    def from_json(cls, raw: str) -> UiStateSnapshot:
        data: Any = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("UI state snapshot is not a JSON object")
        # Unknown values are rejected rather than coerced, so a bad snapshot falls back to defaults.
        task_filter = TaskFilter(data.get("filter", TaskFilter.ALL))
        panel = data.get("deletedPanelOpen", False)
        if not isinstance(panel, bool):
            raise ValueError(f"deletedPanelOpen must be a bool, got {panel!r}")
        return cls(filter=task_filter, deleted_panel_open=panel)


class UiStateStore:
    """
    Persisted UI preferences: the active-list filter and the deleted panel.

    - loads a snapshot from the injected storage; any problem -> defaults
    - each change is persisted, then published to observers
    - persistence failures are logged, not raised (preferences are best-effort)
    """

    def __init__(self, storage: PreferenceStorage) -> None:
        self._storage = storage
        self._state = self._load()
        self._filter_observers: list[FilterObserver] = []
        self._panel_observers: list[PanelObserver] = []

    def _load(self) -> UiStateSnapshot:
        try:
            raw = self._storage.get(STORAGE_KEY)
            if not raw:
                return UiStateSnapshot()
            return UiStateSnapshot.from_json(raw)
        except Exception:
            logger.warning("Failed to load UI state; using defaults.", exc_info=True)
            return UiStateSnapshot()

    def _persist(self) -> None:
        try:
            self._storage.set(STORAGE_KEY, self._state.to_json())
        except Exception:
            logger.warning("Failed to persist UI state.", exc_info=True)

    @property
    def filter(self) -> TaskFilter:
        return self._state.filter

    @property
    def deleted_panel_open(self) -> bool:
        return self._state.deleted_panel_open

    def snapshot(self) -> UiStateSnapshot:
        return UiStateSnapshot(self._state.filter, self._state.deleted_panel_open)

    @staticmethod
    def _subscribe(observers: list, observer) -> Callable[[], None]:
        observers.append(observer)

        def unsubscribe() -> None:
            if observer in observers:
                observers.remove(observer)

        return unsubscribe

    @staticmethod
    def _publish(observers: list, value) -> None:
        for observer in list(observers):
            try:
                observer(value)
            except Exception:
                logger.exception("UI state observer failed: %r", observer)

    def subscribe_filter(self, observer: FilterObserver) -> Callable[[], None]:
        return self._subscribe(self._filter_observers, observer)

    def subscribe_deleted_panel(self, observer: PanelObserver) -> Callable[[], None]:
        return self._subscribe(self._panel_observers, observer)

    def set_filter(self, value: TaskFilter | str) -> None:
        """Change the filter; repeating the current value does nothing."""
        new_filter = TaskFilter(value)
        if new_filter == self._state.filter:
            return
        self._state.filter = new_filter
        self._persist()
        self._publish(self._filter_observers, new_filter)

    def toggle_deleted_panel(self, force: bool | None = None) -> bool:
        """
        Set the panel to `force`, or flip it when no value is given.

        Always persists and publishes, even if the value did not change.
        """
        if isinstance(force, bool):
            self._state.deleted_panel_open = force
        else:
            self._state.deleted_panel_open = not self._state.deleted_panel_open
        self._persist()
        self._publish(self._panel_observers, self._state.deleted_panel_open)
        return self._state.deleted_panel_open
