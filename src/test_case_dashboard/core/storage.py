from __future__ import annotations

import copy
import threading
from typing import Iterable, Optional, Protocol

from test_case_dashboard.core.schema import (
    DEFAULT_WIDGET_NAMES,
    DashboardState,
    DashboardValidationError,
    validate_dashboard_state,
)
from test_case_dashboard.utils.log import log_event


class DashboardStore(Protocol):
    def save(self, dashboard_id: str, state: DashboardState) -> None: ...

    def load(self, dashboard_id: str) -> Optional[DashboardState]: ...

    def list_all(self) -> list[DashboardState]: ...


class MemoryDashboardStore:
    """Process-lifetime snapshot store keyed by dashboard id.

    Saves replace the whole snapshot (last writer wins). Values are copied on
    the way in and out so callers never share the stored objects.
    """

    def __init__(self, widget_names: Iterable[str] = DEFAULT_WIDGET_NAMES):
        self.widget_names = tuple(widget_names)
        self._lock = threading.Lock()
        self._dashboards: dict[str, DashboardState] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._dashboards)

    def save(self, dashboard_id: str, state: DashboardState) -> None:
        dashboard_id = str(dashboard_id)
        if not dashboard_id:
            raise DashboardValidationError(["Dashboard id is required"])
        errors = validate_dashboard_state(state, self.widget_names)
        if errors:
            raise DashboardValidationError(errors)
        snapshot = copy.deepcopy(state)
        with self._lock:
            self._dashboards[dashboard_id] = snapshot
        log_event("storage.save", dashboard_id=dashboard_id)

    def load(self, dashboard_id: str) -> Optional[DashboardState]:
        with self._lock:
            snapshot = self._dashboards.get(str(dashboard_id))
            return copy.deepcopy(snapshot) if snapshot is not None else None

    def list_all(self) -> list[DashboardState]:
        with self._lock:
            return [copy.deepcopy(s) for s in self._dashboards.values()]

    def close(self) -> None:
        with self._lock:
            self._dashboards.clear()
