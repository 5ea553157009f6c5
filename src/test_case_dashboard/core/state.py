from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from typing import Any, Optional

from test_case_dashboard.core.comments import Comment
from test_case_dashboard.core.schema import (
    CONFIG_CHOICES,
    DEFAULT_WIDGET_NAMES,
    DashboardState,
    TestCaseData,
    WidgetData,
    check_test_case_totals,
    remark_slots,
)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_count(raw: Any) -> int:
    """Read the leading integer of ``raw``; anything unparseable becomes 0."""
    if isinstance(raw, bool) or raw is None:
        return 0
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw == raw and abs(raw) != float("inf") else 0
    match = _LEADING_INT.match(str(raw))
    if not match:
        return 0
    try:
        return int(match.group(1))
    except ValueError:
        # digit run past the interpreter's int-conversion limit
        return 0


@dataclass
class DashboardSession:
    """Mutable state for one open dashboard, independent of any UI toolkit."""

    widget_names: tuple[str, ...] = DEFAULT_WIDGET_NAMES
    state: Optional[DashboardState] = None
    validation_errors: list[str] = field(default_factory=list)
    comments: list[Comment] = field(default_factory=list)
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self) -> None:
        self.widget_names = tuple(self.widget_names)
        if self.state is None:
            self.state = DashboardState.empty(self.widget_names)

    def clear(self) -> None:
        self.state = DashboardState.empty(self.widget_names)
        self.validation_errors = []
        self.comments.clear()


def revalidate(session: DashboardSession) -> list[str]:
    session.validation_errors = check_test_case_totals(session.state.test_cases)
    return session.validation_errors


def set_config(session: DashboardSession, field_name: str, value: Optional[str]) -> None:
    if field_name not in CONFIG_CHOICES:
        raise KeyError(f"Unknown config field: {field_name}")
    if value is not None and value not in CONFIG_CHOICES[field_name]:
        raise ValueError(f"Invalid {field_name}: {value}")
    setattr(session.state.config, field_name, value)


def set_test_case(session: DashboardSession, field_name: str, raw: Any) -> int:
    attr = TestCaseData.resolve_attr(field_name)
    value = parse_count(raw)
    setattr(session.state.test_cases, attr, value)
    revalidate(session)
    return value


def set_widget_field(session: DashboardSession, widget_name: str, field_name: str, raw: Any) -> int:
    if widget_name not in session.state.widgets:
        raise KeyError(f"Unknown widget: {widget_name}")
    attr = WidgetData.resolve_attr(field_name)
    value = parse_count(raw)
    setattr(session.state.widgets[widget_name], attr, value)
    return value


def set_remark(session: DashboardSession, slot: str, text: str) -> None:
    if slot not in remark_slots(session.widget_names):
        raise KeyError(f"Unknown remark slot: {slot}")
    session.state.remarks[slot] = "" if text is None else str(text)


def reset(session: DashboardSession) -> None:
    session.clear()


def replace_state(session: DashboardSession, state: DashboardState) -> None:
    """Swap in a loaded snapshot; comments are session-only and survive."""
    session.state = state
    revalidate(session)


def session_to_dict(session: DashboardSession) -> dict[str, Any]:
    return {
        "widget_names": list(session.widget_names),
        "state": session.state.to_dict(),
        "validation_errors": list(session.validation_errors),
        "comments": [c.to_dict() for c in session.comments],
        "session_id": session.session_id,
    }


def session_from_dict(
    payload: Optional[dict[str, Any]],
    widget_names: tuple[str, ...] = DEFAULT_WIDGET_NAMES,
) -> DashboardSession:
    data = dict(payload or {})
    names = data.get("widget_names")
    if isinstance(names, list) and names:
        widget_names = tuple(str(n) for n in names)
    session = DashboardSession(
        widget_names=widget_names,
        state=DashboardState.from_dict(data.get("state"), widget_names),
    )
    comments = data.get("comments", [])
    if isinstance(comments, list):
        session.comments = [Comment.from_dict(c) for c in comments if isinstance(c, dict)]
    session_id = data.get("session_id")
    if isinstance(session_id, str) and session_id:
        session.session_id = session_id
    revalidate(session)
    return session
