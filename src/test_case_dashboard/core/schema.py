from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Iterable, Mapping, Optional

ENVIRONMENTS = ("PROD", "UAT", "DEV", "Sandbox")
SITES = ("LON1A", "LON1B", "NOV1A", "NOV1B", "FRA1", "JHB1A")
CONFIG_CHOICES: dict[str, tuple[str, ...]] = {
    "environment": ENVIRONMENTS,
    "site": SITES,
}

WIDGET_VARIANTS: dict[str, tuple[str, ...]] = {
    "basic": ("telemetry",),
    "extended": ("telemetry", "inbound", "outbound"),
}
DEFAULT_WIDGET_NAMES = WIDGET_VARIANTS["extended"]

OVERALL_SLOT = "overall"
COUNT_ATTRS = ("total", "passed", "failed", "skipped")
STATE_SECTIONS = ("config", "testCases", "widgets", "remarks")

SUM_EXCEEDS_TOTAL_MESSAGE = (
    "Sum of passed, failed, and skipped test cases cannot exceed total test cases"
)


class DashboardValidationError(ValueError):
    """Raised when a dashboard payload fails structural or cross-field checks."""

    def __init__(self, errors: Iterable[str]):
        self.errors = [str(e) for e in errors]
        super().__init__("; ".join(self.errors) or "Invalid dashboard data")


def remark_slots(widget_names: Iterable[str] = DEFAULT_WIDGET_NAMES) -> tuple[str, ...]:
    return (OVERALL_SLOT, *widget_names)


def _lenient_count(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


@dataclass
class DashboardConfig:
    environment: Optional[str] = None
    site: Optional[str] = None

    def to_dict(self) -> dict[str, str]:
        out: dict[str, str] = {}
        if self.environment is not None:
            out["environment"] = self.environment
        if self.site is not None:
            out["site"] = self.site
        return out

    @classmethod
    def from_dict(cls, payload: Any) -> "DashboardConfig":
        if not isinstance(payload, Mapping):
            return cls()
        values = {}
        for name in CONFIG_CHOICES:
            value = payload.get(name)
            values[name] = value if isinstance(value, str) else None
        return cls(**values)


@dataclass
class CaseCounts:
    """Four optional counters; ``None`` marks a field the user never entered."""

    json_keys: ClassVar[dict[str, str]] = {attr: attr for attr in COUNT_ATTRS}

    total: Optional[int] = None
    passed: Optional[int] = None
    failed: Optional[int] = None
    skipped: Optional[int] = None

    @classmethod
    def resolve_attr(cls, name: str) -> str:
        """Map an attribute or JSON key name onto the attribute name."""
        if name in cls.json_keys:
            return name
        for attr, key in cls.json_keys.items():
            if key == name:
                return attr
        raise KeyError(f"Unknown count field: {name}")

    def value(self, attr: str) -> int:
        raw = getattr(self, attr)
        return 0 if raw is None else int(raw)

    def parts_sum(self) -> int:
        return self.value("passed") + self.value("failed") + self.value("skipped")

    def to_dict(self) -> dict[str, int]:
        return {
            key: getattr(self, attr)
            for attr, key in self.json_keys.items()
            if getattr(self, attr) is not None
        }

    @classmethod
    def from_dict(cls, payload: Any):
        if not isinstance(payload, Mapping):
            return cls()
        return cls(**{attr: _lenient_count(payload.get(key)) for attr, key in cls.json_keys.items()})


class TestCaseData(CaseCounts):
    __test__ = False

    json_keys: ClassVar[dict[str, str]] = {
        "total": "totalTestCases",
        "passed": "passedTestCases",
        "failed": "failedTestCases",
        "skipped": "skippedTestCases",
    }


class WidgetData(CaseCounts):
    pass


@dataclass
class DashboardState:
    config: DashboardConfig = field(default_factory=DashboardConfig)
    test_cases: TestCaseData = field(default_factory=TestCaseData)
    widgets: dict[str, WidgetData] = field(default_factory=dict)
    remarks: dict[str, str] = field(default_factory=dict)

    @classmethod
    def empty(cls, widget_names: Iterable[str] = DEFAULT_WIDGET_NAMES) -> "DashboardState":
        return cls(widgets={name: WidgetData() for name in widget_names})

    @property
    def widget_names(self) -> tuple[str, ...]:
        return tuple(self.widgets)

    def to_dict(self) -> dict[str, Any]:
        return {
            "config": self.config.to_dict(),
            "testCases": self.test_cases.to_dict(),
            "widgets": {name: counts.to_dict() for name, counts in self.widgets.items()},
            "remarks": dict(self.remarks),
        }

    @classmethod
    def from_dict(
        cls,
        payload: Any,
        widget_names: Iterable[str] = DEFAULT_WIDGET_NAMES,
    ) -> "DashboardState":
        """Rebuild a state without validating it (in-session round trips)."""
        names = tuple(widget_names)
        if not isinstance(payload, Mapping):
            return cls.empty(names)
        widgets_raw = payload.get("widgets") if isinstance(payload.get("widgets"), Mapping) else {}
        remarks_raw = payload.get("remarks") if isinstance(payload.get("remarks"), Mapping) else {}
        return cls(
            config=DashboardConfig.from_dict(payload.get("config")),
            test_cases=TestCaseData.from_dict(payload.get("testCases")),
            widgets={name: WidgetData.from_dict(widgets_raw.get(name)) for name in names},
            remarks={
                slot: remarks_raw[slot]
                for slot in remark_slots(names)
                if isinstance(remarks_raw.get(slot), str)
            },
        )


def check_test_case_totals(counts: CaseCounts) -> list[str]:
    """Cross-field rule for the overall test-case group.

    Only a positive ``total`` is checked; an absent or zero total never
    produces an error. Absent parts count as zero.
    """
    total = counts.total
    if total is None or total <= 0:
        return []
    if counts.parts_sum() > total:
        return [SUM_EXCEEDS_TOTAL_MESSAGE]
    return []


def _check_counts(counts: CaseCounts, path: str, errors: list[str]) -> None:
    for attr, key in counts.json_keys.items():
        value = getattr(counts, attr)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            errors.append(f"{path}.{key} must be a non-negative integer")


def validate_dashboard_state(
    state: DashboardState,
    widget_names: Iterable[str] = DEFAULT_WIDGET_NAMES,
) -> list[str]:
    """Return every structural and cross-field problem with ``state``.

    Widget counters are range-checked only; they carry no sum rule.
    """
    names = tuple(widget_names)
    errors: list[str] = []

    for name, choices in CONFIG_CHOICES.items():
        value = getattr(state.config, name)
        if value is not None and value not in choices:
            errors.append(f"config.{name} must be one of: {', '.join(choices)}")

    _check_counts(state.test_cases, "testCases", errors)

    for name in names:
        if name not in state.widgets:
            errors.append(f"widgets.{name} is required")
        else:
            _check_counts(state.widgets[name], f"widgets.{name}", errors)
    for name in state.widgets:
        if name not in names:
            errors.append(f"widgets.{name} is not a known widget")

    slots = remark_slots(names)
    for slot, text in state.remarks.items():
        if slot not in slots:
            errors.append(f"remarks.{slot} is not a known remark slot")
        elif not isinstance(text, str):
            errors.append(f"remarks.{slot} must be a string")

    if not errors:
        errors.extend(check_test_case_totals(state.test_cases))
    return errors


def _parse_count_field(raw: Mapping[str, Any], key: str, path: str, errors: list[str]) -> Optional[int]:
    if key not in raw:
        return None
    value = raw[key]
    count = _lenient_count(value)
    if count is None:
        errors.append(f"{path}.{key} must be a non-negative integer")
    return count


def _parse_counts(cls, raw: Any, path: str, errors: list[str]):
    if not isinstance(raw, Mapping):
        errors.append(f"{path} must be an object")
        return cls()
    return cls(**{attr: _parse_count_field(raw, key, path, errors) for attr, key in cls.json_keys.items()})


def parse_dashboard_state(
    payload: Any,
    widget_names: Iterable[str] = DEFAULT_WIDGET_NAMES,
) -> DashboardState:
    """Strictly decode a JSON payload into a :class:`DashboardState`.

    Unknown keys are dropped. Raises :class:`DashboardValidationError` with
    every problem found; the sum rule is only evaluated once the payload is
    structurally sound.
    """
    names = tuple(widget_names)
    if not isinstance(payload, Mapping):
        raise DashboardValidationError(["Dashboard state must be a JSON object"])

    errors: list[str] = []
    sections: dict[str, Mapping[str, Any]] = {}
    for key in STATE_SECTIONS:
        value = payload.get(key)
        if not isinstance(value, Mapping):
            errors.append(f"{key} must be an object")
            value = {}
        sections[key] = value

    config_values: dict[str, Optional[str]] = {}
    for name in CONFIG_CHOICES:
        value = sections["config"].get(name)
        if name in sections["config"] and not isinstance(value, str):
            errors.append(f"config.{name} must be a string")
            value = None
        config_values[name] = value

    test_cases = _parse_counts(TestCaseData, sections["testCases"], "testCases", errors)

    widgets: dict[str, WidgetData] = {}
    for name in names:
        if name not in sections["widgets"]:
            errors.append(f"widgets.{name} is required")
            widgets[name] = WidgetData()
            continue
        widgets[name] = _parse_counts(WidgetData, sections["widgets"][name], f"widgets.{name}", errors)

    remarks: dict[str, str] = {}
    for slot in remark_slots(names):
        if slot not in sections["remarks"]:
            continue
        text = sections["remarks"][slot]
        if not isinstance(text, str):
            errors.append(f"remarks.{slot} must be a string")
            continue
        remarks[slot] = text

    if errors:
        raise DashboardValidationError(errors)

    state = DashboardState(
        config=DashboardConfig(**config_values),
        test_cases=test_cases,
        widgets=widgets,
        remarks=remarks,
    )
    errors = validate_dashboard_state(state, names)
    if errors:
        raise DashboardValidationError(errors)
    return state
