from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from test_case_dashboard.core.schema import OVERALL_SLOT, CaseCounts, DashboardState

CHART_PARTS = (
    ("Passed", "passed"),
    ("Failed", "failed"),
    ("Skipped", "skipped"),
)

CHART_COLORS: dict[str, str] = {
    "Passed": "#16a34a",
    "Failed": "#f43f5e",
    "Skipped": "#777f88",
}
INFO_COLOR = "#2563eb"


def color_for(label: str) -> str:
    return CHART_COLORS.get(str(label).title(), INFO_COLOR)


@dataclass(frozen=True)
class ChartSlice:
    label: str
    value: int


@dataclass
class ChartData:
    """Passed/Failed/Skipped split for one donut chart.

    ``total`` is the sum of the three parts; the user-entered total is display
    only and never feeds the proportions.
    """

    slices: list[ChartSlice] = field(default_factory=list)

    @property
    def labels(self) -> list[str]:
        return [s.label for s in self.slices]

    @property
    def values(self) -> list[int]:
        return [s.value for s in self.slices]

    @property
    def total(self) -> int:
        return sum(self.values)

    @property
    def has_data(self) -> bool:
        return any(v > 0 for v in self.values)

    @property
    def visible_slices(self) -> list[ChartSlice]:
        return [s for s in self.slices if s.value > 0]


def derive_chart_data(counts: Optional[CaseCounts]) -> ChartData:
    if counts is None:
        return ChartData(slices=[ChartSlice(label, 0) for label, _attr in CHART_PARTS])
    return ChartData(slices=[ChartSlice(label, counts.value(attr)) for label, attr in CHART_PARTS])


def derive_dashboard_charts(state: DashboardState) -> dict[str, ChartData]:
    """Chart data keyed by ``overall`` followed by each widget in order."""
    charts = {OVERALL_SLOT: derive_chart_data(state.test_cases)}
    for name, counts in state.widgets.items():
        charts[name] = derive_chart_data(counts)
    return charts


@dataclass(frozen=True)
class DashboardSummary:
    total_test_cases: int
    processed_cases: int
    is_valid: bool

    @property
    def status_label(self) -> str:
        return "Valid" if self.is_valid else "Invalid"


def summarize(state: DashboardState, errors: Iterable[str] = ()) -> DashboardSummary:
    return DashboardSummary(
        total_test_cases=state.test_cases.value("total"),
        processed_cases=state.test_cases.parts_sum(),
        is_valid=not list(errors),
    )


def widget_title(name: str) -> str:
    return str(name).replace("_", " ").title()
