from __future__ import annotations

import io
import textwrap
from typing import Optional

from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

from test_case_dashboard.core.aggregation import (
    CHART_COLORS,
    ChartData,
    derive_chart_data,
    widget_title,
)
from test_case_dashboard.core.export import (
    EXPORT_LAYOUT_WIDTH,
    ExportError,
    ExportLayout,
    RasterImage,
    RasterOptions,
    png_size,
)
from test_case_dashboard.core.schema import OVERALL_SLOT

BASE_DPI = 100
HEADER_IN = 0.7
LEGEND_IN = 0.8
WIDGET_ROW_IN = 3.4
MIN_CHART_IN = 5.0
LINE_IN = 0.26
SECTION_PAD_IN = 0.35
WRAP_CHARS = 120

SIZE_CLASS_POINTS = {
    "text-sm": 9,
    "text-base": 11,
    "text-lg": 13,
    "text-xl": 15,
}

LEGEND_LABELS = (
    ("Passed", "Passed Test Cases"),
    ("Failed", "Failed Test Cases"),
    ("Skipped", "Skipped Test Cases"),
)


def _wrap(text: str) -> list[str]:
    lines: list[str] = []
    for para in str(text).splitlines() or [""]:
        lines.extend(textwrap.wrap(para, WRAP_CHARS) or [""])
    return lines


def _analysis_lines(layout: ExportLayout) -> list[tuple[str, dict]]:
    """Remarks then comments, one entry per rendered line."""
    out: list[tuple[str, dict]] = []
    remarks = layout.state.remarks
    slots = [OVERALL_SLOT, *layout.state.widget_names]
    for slot in slots:
        text = remarks.get(slot, "")
        if not text.strip():
            continue
        out.append((f"{widget_title(slot)} remarks", {"fontsize": 12, "fontweight": "bold"}))
        out.extend((line, {"fontsize": 11}) for line in _wrap(text))
    for comment in layout.comments:
        if comment.title:
            out.append((comment.title, {"fontsize": 13, "fontweight": "bold"}))
        fmt = comment.formatting
        style = {
            "fontsize": SIZE_CLASS_POINTS.get(fmt.size_class, 11),
            "fontweight": "bold" if fmt.bold else "normal",
            "fontstyle": "italic" if fmt.italic else "normal",
        }
        out.extend((line, dict(style)) for line in _wrap(comment.content))
    return out


def _chart_block_in(layout: ExportLayout) -> float:
    return max(MIN_CHART_IN, WIDGET_ROW_IN * max(1, len(layout.state.widgets)))


def natural_height_in(layout: ExportLayout) -> float:
    lines = _analysis_lines(layout)
    analysis_in = (LINE_IN * (len(lines) + 1) + SECTION_PAD_IN) if lines else 0.0
    return HEADER_IN + LEGEND_IN + _chart_block_in(layout) + SECTION_PAD_IN + analysis_in


def _draw_donut(
    ax,
    chart: ChartData,
    headline: int,
    headline_label: str,
    title: str,
    large: bool,
) -> None:
    ax.set_aspect("equal")
    ax.axis("off")
    visible = chart.visible_slices
    if visible:
        ax.pie(
            [s.value for s in visible],
            colors=[CHART_COLORS[s.label] for s in visible],
            startangle=90,
            counterclock=False,
            wedgeprops={"width": 0.3, "edgecolor": "white", "linewidth": 3},
        )
    else:
        ax.pie([1], colors=["#e5e7eb"], wedgeprops={"width": 0.3, "edgecolor": "white"})
        ax.text(0, 0, "No data", ha="center", va="center", fontsize=11, color="#6b7280")
        ax.set_title(title, fontsize=18 if large else 15, fontweight="bold", y=-0.08)
        return

    big = 28 if large else 22
    small = 10 if large else 8
    ax.text(0, 0.24, str(headline), ha="center", va="center", fontsize=big, fontweight="bold", color="#111827")
    ax.text(0, 0.08, headline_label, ha="center", va="center", fontsize=small + 1, color="#4b5563")
    values = dict(zip(chart.labels, chart.values))
    for offset, label in enumerate(("Passed", "Failed", "Skipped")):
        ax.text(
            0,
            -0.08 - offset * 0.12,
            f"{label}: {values.get(label, 0)}",
            ha="center",
            va="center",
            fontsize=small,
            fontweight="bold",
            color=CHART_COLORS[label],
        )
    ax.set_title(title, fontsize=18 if large else 15, fontweight="bold", y=-0.08)


def render_export_figure(layout: ExportLayout, options: RasterOptions) -> Figure:
    width_px = options.width or layout.natural_width or EXPORT_LAYOUT_WIDTH
    width_in = width_px / BASE_DPI
    height_in = (options.height / BASE_DPI) if options.height else natural_height_in(layout)
    fig = Figure(figsize=(width_in, height_in), dpi=BASE_DPI, facecolor=options.background)
    FigureCanvasAgg(fig)

    def frac(y_in: float) -> float:
        return 1.0 - (y_in / height_in)

    state = layout.state
    cursor = 0.0

    env = state.config.environment or "Not Selected"
    site = state.config.site or "Not Selected"
    fig.text(
        0.03,
        frac(cursor + HEADER_IN / 2),
        f"Environment: {env}        Site: {site}",
        ha="left",
        va="center",
        fontsize=14,
        fontweight="bold",
        color="#1f2937",
    )
    cursor += HEADER_IN

    fig.text(0.5, frac(cursor + 0.2), "Chart Color Legend", ha="center", va="center", fontsize=12, fontweight="bold")
    for idx, (key, text) in enumerate(LEGEND_LABELS):
        x = 0.22 + idx * 0.22
        fig.text(x, frac(cursor + 0.55), "●", ha="right", va="center", fontsize=14, color=CHART_COLORS[key])
        fig.text(x + 0.008, frac(cursor + 0.55), text, ha="left", va="center", fontsize=10, fontweight="bold")
    cursor += LEGEND_IN

    chart_in = _chart_block_in(layout)
    overall_size = min(chart_in, width_in * 0.55) * 0.85
    overall_ax = fig.add_axes(
        [
            0.04,
            frac(cursor + (chart_in + overall_size) / 2),
            overall_size / width_in,
            overall_size / height_in,
        ]
    )
    _draw_donut(
        overall_ax,
        derive_chart_data(state.test_cases),
        state.test_cases.value("total"),
        "Total Test Cases",
        "Overall Test Cases",
        large=True,
    )

    widget_names = list(state.widgets)
    if widget_names:
        row_in = chart_in / len(widget_names)
        widget_size = min(row_in, WIDGET_ROW_IN) * 0.82
        for idx, name in enumerate(widget_names):
            top = cursor + idx * row_in + (row_in - widget_size) / 2
            ax = fig.add_axes(
                [
                    0.62,
                    frac(top + widget_size),
                    widget_size / width_in,
                    widget_size / height_in,
                ]
            )
            counts = state.widgets[name]
            _draw_donut(
                ax,
                derive_chart_data(counts),
                counts.value("total"),
                "Total Tests",
                widget_title(name),
                large=False,
            )
    cursor += chart_in + SECTION_PAD_IN

    lines = _analysis_lines(layout)
    if lines:
        fig.text(0.03, frac(cursor), "Analysis & Insights", ha="left", va="top", fontsize=15, fontweight="bold")
        cursor += LINE_IN * 1.3
        for text, style in lines:
            fig.text(0.04, frac(cursor), text, ha="left", va="top", color="#1f2937", **style)
            cursor += LINE_IN
    return fig


class MatplotlibRasterizer:
    """Render export layouts to PNG with the Agg backend."""

    def rasterize(self, layout: Optional[ExportLayout], options: RasterOptions) -> RasterImage:
        if layout is None:
            raise ExportError("Export layout not found")
        if not layout.visible:
            raise ExportError("Export layout is hidden")
        fig = render_export_figure(layout, options)
        buffer = io.BytesIO()
        fig.savefig(
            buffer,
            format="png",
            dpi=BASE_DPI * float(options.scale),
            facecolor=options.background,
        )
        data = buffer.getvalue()
        width, height = png_size(data)
        return RasterImage(width=width, height=height, data=data)
