from __future__ import annotations

import plotly.graph_objects as go

from test_case_dashboard.core.aggregation import ChartData, color_for

PLOTLY_TEMPLATE = "plotly_white"


def _placeholder_figure(height: int) -> go.Figure:
    fig = go.Figure()
    fig.add_annotation(
        text="No data",
        x=0.5,
        y=0.5,
        xref="paper",
        yref="paper",
        showarrow=False,
        font={"size": 14, "color": "#6b7280"},
    )
    fig.update_xaxes(visible=False)
    fig.update_yaxes(visible=False)
    fig.update_layout(template=PLOTLY_TEMPLATE, height=height, margin={"l": 10, "r": 10, "t": 10, "b": 10})
    return fig


def build_donut_figure(
    chart: ChartData,
    *,
    height: int = 280,
    hole: float = 0.6,
    show_total: bool = True,
    center_label: str = "Total",
) -> go.Figure:
    """Donut chart of the non-zero slices, or a "No data" placeholder."""
    if not chart.has_data:
        return _placeholder_figure(height)

    visible = chart.visible_slices
    fig = go.Figure(
        go.Pie(
            labels=[s.label for s in visible],
            values=[s.value for s in visible],
            hole=hole,
            sort=False,
            direction="clockwise",
            marker={"colors": [color_for(s.label) for s in visible], "line": {"color": "white", "width": 3}},
            textinfo="none",
            hovertemplate="%{label}: %{value}<br>%{percent:.1%}<extra></extra>",
        )
    )
    if show_total:
        fig.add_annotation(
            text=f"<b>{chart.total}</b><br><span style='font-size:11px'>{center_label}</span>",
            x=0.5,
            y=0.5,
            xref="paper",
            yref="paper",
            showarrow=False,
            font={"size": 20},
        )
    fig.update_layout(
        template=PLOTLY_TEMPLATE,
        height=height,
        showlegend=False,
        margin={"l": 10, "r": 10, "t": 10, "b": 10},
    )
    return fig
