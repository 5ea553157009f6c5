from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import dash_bootstrap_components as dbc
from dash import ALL, Dash, Input, Output, State, ctx, dcc, html, no_update
from dash.exceptions import PreventUpdate

from test_case_dashboard.config import AppSettings
from test_case_dashboard.core.aggregation import (
    CHART_COLORS,
    derive_chart_data,
    summarize,
    widget_title,
)
from test_case_dashboard.core.comments import (
    SIZE_CLASSES,
    CommentFormatting,
    add_comment,
    delete_comment,
    update_comment,
)
from test_case_dashboard.core.export import (
    ExportError,
    ExportLayout,
    ExportOrchestrator,
    Rasterizer,
)
from test_case_dashboard.core.schema import (
    ENVIRONMENTS,
    OVERALL_SLOT,
    SITES,
    DashboardValidationError,
    TestCaseData,
    WidgetData,
    remark_slots,
)
from test_case_dashboard.core.state import (
    DashboardSession,
    replace_state,
    reset,
    session_from_dict,
    session_to_dict,
    set_config,
    set_remark,
    set_test_case,
    set_widget_field,
)
from test_case_dashboard.core.storage import DashboardStore, MemoryDashboardStore
from test_case_dashboard.plotting.figures import build_donut_figure
from test_case_dashboard.plotting.raster import MatplotlibRasterizer
from test_case_dashboard.server.api import create_api_blueprint
from test_case_dashboard.utils.log import log_event, log_exception
from test_case_dashboard.version import APP_SUBTITLE, APP_TITLE, BUILD_VERSION

OVERALL_FIELDS = (
    ("totalTestCases", "Total Test Cases"),
    ("passedTestCases", "Passed"),
    ("failedTestCases", "Failed"),
    ("skippedTestCases", "Skipped"),
)
WIDGET_FIELDS = (
    ("total", "Total"),
    ("passed", "Passed"),
    ("failed", "Failed"),
    ("skipped", "Skipped"),
)

SIZE_CLASS_REM = {
    "text-sm": "0.875rem",
    "text-base": "1rem",
    "text-lg": "1.125rem",
    "text-xl": "1.25rem",
}

PANEL_HELP_TEXT: dict[str, str] = {
    "config": "Pick the environment and site the results were collected from.",
    "overall": (
        "Enter the overall counts. Passed + failed + skipped may not exceed the total.\n"
        "Non-numeric input counts as 0."
    ),
    "widgets": "Each widget is tracked on its own; its counts are not checked against any total.",
    "remarks": "Free-text remarks are included in the exported image.",
    "comments": "Analysis comments are kept for this session only and are cleared on reset.",
    "snapshots": "Save the current dashboard under an id, or load a saved one.",
}


def _status_alert(title: str, message: str = "", kind: str = "info") -> dbc.Alert:
    children: list[Any] = [html.Strong(title)]
    if message:
        children.append(html.Span(f" {message}"))
    return dbc.Alert(children, color=kind, dismissable=True, className="mb-2")


def _card_header_with_help(title: str, help_text: str) -> dbc.CardHeader:
    return dbc.CardHeader(
        [
            html.Span(title, className="fw-bold"),
            html.Span(
                "?",
                className="badge rounded-pill bg-secondary ms-2",
                title=help_text,
                role="button",
                tabIndex=0,
            ),
        ]
    )


def _count_text(value: Optional[int]) -> str:
    return "" if value is None else str(value)


def _count_input(group: str, field_name: str, label: str) -> dbc.Col:
    return dbc.Col(
        [
            dbc.Label(label, className="small fw-semibold"),
            dcc.Input(
                id={"type": "count-input", "group": group, "field": field_name},
                type="text",
                inputMode="numeric",
                value="",
                debounce=False,
                className="form-control",
                placeholder="0",
            ),
        ],
        md=3,
    )


def _config_card() -> dbc.Card:
    return dbc.Card(
        [
            _card_header_with_help("Configuration", PANEL_HELP_TEXT["config"]),
            dbc.CardBody(
                dbc.Row(
                    [
                        dbc.Col(
                            [
                                dbc.Label("Environment", className="small fw-semibold"),
                                dcc.Dropdown(
                                    id="env-select",
                                    options=[{"label": v, "value": v} for v in ENVIRONMENTS],
                                    placeholder="Select environment",
                                ),
                            ],
                            md=6,
                        ),
                        dbc.Col(
                            [
                                dbc.Label("Site", className="small fw-semibold"),
                                dcc.Dropdown(
                                    id="site-select",
                                    options=[{"label": v, "value": v} for v in SITES],
                                    placeholder="Select site",
                                ),
                            ],
                            md=6,
                        ),
                    ]
                )
            ),
        ],
        className="mb-3",
    )


def _overall_card() -> dbc.Card:
    return dbc.Card(
        [
            _card_header_with_help("Overall Test Cases", PANEL_HELP_TEXT["overall"]),
            dbc.CardBody(
                [
                    dbc.Row([_count_input(OVERALL_SLOT, key, label) for key, label in OVERALL_FIELDS], className="mb-3"),
                    html.Div(id="validation-slot"),
                    dcc.Graph(id="overall-chart", config={"displayModeBar": False}),
                ]
            ),
        ],
        className="mb-3",
    )


def _widget_card(name: str, widget_count: int) -> dbc.Col:
    return dbc.Col(
        dbc.Card(
            [
                _card_header_with_help(widget_title(name), PANEL_HELP_TEXT["widgets"]),
                dbc.CardBody(
                    [
                        dbc.Row([_count_input(name, key, label) for key, label in WIDGET_FIELDS], className="mb-2"),
                        dcc.Graph(
                            id={"type": "widget-chart", "widget": name},
                            config={"displayModeBar": False},
                        ),
                    ]
                ),
            ],
            className="h-100",
        ),
        lg=max(4, 12 // max(1, widget_count)),
        className="mb-3",
    )


def _remarks_card(widget_names: tuple[str, ...]) -> dbc.Card:
    return dbc.Card(
        [
            _card_header_with_help("Remarks", PANEL_HELP_TEXT["remarks"]),
            dbc.CardBody(
                [
                    html.Div(
                        [
                            dbc.Label(f"{widget_title(slot)} remarks", className="small fw-semibold"),
                            dcc.Textarea(
                                id={"type": "remark-input", "slot": slot},
                                value="",
                                className="form-control mb-2",
                                style={"minHeight": "70px"},
                            ),
                        ]
                    )
                    for slot in remark_slots(widget_names)
                ]
            ),
        ],
        className="mb-3",
    )


def _comments_card() -> dbc.Card:
    return dbc.Card(
        [
            _card_header_with_help("Analysis & Insights", PANEL_HELP_TEXT["comments"]),
            dbc.CardBody(
                [
                    dbc.Input(id="comment-title", placeholder="Comment title (optional)", className="mb-2"),
                    dbc.Row(
                        [
                            dbc.Col(
                                dcc.Checklist(
                                    id="comment-format",
                                    options=[
                                        {"label": " Bold", "value": "bold"},
                                        {"label": " Italic", "value": "italic"},
                                    ],
                                    value=[],
                                    inline=True,
                                    inputClassName="me-1",
                                    labelClassName="me-3",
                                ),
                                md=8,
                            ),
                            dbc.Col(
                                dcc.Dropdown(
                                    id="comment-size",
                                    options=[{"label": label, "value": key} for key, label in SIZE_CLASSES.items()],
                                    value="text-base",
                                    clearable=False,
                                ),
                                md=4,
                            ),
                        ],
                        className="mb-2",
                    ),
                    dcc.Textarea(
                        id="comment-content",
                        value="",
                        placeholder="Write your analysis...",
                        className="form-control mb-2",
                        style={"minHeight": "110px"},
                    ),
                    dbc.Button("Save Comment", id="comment-add-btn", color="primary", size="sm", className="mb-3"),
                    html.Div(id="comments-slot"),
                ]
            ),
        ],
        className="mb-3",
    )


def _snapshot_card() -> dbc.Card:
    return dbc.Card(
        [
            _card_header_with_help("Saved Dashboards", PANEL_HELP_TEXT["snapshots"]),
            dbc.CardBody(
                dbc.InputGroup(
                    [
                        dbc.Input(id="dashboard-id", placeholder="Dashboard id", value="default"),
                        dbc.Button("Save", id="save-btn", color="success"),
                        dbc.Button("Load", id="load-btn", color="secondary"),
                    ]
                )
            ),
        ],
        className="mb-3",
    )


def _summary_tiles(session: DashboardSession) -> dbc.Row:
    summary = summarize(session.state, session.validation_errors)
    tiles = (
        (str(summary.total_test_cases), "Total Test Cases", "dark"),
        (str(summary.processed_cases), "Processed Cases", "dark"),
        (summary.status_label, "Data Status", "success" if summary.is_valid else "danger"),
    )
    return dbc.Row(
        [
            dbc.Col(
                dbc.Card(
                    dbc.CardBody(
                        [
                            html.Div(value, className=f"fs-2 fw-bold text-{color}"),
                            html.Div(label, className="small text-muted"),
                        ],
                        className="text-center",
                    )
                ),
                md=4,
                className="mb-2",
            )
            for value, label, color in tiles
        ]
    )


def _legend() -> html.Div:
    return html.Div(
        [
            html.Span(
                [
                    html.Span("●", style={"color": CHART_COLORS[key], "fontSize": "1.2rem"}),
                    html.Span(f" {key} Test Cases", className="small fw-semibold me-4"),
                ]
            )
            for key in ("Passed", "Failed", "Skipped")
        ],
        className="text-center mb-3",
    )


def _comment_cards(session: DashboardSession) -> list[Any]:
    if not session.comments:
        return [html.P("No comments added yet.", className="text-muted small")]
    cards = []
    for comment in session.comments:
        fmt = comment.formatting
        style = {
            "fontWeight": "bold" if fmt.bold else "normal",
            "fontStyle": "italic" if fmt.italic else "normal",
            "fontSize": SIZE_CLASS_REM.get(fmt.size_class, "1rem"),
        }
        cards.append(
            dbc.Card(
                dbc.CardBody(
                    [
                        html.H6(comment.title, className="fw-semibold") if comment.title else None,
                        html.P(comment.content, style=style),
                        html.Div(f"Added {comment.created_at}", className="small text-muted mb-2"),
                        dbc.Input(
                            id={"type": "comment-edit-title", "id": comment.id},
                            value=comment.title,
                            size="sm",
                            className="mb-1",
                        ),
                        dcc.Textarea(
                            id={"type": "comment-edit-content", "id": comment.id},
                            value=comment.content,
                            className="form-control form-control-sm mb-1",
                        ),
                        dbc.ButtonGroup(
                            [
                                dbc.Button(
                                    "Update",
                                    id={"type": "comment-update-btn", "id": comment.id},
                                    color="primary",
                                    outline=True,
                                    size="sm",
                                ),
                                dbc.Button(
                                    "Delete",
                                    id={"type": "comment-delete-btn", "id": comment.id},
                                    color="danger",
                                    outline=True,
                                    size="sm",
                                ),
                            ]
                        ),
                    ]
                ),
                className="mb-2",
            )
        )
    return cards


def _header() -> dbc.Navbar:
    return dbc.Navbar(
        dbc.Container(
            [
                html.Div(
                    [
                        html.H3(APP_TITLE, className="mb-0"),
                        html.Small(f"{APP_SUBTITLE} · v{BUILD_VERSION}", className="text-muted"),
                    ]
                ),
                html.Div(
                    [
                        dbc.Button("Export", id="export-btn", color="primary", className="me-2"),
                        dbc.Button("Reset", id="reset-btn", color="secondary", outline=True),
                    ]
                ),
            ],
            fluid=True,
            className="d-flex justify-content-between",
        ),
        color="light",
        className="mb-3 shadow-sm",
    )


def _root_layout(settings: AppSettings) -> html.Div:
    widget_names = settings.widget_names
    empty_session = session_to_dict(DashboardSession(widget_names=widget_names))
    return html.Div(
        [
            dcc.Store(id="dashboard-session", storage_type="memory", data=empty_session),
            dcc.Download(id="download-export"),
            _header(),
            dbc.Container(
                [
                    html.Div(id="status-slot"),
                    _config_card(),
                    _legend(),
                    _overall_card(),
                    dbc.Row([_widget_card(name, len(widget_names)) for name in widget_names]),
                    _remarks_card(widget_names),
                    _comments_card(),
                    html.Div(id="summary-slot", className="mb-3"),
                    _snapshot_card(),
                ],
                fluid=True,
            ),
        ]
    )


def _count_value_for(session: DashboardSession, component_id: dict[str, str]) -> str:
    group = component_id.get("group")
    field_name = component_id.get("field", "")
    if group == OVERALL_SLOT:
        return _count_text(getattr(session.state.test_cases, TestCaseData.resolve_attr(field_name)))
    widget = session.state.widgets.get(group)
    if widget is None:
        return ""
    return _count_text(getattr(widget, WidgetData.resolve_attr(field_name)))




def _echo_needed(raw: Any, value: int) -> bool:
    """True when the box text differs from the count it was coerced to."""
    text = "" if raw is None else str(raw).strip()
    return bool(text) and text != str(value)


@dataclass
class EditOutcome:
    """What an edit writes back to the form controls.

    ``refresh`` rewrites every control from the session (reset, load);
    ``echo`` names the one count input that shows its coerced value.
    """

    refresh: bool = False
    echo: Optional[dict[str, str]] = None
    status: Any = no_update


def apply_dashboard_edit(
    session: DashboardSession,
    trigger: Any,
    value: Any,
    store: DashboardStore,
    dashboard_id: Optional[str] = None,
) -> EditOutcome:
    if trigger == "env-select":
        set_config(session, "environment", value)
        return EditOutcome()
    if trigger == "site-select":
        set_config(session, "site", value)
        return EditOutcome()
    if trigger == "reset-btn":
        reset(session)
        return EditOutcome(
            refresh=True,
            status=_status_alert("Dashboard Reset", "All data has been cleared successfully.", "info"),
        )
    if trigger == "load-btn":
        key = str(dashboard_id or "").strip()
        if not key:
            raise PreventUpdate
        loaded = store.load(key)
        if loaded is None:
            return EditOutcome(
                status=_status_alert("Dashboard not found", f"No saved dashboard with id '{key}'.", "warning")
            )
        replace_state(session, loaded)
        log_event("ui.load", dashboard_id=key)
        return EditOutcome(refresh=True, status=_status_alert("Dashboard Loaded", f"Loaded '{key}'.", "success"))
    if isinstance(trigger, dict) and trigger.get("type") == "count-input":
        if trigger.get("group") == OVERALL_SLOT:
            parsed = set_test_case(session, trigger["field"], value)
        else:
            parsed = set_widget_field(session, trigger["group"], trigger["field"], value)
        return EditOutcome(echo=dict(trigger) if _echo_needed(value, parsed) else None)
    if isinstance(trigger, dict) and trigger.get("type") == "remark-input":
        set_remark(session, trigger["slot"], value)
        return EditOutcome()
    raise PreventUpdate


def form_outputs(
    session: DashboardSession,
    outcome: EditOutcome,
    count_ids: list[dict[str, str]],
    remark_ids: list[dict[str, str]],
) -> tuple[Any, Any, list[Any], list[Any]]:
    """Values for the environment, site, count and remark controls."""
    if outcome.refresh:
        return (
            session.state.config.environment,
            session.state.config.site,
            [_count_value_for(session, cid) for cid in count_ids],
            [session.state.remarks.get(rid.get("slot"), "") for rid in remark_ids],
        )
    counts = [
        _count_value_for(session, cid) if outcome.echo is not None and cid == outcome.echo else no_update
        for cid in count_ids
    ]
    return no_update, no_update, counts, [no_update] * len(remark_ids)


@dataclass
class CommentOutcome:
    changed: bool = False
    clear_form: bool = False
    status: Any = no_update


def values_by_comment_id(items: list[dict[str, Any]]) -> dict[str, Any]:
    return {item["id"]["id"]: item.get("value") for item in items}


def apply_comment_action(
    session: DashboardSession,
    trigger: Any,
    *,
    title: Optional[str] = None,
    content: Optional[str] = None,
    format_flags: Optional[list[str]] = None,
    size_class: Optional[str] = None,
    edit_titles: Optional[dict[str, Any]] = None,
    edit_contents: Optional[dict[str, Any]] = None,
) -> CommentOutcome:
    if trigger == "comment-add-btn":
        flags = set(format_flags or [])
        comment = add_comment(
            session.comments,
            content,
            title=title,
            formatting=CommentFormatting(
                bold="bold" in flags,
                italic="italic" in flags,
                size_class=size_class or "text-base",
            ),
        )
        if comment is None:
            return CommentOutcome(
                status=_status_alert("Comment not added", "Comment content cannot be empty.", "warning")
            )
        return CommentOutcome(
            changed=True,
            clear_form=True,
            status=_status_alert("Comment Added", "Your analysis comment has been saved successfully.", "success"),
        )

    if not isinstance(trigger, dict):
        raise PreventUpdate
    comment_id = trigger.get("id")
    if trigger.get("type") == "comment-delete-btn":
        if not delete_comment(session.comments, comment_id):
            raise PreventUpdate
        return CommentOutcome(
            changed=True,
            status=_status_alert("Comment Deleted", "The comment has been removed successfully.", "info"),
        )
    if trigger.get("type") == "comment-update-btn":
        titles = edit_titles or {}
        contents = edit_contents or {}
        if not update_comment(session.comments, comment_id, titles.get(comment_id), contents.get(comment_id)):
            return CommentOutcome(
                status=_status_alert("Comment not updated", "Title and content are both required.", "warning")
            )
        return CommentOutcome(
            changed=True,
            status=_status_alert("Comment Updated", "Your changes have been saved successfully.", "success"),
        )
    raise PreventUpdate


def run_export(orchestrator: ExportOrchestrator, session: DashboardSession) -> tuple[Any, Any]:
    """Download payload and status alert for one export click."""
    layout = ExportLayout.snapshot(session.state, session.comments)
    try:
        result = orchestrator.export(layout, key=session.session_id)
    except ExportError as exc:
        return no_update, _status_alert("Export Failed", str(exc), "danger")
    if result is None:
        raise PreventUpdate
    title, message = result.notification
    kind = "warning" if result.fallback else "success"
    return dcc.send_bytes(result.data, result.filename), _status_alert(title, message, kind)


def create_app(
    settings: Optional[AppSettings] = None,
    *,
    store: Optional[DashboardStore] = None,
    rasterizer: Optional[Rasterizer] = None,
) -> Dash:
    settings = settings or AppSettings()
    store = store if store is not None else MemoryDashboardStore(settings.widget_names)
    orchestrator = ExportOrchestrator(
        rasterizer or MatplotlibRasterizer(),
        settle_delay=settings.export_settle_delay,
        fallback_settle_delay=settings.fallback_settle_delay,
    )
    app = Dash(
        __name__,
        external_stylesheets=[dbc.themes.LUX],
        suppress_callback_exceptions=True,
        title=APP_TITLE,
    )
    app.server.register_blueprint(create_api_blueprint(store, settings.widget_names))

    # Rebuilt per page load so every browser tab gets its own session id.
    def serve_layout() -> html.Div:
        return _root_layout(settings)

    app.layout = serve_layout
    _register_callbacks(app, store, orchestrator, settings.widget_names)
    return app


def _register_callbacks(
    app: Dash,
    store: DashboardStore,
    orchestrator: ExportOrchestrator,
    widget_names: tuple[str, ...],
) -> None:
    @app.callback(
        Output("dashboard-session", "data"),
        Output("env-select", "value"),
        Output("site-select", "value"),
        Output({"type": "count-input", "group": ALL, "field": ALL}, "value"),
        Output({"type": "remark-input", "slot": ALL}, "value"),
        Output("status-slot", "children", allow_duplicate=True),
        Input("env-select", "value"),
        Input("site-select", "value"),
        Input({"type": "count-input", "group": ALL, "field": ALL}, "value"),
        Input({"type": "remark-input", "slot": ALL}, "value"),
        Input("reset-btn", "n_clicks"),
        Input("load-btn", "n_clicks"),
        State("dashboard-session", "data"),
        State("dashboard-id", "value"),
        prevent_initial_call=True,
    )
    def _edit_dashboard(
        _env_value,
        _site_value,
        _count_values,
        _remark_values,
        _reset_clicks,
        _load_clicks,
        session_data,
        dashboard_id,
    ):
        trigger = ctx.triggered_id
        if trigger is None:
            raise PreventUpdate
        session = session_from_dict(session_data, widget_names)
        count_ids = [item["id"] for item in ctx.outputs_list[3]]
        remark_ids = [item["id"] for item in ctx.outputs_list[4]]
        try:
            outcome = apply_dashboard_edit(session, trigger, ctx.triggered[0].get("value"), store, dashboard_id)
        except PreventUpdate:
            raise
        except Exception as exc:
            log_exception("ui.edit_dashboard failed")
            outcome = EditOutcome(status=_status_alert("Update failed", f"{type(exc).__name__}: {exc}", "danger"))
        return (session_to_dict(session), *form_outputs(session, outcome, count_ids, remark_ids), outcome.status)

    @app.callback(
        Output("overall-chart", "figure"),
        Output({"type": "widget-chart", "widget": ALL}, "figure"),
        Output("validation-slot", "children"),
        Output("summary-slot", "children"),
        Output("comments-slot", "children"),
        Input("dashboard-session", "data"),
    )
    def _render_dashboard(session_data):
        session = session_from_dict(session_data, widget_names)
        overall = build_donut_figure(derive_chart_data(session.state.test_cases), height=340)
        widget_figures = []
        for item in ctx.outputs_list[1]:
            name = item["id"]["widget"]
            widget_figures.append(build_donut_figure(derive_chart_data(session.state.widgets.get(name)), height=240))
        validation = [
            dbc.Alert(message, color="danger", className="py-2 mb-2") for message in session.validation_errors
        ]
        return overall, widget_figures, validation, _summary_tiles(session), _comment_cards(session)

    @app.callback(
        Output("status-slot", "children", allow_duplicate=True),
        Input("save-btn", "n_clicks"),
        State("dashboard-session", "data"),
        State("dashboard-id", "value"),
        prevent_initial_call=True,
    )
    def _save_dashboard(n_clicks, session_data, dashboard_id):
        if not n_clicks:
            raise PreventUpdate
        key = str(dashboard_id or "").strip()
        if not key:
            return _status_alert("Dashboard id required", "Enter an id before saving.", "warning")
        session = session_from_dict(session_data, widget_names)
        try:
            store.save(key, session.state)
        except DashboardValidationError as exc:
            return _status_alert("Invalid dashboard data", "; ".join(exc.errors), "danger")
        except Exception as exc:
            log_exception("ui.save_dashboard failed")
            return _status_alert("Save failed", f"{type(exc).__name__}: {exc}", "danger")
        return _status_alert("Dashboard Saved", f"Saved as '{key}'.", "success")

    @app.callback(
        Output("dashboard-session", "data", allow_duplicate=True),
        Output("comment-title", "value"),
        Output("comment-content", "value"),
        Output("status-slot", "children", allow_duplicate=True),
        Input("comment-add-btn", "n_clicks"),
        Input({"type": "comment-update-btn", "id": ALL}, "n_clicks"),
        Input({"type": "comment-delete-btn", "id": ALL}, "n_clicks"),
        State("comment-title", "value"),
        State("comment-content", "value"),
        State("comment-format", "value"),
        State("comment-size", "value"),
        State({"type": "comment-edit-title", "id": ALL}, "value"),
        State({"type": "comment-edit-content", "id": ALL}, "value"),
        State("dashboard-session", "data"),
        prevent_initial_call=True,
    )
    def _comment_actions(
        _add_clicks,
        _update_clicks,
        _delete_clicks,
        title,
        content,
        format_flags,
        size_class,
        _edit_titles,
        _edit_contents,
        session_data,
    ):
        trigger = ctx.triggered_id
        if trigger is None or not ctx.triggered[0].get("value"):
            raise PreventUpdate
        session = session_from_dict(session_data, widget_names)
        outcome = apply_comment_action(
            session,
            trigger,
            title=title,
            content=content,
            format_flags=format_flags,
            size_class=size_class,
            edit_titles=values_by_comment_id(ctx.states_list[4]),
            edit_contents=values_by_comment_id(ctx.states_list[5]),
        )
        cleared = "" if outcome.clear_form else no_update
        session_out = session_to_dict(session) if outcome.changed else no_update
        return session_out, cleared, cleared, outcome.status

    @app.callback(
        Output("download-export", "data"),
        Output("status-slot", "children", allow_duplicate=True),
        Input("export-btn", "n_clicks"),
        State("dashboard-session", "data"),
        running=[(Output("export-btn", "disabled"), True, False)],
        prevent_initial_call=True,
    )
    def _export_dashboard(n_clicks, session_data):
        if not n_clicks:
            raise PreventUpdate
        return run_export(orchestrator, session_from_dict(session_data, widget_names))


def main(settings: Optional[AppSettings] = None) -> None:
    settings = settings or AppSettings()
    app = create_app(settings)
    log_event("app.start", host=settings.host, port=settings.port, widgets=settings.widget_variant)
    app.run(host=settings.host, port=settings.port, debug=settings.debug, use_reloader=settings.use_reloader)
