from __future__ import annotations

from flask import Blueprint, jsonify, request

from test_case_dashboard.core.schema import DashboardValidationError, parse_dashboard_state
from test_case_dashboard.core.storage import DashboardStore
from test_case_dashboard.utils.log import log_event, log_exception


def create_api_blueprint(store: DashboardStore, widget_names: tuple[str, ...]) -> Blueprint:
    """JSON routes for saving and fetching dashboard snapshots."""
    api = Blueprint("dashboard_api", __name__, url_prefix="/api")

    @api.get("/dashboard/<dashboard_id>")
    def get_dashboard(dashboard_id: str):
        try:
            state = store.load(dashboard_id)
            if state is None:
                return jsonify({"error": "Dashboard not found"}), 404
            return jsonify(state.to_dict())
        except Exception:
            log_exception(f"api.get_dashboard id={dashboard_id}")
            return jsonify({"error": "Failed to fetch dashboard data"}), 500

    @api.post("/dashboard/<dashboard_id>")
    def save_dashboard(dashboard_id: str):
        payload = request.get_json(silent=True)
        try:
            state = parse_dashboard_state(payload, widget_names)
            store.save(dashboard_id, state)
        except DashboardValidationError as exc:
            log_event("api.save_dashboard.rejected", "; ".join(exc.errors), dashboard_id=dashboard_id)
            return jsonify({"error": "Invalid dashboard data"}), 400
        except Exception:
            log_exception(f"api.save_dashboard id={dashboard_id}")
            return jsonify({"error": "Failed to save dashboard data"}), 500
        return jsonify({"success": True})

    @api.get("/dashboards")
    def list_dashboards():
        try:
            return jsonify([state.to_dict() for state in store.list_all()])
        except Exception:
            log_exception("api.list_dashboards")
            return jsonify({"error": "Failed to fetch dashboards"}), 500

    return api
