"""Shared pytest fixtures for the dashboard tests."""

from __future__ import annotations

import os
import tempfile

# Keep diagnostic logs out of the home directory while tests run.
os.environ.setdefault(
    "TEST_CASE_DASHBOARD_LOG",
    os.path.join(tempfile.gettempdir(), "test_case_dashboard_pytest.log"),
)

import pytest  # noqa: E402

from test_case_dashboard.core.schema import DashboardState  # noqa: E402


@pytest.fixture
def valid_payload() -> dict:
    return {
        "config": {"environment": "PROD", "site": "LON1A"},
        "testCases": {
            "totalTestCases": 100,
            "passedTestCases": 60,
            "failedTestCases": 30,
            "skippedTestCases": 5,
        },
        "widgets": {
            "telemetry": {"total": 10, "passed": 8, "failed": 1, "skipped": 1},
            "inbound": {},
            "outbound": {"passed": 3},
        },
        "remarks": {"overall": "Release candidate looks healthy.", "telemetry": ""},
    }


@pytest.fixture
def empty_state() -> DashboardState:
    return DashboardState.empty()
