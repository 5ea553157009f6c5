"""Tests for the dashboard data model and its validation rules."""

from __future__ import annotations

import pytest

from test_case_dashboard.core.schema import (
    SUM_EXCEEDS_TOTAL_MESSAGE,
    DashboardState,
    DashboardValidationError,
    TestCaseData,
    WidgetData,
    check_test_case_totals,
    parse_dashboard_state,
    validate_dashboard_state,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("total", "passed", "failed", "skipped", "invalid"),
    [
        (100, 60, 30, 5, False),
        (10, 6, 6, 0, True),
        (10, 5, 5, 0, False),
        (10, 0, 0, 11, True),
        (0, 3, 4, 5, False),
        (1, 0, 0, 0, False),
        (0, 0, 0, 0, False),
    ],
)
def test_sum_rule_fails_only_when_total_positive_and_exceeded(total, passed, failed, skipped, invalid) -> None:
    """The overall sum rule fails iff total > 0 and the parts exceed it."""

    counts = TestCaseData(total=total, passed=passed, failed=failed, skipped=skipped)
    errors = check_test_case_totals(counts)
    assert bool(errors) is invalid
    if invalid:
        assert errors == [SUM_EXCEEDS_TOTAL_MESSAGE]


def test_sum_rule_ignores_absent_total() -> None:
    """Without a total nothing is checked, however large the parts are."""

    assert check_test_case_totals(TestCaseData(passed=500, failed=20)) == []


def test_sum_rule_counts_absent_parts_as_zero() -> None:
    assert check_test_case_totals(TestCaseData(total=5, passed=6)) == [SUM_EXCEEDS_TOTAL_MESSAGE]
    assert check_test_case_totals(TestCaseData(total=5, skipped=5)) == []


def test_widgets_carry_no_sum_rule(valid_payload) -> None:
    """Widget parts may exceed the widget total without any error."""

    valid_payload["widgets"]["telemetry"] = {"total": 1, "passed": 50, "failed": 50, "skipped": 50}
    state = parse_dashboard_state(valid_payload)
    assert state.widgets["telemetry"].passed == 50
    assert validate_dashboard_state(state) == []


def test_parse_returns_typed_state(valid_payload) -> None:
    state = parse_dashboard_state(valid_payload)
    assert state.config.environment == "PROD"
    assert state.test_cases.total == 100
    assert state.widgets["outbound"] == WidgetData(passed=3)
    assert state.widgets["inbound"] == WidgetData()
    assert state.remarks == {"overall": "Release candidate looks healthy.", "telemetry": ""}


def test_parse_rejects_sum_violation_with_single_message(valid_payload) -> None:
    valid_payload["testCases"] = {"totalTestCases": 10, "passedTestCases": 6, "failedTestCases": 6}
    with pytest.raises(DashboardValidationError) as excinfo:
        parse_dashboard_state(valid_payload)
    assert excinfo.value.errors == [SUM_EXCEEDS_TOTAL_MESSAGE]


@pytest.mark.parametrize(
    ("section", "key", "value"),
    [
        ("config", "environment", "STAGING"),
        ("config", "site", 5),
        ("testCases", "totalTestCases", -1),
        ("testCases", "passedTestCases", "7"),
        ("testCases", "failedTestCases", True),
        ("testCases", "skippedTestCases", 1.5),
        ("testCases", "skippedTestCases", None),
        ("remarks", "overall", 42),
    ],
)
def test_parse_rejects_bad_leaf_values(valid_payload, section, key, value) -> None:
    valid_payload[section][key] = value
    with pytest.raises(DashboardValidationError):
        parse_dashboard_state(valid_payload)


def test_parse_rejects_negative_widget_counts(valid_payload) -> None:
    valid_payload["widgets"]["inbound"] = {"failed": -3}
    with pytest.raises(DashboardValidationError) as excinfo:
        parse_dashboard_state(valid_payload)
    assert "widgets.inbound.failed must be a non-negative integer" in excinfo.value.errors


def test_parse_requires_every_widget_key(valid_payload) -> None:
    del valid_payload["widgets"]["outbound"]
    with pytest.raises(DashboardValidationError) as excinfo:
        parse_dashboard_state(valid_payload)
    assert "widgets.outbound is required" in excinfo.value.errors


def test_parse_basic_variant_only_needs_telemetry() -> None:
    state = parse_dashboard_state(
        {"config": {}, "testCases": {}, "widgets": {"telemetry": {}}, "remarks": {}},
        widget_names=("telemetry",),
    )
    assert state.widget_names == ("telemetry",)


@pytest.mark.parametrize("missing", ["config", "testCases", "widgets", "remarks"])
def test_parse_requires_top_level_sections(valid_payload, missing) -> None:
    del valid_payload[missing]
    with pytest.raises(DashboardValidationError):
        parse_dashboard_state(valid_payload)


def test_parse_rejects_non_object_payload() -> None:
    with pytest.raises(DashboardValidationError):
        parse_dashboard_state(["not", "a", "dashboard"])


def test_parse_drops_unknown_keys(valid_payload) -> None:
    valid_payload["extra"] = True
    valid_payload["config"]["owner"] = "qa"
    valid_payload["widgets"]["legacy"] = {"total": 1}
    valid_payload["remarks"]["unknown"] = "ignored"
    state = parse_dashboard_state(valid_payload)
    assert "legacy" not in state.widgets
    assert "unknown" not in state.remarks
    assert "owner" not in state.to_dict()["config"]


def test_parse_accepts_integral_floats(valid_payload) -> None:
    valid_payload["testCases"]["totalTestCases"] = 100.0
    state = parse_dashboard_state(valid_payload)
    assert state.test_cases.total == 100
    assert isinstance(state.test_cases.total, int)


def test_zero_total_is_distinct_from_absent_total() -> None:
    state = DashboardState.empty()
    state.test_cases.total = 0
    assert state.to_dict()["testCases"] == {"totalTestCases": 0}
    assert DashboardState.empty().to_dict()["testCases"] == {}


def test_to_dict_always_lists_widget_keys(empty_state) -> None:
    assert empty_state.to_dict() == {
        "config": {},
        "testCases": {},
        "widgets": {"telemetry": {}, "inbound": {}, "outbound": {}},
        "remarks": {},
    }


def test_to_dict_parse_round_trip(valid_payload) -> None:
    state = parse_dashboard_state(valid_payload)
    assert parse_dashboard_state(state.to_dict()) == state


def test_from_dict_is_lenient_for_session_data() -> None:
    """Session data may hold negative coerced numbers; from_dict keeps them."""

    state = DashboardState.from_dict(
        {"testCases": {"totalTestCases": -4, "passedTestCases": "x"}, "widgets": {"telemetry": {"total": 2}}}
    )
    assert state.test_cases.total == -4
    assert state.test_cases.passed is None
    assert state.widgets["telemetry"].total == 2
    assert state.widgets["inbound"] == WidgetData()


def test_validate_reports_unknown_widgets_and_slots(empty_state) -> None:
    empty_state.widgets["mystery"] = WidgetData()
    empty_state.remarks["nowhere"] = "text"
    errors = validate_dashboard_state(empty_state)
    assert "widgets.mystery is not a known widget" in errors
    assert "remarks.nowhere is not a known remark slot" in errors


def test_resolve_attr_accepts_json_and_attribute_names() -> None:
    assert TestCaseData.resolve_attr("passedTestCases") == "passed"
    assert TestCaseData.resolve_attr("passed") == "passed"
    assert WidgetData.resolve_attr("skipped") == "skipped"
    with pytest.raises(KeyError):
        WidgetData.resolve_attr("passedTestCases")
