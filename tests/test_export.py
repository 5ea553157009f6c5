"""Tests for the export orchestrator using a scripted rasterizer."""

from __future__ import annotations

import struct
import threading
import zlib
from datetime import date

import pytest

from test_case_dashboard.core.export import (
    EXPORT_FAILED_MESSAGE,
    FALLBACK_OPTIONS,
    PRIMARY_OPTIONS,
    ExportError,
    ExportLayout,
    ExportOrchestrator,
    RasterImage,
    export_filename,
    png_size,
)
from test_case_dashboard.core.schema import DashboardConfig, DashboardState

pytestmark = pytest.mark.unit

TODAY = date(2024, 3, 9)


def _png_header(width: int, height: int) -> bytes:
    ihdr = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    chunk = struct.pack(">I", len(ihdr)) + b"IHDR" + ihdr + struct.pack(">I", zlib.crc32(b"IHDR" + ihdr))
    return b"\x89PNG\r\n\x1a\n" + chunk


class ScriptedRasterizer:
    """Returns or raises the next scripted outcome and records each call."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def rasterize(self, layout, options):
        self.calls.append((options, layout.visible))
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        width = int(outcome * options.scale)
        return RasterImage(width=width, height=500, data=_png_header(width, 500))


def _orchestrator(rasterizer, sleeps=None):
    recorded = sleeps if sleeps is not None else []
    return ExportOrchestrator(rasterizer, sleep=recorded.append, today=lambda: TODAY)


def _layout(environment=None, site=None) -> ExportLayout:
    state = DashboardState.empty()
    state.config.environment = environment
    state.config.site = site
    return ExportLayout.snapshot(state)


def test_filename_uses_placeholders_and_date() -> None:
    assert export_filename(DashboardConfig(), TODAY) == "test-case-dashboard-NoEnv-NoSite-2024-03-09.png"
    assert (
        export_filename(DashboardConfig(environment="PROD", site="LON1A"), TODAY)
        == "test-case-dashboard-PROD-LON1A-2024-03-09.png"
    )


def test_filename_replaces_whitespace() -> None:
    config = DashboardConfig(environment="Sandbox  A", site="Site\tB")
    assert export_filename(config, TODAY) == "test-case-dashboard-Sandbox-A-Site-B-2024-03-09.png"


def test_primary_pass_succeeds() -> None:
    sleeps: list[float] = []
    rasterizer = ScriptedRasterizer(1200)
    layout = _layout("UAT", "FRA1")
    result = _orchestrator(rasterizer, sleeps).export(layout)

    assert result.fallback is False
    assert result.filename == "test-case-dashboard-UAT-FRA1-2024-03-09.png"
    assert result.width == 2400
    assert result.notification[0] == "Export Successful"
    assert sleeps == [0.5]
    options, visible_during = rasterizer.calls[0]
    assert visible_during is True
    assert options.scale == PRIMARY_OPTIONS.scale
    assert options.allow_cross_origin is True
    assert options.background == "#ffffff"
    assert options.width == layout.natural_width
    assert layout.visible is False


def test_low_resolution_triggers_fallback() -> None:
    sleeps: list[float] = []
    rasterizer = ScriptedRasterizer(300, 300)
    layout = _layout()
    result = _orchestrator(rasterizer, sleeps).export(layout)

    assert result.fallback is True
    assert result.width == 300
    assert result.notification[0] == "Export Successful (Fallback)"
    assert sleeps == [0.5, 0.3]
    fallback_options = rasterizer.calls[1][0]
    assert fallback_options.scale == FALLBACK_OPTIONS.scale
    assert fallback_options.allow_cross_origin is False
    assert fallback_options.quality < 1.0
    assert layout.visible is False


def test_rasterizer_error_triggers_fallback() -> None:
    rasterizer = ScriptedRasterizer(RuntimeError("canvas tainted"), 1200)
    result = _orchestrator(rasterizer).export(_layout())
    assert result.fallback is True
    assert len(rasterizer.calls) == 2


def test_double_failure_raises_and_stops() -> None:
    rasterizer = ScriptedRasterizer(RuntimeError("first"), RuntimeError("second"))
    layout = _layout()
    with pytest.raises(ExportError) as excinfo:
        _orchestrator(rasterizer).export(layout)
    assert str(excinfo.value) == EXPORT_FAILED_MESSAGE
    assert len(rasterizer.calls) == 2
    assert layout.visible is False


def test_export_does_not_block_on_validation_errors() -> None:
    state = DashboardState.empty()
    state.test_cases.total = 10
    state.test_cases.passed = 6
    state.test_cases.failed = 6
    result = _orchestrator(ScriptedRasterizer(1200)).export(ExportLayout.snapshot(state))
    assert result is not None


def test_second_export_while_running_is_noop() -> None:
    entered = threading.Event()
    release = threading.Event()
    results = {}

    class BlockingRasterizer:
        def rasterize(self, layout, options):
            entered.set()
            release.wait(timeout=5)
            return RasterImage(width=2400, height=100, data=_png_header(2400, 100))

    orchestrator = _orchestrator(BlockingRasterizer())
    worker = threading.Thread(target=lambda: results.setdefault("first", orchestrator.export(_layout())))
    worker.start()
    assert entered.wait(timeout=5)

    assert orchestrator.busy is True
    assert orchestrator.export(_layout()) is None

    release.set()
    worker.join(timeout=5)
    assert results["first"] is not None
    assert orchestrator.busy is False


def test_export_guard_is_scoped_per_key() -> None:
    """A running export for one session does not swallow another session's export."""
    entered = threading.Event()
    release = threading.Event()
    results = {}

    class BlockingRasterizer:
        def rasterize(self, layout, options):
            if layout.state.config.environment == "PROD":
                entered.set()
                release.wait(timeout=5)
            return RasterImage(width=2400, height=100, data=_png_header(2400, 100))

    orchestrator = _orchestrator(BlockingRasterizer())
    worker = threading.Thread(
        target=lambda: results.setdefault("a", orchestrator.export(_layout("PROD"), key="session-a"))
    )
    worker.start()
    assert entered.wait(timeout=5)

    assert orchestrator.is_busy("session-a") is True
    assert orchestrator.is_busy("session-b") is False
    assert orchestrator.export(_layout("UAT"), key="session-a") is None
    other = orchestrator.export(_layout("UAT"), key="session-b")
    assert other is not None
    assert other.filename.startswith("test-case-dashboard-UAT-")

    release.set()
    worker.join(timeout=5)
    assert results["a"] is not None
    assert orchestrator.busy is False


def test_snapshot_is_detached_from_session_state() -> None:
    state = DashboardState.empty()
    layout = ExportLayout.snapshot(state)
    state.config.site = "LON1B"
    assert layout.state.config.site is None


def test_png_size_reads_header() -> None:
    assert png_size(_png_header(1234, 567)) == (1234, 567)
    with pytest.raises(ExportError):
        png_size(b"GIF89a" + b"\x00" * 30)
