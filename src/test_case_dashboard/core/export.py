from __future__ import annotations

import copy
import re
import struct
import threading
import time
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Callable, Optional, Protocol

from test_case_dashboard.core.comments import Comment
from test_case_dashboard.core.schema import DashboardConfig, DashboardState
from test_case_dashboard.utils.log import log_event, log_exception

MIN_EXPORT_WIDTH = 800
EXPORT_LAYOUT_WIDTH = 1200
PRIMARY_SETTLE_DELAY = 0.5
FALLBACK_SETTLE_DELAY = 0.3
DEFAULT_EXPORT_KEY = "default"

EXPORT_FAILED_MESSAGE = (
    "Unable to export dashboard. Please check your browser settings and try again."
)


class ExportError(RuntimeError):
    pass


@dataclass(frozen=True)
class RasterOptions:
    scale: float = 2.0
    background: str = "#ffffff"
    allow_cross_origin: bool = True
    quality: float = 1.0
    width: Optional[int] = None
    height: Optional[int] = None


PRIMARY_OPTIONS = RasterOptions(scale=2.0, allow_cross_origin=True, quality=1.0)
FALLBACK_OPTIONS = RasterOptions(scale=1.0, allow_cross_origin=False, quality=0.8)


@dataclass
class RasterImage:
    width: int
    height: int
    data: bytes
    mime_type: str = "image/png"


@dataclass
class ExportLayout:
    """Off-screen, print-style rendering of one dashboard.

    Hidden unless an export is running; rasterizers refuse hidden layouts.
    """

    state: DashboardState
    comments: list[Comment] = field(default_factory=list)
    visible: bool = False
    natural_width: int = EXPORT_LAYOUT_WIDTH
    natural_height: Optional[int] = None

    @classmethod
    def snapshot(cls, state: DashboardState, comments: Optional[list[Comment]] = None) -> "ExportLayout":
        return cls(state=copy.deepcopy(state), comments=copy.deepcopy(list(comments or [])))

    def show(self) -> None:
        self.visible = True

    def hide(self) -> None:
        self.visible = False


class Rasterizer(Protocol):
    def rasterize(self, layout: ExportLayout, options: RasterOptions) -> RasterImage: ...


@dataclass
class ExportResult:
    filename: str
    data: bytes
    width: int
    height: int
    fallback: bool = False

    @property
    def notification(self) -> tuple[str, str]:
        if self.fallback:
            return (
                "Export Successful (Fallback)",
                "Dashboard exported with basic quality settings.",
            )
        return ("Export Successful", f"Dashboard exported as {self.filename}")


def png_size(data: bytes) -> tuple[int, int]:
    """Read ``(width, height)`` from a PNG IHDR chunk."""
    if len(data) < 24 or data[:8] != b"\x89PNG\r\n\x1a\n" or data[12:16] != b"IHDR":
        raise ExportError("Rasterizer did not return a PNG image.")
    width, height = struct.unpack(">II", data[16:24])
    return int(width), int(height)


def _filename_part(value: Optional[str], fallback: str) -> str:
    text = re.sub(r"\s+", "-", value) if value else ""
    return text or fallback


def export_filename(config: DashboardConfig, today: Optional[date] = None) -> str:
    if today is None:
        today = datetime.now(timezone.utc).date()
    environment = _filename_part(config.environment, "NoEnv")
    site = _filename_part(config.site, "NoSite")
    return f"test-case-dashboard-{environment}-{site}-{today.isoformat()}.png"


class ExportOrchestrator:
    """Rasterize an :class:`ExportLayout` with one degraded retry.

    A second call for the same ``key`` while that export is running returns
    ``None`` without doing anything; other keys export independently. When both passes fail :class:`ExportError` is raised.
    """

    def __init__(
        self,
        rasterizer: Rasterizer,
        *,
        settle_delay: float = PRIMARY_SETTLE_DELAY,
        fallback_settle_delay: float = FALLBACK_SETTLE_DELAY,
        sleep: Callable[[float], None] = time.sleep,
        today: Optional[Callable[[], date]] = None,
    ):
        self.rasterizer = rasterizer
        self.settle_delay = float(settle_delay)
        self.fallback_settle_delay = float(fallback_settle_delay)
        self._sleep = sleep
        self._today = today
        self._guard = threading.Lock()
        self._in_flight: set[str] = set()

    @property
    def busy(self) -> bool:
        with self._guard:
            return bool(self._in_flight)

    def is_busy(self, key: str = DEFAULT_EXPORT_KEY) -> bool:
        with self._guard:
            return key in self._in_flight

    def _claim(self, key: str) -> bool:
        with self._guard:
            if key in self._in_flight:
                return False
            self._in_flight.add(key)
            return True

    def _release(self, key: str) -> None:
        with self._guard:
            self._in_flight.discard(key)

    def _filename(self, layout: ExportLayout) -> str:
        today = self._today() if self._today is not None else None
        return export_filename(layout.state.config, today)

    def _options(self, base: RasterOptions, layout: ExportLayout) -> RasterOptions:
        return RasterOptions(
            scale=base.scale,
            background=base.background,
            allow_cross_origin=base.allow_cross_origin,
            quality=base.quality,
            width=layout.natural_width,
            height=layout.natural_height,
        )

    def _render(self, layout: ExportLayout, options: RasterOptions, delay: float) -> RasterImage:
        layout.show()
        try:
            self._sleep(delay)
            return self.rasterizer.rasterize(layout, options)
        finally:
            layout.hide()

    def _primary(self, layout: ExportLayout) -> ExportResult:
        image = self._render(layout, self._options(PRIMARY_OPTIONS, layout), self.settle_delay)
        if image.width < MIN_EXPORT_WIDTH:
            raise ExportError("Export resolution too low for professional quality")
        return ExportResult(
            filename=self._filename(layout),
            data=image.data,
            width=image.width,
            height=image.height,
        )

    def _fallback(self, layout: ExportLayout) -> ExportResult:
        image = self._render(layout, self._options(FALLBACK_OPTIONS, layout), self.fallback_settle_delay)
        return ExportResult(
            filename=self._filename(layout),
            data=image.data,
            width=image.width,
            height=image.height,
            fallback=True,
        )

    def export(self, layout: ExportLayout, key: str = DEFAULT_EXPORT_KEY) -> Optional[ExportResult]:
        if not self._claim(key):
            log_event("export.skip", "export already in progress", key=key)
            return None
        try:
            try:
                result = self._primary(layout)
            except Exception:
                log_exception("export primary pass failed")
                layout.hide()
                try:
                    result = self._fallback(layout)
                except Exception as exc:
                    log_exception("export fallback pass failed")
                    raise ExportError(EXPORT_FAILED_MESSAGE) from exc
            log_event(
                "export.done",
                filename=result.filename,
                width=result.width,
                height=result.height,
                fallback=result.fallback,
            )
            return result
        finally:
            layout.hide()
            self._release(key)
