from __future__ import annotations

from dataclasses import dataclass

from test_case_dashboard.core.schema import WIDGET_VARIANTS


@dataclass
class AppSettings:
    """Runtime settings for the web app, filled from the command line."""

    host: str = "127.0.0.1"
    port: int = 8050
    debug: bool = False
    use_reloader: bool = False
    widget_variant: str = "extended"
    export_settle_delay: float = 0.5
    fallback_settle_delay: float = 0.3

    def __post_init__(self) -> None:
        if self.widget_variant not in WIDGET_VARIANTS:
            raise ValueError(
                f"Unknown widget variant: {self.widget_variant!r} "
                f"(expected one of {', '.join(WIDGET_VARIANTS)})"
            )
        if self.export_settle_delay < 0 or self.fallback_settle_delay < 0:
            raise ValueError("Export settle delays cannot be negative.")

    @property
    def widget_names(self) -> tuple[str, ...]:
        return WIDGET_VARIANTS[self.widget_variant]
