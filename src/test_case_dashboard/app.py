from __future__ import annotations

import argparse
import sys

from test_case_dashboard.config import AppSettings
from test_case_dashboard.core.schema import WIDGET_VARIANTS
from test_case_dashboard.version import APP_TITLE


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=f"{APP_TITLE} web dashboard")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8050)
    parser.add_argument("--widgets", dest="widget_variant", choices=sorted(WIDGET_VARIANTS), default="extended")
    parser.add_argument("--debug", dest="debug", action="store_true", default=False)
    parser.add_argument("--no-debug", dest="debug", action="store_false")
    parser.add_argument("--reloader", dest="use_reloader", action="store_true", default=False)
    parser.add_argument("--no-reloader", dest="use_reloader", action="store_false")
    return parser


def settings_from_args(argv: list[str] | None = None) -> AppSettings:
    ns = build_parser().parse_args(list(sys.argv[1:] if argv is None else argv))
    return AppSettings(
        host=ns.host,
        port=ns.port,
        debug=ns.debug,
        use_reloader=ns.use_reloader,
        widget_variant=ns.widget_variant,
    )


def main(argv: list[str] | None = None) -> int:
    settings = settings_from_args(argv)

    from test_case_dashboard.ui.dash_app import main as dash_main

    dash_main(settings)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
