import os
import sys
import traceback

ROOT_DIR = os.path.dirname(__file__)
SRC_DIR = os.path.join(ROOT_DIR, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from test_case_dashboard.app import settings_from_args
from test_case_dashboard.ui.dash_app import main


if __name__ == "__main__":
    settings = settings_from_args()
    settings.debug = True
    try:
        print(f"Starting Dash app on http://{settings.host}:{settings.port} ...")
        main(settings)
    except Exception as exc:
        print(f"Dash app failed to start: {type(exc).__name__}: {exc}")
        print("If dependencies are missing, install: pip install -e .")
        traceback.print_exc()
        raise
