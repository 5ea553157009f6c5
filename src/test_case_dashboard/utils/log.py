import os
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any

LOG_ENV_VAR = "TEST_CASE_DASHBOARD_LOG"


def _resolve_log_path() -> Path:
    override = os.environ.get(LOG_ENV_VAR, "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / "TestCaseDashboard_error.log"


DEFAULT_LOG_PATH = _resolve_log_path()


def _safe_text(value: Any, max_len: int = 800) -> str:
    try:
        text = str(value)
    except Exception:
        text = repr(value)
    text = text.replace("\r", "\\r").replace("\n", "\\n")
    if len(text) > max_len:
        return text[: max_len - 3] + "..."
    return text


def format_fields(**fields: Any) -> str:
    """Render keyword fields as ``key=value`` pairs in call order."""
    return " ".join(f"{key}={_safe_text(value, max_len=120)}" for key, value in fields.items())


def log_event(
    context: str,
    message: str = "",
    log_path: Path = DEFAULT_LOG_PATH,
    **fields: Any,
) -> None:
    """Append a single-line diagnostic event (plus optional ``key=value`` fields)."""
    text = _safe_text(message)
    extra = format_fields(**fields)
    if extra:
        text = f"{text} {extra}".strip()
    try:
        with open(log_path, "a", encoding="utf-8") as f:
            f.write(f"{datetime.now().isoformat()}  |  {context}  |  {text}\n")
    except Exception:
        pass


def log_exception(context: str, log_path: Path = DEFAULT_LOG_PATH) -> None:
    """Append the current exception traceback to a log file."""
    try:
        with open(log_path, "a", encoding="utf-8") as f:
            f.write("\n\n" + "=" * 80 + "\n")
            f.write(f"{datetime.now().isoformat()}  |  {context}\n")
            traceback.print_exc(file=f)
    except Exception:
        # Never crash the app due to logging failures
        pass
