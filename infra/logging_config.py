# infra/logging_config.py
from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

from infra.operational_support import TraceIdLogFilter, install_global_exception_hooks
from infra.path import user_data_dir

_DEFAULT_LEVEL = "INFO"


def resolve_log_level() -> int:
    raw = (os.getenv("PLAN_LOG_LEVEL") or _DEFAULT_LEVEL).strip().upper()
    level = logging.getLevelName(raw)
    # getLevelName returns a string for unknown names
    return level if isinstance(level, int) else logging.INFO


def setup_logging(log_dir: Path | None = None) -> Path:
    """
    Configure application logging.
    Logs go to the per-user data directory unless a directory is given.
    Returns the path of the active log file.
    """
    log_dir = log_dir or (user_data_dir() / "logs")
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / "plan.log"

    root = logging.getLogger()
    root.setLevel(resolve_log_level())
    root.handlers.clear()

    trace_filter = TraceIdLogFilter()

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=1_000_000,  # 1 MB per file
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.addFilter(trace_filter)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s [%(levelname)s] trace=%(trace_id)s %(name)s - %(message)s")
    )
    root.addHandler(file_handler)

    console = logging.StreamHandler()
    console.addFilter(trace_filter)
    console.setFormatter(logging.Formatter("%(levelname)s [trace=%(trace_id)s]: %(message)s"))
    root.addHandler(console)

    root.info("Logging initialized. Log file at %s", log_file)
    install_global_exception_hooks()
    return log_file


__all__ = ["resolve_log_level", "setup_logging"]
