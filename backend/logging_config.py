"""JSON log lines for the workout planner service.

Call sites attach structured fields through ``extra`` with a ``ctx_`` prefix,
e.g. ``extra={"ctx_pool": 12}``. The prefix is dropped in the output, so that
record shows up as ``"context": {"pool": 12}``.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

SERVICE_NAME = "workout-planner"
CONTEXT_PREFIX = "ctx_"

# libraries that log every request at INFO
QUIET_LOGGERS = ("uvicorn.access", "httpx", "openai")


def context_fields(record: logging.LogRecord) -> Dict[str, Any]:
    n = len(CONTEXT_PREFIX)
    return {k[n:]: v for k, v in record.__dict__.items() if k.startswith(CONTEXT_PREFIX)}


class PlannerLogFormatter(logging.Formatter):
    def __init__(self, app_env: str = "dev") -> None:
        super().__init__()
        self.app_env = app_env

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "service": SERVICE_NAME,
            "env": self.app_env,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "where": f"{record.module}:{record.lineno}",
        }
        fields = context_fields(record)
        if fields:
            entry["context"] = fields
        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            entry["error"] = {"type": type(exc).__name__, "detail": str(exc)}
        return json.dumps(entry, default=str)


def _is_planner_handler(handler: logging.Handler) -> bool:
    return getattr(handler, "planner_handler", False)


def setup_logging(level: str = "INFO", app_env: str = "dev") -> logging.Handler:
    """Install the planner's stdout handler on the root logger.

    Calling it again reconfigures the existing handler instead of adding a
    second one. Handlers installed by others (pytest, uvicorn) are left alone.
    """
    root = logging.getLogger()
    handler = next((h for h in root.handlers if _is_planner_handler(h)), None)
    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
        handler.planner_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    handler.setFormatter(PlannerLogFormatter(app_env))
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
