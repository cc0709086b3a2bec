"""Structured Logging: one JSON object per record, carrying order and account context.

Invariants:
    - Every record has ts, level, logger, msg
    - Context passed through `extra=` (account_id, order_id, stage, error_code,
      path, mode) is emitted only when set
    - setup_logging is idempotent: a second call replaces the handler it installed

Design Decisions:
    - "text" format keeps the context visible as trailing key=value pairs
    - Driver and gateway loggers pinned to WARNING so SQL echo and HTTP
      retries never flood the order log
"""

import json
import logging
from datetime import datetime, timezone

CONTEXT_FIELDS = ("account_id", "order_id", "stage", "mode", "error_code", "path")
QUIET_LOGGERS = ("sqlalchemy.engine", "stripe", "urllib3")

_HANDLER_NAME = "runx"


def _context_of(record: logging.LogRecord) -> dict:
    return {
        key: getattr(record, key)
        for key in CONTEXT_FIELDS
        if getattr(record, key, None) is not None
    }


class JSONFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            **_context_of(record),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class ContextTextFormatter(logging.Formatter):
    """Human-readable lines for local runs."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)-7s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _context_of(record)
        if context:
            line += " " + " ".join(f"{k}={v}" for k, v in context.items())
        return line


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(JSONFormatter() if fmt == "json" else ContextTextFormatter())
    root.addHandler(handler)
    root.setLevel(level.upper())

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
