"""
Structured logging configuration.

Two output styles, chosen by LOG_FORMAT (defaults: readable when DEBUG or
TESTING, JSON otherwise):

  readable   12:04:31 INFO     portfolio.services.portfolio_store: Program PROG-0007 updated [program=PROG-0007]
  json       {"timestamp": ..., "level": "INFO", "event_type": "program_updated", ...}

Portfolio code attaches context through ``extra=``; the keys below are the
ones either formatter knows how to render.
"""

import json
import logging
import sys
from datetime import datetime, timezone

SERVICE_NAME = "clinical-rd-portfolio"

# Request fields (set by the timing middleware)
_REQUEST_FIELDS = ("method", "path", "status", "duration_ms", "remote_addr", "request_id")

# Portfolio fields → short tag used by the readable formatter
_CONTEXT_TAGS = {
    "program_id": "program",
    "role": "role",
    "storage_key": "key",
    "event_type": "event",
}

_HANDLER_MARK = "_portfolio_handler"


def _context(record: logging.LogRecord, names) -> dict:
    values = {}
    for name in names:
        val = getattr(record, name, None)
        if val is not None:
            values[name] = val
    return values


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "service": SERVICE_NAME,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        entry.update(_context(record, _REQUEST_FIELDS))
        entry.update(_context(record, _CONTEXT_TAGS))
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class ReadableFormatter(logging.Formatter):
    """Colored single-line output for local development."""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, *, color: bool = True):
        super().__init__()
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        level = f"{record.levelname:<8}"
        if self.color:
            level = f"{self.LEVEL_COLORS.get(record.levelname, '')}{level}{self.RESET}"

        line = f"{stamp} {level} {record.name}: {record.getMessage()}"

        tags = [f"{_CONTEXT_TAGS[k]}={v}" for k, v in _context(record, _CONTEXT_TAGS).items()
                if k != "event_type"]
        duration = getattr(record, "duration_ms", None)
        if duration is not None:
            tags.append(f"{duration:.0f}ms")
        if tags:
            line += f" [{' '.join(tags)}]"

        if record.exc_info and record.exc_info[0] is not None:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(app):
    """Install the portfolio log handler on the root logger.

    Replaces a handler installed by an earlier ``create_app`` call so
    repeated app creation (tests, CLI) does not duplicate output. Other
    handlers on the root logger are left alone.
    """
    debug_like = app.config.get("DEBUG", False) or app.config.get("TESTING", False)
    fmt = (app.config.get("LOG_FORMAT") or ("readable" if debug_like else "json")).lower()
    level_name = (app.config.get("LOG_LEVEL") or ("DEBUG" if debug_like else "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    if fmt == "json":
        formatter = JSONFormatter()
    else:
        formatter = ReadableFormatter(color=sys.stderr.isatty())

    root = logging.getLogger()
    for existing in list(root.handlers):
        if getattr(existing, _HANDLER_MARK, False):
            root.removeHandler(existing)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    handler.setLevel(level)
    setattr(handler, _HANDLER_MARK, True)
    root.addHandler(handler)
    root.setLevel(level)

    for noisy in ("werkzeug", "sqlalchemy.engine"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
    app.logger.setLevel(level)

    if not app.config.get("TESTING", False):
        app.logger.info("Logging configured: level=%s format=%s", level_name, fmt)
