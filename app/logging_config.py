"""Logging setup: one stdout handler, JSON lines or plain text."""
import json
import logging
import sys
from datetime import datetime, timezone

# `extra=` keys the normalizer and roster loader attach to their records.
CONTEXT_FIELDS = ("record_index", "field", "rows")

QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "charset_normalizer", "multipart")

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONLineFormatter(logging.Formatter):
    def format(self, record):
        entry = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        entry.update(
            {key: getattr(record, key) for key in CONTEXT_FIELDS if hasattr(record, key)}
        )
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", json_output: bool = True):
    """Route the root logger to stdout, replacing any handlers already installed."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONLineFormatter() if json_output else logging.Formatter(TEXT_FORMAT))

    root = logging.getLogger()
    numeric = logging.getLevelName(level.upper())
    root.setLevel(numeric if isinstance(numeric, int) else logging.INFO)
    root.handlers = [handler]

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
