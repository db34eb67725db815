import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict

_CONTEXT_KEYS = ("repo", "pr_number", "run_id", "label")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in _CONTEXT_KEYS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra") and isinstance(record.extra, dict):
            payload.update(record.extra)

        return json.dumps(payload, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable single-line output for local runs (``LOG_FORMAT=text``)."""

    def format(self, record: logging.LogRecord) -> str:
        line = f"{record.levelname} {record.name}: {record.getMessage()}"
        fields = {key: getattr(record, key) for key in _CONTEXT_KEYS if getattr(record, key, None) is not None}
        if hasattr(record, "extra") and isinstance(record.extra, dict):
            fields.update(record.extra)
        if fields:
            line += " " + " ".join(f"{k}={v}" for k, v in fields.items())
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


_LOGGING_CONFIGURED = False


def configure_logging() -> None:
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    root = logging.getLogger()
    root.handlers = []

    # stdout carries workflow commands (::error::), so logs go to stderr.
    handler = logging.StreamHandler(sys.stderr)
    if os.getenv("LOG_FORMAT", "json").strip().lower() == "text":
        handler.setFormatter(TextFormatter())
    else:
        handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
    root.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
    _LOGGING_CONFIGURED = True


class ContextAdapter(logging.LoggerAdapter):
    def process(self, msg, kwargs):
        extra = kwargs.get("extra", {})
        merged = dict(self.extra)
        merged.update(extra)
        kwargs["extra"] = merged
        return msg, kwargs


def get_logger(name: str, **context: Any) -> ContextAdapter:
    configure_logging()
    return ContextAdapter(logging.getLogger(name), context)
