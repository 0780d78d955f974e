"""
Logging for the greentransit service.

All output goes through the "greentransit" logger. Records carry the request
id bound by RequestIdMiddleware, and any `extra=` fields are rendered next to
the message: as JSON keys in production, as `key=value` pairs elsewhere.
Domain code logs through `log_event`.
"""

import json
import logging
import os
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Dict, Optional

LOGGER_NAME = "greentransit"

request_id_ctx_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Anything on a record beyond these came in through `extra=`
_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}

# (upper bound in ms, label); the last bucket is open-ended
_LATENCY_BUCKETS = ((10, "<10ms"), (100, "10-100ms"), (500, "100-500ms"), (1000, "500-1000ms"))

_MAX_FIELD_CHARS = 500


def get_request_id(default: Optional[str] = None) -> Optional[str]:
    rid = request_id_ctx_var.get()
    return default if rid is None else rid


def latency_bucket_ms(latency_ms: Optional[float]) -> str:
    if latency_ms is None:
        return "unknown"
    for bound, label in _LATENCY_BUCKETS:
        if latency_ms < bound:
            return label
    return ">=1000ms"


def _utc_time(record: logging.LogRecord) -> str:
    return datetime.fromtimestamp(record.created, timezone.utc).isoformat().replace("+00:00", "Z")


def _fields(record: logging.LogRecord) -> Dict[str, object]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _STANDARD_ATTRS and key != "request_id" and value is not None
    }


class RequestIdFilter(logging.Filter):
    """Fill in request_id from the current context when the caller did not."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = get_request_id()
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        doc = {
            "timestamp": _utc_time(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
            **_fields(record),
        }
        if record.exc_info:
            doc["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(doc, default=str)


class PrettyFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        parts = [_utc_time(record), record.levelname, f"[{LOGGER_NAME}]"]
        rid = getattr(record, "request_id", None)
        if rid:
            parts.append(f"[rid={rid}]")
        parts.append(record.getMessage())
        parts.extend(f"{k}={v}" for k, v in _fields(record).items())
        line = " ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(env: str = "development", level: str = "INFO") -> None:
    """Install a single stdout handler on the service logger; safe to call again."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter() if env.lower() == "production" else PrettyFormatter())
    handler.addFilter(RequestIdFilter())

    logger.handlers = [handler]
    logger.propagate = True

    # uvicorn has its own handlers; keep its records out of ours
    for name in ("uvicorn", "uvicorn.error"):
        logging.getLogger(name).propagate = False


def _clip(value) -> str:
    text = str(value)
    if len(text) > _MAX_FIELD_CHARS:
        return text[:_MAX_FIELD_CHARS] + "...<truncated>"
    return text


def log_event(
    level: str,
    msg: str,
    *,
    event_type: Optional[str] = None,
    error_code: Optional[str] = None,
    **fields,
) -> None:
    """
    Log a domain event. Keyword fields become structured fields on the
    record, stringified and clipped to a bounded length.

        log_event("warning", "storage.corrupt", error_code="corrupt_tasks", key="tasks", error=exc)
    """
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        configure_logging(os.getenv("ENV", "development"))

    extra: Dict[str, object] = {"request_id": get_request_id()}
    if event_type:
        extra["event_type"] = event_type
    if error_code:
        extra["error_code"] = error_code
    extra.update((k, _clip(v)) for k, v in fields.items())

    getattr(logger, level, logger.info)(msg, extra=extra)
