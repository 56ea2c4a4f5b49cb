"""
Structured logging for the Donor Service API.

Log lines are single JSON objects (shipped to Loki as-is):

{
    "timestamp": "2025-01-15T10:30:00.123Z",
    "level": "INFO",
    "logger": "services.alert_service",
    "message": "Alert broadcast finished",
    "request_id": "1a2b3c4d",
    "extra": {"successful_sends": 12, "failed_sends": 1}
}

Donor phone numbers passed through ``extra`` under PHONE_FIELDS are masked
before they reach any handler. The request id lives in a ContextVar set by
LoggingMiddleware.

Usage:
    from core.logging_config import setup_logging

    setup_logging()
    logger.info("Donor registered", extra={"area": "Kothrud"})
"""

import json
import logging
import os
import sys
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import Any, Dict, Optional

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_request_id() -> Optional[str]:
    return _request_id.get()


def bind_request_id(request_id: str) -> Token:
    """Bind a request id to the current context. Pass the token to reset_request_id."""
    return _request_id.set(request_id)


def reset_request_id(token: Token) -> None:
    _request_id.reset(token)


# extra={...} keys that carry a donor phone number
PHONE_FIELDS = ("phone", "to")

# Libraries that log every outbound call at INFO
NOISY_LOGGERS = ("twilio.http_client", "httpx", "celery.app.trace")

APPLICATION_LOGGERS = ("core", "api", "services", "repositories", "tasks")

# LogRecord attributes; anything else was passed through extra={...}
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


def _mask(value: Any) -> Any:
    text = str(value)
    if len(text) < 8:
        return value
    return text[:3] + "*" * (len(text) - 7) + text[-4:]


class PhoneMaskingFilter(logging.Filter):
    """
    Replaces donor phone numbers in structured fields with a masked form.

    Covers top-level extra fields and the `context` dict that exception
    handlers log.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for field_name in PHONE_FIELDS:
            value = record.__dict__.get(field_name)
            if value:
                setattr(record, field_name, _mask(value))

        context = record.__dict__.get("context")
        if isinstance(context, dict) and any(context.get(f) for f in PHONE_FIELDS):
            record.context = {
                key: _mask(value) if key in PHONE_FIELDS and value else value
                for key, value in context.items()
            }
        return True


class RequestIdFilter(logging.Filter):
    """Stamps record.request_id so the text format can print it."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "request_id", None):
            record.request_id = get_request_id() or "-"
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line, UTC millisecond timestamps."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: Dict[str, Any] = {
            "timestamp": created.strftime("%Y-%m-%dT%H:%M:%S.") + f"{int(record.msecs):03d}Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = getattr(record, "request_id", None) or get_request_id()
        if request_id and request_id != "-":
            entry["request_id"] = request_id

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and key != "request_id" and not key.startswith("_")
        }
        if fields:
            entry["extra"] = fields

        return json.dumps(entry, default=str, ensure_ascii=False)


TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(request_id)s | %(name)s | %(message)s"


def setup_logging(level: str = "INFO", json_format: bool = True) -> None:
    """
    Install a single stdout handler on the root logger.

    LOG_LEVEL and LOG_FORMAT ("json" or "text") in the environment take
    precedence over the arguments. Uvicorn loggers are routed through the
    same handler.
    """
    level = os.environ.get("LOG_LEVEL", level).upper()
    fmt = os.environ.get("LOG_FORMAT", "json" if json_format else "text").lower()

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    handler.addFilter(PhoneMaskingFilter())
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [handler]

    for name in APPLICATION_LOGGERS + ("uvicorn", "uvicorn.error", "uvicorn.access"):
        named = logging.getLogger(name)
        named.handlers = []
        named.propagate = True
    for name in APPLICATION_LOGGERS:
        logging.getLogger(name).setLevel(level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info("Logging configured", extra={"level": level, "format": fmt})
