import logging
import json
import os
from typing import Any, Dict
from opentelemetry.trace import get_current_span


# Never written to logs outside DEBUG-level development output
SENSITIVE_KEYS = {
    "password",
    "current_password",
    "new_password",
    "currentPassword",
    "newPassword",
    "token",
    "adminToken",
    "email",
    "phone_number",
    "phoneNumber",
    "phone",
}
REDACTED = "[REDACTED]"


def current_request_id() -> str:
    from flask import g, has_request_context

    if not has_request_context():
        return "n/a"
    return getattr(g, "request_id", None) or "n/a"


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = current_request_id()
        return True


def current_trace_ids():
    ctx = get_current_span().get_span_context()
    if not ctx.is_valid:
        return "n/a", "n/a"
    return format(ctx.trace_id, "032x"), format(ctx.span_id, "016x")


class TraceIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id, record.span_id = current_trace_ids()
        return True


def mask(data: Dict[str, Any]) -> Dict[str, Any]:
    """Redact sensitive keys, descending into nested dicts."""
    masked = {}
    for key, value in data.items():
        if key in SENSITIVE_KEYS:
            masked[key] = REDACTED
        elif isinstance(value, dict):
            masked[key] = mask(value)
        else:
            masked[key] = value
    return masked


class MaskingFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        env = os.getenv("APP_ENV", "development").lower()
        if record.levelno == logging.DEBUG and env != "production":
            return True
        if isinstance(record.msg, dict):
            record.msg = mask(record.msg)
        if isinstance(record.args, dict):
            record.args = mask(record.args)
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        base = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "request_id": getattr(record, "request_id", "n/a"),
            "trace_id": getattr(record, "trace_id", "n/a"),
            "span_id": getattr(record, "span_id", "n/a"),
        }
        if isinstance(record.msg, dict):
            base.update(record.msg)
        else:
            base["message"] = record.getMessage()
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base, default=str)


def build_handler() -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter(datefmt="%Y-%m-%dT%H:%M:%S%z"))
    handler.addFilter(RequestIdFilter())
    handler.addFilter(TraceIdFilter())
    handler.addFilter(MaskingFilter())
    return handler


def configure_logging(app) -> None:
    handler = build_handler()

    app.logger.handlers.clear()
    app.logger.addHandler(handler)

    level_name = os.getenv("LOG_LEVEL")
    if level_name:
        level = getattr(logging, level_name.upper(), logging.INFO)
    else:
        level = logging.DEBUG if app.config.get("DEBUG") else logging.INFO
    app.logger.setLevel(level)

    root = logging.getLogger()
    if not any(isinstance(h.formatter, JsonFormatter) for h in root.handlers):
        root.addHandler(handler)
    root.setLevel(level)

    wl = logging.getLogger("werkzeug")
    wl.setLevel(level)
    wl.handlers.clear()
    wl.addHandler(handler)
