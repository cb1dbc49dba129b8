from __future__ import annotations
import json, logging
from datetime import datetime
from uuid import uuid4

from flask import g, jsonify, request
from werkzeug.wrappers.response import Response

from . import bp

REQUEST_ID_HEADER = "X-Request-ID"
LOG_EXTRA_KEYS = (
    "event", "path", "method", "status", "duration_ms", "request_id",
    "schedule_id", "codes", "cache",
)


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.utcnow().isoformat(timespec="milliseconds") + "Z",
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in LOG_EXTRA_KEYS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _setup_structured_logging(app):
    # app.logger + логгеры blueprints.* (сервисы пишут через getLogger(__name__))
    for logger in (app.logger, logging.getLogger("blueprints")):
        has_json = any(
            isinstance(h, logging.StreamHandler)
            and isinstance(getattr(h, "formatter", None), JSONFormatter)
            for h in logger.handlers
        )
        if not has_json:
            handler = logging.StreamHandler()
            handler.setFormatter(JSONFormatter())
            logger.addHandler(handler)
        logger.setLevel(app.config.get("LOG_LEVEL", logging.INFO))


@bp.before_app_request
def _start_timer():
    g._req_start = datetime.utcnow()
    g.request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex


@bp.after_app_request
def _log_request(response: Response):
    try:
        duration_ms = int((datetime.utcnow() - g._req_start).total_seconds() * 1000)
    except AttributeError:
        duration_ms = None
    response.headers.setdefault(REQUEST_ID_HEADER, getattr(g, "request_id", ""))
    extra = {
        "event": "http_request",
        "path": request.path,
        "method": request.method,
        "status": response.status_code,
        "duration_ms": duration_ms,
        "request_id": getattr(g, "request_id", None),
    }
    logging.getLogger("blueprints.core").info("request handled", extra=extra)
    return response


@bp.record_once
def _on_register(state):
    _setup_structured_logging(state.app)


@bp.get("/health")
def health():
    return jsonify({
        "status": "ok",
        "ts": datetime.utcnow().isoformat(timespec="seconds") + "Z",
        "request_id": getattr(g, "request_id", None),
    })
