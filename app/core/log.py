from __future__ import annotations

import json
import logging
import re
import sys
import time
import uuid

from fastapi import Request, Response
from uvicorn.logging import ColourizedFormatter

from app.core.config import settings

# id reçu d'un proxy : renvoyé tel quel seulement s'il reste court et sûr
_REQUEST_ID_RE = re.compile(r"[A-Za-z0-9._-]{1,64}")

_RESERVED_ATTRS = {
    "message", "args", "msg", "levelname", "levelno", "name", "pathname",
    "filename", "module", "lineno", "funcName", "exc_info", "exc_text",
    "stack_info", "created", "msecs", "relativeCreated", "thread",
    "threadName", "processName", "process", "taskName",
}


class _RequestIdLogFilter(logging.Filter):
    """Injecte le request_id dans tous les logs d'une requête."""

    def filter(self, record: logging.LogRecord) -> bool:
        # request_id est ajouté par le middleware access
        record.request_id = getattr(record, "request_id", "-")  # type: ignore
        return True


class _JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname.upper(),
            "logger": record.name,
            "msg": record.getMessage(),
            "service": getattr(settings, "APP_NAME", "pedidos-api"),
            "request_id": getattr(record, "request_id", "-"),
        }

        # Merge extras (method, path, status, latency_ms, order_id, etc.)
        for k, v in record.__dict__.items():
            if k not in log_obj and k not in _RESERVED_ATTRS:
                log_obj[k] = v

        if record.exc_info:
            log_obj["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log_obj, ensure_ascii=False, default=str)


def build_formatter(log_format: str) -> logging.Formatter:
    if log_format.lower() == "json":
        return _JsonLogFormatter(datefmt="%Y-%m-%dT%H:%M:%S%z")
    return ColourizedFormatter("%(levelprefix)s %(name)s - %(message)s", use_colors=True)


def setup_logging() -> None:
    """Configure le logging pour l'application (un seul handler stdout)."""
    root_logger = logging.getLogger()
    root_logger.setLevel(settings.LOG_LEVEL.upper())

    if any(getattr(h, "_pedidos_handler", False) for h in root_logger.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(build_formatter(settings.LOG_FORMAT))
    handler.addFilter(_RequestIdLogFilter())
    handler._pedidos_handler = True  # type: ignore[attr-defined]
    root_logger.addHandler(handler)

    # Moins de bruit
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


async def access_log_middleware(request: Request, call_next) -> Response:
    """Middleware pour logguer les requêtes et réponses avec un request_id."""
    request_id = request.headers.get("x-request-id", "")
    if not _REQUEST_ID_RE.fullmatch(request_id):
        request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    logger = logging.getLogger("app.access")
    extra = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": request.client.host if request.client else "-",
        "user_agent": request.headers.get("user-agent", "-"),
    }

    start = time.time()
    response = await call_next(request)
    duration_ms = round((time.time() - start) * 1000, 2)

    extra["status"] = response.status_code
    extra["latency_ms"] = duration_ms

    logger.info("request", extra=extra)
    response.headers["X-Request-ID"] = request_id

    return response
