"""Logging configuration"""

import json
import logging
import os
import time
import uuid
from typing import Callable
from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

LOGGER_NAME = "api_server"


class JSONFormatter(logging.Formatter):
    """One JSON object per line; request fields passed via ``extra`` are merged in"""

    REQUEST_FIELDS = ("request_id", "method", "path", "status", "duration_ms", "ip")

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in self.REQUEST_FIELDS:
            if hasattr(record, key):
                entry[key] = getattr(record, key)
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging() -> logging.Logger:
    """Route API and debate-core logs through a JSON handler on the root logger"""
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
    return logging.getLogger(LOGGER_NAME)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line per request and tags the response with X-Request-ID"""

    def __init__(self, app: FastAPI):
        super().__init__(app)
        self.logger = logging.getLogger(LOGGER_NAME)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        request.state.request_id = request_id
        start_time = time.perf_counter()

        response = await call_next(request)

        fields = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": round((time.perf_counter() - start_time) * 1000, 2),
            "ip": request.client.host if request.client else "unknown",
        }
        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        self.logger.log(level, "%s %s -> %d", request.method, request.url.path,
                        response.status_code, extra=fields)

        response.headers["X-Request-ID"] = request_id
        return response
