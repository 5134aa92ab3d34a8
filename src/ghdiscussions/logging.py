"""Structured logging for gh-discussions.

Logs are written to stderr; stdout is reserved for command output so JSON
results stay machine-readable.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, TextIO

LOGGER_NAME = "ghdiscussions"

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime", "taskName"}


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for k, v in record.__dict__.items():
            if k in _RECORD_ATTRS or k.startswith("_") or k in entry:
                continue
            entry[k] = v
        return json.dumps(entry, default=str)


class StructuredLogger:
    def __init__(
        self,
        name: str = LOGGER_NAME,
        json_logging: bool = False,
        level: str = "WARNING",
        stream: TextIO | None = None,
    ) -> None:
        self._logger = logging.getLogger(name)
        self._logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
        for h in list(self._logger.handlers):
            self._logger.removeHandler(h)
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(
            JSONFormatter()
            if json_logging
            else logging.Formatter("%(asctime)s %(levelname)s %(message)s")
        )
        self._logger.addHandler(handler)
        self._logger.propagate = False

    @property
    def level(self) -> int:
        return self._logger.level

    def log_operation(self, operation: str, **kw: Any) -> None:
        extra = {"operation": operation, **kw}
        self._logger.info(f"Operation: {operation}", extra=extra)

    def log_request(
        self, method: str, url: str, status: int | None, duration_ms: float
    ) -> None:
        extra = {
            "operation": "http_request",
            "method": method,
            "url": url,
            "status": status,
            "duration_ms": round(duration_ms, 2),
        }
        self._logger.debug(f"{method} {url} -> {status} ({duration_ms:.2f}ms)", extra=extra)

    def log_performance(self, operation: str, duration_ms: float, **kw: Any) -> None:
        extra = {"operation": operation, "duration_ms": round(duration_ms, 2), **kw}
        self._logger.info(
            f"Performance: {operation} completed in {duration_ms:.2f}ms", extra=extra
        )

    def log_error(self, message: str, error: str | None = None, **kw: Any) -> None:
        extra = dict(kw)
        if error:
            extra["error"] = error
        self._logger.error(message, extra=extra)

    def debug(self, message: str, **kw: Any) -> None:
        self._logger.debug(message, extra=kw)

    def info(self, message: str, **kw: Any) -> None:
        self._logger.info(message, extra=kw)

    def warning(self, message: str, **kw: Any) -> None:
        self._logger.warning(message, extra=kw)

    def error(self, message: str, **kw: Any) -> None:  # noqa: D401
        self._logger.error(message, extra=kw)

    @contextmanager
    def timed_operation(self, operation: str, **kw: Any) -> Iterator[None]:  # noqa: D401
        start = time.perf_counter()
        self.log_operation(f"{operation}_start", **kw)
        yield
        self.log_performance(operation, (time.perf_counter() - start) * 1000, **kw)


_GLOBAL: StructuredLogger | None = None


def get_logger() -> StructuredLogger:
    global _GLOBAL  # noqa: PLW0603
    if _GLOBAL is None:
        _GLOBAL = StructuredLogger()
    return _GLOBAL


def configure_logging(
    json_logging: bool = False, level: str = "WARNING", stream: TextIO | None = None
) -> StructuredLogger:
    global _GLOBAL  # noqa: PLW0603
    _GLOBAL = StructuredLogger(json_logging=json_logging, level=level, stream=stream)
    return _GLOBAL


__all__ = ["JSONFormatter", "StructuredLogger", "configure_logging", "get_logger"]
