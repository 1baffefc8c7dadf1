"""
Logging setup for the job dashboard.

Modules log through logging.getLogger(__name__). HTTP handlers use
get_logger(name, request_id) so every line of a request carries the same
[req:xxxxxxxx] tag. DEBUG_MODE=true forces DEBUG everywhere.
"""

import json
import logging
import os
import sys
from typing import Optional


_debug_mode = os.getenv("DEBUG_MODE", "false").lower() == "true"


def set_global_debug_mode(enabled: bool) -> None:
    global _debug_mode
    _debug_mode = enabled


def is_debug_mode() -> bool:
    return _debug_mode


class RequestLogger(logging.LoggerAdapter):
    """
    Logger adapter tagging messages with a request id.

    The full id is also attached to each record as `request_id`, so the JSON
    formatter can emit it as its own field.
    """

    def __init__(self, name: str, request_id: Optional[str] = None, debug_mode: Optional[bool] = None):
        super().__init__(logging.getLogger(name), {"request_id": request_id})
        self.request_id = request_id

        if debug_mode is None:
            debug_mode = is_debug_mode()
        if debug_mode:
            self.logger.setLevel(logging.DEBUG)

    @property
    def level(self) -> int:
        return self.logger.level

    def process(self, msg, kwargs):
        kwargs.setdefault("extra", {})["request_id"] = self.request_id
        if self.request_id:
            msg = f"[req:{self.request_id[:8]}] {msg}"
        return msg, kwargs


class JsonLineFormatter(logging.Formatter):
    """One JSON object per line for log aggregators."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        request_id = getattr(record, "request_id", None)
        if request_id:
            entry["request_id"] = request_id
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(level: str = "INFO", format: str = "simple") -> None:
    """
    Configure the root logger with a single stdout handler.

    Args:
        level: DEBUG, INFO, WARNING or ERROR (unknown names fall back to INFO)
        format: "simple" for human-readable lines, "json" for JSON lines
    """
    log_level = logging.DEBUG if is_debug_mode() else getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    if format == "json":
        handler.setFormatter(JsonLineFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)-7s %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(log_level)


def get_logger(name: str, request_id: Optional[str] = None, debug_mode: Optional[bool] = None) -> RequestLogger:
    """Request-tagged logger for `name`."""
    return RequestLogger(name, request_id, debug_mode)
