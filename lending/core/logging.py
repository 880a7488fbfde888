"""Structured logging configuration.

Provides JSON-formatted logs carrying lending context (equipment and
borrowing identifiers, request IDs, operation timings) so that every
state transition can be traced in a log aggregator.
"""
import logging
import json
import sys
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import traceback


# Record attributes promoted to top-level JSON keys when present
CONTEXT_FIELDS = (
    "request_id",
    "equipment_id",
    "borrowing_id",
    "employee_id",
    "operation",
    "method",
    "path",
    "status_code",
    "duration_ms",
    "error_type",
)


class JSONFormatter(logging.Formatter):
    """Render a log record as a single JSON line.

    Includes timestamp, level, logger name and message, plus any of the
    CONTEXT_FIELDS passed through ``extra``.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_obj: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info and record.exc_info[0] is not None:
            log_obj["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info)
            }

        for attr in CONTEXT_FIELDS:
            if hasattr(record, attr):
                log_obj[attr] = getattr(record, attr)

        return json.dumps(log_obj, default=str)


class ContextLogger(logging.LoggerAdapter):
    """Logger adapter that stamps fixed context onto every message.

    Example:
        >>> logger = ContextLogger(base_logger, {"equipment_id": "eq-001"})
        >>> logger.info("Borrowing accepted")
        # Output includes equipment_id automatically
    """

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        # Per-call extra wins over the adapter's context
        extra = dict(self.extra)
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return msg, kwargs


def setup_logging(level: str = "INFO", json_format: bool = False) -> logging.Logger:
    """Configure application-wide logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Whether to use JSON formatter (True for production)

    Returns:
        Configured root logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, level.upper()))

    if json_format:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    return root_logger


def get_logger(name: str, context: Optional[Dict[str, Any]] = None) -> logging.Logger:
    """Get a logger, wrapped in a ContextLogger when context is given.

    Example:
        >>> logger = get_logger(__name__, {"component": "redis_repository"})
        >>> logger.info("Snapshot saved", extra={"equipment_id": "eq-001"})
    """
    logger = logging.getLogger(name)

    if context:
        return ContextLogger(logger, context)

    return logger


class LogTimer:
    """Context manager for timing operations and logging duration.

    Example:
        >>> with LogTimer(logger, "borrow_equipment"):
        ...     service.borrow_equipment(command)
        # Logs: "borrow_equipment completed in 1.2ms"
    """

    def __init__(self, logger: logging.Logger, operation: str, **context: Any):
        self.logger = logger
        self.operation = operation
        self.context = context
        self.start_time: Optional[float] = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is None:
            return False

        duration = (time.perf_counter() - self.start_time) * 1000
        extra = {"operation": self.operation, "duration_ms": round(duration, 2), **self.context}

        if exc_type:
            self.logger.error(
                f"{self.operation} failed after {duration:.1f}ms",
                extra=extra,
                exc_info=(exc_type, exc_val, exc_tb)
            )
        else:
            self.logger.info(f"{self.operation} completed in {duration:.1f}ms", extra=extra)
        return False
