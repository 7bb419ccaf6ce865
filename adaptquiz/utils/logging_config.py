"""Structured logging helpers for adaptquiz."""

import json
import logging
import time
import traceback
from datetime import datetime, timezone
from functools import wraps

# Extra attributes copied into structured records when present.
_EXTRA_FIELDS = ("attempt_id", "question_id", "difficulty", "metrics", "error_type", "duration_ms")


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for name in _EXTRA_FIELDS:
            if hasattr(record, name):
                log_obj[name] = getattr(record, name)

        if record.exc_info:
            log_obj["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info)
            }

        return json.dumps(log_obj, default=str)


def log_performance(logger: logging.Logger | None = None):
    """Decorator to log function duration at debug level and failures at error.

    Args:
        logger: Logger to use (defaults to the function's module logger)
    """
    def decorator(func):
        log = logger or logging.getLogger(func.__module__)

        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                log.error(
                    f"Function {func.__name__} failed",
                    extra={
                        "duration_ms": (time.time() - start_time) * 1000,
                        "error_type": type(e).__name__,
                    },
                    exc_info=True,
                )
                raise
            log.debug(
                f"Function {func.__name__} completed",
                extra={"duration_ms": (time.time() - start_time) * 1000},
            )
            return result

        return wrapper
    return decorator
