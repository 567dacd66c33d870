"""
ICMS - Centralized Logging Configuration
Supports both development (plain text) and production (JSON structured) logging
"""

import logging
import sys
import json
import traceback
import uuid
from datetime import datetime
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Any, Dict
from contextvars import ContextVar

from app.core.config import settings


# Context variables for request tracing
request_id_var: ContextVar[str] = ContextVar('request_id', default='')
user_id_var: ContextVar[str] = ContextVar('user_id', default='')


def get_request_id() -> str:
    """Get current request ID from context"""
    return request_id_var.get() or ''


def set_request_id(request_id: str) -> None:
    """Set request ID in context"""
    request_id_var.set(request_id)


def get_user_id() -> str:
    """Get current user ID from context"""
    return user_id_var.get() or ''


def set_user_id(user_id: str) -> None:
    """Set user ID in context"""
    user_id_var.set(user_id)


def generate_request_id() -> str:
    """Generate a unique request ID"""
    return str(uuid.uuid4())[:8]


_RESERVED_RECORD_KEYS = {
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'pathname', 'process', 'processName', 'relativeCreated',
    'stack_info', 'exc_info', 'exc_text', 'thread', 'threadName',
    'message', 'taskName',
}


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging in production
    Outputs logs in a format easily parsed by log aggregation tools (ELK, CloudWatch, etc.)
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        request_id = get_request_id()
        if request_id:
            log_data["request_id"] = request_id

        user_id = get_user_id()
        if user_id:
            log_data["user_id"] = user_id

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": traceback.format_exception(*record.exc_info) if record.exc_info[0] else None
            }

        # Add extra fields from record
        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_KEYS and not key.startswith('_'):
                log_data[key] = value

        return json.dumps(log_data, default=str)


class ContextualFormatter(logging.Formatter):
    """
    Formatter that includes context variables (request_id, user_id)
    Used for development with readable output
    """

    def format(self, record: logging.LogRecord) -> str:
        record.request_id = get_request_id() or '-'
        record.user_id = get_user_id() or '-'

        return super().format(record)


class ICMSLogger(logging.Logger):
    """
    Custom logger with convenience methods for structured logging
    """

    def log_request(self, method: str, path: str, status_code: int,
                    duration_ms: float, **kwargs) -> None:
        """Log HTTP request details"""
        self.info(
            f"HTTP {method} {path} - {status_code} ({duration_ms:.2f}ms)",
            extra={
                "event_type": "http_request",
                "http_method": method,
                "http_path": path,
                "http_status": status_code,
                "duration_ms": duration_ms,
                **kwargs
            }
        )

    def log_metric_fallback(self, metric: str, error: Exception, **kwargs) -> None:
        """Log a leaf metric that degraded to its fallback value"""
        self.warning(
            f"Failed to get {metric}: {type(error).__name__}: {error}",
            extra={
                "event_type": "metric_fallback",
                "metric": metric,
                "error_type": type(error).__name__,
                **kwargs
            }
        )

    def log_error_with_context(self, error: Exception, context: str = None,
                               **kwargs) -> None:
        """Log error with full context"""
        self.error(
            f"Error in {context}: {type(error).__name__}: {str(error)}",
            exc_info=True,
            extra={
                "event_type": "error",
                "error_type": type(error).__name__,
                "error_message": str(error),
                "error_context": context,
                **kwargs
            }
        )

    def log_performance(self, operation: str, duration_ms: float,
                        threshold_ms: float = 1000, **kwargs) -> None:
        """Log performance metrics, warn if over threshold"""
        level = logging.WARNING if duration_ms > threshold_ms else logging.DEBUG
        self.log(
            level,
            f"Performance: {operation} took {duration_ms:.2f}ms" +
            (f" (threshold: {threshold_ms}ms)" if duration_ms > threshold_ms else ""),
            extra={
                "event_type": "performance",
                "operation": operation,
                "duration_ms": duration_ms,
                "threshold_ms": threshold_ms,
                "exceeded_threshold": duration_ms > threshold_ms,
                **kwargs
            }
        )


def setup_logging() -> ICMSLogger:
    """Setup logging configuration based on environment"""

    logging.setLoggerClass(ICMSLogger)

    logger = logging.getLogger("icms")
    logger.__class__ = ICMSLogger  # Ensure it's our custom class
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    logger.handlers.clear()

    is_production = settings.ENVIRONMENT == "production"

    if is_production:
        json_formatter = JSONFormatter()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(json_formatter)
        logger.addHandler(console_handler)

        if settings.LOG_FILE:
            log_file = Path(settings.LOG_FILE)
            log_file.parent.mkdir(parents=True, exist_ok=True)

            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=10485760,  # 10MB
                backupCount=10
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(json_formatter)
            logger.addHandler(file_handler)

    else:
        detailed_format = (
            "%(asctime)s | %(levelname)-8s | "
            "[%(request_id)s] [%(user_id)s] | "
            "%(funcName)s:%(lineno)d | %(message)s"
        )
        simple_format = "%(levelname)-8s | %(message)s"

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(ContextualFormatter(simple_format))
        logger.addHandler(console_handler)

        if settings.LOG_FILE:
            log_file = Path(settings.LOG_FILE)
            log_file.parent.mkdir(parents=True, exist_ok=True)

            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=10485760,  # 10MB
                backupCount=5
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(ContextualFormatter(detailed_format))
            logger.addHandler(file_handler)

    # Suppress noisy loggers
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    logger.info(
        "Logging initialized",
        extra={
            "environment": settings.ENVIRONMENT,
            "log_level": settings.LOG_LEVEL,
            "json_logging": is_production
        }
    )

    return logger


logger: ICMSLogger = setup_logging()


__all__ = [
    'logger',
    'setup_logging',
    'get_request_id',
    'set_request_id',
    'get_user_id',
    'set_user_id',
    'generate_request_id',
    'ICMSLogger',
]
