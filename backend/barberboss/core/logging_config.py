"""
Centralized logging configuration for BarberBoss.

This module provides structured logging with:
- JSON formatting for production
- Console formatting for development
- SQLAlchemy query timing (optional)
- Request/response logging
- Log rotation

Usage:
    from barberboss.core.logging_config import setup_logging, get_logger

    # In main.py
    setup_logging(app, log_level="INFO")

    # In any module
    logger = get_logger(__name__)
    logger.info("Report generated", extra={"context": {"rows": 12}})
"""

import json
import logging
import logging.handlers
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from flask import Flask, g, request
from sqlalchemy import event
from sqlalchemy.engine import Engine

LOG_DIR = Path(__file__).parent.parent.parent / "logs"


class JSONFormatter(logging.Formatter):
    """
    Custom JSON formatter for structured logging.
    Outputs logs as JSON with timestamp, level, message, and extra context.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "context"):
            log_data["context"] = getattr(record, "context", {})

        return json.dumps(log_data, ensure_ascii=False, default=str)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable console formatter with colors for development.
    """

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        # Colorize a copy so file handlers sharing the record stay plain
        record = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{color}{record.levelname:8}{self.RESET}"
        return super().format(record)


def _add_rotating_handler(
    root_logger: logging.Logger,
    console_handler: logging.Handler,
    filename: str,
    level: int,
) -> None:
    try:
        handler = logging.handlers.RotatingFileHandler(
            LOG_DIR / filename,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        )
    except OSError as e:
        # Disk full, read-only filesystem, ...: keep console logging only
        console_handler.handle(
            logging.LogRecord(
                name="barberboss.logging",
                level=logging.WARNING,
                pathname=__file__,
                lineno=0,
                msg=f"Failed to create file handler for {filename}: {e}. "
                "Falling back to console-only logging.",
                args=(),
                exc_info=None,
            )
        )
        return
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())  # Always JSON for files
    root_logger.addHandler(handler)


def setup_logging(
    app: Optional[Flask] = None,
    log_level: Union[int, str] = "INFO",
    enable_sql_timing: bool = False,
    log_to_file: bool = True,
    use_json_format: bool = False,
) -> None:
    """
    Configure logging for the application.

    Args:
        app: Flask application instance (required for request/response hooks)
        log_level: Logging level (can be int like logging.INFO or string "INFO")
        enable_sql_timing: Log every SQL statement with its duration
        log_to_file: Write logs to rotating files under backend/logs
        use_json_format: Use JSON format instead of console format
    """
    if isinstance(log_level, int):
        level = log_level
    else:
        level = getattr(logging, str(log_level).upper(), logging.INFO)

    early_warnings = []
    if log_to_file:
        try:
            LOG_DIR.mkdir(exist_ok=True)
        except OSError as e:
            early_warnings.append(
                f"Failed to create logs directory: {e}. Logging will only go to console."
            )
            log_to_file = False

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Close and remove existing handlers properly
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    if use_json_format:
        console_handler.setFormatter(JSONFormatter())
    else:
        console_handler.setFormatter(
            ConsoleFormatter(
                "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    root_logger.addHandler(console_handler)

    for msg in early_warnings:
        root_logger.warning(msg, extra={"context": {"component": "logging_setup"}})

    if log_to_file:
        _add_rotating_handler(root_logger, console_handler, "app.log", level)
        _add_rotating_handler(
            root_logger, console_handler, "barberboss_errors.log", logging.ERROR
        )

    if enable_sql_timing:
        _register_sql_timing()

    if app is not None:
        _register_request_hooks(app)

    # Suppress noisy third-party loggers
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    app_logger = logging.getLogger("barberboss")
    app_logger.setLevel(level)
    app_logger.info(
        f"Logging configured: level={level}, sql_timing={enable_sql_timing}, "
        f"log_to_file={log_to_file}, json_format={use_json_format}"
    )


_sql_timing_registered = False


def _register_sql_timing() -> None:
    global _sql_timing_registered
    if _sql_timing_registered:
        return

    @event.listens_for(Engine, "before_cursor_execute")
    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault("query_start_time", []).append(time.time())

    @event.listens_for(Engine, "after_cursor_execute")
    def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        total_time = time.time() - conn.info["query_start_time"].pop(-1)
        logging.getLogger("sqlalchemy.performance").info(
            f"Query executed in {total_time * 1000:.2f}ms",
            extra={
                "context": {
                    "sql_query": statement[:500],  # Truncate long queries
                    "sql_duration_ms": round(total_time * 1000, 2),
                }
            },
        )

    # sqlalchemy pins its own logger tree to WARNING on import
    logging.getLogger("sqlalchemy.performance").setLevel(logging.INFO)
    _sql_timing_registered = True


def _register_request_hooks(app: Flask) -> None:
    @app.before_request
    def log_request():
        g.request_start_time = time.time()
        g.request_id = f"{time.time()}-{id(request)}"
        logging.getLogger("flask.request").info(
            f"{request.method} {request.path}",
            extra={
                "context": {
                    "request_id": g.request_id,
                    "method": request.method,
                    "path": request.path,
                    "query": request.query_string.decode("utf-8", "replace"),
                    "remote_addr": request.remote_addr,
                }
            },
        )

    @app.after_request
    def log_response(response):
        if hasattr(g, "request_start_time"):
            duration_ms = (time.time() - g.request_start_time) * 1000
            logging.getLogger("flask.response").info(
                f"{request.method} {request.path} {response.status_code} in {duration_ms:.2f}ms",
                extra={
                    "context": {
                        "request_id": g.get("request_id"),
                        "status_code": response.status_code,
                        "duration_ms": round(duration_ms, 2),
                        "content_length": response.content_length,
                    }
                },
            )
        return response


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the specified module.

    Example:
        logger = get_logger(__name__)
        logger.info("Report generated", extra={"context": {"rows": 12}})
    """
    return logging.getLogger(name)


def log_performance(func_name: str, duration_ms: float, **kwargs) -> None:
    """
    Log performance metrics for a function or operation.

    Args:
        func_name: Name of the function or operation
        duration_ms: Execution duration in milliseconds
        **kwargs: Additional context (report_type, rows, etc.)
    """
    perf_logger = get_logger("barberboss.performance")
    context = {"function": func_name, "duration_ms": round(duration_ms, 2)}
    context.update(kwargs)
    perf_logger.info(
        f"{func_name} completed in {duration_ms:.2f}ms",
        extra={"context": context},
    )
