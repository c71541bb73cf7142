"""
Centralized logging configuration for the Kiliniks backend.

This module provides structured logging with:
- JSON formatting for production
- Console formatting for development
- SQLAlchemy query logging
- Request/response logging
- Log rotation

Usage:
    from kiliniks.core.logging_config import setup_logging, get_logger

    # In main.py
    setup_logging(app, log_level="INFO", enable_sql_echo=True)

    # In any module
    logger = get_logger(__name__)
    logger.info("Stage created", extra={"context": {"stage_id": "..."}})
"""

import json
import logging
import logging.handlers
import sys
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from flask import Flask, g, request
from sqlalchemy import event
from sqlalchemy.engine import Engine


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
        color = self.COLORS.get(record.levelname, self.RESET)
        levelname = record.levelname
        record.levelname = f"{color}{levelname:8}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def _register_request_hooks(app: Flask) -> None:
    @app.before_request
    def log_request():
        g.request_start_time = time.time()
        g.request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())
        g.route = (
            request.url_rule.rule if request.url_rule is not None else request.path
        )

        req_logger = logging.getLogger("flask.request")
        req_logger.info(
            f"{request.method} {request.path}",
            extra={
                "context": {
                    "request_id": g.request_id,
                    "method": request.method,
                    "path": request.path,
                    "route": g.route,
                    "remote_addr": request.remote_addr,
                }
            },
        )

    @app.after_request
    def log_response(response):
        if hasattr(g, "request_start_time"):
            duration_ms = (time.time() - g.request_start_time) * 1000
            resp_logger = logging.getLogger("flask.response")
            resp_logger.info(
                f"{request.method} {request.path} {response.status_code} in {duration_ms:.2f}ms",
                extra={
                    "context": {
                        "request_id": g.get("request_id"),
                        "method": request.method,
                        "path": request.path,
                        "status_code": response.status_code,
                        "duration_ms": round(duration_ms, 2),
                    }
                },
            )
            response.headers["X-Request-Id"] = g.get("request_id", "")
        return response


def setup_logging(
    app: Optional[Flask] = None,
    log_level: Union[int, str] = "INFO",
    enable_sql_echo: bool = False,
    log_to_file: bool = False,
    use_json_format: bool = False,
) -> None:
    """
    Configure logging for the process and, optionally, the Flask app.

    Args:
        app: Flask application instance (required for request/response hooks)
        log_level: Logging level (can be int like logging.INFO or string "INFO")
        enable_sql_echo: Enable SQLAlchemy query logging
        log_to_file: Write logs to rotating files under backend/logs
        use_json_format: Use JSON format instead of console format
    """
    if isinstance(log_level, int):
        level = log_level
    else:
        level = getattr(logging, str(log_level).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    if use_json_format:
        console_formatter: logging.Formatter = JSONFormatter()
    else:
        console_formatter = ConsoleFormatter(
            "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    if log_to_file:
        log_dir = Path(__file__).parent.parent.parent / "logs"
        try:
            log_dir.mkdir(exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                log_dir / "app.log",
                maxBytes=10 * 1024 * 1024,  # 10 MB
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(JSONFormatter())  # Always JSON for files
            root_logger.addHandler(file_handler)

            error_handler = logging.handlers.RotatingFileHandler(
                log_dir / "kiliniks_errors.log",
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                encoding="utf-8",
            )
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(JSONFormatter())
            root_logger.addHandler(error_handler)
        except OSError as e:
            # Disk full or read-only filesystem: stay on stdout only
            root_logger.warning(
                f"Failed to create log files: {e}. Falling back to console-only logging.",
                extra={"context": {"component": "logging_setup"}},
            )

    if enable_sql_echo:
        sql_logger = logging.getLogger("sqlalchemy.engine")
        sql_logger.setLevel(logging.INFO)
        sql_logger.propagate = True

        if not event.contains(Engine, "before_cursor_execute", _start_query_timer):
            event.listen(Engine, "before_cursor_execute", _start_query_timer)
            event.listen(Engine, "after_cursor_execute", _log_query_duration)

    if app is not None:
        _register_request_hooks(app)

    # Suppress noisy third-party loggers
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("boto3").setLevel(logging.WARNING)

    app_logger = logging.getLogger("kiliniks")
    app_logger.setLevel(level)
    app_logger.info(
        f"Logging configured: level={level}, sql_echo={enable_sql_echo}, "
        f"log_to_file={log_to_file}, json_format={use_json_format}"
    )


def _start_query_timer(conn, cursor, statement, parameters, context, executemany):
    conn.info.setdefault("query_start_time", []).append(time.time())


def _log_query_duration(conn, cursor, statement, parameters, context, executemany):
    starts = conn.info.get("query_start_time")
    if not starts:
        return
    total_time = time.time() - starts.pop(-1)
    logging.getLogger("sqlalchemy.performance").debug(
        f"Query executed in {total_time * 1000:.2f}ms",
        extra={
            "context": {
                "sql_query": statement[:500],  # Truncate long queries
                "sql_duration_ms": round(total_time * 1000, 2),
            }
        },
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the specified module.

    Example:
        logger = get_logger(__name__)
        logger.info("Flow created", extra={"context": {"flow_id": "..."}})
    """
    return logging.getLogger(name)
