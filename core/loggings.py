"""
Logging configuration module for the Mente Tech blog.

This module provides the logging setup of the application: a console handler,
structured JSON logs written to size-rotated files, request context
enrichment and optional error tracking through Sentry.

Key features include:
- Structured JSON logs for machine parsing and analysis
- Console output with a readable format in development
- File-based logging with size-based rotation (``LOG_TO_FILE``, ``LOG_DIR``)
- A separate error log
- Request id and user id attached to every record logged during a request
- Integration with Sentry for error tracking (``SENTRY_DSN``)
"""

import json
import logging
import logging.handlers
import os
import socket
import sys
import traceback
import uuid
from datetime import datetime, timezone

import sentry_sdk
from flask import Flask, g, has_request_context, request
from sentry_sdk.integrations.celery import CeleryIntegration
from sentry_sdk.integrations.flask import FlaskIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

# Create a module-level logger
logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = 'X-Request-ID'

# Marks handlers installed by setup_app_logging so repeated setup replaces them
_HANDLER_FLAG = '_blog_handler'


class JsonFormatter(logging.Formatter):
    """
    JSON formatter for structured logging with request context.
    """
    # Internal LogRecord attributes that are not copied into the output
    SKIP_ATTRIBUTES = {
        "args", "asctime", "created", "exc_info", "exc_text", "filename",
        "funcName", "id", "levelname", "levelno", "lineno", "module",
        "msecs", "message", "msg", "name", "pathname", "process",
        "processName", "relativeCreated", "stack_info", "thread",
        "threadName", "taskName",
    }

    def __init__(self):
        super().__init__()
        self.hostname = socket.gethostname()

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON with additional context."""
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "host": self.hostname,
            "process": record.process,
        }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "value": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": traceback.format_exception(*record.exc_info),
            }

        if has_request_context():
            log_data["request"] = {
                "id": getattr(g, 'request_id', None),
                "method": request.method,
                "endpoint": request.endpoint,
                "path": request.path,
                "remote_addr": request.remote_addr,
            }
            if getattr(g, 'user_id', None) is not None:
                log_data["user_id"] = g.user_id

        for key, value in record.__dict__.items():
            if key not in self.SKIP_ATTRIBUTES and key not in log_data:
                log_data[key] = value

        return json.dumps(log_data, default=str, ensure_ascii=False)


class RequestIdFilter(logging.Filter):
    """Attach the current request id to records for the plain formatter."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = getattr(g, 'request_id', '-') if has_request_context() else '-'
        return True


def _mark(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_FLAG, True)
    return handler


def setup_app_logging(app: Flask) -> None:
    """
    Configure centralized application logging.

    Args:
        app (Flask): The Flask application instance to configure logging for

    Example:
        app = Flask(__name__)
        setup_app_logging(app)
        app.logger.info("Application logging initialized")
    """
    root_logger = logging.getLogger()

    # Remove handlers from a previous setup to avoid duplicates
    for handler in root_logger.handlers[:]:
        if getattr(handler, _HANDLER_FLAG, False):
            root_logger.removeHandler(handler)
            handler.close()

    is_dev = app.config.get('ENV', 'production').lower() == 'development'
    log_level = str(app.config.get('LOG_LEVEL', 'INFO')).upper()
    numeric_level = getattr(logging, log_level, logging.INFO)
    root_logger.setLevel(numeric_level)

    console_handler = logging.StreamHandler(sys.stdout)
    if is_dev or app.testing:
        console_handler.setFormatter(logging.Formatter(
            '[%(asctime)s] %(levelname)s in %(module)s [%(request_id)s]: %(message)s'
        ))
        console_handler.addFilter(RequestIdFilter())
    else:
        # Structured JSON in production for log aggregation
        console_handler.setFormatter(JsonFormatter())
    console_handler.setLevel(numeric_level)
    root_logger.addHandler(_mark(console_handler))

    log_dir = None
    if app.config.get('LOG_TO_FILE'):
        log_dir = app.config.get('LOG_DIR') or 'logs'
        if not os.path.isabs(log_dir):
            log_dir = os.path.join(app.root_path, log_dir)
        os.makedirs(log_dir, exist_ok=True)

        # Main application log - 10MB files, keep 10 backups
        app_handler = logging.handlers.RotatingFileHandler(
            os.path.join(log_dir, 'application.log'), maxBytes=10*1024*1024, backupCount=10,
            encoding='utf-8'
        )
        app_handler.setFormatter(JsonFormatter())
        app_handler.setLevel(numeric_level)
        root_logger.addHandler(_mark(app_handler))

        # Error log - 5MB files, keep 20 backups
        error_handler = logging.handlers.RotatingFileHandler(
            os.path.join(log_dir, 'error.log'), maxBytes=5*1024*1024, backupCount=20,
            encoding='utf-8'
        )
        error_handler.setFormatter(JsonFormatter())
        error_handler.setLevel(logging.ERROR)
        root_logger.addHandler(_mark(error_handler))

    app.logger.setLevel(numeric_level)

    _register_request_id(app)

    # Configure Sentry for error reporting outside development
    if not is_dev and not app.testing and app.config.get('SENTRY_DSN'):
        sentry_sdk.init(
            dsn=app.config.get('SENTRY_DSN'),
            integrations=[
                FlaskIntegration(),
                SqlalchemyIntegration(),
                CeleryIntegration(),
            ],
            environment=app.config.get('ENV'),
            release=app.config.get('VERSION', 'unknown'),
            send_default_pii=False,
            traces_sample_rate=app.config.get('SENTRY_TRACES_SAMPLE_RATE', 0.1)
        )
        app.logger.info("Sentry error reporting initialized")

    app.logger.info("Application logging initialized (level=%s, log_dir=%s)", log_level, log_dir)


def _register_request_id(app: Flask) -> None:
    """Assign a request id to every request and echo it in the response."""

    @app.before_request
    def assign_request_id():
        g.request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex

    @app.after_request
    def add_request_id_header(response):
        request_id = getattr(g, 'request_id', None)
        if request_id:
            response.headers[REQUEST_ID_HEADER] = request_id
        return response
