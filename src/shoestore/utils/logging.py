"""Logging configuration shared by the backend and the storefront client.

Standard library logging owns the handlers (console plus rotating files);
structlog renders on top of it. Production and staging emit JSON lines,
every other environment gets the coloured console renderer.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}
JSON_ENVIRONMENTS = ("production", "staging")
ROTATE_BYTES = 10 * 1024 * 1024
ROTATE_KEEP = 5

_NOISY_LOGGERS = ("protean", "httpx", "httpcore", "urllib3", "asyncio", "multipart")


def current_environment() -> str:
    return (os.getenv("PROTEAN_ENV") or os.getenv("ENVIRONMENT") or "development").lower()


def get_log_level() -> str:
    """LOG_LEVEL wins; otherwise the level follows the environment."""
    return os.getenv("LOG_LEVEL", LEVELS.get(current_environment(), "INFO"))


def _rotating(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=ROTATE_BYTES,
        backupCount=ROTATE_KEEP,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging() -> None:
    """Route stdlib logging to stdout and to rotating files under LOG_DIR."""
    level = get_log_level()
    log_dir = Path(os.getenv("LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [
        console,
        _rotating(log_dir / "shoestore.log", level),
        _rotating(log_dir / "shoestore_error.log", logging.ERROR),
    ]

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _renderer():
    if current_environment() in JSON_ENVIRONMENTS:
        return structlog.processors.JSONRenderer()
    traceback = structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=2)
    return structlog.dev.ConsoleRenderer(colors=True, exception_formatter=traceback)


def setup_structlog() -> None:
    callsite = structlog.processors.CallsiteParameter
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.CallsiteParameterAdder(
                parameters=[callsite.FILENAME, callsite.LINENO, callsite.FUNC_NAME]
            ),
            _renderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging() -> None:
    setup_stdlib_logging()
    setup_structlog()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def add_context(**kwargs: Any) -> None:
    """Bind context variables onto every subsequent log line of this request."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
