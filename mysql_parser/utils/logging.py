"""
Structured logging for the parser.

Every record is written as one JSON object per line. Parse-related context
(dialect, request id, phase) sits at the top level so log pipelines can
filter on it; any other ``extra`` value lands under ``context``.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from logging import LogRecord
from typing import Any, Dict, IO, MutableMapping, Optional, Sequence

# Context fields promoted to the top level of every JSON log line
PROMOTED_FIELDS = ("dialect", "request_id", "phase")

# Third-party loggers kept at WARNING by setup_logging
QUIET_LOGGERS = ("lark", "uvicorn.access", "httpx")

# Attributes every LogRecord carries; everything else came in through ``extra``
_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


class JSONFormatter(logging.Formatter):
    """
    Renders log records as single-line JSON.

    Keys: ``timestamp`` (UTC, ISO 8601), ``level``, ``logger``, ``message``,
    the promoted context fields, ``context`` for other extras, ``error`` when
    the record carries exception info, and ``source`` (file, line, function).
    """

    def __init__(self, promoted: Sequence[str] = PROMOTED_FIELDS):
        super().__init__()
        self.promoted = tuple(promoted)

    def format(self, record: LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: Dict[str, Any] = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = {}
        for key, value in vars(record).items():
            if key in _RECORD_ATTRIBUTES:
                continue
            if key in self.promoted:
                entry[key] = value
            else:
                context[key] = value
        if context:
            entry["context"] = context

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, _ = record.exc_info
            entry["error"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "stack_trace": self.formatException(record.exc_info),
            }

        entry["source"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName,
        }
        return json.dumps(entry, default=str)


class ContextLoggerAdapter(logging.LoggerAdapter):
    """
    Adds fixed context (dialect, request id, phase...) to every record.

    Values passed through ``extra`` at the call site win over the adapter's.
    """

    def __init__(self, logger: logging.Logger, extra: Optional[Dict[str, Any]] = None):
        super().__init__(logger, dict(extra or {}))

    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> tuple[str, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs

    def with_context(self, **context: Any) -> "ContextLoggerAdapter":
        """Return a new adapter whose context adds ``context`` to this one's."""
        return ContextLoggerAdapter(self.logger, {**self.extra, **context})


class LogContext:
    """
    Temporarily adds context fields to an adapter.

    Usage:
        with LogContext(logger, phase="normalize"):
            logger.debug("Walking tree")
    """

    def __init__(self, logger: ContextLoggerAdapter, **context: Any):
        self.logger = logger
        self.context = context
        self._saved: Optional[Dict[str, Any]] = None

    def __enter__(self) -> ContextLoggerAdapter:
        self._saved = dict(self.logger.extra)
        self.logger.extra = {**self._saved, **self.context}
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.logger.extra = self._saved


def setup_logging(log_level: str = "INFO", stream: Optional[IO[str]] = None) -> None:
    """
    Route all logging through one JSON handler on the root logger.

    Args:
        log_level: Root log level name (DEBUG, INFO, WARNING...)
        stream: Where to write; stdout if omitted
    """
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.setLevel(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str, **context: Any) -> ContextLoggerAdapter:
    """
    Return a context-aware logger.

    Example:
        logger = get_logger(__name__, dialect="mysql")
        logger.info("Plugin loaded")  # record carries dialect="mysql"
    """
    return ContextLoggerAdapter(logging.getLogger(name), context)


def log_parse_result(
    logger: logging.LoggerAdapter,
    dialect: str,
    success: bool,
    statement_count: int = 0,
    duration_ms: Optional[float] = None,
    error: Optional[str] = None,
) -> None:
    """
    Log the outcome of one parse call. Both outcomes are logged at INFO.

    Args:
        logger: Logger to use
        dialect: Dialect the text was parsed with
        success: Whether the envelope reports success
        statement_count: Number of top-level statements normalized
        duration_ms: Time spent parsing and normalizing, if measured
        error: Diagnostic text of a rejected call
    """
    extra: Dict[str, Any] = {
        "dialect": dialect,
        "success": success,
        "statement_count": statement_count,
    }
    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)
    if error is not None:
        extra["error"] = error

    message = f"Parsed {statement_count} statement(s)" if success else "SQL rejected by parser"
    logger.info(message, extra=extra)


def log_error_with_context(
    logger: logging.LoggerAdapter,
    message: str,
    error: Exception,
    **context: Any
) -> None:
    """Log an unexpected exception at ERROR with its type, stack trace and context."""
    context.setdefault("error_type", type(error).__name__)
    logger.error(message, extra=context, exc_info=error)
